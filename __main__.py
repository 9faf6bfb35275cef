"""
Ponto de entrada principal da infraestrutura.

O nome do stack é o ambiente (dev, staging, prod) e escolhe o perfil da plataforma.

USO:
pulumi stack select <dev|staging|prod>
pulumi config set gcp:project <PROJECT_ID>
pulumi up
"""

import pulumi

from composites import StandardPlatform
from tools.loader import load_platform_args


stack_name = pulumi.get_stack()
gcp_config = pulumi.Config("gcp")

pulumi.log.info(f"🏗️  Criando plataforma do stack {stack_name}...")

platform_args = load_platform_args(
    stack_name,
    project_id=gcp_config.require("project"),
    region=gcp_config.get("region"),
)
platform = StandardPlatform(platform_args.prefix, platform_args)

# Export
pulumi.export("vpc_name", platform.vpc.network.name)
pulumi.export("subnet_name", platform.vpc.subnet.name)
pulumi.export("network_id", platform.network_id)
pulumi.export("subnet_id", platform.subnet_id)
pulumi.export("cluster_name", platform.cluster_name)
pulumi.export("cluster_endpoint", platform.cluster_endpoint)
pulumi.export("kubeconfig", platform.kubeconfig)
pulumi.export("secret_ids", platform.secrets.secret_ids if platform.has_secrets else [])
pulumi.export(
    "workload_identity_email",
    platform.identity_email if platform.has_identity else "not-configured",
)

pulumi.log.info("🎉 Plataforma declarada!")
