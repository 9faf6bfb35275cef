"""
Plataforma completa em um único componente.

Cria: VPC + Subnet + NAT + Cluster GKE + (opcional) Secrets + (opcional) Workload Identity

USO:
    platform = StandardPlatform(
        "myapp",
        PlatformArgs(
            project_id="my-project",
            region="europe-west1",
            env="prod",
            prefix="myapp",
            secret_ids=["db-password", "api-key"],
            workload_identity=WorkloadIdentityConfig(
                sa_id="workload-sa",
                k8s_namespace="default",
                k8s_sa_name="app-sa",
                roles=["roles/secretmanager.secretAccessor"],
            ),
            cluster_overrides={"max_nodes": 20, "machine_type": "n2-standard-8"},
        ),
    )
"""

from typing import Any, Dict, List, NamedTuple, Optional, Tuple

import pulumi
from pydantic import BaseModel, ConfigDict

from modules import StandardCluster, StandardIdentity, StandardSecrets, StandardVPC
from policy import (
    IncompleteIdentityConfig,
    NotConfigured,
    validate_identity,
    validate_secret_ids,
)
from policy.constraints import is_blank
from profiles import select_profile


class WorkloadIdentityConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sa_id: str = ""  # 6-30 caracteres
    k8s_namespace: str = ""
    k8s_sa_name: str = ""
    roles: List[str] = []
    # Cria a ServiceAccount no cluster usando o provider Kubernetes do StandardCluster
    manage_k8s_service_account: bool = False

    def missing_fields(self) -> List[str]:
        return [
            field
            for field in ("sa_id", "k8s_namespace", "k8s_sa_name")
            if is_blank(getattr(self, field))
        ]


class PlatformArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")

    project_id: str
    region: str
    env: str
    prefix: str
    # None: sem secrets. Lista vazia é erro.
    secret_ids: Optional[List[str]] = None
    workload_identity: Optional[WorkloadIdentityConfig] = None
    cluster_overrides: Dict[str, Any] = {}
    labels: Dict[str, str] = {}


class ResourceGroup(NamedTuple):
    """Grupo de recursos declarado e suas dependências."""

    name: str
    kind: str
    depends_on: Tuple[str, ...] = ()


class StandardPlatform(pulumi.ComponentResource):
    """
    StandardPlatform monta a plataforma de um ambiente a partir do perfil.

    ORDEM:
    1. Perfil escolhido pelo env (prod -> HA, staging -> balanced, dev -> custo)
    2. VPC
    3. Cluster GKE (depende da VPC, usa os ranges secundários da rede)
    4. Secrets (opcional)
    5. Workload Identity (opcional, depende do cluster)

    Toda a validação acontece antes de qualquer recurso ser registrado.
    """

    def __init__(self, name: str, args: PlatformArgs, opts=None):
        profile = select_profile(args.project_id, args.region, args.env, args.prefix)
        network_config = profile.network_config()
        cluster_config = profile.cluster_config(
            {
                "pod_range_name": network_config.pod_range_name,
                "service_range_name": network_config.service_range_name,
                **args.cluster_overrides,
            }
        )

        secret_ids = None
        if args.secret_ids is not None:
            secret_ids = validate_secret_ids(args.secret_ids).unwrap()

        identity = args.workload_identity
        if identity is not None:
            missing = identity.missing_fields()
            if missing:
                raise IncompleteIdentityConfig(missing)
            validate_identity(
                args.project_id, identity.sa_id, identity.k8s_namespace, identity.k8s_sa_name
            ).unwrap()

        super().__init__("custom:composites:StandardPlatform", name, None, opts)

        self.project_id = args.project_id
        self.region = args.region
        self.env = args.env
        self.prefix = args.prefix
        self.profile = profile
        self.network_config = network_config
        self.cluster_config = cluster_config
        self.resource_groups: List[ResourceGroup] = []

        pulumi.log.info(f"🧭 Perfil '{profile.kind.value}' selecionado para '{args.env}'")

        networking_name = f"{name}-networking"
        self.vpc = StandardVPC(
            networking_name,
            network_config,
            opts=pulumi.ResourceOptions(parent=self),
        )
        self.resource_groups.append(ResourceGroup(networking_name, "networking"))

        compute_name = f"{name}-compute"
        self.cluster = StandardCluster(
            compute_name,
            cluster_config,
            network_id=self.vpc.network.id,
            subnet_id=self.vpc.subnet.id,
            labels={**profile.common_labels, **args.labels},
            opts=pulumi.ResourceOptions(parent=self, depends_on=[self.vpc]),
        )
        self.resource_groups.append(ResourceGroup(compute_name, "compute", (networking_name,)))

        self._secrets: Optional[StandardSecrets] = None
        if secret_ids is not None:
            secrets_name = f"{name}-secrets"
            self._secrets = StandardSecrets(
                secrets_name,
                secret_ids,
                opts=pulumi.ResourceOptions(parent=self),
            )
            self.resource_groups.append(ResourceGroup(secrets_name, "secrets"))
        else:
            pulumi.log.info("⏭️  Secrets não configurados")

        self._identity: Optional[StandardIdentity] = None
        if identity is not None:
            identity_name = f"{name}-identity"
            self._identity = StandardIdentity(
                identity_name,
                project_id=args.project_id,
                sa_id=identity.sa_id,
                k8s_namespace=identity.k8s_namespace,
                k8s_sa_name=identity.k8s_sa_name,
                roles=identity.roles,
                k8s_provider=(
                    self.cluster.provider if identity.manage_k8s_service_account else None
                ),
                opts=pulumi.ResourceOptions(parent=self, depends_on=[self.cluster]),
            )
            self.resource_groups.append(
                ResourceGroup(identity_name, "identity", (compute_name,))
            )
        else:
            pulumi.log.info("⏭️  Workload Identity não configurado")

        self.register_outputs(
            {
                "vpc_id": self.vpc.network.id,
                "subnet_id": self.vpc.subnet.id,
                "cluster_name": self.cluster.cluster.name,
                "cluster_endpoint": self.cluster.cluster.endpoint,
            }
        )

    # Componentes opcionais

    @property
    def has_secrets(self) -> bool:
        return self._secrets is not None

    @property
    def has_identity(self) -> bool:
        return self._identity is not None

    @property
    def secrets(self) -> StandardSecrets:
        if self._secrets is None:
            raise NotConfigured("Secrets", "secret_ids")
        return self._secrets

    @property
    def identity(self) -> StandardIdentity:
        if self._identity is None:
            raise NotConfigured("Workload Identity", "workload_identity")
        return self._identity

    # Atalhos

    @property
    def cluster_name(self) -> pulumi.Output[str]:
        return self.cluster.cluster.name

    @property
    def cluster_endpoint(self) -> pulumi.Output[str]:
        return self.cluster.cluster.endpoint

    @property
    def kubeconfig(self) -> pulumi.Output[str]:
        return pulumi.Output.secret(self.cluster.kubeconfig)

    @property
    def network_id(self) -> pulumi.Output[str]:
        return self.vpc.network.id

    @property
    def subnet_id(self) -> pulumi.Output[str]:
        return self.vpc.subnet.id

    @property
    def identity_email(self) -> pulumi.Output[str]:
        return self.identity.email
