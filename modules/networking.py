import pulumi
import pulumi_gcp as gcp

from models import NetworkConfig


class StandardVPC(pulumi.ComponentResource):
    """
    StandardVPC define a rede padrão de um ambiente.

    CRIA:
    - VPC customizada (sem auto-subnets)
    - Subnet com ranges secundários para pods e services do GKE
    - Cloud Router + Cloud NAT para acesso à internet dos nodes privados

    CARACTERÍSTICAS:
    - Nomes derivados do NetworkConfig: {prefix}-{env}-vpc / {prefix}-{env}-subnet
    - Private Google Access habilitado na subnet
    """

    def __init__(self, name: str, config: NetworkConfig, opts=None):
        super().__init__("custom:networking:StandardVPC", name, None, opts)
        pulumi.log.info(f"🌐 Criando VPC {config.vpc_name} em {config.region}")

        self.config = config

        # VPC (não suporta labels)
        self.network = gcp.compute.Network(
            f"{name}-vpc",
            name=config.vpc_name,
            project=config.project_id,
            auto_create_subnetworks=False,
            description=f"VPC padrão para {config.prefix}-{config.env}",
            opts=pulumi.ResourceOptions(parent=self),
        )

        # Subnet com ranges secundários para o GKE (VPC-native)
        self.subnet = gcp.compute.Subnetwork(
            f"{name}-subnet",
            name=config.subnet_name,
            project=config.project_id,
            region=config.region,
            network=self.network.id,
            ip_cidr_range=config.primary_cidr,
            private_ip_google_access=True,
            secondary_ip_ranges=[
                gcp.compute.SubnetworkSecondaryIpRangeArgs(
                    range_name=config.pod_range_name,
                    ip_cidr_range=config.pod_cidr,
                ),
                gcp.compute.SubnetworkSecondaryIpRangeArgs(
                    range_name=config.service_range_name,
                    ip_cidr_range=config.service_cidr,
                ),
            ],
            opts=pulumi.ResourceOptions(parent=self),
        )

        # Cloud Router (obrigatório para o NAT)
        self.router = gcp.compute.Router(
            f"{name}-router",
            name=config.router_name,
            project=config.project_id,
            region=config.region,
            network=self.network.id,
            opts=pulumi.ResourceOptions(parent=self),
        )

        # Cloud NAT: saída para internet dos nodes privados
        self.nat = gcp.compute.RouterNat(
            f"{name}-nat",
            name=config.nat_name,
            project=config.project_id,
            router=self.router.name,
            region=config.region,
            nat_ip_allocate_option="AUTO_ONLY",
            source_subnetwork_ip_ranges_to_nat="ALL_SUBNETWORKS_ALL_IP_RANGES",
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.register_outputs(
            {
                "network_id": self.network.id,
                "network_name": self.network.name,
                "subnet_id": self.subnet.id,
                "subnet_name": self.subnet.name,
            }
        )

    @property
    def network_id(self) -> pulumi.Output[str]:
        return self.network.id

    @property
    def subnet_id(self) -> pulumi.Output[str]:
        return self.subnet.id


def create_network(name: str, config: NetworkConfig, opts=None):
    """
    Cria a VPC padrão do ambiente a partir de um NetworkConfig já validado.
    """
    return StandardVPC(name, config, opts=opts)
