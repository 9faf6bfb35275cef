from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from policy import validate_environment, validate_region


def without_unset(data: Any) -> Any:
    """Remove chaves com None para que os defaults do modelo sejam aplicados."""
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}
    return data


class NetworkConfig(BaseModel):
    """
    Configuração de rede (VPC + Subnet) de um ambiente.

    Validada na construção e imutável depois disso.

    Exemplo:
        config = NetworkConfig(
            project_id="my-project", region="europe-west1", env="prod", prefix="myapp"
        )
        config.vpc_name  # 'myapp-prod-vpc'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_id: str
    region: str
    env: str
    prefix: str
    primary_cidr: str = "10.0.0.0/16"
    # Ranges secundários usados pelo GKE (VPC-native)
    pod_cidr: str = "10.11.0.0/21"
    service_cidr: str = "10.12.0.0/21"
    pod_range_name: str = "pod-ranges"
    service_range_name: str = "service-ranges"

    @model_validator(mode="before")
    @classmethod
    def _apply_defaults(cls, data: Any) -> Any:
        return without_unset(data)

    @model_validator(mode="after")
    def _enforce_policy(self) -> "NetworkConfig":
        validate_environment(self.env).unwrap()
        validate_region(self.region).unwrap()
        return self

    @property
    def vpc_name(self) -> str:
        return f"{self.prefix}-{self.env}-vpc"

    @property
    def subnet_name(self) -> str:
        return f"{self.prefix}-{self.env}-subnet"

    @property
    def router_name(self) -> str:
        return f"{self.vpc_name}-router"

    @property
    def nat_name(self) -> str:
        return f"{self.vpc_name}-nat"
