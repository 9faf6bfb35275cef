from typing import Any

from pydantic import BaseModel, ConfigDict, StrictInt, model_validator

from policy import (
    MinExceedsMax,
    validate_disk_size,
    validate_environment,
    validate_machine_type,
    validate_master_cidr,
    validate_max_nodes,
    validate_node_count,
    validate_region,
)

from .network import without_unset


class ClusterConfig(BaseModel):
    """
    Configuração do cluster GKE e do node pool.

    As regras de política rodam sempre na mesma ordem e a primeira falha
    interrompe a construção:
    environment -> region -> machine_type -> max_nodes -> disk_size_gb ->
    initial_node_count -> min_nodes <= max_nodes -> master_cidr

    Exemplo:
        config = ClusterConfig(
            project_id="my-project", region="europe-west1", env="prod",
            prefix="myapp", max_nodes=10,
        )
        config.cluster_name  # 'myapp-prod-cluster'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_id: str
    region: str
    env: str
    prefix: str
    zone: str
    machine_type: str = "e2-medium"
    initial_node_count: StrictInt = 1
    # Autoscaler
    min_nodes: StrictInt = 1
    max_nodes: StrictInt = 3
    disk_size_gb: StrictInt = 50
    use_spot_instances: bool = True
    # Control plane privado
    master_cidr: str = "172.16.0.0/28"
    pod_range_name: str = "pod-ranges"
    service_range_name: str = "service-ranges"

    @model_validator(mode="before")
    @classmethod
    def _apply_defaults(cls, data: Any) -> Any:
        data = without_unset(data)
        if isinstance(data, dict) and "zone" not in data and "region" in data:
            data["zone"] = f"{data['region']}-a"
        return data

    @model_validator(mode="after")
    def _enforce_policy(self) -> "ClusterConfig":
        validate_environment(self.env).unwrap()
        validate_region(self.region).unwrap()
        validate_machine_type(self.machine_type).unwrap()
        validate_max_nodes(self.max_nodes).unwrap()
        validate_disk_size(self.disk_size_gb).unwrap()
        validate_node_count(self.initial_node_count).unwrap()

        if self.min_nodes > self.max_nodes:
            raise MinExceedsMax(self.min_nodes, self.max_nodes)

        validate_master_cidr(self.master_cidr).unwrap()
        return self

    @property
    def cluster_name(self) -> str:
        return f"{self.prefix}-{self.env}-cluster"

    @property
    def node_pool_name(self) -> str:
        return f"{self.cluster_name}-pool"

    @property
    def workload_identity_pool(self) -> str:
        return f"{self.project_id}.svc.id.goog"

    @property
    def effective_zone(self) -> str:
        return self.zone
