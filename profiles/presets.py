"""
Perfis de plataforma (golden paths).

Cada ProfileKind define apenas os defaults do cluster; a configuração de rede
é a mesma para todos. Overrides do chamador passam pela validação completa do
ClusterConfig, então nenhum default de perfil contorna a política.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from models import ClusterConfig, NetworkConfig
from policy import validate_environment


class ProfileKind(str, Enum):
    COST_OPTIMIZED = "cost-optimized"
    BALANCED = "balanced"
    HIGH_AVAILABILITY = "high-availability"


_CLUSTER_DEFAULTS: Dict[ProfileKind, Dict[str, Any]] = {
    # Dev: zona única, spot, máquinas pequenas
    ProfileKind.COST_OPTIMIZED: {
        "machine_type": "e2-medium",
        "initial_node_count": 1,
        "min_nodes": 1,
        "max_nodes": 3,
        "use_spot_instances": True,
        "disk_size_gb": 50,
    },
    # Staging: parecido com prod, mas econômico
    ProfileKind.BALANCED: {
        "machine_type": "n2-standard-2",
        "initial_node_count": 2,
        "min_nodes": 2,
        "max_nodes": 5,
        "use_spot_instances": True,
        "disk_size_gb": 75,
    },
    # Prod: HA, sem spot
    ProfileKind.HIGH_AVAILABILITY: {
        "machine_type": "n2-standard-4",
        "initial_node_count": 3,
        "min_nodes": 3,
        "max_nodes": 10,
        "use_spot_instances": False,
        "disk_size_gb": 100,
    },
}

ENVIRONMENT_PROFILES: Dict[str, ProfileKind] = {
    "dev": ProfileKind.COST_OPTIMIZED,
    "staging": ProfileKind.BALANCED,
    "prod": ProfileKind.HIGH_AVAILABILITY,
}


def cluster_defaults(kind: ProfileKind) -> Dict[str, Any]:
    """Defaults de cluster do perfil (cópia, pode ser alterada pelo chamador)."""
    return dict(_CLUSTER_DEFAULTS[kind])


def profile_kind_for(env: str) -> ProfileKind:
    """
    Perfil correspondente ao ambiente.

    O ambiente é validado antes do mapeamento: um valor desconhecido gera
    InvalidEnvironment em vez de cair silenciosamente no perfil de custo.
    """
    validate_environment(env).unwrap()
    return ENVIRONMENT_PROFILES[env]


class PlatformProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ProfileKind
    project_id: str
    region: str
    env: str
    prefix: str

    @property
    def common_labels(self) -> Dict[str, str]:
        """Labels padrão aplicadas a todos os recursos"""
        return {
            "environment": self.env,
            "managed-by": "pulumi",
            "project": self.project_id,
        }

    def _identity(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "region": self.region,
            "env": self.env,
            "prefix": self.prefix,
        }

    def network_config(self, overrides: Optional[Dict[str, Any]] = None) -> NetworkConfig:
        return NetworkConfig(**_merge(self._identity(), overrides))

    def cluster_config(self, overrides: Optional[Dict[str, Any]] = None) -> ClusterConfig:
        base = {**self._identity(), **cluster_defaults(self.kind)}
        return ClusterConfig(**_merge(base, overrides))


def _merge(base: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in (overrides or {}).items():
        # None significa "não informado": mantém o default
        if value is not None:
            merged[key] = value
    return merged


def select_profile(project_id: str, region: str, env: str, prefix: str) -> PlatformProfile:
    return PlatformProfile(
        kind=profile_kind_for(env),
        project_id=project_id,
        region=region,
        env=env,
        prefix=prefix,
    )
