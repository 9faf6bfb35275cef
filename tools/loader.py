import os
import yaml
from typing import Optional
from composites import PlatformArgs


def load_platform_args(
    environment: str,
    project_id: str,
    region: Optional[str] = None,
    config_dir: str = "config",
) -> PlatformArgs:
    """Carrega as configurações da plataforma de um ambiente (config/<ambiente>.yaml)"""
    config_path = os.path.join(config_dir, f"{environment}.yaml")

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Arquivo de configuração não encontrado: {config_path}")

    with open(config_path, "r") as f:
        raw_config = yaml.safe_load(f) or {}

    # Região do stack Pulumi tem prioridade sobre a do arquivo
    if region:
        raw_config["region"] = region

    # Valida e converte para o schema
    return PlatformArgs(**{**raw_config, "project_id": project_id, "env": environment})
