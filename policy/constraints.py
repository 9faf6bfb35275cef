"""
Restrições de política da empresa.

Define os valores permitidos (ambientes, regiões, tipos de máquina), os limites
numéricos e os validadores usados na construção das configurações.

Os validadores não lançam exceção: devolvem um CheckResult com o valor validado
ou com o erro de política. Quem constrói a configuração decide quando chamar
unwrap().
"""

import re
from types import MappingProxyType
from typing import Any, Mapping, NamedTuple, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .errors import (
    BlankNamespace,
    BlankProjectId,
    BlankSecretId,
    BlankServiceAccountName,
    DuplicateSecretId,
    EmptySecretList,
    InvalidEnvironment,
    InvalidMachineType,
    InvalidRegion,
    InvalidServiceAccountIdLength,
    MalformedCidr,
    MisalignedBlock,
    NotPrivateRange,
    OutOfRange,
    PolicyError,
)


class Bound(BaseModel):
    model_config = ConfigDict(frozen=True)

    minimum: int
    maximum: int
    unit: str = ""

    def contains(self, value: int) -> bool:
        return self.minimum <= value <= self.maximum


class ConstraintSet(BaseModel):
    """Tabelas de restrição. Carregadas uma vez, nunca alteradas."""

    model_config = ConfigDict(frozen=True)

    allowed_environments: Tuple[str, ...]
    allowed_regions: Tuple[str, ...]
    allowed_machine_types: Tuple[str, ...]
    numeric_bounds: Mapping[str, Bound]

    @field_validator("numeric_bounds", mode="after")
    @classmethod
    def _read_only_bounds(cls, value: Mapping[str, Bound]) -> Mapping[str, Bound]:
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def _check_tables(self) -> "ConstraintSet":
        for table in ("allowed_environments", "allowed_regions", "allowed_machine_types"):
            values = getattr(self, table)
            if not values:
                raise ValueError(f"{table} não pode ser vazio")
            if len(set(values)) != len(values):
                raise ValueError(f"{table} contém valores duplicados")
        for name, bound in self.numeric_bounds.items():
            if bound.minimum > bound.maximum:
                raise ValueError(f"limite '{name}' com mínimo maior que máximo")
        return self


POLICY = ConstraintSet(
    allowed_environments=("dev", "staging", "prod"),
    allowed_regions=(
        "europe-west1",  # Bélgica
        "europe-west3",  # Frankfurt
        "europe-west4",  # Holanda
        "us-central1",  # Iowa
        "us-east1",  # Carolina do Sul
    ),
    allowed_machine_types=(
        # Custo (dev/staging)
        "e2-micro",
        "e2-small",
        "e2-medium",
        "e2-standard-2",
        "e2-standard-4",
        # Performance (prod)
        "n2-standard-2",
        "n2-standard-4",
        "n2-standard-8",
        "n2-highmem-2",
        "n2-highmem-4",
    ),
    numeric_bounds={
        "max_nodes": Bound(minimum=1, maximum=50),
        "disk_size_gb": Bound(minimum=30, maximum=200, unit="GB"),
        "node_count": Bound(minimum=1, maximum=20),
    },
)

ALLOWED_ENVIRONMENTS = POLICY.allowed_environments
ALLOWED_REGIONS = POLICY.allowed_regions
ALLOWED_MACHINE_TYPES = POLICY.allowed_machine_types

# GKE exige /28 para o control plane privado (16 endereços)
MASTER_CIDR_PATTERN = re.compile(r"(?:[0-9]{1,3}\.){3}[0-9]{1,3}/28")

SERVICE_ACCOUNT_ID_LENGTH = (6, 30)


class CheckResult(NamedTuple):
    """Resultado de uma validação: valor validado ou erro de política."""

    value: Any = None
    error: Optional[PolicyError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


def passed(value: Any) -> CheckResult:
    return CheckResult(value=value)


def failed(error: PolicyError) -> CheckResult:
    return CheckResult(error=error)


def is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def validate_environment(value: str) -> CheckResult:
    if value not in POLICY.allowed_environments:
        return failed(InvalidEnvironment(value, POLICY.allowed_environments))
    return passed(value)


def validate_region(value: str) -> CheckResult:
    if value not in POLICY.allowed_regions:
        return failed(InvalidRegion(value, POLICY.allowed_regions))
    return passed(value)


def validate_machine_type(value: str) -> CheckResult:
    if value not in POLICY.allowed_machine_types:
        return failed(InvalidMachineType(value, POLICY.allowed_machine_types))
    return passed(value)


def validate_bound(name: str, value: int) -> CheckResult:
    """Valida `value` contra o limite inclusivo `name` (max_nodes, disk_size_gb, node_count)."""
    bound = POLICY.numeric_bounds[name]
    # bool é subclasse de int, mas não é uma contagem
    if isinstance(value, bool) or not bound.contains(value):
        return failed(OutOfRange(name, value, bound.minimum, bound.maximum, bound.unit))
    return passed(value)


def validate_max_nodes(value: int) -> CheckResult:
    return validate_bound("max_nodes", value)


def validate_disk_size(value: int) -> CheckResult:
    return validate_bound("disk_size_gb", value)


def validate_node_count(value: int) -> CheckResult:
    return validate_bound("node_count", value)


def validate_master_cidr(cidr: str) -> CheckResult:
    """
    Valida o bloco CIDR do control plane do GKE.

    Regras, nesta ordem (a primeira que falhar define o erro):
    - formato x.x.x.x/28
    - octetos entre 0 e 255
    - faixa privada RFC 1918 (10.x.x.x, 172.16-31.x.x, 192.168.x.x)
    - alinhamento /28 (último octeto múltiplo de 16)

    Exemplos:
        validate_master_cidr("172.16.0.0/28")  # ok
        validate_master_cidr("172.16.0.0/24")  # MalformedCidr
        validate_master_cidr("8.8.8.0/28")     # NotPrivateRange
        validate_master_cidr("172.16.0.1/28")  # MisalignedBlock
    """
    if not isinstance(cidr, str) or not MASTER_CIDR_PATTERN.fullmatch(cidr):
        return failed(
            MalformedCidr(
                cidr,
                f"master_cidr deve ser um bloco CIDR /28 (ex.: '172.16.0.0/28'). Recebido: '{cidr}'",
            )
        )

    ip = cidr.split("/")[0]
    octets = [int(octet) for octet in ip.split(".")]

    if any(octet < 0 or octet > 255 for octet in octets):
        return failed(MalformedCidr(cidr, f"Endereço IP inválido em master_cidr: '{ip}'"))

    is_private = (
        octets[0] == 10
        or (octets[0] == 172 and 16 <= octets[1] <= 31)
        or (octets[0] == 192 and octets[1] == 168)
    )
    if not is_private:
        return failed(
            NotPrivateRange(
                cidr,
                "master_cidr deve estar na faixa privada RFC 1918 "
                f"(10.x.x.x, 172.16-31.x.x ou 192.168.x.x). Recebido: '{ip}'",
            )
        )

    if octets[3] % 16 != 0:
        return failed(
            MisalignedBlock(
                cidr,
                "bloco /28 de master_cidr deve estar alinhado "
                f"(último octeto 0, 16, 32, 48, ...). Recebido: '{ip}'",
            )
        )

    return passed(cidr)


def validate_secret_ids(secret_ids: Optional[Sequence[str]]) -> CheckResult:
    if not secret_ids:
        return failed(EmptySecretList())
    seen = set()
    for position, secret_id in enumerate(secret_ids):
        if is_blank(secret_id):
            return failed(BlankSecretId(position))
        if secret_id in seen:
            return failed(DuplicateSecretId(secret_id))
        seen.add(secret_id)
    return passed(list(secret_ids))


def validate_identity(
    project_id: str, sa_id: str, k8s_namespace: str, k8s_sa_name: str
) -> CheckResult:
    if is_blank(project_id):
        return failed(BlankProjectId())
    min_length, max_length = SERVICE_ACCOUNT_ID_LENGTH
    if not sa_id or not min_length <= len(sa_id) <= max_length:
        return failed(InvalidServiceAccountIdLength(sa_id or ""))
    if is_blank(k8s_namespace):
        return failed(BlankNamespace())
    if is_blank(k8s_sa_name):
        return failed(BlankServiceAccountName())
    return passed((project_id, sa_id, k8s_namespace, k8s_sa_name))
