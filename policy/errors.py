"""
Erros de política da plataforma.

Todos os erros são fatais para a construção em andamento: nenhuma configuração
parcial ou inválida chega ao chamador. PolicyError não herda de ValueError
para que os validators do pydantic deixem o erro subir sem embrulhá-lo em
ValidationError.
"""

from typing import Iterable, Optional, Sequence


class PolicyError(Exception):
    """Base de todos os erros de política/configuração."""


# Allow-lists


class NotAllowed(PolicyError):
    """Valor fora de uma allow-list."""

    label = "valor"

    def __init__(self, value: str, allowed: Sequence[str], field: Optional[str] = None):
        self.field = field or self.label
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"{self.field} inválido '{value}'. Permitidos: {', '.join(self.allowed)}"
        )


class InvalidEnvironment(NotAllowed):
    label = "environment"


class InvalidRegion(NotAllowed):
    label = "region"


class InvalidMachineType(NotAllowed):
    label = "machine_type"


# Limites numéricos


class OutOfRange(PolicyError):
    def __init__(self, field: str, value: int, minimum: int, maximum: int, unit: str = ""):
        self.field = field
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"{field} deve estar entre {minimum}{unit} e {maximum}{unit} (recebido {value}{unit})"
        )


class MinExceedsMax(PolicyError):
    def __init__(self, min_nodes: int, max_nodes: int):
        self.min_nodes = min_nodes
        self.max_nodes = max_nodes
        super().__init__(
            f"min_nodes ({min_nodes}) não pode ser maior que max_nodes ({max_nodes})"
        )


# Master CIDR


class CidrError(PolicyError):
    def __init__(self, cidr: str, message: str):
        self.field = "master_cidr"
        self.value = cidr
        super().__init__(message)


class MalformedCidr(CidrError):
    pass


class NotPrivateRange(CidrError):
    pass


class MisalignedBlock(CidrError):
    pass


# Secrets


class EmptySecretList(PolicyError):
    def __init__(self):
        super().__init__("secret_ids não pode ser vazio")


class BlankSecretId(PolicyError):
    def __init__(self, position: int):
        self.position = position
        super().__init__(
            f"secret_ids[{position}] não pode ser vazio ou conter apenas espaços"
        )


class DuplicateSecretId(PolicyError):
    def __init__(self, secret_id: str):
        self.secret_id = secret_id
        super().__init__(f"secret_ids contém '{secret_id}' mais de uma vez")


class SecretNotFound(PolicyError):
    def __init__(self, secret_id: str, available: Iterable[str]):
        self.secret_id = secret_id
        self.available = tuple(available)
        super().__init__(
            f"Secret '{secret_id}' não encontrado. Disponíveis: {', '.join(self.available)}"
        )


# Workload Identity


class IncompleteIdentityConfig(PolicyError):
    def __init__(self, missing: Sequence[str]):
        self.missing = tuple(missing)
        super().__init__(
            "workload_identity deve conter 'sa_id', 'k8s_namespace' e 'k8s_sa_name' "
            f"(faltando: {', '.join(self.missing)})"
        )


class InvalidServiceAccountIdLength(PolicyError):
    def __init__(self, sa_id: str):
        self.field = "sa_id"
        self.value = sa_id
        super().__init__(
            f"sa_id deve ter entre 6 e 30 caracteres (recebido '{sa_id}', {len(sa_id)})"
        )


class BlankProjectId(PolicyError):
    def __init__(self):
        super().__init__("project_id é obrigatório")


class BlankNamespace(PolicyError):
    def __init__(self):
        super().__init__("k8s_namespace é obrigatório")


class BlankServiceAccountName(PolicyError):
    def __init__(self):
        super().__init__("k8s_sa_name é obrigatório")


# Componentes opcionais


class NotConfigured(PolicyError):
    def __init__(self, component: str, parameter: str):
        self.component = component
        self.parameter = parameter
        super().__init__(
            f"{component} não configurado. Informe '{parameter}' para o StandardPlatform."
        )
