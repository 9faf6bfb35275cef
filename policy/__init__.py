from .constraints import (
    ALLOWED_ENVIRONMENTS,
    ALLOWED_MACHINE_TYPES,
    ALLOWED_REGIONS,
    POLICY,
    Bound,
    CheckResult,
    ConstraintSet,
    validate_bound,
    validate_disk_size,
    validate_environment,
    validate_identity,
    validate_machine_type,
    validate_master_cidr,
    validate_max_nodes,
    validate_node_count,
    validate_region,
    validate_secret_ids,
)
from .errors import (
    BlankNamespace,
    BlankProjectId,
    BlankSecretId,
    BlankServiceAccountName,
    DuplicateSecretId,
    EmptySecretList,
    IncompleteIdentityConfig,
    InvalidEnvironment,
    InvalidMachineType,
    InvalidRegion,
    InvalidServiceAccountIdLength,
    MalformedCidr,
    MinExceedsMax,
    MisalignedBlock,
    NotConfigured,
    NotPrivateRange,
    OutOfRange,
    PolicyError,
    SecretNotFound,
)
