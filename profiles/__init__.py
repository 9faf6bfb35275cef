from .presets import (
    ENVIRONMENT_PROFILES,
    PlatformProfile,
    ProfileKind,
    cluster_defaults,
    profile_kind_for,
    select_profile,
)
