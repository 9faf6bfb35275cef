from .platform import PlatformArgs, ResourceGroup, StandardPlatform, WorkloadIdentityConfig
