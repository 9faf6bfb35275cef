import pulumi
import pydantic
import pytest

from composites import PlatformArgs, ResourceGroup, StandardPlatform, WorkloadIdentityConfig
from policy import (
    DuplicateSecretId,
    EmptySecretList,
    IncompleteIdentityConfig,
    InvalidEnvironment,
    InvalidServiceAccountIdLength,
    NotConfigured,
)
from profiles import ProfileKind


def make_platform(base_args, **overrides) -> StandardPlatform:
    return StandardPlatform("test-platform", PlatformArgs(**{**base_args, **overrides}))


def identity_config(**overrides) -> WorkloadIdentityConfig:
    fields = {
        "sa_id": "workload-identity-sa",
        "k8s_namespace": "default",
        "k8s_sa_name": "app-sa",
        "roles": ["roles/secretmanager.secretAccessor"],
    }
    return WorkloadIdentityConfig(**{**fields, **overrides})


class TestBasicCreation:
    def test_required_args_only(self, base_args):
        platform = make_platform(base_args)

        assert platform.vpc is not None
        assert platform.cluster is not None
        assert platform.project_id == "test-project"
        assert platform.region == "us-central1"
        assert platform.env == "dev"
        assert platform.prefix == "myapp"
        assert platform.has_secrets is False
        assert platform.has_identity is False

    def test_resource_groups(self, base_args):
        platform = make_platform(base_args)

        assert platform.resource_groups == [
            ResourceGroup("test-platform-networking", "networking"),
            ResourceGroup("test-platform-compute", "compute", ("test-platform-networking",)),
        ]

    def test_network_ranges_propagate_to_cluster(self, base_args):
        platform = make_platform(base_args)

        assert platform.cluster_config.pod_range_name == platform.network_config.pod_range_name
        assert (
            platform.cluster_config.service_range_name
            == platform.network_config.service_range_name
        )

    def test_cluster_labels(self, base_args):
        platform = make_platform(base_args, labels={"team": "platform"})

        assert platform.cluster.labels == {
            "environment": "dev",
            "managed-by": "pulumi",
            "project": "test-project",
            "team": "platform",
        }


class TestProfiles:
    @pytest.mark.parametrize(
        "env,kind,machine_type",
        [
            ("dev", ProfileKind.COST_OPTIMIZED, "e2-medium"),
            ("staging", ProfileKind.BALANCED, "n2-standard-2"),
            ("prod", ProfileKind.HIGH_AVAILABILITY, "n2-standard-4"),
        ],
    )
    def test_profile_by_environment(self, base_args, env, kind, machine_type):
        platform = make_platform(base_args, env=env)

        assert platform.profile.kind is kind
        assert platform.cluster_config.machine_type == machine_type

    def test_staging_is_balanced(self, base_args):
        platform = make_platform(base_args, env="staging")

        assert platform.cluster_config.machine_type == "n2-standard-2"
        assert platform.cluster_config.disk_size_gb == 75

    def test_unknown_environment(self, base_args):
        with pytest.raises(InvalidEnvironment):
            make_platform(base_args, env="production")

    def test_cluster_overrides(self, base_args):
        platform = make_platform(
            base_args,
            env="prod",
            cluster_overrides={"max_nodes": 20, "machine_type": "n2-standard-8"},
        )

        assert platform.cluster_config.max_nodes == 20
        assert platform.cluster_config.machine_type == "n2-standard-8"
        assert platform.cluster_config.use_spot_instances is False


class TestSecrets:
    def test_with_secrets(self, base_args):
        platform = make_platform(base_args, secret_ids=["db-password", "api-key"])

        assert platform.has_secrets is True
        assert platform.secrets.secret_ids == ["db-password", "api-key"]
        assert ResourceGroup("test-platform-secrets", "secrets") in platform.resource_groups

    def test_empty_list(self, base_args):
        with pytest.raises(EmptySecretList):
            make_platform(base_args, secret_ids=[])

    def test_duplicate_ids(self, base_args):
        with pytest.raises(DuplicateSecretId):
            make_platform(base_args, secret_ids=["db-password", "api-key", "db-password"])

    def test_not_configured(self, base_args):
        platform = make_platform(base_args)

        with pytest.raises(NotConfigured, match="Secrets não configurado"):
            platform.secrets


class TestWorkloadIdentity:
    def test_with_identity(self, base_args):
        platform = make_platform(base_args, workload_identity=identity_config())

        assert platform.has_identity is True
        assert platform.identity is not None
        assert platform.identity.k8s_service_account is None
        assert platform.resource_groups[-1] == ResourceGroup(
            "test-platform-identity", "identity", ("test-platform-compute",)
        )

    def test_managed_kubernetes_service_account(self, base_args):
        platform = make_platform(
            base_args, workload_identity=identity_config(manage_k8s_service_account=True)
        )

        assert platform.identity.k8s_service_account is not None

    @pytest.mark.parametrize("field", ["sa_id", "k8s_namespace", "k8s_sa_name"])
    def test_incomplete(self, base_args, field):
        with pytest.raises(IncompleteIdentityConfig) as excinfo:
            make_platform(base_args, workload_identity=identity_config(**{field: ""}))
        assert excinfo.value.missing == (field,)

    def test_invalid_sa_id(self, base_args):
        with pytest.raises(InvalidServiceAccountIdLength):
            make_platform(base_args, workload_identity=identity_config(sa_id="sa"))

    def test_not_configured(self, base_args):
        platform = make_platform(base_args)

        with pytest.raises(NotConfigured, match="Workload Identity não configurado"):
            platform.identity
        with pytest.raises(NotConfigured):
            platform.identity_email

    @pulumi.runtime.test
    def test_identity_email(self, base_args):
        platform = make_platform(base_args, workload_identity=identity_config())

        def check(email):
            assert email == "test-platform-identity-sa@test-project.iam.gserviceaccount.com"

        return platform.identity_email.apply(check)


class TestOutputs:
    @pulumi.runtime.test
    def test_convenience_outputs(self, base_args):
        platform = make_platform(base_args)

        def check(args):
            cluster_name, endpoint, network_id, subnet_id = args
            assert cluster_name == "myapp-dev-cluster"
            assert endpoint == "34.1.2.3"
            assert network_id == "test-platform-networking-vpc_id"
            assert subnet_id == "test-platform-networking-subnet_id"

        return pulumi.Output.all(
            platform.cluster_name,
            platform.cluster_endpoint,
            platform.network_id,
            platform.subnet_id,
        ).apply(check)


class TestArgs:
    def test_unknown_field(self, base_args):
        with pytest.raises(pydantic.ValidationError, match="secret_id"):
            PlatformArgs(**base_args, secret_id=["db-password"])

    def test_unknown_identity_field(self):
        with pytest.raises(pydantic.ValidationError, match="namespace"):
            WorkloadIdentityConfig(sa_id="workload-sa", namespace="default", k8s_sa_name="app-sa")
