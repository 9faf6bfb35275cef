import pulumi
import pytest

from modules import StandardCluster, StandardIdentity, StandardSecrets
from models import ClusterConfig
from policy import (
    BlankNamespace,
    BlankProjectId,
    BlankSecretId,
    BlankServiceAccountName,
    DuplicateSecretId,
    EmptySecretList,
    InvalidServiceAccountIdLength,
    SecretNotFound,
)


class TestStandardSecrets:
    def test_creates_one_secret_per_id(self):
        secrets = StandardSecrets("test-secrets", ["db-password", "api-key"])

        assert secrets.secret_ids == ["db-password", "api-key"]
        assert secrets.get_secret("db-password") is not secrets.get_secret("api-key")

    @pulumi.runtime.test
    def test_secret_id(self):
        secrets = StandardSecrets("test-secrets", ["db-password"])

        def check(secret_id):
            assert secret_id == "db-password"

        return secrets.get_secret("db-password").secret_id.apply(check)

    def test_empty_list(self):
        with pytest.raises(EmptySecretList):
            StandardSecrets("test-secrets", [])

    def test_blank_id(self):
        with pytest.raises(BlankSecretId):
            StandardSecrets("test-secrets", ["db-password", "   "])

    def test_duplicate_id(self):
        with pytest.raises(DuplicateSecretId, match="db-password"):
            StandardSecrets("test-secrets", ["db-password", "db-password"])

    def test_unknown_secret(self):
        secrets = StandardSecrets("test-secrets", ["db-password", "api-key"])

        with pytest.raises(SecretNotFound, match="Disponíveis: db-password, api-key") as excinfo:
            secrets.get_secret("jwt-secret")
        assert excinfo.value.available == ("db-password", "api-key")


class TestStandardIdentity:
    identity_args = {
        "project_id": "test-project",
        "sa_id": "workload-sa",
        "k8s_namespace": "default",
        "k8s_sa_name": "app-sa",
    }

    def test_creates_bindings(self):
        identity = StandardIdentity(
            "test-identity",
            roles=["roles/secretmanager.secretAccessor", "roles/storage.objectViewer"],
            **self.identity_args,
        )

        assert len(identity.role_bindings) == 2
        assert identity.member == "serviceAccount:test-project.svc.id.goog[default/app-sa]"
        assert identity.k8s_service_account is None

    @pulumi.runtime.test
    def test_workload_identity_binding(self):
        identity = StandardIdentity("test-identity", **self.identity_args)

        def check(args):
            role, members = args
            assert role == "roles/iam.workloadIdentityUser"
            assert members == ["serviceAccount:test-project.svc.id.goog[default/app-sa]"]

        binding = identity.workload_identity_binding
        return pulumi.Output.all(binding.role, binding.members).apply(check)

    @pulumi.runtime.test
    def test_email(self):
        identity = StandardIdentity("test-identity", **self.identity_args)

        def check(email):
            assert email == "test-identity-sa@test-project.iam.gserviceaccount.com"

        return identity.email.apply(check)

    def test_kubernetes_service_account(self, base_args):
        cluster = StandardCluster(
            "test-cluster", ClusterConfig(**base_args), network_id="n", subnet_id="s"
        )
        identity = StandardIdentity(
            "test-identity", k8s_provider=cluster.provider, **self.identity_args
        )

        assert identity.k8s_service_account is not None

    @pytest.mark.parametrize(
        "overrides,error",
        [
            ({"project_id": ""}, BlankProjectId),
            ({"sa_id": "sa"}, InvalidServiceAccountIdLength),
            ({"sa_id": "a" * 31}, InvalidServiceAccountIdLength),
            ({"k8s_namespace": ""}, BlankNamespace),
            ({"k8s_sa_name": " "}, BlankServiceAccountName),
        ],
    )
    def test_validation(self, overrides, error):
        with pytest.raises(error):
            StandardIdentity("test-identity", **{**self.identity_args, **overrides})
