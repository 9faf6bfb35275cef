import pulumi
import pytest


class PlatformMocks(pulumi.runtime.Mocks):
    """Devolve os inputs como estado e completa os outputs que o GCP calcularia."""

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        outputs = dict(args.inputs)
        if args.typ == "gcp:container/cluster:Cluster":
            outputs.update(
                {
                    "endpoint": "34.1.2.3",
                    "masterAuth": {"clusterCaCertificate": "Y2VydGlmaWNhdGU="},
                }
            )
        if args.typ == "gcp:serviceaccount/account:Account":
            outputs["email"] = f"{args.name}@test-project.iam.gserviceaccount.com"
        return [f"{args.name}_id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        return {}


pulumi.runtime.set_mocks(PlatformMocks(), preview=False)


@pytest.fixture
def base_args():
    return {
        "project_id": "test-project",
        "region": "us-central1",
        "env": "dev",
        "prefix": "myapp",
    }
