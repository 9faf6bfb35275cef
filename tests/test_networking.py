import pulumi

from models import NetworkConfig
from modules import StandardVPC, create_network


def make_vpc(base_args) -> StandardVPC:
    return StandardVPC("test-vpc", NetworkConfig(**base_args))


class TestStandardVPC:
    def test_creates_resources(self, base_args):
        vpc = make_vpc(base_args)

        assert vpc.network is not None
        assert vpc.subnet is not None
        assert vpc.router is not None
        assert vpc.nat is not None

    @pulumi.runtime.test
    def test_names_follow_convention(self, base_args):
        vpc = make_vpc(base_args)

        def check(args):
            network_name, subnet_name, router_name, nat_name = args
            assert network_name == "myapp-dev-vpc"
            assert subnet_name == "myapp-dev-subnet"
            assert router_name == "myapp-dev-vpc-router"
            assert nat_name == "myapp-dev-vpc-nat"

        return pulumi.Output.all(
            vpc.network.name, vpc.subnet.name, vpc.router.name, vpc.nat.name
        ).apply(check)

    @pulumi.runtime.test
    def test_subnet_ranges(self, base_args):
        vpc = make_vpc(base_args)

        def check(args):
            cidr, region = args
            assert cidr == "10.0.0.0/16"
            assert region == "us-central1"

        return pulumi.Output.all(vpc.subnet.ip_cidr_range, vpc.subnet.region).apply(check)

    @pulumi.runtime.test
    def test_exposes_ids(self, base_args):
        vpc = create_network("test-vpc", NetworkConfig(**base_args))

        def check(args):
            network_id, subnet_id = args
            assert network_id == "test-vpc-vpc_id"
            assert subnet_id == "test-vpc-subnet_id"

        return pulumi.Output.all(vpc.network_id, vpc.subnet_id).apply(check)
