"""Shared test data for the SFTP gateway tests."""

import pulumi

from subnets import Route, RouteTable, RouteTableNotFoundError


def make_config(**overrides) -> dict:
    """Config dict shaped like config.get_config() without a Pulumi stack."""
    config = {
        "region": "us-east-1",
        "profile": None,
        "domain_name": "example.com",
        "sub_domain": "sftp",
        "instance_type": "t3.micro",
        "ec2_key_name": "sftp-key",
        "sftp_bucket_name": "example-sftp-bucket",
        "sftp_user": "chargeruser",
        "sftp_password": pulumi.Output.secret("s3cret-pass"),
        "sftp_port": 443,
        "folders": {"firmwares": "ro", "diagnostics": "rw"},
        "subnet_lookup_workers": 1,
        "lookup_timeout": 10,
        "project_name": "sftp-gateway",
        "environment": "test",
    }
    config.update(overrides)
    return config


def igw_table(route_table_id: str, main: bool = False) -> RouteTable:
    return RouteTable(
        route_table_id,
        main=main,
        routes=(
            Route("10.0.0.0/16", "local"),
            Route("0.0.0.0/0", "igw-1"),
        ),
    )


def nat_table(route_table_id: str, main: bool = False) -> RouteTable:
    return RouteTable(
        route_table_id,
        main=main,
        routes=(
            Route("10.0.0.0/16", "local"),
            Route("0.0.0.0/0", None),
        ),
    )


class FakeInventory:
    """In-memory inventory keyed by subnet id."""

    def __init__(self, subnets, explicit=None, main=None, errors=None):
        self.subnets = list(subnets)
        self.explicit = explicit or {}
        self.main = main
        self.errors = errors or {}
        self.calls = []

    def list_subnet_ids(self, vpc_id):
        self.calls.append(("list", vpc_id))
        return list(self.subnets)

    def subnet_route_table(self, subnet_id):
        self.calls.append(("explicit", subnet_id))
        if subnet_id in self.errors:
            raise self.errors[subnet_id]
        if subnet_id not in self.explicit:
            raise RouteTableNotFoundError(subnet_id)
        return self.explicit[subnet_id]

    def main_route_table(self, vpc_id):
        self.calls.append(("main", vpc_id))
        if isinstance(self.main, Exception):
            raise self.main
        if self.main is None:
            raise RouteTableNotFoundError(vpc_id)
        return self.main
