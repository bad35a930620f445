"""
Pytest configuration and shared fixtures for the SFTP gateway tests.

Pulumi mocks are installed once here, before any test module creates
resources, so every module resolves outputs against the same mocks.
"""

import asyncio
import os

import pulumi
import pytest

# Keep boto3 away from real credentials and regions
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")  # noqa: S105

# set_mocks() needs an event loop on recent Python versions
try:
    asyncio.get_event_loop()
except RuntimeError:
    asyncio.set_event_loop(asyncio.new_event_loop())


class SftpGatewayMocks(pulumi.runtime.Mocks):
    """Mock implementation for Pulumi resources and data sources."""

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        outputs = args.inputs

        if args.typ == "aws:s3/bucketV2:BucketV2":
            outputs = {
                **args.inputs,
                "arn": f"arn:aws:s3:::{args.inputs['bucket']}",
            }
        elif args.typ == "aws:iam/role:Role":
            outputs = {
                **args.inputs,
                "arn": f"arn:aws:iam::123456789012:role/{args.name}",
                "name": args.name,
            }
        elif args.typ == "aws:ec2/eip:Eip":
            outputs = {
                **args.inputs,
                "allocationId": "eipalloc-12345678",
                "publicIp": "203.0.113.10",
            }

        return [args.name + "_id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        if args.token == "aws:ec2/getAmi:getAmi":  # noqa: S105
            return {"id": "ami-0123456789abcdef0", "architecture": "x86_64"}
        if args.token == "aws:ec2/getVpc:getVpc":  # noqa: S105
            return {"id": "vpc-12345678", "default": True}
        if args.token == "aws:route53/getZone:getZone":  # noqa: S105
            return {"id": "Z1234567890ABC", "zoneId": "Z1234567890ABC", "name": "example.com"}
        return {}


pulumi.runtime.set_mocks(SftpGatewayMocks(), preview=False)


@pytest.fixture
def vpc_id():
    return "vpc-1"
