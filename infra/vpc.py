"""
VPC lookup for the SFTP gateway.
Uses the account's default VPC and discovers its public subnets.
"""

import pulumi
import pulumi_aws as aws
from subnets import Ec2Inventory, classify_public_subnets


def discover_public_subnets(config: dict, vpc_id: str) -> list:
    """Run public subnet discovery against the EC2 API."""
    inventory = Ec2Inventory(
        region=config["region"],
        timeout=config["lookup_timeout"],
        profile=config.get("profile"),
    )
    subnet_ids = classify_public_subnets(
        vpc_id,
        inventory=inventory,
        max_workers=config["subnet_lookup_workers"],
    )
    pulumi.log.info(f"Public subnets in {vpc_id}: {', '.join(subnet_ids) or 'none'}")
    return subnet_ids


def get_default_vpc(config: dict):
    """Look up the default VPC and its public subnets."""

    vpc = aws.ec2.get_vpc(default=True)
    vpc_id = pulumi.Output.from_input(vpc.id)

    # Classification is deferred to deployment time
    public_subnet_ids = vpc_id.apply(lambda vid: discover_public_subnets(config, vid))

    return {
        "vpc_id": vpc_id,
        "public_subnet_ids": public_subnet_ids,
    }
