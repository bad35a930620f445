"""
SFTP Gateway Infrastructure - Main Entry Point
This module orchestrates all infrastructure components.
"""

import pulumi

from config import get_config
from vpc import get_default_vpc
from subnets import first_public_subnet
from security_groups import create_security_group
from storage import create_bucket, create_bucket_policy
from sftp_host import create_sftp_iam_role, create_sftp_instance
from endpoint import create_elastic_ip, create_dns_record, sftp_endpoint


def main():
    """Main function to create all infrastructure."""

    # Load configuration
    config = get_config()

    # Default VPC and public subnet discovery
    vpc_resources = get_default_vpc(config)

    # Security group
    sftp_sg = create_security_group(config, vpc_resources["vpc_id"])

    # Bucket, IAM role and bucket policy
    storage = create_bucket(config)
    sftp_iam = create_sftp_iam_role(config, storage["bucket"])
    create_bucket_policy(config, storage["bucket"], sftp_iam["role"])

    # Instance in the first public subnet
    instance = create_sftp_instance(
        config=config,
        subnet_id=vpc_resources["public_subnet_ids"].apply(first_public_subnet),
        security_group=sftp_sg,
        iam_profile=sftp_iam["instance_profile"],
    )

    # Elastic IP and DNS
    address = create_elastic_ip(config, instance)
    create_dns_record(config, address["eip"])

    # ===== Export Outputs =====

    pulumi.export("sftpEndpoint", sftp_endpoint(config, address["eip"]))
    pulumi.export("bucketName", storage["bucket"].bucket)
    pulumi.export("publicSubnetIds", vpc_resources["public_subnet_ids"])
    pulumi.export("instanceId", instance.id)


# Run main
main()
