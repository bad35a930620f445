"""
Public address for the SFTP gateway.
Elastic IP attached to the instance and a Route53 A record pointing at it.
"""

import pulumi
import pulumi_aws as aws
from config import get_common_tags


def sftp_hostname(config: dict) -> str:
    return f"{config['sub_domain']}.{config['domain_name']}"


def create_elastic_ip(config: dict, instance):
    """Allocate an Elastic IP and associate it with the instance."""

    eip = aws.ec2.Eip(
        "sftp-eip",
        domain="vpc",
        tags=get_common_tags(config, "SFTP Elastic IP"),
    )

    association = aws.ec2.EipAssociation(
        "sftp-eip-assoc",
        instance_id=instance.id,
        allocation_id=eip.allocation_id,
    )

    return {
        "eip": eip,
        "association": association,
    }


def create_dns_record(config: dict, eip):
    """Create the A record for the SFTP endpoint."""

    zone = aws.route53.get_zone(name=config["domain_name"])

    record = aws.route53.Record(
        "sftp-dns",
        zone_id=zone.zone_id,
        name=sftp_hostname(config),
        type="A",
        ttl=300,
        records=[eip.public_ip],
    )

    return record


def sftp_endpoint(config: dict, eip):
    """Human-readable endpoint description exported by the stack."""
    return pulumi.Output.concat(
        "SFTP endpoint is ", sftp_hostname(config), " at ", eip.public_ip,
    )
