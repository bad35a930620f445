"""
Security group for the SFTP gateway.
Only the SFTP port is exposed; sshd listens there instead of 22.
"""

import pulumi_aws as aws
from config import get_common_tags


def create_security_group(config: dict, vpc_id):
    """Create the security group for the SFTP instance."""

    sftp_sg = aws.ec2.SecurityGroup(
        "sftp-sg",
        vpc_id=vpc_id,
        description="Security group for SFTP gateway",
        ingress=[
            aws.ec2.SecurityGroupIngressArgs(
                protocol="tcp",
                from_port=config["sftp_port"],
                to_port=config["sftp_port"],
                cidr_blocks=["0.0.0.0/0"],
                description="SFTP access",
            ),
        ],
        egress=[
            aws.ec2.SecurityGroupEgressArgs(
                protocol="-1",
                from_port=0,
                to_port=0,
                cidr_blocks=["0.0.0.0/0"],
                description="Allow all outbound traffic",
            ),
        ],
        tags=get_common_tags(config, "SFTP Security Group"),
    )

    return sftp_sg
