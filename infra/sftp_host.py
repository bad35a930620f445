"""
SFTP host infrastructure.
Creates the EC2 instance running a chrooted internal-sftp user over
s3fs mounts of the bucket folders.
"""

import json
import shlex

import pulumi
import pulumi_aws as aws
from config import READ_ONLY, READ_WRITE, get_common_tags
from storage import build_role_policy

SFTP_ROOT = "/data/sftp"

# s3fs umask per folder access mode
FOLDER_UMASK = {
    READ_ONLY: "222",
    READ_WRITE: "002",
}


def get_amazon_linux_ami():
    """Get the latest Amazon Linux 2 AMI."""
    ami = aws.ec2.get_ami(
        most_recent=True,
        owners=["amazon"],
        filters=[
            aws.ec2.GetAmiFilterArgs(
                name="name",
                values=["amzn2-ami-hvm-*-x86_64-gp2"],
            ),
        ],
    )
    return ami.id


def render_user_data(bucket_name: str, sftp_user: str, password: str, port: int, folders: dict) -> str:
    """Render the bootstrap script for the SFTP instance."""

    user = shlex.quote(sftp_user)
    credentials = shlex.quote(f"{sftp_user}:{password}")
    owner = f"uid=$(id -u {user}),gid=$(id -g {user})"
    mkdirs = " ".join(f"{SFTP_ROOT}/{name}" for name in folders)

    mounts = []
    fstab = []
    for name, mode in folders.items():
        umask = FOLDER_UMASK[mode]
        access = "read-only" if mode == READ_ONLY else "read+write"
        mounts.append(
            f"# Mount {name} {access}\n"
            f"sudo s3fs {bucket_name}:/{name} {SFTP_ROOT}/{name} -o _netdev -o compat_dir "
            f"-o iam_role=auto -o allow_other -o uid=$(id -u {user}) "
            f"-o gid=$(id -g {user}) -o umask={umask}"
        )
        fstab.append(
            f'echo "s3fs#{bucket_name}:/{name} {SFTP_ROOT}/{name} fuse '
            f'_netdev,iam_role=auto,allow_other,{owner},umask={umask},compat_dir 0 0" '
            f"| sudo tee -a /etc/fstab"
        )

    mount_commands = "\n\n".join(mounts)
    fstab_entries = "\n".join(fstab)

    return f"""#!/bin/bash
sudo yum update -y
sudo amazon-linux-extras enable epel
sudo yum install -y epel-release
sudo yum update -y
sudo yum install -y openssh-server s3fs-fuse policycoreutils
sudo systemctl disable ec2-instance-connect

# Create SFTP root directory
sudo mkdir -p {SFTP_ROOT}
sudo chown root:root {SFTP_ROOT}
sudo chmod 755 {SFTP_ROOT}

# Create the SFTP user
sudo useradd -s /sbin/nologin {user}
printf '%s\\n' {credentials} | sudo chpasswd

# Create folder mount points
sudo mkdir -p {mkdirs}

# Configure SFTP server on port {port}
sudo sed -i 's/^#Port 22/Port {port}/' /etc/ssh/sshd_config
sudo sed -i '/^Port 22/d' /etc/ssh/sshd_config
sudo sed -i 's/^PasswordAuthentication no/PasswordAuthentication yes/' /etc/ssh/sshd_config
sudo sed -i 's/^ChallengeResponseAuthentication yes/ChallengeResponseAuthentication no/' /etc/ssh/sshd_config

cat <<'EOF' | sudo tee -a /etc/ssh/sshd_config

Match User {sftp_user}
    ForceCommand internal-sftp
    ChrootDirectory {SFTP_ROOT}
    PermitTunnel no
    AllowAgentForwarding no
    AllowTcpForwarding no
    X11Forwarding no
EOF

# Restart SSH service
sudo systemctl enable sshd
sudo systemctl restart sshd

{mount_commands}

{fstab_entries}
"""


def create_sftp_iam_role(config: dict, bucket):
    """Create IAM role for the SFTP instance with folder-scoped S3 access."""

    # IAM role assume policy
    assume_role_policy = json.dumps({
        "Version": "2012-10-17",
        "Statement": [{
            "Effect": "Allow",
            "Principal": {"Service": "ec2.amazonaws.com"},
            "Action": "sts:AssumeRole"
        }]
    })

    role = aws.iam.Role(
        "sftp-role",
        assume_role_policy=assume_role_policy,
        tags=get_common_tags(config, "sftp-role"),
    )

    # S3 access restricted to the configured folders
    s3_policy = aws.iam.RolePolicy(
        "sftp-s3-policy",
        role=role.id,
        policy=bucket.arn.apply(
            lambda arn: json.dumps(build_role_policy(arn, config["folders"]))
        ),
    )

    instance_profile = aws.iam.InstanceProfile(
        "sftp-instance-profile",
        role=role.name,
        tags=get_common_tags(config, "sftp-instance-profile"),
    )

    return {
        "role": role,
        "s3_policy": s3_policy,
        "instance_profile": instance_profile,
    }


def create_sftp_instance(config: dict, subnet_id, security_group, iam_profile):
    """Create the SFTP gateway instance."""

    user_data = pulumi.Output.all(config["sftp_password"]).apply(
        lambda args: render_user_data(
            bucket_name=config["sftp_bucket_name"],
            sftp_user=config["sftp_user"],
            password=args[0],
            port=config["sftp_port"],
            folders=config["folders"],
        )
    )

    instance = aws.ec2.Instance(
        "sftp-instance",
        instance_type=config["instance_type"],
        ami=get_amazon_linux_ami(),
        subnet_id=subnet_id,
        vpc_security_group_ids=[security_group.id],
        key_name=config["ec2_key_name"],
        iam_instance_profile=iam_profile.name,
        associate_public_ip_address=True,
        user_data=user_data,
        tags=get_common_tags(config, "SFTP Instance"),
    )

    return instance
