"""
Configuration loader for the SFTP gateway infrastructure.
Loads values from Pulumi config with sensible defaults.
"""

import pulumi

READ_ONLY = "ro"
READ_WRITE = "rw"

DEFAULT_FOLDERS = {
    "firmwares": READ_ONLY,
    "diagnostics": READ_WRITE,
}


def parse_folders(raw: dict = None) -> dict:
    """Validate a folder layout mapping folder name to access mode."""
    folders = dict(raw or DEFAULT_FOLDERS)
    for name, mode in folders.items():
        if mode not in (READ_ONLY, READ_WRITE):
            raise ValueError(f"Folder {name!r} has unknown access mode {mode!r}")
        if not name or "/" in name:
            raise ValueError(f"Invalid folder name {name!r}")
    return folders


def get_config():
    """Load configuration values from Pulumi config."""
    config = pulumi.Config("sftp-gateway")
    aws_config = pulumi.Config("aws")

    return {
        # AWS Settings
        "region": aws_config.get("region") or "us-east-1",
        "profile": aws_config.get("profile"),

        # DNS Settings
        "domain_name": config.require("domainName"),
        "sub_domain": config.require("subDomain"),

        # Instance Settings
        "instance_type": config.get("instanceType") or "t3.micro",
        "ec2_key_name": config.require("ec2KeyName"),

        # SFTP Settings
        "sftp_bucket_name": config.require("sftpBucketName"),
        "sftp_user": config.get("sftpUser") or "chargeruser",
        "sftp_password": config.require_secret("chargeruser_pass"),
        "sftp_port": config.get_int("sftpPort") or 443,
        "folders": parse_folders(config.get_object("folders")),

        # Subnet discovery
        "subnet_lookup_workers": config.get_int("subnetLookupWorkers") or 1,
        "lookup_timeout": config.get_int("lookupTimeout") or 10,

        # Tags
        "project_name": "sftp-gateway",
        "environment": pulumi.get_stack(),
    }


def get_common_tags(config: dict, name: str = None) -> dict:
    """Generate common tags for resources."""
    tags = {
        "Project": config["project_name"],
        "Environment": config["environment"],
        "ManagedBy": "Pulumi",
    }
    if name:
        tags["Name"] = name
    return tags
