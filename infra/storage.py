"""
S3 storage for the SFTP gateway.
Creates the bucket, one placeholder object per folder, and the
folder-scoped bucket policy.
"""

import json

import pulumi
import pulumi_aws as aws
from config import READ_WRITE, get_common_tags


def folder_resources(bucket_arn: str, folders: dict, writable_only: bool = False) -> list:
    """Object ARNs for the folders, optionally only the read-write ones."""
    return [
        f"{bucket_arn}/{name}/*"
        for name, mode in folders.items()
        if not writable_only or mode == READ_WRITE
    ]


def build_bucket_policy(bucket_arn: str, role_arn: str, folders: dict) -> dict:
    """Bucket policy: TLS only, and folder-scoped access for the SFTP role."""
    statements = [
        {
            "Effect": "Deny",
            "Principal": "*",
            "Action": "s3:*",
            "Resource": [bucket_arn, f"{bucket_arn}/*"],
            "Condition": {"Bool": {"aws:SecureTransport": "false"}},
        },
        {
            "Effect": "Allow",
            "Principal": {"AWS": role_arn},
            "Action": "s3:ListBucket",
            "Resource": bucket_arn,
        },
        {
            "Effect": "Allow",
            "Principal": {"AWS": role_arn},
            "Action": ["s3:GetObject"],
            "Resource": folder_resources(bucket_arn, folders),
        },
    ]

    writable = folder_resources(bucket_arn, folders, writable_only=True)
    if writable:
        statements.append({
            "Effect": "Allow",
            "Principal": {"AWS": role_arn},
            "Action": ["s3:PutObject", "s3:DeleteObject"],
            "Resource": writable,
        })

    return {"Version": "2012-10-17", "Statement": statements}


def build_role_policy(bucket_arn: str, folders: dict) -> dict:
    """Inline policy for the instance role, mirroring the folder access modes."""
    statements = [
        {"Effect": "Allow", "Action": "s3:ListBucket", "Resource": bucket_arn},
    ]
    for name, mode in folders.items():
        if mode == READ_WRITE:
            actions = ["s3:GetObject", "s3:PutObject", "s3:DeleteObject"]
        else:
            actions = ["s3:GetObject"]
        statements.append({
            "Effect": "Allow",
            "Action": actions,
            "Resource": f"{bucket_arn}/{name}/*",
        })
    return {"Version": "2012-10-17", "Statement": statements}


def create_bucket(config: dict):
    """Create the private SFTP bucket and its folder placeholders."""

    bucket = aws.s3.BucketV2(
        "sftpBucket",
        bucket=config["sftp_bucket_name"],
        tags=get_common_tags(config, "SFTP Bucket"),
    )

    # Block all public access to the bucket
    aws.s3.BucketPublicAccessBlock(
        "sftpBucketPublicAccessBlock",
        bucket=bucket.id,
        block_public_acls=True,
        block_public_policy=True,
        ignore_public_acls=True,
        restrict_public_buckets=True,
    )

    # S3 has no directories; an empty object makes the folder visible
    placeholders = []
    for name in config["folders"]:
        placeholder = aws.s3.BucketObject(
            f"{name}Placeholder",
            bucket=bucket.bucket,
            key=f"{name}/.placeholder",
            content="",
        )
        placeholders.append(placeholder)

    return {
        "bucket": bucket,
        "placeholders": placeholders,
    }


def create_bucket_policy(config: dict, bucket, role):
    """Attach the folder-scoped bucket policy."""

    policy = pulumi.Output.all(bucket.arn, role.arn).apply(
        lambda args: json.dumps(build_bucket_policy(args[0], args[1], config["folders"]))
    )

    return aws.s3.BucketPolicy(
        "sftpBucketPolicy",
        bucket=bucket.bucket,
        policy=policy,
    )
