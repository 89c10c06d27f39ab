"""boto3 client factory shared by the Bedrock and Polly integrations.

Both services read credentials from ``AWS_ACCESS_KEY``/``AWS_SECRET_KEY`` when
set; Bedrock may override them with its own ``BEDROCK_API_KEY``. With neither
configured, boto3's default credential chain (profile, instance role) applies.
"""

from __future__ import annotations

from typing import Any

import boto3

from signweave.config.settings import settings


def _static_credentials(
    access_key: str | None,
    secret_key: str | None,
) -> dict[str, str]:
    if access_key and secret_key:
        return {"aws_access_key_id": access_key, "aws_secret_access_key": secret_key}
    return {}


def create_boto3_client(
    service_name: str,
    *,
    region_name: str | None = None,
    aws_access_key_id: str | None = None,
    aws_secret_access_key: str | None = None,
) -> Any:
    """Build a client for ``service_name``; explicit keys beat the shared AWS settings."""

    credentials = _static_credentials(aws_access_key_id, aws_secret_access_key) or _static_credentials(
        settings.aws.access_key, settings.aws.secret_key
    )
    return boto3.client(
        service_name,
        region_name=region_name or settings.aws.region,
        **credentials,
    )


__all__ = ["create_boto3_client"]
