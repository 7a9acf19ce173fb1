from __future__ import annotations

from typing import Any

import boto3

from db.settings import SeedSettings


def create_client(settings: SeedSettings) -> Any:  # noqa: ANN401 - botocore builds client classes at runtime
    """
    Build the DynamoDB client the seed script talks to.

    Non-production targets DynamoDB Local with placeholder credentials. Production uses the
    configured region and, when present, explicit credentials; otherwise boto3's default chain.
    """
    if not settings.is_production:
        return boto3.client(
            "dynamodb",
            endpoint_url=settings.dynamodb_endpoint or settings.local_endpoint,
            region_name=settings.local_region,
            aws_access_key_id=settings.local_access_key_id,
            aws_secret_access_key=settings.local_secret_access_key,
        )
    return boto3.client(
        "dynamodb",
        endpoint_url=settings.dynamodb_endpoint,
        region_name=settings.aws_region,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
    )
