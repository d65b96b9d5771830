"""
S3 Connector
Object storage for uploaded files (AWS S3 or any S3-compatible endpoint)

CONFIGURATION:
- AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY: credentials (required)
- AWS_S3_BUCKET_NAME: target bucket (required)
- AWS_REGION: default us-east-1
- AWS_ENDPOINT: optional, for MinIO / R2 / Spaces
- AWS_S3_SIGNED_URL_EXPIRATION: default lifetime of presigned URLs (seconds)

Author: TM3
Date: 2026-01-20
"""
import logging
from functools import lru_cache
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from gestion.core.config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an S3 operation fails"""


class S3Connector:
    """
    Thin wrapper over a boto3 S3 client

    Handles:
    - Uploads / deletes
    - Presigned GET URLs
    """

    def __init__(
        self,
        bucket_name: str = None,
        access_key_id: str = None,
        secret_access_key: str = None,
        region: str = None,
        endpoint: Optional[str] = None,
        signed_url_expiration: int = None,
    ):
        self.bucket_name = bucket_name or settings.AWS_S3_BUCKET_NAME
        access_key_id = access_key_id or settings.AWS_ACCESS_KEY_ID
        secret_access_key = secret_access_key or settings.AWS_SECRET_ACCESS_KEY
        self.default_expiration = signed_url_expiration or settings.AWS_S3_SIGNED_URL_EXPIRATION

        if not access_key_id or not secret_access_key or not self.bucket_name:
            raise ValueError(
                "AWS S3 configuration is missing. "
                "Set AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY and AWS_S3_BUCKET_NAME"
            )

        self.client = boto3.client(
            "s3",
            region_name=region or settings.AWS_REGION,
            endpoint_url=endpoint or settings.AWS_ENDPOINT or None,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )
        logger.info(f"S3 client initialized for bucket {self.bucket_name}")

    def upload_file(self, key: str, body: bytes, mime_type: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=body,
                ContentType=mime_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload file to S3: {key} - {e}")
            raise StorageError(str(e)) from e
        logger.info(f"File uploaded to S3: {key}")

    def delete_file(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket_name, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete file from S3: {key} - {e}")
            raise StorageError(f"Failed to delete file: {e}") from e
        logger.info(f"File deleted from S3: {key}")

    def get_file(self, key: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=key)
            return response["Body"].read()
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to download file from S3: {key} - {e}")
            raise StorageError(f"Failed to download file: {e}") from e

    def get_signed_url(self, key: str, expires_in: Optional[int] = None) -> str:
        try:
            url = self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": key},
                ExpiresIn=expires_in or self.default_expiration,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to generate signed URL for: {key} - {e}")
            raise StorageError(f"Failed to generate signed URL: {e}") from e
        logger.debug(f"Signed URL generated for: {key}")
        return url


@lru_cache()
def get_s3_connector() -> S3Connector:
    """Shared connector, created on first use"""
    return S3Connector()
