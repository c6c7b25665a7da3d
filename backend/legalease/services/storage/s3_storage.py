"""
S3 blob storage for uploaded legal documents.
Works against AWS or any S3-compatible endpoint (MinIO, LocalStack).

boto3 is synchronous, so every call is pushed onto the default executor.
"""
import asyncio
from functools import partial
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .base import FileStorageInterface
from ...core.logging_config import get_logger

logger = get_logger(__name__)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class S3FileStorage(FileStorageInterface):
    """Document blobs in a single bucket, keyed documents/{owner}/{file_name}."""

    def __init__(
        self,
        bucket_name: str,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        region_name: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        client=None,
    ):
        """
        Args:
            bucket_name: Bucket holding every document blob
            aws_access_key_id: Access key, or None to use the instance role
            aws_secret_access_key: Secret key, or None to use the instance role
            region_name: Bucket region
            endpoint_url: Custom endpoint for S3-compatible services
            client: Pre-built S3 client (tests pass a fake here)
        """
        self.bucket_name = bucket_name
        self.region_name = region_name
        self.s3_client = client or boto3.client(
            "s3",
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            region_name=region_name,
            endpoint_url=endpoint_url,
            config=Config(signature_version="s3v4", retries={"max_attempts": 3}),
        )

    async def _run(self, fn, **kwargs):
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, partial(fn, Bucket=self.bucket_name, **kwargs))

    async def initialize(self):
        """Fail fast at startup if the bucket is missing or not ours."""
        try:
            await self._run(self.s3_client.head_bucket)
        except ClientError as e:
            code = _error_code(e)
            if code in _MISSING_CODES:
                raise ValueError(f"S3 bucket '{self.bucket_name}' does not exist") from e
            if code == "403":
                raise ValueError(f"Access denied to S3 bucket '{self.bucket_name}'") from e
            raise ValueError(f"Error accessing S3 bucket '{self.bucket_name}': {e}") from e
        logger.info(f"Using S3 bucket '{self.bucket_name}' ({self.region_name})")

    async def close(self):
        pass

    async def save_bytes(self, data: bytes, key: str, content_type: str) -> str:
        await self._run(
            self.s3_client.put_object,
            Key=key,
            Body=data,
            ContentType=content_type or "application/octet-stream",
        )
        logger.debug(f"Stored {len(data)} bytes at s3://{self.bucket_name}/{key}")
        return key

    async def get_file(self, key: str) -> bytes:
        try:
            response = await self._run(self.s3_client.get_object, Key=key)
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                raise FileNotFoundError(f"No blob stored at {key}") from e
            raise
        return response["Body"].read()

    async def delete_file(self, key: str) -> bool:
        # delete_object succeeds for absent keys, so existence is checked first
        if not await self.file_exists(key):
            return False
        await self._run(self.s3_client.delete_object, Key=key)
        return True

    async def file_exists(self, key: str) -> bool:
        try:
            await self._run(self.s3_client.head_object, Key=key)
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                return False
            raise
        return True
