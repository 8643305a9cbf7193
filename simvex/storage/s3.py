"""
S3-compatible storage backend.
Supports Cloudflare R2, AWS S3 and other S3-compatible services like MinIO.
"""

import asyncio
from typing import Any, AsyncIterator

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from simvex.core.exceptions import (
    RetrievalFailedException,
    StorageException,
    StoredFileNotFoundException,
)
from simvex.storage.base import StorageBackend, StoredObject
from simvex.storage.config import StorageConfig


CHUNK_SIZE = 1024 * 1024  # 1MB
NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


def _error_code(error: ClientError) -> str | None:
    return error.response.get("Error", {}).get("Code")


class S3StorageBackend(StorageBackend):
    """
    S3-compatible object storage implementation.

    boto3 is blocking, so every call runs in a worker thread and the event
    loop stays free while puts of one batch are in flight. The client is
    shared across requests; boto3 clients are thread-safe.
    """

    def __init__(self, config: StorageConfig, client: Any | None = None):
        self.bucket_name = config.bucket_name
        self.endpoint_url = config.endpoint_url

        if client is None:
            client = boto3.client(
                "s3",
                endpoint_url=config.endpoint_url,
                aws_access_key_id=config.access_key,
                aws_secret_access_key=config.secret_key,
                region_name=config.region,
                config=Config(
                    signature_version="s3v4",
                    retries={"max_attempts": 1, "mode": "standard"},
                ),
            )
        self.client = client

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageException(
                message=f"Failed to upload object to S3: {str(e)}",
                details={"key": key, "bucket": self.bucket_name},
            )

    async def get(self, key: str) -> StoredObject:
        try:
            response = await asyncio.to_thread(
                self.client.get_object,
                Bucket=self.bucket_name,
                Key=key,
            )
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                raise StoredFileNotFoundException(key)
            raise RetrievalFailedException(
                message=f"Failed to download object from S3: {str(e)}",
                details={"key": key, "bucket": self.bucket_name},
            )
        except BotoCoreError as e:
            raise RetrievalFailedException(
                message=f"Failed to download object from S3: {str(e)}",
                details={"key": key, "bucket": self.bucket_name},
            )

        return StoredObject(
            stream=self._iter_body(response["Body"], key),
            content_type=response.get("ContentType") or "application/octet-stream",
            length=response.get("ContentLength"),
        )

    async def _iter_body(self, body: Any, key: str) -> AsyncIterator[bytes]:
        try:
            while chunk := await asyncio.to_thread(body.read, CHUNK_SIZE):
                yield chunk
        except (ClientError, BotoCoreError) as e:
            raise RetrievalFailedException(
                message=f"Failed while streaming object from S3: {str(e)}",
                details={"key": key, "bucket": self.bucket_name},
            )
        finally:
            body.close()

    def _list_keys(self, prefix: str) -> list[str]:
        paginator = self.client.get_paginator("list_objects_v2")
        keys = []
        for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix):
            for content in page.get("Contents", []):
                if "Key" in content:
                    keys.append(content["Key"])
        return keys

    async def list(self, prefix: str) -> list[str]:
        try:
            keys = await asyncio.to_thread(self._list_keys, prefix)
        except (ClientError, BotoCoreError) as e:
            raise RetrievalFailedException(
                message=f"Failed to list objects in S3: {str(e)}",
                details={"prefix": prefix, "bucket": self.bucket_name},
            )
        return [key.rsplit("/", 1)[-1] for key in keys]
