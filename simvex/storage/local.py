"""
Local filesystem storage backend.
Stores objects on the local filesystem for development and tests.
"""

import asyncio
import os
from pathlib import Path
from typing import AsyncIterator

import aiofiles
import aiofiles.os

from simvex.core.exceptions import (
    RetrievalFailedException,
    StorageException,
    StoredFileNotFoundException,
    ValidationException,
)
from simvex.storage.base import StorageBackend, StoredObject, get_mime_type
from simvex.storage.naming import file_extension

CHUNK_SIZE = 1024 * 1024  # 1MB


class LocalStorageBackend(StorageBackend):
    """
    Local filesystem storage implementation.

    Objects live under ``base_path`` with the key used as the relative path.
    Content types are inferred from the key's extension on read.
    """

    def __init__(self, base_path: str):
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        full_path = (self.base_path / key).resolve()
        if not full_path.is_relative_to(self.base_path):
            raise ValidationException("Storage key escapes the storage root", details={"key": key})
        return full_path

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        full_path = self._get_full_path(key)

        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(full_path, "wb") as f:
                await f.write(data)

        except OSError as e:
            raise StorageException(
                message=f"Failed to upload object: {str(e)}",
                details={"key": key},
            )

    async def get(self, key: str) -> StoredObject:
        full_path = self._get_full_path(key)

        if not full_path.is_file():
            raise StoredFileNotFoundException(key)

        try:
            stat = await aiofiles.os.stat(full_path)
        except OSError as e:
            raise RetrievalFailedException(
                message=f"Failed to read object: {str(e)}",
                details={"key": key},
            )

        return StoredObject(
            stream=self._iter_file(full_path, key),
            content_type=get_mime_type(file_extension(key)),
            length=stat.st_size,
        )

    async def _iter_file(self, full_path: Path, key: str) -> AsyncIterator[bytes]:
        try:
            async with aiofiles.open(full_path, "rb") as f:
                while chunk := await f.read(CHUNK_SIZE):
                    yield chunk
        except OSError as e:
            raise RetrievalFailedException(
                message=f"Failed to read object: {str(e)}",
                details={"key": key},
            )

    def _scan_keys(self, prefix: str) -> list[str]:
        # Only the directory the prefix points into needs walking
        start = self._get_full_path(prefix)
        if not start.is_dir():
            start = start.parent
        if not start.is_dir():
            return []

        keys = []
        for root, _dirs, files in os.walk(start):
            for name in files:
                relative = Path(root, name).relative_to(self.base_path)
                keys.append(relative.as_posix())
        return keys

    async def list(self, prefix: str) -> list[str]:
        try:
            keys = await asyncio.to_thread(self._scan_keys, prefix)
        except OSError as e:
            raise RetrievalFailedException(
                message=f"Failed to list objects: {str(e)}",
                details={"prefix": prefix},
            )
        return [key.rsplit("/", 1)[-1] for key in sorted(keys) if key.startswith(prefix)]
