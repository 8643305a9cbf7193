"""
Abstract storage backend interface.
Defines the object store contract used by the upload orchestrator.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator


@dataclass
class StoredObject:
    """An object read back from storage."""

    stream: AsyncIterator[bytes]
    content_type: str
    length: int | None = None


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    Implementations hold their bucket/credential configuration and none of
    the naming policy. They perform no retries.
    """

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """
        Store ``data`` under ``key``, overwriting any existing object.

        Raises:
            StorageException: If the upload fails
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> StoredObject:
        """
        Open an object for streaming.

        Raises:
            StoredFileNotFoundException: If no object exists under ``key``
            RetrievalFailedException: If the read fails for any other reason
        """
        pass

    @abstractmethod
    async def list(self, prefix: str) -> list[str]:
        """
        List objects whose key starts with ``prefix``.

        Only the basename (the part after the final '/') of each key is
        returned. This is lossy: ``models/a.glb`` and ``data/a.glb`` both
        come back as ``a.glb``.

        Raises:
            RetrievalFailedException: If listing fails
        """
        pass


# MIME type mapping for supported formats
FORMAT_MIME_TYPES = {
    "gltf": "model/gltf+json",
    "glb": "model/gltf-binary",
    "usdz": "model/vnd.usdz+zip",
    "obj": "model/obj",
    "stl": "model/stl",
    "fbx": "application/octet-stream",
    "json": "application/json",
}


def get_mime_type(format: str) -> str:
    """Get MIME type for a file extension."""
    return FORMAT_MIME_TYPES.get(format.lower(), "application/octet-stream")
