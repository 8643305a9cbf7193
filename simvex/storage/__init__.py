"""
Storage layer for the SimVex API.
Object store backends (S3/R2, local filesystem) and the asset naming policy.
"""

from simvex.storage.base import StorageBackend, StoredObject, get_mime_type, FORMAT_MIME_TYPES
from simvex.storage.config import StorageConfig
from simvex.storage.local import LocalStorageBackend
from simvex.storage.s3 import S3StorageBackend
from simvex.storage.naming import (
    FileRole,
    NamingPolicy,
    NamingScheme,
    StorageLocation,
)
from simvex.storage.factory import (
    build_storage_backend,
    get_naming_policy,
    get_storage,
    get_storage_backend,
    get_storage_config,
)

__all__ = [
    "StorageBackend",
    "StoredObject",
    "StorageConfig",
    "LocalStorageBackend",
    "S3StorageBackend",
    "FileRole",
    "NamingPolicy",
    "NamingScheme",
    "StorageLocation",
    "build_storage_backend",
    "get_naming_policy",
    "get_storage",
    "get_storage_backend",
    "get_storage_config",
    "get_mime_type",
    "FORMAT_MIME_TYPES",
]
