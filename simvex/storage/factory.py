"""
Storage backend factory.
Provides configuration-driven backend selection.
"""

from functools import lru_cache

from simvex.config import get_settings
from simvex.storage.base import StorageBackend
from simvex.storage.config import StorageConfig
from simvex.storage.local import LocalStorageBackend
from simvex.storage.naming import NamingPolicy, NamingScheme
from simvex.storage.s3 import S3StorageBackend


@lru_cache
def get_storage_config() -> StorageConfig:
    """
    Resolve the process-wide storage configuration once.

    Raises:
        ConfigurationError: If required values are missing
    """
    return StorageConfig.from_settings(get_settings())


def build_storage_backend(config: StorageConfig) -> StorageBackend:
    """
    Build a storage backend for ``config``.

    Raises:
        ValueError: If an unknown storage backend is configured
    """
    backend = config.backend.lower()

    if backend == "local":
        return LocalStorageBackend(base_path=config.local_path)
    elif backend == "s3":
        return S3StorageBackend(config)
    else:
        raise ValueError(f"Unknown storage backend: {backend}")


@lru_cache
def get_storage_backend() -> StorageBackend:
    """Get the configured storage backend, created on first use."""
    return build_storage_backend(get_storage_config())


@lru_cache
def get_naming_policy() -> NamingPolicy:
    """Get the naming policy bound to the configured CDN base URL."""
    config = get_storage_config()
    return NamingPolicy(
        cdn_base_url=config.cdn_base_url,
        default_scheme=NamingScheme(config.naming_scheme),
    )


def get_storage() -> StorageBackend:
    """
    Dependency function for FastAPI.

    Usage:
        @app.post("/upload")
        async def upload(storage: StorageBackend = Depends(get_storage)):
            ...
    """
    return get_storage_backend()
