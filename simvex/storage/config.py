"""
Immutable storage configuration.

Built once from Settings at startup and handed to the storage backend and
naming policy at construction time.
"""

from dataclasses import dataclass

from simvex.config import Settings
from simvex.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class StorageConfig:
    """Bucket credentials, public base URL and active naming scheme."""

    backend: str
    cdn_base_url: str
    bucket_name: str
    naming_scheme: str = "v2"
    endpoint_url: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    region: str = "auto"
    local_path: str = "./storage"

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageConfig":
        """
        Resolve storage configuration from application settings.

        The public base URL comes from CDN_URL, falling back to R2_PUBLIC_URL.

        Raises:
            ConfigurationError: If a required value is missing
        """
        missing: list[str] = []

        cdn_base_url = settings.CDN_URL or settings.R2_PUBLIC_URL
        if not cdn_base_url:
            missing.append("CDN_URL or R2_PUBLIC_URL")

        if settings.STORAGE_BACKEND == "s3":
            if not settings.R2_ENDPOINT:
                missing.append("R2_ENDPOINT")
            if not settings.R2_ACCESS_KEY_ID:
                missing.append("R2_ACCESS_KEY_ID")
            if not settings.R2_SECRET_ACCESS_KEY:
                missing.append("R2_SECRET_ACCESS_KEY")

        if missing:
            raise ConfigurationError(
                f"Missing required storage configuration: {', '.join(missing)}",
                missing=missing,
            )

        return cls(
            backend=settings.STORAGE_BACKEND,
            cdn_base_url=cdn_base_url.rstrip("/"),
            bucket_name=settings.R2_BUCKET_NAME,
            naming_scheme=settings.NAMING_SCHEME,
            endpoint_url=settings.R2_ENDPOINT,
            access_key=settings.R2_ACCESS_KEY_ID,
            secret_key=settings.R2_SECRET_ACCESS_KEY,
            region=settings.R2_REGION,
            local_path=settings.LOCAL_STORAGE_PATH,
        )
