"""
Tests for configuration loading.
"""

import pytest

from simvex.config import Settings
from simvex.core.exceptions import ConfigurationError
from simvex.storage.config import StorageConfig
from simvex.storage.factory import build_storage_backend
from simvex.storage.local import LocalStorageBackend
from simvex.storage.s3 import S3StorageBackend


def make_settings(**overrides) -> Settings:
    values = {
        "STORAGE_BACKEND": "s3",
        "R2_ENDPOINT": "https://r2.test",
        "R2_ACCESS_KEY_ID": "key",
        "R2_SECRET_ACCESS_KEY": "secret",
        "CDN_URL": None,
        "R2_PUBLIC_URL": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_cdn_url_wins():
    config = StorageConfig.from_settings(
        make_settings(CDN_URL="https://cdn.test/", R2_PUBLIC_URL="https://pub.test")
    )

    assert config.cdn_base_url == "https://cdn.test"


def test_public_url_fallback():
    config = StorageConfig.from_settings(make_settings(R2_PUBLIC_URL="https://pub.test"))

    assert config.cdn_base_url == "https://pub.test"


def test_missing_cdn_base_fails():
    with pytest.raises(ConfigurationError) as exc_info:
        StorageConfig.from_settings(make_settings())

    assert exc_info.value.missing == ["CDN_URL or R2_PUBLIC_URL"]


def test_missing_s3_credentials_fail():
    with pytest.raises(ConfigurationError) as exc_info:
        StorageConfig.from_settings(
            make_settings(CDN_URL="https://cdn.test", R2_ENDPOINT=None, R2_SECRET_ACCESS_KEY=None)
        )

    assert exc_info.value.missing == ["R2_ENDPOINT", "R2_SECRET_ACCESS_KEY"]


def test_local_backend_needs_no_credentials(tmp_path):
    config = StorageConfig.from_settings(
        make_settings(
            STORAGE_BACKEND="local",
            LOCAL_STORAGE_PATH=str(tmp_path),
            CDN_URL="https://cdn.test",
            R2_ENDPOINT=None,
            R2_ACCESS_KEY_ID=None,
            R2_SECRET_ACCESS_KEY=None,
        )
    )

    assert isinstance(build_storage_backend(config), LocalStorageBackend)


def test_s3_backend_is_built(tmp_path):
    config = StorageConfig.from_settings(make_settings(CDN_URL="https://cdn.test"))

    backend = build_storage_backend(config)

    assert isinstance(backend, S3StorageBackend)
    assert backend.bucket_name == "simvex"


def test_storage_config_is_immutable():
    config = StorageConfig.from_settings(make_settings(CDN_URL="https://cdn.test"))

    with pytest.raises(AttributeError):
        config.cdn_base_url = "https://elsewhere.test"
