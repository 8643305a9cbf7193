"""
Tests for the asset naming policy.
"""

import re

import pytest

from simvex.storage.naming import (
    FileRole,
    NamingPolicy,
    NamingScheme,
    StorageLocation,
    file_extension,
)

CDN = "https://cdn.test"
UUID = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"


@pytest.fixture
def policy() -> NamingPolicy:
    return NamingPolicy(CDN + "/")


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("car.glb", "glb"),
        ("Car.GLB", "glb"),
        ("archive.tar.gz", "gz"),
        ("README", ""),
        (".hidden", "hidden"),
    ],
)
def test_file_extension(filename: str, expected: str):
    assert file_extension(filename) == expected


def test_v2_model_key_is_opaque(policy: NamingPolicy):
    key = policy.derive_key("p1", FileRole.MODEL, "Secret Design.GLB", NamingScheme.V2)

    assert re.fullmatch(rf"projects/p1/{UUID}\.glb", key)
    assert "Secret" not in key


def test_v2_metadata_keeps_original_name(policy: NamingPolicy):
    key = policy.derive_key("p1", FileRole.METADATA, "scene.json", NamingScheme.V2)

    assert key == "projects/p1/scene.json"


def test_v1_keys_use_role_subfolders(policy: NamingPolicy):
    model = policy.derive_key("p1", FileRole.MODEL, "car.glb", NamingScheme.V1)
    metadata = policy.derive_key("p1", FileRole.METADATA, "scene.json", NamingScheme.V1)

    assert re.fullmatch(rf"projects/p1/models/{UUID}\.glb", model)
    assert re.fullmatch(rf"projects/p1/data/{UUID}\.json", metadata)


def test_key_without_extension(policy: NamingPolicy):
    key = policy.derive_key("p1", FileRole.MODEL, "mesh", NamingScheme.V2)

    assert re.fullmatch(rf"projects/p1/{UUID}", key)


def test_opaque_keys_never_collide(policy: NamingPolicy):
    keys = {policy.derive_key("p1", FileRole.MODEL, "car.glb") for _ in range(50)}

    assert len(keys) == 50


@pytest.mark.parametrize("scheme", list(NamingScheme))
@pytest.mark.parametrize("role", list(FileRole))
@pytest.mark.parametrize("name", ["car.glb", "scene.json", "no_extension", "UPPER.OBJ"])
def test_url_round_trip(policy: NamingPolicy, scheme: NamingScheme, role: FileRole, name: str):
    """Stripping the CDN base from a derived URL recovers the key."""
    key = policy.derive_key("project-42", role, name, scheme)
    url = policy.derive_url(key)

    assert url == f"{CDN}/{key}"
    assert policy.key_from_url(url) == key


def test_key_from_foreign_url(policy: NamingPolicy):
    with pytest.raises(ValueError):
        policy.key_from_url("https://elsewhere.test/projects/p1/a.glb")


def test_default_scheme(policy: NamingPolicy):
    legacy = NamingPolicy(CDN, default_scheme=NamingScheme.V1)

    assert policy.default_scheme == NamingScheme.V2
    assert legacy.derive_key("p1", FileRole.METADATA, "scene.json").startswith("projects/p1/data/")


def test_v2_location(policy: NamingPolicy):
    location = policy.location_for("p1", NamingScheme.V2, models_uploaded=True, metadata_key="projects/p1/scene.json")

    assert location == StorageLocation(
        scheme=NamingScheme.V2,
        folder_url=f"{CDN}/projects/p1",
        json_file_url=f"{CDN}/projects/p1/scene.json",
    )


def test_v1_location(policy: NamingPolicy):
    location = policy.location_for("p1", NamingScheme.V1, models_uploaded=True, metadata_key="projects/p1/data/x.json")

    assert location.folder_url is None
    assert location.model_folder_url == f"{CDN}/projects/p1/models"
    assert location.json_file_url == f"{CDN}/projects/p1/data/x.json"


def test_v1_location_metadata_only(policy: NamingPolicy):
    location = policy.location_for("p1", NamingScheme.V1, models_uploaded=False, metadata_key="projects/p1/data/x.json")

    assert location.model_folder_url is None
    assert location.json_file_url == f"{CDN}/projects/p1/data/x.json"


def test_location_overlay():
    current = StorageLocation(
        scheme=NamingScheme.V1,
        model_folder_url=f"{CDN}/projects/p1/models",
        json_file_url=f"{CDN}/projects/p1/data/old.json",
    )
    newer = StorageLocation(scheme=NamingScheme.V1, json_file_url=f"{CDN}/projects/p1/data/new.json")

    merged = current.overlay(newer)

    assert merged.model_folder_url == current.model_folder_url
    assert merged.json_file_url == newer.json_file_url
    assert not merged.is_empty
    assert StorageLocation(scheme=NamingScheme.V2).is_empty
