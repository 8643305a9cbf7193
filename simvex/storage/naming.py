"""
Asset naming policy.

Maps (project id, file role, original filename) to a storage key and a key to
its public CDN URL. Two schemes exist and are not interchangeable: a project
keeps the scheme it was created under for its whole life.

    v1 (legacy)  projects/{id}/models/{uuid}.{ext}      location = model folder + json file URL
                 projects/{id}/data/{uuid}.{ext}
    v2 (current) projects/{id}/{uuid}.{ext}             location = project folder URL
                 projects/{id}/{original metadata name}
"""

import enum
from dataclasses import dataclass, replace
from uuid import uuid4

PROJECT_ROOT = "projects"


class FileRole(str, enum.Enum):
    """Role a file plays within a project upload."""
    MODEL = "model"
    METADATA = "metadata"


class NamingScheme(str, enum.Enum):
    """Versioned key layouts."""
    V1 = "v1"
    V2 = "v2"


@dataclass(frozen=True)
class StorageLocation:
    """Recorded storage location of a project's files."""

    scheme: NamingScheme
    folder_url: str | None = None
    model_folder_url: str | None = None
    json_file_url: str | None = None

    def overlay(self, newer: "StorageLocation") -> "StorageLocation":
        """Return a copy where every URL set on ``newer`` replaces ours."""
        return replace(
            self,
            folder_url=newer.folder_url or self.folder_url,
            model_folder_url=newer.model_folder_url or self.model_folder_url,
            json_file_url=newer.json_file_url or self.json_file_url,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.folder_url or self.model_folder_url or self.json_file_url)


def file_extension(filename: str) -> str:
    """Lowercased suffix after the last '.', or '' when there is none."""
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def opaque_key(folder: str, filename: str) -> str:
    """Random key that keeps only the file extension of ``filename``."""
    ext = file_extension(filename)
    name = f"{uuid4()}.{ext}" if ext else str(uuid4())
    return f"{folder}/{name}"


def original_name_key(folder: str, filename: str) -> str:
    """Key that keeps ``filename`` as-is; re-uploading the same name overwrites."""
    return f"{folder}/{filename}"


class NamingPolicy:
    """
    Derives storage keys and public URLs for project files.

    Args:
        cdn_base_url: Public base URL without a trailing slash
        default_scheme: Scheme assigned to newly created projects
    """

    SUBPATHS = {
        NamingScheme.V1: {FileRole.MODEL: "models", FileRole.METADATA: "data"},
        NamingScheme.V2: {FileRole.MODEL: None, FileRole.METADATA: None},
    }

    def __init__(self, cdn_base_url: str, default_scheme: NamingScheme = NamingScheme.V2):
        self.cdn_base_url = cdn_base_url.rstrip("/")
        self.default_scheme = NamingScheme(default_scheme)

    def project_prefix(self, project_id: str) -> str:
        return f"{PROJECT_ROOT}/{project_id}"

    def folder_key(self, project_id: str, role: FileRole, scheme: NamingScheme | None = None) -> str:
        """Key prefix under which files of ``role`` are stored."""
        scheme = NamingScheme(scheme or self.default_scheme)
        subpath = self.SUBPATHS[scheme][role]
        prefix = self.project_prefix(project_id)
        return f"{prefix}/{subpath}" if subpath else prefix

    def derive_key(
        self,
        project_id: str,
        role: FileRole,
        original_filename: str,
        scheme: NamingScheme | None = None,
    ) -> str:
        """
        Derive the storage key for one uploaded file.

        Model files always get an opaque name. The metadata file is opaque
        under v1 and keeps its original name under v2.
        """
        scheme = NamingScheme(scheme or self.default_scheme)
        folder = self.folder_key(project_id, role, scheme)
        if scheme == NamingScheme.V2 and role == FileRole.METADATA:
            return original_name_key(folder, original_filename)
        return opaque_key(folder, original_filename)

    def derive_url(self, key: str) -> str:
        return f"{self.cdn_base_url}/{key}"

    def key_from_url(self, url: str) -> str:
        """Strip the CDN base; inverse of derive_url."""
        prefix = f"{self.cdn_base_url}/"
        if not url.startswith(prefix):
            raise ValueError(f"URL is not under the CDN base: {url}")
        return url[len(prefix):]

    def location_for(
        self,
        project_id: str,
        scheme: NamingScheme,
        models_uploaded: bool,
        metadata_key: str | None = None,
    ) -> StorageLocation:
        """Build the location produced by one upload batch."""
        scheme = NamingScheme(scheme)
        json_file_url = self.derive_url(metadata_key) if metadata_key else None

        if scheme == NamingScheme.V1:
            model_folder_url = None
            if models_uploaded:
                model_folder_url = self.derive_url(self.folder_key(project_id, FileRole.MODEL, scheme))
            return StorageLocation(
                scheme=scheme,
                model_folder_url=model_folder_url,
                json_file_url=json_file_url,
            )

        return StorageLocation(
            scheme=scheme,
            folder_url=self.derive_url(self.project_prefix(project_id)),
            json_file_url=json_file_url,
        )
