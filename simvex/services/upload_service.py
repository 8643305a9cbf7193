"""
Upload orchestration for project files.

Derives keys through the naming policy, fans puts out concurrently and
reports a batch as successful only when every put succeeded. Objects stored
before a failure are not deleted; their keys are logged as orphans and never
returned to the caller.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from simvex.core.exceptions import UploadFailedException, ValidationException
from simvex.storage.base import StorageBackend, StoredObject, get_mime_type
from simvex.storage.naming import (
    FileRole,
    NamingPolicy,
    NamingScheme,
    StorageLocation,
    file_extension,
)

logger = logging.getLogger(__name__)

UNSAFE_FILENAME_CHARS = ("/", "\\", "\x00")


def validate_filename(filename: str) -> str:
    """
    Reject names that could leave the project folder once used in a key.

    Raises:
        ValidationException: If the name is empty, a dot segment, or has a
            path separator
    """
    if filename in ("", ".", "..") or any(c in filename for c in UNSAFE_FILENAME_CHARS):
        raise ValidationException(
            "Invalid file name",
            details={"filename": filename},
        )
    return filename


@dataclass
class IncomingFile:
    """A file handed over by the HTTP layer."""

    filename: str
    data: bytes
    content_type: str | None = None

    @property
    def mime_type(self) -> str:
        return self.content_type or get_mime_type(file_extension(self.filename))


class UploadService:
    """Service class for project file storage."""

    def __init__(self, storage: StorageBackend, policy: NamingPolicy):
        self.storage = storage
        self.policy = policy

    async def upload_project_files(
        self,
        project_id: str,
        scheme: NamingScheme,
        model_files: Sequence[IncomingFile],
        metadata_file: IncomingFile | None = None,
    ) -> StorageLocation:
        """
        Upload the initial file set of a project.

        Args:
            project_id: Project UUID
            scheme: Naming scheme recorded on the project
            model_files: Binary model files (at least one)
            metadata_file: Optional JSON metadata / scene file

        Returns:
            Location produced by the batch

        Raises:
            ValidationException: If no model file is given
            UploadFailedException: If any put fails
        """
        if not model_files:
            raise ValidationException("At least one model file is required")

        return await self._upload_batch(project_id, scheme, model_files, metadata_file)

    async def upload_additional_files(
        self,
        project_id: str,
        scheme: NamingScheme,
        model_files: Sequence[IncomingFile] | None = None,
        metadata_file: IncomingFile | None = None,
        current: StorageLocation | None = None,
    ) -> StorageLocation | None:
        """
        Append files to an existing project.

        Either input may be absent. With nothing to upload no storage call is
        made and ``current`` is returned unchanged. Otherwise the result is
        ``current`` with the URLs produced by this batch laid over it.

        Raises:
            UploadFailedException: If any put fails
        """
        if not model_files and metadata_file is None:
            return current

        location = await self._upload_batch(project_id, scheme, model_files or [], metadata_file)
        if current is None:
            return location
        return current.overlay(location)

    async def list_project_files(self, project_id: str) -> list[str]:
        """
        List basenames of every object stored for a project.

        Files with the same basename in different subfolders are not
        distinguishable in the result.
        """
        return await self.storage.list(self.policy.project_prefix(project_id))

    async def get_project_file(self, project_id: str, relative_path: str) -> StoredObject:
        """
        Open one stored project file.

        Args:
            project_id: Project UUID
            relative_path: Path below the project prefix (e.g. "models/x.glb")

        Raises:
            ValidationException: If the path escapes the project prefix
            StoredFileNotFoundException: If the object does not exist
        """
        segments = relative_path.split("/")
        if not relative_path or any(part in ("", ".", "..") for part in segments):
            raise ValidationException(
                "Invalid file path",
                details={"path": relative_path},
            )

        key = f"{self.policy.project_prefix(project_id)}/{relative_path}"
        return await self.storage.get(key)

    async def _upload_batch(
        self,
        project_id: str,
        scheme: NamingScheme,
        model_files: Sequence[IncomingFile],
        metadata_file: IncomingFile | None,
    ) -> StorageLocation:
        names = [f.filename for f in model_files]
        if metadata_file is not None:
            names.append(metadata_file.filename)
        for name in names:
            validate_filename(name)

        planned: list[tuple[str, IncomingFile]] = [
            (self.policy.derive_key(project_id, FileRole.MODEL, f.filename, scheme), f)
            for f in model_files
        ]

        metadata_key = None
        if metadata_file is not None:
            metadata_key = self.policy.derive_key(
                project_id, FileRole.METADATA, metadata_file.filename, scheme
            )
            planned.append((metadata_key, metadata_file))

        logger.info(f"Uploading {len(planned)} file(s) for project {project_id} (scheme {scheme.value})")

        results = await asyncio.gather(
            *(self.storage.put(key, f.data, f.mime_type) for key, f in planned),
            return_exceptions=True,
        )

        failed = []
        stored_keys = []
        for (key, f), result in zip(planned, results):
            if isinstance(result, BaseException):
                failed.append((key, f, result))
            else:
                stored_keys.append(key)

        if failed:
            if stored_keys:
                logger.warning(
                    f"Upload batch for project {project_id} failed; "
                    f"{len(stored_keys)} orphaned object(s) left in storage: {stored_keys}"
                )
            raise UploadFailedException(
                message=f"{len(failed)} of {len(planned)} file(s) failed to upload",
                details={
                    "project_id": project_id,
                    "failed": [
                        {"filename": f.filename, "reason": str(error)}
                        for _key, f, error in failed
                    ],
                },
            ) from failed[0][2]

        logger.info(f"Uploaded {len(planned)} file(s) for project {project_id}")

        return self.policy.location_for(
            project_id,
            scheme,
            models_uploaded=bool(model_files),
            metadata_key=metadata_key,
        )
