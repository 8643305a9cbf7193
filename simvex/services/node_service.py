"""
Node metadata lookups against a project's uploaded scene document.
"""

import logging
from typing import Any

import httpx

from simvex.core.exceptions import NodeNotFoundException, RetrievalFailedException
from simvex.models.project import Project

logger = logging.getLogger(__name__)

ABSENT_STATUS_CODES = {404, 410}


class NodeMetadataResolver:
    """
    Resolve single named nodes from a project's metadata JSON.

    The document is fetched from the CDN on every call; nothing is cached,
    so callers always see the latest upload.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.transport = transport
        self.timeout = timeout

    async def get_node(self, project: Project, node_name: str) -> Any:
        """
        Return the sub-document stored under ``node_name``.

        Args:
            project: Project whose metadata URL is used
            node_name: Top-level key in the metadata document

        Returns:
            The node payload exactly as stored (any JSON value)

        Raises:
            NodeNotFoundException: If the project has no metadata file, the
                document is absent, or it has no such top-level key
            RetrievalFailedException: If the fetch fails for another reason
        """
        url = project.json_file_url
        if not url:
            raise NodeNotFoundException(project.id, node_name)

        # TODO: cache documents keyed by json_file_url once uploads invalidate it
        document = await self._fetch_document(project.id, node_name, url)

        if not isinstance(document, dict) or node_name not in document:
            raise NodeNotFoundException(project.id, node_name)

        return document[node_name]

    async def _fetch_document(self, project_id: str, node_name: str, url: str) -> Any:
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                response = await client.get(url)
            except httpx.HTTPError as e:
                logger.warning(f"Metadata fetch failed for project {project_id}: {e}")
                raise RetrievalFailedException(
                    "Failed to fetch project metadata",
                    details={"project_id": project_id, "reason": str(e)},
                ) from e

        if response.status_code in ABSENT_STATUS_CODES:
            raise NodeNotFoundException(project_id, node_name)

        if response.is_error:
            logger.warning(
                f"Metadata fetch for project {project_id} returned HTTP {response.status_code}"
            )
            raise RetrievalFailedException(
                "Failed to fetch project metadata",
                details={"project_id": project_id, "status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"Metadata document for project {project_id} is not valid JSON")
            raise RetrievalFailedException(
                "Project metadata is not valid JSON",
                details={"project_id": project_id},
            ) from e
