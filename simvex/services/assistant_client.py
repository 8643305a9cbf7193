"""Client for the external AI assistant service."""

import logging
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from simvex.core.exceptions import AssistantUnavailableException, ServiceUnavailableException

logger = logging.getLogger(__name__)


@dataclass
class AssistantReply:
    """Assistant response, relayed to the caller unchanged."""

    body: bytes
    content_type: str
    status_code: int


class AssistantClient:
    def __init__(
        self,
        base_url: str | None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.transport = transport

    async def ask(self, project_id: str, node_name: str, content: str) -> AssistantReply:
        """
        Forward a question about one node.

        Raises:
            ServiceUnavailableException: If no assistant URL is configured
            AssistantUnavailableException: If the assistant cannot be reached
        """
        if not self.base_url:
            raise ServiceUnavailableException("AI assistant is not configured")

        url = f"{self.base_url}/assistant/{quote(project_id, safe='')}/{quote(node_name, safe='')}"

        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.post(url, json={"content": content})
            except httpx.HTTPError as e:
                logger.warning(f"Assistant request failed for project {project_id}: {e}")
                raise AssistantUnavailableException("AI assistant could not be reached") from e

        return AssistantReply(
            body=response.content,
            content_type=response.headers.get("content-type", "application/json"),
            status_code=response.status_code,
        )
