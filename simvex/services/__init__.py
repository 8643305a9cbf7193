"""
Business logic services for the SimVex API.
Services handle core operations separate from API endpoints.
"""

from simvex.services.assistant_client import AssistantClient, AssistantReply
from simvex.services.node_service import NodeMetadataResolver
from simvex.services.project_service import ProjectService
from simvex.services.upload_service import IncomingFile, UploadService

__all__ = [
    "AssistantClient",
    "AssistantReply",
    "IncomingFile",
    "NodeMetadataResolver",
    "ProjectService",
    "UploadService",
]
