"""
FastAPI dependency injection functions.
Provides common dependencies used across endpoints.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from simvex.config import get_settings
from simvex.db.session import get_db
from simvex.services.assistant_client import AssistantClient
from simvex.services.node_service import NodeMetadataResolver
from simvex.services.project_service import ProjectService
from simvex.services.upload_service import UploadService
from simvex.storage import NamingPolicy, StorageBackend, get_naming_policy, get_storage


@lru_cache
def get_node_resolver() -> NodeMetadataResolver:
    return NodeMetadataResolver(timeout=get_settings().NODE_FETCH_TIMEOUT)


@lru_cache
def get_assistant_client() -> AssistantClient:
    return AssistantClient(get_settings().ASSISTANT_BASE_URL)


def get_upload_service(
    storage: StorageBackend = Depends(get_storage),
    policy: NamingPolicy = Depends(get_naming_policy),
) -> UploadService:
    return UploadService(storage, policy)


def get_project_service(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


# Type aliases for cleaner endpoint signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]
Naming = Annotated[NamingPolicy, Depends(get_naming_policy)]
Projects = Annotated[ProjectService, Depends(get_project_service)]
Uploads = Annotated[UploadService, Depends(get_upload_service)]
NodeResolver = Annotated[NodeMetadataResolver, Depends(get_node_resolver)]
Assistant = Annotated[AssistantClient, Depends(get_assistant_client)]
