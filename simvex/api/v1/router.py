"""
API v1 Router - Aggregates all v1 endpoints.
Base Path: /api/v1
"""

from fastapi import APIRouter

from simvex.api.v1 import health, projects
from simvex.schemas.error import ErrorResponse

api_router = APIRouter()

# Error payloads shared by every project endpoint
PROJECT_ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "No identity supplied"},
    404: {"model": ErrorResponse, "description": "Project, member, node or file not found"},
    409: {"model": ErrorResponse, "description": "Membership conflict"},
    502: {"model": ErrorResponse, "description": "Upload or retrieval failed"},
}

# Include endpoint routers
api_router.include_router(health.router, tags=["health"])
api_router.include_router(
    projects.router,
    prefix="/projects",
    tags=["projects"],
    responses=PROJECT_ERROR_RESPONSES,
)
