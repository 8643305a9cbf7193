"""
Error payload rendering shared by the exception handlers.
"""

from fastapi.responses import JSONResponse

from simvex.core.exceptions import SimvexAPIException

INTERNAL_ERROR = {
    "error": "internal_error",
    "message": "An unexpected error occurred",
}


def error_response(exc: SimvexAPIException) -> JSONResponse:
    """Render an API exception as {"error", "message", "details"?}."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def internal_error_response() -> JSONResponse:
    """Sanitised 500 for unexpected errors; never leaks the traceback."""
    return JSONResponse(status_code=500, content=dict(INTERNAL_ERROR))
