"""
Identity dependencies for FastAPI.

Credentials are validated upstream; the gateway forwards the authenticated
user id in the ``X-User-Id`` header.
"""

from typing import Annotated

from fastapi import Depends, Header, Request

from simvex.config import get_settings
from simvex.core.exceptions import UnauthorizedException

settings = get_settings()


async def get_current_user(
    request: Request,
    x_user_id: str | None = Header(default=None),
) -> str:
    """
    Dependency to get the id of the calling user.

    In development mode (DEV_MODE=true) a missing header falls back to
    DEV_USER_ID.

    Raises:
        UnauthorizedException: If no identity is supplied outside dev mode
    """
    user_id = x_user_id.strip() if x_user_id else None

    if not user_id:
        if not settings.DEV_MODE:
            raise UnauthorizedException("X-User-Id header required")
        user_id = settings.DEV_USER_ID

    request.state.user_id = user_id
    return user_id


CurrentUser = Annotated[str, Depends(get_current_user)]
