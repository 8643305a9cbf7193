"""
Health endpoint. No identity required.
"""

import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from simvex.db.session import is_using_sqlite_fallback
from simvex.dependencies import DbSession, Naming

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(db: DbSession, naming: Naming):
    """
    Liveness plus a database round trip.

    Returns "ok" when the database answers and "degraded" with the failing
    check otherwise. Always 200 so load balancers can read the body.
    """
    checks = {"database": "ok"}

    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Health check database failure: {e}")
        checks["database"] = str(e)

    healthy = all(result == "ok" for result in checks.values())

    return {
        "status": "ok" if healthy else "degraded",
        "checks": checks,
        "database": "sqlite (dev fallback)" if is_using_sqlite_fallback() else "postgresql",
        "namingScheme": naming.default_scheme.value,
    }
