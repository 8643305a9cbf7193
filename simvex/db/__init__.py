"""Database module for the SimVex API."""

from simvex.db.base import Base
from simvex.db.session import get_db, engine, AsyncSessionLocal

__all__ = ["Base", "get_db", "engine", "AsyncSessionLocal"]
