"""
Identity module for the SimVex API.
"""

from simvex.auth.dependencies import CurrentUser, get_current_user

__all__ = [
    "get_current_user",
    "CurrentUser",
]
