"""
ABOUTME: Admin authorization decorator for the tracking API routes
ABOUTME: Reads the admin identity from the Flask session and exposes it on flask.g

File: services/auth/decorators.py

Description:
    The tracking gateway does not authenticate users itself. An upstream login
    flow stores the user id and role in the Flask session; these decorators only
    check that the caller is a logged in admin and publish the admin id for the
    rate limiter.

Author: Emfour Solutions
Created: 2026-09-14
"""

# Standard library imports
from functools import wraps
from typing import Callable, Optional

# Third-party imports
from flask import g, jsonify, request, session

# Local application imports
from services.logging_service import get_module_logger

logger = get_module_logger(__name__)

ADMIN_ROLE = "admin"


def get_current_admin_id() -> Optional[str]:
    """
    Get the id of the admin making the current request

    Returns:
        Admin id as a string, or None if the caller is not a logged in admin
    """
    if hasattr(g, "current_admin_id"):
        return g.current_admin_id

    user_id = session.get("user_id")
    role = session.get("role")
    if user_id is None or role != ADMIN_ROLE:
        return None
    return str(user_id)


def require_admin(f: Callable) -> Callable:
    """
    Decorator to require an admin session for a route

    Responds with JSON 401 when nobody is logged in and 403 when the
    logged in user is not an admin.
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        user_id = session.get("user_id")

        if user_id is None:
            logger.warning(
                f"Unauthenticated access attempt to {request.endpoint} from {request.remote_addr}"
            )
            return (
                jsonify(
                    {
                        "error": "Authentication required",
                        "message": "You must be logged in to access this resource",
                        "status": 401,
                    }
                ),
                401,
            )

        if session.get("role") != ADMIN_ROLE:
            logger.warning(
                f"Insufficient permissions for user {user_id} to access {request.endpoint}"
            )
            return (
                jsonify(
                    {
                        "error": "Insufficient permissions",
                        "message": "Administrator access required",
                        "status": 403,
                    }
                ),
                403,
            )

        g.current_admin_id = str(user_id)
        return f(*args, **kwargs)

    return decorated_function
