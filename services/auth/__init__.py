"""
File: services/auth/__init__.py

Description:
    Authorization helpers for the admin tracking API

Author: Emfour Solutions
Created: 2026-09-14
"""

from .decorators import ADMIN_ROLE, get_current_admin_id, require_admin

__all__ = ["ADMIN_ROLE", "get_current_admin_id", "require_admin"]
