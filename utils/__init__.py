"""
Utils package for TrackGate application.

This package provides application helpers shared by the routes and CLI commands.
"""

from .app_helpers import get_tracking_service

__all__ = ["get_tracking_service"]
