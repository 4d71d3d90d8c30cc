# Third-party imports
from typing import TYPE_CHECKING

from flask import current_app

if TYPE_CHECKING:
    from services.tracking_service import TrackingService


def get_tracking_service() -> "TrackingService":
    """Get tracking service from current app with error handling"""
    tracking_service = getattr(current_app, "tracking_service", None)
    if tracking_service is None:
        raise ValueError("Tracking service not initialized in current_app")
    return tracking_service
