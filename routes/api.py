"""
File: routes/api.py

Description:
    API blueprint providing health monitoring endpoints for the TrackGate
    application: a basic liveness check and a tracking integration check that
    reports configuration state without contacting Traccar.

Author: Emfour Solutions
Created: 2026-09-14
"""

# Standard library imports
from datetime import datetime, timezone

# Third-party imports
from flask import Blueprint, jsonify

# Local application imports
from services.logging_service import get_module_logger
from services.version import get_version
from utils.app_helpers import get_tracking_service

logger = get_module_logger(__name__)

bp = Blueprint("api", __name__)


@bp.route("/health")
def health_check():
    """Basic health check endpoint"""
    return jsonify(
        {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": get_version(),
            "service": "trackgate",
        }
    )


@bp.route("/health/tracking")
def tracking_health():
    """Tracking integration state; degraded when Traccar is not configured"""
    try:
        tracking_status = get_tracking_service().get_status()
    except ValueError as e:
        logger.error(f"Tracking health check failed: {e}")
        return (
            jsonify(
                {
                    "status": "unhealthy",
                    "error": str(e),
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                }
            ),
            503,
        )

    status = "healthy" if tracking_status["traccar_configured"] else "degraded"
    return jsonify(
        {
            "status": status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "tracking": tracking_status,
        }
    )
