"""
File: routes/tracking.py

Description:
    Admin tracking API blueprint. Exposes the current location of a single
    vehicle and of the whole mapped fleet for the admin map. Views stay thin:
    authorization comes from require_admin and every decision about status,
    HTTP code and payload shape is made by the tracking service.

Author: Emfour Solutions
Created: 2026-09-14
"""

# Third-party imports
from flask import Blueprint, jsonify

# Local application imports
from services.auth import get_current_admin_id, require_admin
from services.logging_service import get_module_logger
from utils.app_helpers import get_tracking_service

logger = get_module_logger(__name__)

bp = Blueprint("tracking", __name__)


@bp.route("/cars/<car_id>/tracking", methods=["GET"])
@require_admin
def car_tracking(car_id):
    """Current location of one vehicle"""
    payload, status_code = get_tracking_service().get_car_tracking(
        car_id, get_current_admin_id()
    )
    return jsonify(payload.to_dict()), status_code


@bp.route("/fleet/tracking", methods=["GET"])
@require_admin
def fleet_tracking():
    """Current location of every vehicle mapped to a Traccar device"""
    payload, status_code = get_tracking_service().get_fleet_tracking(get_current_admin_id())
    return jsonify(payload.to_dict()), status_code
