"""
File: services/position_normalizer.py

Description:
    Converts Traccar position records into the gateway's NormalizedPosition shape so
    that Traccar field naming never reaches a caller.

Author: Emfour Solutions
Created: 2026-09-14
"""

# Standard library imports
from typing import Optional

# Local application imports
from models.tracking import NormalizedPosition, TraccarPosition


def resolve_timestamp(position: TraccarPosition) -> Optional[str]:
    """Prefer the GPS fix time, then the device clock, then Traccar's receive time"""
    return position.fix_time or position.device_time or position.server_time


def normalize_position(position: TraccarPosition) -> NormalizedPosition:
    return NormalizedPosition(
        lat=position.latitude,
        lon=position.longitude,
        speed=position.speed,
        course=position.course,
        fix_time=resolve_timestamp(position),
        address=position.address,
    )
