"""
File: models/__init__.py

Description:
    Package initialisation for the models

Author: Emfour Solutions
Created: 2026-09-14
Last Modified: 2026-10-18
"""

from database import TimestampMixin, db

# Local application imports
from .tracking import (
    CarTrackingPayload,
    FleetTrackingPayload,
    FleetVehicleEntry,
    NormalizedPosition,
    TraccarDevice,
    TraccarPosition,
    TrackedVehicle,
    TrackingStatus,
)
from .vehicle import Vehicle

__all__ = [
    "db",
    "TimestampMixin",
    "Vehicle",
    "TrackingStatus",
    "TrackedVehicle",
    "TraccarDevice",
    "TraccarPosition",
    "NormalizedPosition",
    "CarTrackingPayload",
    "FleetVehicleEntry",
    "FleetTrackingPayload",
]
