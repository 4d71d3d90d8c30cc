"""
File: services/vehicle_registry.py

Description:
    Read-only access to the vehicle records the tracking gateway needs. Returns
    immutable TrackedVehicle DTOs so that no ORM object or database session crosses
    into the async provider code.

Author: Emfour Solutions
Created: 2026-09-14
"""

# Standard library imports
import re
from typing import List, Optional

# Third-party imports
from sqlalchemy.exc import SQLAlchemyError

# Local application imports
from database import db
from models.tracking import TrackedVehicle
from models.vehicle import Vehicle
from services.exceptions import InvalidVehicleIdError, VehicleRegistryError
from services.logging_service import get_module_logger

logger = get_module_logger(__name__)

_VEHICLE_ID_PATTERN = re.compile(r"[1-9][0-9]{0,17}")


def parse_vehicle_id(raw_value) -> int:
    """
    Parse a vehicle identifier taken from a URL path.

    Raises:
        InvalidVehicleIdError: If the value is not a positive decimal integer
    """
    if not isinstance(raw_value, str) or not _VEHICLE_ID_PATTERN.fullmatch(raw_value):
        raise InvalidVehicleIdError(raw_value)
    return int(raw_value)


class VehicleRegistry:
    """Looks up vehicles and their Traccar linkage"""

    def get_vehicle(self, vehicle_id: int) -> Optional[TrackedVehicle]:
        try:
            vehicle = db.session.get(Vehicle, vehicle_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load vehicle {vehicle_id}: {e}")
            raise VehicleRegistryError(f"Failed to load vehicle {vehicle_id}", e)

        if vehicle is None:
            return None
        return TrackedVehicle.from_orm(vehicle)

    def list_mapped_vehicles(self) -> List[TrackedVehicle]:
        """All vehicles with a Traccar device id, in stable id order"""
        try:
            vehicles = (
                Vehicle.query.filter(Vehicle.traccar_device_id.isnot(None))
                .order_by(Vehicle.id)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load mapped vehicles: {e}")
            raise VehicleRegistryError("Failed to load mapped vehicles", e)

        return [TrackedVehicle.from_orm(vehicle) for vehicle in vehicles]

    def list_vehicles(self) -> List[TrackedVehicle]:
        try:
            vehicles = Vehicle.query.order_by(Vehicle.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load vehicles: {e}")
            raise VehicleRegistryError("Failed to load vehicles", e)

        return [TrackedVehicle.from_orm(vehicle) for vehicle in vehicles]
