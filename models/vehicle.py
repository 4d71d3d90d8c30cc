"""
File: models/vehicle.py

Description:
    Vehicle Model. Holds the reservation platform's view of a car together with its
    optional Traccar linkage. The tracking gateway only reads these records.

Author: Emfour Solutions
Created: 2026-09-14
"""

# Standard library imports
import logging

# Local application imports
from database import TimestampMixin, db

# Module-level logger
logger = logging.getLogger(__name__)


class Vehicle(db.Model, TimestampMixin):
    __tablename__ = "vehicles"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    license_plate = db.Column(db.String(32), nullable=True)
    traccar_device_id = db.Column(db.Integer, nullable=True, index=True)
    traccar_unique_id = db.Column(db.String(64), nullable=True)  # IMEI / serial

    def __init__(
        self,
        name: str,
        license_plate: str = None,
        traccar_device_id: int = None,
        traccar_unique_id: str = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.name = name
        self.license_plate = license_plate
        self.traccar_device_id = traccar_device_id
        self.traccar_unique_id = traccar_unique_id

    @property
    def is_mapped(self) -> bool:
        """Only a Traccar device id links the vehicle to the provider"""
        return self.traccar_device_id is not None

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "license_plate": self.license_plate,
            "traccar_device_id": self.traccar_device_id,
            "traccar_unique_id": self.traccar_unique_id,
            "is_mapped": self.is_mapped,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Vehicle {self.name} device={self.traccar_device_id}>"
