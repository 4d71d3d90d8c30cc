"""
ABOUTME: Data Transfer Objects for the tracking gateway wire format and Traccar records
ABOUTME: Keeps raw Traccar shapes inside the gateway and exposes one stable response shape

File: models/tracking.py

Description:
    Immutable data transfer objects used by the tracking gateway. Raw Traccar device
    and position records are parsed into typed objects at the provider boundary and
    never leave the gateway; callers only ever see TrackedVehicle summaries and
    NormalizedPosition values serialized through the payload classes below.

Key features:
    - Closed TrackingStatus enumeration shared by single-vehicle and fleet responses
    - TraccarDevice / TraccarPosition parsing from Traccar REST JSON
    - TrackedVehicle DTO built from the Vehicle ORM model without session dependencies
    - camelCase serialization matching the admin UI contract

Author: Emfour Solutions
Created: 2026-09-14
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TrackingStatus(str, Enum):
    """Outcome attached to every tracking result"""

    OK = "ok"
    NO_FIX_YET = "no_fix_yet"
    NOT_MAPPED = "not_mapped"
    DEVICE_NOT_FOUND = "device_not_found"
    CAR_NOT_FOUND = "car_not_found"
    TRACCAR_NOT_CONFIGURED = "traccar_not_configured"
    TRACCAR_ERROR = "traccar_error"
    RATE_LIMITED = "rate_limited"


@dataclass(frozen=True)
class TraccarDevice:
    """Device record as returned by GET /api/devices/{id}"""

    id: int
    unique_id: Optional[str] = None
    position_id: Optional[int] = None
    name: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TraccarDevice":
        # Traccar reports positionId 0 for devices that never sent a fix
        return cls(
            id=int(data["id"]),
            unique_id=data.get("uniqueId"),
            position_id=data.get("positionId") or None,
            name=data.get("name"),
        )


@dataclass(frozen=True)
class TraccarPosition:
    """Position record as returned by GET /api/positions/{id}"""

    id: int
    device_id: int
    latitude: float
    longitude: float
    speed: Optional[float] = None
    course: Optional[float] = None
    fix_time: Optional[str] = None
    device_time: Optional[str] = None
    server_time: Optional[str] = None
    address: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TraccarPosition":
        return cls(
            id=int(data["id"]),
            device_id=int(data["deviceId"]),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            speed=data.get("speed"),
            course=data.get("course"),
            fix_time=data.get("fixTime"),
            device_time=data.get("deviceTime"),
            server_time=data.get("serverTime"),
            address=data.get("address"),
        )


@dataclass(frozen=True)
class NormalizedPosition:
    """The only position shape ever returned to a caller"""

    lat: float
    lon: float
    speed: Optional[float] = None
    course: Optional[float] = None
    fix_time: Optional[str] = None
    address: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "lat": self.lat,
            "lon": self.lon,
            "speed": self.speed,
            "course": self.course,
            "fixTime": self.fix_time,
            "address": self.address,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class TrackedVehicle:
    """Clean, immutable summary of a vehicle's tracking identity"""

    car_id: int
    name: str
    license_plate: Optional[str] = None
    traccar_device_id: Optional[int] = None
    traccar_unique_id: Optional[str] = None

    @property
    def is_mapped(self) -> bool:
        """A unique id alone does not link a vehicle to Traccar"""
        return self.traccar_device_id is not None

    @classmethod
    def from_orm(cls, vehicle) -> "TrackedVehicle":
        """Convert SQLAlchemy Vehicle object to clean DTO"""
        return cls(
            car_id=vehicle.id,
            name=vehicle.name,
            license_plate=vehicle.license_plate,
            traccar_device_id=vehicle.traccar_device_id,
            traccar_unique_id=vehicle.traccar_unique_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "carId": str(self.car_id),
            "name": self.name,
            "licensePlate": self.license_plate,
            "traccarDeviceId": self.traccar_device_id,
            "traccarUniqueId": self.traccar_unique_id,
        }


@dataclass(frozen=True)
class CarTrackingPayload:
    """Response body of the single-vehicle tracking endpoint"""

    status: TrackingStatus
    poll_after_seconds: int
    car: Optional[TrackedVehicle] = None
    position: Optional[NormalizedPosition] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "car": self.car.to_dict() if self.car else None,
            "position": self.position.to_dict() if self.position else None,
            "pollAfterSeconds": self.poll_after_seconds,
        }


@dataclass(frozen=True)
class FleetVehicleEntry:
    """One vehicle inside a fleet response, with its own status"""

    car: TrackedVehicle
    status: TrackingStatus
    position: Optional[NormalizedPosition] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.car.to_dict()
        data["status"] = self.status.value
        data["position"] = self.position.to_dict() if self.position else None
        return data


@dataclass(frozen=True)
class FleetTrackingPayload:
    """Response body of the fleet tracking endpoint"""

    status: TrackingStatus
    poll_after_seconds: int
    cars: List[FleetVehicleEntry] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "pollAfterSeconds": self.poll_after_seconds,
            "cars": [entry.to_dict() for entry in self.cars],
            "summary": self.summary,
        }
