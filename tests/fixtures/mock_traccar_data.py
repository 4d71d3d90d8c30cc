"""
ABOUTME: Test fixtures with canned Traccar API payloads and a scripted Traccar client double
ABOUTME: Lets tracking tests run the real resolver and service without a network
"""

from typing import Any, Dict, Optional

from models.tracking import TraccarDevice, TraccarPosition, TrackedVehicle
from services.traccar_client import ProviderResult

FIX_TIME = "2026-10-18T09:30:00.000+00:00"
DEVICE_TIME = "2026-10-18T09:29:58.000+00:00"
SERVER_TIME = "2026-10-18T09:30:02.000+00:00"

# Device 42 points at position 900
DEVICE_42 = {
    "id": 42,
    "name": "V1 tracker",
    "uniqueId": "imei-000042",
    "status": "online",
    "positionId": 900,
}

POSITION_900 = {
    "id": 900,
    "deviceId": 42,
    "latitude": 51.5,
    "longitude": -0.12,
    "speed": 10,
    "fixTime": FIX_TIME,
}

# Device that has never reported
DEVICE_NEVER_REPORTED = {
    "id": 43,
    "name": "Fresh install",
    "uniqueId": "imei-000043",
    "status": "unknown",
    "positionId": 0,
}

# Device whose latest position is not stored yet
DEVICE_DANGLING_POSITION = {
    "id": 44,
    "name": "Dangling",
    "uniqueId": "imei-000044",
    "status": "online",
    "positionId": 999,
}

DEVICE_45 = {
    "id": 45,
    "name": "V3 tracker",
    "uniqueId": "imei-000045",
    "status": "online",
    "positionId": 905,
}

POSITION_905 = {
    "id": 905,
    "deviceId": 45,
    "latitude": 48.137,
    "longitude": 11.575,
    "speed": 0.0,
    "course": 270.0,
    "deviceTime": DEVICE_TIME,
    "serverTime": SERVER_TIME,
    "address": "Marienplatz, Munich",
}


def make_vehicle(
    car_id: int = 1,
    name: str = "V1",
    license_plate: Optional[str] = "AB-123",
    device_id: Optional[int] = 42,
    unique_id: Optional[str] = "imei-000042",
) -> TrackedVehicle:
    return TrackedVehicle(
        car_id=car_id,
        name=name,
        license_plate=license_plate,
        traccar_device_id=device_id,
        traccar_unique_id=unique_id,
    )


class FakeSession:
    """Async context manager standing in for an aiohttp.ClientSession"""

    def __init__(self):
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True
        return False


class FakeTraccarClient:
    """
    Scripted TraccarClient double.

    ``devices`` and ``positions`` map ids to a raw API payload (dict), a
    ProviderResult, or an exception to raise. Unknown ids answer not found.
    """

    def __init__(
        self,
        devices: Optional[Dict[int, Any]] = None,
        positions: Optional[Dict[int, Any]] = None,
        configured: bool = True,
        timeout: int = 10,
    ):
        self.devices = devices or {}
        self.positions = positions or {}
        self.is_configured = configured
        self.base_url = "https://traccar.example.com" if configured else None
        self.timeout = timeout
        self.device_calls = []
        self.position_calls = []
        self.sessions = []

    def create_session(self) -> FakeSession:
        session = FakeSession()
        self.sessions.append(session)
        return session

    async def get_device(self, session, device_id: int) -> ProviderResult:
        self.device_calls.append(device_id)
        return self._lookup(self.devices, device_id, TraccarDevice.from_api)

    async def get_position(self, session, position_id: int) -> ProviderResult:
        self.position_calls.append(position_id)
        return self._lookup(self.positions, position_id, TraccarPosition.from_api)

    def _lookup(self, table, key, parse) -> ProviderResult:
        if not self.is_configured:
            return ProviderResult.unconfigured()

        entry = table.get(key)
        if entry is None:
            return ProviderResult.not_found()
        if isinstance(entry, Exception):
            raise entry
        if isinstance(entry, ProviderResult):
            return entry
        return ProviderResult.ok(parse(entry))


def standard_fake_client(**kwargs) -> FakeTraccarClient:
    """Client knowing every canned device and position"""
    return FakeTraccarClient(
        devices={
            42: DEVICE_42,
            43: DEVICE_NEVER_REPORTED,
            44: DEVICE_DANGLING_POSITION,
            45: DEVICE_45,
        },
        positions={900: POSITION_900, 905: POSITION_905},
        **kwargs,
    )
