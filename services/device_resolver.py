"""
File: services/device_resolver.py

Description:
    Two-step Traccar lookup for one vehicle: vehicle -> device -> latest position.
    Every "not available yet" case short-circuits into a status; only a located
    fix yields a position.

    Resolution order, returning on the first terminal condition:
        1. no Traccar device id on the vehicle          -> not_mapped
        2. device unknown to Traccar (404)              -> device_not_found
        3. device has no latest-position pointer        -> no_fix_yet
        4. latest position missing (404, storage race)  -> no_fix_yet
        5. otherwise                                    -> ok + normalized position

    Unconfigured and upstream-error results from the client are passed through as
    traccar_not_configured / traccar_error with the error detail attached, so the
    caller can log and classify them. Exceptions raised while parsing a provider
    payload are not caught here.

Author: Emfour Solutions
Created: 2026-09-14
"""

# Standard library imports
from dataclasses import dataclass
from typing import Optional

# Local application imports
from models.tracking import NormalizedPosition, TrackedVehicle, TrackingStatus
from services.logging_service import get_module_logger
from services.position_normalizer import normalize_position
from services.traccar_client import ProviderOutcome, ProviderResult, TraccarClient

logger = get_module_logger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one vehicle against Traccar"""

    status: TrackingStatus
    position: Optional[NormalizedPosition] = None
    error: Optional[str] = None


def _failure(result: ProviderResult) -> Optional[Resolution]:
    """Map unconfigured / upstream-error results; None for anything else"""
    if result.outcome is ProviderOutcome.UNCONFIGURED:
        return Resolution(TrackingStatus.TRACCAR_NOT_CONFIGURED, error=result.error)
    if result.outcome is ProviderOutcome.UPSTREAM_ERROR:
        return Resolution(TrackingStatus.TRACCAR_ERROR, error=result.error)
    return None


class DeviceResolver:
    """Resolves vehicles to their latest known Traccar position"""

    def __init__(self, client: TraccarClient):
        self.client = client

    async def resolve(self, session, vehicle: TrackedVehicle) -> Resolution:
        if not vehicle.is_mapped:
            logger.debug(f"Vehicle {vehicle.car_id} has no Traccar device id")
            return Resolution(TrackingStatus.NOT_MAPPED)

        device_result = await self.client.get_device(session, vehicle.traccar_device_id)
        failure = _failure(device_result)
        if failure:
            return failure
        if device_result.outcome is ProviderOutcome.NOT_FOUND:
            logger.debug(
                f"Traccar device {vehicle.traccar_device_id} for vehicle "
                f"{vehicle.car_id} not found"
            )
            return Resolution(TrackingStatus.DEVICE_NOT_FOUND)

        device = device_result.value
        if not device.position_id:
            return Resolution(TrackingStatus.NO_FIX_YET)

        position_result = await self.client.get_position(session, device.position_id)
        failure = _failure(position_result)
        if failure:
            return failure
        if position_result.outcome is ProviderOutcome.NOT_FOUND:
            logger.debug(
                f"Position {device.position_id} of device {device.id} not stored yet"
            )
            return Resolution(TrackingStatus.NO_FIX_YET)

        return Resolution(TrackingStatus.OK, position=normalize_position(position_result.value))
