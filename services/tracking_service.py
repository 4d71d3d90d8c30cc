"""
ABOUTME: Tracking gateway service answering single-vehicle and fleet location requests
ABOUTME: Applies poll limits, resolves vehicles against Traccar and isolates per-vehicle failures

File: services/tracking_service.py

Description:
    Entry point of the tracking gateway. Turns "where is car X" and "where is the
    whole fleet" into provider-agnostic payloads plus an HTTP status code. Flask
    views call the synchronous methods; provider lookups run on aiohttp inside a
    short-lived event loop per request, sharing one HTTP session for the request.

    Single vehicle, in order of precedence:
        malformed id -> car_not_found (400)
        throttled    -> rate_limited (429), before the vehicle is looked up
        unknown car  -> car_not_found (404)
        resolver outcome, with traccar_not_configured (503) checked before
        traccar_error (502); unexpected exceptions also become traccar_error

    Fleet:
        throttled -> rate_limited (429); Traccar not configured -> 503 with no
        entries; otherwise every mapped vehicle is resolved sequentially in id
        order. A per-vehicle "not configured" aborts the batch, any other
        per-vehicle failure only marks that vehicle as traccar_error. A completed
        batch is always top-level ok; see status_classifier.summarize_fleet.

Key features:
    - Every response carries pollAfterSeconds equal to the configured poll interval
    - Provider outages are logged with the vehicle id and operation, then degraded
    - No retries; the admin UI's own poll cycle retries

Author: Emfour Solutions
Created: 2026-09-14
"""

# Standard library imports
import asyncio
from typing import List, Optional, Tuple

# Local application imports
from models.tracking import (
    CarTrackingPayload,
    FleetTrackingPayload,
    FleetVehicleEntry,
    TrackedVehicle,
    TrackingStatus,
)
from services.device_resolver import DeviceResolver, Resolution
from services.exceptions import InvalidVehicleIdError
from services.logging_service import get_module_logger
from services.rate_limiter import FLEET_SCOPE, PollRateLimiter, car_scope
from services.status_classifier import http_status_for, summarize_fleet
from services.traccar_client import TraccarClient
from services.vehicle_registry import VehicleRegistry, parse_vehicle_id

logger = get_module_logger(__name__)


class TrackingService:
    """Tracking gateway for the admin fleet map"""

    def __init__(
        self,
        client: TraccarClient,
        rate_limiter: PollRateLimiter,
        registry: Optional[VehicleRegistry] = None,
        resolver: Optional[DeviceResolver] = None,
    ):
        self.client = client
        self.rate_limiter = rate_limiter
        self.registry = registry or VehicleRegistry()
        self.resolver = resolver or DeviceResolver(client)

    @property
    def poll_after_seconds(self) -> int:
        return int(self.rate_limiter.min_interval_seconds)

    def _car_response(
        self,
        status: TrackingStatus,
        car: Optional[TrackedVehicle] = None,
        resolution: Optional[Resolution] = None,
        http_status: Optional[int] = None,
    ) -> Tuple[CarTrackingPayload, int]:
        payload = CarTrackingPayload(
            status=status,
            poll_after_seconds=self.poll_after_seconds,
            car=car,
            position=resolution.position if resolution else None,
        )
        return payload, http_status or http_status_for(status)

    def _fleet_response(
        self, status: TrackingStatus, entries: Optional[List[FleetVehicleEntry]] = None
    ) -> Tuple[FleetTrackingPayload, int]:
        entries = entries or []
        payload = FleetTrackingPayload(
            status=status,
            poll_after_seconds=self.poll_after_seconds,
            cars=entries,
            summary=summarize_fleet(entries),
        )
        return payload, http_status_for(status)

    def get_car_tracking(
        self, raw_car_id: str, admin_id: str
    ) -> Tuple[CarTrackingPayload, int]:
        """
        Locate a single vehicle

        Args:
            raw_car_id: Vehicle identifier exactly as received in the URL
            admin_id: Identity of the calling admin, used only as rate-limit key

        Returns:
            Tuple of (payload, HTTP status code)
        """
        try:
            car_id = parse_vehicle_id(raw_car_id)
        except InvalidVehicleIdError as e:
            logger.debug(str(e))
            return self._car_response(TrackingStatus.CAR_NOT_FOUND, http_status=400)

        if not self.rate_limiter.admit_scope(admin_id, car_scope(car_id)):
            return self._car_response(TrackingStatus.RATE_LIMITED)

        try:
            vehicle = self.registry.get_vehicle(car_id)
            if vehicle is None:
                return self._car_response(TrackingStatus.CAR_NOT_FOUND)

            resolution = asyncio.run(self._resolve_one(vehicle))
        except Exception as e:
            logger.error(f"[tracking.get_car_tracking] car {car_id}: {e}", exc_info=True)
            return self._car_response(TrackingStatus.TRACCAR_ERROR)

        if resolution.status is TrackingStatus.TRACCAR_NOT_CONFIGURED:
            logger.info(
                f"[tracking.get_car_tracking] car {car_id}: Traccar integration is not configured"
            )
            return self._car_response(TrackingStatus.TRACCAR_NOT_CONFIGURED)

        if resolution.status is TrackingStatus.TRACCAR_ERROR:
            logger.error(f"[tracking.get_car_tracking] car {car_id}: {resolution.error}")
            return self._car_response(TrackingStatus.TRACCAR_ERROR)

        return self._car_response(resolution.status, car=vehicle, resolution=resolution)

    async def _resolve_one(self, vehicle: TrackedVehicle) -> Resolution:
        async with self.client.create_session() as session:
            return await self.resolver.resolve(session, vehicle)

    def get_fleet_tracking(self, admin_id: str) -> Tuple[FleetTrackingPayload, int]:
        """
        Locate every vehicle mapped to a Traccar device

        Args:
            admin_id: Identity of the calling admin, used only as rate-limit key

        Returns:
            Tuple of (payload, HTTP status code)
        """
        if not self.rate_limiter.admit_scope(admin_id, FLEET_SCOPE):
            return self._fleet_response(TrackingStatus.RATE_LIMITED)

        if not self.client.is_configured:
            logger.info("[tracking.get_fleet_tracking] Traccar integration is not configured")
            return self._fleet_response(TrackingStatus.TRACCAR_NOT_CONFIGURED)

        try:
            vehicles = self.registry.list_mapped_vehicles()
            entries = asyncio.run(self._aggregate(vehicles))
        except Exception as e:
            logger.error(f"[tracking.get_fleet_tracking] {e}", exc_info=True)
            return self._fleet_response(TrackingStatus.TRACCAR_ERROR)

        if entries is None:
            return self._fleet_response(TrackingStatus.TRACCAR_NOT_CONFIGURED)

        return self._fleet_response(TrackingStatus.OK, entries)

    async def _aggregate(
        self, vehicles: List[TrackedVehicle]
    ) -> Optional[List[FleetVehicleEntry]]:
        """
        Resolve vehicles one after another.

        Returns:
            Entries in input order, or None if Traccar turned out to be unconfigured
        """
        entries: List[FleetVehicleEntry] = []

        async with self.client.create_session() as session:
            for vehicle in vehicles:
                try:
                    resolution = await self.resolver.resolve(session, vehicle)
                except Exception as e:
                    logger.error(
                        f"[tracking.get_fleet_tracking] car {vehicle.car_id}: {e}",
                        exc_info=True,
                    )
                    entries.append(
                        FleetVehicleEntry(car=vehicle, status=TrackingStatus.TRACCAR_ERROR)
                    )
                    continue

                if resolution.status is TrackingStatus.TRACCAR_NOT_CONFIGURED:
                    logger.info(
                        f"[tracking.get_fleet_tracking] Traccar not configured, "
                        f"aborting at car {vehicle.car_id}"
                    )
                    return None

                if resolution.status is TrackingStatus.TRACCAR_ERROR:
                    logger.error(
                        f"[tracking.get_fleet_tracking] car {vehicle.car_id}: {resolution.error}"
                    )

                entries.append(
                    FleetVehicleEntry(
                        car=vehicle, status=resolution.status, position=resolution.position
                    )
                )

        logger.debug(f"Resolved {len(entries)} mapped vehicles")
        return entries

    def get_status(self) -> dict:
        """Integration state for the health endpoint; never contacts Traccar"""
        return {
            "traccar_configured": self.client.is_configured,
            "traccar_base_url": self.client.base_url,
            "poll_after_seconds": self.poll_after_seconds,
            "request_timeout_seconds": self.client.timeout,
            "tracked_poll_keys": len(self.rate_limiter.ledger),
        }
