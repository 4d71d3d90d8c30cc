"""
File: services/__init__.py

Description:
    Service layer package initialization module providing access to the tracking
    gateway services: the Traccar client, device resolution, poll rate limiting,
    the vehicle registry and the tracking service that ties them together.

Author: Emfour Solutions
Created: 2026-09-14
"""

# Local application imports
from .rate_limiter import PollLedger, PollRateLimiter
from .traccar_client import ProviderOutcome, ProviderResult, TraccarClient
from .tracking_service import TrackingService
from .vehicle_registry import VehicleRegistry

__all__ = [
    "PollLedger",
    "PollRateLimiter",
    "ProviderOutcome",
    "ProviderResult",
    "TraccarClient",
    "TrackingService",
    "VehicleRegistry",
]
