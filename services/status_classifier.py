"""
File: services/status_classifier.py

Description:
    Maps tracking statuses onto HTTP response codes and UI severities, and rolls
    per-vehicle fleet statuses up into a summary.

    The fleet response keeps a top-level "ok" once a batch completes, even when
    individual vehicles failed; the summary's "degraded" flag is what tells a
    caller reading only the top level that part of the fleet is unhealthy.

Author: Emfour Solutions
Created: 2026-09-14
"""

# Standard library imports
from collections import Counter
from typing import Any, Dict, Iterable

# Local application imports
from models.tracking import FleetVehicleEntry, TrackingStatus

# car_not_found answers 400 for a malformed id; the caller passes that explicitly
HTTP_STATUS_CODES = {
    TrackingStatus.OK: 200,
    TrackingStatus.NO_FIX_YET: 200,
    TrackingStatus.NOT_MAPPED: 404,
    TrackingStatus.DEVICE_NOT_FOUND: 404,
    TrackingStatus.CAR_NOT_FOUND: 404,
    TrackingStatus.RATE_LIMITED: 429,
    TrackingStatus.TRACCAR_ERROR: 502,
    TrackingStatus.TRACCAR_NOT_CONFIGURED: 503,
}

SEVERITY_OK = "ok"
SEVERITY_WARN = "warn"
SEVERITY_ERROR = "error"

_WARN_STATUSES = {TrackingStatus.NO_FIX_YET, TrackingStatus.DEVICE_NOT_FOUND}


def http_status_for(status: TrackingStatus) -> int:
    return HTTP_STATUS_CODES[status]


def severity_for(status: TrackingStatus) -> str:
    """Severity used by the admin UI's status pills"""
    if status is TrackingStatus.OK:
        return SEVERITY_OK
    if status in _WARN_STATUSES:
        return SEVERITY_WARN
    return SEVERITY_ERROR


def summarize_fleet(entries: Iterable[FleetVehicleEntry]) -> Dict[str, Any]:
    """
    Roll per-vehicle statuses up into counts.

    Returns:
        Dictionary with:
        - total: number of entries
        - by_status: status value -> count (only statuses that occur)
        - degraded: True if any entry has error severity
    """
    counts = Counter(entry.status for entry in entries)
    return {
        "total": sum(counts.values()),
        "by_status": {status.value: count for status, count in counts.items()},
        "degraded": any(severity_for(status) == SEVERITY_ERROR for status in counts),
    }
