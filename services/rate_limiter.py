"""
ABOUTME: Per-(admin, scope) minimum-interval gate protecting Traccar from over-polling
ABOUTME: Owns the poll ledger; check-and-set is atomic per key and keys never contend

File: services/rate_limiter.py

Description:
    Fixed-window-per-key poll gate for the tracking endpoints. A request is admitted
    when its partition key (admin id + scope) has never been seen, or when at least
    the configured minimum interval has elapsed since the key's last admitted
    request. Rejected requests leave the ledger untouched, so a caller that keeps
    polling too fast does not push its own window further out.

    The ledger is an explicitly owned object created by the application factory and
    attached to the Flask app; it lives as long as the process does. Entries are
    never expired, only superseded.

Key features:
    - Scope helpers for single-vehicle ("car:<id>") and fleet ("fleet") keys
    - Per-key locks so concurrent requests for the same key cannot both be admitted
    - Registry lock held only while looking up a key's lock, never across I/O
    - Injectable clock for deterministic tests

Author: Emfour Solutions
Created: 2026-09-14
"""

# Standard library imports
import threading
import time
from typing import Callable, Dict, Optional

# Local application imports
from services.logging_service import get_module_logger

logger = get_module_logger(__name__)

FLEET_SCOPE = "fleet"


def car_scope(car_id) -> str:
    return f"car:{car_id}"


def partition_key(admin_id: str, scope: str) -> str:
    return f"{admin_id}:{scope}"


class PollLedger:
    """
    Thread-safe map of partition key -> time of the last admitted request.

    Each key gets its own lock; the registry lock only guards creation of those
    per-key locks, so requests for distinct keys do not wait on each other.
    """

    def __init__(self):
        self._last_admitted: Dict[str, float] = {}
        self._key_locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def lock_for(self, key: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._key_locks[key] = lock
            return lock

    def get(self, key: str) -> Optional[float]:
        return self._last_admitted.get(key)

    def record(self, key: str, timestamp: float) -> None:
        self._last_admitted[key] = timestamp

    def __len__(self) -> int:
        return len(self._last_admitted)

    def clear(self) -> None:
        """Forget every key. Waits for admits already holding a key lock."""
        with self._registry_lock:
            held = list(self._key_locks.values())
            for lock in held:
                lock.acquire()
            try:
                self._last_admitted.clear()
                self._key_locks.clear()
            finally:
                for lock in held:
                    lock.release()


class PollRateLimiter:
    """Minimum-interval gate keyed by admin identity and scope"""

    def __init__(
        self,
        min_interval_seconds: float = 5,
        ledger: Optional[PollLedger] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.min_interval_seconds = min_interval_seconds
        self.ledger = ledger if ledger is not None else PollLedger()
        self._clock = clock

    def admit(self, key: str, now: Optional[float] = None) -> bool:
        """
        Admit a request for a partition key.

        Args:
            key: Partition key, see partition_key()
            now: Request time in seconds; defaults to the limiter's clock

        Returns:
            True if admitted (and recorded), False if throttled
        """
        if now is None:
            now = self._clock()

        with self.ledger.lock_for(key):
            last = self.ledger.get(key)
            if last is not None and now - last < self.min_interval_seconds:
                logger.debug(
                    f"Throttled poll for {key}: {now - last:.2f}s since last accepted "
                    f"request (minimum {self.min_interval_seconds}s)"
                )
                return False

            self.ledger.record(key, now)
            return True

    def admit_scope(self, admin_id: str, scope: str, now: Optional[float] = None) -> bool:
        return self.admit(partition_key(admin_id, scope), now)
