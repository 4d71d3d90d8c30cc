"""
File: services/traccar_client.py

Description:
    Client for the Traccar GPS tracking platform REST API. Connects to a Traccar
    server using basic authentication, supports secure HTTPS connections with the
    certifi CA bundle and a fixed per-call timeout. Looks up single devices and
    single positions on behalf of the tracking gateway.

    Every call returns a ProviderResult instead of raising, so callers branch on an
    explicit outcome: the record, "not found" (HTTP 404), "not configured" (no base
    URL or credentials) or an upstream error (network failure, timeout, any other
    HTTP status). The not-configured outcome is produced before any network
    contact, which lets the gateway run without the integration and only degrade
    the tracking calls.

Key features:
    - Fetches a device by id (GET /api/devices/{id}) and a position by id
      (GET /api/positions/{id})
    - Parses raw JSON into TraccarDevice / TraccarPosition records at the boundary
    - Handles SSL context and connection settings to prevent hanging connections
    - Async connection testing with success/error feedback and device counts
    - No retries: a failed call is reported once and left to the next poll cycle

Author: Emfour Solutions
Created: 2026-09-14
Last Modified: 2026-09-14
Version: 1.0.0
"""

# Standard library imports
import asyncio
import json
import ssl
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

# Third-party imports
import aiohttp
import certifi

# Local application imports
from models.tracking import TraccarDevice, TraccarPosition
from services.logging_service import get_module_logger

# Module-level logger
logger = get_module_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10


class ProviderOutcome(Enum):
    """Outcome of a single call to the Traccar API"""

    OK = "ok"
    NOT_FOUND = "not_found"
    UNCONFIGURED = "unconfigured"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class ProviderResult:
    """Tagged result returned from every TraccarClient lookup"""

    outcome: ProviderOutcome
    value: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def ok(cls, value: Any) -> "ProviderResult":
        return cls(ProviderOutcome.OK, value=value)

    @classmethod
    def not_found(cls) -> "ProviderResult":
        return cls(ProviderOutcome.NOT_FOUND, status_code=404)

    @classmethod
    def unconfigured(cls) -> "ProviderResult":
        return cls(
            ProviderOutcome.UNCONFIGURED,
            error="Traccar base URL or credentials are not configured",
        )

    @classmethod
    def upstream_error(
        cls, error: str, status_code: Optional[int] = None
    ) -> "ProviderResult":
        return cls(ProviderOutcome.UPSTREAM_ERROR, error=error, status_code=status_code)

    @property
    def is_ok(self) -> bool:
        return self.outcome is ProviderOutcome.OK


class TraccarClient:
    """Read-only Traccar REST client used by the tracking gateway"""

    DEVICE_PATH = "/api/devices/{device_id}"
    POSITION_PATH = "/api/positions/{position_id}"
    DEVICES_PATH = "/api/devices"

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        verify_ssl: bool = True,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.username = username
        self.password = password
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.ssl_context = self._create_ssl_context() if verify_ssl else None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TraccarClient":
        """Build a client from Flask app.config style settings"""
        return cls(
            base_url=config.get("TRACCAR_BASE_URL"),
            username=config.get("TRACCAR_USER"),
            password=config.get("TRACCAR_PASS"),
            timeout=config.get("TRACCAR_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
            verify_ssl=config.get("TRACCAR_VERIFY_SSL", True),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.username and self.password)

    @staticmethod
    def _create_ssl_context() -> ssl.SSLContext:
        """
        Create SSL context with proper configuration to avoid timeout issues

        Returns:
            Configured SSL context
        """
        ssl_context = ssl.create_default_context(cafile=certifi.where())

        ssl_context.options |= ssl.OP_NO_SSLv2
        ssl_context.options |= ssl.OP_NO_SSLv3
        ssl_context.options |= ssl.OP_SINGLE_DH_USE
        ssl_context.options |= ssl.OP_SINGLE_ECDH_USE

        return ssl_context

    def _ssl_option(self) -> Union[ssl.SSLContext, bool]:
        return self.ssl_context if self.verify_ssl else False

    def _create_connector(self) -> aiohttp.TCPConnector:
        """
        Create aiohttp connector with SSL timeout fixes

        Returns:
            Configured TCP connector
        """
        return aiohttp.TCPConnector(
            ssl=self._ssl_option(),
            limit=10,  # Limit concurrent connections
            limit_per_host=5,  # Limit per host
            ttl_dns_cache=300,  # DNS cache TTL
            use_dns_cache=True,
            keepalive_timeout=10,
            enable_cleanup_closed=True,
            force_close=False,
        )

    def create_session(self) -> aiohttp.ClientSession:
        """
        Create a session for one gateway request. The caller owns it and must close
        it, normally with ``async with client.create_session() as session``.
        """
        return aiohttp.ClientSession(
            connector=self._create_connector(),
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )

    async def get_device(
        self, session: aiohttp.ClientSession, device_id: int
    ) -> ProviderResult:
        """
        Fetch a device by its Traccar id

        Returns:
            ProviderResult whose value is a TraccarDevice when OK
        """
        result = await self._get_json(
            session, self.DEVICE_PATH.format(device_id=device_id)
        )
        if not result.is_ok:
            return result
        return ProviderResult.ok(TraccarDevice.from_api(result.value))

    async def get_position(
        self, session: aiohttp.ClientSession, position_id: int
    ) -> ProviderResult:
        """
        Fetch a position by its Traccar id

        Returns:
            ProviderResult whose value is a TraccarPosition when OK
        """
        result = await self._get_json(
            session, self.POSITION_PATH.format(position_id=position_id)
        )
        if not result.is_ok:
            return result
        if not result.value:
            return ProviderResult.not_found()
        return ProviderResult.ok(TraccarPosition.from_api(result.value))

    async def _get_json(
        self, session: aiohttp.ClientSession, path: str
    ) -> ProviderResult:
        if not self.is_configured:
            return ProviderResult.unconfigured()

        url = f"{self.base_url}{path}"
        auth = aiohttp.BasicAuth(self.username, self.password)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            async with session.get(url, auth=auth, timeout=timeout) as response:
                if response.status == 200:
                    data = await response.json()
                    logger.debug(f"Fetched {path} from Traccar")
                    return ProviderResult.ok(data)
                elif response.status == 404:
                    logger.debug(f"Traccar returned 404 for {path}")
                    return ProviderResult.not_found()
                else:
                    error_text = await response.text()
                    logger.warning(
                        f"Traccar request {path} failed with status {response.status}"
                    )
                    return ProviderResult.upstream_error(
                        f"HTTP {response.status}: {error_text[:200]}",
                        status_code=response.status,
                    )

        except asyncio.TimeoutError:
            logger.warning(f"Traccar request {path} timed out after {self.timeout}s")
            return ProviderResult.upstream_error(
                f"Request timed out after {self.timeout}s"
            )
        except aiohttp.ClientError as e:
            logger.warning(f"HTTP client error calling Traccar {path}: {e}")
            return ProviderResult.upstream_error(f"HTTP client error: {e}")
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON from Traccar {path}: {e}")
            return ProviderResult.upstream_error(f"Invalid JSON response: {e}")

    async def test_connection(self) -> Dict[str, Any]:
        """
        Connection test that returns detailed results

        Returns:
            Dictionary with:
            - success: bool
            - message: str
            - device_count: int (optional)
            - devices: List[str] (optional)
            - error: str (optional)
        """
        if not self.is_configured:
            return {
                "success": False,
                "error": "Not Configured",
                "message": "Set TRACCAR_BASE_URL, TRACCAR_USER and TRACCAR_PASS.",
            }

        async with self.create_session() as session:
            result = await self._get_json(session, self.DEVICES_PATH)

        if result.is_ok:
            devices = result.value or []
            return {
                "success": True,
                "message": f"Connected to Traccar at {self.base_url}",
                "device_count": len(devices),
                "devices": [
                    device.get("name") or str(device.get("id")) for device in devices[:10]
                ],
            }

        if result.status_code == 401:
            return {
                "success": False,
                "error": "Invalid Credentials",
                "message": "Authentication failed. Check your username and password.",
            }
        elif result.status_code == 403:
            return {
                "success": False,
                "error": "Unauthorised Access",
                "message": "Access forbidden. Check your user permissions.",
            }
        elif result.outcome is ProviderOutcome.NOT_FOUND:
            return {
                "success": False,
                "error": "Invalid URL or API End Point",
                "message": "Resource not found. Check the server URL.",
            }

        return {
            "success": False,
            "error": "Connection Failed",
            "message": result.error or "Unknown error",
        }
