"""
ABOUTME: Unit tests for the Traccar REST client
ABOUTME: Covers result tagging for success, 404, unconfigured and upstream failures
"""

import asyncio
import json
import ssl
from unittest.mock import patch

import aiohttp
import pytest

from models.tracking import TraccarDevice, TraccarPosition
from services.traccar_client import ProviderOutcome, ProviderResult, TraccarClient
from tests.fixtures.mock_traccar_data import DEVICE_42, POSITION_900


class FakeResponse:
    def __init__(self, status=200, payload=None, text="", json_error=None):
        self.status = status
        self._payload = payload
        self._text = text
        self._json_error = json_error

    async def json(self):
        if self._json_error:
            raise self._json_error
        return self._payload

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class RecordingSession:
    """Stands in for aiohttp.ClientSession; also usable as its own context manager"""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


def _client(**overrides):
    settings = {
        "base_url": "https://traccar.example.com/",
        "username": "gateway",
        "password": "secret",
        "timeout": 10,
    }
    settings.update(overrides)
    return TraccarClient(**settings)


class TestConfiguration:
    def test_is_configured(self):
        assert _client().is_configured

    @pytest.mark.parametrize("missing", ["base_url", "username", "password"])
    def test_missing_setting_means_unconfigured(self, missing):
        assert not _client(**{missing: None}).is_configured

    def test_trailing_slash_stripped(self):
        assert _client().base_url == "https://traccar.example.com"

    def test_from_config(self):
        client = TraccarClient.from_config(
            {
                "TRACCAR_BASE_URL": "http://localhost:8082",
                "TRACCAR_USER": "admin",
                "TRACCAR_PASS": "admin",
                "TRACCAR_TIMEOUT": 3,
                "TRACCAR_VERIFY_SSL": False,
            }
        )

        assert client.base_url == "http://localhost:8082"
        assert client.timeout == 3
        assert client.verify_ssl is False
        assert client.is_configured

    def test_from_empty_config(self):
        client = TraccarClient.from_config({})

        assert not client.is_configured
        assert client.timeout == 10

    def test_ssl_option(self):
        assert isinstance(_client()._ssl_option(), ssl.SSLContext)
        assert _client(verify_ssl=False)._ssl_option() is False

    def test_ssl_context_built_once(self):
        client = _client()

        assert client._ssl_option() is client._ssl_option()
        assert client._ssl_option() is client.ssl_context

    @pytest.mark.asyncio
    async def test_create_session_applies_timeout(self):
        async with _client(timeout=7).create_session() as session:
            assert session.timeout.total == 7


class TestProviderResult:
    def test_factories(self):
        assert ProviderResult.ok({"id": 1}).is_ok
        assert ProviderResult.not_found().outcome is ProviderOutcome.NOT_FOUND
        assert ProviderResult.unconfigured().outcome is ProviderOutcome.UNCONFIGURED

        error = ProviderResult.upstream_error("HTTP 500", status_code=500)
        assert error.outcome is ProviderOutcome.UPSTREAM_ERROR
        assert error.status_code == 500
        assert not error.is_ok


class TestGetDevice:
    @pytest.mark.asyncio
    async def test_success(self):
        session = RecordingSession(FakeResponse(200, DEVICE_42))

        result = await _client().get_device(session, 42)

        assert result.is_ok
        assert result.value == TraccarDevice(
            id=42, unique_id="imei-000042", position_id=900, name="V1 tracker"
        )
        url, kwargs = session.calls[0]
        assert url == "https://traccar.example.com/api/devices/42"
        assert kwargs["auth"] == aiohttp.BasicAuth("gateway", "secret")
        assert kwargs["timeout"].total == 10
        assert "ssl" not in kwargs

    @pytest.mark.asyncio
    async def test_zero_position_id_means_no_fix(self):
        session = RecordingSession(FakeResponse(200, {"id": 42, "positionId": 0}))

        result = await _client().get_device(session, 42)

        assert result.value.position_id is None

    @pytest.mark.asyncio
    async def test_not_found(self):
        session = RecordingSession(FakeResponse(404, text="Not Found"))

        result = await _client().get_device(session, 42)

        assert result.outcome is ProviderOutcome.NOT_FOUND

    @pytest.mark.asyncio
    async def test_unconfigured_makes_no_request(self):
        session = RecordingSession(FakeResponse(200, DEVICE_42))

        result = await _client(password=None).get_device(session, 42)

        assert result.outcome is ProviderOutcome.UNCONFIGURED
        assert session.calls == []

    @pytest.mark.asyncio
    async def test_server_error(self):
        session = RecordingSession(FakeResponse(500, text="Internal Server Error"))

        result = await _client().get_device(session, 42)

        assert result.outcome is ProviderOutcome.UPSTREAM_ERROR
        assert result.status_code == 500
        assert result.error.startswith("HTTP 500")

    @pytest.mark.asyncio
    async def test_unauthorized_is_upstream_error(self):
        session = RecordingSession(FakeResponse(401, text="Unauthorized"))

        result = await _client().get_device(session, 42)

        assert result.outcome is ProviderOutcome.UPSTREAM_ERROR
        assert result.status_code == 401

    @pytest.mark.asyncio
    async def test_timeout(self):
        session = RecordingSession(error=asyncio.TimeoutError())

        result = await _client().get_device(session, 42)

        assert result.outcome is ProviderOutcome.UPSTREAM_ERROR
        assert "timed out" in result.error

    @pytest.mark.asyncio
    async def test_connection_error(self):
        session = RecordingSession(error=aiohttp.ClientConnectionError("refused"))

        result = await _client().get_device(session, 42)

        assert result.outcome is ProviderOutcome.UPSTREAM_ERROR
        assert "refused" in result.error

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        response = FakeResponse(200, json_error=json.JSONDecodeError("Expecting value", "<html>", 0))
        session = RecordingSession(response)

        result = await _client().get_device(session, 42)

        assert result.outcome is ProviderOutcome.UPSTREAM_ERROR
        assert "Invalid JSON" in result.error


class TestGetPosition:
    @pytest.mark.asyncio
    async def test_success(self):
        session = RecordingSession(FakeResponse(200, POSITION_900))

        result = await _client().get_position(session, 900)

        assert result.is_ok
        assert isinstance(result.value, TraccarPosition)
        assert result.value.latitude == 51.5
        assert session.calls[0][0] == "https://traccar.example.com/api/positions/900"

    @pytest.mark.asyncio
    async def test_empty_body_is_not_found(self):
        session = RecordingSession(FakeResponse(200, None))

        result = await _client().get_position(session, 900)

        assert result.outcome is ProviderOutcome.NOT_FOUND

    @pytest.mark.asyncio
    async def test_not_found(self):
        session = RecordingSession(FakeResponse(404))

        result = await _client().get_position(session, 900)

        assert result.outcome is ProviderOutcome.NOT_FOUND


class TestConnectionTest:
    @pytest.mark.asyncio
    async def test_not_configured(self):
        result = await _client(base_url=None).test_connection()

        assert result["success"] is False
        assert result["error"] == "Not Configured"

    @pytest.mark.asyncio
    async def test_success_lists_devices(self):
        client = _client()
        session = RecordingSession(
            FakeResponse(200, [DEVICE_42, {"id": 43, "name": None}])
        )

        with patch.object(client, "create_session", return_value=session):
            result = await client.test_connection()

        assert result["success"] is True
        assert result["device_count"] == 2
        assert result["devices"] == ["V1 tracker", "43"]
        assert session.calls[0][0] == "https://traccar.example.com/api/devices"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, error",
        [
            (401, "Invalid Credentials"),
            (403, "Unauthorised Access"),
            (404, "Invalid URL or API End Point"),
            (500, "Connection Failed"),
        ],
    )
    async def test_failures(self, status, error):
        client = _client()
        session = RecordingSession(FakeResponse(status, text="nope"))

        with patch.object(client, "create_session", return_value=session):
            result = await client.test_connection()

        assert result["success"] is False
        assert result["error"] == error
