"""
ABOUTME: Pytest configuration and shared fixtures for TrackGate tests
ABOUTME: Provides the Flask app, database session, admin client and tracking service doubles

File: tests/conftest.py

Description:
    Central pytest configuration file that provides shared fixtures for testing
    the tracking gateway. The app is built with the real app factory in the
    testing environment (in-memory SQLite); tests swap in a tracking service
    backed by a scripted Traccar client so no network is used.

Author: Emfour Solutions
Created: 2026-09-14
"""

import os

import pytest

from database import db
from services.rate_limiter import PollRateLimiter
from services.tracking_service import TrackingService
from tests.fixtures.mock_traccar_data import standard_fake_client

TRACCAR_ENV_KEYS = (
    "TRACCAR_BASE_URL",
    "TRACCAR_USER",
    "TRACCAR_PASS",
    "TRACCAR_MIN_POLL_INTERVAL",
    "TRACCAR_TIMEOUT",
    "DATABASE_URL",
)


@pytest.fixture(scope="session")
def app(tmp_path_factory):
    """Create test Flask application using the actual app factory"""
    from app import create_app

    test_env_vars = {
        "FLASK_ENV": "testing",
        "SECRET_KEY": "test-secret-key-for-sessions",
        "LOG_DIR": str(tmp_path_factory.mktemp("logs")),
    }

    original_env = {key: os.environ.get(key) for key in (*test_env_vars, *TRACCAR_ENV_KEYS)}
    for key in TRACCAR_ENV_KEYS:
        os.environ.pop(key, None)
    os.environ.update(test_env_vars)

    try:
        yield create_app("testing")
    finally:
        # Restore original environment variables
        for key, original_value in original_env.items():
            if original_value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = original_value


@pytest.fixture
def db_session(app):
    """Fresh tables for each test"""
    with app.app_context():
        db.drop_all()
        db.create_all()

        yield db.session

        db.session.rollback()
        db.session.remove()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def admin_client(app):
    """Test client whose session belongs to admin 7"""
    test_client = app.test_client()
    with test_client.session_transaction() as sess:
        sess["user_id"] = 7
        sess["role"] = "admin"
    return test_client


@pytest.fixture
def fake_traccar():
    return standard_fake_client()


@pytest.fixture
def install_tracking_service(app):
    """Replace the app's tracking service for one test"""
    original = app.tracking_service

    def _install(client, min_interval_seconds=5):
        service = TrackingService(client, PollRateLimiter(min_interval_seconds))
        app.tracking_service = service
        return service

    yield _install

    app.tracking_service = original
