"""
File: services/logging_service.py

Description:
    Logging service that provides logging helpers to the application.
    Configures console and file handlers and logs a startup banner.

Author: Emfour Solutions
Created: 2026-09-14
Last Modified: 2026-09-14
"""

import datetime

# Standard library imports
import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


def get_module_logger(module_name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger for a module. Drop-in replacement for logging.getLogger(__name__).

    Args:
        module_name: Module name (__name__). If None, attempts auto-detection

    Returns:
        Logger instance

    Usage:
        logger = get_module_logger(__name__)
    """
    if module_name is None:
        # Auto-detect calling module for convenience
        import inspect

        frame = inspect.currentframe()
        if frame and frame.f_back:
            module_name = frame.f_back.f_globals.get("__name__", "unknown")
        else:
            module_name = "unknown"

    return logging.getLogger(module_name)


def setup_logging(app):
    """Set up application logging with version information."""
    from services.version import get_version

    # Create logs directory if it doesn't exist
    log_dir = app.config.get("LOG_DIR", "logs")
    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    log_level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)

    try:
        version = get_version()
    except Exception:
        version = "unknown"

    detailed_formatter = logging.Formatter(
        f"%(asctime)s [%(levelname)s] TrackGate-{version} %(name)s: %(message)s"
    )

    file_handler = logging.FileHandler(os.path.join(log_dir, "trackgate.log"))
    file_handler.setFormatter(detailed_formatter)
    file_handler.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(detailed_formatter)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if app.config.get("SQLALCHEMY_RECORD_QUERIES") else logging.WARNING
    )
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    app.logger.info(f"Logging Service Started - Version: {version}")


def log_startup_banner(app):
    """Log a startup banner. Credentials are never logged."""
    from services.version import get_version_info

    try:
        version_info = get_version_info()
        traccar_url = app.config.get("TRACCAR_BASE_URL")
        traccar_configured = bool(
            traccar_url and app.config.get("TRACCAR_USER") and app.config.get("TRACCAR_PASS")
        )

        banner_lines = [
            "",
            "=" * 80,
            " TrackGate Application Starting",
            "=" * 80,
            f" Version: {version_info.get('version', 'unknown')}",
            f"  Build Source: {version_info.get('source', 'unknown')}",
            f" Environment: {os.getenv('FLASK_ENV', 'unknown')}",
            f" Debug Mode: {'ON' if app.debug else 'OFF'}",
            "",
            " System Information:",
            f"   Python: {version_info.get('python_version', 'unknown')}",
            f"   Platform: {version_info.get('platform', 'unknown')}",
            f"   Process ID: {os.getpid()}",
            "",
            "  Tracking:",
            f"   Traccar Configured: {'YES' if traccar_configured else 'NO'}",
            f"   Traccar URL: {traccar_url or 'not set'}",
            f"   Min Poll Interval: {app.config.get('TRACCAR_MIN_POLL_INTERVAL', 'not set')}s",
            f"   Request Timeout: {app.config.get('TRACCAR_TIMEOUT', 'not set')}s",
            f"   Log Level: {app.config.get('LOG_LEVEL', 'not set')}",
            "",
            f" Started at: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "=" * 80,
            "",
        ]

        for line in banner_lines:
            app.logger.info(line)

    except Exception as e:
        app.logger.error(f"Failed to log startup banner: {e}")
