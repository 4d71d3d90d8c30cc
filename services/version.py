"""
File: services/version.py

Version module for the TrackGate application.

Resolves the running version through a fallback chain (environment variable,
installed package metadata, fallback) and exposes it to logging, the health
endpoint and the startup banner.

Author: Emfour Solutions
Created: 2026-09-14
Last Modified: 2026-10-18
"""

import logging
import os
import platform
import sys
from importlib import metadata
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "trackgate"


class VersionInfo:
    """Version information manager."""

    def __init__(self):
        self._base_version: Optional[Dict[str, Any]] = None

    def _get_base_version(self) -> Dict[str, Any]:
        """Get base version information using fallback chain."""
        if self._base_version is not None:
            return self._base_version

        version_sources = [
            self._get_version_from_environment,
            self._get_version_from_metadata,
        ]

        for source_func in version_sources:
            version_info = source_func()
            if version_info:
                logger.debug(
                    f"Version loaded from {version_info['source']}: {version_info['version']}"
                )
                self._base_version = version_info
                return self._base_version

        self._base_version = self._get_fallback_version()
        return self._base_version

    @staticmethod
    def _get_version_from_environment() -> Optional[Dict[str, Any]]:
        """Attempt to get version from environment variables."""
        env_version = os.getenv("TRACKGATE_VERSION")
        if env_version:
            return {"version": env_version, "source": "environment"}
        return None

    @staticmethod
    def _get_version_from_metadata() -> Optional[Dict[str, Any]]:
        """Attempt to get version from the installed distribution."""
        try:
            return {"version": metadata.version(DISTRIBUTION_NAME), "source": "package"}
        except metadata.PackageNotFoundError:
            logger.debug("Distribution metadata not found")
            return None

    @staticmethod
    def _get_fallback_version() -> Dict[str, Any]:
        return {"version": "0.0.0.dev0", "source": "fallback"}

    def get_version(self) -> str:
        return self._get_base_version()["version"]

    def is_development_build(self) -> bool:
        version = self.get_version()
        return "dev" in version or self._get_base_version()["source"] == "fallback"

    def get_version_info(self) -> Dict[str, Any]:
        base = self._get_base_version()
        return {
            "version": base["version"],
            "source": base["source"],
            "is_development": self.is_development_build(),
            "python_version": sys.version.split()[0],
            "platform": platform.platform(),
        }


_version_instance: Optional[VersionInfo] = None


def _get_version_instance() -> VersionInfo:
    global _version_instance
    if _version_instance is None:
        _version_instance = VersionInfo()
    return _version_instance


def get_version() -> str:
    """Get the current application version."""
    return _get_version_instance().get_version()


def get_version_info() -> Dict[str, Any]:
    """Get version, build source and runtime information."""
    return _get_version_instance().get_version_info()
