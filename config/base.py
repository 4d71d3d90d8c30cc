"""
File: config/base.py

Description:
    Loads the Base Configuration for TrackGate

Author: Emfour Solutions
Created: 2026-09-14
"""

# Standard library imports
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

# Third-party imports
import yaml

# Local application imports
from services.exceptions import ConfigurationValidationError

from .secrets import SecretManager, get_secret_manager

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads configuration from YAML files with multi-source support."""

    def __init__(self, environment: str = "development"):
        self.environment = environment

        # Multi-source configuration directories
        self.external_config_dir = Path(
            os.environ.get("TRACKGATE_CONFIG_DIR", "/app/external_config")
        )
        self.bundled_config_dir = Path(__file__).parent / "settings"

        self._config_cache: Dict[str, Any] = {}

    def load_config_file(self, filename: str) -> Dict[str, Any]:
        """
        Load a YAML configuration file with multi-source support.

        Priority order:
        1. External config directory (mounted volume)
        2. Bundled config directory (package defaults)
        """
        cache_key = f"{filename}:{self.environment}"
        if cache_key in self._config_cache:
            return self._config_cache[cache_key]

        config: Dict[str, Any] = {}
        config_sources = []

        bundled_path = self.bundled_config_dir / filename
        if bundled_path.exists():
            try:
                with open(bundled_path, "r") as f:
                    config = yaml.safe_load(f) or {}
                config_sources.append(f"bundled:{bundled_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Failed to load bundled config {bundled_path}: {e}")

        # External config overrides bundled defaults
        external_path = self.external_config_dir / filename
        if external_path.exists():
            try:
                with open(external_path, "r") as f:
                    external_config = yaml.safe_load(f) or {}
                config = self._deep_merge_configs(config, external_config)
                config_sources.append(f"external:{external_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Failed to load external config {external_path}: {e}")

        if config_sources:
            logger.debug(f"Configuration '{filename}' loaded from: {', '.join(config_sources)}")
        else:
            logger.warning(f"Configuration file '{filename}' not found in any source")

        self._config_cache[cache_key] = config
        return config

    def _deep_merge_configs(
        self, base_config: Dict[str, Any], override_config: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Deep merge two configuration dictionaries.

        Args:
            base_config: Base configuration (provides defaults)
            override_config: Override configuration (takes precedence)

        Returns:
            Merged configuration dictionary
        """
        result = base_config.copy()

        for key, value in override_config.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    @staticmethod
    def get_config_value(config: Dict[str, Any], *keys: str, default: Any = None) -> Any:
        """Get a nested configuration value."""
        value = config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def merge_environment_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Merge environment-specific configuration over the defaults."""
        base_config = config.get("default", {}).copy()
        env_config = self.get_config_value(
            config, "environments", self.environment, default={}
        )
        return self._deep_merge_configs(base_config, env_config)


class BaseConfig:
    """Base configuration class with common functionality."""

    def __init__(self, environment: str = None, secret_manager: Optional[SecretManager] = None):
        self.environment = environment or os.environ.get("FLASK_ENV", "development")
        self.loader = ConfigLoader(self.environment)
        self.secret_manager = secret_manager or get_secret_manager(self.environment)

        self._load_configurations()

    def _load_configurations(self):
        """Load all configuration files."""
        db_config = self.loader.load_config_file("database.yaml")
        self.db_config = self.loader.merge_environment_config(db_config)

        app_config = self.loader.load_config_file("app.yaml")
        self.app_config = self.loader.merge_environment_config(app_config)

        logging_config = self.loader.load_config_file("logging.yaml")
        self.logging_config = self.loader.merge_environment_config(logging_config)

        tracking_config = self.loader.load_config_file("tracking.yaml")
        self.tracking_config = self.loader.merge_environment_config(tracking_config)

    @property
    def SECRET_KEY(self) -> str:
        """Get secret key from secure sources."""
        return self.secret_manager.get_secret(
            "SECRET_KEY",
            default="dev-secret-key-change-in-production",
            required=self.environment == "production",
        )

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Build database URI from configuration and secrets."""
        database_url = self.secret_manager.get_secret("DATABASE_URL")
        if database_url:
            return database_url

        db_name = self.secret_manager.get_secret(
            "DB_NAME", self.db_config.get("sqlite", {}).get("name", "data/trackgate.db")
        )
        if os.path.isabs(db_name):
            db_path = db_name
        else:
            # Relative to the app root (parent of config directory)
            app_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
            db_path = os.path.join(app_root, db_name)
        return f"sqlite:///{db_path}"

    @property
    def SQLALCHEMY_ENGINE_OPTIONS(self) -> Dict[str, Any]:
        return dict(self.db_config.get("engine_options", {}))

    @property
    def SQLALCHEMY_TRACK_MODIFICATIONS(self) -> bool:
        return self.db_config.get("track_modifications", False)

    @property
    def SQLALCHEMY_RECORD_QUERIES(self) -> bool:
        return self.db_config.get("record_queries", False)

    @property
    def LOG_LEVEL(self) -> str:
        return self.secret_manager.get_secret(
            "LOG_LEVEL", self.logging_config.get("level", "INFO")
        )

    @property
    def LOG_DIR(self) -> str:
        return self.secret_manager.get_secret(
            "LOG_DIR",
            self.logging_config.get("file_logging", {}).get("directory", "logs"),
        )

    @property
    def DEBUG(self) -> bool:
        """Get debug mode setting."""
        return (
            self.secret_manager.get_secret(
                "DEBUG",
                str(self.app_config.get("debug", self.environment == "development")),
            ).lower()
            == "true"
        )

    @property
    def TESTING(self) -> bool:
        return self.environment == "testing"

    # Tracking settings
    @property
    def TRACCAR_BASE_URL(self) -> Optional[str]:
        return self.secret_manager.get_secret(
            "TRACCAR_BASE_URL", self.tracking_config.get("base_url") or None
        )

    @property
    def TRACCAR_USER(self) -> Optional[str]:
        return self.secret_manager.get_secret("TRACCAR_USER")

    @property
    def TRACCAR_PASS(self) -> Optional[str]:
        return self.secret_manager.get_secret("TRACCAR_PASS")

    @property
    def TRACCAR_MIN_POLL_INTERVAL(self) -> int:
        return self._positive_int_or_default(
            "TRACCAR_MIN_POLL_INTERVAL", self.tracking_config.get("min_poll_interval", 5)
        )

    @property
    def TRACCAR_TIMEOUT(self) -> int:
        return self._positive_int_or_default(
            "TRACCAR_TIMEOUT", self.tracking_config.get("request_timeout", 10)
        )

    @property
    def TRACCAR_VERIFY_SSL(self) -> bool:
        return (
            self.secret_manager.get_secret(
                "TRACCAR_VERIFY_SSL", str(self.tracking_config.get("verify_ssl", True))
            ).lower()
            == "true"
        )

    @property
    def traccar_configured(self) -> bool:
        return bool(self.TRACCAR_BASE_URL and self.TRACCAR_USER and self.TRACCAR_PASS)

    def _parse_positive_int(self, key: str, default: int) -> int:
        """
        Read an integer setting that must be positive.

        Raises:
            ConfigurationValidationError: If the value is not a positive integer
        """
        raw_value = self.secret_manager.get_secret(key, str(default))
        try:
            value = int(raw_value)
        except (TypeError, ValueError):
            raise ConfigurationValidationError(f"{key} must be an integer, got {raw_value!r}")
        if value <= 0:
            raise ConfigurationValidationError(f"{key} must be positive, got {value}")
        return value

    def _positive_int_or_default(self, key: str, default: int) -> int:
        try:
            return self._parse_positive_int(key, default)
        except ConfigurationValidationError as e:
            logger.warning(f"{e}; using default {default}")
            return int(default)

    def validate_config(self) -> list:
        """Validate configuration and return list of issues."""
        issues = []

        if self.environment == "production":
            if not self.secret_manager.get_secret("SECRET_KEY"):
                issues.append("Required secret 'SECRET_KEY' not found in production")

        for key, default in (
            ("TRACCAR_MIN_POLL_INTERVAL", self.tracking_config.get("min_poll_interval", 5)),
            ("TRACCAR_TIMEOUT", self.tracking_config.get("request_timeout", 10)),
        ):
            try:
                self._parse_positive_int(key, default)
            except ConfigurationValidationError as e:
                issues.append(str(e))

        base_url = self.TRACCAR_BASE_URL
        if base_url and not base_url.startswith(("http://", "https://")):
            issues.append("TRACCAR_BASE_URL must start with http:// or https://")

        if not self.traccar_configured:
            # Not fatal: tracking endpoints answer traccar_not_configured instead
            logger.warning(
                "Traccar integration is not configured; tracking endpoints will report "
                "traccar_not_configured"
            )

        return issues

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary (for debugging/inspection)."""
        return {
            "environment": self.environment,
            "application": {"debug": self.DEBUG, "testing": self.TESTING},
            "logging": {"level": self.LOG_LEVEL, "directory": self.LOG_DIR},
            "tracking": {
                "traccar_configured": self.traccar_configured,
                "traccar_base_url": self.TRACCAR_BASE_URL,
                "min_poll_interval": self.TRACCAR_MIN_POLL_INTERVAL,
                "request_timeout": self.TRACCAR_TIMEOUT,
                "verify_ssl": self.TRACCAR_VERIFY_SSL,
            },
        }
