"""
File: config/environments.py

Description:
    Environment specific configuration classes for TrackGate

Author: Emfour Solutions
Created: 2026-09-14
"""

# Standard library imports
import os
from typing import Any, Dict, Optional

# Local application imports
from services.logging_service import get_module_logger

from .base import BaseConfig
from .secrets import SecretManager

logger = get_module_logger(__name__)


class DevelopmentConfig(BaseConfig):
    """Development environment configuration."""

    def __init__(self, secret_manager: Optional[SecretManager] = None):
        super().__init__("development", secret_manager)

    @property
    def DEBUG(self) -> bool:
        return True

    @property
    def SQLALCHEMY_RECORD_QUERIES(self) -> bool:
        return True

    @property
    def LOG_LEVEL(self) -> str:
        """Use DEBUG logging level in development."""
        return self.secret_manager.get_secret("LOG_LEVEL", "DEBUG")

    @property
    def SQLALCHEMY_ENGINE_OPTIONS(self) -> Dict[str, Any]:
        options = super().SQLALCHEMY_ENGINE_OPTIONS
        options.update(
            {
                "pool_pre_ping": True,
                "connect_args": {"check_same_thread": False, "timeout": 20},
            }
        )
        return options


class ProductionConfig(BaseConfig):
    """Production environment configuration."""

    def __init__(self, secret_manager: Optional[SecretManager] = None):
        super().__init__("production", secret_manager)

    @property
    def DEBUG(self) -> bool:
        return False

    @property
    def SQLALCHEMY_RECORD_QUERIES(self) -> bool:
        return False

    @property
    def SECRET_KEY(self) -> str:
        """Require secret key in production."""
        secret_key = self.secret_manager.get_secret("SECRET_KEY", required=True)
        if not secret_key or secret_key == "dev-secret-key-change-in-production":
            raise ValueError("SECRET_KEY must be set to a secure value in production")
        return secret_key

    def validate_config(self) -> list:
        """Enhanced validation for production environment."""
        issues = super().validate_config()

        if self.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
            logger.warning(
                "SQLite is not recommended for production use - set DATABASE_URL to "
                "a PostgreSQL or MySQL database"
            )

        if not self.TRACCAR_VERIFY_SSL:
            logger.warning("TRACCAR_VERIFY_SSL is disabled in production")

        return issues


class TestingConfig(BaseConfig):
    """Testing environment configuration."""

    def __init__(self, secret_manager: Optional[SecretManager] = None):
        # Uncached so tests can change the environment between app instances
        super().__init__(
            "testing", secret_manager or SecretManager("testing", enable_caching=False)
        )

    @property
    def TESTING(self) -> bool:
        return True

    @property
    def DEBUG(self) -> bool:
        return False

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """In-memory SQLite unless DATABASE_URL points at an integration database."""
        return self.secret_manager.get_secret("DATABASE_URL", "sqlite:///:memory:")

    @property
    def SQLALCHEMY_ENGINE_OPTIONS(self) -> Dict[str, Any]:
        return {}

    @property
    def LOG_LEVEL(self) -> str:
        """Use WARNING level to reduce test output noise."""
        return self.secret_manager.get_secret("LOG_LEVEL", "WARNING")


class StagingConfig(ProductionConfig):
    """Staging environment configuration - production with relaxed settings."""

    def __init__(self, secret_manager: Optional[SecretManager] = None):
        super().__init__(secret_manager)
        self.environment = "staging"
        # Reload configurations with staging environment
        self.loader.environment = "staging"
        self._load_configurations()

    @property
    def DEBUG(self) -> bool:
        return self.secret_manager.get_secret("DEBUG", "false").lower() == "true"

    @property
    def LOG_LEVEL(self) -> str:
        return self.secret_manager.get_secret("LOG_LEVEL", "INFO")


# Configuration factory
def get_config(environment: str = None) -> BaseConfig:
    """Get configuration instance for the specified environment."""
    if environment is None:
        environment = os.environ.get("FLASK_ENV", "development")

    config_map = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
        "staging": StagingConfig,
    }

    config_class = config_map.get(environment)
    if not config_class:
        logger.warning(f"Unknown environment '{environment}', using development config")
        config_class = DevelopmentConfig

    return config_class()
