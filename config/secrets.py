# =============================================================================
# config/secrets.py - Secret lookup chain for TrackGate
# =============================================================================
#
# Traccar credentials, SECRET_KEY and DATABASE_URL are resolved in order from:
#   1. Docker secrets mounted under /run/secrets (file name is the lowercase key)
#   2. Process environment variables
#   3. .env.<environment> and .env files (development and testing only)
#   4. A file named by <KEY>_FILE
# The first source holding a value wins.

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import dotenv_values

logger = logging.getLogger(__name__)


class DockerSecretSource:
    name = "docker"

    def __init__(self, secrets_path: Path = Path("/run/secrets")):
        self.secrets_path = secrets_path

    def is_available(self) -> bool:
        return self.secrets_path.is_dir()

    def lookup(self, key: str) -> Optional[str]:
        secret_file = self.secrets_path / key.lower()
        if not secret_file.is_file():
            return None
        try:
            return secret_file.read_text().strip() or None
        except OSError as e:
            logger.warning(f"Failed to read Docker secret '{key}': {e}")
            return None


class EnvironmentSecretSource:
    name = "environment"

    def is_available(self) -> bool:
        return True

    def lookup(self, key: str) -> Optional[str]:
        return os.environ.get(key)


class DotEnvSecretSource:
    """Values from a .env file, read without touching os.environ"""

    def __init__(self, env_file: str):
        self.env_file = env_file
        self.name = f"dotenv:{env_file}"
        self._values: Dict[str, str] = {}
        if Path(env_file).is_file():
            self._values = {k: v for k, v in dotenv_values(env_file).items() if v is not None}

    def is_available(self) -> bool:
        return bool(self._values)

    def lookup(self, key: str) -> Optional[str]:
        return self._values.get(key)


class SecretManager:
    """Resolves secrets through the source chain, optionally caching hits."""

    def __init__(self, environment: str = "development", enable_caching: bool = True):
        self.environment = environment
        self.enable_caching = enable_caching
        self._cache: Dict[str, str] = {}

        sources = [DockerSecretSource(), EnvironmentSecretSource()]
        if environment in ("development", "testing"):
            sources += [DotEnvSecretSource(f".env.{environment}"), DotEnvSecretSource(".env")]
        self.sources: List = [source for source in sources if source.is_available()]

        logger.debug(f"Secret sources for {environment}: {[s.name for s in self.sources]}")

    def get_secret(
        self, key: str, default: Optional[str] = None, required: bool = False
    ) -> Optional[str]:
        """
        Look a secret up in source order.

        Raises:
            ValueError: If required is set, no source has the key and there is no default
        """
        if self.enable_caching and key in self._cache:
            return self._cache[key]

        value = self._lookup(key)
        if value is not None:
            if self.enable_caching:
                self._cache[key] = value
            return value

        if required and default is None:
            raise ValueError(
                f"Required secret '{key}' not found "
                f"(checked: {', '.join(s.name for s in self.sources)}, {key}_FILE)"
            )
        return default

    def _lookup(self, key: str) -> Optional[str]:
        for source in self.sources:
            value = source.lookup(key)
            if value is not None:
                logger.debug(f"Secret '{key}' resolved from {source.name}")
                return value

        file_path = os.environ.get(f"{key}_FILE")
        if file_path and os.path.isfile(file_path):
            try:
                with open(file_path, "r") as f:
                    return f.read().strip()
            except OSError as e:
                logger.warning(f"Failed to read secret file '{file_path}' for '{key}': {e}")
        return None


_secret_manager: Optional[SecretManager] = None


def get_secret_manager(environment: str = None) -> SecretManager:
    """Shared manager for the given environment, rebuilt when the environment changes."""
    global _secret_manager

    if _secret_manager is None or (environment and _secret_manager.environment != environment):
        _secret_manager = SecretManager(environment or os.environ.get("FLASK_ENV", "development"))

    return _secret_manager
