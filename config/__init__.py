"""
File: config/__init__.py

Description:
    Package initialisation for the configuration system

Author: Emfour Solutions
Created: 2026-09-14
"""

# Local application imports
from .base import BaseConfig, ConfigLoader
from .environments import (
    DevelopmentConfig,
    ProductionConfig,
    StagingConfig,
    TestingConfig,
    get_config,
)
from .secrets import SecretManager, get_secret_manager

__all__ = [
    "BaseConfig",
    "ConfigLoader",
    "DevelopmentConfig",
    "ProductionConfig",
    "StagingConfig",
    "TestingConfig",
    "SecretManager",
    "get_config",
    "get_secret_manager",
]
