"""
File: services/exceptions.py

Description:
    Custom exception hierarchy providing structured error handling for the TrackGate
    application. Expected tracking conditions (vehicle not mapped, device unknown to
    Traccar, no fix yet) are modelled as statuses, not exceptions; the classes here
    cover malformed input, registry failures and configuration problems.

Key features:
    - Tracking exceptions for malformed vehicle identifiers and registry failures
    - Configuration validation exceptions for application setup and validation
    - Clear exception naming conventions for easy identification and handling

Author: Emfour Solutions
Created: 2026-09-14
Last Modified: 2026-10-18
"""


class TrackingError(Exception):
    """Base exception for tracking gateway errors"""

    pass


class InvalidVehicleIdError(TrackingError):
    """Raised when a vehicle identifier is not a positive integer"""

    def __init__(self, raw_value):
        self.raw_value = raw_value
        super().__init__(f"Malformed vehicle identifier: {raw_value!r}")


class VehicleRegistryError(TrackingError):
    """Raised when the vehicle registry cannot be read"""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class ConfigurationError(Exception):
    """Base exception for configuration errors"""

    pass


class ConfigurationValidationError(ConfigurationError):
    """Raised when configuration validation fails"""

    pass
