"""
File: database.py

Description:
Core database configuration module that provides SQLAlchemy setup and common database mixins
for the tracking gateway. Establishes the shared SQLAlchemy instance used by the vehicle
registry and a reusable model component for consistent timestamp management.

Key features:
- SQLAlchemy instance configuration with session management
- TimestampMixin for automatic created_at and updated_at field handling
- Consistent UTC timestamp generation for all models
- Session configuration to prevent commit expiration issues

Author: Emfour Solutions
Created: 2026-09-14
Last Modified: 2026-10-18
"""

# Standard library imports
from datetime import datetime, timezone

# Third-party imports
from flask_sqlalchemy import SQLAlchemy

# Create the SQLAlchemy instance here
db = SQLAlchemy(session_options={"expire_on_commit": False})


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamps to models"""

    created_at = db.Column(
        db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
