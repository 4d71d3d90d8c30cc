"""
TrackGate - Main Application Entry Point

Flask application factory for the tracking gateway that answers the admin map's
"where is this car" and "where is the fleet" questions from a Traccar server.

Features: Application factory pattern, layered configuration, vehicle registry
database, Traccar client with poll rate limiting, JSON API and CLI commands.

Author: Emfour Solutions
Created: 2026-09-14
"""

# Standard library imports
import logging
import os

# Third-party imports
from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

# Local application imports
from config.environments import get_config
from database import db
from services.cli.tracking_commands import register_tracking_commands
from services.exceptions import VehicleRegistryError
from services.logging_service import log_startup_banner, setup_logging
from services.rate_limiter import PollLedger, PollRateLimiter
from services.traccar_client import TraccarClient
from services.tracking_service import TrackingService
from services.version import get_version

# Initialize extensions
migrate = Migrate()

load_dotenv()

# Set up logger
logger = logging.getLogger("main")


def create_app(config_name=None):
    app = Flask(__name__)

    # Configure reverse proxy support for Apache, Nginx, etc.
    from werkzeug.middleware.proxy_fix import ProxyFix

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)

    # Determine environment and get configuration
    flask_env = config_name or os.environ.get("FLASK_ENV", "development")
    config_instance = get_config(flask_env)

    configure_flask_app(app, config_instance)

    db.init_app(app)
    migrate.init_app(app, db)

    with app.app_context():
        # Import models AFTER db.init_app to avoid circular imports
        from models.vehicle import Vehicle  # noqa: F401

        db.Model.metadata.create_all(bind=db.engine, checkfirst=True)

    # Tracking gateway, owned by the app so every worker thread shares one ledger
    app.poll_ledger = PollLedger()
    app.tracking_service = TrackingService(
        client=TraccarClient.from_config(app.config),
        rate_limiter=PollRateLimiter(
            min_interval_seconds=app.config["TRACCAR_MIN_POLL_INTERVAL"],
            ledger=app.poll_ledger,
        ),
    )

    setup_logging(app)
    log_startup_banner(app)

    register_tracking_commands(app)

    # Register blueprints
    from routes.api import bp as api_bp
    from routes.tracking import bp as tracking_bp

    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(tracking_bp, url_prefix="/api/admin")

    setup_error_handlers(app)

    return app


def configure_flask_app(app, config_instance):
    """Configure Flask app with the configuration system."""

    # Core Flask settings
    app.config["SECRET_KEY"] = config_instance.SECRET_KEY
    app.config["DEBUG"] = config_instance.DEBUG
    app.config["TESTING"] = config_instance.TESTING

    # SQLAlchemy settings
    app.config["SQLALCHEMY_DATABASE_URI"] = config_instance.SQLALCHEMY_DATABASE_URI
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = config_instance.SQLALCHEMY_TRACK_MODIFICATIONS
    app.config["SQLALCHEMY_RECORD_QUERIES"] = config_instance.SQLALCHEMY_RECORD_QUERIES
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = config_instance.SQLALCHEMY_ENGINE_OPTIONS

    # Tracking settings
    app.config["TRACCAR_BASE_URL"] = config_instance.TRACCAR_BASE_URL
    app.config["TRACCAR_USER"] = config_instance.TRACCAR_USER
    app.config["TRACCAR_PASS"] = config_instance.TRACCAR_PASS
    app.config["TRACCAR_MIN_POLL_INTERVAL"] = config_instance.TRACCAR_MIN_POLL_INTERVAL
    app.config["TRACCAR_TIMEOUT"] = config_instance.TRACCAR_TIMEOUT
    app.config["TRACCAR_VERIFY_SSL"] = config_instance.TRACCAR_VERIFY_SSL

    # Logging settings
    app.config["LOG_LEVEL"] = config_instance.LOG_LEVEL
    app.config["LOG_DIR"] = config_instance.LOG_DIR

    app.config["VERSION"] = get_version()

    # Store the config instance for later use
    app.config_instance = config_instance

    logger.info(f"Configured Flask app for environment: {config_instance.environment}")

    issues = config_instance.validate_config()
    if issues:
        logger.warning(f"Configuration issues found: {issues}")


def setup_error_handlers(app):
    """Set up JSON error handlers"""

    def _error_response(error: str, message: str, status: int):
        return jsonify({"error": error, "message": message, "status": status}), status

    @app.errorhandler(VehicleRegistryError)
    def handle_registry_error(error):
        logger.error(f"Vehicle registry error: {error}")
        try:
            db.session.rollback()
        except Exception as e:
            logger.warning(f"Failed to rollback database session: {e}")
        return _error_response("Database error", "Vehicle registry unavailable", 503)

    @app.errorhandler(404)
    def not_found_error(error):
        return _error_response("Not found", f"No resource at {request.path}", 404)

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return _error_response(
            "Method not allowed", f"{request.method} is not allowed on {request.path}", 405
        )

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return _error_response("Internal server error", "An unexpected error occurred", 500)

    @app.errorhandler(Exception)
    def handle_exception(e):
        """Handle uncaught exceptions"""
        if isinstance(e, HTTPException):
            return _error_response(e.name, e.description or e.name, e.code or 500)

        logger.error(f"Unhandled exception: {e}", exc_info=True)

        try:
            db.session.rollback()
        except Exception as rollback_error:
            # Database session may not be available
            logger.warning(f"Failed to rollback database session: {rollback_error}")

        if app.debug:
            raise e

        return _error_response("Internal server error", "An unexpected error occurred", 500)


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
