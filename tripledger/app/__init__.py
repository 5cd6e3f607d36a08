"""
app/__init__.py — Flask application factory.

Pattern: create_app(config_name) creates and returns a configured Flask app.
         Nothing is initialised at import time — this enables:
           - Multiple isolated test app instances, each with its own Ledger
           - Clean separation between app creation and app startup

Responsibilities:
  1. Load configuration from config_by_name[config_name]
  2. Configure logging for the `tripledger` logger tree
  3. Attach the Ledger via ledger_ext.init_app()
  4. Register all route blueprints under /api/v1
  5. Register global error handlers (AppError → JSON, Exception → 500)

Run locally with:
    flask --app "tripledger.app:create_app()" run
"""

from __future__ import annotations

import logging
import traceback

from flask import Flask, jsonify
from flask.logging import default_handler
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from tripledger.config import config_by_name, validate_production_config


# ── Application factory ────────────────────────────────────────────────────

def create_app(config_name: str = "development", ledger=None) -> Flask:
    """
    Creates and returns a configured Flask application instance.

    Args:
        config_name: One of "development", "testing", "production".
                     Resolved via config_by_name in config.py.
        ledger:      Optional pre-built Ledger (tests inject one wired to
                     recording meters and sinks). Built from config otherwise.

    Returns:
        A fully configured Flask app ready to serve requests.
    """
    app = Flask(__name__)

    # ── Configuration ──────────────────────────────────────────────────────
    config_class = config_by_name.get(config_name, config_by_name["development"])
    app.config.from_object(config_class)
    app.json.sort_keys = app.config["JSON_SORT_KEYS"]

    if config_name == "production":
        validate_production_config(app)  # raises ValueError if misconfigured

    _configure_logging(app)

    # ── Extensions ─────────────────────────────────────────────────────────
    # Import here (not at module top) to avoid circular imports.
    from tripledger.app.extensions import ledger_ext
    ledger_ext.init_app(app, ledger)

    # ── Blueprints ─────────────────────────────────────────────────────────
    _register_blueprints(app)

    # ── Error handlers ─────────────────────────────────────────────────────
    _register_error_handlers(app)

    return app


def _configure_logging(app: Flask) -> None:
    """
    Routes the `tripledger` logger tree (services, events, metering) through
    Flask's default stderr handler at LOG_LEVEL.
    """
    level = app.config["LOG_LEVEL"]
    app.logger.setLevel(level)

    package_logger = logging.getLogger("tripledger")
    package_logger.setLevel(level)
    if default_handler not in package_logger.handlers:
        package_logger.addHandler(default_handler)


def _register_blueprints(app: Flask) -> None:
    """
    Registers all route blueprints under the /api/v1 prefix.

    trips, expenses and balances share /api/v1/trips because every expense
    and summary path is scoped to a trip.
    """
    from tripledger.app.routes.accounts import accounts_bp
    from tripledger.app.routes.balances import balances_bp
    from tripledger.app.routes.expenses import expenses_bp
    from tripledger.app.routes.trips import trips_bp

    app.register_blueprint(trips_bp,    url_prefix="/api/v1/trips")
    app.register_blueprint(expenses_bp, url_prefix="/api/v1/trips")
    app.register_blueprint(balances_bp, url_prefix="/api/v1/trips")
    app.register_blueprint(accounts_bp, url_prefix="/api/v1/accounts")


def _register_error_handlers(app: Flask) -> None:
    """
    Registers global error handlers.

    Handlers:
      AppError        → structured JSON error envelope with the correct HTTP status
      ValidationError → marshmallow schema errors formatted as MISSING_FIELD /
                        INVALID_FIELD / INVALID_AMOUNT responses (400)
      HTTPException   → werkzeug errors (404 route, 405 method) in the same envelope
      Exception       → generic INTERNAL_ERROR (500); full traceback logged

    Stack traces never leave the server.
    """
    from tripledger.app.errors import AppError, ErrorCode

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        """
        Converts an AppError raised anywhere in the request lifecycle
        (middleware, ledger, route) into the standard error envelope.

        Routes never catch AppError — they let it propagate here.
        """
        if error.http_status >= 500:
            app.logger.error("Ledger invariant failure: %r", error)
        return jsonify(error.to_dict()), error.http_status

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        """
        Converts marshmallow ValidationError into the standard error envelope.

        Only the FIRST field error is returned ("one error, not many").
        A message that is itself a registered ErrorCode is used as the code.
        """
        messages = error.messages  # e.g. {"amount": ["INVALID_AMOUNT"]}

        field = None
        raw_message = "Invalid input."
        code = ErrorCode.INVALID_FIELD

        if isinstance(messages, dict):
            for field_name, field_errors in messages.items():
                field = field_name if field_name != "_schema" else None

                if isinstance(field_errors, list):
                    raw_message = field_errors[0] if field_errors else "Invalid value."
                else:
                    raw_message = str(field_errors)

                code = _classify_message(raw_message)
                break
        elif isinstance(messages, list):
            raw_message = messages[0] if messages else "Invalid input."
            code = _classify_message(raw_message)

        response_body = {
            "error": {
                "code": code,
                "message": raw_message if raw_message not in vars(ErrorCode).values()
                else _code_to_message(code),
            }
        }
        if field is not None:
            response_body["error"]["field"] = field

        return jsonify(response_body), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        return jsonify({
            "error": {
                "code": error.name.upper().replace(" ", "_"),
                "message": error.description,
            }
        }), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        """
        Catches all unhandled exceptions and returns a generic 500 response.
        The full traceback goes to the application logger only.
        """
        app.logger.error(
            "Unhandled exception: %s\n%s",
            str(error),
            traceback.format_exc(),
        )
        return jsonify({
            "error": {
                "code": ErrorCode.INTERNAL_ERROR,
                "message": "An unexpected error occurred. Please try again later.",
            }
        }), 500


def _classify_message(raw_message) -> str:
    from tripledger.app.errors import ErrorCode

    if raw_message in vars(ErrorCode).values():
        return raw_message
    if str(raw_message).startswith("Missing data for required field"):
        return ErrorCode.MISSING_FIELD
    return ErrorCode.INVALID_FIELD


def _code_to_message(code: str) -> str:
    """
    Returns a human-readable default message for a known error code.
    Used when a ValidationError message IS the error code constant itself.
    """
    _messages = {
        "INVALID_AMOUNT": "Amount must be between 0 and 2**128 - 1.",
    }
    return _messages.get(code, "Invalid input.")
