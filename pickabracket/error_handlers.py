from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError

from .core.types import api_response
from .errors import (
    AppError,
    NotFoundError,
    StateConsistencyError,
    StoreError,
    ValidationError,
)

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(message, status_code):
    return jsonify(api_response(message, success=False)), status_code


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors. Their messages are meant for the user."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles unknown participant or fixture ids."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(StateConsistencyError)
def handle_state_consistency_error(error):
    """Handles orchestration bugs; the details stay in the log."""
    current_app.logger.error(f"State Consistency Error: {error.message}")
    return _error_response(
        "The request conflicts with the current tournament state.", error.status_code
    )


@error_handlers_bp.app_errorhandler(StoreError)
def handle_store_error(error):
    """Handles failures of the backing store."""
    current_app.logger.error(f"Store Error: {error.message} (cause: {error.__cause__!r})")
    # Avoid exposing raw database error details to the user
    return _error_response(
        "A database error occurred. Please try again later.", error.status_code
    )


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return _error_response("Page Not Found", 404)


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests with an unsupported method."""
    return _error_response("Method Not Allowed", 405)


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return _error_response("An unexpected error occurred.", 500)


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """Handles CSRF errors, which usually indicate a session timeout."""
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return _error_response(
        "Your session may have expired. Please try your action again.", 400
    )
