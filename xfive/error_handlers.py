"""JSON error responses for every failure the API can hit."""

from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError
from google.api_core.exceptions import GoogleAPICallError

from .errors import AppError

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(message, status_code):
    return jsonify({"success": False, "message": message, "data": None}), status_code


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Validation, auth and not-found errors raised by routes and services."""
    if error.status_code >= 500:
        current_app.logger.error(f"{type(error).__name__}: {error.message}")
    else:
        current_app.logger.warning(f"{type(error).__name__}: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    return _error_response("Not found.", 404)


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    current_app.logger.error(f"Internal Server Error: {e}")
    return _error_response("An unexpected error occurred.", 500)


@error_handlers_bp.app_errorhandler(GoogleAPICallError)
def handle_store_error(e):
    """Firestore is unreachable, timed out or refused the write."""
    current_app.logger.error(f"Store Error: {e}")
    # Raw Firestore messages stay in the log
    return _error_response(
        "The tournament store is unavailable. Please try again.", 503
    )


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return _error_response(
        "Missing or expired CSRF token. Fetch /auth/csrf-token and retry.", 400
    )
