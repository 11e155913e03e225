"""JSON error responses and application error handlers."""

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int, details=None) -> tuple:
    """Create a JSON error response.

    Use this function in routes instead of returning jsonify directly.

    Args:
        message: Error message.
        status_code: HTTP status code.
        details: Optional field-level messages, e.g. from a ValidationError.

    Returns:
        Tuple of (response, status_code).
    """
    response = {'error': message}
    if details:
        response['details'] = details
    return jsonify(response), status_code


def register_error_handlers(app: Flask) -> None:
    """Register error handlers on Flask app.

    Args:
        app: Flask application instance.
    """

    @app.errorhandler(400)
    def bad_request(error):
        return _make_error_response('Bad request', 400)

    @app.errorhandler(404)
    def not_found(error):
        return _make_error_response('Not found', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return _make_error_response('Method not allowed', 405)

    @app.errorhandler(500)
    def internal_error(error):
        return _make_error_response('Internal server error', 500)

    @app.errorhandler(Exception)
    def unhandled_exception(error):
        if isinstance(error, HTTPException):
            return _make_error_response(error.name, error.code or 500)
        logger.exception('Unhandled error')
        return _make_error_response('Internal server error', 500)


def _make_error_response(message: str, status_code: int) -> tuple:
    response = {
        'error': message,
        'status': status_code,
    }
    return jsonify(response), status_code
