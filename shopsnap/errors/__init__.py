"""
Error handlers for ShopSnap Backend
"""
import logging

from flask import jsonify

logger = logging.getLogger(__name__)


def _error_response(error: str, message: str, status_code: int):
    return jsonify({
        'success': False,
        'error': error,
        'message': message,
    }), status_code


def register_error_handlers(app):
    """Register error handlers with the Flask app."""

    @app.errorhandler(ShopSnapError)
    def shopsnap_error(error):
        if error.status_code >= 500:
            logger.error(f"{error.__class__.__name__}: {error.message}")
        return _error_response(error.title, error.message, error.status_code)

    @app.errorhandler(400)
    def bad_request(error):
        return _error_response(
            'Bad Request',
            str(error.description) if hasattr(error, 'description') else 'Invalid request',
            400,
        )

    @app.errorhandler(404)
    def not_found(error):
        return _error_response('Not Found', 'The requested resource was not found', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return _error_response(
            'Method Not Allowed', 'The method is not allowed for this endpoint', 405
        )

    @app.errorhandler(413)
    def payload_too_large(error):
        return _error_response(
            'Payload Too Large', 'The uploaded file exceeds the size limit', 413
        )

    @app.errorhandler(429)
    def rate_limit_exceeded(error):
        return _error_response(
            'Rate Limit Exceeded', 'Too many requests. Please try again later.', 429
        )

    @app.errorhandler(500)
    def internal_server_error(error):
        return _error_response(
            'Internal Server Error', 'An unexpected error occurred', 500
        )

    @app.errorhandler(502)
    def bad_gateway(error):
        return _error_response(
            'Bad Gateway', 'An upstream service returned an invalid response', 502
        )

    @app.errorhandler(503)
    def service_unavailable(error):
        return _error_response(
            'Service Unavailable', 'The service is temporarily unavailable', 503
        )


class ShopSnapError(Exception):
    """Base exception for ShopSnap errors."""

    title = 'Internal Server Error'

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ShopSnapError):
    """Exception raised when a request payload is invalid."""

    title = 'Bad Request'

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NotFoundError(ShopSnapError):
    """Exception raised when a resource does not exist."""

    title = 'Not Found'

    def __init__(self, resource: str, identifier):
        message = f"{resource} with ID {identifier} not found"
        super().__init__(message, status_code=404)


class OCRProcessingError(ShopSnapError):
    """Exception raised when the OCR provider fails."""

    title = 'Bad Gateway'

    def __init__(self, reason: str = None):
        message = "Failed to process image"
        if reason:
            message += f" - {reason}"
        super().__init__(message, status_code=502)


class TaxonomyError(ShopSnapError):
    """Exception raised when a category taxonomy is malformed."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid taxonomy: {reason}", status_code=500)
