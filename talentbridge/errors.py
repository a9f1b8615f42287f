from typing import Dict, Any, Tuple

from flask import Flask, request
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from talentbridge.exceptions import (
    TalentBridgeError,
    get_http_status_code,
    create_error_response,
)
from talentbridge.simple_logger import get_logger

logger = get_logger("errors")


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask application"""

    @app.errorhandler(TalentBridgeError)
    def handle_talentbridge_error(error: TalentBridgeError) -> Tuple[Dict[str, Any], int]:
        status_code = get_http_status_code(error)
        if status_code >= 500:
            logger.error(f"{error.error_code}: {error.message}")
        else:
            logger.info(f"Rejected request {request.method} {request.path}: {error.message}")
        return create_error_response(error), status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException) -> Tuple[Dict[str, Any], int]:
        """JSON bodies for werkzeug errors (404, 405, 413, ...)"""
        return _error_response(err.code or 500, (err.name or "error").lower().replace(' ', '_'), err.description or str(err))

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception) -> Tuple[Dict[str, Any], int]:
        logger.exception(f"Unexpected Error: {str(err)}")
        return _error_response(500, "unexpected_error", "An unexpected error occurred")


def register_jwt_handlers(jwt: JWTManager) -> None:
    """Missing, malformed and expired tokens are all 401 with the common error body"""

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _error_response(401, "authorization_required", reason)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        logger.warning(f"Invalid token on {request.path}: {reason}")
        return _error_response(401, "invalid_token", reason)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return _error_response(401, "token_expired", "Token has expired")


def _error_response(status: int, code: str, message: str) -> Tuple[Dict[str, Any], int]:
    """Create a standardized error response"""
    trace_id = request.headers.get("X-Request-ID")
    response = {
        "error": {
            "code": code,
            "message": message,
            "status": status
        }
    }

    if trace_id:
        response["error"]["trace_id"] = trace_id

    return response, status
