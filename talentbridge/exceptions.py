"""
Custom exceptions for the TalentBridge backend
Client errors propagate to the caller; external-service failures are
recovered locally by the extraction and matching fallbacks.
"""

from typing import Optional, Dict, Any


class TalentBridgeError(Exception):
    """Base exception for all TalentBridge errors"""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class ValidationError(TalentBridgeError):
    """Raised when input validation fails"""
    pass


class AuthenticationError(TalentBridgeError):
    """Raised when authentication fails"""
    pass


class AuthorizationError(TalentBridgeError):
    """Raised when the caller lacks the required role"""
    pass


class ResourceNotFoundError(TalentBridgeError):
    """Raised when a requested resource is not found"""
    pass


class ConflictError(TalentBridgeError):
    """Raised when a resource already exists"""
    pass


class ExternalServiceError(TalentBridgeError):
    """Raised when the generative-language service fails or answers garbage"""
    pass


class FileProcessingError(TalentBridgeError):
    """Raised when an uploaded file cannot be stored or converted"""
    pass


ERROR_STATUS_MAPPING = {
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    ResourceNotFoundError: 404,
    ConflictError: 409,
    ExternalServiceError: 502,
    FileProcessingError: 400,
}


def get_http_status_code(exception: TalentBridgeError) -> int:
    """Get HTTP status code for an exception"""
    for exc_type in type(exception).__mro__:
        if exc_type in ERROR_STATUS_MAPPING:
            return ERROR_STATUS_MAPPING[exc_type]
    return 500


def create_error_response(exception: TalentBridgeError) -> Dict[str, Any]:
    """Create a standardized error response"""
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": type(exception).__name__
        }
    }
