from typing import Any, Dict, Optional
from fastapi import HTTPException, status

class LendariaException(Exception):
    """Base exception for the Lendária backend"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

class ConfigurationError(LendariaException):
    """Configuration related errors"""
    pass

class ValidationError(LendariaException):
    """Data validation errors"""
    pass

class ExternalAPIError(LendariaException):
    """External API related errors"""
    pass

class DatabaseError(LendariaException):
    """Record store related errors"""
    pass

class RecognitionError(LendariaException):
    """Speech recognition capability errors"""
    pass

class RecognitionStateError(RecognitionError):
    """Recognition session used in an invalid state (e.g. started twice)"""
    pass

# HTTP Exceptions for FastAPI
class HTTPValidationError(HTTPException):
    """HTTP validation error with structured details"""

    def __init__(self, detail: str, errors: Optional[Dict[str, Any]] = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": detail, "errors": errors or {}}
        )

class HTTPInternalServerError(HTTPException):
    """HTTP internal server error"""

    def __init__(self, detail: str = "Internal server error", error_id: str = None):
        error_detail = {"message": detail, "type": "internal_server_error"}
        if error_id:
            error_detail["error_id"] = error_id

        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail
        )

class HTTPServiceUnavailableError(HTTPException):
    """HTTP service unavailable error"""

    def __init__(self, detail: str = "Service temporarily unavailable", retry_after: int = 300):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"message": detail, "type": "service_unavailable_error"},
            headers={"Retry-After": str(retry_after)}
        )

# Exception mapping for consistent error responses
EXCEPTION_MAP = {
    ValidationError: HTTPValidationError,
    ConfigurationError: HTTPServiceUnavailableError,
    ExternalAPIError: HTTPServiceUnavailableError,
    DatabaseError: HTTPInternalServerError,
    RecognitionError: HTTPInternalServerError,
    RecognitionStateError: HTTPInternalServerError,
}

def map_exception_to_http(exc: LendariaException) -> HTTPException:
    """Map application exception to HTTP exception"""
    exception_class = EXCEPTION_MAP.get(type(exc), HTTPInternalServerError)

    if exception_class == HTTPValidationError:
        return exception_class(exc.message, exc.details)
    elif exception_class == HTTPServiceUnavailableError:
        retry_after = exc.details.get('retry_after', 300)
        return exception_class(exc.message, retry_after)
    else:
        error_id = exc.details.get('error_id')
        return exception_class(exc.message, error_id)
