from typing import Optional, Any

class CargoLinkError(Exception):
    """
    Base exception for CargoLink application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ResourceNotFoundError(CargoLinkError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class AuthenticationError(CargoLinkError):
    """
    Raised when authentication fails (e.g. wrong webhook secret token).
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class ValidationError(CargoLinkError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)

class ExternalServiceError(CargoLinkError):
    """
    Raised when an external service (e.g., Telegram, MongoDB) fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None, code: str = "EXTERNAL_SERVICE_ERROR", status_code: int = 502):
        super().__init__(message, code=code, status_code=status_code, details=details)

class StoreError(ExternalServiceError):
    """
    Raised when a record, session or order store call fails.
    The dialogue step that triggered it must not be applied.
    """
    def __init__(self, message: str = "Store operation failed", details: Optional[Any] = None):
        super().__init__(message, details=details, code="STORE_ERROR", status_code=503)

class DialogueError(CargoLinkError):
    """
    Raised when the dialogue engine detects a broken transition or record invariant.
    """
    def __init__(self, message: str = "Dialogue error", details: Optional[Any] = None):
        super().__init__(message, code="DIALOGUE_ERROR", status_code=500, details=details)
