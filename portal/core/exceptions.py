from typing import Any, Dict, Optional

class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

class AuthError(AppException):
    """Bearer token missing or rejected; the user must enter it again."""
    def __init__(self, message: str = "GitHub token is missing or invalid"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )

class ConfigError(AppException):
    def __init__(self, message: str = "No document identifier found"):
        super().__init__(
            message=message,
            status_code=409,
            error_code="NO_DOCUMENT_ID"
        )

class RemoteError(AppException):
    """Non-success response (or transport failure) from the document store."""
    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(
            message=message,
            status_code=502,
            error_code="REMOTE_SERVICE_ERROR",
            details={"upstream_status": upstream_status} if upstream_status is not None else None
        )
        self.upstream_status = upstream_status
