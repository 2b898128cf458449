"""
Custom application exceptions
"""

from typing import Optional, Dict, Any


class KidMapException(Exception):
    """Base exception for KidMap application"""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(KidMapException):
    """No resolved identity for an endpoint that requires one"""

    def __init__(self, message: str = "Authentication required", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="AUTH_ERROR",
            status_code=401,
            details=details
        )


class ValidationError(KidMapException):
    """Validation errors"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details=details
        )


class UpstreamError(KidMapException):
    """
    A third-party provider failed or returned an unusable payload.

    The provider and query context stay in the logs; clients only see an
    opaque message.
    """

    def __init__(
        self,
        provider: str,
        message: str,
        status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        self.provider = provider
        self.upstream_status = status
        self.context = context or {}
        super().__init__(
            message=message,
            code="UPSTREAM_ERROR",
            status_code=500
        )
