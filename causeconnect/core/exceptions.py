"""
Application Errors

Every failure the API reports is an AppError carrying a human-readable
message and an HTTP status code. The handlers registered in main.py render
them as ``{"message": ..., "status": ..., "errors": [...]}``.
"""

from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base application error."""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message, "status": self.status_code}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationFailed(AppError):
    status_code = 400


class Unauthorized(AppError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized", **kwargs):
        super().__init__(message, **kwargs)


class Forbidden(AppError):
    status_code = 403

    def __init__(self, message: str = "Forbidden", **kwargs):
        super().__init__(message, **kwargs)


class NotFound(AppError):
    status_code = 404


class MethodNotAllowed(AppError):
    status_code = 405

    def __init__(self, message: str = "Method not allowed", **kwargs):
        super().__init__(message, **kwargs)


class Conflict(AppError):
    status_code = 409


class ServiceUnavailable(AppError):
    """A dependency (storage, redis, smtp) is not configured."""
    status_code = 503
