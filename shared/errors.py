"""
Shared error handling for the story cache service.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class StoriesError(Exception):
    """Base exception for the story cache service."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class ExternalServiceError(StoriesError):
    """External service errors."""

    def __init__(
        self,
        service: str,
        message: str = "External service error",
        details: Optional[Dict[str, Any]] = None,
        *,
        code: str = "EXTERNAL_SERVICE_ERROR",
    ):
        self.service = service
        super().__init__(code, f"{service}: {message}", details)


class UpstreamFetchError(ExternalServiceError):
    """Upstream answered with a non-success status, or could not be reached."""

    def __init__(self, url: str, status_code: Optional[int] = None, message: Optional[str] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(
            "upstream",
            message or f"Failed to fetch {url}",
            {"url": url, "status_code": status_code},
            code="UPSTREAM_FETCH_ERROR",
        )


class UpstreamDecodeError(ExternalServiceError):
    """Upstream body was not JSON or did not match the expected shape."""

    def __init__(self, url: str, message: str = "Malformed upstream body"):
        self.url = url
        super().__init__(
            "upstream",
            message,
            {"url": url},
            code="UPSTREAM_DECODE_ERROR",
        )
