"""
Error taxonomy for the document service.

Each error carries the HTTP status it maps to; the application converts any
`ServiceError` into a JSON body at the route boundary.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ServiceError(RuntimeError):
    """Base class for errors surfaced to HTTP clients."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(ServiceError):
    """Request body is missing a required field or has the wrong shape."""

    status_code = 400


class RenderError(ServiceError):
    """HTML-to-PDF rendering failed."""


class EncodeError(ServiceError):
    """DOCX encoding failed."""


class ArchiveError(ServiceError):
    """Zip archive could not be written."""
