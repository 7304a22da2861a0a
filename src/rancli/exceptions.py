"""
Unified exception hierarchy for rancli.

All exception classes live here. No per-module exception files.

Hierarchy:
    RanCliError (base)
    ├── FilterSyntaxError
    ├── ConfigurationError
    └── APIError
        ├── NotFoundError
        └── ServiceUnavailableError

Usage:
    from rancli.exceptions import FilterSyntaxError, NotFoundError
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# ROOT
# =============================================================================


class RanCliError(Exception):
    """
    Base exception for all rancli errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about what was being done
        details: Technical details (clause text, endpoint, etc.)
    """

    def __init__(
        self,
        message: str,
        context: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.context = context
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.context:
            parts.append(f"Context: {self.context}")
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            parts.append(f"Details: {detail_str}")
        return ". ".join(parts)


# =============================================================================
# FILTERS
# =============================================================================


class FilterSyntaxError(RanCliError):
    """Raised when a filter query clause cannot be compiled."""

    def __init__(
        self,
        message: str,
        clause: str | None = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if clause is not None:
            details["clause"] = clause
        super().__init__(message, details=details, **kwargs)
        self.clause = clause


# =============================================================================
# CONFIGURATION
# =============================================================================


class ConfigurationError(RanCliError):
    """Raised when the CLI configuration file cannot be read or written."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        super().__init__(message, details=details, **kwargs)
        self.path = path


# =============================================================================
# API
# =============================================================================


class APIError(RanCliError):
    """
    Base for errors returned by the node model or topology API.

    Carries the HTTP status code of the failed call when there was one.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if status_code:
            details["status_code"] = status_code
        if endpoint:
            details["endpoint"] = endpoint
        super().__init__(message, details=details, **kwargs)
        self.status_code = status_code
        self.endpoint = endpoint


class NotFoundError(APIError):
    """Requested node or object not found."""

    def __init__(
        self,
        message: str = "The requested resource was not found",
        **kwargs: Any,
    ):
        kwargs.setdefault("status_code", 404)
        super().__init__(message, **kwargs)


class ServiceUnavailableError(APIError):
    """Server unreachable or still failing after all retries."""

    pass


__all__ = [
    "APIError",
    "ConfigurationError",
    "FilterSyntaxError",
    "NotFoundError",
    "RanCliError",
    "ServiceUnavailableError",
]
