"""
Structured error types for runit.

Every failure the supervisor can observe is expressed as a ``RunitError``
subclass carrying a category, a retryable flag and a small context dict.
None of these errors ever cross the HTTP boundary: each core component
catches the error type it owns, logs it, and carries on.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                         RunitError                           │
        │        (category, retryable, context, cause)                 │
        ├──────────────────────────────────────────────────────────────┤
        │                                                              │
        │  OrchestratorError (status, reason)        ConfigError       │
        │   ├── SubmissionRejected    create-job refused               │
        │   ├── StatusFetchFailed     get-status failed mid-poll       │
        │   ├── CleanupFailed         delete-job refused               │
        │   │     └── ResourceAbsent  delete of a job already gone     │
        │   └── ClusterUnreachable    health-check path                │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> err = SubmissionRejected("job rejected", status=422, reason="Invalid")
    >>> err.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> err.with_context(job="etl-batch-1", namespace="default").to_dict()["context"]
    {'job': 'etl-batch-1', 'namespace': 'default'}

Tags:
    runit, errors, error-hierarchy, orchestrator

Doc-Types:
    api-reference
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification in logs."""

    NETWORK = "NETWORK"
    AUTH = "AUTH"
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    CONFIG = "CONFIG"
    ORCHESTRATOR = "ORCHESTRATOR"
    INTERNAL = "INTERNAL"


def category_for_status(status: int | None) -> ErrorCategory:
    """Map an orchestrator HTTP status code to an ``ErrorCategory``."""
    if status is None:
        return ErrorCategory.NETWORK
    if status in (401, 403):
        return ErrorCategory.AUTH
    if status == 404:
        return ErrorCategory.NOT_FOUND
    if status in (400, 409, 422):
        return ErrorCategory.VALIDATION
    return ErrorCategory.ORCHESTRATOR


class RunitError(Exception):
    """
    Base exception for all runit errors.

    Subclasses set ``default_category`` and ``default_retryable`` to give
    sensible defaults for their domain. ``retryable`` is informational only:
    runit itself never retries an orchestrator call.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> RunitError:
        """Add context to this error (fluent API)."""
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for structured logging."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# ORCHESTRATOR ERRORS
# =============================================================================


class OrchestratorError(RunitError):
    """An orchestrator API call failed.

    ``status`` is the HTTP status returned by the API server, or ``None``
    when the request never got an answer (connection refused, DNS, TLS).
    The category is derived from ``status`` unless given explicitly.
    """

    default_category = ErrorCategory.ORCHESTRATOR

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        reason: str | None = None,
        **kwargs: Any,
    ):
        kwargs.setdefault("category", category_for_status(status))
        kwargs.setdefault("retryable", status is None or status >= 500)
        super().__init__(message, **kwargs)
        self.status = status
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.status is not None:
            result["status"] = self.status
        if self.reason:
            result["reason"] = self.reason
        return result


class SubmissionRejected(OrchestratorError):
    """The orchestrator refused to create the job (invalid manifest, auth, quota)."""


class StatusFetchFailed(OrchestratorError):
    """Job status could not be read during a poll tick."""


class CleanupFailed(OrchestratorError):
    """Deleting the job failed. Best effort: logged, never retried."""


class ResourceAbsent(CleanupFailed):
    """The job was already gone when the delete was issued."""

    default_category = ErrorCategory.NOT_FOUND


class ClusterUnreachable(OrchestratorError):
    """The cluster could not be queried at all (ping path)."""


# =============================================================================
# CONFIG ERRORS
# =============================================================================


class ConfigError(RunitError):
    """Credentials or settings could not be resolved at startup."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "category_for_status",
    "RunitError",
    "OrchestratorError",
    "SubmissionRejected",
    "StatusFetchFailed",
    "CleanupFailed",
    "ResourceAbsent",
    "ClusterUnreachable",
    "ConfigError",
]
