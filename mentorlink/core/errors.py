"""Error Hierarchy — typed, categorized exceptions for every MentorLink failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Policy errors (400-level) are terminal and surfaced as-is; storage errors (500-level) are critical
    - to_response() produces REST envelope; to_ws_event() produces WebSocket envelope
    - UnauthorizedError never reveals whether a pending or no connection exists

Design Decisions:
    - Single hierarchy with MentorLinkError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - NotFoundError shared by unknown users and missing pending/accepted records:
      callers only need the resource type, not a class per resource
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    counterpart_id: str | None = None
    connection_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class MentorLinkError(Exception):
    """Base exception for all MentorLink errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }

    def to_ws_event(self) -> dict:
        """Convert to WebSocket error event."""
        return {
            "type": "error",
            "data": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "severity": self.severity.value,
            },
        }


# ─── Policy Errors (400-level) ──────────────────────────────────

class InvalidRoleError(MentorLinkError):
    """Actor or target does not hold the role the operation requires."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_ROLE", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )


class AlreadyRequestedError(MentorLinkError):
    """A pending connection already exists for the pair."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You have already sent a request to this mentor",
            "ALREADY_REQUESTED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class AlreadyConnectedError(MentorLinkError):
    """An accepted connection already exists for the pair."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You are already connected with this mentor",
            "ALREADY_CONNECTED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class NotFoundError(MentorLinkError):
    """Requested resource does not exist (or is not in the required state)."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ForbiddenError(MentorLinkError):
    """Actor is a party to the record but not the one allowed to act on it."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )


class UnauthorizedError(MentorLinkError):
    """No accepted connection between the two users."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You are not connected with this user",
            "NOT_CONNECTED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )


class EmptyMessageError(MentorLinkError):
    """Neither body nor attachment was provided."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "A message requires a body or an attachment",
            "EMPTY_MESSAGE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageFailureError(MentorLinkError):
    """Backing store operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_FAILURE", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
