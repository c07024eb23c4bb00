"""Error Hierarchy — typed, categorized exceptions for all SAMU API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by every error handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with SamuError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    contest_id: int | None = None
    meme_id: int | None = None
    order_id: int | None = None
    wallet: str | None = None
    debug_info: dict[str, Any] | None = None


class SamuError(Exception):
    """Base exception for all SAMU API errors."""

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
                "context": {
                    "contest_id": self.context.contest_id,
                    "meme_id": self.context.meme_id,
                    "order_id": self.context.order_id,
                    "wallet": self.context.wallet,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidRequestError(SamuError):
    """Request is syntactically valid but semantically unusable."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class BusinessRuleError(SamuError):
    """Operation not allowed in the current state."""
    def __init__(
        self, message: str, code: str = "BUSINESS_RULE_VIOLATION",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class NothingToClaimError(BusinessRuleError):
    """Voter has no pending reward in the contest pool."""
    def __init__(self, contest_id: int, wallet: str):
        super().__init__(
            "No pending rewards to claim", "NOTHING_TO_CLAIM",
            ErrorContext(contest_id=contest_id, wallet=wallet),
        )


class TransactionVerificationError(BusinessRuleError):
    """On-chain vote transaction did not match the vote request."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Transaction verification failed: {reason}",
            "TRANSACTION_NOT_VERIFIED", context,
        )
        self.reason = reason


class AdminRequiredError(SamuError):
    """Caller is not on the admin allow-list."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Admin access required", "ADMIN_REQUIRED",
            ErrorCategory.AUTHORIZATION, ErrorSeverity.WARNING, context, 403,
        )


class ForbiddenActionError(SamuError):
    """Caller is authenticated but does not own the resource."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class WebhookSignatureError(SamuError):
    """Webhook HMAC signature missing or invalid."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Unauthorized", "INVALID_WEBHOOK_SIGNATURE",
            ErrorCategory.AUTHORIZATION, ErrorSeverity.WARNING, context, 401,
        )


class ResourceNotFoundError(SamuError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str | int,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type


class ConflictError(SamuError):
    """Write would violate a uniqueness rule (duplicate tx signature, active contest)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class PayloadTooLargeError(SamuError):
    """Uploaded file exceeds the configured size limit."""
    def __init__(self, max_bytes: int, context: ErrorContext | None = None):
        super().__init__(
            f"File exceeds maximum size of {max_bytes} bytes",
            "PAYLOAD_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 413,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(SamuError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ExternalServiceError(SamuError):
    """Third-party integration (printful, solana, storage) failed."""
    def __init__(
        self, service: str, message: str, context: ErrorContext | None = None,
        http_status: int = 502,
    ):
        super().__init__(
            f"{service} error: {message}",
            "EXTERNAL_SERVICE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, http_status,
        )
        self.service = service
