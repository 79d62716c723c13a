"""Error Hierarchy — typed, categorized exceptions for every TaskShare failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - InvalidTokenError carries one message for "unknown" and "already used"
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TaskShareError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    ENTITLEMENT = "entitlement"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    actor: str | None = None
    task_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class TaskShareError(Exception):
    """Base exception for all TaskShare errors."""

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
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "task_id": self.context.task_id,
                },
            }
        }


# ─── Authentication (401) ───────────────────────────────────────

class UnauthenticatedError(TaskShareError):
    """No valid session identity on the request."""
    def __init__(self, message: str = "Authentication required", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidCredentialsError(TaskShareError):
    """Login failed. Same outcome for unknown email and wrong password."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid email or password",
            "INVALID_CREDENTIALS", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Authorization (403) ────────────────────────────────────────

class ForbiddenError(TaskShareError):
    """Actor's role lacks the capability the operation requires."""
    def __init__(self, capability: str, role: str, context: ErrorContext | None = None):
        super().__init__(
            f"Role '{role}' does not permit '{capability}'",
            "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.capability = capability
        self.role = role


# ─── Validation (400) ───────────────────────────────────────────

class InvalidInputError(TaskShareError):
    """Malformed input that passed schema validation but violates a domain rule."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidRoleError(TaskShareError):
    """Share role is not one of editor/viewer."""
    def __init__(self, role: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid role '{role}'. Expected one of: editor, viewer",
            "INVALID_ROLE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.role = role


class SelfShareError(TaskShareError):
    """Owner attempted to share a task with themselves."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Cannot share a task with its owner",
            "SELF_SHARE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidTokenError(TaskShareError):
    """Invite token unknown or already redeemed."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid or expired invite link",
            "INVALID_TOKEN", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class PaymentVerificationError(TaskShareError):
    """Payment signature did not verify."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Payment signature verification failed",
            "PAYMENT_VERIFICATION_FAILED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Not Found (404) ────────────────────────────────────────────

class ResourceNotFoundError(TaskShareError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class NotSharedError(TaskShareError):
    """Target identity has no share entry on the task."""
    def __init__(self, target: str, context: ErrorContext | None = None):
        super().__init__(
            f"'{target}' is not in the task's shared list",
            "NOT_SHARED", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.target = target


# ─── Conflict (409) ─────────────────────────────────────────────

class DuplicateIdentityError(TaskShareError):
    """A user with this email already exists."""
    def __init__(self, identity: str, context: ErrorContext | None = None):
        super().__init__(
            "Email already registered",
            "EMAIL_ALREADY_REGISTERED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.identity = identity


class DuplicateShareError(TaskShareError):
    """Target identity already holds a share entry on the task."""
    def __init__(self, target: str, context: ErrorContext | None = None):
        super().__init__(
            f"Task is already shared with '{target}'",
            "DUPLICATE_SHARE", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.target = target


class InviteeExistsError(TaskShareError):
    """An invitation record already exists for this email."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            f"'{email}' has already been invited",
            "INVITEE_ALREADY_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.email = email


# ─── Entitlement (402) ──────────────────────────────────────────

class QuotaExceededError(TaskShareError):
    """Free plan task ceiling reached."""
    def __init__(self, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Free plan allows at most {limit} tasks. Upgrade to create more.",
            "QUOTA_EXCEEDED", ErrorCategory.ENTITLEMENT,
            ErrorSeverity.WARNING, context, 402,
        )
        self.limit = limit


class UpgradeRequiredError(TaskShareError):
    """Feature not available on the actor's plan."""
    def __init__(self, feature: str, context: ErrorContext | None = None):
        super().__init__(
            f"'{feature}' requires a paid plan",
            "UPGRADE_REQUIRED", ErrorCategory.ENTITLEMENT,
            ErrorSeverity.WARNING, context, 402,
        )
        self.feature = feature


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageUnavailableError(TaskShareError):
    """Database operation failed. Never reinterpreted as a domain error."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class PaymentGatewayError(TaskShareError):
    """Payment gateway call failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Payment gateway error: {message}",
            "PAYMENT_GATEWAY_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
