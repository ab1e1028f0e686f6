"""
Audit Models for Mi Billetera

Every significant action in the app is logged for audit purposes.
This provides:
1. Traceability of every ledger mutation
2. Debugging information when storage misbehaves
3. A record of how the user got past the sign-in gate

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of the ledger and sign-in flows has its own event type.
    """
    # Ledger lifecycle
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_LOAD_FAILED = "ledger_load_failed"

    # Mutations
    EXPENSE_ADDED = "expense_added"
    VALIDATION_FAILED = "validation_failed"
    DELETE_REQUESTED = "delete_requested"
    DELETE_CANCELLED = "delete_cancelled"
    EXPENSE_DELETED = "expense_deleted"
    SAVE_FAILED = "save_failed"

    # Sign-in gate
    CAPABILITY_UNAVAILABLE = "capability_unavailable"
    AUTH_GRANTED = "auth_granted"
    AUTH_FAILED = "auth_failed"
    AUTH_NOT_ENROLLED = "auth_not_enrolled"
    AUTH_FALLBACK = "auth_fallback"
    AUTH_SKIPPED = "auth_skipped"
    SIGNED_OUT = "signed_out"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'ledger', 'session')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, name, amount, period)
        event = AuditEventBuilder.auth_skipped()
    """

    @staticmethod
    def ledger_loaded(record_count: int, storage_key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            entity_id=storage_key,
            description=f"Ledger loaded with {record_count} expenses",
            details={"record_count": record_count},
        )

    @staticmethod
    def ledger_load_failed(storage_key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            entity_id=storage_key,
            description="Ledger could not be read, starting empty",
            error_message=error_message,
        )

    @staticmethod
    def expense_added(
        expense_id: str,
        name: str,
        amount: str,
        category: str,
        period: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {name} - {amount}",
            details={
                "name": name,
                "amount": amount,
                "category": category,
                "period": period,
            },
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            description=f"New expense rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def delete_requested(expense_id: str, token: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_REQUESTED,
            entity_type="expense",
            entity_id=expense_id,
            description="User asked to delete an expense",
            details={"token": token},
            is_user_action=True,
        )

    @staticmethod
    def delete_cancelled(expense_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_CANCELLED,
            entity_type="expense",
            entity_id=expense_id,
            description="User cancelled an expense deletion",
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: str, remaining: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description="Expense deleted",
            details={"remaining": remaining},
            is_user_action=True,
        )

    @staticmethod
    def save_failed(operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description=f"Ledger save failed during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def capability_unavailable(reason: Optional[str] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CAPABILITY_UNAVAILABLE,
            severity=AuditSeverity.WARNING,
            entity_type="session",
            description="Biometric hardware not available",
            error_message=reason,
        )

    @staticmethod
    def auth_granted() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTH_GRANTED,
            entity_type="session",
            description="Biometric authentication succeeded",
            is_user_action=True,
        )

    @staticmethod
    def auth_failed(error_message: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTH_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="session",
            description="Biometric authentication failed",
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def auth_not_enrolled() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTH_NOT_ENROLLED,
            severity=AuditSeverity.WARNING,
            entity_type="session",
            description="No fingerprint or face enrolled on this device",
        )

    @staticmethod
    def auth_fallback() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTH_FALLBACK,
            entity_type="session",
            description="User continued without biometrics (not enrolled)",
            is_user_action=True,
        )

    @staticmethod
    def auth_skipped() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTH_SKIPPED,
            entity_type="session",
            description="User skipped biometric authentication",
            is_user_action=True,
        )

    @staticmethod
    def signed_out() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGNED_OUT,
            entity_type="session",
            description="User signed out",
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
