"""
Audit Logger

DESIGN DECISION: Every significant action in the app is logged.
This provides:
1. Traceability of ledger mutations
2. Debugging capability when the storage medium fails
3. A history of how each session got past the sign-in gate

The audit logger:
- Is async so it composes with the ledger and gate flows
- Gracefully handles failures (never crashes the app if logging fails)
- Writes structured JSON lines through structlog
"""

import logging
from typing import Optional

import structlog

from wallet.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `level`."""
    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger().setLevel(level.upper())


def get_logger(name: Optional[str] = None):
    """Module logger sharing the audit configuration."""
    return structlog.get_logger(name)


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured local log only; the ledger itself is the
    sole persisted artefact of the app.
    """

    def __init__(self, logger=None):
        self._logger = logger or structlog.get_logger("wallet.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity.value in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except (TypeError, ValueError) as e:
            # Unserializable details must not break the calling flow
            logging.getLogger(__name__).error(
                "audit_log_failed event_id=%s error=%s", event.event_id, e
            )
            return False

        return True

    async def log_ledger_loaded(self, record_count: int, storage_key: str) -> None:
        """Log a successful startup load."""
        await self.log(AuditEventBuilder.ledger_loaded(record_count, storage_key))

    async def log_ledger_load_failed(self, storage_key: str, error_message: str) -> None:
        """Log a load failure (ledger starts empty)."""
        await self.log(AuditEventBuilder.ledger_load_failed(storage_key, error_message))

    async def log_expense_added(
        self,
        expense_id: str,
        name: str,
        amount: str,
        category: str,
        period: str,
    ) -> None:
        """Log a new expense."""
        event = AuditEventBuilder.expense_added(
            expense_id=expense_id,
            name=name,
            amount=amount,
            category=category,
            period=period,
        )
        await self.log(event)

    async def log_validation_failed(self, issues: list[dict]) -> None:
        """Log rejected form input."""
        await self.log(AuditEventBuilder.validation_failed(issues))

    async def log_delete_requested(self, expense_id: str, token: str) -> None:
        """Log the first phase of a delete."""
        await self.log(AuditEventBuilder.delete_requested(expense_id, token))

    async def log_delete_cancelled(self, expense_id: str) -> None:
        """Log a cancelled delete."""
        await self.log(AuditEventBuilder.delete_cancelled(expense_id))

    async def log_expense_deleted(self, expense_id: str, remaining: int) -> None:
        """Log a completed delete."""
        await self.log(AuditEventBuilder.expense_deleted(expense_id, remaining))

    async def log_save_failed(self, operation: str, error_message: str) -> None:
        """Log a persistence failure."""
        await self.log(AuditEventBuilder.save_failed(operation, error_message))

    async def log_capability_unavailable(self, reason: Optional[str] = None) -> None:
        """Log missing biometric hardware."""
        await self.log(AuditEventBuilder.capability_unavailable(reason))

    async def log_auth_granted(self) -> None:
        await self.log(AuditEventBuilder.auth_granted())

    async def log_auth_failed(self, error_message: Optional[str]) -> None:
        await self.log(AuditEventBuilder.auth_failed(error_message))

    async def log_auth_not_enrolled(self) -> None:
        await self.log(AuditEventBuilder.auth_not_enrolled())

    async def log_auth_fallback(self) -> None:
        await self.log(AuditEventBuilder.auth_fallback())

    async def log_auth_skipped(self) -> None:
        await self.log(AuditEventBuilder.auth_skipped())

    async def log_signed_out(self) -> None:
        await self.log(AuditEventBuilder.signed_out())

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an unexpected error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        )
        await self.log(event)
