"""Audit logging package."""

from wallet.audit.logger import AuditLogger, configure_logging, get_logger

__all__ = ["AuditLogger", "configure_logging", "get_logger"]
