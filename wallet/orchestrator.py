"""
Main Orchestrator for Mi Billetera

This module ties the components together and defines the session flow:
1. Sign in (biometric gate, or an explicit skip)
2. Open the ledger (load once)
3. Mutate through the view-model; every change is persisted whole

DESIGN DECISION: The orchestrator enforces the boundaries:
- The ledger is never opened before the gate resolves
- There is exactly one view-model (and one store) per session
- Every step is audited
"""

from datetime import date
from typing import Callable, NamedTuple, Optional

from wallet.audit import AuditLogger, configure_logging
from wallet.config import Settings, get_settings
from wallet.ledger import LedgerViewModel
from wallet.services.auth import (
    LOGIN_SCREEN,
    AuthenticationGate,
    BiometricCapability,
    ScreenNavigator,
    StaticBiometricCapability,
)
from wallet.services.storage import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    JsonLedgerStorage,
    KeyValueStore,
)


class AppComponents(NamedTuple):
    """Everything one session needs."""

    gate: AuthenticationGate
    ledger: LedgerViewModel
    navigator: ScreenNavigator
    audit_logger: AuditLogger


def create_medium(settings: Settings) -> KeyValueStore:
    """Storage medium selected by WALLET_STORAGE_BACKEND."""
    storage_settings = settings.storage
    if storage_settings.backend == "memory":
        return InMemoryKeyValueStore()
    return FileKeyValueStore(storage_settings.data_dir)


def create_capability(settings: Settings) -> BiometricCapability:
    """Desktop stand-in for the platform biometric service."""
    auth_settings = settings.auth
    return StaticBiometricCapability(
        hardware=auth_settings.simulated_hardware,
        enrolled=auth_settings.simulated_enrolled,
        approve=auth_settings.simulated_approve,
    )


def create_app_components(
    settings: Optional[Settings] = None,
    medium: Optional[KeyValueStore] = None,
    capability: Optional[BiometricCapability] = None,
    today: Optional[Callable[[], date]] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to the cached environment settings
        medium: Storage medium override (tests pass an in-memory one)
        capability: Biometric capability override
        today: Clock override for period derivation

    Returns:
        AppComponents for one session, positioned on the login screen
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    audit_logger = AuditLogger()
    navigator = ScreenNavigator(LOGIN_SCREEN)

    storage = JsonLedgerStorage(
        medium or create_medium(settings),
        storage_key=settings.storage.storage_key,
        today=today,
    )
    ledger = LedgerViewModel(storage, audit_logger=audit_logger, today=today)

    gate = AuthenticationGate(
        capability or create_capability(settings),
        navigator,
        settings=settings.auth,
        audit_logger=audit_logger,
    )

    return AppComponents(
        gate=gate,
        ledger=ledger,
        navigator=navigator,
        audit_logger=audit_logger,
    )


async def open_ledger(gate: AuthenticationGate, ledger: LedgerViewModel) -> LedgerViewModel:
    """
    Hand out the ledger once the gate is open, loading it on first use.

    Raises:
        AuthenticationFailed / NotEnrolled: If the gate has not resolved
    """
    gate.require_access()
    if not ledger.is_initialized:
        await ledger.initialize()
    return ledger
