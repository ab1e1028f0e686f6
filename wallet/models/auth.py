"""
Authentication Models

The gate never stores credentials. It only records where the user is in
the sign-in flow and what the platform answered.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class GateState(str, Enum):
    """
    Sign-in flow state.

    UNCHECKED -> CHECKING -> {GRANTED, DECLINED_WITH_FALLBACK, SKIPPED}
    Every terminal state opens the ledger. There is no lockout state.
    """
    UNCHECKED = "unchecked"
    CHECKING = "checking"
    GRANTED = "granted"
    DECLINED_WITH_FALLBACK = "declined_with_fallback"  # Not enrolled, continued anyway
    SKIPPED = "skipped"

    @property
    def grants_access(self) -> bool:
        return self in (
            GateState.GRANTED,
            GateState.DECLINED_WITH_FALLBACK,
            GateState.SKIPPED,
        )


class AuthOutcome(str, Enum):
    """What a single gate action resolved to."""
    GRANTED = "granted"
    FAILED = "failed"
    NOT_ENROLLED = "not_enrolled"
    SKIPPED = "skipped"
    BUSY = "busy"  # An authentication is already pending


class BiometricResult(BaseModel):
    """Answer from the platform biometric prompt."""

    success: bool
    error: Optional[str] = None
