"""Authentication services package."""

from wallet.services.auth.capability import (
    HOME_SCREEN,
    LOGIN_SCREEN,
    BiometricCapability,
    Navigator,
    ScreenNavigator,
    StaticBiometricCapability,
)
from wallet.services.auth.gate import (
    AuthenticationError,
    AuthenticationFailed,
    AuthenticationGate,
    NotEnrolled,
)

__all__ = [
    "HOME_SCREEN",
    "LOGIN_SCREEN",
    "BiometricCapability",
    "Navigator",
    "ScreenNavigator",
    "StaticBiometricCapability",
    "AuthenticationError",
    "AuthenticationFailed",
    "AuthenticationGate",
    "NotEnrolled",
]
