"""
Authentication Gate

DESIGN DECISION: The gate is a thin pass-through to the platform
biometric capability. It never locks the user out:
- No hardware: the user may continue after confirming a skip
- Nothing enrolled: the user may continue without biometrics or retry
- Failed prompt: reported, and the user may simply try again

There is no attempt counter. The device owner is trusted; the gate only
keeps a casual onlooker from opening the wallet.
"""

from typing import Optional

from wallet.audit import AuditLogger, get_logger
from wallet.config import AuthSettings
from wallet.models.auth import AuthOutcome, GateState
from wallet.models.expense import NoticeLevel, UserNotice
from wallet.services.auth.capability import (
    HOME_SCREEN,
    LOGIN_SCREEN,
    BiometricCapability,
    Navigator,
)


logger = get_logger(__name__)


class AuthenticationError(Exception):
    """Base exception for sign-in problems."""
    pass


class AuthenticationFailed(AuthenticationError):
    """The ledger was opened before the gate resolved."""
    pass


class NotEnrolled(AuthenticationError):
    """Biometric hardware exists but nothing is enrolled."""
    pass


class AuthenticationGate:
    """
    Sign-in flow in front of the ledger.

    Flow:
    1. check_capability() once when the login screen opens
    2. authenticate() -> GRANTED | FAILED | NOT_ENROLLED
    3. After NOT_ENROLLED: continue_without_biometrics() or retry
    4. skip(confirmed=True) is available at any time

    Every access-granting outcome navigates to the home screen.
    """

    def __init__(
        self,
        capability: BiometricCapability,
        navigator: Navigator,
        settings: Optional[AuthSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._capability = capability
        self._navigator = navigator
        self._settings = settings or AuthSettings()
        self._audit_logger = audit_logger

        self._state = GateState.UNCHECKED
        self._supported: Optional[bool] = None
        self._pending = False
        self._last_outcome: Optional[AuthOutcome] = None
        self._notices: list[UserNotice] = []

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_authenticating(self) -> bool:
        """True while a prompt is in flight (the button shows a spinner)."""
        return self._pending

    @property
    def is_supported(self) -> Optional[bool]:
        """Hardware support, or None before check_capability() ran."""
        return self._supported

    @property
    def last_outcome(self) -> Optional[AuthOutcome]:
        return self._last_outcome

    @property
    def has_access(self) -> bool:
        return self._state.grants_access

    def pop_notices(self) -> list[UserNotice]:
        """Return and clear pending user notices."""
        notices, self._notices = self._notices, []
        return notices

    def _notify(self, level: NoticeLevel, title: str, message: str) -> None:
        self._notices.append(UserNotice(level=level, title=title, message=message))

    async def check_capability(self) -> bool:
        """
        Ask the platform for biometric hardware.

        Never raises: an error while asking counts as "unsupported".
        """
        reason = None
        try:
            supported = bool(await self._capability.has_hardware())
        except Exception as e:
            logger.error("capability_check_failed", error=str(e))
            supported = False
            reason = str(e)
            if self._audit_logger:
                await self._audit_logger.log_error(
                    type(e).__name__, reason, {"operation": "check_capability"}
                )

        self._supported = supported

        if not supported:
            self._notify(
                NoticeLevel.INFO,
                "Biometrics not available",
                "Your device does not support biometric authentication. "
                "You can continue without it.",
            )
            if self._audit_logger:
                await self._audit_logger.log_capability_unavailable(reason)

        return supported

    async def authenticate(self) -> AuthOutcome:
        """
        Run one biometric attempt.

        Returns BUSY without prompting if an attempt is already pending.
        """
        if self._pending:
            return AuthOutcome.BUSY

        self._pending = True
        self._state = GateState.CHECKING
        try:
            if self._supported is None:
                await self.check_capability()

            enrolled = await self._capability.is_enrolled()
            if not enrolled and self._supported:
                self._state = GateState.UNCHECKED
                self._last_outcome = AuthOutcome.NOT_ENROLLED
                self._notify(
                    NoticeLevel.WARNING,
                    "No biometrics enrolled",
                    "Please set up a fingerprint or Face ID in your device settings, "
                    "or continue without biometrics.",
                )
                if self._audit_logger:
                    await self._audit_logger.log_auth_not_enrolled()
                return AuthOutcome.NOT_ENROLLED

            result = await self._capability.authenticate(
                prompt=self._settings.prompt_message,
                cancel_label=self._settings.cancel_label,
                fallback_label=self._settings.fallback_label,
                disable_device_fallback=self._settings.disable_device_fallback,
            )
        except Exception as e:
            logger.error("authentication_error", error=str(e))
            self._state = GateState.UNCHECKED
            self._last_outcome = AuthOutcome.FAILED
            self._notify(NoticeLevel.ERROR, "Error", "Authentication could not be performed.")
            if self._audit_logger:
                await self._audit_logger.log_error(type(e).__name__, str(e), {"operation": "authenticate"})
                await self._audit_logger.log_auth_failed(str(e))
            return AuthOutcome.FAILED
        finally:
            self._pending = False

        if result.success:
            self._state = GateState.GRANTED
            self._last_outcome = AuthOutcome.GRANTED
            if self._audit_logger:
                await self._audit_logger.log_auth_granted()
            self._navigator.go_to(HOME_SCREEN)
            return AuthOutcome.GRANTED

        self._state = GateState.UNCHECKED
        self._last_outcome = AuthOutcome.FAILED
        self._notify(NoticeLevel.ERROR, "Error", "Authentication failed. Please try again.")
        if self._audit_logger:
            await self._audit_logger.log_auth_failed(result.error)
        return AuthOutcome.FAILED

    async def continue_without_biometrics(self) -> AuthOutcome:
        """
        Open the wallet after a NOT_ENROLLED answer.

        Raises:
            AuthenticationError: If the last attempt was not NOT_ENROLLED
        """
        if self._last_outcome is not AuthOutcome.NOT_ENROLLED:
            raise AuthenticationError(
                "Continuing without biometrics is only offered when none are enrolled"
            )

        self._state = GateState.DECLINED_WITH_FALLBACK
        if self._audit_logger:
            await self._audit_logger.log_auth_fallback()
        self._navigator.go_to(HOME_SCREEN)
        return AuthOutcome.SKIPPED

    async def skip(self, confirmed: bool) -> Optional[AuthOutcome]:
        """
        Enter without biometrics.

        Returns None (and changes nothing) unless the user confirmed.
        """
        if not confirmed:
            return None

        self._state = GateState.SKIPPED
        self._last_outcome = AuthOutcome.SKIPPED
        if self._audit_logger:
            await self._audit_logger.log_auth_skipped()
        self._navigator.go_to(HOME_SCREEN)
        return AuthOutcome.SKIPPED

    async def sign_out(self, confirmed: bool) -> bool:
        """Return to the login screen after confirmation."""
        if not confirmed:
            return False

        self._state = GateState.UNCHECKED
        self._last_outcome = None
        if self._audit_logger:
            await self._audit_logger.log_signed_out()
        self._navigator.go_to(LOGIN_SCREEN)
        return True

    def require_access(self) -> None:
        """
        Guard for code that must only run behind the gate.

        Raises:
            NotEnrolled: If the last attempt found nothing enrolled
            AuthenticationFailed: If the gate has not resolved to an open state
        """
        if self._state.grants_access:
            return
        if self._last_outcome is AuthOutcome.NOT_ENROLLED:
            raise NotEnrolled("No biometrics are enrolled on this device")
        raise AuthenticationFailed("Sign in before opening the wallet")
