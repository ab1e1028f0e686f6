"""
Biometric Capability and Navigation Collaborators

The platform decides whether a fingerprint or face matches; we only ask.
Navigation is a fire-and-forget "go to screen X"; no history is kept.
"""

from abc import ABC, abstractmethod

from wallet.models.auth import BiometricResult


LOGIN_SCREEN = "Login"
HOME_SCREEN = "Home"


class BiometricCapability(ABC):
    """Abstract platform biometric service."""

    @abstractmethod
    async def has_hardware(self) -> bool:
        """Does the device have a fingerprint reader or face sensor?"""
        pass

    @abstractmethod
    async def is_enrolled(self) -> bool:
        """Has the user registered at least one fingerprint or face?"""
        pass

    @abstractmethod
    async def authenticate(
        self,
        prompt: str,
        cancel_label: str,
        fallback_label: str,
        disable_device_fallback: bool = False,
    ) -> BiometricResult:
        """Show the platform prompt and report whether the user passed."""
        pass


class StaticBiometricCapability(BiometricCapability):
    """
    Capability with fixed answers.

    Stands in for platform hardware on desktop (configured through
    WALLET_AUTH_SIMULATED_* settings) and in tests.
    """

    def __init__(
        self,
        hardware: bool = False,
        enrolled: bool = False,
        approve: bool = True,
    ):
        self.hardware = hardware
        self.enrolled = enrolled
        self.approve = approve
        self.prompts: list[str] = []

    async def has_hardware(self) -> bool:
        return self.hardware

    async def is_enrolled(self) -> bool:
        return self.enrolled

    async def authenticate(
        self,
        prompt: str,
        cancel_label: str,
        fallback_label: str,
        disable_device_fallback: bool = False,
    ) -> BiometricResult:
        self.prompts.append(prompt)

        # Without a sensor only the device passcode fallback can succeed
        usable = (self.hardware and self.enrolled) or not disable_device_fallback
        if self.approve and usable:
            return BiometricResult(success=True)
        if not usable:
            return BiometricResult(success=False, error="not_available")
        return BiometricResult(success=False, error="user_cancel")


class Navigator(ABC):
    """Abstract screen router."""

    @abstractmethod
    def go_to(self, screen: str) -> None:
        """Replace the current screen with `screen`."""
        pass


class ScreenNavigator(Navigator):
    """Navigator that only remembers the screen currently shown."""

    def __init__(self, initial: str = LOGIN_SCREEN):
        self.current_screen = initial

    def go_to(self, screen: str) -> None:
        self.current_screen = screen
