"""
Passcode and Unavailable Authenticators

Python hosts rarely expose a biometric sensor, so the app falls back
to the device-passcode style check: the user enters a passcode, it is
hashed and compared in constant time with a configured SHA-256 digest.
A host with no digest configured behaves like a device without
enrolled biometrics or passcode: evaluation is unavailable.
"""

import hashlib
import hmac
from typing import Awaitable, Callable, Optional

from ram.models.auth import AuthenticationResult
from ram.services.biometric.interface import BiometricAuthenticator


# Receives the justification, returns the entered passcode (None = cancelled)
PasscodePrompt = Callable[[str], Awaitable[Optional[str]]]


def hash_passcode(passcode: str) -> str:
    """SHA-256 hex digest, the format expected in RAM_AUTH_PASSCODE_SHA256."""
    return hashlib.sha256(passcode.encode("utf-8")).hexdigest()


class UnavailableAuthenticator(BiometricAuthenticator):
    """A host with no biometrics and no passcode fallback."""

    def __init__(self, reason: str = "No biometrics enrolled on this device"):
        self._reason = reason

    def can_evaluate(self) -> tuple[bool, Optional[str]]:
        return False, self._reason

    async def evaluate(self, justification: str) -> AuthenticationResult:
        return AuthenticationResult.failed(self._reason)


class PasscodeAuthenticator(BiometricAuthenticator):
    """
    Verifies a passcode obtained from `prompt` against a stored digest.

    The prompt is asynchronous so that it can wait for the
    presentation layer to collect the input.
    """

    def __init__(
        self,
        passcode_sha256: Optional[str],
        prompt: PasscodePrompt,
    ):
        self._digest = passcode_sha256.lower() if passcode_sha256 else None
        self._prompt = prompt

    def can_evaluate(self) -> tuple[bool, Optional[str]]:
        if not self._digest:
            return False, "No passcode configured"
        return True, None

    async def evaluate(self, justification: str) -> AuthenticationResult:
        if not self._digest:
            return AuthenticationResult.failed("No passcode configured")

        passcode = await self._prompt(justification)
        if passcode is None:
            return AuthenticationResult.failed("Authentication cancelled by user")

        if hmac.compare_digest(hash_passcode(passcode), self._digest):
            return AuthenticationResult.succeeded()
        return AuthenticationResult.failed("Passcode did not match")
