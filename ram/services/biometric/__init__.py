"""Biometric authentication services package."""

from ram.services.biometric.interface import BiometricAuthenticator
from ram.services.biometric.passcode import (
    PasscodeAuthenticator,
    PasscodePrompt,
    UnavailableAuthenticator,
    hash_passcode,
)

__all__ = [
    "BiometricAuthenticator",
    "PasscodeAuthenticator",
    "PasscodePrompt",
    "UnavailableAuthenticator",
    "hash_passcode",
]
