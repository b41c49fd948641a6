"""
Abstract Biometric Authentication Interface

The authentication gate depends on exactly two operations of the
host's identity-check facility: "can you evaluate right now?" and
"evaluate, showing this justification to the user".
Reimplementing the facility itself is out of scope.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ram.models.auth import AuthenticationResult


class BiometricAuthenticator(ABC):
    """Host facility that verifies the device owner."""

    @abstractmethod
    def can_evaluate(self) -> tuple[bool, Optional[str]]:
        """
        Check whether an evaluation is possible on this host.

        Returns:
            (available, reason) - reason explains why not, when unavailable
        """
        pass

    @abstractmethod
    async def evaluate(self, justification: str) -> AuthenticationResult:
        """
        Ask the user to authenticate.

        Args:
            justification: Human-readable reason shown to the user

        Returns:
            Success, or failure carrying the reason (rejected, cancelled,
            locked out). Implementations should not raise for these.
        """
        pass
