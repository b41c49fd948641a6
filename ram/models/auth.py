"""
Authentication Models

State of the authentication gate and the results exchanged with
the biometric collaborator.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthOutcome(str, Enum):
    """How a single authentication request resolved."""
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"                        # User failed or cancelled
    UNAVAILABLE = "unavailable"                  # No biometrics/passcode on this host
    ALREADY_IN_PROGRESS = "already_in_progress"  # Another request is outstanding


class AuthState(BaseModel):
    """
    Snapshot of the gate.

    `authenticating` is true only while one request is outstanding.
    """
    model_config = ConfigDict(frozen=True)

    authenticated: bool = False
    authenticating: bool = False


class AuthenticationResult(BaseModel):
    """Result of one evaluation by the biometric collaborator."""

    success: bool
    error_message: Optional[str] = Field(
        default=None,
        description="Why the evaluation failed, when it did"
    )

    @classmethod
    def succeeded(cls) -> "AuthenticationResult":
        return cls(success=True)

    @classmethod
    def failed(cls, reason: str) -> "AuthenticationResult":
        return cls(success=False, error_message=reason)
