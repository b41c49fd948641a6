"""
Shared fixtures.

Collaborators are replaced by fakes: no file system (except where a
test asks for tmp_path) and no real identity check.
"""

import asyncio
from typing import Optional

import pytest

from ram.audit import AuditLogger
from ram.config import get_settings
from ram.models.audit import AuditEvent, AuditEventType
from ram.models.auth import AuthenticationResult
from ram.services.biometric import BiometricAuthenticator
from ram.services.storage import InMemorySettingsStore, StorageWriteError


class RecordingAuditLogger(AuditLogger):
    """Audit logger that also keeps every event for assertions."""

    def __init__(self):
        super().__init__()
        self.events: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> None:
        self.events.append(event)
        super().log(event)

    def types(self) -> list[AuditEventType]:
        return [event.event_type for event in self.events]


class FakeAuthenticator(BiometricAuthenticator):
    """
    Scriptable identity check.

    Set `release` to an asyncio.Event (inside the running loop) to hold
    evaluate() open until the test sets it.
    """

    def __init__(
        self,
        available: bool = True,
        result: Optional[AuthenticationResult] = None,
        unavailable_reason: Optional[str] = None,
        error: Optional[Exception] = None,
    ):
        self.available = available
        self.result = result or AuthenticationResult.succeeded()
        self.unavailable_reason = unavailable_reason
        self.error = error
        self.release: Optional[asyncio.Event] = None
        self.evaluate_calls: list[str] = []

    def can_evaluate(self) -> tuple[bool, Optional[str]]:
        return self.available, self.unavailable_reason

    async def evaluate(self, justification: str) -> AuthenticationResult:
        self.evaluate_calls.append(justification)
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.result


class FailingWriteSettingsStore(InMemorySettingsStore):
    """Reads work, every write fails."""

    def set(self, key: str, value: str) -> None:
        raise StorageWriteError("disk full")


@pytest.fixture
def audit_logger() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest.fixture
def settings_store() -> InMemorySettingsStore:
    return InMemorySettingsStore()


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_authenticator():
    """Factory for scripted authenticators."""
    return FakeAuthenticator


@pytest.fixture
def failing_settings_store() -> FailingWriteSettingsStore:
    return FailingWriteSettingsStore()
