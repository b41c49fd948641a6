"""Tests for the authentication gate."""

import asyncio
import threading

import pytest

from ram.auth import DEFAULT_REASON, AuthGate
from ram.models.audit import AuditEventType
from ram.models.auth import AuthenticationResult, AuthOutcome, AuthState


class TestAuthGateStates:
    """Tests for single authentication attempts."""

    def test_initial_state(self, make_authenticator):
        """Test that the gate starts unauthenticated and idle."""
        gate = AuthGate(make_authenticator())
        assert gate.authenticated is False
        assert gate.authenticating is False
        assert gate.state == AuthState()

    def test_success(self, make_authenticator, audit_logger):
        """Test that a successful evaluation authenticates."""
        authenticator = make_authenticator()
        gate = AuthGate(authenticator, audit_logger=audit_logger)

        outcome = asyncio.run(gate.request_authentication())

        assert outcome == AuthOutcome.AUTHENTICATED
        assert gate.state == AuthState(authenticated=True, authenticating=False)
        assert authenticator.evaluate_calls == [DEFAULT_REASON]
        assert AuditEventType.AUTHENTICATION_SUCCEEDED in audit_logger.types()

    def test_failure(self, make_authenticator, audit_logger):
        """Test that after a failed attempt both flags are false."""
        authenticator = make_authenticator(
            result=AuthenticationResult.failed("Application retry limit exceeded."),
        )
        gate = AuthGate(authenticator, audit_logger=audit_logger)

        outcome = asyncio.run(gate.request_authentication())

        assert outcome == AuthOutcome.REJECTED
        assert gate.authenticated is False
        assert gate.authenticating is False
        failed = [e for e in audit_logger.events if e.event_type == AuditEventType.AUTHENTICATION_FAILED]
        assert failed[0].error_message == "Application retry limit exceeded."

    def test_unavailable_skips_evaluation(self, make_authenticator, audit_logger):
        """Test that an unavailable host resolves without evaluating."""
        authenticator = make_authenticator(
            available=False,
            unavailable_reason="No identities are enrolled.",
        )
        gate = AuthGate(authenticator, audit_logger=audit_logger)

        outcome = asyncio.run(gate.request_authentication())

        assert outcome == AuthOutcome.UNAVAILABLE
        assert authenticator.evaluate_calls == []
        assert gate.state == AuthState()
        unavailable = [
            e for e in audit_logger.events
            if e.event_type == AuditEventType.AUTHENTICATION_UNAVAILABLE
        ]
        assert unavailable[0].error_message == "No identities are enrolled."

    def test_evaluation_error_counts_as_failure(self, make_authenticator, audit_logger):
        """Test that an exception from the collaborator is not raised."""
        authenticator = make_authenticator(error=RuntimeError("sensor exploded"))
        gate = AuthGate(authenticator, audit_logger=audit_logger)

        outcome = asyncio.run(gate.request_authentication())

        assert outcome == AuthOutcome.REJECTED
        assert gate.state == AuthState()
        assert AuditEventType.SYSTEM_ERROR in audit_logger.types()
        assert AuditEventType.AUTHENTICATION_FAILED in audit_logger.types()

    def test_custom_reason_is_shown(self, make_authenticator):
        """Test that the configured justification reaches the collaborator."""
        authenticator = make_authenticator()
        gate = AuthGate(authenticator, reason="Unlock your vault")
        asyncio.run(gate.request_authentication())
        assert authenticator.evaluate_calls == ["Unlock your vault"]


class TestAuthGateSequencing:
    """Tests for repeated and concurrent requests."""

    def test_concurrent_requests_evaluate_once(self, make_authenticator, audit_logger):
        """Test that a second request while one is in flight is a no-op."""
        authenticator = make_authenticator()
        gate = AuthGate(authenticator, audit_logger=audit_logger)

        async def scenario():
            authenticator.release = asyncio.Event()
            first = asyncio.create_task(gate.request_authentication())
            await asyncio.sleep(0)
            in_flight = gate.state

            second = await gate.request_authentication()

            authenticator.release.set()
            return in_flight, await first, second

        in_flight, first, second = asyncio.run(scenario())

        assert in_flight == AuthState(authenticated=False, authenticating=True)
        assert first == AuthOutcome.AUTHENTICATED
        assert second == AuthOutcome.ALREADY_IN_PROGRESS
        assert len(authenticator.evaluate_calls) == 1
        assert gate.state == AuthState(authenticated=True, authenticating=False)
        assert AuditEventType.AUTHENTICATION_ALREADY_IN_PROGRESS in audit_logger.types()

    def test_authenticated_session_does_not_reevaluate(self, make_authenticator):
        """Test that Authenticated is terminal for the session."""
        authenticator = make_authenticator()
        gate = AuthGate(authenticator)

        asyncio.run(gate.request_authentication())
        outcome = asyncio.run(gate.request_authentication())

        assert outcome == AuthOutcome.AUTHENTICATED
        assert len(authenticator.evaluate_calls) == 1

    def test_no_automatic_retry(self, make_authenticator):
        """Test that a failure is not retried, but a new request evaluates again."""
        authenticator = make_authenticator(result=AuthenticationResult.failed("User cancel"))
        gate = AuthGate(authenticator)

        asyncio.run(gate.request_authentication())
        assert len(authenticator.evaluate_calls) == 1

        authenticator.result = AuthenticationResult.succeeded()
        assert asyncio.run(gate.request_authentication()) == AuthOutcome.AUTHENTICATED
        assert len(authenticator.evaluate_calls) == 2

    def test_cancelled_request_clears_flag(self, make_authenticator):
        """Test that the in-flight flag is cleared even if the task is cancelled."""
        authenticator = make_authenticator()
        gate = AuthGate(authenticator)

        async def scenario():
            authenticator.release = asyncio.Event()
            task = asyncio.create_task(gate.request_authentication())
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())

        assert gate.state == AuthState()


class TestCanAuthenticate:
    """Tests for the capability query."""

    def test_available(self, make_authenticator, audit_logger):
        gate = AuthGate(make_authenticator(), audit_logger=audit_logger)
        assert gate.can_authenticate() is True
        assert audit_logger.events == []

    def test_unavailable_logs_reason(self, make_authenticator, audit_logger):
        """Test that the reason is surfaced through the diagnostic channel."""
        gate = AuthGate(
            make_authenticator(available=False, unavailable_reason="Biometry is not available."),
            audit_logger=audit_logger,
        )

        assert gate.can_authenticate() is False
        assert gate.state == AuthState()
        assert audit_logger.events[0].error_message == "Biometry is not available."


class TestAuthGateThreads:
    """Tests for requests made from separate Streamlit script threads."""

    def test_second_thread_does_not_evaluate_again(self, make_authenticator):
        """Test that a request from another thread during evaluation is a no-op."""
        entered = threading.Event()
        release = threading.Event()

        class HeldAuthenticator(make_authenticator):
            async def evaluate(self, justification):
                self.evaluate_calls.append(justification)
                entered.set()
                while not release.is_set():
                    await asyncio.sleep(0.01)
                return self.result

        authenticator = HeldAuthenticator()
        gate = AuthGate(authenticator)
        outcomes = {}

        def request(name):
            outcomes[name] = asyncio.run(gate.request_authentication())

        first = threading.Thread(target=request, args=("first",))
        first.start()
        assert entered.wait(timeout=5)

        second = threading.Thread(target=request, args=("second",))
        second.start()
        second.join(timeout=5)
        release.set()
        first.join(timeout=5)

        assert outcomes == {
            "first": AuthOutcome.AUTHENTICATED,
            "second": AuthOutcome.ALREADY_IN_PROGRESS,
        }
        assert len(authenticator.evaluate_calls) == 1
        assert gate.state == AuthState(authenticated=True, authenticating=False)
