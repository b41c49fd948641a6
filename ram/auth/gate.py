"""
Authentication Gate

Holds the "is the user authenticated" state that decides whether the
credentials list may be shown or extended.

States:
    Unauthenticated --request--> Authenticating --success--> Authenticated
                                      |
                                      +--failure/unavailable--> Unauthenticated

GUARANTEES:
- At most one evaluation is in flight; extra requests are ignored
- `authenticating` is cleared exactly once per request, whatever happens
- Failures never raise into the caller and are never retried here;
  the next attempt is always user-initiated
"""

import threading
from typing import Optional
from uuid import UUID

from ram.audit import AuditLogger, create_correlation_id
from ram.models.auth import AuthenticationResult, AuthOutcome, AuthState
from ram.services.biometric import BiometricAuthenticator


DEFAULT_REASON = "Authenticate to access passwords."


class AuthGate:
    """
    Mediates access to the credentials list.

    Flag transitions happen under a lock, so reads of `authenticated`
    never interleave with a half-applied completion. The evaluation
    itself runs outside the lock.
    """

    def __init__(
        self,
        authenticator: BiometricAuthenticator,
        reason: str = DEFAULT_REASON,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._authenticator = authenticator
        self._reason = reason
        self._audit_logger = audit_logger or AuditLogger()
        self._authenticated = False
        self._authenticating = False
        self._lock = threading.Lock()

    @property
    def authenticated(self) -> bool:
        with self._lock:
            return self._authenticated

    @property
    def authenticating(self) -> bool:
        with self._lock:
            return self._authenticating

    @property
    def state(self) -> AuthState:
        with self._lock:
            return AuthState(
                authenticated=self._authenticated,
                authenticating=self._authenticating,
            )

    def can_authenticate(self) -> bool:
        """
        Can the host evaluate the authentication policy right now?

        Pure query. When the answer is no, the reason is logged.
        """
        available, reason = self._authenticator.can_evaluate()
        if not available:
            self._audit_logger.log_authentication_unavailable(reason)
        return available

    async def request_authentication(self) -> AuthOutcome:
        """
        Run one authentication attempt.

        Returns immediately with ALREADY_IN_PROGRESS if another attempt
        is outstanding, and with AUTHENTICATED once the session is
        authenticated. Otherwise resolves to AUTHENTICATED, REJECTED
        or UNAVAILABLE, with the gate state updated accordingly.
        """
        with self._lock:
            if self._authenticated:
                return AuthOutcome.AUTHENTICATED
            in_flight = self._authenticating
            self._authenticating = True

        if in_flight:
            self._audit_logger.log_authentication_already_in_progress()
            return AuthOutcome.ALREADY_IN_PROGRESS

        correlation_id = create_correlation_id()
        outcome = AuthOutcome.REJECTED
        try:
            available, unavailable_reason = self._authenticator.can_evaluate()
            if not available:
                self._audit_logger.log_authentication_unavailable(
                    unavailable_reason,
                    correlation_id=correlation_id,
                )
                outcome = AuthOutcome.UNAVAILABLE
                return outcome

            self._audit_logger.log_authentication_requested(self._reason, correlation_id)
            result = await self._evaluate(correlation_id)

            if result.success:
                self._audit_logger.log_authentication_succeeded(correlation_id)
                outcome = AuthOutcome.AUTHENTICATED
            else:
                self._audit_logger.log_authentication_failed(
                    result.error_message,
                    correlation_id,
                )
                outcome = AuthOutcome.REJECTED
            return outcome
        finally:
            with self._lock:
                self._authenticated = outcome == AuthOutcome.AUTHENTICATED
                self._authenticating = False

    async def _evaluate(self, correlation_id: UUID) -> AuthenticationResult:
        """Call the authenticator; an exception counts as a failed attempt."""
        try:
            return await self._authenticator.evaluate(self._reason)
        except Exception as e:
            self._audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                details={"stage": "biometric_evaluation"},
                correlation_id=correlation_id,
            )
            return AuthenticationResult.failed(str(e))
