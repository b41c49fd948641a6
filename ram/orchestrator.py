"""
Main Orchestrator for RAM

This module ties the components together and defines what the
presentation layer is allowed to do:
1. Debts: add (after input validation), delete, list outstanding
2. Credentials: unlock, list, add and delete - the last three only
   while the gate is authenticated

DESIGN DECISION: Every object is constructed once, by
create_app_components(), and handed to the presentation layer.
There is no module-level state.

NOTE: Credentials are loaded at startup whatever the authentication
outcome, and only their display is gated. They sit in memory in
plaintext before the user authenticates.
"""

import asyncio
from decimal import Decimal
from typing import Iterable, Optional

from ram.audit import AuditLogger, configure_logging
from ram.auth import AuthGate
from ram.config import Settings, get_settings
from ram.models.auth import AuthOutcome
from ram.models.records import CredentialRecord, DebtRecord, ValidationResult
from ram.services.biometric import (
    BiometricAuthenticator,
    PasscodeAuthenticator,
    PasscodePrompt,
    UnavailableAuthenticator,
)
from ram.services.storage import JsonFileSettingsStore, SettingsStore
from ram.stores import CredentialStore, DebtStore
from ram.validation import RecordInputValidator


class DebtFlow:
    """
    Debts owed to the user.

    Not gated: anyone with the app open can see and edit debts.
    """

    def __init__(
        self,
        store: DebtStore,
        validator: Optional[RecordInputValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._validator = validator or RecordInputValidator()
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def store(self) -> DebtStore:
        return self._store

    def load(self) -> list[DebtRecord]:
        return self._store.load()

    def add_debt(
        self,
        name: str,
        amount_text: str,
    ) -> tuple[Optional[DebtRecord], ValidationResult]:
        """
        Validate the entered fields and append a new debt.

        Returns:
            (debt, validation) - debt is None when validation blocked
            the append; the store is then left untouched.
        """
        validation = self._validator.validate_debt_input(name, amount_text)
        if validation.has_errors:
            self._audit_logger.log_debt_input_rejected([
                {"field": i.field, "type": i.issue_type, "message": i.message}
                for i in validation.issues
            ])
            return None, validation

        debt = DebtRecord(name=name, amount=validation.parsed_amount)
        self._store.append(debt)
        return debt, validation

    def delete_debts(self, positions: Iterable[int]) -> list[DebtRecord]:
        """Delete by position in the full collection (see DebtStore.outstanding)."""
        return self._store.delete_at(positions)

    def outstanding(self) -> list[tuple[int, DebtRecord]]:
        return self._store.outstanding()

    def total_amount(self) -> Decimal:
        return self._store.total_amount()


class CredentialFlow:
    """
    Stored credentials behind the authentication gate.

    While the gate is not authenticated the list is hidden, and
    add/delete are refused with a diagnostic instead of an error.
    """

    def __init__(
        self,
        store: CredentialStore,
        gate: AuthGate,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._gate = gate
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def store(self) -> CredentialStore:
        return self._store

    @property
    def gate(self) -> AuthGate:
        return self._gate

    @property
    def is_unlocked(self) -> bool:
        return self._gate.authenticated

    def load(self) -> list[CredentialRecord]:
        """Load unconditionally; display is what the gate controls."""
        return self._store.load()

    async def unlock(self) -> AuthOutcome:
        """Action behind the 'Authenticate to view passwords' placeholder."""
        return await self._gate.request_authentication()

    def visible_credentials(self) -> Optional[tuple[CredentialRecord, ...]]:
        """The credentials to render, or None while locked."""
        if not self._gate.authenticated:
            return None
        return self._store.records

    def add_credential(
        self,
        website: str,
        username: str,
        password: str,
    ) -> Optional[CredentialRecord]:
        """
        Append a credential if the gate is authenticated.

        Returns:
            The new credential, or None if refused
        """
        if not self._gate.authenticated:
            self._audit_logger.log_credential_add_refused(website)
            return None

        credential = CredentialRecord(
            website=website,
            username=username,
            password=password,
        )
        self._store.append(credential)
        return credential

    def delete_credentials(self, positions: Iterable[int]) -> list[CredentialRecord]:
        """Delete by position if the gate is authenticated; [] if refused."""
        positions = list(positions)
        if not self._gate.authenticated:
            self._audit_logger.log_credential_delete_refused(positions)
            return []
        return self._store.delete_at(positions)


def create_app_components(
    settings_store: Optional[SettingsStore] = None,
    authenticator: Optional[BiometricAuthenticator] = None,
    passcode_prompt: Optional[PasscodePrompt] = None,
    settings: Optional[Settings] = None,
) -> tuple[DebtFlow, CredentialFlow, AuthGate]:
    """
    Factory function to create all application components.

    Args:
        settings_store: Persistence backend. Defaults to the JSON file
                        at RAM_STORAGE_PATH.
        authenticator: Identity check. Defaults to a passcode check when
                       a digest is configured and a prompt is given,
                       otherwise to an unavailable authenticator.
        passcode_prompt: Collects the passcode for the default authenticator.
        settings: Settings to use instead of get_settings().

    Returns:
        (debt_flow, credential_flow, auth_gate)
    """
    settings = settings or get_settings()
    storage_settings = settings.storage
    auth_settings = settings.auth

    configure_logging(settings.app.log_level)
    audit_logger = AuditLogger()

    if settings_store is None:
        settings_store = JsonFileSettingsStore(storage_settings.path)

    if authenticator is None:
        digest = auth_settings.passcode_sha256
        if digest is not None and passcode_prompt is not None:
            authenticator = PasscodeAuthenticator(digest.get_secret_value(), passcode_prompt)
        else:
            authenticator = UnavailableAuthenticator()

    gate = AuthGate(
        authenticator=authenticator,
        reason=auth_settings.reason,
        audit_logger=audit_logger,
    )

    debt_flow = DebtFlow(
        store=DebtStore(settings_store, storage_settings.debts_key, audit_logger),
        audit_logger=audit_logger,
    )
    credential_flow = CredentialFlow(
        store=CredentialStore(settings_store, storage_settings.credentials_key, audit_logger),
        gate=gate,
        audit_logger=audit_logger,
    )

    return debt_flow, credential_flow, gate


def startup_authentication_enabled(settings: Optional[Settings] = None) -> bool:
    """
    Whether the startup sequence should attempt authentication.

    A configured passcode is typed on the passwords page, so nothing
    can have been entered at process start and the attempt is skipped.
    Without a passcode the attempt still runs, which emits the
    "unavailable" diagnostic.
    """
    auth_settings = (settings or get_settings()).auth
    if not auth_settings.authenticate_on_startup:
        return False
    return auth_settings.passcode_sha256 is None


async def startup(
    debt_flow: DebtFlow,
    credential_flow: CredentialFlow,
    authenticate: bool = True,
) -> Optional[AuthOutcome]:
    """
    Startup sequence.

    Authentication is started first if the host supports it; both
    collections are then loaded without waiting for its outcome.

    Returns:
        The authentication outcome, or None if no attempt was made
    """
    gate = credential_flow.gate
    auth_task = None
    if authenticate and gate.can_authenticate():
        auth_task = asyncio.create_task(gate.request_authentication())

    debt_flow.load()
    credential_flow.load()

    if auth_task is None:
        return None
    return await auth_task
