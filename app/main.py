"""
Streamlit Frontend for RAM

Renders the two lists and the entry fields for new records.
All state lives in the objects built by create_app_components();
this module only reads them and calls the flows.

The passwords page shows nothing but an "Authenticate to view
passwords" prompt until the gate is authenticated.

The components are cached with st.cache_resource, so there is one
gate per process: unlocking in one browser session unlocks every
session served by the same process. The app is single-user.
"""

import asyncio
from typing import Optional

import streamlit as st

from ram.config import get_settings, validate_all_settings
from ram.models.auth import AuthOutcome
from ram.orchestrator import (
    CredentialFlow,
    DebtFlow,
    create_app_components,
    startup,
    startup_authentication_enabled,
)
from ram.validation import RecordInputValidator


# Page configuration
st.set_page_config(
    page_title="Your R.A.M",
    page_icon="🐏",
    layout="centered",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def passcode_prompt(reason: str) -> Optional[str]:
    """Hand the passcode typed on the passwords page to the authenticator."""
    return st.session_state.get("passcode_entry") or None


@st.cache_resource
def get_components():
    """Build the components and run the startup sequence once per process."""
    debt_flow, credential_flow, gate = create_app_components(
        passcode_prompt=passcode_prompt,
    )
    run_async(startup(
        debt_flow,
        credential_flow,
        authenticate=startup_authentication_enabled(),
    ))
    return debt_flow, credential_flow


def main():
    """Main application entry point."""
    debt_flow, credential_flow = get_components()

    st.sidebar.title("🐏 Your R.A.M")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["💸 Debts", "🔑 Passwords", "⚙️ Settings"],
        index=0,
    )

    if page == "💸 Debts":
        render_debts_page(debt_flow)
    elif page == "🔑 Passwords":
        render_passwords_page(credential_flow)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_debts_page(debt_flow: DebtFlow):
    """Render the debts list and the new-debt form."""
    symbol = get_settings().app.currency_symbol

    st.title("Debts Owed to You")

    outstanding = debt_flow.outstanding()
    if not outstanding:
        st.info("Nobody owes you anything yet.")

    for position, debt in outstanding:
        col1, col2 = st.columns([5, 1])
        with col1:
            st.markdown(f"**{debt.name}** owes you {symbol}{debt.amount:,.2f}")
        with col2:
            if st.button("🗑️", key=f"delete_debt_{debt.id}"):
                debt_flow.delete_debts([position])
                st.rerun()

    st.markdown("---")

    with st.form("new_debt", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Name")
        with col2:
            amount_text = st.text_input("Amount", placeholder="0.00")

        if st.form_submit_button("➕ Add"):
            debt, validation = debt_flow.add_debt(name, amount_text)
            if debt is None:
                st.error(RecordInputValidator().get_user_friendly_summary(validation))
            else:
                st.rerun()


def render_passwords_page(credential_flow: CredentialFlow):
    """Render the passwords list, or the unlock prompt while locked."""
    st.title("Passwords")

    credentials = credential_flow.visible_credentials()

    if credentials is None:
        st.markdown("Authenticate to view passwords")
        st.text_input("Passcode", type="password", key="passcode_entry")
        if st.button("🔓 Authenticate", type="primary"):
            outcome = run_async(credential_flow.unlock())
            if outcome == AuthOutcome.AUTHENTICATED:
                st.rerun()
            elif outcome == AuthOutcome.UNAVAILABLE:
                st.warning("Authentication is not available on this device.")
            elif outcome == AuthOutcome.REJECTED:
                st.error("Authentication failed.")
        return

    if not credentials:
        st.info("No passwords stored yet.")

    for position, credential in enumerate(credentials):
        col1, col2 = st.columns([5, 1])
        with col1:
            st.markdown(
                f"Website: {credential.website}  \n"
                f"Username: {credential.username}  \n"
                f"Password: {credential.password}"
            )
        with col2:
            if st.button("🗑️", key=f"delete_credential_{credential.id}"):
                credential_flow.delete_credentials([position])
                st.rerun()

    st.markdown("---")

    with st.form("new_credential", clear_on_submit=True):
        website = st.text_input("Website")
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")

        if st.form_submit_button("➕ Add"):
            if credential_flow.add_credential(website, username, password) is None:
                st.error("Authentication required to add passwords.")
            else:
                st.rerun()


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()

    sections = [
        ("Storage", "storage"),
        ("Authentication", "auth"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    if status.get("storage"):
        st.markdown(f"**Data file:** `{get_settings().storage.path}`")

    st.markdown("---")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
