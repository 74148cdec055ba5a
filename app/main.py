"""
Streamlit Frontend for AI Expense Tracker

Run with:
    streamlit run app/main.py

The page is a pure rendering of the session's AppState:
1. Manual form (title, description, amount, date)
2. AI form (free text or a voice recording, processed by Gemini)
3. The list of expenses added in this session

All state changes go through the ExpenseController inside widget
callbacks; the callbacks copy widget values into the state before calling
a handler and copy the (possibly cleared) fields back afterwards.
"""

import asyncio

import streamlit as st

from ai_expense_tracker.audit import configure_logging
from ai_expense_tracker.config import get_settings, validate_all_settings
from ai_expense_tracker.models.expense import EntryOutcome
from ai_expense_tracker.orchestrator import ExpenseController, create_app_components
from ai_expense_tracker.presentation import (
    AI_INPUT_PLACEHOLDER,
    EMPTY_LIST_MESSAGE,
    ai_button_label,
    format_expense_line,
    mic_button_label,
)


# Page configuration
st.set_page_config(
    page_title="AI Expense Tracker",
    page_icon="💸",
    layout="centered",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_controller() -> ExpenseController:
    """Get or create this session's controller (it owns the AppState)."""
    if "controller" not in st.session_state:
        configure_logging(get_settings().app.effective_log_level)
        st.session_state.controller = create_app_components()
    return st.session_state.controller


# =============================================================================
# CALLBACKS
# =============================================================================

def on_add_manual():
    controller = get_controller()
    state = controller.state

    state.set_title(st.session_state.manual_title)
    state.set_description(st.session_state.manual_description)
    state.set_amount(st.session_state.manual_amount)
    picked = st.session_state.manual_date
    state.set_date(picked.isoformat() if picked else "")

    if controller.add_manual_expense() == EntryOutcome.ADDED:
        st.session_state.manual_title = state.title
        st.session_state.manual_description = state.description
        st.session_state.manual_amount = state.amount
        st.session_state.manual_date = None


def on_process_ai():
    controller = get_controller()
    controller.state.set_ai_input(st.session_state.ai_input)
    with st.spinner(ai_button_label(True)):
        run_async(controller.extract_from_text())
    st.session_state.ai_input = controller.state.ai_input


def on_voice_recorded():
    clip = st.session_state.voice_clip
    if clip is None:
        return
    controller = get_controller()
    with st.spinner("Transcribing..."):
        run_async(controller.start_voice_capture(clip.getvalue()))
    st.session_state.ai_input = controller.state.ai_input


# =============================================================================
# RENDERING
# =============================================================================

def main():
    """Main application entry point."""
    controller = get_controller()
    state = controller.state
    currency_symbol = get_settings().app.currency_symbol

    render_sidebar()

    st.title("AI Expense Tracker")

    for message in state.drain_alerts():
        st.error(message)

    render_manual_form()
    render_ai_form(state)
    render_expense_list(state, currency_symbol)


def render_sidebar():
    st.sidebar.title("💸 AI Expense Tracker")
    st.sidebar.markdown("### Connection Status")

    status = validate_all_settings()
    if status.get("gemini", False):
        st.sidebar.success("✅ Gemini (AI) - Configured")
    else:
        st.sidebar.error(f"❌ Gemini (AI) - {status.get('gemini_error', 'Not configured')}")

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        - Fill in the manual form, or
        - Describe the expense in your own words
        - Or record it with the microphone
        """
    )


def render_manual_form():
    with st.container(border=True):
        st.subheader("Add Expense Manually")

        st.text_input("Title", key="manual_title", placeholder="Title")
        st.text_input("Description", key="manual_description", placeholder="Description")
        st.text_input("Amount", key="manual_amount", placeholder="Amount")
        st.date_input("Date", key="manual_date", value=None)

        st.button("Add Expense", key="add_manual", on_click=on_add_manual, type="primary")


def render_ai_form(state):
    with st.container(border=True):
        st.subheader("Add Expense via AI")

        st.text_input(
            "Describe the expense",
            key="ai_input",
            placeholder=AI_INPUT_PLACEHOLDER,
        )

        st.audio_input(
            mic_button_label(state.listening),
            key="voice_clip",
            on_change=on_voice_recorded,
            disabled=state.busy,
        )

        st.button(
            ai_button_label(state.busy),
            key="process_ai",
            on_click=on_process_ai,
            disabled=state.busy,
        )


def render_expense_list(state, currency_symbol: str):
    st.subheader("Expenses")

    expenses = state.store.list_expenses()
    if not expenses:
        st.write(EMPTY_LIST_MESSAGE)
        return

    for expense in expenses:
        st.markdown("- " + format_expense_line(expense, currency_symbol, markdown=True))


if __name__ == "__main__":
    main()
