"""
Application State

DESIGN DECISION: All mutable UI state lives in ONE explicit object owned
by the controller, instead of being scattered over page globals:
- the expense store (append-only)
- the four manual form fields
- the free-text field shared by typing and voice
- the busy flag and the listening indicator
- user alerts waiting to be shown

The Streamlit page keeps one AppState per browser session and renders
from it; nothing else holds state.
"""

from dataclasses import dataclass, field

from ai_expense_tracker.services.storage import ExpenseStore


MANUAL_FIELDS = ("title", "description", "amount", "date")


@dataclass
class AppState:
    """Session state for one user of the page."""

    store: ExpenseStore = field(default_factory=ExpenseStore)

    # Manual form fields, exactly as typed
    title: str = ""
    description: str = ""
    amount: str = ""
    date: str = ""

    # Free-text / voice field
    ai_input: str = ""

    busy: bool = False
    listening: bool = False

    alerts: list[str] = field(default_factory=list)

    def set_title(self, value: str) -> None:
        self.title = value

    def set_description(self, value: str) -> None:
        self.description = value

    def set_amount(self, value: str) -> None:
        self.amount = value

    def set_date(self, value: str) -> None:
        self.date = value

    def set_ai_input(self, value: str) -> None:
        self.ai_input = value

    def manual_fields(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in MANUAL_FIELDS}

    def clear_manual_fields(self) -> None:
        for name in MANUAL_FIELDS:
            setattr(self, name, "")

    def clear_ai_input(self) -> None:
        self.ai_input = ""

    def alert(self, message: str) -> None:
        """Queue a blocking, user-facing message."""
        self.alerts.append(message)

    def drain_alerts(self) -> list[str]:
        """Return queued alerts and forget them."""
        pending, self.alerts = self.alerts, []
        return pending
