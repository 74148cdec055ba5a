"""
Presentation helpers

Pure formatting used by the Streamlit page.

An expense renders as:

    Coffee – morning coffee – $5.00 on 5/5/2024
"""

from datetime import date

from ai_expense_tracker.models.expense import Expense


EMPTY_LIST_MESSAGE = "No expenses added yet."
AI_INPUT_PLACEHOLDER = "e.g. 100 rupees for groceries on 5th May"


def format_amount(amount: float, currency_symbol: str = "$") -> str:
    """Currency symbol plus exactly two decimals."""
    return f"{currency_symbol}{amount:.2f}"


def parse_displayed_amount(text: str, currency_symbol: str = "$") -> float:
    """Inverse of format_amount: read the number back from the display."""
    value = text.strip()
    if currency_symbol and value.startswith(currency_symbol):
        value = value[len(currency_symbol):]
    return float(value)


def format_date(value: date) -> str:
    """Short US-style date (month/day/year, no zero padding)."""
    return f"{value.month}/{value.day}/{value.year}"


def format_expense_line(
    expense: Expense,
    currency_symbol: str = "$",
    markdown: bool = False,
) -> str:
    """
    One list row. With ``markdown`` the title is bold and "$" is escaped
    so Streamlit does not read it as the start of a LaTeX span.
    """
    title = f"**{expense.title}**" if markdown else expense.title
    line = (
        f"{title} – {expense.description} – "
        f"{format_amount(expense.amount, currency_symbol)} on {format_date(expense.date)}"
    )
    if markdown:
        line = line.replace("$", "\\$")
    return line


def ai_button_label(busy: bool) -> str:
    return "Processing..." if busy else "Process with AI"


def mic_button_label(listening: bool) -> str:
    return "🎙️ Listening..." if listening else "🎤 Speak your expense"
