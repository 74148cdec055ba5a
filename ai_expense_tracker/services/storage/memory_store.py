"""
In-Memory Expense Store

DESIGN DECISION: The store is the single source of truth for the rendered
expense list, and it is append-only:
- no edit, no delete, no clear
- insertion order is display order
- lifetime is one browser session (it lives in the session state)

There is no persistence layer behind it.
"""

from typing import Iterator

from ai_expense_tracker.models.expense import Expense


class ExpenseStore:
    """Ordered, append-only collection of expenses."""

    def __init__(self):
        self._expenses: list[Expense] = []

    def append(self, expense: Expense) -> Expense:
        """
        Add an expense to the end of the list.

        Returns the stored expense. Expenses are frozen, so the caller
        cannot change it afterwards.
        """
        if not isinstance(expense, Expense):
            raise TypeError(f"Expected Expense, got {type(expense).__name__}")
        self._expenses.append(expense)
        return expense

    def list_expenses(self) -> list[Expense]:
        """Snapshot of all expenses in insertion order."""
        return list(self._expenses)

    @property
    def is_empty(self) -> bool:
        return not self._expenses

    def __len__(self) -> int:
        return len(self._expenses)

    def __iter__(self) -> Iterator[Expense]:
        return iter(list(self._expenses))
