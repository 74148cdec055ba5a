"""
Storage Services Package

Holds the in-memory, append-only expense store.
"""

from ai_expense_tracker.services.storage.memory_store import ExpenseStore

__all__ = ["ExpenseStore"]
