"""AI Agents package."""

from ai_expense_tracker.agents.expense_agent import (
    ExpenseExtractionAgent,
    build_extraction_prompt,
    clean_model_output,
    extract_expense,
)

__all__ = [
    "ExpenseExtractionAgent",
    "build_extraction_prompt",
    "clean_model_output",
    "extract_expense",
]
