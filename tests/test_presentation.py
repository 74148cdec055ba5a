"""
Tests for the display formatting helpers.
"""

from datetime import date

import pytest

from ai_expense_tracker.models.expense import Expense
from ai_expense_tracker.presentation import (
    ai_button_label,
    format_amount,
    format_date,
    format_expense_line,
    mic_button_label,
    parse_displayed_amount,
)


COFFEE = Expense(
    title="Coffee",
    description="morning coffee",
    amount=5,
    date=date(2024, 5, 5),
)


class TestAmountFormatting:
    """Tests for amount display."""

    @pytest.mark.parametrize("amount, shown", [
        (5, "$5.00"),
        (12.5, "$12.50"),
        (0.1 + 0.2, "$0.30"),
        (1234.567, "$1234.57"),
        (0, "$0.00"),
        (-3.2, "$-3.20"),
    ])
    def test_two_decimals(self, amount, shown):
        assert format_amount(amount) == shown

    @pytest.mark.parametrize("amount", [5, 12.5, 0.1 + 0.2, 99.999, 0])
    def test_displayed_amount_reads_back(self, amount):
        """Test the shown value equals the stored value rounded to cents."""
        shown = format_amount(amount)
        assert parse_displayed_amount(shown) == pytest.approx(round(amount, 2))

    def test_custom_currency_symbol(self):
        assert format_amount(100, "₹") == "₹100.00"
        assert parse_displayed_amount("₹100.00", "₹") == 100.0


class TestExpenseLine:
    """Tests for list rows."""

    def test_plain_line(self):
        assert format_expense_line(COFFEE) == "Coffee – morning coffee – $5.00 on 5/5/2024"

    def test_markdown_line(self):
        """Test bold title and escaped dollar sign."""
        assert (
            format_expense_line(COFFEE, markdown=True)
            == "**Coffee** – morning coffee – \\$5.00 on 5/5/2024"
        )

    def test_date_has_no_zero_padding(self):
        assert format_date(date(2024, 12, 25)) == "12/25/2024"
        assert format_date(date(2024, 1, 9)) == "1/9/2024"


class TestLabels:
    """Tests for button captions."""

    def test_ai_button(self):
        assert ai_button_label(False) == "Process with AI"
        assert ai_button_label(True) == "Processing..."

    def test_mic_button(self):
        assert "Speak your expense" in mic_button_label(False)
        assert "Listening..." in mic_button_label(True)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
