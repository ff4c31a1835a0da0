"""Marketing budget ledger domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from servicebook.database.base import Database
from servicebook.domain.aggregation import AggregationService
from servicebook.domain.entities import MarketingBudgetStatus, MarketingExpense
from servicebook.domain.errors import NotFoundError, ValidationError
from servicebook.domain.validation import checked_amount
from servicebook.utils.date_parser import month_bounds

logger = logging.getLogger("servicebook.marketing")


class MarketingService:
    """Service for marketing spend against the reserved budget."""

    def __init__(self, db: Database):
        """Initialize marketing service.

        Args:
            db: Database instance
        """
        self.db = db
        self.aggregation = AggregationService(db)

    def add_expense(
        self,
        expense_date: date,
        title: str,
        amount: Decimal,
        notes: Optional[str] = None,
    ) -> int:
        """Record marketing spend.

        Raises:
            ValidationError: If title is blank or amount is not positive
        """
        if not title or not title.strip():
            raise ValidationError("Title is required")
        amount = checked_amount(amount)

        notes = notes.strip() if notes and notes.strip() else None
        expense_id = self.db.create_marketing_expense(
            expense_date=expense_date, title=title.strip(), amount=amount, notes=notes
        )
        logger.info("Added marketing expense %d of %s on %s", expense_id, amount, expense_date)
        return expense_id

    def delete_expense(self, expense_id: int) -> None:
        """Delete a marketing expense.

        Raises:
            NotFoundError: If the expense does not exist
        """
        if self.db.get_marketing_expense(expense_id) is None:
            raise NotFoundError(f"Marketing expense {expense_id} not found")
        self.db.delete_marketing_expense(expense_id)
        logger.info("Deleted marketing expense %d", expense_id)

    def list_for_month(self, year: int, month: int) -> list[MarketingExpense]:
        """Marketing expenses of a month, newest first."""
        start, end = month_bounds(year, month)
        return self.db.list_marketing_expenses(start_date=start, end_date=end)

    def budget_status(self, year: int, month: int) -> MarketingBudgetStatus:
        """Reserved budget of a month against what was spent."""
        budget = self.aggregation.monthly_totals(year, month).marketing_budget
        expenses = self.list_for_month(year, month)
        spent = sum((e.amount for e in expenses), Decimal("0"))
        return MarketingBudgetStatus(
            year=year,
            month=month,
            budget=budget,
            spent=spent,
            remaining=budget - spent,
            entry_count=len(expenses),
        )
