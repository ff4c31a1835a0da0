"""Aggregation domain service: daily and monthly profit figures."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from servicebook.database.base import Database
from servicebook.domain.constants import MARKETING_BUDGET_SHARE
from servicebook.domain.entities import (
    DailyTotals,
    DayIndicator,
    MonthlyTotals,
    Transaction,
)
from servicebook.utils.date_parser import month_bounds

ZERO = Decimal("0")


def split_totals(transactions: Iterable[Transaction]) -> tuple[Decimal, Decimal]:
    """Return (income-like sum, expense-like sum)."""
    income = ZERO
    expense = ZERO
    for txn in transactions:
        if txn.kind.is_income_like:
            income += txn.amount
        else:
            expense += txn.amount
    return income, expense


def marketing_reservation(gross_profit: Decimal) -> Decimal:
    """Marketing budget reserved from a gross profit; never negative."""
    if gross_profit <= 0:
        return ZERO
    return gross_profit * MARKETING_BUDGET_SHARE


def totals_for_day(bucket: date, transactions: Sequence[Transaction]) -> DailyTotals:
    """Compute totals for the records of one date bucket."""
    income, expense = split_totals(transactions)
    gross = income - expense
    budget = marketing_reservation(gross)
    return DailyTotals(
        date=bucket,
        income=income,
        expense=expense,
        gross_profit=gross,
        marketing_budget=budget,
        net_profit=gross - budget,
        entry_count=len(transactions),
    )


def totals_for_month(
    year: int, month: int, transactions: Sequence[Transaction]
) -> MonthlyTotals:
    """Compute month totals from records already limited to that month.

    The marketing budget is the sum of each day's own reservation, so a
    loss-making day adds nothing even when the month is profitable overall.
    """
    by_day: dict[date, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        by_day[txn.occurred_on].append(txn)

    income, expense = split_totals(transactions)
    gross = income - expense
    budget = sum(
        (totals_for_day(day, txns).marketing_budget for day, txns in by_day.items()),
        ZERO,
    )
    return MonthlyTotals(
        year=year,
        month=month,
        income=income,
        expense=expense,
        gross_profit=gross,
        marketing_budget=budget,
        net_profit=gross - budget,
        saved_date_count=len(by_day),
    )


class AggregationService:
    """Service for ledger aggregates. Everything is recomputed on each call."""

    def __init__(self, db: Database):
        """Initialize aggregation service.

        Args:
            db: Database instance
        """
        self.db = db

    def daily_totals(self, bucket: date) -> DailyTotals:
        """Totals for one date bucket."""
        transactions = self.db.list_transactions(start_date=bucket, end_date=bucket)
        return totals_for_day(bucket, transactions)

    def monthly_totals(self, year: int, month: int) -> MonthlyTotals:
        """Totals for a calendar month, including saved date count."""
        start, end = month_bounds(year, month)
        transactions = self.db.list_transactions(start_date=start, end_date=end)
        return totals_for_month(year, month, transactions)

    def date_indicators(self, year: int, month: int) -> list[DayIndicator]:
        """Days of a month that hold entries, with income/expense markers."""
        start, end = month_bounds(year, month)
        markers: dict[date, list[bool]] = {}
        for txn in self.db.list_transactions(start_date=start, end_date=end):
            flags = markers.setdefault(txn.occurred_on, [False, False])
            if txn.kind.is_income_like:
                flags[0] = True
            else:
                flags[1] = True
        return [
            DayIndicator(date=day, has_income=flags[0], has_expense=flags[1])
            for day, flags in sorted(markers.items())
        ]
