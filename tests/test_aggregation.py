"""Tests for daily and monthly aggregates."""

from datetime import date
from decimal import Decimal

from servicebook.domain.aggregation import (
    marketing_reservation,
    totals_for_day,
    totals_for_month,
)
from servicebook.domain.entities import (
    ExpenseTransaction,
    IncomeTransaction,
    MonthlyTransaction,
    TransactionKind,
)


def _income(day, amount, seq=0):
    return IncomeTransaction(id=f"i{seq}", occurred_on=day, amount=Decimal(amount), sequence=seq)


def _expense(day, amount, seq=0):
    return ExpenseTransaction(id=f"e{seq}", occurred_on=day, amount=Decimal(amount), sequence=seq)


def test_profitable_day():
    day = date(2024, 1, 1)
    totals = totals_for_day(day, [_income(day, "5000", 1), _expense(day, "2000", 2)])

    assert totals.income == Decimal("5000")
    assert totals.expense == Decimal("2000")
    assert totals.gross_profit == Decimal("3000")
    assert totals.marketing_budget == Decimal("600")
    assert totals.net_profit == Decimal("2400")
    assert totals.entry_count == 2


def test_loss_making_day_reserves_nothing():
    day = date(2024, 1, 2)
    totals = totals_for_day(day, [_income(day, "1000", 1), _expense(day, "3000", 2)])

    assert totals.gross_profit == Decimal("-2000")
    assert totals.marketing_budget == Decimal("0")
    assert totals.net_profit == Decimal("-2000")


def test_empty_day():
    totals = totals_for_day(date(2024, 1, 3), [])
    assert totals.income == totals.expense == totals.gross_profit == Decimal("0")
    assert totals.marketing_budget == Decimal("0")


def test_gross_profit_identity():
    day = date(2024, 1, 1)
    totals = totals_for_day(
        day, [_income(day, "1234.56", 1), _expense(day, "99.99", 2), _income(day, "0.45", 3)]
    )
    assert totals.gross_profit == totals.income - totals.expense
    assert totals.net_profit == totals.gross_profit - totals.marketing_budget


def test_marketing_reservation_exact():
    assert marketing_reservation(Decimal("333.33")) == Decimal("66.666")
    assert marketing_reservation(Decimal("0")) == Decimal("0")
    assert marketing_reservation(Decimal("-1")) == Decimal("0")


def test_monthly_entries_count_as_income_and_expense():
    first = date(2024, 1, 1)
    totals = totals_for_day(
        first,
        [
            MonthlyTransaction(
                id="m1",
                kind=TransactionKind.MONTHLY_INCOME,
                month_key="2024-01",
                occurred_on=first,
                amount=Decimal("1000"),
            ),
            MonthlyTransaction(
                id="m2",
                kind=TransactionKind.MONTHLY_EXPENSE,
                month_key="2024-01",
                occurred_on=first,
                amount=Decimal("400"),
            ),
        ],
    )
    assert totals.income == Decimal("1000")
    assert totals.expense == Decimal("400")


def test_month_budget_is_sum_of_daily_budgets():
    """A loss-making day adds nothing even if the month is profitable."""
    d1, d2 = date(2024, 1, 1), date(2024, 1, 2)
    transactions = [
        _income(d1, "5000", 1),
        _expense(d1, "2000", 2),
        _income(d2, "1000", 3),
        _expense(d2, "3000", 4),
    ]
    totals = totals_for_month(2024, 1, transactions)

    assert totals.gross_profit == Decimal("1000")
    assert totals.marketing_budget == Decimal("600")
    assert totals.net_profit == Decimal("400")
    assert totals.saved_date_count == 2
    assert totals.month_key == "2024-01"


def test_daily_totals_from_store(aggregation_service, sample_ledger):
    totals = aggregation_service.daily_totals(date(2024, 1, 1))
    assert totals.gross_profit == Decimal("3000")
    assert totals.marketing_budget == Decimal("600")


def test_monthly_totals_from_store(aggregation_service, sample_ledger):
    totals = aggregation_service.monthly_totals(2024, 1)
    assert totals.income == Decimal("6000")
    assert totals.expense == Decimal("5000")
    assert totals.marketing_budget == Decimal("600")
    assert totals.saved_date_count == 2

    assert aggregation_service.monthly_totals(2024, 2).saved_date_count == 0


def test_date_indicators(aggregation_service, ledger_service, sample_ledger):
    ledger_service.add_transaction(
        kind=TransactionKind.INCOME, amount=Decimal("10"), occurred_on=date(2024, 1, 20)
    )

    indicators = aggregation_service.date_indicators(2024, 1)
    assert [i.date for i in indicators] == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 20)]
    assert indicators[0].has_income and indicators[0].has_expense
    assert indicators[2].has_income and not indicators[2].has_expense
