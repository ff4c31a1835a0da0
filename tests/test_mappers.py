"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from servicebook.database.models import (
    LedgerEntry as ORMLedgerEntry,
    CustomerIdentity as ORMCustomer,
    Employee as ORMEmployee,
)
from servicebook.database.mappers import (
    customer_to_domain,
    employee_to_domain,
    transaction_to_columns,
    transaction_to_domain,
)
from servicebook.domain.entities import (
    Customer,
    CustomerDetails,
    DiscountState,
    ExpenseTransaction,
    IncomeTransaction,
    MonthlyTransaction,
    SalaryType,
    TransactionKind,
)


class TestTransactionMapper:
    """Tests for ledger row mapping."""

    def test_income_row_to_domain(self):
        row = ORMLedgerEntry(
            id="t1",
            kind="income",
            occurred_on=date(2024, 1, 1),
            amount=Decimal("5000.00"),
            note="Oil change",
            sequence=3,
            customer_name="Ali",
            customer_contact="0300",
            customer_code="CUST0001",
            distance=10000,
            discount_eligible=True,
            discount_used=False,
            discount_applied=False,
            created_at=datetime.now(UTC),
        )

        txn = transaction_to_domain(row)

        assert isinstance(txn, IncomeTransaction)
        assert txn.customer.code == "CUST0001"
        assert txn.customer.distance == 10000
        assert txn.discount == DiscountState()
        assert txn.sequence == 3

    def test_income_row_without_customer(self):
        row = ORMLedgerEntry(
            id="t2", kind="income", occurred_on=date(2024, 1, 1), amount=Decimal("10"), sequence=1
        )
        txn = transaction_to_domain(row)
        assert txn.customer is None
        assert txn.discount is None

    def test_expense_row_to_domain(self):
        row = ORMLedgerEntry(
            id="e1", kind="expense", occurred_on=date(2024, 1, 1), amount=Decimal("10"), sequence=1
        )
        assert isinstance(transaction_to_domain(row), ExpenseTransaction)

    def test_monthly_row_to_domain(self):
        row = ORMLedgerEntry(
            id="m1",
            kind="monthly-expense",
            occurred_on=date(2024, 2, 1),
            month_key="2024-02",
            amount=Decimal("30000"),
            sequence=1,
        )
        txn = transaction_to_domain(row)
        assert isinstance(txn, MonthlyTransaction)
        assert txn.kind == TransactionKind.MONTHLY_EXPENSE
        assert txn.month_key == "2024-02"

    def test_income_to_columns(self):
        txn = IncomeTransaction(
            id="t1",
            occurred_on=date(2024, 1, 1),
            amount=Decimal("5000"),
            customer=CustomerDetails(name="Ali", contact="0300", vehicle="Civic"),
            discount=DiscountState(used=True, applied=True),
            sequence=1,
        )

        columns = transaction_to_columns(txn)

        assert columns["kind"] == "income"
        assert columns["customer_name"] == "Ali"
        assert columns["vehicle"] == "Civic"
        assert columns["discount_used"] is True
        assert "created_at" not in columns

    def test_expense_to_columns_has_no_customer(self):
        txn = ExpenseTransaction(id="e", occurred_on=date(2024, 1, 1), amount=Decimal("1"))
        columns = transaction_to_columns(txn)
        assert "customer_name" not in columns
        assert "month_key" not in columns


def test_customer_to_domain():
    row = ORMCustomer(
        key="ali-0300",
        name="Ali",
        contact="0300",
        code="CUST0001",
        sequence=1,
        discount_eligible=True,
        discount_used=True,
        discount_applied=False,
        created_at=datetime.now(UTC),
    )
    customer = customer_to_domain(row)
    assert isinstance(customer, Customer)
    assert customer.discount == DiscountState(eligible=True, used=True, applied=False)


def test_employee_to_domain():
    row = ORMEmployee(
        id=1,
        code="EMP0001",
        name="Bilal",
        role="Mechanic",
        salary_type="daily",
        monthly_salary=Decimal("0"),
        daily_wage=Decimal("1500"),
        active=True,
        created_at=datetime.now(UTC),
    )
    employee = employee_to_domain(row)
    assert employee.salary_type == SalaryType.DAILY
    assert employee.daily_wage == Decimal("1500")
