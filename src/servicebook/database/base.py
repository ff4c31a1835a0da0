"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from servicebook.domain.entities import (
    Customer,
    DiscountState,
    Employee,
    MarketingExpense,
    SalaryPayment,
    Transaction,
    TransactionKind,
)


class Database(ABC):
    """Abstract persistence channel for servicebook.

    Every mutating call is flushed to storage before it returns.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Ledger operations
    @abstractmethod
    def next_transaction_sequence(self) -> int:
        """Return the insertion sequence number for the next ledger record."""
        pass

    @abstractmethod
    def insert_transaction(self, transaction: Transaction) -> str:
        """Store a ledger record. Returns its ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get ledger record by ID."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Permanently delete a ledger record."""
        pass

    @abstractmethod
    def delete_transactions_for_date(self, bucket: date) -> int:
        """Delete every record in a date bucket. Returns number deleted."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: Optional[TransactionKind] = None,
    ) -> list[Transaction]:
        """List ledger records ordered by date bucket, then insertion order.

        Args:
            start_date: Optional first bucket (inclusive)
            end_date: Optional last bucket (inclusive)
            kind: Optional kind filter
        """
        pass

    @abstractmethod
    def replace_ledger(
        self,
        transactions: Sequence[Transaction],
        customers: Optional[Sequence[Customer]] = None,
    ) -> None:
        """Replace the whole ledger (and the registry, if given) atomically."""
        pass

    # Customer registry operations
    @abstractmethod
    def get_customer(self, key: str) -> Optional[Customer]:
        """Get customer identity by normalized key."""
        pass

    @abstractmethod
    def next_customer_sequence(self) -> int:
        """Return the sequence number the next new customer will receive."""
        pass

    @abstractmethod
    def create_customer(
        self, key: str, name: str, contact: str, code: str, sequence: int
    ) -> Customer:
        """Create a customer identity with default discount state."""
        pass

    @abstractmethod
    def update_customer_discount(self, key: str, discount: DiscountState) -> None:
        """Overwrite a customer's discount state."""
        pass

    @abstractmethod
    def list_customers(self) -> list[Customer]:
        """List customer identities ordered by code sequence."""
        pass

    # Settings operations
    @abstractmethod
    def get_setting(self, key: str) -> Optional[str]:
        """Get a persisted setting value."""
        pass

    @abstractmethod
    def set_setting(self, key: str, value: str) -> None:
        """Persist a setting value."""
        pass

    # Follow-up dismissals
    @abstractmethod
    def add_dismissed_followup(self, prediction_id: str) -> None:
        """Mark a follow-up prediction as dismissed."""
        pass

    @abstractmethod
    def list_dismissed_followups(self) -> set[str]:
        """Return IDs of dismissed follow-up predictions."""
        pass

    # Marketing expense operations
    @abstractmethod
    def create_marketing_expense(
        self, expense_date: date, title: str, amount: Decimal, notes: Optional[str] = None
    ) -> int:
        """Create a marketing expense. Returns its ID."""
        pass

    @abstractmethod
    def get_marketing_expense(self, expense_id: int) -> Optional[MarketingExpense]:
        """Get marketing expense by ID."""
        pass

    @abstractmethod
    def delete_marketing_expense(self, expense_id: int) -> None:
        """Delete a marketing expense."""
        pass

    @abstractmethod
    def list_marketing_expenses(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[MarketingExpense]:
        """List marketing expenses, newest first."""
        pass

    # Employee operations
    @abstractmethod
    def count_employees(self) -> int:
        """Count employees, including inactive ones."""
        pass

    @abstractmethod
    def create_employee(
        self,
        code: str,
        name: str,
        role: str,
        salary_type: str,
        monthly_salary: Decimal,
        daily_wage: Optional[Decimal] = None,
        weekly_off_day: Optional[str] = None,
        hiring_reason: Optional[str] = None,
    ) -> int:
        """Create an employee. Returns employee ID."""
        pass

    @abstractmethod
    def get_employee(self, employee_id: int) -> Optional[Employee]:
        """Get employee by ID."""
        pass

    @abstractmethod
    def list_employees(self, include_inactive: bool = False) -> list[Employee]:
        """List employees, newest first."""
        pass

    @abstractmethod
    def set_employee_active(self, employee_id: int, active: bool) -> None:
        """Toggle the soft-delete flag of an employee."""
        pass

    @abstractmethod
    def create_salary_payment(
        self,
        employee_id: int,
        amount: Decimal,
        payment_type: str,
        payment_date: date,
        notes: Optional[str] = None,
    ) -> int:
        """Record a salary payment. Returns payment ID."""
        pass

    @abstractmethod
    def list_salary_payments(self, employee_id: Optional[int] = None) -> list[SalaryPayment]:
        """List salary payments, newest first."""
        pass
