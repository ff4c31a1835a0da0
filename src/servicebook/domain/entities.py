"""Domain model entities for servicebook.

These are pure data classes representing business concepts, independent of
database schema. Ledger records are a tagged variant keyed by ``kind``: each
kind has its own class with an explicit field set, and ``Transaction`` is the
union of them.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional, Union


class TransactionKind(str, Enum):
    """Kinds of ledger records."""

    INCOME = "income"
    EXPENSE = "expense"
    MONTHLY_INCOME = "monthly-income"
    MONTHLY_EXPENSE = "monthly-expense"

    @property
    def is_income_like(self) -> bool:
        return self in (TransactionKind.INCOME, TransactionKind.MONTHLY_INCOME)

    @property
    def is_monthly(self) -> bool:
        return self in (TransactionKind.MONTHLY_INCOME, TransactionKind.MONTHLY_EXPENSE)


@dataclass(frozen=True)
class DiscountState:
    """New-customer discount entitlement."""

    eligible: bool = True
    used: bool = False
    applied: bool = False


@dataclass(frozen=True)
class CustomerDetails:
    """Customer and vehicle data carried by an income record."""

    name: str
    contact: str
    code: Optional[str] = None
    vehicle: Optional[str] = None
    registration_number: Optional[str] = None
    service_type: Optional[str] = None
    distance: Optional[int] = None
    acquisition_channel: Optional[str] = None


@dataclass(frozen=True)
class IncomeTransaction:
    """Income received for a job, optionally tied to a customer."""

    kind: ClassVar[TransactionKind] = TransactionKind.INCOME

    id: str
    occurred_on: date
    amount: Decimal
    note: Optional[str] = None
    customer: Optional[CustomerDetails] = None
    discount: Optional[DiscountState] = None
    attached_document: Optional[str] = None
    sequence: int = 0
    created_at: Optional[datetime] = None

    @property
    def service_note(self) -> Optional[str]:
        return self.note


@dataclass(frozen=True)
class ExpenseTransaction:
    """Day-to-day expense."""

    kind: ClassVar[TransactionKind] = TransactionKind.EXPENSE

    id: str
    occurred_on: date
    amount: Decimal
    note: Optional[str] = None
    sequence: int = 0
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class MonthlyTransaction:
    """Income or expense that applies to a whole month (rent, salaries, ...).

    ``occurred_on`` is always the first day of ``month_key`` so the record
    lives in a regular date bucket.
    """

    id: str
    kind: TransactionKind
    month_key: str
    occurred_on: date
    amount: Decimal
    note: Optional[str] = None
    sequence: int = 0
    created_at: Optional[datetime] = None


Transaction = Union[IncomeTransaction, ExpenseTransaction, MonthlyTransaction]


@dataclass(frozen=True)
class Customer:
    """Customer identity registry entry."""

    key: str
    name: str
    contact: str
    code: str
    sequence: int
    discount: DiscountState = field(default_factory=DiscountState)
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CustomerResolution:
    """Result of resolving a (name, contact) pair."""

    customer: Customer
    is_new: bool

    @property
    def code(self) -> str:
        return self.customer.code


@dataclass(frozen=True)
class ServiceVisit:
    """One income record in a customer's history."""

    date: date
    vehicle: str
    service: str
    amount: Decimal


@dataclass(frozen=True)
class LeadSheetEntry:
    """Customer with their service history."""

    name: str
    contact: str
    code: str
    recent_visit_date: date
    visits: tuple[ServiceVisit, ...] = ()


@dataclass(frozen=True)
class DailyTotals:
    """Aggregates for a single date bucket."""

    date: date
    income: Decimal
    expense: Decimal
    gross_profit: Decimal
    marketing_budget: Decimal
    net_profit: Decimal
    entry_count: int = 0


@dataclass(frozen=True)
class MonthlyTotals:
    """Aggregates for a calendar month."""

    year: int
    month: int
    income: Decimal
    expense: Decimal
    gross_profit: Decimal
    marketing_budget: Decimal
    net_profit: Decimal
    saved_date_count: int = 0

    @property
    def month_key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class DayIndicator:
    """Calendar marker for a day with income and/or expense entries."""

    date: date
    has_income: bool
    has_expense: bool


class FollowUpStatus(str, Enum):
    """Urgency of a follow-up prediction."""

    UPCOMING = "upcoming"
    DUE = "due"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class FollowUpPrediction:
    """Derived estimate of a customer's next service."""

    id: str
    customer_name: str
    customer_contact: str
    customer_code: str
    vehicle: str
    registration_number: str
    last_service_date: date
    last_service_type: str
    last_distance: int
    next_service_distance: int
    estimated_next_date: date
    days_until_due: int
    status: FollowUpStatus
    dismissed: bool = False


@dataclass(frozen=True)
class FollowUpStats:
    """Counts of active predictions by status."""

    total: int
    overdue: int
    due: int
    upcoming: int


@dataclass(frozen=True)
class MarketingExpense:
    """Spend drawn against the reserved marketing budget."""

    id: int
    expense_date: date
    title: str
    amount: Decimal
    notes: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class MarketingBudgetStatus:
    """Reserved marketing budget for a month versus recorded spend."""

    year: int
    month: int
    budget: Decimal
    spent: Decimal
    remaining: Decimal
    entry_count: int

    @property
    def over_budget(self) -> bool:
        return self.remaining < 0


class SalaryType(str, Enum):
    MONTHLY = "monthly"
    DAILY = "daily"
    MIXED = "mixed"


@dataclass(frozen=True)
class Employee:
    """Employee domain entity. Inactive employees are soft-deleted."""

    id: int
    code: str
    name: str
    role: str
    salary_type: SalaryType
    monthly_salary: Decimal
    daily_wage: Optional[Decimal]
    weekly_off_day: Optional[str]
    hiring_reason: Optional[str]
    active: bool
    created_at: datetime


@dataclass(frozen=True)
class SalaryPayment:
    """Append-only salary payment event."""

    id: int
    employee_id: int
    amount: Decimal
    payment_type: str
    payment_date: date
    notes: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class ImportResult:
    """Counts of records loaded by a snapshot import."""

    transactions: int
    customers: int
