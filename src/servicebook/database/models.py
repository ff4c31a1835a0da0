"""SQLAlchemy models for servicebook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class LedgerEntry(Base):
    """Ledger record model.

    One table holds every transaction kind; columns that do not apply to a
    kind stay NULL. ``occurred_on`` is the date bucket.
    """

    __tablename__ = "ledger_entries"

    id = Column(String, primary_key=True)
    kind = Column(String, nullable=False)
    occurred_on = Column(Date, nullable=False, index=True)
    month_key = Column(String, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    note = Column(String, nullable=True)
    sequence = Column(Integer, nullable=False, index=True)

    customer_name = Column(String, nullable=True)
    customer_contact = Column(String, nullable=True)
    customer_code = Column(String, nullable=True)
    vehicle = Column(String, nullable=True)
    registration_number = Column(String, nullable=True)
    service_type = Column(String, nullable=True)
    distance = Column(Integer, nullable=True)
    acquisition_channel = Column(String, nullable=True)
    attached_document = Column(String, nullable=True)

    discount_eligible = Column(Boolean, nullable=True)
    discount_used = Column(Boolean, nullable=True)
    discount_applied = Column(Boolean, nullable=True)

    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class CustomerIdentity(Base):
    """Customer registry model keyed by normalized name and contact."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    contact = Column(String, nullable=False)
    code = Column(String, unique=True, nullable=False)
    sequence = Column(Integer, nullable=False)
    discount_eligible = Column(Boolean, default=True, nullable=False)
    discount_used = Column(Boolean, default=False, nullable=False)
    discount_applied = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Setting(Base):
    """Persisted key/value setting."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)


class DismissedFollowUp(Base):
    """Follow-up prediction marked as done."""

    __tablename__ = "dismissed_followups"

    prediction_id = Column(String, primary_key=True)
    dismissed_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class MarketingExpense(Base):
    """Marketing spend model."""

    __tablename__ = "marketing_expenses"

    id = Column(Integer, primary_key=True)
    expense_date = Column(Date, nullable=False, index=True)
    title = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Employee(Base):
    """Employee model."""

    __tablename__ = "employees"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    salary_type = Column(String, nullable=False)
    monthly_salary = Column(Numeric(12, 2), default=0, nullable=False)
    daily_wage = Column(Numeric(12, 2), nullable=True)
    weekly_off_day = Column(String, nullable=True)
    hiring_reason = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    payments = relationship("SalaryPayment", back_populates="employee")


class SalaryPayment(Base):
    """Salary payment model."""

    __tablename__ = "salary_payments"

    id = Column(Integer, primary_key=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_type = Column(String, nullable=False)
    payment_date = Column(Date, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    employee = relationship("Employee", back_populates="payments")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
