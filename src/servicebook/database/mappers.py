"""Mapper functions to convert between domain models and SQLAlchemy models.

Ledger rows are flat; the mapper picks the domain variant from ``kind`` and
only carries the fields that variant owns.
"""

from decimal import Decimal
from typing import Optional

from servicebook.domain import entities as domain
from servicebook.database.models import (
    LedgerEntry as ORMLedgerEntry,
    CustomerIdentity as ORMCustomer,
    MarketingExpense as ORMMarketingExpense,
    Employee as ORMEmployee,
    SalaryPayment as ORMSalaryPayment,
)


def _discount_from_columns(eligible, used, applied) -> Optional[domain.DiscountState]:
    if eligible is None and used is None and applied is None:
        return None
    return domain.DiscountState(
        eligible=bool(eligible), used=bool(used), applied=bool(applied)
    )


def transaction_to_domain(orm_entry: ORMLedgerEntry) -> domain.Transaction:
    """Convert a ledger row to the matching domain transaction variant."""
    kind = domain.TransactionKind(orm_entry.kind)
    amount = Decimal(orm_entry.amount)

    if kind == domain.TransactionKind.INCOME:
        customer = None
        if orm_entry.customer_name or orm_entry.customer_contact:
            customer = domain.CustomerDetails(
                name=orm_entry.customer_name or "",
                contact=orm_entry.customer_contact or "",
                code=orm_entry.customer_code,
                vehicle=orm_entry.vehicle,
                registration_number=orm_entry.registration_number,
                service_type=orm_entry.service_type,
                distance=orm_entry.distance,
                acquisition_channel=orm_entry.acquisition_channel,
            )
        return domain.IncomeTransaction(
            id=orm_entry.id,
            occurred_on=orm_entry.occurred_on,
            amount=amount,
            note=orm_entry.note,
            customer=customer,
            discount=_discount_from_columns(
                orm_entry.discount_eligible,
                orm_entry.discount_used,
                orm_entry.discount_applied,
            ),
            attached_document=orm_entry.attached_document,
            sequence=orm_entry.sequence,
            created_at=orm_entry.created_at,
        )

    if kind == domain.TransactionKind.EXPENSE:
        return domain.ExpenseTransaction(
            id=orm_entry.id,
            occurred_on=orm_entry.occurred_on,
            amount=amount,
            note=orm_entry.note,
            sequence=orm_entry.sequence,
            created_at=orm_entry.created_at,
        )

    return domain.MonthlyTransaction(
        id=orm_entry.id,
        kind=kind,
        month_key=orm_entry.month_key or orm_entry.occurred_on.strftime("%Y-%m"),
        occurred_on=orm_entry.occurred_on,
        amount=amount,
        note=orm_entry.note,
        sequence=orm_entry.sequence,
        created_at=orm_entry.created_at,
    )


def transaction_to_columns(txn: domain.Transaction) -> dict:
    """Flatten a domain transaction into ledger row column values."""
    columns = {
        "id": txn.id,
        "kind": txn.kind.value,
        "occurred_on": txn.occurred_on,
        "amount": txn.amount,
        "note": txn.note,
        "sequence": txn.sequence,
    }
    if txn.created_at is not None:
        columns["created_at"] = txn.created_at

    if isinstance(txn, domain.MonthlyTransaction):
        columns["month_key"] = txn.month_key

    if isinstance(txn, domain.IncomeTransaction):
        columns["attached_document"] = txn.attached_document
        if txn.customer is not None:
            columns.update(
                customer_name=txn.customer.name,
                customer_contact=txn.customer.contact,
                customer_code=txn.customer.code,
                vehicle=txn.customer.vehicle,
                registration_number=txn.customer.registration_number,
                service_type=txn.customer.service_type,
                distance=txn.customer.distance,
                acquisition_channel=txn.customer.acquisition_channel,
            )
        if txn.discount is not None:
            columns.update(
                discount_eligible=txn.discount.eligible,
                discount_used=txn.discount.used,
                discount_applied=txn.discount.applied,
            )
    return columns


def customer_to_domain(orm_customer: ORMCustomer) -> domain.Customer:
    """Convert SQLAlchemy CustomerIdentity model to domain Customer entity."""
    return domain.Customer(
        key=orm_customer.key,
        name=orm_customer.name,
        contact=orm_customer.contact,
        code=orm_customer.code,
        sequence=orm_customer.sequence,
        discount=domain.DiscountState(
            eligible=orm_customer.discount_eligible,
            used=orm_customer.discount_used,
            applied=orm_customer.discount_applied,
        ),
        created_at=orm_customer.created_at,
    )


def marketing_expense_to_domain(orm_expense: ORMMarketingExpense) -> domain.MarketingExpense:
    """Convert SQLAlchemy MarketingExpense model to domain entity."""
    return domain.MarketingExpense(
        id=orm_expense.id,
        expense_date=orm_expense.expense_date,
        title=orm_expense.title,
        amount=Decimal(orm_expense.amount),
        notes=orm_expense.notes,
        created_at=orm_expense.created_at,
    )


def employee_to_domain(orm_employee: ORMEmployee) -> domain.Employee:
    """Convert SQLAlchemy Employee model to domain Employee entity."""
    return domain.Employee(
        id=orm_employee.id,
        code=orm_employee.code,
        name=orm_employee.name,
        role=orm_employee.role,
        salary_type=domain.SalaryType(orm_employee.salary_type),
        monthly_salary=Decimal(orm_employee.monthly_salary or 0),
        daily_wage=(
            Decimal(orm_employee.daily_wage) if orm_employee.daily_wage is not None else None
        ),
        weekly_off_day=orm_employee.weekly_off_day,
        hiring_reason=orm_employee.hiring_reason,
        active=orm_employee.active,
        created_at=orm_employee.created_at,
    )


def salary_payment_to_domain(orm_payment: ORMSalaryPayment) -> domain.SalaryPayment:
    """Convert SQLAlchemy SalaryPayment model to domain entity."""
    return domain.SalaryPayment(
        id=orm_payment.id,
        employee_id=orm_payment.employee_id,
        amount=Decimal(orm_payment.amount),
        payment_type=orm_payment.payment_type,
        payment_date=orm_payment.payment_date,
        notes=orm_payment.notes,
        created_at=orm_payment.created_at,
    )
