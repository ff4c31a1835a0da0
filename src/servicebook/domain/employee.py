"""Employee register domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from servicebook.database.base import Database
from servicebook.domain.constants import CODE_WIDTH, EMPLOYEE_CODE_PREFIX
from servicebook.domain.entities import Employee, SalaryPayment, SalaryType
from servicebook.domain.errors import (
    NotFoundError,
    ValidationError,
    employee_not_found,
)
from servicebook.domain.validation import checked_amount

logger = logging.getLogger("servicebook.employees")

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
PAYMENT_TYPES = ("daily", "monthly")


class EmployeeService:
    """Service for employees and their salary payments."""

    def __init__(self, db: Database):
        """Initialize employee service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_employee(
        self,
        name: str,
        role: str,
        salary_type: SalaryType,
        monthly_salary: Optional[Decimal] = None,
        daily_wage: Optional[Decimal] = None,
        weekly_off_day: Optional[str] = None,
        hiring_reason: Optional[str] = None,
    ) -> int:
        """Add an employee.

        The code is EMP followed by the zero-padded count of all employees
        ever added, including deactivated ones.

        Args:
            name: Employee name
            role: Role or position
            salary_type: monthly, daily or mixed
            monthly_salary: Required unless salary_type is daily
            daily_wage: Required unless salary_type is monthly
            weekly_off_day: Optional weekday name
            hiring_reason: Optional free text

        Returns:
            Employee ID

        Raises:
            ValidationError: If required fields are missing or invalid
        """
        if not name or not name.strip():
            raise ValidationError("Employee name is required")
        if not role or not role.strip():
            raise ValidationError("Employee role is required")
        salary_type = SalaryType(salary_type)

        if salary_type != SalaryType.DAILY:
            if monthly_salary is None:
                raise ValidationError("Monthly salary must be greater than zero")
            monthly_salary = checked_amount(monthly_salary)
        else:
            monthly_salary = Decimal("0")

        if salary_type != SalaryType.MONTHLY:
            if daily_wage is None:
                raise ValidationError("Daily wage must be greater than zero")
            daily_wage = checked_amount(daily_wage)
        else:
            daily_wage = None

        if weekly_off_day is not None:
            weekly_off_day = weekly_off_day.strip().lower() or None
            if weekly_off_day is not None and weekly_off_day not in WEEKDAYS:
                raise ValidationError(f"Unknown weekday '{weekly_off_day}'")

        code = f"{EMPLOYEE_CODE_PREFIX}{self.db.count_employees() + 1:0{CODE_WIDTH}d}"
        employee_id = self.db.create_employee(
            code=code,
            name=name.strip(),
            role=role.strip(),
            salary_type=salary_type.value,
            monthly_salary=Decimal(monthly_salary),
            daily_wage=Decimal(daily_wage) if daily_wage is not None else None,
            weekly_off_day=weekly_off_day,
            hiring_reason=hiring_reason.strip() if hiring_reason else None,
        )
        logger.info("Added employee %s (%s)", code, name.strip())
        return employee_id

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        return self.db.get_employee(employee_id)

    def list_employees(self, include_inactive: bool = False) -> list[Employee]:
        return self.db.list_employees(include_inactive=include_inactive)

    def deactivate(self, employee_id: int) -> None:
        """Soft-delete an employee; payments stay on record.

        Raises:
            NotFoundError: If the employee does not exist
        """
        if self.db.get_employee(employee_id) is None:
            raise NotFoundError(employee_not_found(employee_id))
        self.db.set_employee_active(employee_id, False)
        logger.info("Deactivated employee %d", employee_id)

    def pay_salary(
        self,
        employee_id: int,
        amount: Decimal,
        payment_type: str,
        payment_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Record a salary payment for an active employee.

        Raises:
            NotFoundError: If the employee does not exist
            ValidationError: If inactive, amount not positive or unknown payment type
        """
        employee = self.db.get_employee(employee_id)
        if employee is None:
            raise NotFoundError(employee_not_found(employee_id))
        if not employee.active:
            raise ValidationError(f"Employee {employee.code} is no longer active")
        amount = checked_amount(amount)
        if payment_type not in PAYMENT_TYPES:
            raise ValidationError(f"Payment type must be one of: {', '.join(PAYMENT_TYPES)}")

        payment_id = self.db.create_salary_payment(
            employee_id=employee_id,
            amount=amount,
            payment_type=payment_type,
            payment_date=payment_date or date.today(),
            notes=notes,
        )
        logger.info("Paid %s %s salary to %s", amount, payment_type, employee.code)
        return payment_id

    def list_payments(self, employee_id: Optional[int] = None) -> list[SalaryPayment]:
        return self.db.list_salary_payments(employee_id=employee_id)
