"""Customer identity registry domain service."""

import logging
from typing import Optional

from servicebook.database.base import Database
from servicebook.domain.constants import CODE_WIDTH, CUSTOMER_CODE_PREFIX
from servicebook.domain.entities import (
    Customer,
    CustomerResolution,
    DiscountState,
    IncomeTransaction,
    LeadSheetEntry,
    ServiceVisit,
)
from servicebook.domain.errors import NotFoundError, ValidationError, customer_not_found

logger = logging.getLogger("servicebook.customers")


def normalize_key(name: str, contact: str) -> str:
    """Return the registry key for a (name, contact) pair."""
    return f"{name.strip()}-{contact.strip()}".lower()


def format_customer_code(sequence: int) -> str:
    """Return the customer code for a registry sequence number."""
    return f"{CUSTOMER_CODE_PREFIX}{sequence:0{CODE_WIDTH}d}"


def should_offer_discount(resolution: CustomerResolution) -> bool:
    """Whether the new-customer discount offer should be shown.

    The registry never decides that a discount was given; it only tells the
    caller whether to ask.
    """
    discount = resolution.customer.discount
    return resolution.is_new or (discount.eligible and not discount.used)


class CustomerService:
    """Service for the customer identity registry."""

    def __init__(self, db: Database):
        """Initialize customer service.

        Args:
            db: Database instance
        """
        self.db = db

    def resolve(self, name: str, contact: str) -> CustomerResolution:
        """Return the identity for (name, contact), creating it on first sight.

        Codes are assigned exactly once per key and never reused: the next
        sequence number is always one past the highest ever issued.

        Args:
            name: Customer name
            contact: Contact number

        Returns:
            CustomerResolution with the customer and whether it was just created

        Raises:
            ValidationError: If name or contact is blank
        """
        if not name or not name.strip() or not contact or not contact.strip():
            raise ValidationError("Customer name and contact are required")

        key = normalize_key(name, contact)
        existing = self.db.get_customer(key)
        if existing is not None:
            return CustomerResolution(customer=existing, is_new=False)

        sequence = self.db.next_customer_sequence()
        code = format_customer_code(sequence)
        customer = self.db.create_customer(
            key=key,
            name=name.strip(),
            contact=contact.strip(),
            code=code,
            sequence=sequence,
        )
        logger.info("Registered customer %s as %s", key, code)
        return CustomerResolution(customer=customer, is_new=True)

    def get_customer(self, name: str, contact: str) -> Optional[Customer]:
        """Get a customer identity, or None if the pair was never seen."""
        return self.db.get_customer(normalize_key(name, contact))

    def list_customers(self) -> list[Customer]:
        """List registry entries in code order."""
        return self.db.list_customers()

    def set_discount_state(
        self, name: str, contact: str, eligible: bool, used: bool, applied: bool
    ) -> Customer:
        """Overwrite the discount entitlement of a customer.

        Raises:
            NotFoundError: If the customer is not in the registry
        """
        key = normalize_key(name, contact)
        if self.db.get_customer(key) is None:
            raise NotFoundError(customer_not_found(name, contact))

        self.db.update_customer_discount(
            key, DiscountState(eligible=eligible, used=used, applied=applied)
        )
        logger.info(
            "Discount state for %s set to eligible=%s used=%s applied=%s",
            key,
            eligible,
            used,
            applied,
        )
        return self.db.get_customer(key)

    def record_discount_decision(self, name: str, contact: str, given: bool) -> Customer:
        """Record the human decision on the new-customer discount.

        A declined discount leaves the customer eligible for a later visit.
        """
        return self.set_discount_state(
            name, contact, eligible=True, used=given, applied=given
        )

    def lead_sheet(self, search: Optional[str] = None) -> list[LeadSheetEntry]:
        """Build the customer lead sheet from income records.

        Args:
            search: Optional case-insensitive filter on name, contact or code

        Returns:
            Customers sorted alphabetically, each with their visits newest first
        """
        grouped: dict[str, dict] = {}
        for txn in self.db.list_transactions():
            if not isinstance(txn, IncomeTransaction) or txn.customer is None:
                continue
            customer = txn.customer
            if not customer.name or not customer.contact:
                continue

            key = normalize_key(customer.name, customer.contact)
            entry = grouped.setdefault(
                key,
                {
                    "name": customer.name,
                    "contact": customer.contact,
                    "code": customer.code or "",
                    "visits": [],
                },
            )
            if not entry["code"] and customer.code:
                entry["code"] = customer.code
            entry["visits"].append(
                ServiceVisit(
                    date=txn.occurred_on,
                    vehicle=customer.vehicle or "",
                    service=customer.service_type or txn.note or "",
                    amount=txn.amount,
                )
            )

        results = []
        for entry in grouped.values():
            visits = sorted(entry["visits"], key=lambda v: v.date, reverse=True)
            results.append(
                LeadSheetEntry(
                    name=entry["name"],
                    contact=entry["contact"],
                    code=entry["code"],
                    recent_visit_date=visits[0].date,
                    visits=tuple(visits),
                )
            )

        if search:
            query = search.strip().lower()
            results = [
                r
                for r in results
                if query in r.name.lower() or query in r.contact or query in r.code.lower()
            ]

        return sorted(results, key=lambda r: (r.name.lower(), r.contact))
