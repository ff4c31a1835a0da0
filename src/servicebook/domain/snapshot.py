"""Full-snapshot export and import of the ledger and customer registry."""

import json
import logging
import re
from dataclasses import replace
from datetime import date, datetime, UTC
from typing import Any, Optional

from servicebook.database.base import Database
from servicebook.domain.customer import normalize_key
from servicebook.domain.entities import (
    Customer,
    CustomerDetails,
    DiscountState,
    ExpenseTransaction,
    ImportResult,
    IncomeTransaction,
    MonthlyTransaction,
    Transaction,
    TransactionKind,
)
from servicebook.domain.errors import ValidationError
from servicebook.domain.validation import checked_amount

logger = logging.getLogger("servicebook.snapshot")

SNAPSHOT_VERSION = 1
_CODE_DIGITS = re.compile(r"(\d+)$")


def _discount_to_dict(discount: DiscountState) -> dict[str, bool]:
    return {"eligible": discount.eligible, "used": discount.used, "applied": discount.applied}


def _flag(data: dict, field: str, default: bool) -> bool:
    value = data.get(field, default)
    if not isinstance(value, bool):
        raise ValidationError(f"Discount flag '{field}' must be true or false")
    return value


def _discount_from_dict(data: Any) -> DiscountState:
    if not isinstance(data, dict):
        raise ValidationError("Discount state must be an object")
    return DiscountState(
        eligible=_flag(data, "eligible", True),
        used=_flag(data, "used", False),
        applied=_flag(data, "applied", False),
    )


def _text(data: dict, field: str, owner: str) -> Optional[str]:
    """Return an optional text field, rejecting any other JSON type."""
    value = data.get(field)
    if value is None or isinstance(value, str):
        return value
    raise ValidationError(f"{owner} has non-text '{field}'")


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid timestamp '{value}'") from e


def transaction_to_dict(txn: Transaction) -> dict[str, Any]:
    """Serialize a ledger record for the snapshot document."""
    data: dict[str, Any] = {
        "id": txn.id,
        "type": txn.kind.value,
        "amount": str(txn.amount),
        "note": txn.note,
        "sequence": txn.sequence,
        "createdAt": txn.created_at.isoformat() if txn.created_at else None,
    }
    if isinstance(txn, MonthlyTransaction):
        data["monthYear"] = txn.month_key
    if isinstance(txn, IncomeTransaction):
        data["billFile"] = txn.attached_document
        if txn.customer is not None:
            data.update(
                customer=txn.customer.name,
                contact=txn.customer.contact,
                customerCode=txn.customer.code,
                car=txn.customer.vehicle,
                registrationNumber=txn.customer.registration_number,
                serviceType=txn.customer.service_type,
                currentKm=txn.customer.distance,
                customerSource=txn.customer.acquisition_channel,
            )
        if txn.discount is not None:
            data["newCustomerDiscount"] = _discount_to_dict(txn.discount)
    return data


def transaction_from_dict(bucket: date, data: Any) -> Transaction:
    """Deserialize a snapshot entry found under a date bucket.

    Raises:
        ValidationError: If the entry is malformed
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Entry under {bucket} is not an object")
    txn_id = data.get("id")
    if not txn_id:
        raise ValidationError(f"Entry under {bucket} has no id")
    txn_id = str(txn_id)

    try:
        kind = TransactionKind(data.get("type"))
    except ValueError as e:
        raise ValidationError(f"Entry {txn_id} has unknown type {data.get('type')!r}") from e

    try:
        amount = checked_amount(str(data.get("amount")))
    except ValidationError as e:
        raise ValidationError(f"Entry {txn_id}: {e}") from e

    try:
        sequence = int(data.get("sequence") or 0)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Entry {txn_id} has invalid sequence") from e

    common = {
        "id": txn_id,
        "amount": amount,
        "note": _text(data, "note", f"Entry {txn_id}"),
        "sequence": sequence,
        "created_at": _parse_datetime(data.get("createdAt")),
    }

    if kind.is_monthly:
        month_key = data.get("monthYear") or bucket.strftime("%Y-%m")
        try:
            year_str, month_str = str(month_key).split("-")
            first_day = date(int(year_str), int(month_str), 1)
        except ValueError as e:
            raise ValidationError(f"Entry {txn_id} has invalid month {month_key!r}") from e
        return MonthlyTransaction(
            kind=kind, month_key=str(month_key), occurred_on=first_day, **common
        )

    if kind == TransactionKind.EXPENSE:
        return ExpenseTransaction(occurred_on=bucket, **common)

    owner = f"Entry {txn_id}"
    name = _text(data, "customer", owner)
    contact = _text(data, "contact", owner)
    customer = None
    if name or contact:
        distance = data.get("currentKm")
        try:
            distance = int(distance) if distance not in (None, "") else None
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Entry {txn_id} has invalid distance") from e
        customer = CustomerDetails(
            name=name or "",
            contact=contact or "",
            code=_text(data, "customerCode", owner),
            vehicle=_text(data, "car", owner),
            registration_number=_text(data, "registrationNumber", owner),
            service_type=_text(data, "serviceType", owner),
            distance=distance,
            acquisition_channel=_text(data, "customerSource", owner),
        )
    discount = None
    if data.get("newCustomerDiscount") is not None:
        discount = _discount_from_dict(data["newCustomerDiscount"])
    return IncomeTransaction(
        occurred_on=bucket,
        customer=customer,
        discount=discount,
        attached_document=_text(data, "billFile", owner),
        **common,
    )


def customer_to_dict(customer: Customer) -> dict[str, Any]:
    return {
        "key": customer.key,
        "name": customer.name,
        "contact": customer.contact,
        "code": customer.code,
        "sequence": customer.sequence,
        "discount": _discount_to_dict(customer.discount),
        "createdAt": customer.created_at.isoformat() if customer.created_at else None,
    }


def customer_from_dict(data: Any) -> Customer:
    if not isinstance(data, dict):
        raise ValidationError("Customer entry is not an object")
    name = _text(data, "name", "Customer entry")
    contact = _text(data, "contact", "Customer entry")
    code = _text(data, "code", "Customer entry")
    if not name or not contact or not code:
        raise ValidationError("Customer entries need name, contact and code")
    sequence = data.get("sequence")
    if sequence is None:
        match = _CODE_DIGITS.search(str(code))
        sequence = match.group(1) if match else 0
    try:
        sequence = int(sequence)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Customer {code} has invalid sequence") from e
    return Customer(
        key=_text(data, "key", f"Customer {code}") or normalize_key(name, contact),
        name=name,
        contact=contact,
        code=code,
        sequence=sequence,
        discount=_discount_from_dict(data.get("discount") or {}),
        created_at=_parse_datetime(data.get("createdAt")),
    )


def customers_from_codes(
    codes: dict[str, Any], transactions: list[Transaction]
) -> list[Customer]:
    """Rebuild registry entries from a bare key -> code map."""
    names: dict[str, tuple[str, str]] = {}
    for txn in transactions:
        if isinstance(txn, IncomeTransaction) and txn.customer is not None:
            key = normalize_key(txn.customer.name, txn.customer.contact)
            names.setdefault(key, (txn.customer.name, txn.customer.contact))

    customers = []
    for key, code in codes.items():
        name, contact = names.get(key, (key, ""))
        match = _CODE_DIGITS.search(str(code))
        customers.append(
            Customer(
                key=key,
                name=name,
                contact=contact,
                code=str(code),
                sequence=int(match.group(1)) if match else 0,
            )
        )
    return customers


class SnapshotService:
    """Service for full-snapshot JSON export and import."""

    def __init__(self, db: Database):
        """Initialize snapshot service.

        Args:
            db: Database instance
        """
        self.db = db

    def export_snapshot(self) -> dict[str, Any]:
        """Build the snapshot document for the whole ledger and registry."""
        tracker_data: dict[str, list[dict[str, Any]]] = {}
        for txn in self.db.list_transactions():
            tracker_data.setdefault(txn.occurred_on.isoformat(), []).append(
                transaction_to_dict(txn)
            )

        customers = self.db.list_customers()
        return {
            "version": SNAPSHOT_VERSION,
            "exportedAt": datetime.now(UTC).isoformat(),
            "customers": [customer_to_dict(c) for c in customers],
            "customerCodes": {c.key: c.code for c in customers},
            "trackerData": tracker_data,
        }

    def export_json(self) -> str:
        return json.dumps(self.export_snapshot(), indent=2)

    def parse_snapshot(self, text: str) -> tuple[list[Transaction], Optional[list[Customer]]]:
        """Validate a snapshot document without touching the store.

        Raises:
            ValidationError: If the document is not valid JSON or malformed
        """
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Import file is not valid JSON: {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get("trackerData"), dict):
            raise ValidationError("Import file has no trackerData section")

        transactions: list[Transaction] = []
        for bucket_str, entries in document["trackerData"].items():
            try:
                bucket = date.fromisoformat(bucket_str)
            except ValueError as e:
                raise ValidationError(f"Invalid date bucket '{bucket_str}'") from e
            if not isinstance(entries, list):
                raise ValidationError(f"Entries for {bucket_str} must be a list")
            for entry in entries:
                transactions.append(transaction_from_dict(bucket, entry))

        ids = [t.id for t in transactions]
        if len(ids) != len(set(ids)):
            raise ValidationError("Import file contains duplicate entry ids")

        # Entries without a recorded sequence keep their document order
        next_sequence = max((t.sequence for t in transactions), default=0) + 1
        ordered = []
        for txn in transactions:
            if txn.sequence <= 0:
                txn = replace(txn, sequence=next_sequence)
                next_sequence += 1
            ordered.append(txn)

        customers: Optional[list[Customer]] = None
        if isinstance(document.get("customers"), list) and all(
            isinstance(c, dict) for c in document["customers"]
        ):
            customers = [customer_from_dict(c) for c in document["customers"]]
        elif isinstance(document.get("customerCodes"), dict):
            customers = customers_from_codes(document["customerCodes"], ordered)

        if customers is not None:
            keys = [c.key for c in customers]
            codes = [c.code for c in customers]
            if len(keys) != len(set(keys)) or len(codes) != len(set(codes)):
                raise ValidationError("Import file contains duplicate customers or codes")

        return ordered, customers

    def import_json(self, text: str) -> ImportResult:
        """Replace the ledger (and registry, when present) from a snapshot.

        Nothing is changed unless the whole document is valid.

        Raises:
            ValidationError: If the document is rejected
        """
        try:
            transactions, customers = self.parse_snapshot(text)
        except ValidationError as e:
            logger.warning("Rejected import: %s", e)
            raise

        self.db.replace_ledger(transactions, customers)
        result = ImportResult(
            transactions=len(transactions),
            customers=len(customers) if customers is not None else 0,
        )
        logger.info(
            "Imported %d transaction(s) and %d customer(s)",
            result.transactions,
            result.customers,
        )
        return result
