"""Ledger domain service."""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from servicebook.database.base import Database
from servicebook.database.blobs import BlobStore
from servicebook.domain.customer import CustomerService, should_offer_discount
from servicebook.domain.entities import (
    CustomerDetails,
    ExpenseTransaction,
    IncomeTransaction,
    MonthlyTransaction,
    Transaction,
    TransactionKind,
)
from servicebook.domain.errors import (
    BlobError,
    NotFoundError,
    ValidationError,
    transaction_not_found,
)
from servicebook.domain.validation import checked_amount
from servicebook.utils.date_parser import month_key as format_month_key

logger = logging.getLogger("servicebook.ledger")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _month_start(month_key: str) -> date:
    try:
        year_str, month_str = month_key.split("-")
        return date(int(year_str), int(month_str), 1)
    except ValueError as e:
        raise ValidationError(f"Invalid month '{month_key}', expected YYYY-MM") from e


class LedgerService:
    """Service for the date-keyed transaction ledger."""

    def __init__(
        self,
        db: Database,
        blob_store: Optional[BlobStore] = None,
        owner_key: str = "default",
    ):
        """Initialize ledger service.

        Args:
            db: Database instance
            blob_store: Optional blob channel for bill attachments
            owner_key: Storage namespace for uploaded documents
        """
        self.db = db
        self.blob_store = blob_store
        self.owner_key = owner_key
        self.customers = CustomerService(db)

    def add_transaction(
        self,
        kind: TransactionKind,
        amount: Decimal,
        occurred_on: Optional[date] = None,
        month_key: Optional[str] = None,
        note: Optional[str] = None,
        customer_name: Optional[str] = None,
        customer_contact: Optional[str] = None,
        vehicle: Optional[str] = None,
        registration_number: Optional[str] = None,
        service_type: Optional[str] = None,
        distance: Optional[int] = None,
        acquisition_channel: Optional[str] = None,
        document: Optional[tuple[str, bytes]] = None,
        discount_given: Optional[bool] = None,
    ) -> str:
        """Add a ledger record.

        Income with both a customer name and contact is resolved against the
        customer registry first, so the record carries the customer code and
        a snapshot of the discount state as of this transaction.

        Args:
            kind: Transaction kind
            amount: Amount, greater than zero with at most two decimal places
            occurred_on: Date bucket (daily kinds; monthly kinds may use it to
                pick the month)
            month_key: Target month as YYYY-MM (monthly kinds)
            note: Free text; for income this is the service note
            customer_name: Customer name (income only)
            customer_contact: Customer contact number (income only)
            vehicle: Vehicle description (income only)
            registration_number: Vehicle registration (income only)
            service_type: Explicit service type (income only)
            distance: Odometer reading at service (income only)
            acquisition_channel: How the customer found the business (income only)
            document: Optional (filename, bytes) bill image to attach (income only)
            discount_given: Optional discount decision, recorded when an offer applies

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the amount is not positive, is finer than a cent
                or required dates are missing
        """
        kind = TransactionKind(kind)
        amount = checked_amount(amount)
        if distance is not None and distance < 0:
            raise ValidationError("Distance cannot be negative")

        txn_id = uuid.uuid4().hex
        sequence = self.db.next_transaction_sequence()
        note = _clean(note)

        if kind.is_monthly:
            if month_key is None:
                if occurred_on is None:
                    raise ValidationError("A month is required for monthly entries")
                month_key = format_month_key(occurred_on.year, occurred_on.month)
            record: Transaction = MonthlyTransaction(
                id=txn_id,
                kind=kind,
                month_key=month_key,
                occurred_on=_month_start(month_key),
                amount=amount,
                note=note,
                sequence=sequence,
            )
        elif occurred_on is None:
            raise ValidationError("A date is required")
        elif kind == TransactionKind.EXPENSE:
            record = ExpenseTransaction(
                id=txn_id,
                occurred_on=occurred_on,
                amount=amount,
                note=note,
                sequence=sequence,
            )
        else:
            record = self._build_income(
                txn_id=txn_id,
                occurred_on=occurred_on,
                amount=amount,
                note=note,
                sequence=sequence,
                customer_name=_clean(customer_name),
                customer_contact=_clean(customer_contact),
                vehicle=_clean(vehicle),
                registration_number=_clean(registration_number),
                service_type=_clean(service_type),
                distance=distance,
                acquisition_channel=_clean(acquisition_channel),
                document=document,
                discount_given=discount_given,
            )

        self.db.insert_transaction(record)
        logger.info(
            "Added %s %s of %s on %s", kind.value, txn_id, amount, record.occurred_on
        )
        return txn_id

    def _build_income(
        self,
        txn_id: str,
        occurred_on: date,
        amount: Decimal,
        note: Optional[str],
        sequence: int,
        customer_name: Optional[str],
        customer_contact: Optional[str],
        vehicle: Optional[str],
        registration_number: Optional[str],
        service_type: Optional[str],
        distance: Optional[int],
        acquisition_channel: Optional[str],
        document: Optional[tuple[str, bytes]],
        discount_given: Optional[bool],
    ) -> IncomeTransaction:
        customer = None
        discount = None
        if customer_name or customer_contact:
            code = None
            if customer_name and customer_contact:
                resolution = self.customers.resolve(customer_name, customer_contact)
                registry_entry = resolution.customer
                if discount_given is not None and should_offer_discount(resolution):
                    registry_entry = self.customers.record_discount_decision(
                        customer_name, customer_contact, discount_given
                    )
                code = registry_entry.code
                discount = registry_entry.discount
            customer = CustomerDetails(
                name=customer_name or "",
                contact=customer_contact or "",
                code=code,
                vehicle=vehicle,
                registration_number=registration_number,
                service_type=service_type,
                distance=distance,
                acquisition_channel=acquisition_channel,
            )

        return IncomeTransaction(
            id=txn_id,
            occurred_on=occurred_on,
            amount=amount,
            note=note,
            customer=customer,
            discount=discount,
            attached_document=self._upload_document(document),
            sequence=sequence,
        )

    def _upload_document(self, document: Optional[tuple[str, bytes]]) -> Optional[str]:
        """Upload a bill image; a failed upload never blocks the transaction."""
        if document is None:
            return None
        filename, data = document
        if self.blob_store is None:
            logger.warning("No document store configured, '%s' not attached", filename)
            return None
        try:
            return self.blob_store.upload(data, self.owner_key, filename)
        except BlobError as e:
            logger.warning("Upload of '%s' failed, saving without it: %s", filename, e)
            return None

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get a ledger record by ID."""
        return self.db.get_transaction(transaction_id)

    def remove_transaction(self, bucket: date, transaction_id: str) -> None:
        """Permanently delete a record from a date bucket.

        Raises:
            NotFoundError: If no record with that ID lives in the bucket
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None or txn.occurred_on != bucket:
            raise NotFoundError(transaction_not_found(transaction_id, bucket))
        self.db.delete_transaction(transaction_id)
        logger.info("Removed %s %s from %s", txn.kind.value, transaction_id, bucket)

    def clear_date(self, bucket: date) -> int:
        """Delete every record in a date bucket. Returns number deleted."""
        count = self.db.delete_transactions_for_date(bucket)
        logger.info("Cleared %d record(s) from %s", count, bucket)
        return count

    def list_for_date(self, bucket: date) -> list[Transaction]:
        """List records of one date bucket in insertion order."""
        return self.db.list_transactions(start_date=bucket, end_date=bucket)

    def list_between(self, start_date: date, end_date: date) -> list[Transaction]:
        """List records whose bucket lies in [start_date, end_date]."""
        return self.db.list_transactions(start_date=start_date, end_date=end_date)

    def list_all(self) -> dict[date, list[Transaction]]:
        """Return the whole ledger keyed by date bucket, buckets ascending."""
        ledger: dict[date, list[Transaction]] = {}
        for txn in self.db.list_transactions():
            ledger.setdefault(txn.occurred_on, []).append(txn)
        return ledger

    def document_url(self, transaction_id: str, ttl: int = 3600) -> str:
        """Return an access URL for the bill attached to a record.

        Raises:
            NotFoundError: If the record does not exist or has no attachment
            BlobError: If the document cannot be located
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        path = getattr(txn, "attached_document", None)
        if not path:
            raise NotFoundError(f"Transaction {transaction_id} has no attached document")
        if self.blob_store is None:
            raise BlobError("No document store configured")
        return self.blob_store.get_access_url(path, ttl=ttl)
