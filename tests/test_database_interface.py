"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from servicebook.domain import entities
from servicebook.domain.errors import NotFoundError


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_insert_and_get_transaction(self, temp_db):
        """Test that get_transaction returns the matching domain variant."""
        txn = entities.ExpenseTransaction(
            id="e1",
            occurred_on=date(2024, 1, 15),
            amount=Decimal("99.50"),
            note="Tea",
            sequence=temp_db.next_transaction_sequence(),
        )
        temp_db.insert_transaction(txn)

        stored = temp_db.get_transaction("e1")

        assert isinstance(stored, entities.ExpenseTransaction)
        assert stored.amount == Decimal("99.50")
        assert stored.sequence == 1
        assert isinstance(stored.created_at, datetime)
        assert temp_db.next_transaction_sequence() == 2

    def test_list_transactions_filters(self, temp_db):
        for seq, (txn_id, day) in enumerate(
            [("b", date(2024, 1, 2)), ("a", date(2024, 1, 1)), ("c", date(2024, 1, 2))], start=1
        ):
            temp_db.insert_transaction(
                entities.IncomeTransaction(
                    id=txn_id, occurred_on=day, amount=Decimal("1"), sequence=seq
                )
            )

        assert [t.id for t in temp_db.list_transactions()] == ["a", "b", "c"]
        assert [t.id for t in temp_db.list_transactions(start_date=date(2024, 1, 2))] == ["b", "c"]
        assert temp_db.list_transactions(kind=entities.TransactionKind.EXPENSE) == []

    def test_delete_missing_transaction(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.delete_transaction("missing")

    def test_customer_registry(self, temp_db):
        customer = temp_db.create_customer(
            key="ali-0300", name="Ali", contact="0300", code="CUST0001", sequence=1
        )

        assert isinstance(customer, entities.Customer)
        assert customer.discount == entities.DiscountState()
        assert temp_db.next_customer_sequence() == 2

        temp_db.update_customer_discount("ali-0300", entities.DiscountState(used=True))
        assert temp_db.get_customer("ali-0300").discount.used is True
        assert temp_db.get_customer("nobody") is None

    def test_settings(self, temp_db):
        assert temp_db.get_setting("x") is None
        temp_db.set_setting("x", "1")
        temp_db.set_setting("x", "2")
        assert temp_db.get_setting("x") == "2"

    def test_dismissed_followups_are_idempotent(self, temp_db):
        temp_db.add_dismissed_followup("ali-0300-2024-01-01")
        temp_db.add_dismissed_followup("ali-0300-2024-01-01")
        assert temp_db.list_dismissed_followups() == {"ali-0300-2024-01-01"}

    def test_replace_ledger(self, temp_db):
        temp_db.insert_transaction(
            entities.ExpenseTransaction(id="old", occurred_on=date(2024, 1, 1), amount=Decimal("1"), sequence=1)
        )
        temp_db.get_transaction("old")

        temp_db.replace_ledger(
            [
                entities.ExpenseTransaction(
                    id="old", occurred_on=date(2024, 2, 1), amount=Decimal("5"), sequence=1
                ),
                entities.ExpenseTransaction(
                    id="new", occurred_on=date(2024, 2, 2), amount=Decimal("7"), sequence=2
                ),
            ]
        )

        assert [t.id for t in temp_db.list_transactions()] == ["old", "new"]
        assert temp_db.get_transaction("old").amount == Decimal("5")
