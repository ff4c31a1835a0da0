"""Tests for snapshot export and import."""

import json
import pytest
from datetime import date
from decimal import Decimal

from servicebook.domain.entities import TransactionKind
from servicebook.domain.errors import ValidationError


def test_export_document_shape(snapshot_service, sample_ledger):
    document = snapshot_service.export_snapshot()

    assert document["version"] == 1
    assert set(document["trackerData"].keys()) == {"2024-01-01", "2024-01-02"}
    assert document["customerCodes"] == {
        "ali-0300-1111111": "CUST0001",
        "sara-0321-2222222": "CUST0002",
    }

    ali_entry = document["trackerData"]["2024-01-01"][0]
    assert ali_entry["type"] == "income"
    assert ali_entry["customer"] == "Ali"
    assert ali_entry["currentKm"] == 10000
    assert ali_entry["customerCode"] == "CUST0001"
    assert Decimal(ali_entry["amount"]) == Decimal("5000")
    assert ali_entry["newCustomerDiscount"] == {"eligible": True, "used": False, "applied": False}


def test_round_trip(snapshot_service, ledger_service, customer_service, sample_ledger):
    ledger_service.add_transaction(
        kind=TransactionKind.MONTHLY_EXPENSE,
        amount=Decimal("30000"),
        month_key="2024-01",
        note="Rent",
    )
    before_ledger = ledger_service.list_all()
    before_customers = customer_service.list_customers()
    text = snapshot_service.export_json()

    ledger_service.clear_date(date(2024, 1, 1))
    result = snapshot_service.import_json(text)

    assert result.transactions == 5
    assert result.customers == 2
    assert ledger_service.list_all() == before_ledger
    assert [(c.key, c.code, c.discount) for c in customer_service.list_customers()] == [
        (c.key, c.code, c.discount) for c in before_customers
    ]


def test_import_keeps_codes_monotonic(snapshot_service, customer_service, sample_ledger):
    snapshot_service.import_json(snapshot_service.export_json())
    resolution = customer_service.resolve("Bilal", "0333")
    assert resolution.code == "CUST0003"


def test_invalid_json_leaves_ledger_unchanged(snapshot_service, ledger_service, sample_ledger):
    before = ledger_service.list_all()

    with pytest.raises(ValidationError):
        snapshot_service.import_json("{not json")

    assert ledger_service.list_all() == before


@pytest.mark.parametrize(
    "document",
    [
        {},
        {"trackerData": []},
        {"trackerData": {"not-a-date": []}},
        {"trackerData": {"2024-01-01": [{"id": "x", "type": "gift", "amount": "10"}]}},
        {"trackerData": {"2024-01-01": [{"id": "x", "type": "income", "amount": "-5"}]}},
        {"trackerData": {"2024-01-01": [{"type": "income", "amount": "5"}]}},
        {
            "trackerData": {
                "2024-01-01": [
                    {"id": "x", "type": "income", "amount": "5"},
                    {"id": "x", "type": "expense", "amount": "5"},
                ]
            }
        },
        {"trackerData": {"2024-01-01": [{"id": "x", "type": "income", "amount": "0.004"}]}},
        {"trackerData": {"2024-01-01": [{"id": "x", "type": "income", "amount": "NaN"}]}},
        {
            "trackerData": {
                "2024-01-01": [{"id": "x", "type": "income", "amount": "5", "customer": 123}]
            }
        },
        {
            "trackerData": {
                "2024-01-01": [
                    {
                        "id": "x",
                        "type": "income",
                        "amount": "5",
                        "newCustomerDiscount": {"eligible": True, "used": "false"},
                    }
                ]
            }
        },
        {"trackerData": {}, "customers": [{"name": 123, "contact": "0300", "code": "CUST0001"}]},
        {"trackerData": {}, "customers": [{"name": "Ali", "contact": 300, "code": "CUST0001"}]},
        {
            "trackerData": {},
            "customers": [
                {"name": "Ali", "contact": "0300", "code": "CUST0001", "discount": {"used": 1}}
            ],
        },
    ],
)
def test_malformed_documents_rejected(snapshot_service, ledger_service, sample_ledger, document):
    before = ledger_service.list_all()
    with pytest.raises(ValidationError):
        snapshot_service.import_json(json.dumps(document))
    assert ledger_service.list_all() == before


def test_import_minimal_document(snapshot_service, ledger_service, customer_service):
    """Entries without sequences keep document order; codes come from customerCodes."""
    document = {
        "trackerData": {
            "2024-03-01": [
                {"id": "b", "type": "expense", "amount": "100", "note": "Tea"},
                {
                    "id": "a",
                    "type": "income",
                    "amount": "2500",
                    "customer": "Ali",
                    "contact": "0300",
                    "customerCode": "CUST0007",
                    "serviceType": "Oil change",
                    "currentKm": "12000",
                },
            ]
        },
        "customerCodes": {"ali-0300": "CUST0007"},
    }

    result = snapshot_service.import_json(json.dumps(document))

    assert result.transactions == 2
    entries = ledger_service.list_for_date(date(2024, 3, 1))
    assert [e.id for e in entries] == ["b", "a"]
    assert entries[1].customer.distance == 12000

    customer = customer_service.get_customer("Ali", "0300")
    assert customer.code == "CUST0007"
    assert customer_service.resolve("Sara", "1").code == "CUST0008"


def test_import_without_registry_keeps_existing(snapshot_service, customer_service, sample_ledger):
    document = {"trackerData": {"2024-03-01": [{"id": "z", "type": "expense", "amount": "1"}]}}
    snapshot_service.import_json(json.dumps(document))
    assert len(customer_service.list_customers()) == 2
