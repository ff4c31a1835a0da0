"""Shared pytest fixtures for servicebook tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from servicebook.database.blobs import LocalBlobStore
from servicebook.database.factories import create_sqlite_database
from servicebook.domain.aggregation import AggregationService
from servicebook.domain.customer import CustomerService
from servicebook.domain.employee import EmployeeService
from servicebook.domain.entities import TransactionKind
from servicebook.domain.followup import FollowUpService
from servicebook.domain.ledger import LedgerService
from servicebook.domain.marketing import MarketingService
from servicebook.domain.snapshot import SnapshotService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def blob_store(tmp_path):
    """Blob store rooted in a temporary directory."""
    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture
def ledger_service(temp_db, blob_store):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db, blob_store=blob_store)


@pytest.fixture
def customer_service(temp_db):
    return CustomerService(temp_db)


@pytest.fixture
def aggregation_service(temp_db):
    return AggregationService(temp_db)


@pytest.fixture
def followup_service(temp_db):
    return FollowUpService(temp_db)


@pytest.fixture
def marketing_service(temp_db):
    return MarketingService(temp_db)


@pytest.fixture
def employee_service(temp_db):
    return EmployeeService(temp_db)


@pytest.fixture
def snapshot_service(temp_db):
    return SnapshotService(temp_db)


@pytest.fixture
def sample_ledger(ledger_service):
    """A few days of entries with two customers."""
    ids = {}
    ids["ali_oil"] = ledger_service.add_transaction(
        kind=TransactionKind.INCOME,
        amount=Decimal("5000"),
        occurred_on=date(2024, 1, 1),
        note="Oil change",
        customer_name="Ali",
        customer_contact="0300-1111111",
        vehicle="Civic 2018",
        registration_number="LEA-1234",
        distance=10000,
        discount_given=False,
    )
    ids["parts"] = ledger_service.add_transaction(
        kind=TransactionKind.EXPENSE,
        amount=Decimal("2000"),
        occurred_on=date(2024, 1, 1),
        note="Parts",
    )
    ids["sara_brakes"] = ledger_service.add_transaction(
        kind=TransactionKind.INCOME,
        amount=Decimal("1000"),
        occurred_on=date(2024, 1, 2),
        customer_name="Sara",
        customer_contact="0321-2222222",
        vehicle="Mehran",
        service_type="Brake pads",
        distance=42000,
    )
    ids["tools"] = ledger_service.add_transaction(
        kind=TransactionKind.EXPENSE,
        amount=Decimal("3000"),
        occurred_on=date(2024, 1, 2),
        note="Tools",
    )
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
