"""Tests for CLI commands."""

import json
import pytest
from datetime import date
from decimal import Decimal

from servicebook.cli.main import cli
from servicebook.domain.entities import TransactionKind


@pytest.fixture
def invoke(cli_runner, temp_db, tmp_path):
    """Invoke the CLI against the temporary database as a given role."""

    def _invoke(*args, role="owner", input=None):
        base = [
            "--db-path",
            temp_db.database_path,
            "--blob-dir",
            str(tmp_path / "blobs"),
            "--role",
            role,
        ]
        return cli_runner.invoke(cli, base + list(args), input=input)

    return _invoke


def test_help_does_not_need_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "followup" in result.output


def test_unknown_role(invoke):
    result = invoke("summary", "day", role="admin")
    assert result.exit_code != 0
    assert "Unknown role" in result.output


def test_add_income_with_customer(invoke):
    result = invoke(
        "add",
        "--date", "2024-01-01",
        "--amount", "Rs 5,000",
        "--customer", "Ali",
        "--contact", "0300-1111111",
        "--vehicle", "Civic 2018",
        "--service-type", "Oil change",
        "--distance", "10000",
    )

    assert result.exit_code == 0
    assert "Created income entry on 2024-01-01" in result.output
    assert "CUST0001" in result.output
    assert "Rs 5,000.00" in result.output
    assert "New customer discount available" in result.output


def test_add_expense(invoke):
    result = invoke("add", "--kind", "expense", "--date", "2024-01-01", "--amount", "800", "--note", "Parts")
    assert result.exit_code == 0
    assert "Created expense entry" in result.output


def test_add_monthly_entry(invoke):
    result = invoke(
        "add", "--kind", "monthly-expense", "--month", "2024-02", "--amount", "30000", "--note", "Rent"
    )
    assert result.exit_code == 0
    assert "Created monthly-expense entry on 2024-02-01" in result.output


def test_add_rejects_zero_amount(invoke, temp_db):
    result = invoke("add", "--kind", "expense", "--date", "2024-01-01", "--amount", "0")
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert temp_db.list_transactions() == []


def test_add_rejects_bad_amount(invoke):
    result = invoke("add", "--date", "2024-01-01", "--amount", "lots")
    assert result.exit_code == 1
    assert "Invalid amount" in result.output


def test_add_with_bill(invoke, tmp_path):
    bill = tmp_path / "bill.jpg"
    bill.write_bytes(b"image")
    result = invoke("add", "--date", "2024-01-01", "--amount", "1200", "--bill", str(bill))
    assert result.exit_code == 0
    assert "Bill attached" in result.output


def test_staff_cannot_add_expense(invoke):
    result = invoke("add", "--kind", "expense", "--date", "2024-01-01", "--amount", "800", role="staff")
    assert result.exit_code == 1
    assert "not allowed" in result.output


def test_staff_list_hides_contact_and_amount(invoke, ledger_service, sample_ledger):
    result = invoke("transaction", "list", "--date", "2024-01-01", role="staff")

    assert result.exit_code == 0
    assert "Ali" in result.output
    assert "0300-1111111" not in result.output
    assert "Rs 5,000.00" not in result.output


def test_owner_list_shows_everything(invoke, sample_ledger):
    result = invoke("transaction", "list", "--date", "2024-01-01")
    assert result.exit_code == 0
    assert "0300-1111111" in result.output
    assert "Rs 5,000.00" in result.output
    assert "Distance: 10,000 km" in result.output


def test_list_empty_date(invoke):
    result = invoke("transaction", "list", "--date", "2024-05-05")
    assert result.exit_code == 0
    assert "No entries" in result.output


def test_delete_entry(invoke, ledger_service, sample_ledger):
    result = invoke("transaction", "delete", "2024-01-01", sample_ledger["parts"], input="y\n")
    assert result.exit_code == 0
    assert "Deleted entry" in result.output
    assert ledger_service.get_transaction(sample_ledger["parts"]) is None


def test_delete_entry_wrong_date(invoke, sample_ledger):
    result = invoke("transaction", "delete", "2024-01-02", sample_ledger["parts"], input="y\n")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_clear_date(invoke, sample_ledger):
    result = invoke("transaction", "clear", "2024-01-01", input="y\n")
    assert result.exit_code == 0
    assert "Deleted 2 entry(ies)" in result.output


def test_editor_cannot_clear_date(invoke, sample_ledger):
    result = invoke("transaction", "clear", "2024-01-01", role="editor", input="y\n")
    assert result.exit_code == 1


def test_day_summary(invoke, sample_ledger):
    result = invoke("summary", "day", "--date", "2024-01-01", role="editor")
    assert result.exit_code == 0
    assert "Gross profit:     Rs 3,000.00" in result.output
    assert "Marketing budget: Rs 600" in result.output
    assert "Net profit:       Rs 2,400.00" in result.output


def test_loss_day_summary(invoke, sample_ledger):
    result = invoke("summary", "day", "--date", "2024-01-02")
    assert "Marketing budget: Rs 0" in result.output
    assert "Net profit:       Rs -2,000.00" in result.output


def test_month_summary(invoke, sample_ledger):
    result = invoke("summary", "month", "--month", "2024-01", "--calendar")
    assert result.exit_code == 0
    assert "2 saved date(s)" in result.output
    assert "2024-01-02  income, expense" in result.output


def test_editor_cannot_see_month_summary(invoke, sample_ledger):
    result = invoke("summary", "month", "--month", "2024-01", role="editor")
    assert result.exit_code == 1


def test_customer_list(invoke, sample_ledger):
    result = invoke("customer", "list", "-v")
    assert result.exit_code == 0
    assert "CUST0001" in result.output
    assert "Sara" in result.output
    assert "Brake pads" in result.output


def test_customer_discount(invoke, customer_service, sample_ledger):
    result = invoke("customer", "discount", "Ali", "0300-1111111", "--used", "--applied")
    assert result.exit_code == 0
    assert "Used:     yes" in result.output
    assert customer_service.get_customer("Ali", "0300-1111111").discount.used is True


def test_customer_discount_unknown(invoke):
    result = invoke("customer", "discount", "Ghost", "0")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_followup_list(invoke, sample_ledger):
    result = invoke("followup", "list", "--as-of", "2024-02-05", role="staff")
    assert result.exit_code == 0
    assert "[DUE] Ali" in result.output
    assert "15,000 km around 2024-02-10" in result.output
    assert "0300-1111111" not in result.output


def test_followup_dismiss(invoke, sample_ledger):
    result = invoke("followup", "dismiss", "ali-0300-1111111-2024-01-01", role="editor")
    assert result.exit_code == 0

    result = invoke("followup", "list", "--as-of", "2024-02-05")
    assert "Ali" not in result.output
    assert "Sara" in result.output


def test_followup_remind(invoke, sample_ledger):
    result = invoke("followup", "remind", "ali-0300-1111111-2024-01-01", "--as-of", "2024-02-05")
    assert result.exit_code == 0
    assert "Assalam-o-Alaikum Ali!" in result.output
    assert "Next Service at: 15,000 KM" in result.output
    assert "https://wa.me/923001111111?text=" in result.output


def test_followup_remind_hides_link_from_staff(invoke, sample_ledger):
    result = invoke(
        "followup", "remind", "ali-0300-1111111-2024-01-01", "--as-of", "2024-02-05", role="staff"
    )
    assert result.exit_code == 0
    assert "Assalam-o-Alaikum Ali!" in result.output
    assert "wa.me" not in result.output
    assert "hidden" in result.output


def test_followup_remind_unknown(invoke, sample_ledger):
    result = invoke("followup", "remind", "nobody-2024-01-01")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_followup_settings(invoke):
    result = invoke("followup", "settings", "--default-interval", "8000")
    assert result.exit_code == 0
    assert "Default interval: 8,000 km" in result.output

    result = invoke("followup", "settings", "--default-interval", "8000", role="editor")
    assert result.exit_code == 1


def test_marketing_commands(invoke, sample_ledger):
    result = invoke("marketing", "add", "--date", "2024-01-10", "--title", "Flyers", "--amount", "250")
    assert result.exit_code == 0

    result = invoke("marketing", "list", "--month", "2024-01")
    assert result.exit_code == 0
    assert "Budget:    Rs 600.00" in result.output
    assert "Remaining: Rs 350.00" in result.output
    assert "Flyers" in result.output


def test_employee_commands(invoke):
    result = invoke("employee", "add", "Bilal", "--position", "Mechanic", "--monthly-salary", "40000")
    assert result.exit_code == 0
    assert "EMP0001" in result.output

    result = invoke("employee", "pay", "1", "--amount", "40000", "--date", "2024-01-31")
    assert result.exit_code == 0

    result = invoke("employee", "payments")
    assert "EMP0001" in result.output
    assert "Rs 40,000.00" in result.output

    result = invoke("employee", "remove", "1")
    assert result.exit_code == 0
    result = invoke("employee", "list")
    assert "No employees found." in result.output


def test_export_import(invoke, ledger_service, sample_ledger, tmp_path):
    export_file = tmp_path / "backup.json"
    result = invoke("export", str(export_file))
    assert result.exit_code == 0
    assert "trackerData" in json.loads(export_file.read_text())

    ledger_service.add_transaction(
        kind=TransactionKind.EXPENSE, amount=Decimal("1"), occurred_on=date(2024, 5, 1)
    )
    result = invoke("import", str(export_file), input="y\n")
    assert result.exit_code == 0
    assert "Imported 4 entry(ies) and 2 customer(s)" in result.output


def test_import_invalid_file(invoke, tmp_path, sample_ledger):
    bad = tmp_path / "bad.json"
    bad.write_text("{oops")
    result = invoke("import", str(bad), input="y\n")
    assert result.exit_code == 1
    assert "not valid JSON" in result.output


def test_import_file_not_utf8(invoke, ledger_service, tmp_path, sample_ledger):
    before = ledger_service.list_all()
    bad = tmp_path / "bad.json"
    bad.write_bytes(b"\xff\xfe{not json")

    result = invoke("import", str(bad), input="y\n")

    assert result.exit_code == 1
    assert "Error: Could not read" in result.output
    assert ledger_service.list_all() == before


def test_staff_cannot_export(invoke, tmp_path):
    result = invoke("export", str(tmp_path / "x.json"), role="staff")
    assert result.exit_code == 1
