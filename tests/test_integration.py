"""Integration tests for end-to-end CLI workflows."""

import pytest
from ledgerflow.cli.main import cli


def run(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


@pytest.fixture
def setup_checking(cli_runner, temp_db):
    assert run(cli_runner, temp_db, "type", "init").exit_code == 0
    result = run(cli_runner, temp_db, "account", "create", "Everyday Checking", "--category", "checking")
    assert result.exit_code == 0
    assert "Created account 'Everyday Checking' (ID: 1)" in result.output


def test_help_does_not_need_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "reconcile" in result.output


def test_full_workflow(cli_runner, temp_db, fixtures_dir, setup_checking):
    """Import, re-import, view and reconcile."""
    statement = str(fixtures_dir / "checking.csv")

    result = run(cli_runner, temp_db, "import", statement, "--account", "Everyday Checking", "--yes")
    assert result.exit_code == 0
    assert "Staged 4 transaction(s)" in result.output
    assert "Added: 4 transactions" in result.output

    result = run(cli_runner, temp_db, "import", statement, "--account", "1", "--yes")
    assert result.exit_code == 0
    assert "in ledger" in result.output
    assert "Nothing to import." in result.output

    result = run(cli_runner, temp_db, "view", "--account", "Everyday Checking", "--verbose")
    assert result.exit_code == 0
    assert "Found 4 transaction(s)" in result.output
    assert "Whole Foods #123" in result.output
    assert result.output.index("Online Transfer To Savings") < result.output.index("Whole Foods #123")

    pasted = "Date,Description,Amount\n2024-03-16,ACME CORP PAYROLL,2500.00\n2024-03-30,INTEREST,0.42\n"
    result = run(
        cli_runner,
        temp_db,
        "reconcile",
        "-",
        "--account",
        "Everyday Checking",
        "--start-date",
        "2024-03-16",
        "--end-date",
        "2024-03-31",
        input=pasted,
    )
    assert result.exit_code == 0
    assert "Matched: 1" in result.output
    assert "On statement but not in ledger: 1" in result.output
    assert "In ledger but not on statement: 2" in result.output


def test_import_dry_run_and_excludes(cli_runner, temp_db, fixtures_dir, setup_checking):
    statement = str(fixtures_dir / "checking.csv")

    result = run(cli_runner, temp_db, "import", statement, "--account", "1", "--dry-run")
    assert result.exit_code == 0
    assert "Dry run: nothing imported." in result.output
    assert temp_db.list_transactions() == []

    result = run(cli_runner, temp_db, "import", statement, "--account", "1", "--exclude", "2", "--exclude", "3", "--yes")
    assert result.exit_code == 0
    assert "Added: 2 transactions" in result.output


def test_import_pasted_text_from_stdin(cli_runner, temp_db, setup_checking):
    pasted = "Date,Description,Amount\n2024-03-16,ACME CORP PAYROLL,2500.00\n"
    result = run(cli_runner, temp_db, "import", "-", "--account", "1", "--yes", input=pasted)
    assert result.exit_code == 0
    assert "from 'pasted statement'" in result.output
    assert "Added: 1 transactions" in result.output

    transactions = temp_db.list_transactions()
    assert len(transactions) == 1
    assert transactions[0].source_label == "pasted statement"


def test_import_confirmation_declined(cli_runner, temp_db, fixtures_dir, setup_checking):
    result = run(
        cli_runner, temp_db, "import", str(fixtures_dir / "checking.csv"), "--account", "1", input="n\n"
    )
    assert result.exit_code == 0
    assert "Import cancelled." in result.output
    assert temp_db.list_transactions() == []


def test_import_unknown_account(cli_runner, temp_db, fixtures_dir):
    result = run(cli_runner, temp_db, "import", str(fixtures_dir / "checking.csv"), "--account", "Nope", "--yes")
    assert result.exit_code == 1
    assert "Error: Account 'Nope' not found" in result.output


def test_import_unknown_staging_number(cli_runner, temp_db, fixtures_dir, setup_checking):
    result = run(
        cli_runner, temp_db, "import", str(fixtures_dir / "checking.csv"), "--account", "1", "--include", "42"
    )
    assert result.exit_code == 1
    assert "Staged transaction 42 not found" in result.output


def test_import_unusable_file(cli_runner, temp_db, tmp_path, setup_checking):
    bad = tmp_path / "bad.csv"
    bad.write_text("Date,Description,Amount\nsoon,NOTHING,0\n", encoding="utf-8")
    result = run(cli_runner, temp_db, "import", str(bad), "--account", "1", "--yes")
    assert result.exit_code == 1
    assert "No usable transactions found in 'bad.csv'" in result.output


def test_reconcile_bad_paste(cli_runner, temp_db, setup_checking):
    result = run(cli_runner, temp_db, "reconcile", "-", "--account", "1", input="nothing useful\n")
    assert result.exit_code == 1
    assert "Could not find a header row" in result.output
    assert "run the command again" in result.output


def test_rule_commands(cli_runner, temp_db, fixtures_dir, setup_checking):
    result = run(cli_runner, temp_db, "category", "create", "Subscriptions")
    assert result.exit_code == 0

    result = run(cli_runner, temp_db, "rule", "import", str(fixtures_dir / "rules.json"))
    assert result.exit_code == 0
    assert "Imported 2 rule(s)" in result.output

    result = run(cli_runner, temp_db, "rule", "list")
    assert "1. (ID: 1) Streaming" in result.output
    assert "description contains 'netflix || hulu' AND amount less_than '20'" in result.output
    assert "skip import" in result.output

    result = run(cli_runner, temp_db, "rule", "move", "2", "1")
    assert result.exit_code == 0
    result = run(cli_runner, temp_db, "rule", "list")
    assert result.output.index("Savings sweep") < result.output.index("Streaming")

    result = run(cli_runner, temp_db, "import", str(fixtures_dir / "checking.csv"), "--account", "1", "--yes")
    assert "Added: 3 transactions" in result.output

    result = run(cli_runner, temp_db, "rule", "preview", "2")
    assert result.exit_code == 0
    assert "Rule would not change any transactions." in result.output

    result = run(cli_runner, temp_db, "rule", "delete", "2")
    assert result.exit_code == 0
    result = run(cli_runner, temp_db, "rule", "delete", "2")
    assert result.exit_code == 1
    assert "Rule 2 not found" in result.output


def test_lookup_commands(cli_runner, temp_db):
    assert "Created transaction types: Income, Expense, Transfer" in run(cli_runner, temp_db, "type", "init").output
    assert "already exist" in run(cli_runner, temp_db, "type", "init").output
    assert "Expense" in run(cli_runner, temp_db, "type", "list").output

    assert run(cli_runner, temp_db, "payee", "create", "Whole Foods").exit_code == 0
    result = run(cli_runner, temp_db, "payee", "create", "whole foods")
    assert result.exit_code == 1
    assert "already exists" in result.output
    assert "Whole Foods" in run(cli_runner, temp_db, "payee", "list").output

    result = run(cli_runner, temp_db, "account", "create", "Visa", "--category", "credit_card", "--currency", "eur")
    assert result.exit_code == 0
    assert "credit_card" in run(cli_runner, temp_db, "account", "list").output
    assert "EUR" in run(cli_runner, temp_db, "account", "list").output


def test_view_empty_and_bad_dates(cli_runner, temp_db):
    assert "No transactions found." in run(cli_runner, temp_db, "view").output

    result = run(cli_runner, temp_db, "view", "--start-date", "gibberish")
    assert result.exit_code == 1
    assert "Invalid start date" in result.output

    result = run(cli_runner, temp_db, "view", "--period", "last-month", "--start-date", "2024-01-01")
    assert result.exit_code == 1
