"""Tests for transaction and split commands."""

import json

from piggybank.cli.main import cli


def _invoke(cli_runner, temp_db, owner_id, *args, **kwargs):
    return cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "--owner", str(owner_id), *args],
        **kwargs,
    )


def _add(cli_runner, temp_db, owner_id, *splits, description="Lunch", date="2024-01-15"):
    args = ["transaction", "add", "--date", date, "--description", description]
    for split in splits:
        args += ["--split", split]
    return _invoke(cli_runner, temp_db, owner_id, *args)


def test_add_transaction(cli_runner, temp_db, owner_id, chart):
    """Test adding a balanced two-split transaction by account name."""
    result = _add(cli_runner, temp_db, owner_id, "Expenses:Food=50.00", "Cash=-50.00;paid cash")

    assert result.exit_code == 0
    assert "Created transaction" in result.output
    assert "(2 splits)" in result.output

    listed = _invoke(cli_runner, temp_db, owner_id, "transaction", "list", "-v")
    assert "Lunch" in listed.output
    assert "Expenses:Food" in listed.output
    assert "(paid cash)" in listed.output


def test_add_transaction_relative_date(cli_runner, temp_db, owner_id, chart):
    """Test that the CLI accepts relative dates."""
    result = _add(cli_runner, temp_db, owner_id, "Food=1", "Cash=-1", date="yesterday")

    assert result.exit_code == 0


def test_add_transaction_multi_split(cli_runner, temp_db, owner_id, chart):
    """Test a paycheck split across two asset accounts."""
    result = _add(
        cli_runner,
        temp_db,
        owner_id,
        "Assets:Bank:Checking=1500",
        "Assets:Cash=500",
        "Income:Salary=-2000",
        description="Payday",
    )
    assert result.exit_code == 0
    assert "(3 splits)" in result.output

    register = _invoke(cli_runner, temp_db, owner_id, "account", "register", "Income:Salary")
    assert "-- Split --" in register.output
    assert "Closing balance: -2000.00" in register.output


def test_add_transaction_unbalanced(cli_runner, temp_db, owner_id, chart):
    """Test that splits must sum to zero."""
    result = _add(cli_runner, temp_db, owner_id, "Expenses:Food=50", "Assets:Cash=-40")

    assert result.exit_code == 1
    assert "Transaction splits for USD must sum to zero. Current sum: 10" in result.output


def test_add_transaction_single_split(cli_runner, temp_db, owner_id, chart):
    """Test that at least two splits are needed."""
    result = _add(cli_runner, temp_db, owner_id, "Expenses:Food=0")

    assert result.exit_code == 1
    assert "A transaction needs at least 2 splits" in result.output


def test_add_transaction_placeholder(cli_runner, temp_db, owner_id, chart):
    """Test that placeholder accounts cannot receive postings."""
    result = _add(cli_runner, temp_db, owner_id, "Expenses=50", "Assets:Cash=-50")

    assert result.exit_code == 1
    assert "Cannot post to placeholder accounts: Expenses" in result.output


def test_add_transaction_invalid_split(cli_runner, temp_db, owner_id, chart):
    """Test malformed --split values."""
    missing_amount = _add(cli_runner, temp_db, owner_id, "Expenses:Food", "Assets:Cash=-50")
    unknown_account = _add(cli_runner, temp_db, owner_id, "Nope=50", "Assets:Cash=-50")

    assert missing_amount.exit_code == 1
    assert "Invalid split 'Expenses:Food'" in missing_amount.output
    assert unknown_account.exit_code == 1
    assert "Account 'Nope' not found" in unknown_account.output


def test_add_transaction_requires_split(cli_runner, temp_db, owner_id, chart):
    """Test that --split is required."""
    result = _invoke(cli_runner, temp_db, owner_id, "transaction", "add", "--description", "Nothing")

    assert result.exit_code != 0
    assert "--split" in result.output


def test_list_transactions_empty(cli_runner, temp_db, owner_id):
    """Test listing transactions when none exist."""
    result = _invoke(cli_runner, temp_db, owner_id, "transaction", "list")

    assert result.exit_code == 0
    assert "No transactions found." in result.output


def test_list_transactions(cli_runner, temp_db, owner_id, lunch):
    """Test the summary listing."""
    result = _invoke(cli_runner, temp_db, owner_id, "transaction", "list")

    assert result.exit_code == 0
    assert str(lunch.id) in result.output
    assert "50.00" in result.output
    assert "Showing 1-1 of 1 transaction(s)" in result.output


def test_list_transactions_paging_and_filters(cli_runner, temp_db, owner_id, chart):
    """Test paging and date filters."""
    for day in ["2024-01-01", "2024-01-02", "2024-01-03"]:
        _add(cli_runner, temp_db, owner_id, "Food=1", "Cash=-1", description=f"On {day}", date=day)

    page = _invoke(
        cli_runner, temp_db, owner_id, "transaction", "list", "--page", "2", "--page-size", "2", "--json"
    )
    data = json.loads(page.output)
    assert data["total"] == 3
    assert [t["description"] for t in data["transactions"]] == ["On 2024-01-01"]

    filtered = _invoke(
        cli_runner, temp_db, owner_id, "transaction", "list", "--start-date", "2024-01-02", "--json"
    )
    assert json.loads(filtered.output)["total"] == 2


def test_list_transactions_bad_page(cli_runner, temp_db, owner_id):
    """Test paging validation."""
    result = _invoke(cli_runner, temp_db, owner_id, "transaction", "list", "--page", "0")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_show_transaction(cli_runner, temp_db, owner_id, lunch):
    """Test showing a transaction with its splits."""
    result = _invoke(cli_runner, temp_db, owner_id, "transaction", "show", str(lunch.id))

    assert result.exit_code == 0
    assert f"Transaction {lunch.id}" in result.output
    assert "Expenses:Food" in result.output
    assert "Assets:Cash" in result.output

    data = json.loads(_invoke(cli_runner, temp_db, owner_id, "transaction", "show", str(lunch.id), "--json").output)
    assert data["description"] == "Lunch"
    assert len(data["splits"]) == 2


def test_show_transaction_other_owner(cli_runner, temp_db, other_owner_id, lunch):
    """Test that another owner's transaction is not found."""
    result = _invoke(cli_runner, temp_db, other_owner_id, "transaction", "show", str(lunch.id))

    assert result.exit_code == 1
    assert f"Transaction {lunch.id} not found" in result.output


def test_show_transaction_bad_id(cli_runner, temp_db, owner_id):
    """Test a malformed transaction ID."""
    result = _invoke(cli_runner, temp_db, owner_id, "transaction", "show", "abc")

    assert result.exit_code == 1
    assert "Invalid" in result.output


def test_update_transaction(cli_runner, temp_db, owner_id, lunch):
    """Test updating fields and replacing splits."""
    result = _invoke(
        cli_runner,
        temp_db,
        owner_id,
        "transaction",
        "update",
        str(lunch.id),
        "--description",
        "Dinner",
        "--split",
        "Expenses:Food=60",
        "--split",
        "Assets:Cash=-60",
    )
    assert result.exit_code == 0
    assert f"Updated transaction {lunch.id}" in result.output

    data = json.loads(_invoke(cli_runner, temp_db, owner_id, "transaction", "show", str(lunch.id), "--json").output)
    assert data["description"] == "Dinner"
    assert [s["amount"] for s in data["splits"]] == ["60.00", "-60.00"]


def test_update_transaction_unbalanced_keeps_old_splits(cli_runner, temp_db, owner_id, lunch):
    """Test that a rejected update leaves the transaction unchanged."""
    result = _invoke(
        cli_runner,
        temp_db,
        owner_id,
        "transaction",
        "update",
        str(lunch.id),
        "--description",
        "Dinner",
        "--split",
        "Expenses:Food=60",
        "--split",
        "Assets:Cash=-50",
    )
    assert result.exit_code == 1

    data = json.loads(_invoke(cli_runner, temp_db, owner_id, "transaction", "show", str(lunch.id), "--json").output)
    assert data["description"] == "Lunch"
    assert [s["amount"] for s in data["splits"]] == ["50.00", "-50.00"]


def test_void_and_unvoid(cli_runner, temp_db, owner_id, lunch):
    """Test voiding and restoring a transaction."""
    voided = _invoke(cli_runner, temp_db, owner_id, "transaction", "void", str(lunch.id), "--reason", "duplicate")
    assert voided.exit_code == 0
    assert f"Voided transaction {lunch.id}" in voided.output

    again = _invoke(cli_runner, temp_db, owner_id, "transaction", "void", str(lunch.id))
    assert again.exit_code == 1
    assert "Transaction is already voided" in again.output

    shown = _invoke(cli_runner, temp_db, owner_id, "transaction", "show", str(lunch.id))
    assert "[VOID]" in shown.output
    assert "Void reason: duplicate" in shown.output

    balance = _invoke(cli_runner, temp_db, owner_id, "account", "balance", "Assets:Cash")
    assert "Assets:Cash: 0.00 USD" in balance.output

    restored = _invoke(cli_runner, temp_db, owner_id, "transaction", "unvoid", str(lunch.id))
    assert restored.exit_code == 0
    assert f"Unvoided transaction {lunch.id}" in restored.output

    balance = _invoke(cli_runner, temp_db, owner_id, "account", "balance", "Assets:Cash")
    assert "Assets:Cash: -50.00 USD" in balance.output


def test_unvoid_not_voided(cli_runner, temp_db, owner_id, lunch):
    """Test restoring a transaction that is not voided."""
    result = _invoke(cli_runner, temp_db, owner_id, "transaction", "unvoid", str(lunch.id))

    assert result.exit_code == 1
    assert "Transaction is not voided" in result.output


def test_delete_transaction(cli_runner, temp_db, owner_id, lunch):
    """Test deleting a transaction."""
    result = _invoke(cli_runner, temp_db, owner_id, "transaction", "delete", str(lunch.id), "--yes")
    assert result.exit_code == 0
    assert f"Deleted transaction {lunch.id}" in result.output

    listed = _invoke(cli_runner, temp_db, owner_id, "transaction", "list")
    assert "No transactions found." in listed.output

    # The account no longer has postings, so it can go too
    deleted = _invoke(cli_runner, temp_db, owner_id, "account", "delete", "Assets:Cash", "--yes")
    assert deleted.exit_code == 0


def test_delete_transaction_cancelled(cli_runner, temp_db, owner_id, lunch):
    """Test declining the confirmation keeps the transaction."""
    result = _invoke(cli_runner, temp_db, owner_id, "transaction", "delete", str(lunch.id), input="n\n")

    assert result.exit_code == 0
    assert "Deletion cancelled." in result.output


def test_split_reconcile(cli_runner, temp_db, owner_id, lunch):
    """Test changing a split's reconcile status."""
    split_id = lunch.splits[1].id

    result = _invoke(cli_runner, temp_db, owner_id, "split", "reconcile", str(split_id), "cleared")
    assert result.exit_code == 0
    assert f"Split {split_id} is now CLEARED (c)" in result.output

    # Any status can be set from any other
    result = _invoke(cli_runner, temp_db, owner_id, "split", "reconcile", str(split_id), "NEW", "--json")
    assert json.loads(result.output)["reconcileStatus"] == "NEW"


def test_split_reconcile_unknown(cli_runner, temp_db, owner_id, other_owner_id, lunch):
    """Test reconciling a split of another owner."""
    result = _invoke(
        cli_runner, temp_db, other_owner_id, "split", "reconcile", str(lunch.splits[0].id), "CLEARED"
    )

    assert result.exit_code == 1
    assert "not found" in result.output
