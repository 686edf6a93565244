"""Integration tests for end-to-end workflows."""

import json
import re

from piggybank.cli.main import cli


def _run(cli_runner, temp_db, *args):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])
    assert result.exit_code == 0, result.output
    return result.output


def test_full_workflow(cli_runner, temp_db):
    """Test complete workflow: chart → postings → void → reconcile → register → tree."""
    # Step 1: Seed the default chart of accounts
    _run(cli_runner, temp_db, "init-accounts")

    # Step 2: Add an account of our own
    output = _run(cli_runner, temp_db, "account", "create", "Savings", "--parent", "Assets:Bank")
    assert "Created account 'Assets:Bank:Savings'" in output

    # Step 3: Record an opening balance, a paycheck and two purchases
    output = _run(
        cli_runner, temp_db,
        "transaction", "add", "--date", "2024-01-01", "--description", "Opening balance",
        "--split", "Assets:Bank:Checking=1000", "--split", "Equity:Opening Balances=-1000",
    )
    assert "(2 splits)" in output
    _run(
        cli_runner, temp_db,
        "transaction", "add", "--date", "2024-01-31", "--description", "Payday",
        "--split", "Checking=1500", "--split", "Savings=500", "--split", "Salary=-2000",
    )
    _run(
        cli_runner, temp_db,
        "transaction", "add", "--date", "2024-02-02", "--description", "Groceries",
        "--split", "Groceries=80.25", "--split", "Checking=-80.25",
    )
    output = _run(
        cli_runner, temp_db,
        "transaction", "add", "--date", "2024-02-03", "--description", "Concert",
        "--split", "Entertainment=40", "--split", "Checking=-40",
    )
    concert_id = re.search(r"Created transaction (\S+)", output).group(1)

    # Step 4: Void the concert, it was refunded
    _run(cli_runner, temp_db, "transaction", "void", concert_id, "--reason", "refunded")

    # Step 5: Clear the grocery posting on the checking account
    register = json.loads(_run(cli_runner, temp_db, "account", "register", "Checking", "--json"))
    assert [e["description"] for e in register["entries"]] == [
        "Opening balance",
        "Payday",
        "Groceries",
        "Concert",
    ]
    assert [e["balance"] for e in register["entries"]] == ["1000.00", "2500.00", "2419.75", "2419.75"]
    assert register["closingBalance"] == "2419.75"
    grocery_split = register["entries"][2]["splitId"]
    output = _run(cli_runner, temp_db, "split", "reconcile", grocery_split, "CLEARED")
    assert "CLEARED (c)" in output

    # Step 6: The rolled-up tree balances to zero
    tree = json.loads(_run(cli_runner, temp_db, "account", "tree", "--json"))
    totals = {node["name"]: node["totalBalance"] for node in tree}
    assert totals["Assets"] == "2919.75"
    assert totals["Expenses"] == "80.25"
    assert totals["Income"] == "-2000.00"
    assert totals["Equity"] == "-1000.00"
    assert totals["Liabilities"] == "0.00"

    # Step 7: The listing shows every transaction, newest first
    listing = json.loads(_run(cli_runner, temp_db, "transaction", "list", "--json"))
    assert listing["total"] == 4
    assert listing["transactions"][0]["description"] == "Concert"
    assert listing["transactions"][0]["voided"] is True
