"""Shared pytest fixtures for piggybank tests."""

import os
import tempfile
import uuid

import pytest

from piggybank.database.factories import create_sqlite_database
from piggybank.domain.account import AccountService
from piggybank.domain.balance import BalanceService
from piggybank.domain.entities import SplitInput
from piggybank.domain.register import RegisterService
from piggybank.domain.transaction import TransactionService
from piggybank.logging_config import reset_logging


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers the CLI attaches so tests stay independent."""
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def owner_id():
    """Owner whose ledger the tests work on."""
    return uuid.UUID("11111111-1111-1111-1111-111111111111")


@pytest.fixture
def other_owner_id():
    """A second owner, used to check that data never leaks across owners."""
    return uuid.UUID("22222222-2222-2222-2222-222222222222")


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def register_service(temp_db):
    """Create a RegisterService with a temporary database."""
    return RegisterService(temp_db)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def chart(account_service, owner_id):
    """Create a small chart of accounts and return it keyed by full name.

    Assets (placeholder)
        Bank (placeholder)
            Checking
        Cash
    Expenses (placeholder)
        Food
    Income (placeholder)
        Salary
    Liabilities (placeholder)
        Credit Card
    """
    layout = [
        ("Assets", "ASSET", None, True),
        ("Cash", "ASSET", "Assets", False),
        ("Bank", "ASSET", "Assets", True),
        ("Checking", "ASSET", "Assets:Bank", False),
        ("Expenses", "EXPENSE", None, True),
        ("Food", "EXPENSE", "Expenses", False),
        ("Income", "INCOME", None, True),
        ("Salary", "INCOME", "Income", False),
        ("Liabilities", "LIABILITY", None, True),
        ("Credit Card", "LIABILITY", "Liabilities", False),
    ]
    accounts = {}
    for name, account_type, parent, placeholder in layout:
        account = account_service.create_account(
            owner_id,
            name=name,
            account_type=account_type,
            currency="USD",
            parent_id=accounts[parent].id if parent else None,
            placeholder=placeholder,
        )
        accounts[account.full_name] = account
    return accounts


@pytest.fixture
def lunch(transaction_service, owner_id, chart):
    """Post 'Expenses:Food +50.00 / Assets:Cash -50.00' on 2024-01-15."""
    return transaction_service.create_transaction(
        owner_id,
        date="2024-01-15",
        description="Lunch",
        splits=[
            SplitInput(account_id=chart["Expenses:Food"].id, amount="50.00", currency="USD"),
            SplitInput(account_id=chart["Assets:Cash"].id, amount="-50.00", currency="USD"),
        ],
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
