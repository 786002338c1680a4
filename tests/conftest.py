"""Shared pytest fixtures for budgetledger tests."""

import logging
import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest
import structlog

from budgetledger.database.factories import create_sqlite_database
from budgetledger.domain.account import AccountService
from budgetledger.domain.category import CategoryService, PayeeService
from budgetledger.domain.importer import ImportService
from budgetledger.domain.reconciliation import ReconciliationService
from budgetledger.domain.transaction import TransactionService
from budgetledger.domain.transfers import TransferLedgerManager


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop log handlers installed by CLI runs, which write to the runner's streams."""
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root_logger.removeHandler(handler)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def payee_service(temp_db):
    """Create a PayeeService with a temporary database."""
    return PayeeService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create an ImportService with a temporary database."""
    return ImportService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def transfers(temp_db):
    """Create a TransferLedgerManager with a temporary database."""
    return TransferLedgerManager(temp_db)


@pytest.fixture
def sample_owner(account_service):
    """Create a sample owner for testing."""
    owner_id = account_service.create_owner("alice")
    return account_service.get_owner(owner_id)


@pytest.fixture
def sample_account(account_service, sample_owner):
    """Create a sample checking account for testing."""
    account_id = account_service.create_account(
        owner_id=sample_owner.id, name="Checking", bank_name="Test Bank"
    )
    return account_service.get_account(account_id)


@pytest.fixture
def savings_account(account_service, sample_owner):
    """Create a second account of the sample owner."""
    account_id = account_service.create_account(
        owner_id=sample_owner.id, name="Savings", bank_name="Test Bank"
    )
    return account_service.get_account(account_id)


@pytest.fixture
def credit_account(account_service, sample_owner):
    """Create a third account of the sample owner."""
    account_id = account_service.create_account(
        owner_id=sample_owner.id, name="Credit Card", bank_name="Other Bank"
    )
    return account_service.get_account(account_id)


@pytest.fixture
def add_entry(transaction_service, sample_owner, sample_account):
    """Return a helper creating manual entries on the sample account."""

    def _add(amount="-50.00", txn_date=date(2026, 1, 14), description="Grocery store", **kwargs):
        kwargs.setdefault("account_id", sample_account.id)
        kwargs.setdefault("type", "expense" if Decimal(amount) < 0 else "income")
        return transaction_service.create_transaction(
            owner_id=sample_owner.id,
            date=txn_date,
            amount=Decimal(amount),
            description=description,
            **kwargs,
        )

    return _add


@pytest.fixture
def statement_records():
    """Five normalized statement records."""
    return [
        {"date": "2026-01-02", "amount": "-12.50", "description": "Coffee shop"},
        {"date": "2026-01-05", "amount": "2500.00", "description": "Salary ACME"},
        {"date": "2026-01-09", "amount": "-80.00", "description": "Electricity"},
        {"date": "2026-01-12", "amount": "-33.10", "description": "Pharmacy"},
        {"date": "2026-01-15", "amount": "-50.00", "description": "Grocery store"},
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
