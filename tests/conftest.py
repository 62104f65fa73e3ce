"""Shared pytest fixtures for cashflow tests."""

import tempfile
import os
import pytest

from cashflow.database.factories import create_sqlite_database
from cashflow.domain.category import CategoryService
from cashflow.domain.entities import TransactionInput
from cashflow.domain.payment_method import PaymentMethodService
from cashflow.domain.presentation import TransactionPresenter
from cashflow.domain.transaction import TransactionService


def make_input(**overrides) -> TransactionInput:
    """Build a valid TransactionInput, overriding any field."""
    fields = {
        "type": "expense",
        "description": "Test transaction",
        "amount": "10.00",
        "transaction_date": "2024-01-15",
    }
    fields.update(overrides)
    return TransactionInput(**fields)


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
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def payment_method_service(temp_db):
    """Create a PaymentMethodService with a temporary database."""
    return PaymentMethodService(temp_db)


@pytest.fixture
def presenter(temp_db):
    """Create a TransactionPresenter with a temporary database."""
    return TransactionPresenter(temp_db)


@pytest.fixture
def sample_transactions(transaction_service):
    """Create a small ledger spanning January and February 2024."""
    rows = {
        "consulting": make_input(
            type="income",
            description="Consulting retainer",
            amount="100.00",
            transaction_date="2024-01-15",
            customer_vendor="Acme Corp",
            tax_amount="5.00",
            discount_amount="10.00",
        ),
        "website": make_input(
            type="income",
            description="Website project",
            amount="500.00",
            transaction_date="2024-01-10",
            customer_vendor="Globex",
            payment_status="pending",
            due_amount="500.00",
            invoice_number="INV-0042",
        ),
        "paper": make_input(
            type="expense",
            description="Office paper",
            amount="40.00",
            transaction_date="2024-01-20",
            notes="Bought at the corner shop",
        ),
        "rent": make_input(
            type="expense",
            description="February rent",
            amount="1200.00",
            transaction_date="2024-02-01",
            reference_number="RENT-02",
        ),
        "widget_sale": make_input(
            type="sale",
            description="Widget sale",
            amount="250.00",
            transaction_date="2024-01-05",
            customer_vendor="Acme Corp",
        ),
        "widget_stock": make_input(
            type="purchase",
            description="Widget stock",
            amount="80.00",
            transaction_date="2024-01-03",
            customer_vendor="Supplier Ltd",
            payment_status="pending",
            due_amount="30.00",
        ),
    }
    return {key: transaction_service.create_transaction(params) for key, params in rows.items()}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def transaction_input():
    """Factory for valid TransactionInput objects."""
    return make_input
