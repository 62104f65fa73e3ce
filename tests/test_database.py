"""Tests for schema creation, seeding and the SQLAlchemy storage layer."""

import os

import pytest
from sqlalchemy import inspect, text

from cashflow.database.factories import DB_PATH_ENV_VAR, create_sqlite_database, default_database_path
from cashflow.database.models import User
from cashflow.database.seeds import DEFAULT_CATEGORIES, DEFAULT_PAYMENT_METHODS
from cashflow.domain.entities import DEFAULT_USER_ID
from cashflow.domain.errors import StorageUnavailableError


def test_schema_tables_created(temp_db):
    tables = set(inspect(temp_db.engine).get_table_names())

    assert {
        "users",
        "categories",
        "payment_methods",
        "transactions",
        "simple_transactions",
        "transaction_templates",
        "saved_transaction_filters",
    } <= tables


def test_default_user_seeded(temp_db):
    user = temp_db._get_session().get(User, DEFAULT_USER_ID)

    assert user is not None
    assert user.name == "Default User"


def test_initialize_schema_is_idempotent(temp_db):
    temp_db.initialize_schema()
    temp_db.initialize_schema()

    assert len(temp_db.list_categories()) == len(DEFAULT_CATEGORIES)
    assert len(temp_db.list_payment_methods()) == len(DEFAULT_PAYMENT_METHODS)


def test_edited_seed_rows_survive_restart(temp_db, category_service):
    rent = category_service.get_category_by_name("Rent")
    category_service.deactivate_category(rent.id)

    temp_db.initialize_schema()

    assert category_service.get_category(rent.id).is_active is False


def test_net_amount_is_generated_by_storage(temp_db, transaction_service, transaction_input):
    txn = transaction_service.create_transaction(
        transaction_input(amount="80.00", discount_amount="20.00", tax_amount="4.00")
    )

    with temp_db.engine.connect() as conn:
        net = conn.execute(
            text("SELECT net_amount FROM transactions WHERE id = :id"), {"id": txn.id}
        ).scalar_one()

    assert float(net) == pytest.approx(64.0)


def test_foreign_keys_enforced(temp_db):
    with temp_db.engine.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar_one() == 1


def test_missing_due_amount_column_is_added(temp_db):
    """Test that databases created before due_amount existed are upgraded."""
    with temp_db.engine.begin() as conn:
        conn.execute(text("ALTER TABLE transactions DROP COLUMN due_amount"))
    assert "due_amount" not in {c["name"] for c in inspect(temp_db.engine).get_columns("transactions")}

    temp_db.initialize_schema()

    assert "due_amount" in {c["name"] for c in inspect(temp_db.engine).get_columns("transactions")}


def test_soft_deleted_row_stays_in_table(temp_db, transaction_service, transaction_input):
    txn = transaction_service.create_transaction(transaction_input())
    transaction_service.delete_transaction(txn.id)

    with temp_db.engine.connect() as conn:
        deleted_at = conn.execute(
            text("SELECT deleted_at FROM transactions WHERE id = :id"), {"id": txn.id}
        ).scalar_one()

    assert deleted_at is not None


def test_connect_unusable_path(tmp_path):
    db = create_sqlite_database(database_path=str(tmp_path / "missing-dir" / "cashflow.db"))

    with pytest.raises(StorageUnavailableError, match="Failed to open database"):
        db.connect()


def test_database_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "from-env.db"
    monkeypatch.setenv(DB_PATH_ENV_VAR, str(path))

    db = create_sqlite_database()
    db.connect()
    db.initialize_schema()
    db.disconnect()

    assert db.database_url == f"sqlite:///{path}"
    assert os.path.exists(path)


def test_default_database_path(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))

    assert default_database_path() == tmp_path / ".cashflow" / "cashflow.db"
