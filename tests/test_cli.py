"""Tests for the command line interface."""

import json

from cashflow.cli.main import cli


def _invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def _add(cli_runner, temp_db, *args):
    result = _invoke(cli_runner, temp_db, "transaction", "add", *args, "--json")
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


def test_help_does_not_open_database(cli_runner, tmp_path):
    result = cli_runner.invoke(cli, ["--db-path", str(tmp_path / "never.db"), "--help"])

    assert result.exit_code == 0
    assert "transaction" in result.output
    assert not (tmp_path / "never.db").exists()


def test_unusable_database_path(cli_runner, tmp_path):
    result = cli_runner.invoke(
        cli, ["--db-path", str(tmp_path / "missing" / "cashflow.db"), "category", "list"]
    )

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_add_transaction_json(cli_runner, temp_db):
    data = _add(
        cli_runner,
        temp_db,
        "--type", "income",
        "--description", "Consulting",
        "--amount", "$100.00",
        "--tax", "5",
        "--discount", "10",
        "--date", "2024-01-15",
        "--tag", "q1",
        "--tag", "retainer",
    )

    assert data["net_amount"] == 95.0
    assert data["transaction_date"] == "2024-01-15"
    assert data["tags"] == ["q1", "retainer"]
    assert data["payment_status"] == "completed"
    assert data["currency"] == "USD"


def test_add_transaction_text_output(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db,
        "transaction", "add", "--type", "expense", "--description", "Paper", "--amount", "12.50",
    )

    assert result.exit_code == 0
    assert "Created transaction" in result.output
    assert "12.50" in result.output


def test_add_transaction_resolves_names(cli_runner, temp_db, category_service, payment_method_service):
    data = _add(
        cli_runner,
        temp_db,
        "--type", "expense",
        "--description", "March rent",
        "--amount", "1200",
        "--category", "Rent",
        "--payment-method", "Bank Transfer",
    )

    assert data["category_id"] == category_service.get_category_by_name("Rent").id
    assert data["category"] == "Rent"
    assert data["payment_method"] == "Bank Transfer"
    assert data["payment_method_id"] == payment_method_service.get_payment_method_by_name("Bank Transfer").id


def test_add_transaction_unknown_category(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db,
        "transaction", "add", "--type", "expense", "--description", "X", "--amount", "1",
        "--category", "Nonexistent",
    )

    assert result.exit_code == 1
    assert "Category 'Nonexistent' not found" in result.output


def test_add_transaction_invalid_amount(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db,
        "transaction", "add", "--type", "expense", "--description", "X", "--amount", "lots",
    )

    assert result.exit_code == 1
    assert "Invalid amount" in result.output


def test_add_transaction_negative_amount_rejected(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db,
        "transaction", "add", "--type", "expense", "--description", "X", "--amount=-5",
    )

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_add_recurring_transaction(cli_runner, temp_db):
    data = _add(
        cli_runner,
        temp_db,
        "--type", "expense",
        "--description", "Hosting",
        "--amount", "20",
        "--recurring", "monthly",
        "--recurring-end", "2024-12-31",
    )

    assert data["is_recurring"] is True
    assert data["recurring_frequency"] == "monthly"
    assert data["recurring_end_date"] == "2024-12-31"


def test_get_transaction(cli_runner, temp_db, sample_transactions):
    txn = sample_transactions["website"]

    result = _invoke(cli_runner, temp_db, "transaction", "get", txn.id, "--json")

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["id"] == txn.id
    assert data["customer_vendor"] == "Globex"
    assert data["due_amount"] == 500.0

    text_result = _invoke(cli_runner, temp_db, "transaction", "get", txn.id)
    assert "Website project" in text_result.output


def test_get_transaction_not_found(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "transaction", "get", "missing")

    assert result.exit_code == 1
    assert "Error: Transaction missing not found" in result.output


def test_list_transactions_filters(cli_runner, temp_db, sample_transactions):
    result = _invoke(
        cli_runner, temp_db,
        "transaction", "list",
        "--start-date", "2024-01-01", "--end-date", "2024-01-31", "--type", "expense", "--json",
    )

    assert result.exit_code == 0
    assert [row["id"] for row in json.loads(result.output)] == [sample_transactions["paper"].id]


def test_list_transactions_table(cli_runner, temp_db, sample_transactions):
    result = _invoke(cli_runner, temp_db, "transaction", "list", "--status", "pending")

    assert result.exit_code == 0
    assert "Website project" in result.output
    assert "Widget stock" in result.output
    assert "February rent" not in result.output


def test_list_transactions_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "transaction", "list")

    assert result.exit_code == 0
    assert "No transactions found." in result.output


def test_list_transactions_period_conflict(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db, "transaction", "list", "--this-month", "--start-date", "2024-01-01"
    )

    assert result.exit_code == 1
    assert "cannot be combined" in result.output


def test_update_transaction_overlays_options(cli_runner, temp_db, sample_transactions):
    txn = sample_transactions["website"]

    result = _invoke(
        cli_runner, temp_db,
        "transaction", "update", txn.id, "--status", "completed", "--due", "0", "--category", "Service Income",
        "--json",
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["payment_status"] == "completed"
    assert data["due_amount"] == 0.0
    assert data["category"] == "Service Income"
    # Untouched fields keep their values
    assert data["description"] == "Website project"
    assert data["customer_vendor"] == "Globex"
    assert data["invoice_number"] == "INV-0042"
    assert data["amount"] == 500.0


def test_update_transaction_clear_category(cli_runner, temp_db):
    created = _add(
        cli_runner, temp_db, "--type", "expense", "--description", "Lunch", "--amount", "15",
        "--category", "Meals & Entertainment",
    )

    result = _invoke(cli_runner, temp_db, "transaction", "update", created["id"], "--category", "", "--json")

    assert result.exit_code == 0
    assert json.loads(result.output)["category_id"] is None


def test_update_transaction_not_found(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "transaction", "update", "missing", "--amount", "1")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_delete_transaction(cli_runner, temp_db, sample_transactions):
    txn = sample_transactions["paper"]

    result = _invoke(cli_runner, temp_db, "transaction", "delete", txn.id, "--yes")
    assert result.exit_code == 0
    assert f"Deleted transaction {txn.id}" in result.output

    result = _invoke(cli_runner, temp_db, "transaction", "get", txn.id)
    assert result.exit_code == 1


def test_delete_transaction_cancelled(cli_runner, temp_db, sample_transactions):
    txn = sample_transactions["paper"]

    result = _invoke(cli_runner, temp_db, "transaction", "delete", txn.id, input="n\n")
    assert "Deletion cancelled." in result.output

    result = _invoke(cli_runner, temp_db, "transaction", "get", txn.id)
    assert result.exit_code == 0


def test_search_transactions(cli_runner, temp_db, sample_transactions):
    result = _invoke(cli_runner, temp_db, "transaction", "search", "acme", "--json")

    assert result.exit_code == 0
    assert {row["id"] for row in json.loads(result.output)} == {
        sample_transactions["consulting"].id,
        sample_transactions["widget_sale"].id,
    }


def test_recent_transactions(cli_runner, temp_db, sample_transactions):
    result = _invoke(cli_runner, temp_db, "transaction", "recent", "--limit", "1", "--json")

    assert result.exit_code == 0
    assert [row["id"] for row in json.loads(result.output)] == [sample_transactions["rent"].id]


def test_suggest_customers(cli_runner, temp_db, sample_transactions):
    result = _invoke(cli_runner, temp_db, "transaction", "suggest", "customer", "--type", "income", "--json")

    assert result.exit_code == 0
    assert json.loads(result.output) == [
        {"value": "Acme Corp", "frequency": 1},
        {"value": "Globex", "frequency": 1},
    ]


def test_suggest_descriptions_text(cli_runner, temp_db, sample_transactions):
    result = _invoke(cli_runner, temp_db, "transaction", "suggest", "description", "--search", "widget")

    assert result.exit_code == 0
    assert "Widget sale" in result.output
    assert "Widget stock" in result.output


def test_stats_json(cli_runner, temp_db, sample_transactions):
    result = _invoke(
        cli_runner, temp_db, "stats", "--start-date", "2024-01-01", "--end-date", "2024-01-31", "--json"
    )

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["total_income"] == 850.0
    assert data["total_expenses"] == 120.0
    assert data["net_profit"] == 730.0
    assert data["total_transactions"] == 5
    assert data["pending_income"] == 500.0


def test_stats_text(cli_runner, temp_db, sample_transactions):
    result = _invoke(cli_runner, temp_db, "stats")

    assert result.exit_code == 0
    assert "All time" in result.output
    assert "Net profit" in result.output
    assert "-470.00" in result.output


def test_stats_by_category(cli_runner, temp_db, sample_transactions):
    result = _invoke(cli_runner, temp_db, "stats", "--by-category", "--json")

    assert result.exit_code == 0
    rows = json.loads(result.output)
    assert [row["type"] for row in rows] == ["expense", "income", "purchase", "sale"]
    assert rows[0]["category_name"] == "Uncategorized"
    assert rows[0]["total_amount"] == 1240.0


def test_stats_multiple_periods(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "stats", "--this-month", "--last-month")

    assert result.exit_code == 1
    assert "Only one period option" in result.output


def test_category_list_by_type(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "category", "list", "--type", "income", "--json")

    assert result.exit_code == 0
    assert {row["name"] for row in json.loads(result.output)} == {
        "Sales Revenue",
        "Service Income",
        "Other Income",
    }


def test_category_create_and_duplicate(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "category", "create", "Subscriptions", "--type", "expense")
    assert result.exit_code == 0
    assert "Created category 'Subscriptions'" in result.output

    result = _invoke(cli_runner, temp_db, "category", "create", "Subscriptions", "--type", "expense")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_category_update(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "category", "update", "Travel", "--name", "Business Travel", "--inactive")
    assert result.exit_code == 0
    assert "Updated category 'Business Travel'" in result.output

    result = _invoke(cli_runner, temp_db, "category", "list", "--active", "--json")
    assert "Business Travel" not in {row["name"] for row in json.loads(result.output)}


def test_category_delete_blocked_then_deactivate(cli_runner, temp_db):
    _add(cli_runner, temp_db, "--type", "expense", "--description", "Rent", "--amount", "900", "--category", "Rent")

    result = _invoke(cli_runner, temp_db, "category", "deps", "Rent")
    assert "Rent: used in 1 transaction" in result.output

    result = _invoke(cli_runner, temp_db, "category", "delete", "Rent", "--yes")
    assert result.exit_code == 1
    assert "used in 1 transaction" in result.output

    result = _invoke(cli_runner, temp_db, "category", "deactivate", "Rent")
    assert result.exit_code == 0


def test_category_delete_unused(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "category", "delete", "Bank Fees", "--yes")

    assert result.exit_code == 0
    assert "Deleted category 'Bank Fees'" in result.output


def test_payment_method_commands(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "payment-method", "create", "Stripe", "--description", "Card processor")
    assert result.exit_code == 0

    result = _invoke(cli_runner, temp_db, "payment-method", "update", "Stripe", "--description", "Stripe payouts")
    assert result.exit_code == 0

    result = _invoke(cli_runner, temp_db, "payment-method", "deactivate", "Stripe")
    assert result.exit_code == 0

    result = _invoke(cli_runner, temp_db, "payment-method", "list", "--json")
    stripe = next(row for row in json.loads(result.output) if row["name"] == "Stripe")
    assert stripe["description"] == "Stripe payouts"
    assert stripe["is_active"] is False

    result = _invoke(cli_runner, temp_db, "payment-method", "list", "--active")
    assert "Stripe" not in result.output


def test_payment_method_delete_blocked(cli_runner, temp_db):
    _add(cli_runner, temp_db, "--type", "expense", "--description", "Lunch", "--amount", "9", "--payment-method", "Cash")
    _add(cli_runner, temp_db, "--type", "expense", "--description", "Taxi", "--amount", "30", "--payment-method", "Cash")

    result = _invoke(cli_runner, temp_db, "payment-method", "delete", "Cash", "--yes")

    assert result.exit_code == 1
    assert "used in 2 transactions" in result.output

    result = _invoke(cli_runner, temp_db, "payment-method", "deps", "Cash")
    assert "Cash: used in 2 transactions" in result.output
