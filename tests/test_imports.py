"""Tests that every package imports cleanly as the first cashflow import."""

import os
import subprocess
import sys
from pathlib import Path

import pytest


SRC_DIR = Path(__file__).resolve().parents[1] / "src"


def _env_with_src():
    paths = [str(SRC_DIR), os.environ.get("PYTHONPATH", "")]
    return {**os.environ, "PYTHONPATH": os.pathsep.join(p for p in paths if p)}


@pytest.mark.parametrize(
    "module",
    [
        "cashflow.domain",
        "cashflow.domain.errors",
        "cashflow.domain.entities",
        "cashflow.database",
        "cashflow.database.factories",
        "cashflow.utils",
        "cashflow.utils.date_parser",
        "cashflow.utils.amount_parser",
        "cashflow.cli.main",
    ],
)
def test_module_imports_first(module):
    """Test importing a module in a fresh interpreter with nothing preloaded."""
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        capture_output=True,
        text=True,
        env=_env_with_src(),
    )

    assert result.returncode == 0, result.stderr


def test_domain_exports_services():
    import cashflow.domain as domain
    from cashflow.domain.transaction import TransactionService

    assert domain.TransactionService is TransactionService
    assert set(domain.__all__) == {
        "TransactionService",
        "CategoryService",
        "PaymentMethodService",
        "TransactionPresenter",
    }
