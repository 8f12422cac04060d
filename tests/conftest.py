"""
conftest.py - Shared pytest fixtures for csv ledger tests

Provides common fixtures used across unit, functional and conformance tests:
- Empty and pre-populated ledgers
- Writing csv files for the file and CLI entry points
- Resetting the package logger between logging tests
"""

import logging

import pytest

from csv_ledger import Ledger, logging_setup

from tests.helpers import HEADER, csv_lines


@pytest.fixture
def ledger() -> Ledger:
    """An empty ledger."""
    return Ledger()


@pytest.fixture
def funded_ledger() -> Ledger:
    """
    Two clients with pending deposits:
    - client 1: tx 1 deposit 10.0, tx 2 deposit 5.0
    - client 2: tx 3 deposit 2.5
    """
    ledger = Ledger()
    ledger.apply_deposit(1, 1, 100000)
    ledger.apply_deposit(1, 2, 50000)
    ledger.apply_deposit(2, 3, 25000)
    return ledger


@pytest.fixture
def locked_ledger() -> Ledger:
    """Client 1 charged back tx 1 and is locked with 5.0 left; tx 2 still pending."""
    ledger = Ledger()
    ledger.apply_deposit(1, 1, 100000)
    ledger.apply_deposit(1, 2, 50000)
    ledger.apply_dispute(1, 1)
    ledger.apply_chargeback(1, 1)
    return ledger


@pytest.fixture
def write_csv(tmp_path):
    """Write rows (after the standard header) to a file and return its path."""
    def _write(*rows: str, header: str = HEADER, name: str = "transactions.csv"):
        path = tmp_path / name
        path.write_text("\n".join(csv_lines(*rows, header=header)), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def fresh_logging(monkeypatch):
    """Reset the package logger so configure_logging() can run again."""
    pkg_logger = logging.getLogger("csv_ledger")
    saved = (list(pkg_logger.handlers), pkg_logger.level, pkg_logger.propagate)
    pkg_logger.handlers.clear()
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    yield pkg_logger
    pkg_logger.handlers[:] = saved[0]
    pkg_logger.setLevel(saved[1])
    pkg_logger.propagate = saved[2]
