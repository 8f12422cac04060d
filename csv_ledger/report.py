"""
report.py - Account statements

Renders the final ledger state as the statement text:

    client, available, held, total, locked
    1, 1.5000, 0.0000, 1.5000, false

Amounts are shown with exactly four decimal places. Rows follow the order in
which accounts were opened; consumers must not rely on any particular order.
"""

from __future__ import annotations
from os import PathLike
from typing import TYPE_CHECKING, Union

from .core import Account, SaveFailure, AMOUNT_PLACES, AMOUNT_SCALE, STATEMENT_COLUMNS

if TYPE_CHECKING:
    from .ledger import Ledger


def format_amount(value: int) -> str:
    """
    Render a scaled amount with four decimal places.

    format_amount(1) == "0.0001", format_amount(1131112) == "113.1112",
    format_amount(-5000) == "-0.5000".
    """
    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), AMOUNT_SCALE)
    return f"{sign}{whole}.{fraction:0{AMOUNT_PLACES}d}"


def format_account(account: Account) -> str:
    return ", ".join((
        str(account.id),
        format_amount(account.available),
        format_amount(account.held),
        format_amount(account.total),
        "true" if account.locked else "false",
    ))


def render_statement(ledger: Ledger) -> str:
    """The header line followed by one line per account, without a trailing newline."""
    lines = [", ".join(STATEMENT_COLUMNS)]
    lines.extend(format_account(account) for account in ledger.accounts())
    return "\n".join(lines)


def write_statement(ledger: Ledger, path: Union[str, PathLike], encoding: str = "utf-8") -> None:
    """
    Save the statement to ``path``, replacing any existing file.

    Raises:
        SaveFailure: If the file cannot be written.
    """
    try:
        with open(path, "w", encoding=encoding) as f:
            f.write(render_statement(ledger))
    except OSError as err:
        raise SaveFailure(err) from err
