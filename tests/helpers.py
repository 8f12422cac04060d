"""Helpers shared by the test modules."""

from typing import Dict, List, Tuple

from csv_ledger import Event, Ledger, format_amount
from csv_ledger.core import EVENT_TYPES


HEADER = "type, client, tx, amount"


def csv_lines(*rows: str, header: str = HEADER) -> List[str]:
    """Return the header followed by ``rows``, as consume() expects."""
    return [header, *rows]


def statement_rows(statement: str) -> Dict[str, str]:
    """
    Split a rendered statement into {client id: full line}.

    Asserts the header line; row order is not significant.
    """
    lines = statement.split("\n")
    assert lines[0] == "client, available, held, total, locked"
    rows = {}
    for line in lines[1:]:
        client = line.split(",")[0]
        assert client not in rows, f"duplicate row for client {client}"
        rows[client] = line
    return rows


def balances(ledger: Ledger, client: int) -> Tuple[int, int, int, bool]:
    """(available, held, total, locked) of a client's account."""
    account = ledger.get_account(client)
    assert account is not None, f"client {client} has no account"
    return account.available, account.held, account.total, account.locked


_KEYWORDS = {event_type: keyword for keyword, event_type in EVENT_TYPES.items()}


def event_row(event: Event) -> str:
    """Render an event as the csv data row that decodes back to it."""
    keyword = _KEYWORDS[type(event)]
    amount = getattr(event, "amount", None)
    suffix = "" if amount is None else format_amount(amount)
    return f"{keyword}, {event.client}, {event.tx}, {suffix}"
