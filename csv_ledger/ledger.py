"""
ledger.py - Client account state machine

The Ledger class owns every piece of mutable state in the system: the client
accounts and the table of accepted, undisputed transactions. It is the only
module that mutates state.

Key responsibilities:
    - Applies deposits and withdrawals to client balances
    - Moves disputed transactions into the client's held table and back out
      again on resolve or chargeback
    - Locks accounts on chargeback
    - Drives a CSV line stream through the decoder, in order

Transitions never raise. A reference to an unknown transaction or client, a
repeated dispute, or activity on a locked account leaves the state untouched.
Only malformed input and I/O problems surface as LedgerError.

Thread Safety:
    Not thread-safe. Events depend on everything applied before them, so a
    stream must be applied by one caller, line by line.
"""

from __future__ import annotations
from os import PathLike
from typing import Any, Dict, Iterable, Iterator, List, Optional, TextIO, Union

from .core import (
    # Types
    Account, Event,
    Deposit, Withdrawal, Dispute, Resolve, Chargeback,
    # Exceptions
    DecodeError, DecodeErrorKind, OpenFailure, ParseFailure, ReadFailure,
)
from .decoder import decode_event, validate_header
from .logging_setup import get_logger
from .report import render_statement

logger = get_logger(__name__)


class Ledger:
    """
    Per-client balances plus the history needed to dispute past transactions.

    Attributes:
        clients: Accounts keyed by client id.
        transactions: Accepted deposits and withdrawals that have not been
            disputed, tx id -> signed amount, in arrival order. Nothing is ever
            evicted: a dispute may reference any earlier transaction.

    A tx id lives in at most one place: this table, or the held table of a
    single account. Once resolved or charged back it is gone for good.

    Example:
        ledger = Ledger()
        ledger.apply(Deposit(client=1, tx=1, amount=200000))
        ledger.apply(Withdrawal(client=1, tx=2, amount=50000))
        ledger.apply(Dispute(client=1, tx=1))
        print(ledger)
    """

    def __init__(self):
        self.clients: Dict[int, Account] = {}
        self.transactions: Dict[int, int] = {}

    # ========================================================================
    # READ-ONLY ACCESS
    # ========================================================================

    def get_account(self, client: int) -> Optional[Account]:
        """Return the account of ``client``, or None if it has never transacted."""
        return self.clients.get(client)

    def accounts(self) -> List[Account]:
        """All accounts, in the order they were opened."""
        return list(self.clients.values())

    def is_pending(self, tx: int) -> bool:
        """True if ``tx`` was accepted and can still be disputed."""
        return tx in self.transactions

    def verify_balances(self) -> Dict[str, Any]:
        """
        Check the bookkeeping invariants of every account.

        - total == available + held
        - no tx id is both pending and held, or held by two accounts

        Returns:
            Dict with keys:
            - 'valid': bool - True if every invariant holds
            - 'discrepancies': List[Dict] - one entry per violation, each with
              'client', 'error' and the offending figures

        Example:
            result = ledger.verify_balances()
            assert result['valid'], result['discrepancies']
        """
        discrepancies = []
        seen: Dict[int, int] = {}

        for account in self.clients.values():
            if not account.is_balanced():
                discrepancies.append({
                    'client': account.id,
                    'error': 'total != available + held',
                    'available': account.available,
                    'held': account.held,
                    'total': account.total,
                })
            for tx in account.held_transactions:
                if tx in self.transactions:
                    discrepancies.append({'client': account.id, 'tx': tx, 'error': 'held and pending'})
                if tx in seen:
                    discrepancies.append({'client': account.id, 'tx': tx, 'error': f'also held by {seen[tx]}'})
                seen[tx] = account.id

        return {
            'valid': len(discrepancies) == 0,
            'discrepancies': discrepancies,
        }

    def __str__(self) -> str:
        return render_statement(self)

    def __repr__(self) -> str:
        return f"Ledger(clients={len(self.clients)}, pending={len(self.transactions)})"

    # ========================================================================
    # TRANSITIONS (Mutating)
    # ========================================================================

    def insert_transaction(self, client: int, tx: int, amount: int) -> None:
        """
        Apply a signed amount to ``client`` and remember it for later disputes.

        The first transaction of a client opens its account. Transactions on a
        locked account are dropped entirely: no balance change, and the tx id
        is never recorded, so it can never be disputed.

        Example:
            ledger.insert_transaction(1, 1, 100000)    # deposit 10.0
            ledger.insert_transaction(1, 2, -100000)   # withdrawal 10.0
        """
        account = self.clients.get(client)
        if account is None:
            self.clients[client] = Account.opened_with(client, amount)
        elif account.locked:
            logger.debug("ignored tx %d: client %d is locked", tx, client)
            return
        else:
            account.available += amount
            account.total += amount
        self.transactions[tx] = amount

    def apply_deposit(self, client: int, tx: int, amount: int) -> None:
        self.insert_transaction(client, tx, amount)

    def apply_withdrawal(self, client: int, tx: int, amount: int) -> None:
        """Withdrawals are not checked against available funds."""
        self.insert_transaction(client, tx, -amount)

    def apply_dispute(self, client: int, tx: int) -> None:
        """
        Hold the funds of a pending transaction.

        The amount leaves ``available`` and enters the held table of
        ``client``; ``total`` is unchanged. The dispute is ignored if ``tx`` is
        not pending. It is also ignored if ``client`` has no account, in which
        case ``tx`` stays pending.
        """
        if tx not in self.transactions:
            logger.debug("ignored dispute of tx %d: not pending", tx)
            return
        account = self.clients.get(client)
        if account is None:
            logger.debug("ignored dispute of tx %d: unknown client %d", tx, client)
            return
        amount = self.transactions.pop(tx)
        account.available -= amount
        account.held_transactions[tx] = amount

    def apply_resolve(self, client: int, tx: int) -> None:
        """Release a held transaction back into ``available``."""
        account = self.clients.get(client)
        if account is None or tx not in account.held_transactions:
            logger.debug("ignored resolve of tx %d: not held by client %d", tx, client)
            return
        account.available += account.held_transactions.pop(tx)

    def apply_chargeback(self, client: int, tx: int) -> None:
        """Reverse a held transaction out of ``total`` and lock the account."""
        account = self.clients.get(client)
        if account is None or tx not in account.held_transactions:
            logger.debug("ignored chargeback of tx %d: not held by client %d", tx, client)
            return
        account.total -= account.held_transactions.pop(tx)
        account.locked = True

    def apply(self, event: Event) -> None:
        """Apply one decoded event."""
        if isinstance(event, Deposit):
            self.apply_deposit(event.client, event.tx, event.amount)
        elif isinstance(event, Withdrawal):
            self.apply_withdrawal(event.client, event.tx, event.amount)
        elif isinstance(event, Dispute):
            self.apply_dispute(event.client, event.tx)
        elif isinstance(event, Resolve):
            self.apply_resolve(event.client, event.tx)
        elif isinstance(event, Chargeback):
            self.apply_chargeback(event.client, event.tx)
        else:
            raise TypeError(f"Unknown event type: {type(event).__name__}")

    # ========================================================================
    # CSV INGESTION (Mutating)
    # ========================================================================

    def consume(self, lines: Iterable[str]) -> int:
        """
        Validate the header, then decode and apply every data line in order.

        Blank lines are skipped but still counted: the header is line 1 and
        the first data line is line 2.

        Args:
            lines: The csv, one line per item. Trailing newlines are allowed.

        Returns:
            Number of events applied.

        Raises:
            ParseFailure: On the first line that does not decode. Events from
                earlier lines remain applied.
        """
        iterator = iter(lines)
        header = next(iterator, None)
        if header is None:
            raise ParseFailure(DecodeErrorKind.INCOMPLETE.message, 1)
        try:
            validate_header(header)
        except DecodeError as err:
            raise err.to_parse_failure(1) from err

        applied = 0
        for line_number, line in enumerate(iterator, start=2):
            if not line.strip():
                continue
            try:
                event = decode_event(line)
            except DecodeError as err:
                logger.info("line %d rejected: %s", line_number, err.detail)
                raise err.to_parse_failure(line_number) from err
            self.apply(event)
            applied += 1

        logger.info("applied %d events to %d accounts", applied, len(self.clients))
        return applied

    def consume_stream(self, stream: TextIO) -> int:
        """Like consume(), reporting read errors as ReadFailure."""
        return self.consume(_read_lines(stream))

    def consume_path(self, path: Union[str, PathLike], encoding: str = "utf-8") -> int:
        """
        Open the csv at ``path`` and consume it.

        Raises:
            OpenFailure: If the file cannot be opened.
            ReadFailure: If it cannot be read or is not valid ``encoding`` text.
            ParseFailure: If a line does not decode.
        """
        try:
            stream = open(path, "r", encoding=encoding)
        except OSError as err:
            raise OpenFailure(err) from err
        with stream:
            return self.consume_stream(stream)


def _read_lines(stream: TextIO) -> Iterator[str]:
    try:
        for line in stream:
            yield line
    except (OSError, UnicodeDecodeError) as err:
        raise ReadFailure(err) from err
