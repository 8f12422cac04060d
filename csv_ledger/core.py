"""
Core types for the csv ledger.

This module provides the foundational data structures shared by the decoder,
the ledger and the reporter:
1. Constants: fixed-point scale and identifier bounds
2. Events: the closed set of transaction records a CSV row can describe
3. Account: running balances of a single client
4. Exceptions: LedgerError and the decode/parse/I-O error types

Money is never a float. Every amount is an ``int`` count of ten-thousandths
(``1`` == ``0.0001``).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union


# ============================================================================
# CONSTANTS
# ============================================================================

# Number of fractional digits carried by every amount.
AMOUNT_PLACES = 4

# Scale factor between a textual amount and its stored integer.
AMOUNT_SCALE = 10 ** AMOUNT_PLACES

# Amounts are signed 64-bit quantities.
AMOUNT_MAX = 2 ** 63 - 1

# Client ids are 16-bit unsigned, tx ids 32-bit unsigned.
CLIENT_ID_MAX = 2 ** 16 - 1
TX_ID_MAX = 2 ** 32 - 1

# Column names of the CSV header, in order.
HEADER_COLUMNS = ("type", "client", "tx", "amount")

# Column names of the statement produced by the reporter.
STATEMENT_COLUMNS = ("client", "available", "held", "total", "locked")


# ============================================================================
# EVENTS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Deposit:
    """Credit ``amount`` to ``client``. The amount is always positive."""
    client: int
    tx: int
    amount: int


@dataclass(frozen=True, slots=True)
class Withdrawal:
    """Debit ``amount`` from ``client``. Decoded positive, negated when applied."""
    client: int
    tx: int
    amount: int


@dataclass(frozen=True, slots=True)
class Dispute:
    """Claim that transaction ``tx`` was erroneous and hold its funds."""
    client: int
    tx: int


@dataclass(frozen=True, slots=True)
class Resolve:
    """Release the funds held by a dispute on ``tx``."""
    client: int
    tx: int


@dataclass(frozen=True, slots=True)
class Chargeback:
    """Reverse a disputed transaction ``tx`` and lock the account."""
    client: int
    tx: int


# The closed union of everything a data row can decode to.
Event = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]

# Event classes keyed by their CSV keyword.
EVENT_TYPES: Dict[str, type] = {
    "deposit": Deposit,
    "withdrawal": Withdrawal,
    "dispute": Dispute,
    "resolve": Resolve,
    "chargeback": Chargeback,
}

# Keywords whose rows must carry an amount. All other keywords forbid one.
AMOUNT_KEYWORDS = frozenset({"deposit", "withdrawal"})


# ============================================================================
# ACCOUNT
# ============================================================================

@dataclass(slots=True)
class Account:
    """
    Running balances of one client.

    Attributes:
        id: Client identifier.
        available: Funds free to use. May go negative after withdrawals or disputes.
        total: Funds owned by the client, held ones included.
        locked: Set by a chargeback. Never cleared.
        held_transactions: Disputed transactions of this client, tx -> signed amount.

    ``held`` is derived from ``held_transactions`` so that
    ``total == available + held`` can be checked at any time.
    """
    id: int
    available: int = 0
    total: int = 0
    locked: bool = False
    held_transactions: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def opened_with(cls, client: int, amount: int) -> Account:
        """Create the account implied by a client's first transaction."""
        return cls(id=client, available=amount, total=amount)

    @property
    def held(self) -> int:
        """Sum of the amounts currently under dispute."""
        return sum(self.held_transactions.values())

    def is_balanced(self) -> bool:
        return self.total == self.available + self.held


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for every error surfaced to the caller."""
    pass


class _IoFailure(LedgerError):
    """An I/O error raised while handling one of the csv files."""

    action = ""

    def __init__(self, error: BaseException):
        super().__init__(error)
        self.error = error

    def __str__(self) -> str:
        return f"Ledger Error - Issue whilst {self.action}: {self.error}"


class OpenFailure(_IoFailure):
    """Raised when the input csv cannot be opened."""
    action = "opening the csv"


class ReadFailure(_IoFailure):
    """Raised when the input csv cannot be read or decoded as text."""
    action = "reading in the csv"


class SaveFailure(_IoFailure):
    """Raised when the statement cannot be written to the output file."""
    action = "saving the output file"


class ParseFailure(LedgerError):
    """
    Raised when a line of the csv does not decode.

    Attributes:
        message: Human readable summary of the decode error.
        line: 1-based line number; the header is line 1.
    """

    def __init__(self, message: str, line: int):
        super().__init__(message, line)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        return f'Ledger Error - Issue whilst parsing csv: "{self.message}", At line: {self.line}'


class DecodeErrorKind(Enum):
    """
    Why a line failed to decode.

    INCOMPLETE: The input ended before the grammar could be satisfied.
    MALFORMED: Input is present but does not match the grammar.
    FAILURE: Hard semantic violation (missing or forbidden amount,
             trailing input, numeric overflow).
    """
    INCOMPLETE = "incomplete"
    MALFORMED = "malformed"
    FAILURE = "failure"

    @property
    def message(self) -> str:
        return _DECODE_MESSAGES[self]


_DECODE_MESSAGES = {
    DecodeErrorKind.INCOMPLETE: "Input was incomplete",
    DecodeErrorKind.MALFORMED: "Input was in the wrong format",
    DecodeErrorKind.FAILURE: "Failure whilst parsing input",
}


class DecodeError(ValueError):
    """
    Raised by the decoder. Carries no line number; the stream driver adds it.

    Attributes:
        kind: Classification of the error.
        detail: What exactly went wrong.
        position: Offset into the line where decoding stopped, if known.
    """

    def __init__(self, kind: DecodeErrorKind, detail: str, position: Optional[int] = None):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail
        self.position = position

    def to_parse_failure(self, line: int) -> ParseFailure:
        return ParseFailure(self.kind.message, line)
