"""
decoder.py - Strict CSV row decoding

Validates the CSV header and turns data rows into typed events.

Grammar of a data row (whitespace is space, tab, CR or LF):

    ws keyword ws "," ws client ws "," ws tx ws "," [ws amount] ws

    keyword = "deposit" | "withdrawal" | "dispute" | "resolve" | "chargeback"
    client  = digits that fit in 16 bits
    tx      = digits that fit in 32 bits
    amount  = digits ["." 1*4digits]

The row must be consumed completely. Deposits and withdrawals require an
amount; disputes, resolves and chargebacks forbid one.

Everything here is pure: no I/O, no state, no logging. Errors are raised as
DecodeError carrying a DecodeErrorKind; callers attach the line number.

Example:
    validate_header("type, client, tx, amount")
    decode_event(" deposit,  2, 20  ,6.99  ")   # Deposit(client=2, tx=20, amount=69900)
    decode_event("dispute, 2, 20,")            # Dispute(client=2, tx=20)
    parse_amount("1.1111")                     # 11111
"""

from __future__ import annotations
from typing import Optional, Sequence

from .core import (
    Event, Deposit, Withdrawal,
    DecodeError, DecodeErrorKind,
    AMOUNT_KEYWORDS, AMOUNT_MAX, AMOUNT_PLACES, AMOUNT_SCALE,
    CLIENT_ID_MAX, EVENT_TYPES, HEADER_COLUMNS, TX_ID_MAX,
)


_WHITESPACE = " \t\r\n"
_DIGITS = "0123456789"

# Longest digit run (leading zeros excluded) that can still fit an i64.
_MAX_SIGNIFICANT_DIGITS = len(str(AMOUNT_MAX))


class _Cursor:
    """Read position over a single line."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    @property
    def rest(self) -> str:
        return self.text[self.pos:]

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def take_digits(self, limit: Optional[int] = None) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in _DIGITS:
            if limit is not None and self.pos - start >= limit:
                break
            self.pos += 1
        return self.text[start:self.pos]

    def error(self, kind: DecodeErrorKind, detail: str) -> DecodeError:
        return DecodeError(kind, detail, self.pos)


# ============================================================================
# COMBINATORS
# ============================================================================

def _expect_tag(cursor: _Cursor, candidates: Sequence[str], what: str) -> str:
    """Consume whichever of ``candidates`` the input starts with."""
    rest = cursor.rest
    for candidate in candidates:
        if rest.startswith(candidate):
            cursor.pos += len(candidate)
            return candidate
    if any(candidate.startswith(rest) for candidate in candidates):
        raise cursor.error(DecodeErrorKind.INCOMPLETE, f"Input ended while reading {what}.")
    raise cursor.error(DecodeErrorKind.MALFORMED, f"Expected {what}.")


def _expect_comma(cursor: _Cursor) -> None:
    if cursor.at_end():
        raise cursor.error(DecodeErrorKind.INCOMPLETE, "Input ended before ','.")
    if cursor.peek() != ",":
        raise cursor.error(DecodeErrorKind.MALFORMED, f"Expected ',' but found {cursor.peek()!r}.")
    cursor.pos += 1


def _padded_token(cursor: _Cursor, candidates: Sequence[str], what: str) -> str:
    """Whitespace, one of ``candidates``, whitespace."""
    cursor.skip_whitespace()
    token = _expect_tag(cursor, candidates, what)
    cursor.skip_whitespace()
    return token


def _unsigned(cursor: _Cursor, maximum: int, what: str) -> int:
    """Whitespace, an unsigned integer no larger than ``maximum``, whitespace."""
    cursor.skip_whitespace()
    if cursor.at_end():
        raise cursor.error(DecodeErrorKind.INCOMPLETE, f"Input ended before the {what}.")
    digits = cursor.take_digits()
    if not digits:
        raise cursor.error(DecodeErrorKind.MALFORMED, f"Expected the {what} but found {cursor.peek()!r}.")
    significant = digits.lstrip("0") or "0"
    if len(significant) > len(str(maximum)) or int(significant) > maximum:
        raise cursor.error(DecodeErrorKind.FAILURE, f"The {what} {digits} does not fit in {maximum.bit_length()} bits.")
    cursor.skip_whitespace()
    return int(significant)


def _scan_amount(cursor: _Cursor) -> Optional[int]:
    """
    Consume an amount if one starts at the cursor.

    Returns None, without moving, if the input does not start with a digit.
    A "." not followed by a digit is left unconsumed, as are fractional digits
    beyond the fourth; the caller decides whether leftovers are acceptable.

    Raises:
        DecodeError: FAILURE if the scaled value does not fit a signed 64-bit integer.
    """
    whole = cursor.take_digits()
    if not whole:
        return None

    fraction = ""
    after_point = cursor.text[cursor.pos + 1:cursor.pos + 2]
    if cursor.peek() == "." and after_point and after_point in _DIGITS:
        cursor.pos += 1
        fraction = cursor.take_digits(AMOUNT_PLACES)

    significant = whole.lstrip("0") or "0"
    if len(significant) > _MAX_SIGNIFICANT_DIGITS:
        raise cursor.error(DecodeErrorKind.FAILURE, f"Amount {whole} is too large.")
    value = int(significant) * AMOUNT_SCALE + int(fraction.ljust(AMOUNT_PLACES, "0"))
    if value > AMOUNT_MAX:
        raise cursor.error(DecodeErrorKind.FAILURE, f"Amount {whole}.{fraction} is too large.")
    return value


# ============================================================================
# PUBLIC API
# ============================================================================

def parse_amount(text: str) -> int:
    """
    Parse an unsigned decimal with up to four fractional digits.

    The result is scaled by 10000: "1" -> 10000, "1.1" -> 11000,
    "1.05" -> 10500, "1.1111" -> 11111.

    Raises:
        DecodeError: If ``text`` is not exactly one amount.
    """
    cursor = _Cursor(text)
    if cursor.at_end():
        raise cursor.error(DecodeErrorKind.INCOMPLETE, "Input ended before the amount.")
    value = _scan_amount(cursor)
    if value is None:
        raise cursor.error(DecodeErrorKind.MALFORMED, f"Expected an amount but found {cursor.peek()!r}.")
    if cursor.rest == ".":
        raise cursor.error(DecodeErrorKind.INCOMPLETE, "Input ended before the fractional digits.")
    if not cursor.at_end():
        raise cursor.error(DecodeErrorKind.FAILURE, f"Unexpected {cursor.rest!r} after the amount.")
    return value


def validate_header(line: str) -> None:
    """
    Check that ``line`` is the header "type,client,tx,amount".

    Tokens are case-sensitive and must appear in order. Whitespace is allowed
    around every token and comma; nothing else may follow the last token.

    Raises:
        DecodeError: If the header is missing a column, renames one, or has extra input.
    """
    cursor = _Cursor(line)
    last = len(HEADER_COLUMNS) - 1
    for index, column in enumerate(HEADER_COLUMNS):
        _padded_token(cursor, (column,), f"the '{column}' column")
        if index < last:
            _expect_comma(cursor)
    if not cursor.at_end():
        raise cursor.error(DecodeErrorKind.FAILURE, f"Unexpected {cursor.rest!r} after the header.")


def decode_event(line: str) -> Event:
    """
    Decode one data row into an event.

    Raises:
        DecodeError: INCOMPLETE, MALFORMED or FAILURE, see DecodeErrorKind.
    """
    cursor = _Cursor(line)

    keyword = _padded_token(cursor, tuple(EVENT_TYPES), "a transaction type")
    _expect_comma(cursor)
    client = _unsigned(cursor, CLIENT_ID_MAX, "client id")
    _expect_comma(cursor)
    tx = _unsigned(cursor, TX_ID_MAX, "transaction id")
    _expect_comma(cursor)

    cursor.skip_whitespace()
    amount = _scan_amount(cursor)
    cursor.skip_whitespace()
    if not cursor.at_end():
        raise cursor.error(DecodeErrorKind.FAILURE, f"Unexpected {cursor.rest!r} after parsing transaction.")

    event_type = EVENT_TYPES[keyword]
    if keyword in AMOUNT_KEYWORDS:
        if amount is None:
            raise cursor.error(DecodeErrorKind.FAILURE, "Deposit or Withdrawal with a missing amount.")
        return event_type(client, tx, amount)
    if amount is not None:
        raise cursor.error(DecodeErrorKind.FAILURE, "Dispute, Resolve or Chargeback with an amount.")
    return event_type(client, tx)
