"""
csv_ledger - Client account statements from a csv of transactions

Decodes deposit, withdrawal, dispute, resolve and chargeback rows with exact
fixed-point amounts, applies them to per-client accounts, and renders the
resulting balances.

Usage:
    from csv_ledger import Ledger, Deposit, Dispute

    ledger = Ledger()
    ledger.consume([
        "type, client, tx, amount",
        "deposit, 1, 1, 1.5",
        "withdrawal, 1, 2, 0.25",
    ])
    print(ledger)
    # client, available, held, total, locked
    # 1, 1.2500, 0.0000, 1.2500, false

    ledger.apply(Dispute(client=1, tx=1))
"""

# Core types
from .core import (
    Event,
    Deposit,
    Withdrawal,
    Dispute,
    Resolve,
    Chargeback,
    Account,
    LedgerError,
    OpenFailure,
    ReadFailure,
    SaveFailure,
    ParseFailure,
    DecodeError,
    DecodeErrorKind,
    AMOUNT_PLACES,
    AMOUNT_SCALE,
    CLIENT_ID_MAX,
    TX_ID_MAX,
)

# Decoding
from .decoder import (
    decode_event,
    parse_amount,
    validate_header,
)

# Ledger
from .ledger import Ledger

# Statements
from .report import (
    format_amount,
    render_statement,
    write_statement,
)

__all__ = [
    # Core
    'Event', 'Deposit', 'Withdrawal', 'Dispute', 'Resolve', 'Chargeback',
    'Account',
    'LedgerError', 'OpenFailure', 'ReadFailure', 'SaveFailure', 'ParseFailure',
    'DecodeError', 'DecodeErrorKind',
    'AMOUNT_PLACES', 'AMOUNT_SCALE', 'CLIENT_ID_MAX', 'TX_ID_MAX',
    # Decoding
    'decode_event', 'parse_amount', 'validate_header',
    # Ledger
    'Ledger',
    # Statements
    'format_amount', 'render_statement', 'write_statement',
]

__version__ = '0.1.0'
