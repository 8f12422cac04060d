"""CLI for the ``csv_ledger`` package.

Reads a csv of transactions and prints one statement line per client account,
or saves the statement to a file with ``--output``. Any LedgerError is
reported on stderr and ends the process with exit status 1.

    csv-ledger transactions.csv
    csv-ledger --output accounts.csv transactions.csv
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from .config import get_settings
from .core import LedgerError
from .ledger import Ledger
from .logging_setup import configure_logging, get_logger
from .report import render_statement, write_statement

logger = get_logger(__name__)

app = typer.Typer(
    name="csv-ledger",
    help="Consume a csv of transactions and produce client account statements.",
    add_completion=False,
)


@app.command()
def run(
    path: Annotated[Path, typer.Argument(help="Path to the input csv file.")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Save the statement to this file instead of printing it."),
    ] = None,
    log_level: Annotated[
        Optional[str], typer.Option("--log-level", help="Logging level (default: CSV_LEDGER_LOG_LEVEL or WARNING).")
    ] = None,
) -> None:
    """Print the account statements produced by the transactions in PATH."""
    settings = get_settings()
    configure_logging(log_level or settings.log_level, fmt=settings.log_format)

    ledger = Ledger()
    try:
        ledger.consume_path(path, encoding=settings.encoding)
        if output is not None:
            write_statement(ledger, output, encoding=settings.encoding)
            logger.info("statement saved to %s", output)
        else:
            typer.echo(render_statement(ledger))
    except LedgerError as err:
        typer.echo(str(err), err=True)
        raise typer.Exit(1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
