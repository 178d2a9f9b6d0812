"""banksync CLI application using Typer.

Runs a Bankin sync against the configured document store and manages the
database schema.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from banksync.application.commands import BankingSyncCommand
from banksync.application.dtos import SyncResult
from banksync.domain.banking.value_objects import SourceCredentials
from banksync.domain.shared.exceptions import DomainException
from banksync.domain.shared.time import FixedClock
from banksync.infrastructure.persistence.sqlalchemy.init_db import (
    create_tables,
    drop_tables,
)
from banksync.infrastructure.persistence.sqlalchemy.repositories import (
    DocumentStoreSQLAlchemy,
)
from banksync_config.settings import Settings, get_settings

EXIT_FATAL = 1
EXIT_PARTIAL = 2

app = typer.Typer(
    name="banksync",
    help="banksync - Bankin to document store synchronization",
    no_args_is_help=True,
)
console = Console()

db_app = typer.Typer(
    name="db",
    help="Database schema utilities",
    no_args_is_help=True,
)
app.add_typer(db_app)

logger = logging.getLogger(__name__)


def _configure_logging(settings: Settings) -> None:
    """Console logging with timestamps and module names."""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("banksync").setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def _credentials_from_settings(settings: Settings) -> SourceCredentials:
    missing = [
        name
        for name, value in (
            ("BANKIN_CLIENT_ID", settings.bankin_client_id),
            ("BANKIN_CLIENT_SECRET", settings.bankin_client_secret.get_secret_value()),
            ("BANKIN_EMAIL", settings.bankin_email),
            ("BANKIN_PASSWORD", settings.bankin_password.get_secret_value()),
        )
        if not value
    ]
    if missing:
        console.print(
            f"[red]Missing Bankin credentials:[/red] {', '.join(missing)}\n"
            "[dim]Set them in the environment or in config/.env.[/dim]",
        )
        raise typer.Exit(code=EXIT_FATAL)

    return SourceCredentials(
        client_id=settings.bankin_client_id,
        client_secret=settings.bankin_client_secret,
        email=settings.bankin_email,
        password=settings.bankin_password,
        device=settings.bankin_device,
    )


async def _run_sync(
    command: BankingSyncCommand,
    credentials: SourceCredentials,
) -> SyncResult:
    store = command.document_store
    try:
        if isinstance(store, DocumentStoreSQLAlchemy) and store.engine is not None:
            await create_tables(store.engine)
        return await command.execute(credentials)
    finally:
        await command.source.close()
        if isinstance(store, DocumentStoreSQLAlchemy):
            await store.dispose()


def _print_summary(result: SyncResult) -> None:
    table = Table(title=f"Sync {result.synced_at:%Y-%m-%d %H:%M:%S %Z}")
    table.add_column("Records")
    table.add_column("Fetched", justify="right")
    table.add_column("Created", justify="right")
    table.add_column("Updated", justify="right")
    table.add_row(
        "Accounts",
        str(result.accounts_fetched),
        str(result.accounts_created),
        str(result.accounts_updated),
    )
    table.add_row(
        "Transactions",
        str(result.transactions_fetched),
        str(result.transactions_created),
        str(result.transactions_updated),
    )
    table.add_row(
        "Balance histories",
        "-",
        str(result.balance_histories_created),
        str(result.balance_histories_written - result.balance_histories_created),
    )
    console.print(table)

    if result.success:
        console.print("[green]Sync completed without failures.[/green]")
        return

    failures = Table(title="Failures", style="yellow")
    failures.add_column("Doctype")
    failures.add_column("Vendor id")
    failures.add_column("Code")
    failures.add_column("Message")
    for failure in result.failures:
        failures.add_row(
            failure.doctype,
            failure.vendor_id,
            failure.code.value,
            failure.message,
        )
    console.print(failures)


@app.command("sync")
def sync(
    date: Optional[datetime] = typer.Option(  # noqa: B008
        None,
        "--date",
        formats=["%Y-%m-%d"],
        help="Record balances under this day instead of today",
    ),
    concurrency: Optional[int] = typer.Option(
        None,
        "--concurrency",
        min=1,
        help="Accounts whose transactions are fetched in parallel",
    ),
) -> None:
    """Fetch Bankin data and store it.

    Exits with 1 on a fatal error and with 2 when some records failed.
    """
    settings = get_settings()
    _configure_logging(settings)

    if concurrency is not None:
        settings = settings.model_copy(
            update={"transaction_fetch_concurrency": concurrency},
        )

    credentials = _credentials_from_settings(settings)
    clock = FixedClock(date.date()) if date is not None else None

    console.print(
        f"Syncing [bold]{credentials.email}[/bold] into "
        f"[cyan]{settings.database_display}[/cyan]",
    )
    try:
        command = BankingSyncCommand.from_settings(settings, clock=clock)
        result = asyncio.run(_run_sync(command, credentials))
    except DomainException as e:
        logger.debug("Sync aborted", exc_info=True)
        console.print(f"[red]Sync failed ({e.code.value}):[/red] {e.message}")
        raise typer.Exit(code=EXIT_FATAL) from e

    _print_summary(result)
    if not result.success:
        raise typer.Exit(code=EXIT_PARTIAL)


@db_app.command("init")
def db_init(
    reset: bool = typer.Option(
        False,
        "--reset",
        help="Drop existing tables first (deletes all stored documents)",
    ),
) -> None:
    """Create the document store tables."""
    settings = get_settings()
    _configure_logging(settings)

    if reset and not typer.confirm("Drop all stored documents?"):
        raise typer.Abort()

    async def _init() -> None:
        store = DocumentStoreSQLAlchemy.from_url(settings.database_url)
        try:
            if reset:
                await drop_tables(store.engine)
            await create_tables(store.engine)
        finally:
            await store.dispose()

    try:
        asyncio.run(_init())
    except DomainException as e:
        logger.debug("Schema setup aborted", exc_info=True)
        console.print(f"[red]Database init failed ({e.code.value}):[/red] {e.message}")
        raise typer.Exit(code=EXIT_FATAL) from e

    console.print(
        f"[green]Database ready:[/green] [cyan]{settings.database_display}[/cyan]",
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
