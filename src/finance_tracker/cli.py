import logging
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from finance_tracker.parsers.factory import SCHEMAS, create_parser
from finance_tracker.remote.connection import ApiConfig, SessionManager
from finance_tracker.repositories.sheetdb_transaction_repository import SheetDBTransactionRepository
from finance_tracker.services.transaction_service import TransactionService
from finance_tracker.services.models import LedgerView
from finance_tracker.services.pipeline import ALL_PERIODS
from finance_tracker.domain.enums import TransactionKind
from finance_tracker.formatting import format_currency, format_signed
from finance_tracker.logging_setup import configure_logging

app = typer.Typer(
    name="finance-tracker",
    help="Track income and expenses stored in a spreadsheet",
    add_completion=False,
)

console = Console()

SCHEMA_NAMES = ", ".join(SCHEMAS)

class State:
    verbose: bool = False
    currency_symbol: str = "R$"
    service: Optional[TransactionService] = None


state = State()

def _parse_kind(value: str) -> TransactionKind:
    try:
        return TransactionKind(value.lower())
    except ValueError:
        raise typer.BadParameter("kind must be 'income' or 'expense'")

def _print_load_errors() -> None:
    for error in state.service.state.errors:
        console.print(f"[yellow]Warning:[/yellow] {error}")

def _reload(message: str = "Loading transactions...") -> None:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(message, total=None)
        state.service.load()
        progress.update(task, completed=True)
    _print_load_errors()

def _fail(e: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {e}")
    if state.verbose:
        console.print_exception()
    raise typer.Exit(code=1)

def render_view(view: LedgerView) -> None:
    """Print the transaction list and totals of a view"""
    symbol = state.currency_symbol
    title = "All periods" if view.period == ALL_PERIODS else view.period

    if view.is_empty:
        console.print(Panel(
            "[yellow]No transactions found for this period[/yellow]",
            title=title,
            border_style="yellow"
        ))
    else:
        txn_table = Table(title=f"Transactions - {title}", show_header=True, padding=(0, 1))
        txn_table.add_column("ID", style="dim")
        txn_table.add_column("Period", style="cyan")
        txn_table.add_column("Description", style="white", max_width=40)
        txn_table.add_column("Amount", justify="right")

        for txn in view.transactions:
            is_expense = txn.kind == TransactionKind.EXPENSE
            color = "red" if is_expense else "green"
            txn_table.add_row(
                txn.id,
                str(txn.date or txn.period),
                txn.description,
                f"[{color}]{format_signed(txn.amount, is_expense, symbol)}[/{color}]",
            )

        console.print(txn_table)

    summary = view.summary
    balance_color = "red" if summary.balance < 0 else "green"
    summary_text = (
        f"[green]Income:[/green]   {format_currency(summary.total_income, symbol):>16}\n"
        f"[red]Expenses:[/red] {format_currency(summary.total_expense, symbol):>16}\n"
        f"{'─' * 26}\n"
        f"[bold {balance_color}]Balance:[/bold {balance_color}]  "
        f"{format_currency(summary.balance, symbol):>16}"
    )
    console.print(Panel(summary_text, title="[bold]Summary[/bold]", border_style="cyan", padding=(1, 2)))

    if summary.invalid_amounts:
        console.print(
            f"[yellow]{summary.invalid_amounts} record(s) with an unreadable amount "
            f"were left out of the totals[/yellow]"
        )

@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    ),
    schema: Optional[str] = typer.Option(
        None,
        "--schema", "-s",
        help=f"Remote schema variant ({SCHEMA_NAMES})",
    ),
):
    """
    Finance Tracker - Record and review income and expenses.
    """
    state.verbose = verbose
    configure_logging(logging.DEBUG if verbose else None, console=Console(stderr=True))

    if state.service is None:
        try:
            config = ApiConfig.from_config()
            parser = create_parser(schema or config.schema)
            repository = SheetDBTransactionRepository(SessionManager(config), parser)
            state.currency_symbol = config.currency_symbol
            state.service = TransactionService(repository, parser)
        except Exception as e:
            _fail(e)

@app.command(name="add")
def add_transaction(
    description: str = typer.Argument(..., help="What the money was for"),
    amount: float = typer.Argument(..., help="Amount (always positive)"),
    kind: str = typer.Option(
        "expense",
        "--kind", "-k",
        help="income or expense",
    ),
    period: Optional[str] = typer.Option(
        None,
        "--period", "-p",
        help="Month reference MM/YYYY (or YYYY-MM-DD for the date schema). Defaults to today",
    ),
):
    """
    Add a transaction and show the updated list.

    Examples:
        finance-tracker add "Salary" 1000 --kind income --period 06/2025
        finance-tracker add "Rent" 400
    """
    try:
        txn = state.service.create(description, amount, _parse_kind(kind), period)
        console.print(f"[bold green]✓ Added {txn.kind.value} '{txn.description}' ({txn.id})[/bold green]")
        _print_load_errors()
        render_view(state.service.view(ALL_PERIODS))
    except typer.BadParameter:
        raise
    except Exception as e:
        _fail(e)

@app.command(name="list")
def list_transactions(
    period: Optional[str] = typer.Option(
        None,
        "--period", "-p",
        help="Period to show (MM/YYYY, YYYY-MM or 'all'). Defaults to the current month",
    ),
):
    """
    Show transactions and totals for a period.

    Examples:
        finance-tracker list
        finance-tracker list --period 06/2025
        finance-tracker list --period all
    """
    try:
        _reload()
        render_view(state.service.view(period))
    except Exception as e:
        _fail(e)

@app.command(name="periods")
def list_periods():
    """List the periods that have transactions."""
    try:
        _reload()
        periods = state.service.available_periods()
        if not periods:
            console.print("[yellow]No transactions found[/yellow]")
            return
        for period in periods:
            console.print(period)
    except Exception as e:
        _fail(e)

@app.command(name="delete")
def delete_transaction(
    transaction_id: str = typer.Argument(..., help="Transaction ID"),
    kind: str = typer.Option(..., "--kind", "-k", help="income or expense"),
):
    """
    Delete a transaction.

    Examples:
        finance-tracker delete lx2k3j9abc123 --kind expense
    """
    try:
        if state.service.delete(transaction_id, _parse_kind(kind)):
            console.print(f"[bold green]✓ Deleted {transaction_id}[/bold green]")
        else:
            console.print(f"[yellow]No transaction with ID {transaction_id}[/yellow]")
        _print_load_errors()
    except typer.BadParameter:
        raise
    except Exception as e:
        _fail(e)

@app.command(name="edit")
def edit_transaction(
    transaction_id: str = typer.Argument(..., help="Transaction ID"),
    kind: str = typer.Option(..., "--kind", "-k", help="Current kind (income or expense)"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    amount: Optional[float] = typer.Option(None, "--amount", "-a"),
    new_kind: Optional[str] = typer.Option(None, "--new-kind", help="Move to income or expense"),
    period: Optional[str] = typer.Option(None, "--period", "-p"),
):
    """
    Edit a transaction.

    Examples:
        finance-tracker edit lx2k3j9abc123 --kind expense --amount 450
        finance-tracker edit lx2k3j9abc123 --kind expense --new-kind income
    """
    try:
        updated = state.service.update(
            transaction_id,
            _parse_kind(kind),
            description=description,
            amount=amount,
            new_kind=_parse_kind(new_kind) if new_kind else None,
            period=period,
        )
        console.print(f"[bold green]✓ Updated {updated.id}[/bold green]")
        _print_load_errors()
    except typer.BadParameter:
        raise
    except Exception as e:
        _fail(e)


def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()
