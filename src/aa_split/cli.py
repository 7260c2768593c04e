"""CLI for AA Split using Typer."""

import logging
import sys
from decimal import Decimal
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .config import load_settings
from .editor import BillEditor
from .exceptions import AaSplitError
from .ingestion import parse_receipt_items
from .models import BalanceStatus, BillState, SettlementResult
from .settlement import classify_balance, settle, to_cents

app = typer.Typer(
    name="aa-split",
    help="Split a shared restaurant bill and work out who pays whom",
)

console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def format_money(amount: Decimal, symbol: str = "¥") -> str:
    """Format an absolute amount with 2 decimals and the currency symbol."""
    return f"{symbol}{abs(to_cents(amount)):,.2f}"


_STATUS_LABELS = {
    BalanceStatus.RECEIVER: "[green]gets back[/green]",
    BalanceStatus.DEBTOR: "[red]pays[/red]",
    BalanceStatus.SETTLED: "[dim]settled[/dim]",
}


def display_result(bill: BillState, result: SettlementResult, symbol: str):
    """Display balances and transfers in a table format."""
    console.print(
        f"\n[bold]Bill total:[/bold] {format_money(result.total_bill, symbol)} "
        f"({len(bill.orders)} orders)\n"
    )

    table = Table(title="Balances", show_header=True, header_style="bold magenta")
    table.add_column("Participant", style="cyan")
    table.add_column("Status")
    table.add_column("Amount", justify="right")

    for participant in bill.participants:
        balance = result.balances[participant.id]
        status = classify_balance(balance)
        amount = (
            format_money(Decimal("0"), symbol)
            if status is BalanceStatus.SETTLED
            else format_money(balance, symbol)
        )
        table.add_row(participant.name, _STATUS_LABELS[status], amount)

    console.print(table)

    console.print("\n[bold]Transfers:[/bold]")
    if not result.transfers:
        console.print("  [green]No transfers needed, everyone is settled.[/green]")
        return

    for transfer in result.transfers:
        console.print(
            f"  {bill.participant_name(transfer.from_id)} -> "
            f"{bill.participant_name(transfer.to_id)}: "
            f"[bold]{format_money(transfer.amount, symbol)}[/bold]"
        )


@app.command("settle")
def settle_command(
    bill_file: Path = typer.Argument(..., help="Bill JSON file", exists=True),
    as_json: bool = typer.Option(
        False, "--json", help="Print the settlement as JSON instead of a table"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Compute net balances and the transfer plan for a bill.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        bill = BillState.model_validate_json(bill_file.read_text(encoding="utf-8"))
        result = settle(bill)

        if as_json:
            typer.echo(result.model_dump_json(indent=2, by_alias=True))
        else:
            display_result(bill, result, settings.currency_symbol)

    except (AaSplitError, ValidationError, OSError) as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def new(
    items_files: list[Path] = typer.Argument(
        ..., help="Receipt item files (JSON arrays of name/price), one per order"
    ),
    payer: str | None = typer.Option(
        None, "--payer", "-p", help="Name of the participant who paid every order"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Start a bill from receipt item files and print it as JSON.

    Each file becomes one order with every item assigned to the default
    roster. Edit the output, then run `aa-split settle` on it.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        editor = BillEditor(settings)

        payer_id = None
        if payer is not None:
            matches = [p for p in editor.bill.participants if p.name == payer]
            if not matches:
                raise typer.BadParameter(
                    f"'{payer}' is not in the roster", param_hint="--payer"
                )
            payer_id = matches[0].id

        for items_file in items_files:
            candidates = parse_receipt_items(
                items_file.read_text(encoding="utf-8"),
                default_name=settings.default_item_name,
            )
            order = editor.add_order(candidates)
            if payer_id is not None:
                editor.set_payer(order.id, payer_id)

        typer.echo(editor.snapshot().model_dump_json(indent=2))

    except (AaSplitError, ValidationError, OSError) as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


if __name__ == "__main__":
    app()
