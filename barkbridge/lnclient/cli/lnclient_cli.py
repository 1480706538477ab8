"""CLI commands for inspecting and driving the Bark-backed node client."""

import asyncio
import json
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from barkbridge import __version__
from barkbridge.exceptions import BarkBridgeError
from barkbridge.utils.config import get_settings
from barkbridge.utils.logging import configure_logging

from ..application.bark_service import BarkService, create_bark_service
from ..application.mappers import msat_to_sat, sat_to_msat
from ..domain.value_objects import NodeConnectionInfo, NodeInfo

T = TypeVar("T")

app = typer.Typer(
    name="barkbridge",
    help="Lightning node client backed by the Bark wallet REST API",
    no_args_is_help=True,
)
console = Console()


def get_service() -> BarkService:
    """Build the node client from settings."""
    return create_bark_service(get_settings())


def _run(operation: Callable[[BarkService], Awaitable[T]]) -> T:
    """Run one service operation, turning adapter errors into exit code 1."""

    async def _call() -> T:
        service = get_service()
        try:
            return await operation(service)
        finally:
            await service.aclose()

    try:
        return asyncio.run(_call())
    except BarkBridgeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _format_time(timestamp: int | None) -> str:
    if timestamp is None:
        return "-"
    return datetime.fromtimestamp(timestamp, UTC).strftime("%Y-%m-%d %H:%M:%S")


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2))


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    try:
        settings = get_settings()
    except BarkBridgeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        dev_mode=settings.dev_mode,
    )


@app.command()
def version() -> None:
    """Show the barkbridge version."""
    typer.echo(__version__)


@app.command()
def info() -> None:
    """Show node information."""

    async def _info(service: BarkService) -> tuple[NodeInfo, NodeConnectionInfo]:
        return await service.get_info(), await service.get_node_connection_info()

    node_info, connection = _run(_info)

    typer.echo("Node Information:")
    typer.echo(f"  Alias: {node_info.alias}")
    typer.echo(f"  Pubkey: {node_info.pubkey}")
    typer.echo(f"  Network: {node_info.network}")
    typer.echo(f"  URI: {connection.uri}")


@app.command()
def balance(
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Show wallet and on-chain balances."""
    balances = _run(lambda service: service.get_balances())

    if as_json:
        _echo_json(balances.to_dict())
        return

    table = Table(title="Balances (sat)", show_header=True)
    table.add_column("Balance")
    table.add_column("Amount", justify="right")
    rows = [
        ("Lightning spendable", balances.lightning.total_spendable_msat),
        ("On-chain spendable", balances.onchain.spendable_msat),
        ("On-chain total", balances.onchain.total_msat),
        ("On-chain reserved", balances.onchain.reserved_msat),
    ]
    for label, amount_msat in rows:
        table.add_row(label, f"{msat_to_sat(amount_msat):,}")
    console.print(table)


@app.command()
def transactions(
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """List Lightning transactions."""
    txs = _run(lambda service: service.list_transactions())

    if as_json:
        _echo_json([tx.to_dict() for tx in txs])
        return

    if not txs:
        typer.echo("No transactions found")
        return

    table = Table(title="Lightning Transactions", show_header=True)
    table.add_column("Type")
    table.add_column("Amount (sat)", justify="right")
    table.add_column("Fee (sat)", justify="right")
    table.add_column("Created")
    table.add_column("Settled")
    table.add_column("Invoice", overflow="fold")
    for tx in txs:
        table.add_row(
            str(tx.type),
            f"{msat_to_sat(tx.amount_msat):,}",
            f"{msat_to_sat(tx.fees_paid_msat):,}",
            _format_time(tx.created_at),
            _format_time(tx.settled_at),
            tx.invoice,
        )
    console.print(table)


@app.command()
def invoice(
    amount_sat: int = typer.Argument(..., min=1, help="Amount in satoshis"),
    description: str = typer.Option("", help="Invoice description"),
) -> None:
    """Create a Lightning invoice."""
    tx = _run(lambda service: service.make_invoice(sat_to_msat(amount_sat), description))

    typer.echo("Lightning Invoice Created:")
    typer.echo(f"  Amount: {amount_sat:,} sat")
    typer.echo(f"  Invoice: {tx.invoice}")


@app.command()
def lookup(payment_hash: str = typer.Argument(..., help="Payment hash (hex)")) -> None:
    """Look up an incoming payment."""
    tx = _run(lambda service: service.lookup_invoice(payment_hash))

    typer.echo(f"Invoice: {tx.invoice}")
    typer.echo(f"  Payment Hash: {tx.payment_hash}")
    typer.echo(f"  Settled: {'yes' if tx.is_settled else 'no'}")
    if tx.is_settled:
        typer.echo(f"  Settled At: {_format_time(tx.settled_at)}")


@app.command()
def pay(
    payment_request: str = typer.Argument(..., help="Invoice, offer or lightning address"),
    amount_sat: int | None = typer.Option(None, min=1, help="Amount for zero-amount invoices"),
) -> None:
    """Pay a Lightning invoice."""
    result = _run(lambda service: service.send_payment_sync(payment_request, amount_sat))

    typer.echo("Payment sent")
    typer.echo(f"  Preimage: {result.preimage}")


@app.command()
def capabilities() -> None:
    """List the NIP-47 methods this client supports."""
    service = get_service()
    for method in service.get_supported_nip47_methods():
        typer.echo(method)
    notification_types = service.get_supported_nip47_notification_types()
    typer.echo(f"Notifications: {', '.join(notification_types) or 'none'}")
    asyncio.run(service.aclose())


if __name__ == "__main__":
    app()
