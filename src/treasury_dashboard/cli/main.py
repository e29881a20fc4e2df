"""CLI for the treasury dashboard."""

import asyncio
import logging
from enum import StrEnum

import typer
import uvicorn
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install

from treasury_dashboard.core.aggregator import DashboardAggregator
from treasury_dashboard.core.models import ViewModel
from treasury_dashboard.data import load_settings
from treasury_dashboard.presentation.rows import DashboardRows, PositionRow, build_rows

# Install rich traceback handler
install(show_locals=False)

app = typer.Typer(
    name="treasury-dashboard",
    help="Render a wallet's Zerion positions and Zapper app balances",
    add_completion=False,
)

console = Console()


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=debug)],
        force=True,
    )
    if not debug:
        # httpx logs every request at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """
    Serve the dashboard page.

    Examples:

        treasury-dashboard serve --port 8080
    """
    _setup_logging(debug)
    console.print(f"[bold cyan]Serving dashboard on[/bold cyan] http://{host}:{port}/")
    uvicorn.run(
        "treasury_dashboard.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        log_level="debug" if debug else "info",
        log_config=None,
    )


@app.command()
def snapshot(
    address: str | None = typer.Option(None, "--address", "-a", help="Wallet address (defaults to the configured one)"),
    format: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--format",
        "-f",
        help="Output format",
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """
    Fetch both vendors once and print the merged view.

    Examples:

        # Tables for the configured wallet
        treasury-dashboard snapshot

        # Raw view model as JSON
        treasury-dashboard snapshot --address 0xABC... --format json
    """
    _setup_logging(debug)

    try:
        settings = load_settings()
        wallet = address or settings.wallet_address
        console.print(f"\n[bold cyan]Fetching positions for:[/bold cyan] {wallet}")

        with console.status("Fetching Zerion positions and Zapper balances..."):
            view = asyncio.run(DashboardAggregator(settings).build_view(wallet))

        if format == OutputFormat.JSON:
            _output_json(view)
        else:
            _output_tables(build_rows(view))

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if debug:
            raise
        raise typer.Exit(1)


def _position_table(title: str, rows: list[PositionRow], with_price: bool) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Asset", style="cyan")
    table.add_column("Chain", style="blue")
    if with_price:
        table.add_column("Price", justify="right")
    table.add_column("Balance", style="white", justify="right")
    table.add_column("Value", style="bold green", justify="right")
    table.add_column("24h", justify="right")

    for row in rows:
        change = ""
        if row.change:
            colour = "green" if row.change.is_positive else "red"
            change = f"[{colour}]{row.change.text}[/{colour}]"
        cells = [row.name, row.subtitle]
        if with_price:
            cells.append(row.price or "")
        cells.extend([row.balance, row.value, change])
        table.add_row(*cells)

    return table


def _output_tables(rows: DashboardRows) -> None:
    """Output the dashboard as rich tables."""
    sections = [
        ("Wallet", rows.wallet, True),
        ("Uniswap V3", rows.uniswap, False),
        ("Bancor", rows.bancor, False),
    ]
    shown = False
    for title, section_rows, with_price in sections:
        if section_rows is None:
            continue
        shown = True
        console.print("\n")
        console.print(_position_table(title, section_rows, with_price))

    if rows.app is not None:
        shown = True
        console.print(f"\n[bold]{rows.app.name}[/bold] ({rows.app.network}) [bold green]{rows.app.total}[/bold green]")
        for product in rows.app.products:
            table = Table(
                title=f"{product.label} · {product.subtotal}",
                show_header=True,
                header_style="bold magenta",
            )
            table.add_column("Asset", style="cyan")
            table.add_column("Balance", justify="right")
            table.add_column("Value", style="bold green", justify="right")
            for row in product.rows:
                table.add_row(row.label, row.balance, row.value)
            console.print(table)

    if not shown:
        console.print("\n[yellow]No data: both upstream requests failed or returned nothing[/yellow]")
    console.print("\n")


def _output_json(view: ViewModel) -> None:
    """Output the view model as JSON."""
    console.print_json(view.to_json())


if __name__ == "__main__":
    app()
