"""Command-line interface using Typer."""

import asyncio
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.table import Table

from crypto_journal import __version__
from crypto_journal.config import get_settings

app = typer.Typer(
    name="crypto-journal",
    help="Crypto Trading Journal - trade log and performance analytics",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"Crypto Trading Journal version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Crypto Trading Journal CLI."""
    pass


def _period_params(user_id: str, period: str, start: str | None, end: str | None) -> dict:
    params = {"user_id": user_id, "period": period}
    if start:
        params["start_date"] = start
    if end:
        params["end_date"] = end
    return params


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Host to bind to"),
    port: int = typer.Option(None, "--port", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
):
    """Start the FastAPI server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print(f"[green]Starting Crypto Trading Journal API on {host}:{port}[/green]")
    uvicorn.run(
        "crypto_journal.main:app",
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def summary(
    user_id: str = typer.Option(..., "--user", "-u", help="Journal owner"),
    period: str = typer.Option("monthly", "--period", "-p", help="daily, weekly, monthly, yearly, custom or all"),
    start: str = typer.Option(None, "--start", help="Custom period start (YYYY-MM-DD)"),
    end: str = typer.Option(None, "--end", help="Custom period end (YYYY-MM-DD)"),
):
    """Show performance stats for a period."""
    base_url = get_settings().api_base_url

    async def do_summary():
        async with httpx.AsyncClient() as client:
            try:
                response = await client.get(
                    f"{base_url}/analytics",
                    params=_period_params(user_id, period, start, end),
                    timeout=30.0,
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                console.print(f"[red]✗ Request failed: {e}[/red]")
                console.print("[yellow]Make sure the API server is running (crypto-journal serve)[/yellow]")
                raise typer.Exit(code=1)

        data = response.json()
        stats = data["summary"]

        table = Table(title=f"Performance ({data['period']})")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Total P&L", f"${float(stats['total_pnl']):,.2f}")
        table.add_row("Trades", str(stats["total_trades"]))
        table.add_row("Win Rate", f"{stats['win_rate']:.1f}%")
        table.add_row("Wins / Losses", f"{stats['wins']} / {stats['losses']}")
        table.add_row("Avg Win", f"${float(stats['avg_win']):,.2f}")
        table.add_row("Avg Loss", f"${float(stats['avg_loss']):,.2f}")
        table.add_row("Profit Factor", f"{stats['profit_factor']:.2f}")
        table.add_row("Best Trade", f"${float(stats['best_trade_pnl']):,.2f}")
        console.print(table)

        for dimension, title in (("strategy", "By Strategy"), ("exchange", "By Exchange")):
            entries = data["breakdowns"].get(dimension) or []
            if not entries:
                continue
            breakdown = Table(title=title)
            breakdown.add_column("Group", style="cyan")
            breakdown.add_column("Trades", justify="right")
            breakdown.add_column("Win Rate", justify="right")
            breakdown.add_column("P&L", justify="right")
            for entry in entries:
                pnl = float(entry["total_pnl"])
                color = "green" if pnl >= 0 else "red"
                breakdown.add_row(
                    entry["key"],
                    str(entry["total_trades"]),
                    f"{entry['win_rate']:.1f}%",
                    f"[{color}]${pnl:,.2f}[/{color}]",
                )
            console.print(breakdown)

    asyncio.run(do_summary())


@app.command()
def report(
    user_id: str = typer.Option(..., "--user", "-u", help="Journal owner"),
    period: str = typer.Option("monthly", "--period", "-p", help="daily, weekly, monthly, yearly, custom or all"),
    start: str = typer.Option(None, "--start", help="Custom period start (YYYY-MM-DD)"),
    end: str = typer.Option(None, "--end", help="Custom period end (YYYY-MM-DD)"),
    output: Path = typer.Option(None, "--output", "-o", help="File to write (defaults to the server's file name)"),
):
    """Download the P&L report for a period as CSV."""
    base_url = get_settings().api_base_url

    async def do_report():
        async with httpx.AsyncClient() as client:
            console.print(f"[yellow]Exporting {period} report...[/yellow]")
            try:
                response = await client.get(
                    f"{base_url}/reports/trades.csv",
                    params=_period_params(user_id, period, start, end),
                    timeout=30.0,
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                console.print(f"[red]✗ Export failed: {e}[/red]")
                console.print("[yellow]Make sure the API server is running (crypto-journal serve)[/yellow]")
                raise typer.Exit(code=1)

        target = output
        if target is None:
            disposition = response.headers.get("content-disposition", "")
            name = disposition.split("filename=")[-1].strip('"') if "filename=" in disposition else "trading-report.csv"
            target = Path(name)

        target.write_text(response.text, encoding="utf-8")
        console.print(f"[green]✓ Report written to {target}[/green]")

    asyncio.run(do_report())


@app.command()
def status():
    """Show journal configuration."""
    settings = get_settings()

    console.print(f"[bold]Crypto Trading Journal v{__version__}[/bold]")
    console.print(f"  API: {settings.api_base_url}")
    console.print(f"  Timezone: {settings.timezone}")
    console.print(f"  Default period: {settings.default_period.value}")
    console.print("[green]Status: Ready[/green]")


if __name__ == "__main__":
    app()
