"""
Main CLI application for Early Buyer Tracker.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analyzer import run_analysis
from .config import Config
from .exceptions import ConfigError, TrackerError
from .models import AnalysisResult, WalletStatus
from .utils import format_number, format_percent, shorten_address

logger = logging.getLogger(__name__)


app = typer.Typer(
    name="early-buyers",
    help="Find the first wallets to receive a Solana token and check what they still hold."
)

console = Console()

STATUS_STYLES = {
    WalletStatus.HOLDING: "green",
    WalletStatus.SOLD_PART: "yellow",
    WalletStatus.SOLD_ALL: "red",
    WalletStatus.NO_ACTIVITY: "dim",
}


def load_config() -> Config:
    """Load application configuration."""
    try:
        return Config.from_env()
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        console.print(
            "\n[yellow]Please create a .env file with your API key:[/yellow]")
        console.print("HELIUS_API_KEY=your_key_here")
        raise typer.Exit(1)


def display_results_table(result: AnalysisResult):
    """Display results in a rich table."""
    stats = result.stats
    summary = Panel(
        f"Mint: [yellow]{result.mint}[/yellow]\n"
        f"Total supply: [green]{format_number(stats.total_supply)}[/green]\n"
        f"Early bought: [green]{format_number(stats.early_bought_sum)}[/green] "
        f"({format_percent(stats.early_bought_sum / stats.total_supply if stats.total_supply else None)})\n"
        f"Early remaining: [green]{format_number(stats.early_remaining_sum)}[/green] "
        f"({format_percent(stats.early_remaining_sum / stats.total_supply if stats.total_supply else None)})",
        title="Early Buyers",
        expand=False
    )
    console.print(summary)

    if not result.rows:
        console.print("[yellow]No early buyers found.[/yellow]")
        return

    table = Table(title=f"\nFirst {len(result.rows)} wallets")
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Wallet", style="magenta", no_wrap=True)
    table.add_column("SOL", justify="right")
    table.add_column("Status", no_wrap=True)
    table.add_column("Bought", justify="right")
    table.add_column("% Bought", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("% Remaining", justify="right")

    for i, row in enumerate(result.rows, 1):
        style = STATUS_STYLES.get(row.status, "white")
        table.add_row(
            str(i),
            shorten_address(row.wallet),
            format_number(row.sol_balance, decimals=3),
            f"[{style}]{row.status.value}[/{style}]",
            format_number(row.token_bought),
            format_percent(row.pct_supply_bought),
            format_number(row.remaining_tokens),
            format_percent(row.pct_supply_remaining),
        )

    console.print(table)


def report_error(message: str, output_format: str):
    """Print a fatal error as a single red line or a JSON error object."""
    if output_format == "json":
        typer.echo(json.dumps({"error": message}))
    else:
        console.print(f"[red]{message}[/red]")


def export_to_json(result: AnalysisResult, filepath: str):
    """Export analysis results to JSON."""
    with open(filepath, 'w') as jsonfile:
        json.dump(result.to_dict(), jsonfile, indent=2)


@app.command()
def track(
    mint: str = typer.Argument(..., help="Token mint address"),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", help="Number of early wallets to analyze (1-100)"),
    output_format: str = typer.Option(
        "table", "--format", "-f", help="Output format: table, json"),
    output_file: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output file path (json)"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show progress logging")
):
    """Find the earliest buyers of a token and their current holdings."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if output_format not in ("table", "json"):
        console.print(
            f"[yellow]Unsupported output format: {output_format}[/yellow]")
        raise typer.Exit(1)

    config = load_config()
    config.output_format = output_format

    try:
        if output_format == "table":
            with console.status(f"[cyan]Analyzing early buyers of {mint}...[/cyan]"):
                result = asyncio.run(run_analysis(mint, limit, config))
        else:
            result = asyncio.run(run_analysis(mint, limit, config))
    except TrackerError as e:
        report_error(str(e), output_format)
        raise typer.Exit(1)
    except Exception as e:
        logger.debug("Analysis failed", exc_info=True)
        report_error(str(e) or type(e).__name__, output_format)
        raise typer.Exit(1)

    if output_format == "table":
        display_results_table(result)
    elif not output_file:
        typer.echo(json.dumps(result.to_dict(), indent=2))

    if output_file:
        export_to_json(result, output_file)
        console.print(f"[green]Results exported to {output_file}[/green]")


@app.command()
def setup():
    """Setup the application by creating a .env file template."""
    env_content = """# Early Buyer Tracker Configuration

# Required: Helius API Key (get from https://dashboard.helius.dev)
HELIUS_API_KEY=your_helius_api_key_here

# Optional: endpoint overrides
# HELIUS_RPC_URL=https://mainnet.helius-rpc.com/
# HELIUS_API_URL=https://api-mainnet.helius-rpc.com/v0

# Analysis Settings
DEFAULT_LIMIT=50
MAX_PAGES=15
OVERSAMPLE_FACTOR=8
ENRICH_CONCURRENCY=5

# Output Settings
OUTPUT_FORMAT=table
"""

    env_path = Path(".env")
    if env_path.exists():
        console.print("[yellow].env file already exists![/yellow]")
        if not typer.confirm("Overwrite existing .env file?"):
            return

    with open(env_path, 'w') as f:
        f.write(env_content)

    console.print(f"[green]Created .env file at {env_path.absolute()}[/green]")
    console.print(
        "\n[yellow]Please edit the .env file and add your API key:[/yellow]")
    console.print("1. Get a Helius API key from https://dashboard.helius.dev")
    console.print(
        "2. Replace 'your_helius_api_key_here' with your real key")
    console.print("3. Run: early-buyers track <mint_address>")


if __name__ == "__main__":
    app()
