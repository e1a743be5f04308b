#!/usr/bin/env python3
"""
Trade Directory CLI - Main Entry Point

Usage:
    dircli tiers list
    dircli tiers classify "<plan name>"
    dircli vendors plans [--summary]
    dircli products search [--q steel] [--micro pipes] [--page 2]
    dircli config
"""
import typer
from rich.console import Console

from . import __version__
from .commands import products, tiers, vendors

# Create main Typer app
app = typer.Typer(
    name="dircli",
    help="Trade Directory CLI - Tier ranking inspection",
    add_completion=False
)

# Add sub-commands
app.add_typer(tiers.app, name="tiers", help="Plan tiers")
app.add_typer(vendors.app, name="vendors", help="Vendor plans")
app.add_typer(products.app, name="products", help="Directory search")

console = Console()


@app.command()
def version():
    """Show CLI version."""
    console.print(f"[bold blue]Trade Directory CLI[/bold blue] v{__version__}")


@app.command("config")
def check_config():
    """Check CLI configuration."""
    from .config import get_config

    config = get_config()
    missing = config.validate()

    if missing:
        console.print("[bold red]❌ Missing Configuration:[/bold red]")
        for item in missing:
            console.print(f"   • {item}")
        console.print("\n[dim]Set these as environment variables or in ~/.dircli/.env[/dim]")
        raise typer.Exit(1)

    console.print("[bold green]✅ Configuration Valid[/bold green]")
    console.print(f"   Supabase: {config.supabase.url[:40]}...")
    console.print(f"   Count all tiers: {config.directory.count_all_tiers}")
    console.print(f"   Hide inactive vendors: {config.directory.hide_inactive_vendors}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
