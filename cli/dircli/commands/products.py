"""
Products Command Module

Run the public directory search from the terminal to see exactly how
listings are ranked across plan tiers.
"""
import typer
from typing import Optional
from rich.console import Console
from rich.table import Table

from tradedir.schemas.directory import DirectoryQuery
from tradedir.services.directory_ranking import DirectoryRankingService
from tradedir.services.listing_source import SupabaseCategoryResolver, SupabaseListingSource
from tradedir.services.plan_resolver import ActivePlanResolver, SupabaseSubscriptionSource

app = typer.Typer(help="Directory product search")
console = Console()


def build_service(client) -> DirectoryRankingService:
    """Ranking service over a Supabase client, configured from the CLI env."""
    from ..config import get_config

    directory = get_config().directory
    return DirectoryRankingService(
        listings=SupabaseListingSource(client, hide_inactive_vendors=directory.hide_inactive_vendors),
        plan_resolver=ActivePlanResolver(SupabaseSubscriptionSource(client)),
        categories=SupabaseCategoryResolver(client),
        count_all_tiers=directory.count_all_tiers,
    )


@app.command("search")
def search(
    q: str = typer.Option("", "--q", "-q", help="Name substring"),
    micro: str = typer.Option("", "--micro", "-m", help="Micro-category slug"),
    sort: str = typer.Option("newest", "--sort", "-s", help="newest, price_asc or price_desc"),
    page: int = typer.Option(1, "--page", "-p", help="1-based page number"),
    limit: int = typer.Option(20, "--limit", "-l", help="Page size (max 50)"),
    state_id: Optional[str] = typer.Option(None, "--state", help="Vendor state id"),
    city_id: Optional[str] = typer.Option(None, "--city", help="Vendor city id"),
):
    """Show one ranked page of directory results."""
    from ..config import get_supabase_client

    query = DirectoryQuery.from_params({
        "q": q,
        "microSlug": micro,
        "sort": sort,
        "page": page,
        "limit": limit,
        "stateId": state_id,
        "cityId": city_id,
    })

    try:
        result = build_service(get_supabase_client()).search(query)
    except Exception as e:
        console.print(f"[bold red]❌ Error: {e}[/bold red]")
        raise typer.Exit(1)

    if not result.rows:
        console.print(f"[yellow]No products on page {query.page.page} ({result.total_count} total).[/yellow]")
        return

    first = query.page.offset + 1
    table = Table(title=f"Products {first}-{first + len(result.rows) - 1} of {result.total_count}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Tier", style="bold cyan")
    table.add_column("Product", style="bold")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Vendor")
    table.add_column("Plan", style="dim")

    for position, row in enumerate(result.rows, start=first):
        vendor = row.get("vendors") or {}
        price = row.get("price")
        table.add_row(
            str(position),
            str(row.get("vendor_plan_tier", "")),
            str(row.get("name", "")),
            "" if price is None else str(price),
            str(vendor.get("company_name") or row.get("vendor_id", "")),
            str(row.get("vendor_plan_name", "")),
        )

    console.print(table)
