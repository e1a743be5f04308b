"""
Vendors Command Module

Show which tier each subscribed vendor currently ranks in.
"""
import typer
from collections import Counter
from datetime import datetime, timezone
from rich.console import Console
from rich.table import Table

from tradedir.core.tiers import PlanTier
from tradedir.services.plan_resolver import ActivePlanResolver, SupabaseSubscriptionSource

app = typer.Typer(help="Vendor plan inspection")
console = Console()


@app.command("plans")
def list_vendor_plans(
    limit: int = typer.Option(50, "--limit", "-l", help="Maximum vendors to display"),
    summary: bool = typer.Option(False, "--summary", help="Only show vendor counts per tier"),
):
    """List vendors with an active plan, highest tier first."""
    from ..config import get_supabase_client

    try:
        resolver = ActivePlanResolver(SupabaseSubscriptionSource(get_supabase_client()))
        plan_map = resolver.resolve(datetime.now(timezone.utc))
    except Exception as e:
        console.print(f"[bold red]❌ Error: {e}[/bold red]")
        raise typer.Exit(1)

    if not plan_map.tier_by_vendor:
        console.print("[yellow]No vendors with an active plan.[/yellow]")
        return

    if summary:
        counts = Counter(plan_map.tier_by_vendor.values())
        table = Table(title="Subscribed vendors per tier")
        table.add_column("Tier", style="bold cyan")
        table.add_column("Vendors", justify="right", style="green")
        for tier in PlanTier.ordered():
            table.add_row(tier.label, str(counts.get(tier, 0)))
        console.print(table)
        return

    ranked = sorted(
        plan_map.tier_by_vendor.items(),
        key=lambda item: item[1].priority,
        reverse=True,
    )[:limit]

    table = Table(title=f"Vendor plans ({len(ranked)} of {len(plan_map.tier_by_vendor)} shown)")
    table.add_column("Vendor ID", style="dim")
    table.add_column("Tier", style="bold cyan")
    table.add_column("Priority", justify="right", style="green")
    table.add_column("Plan")

    for vendor_id, tier in ranked:
        table.add_row(str(vendor_id), tier.label, str(tier.priority), plan_map.plan_name_for(vendor_id))

    console.print(table)
