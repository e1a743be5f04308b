"""
Tiers Command Module

Inspect the plan tier ladder and check how plan names are classified.
"""
import typer
from rich.console import Console
from rich.table import Table

from tradedir.core.tiers import PlanTier, PLAN_KEYWORD_RULES, classify_plan

app = typer.Typer(help="Plan tier inspection")
console = Console()


@app.command("list")
def list_tiers():
    """List tiers in ranking order with their matching keywords."""
    keywords_by_tier = {tier: ", ".join(keywords) for keywords, tier in PLAN_KEYWORD_RULES}

    table = Table(title="Plan Tiers (highest first)")
    table.add_column("Key", style="bold cyan")
    table.add_column("Label")
    table.add_column("Priority", justify="right", style="green")
    table.add_column("Keywords", style="dim")

    for tier in PlanTier.ordered():
        table.add_row(tier.key, tier.label, str(tier.priority), keywords_by_tier.get(tier, ""))

    console.print(table)


@app.command("classify")
def classify(
    plan_name: str = typer.Argument("", help="Plan display name, e.g. 'Gold Plus'")
):
    """Show which tier a plan name ranks in."""
    tier = classify_plan(plan_name)
    console.print(f"[bold]{plan_name or '(empty)'}[/bold] → [cyan]{tier.key}[/cyan] ({tier.label}, priority {tier.priority})")
