"""
Tests for the dircli operator commands.
"""
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from dircli.main import app
from dircli.commands import products
from tradedir.services.directory_ranking import DirectoryRankingService
from tradedir.services.plan_resolver import ActivePlanResolver
from fakes import NOW, FakeSubscriptionSource, subscription

runner = CliRunner()


def test_tiers_list():
    result = runner.invoke(app, ["tiers", "list"])

    assert result.exit_code == 0
    assert "diamond" in result.output
    assert "700" in result.output


def test_tiers_classify_first_rule_wins():
    result = runner.invoke(app, ["tiers", "classify", "Gold Certified"])

    assert result.exit_code == 0
    assert "gold" in result.output
    assert "600" in result.output


def test_tiers_classify_empty_is_trial():
    result = runner.invoke(app, ["tiers", "classify"])

    assert result.exit_code == 0
    assert "trial" in result.output


@patch("dircli.config.get_supabase_client")
@patch("dircli.commands.products.build_service")
def test_products_search(mock_build_service, mock_client, tiered_catalog, category_resolver, monkeypatch):
    monkeypatch.setattr(products.console, "width", 200)
    listings, subscriptions = tiered_catalog
    mock_build_service.return_value = DirectoryRankingService(
        listings=listings,
        plan_resolver=ActivePlanResolver(subscriptions),
        categories=category_resolver,
        clock=lambda: NOW,
    )

    result = runner.invoke(app, ["products", "search", "--limit", "4"])

    assert result.exit_code == 0
    assert "of 18" in result.output
    assert "DIAMOND" in result.output


@patch("dircli.config.get_supabase_client")
@patch("dircli.commands.products.build_service")
def test_products_search_failure_exits_nonzero(mock_build_service, mock_client):
    service = MagicMock()
    service.search.side_effect = ConnectionError("connection refused")
    mock_build_service.return_value = service

    result = runner.invoke(app, ["products", "search"])

    assert result.exit_code == 1
    assert "connection refused" in result.output


@patch("dircli.commands.vendors.SupabaseSubscriptionSource")
@patch("dircli.config.get_supabase_client")
def test_vendor_plans_summary(mock_client, mock_source):
    mock_source.return_value = FakeSubscriptionSource([
        subscription("v1", "Gold"),
        subscription("v2", "Gold Plus"),
        subscription("v3", "Startup"),
    ])

    result = runner.invoke(app, ["vendors", "plans", "--summary"])

    assert result.exit_code == 0
    assert "GOLD" in result.output
    assert "STARTUP" in result.output


def test_config_reports_missing(monkeypatch):
    from dircli import config

    monkeypatch.setattr(config, "_config", None)
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)

    result = runner.invoke(app, ["config"])

    assert result.exit_code == 1
    assert "SUPABASE_URL" in result.output
