"""
Shared test configuration.

Settings are read when tradedir.core.config is first imported, so the
required environment is seeded here before any test module imports the app.
"""
import os

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("DIRECTORY_RATE_LIMIT", "1000/minute")
os.environ.setdefault("DIRECTORY_RANKING_RPC_ENABLED", "false")
os.environ.setdefault("DIRECTORY_COUNT_ALL_TIERS", "true")

import pytest

from fakes import FakeCategoryResolver, FakeListingSource, FakeSubscriptionSource, make_listings, subscription


@pytest.fixture
def tiered_catalog():
    """
    Diamond vendor with 3 listings, Gold vendor with none, Trial vendor
    with 5 and an unsubscribed vendor with 10.
    """
    listings = (
        make_listings("vendor-diamond", 3)
        + make_listings("vendor-trial", 5)
        + make_listings("vendor-plain", 10)
    )
    subscriptions = [
        subscription("vendor-diamond", "Diamond Annual", days_ago=30),
        subscription("vendor-gold", "Gold", days_ago=10),
        subscription("vendor-trial", "Free Trial", days_ago=2),
    ]
    return FakeListingSource(listings), FakeSubscriptionSource(subscriptions)


@pytest.fixture
def category_resolver():
    return FakeCategoryResolver({"steel-pipes": "micro-1"})
