"""
Dependency for building the directory ranking service.
"""

from tradedir.core.config import settings
from tradedir.core.supabase_client import supabase_client
from tradedir.services.directory_ranking import DirectoryRankingService
from tradedir.services.listing_source import SupabaseCategoryResolver, SupabaseListingSource
from tradedir.services.plan_resolver import ActivePlanResolver, SupabaseSubscriptionSource


def build_directory_service(supabase) -> DirectoryRankingService:
    """Wire the Supabase-backed sources into a ranking service."""
    return DirectoryRankingService(
        listings=SupabaseListingSource(
            supabase,
            hide_inactive_vendors=settings.directory_hide_inactive_vendors,
        ),
        plan_resolver=ActivePlanResolver(SupabaseSubscriptionSource(supabase)),
        categories=SupabaseCategoryResolver(supabase),
        count_all_tiers=settings.directory_count_all_tiers,
        use_ranked_rpc=settings.directory_ranking_rpc_enabled,
    )


def get_directory_service() -> DirectoryRankingService:
    """
    FastAPI dependency returning a request-scoped ranking service.

    Uses the service role client; the directory is public and read-only.
    """
    return build_directory_service(supabase_client.service_client)
