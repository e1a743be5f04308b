"""
Tiered directory ranking and cross-tier pagination.

Listings are ranked by the plan tier of their vendor (Diamond first, Trial
last) with vendors that hold no active subscription ranked below every tier.
A page is cut from that global order by walking the tier groups in priority
order and carrying the remaining offset and page budget from group to group.
"""
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from functools import reduce
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from ..schemas.directory import (
    DirectoryFilters,
    DirectoryQuery,
    PageRequest,
    SortMode,
    VendorFilter,
)
from .listing_source import ListingSource
from .plan_resolver import ActivePlanResolver, VendorPlanMap

logger = logging.getLogger(__name__)

# Above this many subscribed vendors the remainder group is queried
# without the NOT IN exclusion, so subscribed vendors' listings can be
# counted and returned a second time at the bottom of the ranking.
REMAINDER_EXCLUSION_CAP = 1000

REMAINDER_GROUP = "remainder"


@dataclass(frozen=True)
class TierGroup:
    """One slice of the ranking: a tier's vendors, or the unsubscribed remainder."""
    name: str
    vendor_filter: Optional[VendorFilter]


@dataclass(frozen=True)
class PageWindow:
    """Fold state carried from one tier group to the next."""
    skip: int
    remaining: int
    rows: Tuple[Dict[str, Any], ...] = ()
    total_count: int = 0

    @property
    def is_full(self) -> bool:
        return self.remaining <= 0


@dataclass
class DirectoryPage:
    rows: List[Dict[str, Any]]
    total_count: int


def build_tier_groups(plan_map: VendorPlanMap) -> List[TierGroup]:
    """Tier groups in priority order followed by the remainder group."""
    groups = [
        TierGroup(name=tier.key, vendor_filter=VendorFilter.include(vendor_ids))
        for tier, vendor_ids in plan_map.buckets()
    ]

    subscribed_ids = plan_map.vendor_ids
    if len(subscribed_ids) > REMAINDER_EXCLUSION_CAP:
        logger.warning(
            f"{len(subscribed_ids)} subscribed vendors exceed the exclusion cap of "
            f"{REMAINDER_EXCLUSION_CAP}; remainder group is not filtered by vendor"
        )
        groups.append(TierGroup(name=REMAINDER_GROUP, vendor_filter=None))
    else:
        groups.append(TierGroup(name=REMAINDER_GROUP, vendor_filter=VendorFilter.exclude(subscribed_ids)))

    return groups


class CrossTierPaginator:
    """
    Cuts one page out of the tier-ordered listing set.

    With count_all_tiers (the default) every group is counted even after
    the page is full, so the total is identical on every page. Without it
    the walk stops as soon as the page is full and the total only covers
    the groups visited so far.
    """

    def __init__(self, listings: ListingSource, count_all_tiers: bool = True):
        self.listings = listings
        self.count_all_tiers = count_all_tiers

    def paginate(
        self,
        plan_map: VendorPlanMap,
        filters: DirectoryFilters,
        sort: SortMode,
        page: PageRequest,
    ) -> DirectoryPage:
        start = PageWindow(skip=page.offset, remaining=page.limit)

        window = reduce(
            lambda state, group: self._advance(state, group, filters, sort),
            build_tier_groups(plan_map),
            start,
        )
        return DirectoryPage(rows=list(window.rows), total_count=window.total_count)

    def _advance(
        self,
        window: PageWindow,
        group: TierGroup,
        filters: DirectoryFilters,
        sort: SortMode,
    ) -> PageWindow:
        if window.is_full and not self.count_all_tiers:
            return window

        group_count = self.listings.count(filters, group.vendor_filter)
        window = replace(window, total_count=window.total_count + group_count)

        if group_count <= 0 or window.is_full:
            return window

        if window.skip >= group_count:
            logger.debug(f"Skipping {group.name}: offset {window.skip} past {group_count} listings")
            return replace(window, skip=window.skip - group_count)

        rows = self.listings.fetch(filters, group.vendor_filter, sort, window.skip, window.remaining)
        logger.debug(f"Took {len(rows)} listings from {group.name} at offset {window.skip}")

        return replace(
            window,
            skip=0,
            remaining=max(0, window.remaining - len(rows)),
            rows=window.rows + tuple(rows),
        )


def annotate_listing(row: Dict[str, Any], plan_map: VendorPlanMap) -> Dict[str, Any]:
    """Attach the vendor's plan name, tier label and tier priority to a listing."""
    vendor_id = row.get("vendor_id")
    tier = plan_map.tier_for(vendor_id)
    plan_name = plan_map.plan_name_for(vendor_id)

    vendors = row.get("vendors")
    if vendors:
        vendors = {
            **vendors,
            "plan_name": plan_name,
            "plan_tier": tier.label,
            "plan_priority": tier.priority,
        }

    return {
        **row,
        "vendors": vendors,
        "vendor_plan_name": plan_name,
        "vendor_plan_tier": tier.label,
        "vendor_plan_priority": tier.priority,
    }


class CategoryResolver(Protocol):
    def resolve(self, slug: str) -> Optional[str]:
        ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DirectoryRankingService:
    """Runs a public directory search end to end."""

    def __init__(
        self,
        listings: ListingSource,
        plan_resolver: ActivePlanResolver,
        categories: CategoryResolver,
        count_all_tiers: bool = True,
        use_ranked_rpc: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.listings = listings
        self.plan_resolver = plan_resolver
        self.categories = categories
        self.paginator = CrossTierPaginator(listings, count_all_tiers=count_all_tiers)
        self.use_ranked_rpc = use_ranked_rpc
        self.clock = clock

    def search(self, query: DirectoryQuery) -> DirectoryPage:
        """
        Search active listings and return one ranked page.

        Any datastore failure propagates; partial pages are never returned.
        """
        micro_category_id = self.categories.resolve(query.micro_slug)
        filters = query.to_filters(micro_category_id)

        if self.use_ranked_rpc:
            ranked = self._search_ranked_rpc(query, filters)
            if ranked is not None:
                return ranked

        plan_map = self.plan_resolver.resolve(self.clock())
        page = self.paginator.paginate(plan_map, filters, query.sort, query.page)

        return DirectoryPage(
            rows=[annotate_listing(row, plan_map) for row in page.rows],
            total_count=page.total_count,
        )

    def _search_ranked_rpc(self, query: DirectoryQuery, filters: DirectoryFilters) -> Optional[DirectoryPage]:
        fetch_ranked = getattr(self.listings, "fetch_ranked", None)
        if fetch_ranked is None:
            return None

        try:
            rows, total_count = fetch_ranked(filters, query.sort, query.page.offset, query.page.limit)
        except Exception as e:
            logger.warning(f"dir_ranked_products RPC failed, using tier ranking: {e}")
            return None

        return DirectoryPage(rows=rows, total_count=total_count)
