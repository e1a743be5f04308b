"""
Product listing reads for the public directory.

Every query shares the same base filters (active products, optional
category / name / location, optional suspended-vendor hiding) and can be
narrowed to or away from a set of vendor ids.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol, Tuple

from ..schemas.directory import DirectoryFilters, SortMode, VendorFilter, VendorFilterMode

logger = logging.getLogger(__name__)

PRODUCTS_TABLE = "products"
MICRO_CATEGORIES_TABLE = "micro_categories"
RANKED_PRODUCTS_RPC = "dir_ranked_products"
ACTIVE_STATUS = "ACTIVE"

VENDOR_EMBED_COLUMNS = (
    "id, company_name, city, state, state_id, city_id, "
    "seller_rating, kyc_status, verification_badge, trust_score, is_active"
)


class ListingSource(Protocol):
    """Filtered product reads used by the cross-tier paginator."""

    def count(self, filters: DirectoryFilters, vendor_filter: Optional[VendorFilter]) -> int:
        ...

    def fetch(
        self,
        filters: DirectoryFilters,
        vendor_filter: Optional[VendorFilter],
        sort: SortMode,
        offset: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        ...


class SupabaseListingSource:
    """Listing source backed by the products table with embedded vendors."""

    def __init__(self, supabase, hide_inactive_vendors: bool = True):
        self.supabase = supabase
        self.hide_inactive_vendors = hide_inactive_vendors

    def _apply_filters(self, query, filters: DirectoryFilters):
        query = query.eq("status", ACTIVE_STATUS)

        if self.hide_inactive_vendors:
            query = query.eq("vendors.is_active", True)
        if filters.micro_category_id:
            query = query.eq("micro_category_id", filters.micro_category_id)
        if filters.q:
            query = query.ilike("name", f"%{filters.q}%")
        if filters.state_id:
            query = query.eq("vendors.state_id", filters.state_id)
        if filters.city_id:
            query = query.eq("vendors.city_id", filters.city_id)

        return query

    @staticmethod
    def _apply_vendor_filter(query, vendor_filter: Optional[VendorFilter]):
        if vendor_filter is None or not vendor_filter.vendor_ids:
            return query

        ids = list(vendor_filter.vendor_ids)
        if vendor_filter.mode == VendorFilterMode.INCLUDE:
            return query.in_("vendor_id", ids)
        return query.not_.in_("vendor_id", ids)

    @staticmethod
    def _apply_sort(query, sort: SortMode):
        if sort == SortMode.PRICE_ASC:
            return query.order("price", desc=False)
        if sort == SortMode.PRICE_DESC:
            return query.order("price", desc=True)
        return query.order("created_at", desc=True)

    @staticmethod
    def _matches_nothing(vendor_filter: Optional[VendorFilter]) -> bool:
        # An empty inclusion list can never match
        return (
            vendor_filter is not None
            and vendor_filter.mode == VendorFilterMode.INCLUDE
            and not vendor_filter.vendor_ids
        )

    def count(self, filters: DirectoryFilters, vendor_filter: Optional[VendorFilter]) -> int:
        if self._matches_nothing(vendor_filter):
            return 0

        # The vendors embed must stay in the head query for vendors.* filters
        query = self.supabase.table(PRODUCTS_TABLE)\
            .select("id, vendors!inner(id)", count="exact", head=True)
        query = self._apply_filters(query, filters)
        query = self._apply_vendor_filter(query, vendor_filter)

        result = query.execute()
        return int(result.count or 0)

    def fetch(
        self,
        filters: DirectoryFilters,
        vendor_filter: Optional[VendorFilter],
        sort: SortMode,
        offset: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        if self._matches_nothing(vendor_filter) or limit <= 0:
            return []

        query = self.supabase.table(PRODUCTS_TABLE)\
            .select(f"*, vendors!inner({VENDOR_EMBED_COLUMNS})")
        query = self._apply_filters(query, filters)
        query = self._apply_vendor_filter(query, vendor_filter)
        query = self._apply_sort(query, sort)
        query = query.range(offset, offset + limit - 1)

        result = query.execute()
        return result.data or []

    def fetch_ranked(
        self,
        filters: DirectoryFilters,
        sort: SortMode,
        offset: int,
        limit: int,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Ranked page from the dir_ranked_products database function.

        Each row carries the overall total_count, which is stripped from
        the returned rows. Paging past the end probes once for the total.
        """
        rows = self._call_ranked_rpc(filters, sort, offset, limit)
        total_count = int(rows[0].get("total_count") or 0) if rows else 0

        if not rows and offset > 0:
            try:
                probe = self._call_ranked_rpc(filters, sort, 0, 1)
            except Exception as e:
                logger.warning(f"Ranked products total probe failed: {e}")
                probe = []
            if probe:
                total_count = int(probe[0].get("total_count") or 0)

        cleaned = [
            {key: value for key, value in row.items() if key != "total_count"}
            for row in rows
        ]
        return cleaned, total_count

    def _call_ranked_rpc(
        self,
        filters: DirectoryFilters,
        sort: SortMode,
        offset: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        result = self.supabase.rpc(RANKED_PRODUCTS_RPC, {
            "p_micro_id": filters.micro_category_id,
            "p_city_id": filters.city_id,
            "p_state_id": filters.state_id,
            "p_q": filters.q or None,
            "p_sort": None if sort == SortMode.NEWEST else sort.value,
            "p_limit": limit,
            "p_offset": offset,
        }).execute()
        return result.data or []


class SupabaseCategoryResolver:
    """Resolves a micro-category slug to its id."""

    def __init__(self, supabase):
        self.supabase = supabase

    def resolve(self, slug: str) -> Optional[str]:
        if not slug:
            return None

        # Use .limit(1) instead of .maybe_single() to avoid exception on no results
        result = self.supabase.table(MICRO_CATEGORIES_TABLE)\
            .select("id")\
            .eq("slug", slug)\
            .order("updated_at", desc=True)\
            .limit(1)\
            .execute()

        if result.data:
            return result.data[0].get("id")
        return None
