"""
Directory Search Schemas

Pydantic models for the public product directory: search filters,
pagination, vendor restrictions and the response envelopes.
"""
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

from ..core.params import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE,
    MAX_PAGE_SIZE,
    MIN_PAGE,
    MIN_PAGE_SIZE,
    clamp_int,
    first_present,
    first_valid_id,
    safe_query_text,
)


# ============================================================================
# Sorting
# ============================================================================

class SortMode(str, Enum):
    """Ordering applied inside each tier group."""
    NEWEST = "newest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortMode":
        """Anything other than price_asc / price_desc sorts newest first."""
        text = str(value or "").strip()
        if text == cls.PRICE_ASC.value:
            return cls.PRICE_ASC
        if text == cls.PRICE_DESC.value:
            return cls.PRICE_DESC
        return cls.NEWEST


# ============================================================================
# Filters and pagination
# ============================================================================

class DirectoryFilters(BaseModel):
    """Listing filters shared by every tier group."""
    model_config = ConfigDict(frozen=True)

    q: str = ""
    micro_category_id: Optional[str] = None
    state_id: Optional[str] = None
    city_id: Optional[str] = None


class PageRequest(BaseModel):
    """1-based page request; out-of-range values are clamped, never rejected."""
    model_config = ConfigDict(frozen=True)

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_raw(cls, page: Any, limit: Any) -> "PageRequest":
        return cls(
            page=clamp_int(page, DEFAULT_PAGE, MIN_PAGE, MAX_PAGE),
            limit=clamp_int(limit, DEFAULT_PAGE_SIZE, MIN_PAGE_SIZE, MAX_PAGE_SIZE),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class DirectoryQuery(BaseModel):
    """A sanitised public search request."""
    model_config = ConfigDict(frozen=True)

    q: str = ""
    micro_slug: str = ""
    sort: SortMode = SortMode.NEWEST
    page: PageRequest = PageRequest()
    state_id: Optional[str] = None
    city_id: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "DirectoryQuery":
        """
        Build a query from raw request parameters.

        The search page may send `q`, `query` or `term` for the text and
        `microSlug`, `micro` or `micro_slug` for the category.
        """
        return cls(
            q=safe_query_text(first_present(params.get("q"), params.get("query"), params.get("term"))),
            micro_slug=safe_query_text(
                first_present(params.get("microSlug"), params.get("micro"), params.get("micro_slug"))
            ),
            sort=SortMode.parse(params.get("sort")),
            page=PageRequest.from_raw(params.get("page"), params.get("limit")),
            state_id=first_valid_id(params.get("stateId"), params.get("state_id")),
            city_id=first_valid_id(params.get("cityId"), params.get("city_id")),
        )

    def to_filters(self, micro_category_id: Optional[str]) -> DirectoryFilters:
        return DirectoryFilters(
            q=self.q,
            micro_category_id=micro_category_id,
            state_id=self.state_id,
            city_id=self.city_id,
        )


class VendorFilterMode(str, Enum):
    INCLUDE = "in"
    EXCLUDE = "not_in"


class VendorFilter(BaseModel):
    """Restrict listings to (or away from) a set of vendor ids."""
    model_config = ConfigDict(frozen=True)

    mode: VendorFilterMode
    vendor_ids: Tuple[str, ...] = ()

    @classmethod
    def include(cls, vendor_ids) -> "VendorFilter":
        return cls(mode=VendorFilterMode.INCLUDE, vendor_ids=tuple(vendor_ids))

    @classmethod
    def exclude(cls, vendor_ids) -> "VendorFilter":
        return cls(mode=VendorFilterMode.EXCLUDE, vendor_ids=tuple(vendor_ids))


# ============================================================================
# Responses
# ============================================================================

class ProductSearchResponse(BaseModel):
    """Successful directory search envelope."""
    success: bool = True
    data: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0


class ErrorResponse(BaseModel):
    """Failure envelope shared by every directory error."""
    success: bool = False
    error: str
    details: Optional[str] = None
