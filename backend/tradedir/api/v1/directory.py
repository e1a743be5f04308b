"""
Public Directory API Endpoints

Unauthenticated product search for the trade directory. Listings are
ranked by the vendor's active plan tier and paginated across tiers.
Rate limited per client IP.
"""
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.concurrency import run_in_threadpool

from ...core.config import settings
from ...dependencies.directory import get_directory_service
from ...schemas.directory import DirectoryQuery, ErrorResponse, ProductSearchResponse
from ...services.directory_ranking import DirectoryRankingService

logger = logging.getLogger(__name__)
router = APIRouter()

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

PRODUCTS_FAILED = "DIR_PRODUCTS_FAILED"


async def handle_ranked_products(request: Request, service: DirectoryRankingService):
    query = DirectoryQuery.from_params(request.query_params)

    try:
        page = await run_in_threadpool(service.search, query)
    except Exception as e:
        logger.error(f"Directory search failed (q={query.q!r}, page={query.page.page}): {e}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=PRODUCTS_FAILED, details=str(e)).model_dump(),
        )

    return ProductSearchResponse(data=page.rows, count=page.total_count)


@router.get("/products", response_model=ProductSearchResponse)
@limiter.limit(settings.directory_rate_limit)
async def get_products(
    request: Request,
    service: DirectoryRankingService = Depends(get_directory_service),
):
    """
    Search active products, ranked by vendor plan tier.

    Query parameters (all optional, never rejected):
    - **q** / query / term: name substring, truncated to 100 characters
    - **microSlug** / micro / micro_slug: category slug
    - **sort**: price_asc, price_desc, anything else is newest first
    - **page**: 1-based, clamped to [1, 5000]
    - **limit**: page size, clamped to [1, 50]
    - **stateId** / state_id, **cityId** / city_id: vendor location

    Returns `{success, data, count}` where count spans every tier.
    """
    return await handle_ranked_products(request, service)


@router.get("/search", response_model=ProductSearchResponse)
@limiter.limit(settings.directory_rate_limit)
async def search_products(
    request: Request,
    service: DirectoryRankingService = Depends(get_directory_service),
):
    """Alias of /products used by the search page."""
    return await handle_ranked_products(request, service)
