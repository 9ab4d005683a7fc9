"""Media search API endpoints"""

from fastapi import APIRouter, Depends, Query, Request

from ..config import settings
from ..schemas.item import MediaType
from ..schemas.search import SearchResponse
from ..services.search import get_provider
from ..services.search_cache import SearchCacheService, get_search_cache
from ..utils.rate_limit import limiter

router = APIRouter()


@router.get("/{media_type}", response_model=SearchResponse)
@limiter.limit(settings.SEARCH_RATE_LIMIT)
def search_media(
    request: Request,
    media_type: MediaType,
    query: str = Query("", max_length=200),
    cache: SearchCacheService = Depends(get_search_cache)
):
    """
    Search a media provider

    Results are ready to post to ``/collections/{id}/items``. Upstream
    failures degrade to fallback data or an empty list, never an error.
    """
    provider = get_provider(media_type)
    query = query.strip()

    try:
        results = cache.get(provider.name, query) if query else None
        if results is None:
            results = provider.search(query)
            if results:
                cache.set(provider.name, query, results)
    finally:
        provider.close()

    return SearchResponse(
        media_type=media_type,
        query=query,
        provider=provider.name,
        results=results,
    )
