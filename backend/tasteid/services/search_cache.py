"""Search result cache using Redis"""

import hashlib
import json
import redis
from typing import List, Optional
from datetime import datetime

from ..config import settings
from ..schemas.search import SearchResult
from ..utils.logging import get_logger
from ..utils.metrics import increment_cache_hit, increment_cache_miss

logger = get_logger(__name__)


class SearchCacheService:
    """
    Caches provider search results per (provider, query)

    Upstream search APIs are slow and rate limited, and their answers change
    rarely. Any Redis failure is logged and treated as a cache miss.
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None, ttl: Optional[int] = None):
        self.redis_client = redis_client or redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            password=settings.REDIS_PASSWORD,
            decode_responses=True,
            socket_connect_timeout=1,
            socket_timeout=1,
        )
        self.cache_ttl = ttl or settings.SEARCH_CACHE_TTL

    def get(self, provider: str, query: str) -> Optional[List[SearchResult]]:
        """
        Get cached results

        Returns:
            Cached results, or None on a miss or Redis failure
        """
        try:
            value = self.redis_client.get(self._get_cache_key(provider, query))
        except redis.RedisError as e:
            logger.warning("Search cache read failed", provider=provider, error=str(e))
            increment_cache_miss()
            return None

        if not value:
            increment_cache_miss()
            return None

        increment_cache_hit()
        data = json.loads(value)
        return [SearchResult(**result) for result in data.get("results", [])]

    def set(self, provider: str, query: str, results: List[SearchResult], ttl: Optional[int] = None) -> bool:
        """
        Cache results for a query

        Returns:
            True if successful, False otherwise
        """
        value = json.dumps({
            "results": [result.model_dump(mode="json") for result in results],
            "cached_at": datetime.utcnow().isoformat(),
            "provider": provider,
        })
        try:
            self.redis_client.setex(self._get_cache_key(provider, query), ttl or self.cache_ttl, value)
            return True
        except redis.RedisError as e:
            logger.warning("Search cache write failed", provider=provider, error=str(e))
            return False

    def health_check(self) -> bool:
        """Check Redis connection health"""
        try:
            return bool(self.redis_client.ping())
        except redis.RedisError:
            return False

    def _get_cache_key(self, provider: str, query: str) -> str:
        digest = hashlib.sha1(query.strip().lower().encode("utf-8")).hexdigest()
        return f"search:{provider}:{digest}"


def get_search_cache() -> SearchCacheService:
    """FastAPI dependency for the search cache"""
    return SearchCacheService()
