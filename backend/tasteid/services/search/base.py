"""Common plumbing for media search providers"""

from typing import Any, Dict, List, Optional

import httpx

from ...config import settings
from ...exceptions import UpstreamError
from ...schemas.item import MediaType
from ...schemas.search import SearchResult
from ...utils.logging import get_logger
from ...utils.metrics import record_search

logger = get_logger(__name__)


def year_from_date(value: Optional[str]) -> Optional[str]:
    """'1999-03-30' -> '1999'"""
    if not value:
        return None
    year = str(value).split("-")[0].strip()
    return year or None


def filter_by_title(results: List[SearchResult], query: str) -> List[SearchResult]:
    lowered = query.lower()
    return [result for result in results if lowered in result.title.lower()]


class SearchProvider:
    """
    Base class for a single upstream search API

    Subclasses implement ``_search`` and may define ``FALLBACK``. The public
    ``search`` never raises: upstream failures are logged and degraded to the
    fallback results matching the query (often an empty list).
    """

    name = "base"
    media_type = MediaType.MIXED
    FALLBACK: List[SearchResult] = []
    # Serve the fallback when the upstream answers with nothing usable
    fallback_on_empty = False

    def __init__(self, client: Optional[httpx.Client] = None, timeout: Optional[float] = None):
        self.client = client or httpx.Client(
            timeout=timeout or settings.SEARCH_TIMEOUT_SECONDS,
            headers={"Accept": "application/json"},
        )
        self.page_size = settings.SEARCH_PAGE_SIZE

    def search(self, query: str) -> List[SearchResult]:
        """
        Search the upstream API

        Args:
            query: Free-text query

        Returns:
            Candidate items, possibly from the static fallback set
        """
        query = (query or "").strip()
        if not query:
            return []

        try:
            results = self._search(query)
        except UpstreamError as e:
            logger.warning("Search provider failed", provider=self.name, query=query, error=e.message)
            record_search(self.name, "error")
            return self.fallback(query)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Search provider returned malformed payload", provider=self.name, query=query, error=str(e))
            record_search(self.name, "error")
            return self.fallback(query)

        if not results and self.fallback_on_empty:
            record_search(self.name, "fallback")
            return self.fallback(query)

        record_search(self.name, "ok")
        return results

    def fallback(self, query: str) -> List[SearchResult]:
        return filter_by_title(self.FALLBACK, query)

    def _search(self, query: str) -> List[SearchResult]:
        raise NotImplementedError

    def _request(self, method: str, url: str, **kwargs) -> Any:
        """
        Execute a request and decode the JSON body

        Raises:
            UpstreamError: Transport failure, non-2xx status or invalid JSON
        """
        try:
            response = self.client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(self.name, f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            raise UpstreamError(self.name, f"{e.__class__.__name__}: {e}")
        except ValueError as e:
            raise UpstreamError(self.name, f"Invalid JSON: {e}")

    def _result(self, **fields: Any) -> SearchResult:
        fields.setdefault("type", self.media_type)
        return SearchResult(**fields)

    @staticmethod
    def _compact(metadata: Dict[str, Any]) -> Dict[str, Any]:
        """Drop keys whose value is None or empty"""
        return {key: value for key, value in metadata.items() if value not in (None, [], "")}

    def close(self) -> None:
        self.client.close()

    def __repr__(self):
        return f"<{self.__class__.__name__}(media_type='{self.media_type.value}')>"
