"""TMDB movie and TV search"""

from typing import Any, Dict, List, Optional

from ...config import settings
from ...schemas.item import MediaType
from ...schemas.search import SearchResult
from ...utils.logging import get_logger
from .base import SearchProvider, year_from_date

logger = get_logger(__name__)

TMDB_BASE_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE_BASE = "https://image.tmdb.org/t/p"


def poster_url(path: Optional[str], size: str = "w500") -> Optional[str]:
    if not path:
        return None
    return f"{TMDB_IMAGE_BASE}/{size}{path}"


def _fallback_movie(external_id: str, title: str, poster: str, year: str, rating: float) -> SearchResult:
    return SearchResult(
        external_id=external_id,
        type=MediaType.MOVIE,
        title=title,
        image=poster_url(poster),
        year=year,
        rating=rating,
    )


# Served when no TMDB token is configured or TMDB is unreachable
FALLBACK_MOVIES = [
    _fallback_movie("603", "The Matrix", "/f89U3ADr1oiB1s9GkdPOEpXUk5H.jpg", "1999", 8.7),
    _fallback_movie("604", "The Matrix Reloaded", "/9TGHDvWrqKBzwDxDodHYXEmOE6J.jpg", "2003", 7.0),
    _fallback_movie("155", "The Dark Knight", "/qJ2tW6WMUDux911r6m7haRef0WH.jpg", "2008", 9.0),
    _fallback_movie("27205", "Inception", "/edv5CZvWj09upOsy2Y6IwDhK8bt.jpg", "2010", 8.8),
    _fallback_movie("157336", "Interstellar", "/gEU2QniE6E77NI6lCU6MxlNBvIx.jpg", "2014", 8.7),
    _fallback_movie("238", "The Godfather", "/3bhkrj58Vtu7enYsRolD1fZdja1.jpg", "1972", 9.2),
    _fallback_movie("278", "The Shawshank Redemption", "/9cqNxx0GxF0bflZmeSMuL5tnGzr.jpg", "1994", 9.3),
    _fallback_movie("680", "Pulp Fiction", "/d5iIlFn5s0ImszYzBPb8JPIfbXD.jpg", "1994", 8.9),
    _fallback_movie("550", "Fight Club", "/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg", "1999", 8.8),
    _fallback_movie("872585", "Oppenheimer", "/8Gxv8gSFCU0XGDykEGv7zR1n2ua.jpg", "2023", 8.1),
]


class TMDBSearch(SearchProvider):
    """Shared TMDB request handling; subclasses pick the endpoint"""

    endpoint = ""

    def __init__(self, token: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.token = token if token is not None else settings.TMDB_READ_ACCESS_TOKEN

    def _search(self, query: str) -> List[SearchResult]:
        if not self.token:
            logger.warning("TMDB API token not configured", provider=self.name)
            return []

        data = self._request(
            "GET",
            f"{TMDB_BASE_URL}{self.endpoint}",
            params={"query": query, "page": 1, "include_adult": "false"},
            headers={"Authorization": f"Bearer {self.token}"},
        )
        return [self.to_result(entry) for entry in data.get("results", [])]

    def to_result(self, entry: Dict[str, Any]) -> SearchResult:
        raise NotImplementedError


class TMDBMovieSearch(TMDBSearch):
    name = "tmdb_movie"
    media_type = MediaType.MOVIE
    endpoint = "/search/movie"
    FALLBACK = FALLBACK_MOVIES

    def _search(self, query: str) -> List[SearchResult]:
        if not self.token:
            logger.warning("TMDB API token not configured. Using fallback data.")
            return self.fallback(query)
        return super()._search(query)

    def to_result(self, entry: Dict[str, Any]) -> SearchResult:
        return self._result(
            external_id=str(entry["id"]),
            title=entry.get("title") or entry.get("original_title") or "Untitled",
            image=poster_url(entry.get("poster_path")),
            year=year_from_date(entry.get("release_date")),
            rating=entry.get("vote_average") or None,
            metadata=self._compact({
                "genre_ids": entry.get("genre_ids"),
                "overview": entry.get("overview"),
            }) or None,
        )


class TMDBTVSearch(TMDBSearch):
    name = "tmdb_tv"
    media_type = MediaType.TV
    endpoint = "/search/tv"

    def to_result(self, entry: Dict[str, Any]) -> SearchResult:
        return self._result(
            external_id=str(entry["id"]),
            title=entry.get("name") or entry.get("original_name") or "Untitled",
            image=poster_url(entry.get("poster_path")),
            year=year_from_date(entry.get("first_air_date")),
            rating=entry.get("vote_average") or None,
            metadata=self._compact({
                "genre_ids": entry.get("genre_ids"),
                "overview": entry.get("overview"),
            }) or None,
        )
