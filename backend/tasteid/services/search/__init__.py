"""Media search providers

Every provider exposes ``search(query) -> List[SearchResult]`` and absorbs its
own upstream failures.
"""

from typing import Optional

import httpx

from ...config import settings
from ...exceptions import ValidationError
from ...schemas.item import MediaType
from .base import SearchProvider
from .tmdb import TMDBMovieSearch, TMDBTVSearch
from .anilist import AniListSearch
from .games import SteamGameSearch, IGDBGameSearch
from .books import GoogleBooksSearch
from .art import ArtInstituteSearch


def get_provider(media_type: MediaType, client: Optional[httpx.Client] = None) -> SearchProvider:
    """
    Resolve the search provider for a media type

    Games use IGDB when its credentials are configured, otherwise the
    public Steam proxy.

    Raises:
        ValidationError: No provider indexes this media type
    """
    if media_type == MediaType.MOVIE:
        return TMDBMovieSearch(client=client)
    if media_type == MediaType.TV:
        return TMDBTVSearch(client=client)
    if media_type in (MediaType.ANIME, MediaType.MANGA):
        return AniListSearch(media_type, client=client)
    if media_type == MediaType.GAME:
        if settings.IGDB_CLIENT_ID and settings.IGDB_ACCESS_TOKEN:
            return IGDBGameSearch(client=client)
        return SteamGameSearch(client=client)
    if media_type == MediaType.BOOK:
        return GoogleBooksSearch(client=client)
    if media_type == MediaType.ART:
        return ArtInstituteSearch(client=client)

    raise ValidationError(f"Search is not available for {media_type.value}")


__all__ = [
    "SearchProvider",
    "TMDBMovieSearch",
    "TMDBTVSearch",
    "AniListSearch",
    "SteamGameSearch",
    "IGDBGameSearch",
    "GoogleBooksSearch",
    "ArtInstituteSearch",
    "get_provider",
]
