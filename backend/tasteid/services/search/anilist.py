"""AniList GraphQL search for anime and manga"""

from typing import Any, Dict, List

from ...exceptions import UpstreamError
from ...schemas.item import MediaType
from ...schemas.search import SearchResult
from .base import SearchProvider

ANILIST_API = "https://graphql.anilist.co"

SEARCH_QUERY = """
query ($search: String, $type: MediaType, $page: Int, $perPage: Int) {
  Page(page: $page, perPage: $perPage) {
    media(search: $search, type: $type, sort: POPULARITY_DESC) {
      id
      title { romaji english native }
      coverImage { large medium }
      startDate { year }
      averageScore
      studios(isMain: true) { nodes { name } }
      staff(perPage: 3, sort: [RELEVANCE]) { nodes { name { full } } }
      volumes
      chapters
      genres
      type
      format
    }
  }
}
"""


class AniListSearch(SearchProvider):
    """Anime or manga search; no credentials needed"""

    def __init__(self, media_type: MediaType = MediaType.ANIME, **kwargs):
        if media_type not in (MediaType.ANIME, MediaType.MANGA):
            raise ValueError(f"AniList does not index {media_type.value}")
        super().__init__(**kwargs)
        self.media_type = media_type
        self.name = f"anilist_{media_type.value}"

    def _search(self, query: str) -> List[SearchResult]:
        data = self._request(
            "POST",
            ANILIST_API,
            json={
                "query": SEARCH_QUERY,
                "variables": {
                    "search": query,
                    "type": self.media_type.value.upper(),
                    "page": 1,
                    "perPage": self.page_size,
                },
            },
        )
        if data.get("errors"):
            raise UpstreamError(self.name, data["errors"][0].get("message", "GraphQL error"))

        media = data["data"]["Page"]["media"]
        return [self.to_result(entry) for entry in media]

    def to_result(self, media: Dict[str, Any]) -> SearchResult:
        title = media.get("title") or {}
        cover = media.get("coverImage") or {}
        year = (media.get("startDate") or {}).get("year")
        score = media.get("averageScore")
        is_manga = self.media_type == MediaType.MANGA

        metadata: Dict[str, Any] = {
            "genres": (media.get("genres") or [])[:3],
            "format": media.get("format"),
            "nativeTitle": title.get("native"),
        }
        if is_manga:
            staff = (media.get("staff") or {}).get("nodes") or []
            metadata["mangaka"] = staff[0]["name"]["full"] if staff else None
            metadata["volumes"] = media.get("volumes")
            metadata["chapters"] = media.get("chapters")
        else:
            studios = (media.get("studios") or {}).get("nodes") or []
            metadata["studio"] = studios[0]["name"] if studios else None

        return self._result(
            external_id=str(media["id"]),
            title=title.get("english") or title.get("romaji") or "Untitled",
            image=cover.get("large") or cover.get("medium"),
            year=str(year) if year else None,
            # AniList scores are 0-100
            rating=score / 10 if score else None,
            metadata=self._compact(metadata),
        )
