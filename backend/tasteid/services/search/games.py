"""Game search via the rawg2steam proxy, or IGDB when credentials exist"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ...config import settings
from ...schemas.item import MediaType
from ...schemas.search import SearchResult
from ...utils.logging import get_logger
from .base import SearchProvider, year_from_date

logger = get_logger(__name__)

STEAM_API = "https://rawg2steam.phalco.de/api"
IGDB_API = "https://api.igdb.com/v4"
STEAM_CDN = "https://steamcdn-a.akamaihd.net/steam/apps"


def _fallback_game(app_id: int, title: str, year: str, developer: str, genres: List[str]) -> SearchResult:
    return SearchResult(
        external_id=str(app_id),
        type=MediaType.GAME,
        title=title,
        image=f"{STEAM_CDN}/{app_id}/library_600x900_2x.jpg",
        year=year,
        rating=None,
        metadata={"developer": developer, "genres": genres, "platforms": ["PC"], "steamId": app_id},
    )


FALLBACK_GAMES = [
    _fallback_game(292030, "The Witcher 3: Wild Hunt", "2015", "CD PROJEKT RED", ["RPG"]),
    _fallback_game(271590, "Grand Theft Auto V", "2015", "Rockstar North", ["Action"]),
    _fallback_game(620, "Portal 2", "2011", "Valve", ["Puzzle"]),
    _fallback_game(1245620, "Elden Ring", "2022", "FromSoftware", ["RPG", "Action"]),
    _fallback_game(1091500, "Cyberpunk 2077", "2020", "CD PROJEKT RED", ["RPG"]),
    _fallback_game(1145360, "Hades", "2020", "Supergiant Games", ["Roguelike"]),
    _fallback_game(367520, "Hollow Knight", "2017", "Team Cherry", ["Metroidvania"]),
    _fallback_game(413150, "Stardew Valley", "2016", "ConcernedApe", ["Simulation"]),
]


class SteamGameSearch(SearchProvider):
    """Public Steam data through rawg2steam; entries without art are dropped"""

    name = "steam_game"
    media_type = MediaType.GAME
    FALLBACK = FALLBACK_GAMES
    fallback_on_empty = True

    def search(self, query: str) -> List[SearchResult]:
        # The proxy does not answer single-character queries usefully
        if len((query or "").strip()) < 2:
            return []
        return super().search(query)

    def _search(self, query: str) -> List[SearchResult]:
        data = self._request("GET", f"{STEAM_API}/games", params={"search": query})
        return [
            self.to_result(game) for game in data.get("results", [])
            if game.get("box_art") or game.get("background_image")
        ]

    def to_result(self, game: Dict[str, Any]) -> SearchResult:
        developers = game.get("developers") or []
        genres = game.get("genres") or []
        platforms = game.get("platforms") or [{"platform": {"name": "Steam"}}]
        metacritic = game.get("metacritic")

        return self._result(
            external_id=str(game["id"]),
            title=game.get("name") or "Untitled",
            # Vertical box art first, the wide background as fallback
            image=game.get("box_art") or game.get("background_image"),
            year=year_from_date(game.get("released")),
            rating=metacritic / 10 if metacritic else (game.get("rating") or None),
            metadata=self._compact({
                "developer": developers[0]["name"] if developers else None,
                "genres": [genre["name"] for genre in genres[:3]],
                "platforms": [entry["platform"]["name"] for entry in platforms[:3]],
                "steamId": game["id"],
            }),
        )


def igdb_cover_url(image_id: str, size: str = "cover_big") -> str:
    return f"https://images.igdb.com/igdb/image/upload/t_{size}/{image_id}.jpg"


class IGDBGameSearch(SearchProvider):
    """IGDB search; needs a Twitch client id and app access token"""

    name = "igdb_game"
    media_type = MediaType.GAME

    def __init__(self, client_id: Optional[str] = None, access_token: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.client_id = client_id if client_id is not None else settings.IGDB_CLIENT_ID
        self.access_token = access_token if access_token is not None else settings.IGDB_ACCESS_TOKEN

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.access_token)

    def _search(self, query: str) -> List[SearchResult]:
        if not self.configured:
            logger.warning("IGDB credentials not configured", provider=self.name)
            return []

        escaped = query.replace('"', '\\"')
        body = (
            f'search "{escaped}"; '
            "fields name, cover.image_id, first_release_date, rating, "
            "involved_companies.company.name, involved_companies.developer, "
            "genres.name, platforms.name; "
            f"limit {self.page_size};"
        )
        data = self._request(
            "POST",
            f"{IGDB_API}/games",
            content=body,
            headers={
                "Client-ID": self.client_id,
                "Authorization": f"Bearer {self.access_token}",
                "Content-Type": "text/plain",
            },
        )
        return [self.to_result(game) for game in data]

    def to_result(self, game: Dict[str, Any]) -> SearchResult:
        cover = game.get("cover") or {}
        released = game.get("first_release_date")
        developers = [
            company["company"]["name"]
            for company in game.get("involved_companies") or []
            if company.get("developer")
        ]
        rating = game.get("rating")

        return self._result(
            external_id=str(game["id"]),
            title=game.get("name") or "Untitled",
            image=igdb_cover_url(cover["image_id"]) if cover.get("image_id") else None,
            year=str(datetime.fromtimestamp(released, tz=timezone.utc).year) if released else None,
            # IGDB ratings are 0-100
            rating=round(rating / 10, 1) if rating else None,
            metadata=self._compact({
                "developer": developers[0] if developers else None,
                "genres": [genre["name"] for genre in (game.get("genres") or [])[:3]],
                "platforms": [platform["name"] for platform in (game.get("platforms") or [])[:3]],
            }),
        )
