"""Google Books search"""

from typing import Any, Dict, List, Optional

from ...config import settings
from ...schemas.item import MediaType
from ...schemas.search import SearchResult
from .base import SearchProvider, year_from_date

GOOGLE_BOOKS_API = "https://www.googleapis.com/books/v1/volumes"


def best_cover(image_links: Optional[Dict[str, str]]) -> Optional[str]:
    """Highest-resolution cover, forced to https with a larger zoom"""
    if not image_links:
        return None
    for size in ("extraLarge", "large", "medium", "small", "thumbnail"):
        url = image_links.get(size)
        if url:
            return url.replace("http://", "https://").replace("zoom=1", "zoom=2")
    return None


def _fallback_book(volume_id: str, title: str, author: str, year: str, rating: Optional[float]) -> SearchResult:
    return SearchResult(
        external_id=volume_id,
        type=MediaType.BOOK,
        title=title,
        image=f"https://books.google.com/books/content?id={volume_id}&printsec=frontcover&img=1&zoom=2",
        year=year,
        rating=rating,
        metadata={"author": author},
    )


FALLBACK_BOOKS = [
    _fallback_book("B1hSG45JCX4C", "Dune", "Frank Herbert", "1965", 4.0),
    _fallback_book("kotPYEqx7kMC", "1984", "George Orwell", "1949", 4.0),
    _fallback_book("aWZzLPhY4o0C", "The Hobbit", "J.R.R. Tolkien", "1937", 4.5),
    _fallback_book("2zgRDXFWkm8C", "The Great Gatsby", "F. Scott Fitzgerald", "1925", 3.5),
    _fallback_book("ncuX8p2xLIUC", "To Kill a Mockingbird", "Harper Lee", "1960", 4.5),
    _fallback_book("KVGd-NabpW0C", "Neuromancer", "William Gibson", "1984", None),
]


class GoogleBooksSearch(SearchProvider):
    """Books with covers only; the API key is optional"""

    name = "google_books"
    media_type = MediaType.BOOK
    FALLBACK = FALLBACK_BOOKS
    fallback_on_empty = True

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else settings.GOOGLE_BOOKS_KEY

    def _search(self, query: str) -> List[SearchResult]:
        params: Dict[str, Any] = {"q": query, "maxResults": self.page_size}
        if self.api_key:
            params["key"] = self.api_key

        data = self._request("GET", GOOGLE_BOOKS_API, params=params)
        return [
            self.to_result(book) for book in data.get("items") or []
            if (book.get("volumeInfo", {}).get("imageLinks") or {}).get("thumbnail")
        ]

    def to_result(self, book: Dict[str, Any]) -> SearchResult:
        info = book.get("volumeInfo") or {}
        authors = info.get("authors") or []

        return self._result(
            external_id=book["id"],
            title=info.get("title") or "Untitled",
            image=best_cover(info.get("imageLinks")),
            year=year_from_date(info.get("publishedDate")),
            rating=info.get("averageRating") or None,
            metadata=self._compact({
                "author": authors[0] if authors else None,
                "categories": (info.get("categories") or [])[:2],
                "pageCount": info.get("pageCount"),
            }),
        )
