"""Search result schemas"""

from pydantic import BaseModel
from typing import List

from .item import ItemBase, MediaType


class SearchResult(ItemBase):
    """A candidate item returned by a search provider, ready for add_item"""

    pass


class SearchResponse(BaseModel):
    media_type: MediaType
    query: str
    provider: str
    results: List[SearchResult]
