"""HTTP client for saving swiped items to the backend"""

from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..schemas.item import ItemResponse


class SavedItemsClient:
    """
    Posts liked items to ``/saved-items`` as the signed-in user

    Intended as the saver behind ``save_on_like``; errors propagate to the
    swipe session, which logs them.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(timeout=timeout)
        self.headers = {"Authorization": f"Bearer {access_token}"}

    def save(self, item: ItemResponse) -> Dict[str, Any]:
        """
        Save an item

        Returns:
            The item as stored in My Likes

        Raises:
            httpx.HTTPError: Transport failure or non-2xx response
        """
        payload = {
            "external_id": item.external_id,
            "type": item.type.value,
            "title": item.title,
            "image": item.image,
            "year": item.year,
            "rating": item.rating,
            "metadata": item.metadata,
        }
        response = self.client.post(
            f"{self.base_url}{settings.API_V1_STR}/saved-items/",
            json=payload,
            headers=self.headers,
        )
        response.raise_for_status()
        return response.json()

    def close(self) -> None:
        self.client.close()
