"""
Pexels Photo Service - stock photo search for trip banners.
"""

import logging
import httpx
from typing import List, Optional

from globetrotter.config.settings import get_settings
from globetrotter.schemas.photo import Photo

logger = logging.getLogger(__name__)

FALLBACK_IMAGES = {
    "travel": "https://images.unsplash.com/photo-1488646953014-85cb44e25828?w=1200&h=400&fit=crop",
    "paris": "https://images.unsplash.com/photo-1502602898536-47ad22581b52?w=1200&h=400&fit=crop",
    "tokyo": "https://images.unsplash.com/photo-1540959733332-eab4deabeeaf?w=1200&h=400&fit=crop",
    "beach": "https://images.unsplash.com/photo-1507525428034-b723cf961d3e?w=1200&h=400&fit=crop",
    "mountain": "https://images.unsplash.com/photo-1506905925346-21bda4d32df4?w=1200&h=400&fit=crop",
}


class PexelsPhotoService:
    """Service for searching Pexels photos using the official API."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = get_settings().pexels
        self.api_url = self.settings.api_url
        self.api_key = self.settings.api_key
        self.timeout = self.settings.timeout_seconds
        self.max_per_page = self.settings.max_per_page
        self._transport = transport

        if not self.api_key:
            logger.warning(
                "Pexels API key not configured. "
                "Set PEXELS_API_KEY in .env file."
            )

    def _get_headers(self) -> dict:
        """Get headers for Pexels API requests."""
        if not self.api_key:
            return {}
        return {"Authorization": self.api_key}

    async def search(self, query: str, per_page: int = 1) -> List[Photo]:
        """
        Search Pexels for photos matching the query.

        Args:
            query: Search term (e.g., "Paris", "beach")
            per_page: Number of candidates to return

        Returns:
            List of photos; empty when the API is unavailable or unconfigured
        """
        if not self.api_key:
            return []

        per_page = max(1, min(per_page, self.max_per_page))
        try:
            async with httpx.AsyncClient(
                headers=self._get_headers(),
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    f"{self.api_url}/search",
                    params={"query": query, "per_page": per_page},
                )

                if response.status_code == 401:
                    logger.error("Pexels API authentication failed. Check API key.")
                    return []

                if response.status_code == 429:
                    logger.error("Pexels API rate limit exceeded.")
                    return []

                if response.status_code != 200:
                    logger.warning(
                        f"Pexels API returned {response.status_code} for '{query}'"
                    )
                    return []

                photos = []
                for item in response.json().get("photos", []):
                    src = item.get("src", {})
                    photos.append(Photo(
                        id=item["id"],
                        url=item.get("url", ""),
                        photographer=item.get("photographer"),
                        src_large=src.get("large"),
                        src_medium=src.get("medium"),
                        src_small=src.get("small"),
                    ))

                logger.info(f"Found {len(photos)} photos for '{query}'")
                return photos

        except httpx.TimeoutException:
            logger.warning(f"Timeout fetching photos for '{query}'")
            return []
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.error(f"Error fetching Pexels photos: {e}")
            return []

    @staticmethod
    def fallback_image(query: str) -> str:
        """Curated banner for when the search yields nothing."""
        return FALLBACK_IMAGES.get(query.strip().lower(), FALLBACK_IMAGES["travel"])


# Singleton instance
_service: Optional[PexelsPhotoService] = None


def get_photo_service() -> PexelsPhotoService:
    """Get the Pexels photo service singleton."""
    global _service
    if _service is None:
        _service = PexelsPhotoService()
    return _service
