"""
GIF Lookup - Reaction GIF search over the GIPHY API.

Contract:
- search(query) -> up to 8 media URLs, best match first
- no match, no API key, HTTP error, timeout, bad JSON -> []
- never raises

GIFs are purely cosmetic; a failed lookup must never affect a match.
"""

from __future__ import annotations
from typing import Any
import logging

import requests

logger = logging.getLogger(__name__)

GIPHY_SEARCH_URL = "https://api.giphy.com/v1/gifs/search"
FETCH_LIMIT = 12
MAX_RESULTS = 8
DEFAULT_QUERY = "reaction"

# Smaller renditions first so they load quickly on a phone
IMAGE_PREFERENCE = ("downsized_medium", "downsized", "original")


class GifLookup:
    """GIPHY search client."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
        base_url: str = GIPHY_SEARCH_URL,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.base_url = base_url

    def search(self, query: str | None = None) -> list[str]:
        query = (query or "").strip() or DEFAULT_QUERY
        if not self.api_key:
            logger.warning("GIF search skipped: no GIPHY API key configured")
            return []

        params = {
            "api_key": self.api_key,
            "q": query,
            "limit": FETCH_LIMIT,
            "rating": "g",
            "lang": "en",
        }
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("GIPHY fetch error for %r: %s", query, e)
            return []

        return extract_urls(payload)[:MAX_RESULTS]


def extract_urls(payload: Any) -> list[str]:
    """Pick one URL per result, skipping results with no usable image."""
    results = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        return []

    urls = []
    for gif in results:
        url = _best_image_url(gif)
        if url:
            urls.append(url)
    return urls


def _best_image_url(gif: Any) -> str | None:
    images = gif.get("images") if isinstance(gif, dict) else None
    if not isinstance(images, dict):
        return None
    for rendition in IMAGE_PREFERENCE:
        image = images.get(rendition)
        if isinstance(image, dict) and image.get("url"):
            return image["url"]
    return None
