# album_downloader/domain/catalog/album_catalog.py
import logging
from typing import Any, List

from album_downloader.infrastructure.http_fetcher import ResilientFetcher
from album_downloader.models.dto import Album, Identifier, Photo, albums_from_payload, photos_from_payload
from album_downloader.utils.cache import FileCache, MISSING

logger = logging.getLogger(__name__)

ALBUMS_CACHE_KEY = "albums"


def album_photos_cache_key(album_id: Identifier) -> str:
    return f"photos-{album_id}"


class AlbumCatalog:
    def __init__(self, fetcher: ResilientFetcher, cache: FileCache, api_base_url: str):
        """Cache-first access to the album and photo listings.

        :param fetcher: Fetcher used on cache misses.
        :param cache: Persistent cache holding the raw listings.
        :param api_base_url: Base URL of the upstream API, without trailing slash.
        """
        self.fetcher = fetcher
        self.cache = cache
        self.api_base_url = api_base_url.rstrip('/')

    def _fetch_listing(self, cache_key: str, url: str) -> List[Any]:
        payload = self.fetcher.fetch_json(url)
        if not isinstance(payload, list):
            raise ValueError(f"Expected a JSON array from {url}, got {type(payload).__name__}")
        self.cache.set(cache_key, payload)
        return payload

    def list_albums(self) -> List[Album]:
        """Returns every album, from the cache when available."""
        cached = self.cache.get(ALBUMS_CACHE_KEY, MISSING)
        if cached is not MISSING:
            logger.info("Already fetched albums")
            return albums_from_payload(cached)

        url = f"{self.api_base_url}/albums"
        logger.info(f"Fetching albums from {url}")
        payload = self._fetch_listing(ALBUMS_CACHE_KEY, url)
        logger.info(f"Fetched {len(payload)} albums")
        return albums_from_payload(payload)

    def list_album_photos(self, album_id: Identifier) -> List[Photo]:
        """Returns the photo listing of one album, from the cache when available."""
        cache_key = album_photos_cache_key(album_id)
        cached = self.cache.get(cache_key, MISSING)
        if cached is not MISSING:
            logger.info(f"Already fetched photos for album {album_id}")
            return photos_from_payload(cached)

        url = f"{self.api_base_url}/albums/{album_id}/photos"
        payload = self._fetch_listing(cache_key, url)
        logger.info(f"Fetched {len(payload)} photos for album {album_id}")
        return photos_from_payload(payload)
