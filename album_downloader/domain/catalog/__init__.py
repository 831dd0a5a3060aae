"""Album and photo listings."""

from .album_catalog import AlbumCatalog, ALBUMS_CACHE_KEY, album_photos_cache_key

__all__ = ["AlbumCatalog", "ALBUMS_CACHE_KEY", "album_photos_cache_key"]
