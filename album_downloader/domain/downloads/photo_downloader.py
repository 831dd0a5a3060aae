"""album_downloader/domain/downloads/photo_downloader.py

PhotoDownloader fetches a single photo, stores it under its album folder and
records the completed download in the persistent cache.
"""

import logging
import os
from typing import Optional

from album_downloader.infrastructure.http_fetcher import ResilientFetcher
from album_downloader.models.dto import Identifier, Photo
from album_downloader.utils.cache import FileCache, MISSING

from .file_manager import FileManager

logger = logging.getLogger(__name__)


def photo_cache_key(photo_id: Identifier) -> str:
    return f"photo-{photo_id}"


class PhotoDownloader:
    def __init__(self, fetcher: ResilientFetcher, cache: FileCache, file_manager: FileManager):
        self.fetcher = fetcher
        self.cache = cache
        self.file_manager = file_manager

    def is_downloaded(self, photo: Photo, album_folder_name: str) -> bool:
        """True when the cache marks the photo done and its file is on disk."""
        marker = self.cache.get(photo_cache_key(photo.id), MISSING)
        if marker is MISSING:
            return False
        path = self.file_manager.photo_path(album_folder_name, photo.id)
        if os.path.isfile(path):
            return True
        logger.warning(
            f"Cache marks {photo.id}.jpg from album \"{album_folder_name}\" as downloaded "
            f"but {path} is missing; downloading again"
        )
        return False

    def download_photo(self, photo: Photo, album_folder_name: str) -> Optional[str]:
        """
        Downloads a photo unless it is already present.
        :param photo: The photo to download.
        :param album_folder_name: Folder (under the output root) the photo belongs in.
        :return: The path of the written file, or None if it was already downloaded.
        """
        if self.is_downloaded(photo, album_folder_name):
            logger.info(f"Already downloaded {photo.id}.jpg from album \"{album_folder_name}\"")
            return None

        logger.info(f"Downloading {photo.url} from album \"{album_folder_name}\"")
        data = self.fetcher.fetch_bytes(photo.url)
        path = self.file_manager.write_photo(album_folder_name, photo.id, data)

        # Marker only after the file is fully on disk.
        self.cache.set(photo_cache_key(photo.id), photo.to_record())
        logger.info(f"Downloaded {photo.id}.jpg from album \"{album_folder_name}\"")
        return path
