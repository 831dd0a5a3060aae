import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..catalog.album_catalog import AlbumCatalog
from .file_manager import FileManager, album_folder_name
from .photo_downloader import PhotoDownloader

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    albums_processed: int = 0
    photos_downloaded: int = 0
    photos_skipped: int = 0

    def summary(self) -> str:
        return (
            f"{self.albums_processed} albums processed, "
            f"{self.photos_downloaded} photos downloaded, "
            f"{self.photos_skipped} already present"
        )


class DownloadOrchestrator:
    def __init__(
        self,
        catalog: AlbumCatalog,
        photo_downloader: PhotoDownloader,
        file_manager: FileManager,
        photos_per_album: int = 5,
        delay_seconds: float = 3.0,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """Sequences album listing, photo listing and photo downloads.

        Albums and photos are processed strictly one at a time, with a fixed
        pause after each photo and after each album to go easy on the API.
        """
        if photos_per_album < 1:
            raise ValueError("photos_per_album must be positive")
        self.catalog = catalog
        self.photo_downloader = photo_downloader
        self.file_manager = file_manager
        self.photos_per_album = photos_per_album
        self.delay_seconds = delay_seconds
        self._sleep = sleep or time.sleep

    def _pause(self) -> None:
        if self.delay_seconds > 0:
            self._sleep(self.delay_seconds)

    def run(self) -> RunReport:
        """Downloads the first photos of every album. Errors abort the run."""
        report = RunReport()
        albums = self.catalog.list_albums()
        self.file_manager.ensure_base_directory()

        for album in albums:
            photos = self.catalog.list_album_photos(album.id)

            folder_name = album_folder_name(album.title)
            self.file_manager.ensure_album_directory(folder_name)

            for photo in photos[:self.photos_per_album]:
                path = self.photo_downloader.download_photo(photo, folder_name)
                if path is None:
                    report.photos_skipped += 1
                else:
                    report.photos_downloaded += 1
                self._pause()

            report.albums_processed += 1
            self._pause()

        logger.info("done")
        logger.info(report.summary())
        return report
