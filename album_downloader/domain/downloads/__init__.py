"""Download domain orchestration and supporting services."""

from .orchestrator import DownloadOrchestrator, RunReport
from .photo_downloader import PhotoDownloader, photo_cache_key
from .file_manager import FileManager, album_folder_name

__all__ = [
    "DownloadOrchestrator",
    "RunReport",
    "PhotoDownloader",
    "photo_cache_key",
    "FileManager",
    "album_folder_name",
]
