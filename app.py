"""
Album Downloader
================
Fetches every album from the photo API and downloads the first few photos of
each one, caching listings and completed downloads on disk so a rerun only
does the remaining work.

Usage:
    # Download with the configured defaults (.env / environment)
    python app.py

    # Different output folder, two photos per album, no pause between requests
    python app.py --output-dir pictures --limit 2 --delay 0

    # Verbose logging
    python app.py -v
"""

import argparse
import logging
import sys
from typing import Callable, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

import requests
from pydantic import ValidationError

from config import Config
from album_downloader.domain.catalog import AlbumCatalog
from album_downloader.domain.downloads import DownloadOrchestrator, FileManager, PhotoDownloader, RunReport
from album_downloader.infrastructure.http_fetcher import ResilientFetcher
from album_downloader.observability import configure_logging, shutdown_logging
from album_downloader.settings import AppSettings, load_app_settings
from album_downloader.utils.cache import FileCache

logger = logging.getLogger(__name__)


def create_cache(settings: AppSettings) -> FileCache:
    return FileCache(
        base_path=settings.cache_dir,
        namespace=settings.cache_namespace,
        ttl=settings.cache_ttl_seconds,
    )


def create_fetcher(settings: AppSettings, session: Optional[requests.Session] = None) -> ResilientFetcher:
    return ResilientFetcher(
        session=session,
        timeout=settings.http_timeout_seconds,
        max_attempts=settings.fetch_max_attempts,
        initial_delay=settings.retry_initial_delay_seconds,
        max_delay=settings.retry_max_delay_seconds,
    )


def build_orchestrator(
    settings: AppSettings,
    fetcher: ResilientFetcher,
    cache: FileCache,
    sleep: Optional[Callable[[float], None]] = None,
) -> DownloadOrchestrator:
    file_manager = FileManager(base_output_dir=settings.base_output_dir)
    return DownloadOrchestrator(
        catalog=AlbumCatalog(fetcher, cache, settings.api_base_url),
        photo_downloader=PhotoDownloader(fetcher, cache, file_manager),
        file_manager=file_manager,
        photos_per_album=settings.photos_per_album,
        delay_seconds=settings.request_delay_seconds,
        sleep=sleep,
    )


def run_download(
    settings: AppSettings,
    session: Optional[requests.Session] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> RunReport:
    """Runs the whole pipeline once; the HTTP session is closed on every path."""
    cache = create_cache(settings)
    with create_fetcher(settings, session=session) as fetcher:
        orchestrator = build_orchestrator(settings, fetcher, cache, sleep=sleep)
        return orchestrator.run()


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Download the first photos of every album from the photo API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s
  %(prog)s --output-dir pictures --limit 2 --delay 0
  %(prog)s --cache-dir .cache -v
        """,
    )
    parser.add_argument(
        "--output-dir",
        help=f"Directory photos are written to (default: {Config.BASE_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--cache-dir",
        help=f"Directory of the persistent cache (default: {Config.CACHE_DIR})",
    )
    parser.add_argument(
        "--log-dir",
        help=f"Directory for combined.log and error.log (default: {Config.LOG_DIR})",
    )
    parser.add_argument(
        "--limit",
        type=int,
        help=f"Photos to download per album (default: {Config.PHOTOS_PER_ALBUM})",
    )
    parser.add_argument(
        "--delay",
        type=float,
        help=f"Seconds to pause after each photo and album (default: {Config.REQUEST_DELAY_SECONDS:g})",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)

    try:
        settings = load_app_settings({
            "base_output_dir": args.output_dir,
            "cache_dir": args.cache_dir,
            "log_dir": args.log_dir,
            "photos_per_album": args.limit,
            "request_delay_seconds": args.delay,
            "log_level": "DEBUG" if args.verbose else None,
        })
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    handlers = configure_logging(
        settings.log_dir,
        level=settings.log_level,
        enable_console=settings.enable_console_logs,
    )
    try:
        report = run_download(settings)
    except Exception as exc:
        logger.error(f"Run failed: {exc}", exc_info=True)
        if not settings.enable_console_logs:
            print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        shutdown_logging(handlers)

    print(report.summary())
    return 0


if __name__ == '__main__':
    sys.exit(main())
