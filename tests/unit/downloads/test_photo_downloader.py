import logging
import os

import pytest
import requests

from album_downloader.domain.downloads import FileManager, PhotoDownloader, photo_cache_key
from album_downloader.models.dto import Photo
from album_downloader.utils.cache import MISSING
from tests.support.stubs import FakeResponse, FakeSession, make_photos, photo_bytes

FOLDER = "sunt-aut-facere"


@pytest.fixture
def photo():
    return Photo.model_validate(make_photos(album_id=1, count=1, start_id=42)[0])


@pytest.fixture
def file_manager(tmp_path):
    fm = FileManager(base_output_dir=str(tmp_path / "photos"))
    fm.ensure_album_directory(FOLDER)
    return fm


def _downloader(make_fetcher, cache, file_manager, session):
    return PhotoDownloader(make_fetcher(session, max_attempts=1), cache, file_manager)


@pytest.mark.unit
def test_download_writes_file_then_marks_cache(make_fetcher, cache, file_manager, photo, caplog):
    session = FakeSession({photo.url: FakeResponse(200, content=photo_bytes(42))})
    downloader = _downloader(make_fetcher, cache, file_manager, session)

    with caplog.at_level(logging.INFO):
        path = downloader.download_photo(photo, FOLDER)

    assert path == file_manager.photo_path(FOLDER, 42)
    assert path.endswith(os.path.join("photos", FOLDER, "42.jpg"))
    with open(path, "rb") as f:
        assert f.read() == photo_bytes(42)
    assert cache.get(photo_cache_key(42)) == photo.to_record()
    assert cache.get("photo-42")["albumId"] == 1
    assert session.calls == [photo.url]
    assert f'Downloading {photo.url} from album "{FOLDER}"' in caplog.text
    assert f'Downloaded 42.jpg from album "{FOLDER}"' in caplog.text


@pytest.mark.unit
def test_cached_photo_with_file_on_disk_is_skipped(make_fetcher, cache, file_manager, photo, caplog):
    file_manager.write_photo(FOLDER, 42, b"existing")
    cache.set("photo-42", photo.to_record())
    session = FakeSession()
    downloader = _downloader(make_fetcher, cache, file_manager, session)

    with caplog.at_level(logging.INFO):
        assert downloader.download_photo(photo, FOLDER) is None

    assert session.calls == []
    assert f'Already downloaded 42.jpg from album "{FOLDER}"' in caplog.text
    with open(file_manager.photo_path(FOLDER, 42), "rb") as f:
        assert f.read() == b"existing"


@pytest.mark.unit
def test_cached_marker_without_file_downloads_again(make_fetcher, cache, file_manager, photo, caplog):
    cache.set("photo-42", photo.to_record())
    session = FakeSession({photo.url: FakeResponse(200, content=photo_bytes(42))})
    downloader = _downloader(make_fetcher, cache, file_manager, session)

    with caplog.at_level(logging.WARNING):
        path = downloader.download_photo(photo, FOLDER)

    assert path is not None and os.path.isfile(path)
    assert session.calls == [photo.url]
    assert any("is missing; downloading again" in r.getMessage() for r in caplog.records)


@pytest.mark.unit
def test_fetch_failure_propagates_without_marking(make_fetcher, cache, file_manager, photo):
    session = FakeSession({photo.url: requests.exceptions.ConnectionError("reset")})
    downloader = _downloader(make_fetcher, cache, file_manager, session)

    with pytest.raises(requests.exceptions.ConnectionError):
        downloader.download_photo(photo, FOLDER)
    assert cache.get("photo-42") is MISSING
    assert not os.path.exists(file_manager.photo_path(FOLDER, 42))


@pytest.mark.unit
def test_write_failure_propagates_without_marking(make_fetcher, cache, file_manager, photo, monkeypatch):
    session = FakeSession({photo.url: FakeResponse(200, content=b"x")})
    downloader = _downloader(make_fetcher, cache, file_manager, session)

    def failing_write(folder_name, photo_id, data):
        raise OSError("read-only file system")

    monkeypatch.setattr(file_manager, "write_photo", failing_write)

    with pytest.raises(OSError, match="read-only"):
        downloader.download_photo(photo, FOLDER)
    assert cache.get("photo-42") is MISSING


@pytest.mark.unit
def test_missing_album_folder_is_a_filesystem_error(make_fetcher, cache, tmp_path, photo):
    fm = FileManager(base_output_dir=str(tmp_path / "nowhere"))
    session = FakeSession({photo.url: FakeResponse(200, content=b"x")})
    downloader = _downloader(make_fetcher, cache, fm, session)

    with pytest.raises(OSError):
        downloader.download_photo(photo, FOLDER)
    assert cache.get("photo-42") is MISSING
