import os
import logging
import tempfile

logger = logging.getLogger(__name__)

PHOTO_EXTENSION = ".jpg"


def album_folder_name(title):
    """Derives an album's folder name: every space becomes a dash."""
    return "-".join(title.split(" "))


class FileManager:
    def __init__(self, base_output_dir):
        """Owns the on-disk layout ``<base>/<album folder>/<photo id>.jpg``.

        :param base_output_dir: The root directory for all downloaded photos.
        """
        self.base_output_dir = base_output_dir

    def ensure_base_directory(self):
        if not os.path.isdir(self.base_output_dir):
            logger.info(f"Creating output directory {self.base_output_dir}")
            os.makedirs(self.base_output_dir, exist_ok=True)
        return self.base_output_dir

    def album_directory(self, folder_name):
        return os.path.join(self.base_output_dir, folder_name)

    def ensure_album_directory(self, folder_name):
        # Errors propagate: a run that cannot create its folders must stop.
        path = self.album_directory(folder_name)
        if not os.path.isdir(path):
            logger.info(f"Creating folder {folder_name}")
            os.makedirs(path, exist_ok=True)
        return path

    def photo_path(self, folder_name, photo_id):
        return os.path.join(self.album_directory(folder_name), f"{photo_id}{PHOTO_EXTENSION}")

    def write_photo(self, folder_name, photo_id, data):
        """Writes photo bytes atomically and returns the final path.

        The bytes land in a temporary file next to the target which is then
        renamed, so a crash never leaves a truncated ``.jpg`` behind.
        """
        target = self.photo_path(folder_name, photo_id)
        directory = os.path.dirname(target)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".part-", suffix=PHOTO_EXTENSION)
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.replace(tmp_path, target)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        return target
