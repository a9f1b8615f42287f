"""
Local-disk storage for uploaded CV files.

Files are written under ``<UPLOAD_FOLDER>/cvs/`` with a unique name and
exposed at ``/uploads/cvs/<name>``.
"""
import os
import uuid

from werkzeug.utils import secure_filename

from talentbridge.exceptions import FileProcessingError, ValidationError
from talentbridge.simple_logger import get_logger

logger = get_logger("storage")

CV_SUBFOLDER = 'cvs'
URL_PREFIX = '/uploads'


def file_extension(filename: str) -> str:
    return filename.rsplit('.', 1)[1].lower() if '.' in filename else ''


def allowed_file(filename: str, allowed_extensions) -> bool:
    """Check if file extension is allowed"""
    return file_extension(filename) in allowed_extensions


class LocalFileStorage:
    """Stores uploads in a directory on the local filesystem"""

    def __init__(self, upload_folder: str):
        self.upload_folder = upload_folder

    def save(self, filename: str, content: bytes, folder: str = CV_SUBFOLDER) -> str:
        """Write ``content`` and return its public URL"""
        safe_name = secure_filename(filename)
        if not safe_name:
            raise ValidationError("Invalid file name")

        unique_name = f"{uuid.uuid4().hex}_{safe_name}"
        directory = os.path.join(self.upload_folder, folder)
        try:
            os.makedirs(directory, exist_ok=True)
            with open(os.path.join(directory, unique_name), 'wb') as f:
                f.write(content)
        except OSError as e:
            raise FileProcessingError(f"Failed to store file: {e}") from e

        logger.info(f"Stored {folder}/{unique_name} ({len(content)} bytes)")
        return f"{URL_PREFIX}/{folder}/{unique_name}"

    def delete(self, url: str) -> bool:
        """Remove a previously stored file by its URL; missing files are ignored"""
        path = self.path_for(url)
        if not path or not os.path.exists(path):
            return False
        try:
            os.remove(path)
            return True
        except OSError as e:
            logger.warning(f"Failed to delete {url}: {e}")
            return False

    def path_for(self, url: str):
        if not url or not url.startswith(URL_PREFIX + '/'):
            return None
        folder, _, name = url[len(URL_PREFIX) + 1:].partition('/')
        folder = secure_filename(folder)
        name = secure_filename(name)
        if not folder or not name:
            return None
        return os.path.join(self.upload_folder, folder, name)
