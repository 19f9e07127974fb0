import logging
import os
import shutil
import time
from pathlib import Path

from translation_desk.config import settings
from translation_desk.errors import StorageError
from translation_desk.utils.filesystem import sanitize_filename

logger = logging.getLogger(__name__)

STAGING_FOLDER = "staging"
ORDERS_FOLDER = "requests"


def is_remote_reference(reference: str) -> bool:
    return reference.startswith(("http://", "https://"))


class LocalFileStorage:
    """Stores uploaded documents under the uploads directory.

    References are paths relative to the storage root, e.g.
    ``requests/<order id>/1700000000000-contract.pdf``. Files handed in before
    an order exists sit in ``staging/`` until an order claims them.
    """

    def __init__(self, root: Path | None = None):
        self._root = root

    @property
    def root(self) -> Path:
        return self._root or settings.uploads_dir

    def _store(self, folder: str, filename: str, content: bytes) -> str:
        stored_name = f"{int(time.time() * 1000)}-{sanitize_filename(filename)}"
        target_dir = self.root / folder
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            path = target_dir / stored_name
            path.write_bytes(content)
            os.chmod(path, 0o444)
        except OSError as exc:
            logger.error("Could not write %s to %s: %s", filename, target_dir, exc)
            raise StorageError("File upload failed") from exc
        return f"{folder}/{stored_name}"

    def stage(self, filename: str, content: bytes) -> str:
        return self._store(STAGING_FOLDER, filename, content)

    def save_for_order(self, order_id: str, filename: str, content: bytes) -> str:
        return self._store(f"{ORDERS_FOLDER}/{order_id}", filename, content)

    def staged(self, reference: str) -> Path | None:
        """Path of a file waiting in ``staging/``, or None for any other reference."""
        if not reference.startswith(STAGING_FOLDER + "/"):
            return None
        path = self.resolve(reference)
        if path is None or not path.is_relative_to(self.root.resolve() / STAGING_FOLDER):
            return None
        return path

    def claim(self, reference: str, order_id: str) -> str:
        """File a pre-uploaded reference under the order's folder.

        Remote URLs are kept as they are. Only staged files can be claimed; a
        staged file that cannot be moved keeps its current reference.
        """
        if is_remote_reference(reference):
            return reference
        source = self.staged(reference)
        if source is None:
            raise StorageError("Uploaded file not found")

        folder = f"{ORDERS_FOLDER}/{order_id}"
        try:
            target_dir = self.root / folder
            target_dir.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(target_dir / source.name))
        except OSError as exc:
            logger.warning("Could not move %s into %s, keeping original reference: %s", reference, folder, exc)
            return reference
        return f"{folder}/{source.name}"

    def resolve(self, reference: str) -> Path | None:
        """Absolute path for a local reference, or None if missing or outside the root."""
        if not reference or is_remote_reference(reference):
            return None
        root = self.root.resolve()
        try:
            path = (root / reference).resolve()
            if not path.is_relative_to(root) or not path.is_file():
                return None
        except (OSError, ValueError):
            # Malformed references, e.g. embedded NUL bytes.
            return None
        return path

    def delete(self, reference: str) -> None:
        path = self.resolve(reference)
        if path is None:
            return
        try:
            path.unlink()
        except OSError as exc:
            logger.warning("Could not delete stored file %s: %s", reference, exc)
