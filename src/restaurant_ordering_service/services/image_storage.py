"""Storage for uploaded dish images."""

import logging
import secrets
import time
from pathlib import Path, PurePath

logger = logging.getLogger(__name__)


class ImageStorage:
    """Writes uploaded images to a shared directory under unique names.

    Names are ``<epoch millis>-<random>`` plus the original extension, so two
    uploads never overwrite each other even when they carry the same filename.
    """

    def __init__(self, upload_dir: str | Path, url_prefix: str = "/uploads") -> None:
        """Initialize storage and create the upload directory.

        Args:
            upload_dir: Directory receiving uploaded files
            url_prefix: Path prefix under which the directory is served
        """
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save(self, original_filename: str | None, content: bytes) -> str:
        """Persist an uploaded image.

        Args:
            original_filename: Client-side filename, used only for its extension
            content: Raw file bytes

        Returns:
            str: Reference to the stored image, e.g. ``/uploads/1700000000000-42.png``
        """
        extension = PurePath(original_filename or "").suffix.lower()
        filename = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}"

        (self.upload_dir / filename).write_bytes(content)
        logger.info(f"Stored uploaded image {filename} ({len(content)} bytes)")

        return f"{self.url_prefix}/{filename}"
