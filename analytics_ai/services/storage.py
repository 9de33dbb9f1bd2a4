"""
UploadStore Class - Handles file I/O for uploads

Uploaded files are written into a single directory and read back before
parsing.
"""

import logging
import os
from pathlib import Path

from analytics_ai.errors import InputValidationError, StorageError

logger = logging.getLogger(__name__)


class UploadStore:
    """
    Manages uploaded log files.
    Responsibilities:
    - Save uploaded content under the upload directory
    - Read saved files back
    """

    def __init__(self, upload_dir: str):
        self.upload_dir = Path(upload_dir)

    def save(self, filename: str, content: bytes) -> Path:
        """Write content under the base name of the client-supplied filename"""
        name = os.path.basename(filename or "")
        if not name or name in (".", ".."):
            raise InputValidationError("get form err: missing file name")

        try:
            self._ensure_dir()
            target = self.upload_dir / name
            target.write_bytes(content)
        except OSError as e:
            raise StorageError(f"upload file err: {e}") from e

        logger.info("Saved upload %s (%d bytes)", target, len(content))
        return target

    @staticmethod
    def read(path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"read file err: {e}") from e

    def _ensure_dir(self) -> None:
        """Create the upload directory if needed"""
        os.makedirs(self.upload_dir, exist_ok=True)
