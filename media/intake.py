"""
Media intake — profile picture uploads.

Files are accepted only when both the extension and the declared MIME type
name an image format from ``ALLOWED_IMAGE_TYPES``. Stored names are
``<millisecond timestamp>-<original basename>``; an existing name bumps the
timestamp, so two uploads never overwrite each other.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from pathlib import Path

from auth.errors import UnsupportedMediaTypeError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ("jpeg", "jpg", "png", "gif")
_ALLOWED_RE = re.compile("|".join(ALLOWED_IMAGE_TYPES))

_MAX_NAME_ATTEMPTS = 1000


class MediaStore:
    """Writes accepted images under ``upload_dir`` and returns their public path."""

    def __init__(
        self,
        upload_dir: str | Path,
        url_prefix: str = "/uploads",
        max_bytes: int | None = None,
    ) -> None:
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def is_allowed(self, original_name: str, declared_mime_type: str) -> bool:
        ext_ok = Path(original_name).suffix.lower().lstrip(".") in ALLOWED_IMAGE_TYPES
        mime_ok = bool(_ALLOWED_RE.search((declared_mime_type or "").lower()))
        return ext_ok and mime_ok

    def accept(self, file_bytes: bytes, original_name: str, declared_mime_type: str) -> str:
        """
        Validate and store an upload, returning its public path
        (``/uploads/<stored name>``).

        Raises ``UnsupportedMediaTypeError`` for non-image or oversized files.
        """
        name = Path((original_name or "").replace("\\", "/")).name
        if not name or not self.is_allowed(name, declared_mime_type):
            raise UnsupportedMediaTypeError("Only images are allowed.")
        if self.max_bytes is not None and len(file_bytes) > self.max_bytes:
            raise UnsupportedMediaTypeError(
                f"Image exceeds the {self.max_bytes} byte upload limit."
            )

        stamp = int(time.time() * 1000)
        for _ in range(_MAX_NAME_ATTEMPTS):
            stored_name = f"{stamp}-{name}"
            try:
                with (self.upload_dir / stored_name).open("xb") as fh:
                    fh.write(file_bytes)
            except FileExistsError:
                stamp += 1
                continue
            logger.debug("Stored upload %s (%d bytes)", stored_name, len(file_bytes))
            return f"{self.url_prefix}/{stored_name}"

        raise RuntimeError(f"Could not find a free file name for {name!r}")

    async def accept_async(self, file_bytes: bytes, original_name: str, declared_mime_type: str) -> str:
        return await asyncio.to_thread(self.accept, file_bytes, original_name, declared_mime_type)

    def discard(self, stored_path: str) -> None:
        """Remove a file previously returned by ``accept``; missing files are ignored."""
        name = Path(stored_path).name
        target = self.upload_dir / name
        try:
            target.unlink()
            logger.info("Discarded orphaned upload %s", name)
        except FileNotFoundError:
            pass
