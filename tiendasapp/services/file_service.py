"""
Tiendas Backend — Photo File Service
======================================

What:  Validates the photo attachments of a store registration and names
       them for the media host.
Why:   Centralizes the upload limits (count and per-file size) in one place.
How:   Works on in-memory PhotoFile tuples built by the route from the
       multipart parts. Nothing is written to local disk; the bytes go
       straight to the media host.
Who:   Called by StoreService before any photo is uploaded.

Limits (from settings):
    max_photos:      3 attachments per store
    max_photo_size:  5MB per attachment
"""

import logging
import re
import time
from typing import List, NamedTuple, Optional, Sequence

from tiendasapp.config import settings
from tiendasapp.exceptions import ValidationError

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")


class PhotoFile(NamedTuple):
    """One multipart photo part, already read into memory."""
    filename: str
    content: bytes


class FileService:
    """
    Validation and naming of photo attachments.

    Lifecycle of an attachment:
        1. Route reads each `photos` part into a PhotoFile
        2. prepare_photos() drops empty parts and enforces count/size limits
        3. StoreService uploads the survivors one by one, in order, using
           build_public_id() for the media-host identifier
    """

    def validate_count(self, count: int) -> None:
        """Raises ValidationError when more photos than allowed are attached."""
        if count > settings.max_photos:
            raise ValidationError(
                message=f"Se permiten como máximo {settings.max_photos} fotos",
                field="photos",
                context={"max_photos": settings.max_photos, "received": count},
            )

    def check_size(self, filename: str, size: int) -> None:
        """
        Validate a photo size against the per-file cap.

        The route calls this with the size the multipart parser recorded,
        before the part is read into memory.

        Raises:
            ValidationError with human-readable size limit message
        """
        if size > settings.max_photo_size:
            max_mb = settings.max_photo_size / (1024 * 1024)
            raise ValidationError(
                message=f"La foto '{filename}' supera el tamaño máximo de {max_mb:.0f}MB",
                field="photos",
                context={"max_size": settings.max_photo_size, "actual_size": size},
            )

    def validate_size(self, photo: PhotoFile) -> None:
        self.check_size(photo.filename, len(photo.content))

    def prepare_photos(self, photos: Sequence[PhotoFile]) -> List[PhotoFile]:
        """
        Drop empty parts and check limits, preserving input order.

        Browsers submit an empty part when a file input is left blank;
        those are not photos and do not count towards the limit.
        """
        accepted = [photo for photo in photos if photo.content]
        skipped = len(photos) - len(accepted)
        if skipped:
            logger.debug("Ignoring %d empty photo part(s)", skipped)

        self.validate_count(len(accepted))
        for photo in accepted:
            self.validate_size(photo)
        return accepted

    def build_public_id(
        self,
        store_name: str,
        index: int,
        timestamp_ms: Optional[int] = None,
    ) -> str:
        """
        Media-host identifier for the index-th photo of a store.

        Format: <epoch milliseconds>_<index>_<store name, whitespace runs as "_">
        Example: 1718034000123_0_Panadería_La_Espiga
        """
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        return f"{timestamp_ms}_{index}_{_WHITESPACE_RUN.sub('_', store_name)}"


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
