"""
Tiendas Backend — Cloudinary Upload Service
=============================================

What:  ImageHost implementation backed by Cloudinary.
Why:   Store photos are served from Cloudinary's CDN, not from this service.
How:   Uploads the raw bytes with a fixed fill-crop resize (800x600, automatic
       quality) into the configured folder, and returns the HTTPS URL and
       Cloudinary public id.
Who:   Instantiated once at import and configured by the app lifespan;
       StoreService calls upload() per photo.

Blocking SDK:
    The cloudinary SDK is synchronous (urllib3 under the hood). Each call runs
    in a worker thread via asyncio.to_thread so the event loop keeps serving
    other requests while the upload is in flight.

Failure policy:
    No retries. Any SDK or network error becomes ImageUploadError; the caller
    decides what to do with it (StoreService skips the photo).
"""

import asyncio
import io
import logging
import time
from typing import Any, Dict, List

import cloudinary
import cloudinary.uploader
from pydantic import ValidationError as SchemaValidationError

from tiendasapp.config import settings
from tiendasapp.exceptions import ImageUploadError
from tiendasapp.models.store import Photo
from tiendasapp.services.image_host import ImageHost

logger = logging.getLogger(__name__)


class CloudinaryUploadService(ImageHost):
    """Uploads store photos to Cloudinary."""

    def configure(self) -> None:
        """Push credentials from settings into the SDK."""
        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True,
        )
        logger.info(
            "Cloudinary configured for cloud=%s, folder=%s",
            settings.cloudinary_cloud_name,
            settings.cloudinary_folder,
        )

    @property
    def transformation(self) -> List[Dict[str, Any]]:
        return [
            {
                "width": settings.photo_width,
                "height": settings.photo_height,
                "crop": "fill",
                "quality": "auto",
            }
        ]

    async def upload(self, content: bytes, public_id: str) -> Photo:
        start_time = time.perf_counter()
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                io.BytesIO(content),
                folder=settings.cloudinary_folder,
                public_id=public_id,
                transformation=self.transformation,
            )
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.warning(
                "Cloudinary upload of %s failed after %.0fms: %s",
                public_id,
                duration_ms,
                str(e),
            )
            raise ImageUploadError(
                context={"public_id": public_id, "error": str(e), "error_type": type(e).__name__},
            )

        try:
            photo = Photo(url=result["secure_url"], storage_id=result["public_id"])
        except (KeyError, TypeError, SchemaValidationError) as e:
            raise ImageUploadError(
                message="Respuesta inesperada del servicio de imágenes",
                context={"public_id": public_id, "error": str(e)},
            )

        logger.info(
            "Uploaded %s (%d bytes) in %.0fms",
            photo.storage_id,
            len(content),
            (time.perf_counter() - start_time) * 1000,
        )
        return photo


# ── Singleton Instance ────────────────────────────────────────────────────
upload_service = CloudinaryUploadService()
