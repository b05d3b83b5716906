"""
Tiendas Backend — Abstract Image Host Interface
=================================================

What:  Contract for the external service that hosts store photos.
Why:   StoreService only needs "bytes in, public URL out"; the concrete
       provider (Cloudinary today) stays behind this interface.
How:   Concrete implementations inherit from ImageHost and implement upload().
Who:   Called by StoreService.create_store() once per photo.
"""

from abc import ABC, abstractmethod

from tiendasapp.models.store import Photo


class ImageHost(ABC):
    """
    Abstract interface for photo hosting.

    Contract:
        - upload() returns the hosted Photo (public URL + storage id)
        - Every provider failure is raised as ImageUploadError
        - No retries: one call, one attempt

    Implementations:
        - CloudinaryUploadService (upload_service.py)
    """

    @abstractmethod
    async def upload(self, content: bytes, public_id: str) -> Photo:
        """
        Upload one image.

        Args:
            content:   Raw image bytes.
            public_id: Identifier to store the image under.

        Returns:
            Photo with the public HTTPS URL and the host's storage id.

        Raises:
            ImageUploadError: The host rejected the image or was unreachable.
        """
        ...
