"""
Tiendas Backend — Store Service (Business Logic)
==================================================

What:  Registers stores and reads them back from the `stores` collection.
Why:   Keeps validation, photo handling and persistence out of the routes.
How:   Each method receives the collection (injected into the route by
       FastAPI) and returns response schemas or raises app exceptions.
Who:   Called by the /api/tiendas route handlers.

Workflow (create_store):
    ┌──────────┐   ┌──────────┐   ┌──────────────┐   ┌─────────┐   ┌────────┐
    │ required │ → │ category │ → │ photo limits │ → │ uploads │ → │ insert │
    │  fields  │   │  check   │   │ (count/size) │   │ (1 by 1)│   │        │
    └──────────┘   └──────────┘   └──────────────┘   └─────────┘   └────────┘
       400            400             400            failures        500 on
                                                     skipped         failure
"""

import logging
import re
from typing import List, Optional, Sequence

from bson import ObjectId
from pydantic import ValidationError as SchemaValidationError
from pymongo.asynchronous.collection import AsyncCollection

from tiendasapp.exceptions import (
    DatabaseError,
    ImageUploadError,
    InvalidIdentifierError,
    NotFoundError,
    TiendasAppError,
    ValidationError,
)
from tiendasapp.models.store import CATEGORIES, Photo, StoreDocument
from tiendasapp.schemas.store import StoreCreate, StoreCreatedResponse, StoreResponse
from tiendasapp.services.file_service import PhotoFile, file_service
from tiendasapp.services.upload_service import upload_service

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "address", "category", "whatsapp_phone", "sales_description")

_NON_DIGIT = re.compile(r"\D")


def parse_store_id(store_id: str) -> ObjectId:
    """
    Convert a path identifier into an ObjectId.

    Raises:
        InvalidIdentifierError: not a 24-character hex string (→ 400)
    """
    if not ObjectId.is_valid(store_id):
        raise InvalidIdentifierError(identifier=store_id)
    return ObjectId(store_id)


def normalize_phone(phone: str) -> str:
    """Strip every non-digit: "+1 (555) 123-4567" → "15551234567"."""
    return _NON_DIGIT.sub("", phone)


class StoreService:
    """
    Business logic layer for store operations.

    Responsibilities:
        - create_store(): validate → upload photos → persist
        - list_stores(): active stores, optionally one category, sorted by name
        - get_store(): single store by id (active or not)

    Error Handling Strategy:
        Client mistakes raise ValidationError / InvalidIdentifierError /
        NotFoundError. Driver errors and documents that fail the stored
        schema are logged and wrapped in DatabaseError.
    """

    async def create_store(
        self,
        collection: AsyncCollection,
        payload: StoreCreate,
        photos: Sequence[PhotoFile] = (),
    ) -> StoreCreatedResponse:
        """
        Register a new store.

        Args:
            collection: The stores collection
            payload: Text fields from the multipart form
            photos: Attached photo parts, in submission order

        Returns:
            StoreCreatedResponse with the stored document

        Raises:
            ValidationError: Missing field, unknown category, photo limits
            DatabaseError: Insert failed or document violates the schema
        """
        fields = {
            name: (getattr(payload, name) or "").strip()
            for name in REQUIRED_FIELDS
        }
        missing = [name for name, value in fields.items() if not value]
        if missing:
            raise ValidationError(
                message="Faltan campos obligatorios",
                context={"missing": missing},
            )

        if fields["category"] not in CATEGORIES:
            raise ValidationError(
                message="Categoría inválida",
                field="category",
                context={"category": fields["category"]},
            )

        accepted = file_service.prepare_photos(photos)
        uploaded = await self._upload_photos(fields["name"], accepted)

        try:
            document = StoreDocument(
                name=fields["name"],
                address=fields["address"],
                category=fields["category"],
                whatsapp_phone=normalize_phone(fields["whatsapp_phone"]),
                photos=uploaded,
                sales_description=fields["sales_description"],
                website=payload.website or "",
                social_media=payload.social_media or "",
            )
        except SchemaValidationError as e:
            logger.error("Store document rejected by schema: %s", str(e))
            raise DatabaseError(context={"errors": e.errors(include_url=False)})

        doc = document.to_mongo()
        try:
            result = await collection.insert_one(doc)
        except Exception as e:
            logger.error("Database error inserting store: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})
        doc["_id"] = result.inserted_id

        logger.info(
            "Store %s registered: name=%r, category=%s, photos=%d/%d",
            result.inserted_id,
            document.name,
            document.category,
            len(uploaded),
            len(accepted),
        )
        return StoreCreatedResponse(store=StoreResponse.model_validate(doc))

    async def _upload_photos(
        self,
        store_name: str,
        photos: Sequence[PhotoFile],
    ) -> List[Photo]:
        """
        Upload photos one at a time, in order; failed uploads are skipped.

        The stored order matches the submission order. A failure affects
        only its own photo.
        """
        uploaded: List[Photo] = []
        for index, photo in enumerate(photos):
            public_id = file_service.build_public_id(store_name, index)
            try:
                uploaded.append(await upload_service.upload(photo.content, public_id))
            except ImageUploadError as e:
                logger.error(
                    "Error uploading photo %d (%s): %s | Context: %s",
                    index + 1,
                    photo.filename,
                    e.message,
                    e.context,
                )
        return uploaded

    async def list_stores(
        self,
        collection: AsyncCollection,
        category: Optional[str] = None,
    ) -> List[StoreResponse]:
        """
        Active stores sorted ascending by name.

        An unknown category is not an error: it simply matches nothing.
        """
        query = {"active": True}
        if category is not None:
            query["category"] = category

        try:
            cursor = collection.find(query).sort("name", 1)
            documents = await cursor.to_list()
        except Exception as e:
            logger.error("Database error listing stores: %s", str(e), exc_info=True)
            raise DatabaseError(context={"category": category, "error_type": type(e).__name__})

        return [StoreResponse.model_validate(doc) for doc in documents]

    async def get_store(self, collection: AsyncCollection, store_id: str) -> StoreResponse:
        """
        Retrieve a single store by id.

        Inactive stores are returned too; only the list endpoints filter them.

        Raises:
            InvalidIdentifierError: malformed id (→ 400)
            NotFoundError: no such store (→ 404)
            DatabaseError: query failed (→ 500)
        """
        oid = parse_store_id(store_id)
        try:
            doc = await collection.find_one({"_id": oid})
            if doc is None:
                raise NotFoundError(resource_id=store_id)
            return StoreResponse.model_validate(doc)
        except TiendasAppError:
            raise
        except Exception as e:
            logger.error("Database error fetching store %s: %s", store_id, str(e))
            raise DatabaseError(context={"store_id": store_id})


# ── Singleton Instance ────────────────────────────────────────────────────
store_service = StoreService()
