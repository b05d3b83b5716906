"""
Tiendas Backend — Store Route Handlers
========================================

What:  POST /api/tiendas, GET /api/tiendas, GET /api/tiendas/categoria/{category},
       GET /api/tiendas/{store_id}.
How:   Extracts form fields / files / path params, delegates to StoreService.
       Errors are raised as app exceptions and formatted by the global
       handlers in main.py.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pymongo.asynchronous.collection import AsyncCollection

from tiendasapp.database import get_stores_collection
from tiendasapp.schemas.store import (
    ErrorResponse,
    StoreCreate,
    StoreCreatedResponse,
    StoreResponse,
)
from tiendasapp.services.file_service import PhotoFile, file_service
from tiendasapp.services.store_service import store_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tiendas", tags=["Stores"])


@router.post(
    "",
    status_code=201,
    response_model=StoreCreatedResponse,
    responses={
        400: {"description": "Missing or invalid fields", "model": ErrorResponse},
        413: {"description": "Request body too large", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Register a store",
    description=(
        "Multipart form with the store fields and up to 3 photos (5MB each). "
        "Photos that the image host rejects are skipped; the store is still created."
    ),
)
async def create_store(
    name: Optional[str] = Form(default=None),
    address: Optional[str] = Form(default=None),
    category: Optional[str] = Form(default=None),
    whatsapp_phone: Optional[str] = Form(default=None, alias="whatsappPhone"),
    sales_description: Optional[str] = Form(default=None, alias="salesDescription"),
    website: Optional[str] = Form(default=None),
    social_media: Optional[str] = Form(default=None, alias="socialMedia"),
    photos: Optional[List[UploadFile]] = File(default=None),
    collection: AsyncCollection = Depends(get_stores_collection),
) -> StoreCreatedResponse:
    payload = StoreCreate(
        name=name,
        address=address,
        category=category,
        whatsapp_phone=whatsapp_phone,
        sales_description=sales_description,
        website=website,
        social_media=social_media,
    )

    photos = photos or []
    files = []
    try:
        for upload in photos:
            filename = upload.filename or f"photo-{len(files) + 1}"
            # The parser has already spooled the part; refuse it before loading it
            if upload.size is not None:
                file_service.check_size(filename, upload.size)
            files.append(PhotoFile(filename=filename, content=await upload.read()))
    finally:
        for upload in photos:
            await upload.close()

    logger.info(
        "Received store registration: name=%r, photos=%d",
        name,
        len(files),
    )
    return await store_service.create_store(collection=collection, payload=payload, photos=files)


@router.get(
    "",
    response_model=List[StoreResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List active stores",
    description="All active stores sorted by name. Not paginated.",
)
async def list_stores(
    collection: AsyncCollection = Depends(get_stores_collection),
) -> List[StoreResponse]:
    return await store_service.list_stores(collection=collection)


@router.get(
    "/categoria/{category}",
    response_model=List[StoreResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List active stores in a category",
    description="Exact category match; an unknown category returns an empty list.",
)
async def list_stores_by_category(
    category: str,
    collection: AsyncCollection = Depends(get_stores_collection),
) -> List[StoreResponse]:
    return await store_service.list_stores(collection=collection, category=category)


@router.get(
    "/{store_id}",
    response_model=StoreResponse,
    responses={
        400: {"description": "Malformed store id", "model": ErrorResponse},
        404: {"description": "Store not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a store by id",
)
async def get_store(
    store_id: str,
    collection: AsyncCollection = Depends(get_stores_collection),
) -> StoreResponse:
    return await store_service.get_store(collection=collection, store_id=store_id)
