"""
Tiendas Backend — Review Route Handlers
=========================================

What:  GET and POST /api/tiendas/{store_id}/reviews.
Why:   Reviews only exist inside their store; there is no per-review endpoint.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends
from pymongo.asynchronous.collection import AsyncCollection

from tiendasapp.database import get_stores_collection
from tiendasapp.schemas.store import (
    ErrorResponse,
    ReviewCreate,
    ReviewCreatedResponse,
    ReviewResponse,
)
from tiendasapp.services.review_service import review_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tiendas", tags=["Reviews"])


@router.get(
    "/{store_id}/reviews",
    response_model=List[ReviewResponse],
    responses={
        400: {"description": "Malformed store id", "model": ErrorResponse},
        404: {"description": "Store not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List the reviews of a store",
)
async def list_reviews(
    store_id: str,
    collection: AsyncCollection = Depends(get_stores_collection),
) -> List[ReviewResponse]:
    return await review_service.list_reviews(collection=collection, store_id=store_id)


@router.post(
    "/{store_id}/reviews",
    status_code=201,
    response_model=ReviewCreatedResponse,
    responses={
        400: {"description": "Missing user/rating or malformed id", "model": ErrorResponse},
        404: {"description": "Store not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Add a review to a store",
    description="JSON body with `user`, `rating` (1-5) and an optional `comment`.",
)
async def add_review(
    store_id: str,
    payload: Optional[ReviewCreate] = Body(default=None),
    collection: AsyncCollection = Depends(get_stores_collection),
) -> ReviewCreatedResponse:
    # A missing body is reported like missing fields, not as a schema error
    return await review_service.add_review(
        collection=collection,
        store_id=store_id,
        payload=payload or ReviewCreate(),
    )
