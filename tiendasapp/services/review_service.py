"""
Tiendas Backend — Review Service
==================================

What:  Lists and appends the reviews embedded in a store document.
Why:   Reviews have no collection or identifier of their own; every
       operation goes through the parent store.
Who:   Called by the /api/tiendas/{id}/reviews route handlers.

Concurrency:
    The append is a single `$push` on the store's `reviews` array, so two
    reviews posted at the same time for the same store are both kept.
"""

import logging
from typing import List

from pydantic import ValidationError as SchemaValidationError
from pymongo.asynchronous.collection import AsyncCollection

from tiendasapp.exceptions import DatabaseError, NotFoundError, TiendasAppError, ValidationError
from tiendasapp.models.store import ReviewDocument
from tiendasapp.schemas.store import ReviewCreate, ReviewCreatedResponse, ReviewResponse
from tiendasapp.services.store_service import parse_store_id

logger = logging.getLogger(__name__)


class ReviewService:
    """Business logic for store reviews."""

    async def list_reviews(
        self,
        collection: AsyncCollection,
        store_id: str,
    ) -> List[ReviewResponse]:
        """
        The store's reviews, in the order they were added.

        Raises:
            InvalidIdentifierError: malformed id (→ 400)
            NotFoundError: no such store (→ 404)
            DatabaseError: query failed (→ 500)
        """
        oid = parse_store_id(store_id)
        try:
            doc = await collection.find_one({"_id": oid}, {"reviews": 1})
            if doc is None:
                raise NotFoundError(resource_id=store_id)
        except TiendasAppError:
            raise
        except Exception as e:
            logger.error("Database error fetching reviews for %s: %s", store_id, str(e))
            raise DatabaseError(context={"store_id": store_id})

        return [ReviewResponse.model_validate(review) for review in doc.get("reviews", [])]

    async def add_review(
        self,
        collection: AsyncCollection,
        store_id: str,
        payload: ReviewCreate,
    ) -> ReviewCreatedResponse:
        """
        Append a review to a store.

        Order of checks:
            1. user and rating present (400), before looking at the id
            2. id well formed (400) and store exists (404)
            3. review satisfies the stored schema, rating in 1-5; a violation
               is a persistence failure (500), not a client error
            4. $push onto the store's reviews

        Raises:
            ValidationError, InvalidIdentifierError, NotFoundError, DatabaseError
        """
        if not (payload.user or "").strip() or not payload.rating:
            raise ValidationError(
                message="Usuario y calificación son obligatorios",
                context={"user": payload.user, "rating": payload.rating},
            )

        oid = parse_store_id(store_id)
        try:
            exists = await collection.find_one({"_id": oid}, {"_id": 1})
            if exists is None:
                raise NotFoundError(resource_id=store_id)

            try:
                review = ReviewDocument(
                    user=payload.user,
                    comment=payload.comment,
                    rating=payload.rating,
                )
            except SchemaValidationError as e:
                logger.error("Review for store %s rejected by schema: %s", store_id, str(e))
                raise DatabaseError(context={"errors": e.errors(include_url=False)})

            result = await collection.update_one(
                {"_id": oid},
                {"$push": {"reviews": review.to_mongo()}},
            )
            if result.matched_count == 0:
                raise NotFoundError(resource_id=store_id)
        except TiendasAppError:
            raise
        except Exception as e:
            logger.error("Database error adding review to %s: %s", store_id, str(e), exc_info=True)
            raise DatabaseError(context={"store_id": store_id, "error_type": type(e).__name__})

        logger.info("Review added to store %s: rating=%d", store_id, review.rating)
        return ReviewCreatedResponse(review=ReviewResponse.model_validate(review.to_mongo()))


# ── Singleton Instance ────────────────────────────────────────────────────
review_service = ReviewService()
