"""
Tiendas Backend — Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract of the /api endpoints.
Why:   Serialization of MongoDB documents into JSON and OpenAPI generation.
How:   Response models validate the raw documents returned by the driver
       (camelCase keys, ObjectId `_id`) and FastAPI serializes them by alias,
       so clients see the same camelCase field names that are stored.

Design Decision:
    Schemas are separate from the document models in tiendasapp/models:
    the response side must be lenient (any stored document must serialize),
    while the document side must be strict (nothing invalid gets written).
"""

from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class StoreCreate(ApiModel):
    """
    Text fields of the multipart POST /api/tiendas form.

    Every field is optional at this level: a missing required field is
    reported by StoreService as a 400 with a single message, instead of
    FastAPI's per-field 422.
    """
    name: Optional[str] = None
    address: Optional[str] = None
    category: Optional[str] = None
    whatsapp_phone: Optional[str] = None
    sales_description: Optional[str] = None
    website: Optional[str] = None
    social_media: Optional[str] = None


class ReviewCreate(ApiModel):
    """JSON body of POST /api/tiendas/{id}/reviews."""
    user: Optional[str] = Field(default=None, description="Reviewer name")
    comment: Optional[str] = Field(default=None, description="Free-text comment")
    rating: Optional[int] = Field(default=None, description="Rating from 1 to 5")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PhotoResponse(ApiModel):
    url: str
    storage_id: str


class ReviewResponse(ApiModel):
    user: str
    comment: Optional[str] = None
    rating: int
    date: Optional[datetime] = None


class StoreResponse(ApiModel):
    """
    What:  Full store document as returned by the API.
    Who:   GET /api/tiendas, GET /api/tiendas/{id}, POST /api/tiendas.

    `_id` is the 24-character hex form of the document's ObjectId.
    """
    id: str = Field(alias="_id", description="Store identifier (ObjectId hex)")
    name: str
    address: str
    category: str
    whatsapp_phone: str
    photos: List[PhotoResponse] = Field(default_factory=list)
    sales_description: str
    website: str = ""
    social_media: str = ""
    created_at: Optional[datetime] = None
    active: bool = True
    reviews: List[ReviewResponse] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v):
        if isinstance(v, ObjectId):
            return str(v)
        return v


class StoreCreatedResponse(BaseModel):
    """Returned by POST /api/tiendas with HTTP 201."""
    message: str = Field(default="Tienda registrada exitosamente")
    store: StoreResponse


class ReviewCreatedResponse(BaseModel):
    """Returned by POST /api/tiendas/{id}/reviews with HTTP 201."""
    message: str = Field(default="Reseña agregada con éxito")
    review: ReviewResponse


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every failing endpoint.

    Example:
        {"error": "Tienda no encontrada"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    status: str = Field(description="Always 'OK' while the process is serving")
    message: str
    timestamp: str = Field(description="Current server time (ISO 8601, UTC)")
