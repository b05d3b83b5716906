"""
Tiendas Backend — Store Document Models
=========================================

What:  Pydantic models describing the documents stored in the `stores`
       collection (a Store with embedded Photos and Reviews).
Why:   MongoDB is schemaless; these models are the schema. Every write goes
       through them so the constraints below hold for all stored documents.
How:   Fields are snake_case in Python and camelCase in MongoDB (alias
       generator). `to_mongo()` produces the dict handed to the driver.

Document shape (collection `stores`):
    {
        "_id": ObjectId,
        "name": str, "address": str, "category": str,
        "whatsappPhone": str (digits only),
        "photos": [{"url": str, "storageId": str}, ...]   (max 3),
        "salesDescription": str,
        "website": str, "socialMedia": str,
        "createdAt": datetime, "active": bool,
        "reviews": [{"user": str, "comment": str|None, "rating": 1-5, "date": datetime}]
    }

A model validation failure at write time is a persistence failure, the same
as a server-side schema validator rejecting the document.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Closed category taxonomy. Order matters: GET /api/categorias returns it as-is.
CATEGORIES: Tuple[str, ...] = (
    "Comidas y Restaurantes",
    "Tecnología y Desarrollo",
    "Gimnasios",
    "Papelería y Librerías",
    "Mascotas",
    "Odontología",
    "Ópticas",
    "Pastelerías",
    "Pizzerías",
    "Ropa de Niños",
    "Ropa de Mujeres",
    "Ropa Deportiva",
    "Salones de Belleza",
    "SPA",
    "Talleres de Mecánica",
    "Tiendas Deportivas",
    "Veterinarias",
    "Vidrierías",
)

MAX_PHOTOS = 3
MIN_RATING = 1
MAX_RATING = 5


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MongoDocument(BaseModel):
    """Base for stored documents: camelCase keys, trimmed strings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_mongo(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class Photo(MongoDocument):
    """A hosted image: public URL plus the media host's identifier."""

    url: str
    storage_id: str


class ReviewDocument(MongoDocument):
    """One rating of a store, embedded in the store's `reviews` array."""

    user: str = Field(min_length=1)
    comment: Optional[str] = None
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING)
    date: datetime = Field(default_factory=utcnow)


class StoreDocument(MongoDocument):
    """
    A registered business.

    Lifecycle:
        Inserted once by POST /api/tiendas. Never updated except for reviews
        being appended. `active` is a soft-delete flag that list endpoints
        honour; no endpoint clears it.
    """

    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    category: str
    whatsapp_phone: str = Field(min_length=1)
    photos: List[Photo] = Field(default_factory=list, max_length=MAX_PHOTOS)
    sales_description: str = Field(min_length=1)
    website: str = ""
    social_media: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    active: bool = True
    reviews: List[ReviewDocument] = Field(default_factory=list)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        if v not in CATEGORIES:
            raise ValueError(f"'{v}' is not a valid category")
        return v
