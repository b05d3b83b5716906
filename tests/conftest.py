"""
Tiendas Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Tests run without MongoDB or Cloudinary: the collection is replaced by
       an in-memory FakeCollection and uploads are patched per test.

Fixtures:
    ├── fake_collection: in-memory stand-in for the stores collection
    ├── mock_collection: AsyncMock collection for failure injection
    ├── store_factory: inserts a store document into fake_collection
    ├── sample_image_bytes: minimal JPEG bytes for upload tests
    └── test_client: HTTPX AsyncClient bound to the app, collection overridden
"""

import copy
import os
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any app imports
os.environ["MONGODB_URI"] = "mongodb://localhost:27017/tiendasapp_test"
os.environ["CLOUDINARY_CLOUD_NAME"] = ""
os.environ["CLOUDINARY_API_KEY"] = ""
os.environ["CLOUDINARY_API_SECRET"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# In-memory collection
# ══════════════════════════════════════════════════════════════════════════

def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in query.items())


def _project(document: Dict[str, Any], projection: Optional[Dict[str, int]]) -> Dict[str, Any]:
    if not projection:
        return copy.deepcopy(document)
    projected = {"_id": document["_id"]}
    for key, include in projection.items():
        if include and key in document:
            projected[key] = copy.deepcopy(document[key])
    return projected


class FakeCursor:
    """Supports the find(...).sort(...).to_list() chain used by the services."""

    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._documents = sorted(
            self._documents,
            key=lambda doc: doc.get(key),
            reverse=direction < 0,
        )
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        documents = self._documents if length is None else self._documents[:length]
        return [copy.deepcopy(doc) for doc in documents]


class FakeCollection:
    """
    Minimal in-memory replacement for an AsyncCollection.

    Implements exactly what the services call: find_one (with projection),
    find + sort + to_list, insert_one, and update_one with $push.
    """

    def __init__(self):
        self.documents: List[Dict[str, Any]] = []

    async def find_one(self, query, projection=None):
        for document in self.documents:
            if _matches(document, query):
                return _project(document, projection)
        return None

    def find(self, query=None):
        query = query or {}
        return FakeCursor([doc for doc in self.documents if _matches(doc, query)])

    async def insert_one(self, document):
        document.setdefault("_id", ObjectId())
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])

    async def update_one(self, query, update):
        for document in self.documents:
            if _matches(document, query):
                for field, value in update.get("$push", {}).items():
                    document.setdefault(field, []).append(copy.deepcopy(value))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    def get(self, store_id: ObjectId) -> Optional[Dict[str, Any]]:
        for document in self.documents:
            if document["_id"] == store_id:
                return document
        return None


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def mock_collection():
    """
    AsyncMock collection for simulating driver failures.

    Usage:
        mock_collection.insert_one.side_effect = RuntimeError("connection reset")
    """
    collection = MagicMock()
    collection.find_one = AsyncMock()
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.find = MagicMock()
    return collection


@pytest.fixture
def store_factory(fake_collection):
    """
    Inserts a valid store document and returns it.

    Usage:
        store = store_factory(name="Pizzería Roma", category="Pizzerías")
    """
    counter = {"n": 0}

    def _create(**overrides) -> Dict[str, Any]:
        counter["n"] += 1
        document = {
            "_id": ObjectId(),
            "name": f"Tienda {counter['n']}",
            "address": "Calle 10 # 20-30",
            "category": "Comidas y Restaurantes",
            "whatsappPhone": "573001234567",
            "photos": [],
            "salesDescription": "Almuerzos caseros todos los días",
            "website": "",
            "socialMedia": "",
            "createdAt": datetime(2024, 6, 1, tzinfo=timezone.utc) + timedelta(minutes=counter["n"]),
            "active": True,
            "reviews": [],
        }
        document.update(overrides)
        fake_collection.documents.append(document)
        return document

    return _create


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: Start of Image + JFIF header + End of Image."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def valid_form():
    """Text fields of a valid POST /api/tiendas form (wire names)."""
    return {
        "name": "Panadería La Espiga",
        "address": "Carrera 7 # 45-12",
        "category": "Pastelerías",
        "whatsappPhone": "+57 (300) 123-4567",
        "salesDescription": "Pan artesanal y tortas por encargo",
        "website": "https://laespiga.example",
        "socialMedia": "@laespiga",
    }


@pytest_asyncio.fixture
async def test_client(fake_collection):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    The lifespan is not run, so no MongoDB connection is attempted; the
    stores collection dependency is overridden with fake_collection.
    """
    from tiendasapp.database import get_stores_collection
    from tiendasapp.main import app

    app.dependency_overrides[get_stores_collection] = lambda: fake_collection
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
