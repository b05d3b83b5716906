"""
Tiendas Backend — Application Package Initializer
===================================================

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, uploads, persistence
    ├─────────────────────────────────────┤
    │   Models (documents) & Schemas (API)│  ← Pydantic
    ├─────────────────────────────────────┤
    │   Database (MongoDB) / Cloudinary   │  ← External collaborators
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
