# Services package init
"""
Tiendas Backend — Services Layer
==================================

What:  Business logic layer sitting between routes (HTTP) and MongoDB.
Why:   Routes handle HTTP; services handle validation, uploads and persistence.
How:   Stateless singletons; the stores collection is passed in per call.

Service Inventory:
    - StoreService: register, list and fetch stores
    - ReviewService: list and append embedded reviews
    - FileService: photo attachment limits and media-host naming
    - ImageHost (abstract): interface for photo hosting
    - CloudinaryUploadService: ImageHost backed by Cloudinary
"""
