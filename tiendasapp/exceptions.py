"""
Tiendas Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the error scenarios of the API.
Why:   Services raise these instead of building HTTP responses; global
       handlers registered in main.py turn them into status codes.
How:   Each exception carries a user-facing message and an optional context
       dict. The message is returned as {"error": message}; the context is
       only ever logged.

Exception Hierarchy:
    TiendasAppError (base)
    ├── ValidationError          → 400 Bad Request (missing/invalid fields)
    ├── InvalidIdentifierError   → 400 Bad Request (malformed store id)
    ├── NotFoundError            → 404 Not Found
    ├── PayloadTooLargeError     → 413 Payload Too Large
    ├── DatabaseError            → 500 Internal Server Error
    └── ImageUploadError         → never reaches a client (photo is skipped)
"""

from typing import Any, Dict, Optional


class TiendasAppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "Error interno del servidor",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TiendasAppError):
    """
    Raised when client input fails validation.

    When:    Required form/body fields missing or empty, unknown category,
             too many photos, photo over the size cap.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Faltan campos obligatorios",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidIdentifierError(TiendasAppError):
    """
    Raised when a path identifier is not a well-formed document id.

    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        identifier: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["identifier"] = identifier
        super().__init__(message="ID inválido", context=ctx)
        self.identifier = identifier


class NotFoundError(TiendasAppError):
    """
    Raised when a requested store does not exist.

    MongoDB returns None for missing documents (not an exception); services
    convert that None into this error.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        message: str = "Tienda no encontrada",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class PayloadTooLargeError(TiendasAppError):
    """
    Raised when the request body exceeds the configured cap.

    Raised and answered inside BodySizeLimitMiddleware; it never reaches the
    route exception handlers.
    HTTP:    413 Payload Too Large
    """

    def __init__(
        self,
        limit: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["limit"] = limit
        super().__init__(
            message=f"La solicitud excede el tamaño máximo permitido ({limit // (1024 * 1024)}MB)",
            context=ctx,
        )
        self.limit = limit


class DatabaseError(TiendasAppError):
    """
    Raised when a persistence operation fails.

    When:    Driver errors, lost connection, or a document that violates the
             stored schema (e.g. a rating outside 1-5).
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; driver details go
    to the log only.
    """

    def __init__(
        self,
        message: str = "Error interno del servidor",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ImageUploadError(TiendasAppError):
    """
    Raised by the upload service when the media host rejects a photo.

    Never mapped to a response: StoreService logs it and drops the photo.
    """

    def __init__(
        self,
        message: str = "No se pudo subir la imagen",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
