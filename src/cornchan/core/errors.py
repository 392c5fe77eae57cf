"""Exception taxonomy shared by the services and the HTTP layer.

Every error here is scoped to the request that raised it. The API maps each
class to a status code in :mod:`cornchan.main`.
"""

from __future__ import annotations


class CornchanError(RuntimeError):
    """Base exception for all cornchan failures."""

    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFound(CornchanError):
    """Raised when a board or thread does not exist."""

    status_code = 404
    default_detail = "Not found"


class ImageError(CornchanError):
    """Base class for rejected uploads."""

    status_code = 400
    default_detail = "Invalid image"


class InvalidImageFormat(ImageError):
    """Raised when the upload prefix matches no supported image format."""

    default_detail = "invalid image format"


class ImageDecodeError(ImageError):
    """Raised when a sniffed image cannot be fully decoded."""

    default_detail = "failed to decode image"


class Forbidden(CornchanError):
    """Raised when the caller has an active ban."""

    status_code = 403
    default_detail = "banned"


class StoreUnavailable(CornchanError):
    """Raised when the backing store cannot be reached."""

    status_code = 503
    default_detail = "Backing store unavailable"


class EncodingError(CornchanError):
    """Raised when a persisted record cannot be decoded."""

    status_code = 500
    default_detail = "Corrupt record in backing store"


__all__ = [
    "CornchanError",
    "EncodingError",
    "Forbidden",
    "ImageDecodeError",
    "ImageError",
    "InvalidImageFormat",
    "NotFound",
    "StoreUnavailable",
]
