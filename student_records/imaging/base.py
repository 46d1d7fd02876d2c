"""Shared types and errors for the photo pipeline."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Bounding box applied to photos before they are sent to clients
MAX_WIDTH = 300
MAX_HEIGHT = 300

# Pillow format name every resized photo is written in
DEFAULT_FORMAT = "JPEG"


class PhotoProcessingError(Exception):
    """Base exception for photo pipeline errors."""
    pass


class PhotoDecodeError(PhotoProcessingError):
    """Raised when photo text is not valid Base64."""
    pass


class UnsupportedFormatError(PhotoProcessingError):
    """Raised when Pillow does not recognise the bytes as an image."""
    pass


class CorruptImageError(PhotoProcessingError):
    """Raised when the bytes look like an image but cannot be decoded."""
    pass


class ResizeIOError(PhotoProcessingError):
    """Raised when the resized image cannot be produced or written."""
    pass


class PhotoStatus(str, Enum):
    """How a photo came out of normalization."""

    RESIZED = "resized"
    WITHIN_BOUNDS = "within_bounds"
    UNREADABLE = "unreadable"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class NormalizedPhoto:
    """Outcome of normalizing a photo.

    ``content`` is always usable: it holds the resized bytes when
    ``status`` is RESIZED and the original bytes otherwise. ``error`` keeps
    the exception that was recovered from, if any.
    """

    content: bytes
    status: PhotoStatus
    error: Optional[Exception] = None

    @property
    def changed(self) -> bool:
        return self.status is PhotoStatus.RESIZED
