"""Photo normalization pipeline."""

from .base import (
    CorruptImageError,
    NormalizedPhoto,
    PhotoDecodeError,
    PhotoProcessingError,
    PhotoStatus,
    ResizeIOError,
    UnsupportedFormatError,
)
from .codec import decode_photo, encode_photo, normalize_photo
from .resize import fit_within, read_dimensions, resize_photo

__all__ = [
    "decode_photo",
    "encode_photo",
    "normalize_photo",
    "resize_photo",
    "fit_within",
    "read_dimensions",
    "NormalizedPhoto",
    "PhotoStatus",
    "PhotoProcessingError",
    "PhotoDecodeError",
    "UnsupportedFormatError",
    "CorruptImageError",
    "ResizeIOError",
]
