"""Base64 boundary between stored photo bytes and API text."""

import base64
import binascii
import logging
from typing import Optional

from .base import (
    DEFAULT_FORMAT,
    MAX_HEIGHT,
    MAX_WIDTH,
    NormalizedPhoto,
    PhotoDecodeError,
    PhotoStatus,
)
from .resize import resize_with_status

logger = logging.getLogger(__name__)


def b64decode_strict(text: str) -> bytes:
    """Decode standard Base64, tolerating missing ``=`` padding.

    Raises:
        PhotoDecodeError: If the text contains characters outside the
            Base64 alphabet or has an impossible length.
    """
    padded = text + "=" * (-len(text) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as e:
        # ValueError covers non-ASCII input
        raise PhotoDecodeError(f"Invalid Base64 photo data: {e}") from e


def decode_photo(text: Optional[str]) -> Optional[bytes]:
    """Decode client photo text into raw bytes.

    Malformed text is treated as "no photo" rather than an error so a bad
    photo never blocks saving the rest of a record.

    Args:
        text: Base64 photo text, possibly None or empty.

    Returns:
        Optional[bytes]: Decoded bytes, or None for missing or invalid input.
    """
    if not text:
        return None

    try:
        raw = b64decode_strict(text)
    except PhotoDecodeError as e:
        logger.error(f"Error decoding Base64 photo: {e}")
        return None

    return raw or None


def normalize_photo(
    raw: bytes,
    max_width: int = MAX_WIDTH,
    max_height: int = MAX_HEIGHT,
    output_format: str = DEFAULT_FORMAT,
) -> NormalizedPhoto:
    """Resize a photo for display, falling back to the original bytes.

    Never raises: a failed resize yields a FALLBACK result carrying the
    original bytes and the error.
    """
    try:
        return resize_with_status(raw, max_width, max_height, output_format)
    except Exception as e:
        logger.error(f"Falling back to original photo bytes after resize failure: {e}")
        return NormalizedPhoto(content=raw, status=PhotoStatus.FALLBACK, error=e)


def encode_photo(
    raw: Optional[bytes],
    max_width: int = MAX_WIDTH,
    max_height: int = MAX_HEIGHT,
    output_format: str = DEFAULT_FORMAT,
) -> Optional[str]:
    """Encode stored photo bytes as Base64 text for a response.

    The photo is resized into the bounding box first. Output is always
    produced for non-empty input.

    Args:
        raw: Stored photo bytes, possibly None.
        max_width: Width of the bounding box.
        max_height: Height of the bounding box.
        output_format: Pillow format used when the photo is resized.

    Returns:
        Optional[str]: Base64 text, or None when there is no photo.
    """
    if not raw:
        return None

    normalized = normalize_photo(raw, max_width, max_height, output_format)
    return base64.b64encode(normalized.content).decode("ascii")
