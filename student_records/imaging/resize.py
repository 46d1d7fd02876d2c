"""Bounded, aspect-ratio-preserving photo resizing with Pillow."""

import io
import logging

from PIL import Image, UnidentifiedImageError

from .base import (
    DEFAULT_FORMAT,
    MAX_HEIGHT,
    MAX_WIDTH,
    CorruptImageError,
    NormalizedPhoto,
    PhotoStatus,
    ResizeIOError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)


def fit_within(
    width: int,
    height: int,
    max_width: int = MAX_WIDTH,
    max_height: int = MAX_HEIGHT,
) -> tuple[int, int]:
    """Compute the size of a ``width`` x ``height`` image scaled into the box.

    Wide images (aspect ratio strictly above 1) are pinned to ``max_width``;
    everything else, square included, is pinned to ``max_height``.

    Args:
        width: Original width in pixels.
        height: Original height in pixels.
        max_width: Width of the bounding box.
        max_height: Height of the bounding box.

    Returns:
        tuple[int, int]: New (width, height), each at least 1 pixel.

    Raises:
        ValueError: If any dimension is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if max_width <= 0 or max_height <= 0:
        raise ValueError(f"Bounding box must be positive, got {max_width}x{max_height}")

    aspect_ratio = width / height

    if aspect_ratio > 1:
        new_width = max_width
        new_height = round(max_width / aspect_ratio)
        # Non-square boxes can still leave the pinned-to side too tall
        if new_height > max_height:
            new_height = max_height
            new_width = round(max_height * aspect_ratio)
    else:
        new_height = max_height
        new_width = round(max_height * aspect_ratio)
        if new_width > max_width:
            new_width = max_width
            new_height = round(max_width / aspect_ratio)

    return max(1, new_width), max(1, new_height)


def open_image(raw: bytes) -> Image.Image:
    """Open and fully decode image bytes.

    Raises:
        UnsupportedFormatError: If no Pillow plugin recognises the bytes.
        CorruptImageError: If the header is recognised but decoding fails.
    """
    try:
        image = Image.open(io.BytesIO(raw))
    except UnidentifiedImageError as e:
        raise UnsupportedFormatError(f"Unsupported image format: {e}") from e
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise CorruptImageError(f"Could not open image: {e}") from e

    try:
        # Image.open is lazy; force pixel decoding so truncated data fails here
        image.load()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        image.close()
        raise CorruptImageError(f"Could not decode image: {e}") from e

    return image


def read_dimensions(raw: bytes) -> tuple[int, int]:
    """Return the (width, height) of an encoded image."""
    with open_image(raw) as image:
        return image.size


def resize_with_status(
    raw: bytes,
    max_width: int = MAX_WIDTH,
    max_height: int = MAX_HEIGHT,
    output_format: str = DEFAULT_FORMAT,
) -> NormalizedPhoto:
    """Resize a photo into the bounding box and report what happened.

    Unreadable input and input already inside the box are returned
    unchanged. Anything else is resampled to RGB and written in
    ``output_format``, whatever its original format was.

    Raises:
        ResizeIOError: If resampling or writing the new image fails.
    """
    try:
        image = open_image(raw)
    except (UnsupportedFormatError, CorruptImageError) as e:
        logger.warning(f"Could not read image for resizing: {e}")
        return NormalizedPhoto(content=raw, status=PhotoStatus.UNREADABLE, error=e)

    with image:
        width, height = image.size

        if width <= max_width and height <= max_height:
            return NormalizedPhoto(content=raw, status=PhotoStatus.WITHIN_BOUNDS)

        new_size = fit_within(width, height, max_width, max_height)

        try:
            resized = image.convert("RGB").resize(new_size, Image.Resampling.LANCZOS)
            buffer = io.BytesIO()
            resized.save(buffer, format=output_format)
        except (OSError, ValueError, KeyError) as e:
            # KeyError is Pillow's answer to an unknown save format
            logger.error(f"Error resizing image from {width}x{height} to {new_size}: {e}")
            raise ResizeIOError(f"Failed to write resized image: {e}") from e

    logger.debug(f"Resized image from {width}x{height} to {new_size[0]}x{new_size[1]}")
    return NormalizedPhoto(content=buffer.getvalue(), status=PhotoStatus.RESIZED)


def resize_photo(
    raw: bytes,
    max_width: int = MAX_WIDTH,
    max_height: int = MAX_HEIGHT,
    output_format: str = DEFAULT_FORMAT,
) -> bytes:
    """Resize a photo if it exceeds the bounding box.

    Args:
        raw: Encoded image bytes.
        max_width: Width of the bounding box.
        max_height: Height of the bounding box.
        output_format: Pillow format used for resized output.

    Returns:
        bytes: The resized image, or ``raw`` itself when no resize was needed
        or the bytes could not be read as an image.

    Raises:
        ResizeIOError: If the resized image cannot be produced.
    """
    return resize_with_status(raw, max_width, max_height, output_format).content
