"""
Pillow-backed image decoding, resizing and PNG encoding.

These are the only places the import pipeline touches an image library.
Pixel data moves between functions as (height, width, 4) uint8 numpy
arrays in RGBA order.

Classes:
    DecodedImage: RGBA pixels plus dimensions

Functions:
    decode_image: Decode encoded image bytes to RGBA
    load_image: Read and decode an image file
    image_to_rgba: Convert a Pillow image to an RGBA array
    resize_image: Alpha-aware resize of a source region to a target size
    encode_png: Encode RGBA pixels as PNG bytes
    save_png: Write RGBA pixels to a PNG file
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

import numpy as np

from Sprite_Libs.constants import DEFAULT_OUTPUT_FORMAT, DEFAULT_RESAMPLE
from Sprite_Libs.errors import DimensionError, FormatError, SpriteIOError
from Sprite_Libs.pillow_compat import Image, resample_filter

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class DecodedImage:
    """Decoded true-color image.

    Attributes:
        pixels: (height, width, 4) uint8 RGBA array
        width: Image width in pixels
        height: Image height in pixels
    """

    pixels: np.ndarray
    width: int
    height: int


def image_to_rgba(image: Any) -> DecodedImage:
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    pixels = np.array(image, dtype=np.uint8)
    return DecodedImage(pixels=pixels, width=image.width, height=image.height)


def decode_image(data: bytes) -> DecodedImage:
    """
    Decode PNG (or any Pillow-readable) bytes into RGBA pixels.

    Raises:
        FormatError: If the bytes cannot be decoded
    """
    try:
        with Image.open(io.BytesIO(bytes(data))) as image:
            image.load()
            decoded = image_to_rgba(image)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise FormatError(f"Failed to decode image: {e}") from e

    logger.debug(f"Decoded image {decoded.width}x{decoded.height}")
    return decoded


def load_image(path: PathLike) -> DecodedImage:
    """
    Read an image file and decode it to RGBA.

    Raises:
        SpriteIOError: If the file cannot be read
        FormatError: If its contents cannot be decoded
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise SpriteIOError(f"Failed to read image {path}: {e}") from e
    return decode_image(data)


def resize_image(
    pixels: np.ndarray,
    src_width: int,
    src_height: int,
    offset_x: int,
    offset_y: int,
    dst_width: int,
    dst_height: int,
    resample: str = DEFAULT_RESAMPLE,
) -> np.ndarray:
    """
    Resize the region of a source image starting at (offset_x, offset_y).

    The region runs from the offset to the bottom-right corner of the
    source and is scaled to exactly dst_width x dst_height. The offset is
    clamped so that at least one source pixel remains. Pillow resizes RGBA
    with premultiplied alpha, so fully transparent pixels do not bleed
    their color into neighbours.

    Args:
        pixels: RGBA source data, size src_width * src_height * 4
        src_width: Source width
        src_height: Source height
        offset_x: Left edge of the region in source pixels
        offset_y: Top edge of the region in source pixels
        dst_width: Output width
        dst_height: Output height
        resample: Filter name understood by pillow_compat.resample_filter

    Returns:
        (dst_height, dst_width, 4) uint8 array

    Raises:
        DimensionError: If a size is not positive or the buffer does not match the source size
    """
    if src_width < 1 or src_height < 1 or dst_width < 1 or dst_height < 1:
        raise DimensionError(
            f"Resize needs positive sizes, got {src_width}x{src_height} -> {dst_width}x{dst_height}"
        )
    source = np.asarray(pixels, dtype=np.uint8)
    if source.size != src_width * src_height * 4:
        raise DimensionError(
            f"Source buffer holds {source.size} bytes, expected {src_width * src_height * 4}"
        )

    left = min(max(0, offset_x), src_width - 1)
    top = min(max(0, offset_y), src_height - 1)

    image = Image.fromarray(source.reshape(src_height, src_width, 4))
    resized = image.resize(
        (dst_width, dst_height),
        resample=resample_filter(resample),
        box=(left, top, src_width, src_height),
    )
    return np.array(resized, dtype=np.uint8)


def encode_png(pixels: np.ndarray, width: int, height: int) -> bytes:
    """Encode RGBA pixels of the given size as PNG bytes."""
    source = np.asarray(pixels, dtype=np.uint8)
    if source.size != width * height * 4:
        raise DimensionError(f"Pixel buffer holds {source.size} bytes, expected {width * height * 4}")

    buffer = io.BytesIO()
    Image.fromarray(source.reshape(height, width, 4)).save(buffer, format=DEFAULT_OUTPUT_FORMAT)
    return buffer.getvalue()


def save_png(path: PathLike, pixels: np.ndarray, width: int, height: int) -> None:
    data = encode_png(pixels, width, height)
    try:
        Path(path).write_bytes(data)
    except OSError as e:
        raise SpriteIOError(f"Failed to write PNG {path}: {e}") from e
