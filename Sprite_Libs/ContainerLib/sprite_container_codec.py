"""
SPRTZ compressed sprite containers.

Header (16 bytes, little-endian):

    Offset | Size | Description
    -------|------|------------------------------------
    0x00   | 4    | Magic "SPTZ"
    0x04   | 2    | Version (1 or 2)
    0x06   | 1    | Width (1-40)
    0x07   | 1    | Height (1-40)
    0x08   | 4    | Uncompressed pixel data size (width * height)
    0x0C   | 4    | Compressed pixel data size

Version 1 follows the header with 42 bytes of RGB for palette indices
2-15 (indices 0 and 1 are always transparent / opaque black and never
stored), then the zlib-compressed pixel indices (one byte per pixel).

Version 2 inserts a palette-mode byte after the header: 0-31 selects a
standard library palette (no palette block follows), 0xFF means a custom
42-byte palette block follows.

Classes:
    DecodedSprite: A decoded canvas plus how its palette was stored

Functions:
    encode_sprtz_v1 / encode_sprtz_v2_custom / encode_sprtz_v2_standard
    decode_sprtz_v1 / decode_sprtz_v2 / decode_sprtz
    save_sprtz / load_sprtz
    compress_pixels / decompress_pixels / estimate_compressed_size / compressed_size_bound
"""

import logging
import struct
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from Sprite_Libs.constants import (
    FIRST_FREE_INDEX,
    OPAQUE_BLACK_COLOR,
    PALETTE_MODE_CUSTOM,
    PALETTE_SIZE,
    SPRTZ_HEADER_FORMAT,
    SPRTZ_HEADER_SIZE,
    SPRTZ_MAGIC,
    SPRTZ_PALETTE_BLOCK_SIZE,
    SPRTZ_VERSION_1,
    SPRTZ_VERSION_2,
    STANDARD_PALETTE_COUNT,
    TRANSPARENT_COLOR,
    ZLIB_LEVEL,
)
from Sprite_Libs.errors import (
    FormatError,
    LibraryNotInitializedError,
    SizeMismatchError,
    SpriteIOError,
    ValidationError,
)
from Sprite_Libs.SpriteLib.sprite_models import RgbaColor, SpriteCanvas, check_dimensions

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class DecodedSprite:
    """Result of loading a SPRTZ container.

    Attributes:
        canvas: The decoded sprite
        is_standard: True when the palette came from the standard library
        palette_id: Standard palette id (0-31) or PALETTE_MODE_CUSTOM (0xFF)
        version: Container generation that was read (1 or 2)
    """

    canvas: SpriteCanvas
    is_standard: bool = False
    palette_id: int = PALETTE_MODE_CUSTOM
    version: int = SPRTZ_VERSION_2


# ----------------------------------------------------------------------
# Pixel stream compression
# ----------------------------------------------------------------------

def compress_pixels(pixels: bytes) -> bytes:
    return zlib.compress(bytes(pixels), ZLIB_LEVEL)


def decompress_pixels(data: bytes, expected_size: int) -> bytearray:
    """
    Inflate a compressed pixel stream.

    Raises:
        FormatError: If the stream is not valid zlib data
        SizeMismatchError: If the inflated length is not `expected_size`
    """
    try:
        pixels = zlib.decompress(bytes(data))
    except zlib.error as e:
        raise FormatError(f"Corrupt pixel stream: {e}") from e

    if len(pixels) != expected_size:
        raise SizeMismatchError(
            f"Decompressed {len(pixels)} bytes, expected {expected_size}"
        )
    return bytearray(pixels)


def estimate_compressed_size(pixels: bytes) -> int:
    """Size of the stream compress_pixels would produce for `pixels`."""
    return len(compress_pixels(pixels))


def compressed_size_bound(pixel_count: int) -> int:
    """Worst-case compressed size for `pixel_count` pixels (zlib compressBound)."""
    return pixel_count + (pixel_count >> 12) + (pixel_count >> 14) + (pixel_count >> 25) + 13


# ----------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------

def _check_canvas(canvas: SpriteCanvas) -> None:
    check_dimensions(canvas.width, canvas.height)
    if len(canvas.pixels) != canvas.pixel_count:
        raise SizeMismatchError(
            f"Canvas holds {len(canvas.pixels)} pixels, expected {canvas.pixel_count}"
        )
    if any(value >= PALETTE_SIZE for value in canvas.pixels):
        raise ValidationError("Canvas contains color indices above 15")


def _pack_header(version: int, canvas: SpriteCanvas, compressed: bytes) -> bytes:
    return struct.pack(
        SPRTZ_HEADER_FORMAT,
        SPRTZ_MAGIC,
        version,
        canvas.width,
        canvas.height,
        canvas.pixel_count,
        len(compressed),
    )


def _palette_block(palette: List[RgbaColor]) -> bytes:
    block = bytearray()
    for r, g, b, _ in palette[FIRST_FREE_INDEX:PALETTE_SIZE]:
        block.extend((r, g, b))
    return bytes(block)


def encode_sprtz_v1(canvas: SpriteCanvas) -> bytes:
    """Encode a canvas as a version 1 container (custom palette)."""
    _check_canvas(canvas)
    compressed = compress_pixels(canvas.pixels)
    data = _pack_header(SPRTZ_VERSION_1, canvas, compressed) + _palette_block(canvas.palette) + compressed
    logger.debug(f"Encoded SPRTZ v1: {canvas.pixel_count} pixels -> {len(compressed)} bytes")
    return data


def encode_sprtz_v2_custom(canvas: SpriteCanvas) -> bytes:
    """Encode a canvas as a version 2 container with an embedded palette."""
    _check_canvas(canvas)
    compressed = compress_pixels(canvas.pixels)
    data = (
        _pack_header(SPRTZ_VERSION_2, canvas, compressed)
        + bytes((PALETTE_MODE_CUSTOM,))
        + _palette_block(canvas.palette)
        + compressed
    )
    logger.debug(f"Encoded SPRTZ v2 (custom): {canvas.pixel_count} pixels -> {len(compressed)} bytes")
    return data


def encode_sprtz_v2_standard(canvas: SpriteCanvas, palette_id: int) -> bytes:
    """
    Encode a canvas as a version 2 container referencing a standard palette.

    The canvas palette is not stored; decoding yields the library palette
    for `palette_id`.

    Raises:
        ValidationError: If palette_id is outside 0-31
    """
    if not 0 <= palette_id < STANDARD_PALETTE_COUNT:
        raise ValidationError(f"Standard palette id out of range 0-31: {palette_id}")
    _check_canvas(canvas)
    compressed = compress_pixels(canvas.pixels)
    data = _pack_header(SPRTZ_VERSION_2, canvas, compressed) + bytes((palette_id,)) + compressed
    logger.debug(
        f"Encoded SPRTZ v2 (standard {palette_id}): {canvas.pixel_count} pixels -> {len(compressed)} bytes"
    )
    return data


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------

def _parse_header(data: bytes) -> Tuple[int, int, int, int, int]:
    if len(data) < SPRTZ_HEADER_SIZE:
        raise FormatError(f"SPRTZ data too short for header: {len(data)} bytes")

    magic, version, width, height, raw_size, compressed_size = struct.unpack_from(
        SPRTZ_HEADER_FORMAT, data, 0
    )
    if magic != SPRTZ_MAGIC:
        raise FormatError(f"Bad SPRTZ magic: {magic!r}")
    return version, width, height, raw_size, compressed_size


def _check_declared_size(width: int, height: int, raw_size: int) -> None:
    check_dimensions(width, height)
    if raw_size != width * height:
        raise SizeMismatchError(
            f"Declared uncompressed size {raw_size} does not match {width}x{height}"
        )


def _read_palette_block(data: bytes, offset: int) -> List[RgbaColor]:
    block = data[offset:offset + SPRTZ_PALETTE_BLOCK_SIZE]
    if len(block) != SPRTZ_PALETTE_BLOCK_SIZE:
        raise FormatError("SPRTZ data truncated inside palette block")

    palette: List[RgbaColor] = [TRANSPARENT_COLOR, OPAQUE_BLACK_COLOR]
    for i in range(0, SPRTZ_PALETTE_BLOCK_SIZE, 3):
        palette.append((block[i], block[i + 1], block[i + 2], 255))
    return palette


def _read_pixels(data: bytes, offset: int, compressed_size: int, pixel_count: int) -> bytearray:
    payload = data[offset:offset + compressed_size]
    if len(payload) != compressed_size:
        raise FormatError(
            f"SPRTZ data truncated: expected {compressed_size} compressed bytes, found {len(payload)}"
        )
    return decompress_pixels(payload, pixel_count)


def decode_sprtz_v1(data: bytes) -> SpriteCanvas:
    """
    Decode a version 1 container.

    Raises:
        FormatError: Bad magic, wrong version, truncated or corrupt data
        SizeMismatchError: Declared or decompressed size differs from width x height
        DimensionError: Width or height outside 1-40
    """
    version, width, height, raw_size, compressed_size = _parse_header(data)
    if version != SPRTZ_VERSION_1:
        raise FormatError(f"Unsupported SPRTZ v1 version: {version}")
    _check_declared_size(width, height, raw_size)

    palette = _read_palette_block(data, SPRTZ_HEADER_SIZE)
    offset = SPRTZ_HEADER_SIZE + SPRTZ_PALETTE_BLOCK_SIZE
    pixels = _read_pixels(data, offset, compressed_size, raw_size)
    return SpriteCanvas(width=width, height=height, pixels=pixels, palette=palette)


def decode_sprtz_v2(data: bytes, library=None) -> DecodedSprite:
    """
    Decode a version 2 container, falling back to version 1 transparently.

    Args:
        data: Container bytes
        library: StandardPaletteLibrary used when the palette mode is 0-31

    Raises:
        FormatError: Bad magic, unsupported version, truncated or corrupt data
        SizeMismatchError: Declared or decompressed size differs from width x height
        ValidationError: Palette mode outside 0-31 and not 0xFF
        LibraryNotInitializedError: Standard palette requested without an initialized library
    """
    version, width, height, raw_size, compressed_size = _parse_header(data)
    if version == SPRTZ_VERSION_1:
        return DecodedSprite(canvas=decode_sprtz_v1(data), version=SPRTZ_VERSION_1)
    if version != SPRTZ_VERSION_2:
        raise FormatError(f"Unsupported SPRTZ version: {version}")
    _check_declared_size(width, height, raw_size)

    if len(data) <= SPRTZ_HEADER_SIZE:
        raise FormatError("SPRTZ v2 data truncated before palette mode")
    palette_mode = data[SPRTZ_HEADER_SIZE]
    offset = SPRTZ_HEADER_SIZE + 1

    if palette_mode == PALETTE_MODE_CUSTOM:
        palette = _read_palette_block(data, offset)
        offset += SPRTZ_PALETTE_BLOCK_SIZE
        is_standard = False
    elif palette_mode < STANDARD_PALETTE_COUNT:
        if library is None or not library.is_initialized:
            raise LibraryNotInitializedError(
                f"Standard palette {palette_mode} requested but the palette library is not initialized"
            )
        palette = library.require_palette(palette_mode)
        is_standard = True
    else:
        raise ValidationError(f"Invalid SPRTZ palette mode: {palette_mode:#04x}")

    pixels = _read_pixels(data, offset, compressed_size, raw_size)
    canvas = SpriteCanvas(width=width, height=height, pixels=pixels, palette=palette)
    logger.debug(f"Decoded SPRTZ v2 {width}x{height}, palette mode {palette_mode:#04x}")
    return DecodedSprite(
        canvas=canvas,
        is_standard=is_standard,
        palette_id=palette_mode,
        version=SPRTZ_VERSION_2,
    )


def decode_sprtz(data: bytes, library=None) -> DecodedSprite:
    """Decode a container of either generation."""
    return decode_sprtz_v2(data, library=library)


# ----------------------------------------------------------------------
# Files
# ----------------------------------------------------------------------

def save_sprtz(
    path: PathLike,
    canvas: SpriteCanvas,
    palette_id: Optional[int] = None,
    version: int = SPRTZ_VERSION_2,
) -> int:
    """
    Write a canvas to a SPRTZ file.

    Args:
        path: Output file
        canvas: Sprite to store
        palette_id: Standard palette reference (version 2 only); None stores the canvas palette
        version: Container generation, 1 or 2

    Returns:
        Number of bytes written
    """
    if version == SPRTZ_VERSION_1:
        if palette_id is not None:
            raise ValidationError("SPRTZ v1 cannot reference a standard palette")
        data = encode_sprtz_v1(canvas)
    elif version == SPRTZ_VERSION_2:
        if palette_id is None or palette_id == PALETTE_MODE_CUSTOM:
            data = encode_sprtz_v2_custom(canvas)
        else:
            data = encode_sprtz_v2_standard(canvas, palette_id)
    else:
        raise ValidationError(f"Unsupported SPRTZ version: {version}")

    try:
        Path(path).write_bytes(data)
    except OSError as e:
        raise SpriteIOError(f"Failed to write SPRTZ file {path}: {e}") from e
    return len(data)


def load_sprtz(path: PathLike, library=None) -> DecodedSprite:
    """Read a SPRTZ file of either generation."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise SpriteIOError(f"Failed to read SPRTZ file {path}: {e}") from e
    return decode_sprtz(data, library=library)
