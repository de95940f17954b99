"""
Uncompressed sprite and palette files.

Sprite file (.spr):
    "SPRED" | version (1 byte) | width (int32 LE) | height (int32 LE)
    | width * height index bytes | 16 x RGBA palette (64 bytes)

Palette file (.stpal):
    "STPAL" | version (1 byte) | 16 x RGBA palette (64 bytes)

Functions:
    encode_sprite / decode_sprite / save_sprite / load_sprite
    encode_palette / decode_palette / save_palette / load_palette
"""

import struct
from pathlib import Path
from typing import List, Union

from Sprite_Libs.constants import (
    PALETTE_BYTES,
    PALETTE_MAGIC,
    PALETTE_SIZE,
    PALETTE_VERSION,
    SPRITE_MAGIC,
    SPRITE_VERSION,
)
from Sprite_Libs.errors import FormatError, SizeMismatchError, SpriteIOError
from Sprite_Libs.SpriteLib.sprite_models import RgbaColor, SpriteCanvas, check_dimensions

PathLike = Union[str, Path]

_SPRITE_HEADER = struct.Struct("<5sBii")
_PALETTE_HEADER = struct.Struct("<5sB")


def _palette_bytes(palette: List[RgbaColor]) -> bytes:
    return b"".join(bytes(color) for color in palette)


def _read_palette(data: bytes, offset: int) -> List[RgbaColor]:
    block = data[offset:offset + PALETTE_BYTES]
    if len(block) != PALETTE_BYTES:
        raise FormatError(f"Palette block truncated: {len(block)} of {PALETTE_BYTES} bytes")
    return [tuple(block[i:i + 4]) for i in range(0, PALETTE_BYTES, 4)]


def encode_sprite(canvas: SpriteCanvas) -> bytes:
    header = _SPRITE_HEADER.pack(SPRITE_MAGIC, SPRITE_VERSION, canvas.width, canvas.height)
    return header + bytes(canvas.pixels) + _palette_bytes(canvas.palette)


def decode_sprite(data: bytes) -> SpriteCanvas:
    """
    Decode a .spr file.

    Raises:
        FormatError: Bad magic, unsupported version or truncated data
        DimensionError: Width or height outside 1..40
        SizeMismatchError: Fewer pixel bytes than width * height
    """
    if len(data) < _SPRITE_HEADER.size:
        raise FormatError(f"Sprite file too short: {len(data)} bytes")

    magic, version, width, height = _SPRITE_HEADER.unpack_from(data, 0)
    if magic != SPRITE_MAGIC:
        raise FormatError(f"Bad sprite magic: {magic!r}")
    if version != SPRITE_VERSION:
        raise FormatError(f"Unsupported sprite version: {version}")
    check_dimensions(width, height)

    offset = _SPRITE_HEADER.size
    pixels = data[offset:offset + width * height]
    if len(pixels) != width * height:
        raise SizeMismatchError(f"Sprite pixel data truncated: {len(pixels)} of {width * height} bytes")

    palette = _read_palette(data, offset + width * height)
    return SpriteCanvas(width=width, height=height, pixels=bytearray(pixels), palette=palette)


def encode_palette(palette: List[RgbaColor]) -> bytes:
    if len(palette) != PALETTE_SIZE:
        raise FormatError(f"Palette must hold {PALETTE_SIZE} colors, got {len(palette)}")
    return _PALETTE_HEADER.pack(PALETTE_MAGIC, PALETTE_VERSION) + _palette_bytes(palette)


def decode_palette(data: bytes) -> List[RgbaColor]:
    if len(data) < _PALETTE_HEADER.size:
        raise FormatError(f"Palette file too short: {len(data)} bytes")

    magic, version = _PALETTE_HEADER.unpack_from(data, 0)
    if magic != PALETTE_MAGIC:
        raise FormatError(f"Bad palette magic: {magic!r}")
    if version != PALETTE_VERSION:
        raise FormatError(f"Unsupported palette version: {version}")
    return _read_palette(data, _PALETTE_HEADER.size)


def _write(path: PathLike, data: bytes) -> None:
    try:
        Path(path).write_bytes(data)
    except OSError as e:
        raise SpriteIOError(f"Failed to write {path}: {e}") from e


def _read(path: PathLike) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise SpriteIOError(f"Failed to read {path}: {e}") from e


def save_sprite(path: PathLike, canvas: SpriteCanvas) -> None:
    _write(path, encode_sprite(canvas))


def load_sprite(path: PathLike) -> SpriteCanvas:
    return decode_sprite(_read(path))


def save_palette(path: PathLike, palette: List[RgbaColor]) -> None:
    _write(path, encode_palette(palette))


def load_palette(path: PathLike) -> List[RgbaColor]:
    return decode_palette(_read(path))
