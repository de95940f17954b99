"""
Sprite data models for the sprite toolkit.

This module defines the core data structures shared by the codecs, the
palette library and the import pipeline.

Classes:
    SpriteCanvas: An indexed sprite (up to 40x40 pixels, 16-color palette)

Functions:
    default_palette: Build the palette a freshly cleared canvas uses
    validate_color: Check and normalize an RGBA tuple

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Set, Tuple

from Sprite_Libs.constants import (
    DEFAULT_SPRITE_HEIGHT,
    DEFAULT_SPRITE_WIDTH,
    FIRST_FREE_INDEX,
    MAX_SPRITE_SIZE,
    MIN_SPRITE_SIZE,
    OPAQUE_BLACK_COLOR,
    PALETTE_SIZE,
    TRANSPARENT_COLOR,
)
from Sprite_Libs.errors import DimensionError, ValidationError

RgbaColor = Tuple[int, int, int, int]


def default_palette() -> List[RgbaColor]:
    """
    Build the default 16-entry palette.

    Index 0 is transparent black, index 1 opaque black and indices 2-15
    form a gray ramp from black to white.
    """
    palette: List[RgbaColor] = [TRANSPARENT_COLOR, OPAQUE_BLACK_COLOR]
    for index in range(FIRST_FREE_INDEX, PALETTE_SIZE):
        gray = (index - FIRST_FREE_INDEX) * 255 // 13
        palette.append((gray, gray, gray, 255))
    return palette


def validate_color(color: Sequence[int]) -> RgbaColor:
    """
    Normalize a color to an RGBA tuple.

    Args:
        color: Sequence of 3 (RGB, alpha defaults to 255) or 4 integers

    Returns:
        The color as an (r, g, b, a) tuple

    Raises:
        ValidationError: If the color has the wrong length or a channel is outside 0-255
    """
    values = [int(channel) for channel in color]
    if len(values) == 3:
        values.append(255)
    if len(values) != 4:
        raise ValidationError(f"Color must have 3 or 4 channels, got {len(values)}")
    for channel in values:
        if not 0 <= channel <= 255:
            raise ValidationError(f"Color channel out of range 0-255: {channel}")
    return values[0], values[1], values[2], values[3]


def check_dimensions(width: int, height: int) -> None:
    """Raise DimensionError unless both dimensions are within 1..40."""
    if not (MIN_SPRITE_SIZE <= width <= MAX_SPRITE_SIZE and MIN_SPRITE_SIZE <= height <= MAX_SPRITE_SIZE):
        raise DimensionError(
            f"Sprite dimensions must be within {MIN_SPRITE_SIZE}..{MAX_SPRITE_SIZE}, "
            f"got {width}x{height}"
        )


@dataclass
class SpriteCanvas:
    """An indexed sprite: per-pixel palette indices plus a shared palette.

    Pixels are stored row-major, one byte per pixel, values 0-15.

    Attributes:
        width: Sprite width in pixels (1-40)
        height: Sprite height in pixels (1-40)
        pixels: Row-major palette indices, length width * height
        palette: 16 RGBA colors
    """

    width: int = DEFAULT_SPRITE_WIDTH
    height: int = DEFAULT_SPRITE_HEIGHT
    pixels: bytearray = field(default_factory=bytearray)
    palette: List[RgbaColor] = field(default_factory=default_palette)

    def __post_init__(self):
        """Validate dimensions and fill in empty pixel storage."""
        self.width = int(self.width)
        self.height = int(self.height)
        check_dimensions(self.width, self.height)

        if not self.pixels:
            self.pixels = bytearray(self.width * self.height)
        else:
            self.pixels = bytearray(self.pixels)

        if len(self.pixels) != self.width * self.height:
            raise DimensionError(
                f"Pixel buffer holds {len(self.pixels)} entries, "
                f"expected {self.width * self.height}"
            )
        if any(value >= PALETTE_SIZE for value in self.pixels):
            raise ValidationError("Pixel buffer contains color indices above 15")

        if len(self.palette) != PALETTE_SIZE:
            raise ValidationError(f"Palette must hold {PALETTE_SIZE} colors, got {len(self.palette)}")
        self.palette = [validate_color(color) for color in self.palette]

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValidationError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} sprite")
        return y * self.width + x

    def get_pixel(self, x: int, y: int) -> int:
        return self.pixels[self._offset(x, y)]

    def set_pixel(self, x: int, y: int, color_index: int) -> None:
        """
        Set a single pixel to a palette index.

        Raises:
            ValidationError: If (x, y) is outside the sprite or the index is not 0-15
        """
        offset = self._offset(x, y)
        if not 0 <= color_index < PALETTE_SIZE:
            raise ValidationError(f"Color index out of range 0-15: {color_index}")
        self.pixels[offset] = color_index

    def get_palette_color(self, index: int) -> RgbaColor:
        if not 0 <= index < PALETTE_SIZE:
            raise ValidationError(f"Palette index out of range 0-15: {index}")
        return self.palette[index]

    def set_palette_color(self, index: int, color: Sequence[int]) -> None:
        if not 0 <= index < PALETTE_SIZE:
            raise ValidationError(f"Palette index out of range 0-15: {index}")
        self.palette[index] = validate_color(color)

    def apply_palette(self, colors: Iterable[Sequence[int]]) -> None:
        """Replace the whole palette; pixel indices are left untouched."""
        palette = [validate_color(color) for color in colors]
        if len(palette) != PALETTE_SIZE:
            raise ValidationError(f"Palette must hold {PALETTE_SIZE} colors, got {len(palette)}")
        self.palette = palette

    def clear(self) -> None:
        """Reset every pixel to transparent and restore the default palette."""
        self.pixels = bytearray(self.width * self.height)
        self.palette = default_palette()

    def resize(self, width: int, height: int) -> None:
        """Change the sprite dimensions. The canvas is cleared."""
        check_dimensions(width, height)
        self.width = width
        self.height = height
        self.clear()

    def used_indices(self) -> Set[int]:
        return set(self.pixels)

    def copy(self) -> "SpriteCanvas":
        return SpriteCanvas(
            width=self.width,
            height=self.height,
            pixels=bytearray(self.pixels),
            palette=list(self.palette),
        )
