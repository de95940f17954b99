"""
Canvas editing operations and PNG export.

The transforms work in place on a SpriteCanvas; palette entries are never
touched, only the pixel indices move.

Functions:
    shift_pixels: Scroll the sprite with wrap-around
    flip_horizontal: Mirror left/right
    flip_vertical: Mirror top/bottom
    rotate_clockwise: Rotate 90 degrees clockwise (swaps width and height)
    rotate_counter_clockwise: Rotate 90 degrees counter-clockwise
    canvas_to_rgba: Expand indices through the palette to RGBA
    canvas_to_image: Build a Pillow image, optionally upscaled
    export_png: Write the sprite to a PNG file
    find_closest_standard_palette: Match the canvas palette against a library
"""

from pathlib import Path
from typing import Any, Tuple, Union

import numpy as np

from Sprite_Libs.constants import DEFAULT_OUTPUT_FORMAT
from Sprite_Libs.errors import SpriteIOError, ValidationError
from Sprite_Libs.pillow_compat import Image, resample_filter
from Sprite_Libs.SpriteLib.sprite_models import SpriteCanvas

PathLike = Union[str, Path]


def _grid(canvas: SpriteCanvas) -> np.ndarray:
    return np.frombuffer(bytes(canvas.pixels), dtype=np.uint8).reshape(canvas.height, canvas.width)


def _store(canvas: SpriteCanvas, grid: np.ndarray) -> None:
    canvas.height, canvas.width = grid.shape
    canvas.pixels = bytearray(np.ascontiguousarray(grid).tobytes())


def shift_pixels(canvas: SpriteCanvas, dx: int, dy: int) -> None:
    """Move every pixel by (dx, dy); pixels leaving one edge re-enter on the opposite edge."""
    _store(canvas, np.roll(_grid(canvas), shift=(dy, dx), axis=(0, 1)))


def flip_horizontal(canvas: SpriteCanvas) -> None:
    _store(canvas, _grid(canvas)[:, ::-1])


def flip_vertical(canvas: SpriteCanvas) -> None:
    _store(canvas, _grid(canvas)[::-1, :])


def rotate_clockwise(canvas: SpriteCanvas) -> None:
    _store(canvas, np.rot90(_grid(canvas), k=-1))


def rotate_counter_clockwise(canvas: SpriteCanvas) -> None:
    _store(canvas, np.rot90(_grid(canvas), k=1))


def canvas_to_rgba(canvas: SpriteCanvas) -> np.ndarray:
    """
    Expand the canvas through its palette.

    Returns:
        (height, width, 4) uint8 array
    """
    palette = np.asarray(canvas.palette, dtype=np.uint8)
    return palette[_grid(canvas)]


def canvas_to_image(canvas: SpriteCanvas, scale: int = 1) -> Any:
    """
    Render the canvas as a Pillow RGBA image.

    Args:
        canvas: Sprite to render
        scale: Integer upscale factor; each sprite pixel becomes a scale x scale block

    Returns:
        PIL Image
    """
    if scale < 1:
        raise ValidationError(f"Scale must be at least 1, got {scale}")

    image = Image.fromarray(canvas_to_rgba(canvas))
    if scale > 1:
        image = image.resize(
            (canvas.width * scale, canvas.height * scale),
            resample=resample_filter("nearest"),
        )
    return image


def export_png(canvas: SpriteCanvas, path: PathLike, scale: int = 1) -> None:
    image = canvas_to_image(canvas, scale)
    try:
        image.save(Path(path), format=DEFAULT_OUTPUT_FORMAT)
    except OSError as e:
        raise SpriteIOError(f"Failed to export PNG {path}: {e}") from e


def find_closest_standard_palette(canvas: SpriteCanvas, library) -> Tuple[int, int]:
    """
    Find the standard palette closest to the canvas palette.

    Args:
        canvas: Sprite whose palette is matched
        library: An initialized StandardPaletteLibrary

    Returns:
        (palette id or 0xFF, total distance), see StandardPaletteLibrary.find_closest_palette
    """
    return library.find_closest_palette(canvas.palette)
