"""
Pytest configuration and shared fixtures for the sprite toolkit tests.

This module provides standard palette library files, sample canvases and
small RGBA images used across multiple test modules.
"""

import json

import numpy as np
import pytest

from Sprite_Libs.constants import STANDARD_CATEGORIES
from Sprite_Libs.PaletteLib.standard_palette_library import StandardPaletteLibrary
from Sprite_Libs.SpriteLib.sprite_models import SpriteCanvas


def make_standard_palette(palette_id):
    """
    Build a distinctive 16-color palette for a library slot.

    Every palette starts with transparent and opaque black; the remaining
    14 entries depend on the id so no two palettes are alike.
    """
    colors = [(0, 0, 0, 0), (0, 0, 0, 255)]
    for i in range(14):
        colors.append(((palette_id * 7 + i * 17) % 256, (palette_id * 31 + i * 5) % 256, (i * 18) % 256, 255))
    return colors


def make_library_document():
    palettes = []
    for palette_id in range(32):
        palettes.append({
            "id": palette_id,
            "name": f"Palette {palette_id}",
            "description": f"Test palette number {palette_id}",
            "category": STANDARD_CATEGORIES[palette_id // 8],
            "colors": [
                {"r": r, "g": g, "b": b, "a": a}
                for r, g, b, a in make_standard_palette(palette_id)
            ],
        })
    return {"palettes": palettes}


@pytest.fixture
def palette_factory():
    """Provide make_standard_palette to tests that need expected library colors."""
    return make_standard_palette


@pytest.fixture
def library_document():
    return make_library_document()


@pytest.fixture
def library_json_path(tmp_path, library_document):
    path = tmp_path / "standard.json"
    path.write_text(json.dumps(library_document), encoding="utf-8")
    return path


@pytest.fixture
def library_binary_path(tmp_path):
    data = bytearray()
    for palette_id in range(32):
        for color in make_standard_palette(palette_id):
            data.extend(color)
    path = tmp_path / "standard.pal"
    path.write_bytes(bytes(data))
    return path


@pytest.fixture
def library(library_json_path):
    """An initialized StandardPaletteLibrary, shut down after the test."""
    lib = StandardPaletteLibrary()
    assert lib.initialize(library_json_path)
    yield lib
    lib.shutdown()


@pytest.fixture
def sample_canvas():
    """A 16x16 canvas using every palette index in a diagonal pattern."""
    canvas = SpriteCanvas(width=16, height=16)
    for y in range(16):
        for x in range(16):
            canvas.set_pixel(x, y, (x + y) % 16)
    return canvas


@pytest.fixture
def red_on_white_rgba():
    """20x10 white image with an opaque red 10x6 block in the middle."""
    pixels = np.full((10, 20, 4), 255, dtype=np.uint8)
    pixels[2:8, 5:15] = (255, 0, 0, 255)
    return pixels
