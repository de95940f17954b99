"""
Built-in 16-color palette presets for the sprite editor.

Every preset keeps the fixed slots: index 0 transparent black and index 1
opaque black. Presets can be applied to a canvas with
`SpriteCanvas.apply_palette(preset.colors)`.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from Sprite_Libs.constants import OPAQUE_BLACK_COLOR, TRANSPARENT_COLOR
from Sprite_Libs.SpriteLib.sprite_models import RgbaColor


@dataclass(frozen=True)
class PalettePreset:
    name: str
    colors: Tuple[RgbaColor, ...]


def _preset(name: str, *rgb: Tuple[int, int, int]) -> PalettePreset:
    colors = (TRANSPARENT_COLOR, OPAQUE_BLACK_COLOR) + tuple((r, g, b, 255) for r, g, b in rgb)
    return PalettePreset(name, colors)


PALETTE_PRESETS: Tuple[PalettePreset, ...] = (
    _preset(
        "C64",
        (255, 255, 255), (136, 0, 0), (170, 255, 238), (204, 68, 204),
        (0, 204, 85), (0, 0, 170), (238, 238, 119), (221, 136, 85),
        (102, 68, 0), (255, 119, 119), (51, 51, 51), (119, 119, 119),
        (170, 255, 102), (0, 136, 255),
    ),
    _preset(
        "IBM CGA",
        (255, 255, 255), (170, 0, 0), (0, 170, 170), (170, 0, 170),
        (0, 170, 0), (0, 0, 170), (170, 170, 0), (255, 85, 85),
        (85, 255, 255), (255, 85, 255), (85, 255, 85), (85, 85, 255),
        (255, 255, 85), (85, 85, 85),
    ),
    _preset(
        "Desert",
        (255, 248, 220), (210, 180, 140), (194, 178, 128), (160, 82, 45),
        (139, 69, 19), (205, 133, 63), (222, 184, 135), (244, 164, 96),
        (210, 105, 30), (255, 140, 0), (255, 165, 0), (218, 165, 32),
        (184, 134, 11), (128, 128, 0),
    ),
    _preset(
        "Ice",
        (255, 255, 255), (240, 248, 255), (230, 230, 250), (173, 216, 230),
        (135, 206, 250), (176, 224, 230), (175, 238, 238), (127, 255, 212),
        (64, 224, 208), (0, 206, 209), (72, 209, 204), (32, 178, 170),
        (95, 158, 160), (70, 130, 180),
    ),
    _preset(
        "Greys",
        (255, 255, 255), (238, 238, 238), (221, 221, 221), (204, 204, 204),
        (187, 187, 187), (170, 170, 170), (153, 153, 153), (136, 136, 136),
        (119, 119, 119), (102, 102, 102), (85, 85, 85), (68, 68, 68),
        (51, 51, 51), (34, 34, 34),
    ),
    _preset(
        "Greens",
        (240, 255, 240), (144, 238, 144), (152, 251, 152), (127, 255, 0),
        (124, 252, 0), (0, 255, 0), (50, 205, 50), (34, 139, 34),
        (0, 128, 0), (0, 100, 0), (154, 205, 50), (107, 142, 35),
        (85, 107, 47), (46, 139, 87),
    ),
    _preset(
        "Blues",
        (240, 248, 255), (135, 206, 250), (135, 206, 235), (100, 149, 237),
        (65, 105, 225), (0, 0, 255), (0, 0, 205), (0, 0, 139),
        (25, 25, 112), (0, 191, 255), (30, 144, 255), (70, 130, 180),
        (176, 196, 222), (123, 104, 238),
    ),
    _preset(
        "Reds",
        (255, 240, 245), (255, 192, 203), (255, 182, 193), (255, 105, 180),
        (255, 20, 147), (255, 0, 0), (220, 20, 60), (178, 34, 34),
        (139, 0, 0), (255, 69, 0), (255, 99, 71), (250, 128, 114),
        (233, 150, 122), (205, 92, 92),
    ),
    _preset(
        "Neon",
        (255, 255, 255), (255, 0, 255), (0, 255, 255), (255, 255, 0),
        (255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 128, 0),
        (128, 0, 255), (0, 255, 128), (255, 0, 128), (128, 255, 0),
        (0, 128, 255), (255, 128, 255),
    ),
    _preset(
        "Pastel",
        (255, 255, 255), (255, 218, 185), (255, 228, 196), (255, 239, 213),
        (221, 160, 221), (216, 191, 216), (255, 182, 193), (255, 218, 225),
        (240, 230, 140), (238, 232, 170), (152, 251, 152), (175, 238, 238),
        (176, 224, 230), (230, 230, 250),
    ),
    _preset(
        "Earth",
        (245, 245, 220), (222, 184, 135), (188, 143, 143), (139, 69, 19),
        (160, 82, 45), (205, 133, 63), (210, 105, 30), (128, 128, 0),
        (85, 107, 47), (107, 142, 35), (112, 128, 144), (119, 136, 153),
        (47, 79, 79), (105, 105, 105),
    ),
    _preset(
        "Retro",
        (255, 255, 255), (190, 38, 51), (224, 111, 139), (73, 60, 43),
        (164, 100, 34), (235, 137, 49), (247, 226, 107), (47, 72, 78),
        (68, 137, 26), (163, 206, 39), (27, 38, 50), (0, 87, 132),
        (49, 162, 242), (178, 220, 239),
    ),
)


def get_palette_presets() -> List[PalettePreset]:
    return list(PALETTE_PRESETS)


def get_palette_preset(name: str) -> Optional[PalettePreset]:
    """Look up a preset by name, ignoring case. Returns None if unknown."""
    wanted = name.strip().lower()
    for preset in PALETTE_PRESETS:
        if preset.name.lower() == wanted:
            return preset
    return None
