"""
PaletteLib - Standard palette library

This module provides the 32-palette standard library, the JSON and binary
library file formats, and the built-in editor presets.
"""

from Sprite_Libs.PaletteLib.palette_parsers import (
    PaletteRecord,
    StandardPaletteInfo,
    dump_palette_binary,
    dump_palette_json,
    parse_palette_binary,
    parse_palette_json,
)
from Sprite_Libs.PaletteLib.palette_presets import (
    PALETTE_PRESETS,
    PalettePreset,
    get_palette_preset,
    get_palette_presets,
)
from Sprite_Libs.PaletteLib.standard_palette_library import StandardPaletteLibrary

__all__ = [
    "PaletteRecord",
    "StandardPaletteInfo",
    "dump_palette_binary",
    "dump_palette_json",
    "parse_palette_binary",
    "parse_palette_json",
    "PALETTE_PRESETS",
    "PalettePreset",
    "get_palette_preset",
    "get_palette_presets",
    "StandardPaletteLibrary",
]
