"""
QuantizeLib - Color quantization and palette matching
"""

from Sprite_Libs.QuantizeLib.color_quantizer import (
    ColorHistogramEntry,
    build_histogram,
    fill_palette_slots,
    median_cut,
    quantize,
    quantize_channels,
)
from Sprite_Libs.QuantizeLib.palette_matcher import (
    PaletteMatchScore,
    color_distance,
    find_best_palette,
    is_acceptable_match,
    map_pixels_to_palette,
    nearest_index,
    palette_distance,
    score_palette_match,
    unique_colors,
)

__all__ = [
    "ColorHistogramEntry",
    "build_histogram",
    "fill_palette_slots",
    "median_cut",
    "quantize",
    "quantize_channels",
    "PaletteMatchScore",
    "color_distance",
    "find_best_palette",
    "is_acceptable_match",
    "map_pixels_to_palette",
    "nearest_index",
    "palette_distance",
    "score_palette_match",
    "unique_colors",
]
