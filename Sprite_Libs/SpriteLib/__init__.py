"""
SpriteLib - Sprite canvas model and files

This module provides the indexed canvas, the uncompressed .spr/.stpal
file formats and in-place editing operations.
"""

from Sprite_Libs.SpriteLib.sprite_models import (
    RgbaColor,
    SpriteCanvas,
    check_dimensions,
    default_palette,
    validate_color,
)
from Sprite_Libs.SpriteLib.sprite_files import (
    decode_palette,
    decode_sprite,
    encode_palette,
    encode_sprite,
    load_palette,
    load_sprite,
    save_palette,
    save_sprite,
)
from Sprite_Libs.SpriteLib.sprite_editing_ops import (
    canvas_to_image,
    canvas_to_rgba,
    export_png,
    find_closest_standard_palette,
    flip_horizontal,
    flip_vertical,
    rotate_clockwise,
    rotate_counter_clockwise,
    shift_pixels,
)

__all__ = [
    "RgbaColor",
    "SpriteCanvas",
    "check_dimensions",
    "default_palette",
    "validate_color",
    "decode_palette",
    "decode_sprite",
    "encode_palette",
    "encode_sprite",
    "load_palette",
    "load_sprite",
    "save_palette",
    "save_sprite",
    "canvas_to_image",
    "canvas_to_rgba",
    "export_png",
    "find_closest_standard_palette",
    "flip_horizontal",
    "flip_vertical",
    "rotate_clockwise",
    "rotate_counter_clockwise",
    "shift_pixels",
]
