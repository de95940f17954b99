"""
ImportLib - True-color image import

This module provides Pillow-backed image decoding/resizing and the
staged import pipeline that turns an image into an indexed sprite.
"""

from Sprite_Libs.ImportLib.image_io import (
    DecodedImage,
    decode_image,
    encode_png,
    image_to_rgba,
    load_image,
    resize_image,
    save_png,
)
from Sprite_Libs.ImportLib.import_pipeline import (
    STEP_NAMES,
    ImportInfo,
    ImportOptions,
    ImportPipeline,
    ImportSession,
    fit_target_size,
    import_png,
)

__all__ = [
    "DecodedImage",
    "decode_image",
    "encode_png",
    "image_to_rgba",
    "load_image",
    "resize_image",
    "save_png",
    "STEP_NAMES",
    "ImportInfo",
    "ImportOptions",
    "ImportPipeline",
    "ImportSession",
    "fit_target_size",
    "import_png",
]
