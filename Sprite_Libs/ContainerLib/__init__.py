"""
ContainerLib - SPRTZ compressed sprite containers
"""

from Sprite_Libs.ContainerLib.sprite_container_codec import (
    DecodedSprite,
    compress_pixels,
    decode_sprtz,
    decode_sprtz_v1,
    decode_sprtz_v2,
    decompress_pixels,
    encode_sprtz_v1,
    encode_sprtz_v2_custom,
    encode_sprtz_v2_standard,
    compressed_size_bound,
    estimate_compressed_size,
    load_sprtz,
    save_sprtz,
)

__all__ = [
    "DecodedSprite",
    "compress_pixels",
    "decode_sprtz",
    "decode_sprtz_v1",
    "decode_sprtz_v2",
    "decompress_pixels",
    "encode_sprtz_v1",
    "encode_sprtz_v2_custom",
    "encode_sprtz_v2_standard",
    "compressed_size_bound",
    "estimate_compressed_size",
    "load_sprtz",
    "save_sprtz",
]
