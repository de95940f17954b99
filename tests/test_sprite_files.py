"""
Unit tests for sprite_files module.

Tests the uncompressed .spr sprite and .stpal palette file formats.
"""

import struct

import pytest

from Sprite_Libs.errors import DimensionError, FormatError, SizeMismatchError, SpriteIOError
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
from Sprite_Libs.SpriteLib.sprite_models import SpriteCanvas


class TestSpriteFile:
    """Tests for the .spr format."""

    def test_layout(self):
        canvas = SpriteCanvas(width=3, height=2, pixels=bytearray([0, 1, 2, 3, 4, 5]))
        data = encode_sprite(canvas)
        assert data[:6] == b"SPRED\x01"
        assert struct.unpack("<ii", data[6:14]) == (3, 2)
        assert data[14:20] == bytes([0, 1, 2, 3, 4, 5])
        assert len(data) == 14 + 6 + 64

    @pytest.mark.parametrize("size", [1, 8, 40])
    def test_round_trip(self, size):
        canvas = SpriteCanvas(width=size, height=size)
        for i in range(canvas.pixel_count):
            canvas.pixels[i] = (i * 7) % 16
        canvas.set_palette_color(9, (1, 2, 3, 4))
        assert decode_sprite(encode_sprite(canvas)) == canvas

    def test_save_and_load(self, tmp_path, sample_canvas):
        path = tmp_path / "sprite.spr"
        save_sprite(path, sample_canvas)
        assert load_sprite(path) == sample_canvas

    def test_bad_magic(self, sample_canvas):
        data = b"XPRED" + encode_sprite(sample_canvas)[5:]
        with pytest.raises(FormatError):
            decode_sprite(data)

    def test_bad_version(self, sample_canvas):
        data = bytearray(encode_sprite(sample_canvas))
        data[5] = 2
        with pytest.raises(FormatError):
            decode_sprite(bytes(data))

    def test_oversized_dimensions(self):
        data = b"SPRED\x01" + struct.pack("<ii", 41, 1) + bytes(41 + 64)
        with pytest.raises(DimensionError):
            decode_sprite(data)

    def test_truncated_pixels(self, sample_canvas):
        data = encode_sprite(sample_canvas)[:14 + 10]
        with pytest.raises(SizeMismatchError):
            decode_sprite(data)

    def test_truncated_palette(self, sample_canvas):
        with pytest.raises(FormatError):
            decode_sprite(encode_sprite(sample_canvas)[:-1])

    def test_missing_file(self, tmp_path):
        with pytest.raises(SpriteIOError):
            load_sprite(tmp_path / "missing.spr")


class TestPaletteFile:
    """Tests for the .stpal format."""

    def test_round_trip(self, tmp_path):
        palette = [(i * 16, 255 - i * 16, i, 200) for i in range(16)]
        path = tmp_path / "colors.stpal"
        save_palette(path, palette)
        assert path.read_bytes()[:6] == b"STPAL\x01"
        assert load_palette(path) == palette

    def test_wrong_length(self):
        with pytest.raises(FormatError):
            encode_palette([(0, 0, 0, 0)] * 15)

    def test_bad_magic(self):
        data = b"SPRED\x01" + bytes(64)
        with pytest.raises(FormatError):
            decode_palette(data)

    def test_truncated(self):
        with pytest.raises(FormatError):
            decode_palette(b"STPAL\x01" + bytes(63))
