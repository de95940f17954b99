"""
Tests for the sprite_tool command-line interface.
"""

import numpy as np
import pytest
from PIL import Image

import sprite_tool
from Sprite_Libs.ContainerLib.sprite_container_codec import load_sprtz, save_sprtz
from Sprite_Libs.SpriteLib.sprite_files import load_sprite
from Sprite_Libs.SpriteLib.sprite_models import SpriteCanvas


@pytest.fixture
def source_png(tmp_path, red_on_white_rgba):
    path = tmp_path / "source.png"
    Image.fromarray(red_on_white_rgba).save(path)
    return path


class TestConvert:
    """Tests for the convert command."""

    def test_png_to_sprtz(self, tmp_path, source_png, capsys):
        output = tmp_path / "out.sprtz"
        assert sprite_tool.main(["convert", str(source_png), str(output), "--max-width", "16", "--max-height", "16"]) == 0
        decoded = load_sprtz(output)
        assert (decoded.canvas.width, decoded.canvas.height) == (16, 8)
        assert "out.sprtz" in capsys.readouterr().out

    def test_png_to_spr(self, tmp_path, source_png):
        output = tmp_path / "out.spr"
        assert sprite_tool.main(["convert", str(source_png), str(output), "--max-width", "8", "--max-height", "8"]) == 0
        assert load_sprite(output).width == 8

    def test_format_version_1(self, tmp_path, source_png):
        output = tmp_path / "out.sprtz"
        assert sprite_tool.main(["convert", str(source_png), str(output), "--format-version", "1"]) == 0
        assert load_sprtz(output).version == 1

    def test_explicit_palette_id(self, tmp_path, source_png, library_json_path):
        output = tmp_path / "out.sprtz"
        assert sprite_tool.main(["convert", str(source_png), str(output), "--palette-id", "3"]) == 0
        assert output.read_bytes()[16] == 3

    def test_match_without_library(self, tmp_path, source_png, capsys):
        output = tmp_path / "out.sprtz"
        assert sprite_tool.main(["convert", str(source_png), str(output), "--match"]) == 1
        assert "--library" in capsys.readouterr().err

    def test_match_keeps_custom_when_far(self, tmp_path, source_png, library_json_path, capsys):
        output = tmp_path / "out.sprtz"
        args = ["convert", str(source_png), str(output), "--library", str(library_json_path), "--match"]
        assert sprite_tool.main(args) == 0
        assert output.read_bytes()[16] == 0xFF
        assert "keeping custom palette" in capsys.readouterr().out

    @pytest.mark.parametrize("extra", [["--match"], ["--palette-id", "3"]])
    def test_standard_palette_needs_version_2(self, tmp_path, source_png, library_json_path, capsys, extra):
        output = tmp_path / "out.sprtz"
        args = ["convert", str(source_png), str(output), "--library", str(library_json_path), "--format-version", "1"]
        assert sprite_tool.main(args + extra) == 1
        assert "--format-version 2" in capsys.readouterr().err
        assert not output.exists()

    def test_missing_input(self, tmp_path, capsys):
        assert sprite_tool.main(["convert", str(tmp_path / "nope.png"), str(tmp_path / "out.sprtz")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_bad_library(self, tmp_path, source_png, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text("{}", encoding="utf-8")
        args = ["convert", str(source_png), str(tmp_path / "out.sprtz"), "--library", str(bad)]
        assert sprite_tool.main(args) == 1
        assert "palettes" in capsys.readouterr().err


class TestInfo:
    """Tests for the info command."""

    def test_custom(self, tmp_path, sample_canvas, capsys):
        path = tmp_path / "sprite.sprtz"
        save_sprtz(path, sample_canvas)
        assert sprite_tool.main(["info", str(path)]) == 0
        out = capsys.readouterr().out
        assert "SPRTZ v2" in out
        assert "16x16" in out
        assert "Palette: custom" in out

    def test_standard(self, tmp_path, sample_canvas, library_json_path, capsys):
        path = tmp_path / "sprite.sprtz"
        save_sprtz(path, sample_canvas, palette_id=6)
        assert sprite_tool.main(["info", str(path), "--library", str(library_json_path)]) == 0
        assert "standard 6 (Palette 6)" in capsys.readouterr().out

    def test_standard_without_library(self, tmp_path, sample_canvas):
        path = tmp_path / "sprite.sprtz"
        save_sprtz(path, sample_canvas, palette_id=6)
        assert sprite_tool.main(["info", str(path)]) == 1


class TestExport:
    """Tests for the export command."""

    def test_scaled_export(self, tmp_path):
        canvas = SpriteCanvas(width=4, height=2)
        canvas.set_palette_color(2, (0, 200, 0))
        canvas.set_pixel(3, 1, 2)
        source = tmp_path / "sprite.sprtz"
        save_sprtz(source, canvas)
        output = tmp_path / "sprite.png"

        assert sprite_tool.main(["export", str(source), str(output), "--scale", "3"]) == 0
        with Image.open(output) as image:
            pixels = np.array(image)
        assert pixels.shape == (6, 12, 4)
        assert tuple(pixels[5, 11]) == (0, 200, 0, 255)
        assert tuple(pixels[0, 0]) == (0, 0, 0, 0)
