"""
Unit tests for the standard palette library and its file parsers.

Tests JSON and binary parsing, initialization dispatch, lookups,
closest-palette matching and the writers.
"""

import json

import pytest

from Sprite_Libs.constants import PALETTE_MODE_CUSTOM
from Sprite_Libs.errors import FormatError, LibraryNotInitializedError, ValidationError
from Sprite_Libs.PaletteLib.palette_parsers import (
    PaletteRecord,
    dump_palette_binary,
    dump_palette_json,
    parse_palette_binary,
    parse_palette_json,
)
from Sprite_Libs.PaletteLib.standard_palette_library import StandardPaletteLibrary


class TestParsePaletteJson:
    """Tests for parse_palette_json function."""

    def test_parses_all_palettes(self, library_document):
        records = parse_palette_json(json.dumps(library_document))
        assert len(records) == 32
        assert [record.id for record in records] == list(range(32))
        assert records[9].name == "Palette 9"
        assert records[9].category == "biome"

    def test_zero_alpha_means_opaque(self, library_document):
        records = parse_palette_json(json.dumps(library_document))
        assert records[0].colors[0] == (0, 0, 0, 255)

    def test_missing_alpha_means_opaque(self, library_document):
        del library_document["palettes"][4]["colors"][7]["a"]
        records = parse_palette_json(json.dumps(library_document))
        assert records[4].colors[7][3] == 255

    def test_ids_are_authoritative(self, library_document):
        library_document["palettes"].reverse()
        records = parse_palette_json(json.dumps(library_document))
        assert records[0].name == "Palette 0"

    def test_missing_colors_names_palette(self, library_document):
        del library_document["palettes"][3]["colors"]
        with pytest.raises(FormatError, match="palette 3"):
            parse_palette_json(json.dumps(library_document))

    def test_wrong_color_count(self, library_document):
        library_document["palettes"][2]["colors"].pop()
        with pytest.raises(FormatError, match="palette 2"):
            parse_palette_json(json.dumps(library_document))

    def test_wrong_palette_count(self, library_document):
        library_document["palettes"].pop()
        with pytest.raises(FormatError, match="Expected 32 palettes"):
            parse_palette_json(json.dumps(library_document))

    def test_invalid_id(self, library_document):
        library_document["palettes"][0]["id"] = 32
        with pytest.raises(ValidationError, match="Invalid palette ID"):
            parse_palette_json(json.dumps(library_document))

    def test_duplicate_id(self, library_document):
        library_document["palettes"][1]["id"] = 0
        with pytest.raises(ValidationError):
            parse_palette_json(json.dumps(library_document))

    def test_missing_palettes_key(self):
        with pytest.raises(FormatError):
            parse_palette_json("{}")

    def test_not_json(self):
        with pytest.raises(FormatError):
            parse_palette_json("palettes: []")

    def test_non_integer_channel(self, library_document):
        library_document["palettes"][6]["colors"][3]["g"] = "12"
        with pytest.raises(FormatError, match="palette 6"):
            parse_palette_json(json.dumps(library_document))


class TestParsePaletteBinary:
    """Tests for parse_palette_binary function."""

    def test_synthesizes_metadata(self, library_binary_path):
        records = parse_palette_binary(library_binary_path.read_bytes())
        assert records[0].name == "Standard Palette"
        assert records[0].description == "Binary loaded palette"
        assert [records[i].category for i in (0, 8, 16, 24, 31)] == [
            "retro", "biome", "themed", "utility", "utility",
        ]

    def test_keeps_alpha_verbatim(self, library_binary_path, palette_factory):
        records = parse_palette_binary(library_binary_path.read_bytes())
        assert records[0].colors[0] == (0, 0, 0, 0)
        assert records[12].colors == palette_factory(12)

    def test_wrong_size(self):
        with pytest.raises(FormatError):
            parse_palette_binary(bytes(2047))


class TestWriters:
    """Tests for dump_palette_json and dump_palette_binary functions."""

    def test_json_reparses(self, library_document):
        records = parse_palette_json(json.dumps(library_document))
        assert parse_palette_json(dump_palette_json(records)) == records

    def test_binary_layout(self, library_binary_path):
        data = library_binary_path.read_bytes()
        assert dump_palette_binary(parse_palette_binary(data)) == data

    def test_rejects_short_record_list(self, palette_factory):
        with pytest.raises(ValidationError):
            dump_palette_binary([PaletteRecord(0, colors=palette_factory(0))])


class TestLibraryInitialization:
    """Tests for StandardPaletteLibrary initialization and lifecycle."""

    def test_starts_uninitialized(self):
        lib = StandardPaletteLibrary()
        assert not lib.is_initialized
        assert lib.get_palette(0) is None
        assert lib.last_error == ""

    def test_initialize_json(self, library_json_path):
        lib = StandardPaletteLibrary()
        assert lib.initialize(library_json_path)
        assert lib.is_initialized
        assert lib.get_palette_name(5) == "Palette 5"

    def test_initialize_binary(self, library_binary_path):
        lib = StandardPaletteLibrary()
        assert lib.initialize(library_binary_path)
        assert lib.get_palette_category(17) == "themed"

    def test_extensionless_path_tries_json_then_binary(self, tmp_path, library_binary_path):
        lib = StandardPaletteLibrary()
        assert lib.initialize(tmp_path / "standard")
        assert lib.get_palette_name(0) == "Standard Palette"

    def test_extensionless_path_prefers_json(self, tmp_path, library_json_path, library_binary_path):
        lib = StandardPaletteLibrary()
        assert lib.initialize(tmp_path / "standard")
        assert lib.get_palette_name(0) == "Palette 0"

    def test_missing_file(self, tmp_path):
        lib = StandardPaletteLibrary()
        assert not lib.initialize(tmp_path / "missing.json")
        assert "missing.json" in lib.last_error

    def test_malformed_json_reports_palette(self, tmp_path, library_document):
        document = library_document
        del document["palettes"][3]["colors"]
        path = tmp_path / "broken.json"
        path.write_text(json.dumps(document), encoding="utf-8")

        lib = StandardPaletteLibrary()
        assert not lib.initialize(path)
        assert not lib.is_initialized
        assert "palette 3" in lib.last_error

    def test_failed_reload_keeps_previous_state(self, library, tmp_path):
        path = tmp_path / "short.pal"
        path.write_bytes(bytes(100))
        assert not library.initialize(path)
        assert library.is_initialized
        assert library.get_palette_name(1) == "Palette 1"
        assert library.last_error

    def test_clear_error(self, tmp_path):
        lib = StandardPaletteLibrary()
        lib.initialize(tmp_path / "missing.pal")
        lib.clear_error()
        assert lib.last_error == ""

    def test_shutdown(self, library):
        library.shutdown()
        assert not library.is_initialized
        assert library.get_palette(0) is None

    def test_context_manager(self, library_json_path):
        with StandardPaletteLibrary() as lib:
            assert lib.initialize(library_json_path)
        assert not lib.is_initialized

    def test_load_from_records(self, library_document):
        records = parse_palette_json(json.dumps(library_document))
        lib = StandardPaletteLibrary()
        assert lib.load_from_records(records)
        assert lib.get_palette(3) == records[3].colors

    def test_load_from_records_rejects_gaps(self, library_document):
        records = parse_palette_json(json.dumps(library_document))[:31]
        lib = StandardPaletteLibrary()
        assert not lib.load_from_records(records)
        assert lib.last_error


class TestLibraryLookups:
    """Tests for StandardPaletteLibrary lookups."""

    def test_out_of_range_returns_none(self, library):
        assert library.get_palette(32) is None
        assert library.get_palette(-1) is None
        assert library.get_palette_info(40) is None

    def test_info(self, library):
        info = library.get_palette_info(20)
        assert info.id == 20
        assert info.name == "Palette 20"
        assert info.description == "Test palette number 20"
        assert info.category == "themed"

    def test_returned_palette_is_a_copy(self, library):
        palette = library.get_palette(2)
        palette[5] = (1, 2, 3, 4)
        assert library.get_palette(2)[5] != (1, 2, 3, 4)

    def test_require_palette(self, library):
        assert library.require_palette(7) == library.get_palette(7)
        with pytest.raises(ValidationError):
            library.require_palette(32)

    def test_require_palette_uninitialized(self):
        with pytest.raises(LibraryNotInitializedError):
            StandardPaletteLibrary().require_palette(0)

    def test_rgba_bytes(self, library):
        data = library.palette_rgba_bytes(1)
        assert len(data) == 64
        assert data[:4] == bytes((0, 0, 0, 255))

    def test_enumerate(self, library):
        entries = list(library.enumerate_palettes())
        assert len(entries) == 32
        assert entries[31][0] == 31
        assert entries[31][1].category == "utility"

    def test_enumerate_uninitialized(self):
        assert list(StandardPaletteLibrary().enumerate_palettes()) == []

    def test_by_category(self, library):
        assert library.get_palettes_by_category("biome") == list(range(8, 16))
        assert library.get_palettes_by_category("unknown") == []

    def test_mode_helpers(self):
        assert StandardPaletteLibrary.is_standard_palette_mode(31)
        assert not StandardPaletteLibrary.is_standard_palette_mode(PALETTE_MODE_CUSTOM)
        assert StandardPaletteLibrary.is_valid_palette_id(0)
        assert not StandardPaletteLibrary.is_valid_palette_id(32)


class TestFindClosestPalette:
    """Tests for StandardPaletteLibrary.find_closest_palette."""

    def test_exact_copy_matches(self, library):
        assert library.find_closest_palette(library.get_palette(5)) == (5, 0)

    def test_far_palette_is_custom(self, library):
        custom = [(255, 255, 255, 255), (255, 0, 255, 255), (0, 255, 255, 255)]
        palette_id, distance = library.find_closest_palette(custom)
        assert palette_id == PALETTE_MODE_CUSTOM
        assert distance > 0

    def test_uninitialized(self):
        assert StandardPaletteLibrary().find_closest_palette([(0, 0, 0, 255)]) == (PALETTE_MODE_CUSTOM, -1)

    def test_deterministic(self, library):
        palette = library.get_palette(13)
        assert library.find_closest_palette(palette) == library.find_closest_palette(palette)


class TestLibraryWriters:
    """Tests for StandardPaletteLibrary.save_json / save_binary."""

    def test_save_json_round_trip(self, library, tmp_path):
        path = tmp_path / "out.json"
        library.save_json(path)
        reloaded = StandardPaletteLibrary()
        assert reloaded.initialize(path)
        assert reloaded.get_palette(9) == library.get_palette(9)
        assert reloaded.get_palette_name(9) == "Palette 9"

    def test_save_binary_round_trip(self, library, tmp_path):
        path = tmp_path / "out.pal"
        library.save_binary(path)
        reloaded = StandardPaletteLibrary()
        assert reloaded.initialize(path)
        assert reloaded.get_palette(30) == library.get_palette(30)

    def test_save_uninitialized(self, tmp_path):
        with pytest.raises(LibraryNotInitializedError):
            StandardPaletteLibrary().save_json(tmp_path / "out.json")
