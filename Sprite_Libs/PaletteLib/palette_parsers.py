"""
Readers and writers for standard palette library files.

Two source formats are understood:

- JSON: {"palettes": [{"id", "name", "description", "category",
  "colors": [{"r", "g", "b", "a"} x 16]} x 32]}
- Binary: exactly 2048 bytes, 32 palettes x 16 colors x RGBA, no header

Both parsers validate the whole input before returning anything, so a
caller never sees a partially populated set of palettes. The JSON backend
is the standard library `json` module; swapping it only requires a new
`_load_json_document`.

Classes:
    StandardPaletteInfo: Palette metadata
    PaletteRecord: Metadata plus 16 colors

Functions:
    parse_palette_json: Parse and validate JSON library text
    parse_palette_binary: Parse and validate binary library bytes
    dump_palette_json: Serialize records to JSON text
    dump_palette_binary: Serialize records to 2048 bytes
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from Sprite_Libs.constants import (
    BINARY_PALETTE_DESCRIPTION,
    BINARY_PALETTE_NAME,
    STANDARD_CATEGORIES,
    STANDARD_PALETTE_BINARY_SIZE,
    STANDARD_PALETTE_COLORS,
    STANDARD_PALETTE_COUNT,
)
from Sprite_Libs.errors import FormatError, ValidationError
from Sprite_Libs.SpriteLib.sprite_models import RgbaColor

# JSON field names
FIELD_PALETTES = "palettes"
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_DESCRIPTION = "description"
FIELD_CATEGORY = "category"
FIELD_COLORS = "colors"
CHANNEL_KEYS = ("r", "g", "b", "a")


@dataclass(frozen=True)
class StandardPaletteInfo:
    id: int
    name: str = ""
    description: str = ""
    category: str = ""


@dataclass
class PaletteRecord:
    id: int
    name: str = ""
    description: str = ""
    category: str = ""
    colors: List[RgbaColor] = field(default_factory=list)

    @property
    def info(self) -> StandardPaletteInfo:
        return StandardPaletteInfo(self.id, self.name, self.description, self.category)


def _load_json_document(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(f"JSON: invalid document: {e}") from e


def _optional_string(entry: Dict[str, Any], key: str, palette_id: int) -> str:
    value = entry.get(key, "")
    if not isinstance(value, str):
        raise FormatError(f"JSON: '{key}' must be a string for palette {palette_id}")
    return value


def _channel(color: Dict[str, Any], key: str, palette_id: int, color_index: int) -> int:
    value = color.get(key)
    if value is None and key == "a":
        value = 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise FormatError(
            f"JSON: color {color_index} of palette {palette_id} needs an integer '{key}'"
        )
    if not 0 <= value <= 255:
        raise FormatError(
            f"JSON: color {color_index} of palette {palette_id} has '{key}' out of range: {value}"
        )
    return value


def _parse_colors(entry: Dict[str, Any], palette_id: int) -> List[RgbaColor]:
    if FIELD_COLORS not in entry:
        raise FormatError(f"JSON: 'colors' not found for palette {palette_id}")

    colors = entry[FIELD_COLORS]
    if not isinstance(colors, list):
        raise FormatError(f"JSON: colors array not found for palette {palette_id}")
    if len(colors) != STANDARD_PALETTE_COLORS:
        raise FormatError(
            f"JSON: Expected {STANDARD_PALETTE_COLORS} colors for palette {palette_id}, "
            f"got {len(colors)}"
        )

    parsed: List[RgbaColor] = []
    for color_index, color in enumerate(colors):
        if not isinstance(color, dict):
            raise FormatError(f"JSON: color {color_index} of palette {palette_id} is not an object")
        r, g, b, a = (_channel(color, key, palette_id, color_index) for key in CHANNEL_KEYS)
        # Alpha 0 means "opaque" in library files
        parsed.append((r, g, b, 255 if a == 0 else a))
    return parsed


def parse_palette_json(text: str) -> List[PaletteRecord]:
    """
    Parse standard palette library JSON.

    Args:
        text: JSON document text

    Returns:
        32 PaletteRecords ordered by id

    Raises:
        FormatError: For malformed structure, wrong array lengths or bad channels
        ValidationError: For palette ids outside 0-31 or duplicated ids
    """
    document = _load_json_document(text)
    if not isinstance(document, dict) or FIELD_PALETTES not in document:
        raise FormatError("JSON: 'palettes' key not found")

    palettes = document[FIELD_PALETTES]
    if not isinstance(palettes, list):
        raise FormatError("JSON: palettes array not found")
    if len(palettes) != STANDARD_PALETTE_COUNT:
        raise FormatError(
            f"JSON: Expected {STANDARD_PALETTE_COUNT} palettes, parsed {len(palettes)}"
        )

    records: Dict[int, PaletteRecord] = {}
    for position, entry in enumerate(palettes):
        if not isinstance(entry, dict):
            raise FormatError(f"JSON: palette entry {position} is not an object")

        palette_id = entry.get(FIELD_ID)
        if isinstance(palette_id, bool) or not isinstance(palette_id, int):
            raise FormatError(f"JSON: palette entry {position} needs an integer 'id'")
        if not 0 <= palette_id < STANDARD_PALETTE_COUNT:
            raise ValidationError(f"JSON: Invalid palette ID: {palette_id}")
        if palette_id in records:
            raise ValidationError(f"JSON: Duplicate palette ID: {palette_id}")

        records[palette_id] = PaletteRecord(
            id=palette_id,
            name=_optional_string(entry, FIELD_NAME, palette_id),
            description=_optional_string(entry, FIELD_DESCRIPTION, palette_id),
            category=_optional_string(entry, FIELD_CATEGORY, palette_id),
            colors=_parse_colors(entry, palette_id),
        )

    return [records[palette_id] for palette_id in range(STANDARD_PALETTE_COUNT)]


def parse_palette_binary(data: bytes) -> List[PaletteRecord]:
    """
    Parse a 2048-byte binary palette library.

    Binary files carry no metadata; each palette gets placeholder text and a
    category derived from its id (8 palettes per category).

    Raises:
        FormatError: If the data is not exactly 2048 bytes
    """
    if len(data) != STANDARD_PALETTE_BINARY_SIZE:
        raise FormatError(
            f"Binary: Expected {STANDARD_PALETTE_BINARY_SIZE} bytes, got {len(data)}"
        )

    records: List[PaletteRecord] = []
    stride = STANDARD_PALETTE_COLORS * 4
    for palette_id in range(STANDARD_PALETTE_COUNT):
        chunk = data[palette_id * stride:(palette_id + 1) * stride]
        colors = [
            (chunk[i], chunk[i + 1], chunk[i + 2], chunk[i + 3])
            for i in range(0, stride, 4)
        ]
        records.append(
            PaletteRecord(
                id=palette_id,
                name=BINARY_PALETTE_NAME,
                description=BINARY_PALETTE_DESCRIPTION,
                category=STANDARD_CATEGORIES[palette_id // 8],
                colors=colors,
            )
        )
    return records


def _check_records(records: Sequence[PaletteRecord]) -> None:
    if len(records) != STANDARD_PALETTE_COUNT:
        raise ValidationError(f"Expected {STANDARD_PALETTE_COUNT} palettes, got {len(records)}")
    for record in records:
        if len(record.colors) != STANDARD_PALETTE_COLORS:
            raise ValidationError(
                f"Palette {record.id} must hold {STANDARD_PALETTE_COLORS} colors, "
                f"got {len(record.colors)}"
            )


def dump_palette_json(records: Sequence[PaletteRecord]) -> str:
    _check_records(records)
    payload = {
        FIELD_PALETTES: [
            {
                FIELD_ID: record.id,
                FIELD_NAME: record.name,
                FIELD_DESCRIPTION: record.description,
                FIELD_CATEGORY: record.category,
                FIELD_COLORS: [dict(zip(CHANNEL_KEYS, color)) for color in record.colors],
            }
            for record in sorted(records, key=lambda record: record.id)
        ]
    }
    return json.dumps(payload, indent=2)


def dump_palette_binary(records: Sequence[PaletteRecord]) -> bytes:
    _check_records(records)
    data = bytearray()
    for record in sorted(records, key=lambda record: record.id):
        for color in record.colors:
            data.extend(bytes(color))
    return bytes(data)
