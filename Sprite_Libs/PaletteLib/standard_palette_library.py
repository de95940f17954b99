"""
Standard Palette Library.

A catalog of 32 fixed 16-color palettes plus per-palette metadata. Sprite
containers can reference a palette by id instead of embedding colors, and
custom palettes can be matched against the catalog to find the closest
standard entry.

The library is an explicit context object: create one, `initialize` it from
a JSON or binary file, pass it to whoever needs lookups, and `shutdown` it
(or use it as a context manager). Lookups on an uninitialized library
return None rather than raising; `require_palette` is the strict variant
used by the container codec.

Classes:
    StandardPaletteLibrary: The palette catalog

Example:
    >>> with StandardPaletteLibrary() as library:
    ...     if library.initialize("palettes/standard.json"):
    ...         palette_id, distance = library.find_closest_palette(canvas.palette)
"""

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from Sprite_Libs.constants import (
    LIBRARY_BINARY_EXTENSION,
    LIBRARY_JSON_EXTENSION,
    PALETTE_MODE_CUSTOM,
    STANDARD_PALETTE_COLORS,
    STANDARD_PALETTE_COUNT,
)
from Sprite_Libs.errors import (
    LibraryNotInitializedError,
    SpriteError,
    SpriteIOError,
    ValidationError,
)
from Sprite_Libs.PaletteLib.palette_parsers import (
    PaletteRecord,
    StandardPaletteInfo,
    dump_palette_binary,
    dump_palette_json,
    parse_palette_binary,
    parse_palette_json,
)
from Sprite_Libs.QuantizeLib.palette_matcher import find_best_palette
from Sprite_Libs.SpriteLib.sprite_models import RgbaColor, validate_color

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class StandardPaletteLibrary:
    """
    Catalog of 32 standard 16-color palettes.

    Not safe for concurrent mutation. Concurrent read-only use after
    initialization is fine as long as nobody re-initializes or shuts the
    library down at the same time.
    """

    def __init__(self):
        """Create an empty, uninitialized library."""
        self._records: List[PaletteRecord] = []
        self._last_error = ""

    def __enter__(self) -> "StandardPaletteLibrary":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return len(self._records) == STANDARD_PALETTE_COUNT

    @property
    def last_error(self) -> str:
        return self._last_error

    def clear_error(self) -> None:
        self._last_error = ""

    def shutdown(self) -> None:
        """Drop all palettes and metadata."""
        if self._records:
            logger.info("Standard palette library shut down")
        self._records = []
        self._last_error = ""

    def initialize(self, path: PathLike) -> bool:
        """
        Load the library from a file, choosing the parser by extension.

        `.json` files go to the JSON parser and `.pal` files to the binary
        parser. For any other path, `<path>.json` is tried first and then
        `<path>.pal`.

        Args:
            path: Library file path

        Returns:
            True on success. On failure the previous contents are kept, a
            message is stored in `last_error`, and False is returned.
        """
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix == LIBRARY_JSON_EXTENSION:
            return self.initialize_from_json(path)
        if suffix == LIBRARY_BINARY_EXTENSION:
            return self.initialize_from_binary(path)

        if self.initialize_from_json(Path(f"{path}{LIBRARY_JSON_EXTENSION}")):
            return True
        return self.initialize_from_binary(Path(f"{path}{LIBRARY_BINARY_EXTENSION}"))

    def initialize_from_json(self, path: PathLike) -> bool:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return self._fail(f"Failed to open JSON file: {path} ({e})")
        return self._commit_parsed(lambda: parse_palette_json(text), str(path))

    def initialize_from_binary(self, path: PathLike) -> bool:
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            return self._fail(f"Failed to open binary file: {path} ({e})")
        return self._commit_parsed(lambda: parse_palette_binary(data), str(path))

    def load_from_records(self, records: Sequence[PaletteRecord]) -> bool:
        """Populate the library from already-built records (32 palettes, ids 0-31)."""
        def build() -> List[PaletteRecord]:
            ordered = sorted(records, key=lambda record: record.id)
            if [record.id for record in ordered] != list(range(STANDARD_PALETTE_COUNT)):
                raise ValidationError(f"Records must cover palette ids 0-{STANDARD_PALETTE_COUNT - 1}")
            built = []
            for r in ordered:
                if len(r.colors) != STANDARD_PALETTE_COLORS:
                    raise ValidationError(
                        f"Palette {r.id} must hold {STANDARD_PALETTE_COLORS} colors, got {len(r.colors)}"
                    )
                colors = [validate_color(color) for color in r.colors]
                built.append(PaletteRecord(r.id, r.name, r.description, r.category, colors))
            return built

        return self._commit_parsed(build, "records")

    def _commit_parsed(self, parse, source: str) -> bool:
        try:
            records = parse()
        except SpriteError as e:
            return self._fail(str(e))

        self._records = records
        self._last_error = ""
        logger.info(f"Standard palette library initialized from {source}")
        return True

    def _fail(self, message: str) -> bool:
        self._last_error = message
        logger.warning(f"Standard palette library: {message}")
        return False

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @staticmethod
    def is_valid_palette_id(palette_id: int) -> bool:
        return 0 <= palette_id < STANDARD_PALETTE_COUNT

    @staticmethod
    def is_standard_palette_mode(palette_mode: int) -> bool:
        return 0 <= palette_mode < STANDARD_PALETTE_COUNT

    def _record(self, palette_id: int) -> Optional[PaletteRecord]:
        if not self.is_initialized or not self.is_valid_palette_id(palette_id):
            return None
        return self._records[palette_id]

    def get_palette(self, palette_id: int) -> Optional[List[RgbaColor]]:
        record = self._record(palette_id)
        return list(record.colors) if record else None

    def get_palette_name(self, palette_id: int) -> Optional[str]:
        record = self._record(palette_id)
        return record.name if record else None

    def get_palette_description(self, palette_id: int) -> Optional[str]:
        record = self._record(palette_id)
        return record.description if record else None

    def get_palette_category(self, palette_id: int) -> Optional[str]:
        record = self._record(palette_id)
        return record.category if record else None

    def get_palette_info(self, palette_id: int) -> Optional[StandardPaletteInfo]:
        record = self._record(palette_id)
        return record.info if record else None

    def require_palette(self, palette_id: int) -> List[RgbaColor]:
        """
        Strict lookup.

        Raises:
            LibraryNotInitializedError: If the library has not been initialized
            ValidationError: If palette_id is outside 0-31
        """
        if not self.is_initialized:
            raise LibraryNotInitializedError("Standard palette library is not initialized")
        if not self.is_valid_palette_id(palette_id):
            raise ValidationError(f"Standard palette id out of range 0-31: {palette_id}")
        return list(self._records[palette_id].colors)

    def copy_palette(self, palette_id: int) -> Optional[List[RgbaColor]]:
        return self.get_palette(palette_id)

    def palette_rgba_bytes(self, palette_id: int) -> Optional[bytes]:
        """Palette as 64 bytes of RGBA, or None when not available."""
        colors = self.get_palette(palette_id)
        if colors is None:
            return None
        return b"".join(bytes(color) for color in colors)

    def enumerate_palettes(self) -> Iterator[Tuple[int, StandardPaletteInfo]]:
        if not self.is_initialized:
            return
        for record in self._records:
            yield record.id, record.info

    def get_palettes_by_category(self, category: str) -> List[int]:
        if not self.is_initialized or not category:
            return []
        return [record.id for record in self._records if record.category == category]

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def find_closest_palette(self, custom_palette: Sequence[Sequence[int]]) -> Tuple[int, int]:
        """
        Find the standard palette that best represents `custom_palette`.

        Returns:
            (palette id, total distance), or (PALETTE_MODE_CUSTOM, distance)
            when no palette passes the acceptance gate. An uninitialized
            library yields (PALETTE_MODE_CUSTOM, -1).
        """
        if not self.is_initialized:
            return PALETTE_MODE_CUSTOM, -1

        palette_id, distance = find_best_palette(
            custom_palette, [record.colors for record in self._records]
        )
        if palette_id == PALETTE_MODE_CUSTOM:
            logger.debug(f"No standard palette close enough (best distance {distance})")
        else:
            logger.debug(
                f"Closest standard palette: {palette_id} "
                f"({self._records[palette_id].name}), distance {distance}"
            )
        return palette_id, distance

    # ------------------------------------------------------------------
    # Writers
    # ------------------------------------------------------------------

    def _records_or_raise(self) -> List[PaletteRecord]:
        if not self.is_initialized:
            raise LibraryNotInitializedError("Standard palette library is not initialized")
        return self._records

    def save_json(self, path: PathLike) -> None:
        text = dump_palette_json(self._records_or_raise())
        try:
            Path(path).write_text(text, encoding="utf-8")
        except OSError as e:
            raise SpriteIOError(f"Failed to write palette library to {path}: {e}") from e

    def save_binary(self, path: PathLike) -> None:
        data = dump_palette_binary(self._records_or_raise())
        try:
            Path(path).write_bytes(data)
        except OSError as e:
            raise SpriteIOError(f"Failed to write palette library to {path}: {e}") from e
