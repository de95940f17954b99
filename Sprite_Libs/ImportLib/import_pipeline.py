"""
Interactive true-color to indexed-sprite import.

An ImportPipeline owns a SpriteCanvas and, while an import is pending, an
ImportSession holding the decoded source image, the pan offset and the
target sprite size. Every change to the session (start, shift, trim)
reruns the whole resample from the stored source:

    1. quantize_source    Drop the low bits of each RGB channel
    2. key_background     Every pixel matching the top-left RGB becomes transparent
    3. crop               Crop to the bounding box of non-transparent pixels
    4. resize             Resize the crop to the target size from the pan origin
    5. quantize_resized   Drop the low bits again after filtering
    6. extract_palette    Median cut down to 14 colors
    7. build_palette      Transparent + opaque black + 14 extracted colors
    8. map_pixels         Nearest palette index per pixel

Each step logs at debug level and, when a step hook is configured, calls
`step_hook(step_name, details)`.

States: idle -> pending -> (committed | cancelled). Committing keeps the
canvas; cancelling clears it.

Classes:
    ImportOptions: Tuning knobs for the resample
    ImportSession: Transient state of a pending import
    ImportInfo: Read-only snapshot of the session
    ImportPipeline: The state machine

Functions:
    fit_target_size: Aspect-preserving fit into a bounding box
    import_png: Start and commit an import in one call
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import numpy as np

from Sprite_Libs.constants import (
    ALPHA_THRESHOLD,
    DEFAULT_CHANNEL_BITS,
    DEFAULT_EXTRACT_COLORS,
    DEFAULT_RESAMPLE,
    FALLBACK_GRAY_COLOR,
    FREE_PALETTE_SLOTS,
    OPAQUE_BLACK_COLOR,
    TRANSPARENT_COLOR,
)
from Sprite_Libs.errors import DimensionError, SpriteIOError, ValidationError
from Sprite_Libs.ImportLib.image_io import DecodedImage, decode_image, resize_image
from Sprite_Libs.pillow_compat import RESAMPLE_FILTERS
from Sprite_Libs.QuantizeLib.color_quantizer import fill_palette_slots, quantize, quantize_channels
from Sprite_Libs.QuantizeLib.palette_matcher import map_pixels_to_palette
from Sprite_Libs.SpriteLib.sprite_models import RgbaColor, SpriteCanvas, check_dimensions, validate_color

logger = logging.getLogger(__name__)

StepHook = Callable[[str, Dict[str, Any]], None]
Decoder = Callable[[bytes], DecodedImage]
Resizer = Callable[..., np.ndarray]
ImportSource = Union[bytes, bytearray, memoryview, str, Path, DecodedImage]

STEP_NAMES = (
    "quantize_source",
    "key_background",
    "crop",
    "resize",
    "quantize_resized",
    "extract_palette",
    "build_palette",
    "map_pixels",
)


@dataclass(frozen=True)
class ImportOptions:
    """Resample settings.

    Attributes:
        palette_colors: Colors extracted by the median cut (1-14)
        channel_bits: Bits kept per RGB channel when quantizing (1-8)
        alpha_threshold: Pixels with alpha below this become transparent
        resample: Pillow filter name used by the resize step
        fallback_color: Fills palette slots the median cut leaves empty
    """

    palette_colors: int = DEFAULT_EXTRACT_COLORS
    channel_bits: int = DEFAULT_CHANNEL_BITS
    alpha_threshold: int = ALPHA_THRESHOLD
    resample: str = DEFAULT_RESAMPLE
    fallback_color: RgbaColor = FALLBACK_GRAY_COLOR

    def __post_init__(self):
        if not 1 <= self.palette_colors <= FREE_PALETTE_SLOTS:
            raise ValidationError(
                f"palette_colors must be within 1..{FREE_PALETTE_SLOTS}, got {self.palette_colors}"
            )
        if not 1 <= self.channel_bits <= 8:
            raise ValidationError(f"channel_bits must be within 1..8, got {self.channel_bits}")
        if not 0 <= self.alpha_threshold <= 255:
            raise ValidationError(f"alpha_threshold must be within 0..255, got {self.alpha_threshold}")
        if str(self.resample).lower() not in RESAMPLE_FILTERS:
            raise ValidationError(f"Unsupported resample filter: {self.resample}")
        object.__setattr__(self, "fallback_color", validate_color(self.fallback_color))


@dataclass
class ImportSession:
    """State of a pending import.

    Attributes:
        source: (height, width, 4) uint8 RGBA copy of the decoded image
        source_width: Source width in pixels
        source_height: Source height in pixels
        target_width: Sprite width the import produces
        target_height: Sprite height the import produces
        offset_x: Pan offset into the source, in source pixels
        offset_y: Pan offset into the source, in source pixels
    """

    source: np.ndarray
    source_width: int
    source_height: int
    target_width: int
    target_height: int
    offset_x: int = 0
    offset_y: int = 0

    @property
    def max_offset(self) -> Tuple[int, int]:
        return (
            max(0, self.source_width - self.target_width),
            max(0, self.source_height - self.target_height),
        )

    def clamp_offset(self) -> None:
        max_x, max_y = self.max_offset
        self.offset_x = min(max(0, self.offset_x), max_x)
        self.offset_y = min(max(0, self.offset_y), max_y)


@dataclass(frozen=True)
class ImportInfo:
    source_width: int
    source_height: int
    offset_x: int
    offset_y: int
    target_width: int
    target_height: int


def fit_target_size(source_width: int, source_height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """
    Fit a source size into a bounding box, preserving the aspect ratio.

    The longer source side is matched to the box first; if the other side
    then overflows, the fit is redone from that side. Fractions are
    truncated and both results are at least 1.

    Example:
        >>> fit_target_size(100, 50, 16, 16)
        (16, 8)
    """
    if source_width < 1 or source_height < 1:
        raise DimensionError(f"Source size must be positive, got {source_width}x{source_height}")
    if max_width < 1 or max_height < 1:
        raise DimensionError(f"Bounding box must be positive, got {max_width}x{max_height}")

    aspect = source_width / source_height
    if source_width > source_height:
        width = max_width
        height = int(max_width / aspect)
        if height > max_height:
            height = max_height
            width = int(max_height * aspect)
    else:
        height = max_height
        width = int(max_height * aspect)
        if width > max_width:
            width = max_width
            height = int(max_width / aspect)

    return max(1, width), max(1, height)


def _crop_bounds(alpha: np.ndarray) -> Tuple[int, int, int, int]:
    """(left, top, right, bottom) inclusive bounds of alpha != 0; the full image if none."""
    rows = np.flatnonzero(alpha.any(axis=1))
    cols = np.flatnonzero(alpha.any(axis=0))
    if len(rows) == 0:
        return 0, 0, alpha.shape[1] - 1, alpha.shape[0] - 1
    return int(cols[0]), int(rows[0]), int(cols[-1]), int(rows[-1])


class ImportPipeline:
    """
    Staged, re-runnable conversion of a true-color image onto a canvas.

    The decoder and resizer are injectable so callers (and tests) can swap
    the Pillow-backed defaults for deterministic substitutes.
    """

    def __init__(
        self,
        canvas: SpriteCanvas,
        options: Optional[ImportOptions] = None,
        decoder: Decoder = decode_image,
        resizer: Resizer = resize_image,
        step_hook: Optional[StepHook] = None,
    ):
        self.canvas = canvas
        self.options = options or ImportOptions()
        self.decoder = decoder
        self.resizer = resizer
        self.step_hook = step_hook
        self._session: Optional[ImportSession] = None

    @property
    def has_pending_import(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Optional[ImportSession]:
        return self._session

    def import_info(self) -> Optional[ImportInfo]:
        """Snapshot of the pending session, or None when idle."""
        s = self._session
        if s is None:
            return None
        return ImportInfo(
            source_width=s.source_width,
            source_height=s.source_height,
            offset_x=s.offset_x,
            offset_y=s.offset_y,
            target_width=s.target_width,
            target_height=s.target_height,
        )

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def start_import(self, source: ImportSource, max_width: int, max_height: int) -> None:
        """
        Begin an import from encoded bytes, an image file path or a DecodedImage.

        Any pending import is replaced. The canvas is only modified once the
        first resample has succeeded.

        Raises:
            DimensionError: If the bounding box is outside 1..40
            FormatError: If the image cannot be decoded
            SpriteIOError: If an image path cannot be read
        """
        check_dimensions(max_width, max_height)
        image = self._decode(source)
        self.start_import_rgba(image.pixels, image.width, image.height, max_width, max_height)

    def start_import_rgba(self, pixels: Any, width: int, height: int, max_width: int, max_height: int) -> None:
        """Begin an import from raw RGBA pixel data of the given size."""
        check_dimensions(max_width, max_height)
        if width < 1 or height < 1:
            raise DimensionError(f"Source size must be positive, got {width}x{height}")

        source = np.array(pixels, dtype=np.uint8, copy=True)
        if source.size != width * height * 4:
            raise DimensionError(f"Source buffer holds {source.size} bytes, expected {width * height * 4}")

        target_width, target_height = fit_target_size(width, height, max_width, max_height)
        session = ImportSession(
            source=source.reshape(height, width, 4),
            source_width=width,
            source_height=height,
            target_width=target_width,
            target_height=target_height,
        )
        logger.debug(f"Import started: source {width}x{height}, target {target_width}x{target_height}")

        self._apply(session)
        self._session = session

    def shift_offset(self, dx: int, dy: int) -> None:
        """
        Pan by a sprite-space delta and resample.

        The delta is scaled by source/target size and truncated toward zero
        before being added to the offset. Does nothing when idle.
        """
        s = self._session
        if s is None:
            return

        scale_x = s.source_width / s.target_width
        scale_y = s.source_height / s.target_height
        source_dx = int(dx * scale_x)
        source_dy = int(dy * scale_y)

        s.offset_x += source_dx
        s.offset_y += source_dy
        s.clamp_offset()
        logger.debug(
            f"Shift ({dx}, {dy}) sprite space = ({source_dx}, {source_dy}) source space, "
            f"offset now ({s.offset_x}, {s.offset_y})"
        )
        self._apply(s)

    def trim(self, left: int, right: int, top: int, bottom: int) -> None:
        """
        Cut pixels off the edges of the stored source image and resample.

        Does nothing when idle.

        Raises:
            ValidationError: If any amount is negative
            DimensionError: If the trimmed source would be smaller than 1x1; the session is unchanged
        """
        s = self._session
        if s is None:
            return
        if min(left, right, top, bottom) < 0:
            raise ValidationError(f"Trim amounts must not be negative: {(left, right, top, bottom)}")

        new_width = s.source_width - left - right
        new_height = s.source_height - top - bottom
        if new_width < 1 or new_height < 1:
            logger.warning(
                f"Trim rejected: {s.source_width}x{s.source_height} would become {new_width}x{new_height}"
            )
            raise DimensionError(f"Trimming would leave a {new_width}x{new_height} source")

        trimmed = ImportSession(
            source=s.source[top:top + new_height, left:left + new_width].copy(),
            source_width=new_width,
            source_height=new_height,
            target_width=s.target_width,
            target_height=s.target_height,
            offset_x=s.offset_x,
            offset_y=s.offset_y,
        )
        trimmed.clamp_offset()
        self._apply(trimmed)
        self._session = trimmed
        logger.debug(f"Trimmed source to {new_width}x{new_height} (L:{left} R:{right} T:{top} B:{bottom})")

    def commit(self) -> None:
        """Keep the canvas and drop the session."""
        if self._session is None:
            return
        self._session = None
        logger.info(f"Import committed: {self.canvas.width}x{self.canvas.height} sprite")

    def cancel(self) -> None:
        """Drop the session and clear the canvas."""
        if self._session is None:
            return
        self._session = None
        self.canvas.clear()
        logger.info("Import cancelled, canvas cleared")

    # ------------------------------------------------------------------
    # Resample
    # ------------------------------------------------------------------

    def _decode(self, source: ImportSource) -> DecodedImage:
        if isinstance(source, DecodedImage):
            return source
        if isinstance(source, (str, Path)):
            try:
                data = Path(source).read_bytes()
            except OSError as e:
                raise SpriteIOError(f"Failed to read image {source}: {e}") from e
            return self.decoder(data)
        return self.decoder(bytes(source))

    def _emit(self, step: str, **details: Any) -> None:
        logger.debug(f"[{step}] {details}")
        if self.step_hook is not None:
            self.step_hook(step, details)

    def _apply(self, session: ImportSession) -> None:
        palette, indices = self.resample(session)
        if (self.canvas.width, self.canvas.height) != (session.target_width, session.target_height):
            self.canvas.resize(session.target_width, session.target_height)
        self.canvas.pixels = bytearray(indices.tobytes())
        self.canvas.palette = palette

    def resample(self, session: ImportSession) -> Tuple[List[RgbaColor], np.ndarray]:
        """
        Run the full resample for a session without touching the canvas.

        Returns:
            (16-color palette, flat uint8 array of target_width * target_height indices)
        """
        opts = self.options

        work = quantize_channels(session.source, opts.channel_bits)
        self._emit("quantize_source", width=session.source_width, height=session.source_height)

        background = work[0, 0, :3].copy()
        keyed = np.all(work[..., :3] == background, axis=-1)
        work[keyed] = TRANSPARENT_COLOR
        self._emit(
            "key_background",
            color=tuple(int(c) for c in background),
            transparent_pixels=int(keyed.sum()),
        )

        left, top, right, bottom = _crop_bounds(work[..., 3])
        crop = np.ascontiguousarray(work[top:bottom + 1, left:right + 1])
        crop_height, crop_width = crop.shape[:2]
        self._emit("crop", left=left, top=top, width=crop_width, height=crop_height)

        # The sampled region never gets narrower than the target
        origin_x = min(session.offset_x, max(0, crop_width - session.target_width))
        origin_y = min(session.offset_y, max(0, crop_height - session.target_height))
        resized = self.resizer(
            crop,
            crop_width,
            crop_height,
            origin_x,
            origin_y,
            session.target_width,
            session.target_height,
            resample=opts.resample,
        )
        resized = np.asarray(resized, dtype=np.uint8)
        expected = session.target_width * session.target_height * 4
        if resized.size != expected:
            raise DimensionError(f"Resizer returned {resized.size} bytes, expected {expected}")
        resized = resized.reshape(session.target_height, session.target_width, 4)
        self._emit(
            "resize",
            origin=(origin_x, origin_y),
            width=session.target_width,
            height=session.target_height,
        )

        resized = quantize_channels(resized, opts.channel_bits)
        self._emit("quantize_resized", pixels=session.target_width * session.target_height)

        colors = quantize(resized, opts.palette_colors, alpha_threshold=opts.alpha_threshold)
        self._emit("extract_palette", colors=len(colors))

        palette = [TRANSPARENT_COLOR, OPAQUE_BLACK_COLOR]
        palette.extend(fill_palette_slots(colors, FREE_PALETTE_SLOTS, opts.fallback_color))
        self._emit("build_palette", extracted=len(colors), filled=FREE_PALETTE_SLOTS - len(colors))

        indices = map_pixels_to_palette(resized, palette, alpha_threshold=opts.alpha_threshold)
        self._emit(
            "map_pixels",
            transparent=int(np.count_nonzero(indices == 0)),
            opaque=int(np.count_nonzero(indices)),
        )
        return palette, indices


def import_png(
    canvas: SpriteCanvas,
    source: ImportSource,
    max_width: int,
    max_height: int,
    options: Optional[ImportOptions] = None,
) -> SpriteCanvas:
    """Import an image onto `canvas` with no panning or trimming and commit it."""
    pipeline = ImportPipeline(canvas, options=options)
    pipeline.start_import(source, max_width, max_height)
    pipeline.commit()
    return canvas
