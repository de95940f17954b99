"""
Median-cut color quantization for the sprite toolkit.

Reduces an RGBA pixel buffer to a short list of representative colors.
The histogram is built with numpy; the median cut runs over an explicit
bucket worklist, one level at a time, so its depth is bounded by the
requested color count instead of the call stack.

Classes:
    ColorHistogramEntry: A distinct color and how often it occurs

Functions:
    quantize_channels: Drop the low bits of every RGB channel
    build_histogram: Count distinct opaque colors
    median_cut: Reduce a histogram to at most N colors
    quantize: Histogram + median cut in one call
    fill_palette_slots: Pad an extracted color list with a fallback color
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

import numpy as np

from Sprite_Libs.constants import (
    ALPHA_THRESHOLD,
    DEFAULT_CHANNEL_BITS,
    DEFAULT_EXTRACT_COLORS,
    FALLBACK_GRAY_COLOR,
    FREE_PALETTE_SLOTS,
)
from Sprite_Libs.SpriteLib.sprite_models import RgbaColor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColorHistogramEntry:
    color: RgbaColor
    count: int


def as_rgba_array(pixels: Any) -> np.ndarray:
    """
    View any RGBA pixel container as an (N, 4) uint8 array.

    Accepts numpy arrays of shape (H, W, 4) or (N, 4), flat byte buffers,
    and sequences of RGBA tuples.
    """
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        array = np.frombuffer(bytes(pixels), dtype=np.uint8)
    else:
        array = np.asarray(pixels, dtype=np.uint8)
    if array.size % 4 != 0:
        raise ValueError(f"RGBA buffer size must be a multiple of 4, got {array.size}")
    return array.reshape(-1, 4)


def quantize_channels(pixels: Any, bits: int = DEFAULT_CHANNEL_BITS) -> np.ndarray:
    """
    Keep only the top `bits` bits of each RGB channel.

    With the default of 4 bits every channel becomes `(value >> 4) << 4`.
    Alpha is left untouched and the input is never modified.

    Args:
        pixels: RGBA numpy array (any leading shape, last axis of length 4)
        bits: Bits to keep per channel (1-8)

    Returns:
        A new array with the same shape as the input
    """
    if not 1 <= bits <= 8:
        raise ValueError(f"bits must be within 1..8, got {bits}")
    quantized = np.array(pixels, dtype=np.uint8, copy=True)
    shift = 8 - bits
    quantized[..., :3] = (quantized[..., :3] >> shift) << shift
    return quantized


def build_histogram(pixels: Any, alpha_threshold: int = ALPHA_THRESHOLD) -> List[ColorHistogramEntry]:
    """
    Count the distinct RGB colors of all sufficiently opaque pixels.

    Args:
        pixels: RGBA pixel data
        alpha_threshold: Pixels with alpha below this are ignored

    Returns:
        Histogram entries in ascending (r, g, b) order, alpha fixed at 255
    """
    rgba = as_rgba_array(pixels)
    opaque = rgba[rgba[:, 3] >= alpha_threshold, :3]
    if len(opaque) == 0:
        return []

    colors, counts = np.unique(opaque, axis=0, return_counts=True)
    return [
        ColorHistogramEntry((int(r), int(g), int(b), 255), int(count))
        for (r, g, b), count in zip(colors, counts)
    ]


def _widest_channel(bucket: Sequence[ColorHistogramEntry]) -> int:
    ranges = []
    for channel in range(3):
        values = [entry.color[channel] for entry in bucket]
        ranges.append(max(values) - min(values))
    return ranges.index(max(ranges))


def _split_bucket(
    bucket: Sequence[ColorHistogramEntry],
) -> Tuple[List[ColorHistogramEntry], List[ColorHistogramEntry]]:
    """Split at the count-weighted median of the widest channel. Both halves are non-empty."""
    channel = _widest_channel(bucket)
    ordered = sorted(bucket, key=lambda entry: entry.color[channel])
    half = sum(entry.count for entry in ordered) / 2.0

    split = len(ordered) - 1
    running = 0
    for position, entry in enumerate(ordered[:-1]):
        running += entry.count
        if running >= half:
            split = position + 1
            break

    return ordered[:split], ordered[split:]


def _representative_color(bucket: Sequence[ColorHistogramEntry]) -> RgbaColor:
    total = sum(entry.count for entry in bucket)
    r = sum(entry.color[0] * entry.count for entry in bucket) // total
    g = sum(entry.color[1] * entry.count for entry in bucket) // total
    b = sum(entry.color[2] * entry.count for entry in bucket) // total
    return r, g, b, 255


def median_cut(histogram: Sequence[ColorHistogramEntry], color_count: int) -> List[RgbaColor]:
    """
    Reduce a histogram to at most `color_count` representative colors.

    The cut proceeds level by level for ceil(log2(color_count)) levels. On
    each level every bucket holding at least two distinct colors is split
    along its widest channel, as long as the total number of buckets stays
    within `color_count`. Buckets that cannot be split stay as leaves.

    Args:
        histogram: Output of build_histogram
        color_count: Maximum number of colors to return (>= 1)

    Returns:
        Count-weighted average color of each leaf bucket, in leaf order
    """
    if color_count < 1:
        raise ValueError(f"color_count must be at least 1, got {color_count}")
    if not histogram:
        return []

    depth = math.ceil(math.log2(color_count)) if color_count > 1 else 0
    buckets: List[List[ColorHistogramEntry]] = [list(histogram)]

    for level in range(depth):
        next_buckets: List[List[ColorHistogramEntry]] = []
        remaining = len(buckets)
        split_any = False
        for bucket in buckets:
            remaining -= 1
            room = color_count - (len(next_buckets) + remaining)
            if len(bucket) >= 2 and room >= 2:
                left, right = _split_bucket(bucket)
                next_buckets.extend((left, right))
                split_any = True
            else:
                next_buckets.append(bucket)
        buckets = next_buckets
        logger.debug(f"Median cut level {level + 1}/{depth}: {len(buckets)} buckets")
        if not split_any:
            break

    return [_representative_color(bucket) for bucket in buckets]


def quantize(
    pixels: Any,
    color_count: int = DEFAULT_EXTRACT_COLORS,
    alpha_threshold: int = ALPHA_THRESHOLD,
) -> List[RgbaColor]:
    """
    Extract up to `color_count` representative colors from RGBA pixels.

    The result is never longer than `color_count` nor longer than the number
    of distinct opaque colors present.
    """
    histogram = build_histogram(pixels, alpha_threshold=alpha_threshold)
    colors = median_cut(histogram, color_count)
    logger.debug(f"Quantized {len(histogram)} distinct colors to {len(colors)}")
    return colors


def fill_palette_slots(
    colors: Sequence[RgbaColor],
    slot_count: int = FREE_PALETTE_SLOTS,
    fallback: RgbaColor = FALLBACK_GRAY_COLOR,
) -> List[RgbaColor]:
    """Truncate or pad `colors` to exactly `slot_count` entries using `fallback`."""
    filled = list(colors[:slot_count])
    filled.extend([fallback] * (slot_count - len(filled)))
    return filled
