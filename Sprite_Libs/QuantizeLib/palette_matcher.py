"""
Color and palette distance calculations.

All distances are squared Euclidean over (r, g, b) using integer
arithmetic; alpha never takes part in a comparison.

Classes:
    PaletteMatchScore: How well a candidate palette covers a set of colors

Functions:
    color_distance: Squared RGB distance between two colors
    nearest_index: Index of the closest palette entry (first wins on ties)
    palette_distance: Slot-by-slot distance between two palettes
    map_pixels_to_palette: Vectorized nearest-entry mapping for a pixel buffer
    score_palette_match: Score a candidate palette against a color set
    is_acceptable_match: Apply the acceptance gate to a score
    find_best_palette: Pick the best candidate palette, or the custom sentinel
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from Sprite_Libs.constants import (
    ALPHA_THRESHOLD,
    CLOSE_MATCH_BONUS,
    CLOSE_MATCH_DISTANCE,
    EXACT_MATCH_BONUS,
    GOOD_MATCH_THRESHOLD,
    GREAT_MATCH_THRESHOLD,
    OPAQUE_BLACK_INDEX,
    PALETTE_MODE_CUSTOM,
    TRANSPARENT_INDEX,
)
from Sprite_Libs.SpriteLib.sprite_models import RgbaColor


@dataclass(frozen=True)
class PaletteMatchScore:
    """Result of comparing a set of unique colors with one candidate palette.

    Attributes:
        total_distance: Sum over unique colors of the distance to their nearest entry
        exact_matches: Unique colors found exactly (distance 0)
        close_matches: Unique colors with 0 < distance < 100
        unique_count: Number of unique colors compared
        score: total_distance - 10000 * exact_matches - 1000 * close_matches (lower is better)
    """

    total_distance: int
    exact_matches: int
    close_matches: int
    unique_count: int
    score: int


def color_distance(a: Sequence[int], b: Sequence[int]) -> int:
    dr = int(a[0]) - int(b[0])
    dg = int(a[1]) - int(b[1])
    db = int(a[2]) - int(b[2])
    return dr * dr + dg * dg + db * db


def nearest_index(color: Sequence[int], palette: Sequence[Sequence[int]], start: int = 0) -> int:
    """
    Find the palette entry closest to `color`.

    Args:
        color: The color to match
        palette: Candidate colors
        start: First palette index considered

    Returns:
        Index into `palette` of the minimum distance; the lowest index wins ties

    Raises:
        ValueError: If no palette entry is at or after `start`
    """
    if start >= len(palette):
        raise ValueError("Palette has no entries to match against")

    best_index = start
    best_distance = color_distance(color, palette[start])
    for index in range(start + 1, len(palette)):
        distance = color_distance(color, palette[index])
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index


def palette_distance(a: Sequence[Sequence[int]], b: Sequence[Sequence[int]]) -> int:
    """Sum of slot-by-slot distances between two palettes of equal length."""
    if len(a) != len(b):
        raise ValueError(f"Palettes must have same length: {len(a)} vs {len(b)}")
    return sum(color_distance(x, y) for x, y in zip(a, b))


def map_pixels_to_palette(
    pixels: Any,
    palette: Sequence[Sequence[int]],
    alpha_threshold: int = ALPHA_THRESHOLD,
) -> np.ndarray:
    """
    Map every RGBA pixel to a palette index.

    Pixels with alpha below `alpha_threshold` map to the transparent index 0.
    All other pixels map to their nearest entry among indices 1 and up, so
    an opaque pixel never lands on the transparent slot. Ties resolve to the
    lowest index, exactly as nearest_index does.

    Returns:
        uint8 array with one index per pixel
    """
    rgba = np.asarray(pixels, dtype=np.uint8).reshape(-1, 4)
    rgb = rgba[:, :3].astype(np.int32)
    candidates = np.asarray([color[:3] for color in palette[OPAQUE_BLACK_INDEX:]], dtype=np.int32)

    diff = rgb[:, np.newaxis, :] - candidates[np.newaxis, :, :]
    distances = np.sum(diff * diff, axis=2)
    indices = np.argmin(distances, axis=1) + OPAQUE_BLACK_INDEX

    indices[rgba[:, 3] < alpha_threshold] = TRANSPARENT_INDEX
    return indices.astype(np.uint8)


def unique_colors(colors: Iterable[Sequence[int]]) -> List[RgbaColor]:
    """Deduplicate by exact RGBA equality, keeping first-seen order."""
    seen: List[RgbaColor] = []
    for color in colors:
        key = tuple(int(channel) for channel in color)
        if key not in seen:
            seen.append(key)
    return seen


def score_palette_match(
    custom_colors: Iterable[Sequence[int]],
    candidate: Sequence[Sequence[int]],
) -> PaletteMatchScore:
    """
    Score how well `candidate` represents `custom_colors`.

    The color list is deduplicated first, so the score does not depend on
    ordering or repetition of the input.
    """
    colors = unique_colors(custom_colors)
    total = 0
    exact = 0
    close = 0
    for color in colors:
        distance = min(color_distance(color, entry) for entry in candidate)
        total += distance
        if distance == 0:
            exact += 1
        elif distance < CLOSE_MATCH_DISTANCE:
            close += 1

    score = total - exact * EXACT_MATCH_BONUS - close * CLOSE_MATCH_BONUS
    return PaletteMatchScore(
        total_distance=total,
        exact_matches=exact,
        close_matches=close,
        unique_count=len(colors),
        score=score,
    )


def is_acceptable_match(score: PaletteMatchScore) -> bool:
    """
    Acceptance gate: average distance below 200, or total below 50 per color.

    An empty color set is never accepted.
    """
    if score.unique_count == 0:
        return False
    average = score.total_distance // score.unique_count
    return (
        average < GOOD_MATCH_THRESHOLD
        or score.total_distance < GREAT_MATCH_THRESHOLD * score.unique_count
    )


def find_best_palette(
    custom_colors: Iterable[Sequence[int]],
    candidates: Sequence[Sequence[Sequence[int]]],
) -> Tuple[int, int]:
    """
    Pick the candidate palette with the lowest score.

    Returns:
        (candidate index, total distance) when the best candidate passes the
        acceptance gate, otherwise (PALETTE_MODE_CUSTOM, total distance).
        With no candidates the result is (PALETTE_MODE_CUSTOM, -1).
    """
    colors = unique_colors(custom_colors)
    best: Optional[PaletteMatchScore] = None
    best_index = PALETTE_MODE_CUSTOM

    for index, candidate in enumerate(candidates):
        result = score_palette_match(colors, candidate)
        if best is None or result.score < best.score:
            best = result
            best_index = index

    if best is None:
        return PALETTE_MODE_CUSTOM, -1
    if not is_acceptable_match(best):
        return PALETTE_MODE_CUSTOM, best.total_distance
    return best_index, best.total_distance
