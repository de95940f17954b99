"""
Compatibility wrapper to import Pillow (which provides the `PIL` namespace)
and expose the pieces the toolkit needs from a single place.

This module loads the Pillow-provided modules via importlib and re-exports
`Image` together with a name -> filter table for resampling. Importing from
`pillow_compat` keeps Pillow version differences (the `Image.Resampling`
enum appeared in Pillow 9.1) out of the rest of the codebase.
"""
from importlib import import_module
from types import ModuleType
from typing import Dict, Optional


def _import(name: str) -> Optional[ModuleType]:
    try:
        return import_module(name)
    except ImportError:
        return None


_pil_image = _import("PIL.Image")

if _pil_image is None:
    raise ImportError("pillow (PIL) is required: install with 'pip install Pillow'")

Image = _pil_image

_resampling = getattr(_pil_image, "Resampling", _pil_image)

RESAMPLE_FILTERS: Dict[str, int] = {
    "nearest": _resampling.NEAREST,
    "box": _resampling.BOX,
    "bilinear": _resampling.BILINEAR,
    "hamming": _resampling.HAMMING,
    "bicubic": _resampling.BICUBIC,
    "lanczos": _resampling.LANCZOS,
}


def resample_filter(name: str) -> int:
    """
    Look up a Pillow resampling filter by name.

    Args:
        name: One of the keys of RESAMPLE_FILTERS (case-insensitive)

    Returns:
        The Pillow filter constant

    Raises:
        ValueError: If the name is not a known filter
    """
    key = str(name).strip().lower()
    if key not in RESAMPLE_FILTERS:
        raise ValueError(f"Unsupported resample filter: {name}")
    return RESAMPLE_FILTERS[key]
