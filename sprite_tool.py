#!/usr/bin/env python3
"""sprite_tool.py - Convert between PNG, SPRTZ containers and .spr sprites.

Usage:
    python sprite_tool.py convert INPUT.png OUTPUT.sprtz [--max-width 40] [--max-height 40]
                          [--library standard.json] [--match] [--palette-id N] [--format-version 2]
    python sprite_tool.py info SPRITE.sprtz [--library standard.json]
    python sprite_tool.py export SPRITE.sprtz OUTPUT.png [--scale 4] [--library standard.json]

The output format of `convert` follows the output extension: .spr writes an
uncompressed sprite, anything else a SPRTZ container.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from Sprite_Libs.constants import (
    MAX_SPRITE_SIZE,
    PALETTE_MODE_CUSTOM,
    SPRITE_EXTENSION,
    SPRTZ_VERSION_1,
    SPRTZ_VERSION_2,
)
from Sprite_Libs.ContainerLib.sprite_container_codec import DecodedSprite, load_sprtz, save_sprtz
from Sprite_Libs.errors import SpriteError
from Sprite_Libs.ImportLib.import_pipeline import import_png
from Sprite_Libs.PaletteLib.standard_palette_library import StandardPaletteLibrary
from Sprite_Libs.SpriteLib.sprite_editing_ops import export_png, find_closest_standard_palette
from Sprite_Libs.SpriteLib.sprite_files import load_sprite, save_sprite
from Sprite_Libs.SpriteLib.sprite_models import SpriteCanvas

logger = logging.getLogger("sprite_tool")


def _open_library(path: Optional[str]) -> StandardPaletteLibrary:
    library = StandardPaletteLibrary()
    if path and not library.initialize(path):
        raise SpriteError(f"Could not load palette library {path}: {library.last_error}")
    return library


def _load_any(path: Path, library: StandardPaletteLibrary) -> DecodedSprite:
    if path.suffix.lower() == SPRITE_EXTENSION:
        return DecodedSprite(canvas=load_sprite(path), version=0)
    return load_sprtz(path, library=library)


def cmd_convert(args: argparse.Namespace) -> int:
    if args.format_version == SPRTZ_VERSION_1 and (args.match or args.palette_id is not None):
        raise SpriteError("--match and --palette-id need --format-version 2")
    library = _open_library(args.library)
    canvas = SpriteCanvas()
    import_png(canvas, Path(args.input), args.max_width, args.max_height)

    output = Path(args.output)
    if output.suffix.lower() == SPRITE_EXTENSION:
        save_sprite(output, canvas)
        print(f"  Sprite: {args.input} -> {output} ({canvas.width}x{canvas.height}, uncompressed)")
        return 0

    palette_id = args.palette_id
    if palette_id is None and args.match:
        if not library.is_initialized:
            raise SpriteError("--match needs --library")
        matched, distance = find_closest_standard_palette(canvas, library)
        if matched != PALETTE_MODE_CUSTOM:
            palette_id = matched
            print(f"  Matched standard palette {matched} ({library.get_palette_name(matched)}), distance {distance}")
        else:
            print(f"  No close standard palette (best distance {distance}), keeping custom palette")

    size = save_sprtz(output, canvas, palette_id=palette_id, version=args.format_version)
    print(f"  Sprite: {args.input} -> {output} ({canvas.width}x{canvas.height}, {size} bytes)")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    library = _open_library(args.library)
    decoded = _load_any(Path(args.input), library)
    canvas = decoded.canvas

    print(f"File:    {args.input}")
    print(f"Format:  {'SPRED' if decoded.version == 0 else f'SPRTZ v{decoded.version}'}")
    print(f"Size:    {canvas.width}x{canvas.height}")
    if decoded.is_standard:
        name = library.get_palette_name(decoded.palette_id)
        print(f"Palette: standard {decoded.palette_id} ({name})")
    else:
        print("Palette: custom")
    print(f"Colors:  {len(canvas.used_indices())} indices in use")
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    library = _open_library(args.library)
    decoded = _load_any(Path(args.input), library)
    export_png(decoded.canvas, Path(args.output), scale=args.scale)
    print(f"  Exported: {args.input} -> {args.output} (x{args.scale})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Indexed sprite conversion tool")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline steps")
    sub = parser.add_subparsers(dest="command", required=True)

    convert = sub.add_parser("convert", help="Import a PNG into a sprite file")
    convert.add_argument("input", help="Source image path")
    convert.add_argument("output", help="Output .sprtz or .spr path")
    convert.add_argument("--max-width", type=int, default=MAX_SPRITE_SIZE,
                         help="Bounding box width (1-40, default 40)")
    convert.add_argument("--max-height", type=int, default=MAX_SPRITE_SIZE,
                         help="Bounding box height (1-40, default 40)")
    convert.add_argument("--library", help="Standard palette library (.json or .pal)")
    convert.add_argument("--match", action="store_true",
                         help="Reference the closest standard palette when one is close enough")
    convert.add_argument("--palette-id", type=int, help="Reference this standard palette (0-31)")
    convert.add_argument("--format-version", type=int, default=SPRTZ_VERSION_2,
                         choices=[SPRTZ_VERSION_1, SPRTZ_VERSION_2], help="SPRTZ generation")
    convert.set_defaults(func=cmd_convert)

    info = sub.add_parser("info", help="Describe a sprite file")
    info.add_argument("input", help="Sprite file path")
    info.add_argument("--library", help="Standard palette library (.json or .pal)")
    info.set_defaults(func=cmd_info)

    export = sub.add_parser("export", help="Render a sprite file to PNG")
    export.add_argument("input", help="Sprite file path")
    export.add_argument("output", help="Output PNG path")
    export.add_argument("--scale", type=int, default=1, help="Integer upscale factor")
    export.add_argument("--library", help="Standard palette library (.json or .pal)")
    export.set_defaults(func=cmd_export)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except SpriteError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
