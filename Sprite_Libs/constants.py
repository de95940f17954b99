"""
Constants and configuration values for the sprite toolkit.

This module centralizes all constant values, magic numbers, and
format limits used throughout the library.
"""

# Sprite limits
MAX_SPRITE_SIZE = 40
MIN_SPRITE_SIZE = 1
MAX_SPRITE_PIXELS = MAX_SPRITE_SIZE * MAX_SPRITE_SIZE
DEFAULT_SPRITE_WIDTH = 8
DEFAULT_SPRITE_HEIGHT = 8

# Palette layout
PALETTE_SIZE = 16
PALETTE_BYTES = PALETTE_SIZE * 4  # RGBA
TRANSPARENT_INDEX = 0
OPAQUE_BLACK_INDEX = 1
FIRST_FREE_INDEX = 2
FREE_PALETTE_SLOTS = PALETTE_SIZE - FIRST_FREE_INDEX
TRANSPARENT_COLOR = (0, 0, 0, 0)
OPAQUE_BLACK_COLOR = (0, 0, 0, 255)
FALLBACK_GRAY_COLOR = (128, 128, 128, 255)

# Import pipeline defaults
DEFAULT_EXTRACT_COLORS = FREE_PALETTE_SLOTS
DEFAULT_CHANNEL_BITS = 4
ALPHA_THRESHOLD = 128
DEFAULT_RESAMPLE = "lanczos"

# Raw sprite file (.spr)
SPRITE_MAGIC = b"SPRED"
SPRITE_VERSION = 1
SPRITE_EXTENSION = ".spr"

# Raw palette file
PALETTE_MAGIC = b"STPAL"
PALETTE_VERSION = 1
PALETTE_FILE_EXTENSION = ".stpal"

# SPRTZ compressed containers
SPRTZ_MAGIC = b"SPTZ"
SPRTZ_VERSION_1 = 1
SPRTZ_VERSION_2 = 2
SPRTZ_HEADER_FORMAT = "<4sHBBII"
SPRTZ_HEADER_SIZE = 16
SPRTZ_PALETTE_BLOCK_SIZE = FREE_PALETTE_SLOTS * 3
SPRTZ_EXTENSION = ".sprtz"
ZLIB_LEVEL = 9

# Standard palette library
STANDARD_PALETTE_COUNT = 32
STANDARD_PALETTE_COLORS = 16
STANDARD_PALETTE_BINARY_SIZE = STANDARD_PALETTE_COUNT * STANDARD_PALETTE_COLORS * 4
PALETTE_MODE_CUSTOM = 0xFF
STANDARD_CATEGORIES = ("retro", "biome", "themed", "utility")
BINARY_PALETTE_NAME = "Standard Palette"
BINARY_PALETTE_DESCRIPTION = "Binary loaded palette"
LIBRARY_JSON_EXTENSION = ".json"
LIBRARY_BINARY_EXTENSION = ".pal"

# Palette matching thresholds (empirical, keep in sync with stored files)
EXACT_MATCH_BONUS = 10000
CLOSE_MATCH_BONUS = 1000
CLOSE_MATCH_DISTANCE = 100
GOOD_MATCH_THRESHOLD = 200
GREAT_MATCH_THRESHOLD = 50

# Supported import formats
SUPPORTED_IMPORT_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}
DEFAULT_OUTPUT_FORMAT = "PNG"
