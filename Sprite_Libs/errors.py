"""
Exception types for the sprite toolkit.

Every failure raised by the codecs, the import pipeline and the palette
library derives from SpriteError so callers can catch the whole family
at the presentation boundary.

Classes:
    SpriteError: Base class for all toolkit errors
    SpriteIOError: File open/read/write failure
    FormatError: Bad magic, unsupported version or malformed structure
    SizeMismatchError: Declared or decompressed size does not match width x height
    DimensionError: An operation would produce non-positive or oversized dimensions
    ValidationError: Palette id or color index out of range
    LibraryNotInitializedError: Standard palette lookup before initialization
"""


class SpriteError(Exception):
    pass


class SpriteIOError(SpriteError, OSError):
    pass


class FormatError(SpriteError, ValueError):
    pass


class SizeMismatchError(FormatError):
    pass


class DimensionError(SpriteError, ValueError):
    pass


class ValidationError(SpriteError, ValueError):
    pass


class LibraryNotInitializedError(SpriteError, RuntimeError):
    pass
