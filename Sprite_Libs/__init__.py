"""
Sprite_Libs - Indexed Sprite Toolkit Library Modules

This package contains the core functionality for editing 16-color indexed
sprites (up to 40x40) and converting them to and from PNG and the SPRTZ
containers, organized into specialized sub-packages:

- SpriteLib: Canvas model, raw sprite/palette files and editing operations
- QuantizeLib: Median-cut quantization and palette matching
- PaletteLib: Standard palette library, its file formats and editor presets
- ImportLib: Pillow-backed image I/O and the interactive import pipeline
- ContainerLib: SPRTZ v1/v2 compressed containers
"""

__version__ = "0.1.0"
