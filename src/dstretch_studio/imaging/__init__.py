"""
Imaging module for moving images in and out of the pixel pipeline.
"""

from dstretch_studio.imaging.io import (
    default_export_name,
    export_png_bytes,
    load_pixel_buffer,
    pixel_buffer_to_image,
    save_pixel_buffer,
)

__all__ = [
    "default_export_name",
    "export_png_bytes",
    "load_pixel_buffer",
    "pixel_buffer_to_image",
    "save_pixel_buffer",
]
