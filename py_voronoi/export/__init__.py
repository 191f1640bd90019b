"""
Image export for rasterized diagrams.
"""

from .image import output_filename, save_pixels_to_image

__all__ = ['output_filename', 'save_pixels_to_image']
