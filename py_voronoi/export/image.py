"""
Image export for rasterized pixel buffers.

Encoding is delegated to Pillow; the output format is taken from the
explicit ``fmt`` argument or from the file extension.
"""

from pathlib import Path
from typing import Optional, Union

import numpy as np
import structlog
from PIL import Image

from ..core.errors import ImageSinkError

logger = structlog.get_logger()


def output_filename(prefix: str, seed: int, fmt: str) -> str:
    """Build the output file name, e.g. ``output_voronoi_42.png``."""
    return f"{prefix}{seed}.{fmt}"


def _pillow_format(fmt: str) -> str:
    fmt = fmt.lower().lstrip(".")
    extensions = Image.registered_extensions()
    return extensions.get(f".{fmt}", fmt.upper())


def save_pixels_to_image(filename: Union[str, Path], width: int, height: int,
                         pixels: np.ndarray, fmt: Optional[str] = None) -> Path:
    """
    Encode a pixel buffer and write it to ``filename``.

    Args:
        filename: Destination path
        width: Grid width the buffer was rasterized for
        height: Grid height the buffer was rasterized for
        pixels: ``(height, width, 3)`` uint8 buffer
        fmt: Image format or extension; defaults to the file extension

    Returns:
        Path of the written file

    Raises:
        ValueError: if the buffer does not match the given dimensions
        ImageSinkError: if encoding or writing fails
    """
    pixels = np.asarray(pixels)
    if pixels.shape != (height, width, 3):
        raise ValueError(
            f"Pixel buffer shape {pixels.shape} does not match {width}x{height} RGB"
        )

    path = Path(filename)
    if fmt is None:
        fmt = path.suffix.lstrip(".") or "png"

    try:
        image = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
        image.save(path, format=_pillow_format(fmt))
    except (OSError, ValueError, KeyError) as e:
        logger.error("Failed to save image", path=str(path), format=fmt, error=str(e))
        raise ImageSinkError(f"Could not save {path}: {e}") from e

    logger.info("Image saved", path=str(path), width=width, height=height, format=fmt)
    return path
