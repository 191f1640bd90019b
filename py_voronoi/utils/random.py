"""
Random number generation utilities.

Site generation always draws from an explicit ``numpy.random.Generator``
created from a 64-bit seed. The global NumPy and ``random`` module states are
never used, so the same seed reproduces the same sites regardless of what
else runs in the process.
"""

from typing import Union

import numpy as np
import structlog

from ..core.types import SiteSet

logger = structlog.get_logger()

MAX_SEED = 2**64 - 1


def make_rng(seed: int) -> np.random.Generator:
    """
    Create a seeded generator.

    Args:
        seed: Unsigned 64-bit integer seed

    Returns:
        A new PCG64-backed Generator
    """
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise TypeError(f"Seed must be an integer, got {type(seed).__name__}")
    if not 0 <= int(seed) <= MAX_SEED:
        raise ValueError(f"Seed must be in [0, 2**64), got {seed}")
    return np.random.Generator(np.random.PCG64(int(seed)))


def generate_sites(count: int, width: float, height: float,
                   rng: Union[int, np.random.Generator]) -> SiteSet:
    """
    Generate ``count`` uniformly distributed sites with random colors.

    Args:
        count: Number of sites
        width: Grid width; x is drawn from [0, width)
        height: Grid height; y is drawn from [0, height)
        rng: Seed or explicit Generator instance

    Returns:
        SiteSet in generation order
    """
    if count < 0:
        raise ValueError(f"Site count must be non-negative, got {count}")
    if width <= 0 or height <= 0:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

    if not isinstance(rng, np.random.Generator):
        rng = make_rng(rng)

    positions = rng.random((count, 2)) * np.array([width, height], dtype=np.float64)
    colors = rng.integers(0, 256, size=(count, 3), dtype=np.uint8)

    # random() is in [0, 1) but the product can round up to the bound
    np.minimum(positions[:, 0], np.nextafter(width, 0), out=positions[:, 0])
    np.minimum(positions[:, 1], np.nextafter(height, 0), out=positions[:, 1])

    logger.debug("Sites generated", count=count, width=width, height=height)
    return SiteSet(positions, colors)
