"""Command-line entry point for the Voronoi diagram generator."""

import argparse
import sys
import time
from typing import List, Optional

from .config import Settings, get_settings
from .core.errors import ImageSinkError, IndexConstructionError
from .core.rasterizer import RasterConfig, rasterize
from .core.spatial_index import build_index_from_sites
from .export.image import output_filename, save_pixels_to_image
from .utils.logging import configure_logging
from .utils.random import MAX_SEED, generate_sites, make_rng

EXIT_OK = 0
EXIT_SAVE_FAILED = 1
EXIT_USAGE = 2


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be a non-negative integer, got {value}")
    return number


def _seed(value: str) -> int:
    number = int(value)
    if not 0 <= number <= MAX_SEED:
        raise argparse.ArgumentTypeError(f"must be an unsigned 64-bit integer, got {value}")
    return number


def format_duration(seconds: float) -> str:
    """Format an elapsed time with the largest unit below it, e.g. ``12.34ms``."""
    if seconds >= 1:
        return f"{seconds:.2f}s"
    if seconds >= 1e-3:
        return f"{seconds * 1e3:.2f}ms"
    if seconds >= 1e-6:
        return f"{seconds * 1e6:.2f}µs"
    return f"{seconds * 1e9:.2f}ns"


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """Build the argument parser with defaults taken from ``settings``."""
    parser = argparse.ArgumentParser(
        prog="py-voronoi",
        description="Generate a discrete Voronoi diagram from random colored sites",
    )
    parser.add_argument("--width", type=_positive_int, default=settings.default_width,
                        help=f"Grid width in cells (default: {settings.default_width})")
    parser.add_argument("--height", type=_positive_int, default=settings.default_height,
                        help=f"Grid height in cells (default: {settings.default_height})")
    parser.add_argument("--sites", "-c", type=_non_negative_int, default=settings.default_site_count,
                        help=f"Number of sites to generate (default: {settings.default_site_count})")
    parser.add_argument("--seed", "-s", type=_seed, default=settings.default_seed,
                        help=f"RNG seed (default: {settings.default_seed})")
    parser.add_argument("--prefix", "-p", default=settings.output_prefix,
                        help=f"Output filename prefix (default: {settings.output_prefix})")
    parser.add_argument("--format", "-f", default=settings.output_format,
                        help=f"Output image format/extension (default: {settings.output_format})")
    parser.add_argument("--workers", "-w", type=_positive_int, default=settings.workers,
                        help="Rasterizer threads (default: CPU count)")
    parser.add_argument("--log-level", default=settings.log_level,
                        help=f"Log level (default: {settings.log_level})")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the generator; returns the process exit code."""
    settings = get_settings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if max(args.width, args.height) > settings.max_dimension:
        parser.error(f"grid dimensions are limited to {settings.max_dimension} cells")

    configure_logging(args.log_level, settings.log_format)

    print("Voronoi Diagram Generator - Setup")
    print(f"Dimensions: {args.width}x{args.height}")
    print(f"Number of sites: {args.sites}")
    print(f"Random seed: {args.seed}")
    print(f"Output prefix: {args.prefix}")
    print(f"Output format: {args.format}")

    sites = generate_sites(args.sites, args.width, args.height, make_rng(args.seed))

    try:
        index = build_index_from_sites(sites)
    except IndexConstructionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    print("\n--- Running Optimized (Parallel) Version ---")
    start = time.perf_counter()

    pixels = rasterize(
        args.width, args.height, sites, index,
        RasterConfig(workers=args.workers, rows_per_task=settings.rows_per_task),
    )

    print(f"Parallel pixel calculation took: {format_duration(time.perf_counter() - start)}")

    filename = output_filename(args.prefix, args.seed, args.format)
    try:
        save_pixels_to_image(filename, args.width, args.height, pixels, fmt=args.format)
    except ImageSinkError as e:
        print(f"Error saving image: {e}", file=sys.stderr)
        return EXIT_SAVE_FAILED

    print(f"Successfully saved Voronoi diagram to {filename}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
