"""
Parallel rasterization of a discrete Voronoi diagram.

Every grid cell ``(x, y)`` takes the color of the site nearest to the point
``(float(x), float(y))``. The grid is split into contiguous row ranges; each
range is rasterized by one task of a thread pool and written into its own
slice of the output buffer. The spatial index and site set are shared
read-only, and the k-d tree query releases the GIL, so tasks run in parallel
without any locking on the buffer.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import structlog

from .errors import InternalConsistencyError
from .spatial_index import SpatialIndex
from .types import SiteSet

logger = structlog.get_logger()

# Row tasks queued per worker when rows_per_task is not given
TASKS_PER_WORKER = 4

# Grid cells sent to the spatial index in one query
CELLS_PER_BATCH = 16384


@dataclass(frozen=True)
class RasterConfig:
    """Worker pool settings for rasterization."""
    workers: Optional[int] = None        # None -> os.cpu_count()
    rows_per_task: Optional[int] = None  # None -> about TASKS_PER_WORKER tasks per worker
    cells_per_batch: int = CELLS_PER_BATCH

    def resolved_workers(self) -> int:
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        return self.workers or os.cpu_count() or 1

    def resolved_rows_per_task(self, height: int) -> int:
        if self.rows_per_task is not None:
            if self.rows_per_task < 1:
                raise ValueError(f"rows_per_task must be at least 1, got {self.rows_per_task}")
            return self.rows_per_task
        tasks = self.resolved_workers() * TASKS_PER_WORKER
        return max(1, -(-height // tasks))

    def resolved_cells_per_batch(self) -> int:
        if self.cells_per_batch < 1:
            raise ValueError(f"cells_per_batch must be at least 1, got {self.cells_per_batch}")
        return self.cells_per_batch


def partition_rows(height: int, rows_per_task: int) -> List[Tuple[int, int]]:
    """
    Split ``[0, height)`` into contiguous, disjoint row ranges.

    Args:
        height: Number of grid rows
        rows_per_task: Maximum rows in one range

    Returns:
        Ordered list of ``(y_start, y_stop)`` pairs covering every row once
    """
    if rows_per_task < 1:
        raise ValueError(f"rows_per_task must be at least 1, got {rows_per_task}")
    return [(start, min(start + rows_per_task, height))
            for start in range(0, height, rows_per_task)]


def allocate_buffer(width: int, height: int) -> np.ndarray:
    """Return a zeroed ``(height, width, 3)`` uint8 pixel buffer."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
    return np.zeros((height, width, 3), dtype=np.uint8)


def _check_inputs(width: int, height: int, sites: SiteSet, index: SpatialIndex) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
    if index.size != len(sites):
        logger.error("Index does not match site set",
                     index_size=index.size, sites=len(sites))
        raise InternalConsistencyError(
            f"Index was built from {index.size} points but the site set has {len(sites)}"
        )


def rasterize_rows(width: int, y_start: int, y_stop: int, sites: SiteSet,
                   index: SpatialIndex, out: Optional[np.ndarray] = None,
                   cells_per_batch: int = CELLS_PER_BATCH) -> np.ndarray:
    """
    Rasterize rows ``[y_start, y_stop)`` of the grid.

    Cells are queried in batches of at most ``cells_per_batch`` so that the
    index's per-query temporaries stay bounded whatever the row width.

    Args:
        width: Grid width
        y_start: First row (inclusive)
        y_stop: Last row (exclusive)
        sites: Site set the index was built from
        index: Spatial index over ``sites.positions``
        out: Full-grid buffer to write into; only the owned rows are touched
        cells_per_batch: Maximum cells per spatial index query

    Returns:
        The ``(y_stop - y_start, width, 3)`` block of rasterized rows
    """
    if cells_per_batch < 1:
        raise ValueError(f"cells_per_batch must be at least 1, got {cells_per_batch}")

    if out is None:
        block = np.zeros((y_stop - y_start, width, 3), dtype=np.uint8)
    else:
        block = out[y_start:y_stop]
    cells = block.reshape(-1, 3)

    for start in range(0, len(cells), cells_per_batch):
        stop = min(start + cells_per_batch, len(cells))
        flat = np.arange(start, stop)
        queries = np.empty((stop - start, 2), dtype=np.float64)
        queries[:, 0] = flat % width
        queries[:, 1] = y_start + flat // width

        site_ids = index.nearest_many(queries)
        bad = (site_ids < 0) | (site_ids >= len(sites))
        if bad.any():
            row = int(np.flatnonzero(bad)[0])
            logger.error("Spatial index returned an invalid site index",
                         site_index=int(site_ids[row]), sites=len(sites),
                         x=int(queries[row, 0]), y=int(queries[row, 1]))
            raise InternalConsistencyError(
                f"Site index {int(site_ids[row])} is out of range for {len(sites)} sites"
            )

        cells[start:stop] = sites.colors[site_ids]

    return block


def rasterize(width: int, height: int, sites: SiteSet, index: SpatialIndex,
              config: Optional[RasterConfig] = None) -> np.ndarray:
    """
    Rasterize the full Voronoi diagram.

    Args:
        width: Grid width in cells
        height: Grid height in cells
        sites: Site set the index was built from
        index: Spatial index over ``sites.positions``
        config: Worker pool settings

    Returns:
        ``(height, width, 3)`` uint8 pixel buffer, ``buffer[y][x]`` being the
        color of cell ``(x, y)``
    """
    config = config or RasterConfig()
    _check_inputs(width, height, sites, index)

    workers = config.resolved_workers()
    cells_per_batch = config.resolved_cells_per_batch()
    ranges = partition_rows(height, config.resolved_rows_per_task(height))
    buffer = allocate_buffer(width, height)

    logger.info("Rasterizing Voronoi diagram",
                width=width, height=height, sites=len(sites),
                workers=workers, tasks=len(ranges))

    if workers == 1:
        for y_start, y_stop in ranges:
            rasterize_rows(width, y_start, y_stop, sites, index, buffer, cells_per_batch)
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="raster") as pool:
            futures = [
                pool.submit(rasterize_rows, width, y_start, y_stop, sites, index,
                            buffer, cells_per_batch)
                for y_start, y_stop in ranges
            ]
            for future in futures:
                future.result()

    logger.info("Rasterization complete", cells=width * height)
    return buffer
