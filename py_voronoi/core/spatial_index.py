"""
Static nearest-site index over the site positions.

The index is built once and only answers nearest-neighbor lookups. Space is
partitioned by a balanced k-d tree (scipy's cKDTree); the tree holds each
distinct position once and remembers the lowest original index that had it.

Tie-break rule: when several sites are at the same minimal squared Euclidean
distance from a query, the site with the lowest original index wins.
"""

from typing import Iterable, Sequence, Union

import numpy as np
import structlog
from scipy.spatial import cKDTree

from .errors import IndexConstructionError
from .types import Point, SiteSet

logger = structlog.get_logger()

PointsLike = Union[np.ndarray, Sequence[Point], Iterable[Sequence[float]]]


def _as_coordinates(points: PointsLike) -> np.ndarray:
    if not isinstance(points, np.ndarray):
        points = list(points)
    coords = np.asarray(points, dtype=np.float64)
    if coords.size == 0:
        return coords.reshape(0, 2)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise ValueError(f"Expected an (n, 2) array of points, got shape {coords.shape}")
    if not np.all(np.isfinite(coords)):
        raise ValueError("Point coordinates must be finite")
    # Collapse -0.0 onto 0.0 so equal positions deduplicate
    return coords + 0.0


def _squared_distances(points: np.ndarray, query: np.ndarray) -> np.ndarray:
    dx = points[..., 0] - query[..., 0]
    dy = points[..., 1] - query[..., 1]
    return dx * dx + dy * dy


class SpatialIndex:
    """
    Immutable nearest-neighbor index returning original site positions.

    Use ``SpatialIndex.build`` to construct one. Lookups never modify the
    index and may run concurrently from any number of threads.
    """

    # Candidates pulled from the tree per query before resolving ties
    CANDIDATES = 8

    def __init__(self, tree: cKDTree, points: np.ndarray, original_ids: np.ndarray, size: int):
        points.flags.writeable = False
        original_ids.flags.writeable = False
        self._tree = tree
        self._points = points
        self._original_ids = original_ids
        self._size = size

    @classmethod
    def build(cls, points: PointsLike) -> "SpatialIndex":
        """
        Build the index from an ordered sequence of points.

        Args:
            points: ``(n, 2)`` array or sequence of ``Point``

        Returns:
            SpatialIndex answering queries with indices into ``points``

        Raises:
            IndexConstructionError: if ``points`` is empty
        """
        coords = _as_coordinates(points)
        if len(coords) == 0:
            logger.error("Cannot build spatial index from an empty point set")
            raise IndexConstructionError("Cannot build a spatial index from zero points")

        # First occurrence of each distinct position is its lowest original index
        unique, first_index = np.unique(coords, axis=0, return_index=True)
        tree = cKDTree(unique, balanced_tree=True, compact_nodes=True)

        logger.info("Spatial index built",
                    points=len(coords), unique=len(unique))
        return cls(tree, unique, first_index.astype(np.int64), len(coords))

    @property
    def size(self) -> int:
        """Number of points the index was built from."""
        return self._size

    @property
    def unique_size(self) -> int:
        """Number of distinct positions stored in the tree."""
        return len(self._points)

    def nearest(self, query: Union[Point, Sequence[float]]) -> int:
        """Return the original index of the site nearest to ``query``."""
        return int(self.nearest_many(np.asarray([query], dtype=np.float64))[0])

    def nearest_many(self, queries: PointsLike) -> np.ndarray:
        """
        Batched nearest-neighbor lookup.

        Args:
            queries: ``(m, 2)`` array or sequence of points

        Returns:
            int64 array of length ``m`` holding original site indices
        """
        q = _as_coordinates(queries)
        if len(q) == 0:
            return np.empty(0, dtype=np.int64)

        k = min(self.CANDIDATES, len(self._points))
        _, candidates = self._tree.query(q, k=k)
        candidates = np.asarray(candidates).reshape(len(q), k)

        d2 = _squared_distances(self._points[candidates], q[:, None, :])
        best = d2.min(axis=1)
        tied = d2 == best[:, None]
        ids = np.where(tied, self._original_ids[candidates], np.iinfo(np.int64).max)
        result = ids.min(axis=1)

        if k < len(self._points):
            # Farthest candidate still at the minimum: the tie may extend past k
            for row in np.flatnonzero(tied[:, -1]):
                result[row] = self._scan(q[row])

        return result

    def _scan(self, query: np.ndarray) -> int:
        d2 = _squared_distances(self._points, query)
        return int(self._original_ids[d2 == d2.min()].min())

    def __repr__(self) -> str:
        return f"SpatialIndex(size={self._size}, unique={len(self._points)})"


def build_index_from_sites(sites: SiteSet) -> SpatialIndex:
    """Build a spatial index over the positions of ``sites``."""
    return SpatialIndex.build(sites.positions)
