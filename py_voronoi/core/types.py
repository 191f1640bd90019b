"""Geometry value types and the site set container."""

from dataclasses import dataclass
from typing import Iterable, Iterator, NamedTuple, Union

import numpy as np


class Point(NamedTuple):
    """A point in grid coordinate space."""
    x: float
    y: float


class Color(NamedTuple):
    """An 8-bit RGB color."""
    r: int
    g: int
    b: int


@dataclass(frozen=True)
class Site:
    """A colored seed point of one Voronoi cell."""
    point: Point
    color: Color


class SiteSet:
    """
    Ordered, indexable collection of sites.

    Positions and colors are stored as two contiguous arrays which are
    frozen on construction. The position of a site in the set is its
    identity: spatial indices built from ``positions`` answer with indices
    into these arrays.
    """

    def __init__(self, positions: np.ndarray, colors: np.ndarray):
        positions = np.array(positions, dtype=np.float64, copy=True).reshape(-1, 2)
        colors = np.asarray(colors)
        if colors.size and (colors.min() < 0 or colors.max() > 255):
            raise ValueError("Color channels must be in the range 0..255")
        colors = np.array(colors, dtype=np.uint8, copy=True).reshape(-1, 3)

        if len(positions) != len(colors):
            raise ValueError(
                f"Got {len(positions)} positions but {len(colors)} colors"
            )
        if not np.all(np.isfinite(positions)):
            raise ValueError("Site positions must be finite")

        positions.flags.writeable = False
        colors.flags.writeable = False
        self._positions = positions
        self._colors = colors

    @classmethod
    def from_sites(cls, sites: Iterable[Site]) -> "SiteSet":
        """Build a site set from ``Site`` values, keeping their order."""
        sites = list(sites)
        positions = np.array([[s.point.x, s.point.y] for s in sites], dtype=np.float64)
        colors = np.array([list(s.color) for s in sites], dtype=np.int64)
        return cls(positions.reshape(-1, 2), colors.reshape(-1, 3))

    @property
    def positions(self) -> np.ndarray:
        """Read-only ``(n, 2)`` float64 array of site coordinates."""
        return self._positions

    @property
    def colors(self) -> np.ndarray:
        """Read-only ``(n, 3)`` uint8 array of site colors."""
        return self._colors

    def __len__(self) -> int:
        return len(self._positions)

    def __getitem__(self, index: Union[int, slice]):
        """Return the site at ``index``, or a new SiteSet for a slice."""
        if isinstance(index, slice):
            return SiteSet(self._positions[index], self._colors[index])

        x, y = self._positions[index]
        r, g, b = self._colors[index]
        return Site(Point(float(x), float(y)), Color(int(r), int(g), int(b)))

    def __iter__(self) -> Iterator[Site]:
        for i in range(len(self)):
            yield self[i]

    def __eq__(self, other) -> bool:
        if not isinstance(other, SiteSet):
            return NotImplemented
        return (np.array_equal(self._positions, other._positions)
                and np.array_equal(self._colors, other._colors))

    def __repr__(self) -> str:
        return f"SiteSet(n={len(self)})"
