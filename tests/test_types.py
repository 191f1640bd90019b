"""Tests for geometry value types and the site set."""

import numpy as np
import pytest

from py_voronoi.core import Color, Point, Site, SiteSet


class TestValueTypes:
    """Test Point, Color and Site."""

    def test_point_equality_is_exact(self):
        """Test that points compare by exact coordinates."""
        assert Point(1.0, 2.0) == Point(1.0, 2.0)
        assert Point(1.0, 2.0) != Point(1.0, 2.0000001)

    def test_out_of_range_site_color(self):
        """Test that a site set refuses colors outside 0..255."""
        with pytest.raises(ValueError):
            SiteSet.from_sites([Site(Point(0.0, 0.0), Color(0, 256, 0))])
        with pytest.raises(ValueError):
            SiteSet.from_sites([Site(Point(0.0, 0.0), Color(-1, 0, 0))])

    def test_site_is_immutable(self):
        """Test that sites cannot be modified."""
        site = Site(Point(1.0, 1.0), Color(1, 2, 3))
        with pytest.raises(AttributeError):
            site.color = Color(0, 0, 0)


class TestSiteSet:
    """Test the ordered site container."""

    def test_from_sites_keeps_order(self):
        """Test that indexing returns sites in construction order."""
        sites = [
            Site(Point(5.0, 1.0), Color(10, 20, 30)),
            Site(Point(0.5, 2.5), Color(40, 50, 60)),
            Site(Point(5.0, 1.0), Color(70, 80, 90)),
        ]
        site_set = SiteSet.from_sites(sites)

        assert len(site_set) == 3
        assert list(site_set) == sites
        assert site_set[1] == sites[1]
        assert site_set[-1] == sites[2]

    def test_arrays_are_read_only(self, random_sites):
        """Test that positions and colors cannot be mutated after construction."""
        with pytest.raises(ValueError):
            random_sites.positions[0, 0] = 1.0
        with pytest.raises(ValueError):
            random_sites.colors[0] = [0, 0, 0]

    def test_construction_copies_input(self):
        """Test that mutating the source arrays does not affect the set."""
        positions = np.array([[1.0, 2.0], [3.0, 4.0]])
        colors = np.array([[1, 2, 3], [4, 5, 6]])
        site_set = SiteSet(positions, colors)

        positions[0] = [9.0, 9.0]
        colors[0] = [9, 9, 9]

        assert site_set[0] == Site(Point(1.0, 2.0), Color(1, 2, 3))

    def test_dtypes(self, random_sites):
        """Test the storage layout."""
        assert random_sites.positions.shape == (40, 2)
        assert random_sites.positions.dtype == np.float64
        assert random_sites.colors.shape == (40, 3)
        assert random_sites.colors.dtype == np.uint8

    def test_empty_set(self):
        """Test that an empty site set is allowed."""
        site_set = SiteSet.from_sites([])
        assert len(site_set) == 0
        assert site_set.positions.shape == (0, 2)

    @pytest.mark.parametrize("positions,colors", [
        ([[0.0, 0.0]], [[0, 0, 0], [1, 1, 1]]),
        ([[np.nan, 0.0]], [[0, 0, 0]]),
        ([[0.0, np.inf]], [[0, 0, 0]]),
        ([[0.0, 0.0]], [[0, 300, 0]]),
    ])
    def test_invalid_input(self, positions, colors):
        """Test that mismatched lengths, non-finite points and bad colors are rejected."""
        with pytest.raises(ValueError):
            SiteSet(positions, colors)

    def test_equality_and_slicing(self, random_sites):
        """Test slicing returns a site set and equality compares contents."""
        head = random_sites[:5]
        assert isinstance(head, SiteSet)
        assert len(head) == 5
        assert head == SiteSet(random_sites.positions[:5], random_sites.colors[:5])
        assert head != random_sites[1:6]
