"""Shared fixtures for the Voronoi generator tests."""

import logging
import os

import numpy as np
import pytest
import structlog

from py_voronoi.core import Color, Point, Site, SiteSet, SpatialIndex


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Run each test in an empty directory with no VORONOI_* overrides."""
    for key in list(os.environ):
        if key.startswith("VORONOI_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def red_blue_sites():
    """Two sites in opposite corners of a 4x4 grid."""
    return SiteSet.from_sites([
        Site(Point(0.0, 0.0), Color(255, 0, 0)),
        Site(Point(3.0, 3.0), Color(0, 0, 255)),
    ])


@pytest.fixture
def random_sites():
    """Forty random sites over a 32x24 grid, with a few duplicated positions."""
    rng = np.random.default_rng(1234)
    positions = rng.random((40, 2)) * [32, 24]
    positions[10] = positions[3]
    positions[25] = positions[3]
    positions[30] = positions[7]
    colors = rng.integers(0, 256, size=(40, 3))
    return SiteSet(positions, colors)


@pytest.fixture
def random_index(random_sites):
    return SpatialIndex.build(random_sites.positions)
