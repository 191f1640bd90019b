"""
Core Voronoi functionality: value types, spatial index and rasterizer.
"""

from .types import Point, Color, Site, SiteSet
from .errors import (
    VoronoiError, IndexConstructionError, InternalConsistencyError, ImageSinkError
)
from .spatial_index import SpatialIndex, build_index_from_sites
from .rasterizer import (
    RasterConfig, allocate_buffer, rasterize, rasterize_rows, partition_rows
)

__all__ = ['Point', 'Color', 'Site', 'SiteSet',
           'VoronoiError', 'IndexConstructionError', 'InternalConsistencyError', 'ImageSinkError',
           'SpatialIndex', 'build_index_from_sites',
           'RasterConfig', 'allocate_buffer', 'rasterize', 'rasterize_rows', 'partition_rows']
