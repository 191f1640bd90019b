"""Error types raised by the Voronoi pipeline."""


class VoronoiError(Exception):
    """Base error for the Voronoi generator."""


class IndexConstructionError(VoronoiError, ValueError):
    """Raised when a spatial index cannot be built from the given points."""


class InternalConsistencyError(VoronoiError, RuntimeError):
    """Raised when the index and the site set disagree about site identities."""


class ImageSinkError(VoronoiError, OSError):
    """Raised when a rasterized diagram cannot be encoded or written to disk."""
