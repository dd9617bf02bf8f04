"""Exceptions raised by the geometry pipeline."""


class CitymeshError(Exception):
    """Base class for failures that abort city construction."""


class NormalizationError(CitymeshError):
    """The bounding box has zero width or height."""


class TriangulationError(CitymeshError):
    """Triangulation returned an index list that is not made of triples."""


class AssetLoadError(CitymeshError):
    """A species mesh or texture could not be loaded."""
