"""
Exception hierarchy for the voxelization engine.

Every failure is raised synchronously and never swallowed: the engine
either returns a complete point cloud or raises one of these.
"""


class CubizerError(Exception):
    """Base class for all voxelization errors."""


class InvalidParameterError(CubizerError, ValueError):
    """A numeric parameter is out of range (cube size, scale, workers...)."""


class InvalidGeometryError(CubizerError, ValueError):
    """Vertex or index data is malformed."""


class ResourceExhaustionError(CubizerError, MemoryError):
    """The requested grid is too large to allocate."""
