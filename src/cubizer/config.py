"""
Voxelizer configuration.

Two compatibility switches exist because the reference bake derives grid
dimensions and several separating-axis radii from the z component where
x (or y) would be expected. LITERAL reproduces those formulas term for
term so previously baked point clouds can be regenerated. The kernels run
in float64, so results that hinge on exact float32 equality may still
differ. CORRECTED uses the textbook formulas.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import InvalidParameterError

# The reference job system indexes cells with a signed 32-bit int
DEFAULT_MAX_CELLS = 2**31 - 1
DEFAULT_CHUNK_SIZE = 10


class DimensionMode(Enum):
    """How grid dimensions are derived from the bounding size."""
    LITERAL = "literal"        # x and z both from size.z
    CORRECTED = "corrected"    # x, y, z from size.x, size.y, size.z


class IntersectionMode(Enum):
    """Which formulas the triangle/box test uses."""
    LITERAL = "literal"
    CORRECTED = "corrected"


@dataclass
class VoxelizerConfig:
    """
    Tuning and compatibility options for a voxelization run.

    Attributes:
        dimension_mode: Grid dimension formula
        intersection_mode: Triangle/box test formula set
        workers: Thread count for the sweep (None = numba default, 1 = serial)
        chunk_size: Contiguous cell indices handed to a worker at a time
        max_cells: Upper bound on x*y*z before allocation is refused
    """

    dimension_mode: DimensionMode = DimensionMode.LITERAL
    intersection_mode: IntersectionMode = IntersectionMode.LITERAL
    workers: Optional[int] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    max_cells: int = DEFAULT_MAX_CELLS

    def __post_init__(self):
        if isinstance(self.dimension_mode, str):
            self.dimension_mode = DimensionMode(self.dimension_mode)
        if isinstance(self.intersection_mode, str):
            self.intersection_mode = IntersectionMode(self.intersection_mode)

    def validate(self) -> "VoxelizerConfig":
        """Raise InvalidParameterError if any option is out of range."""
        if self.workers is not None and self.workers < 1:
            raise InvalidParameterError(f"workers must be >= 1, got {self.workers}")
        if self.chunk_size < 1:
            raise InvalidParameterError(f"chunk_size must be >= 1, got {self.chunk_size}")
        if self.max_cells < 0:
            raise InvalidParameterError(f"max_cells must be >= 0, got {self.max_cells}")
        return self
