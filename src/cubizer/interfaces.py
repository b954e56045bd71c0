"""
Collaborator interfaces.

The engine only sees these shapes; mesh loaders, exporters and viewers
are injected by the caller.
"""

from pathlib import Path
from typing import NamedTuple, Protocol, Union, runtime_checkable
import numpy as np

from .geometry import BoundingBox


class PointCloud(NamedTuple):
    """Container for a voxelization result."""
    points: np.ndarray       # (N, 3) float64 cube centers
    cube_size: float         # edge length of every cube
    bounds: BoundingBox      # bounds of the source mesh
    name: str                # asset name, e.g. "bunny_Cubizied"


@runtime_checkable
class MeshSource(Protocol):
    """Anything that supplies mesh buffers and bounds."""

    @property
    def vertices(self) -> np.ndarray: ...

    @property
    def indices(self) -> np.ndarray: ...

    @property
    def bounds(self) -> BoundingBox: ...


@runtime_checkable
class PointCloudSink(Protocol):
    """Anything that persists or displays a point cloud."""

    def export(self, cloud: PointCloud, output_path: Union[str, Path]) -> None: ...
