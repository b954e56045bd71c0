"""
Main Cubizer Class

This is the primary interface for the mesh voxelization pipeline.
It orchestrates:
1. Mesh loading
2. Scale configuration
3. Voxelization (grid planning, parallel overlap sweep, point collection)
4. Export to point cloud or marker-cube formats

Example Usage:
    cubizer = Cubizer(cube_size=0.25)
    cubizer.load_mesh("bunny.obj")
    cubizer.set_scale((1.0, 2.0, 1.0))
    cubizer.voxelize()
    cubizer.export_ply("bunny_Cubizied.ply")
"""

import logging
from pathlib import Path
from typing import List, Optional, Union
import numpy as np

from .config import VoxelizerConfig
from .errors import InvalidParameterError
from .exporters import OBJExporter, PLYExporter
from .geometry import BoundingBox, as_scale_vector
from .ingestion import MeshLoader
from .interfaces import MeshSource, PointCloud, PointCloudSink
from .voxelizer import OccupancyGrid, Voxelizer, _check_cube_size

logger = logging.getLogger(__name__)

ASSET_SUFFIX = "_Cubizied"


class Cubizer:
    """
    High-level interface for mesh voxelization.

    Attributes:
        cube_size: Cube edge length
        use_scale: Whether the mesh scale is applied
        config: Voxelizer options
        points: The last voxelization result
    """

    def __init__(
        self,
        cube_size: float,
        use_scale: bool = True,
        config: Optional[VoxelizerConfig] = None
    ):
        """
        Initialize the Cubizer.

        Args:
            cube_size: Cube edge length (> 0)
            use_scale: Apply the scale set by set_scale()
            config: Compatibility and tuning options

        Raises:
            InvalidParameterError: Cube size not finite and positive
        """
        self.cube_size = _check_cube_size(cube_size)
        self.use_scale = use_scale
        self.config = config or VoxelizerConfig()

        self._mesh: Optional[MeshSource] = None
        self._name: str = "mesh"
        self._scale: np.ndarray = np.ones(3, dtype=np.float64)
        self._voxelizer: Optional[Voxelizer] = None
        self._points: Optional[np.ndarray] = None

    def load_mesh(self, mesh_path: Union[str, Path]) -> "Cubizer":
        """
        Load a mesh file for voxelization.

        Args:
            mesh_path: Path to the mesh (OBJ, STL, PLY, GLB, ...)

        Returns:
            self for method chaining
        """
        loader = MeshLoader().load(mesh_path)
        return self.load_source(loader, loader.name)

    def load_arrays(
        self,
        vertices: np.ndarray,
        indices: np.ndarray,
        bounds: Optional[BoundingBox] = None,
        name: str = "mesh"
    ) -> "Cubizer":
        """
        Load mesh data from numpy arrays.

        Args:
            vertices: Vertex positions of shape (V, 3)
            indices: Triangle indices (3F,) or (F, 3)
            bounds: Optional explicit bounds
            name: Asset name used for exports

        Returns:
            self for method chaining
        """
        loader = MeshLoader().load_from_array(vertices, indices, bounds)
        return self.load_source(loader, name)

    def load_source(self, mesh: MeshSource, name: str = "mesh") -> "Cubizer":
        """
        Use any object exposing vertices, indices and bounds.

        Returns:
            self for method chaining
        """
        self._mesh = mesh
        self._name = name
        self._points = None
        return self

    def set_scale(self, scale) -> "Cubizer":
        """
        Set the per-axis object scale.

        Args:
            scale: Sequence of three factors

        Returns:
            self for method chaining
        """
        self._scale = as_scale_vector(scale)
        return self

    def voxelize(self) -> "Cubizer":
        """
        Compute the filled cubes of the loaded mesh.

        Returns:
            self for method chaining
        """
        if self._mesh is None:
            raise RuntimeError("No mesh loaded. Call load_mesh() first.")

        self._voxelizer = Voxelizer(
            self.cube_size,
            use_scale=self.use_scale,
            scale=self._scale,
            config=self.config,
        )
        self._points = self._voxelizer.voxelize(
            self._mesh.vertices, self._mesh.indices, self._mesh.bounds
        )
        return self

    def to_point_cloud(self) -> PointCloud:
        """Package the result for exporters."""
        if self._points is None:
            raise RuntimeError("No points. Call voxelize() first.")
        return PointCloud(
            points=self._points,
            cube_size=float(self.cube_size),
            bounds=self._mesh.bounds,
            name=self.asset_name,
        )

    def export(self, sink: PointCloudSink, output_path: Union[str, Path]):
        """Hand the point cloud to any exporter."""
        sink.export(self.to_point_cloud(), output_path)

    def export_ply(self, output_path: Union[str, Path], binary: bool = True):
        """
        Export to PLY point cloud.

        Args:
            output_path: Output file path
            binary: Binary little-endian (True) or ASCII body
        """
        self.export(PLYExporter(binary=binary), output_path)

    def export_obj(self, output_path: Union[str, Path], cubes: bool = False):
        """
        Export to Wavefront OBJ.

        Args:
            output_path: Output file path
            cubes: Write one marker cube per point instead of bare vertices
        """
        self.export(OBJExporter(mode="cubes" if cubes else "points"), output_path)

    def export_all(
        self,
        base_path: Union[str, Path],
        formats: Optional[list] = None,
        visualise: bool = False,
        binary: bool = True
    ) -> List[Path]:
        """
        Export to multiple formats at once.

        Args:
            base_path: Base file path (without extension)
            formats: List of formats to export (default: ply)
            visualise: Also write a marker-cube OBJ next to the outputs
            binary: Binary (True) or ASCII PLY body

        Returns:
            Written file paths
        """
        base_path = Path(base_path)
        formats = formats or ["ply"]
        written = []

        if "ply" in formats:
            path = base_path.with_name(base_path.name + ".ply")
            self.export_ply(path, binary=binary)
            written.append(path)

        if "obj" in formats:
            path = base_path.with_name(base_path.name + ".obj")
            self.export_obj(path)
            written.append(path)

        if visualise:
            path = base_path.with_name(base_path.name + "_cubes.obj")
            self.export_obj(path, cubes=True)
            written.append(path)

        return written

    @property
    def asset_name(self) -> str:
        """Name of the baked asset, e.g. "bunny_Cubizied"."""
        return self._name + ASSET_SUFFIX

    @property
    def points(self) -> Optional[np.ndarray]:
        """Get the current cube centers."""
        return self._points

    @property
    def occupancy(self) -> Optional[OccupancyGrid]:
        """Get the overlap bitmap of the last run."""
        return self._voxelizer.occupancy if self._voxelizer is not None else None

    @property
    def point_count(self) -> int:
        """Get the number of filled cubes."""
        return 0 if self._points is None else len(self._points)

    def preview(self, limit: int = 20) -> dict:
        """
        Get a preview of the current state.

        Args:
            limit: Maximum number of points listed

        Returns:
            Dictionary with current state information
        """
        info = {
            "mesh_loaded": self._mesh is not None,
            "voxelized": self._points is not None,
            "cube_size": self.cube_size,
            "use_scale": self.use_scale,
        }

        if self._mesh is not None:
            info["triangle_count"] = len(self._mesh.indices) // 3
            info["bounds"] = self._mesh.bounds

        occupancy = self.occupancy
        if occupancy is not None:
            info["grid_size"] = occupancy.shape
            info["point_count"] = len(self._points)
            info["points"] = [tuple(float(c) for c in p) for p in self._points[:limit]]

        return info


class BatchProcessor:
    """
    Batch voxelization of every mesh in a directory.
    """

    def __init__(self, **cubizer_kwargs):
        """
        Initialize the batch processor.

        Args:
            **cubizer_kwargs: Arguments passed to Cubizer
        """
        if "cube_size" not in cubizer_kwargs:
            raise InvalidParameterError("BatchProcessor requires cube_size")
        _check_cube_size(cubizer_kwargs["cube_size"])
        self.cubizer_kwargs = cubizer_kwargs

    def process_directory(
        self,
        input_dir: Union[str, Path],
        output_dir: Union[str, Path],
        pattern: str = "*.obj",
        scale=None,
        formats: Optional[list] = None,
        visualise: bool = False,
        binary: bool = True
    ) -> list:
        """
        Process all meshes in a directory.

        Args:
            input_dir: Input directory
            output_dir: Output directory
            pattern: Glob pattern for input files
            scale: Optional per-axis scale applied to every mesh
            formats: Export formats
            visualise: Also write marker-cube OBJs
            binary: Binary (True) or ASCII PLY body

        Returns:
            List of output base paths
        """
        input_dir = Path(input_dir)
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        outputs = []

        for mesh_path in sorted(input_dir.glob(pattern)):
            cubizer = Cubizer(**self.cubizer_kwargs)
            cubizer.load_mesh(mesh_path)
            if scale is not None:
                cubizer.set_scale(scale)
            cubizer.voxelize()

            base_path = output_dir / cubizer.asset_name
            cubizer.export_all(base_path, formats, visualise=visualise, binary=binary)
            logger.info("%s: %d points", mesh_path.name, cubizer.point_count)

            outputs.append(str(base_path))

        return outputs
