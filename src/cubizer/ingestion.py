"""
Mesh Ingestion Module

This module handles:
- Loading triangle meshes (OBJ, STL, PLY, GLB, ...) through trimesh
- Loading raw vertex/index buffers from numpy arrays
- Computing the mesh bounding box the grid is planned over
"""

import logging
from pathlib import Path
from typing import Optional, Union
import numpy as np
import trimesh

from .errors import InvalidGeometryError
from .geometry import BoundingBox, _as_index_array, _as_vertex_array

logger = logging.getLogger(__name__)


class MeshLoader:
    """
    Triangle mesh loader.

    Key features:
    - Vertex order is preserved (no merging or reordering)
    - Scenes are flattened into a single mesh
    - Bounds are computed from the unscaled vertices
    """

    def __init__(self):
        self._vertices: Optional[np.ndarray] = None
        self._indices: Optional[np.ndarray] = None
        self._bounds: Optional[BoundingBox] = None
        self._name: str = "mesh"

    def load(self, mesh_path: Union[str, Path]) -> "MeshLoader":
        """
        Load a mesh file.

        Args:
            mesh_path: Path to any format trimesh can read

        Returns:
            self for method chaining
        """
        mesh_path = Path(mesh_path)
        if not mesh_path.exists():
            raise FileNotFoundError(f"Mesh not found: {mesh_path}")

        try:
            mesh = trimesh.load(str(mesh_path), force="mesh", process=False)
        except ValueError as e:
            raise InvalidGeometryError(f"Cannot read mesh {mesh_path}: {e}") from e

        if not isinstance(mesh, trimesh.Trimesh):
            raise InvalidGeometryError(
                f"{mesh_path} does not contain a triangle mesh"
            )

        logger.debug(
            "Loaded %s: %d vertices, %d faces",
            mesh_path.name, len(mesh.vertices), len(mesh.faces)
        )
        self._name = mesh_path.stem
        return self.load_from_array(mesh.vertices, mesh.faces)

    def load_from_trimesh(self, mesh: trimesh.Trimesh, name: str = "mesh") -> "MeshLoader":
        """
        Load from an in-memory trimesh object.

        Args:
            mesh: Triangle mesh
            name: Asset name used for exports

        Returns:
            self for method chaining
        """
        self._name = name
        return self.load_from_array(mesh.vertices, mesh.faces)

    def load_from_array(
        self,
        vertices: np.ndarray,
        indices: np.ndarray,
        bounds: Optional[BoundingBox] = None
    ) -> "MeshLoader":
        """
        Load from numpy arrays instead of files.

        Args:
            vertices: Vertex positions of shape (V, 3)
            indices: Triangle indices (3F,) or (F, 3)
            bounds: Optional explicit bounds (default: tight vertex bounds)

        Returns:
            self for method chaining
        """
        self._vertices = _as_vertex_array(vertices)
        self._indices = _as_index_array(indices, len(self._vertices))
        self._bounds = bounds if bounds is not None else BoundingBox.from_vertices(self._vertices)
        return self

    @property
    def vertices(self) -> np.ndarray:
        """Get the vertex array (V, 3)."""
        if self._vertices is None:
            raise RuntimeError("No mesh loaded")
        return self._vertices

    @property
    def indices(self) -> np.ndarray:
        """Get the flat triangle index array (3F,)."""
        if self._indices is None:
            raise RuntimeError("No mesh loaded")
        return self._indices

    @property
    def bounds(self) -> BoundingBox:
        """Get the unscaled mesh bounds."""
        if self._bounds is None:
            raise RuntimeError("No mesh loaded")
        return self._bounds

    @property
    def name(self) -> str:
        """Get the asset name (file stem for loaded files)."""
        return self._name

    @property
    def triangle_count(self) -> int:
        """Number of triangles."""
        return 0 if self._indices is None else len(self._indices) // 3
