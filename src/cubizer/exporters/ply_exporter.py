"""
Stanford PLY Point Cloud Exporter

PLY stores vertices without faces, which is exactly a voxelized point
cloud. Cube size and source bounds travel in comment lines so the cloud
can be turned back into cubes later.
"""

from pathlib import Path
from typing import Union
import numpy as np

from ..interfaces import PointCloud


class PLYExporter:
    """
    Export a point cloud to PLY format.

    Supports binary little-endian and ASCII bodies.
    """

    def __init__(self, binary: bool = True, precision: int = 6):
        """
        Initialize the PLY exporter.

        Args:
            binary: If True, use binary format (smaller files)
            precision: Decimal places for ASCII coordinates
        """
        self.binary = binary
        self.precision = precision

    def export(
        self,
        cloud: PointCloud,
        output_path: Union[str, Path]
    ):
        """
        Export point cloud to a PLY file.

        Args:
            cloud: PointCloud from the voxelizer
            output_path: Output file path (.ply)
        """
        output_path = Path(output_path)
        points = np.asarray(cloud.points, dtype=np.float64).reshape(-1, 3)

        lo, size = cloud.bounds.min, cloud.bounds.size
        header_lines = [
            "ply",
            "format binary_little_endian 1.0" if self.binary else "format ascii 1.0",
            f"comment name {_header_text(cloud.name)}",
            f"comment cube_size {cloud.cube_size!r}",
            f"comment bounds_min {lo[0]!r} {lo[1]!r} {lo[2]!r}",
            f"comment bounds_size {size[0]!r} {size[1]!r} {size[2]!r}",
            f"element vertex {len(points)}",
            "property float x",
            "property float y",
            "property float z",
            "end_header",
        ]
        # Encode before the file is created
        header = ('\n'.join(header_lines) + '\n').encode('ascii')

        if self.binary:
            self._write_binary(output_path, header, points)
        else:
            self._write_ascii(output_path, header, points)

    def _write_binary(self, path: Path, header: bytes, points: np.ndarray):
        """Write binary PLY file."""
        body = points.astype('<f4').tobytes()
        with open(path, 'wb') as f:
            f.write(header)
            f.write(body)

    def _write_ascii(self, path: Path, header: bytes, points: np.ndarray):
        """Write ASCII PLY file."""
        fmt = f"{{:.{self.precision}f}}"
        body = ''.join(
            f"{fmt.format(p[0])} {fmt.format(p[1])} {fmt.format(p[2])}\n"
            for p in points
        )
        with open(path, 'w', encoding='ascii', newline='\n') as f:
            f.write(header.decode('ascii'))
            f.write(body)


def _header_text(text: str) -> str:
    """Escape a value for a single ASCII header line."""
    text = ' '.join(str(text).splitlines())
    return text.encode('ascii', 'backslashreplace').decode('ascii')
