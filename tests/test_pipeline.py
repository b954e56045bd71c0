"""
Tests for mesh loading, exporters, the Cubizer pipeline and the CLI.
"""

import sys
import tempfile
from pathlib import Path
import numpy as np
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cubizer import Cubizer, BatchProcessor
from cubizer.cli import main
from cubizer.errors import InvalidParameterError
from cubizer.exporters import OBJExporter, PLYExporter
from cubizer.exporters.obj_exporter import marker_cubes
from cubizer.geometry import BoundingBox
from cubizer.ingestion import MeshLoader
from cubizer.interfaces import MeshSource, PointCloud, PointCloudSink

CUBE_OBJ = """\
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
v 0 0 1
v 1 0 1
v 1 1 1
v 0 1 1
f 1 3 2
f 1 4 3
f 5 6 7
f 5 7 8
f 1 5 8
f 1 8 4
f 2 3 7
f 2 7 6
f 1 2 6
f 1 6 5
f 4 8 7
f 4 7 3
"""


def write_cube(directory: Path, name: str = "cube.obj") -> Path:
    path = directory / name
    path.write_text(CUBE_OBJ)
    return path


def sample_cloud(count: int = 3) -> PointCloud:
    points = np.arange(count * 3, dtype=np.float64).reshape(count, 3) / 4
    return PointCloud(
        points=points,
        cube_size=0.5,
        bounds=BoundingBox((0, 0, 0), (1, 1, 1)),
        name="sample_Cubizied",
    )


class TestMeshLoader(unittest.TestCase):
    """Tests for mesh ingestion."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_load_obj(self):
        """Test loading a Wavefront file."""
        loader = MeshLoader().load(write_cube(self.tmp))

        assert loader.triangle_count == 12
        assert loader.name == "cube"
        assert np.allclose(loader.bounds.size, (1.0, 1.0, 1.0))
        assert np.allclose(loader.bounds.min, (0.0, 0.0, 0.0))
        assert isinstance(loader, MeshSource)

    def test_missing_file(self):
        """Test that a missing mesh raises FileNotFoundError."""
        with self.assertRaises(FileNotFoundError):
            MeshLoader().load(self.tmp / "nope.obj")

    def test_explicit_bounds(self):
        """Test that explicit bounds override the computed ones."""
        bounds = BoundingBox((-1, -1, -1), (3, 3, 3))
        loader = MeshLoader().load_from_array(
            [[0, 0, 0], [1, 0, 0], [0, 1, 0]], [0, 1, 2], bounds
        )
        assert loader.bounds == bounds

    def test_unloaded(self):
        """Test access before loading."""
        with self.assertRaises(RuntimeError):
            MeshLoader().vertices


class TestExporters(unittest.TestCase):
    """Tests for the point cloud exporters."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_ply_ascii(self):
        """Test ASCII PLY layout."""
        path = self.tmp / "cloud.ply"
        PLYExporter(binary=False).export(sample_cloud(3), path)

        lines = path.read_text().splitlines()
        end = lines.index("end_header")
        assert lines[0] == "ply"
        assert "element vertex 3" in lines
        assert "comment cube_size 0.5" in lines
        assert len(lines) == end + 1 + 3
        assert lines[end + 2] == "0.750000 1.000000 1.250000"

    def test_ply_binary(self):
        """Test binary PLY payload size."""
        path = self.tmp / "cloud.ply"
        PLYExporter().export(sample_cloud(5), path)

        raw = path.read_bytes()
        marker = b"end_header\n"
        body = raw[raw.index(marker) + len(marker):]
        assert len(body) == 5 * 3 * 4
        values = np.frombuffer(body, dtype="<f4").reshape(5, 3)
        assert np.allclose(values, sample_cloud(5).points)

    def test_ply_non_ascii_name(self):
        """Test that a non-ASCII asset name is escaped in the header."""
        cloud = sample_cloud(2)._replace(name="modèle_Cubizied")
        for binary in (True, False):
            path = self.tmp / f"cloud_{binary}.ply"
            PLYExporter(binary=binary).export(cloud, path)

            raw = path.read_bytes()
            header = raw[:raw.index(b"end_header\n")].decode("ascii")
            assert "comment name mod\\xe8le_Cubizied" in header.splitlines()
            assert "element vertex 2" in header.splitlines()

    def test_obj_points(self):
        """Test one vertex per point."""
        path = self.tmp / "cloud.obj"
        OBJExporter().export(sample_cloud(4), path)

        lines = path.read_text().splitlines()
        assert sum(1 for l in lines if l.startswith("v ")) == 4
        assert not any(l.startswith("f ") for l in lines)
        assert "o sample_Cubizied" in lines

    def test_obj_cubes(self):
        """Test one marker cube per point."""
        path = self.tmp / "cubes.obj"
        OBJExporter(mode="cubes").export(sample_cloud(2), path)

        lines = path.read_text().splitlines()
        assert sum(1 for l in lines if l.startswith("v ")) == 16
        assert sum(1 for l in lines if l.startswith("f ")) == 24
        assert "f 9 11 10" in lines
        assert "g Cube_1" in lines

    def test_marker_cube_size(self):
        """Test marker cube extents."""
        vertices, faces = marker_cubes(np.array([[1.0, 2.0, 3.0]]), 2.0)
        assert np.array_equal(vertices.min(axis=0), [0.0, 1.0, 2.0])
        assert np.array_equal(vertices.max(axis=0), [2.0, 3.0, 4.0])
        assert faces.shape == (12, 3)
        assert faces.max() == 7

    def test_unknown_obj_mode(self):
        """Test mode validation."""
        with self.assertRaises(ValueError):
            OBJExporter(mode="spheres")

    def test_exporters_are_sinks(self):
        """Test the sink protocol."""
        assert isinstance(PLYExporter(), PointCloudSink)
        assert isinstance(OBJExporter(), PointCloudSink)


class TestCubizer(unittest.TestCase):
    """Integration tests for the Cubizer pipeline."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_basic_pipeline(self):
        """Test load, voxelize and export."""
        cubizer = Cubizer(cube_size=0.5)
        cubizer.load_mesh(write_cube(self.tmp))
        cubizer.voxelize()

        assert cubizer.point_count == 8
        assert cubizer.asset_name == "cube_Cubizied"

        written = cubizer.export_all(
            self.tmp / cubizer.asset_name, ["ply", "obj"], visualise=True
        )
        assert len(written) == 3
        assert all(p.exists() for p in written)
        assert (self.tmp / "cube_Cubizied_cubes.obj").exists()

    def test_dotted_asset_name(self):
        """Test that export_all appends extensions to dotted names."""
        cubizer = Cubizer(cube_size=0.5).load_mesh(write_cube(self.tmp, "part.v1.obj"))
        cubizer.voxelize()
        assert cubizer.asset_name == "part.v1_Cubizied"

        written = cubizer.export_all(
            self.tmp / cubizer.asset_name, ["ply", "obj"], visualise=True
        )
        assert [p.name for p in written] == [
            "part.v1_Cubizied.ply",
            "part.v1_Cubizied.obj",
            "part.v1_Cubizied_cubes.obj",
        ]
        assert all(p.exists() for p in written)

    def test_invalid_cube_size(self):
        """Test that the constructor rejects a bad cube size."""
        for bad in (-1.0, 0.0, float("nan")):
            with self.assertRaises(InvalidParameterError):
                Cubizer(cube_size=bad)
            with self.assertRaises(InvalidParameterError):
                BatchProcessor(cube_size=bad)

    def test_scale(self):
        """Test that set_scale changes the grid when use_scale is on."""
        vertices = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]], dtype=float)
        indices = [0, 1, 2, 0, 1, 3, 0, 2, 3, 1, 2, 3]

        scaled = Cubizer(cube_size=0.5).load_arrays(vertices, indices)
        scaled.set_scale((2.0, 2.0, 2.0)).voxelize()

        unscaled = Cubizer(cube_size=0.5, use_scale=False).load_arrays(vertices, indices)
        unscaled.set_scale((2.0, 2.0, 2.0)).voxelize()

        assert scaled.occupancy.shape == (4, 4, 4)
        assert unscaled.occupancy.shape == (2, 2, 2)

    def test_preview(self):
        """Test the preview listing."""
        cubizer = Cubizer(cube_size=0.5).load_mesh(write_cube(self.tmp)).voxelize()
        info = cubizer.preview(limit=3)

        assert info["voxelized"]
        assert info["grid_size"] == (2, 2, 2)
        assert info["point_count"] == 8
        assert info["points"] == [(0.25, 0.25, 0.25), (0.25, 0.25, 0.75), (0.25, 0.75, 0.25)]

    def test_voxelize_without_mesh(self):
        """Test that voxelize() requires a mesh."""
        with self.assertRaises(RuntimeError):
            Cubizer(cube_size=0.5).voxelize()

    def test_batch(self):
        """Test directory batch processing."""
        write_cube(self.tmp, "a.obj")
        write_cube(self.tmp, "b.obj")
        out_dir = self.tmp / "out"

        outputs = BatchProcessor(cube_size=0.5).process_directory(self.tmp, out_dir)
        assert len(outputs) == 2
        assert (out_dir / "a_Cubizied.ply").exists()
        assert (out_dir / "b_Cubizied.ply").exists()

    def test_batch_dotted_stems(self):
        """Test that meshes differing only after a dot get separate outputs."""
        write_cube(self.tmp, "part.v1.obj")
        write_cube(self.tmp, "part.v2.obj")
        out_dir = self.tmp / "out"

        outputs = BatchProcessor(cube_size=0.5).process_directory(self.tmp, out_dir)
        assert len(outputs) == 2
        assert sorted(p.name for p in out_dir.iterdir()) == [
            "part.v1_Cubizied.ply",
            "part.v2_Cubizied.ply",
        ]


class TestCLI(unittest.TestCase):
    """Tests for the command-line interface."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.mesh = write_cube(self.tmp)

    def tearDown(self):
        self._tmp.cleanup()

    def test_single(self):
        """Test a full run with explicit output."""
        base = self.tmp / "points"
        code = main([str(self.mesh), "--cube-size", "0.5", "-o", str(base),
                     "--format", "ply", "obj", "-j", "1"])
        assert code == 0
        assert (self.tmp / "points.ply").exists()
        assert (self.tmp / "points.obj").exists()

    def test_default_output_name(self):
        """Test the <mesh>_Cubizied naming."""
        code = main([str(self.mesh), "--cube-size", "0.5", "--corrected-dimensions",
                     "--corrected-intersection"])
        assert code == 0
        assert (self.tmp / "cube_Cubizied.ply").exists()

    def test_non_ascii_file_name(self):
        """Test a mesh whose file name has non-ASCII characters."""
        mesh = write_cube(self.tmp, "modèle.obj")
        for extra in ([], ["--ascii"]):
            assert main([str(mesh), "--cube-size", "0.5"] + extra) == 0
            output = self.tmp / "modèle_Cubizied.ply"
            assert output.stat().st_size > 0

    def test_ascii_ply(self):
        """Test that --ascii writes a text PLY body."""
        base = self.tmp / "points"
        assert main([str(self.mesh), "--cube-size", "0.5", "-o", str(base), "--ascii"]) == 0

        lines = (self.tmp / "points.ply").read_text().splitlines()
        assert "format ascii 1.0" in lines
        assert lines[-1] == "0.750000 0.750000 0.750000"

    def test_missing_cube_size(self):
        """Test that the cube size is required and non-zero."""
        assert main([str(self.mesh)]) == 1
        assert main([str(self.mesh), "--cube-size", "0"]) == 1

    def test_negative_cube_size(self):
        """Test that engine errors become exit code 1."""
        assert main([str(self.mesh), "--cube-size", "-1"]) == 1

    def test_missing_input(self):
        """Test a nonexistent input file."""
        assert main([str(self.tmp / "nope.obj"), "--cube-size", "0.5"]) == 1

    def test_batch(self):
        """Test batch mode."""
        out_dir = self.tmp / "clouds"
        code = main(["--batch", str(self.tmp), "--output-dir", str(out_dir),
                     "--cube-size", "0.5"])
        assert code == 0
        assert (out_dir / "cube_Cubizied.ply").exists()


if __name__ == "__main__":
    unittest.main(verbosity=2)
