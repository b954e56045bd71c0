#!/usr/bin/env python3
"""
Cubizer Demo Script

This script demonstrates the full voxelization pipeline by:
1. Creating test meshes with trimesh (no external files needed)
2. Voxelizing them at several cube sizes
3. Exporting PLY point clouds and marker-cube OBJs
4. Printing point counts and timings

Run with: python examples/demo.py
"""

import sys
from pathlib import Path
import time

import trimesh

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cubizer import Cubizer, VoxelizerConfig, voxelize
from cubizer.config import DimensionMode, IntersectionMode


def create_test_meshes() -> list:
    """
    Build a few simple meshes.

    Returns:
        List of (name, trimesh.Trimesh)
    """
    return [
        ("box", trimesh.creation.box(extents=(1.0, 1.0, 1.0))),
        ("sphere", trimesh.creation.icosphere(subdivisions=3, radius=1.0)),
        ("cylinder", trimesh.creation.cylinder(radius=0.5, height=2.0, sections=32)),
        ("torus", trimesh.creation.torus(major_radius=1.0, minor_radius=0.3)),
    ]


def run_demo():
    """Run the demonstration."""
    print("=" * 60)
    print("Cubizer - Demo")
    print("=" * 60)
    print()

    # Create output directory
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    total_start = time.time()

    for name, mesh in create_test_meshes():
        print(f"\n--- Processing: {name} ---")
        print(f"Triangles: {len(mesh.faces)}")

        for cube_size in (0.25, 0.1):
            cubizer = Cubizer(cube_size=cube_size, use_scale=False)
            cubizer.load_arrays(mesh.vertices, mesh.faces, name=name)

            vox_start = time.time()
            cubizer.voxelize()
            vox_time = time.time() - vox_start

            print(f"  cube {cube_size}:")
            print(f"    Grid: {cubizer.occupancy.shape}")
            print(f"    Points: {cubizer.point_count}")
            print(f"    Voxelization: {vox_time*1000:.1f}ms")

        base_path = output_dir / cubizer.asset_name
        for path in cubizer.export_all(base_path, ["ply"], visualise=True):
            print(f"    Saved: {path}")

    total_time = time.time() - total_start

    print("\n" + "=" * 60)
    print(f"Demo complete! Total time: {total_time:.2f}s")
    print(f"Output files in: {output_dir}")
    print("=" * 60)

    return 0


def compare_modes():
    """Show how the literal and corrected formulas differ on a stretched box."""
    print("\n--- Literal vs Corrected ---\n")

    mesh = trimesh.creation.box(extents=(3.0, 1.0, 1.0))
    for dims in DimensionMode:
        for test in IntersectionMode:
            config = VoxelizerConfig(dimension_mode=dims, intersection_mode=test)
            points = voxelize(mesh.vertices, mesh.faces, None, None, False, 0.25, config)
            print(f"  dimensions={dims.value:9s} intersection={test.value:9s} "
                  f"points={len(points)}")


def benchmark_sweep():
    """Benchmark the overlap sweep against thread count."""
    print("\n--- Sweep Benchmark ---\n")

    mesh = trimesh.creation.icosphere(subdivisions=4, radius=1.0)

    for workers in (1, 2, 4, None):
        config = VoxelizerConfig(workers=workers)
        start = time.time()
        points = voxelize(mesh.vertices, mesh.faces, None, None, False, 0.05, config)
        elapsed = time.time() - start
        label = workers if workers is not None else "all"
        print(f"Workers {label}: {elapsed*1000:.1f}ms, {len(points)} points")


if __name__ == "__main__":
    run_demo()
    compare_modes()

    # Uncomment to run benchmark
    # benchmark_sweep()
