"""
Command-Line Interface for Cubizer

Usage:
    cubize mesh.obj --cube-size 0.25 -o mesh_points
    cubize mesh.stl --cube-size 0.1 --scale 1 2 1 --format ply obj --visualise
    cubize --batch meshes/ --output-dir clouds/ --cube-size 0.5

"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import DimensionMode, IntersectionMode, VoxelizerConfig
from .errors import CubizerError
from .generator import BatchProcessor, Cubizer


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cubize",
        description="Cubizer - Voxelize a triangle mesh into a cube-center point cloud",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cubize bunny.obj --cube-size 0.05
      Write bunny_Cubizied.ply next to the mesh

  cubize bunny.obj --cube-size 0.05 --scale 2 2 2 --format ply obj --visualise
      Scale the mesh, export PLY and OBJ points plus a marker-cube OBJ

  cubize --batch meshes/ --output-dir clouds/ --cube-size 0.5 --pattern "*.stl"
      Batch process all STL files in a directory

Compatibility:
  By default grid dimensions and the triangle/cube test reproduce the
  reference bake formulas. --corrected-dimensions and
  --corrected-intersection switch to the textbook formulas.
        """
    )

    # Input
    parser.add_argument(
        "input",
        nargs="?",
        help="Input mesh file (OBJ, STL, PLY, GLB, ...)"
    )

    # Output
    parser.add_argument(
        "-o", "--output",
        help="Output base path (default: <mesh>_Cubizied next to the input)"
    )

    parser.add_argument(
        "-f", "--format",
        nargs="+",
        choices=["ply", "obj"],
        default=["ply"],
        help="Output format(s) (default: ply)"
    )

    parser.add_argument(
        "--ascii",
        action="store_true",
        help="Write ASCII PLY instead of binary"
    )

    parser.add_argument(
        "--visualise",
        action="store_true",
        help="Also write an OBJ with one cube per point"
    )

    # Voxelization settings
    parser.add_argument(
        "-c", "--cube-size",
        type=float,
        help="Cube edge length (required, > 0)"
    )

    parser.add_argument(
        "--scale",
        type=float,
        nargs=3,
        metavar=("SX", "SY", "SZ"),
        default=[1.0, 1.0, 1.0],
        help="Per-axis mesh scale (default: 1 1 1)"
    )

    parser.add_argument(
        "--no-scale",
        action="store_true",
        help="Ignore --scale"
    )

    parser.add_argument(
        "--corrected-dimensions",
        action="store_true",
        help="Derive the x dimension from the x extent"
    )

    parser.add_argument(
        "--corrected-intersection",
        action="store_true",
        help="Use the textbook separating-axis formulas"
    )

    # Performance
    parser.add_argument(
        "-j", "--workers",
        type=int,
        help="Sweep threads (default: all cores, 1 = serial)"
    )

    parser.add_argument(
        "--chunk-size",
        type=int,
        default=VoxelizerConfig.chunk_size,
        help=f"Cells per parallel work item (default: {VoxelizerConfig.chunk_size})"
    )

    parser.add_argument(
        "--max-cells",
        type=int,
        default=VoxelizerConfig.max_cells,
        help="Refuse grids with more cells than this"
    )

    # Batch processing
    parser.add_argument(
        "--batch",
        help="Batch process directory of meshes"
    )

    parser.add_argument(
        "--output-dir",
        help="Output directory for batch processing"
    )

    parser.add_argument(
        "--pattern",
        default="*.obj",
        help="File pattern for batch processing (default: *.obj)"
    )

    # Misc
    parser.add_argument(
        "--preview",
        type=int,
        default=0,
        metavar="N",
        help="Print the first N points"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output with timings"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def build_config(args) -> VoxelizerConfig:
    """Translate parsed arguments into a VoxelizerConfig."""
    return VoxelizerConfig(
        dimension_mode=(DimensionMode.CORRECTED if args.corrected_dimensions
                        else DimensionMode.LITERAL),
        intersection_mode=(IntersectionMode.CORRECTED if args.corrected_intersection
                           else IntersectionMode.LITERAL),
        workers=args.workers,
        chunk_size=args.chunk_size,
        max_cells=args.max_cells,
    ).validate()


def process_single(args) -> int:
    """Process a single mesh file."""
    if not args.input:
        print("Error: No input file specified", file=sys.stderr)
        return 1

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    start_time = time.time()

    try:
        cubizer = Cubizer(
            cube_size=args.cube_size,
            use_scale=not args.no_scale,
            config=build_config(args)
        )

        if args.verbose:
            print(f"Loading: {input_path}")

        cubizer.load_mesh(input_path)
        cubizer.set_scale(args.scale)

        if args.verbose:
            print(f"Voxelizing with cube size {args.cube_size}")

        cubizer.voxelize()

        if args.output:
            output_base = Path(args.output)
        else:
            output_base = input_path.with_name(cubizer.asset_name)

        info = cubizer.preview(limit=args.preview)
        if args.verbose:
            print("\nVoxelization Statistics:")
            print(f"  Triangles: {info['triangle_count']}")
            print(f"  Grid size: {info['grid_size']}")
            print(f"  Points: {info['point_count']}")

        if args.preview > 0:
            print("\n--- Points ---")
            for i, (x, y, z) in enumerate(info["points"]):
                print(f"{i}. x = {x} y = {y} z = {z}")

        written = cubizer.export_all(
            output_base, args.format, visualise=args.visualise, binary=not args.ascii
        )
        if args.verbose:
            for path in written:
                print(f"Exported: {path}")

        elapsed = time.time() - start_time
        if args.verbose:
            print(f"\nCompleted in {elapsed:.2f}s")

        return 0

    except (CubizerError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def process_batch(args) -> int:
    """Process a directory of meshes."""
    batch_dir = Path(args.batch)
    if not batch_dir.is_dir():
        print(f"Error: Batch directory not found: {batch_dir}", file=sys.stderr)
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else batch_dir / "output"
    start_time = time.time()

    try:
        processor = BatchProcessor(
            cube_size=args.cube_size,
            use_scale=not args.no_scale,
            config=build_config(args)
        )

        outputs = processor.process_directory(
            batch_dir,
            output_dir,
            pattern=args.pattern,
            scale=args.scale,
            formats=args.format,
            visualise=args.visualise,
            binary=not args.ascii
        )

        elapsed = time.time() - start_time
        print(f"Processed {len(outputs)} files in {elapsed:.2f}s")
        print(f"Output directory: {output_dir}")

        return 0

    except (CubizerError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    # A zero cube size never reaches the engine
    if args.cube_size is None or args.cube_size == 0:
        print("Error: --cube-size must be set to a non-zero value", file=sys.stderr)
        return 1

    if args.batch:
        return process_batch(args)
    return process_single(args)


if __name__ == "__main__":
    sys.exit(main())
