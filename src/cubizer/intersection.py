"""
Triangle / Axis-Aligned Box Intersection (Separating Axis Test)

A triangle and a box are disjoint iff one of 13 candidate axes separates
their projections:

1. Nine cross products of the triangle edges with the box axes
2. The three box face normals
3. The triangle normal (tested as a plane against the box)

Two formula sets are compiled:

- LITERAL reproduces the reference bake term for term. The "y" cross axes
  are (f.z, 0, -f.z) with radius 2*ez*|f.z|, the "z" cross axes are
  (-f.y, f.z, 0) with radius ez*|f.y| + ey*|f.z|, the face tests run on
  z, y, z, and the plane radius counts ez*|n.z| twice and ignores n.x.
  Because cell boxes are cubes, every literal cross axis is still a valid
  separating axis; the literal plane test is the only place where it can
  reject a genuinely intersecting triangle.
- CORRECTED is the Akenine-Möller formulation.

Rejection is strict (`>`), so a triangle touching the box counts as
intersecting.

All functions are pure and safe to call from any number of threads.
"""

import math
import numpy as np
from numba import njit

from .config import IntersectionMode


@njit(cache=True)
def _min3(a: float, b: float, c: float) -> float:
    return min(min(a, b), c)


@njit(cache=True)
def _max3(a: float, b: float, c: float) -> float:
    return max(max(a, b), c)


@njit(cache=True)
def _axis_separates(
    ax: float, ay: float, az: float,
    v0x: float, v0y: float, v0z: float,
    v1x: float, v1y: float, v1z: float,
    v2x: float, v2y: float, v2z: float,
    r: float
) -> bool:
    """True if the projections on axis (ax, ay, az) fall outside [-r, r]."""
    p0 = v0x * ax + v0y * ay + v0z * az
    p1 = v1x * ax + v1y * ay + v1z * az
    p2 = v2x * ax + v2y * ay + v2z * az
    return max(-_max3(p0, p1, p2), _min3(p0, p1, p2)) > r


@njit(cache=True)
def _outside_slab(a: float, b: float, c: float, e: float) -> bool:
    """True if all three coordinates lie beyond the same face of [-e, e]."""
    return _max3(a, b, c) < -e or _min3(a, b, c) > e


@njit(cache=True)
def _tri_box_overlap(
    tri: np.ndarray,
    cx: float, cy: float, cz: float,
    ex: float, ey: float, ez: float,
    literal: bool
) -> bool:
    """
    Separating-axis test between a triangle and an axis-aligned box.

    Args:
        tri: Triangle corners, shape (3, 3)
        cx, cy, cz: Box center
        ex, ey, ez: Box half-widths
        literal: Use the reference formula set

    Returns:
        True if the triangle touches or penetrates the box
    """
    # Move the triangle into the box frame
    v0x = tri[0, 0] - cx
    v0y = tri[0, 1] - cy
    v0z = tri[0, 2] - cz
    v1x = tri[1, 0] - cx
    v1y = tri[1, 1] - cy
    v1z = tri[1, 2] - cz
    v2x = tri[2, 0] - cx
    v2y = tri[2, 1] - cy
    v2z = tri[2, 2] - cz

    # Edges
    f0x = v1x - v0x
    f0y = v1y - v0y
    f0z = v1z - v0z
    f1x = v2x - v1x
    f1y = v2y - v1y
    f1z = v2z - v1z
    f2x = v0x - v2x
    f2y = v0y - v2y
    f2z = v0z - v2z

    # X-axis cross edges; identical in both formula sets
    if _axis_separates(0.0, -f0z, f0y, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                       ey * abs(f0z) + ez * abs(f0y)):
        return False
    if _axis_separates(0.0, -f1z, f1y, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                       ey * abs(f1z) + ez * abs(f1y)):
        return False
    if _axis_separates(0.0, -f2z, f2y, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                       ey * abs(f2z) + ez * abs(f2y)):
        return False

    if literal:
        # Y-axis cross edges
        if _axis_separates(f0z, 0.0, -f0z, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                           ez * abs(f0z) + ez * abs(f0z)):
            return False
        if _axis_separates(f1z, 0.0, -f1z, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                           ez * abs(f1z) + ez * abs(f1z)):
            return False
        if _axis_separates(f2z, 0.0, -f2z, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                           ez * abs(f2z) + ez * abs(f2z)):
            return False

        # Z-axis cross edges
        if _axis_separates(-f0y, f0z, 0.0, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                           ez * abs(f0y) + ey * abs(f0z)):
            return False
        if _axis_separates(-f1y, f1z, 0.0, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                           ez * abs(f1y) + ey * abs(f1z)):
            return False
        if _axis_separates(-f2y, f2z, 0.0, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                           ez * abs(f2y) + ey * abs(f2z)):
            return False

        # Box faces (z, y, z)
        if _outside_slab(v0z, v1z, v2z, ez):
            return False
        if _outside_slab(v0y, v1y, v2y, ey):
            return False
        if _outside_slab(v0z, v1z, v2z, ez):
            return False
    else:
        if _axis_separates(f0z, 0.0, -f0x, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                           ex * abs(f0z) + ez * abs(f0x)):
            return False
        if _axis_separates(f1z, 0.0, -f1x, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                           ex * abs(f1z) + ez * abs(f1x)):
            return False
        if _axis_separates(f2z, 0.0, -f2x, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                           ex * abs(f2z) + ez * abs(f2x)):
            return False

        if _axis_separates(-f0y, f0x, 0.0, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                           ex * abs(f0y) + ey * abs(f0x)):
            return False
        if _axis_separates(-f1y, f1x, 0.0, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                           ex * abs(f1y) + ey * abs(f1x)):
            return False
        if _axis_separates(-f2y, f2x, 0.0, v0x, v0y, v0z, v1x, v1y, v1z, v2x, v2y, v2z,
                           ex * abs(f2y) + ey * abs(f2x)):
            return False

        if _outside_slab(v0x, v1x, v2x, ex):
            return False
        if _outside_slab(v0y, v1y, v2y, ey):
            return False
        if _outside_slab(v0z, v1z, v2z, ez):
            return False

    # Triangle plane: normal = normalize(f1 x f0), distance through corner a
    nx = f1y * f0z - f1z * f0y
    ny = f1z * f0x - f1x * f0z
    nz = f1x * f0y - f1y * f0x
    length = math.sqrt(nx * nx + ny * ny + nz * nz)
    if length == 0.0:
        # Zero-area triangle. The reference normalizes to NaN and its
        # final comparison fails, so literal mode reports no hit.
        return not literal
    nx /= length
    ny /= length
    nz /= length

    distance = nx * tri[0, 0] + ny * tri[0, 1] + nz * tri[0, 2]
    s = nx * cx + ny * cy + nz * cz - distance

    if literal:
        r = ez * abs(nz) + ey * abs(ny) + ez * abs(nz)
    else:
        r = ex * abs(nx) + ey * abs(ny) + ez * abs(nz)

    return abs(s) <= r


def triangle_box_overlap(
    triangle,
    center,
    extents,
    mode: IntersectionMode = IntersectionMode.LITERAL
) -> bool:
    """
    Test whether a triangle intersects an axis-aligned box.

    Args:
        triangle: Triangle corners, shape (3, 3)
        center: Box center (x, y, z)
        extents: Box half-widths (x, y, z)
        mode: LITERAL (reference formulas) or CORRECTED

    Returns:
        True if they touch or overlap
    """
    tri = np.ascontiguousarray(triangle, dtype=np.float64)
    if tri.shape != (3, 3):
        raise ValueError(f"Triangle must have shape (3, 3), got {tri.shape}")
    cx, cy, cz = (float(v) for v in center)
    ex, ey, ez = (float(v) for v in extents)
    mode = IntersectionMode(mode)
    return bool(_tri_box_overlap(
        tri, cx, cy, cz, ex, ey, ez, mode == IntersectionMode.LITERAL
    ))
