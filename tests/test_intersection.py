"""
Unit tests for the triangle/box separating-axis test.
"""

import sys
from pathlib import Path
import numpy as np
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cubizer.config import IntersectionMode
from cubizer.intersection import triangle_box_overlap

MODES = (IntersectionMode.LITERAL, IntersectionMode.CORRECTED)
UNIT = (1.0, 1.0, 1.0)
ORIGIN = (0.0, 0.0, 0.0)


class TestTriangleBoxOverlap(unittest.TestCase):
    """Tests shared by both formula sets."""

    def test_triangle_inside_box(self):
        """Test a triangle fully inside the box."""
        tri = [[-0.2, -0.2, 0.1], [0.3, -0.1, 0.0], [0.0, 0.4, -0.1]]
        for mode in MODES:
            assert triangle_box_overlap(tri, ORIGIN, UNIT, mode)

    def test_triangle_far_away(self):
        """Test a triangle well outside the box."""
        tri = [[5.0, 5.0, 5.0], [6.0, 5.0, 5.0], [5.0, 6.0, 5.0]]
        for mode in MODES:
            assert not triangle_box_overlap(tri, ORIGIN, UNIT, mode)

    def test_triangle_crossing_box(self):
        """Test a large triangle whose corners are all outside the box."""
        tri = [[-10.0, -10.0, 0.0], [10.0, -10.0, 0.0], [0.0, 10.0, 0.0]]
        for mode in MODES:
            assert triangle_box_overlap(tri, ORIGIN, UNIT, mode)

    def test_touching_face_counts(self):
        """Test that a triangle lying exactly on a box face intersects."""
        tri = [[0.0, 0.0, 1.0], [1.0, 0.0, 1.0], [0.0, 1.0, 1.0]]
        for mode in MODES:
            assert triangle_box_overlap(tri, ORIGIN, UNIT, mode)

    def test_just_beyond_face_rejected(self):
        """Test that a triangle slightly past a face is rejected."""
        z = 1.0 + 1e-6
        tri = [[0.0, 0.0, z], [1.0, 0.0, z], [0.0, 1.0, z]]
        for mode in MODES:
            assert not triangle_box_overlap(tri, ORIGIN, UNIT, mode)

    def test_offset_box_center(self):
        """Test that the box center is honoured."""
        tri = [[10.0, 10.0, 10.0], [10.5, 10.0, 10.0], [10.0, 10.5, 10.0]]
        for mode in MODES:
            assert triangle_box_overlap(tri, (10.0, 10.0, 10.0), UNIT, mode)
            assert not triangle_box_overlap(tri, ORIGIN, UNIT, mode)

    def test_mode_from_string(self):
        """Test that modes can be given by name."""
        tri = [[-0.2, -0.2, 0.0], [0.2, -0.2, 0.0], [0.0, 0.2, 0.0]]
        assert triangle_box_overlap(tri, ORIGIN, UNIT, "corrected")
        assert triangle_box_overlap(tri, ORIGIN, UNIT, "literal")

    def test_bad_triangle_shape(self):
        """Test that a malformed triangle is rejected."""
        with self.assertRaises(ValueError):
            triangle_box_overlap([[0, 0, 0], [1, 0, 0]], ORIGIN, UNIT)


class TestLiteralFormulas(unittest.TestCase):
    """Tests pinning the reference behaviour."""

    def test_x_facing_plane_rejected(self):
        """Test that the literal plane radius ignores the normal's x part."""
        # Plane x = 0.25 cuts straight through the box
        tri = [[0.25, -0.5, -0.5], [0.25, 0.5, -0.5], [0.25, -0.5, 0.5]]
        assert not triangle_box_overlap(tri, ORIGIN, UNIT, IntersectionMode.LITERAL)
        assert triangle_box_overlap(tri, ORIGIN, UNIT, IntersectionMode.CORRECTED)

    def test_x_facing_plane_through_center(self):
        """Test that an x-facing plane through the center still hits."""
        tri = [[0.0, -0.5, -0.5], [0.0, 0.5, -0.5], [0.0, -0.5, 0.5]]
        assert triangle_box_overlap(tri, ORIGIN, UNIT, IntersectionMode.LITERAL)

    def test_degenerate_triangle(self):
        """Test a zero-area triangle inside the box."""
        tri = [[0.1, 0.1, 0.1], [0.1, 0.1, 0.1], [0.1, 0.1, 0.1]]
        assert not triangle_box_overlap(tri, ORIGIN, UNIT, IntersectionMode.LITERAL)
        assert triangle_box_overlap(tri, ORIGIN, UNIT, IntersectionMode.CORRECTED)

    def test_default_mode_is_literal(self):
        """Test that the default reproduces the reference."""
        tri = [[0.25, -0.5, -0.5], [0.25, 0.5, -0.5], [0.25, -0.5, 0.5]]
        assert not triangle_box_overlap(tri, ORIGIN, UNIT)


class TestCorrectedFormulas(unittest.TestCase):
    """Tests for the textbook formula set."""

    def test_never_misses_contained_point(self):
        """Test that a box around a point of the triangle always hits."""
        rng = np.random.default_rng(7)
        for _ in range(200):
            tri = rng.uniform(-5.0, 5.0, size=(3, 3))
            weights = rng.dirichlet([1.0, 1.0, 1.0])
            point = weights @ tri
            center = point + rng.uniform(-0.4, 0.4, size=3)
            assert triangle_box_overlap(
                tri, center, UNIT, IntersectionMode.CORRECTED
            )

    def test_separated_along_x(self):
        """Test rejection by the x face, which literal mode never checks."""
        tri = [[1.5, -0.5, -0.5], [1.5, 0.5, -0.5], [1.5, -0.5, 0.5]]
        assert not triangle_box_overlap(tri, ORIGIN, UNIT, IntersectionMode.CORRECTED)


if __name__ == "__main__":
    unittest.main(verbosity=2)
