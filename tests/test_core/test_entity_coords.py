"""
Tests for the transformable entity and its coordinate engine.
"""

import math
import unittest
from uuid import uuid4

from sceneforge.core.entity import CORNER_IDS, Drawable
from sceneforge.core.geometry import Point, transform_point
from sceneforge.core.options import ObjectOptions, RectOptions
from sceneforge.core.shapes import Image, Rect


def assert_point(test, point, x, y, places=6):
    test.assertAlmostEqual(point.x, x, places=places)
    test.assertAlmostEqual(point.y, y, places=places)


class TestEntityConstruction(unittest.TestCase):
    """Test building entities from options."""

    def test_keyword_options(self):
        """Test keyword construction and defaults."""
        rect = Rect(left=10, top=20, width=30, height=40)
        self.assertEqual((rect.left, rect.top, rect.width, rect.height), (10, 20, 30, 40))
        self.assertEqual(rect.origin_x, "center")
        self.assertEqual(rect.scale_x, 1.0)
        self.assertFalse(rect.active)
        self.assertIsNone(rect.group_id)

    def test_options_object(self):
        """Test construction from a typed options object."""
        rect = Rect(RectOptions(width=5, height=6, rx=2))
        self.assertEqual(rect.rx, 2)
        self.assertEqual(rect.type, "rect")

    def test_wrong_options_type(self):
        """Test that another kind's options are rejected."""
        with self.assertRaises(TypeError):
            Rect(ObjectOptions(width=5, height=5))

    def test_options_and_keywords(self):
        """Test that mixing both forms is rejected."""
        with self.assertRaises(TypeError):
            Rect(RectOptions(), width=5)

    def test_unknown_option(self):
        """Test that unknown keys are rejected."""
        with self.assertRaises(TypeError):
            Rect(width=5, colour="red")

    def test_invalid_origin(self):
        """Test that a bad origin name raises ValueError."""
        with self.assertRaises(ValueError):
            Rect(origin_x="middle")

    def test_angle_normalized(self):
        """Test that angles are normalized at construction and on set()."""
        rect = Rect(angle=-90)
        self.assertEqual(rect.angle, 270)
        rect.set(angle=450)
        self.assertEqual(rect.angle, 90)

    def test_set_unknown_attribute(self):
        """Test that set() refuses unknown attributes."""
        with self.assertRaises(AttributeError):
            Rect().set(colour="red")

    def test_unique_ids(self):
        """Test that every entity gets its own id."""
        self.assertNotEqual(Rect().id, Rect().id)

    def test_drawable(self):
        """Test that shapes provide the drawable capability."""
        self.assertIsInstance(Rect(), Drawable)
        self.assertIsInstance(Image(), Drawable)

    def test_image_size_from_source(self):
        """Test that an image takes its size from the source."""

        class FakeSource:
            def width(self):
                return 64

            def height(self):
                return 32

        image = Image(source=FakeSource())
        self.assertEqual((image.width, image.height), (64, 32))

    def test_image_without_source_has_empty_bounds(self):
        """Test the local bounds of an image with nothing loaded."""
        bounds = Image(width=10, height=10).compute_local_bounds()
        self.assertEqual(bounds.width, 0)


class TestOrigins(unittest.TestCase):
    """Test origin translation."""

    def test_center_from_left_top(self):
        """Test the center of a left/top anchored entity."""
        rect = Rect(left=100, top=100, width=100, height=50, origin_x="left", origin_y="top")
        assert_point(self, rect.get_center_point(), 150, 125)

    def test_center_with_scale(self):
        """Test that the scaled size moves the center."""
        rect = Rect(left=0, top=0, width=10, height=10, scale_x=3,
                    origin_x="left", origin_y="top")
        assert_point(self, rect.get_center_point(), 15, 5)

    def test_negative_scale_uses_visual_sides(self):
        """Test that a mirrored entity keeps its left origin on the left."""
        rect = Rect(left=0, top=0, width=10, height=10, scale_x=-2,
                    origin_x="left", origin_y="top")
        assert_point(self, rect.get_center_point(), 10, 5)

    def test_origin_point(self):
        """Test the world position of each origin."""
        rect = Rect(left=200, top=200, width=100, height=50)
        center = rect.get_center_point()
        assert_point(self, rect.translate_to_origin_point(center, "left", "top"), 150, 175)
        assert_point(self, rect.translate_to_origin_point(center, "right", "bottom"), 250, 225)

    def test_rotated_origin_point(self):
        """Test an origin of an entity turned by 90 degrees."""
        rect = Rect(left=200, top=200, width=100, height=50, angle=90)
        center = rect.get_center_point()
        # the left edge midpoint swings to the top
        assert_point(self, rect.translate_to_origin_point(center, "left", "center"), 200, 150)

    def test_set_position_by_origin(self):
        """Test placing the right/bottom corner at a point."""
        rect = Rect(width=100, height=50)
        rect.set_position_by_origin(Point(300, 300), "right", "bottom")
        assert_point(self, rect.get_center_point(), 250, 275)

    def test_to_local_point(self):
        """Test expressing a canvas point relative to an origin."""
        rect = Rect(left=200, top=200, width=100, height=50, angle=90)
        # the top-left corner of a 90 degree turned box sits at (225, 150)
        local = rect.to_local_point(Point(225, 150), "left", "top")
        assert_point(self, local, 0, 0)

    def test_transform_matrix(self):
        """Test that the matrix maps the local frame onto the canvas."""
        rect = Rect(left=100, top=50, width=40, height=20, angle=90, scale_x=2)
        # local (20, 0) is the right edge midpoint; x2 and a quarter turn
        assert_point(self, transform_point(Point(20, 0), rect.get_transform_matrix()), 100, 90)

    def test_transform_matrix_flip(self):
        """Test that flips mirror the local frame."""
        rect = Rect(left=100, top=50, width=40, height=20, flip_x=True)
        assert_point(self, transform_point(Point(20, 10), rect.get_transform_matrix()), 80, 60)


class TestSetCoords(unittest.TestCase):
    """Test the nine control points and their hit squares."""

    def test_corner_geometry(self):
        """Test the corners of an unrotated 100x50 box centered at (200, 200)."""
        rect = Rect(left=200, top=200, width=100, height=50, padding=0)
        rect.set_coords()
        coords = rect.o_coords
        assert_point(self, coords["tl"].as_point(), 150, 175)
        assert_point(self, coords["tr"].as_point(), 250, 175)
        assert_point(self, coords["br"].as_point(), 250, 225)
        assert_point(self, coords["bl"].as_point(), 150, 225)

    def test_midpoints(self):
        """Test the edge midpoints and the rotation point."""
        rect = Rect(left=200, top=200, width=100, height=50).set_coords()
        coords = rect.o_coords
        assert_point(self, coords["ml"].as_point(), 150, 200)
        assert_point(self, coords["mt"].as_point(), 200, 175)
        assert_point(self, coords["mr"].as_point(), 250, 200)
        assert_point(self, coords["mb"].as_point(), 200, 225)
        assert_point(self, coords["mtr"].as_point(), 200, 175)
        self.assertEqual(list(coords), list(CORNER_IDS))

    def test_rotated_corners(self):
        """Test the corners after a quarter turn."""
        rect = Rect(left=200, top=200, width=100, height=50, angle=90).set_coords()
        coords = rect.o_coords
        assert_point(self, coords["tl"].as_point(), 225, 150)
        assert_point(self, coords["tr"].as_point(), 225, 250)
        assert_point(self, coords["br"].as_point(), 175, 250)
        assert_point(self, coords["bl"].as_point(), 175, 150)

    def test_scale_and_padding(self):
        """Test that scale and padding inflate the box."""
        rect = Rect(left=0, top=0, width=10, height=10, scale_x=2, padding=5).set_coords()
        self.assertAlmostEqual(rect.current_width, 30)
        self.assertAlmostEqual(rect.current_height, 20)

    def test_thin_stroke_not_inflated(self):
        """Test that a stroke of width 1 leaves the box alone."""
        rect = Rect(width=10, height=10, stroke_width=1).set_coords()
        self.assertAlmostEqual(rect.current_width, 10)
        thick = Rect(width=10, height=10, stroke_width=4).set_coords()
        self.assertAlmostEqual(thick.current_width, 14)

    def test_mirrored_entity_keeps_corner_order(self):
        """Test that negative scale still yields a clockwise box."""
        rect = Rect(left=200, top=200, width=100, height=50, scale_x=-1).set_coords()
        assert_point(self, rect.o_coords["tl"].as_point(), 150, 175)
        assert_point(self, rect.o_coords["br"].as_point(), 250, 225)

    def test_zero_size_is_finite(self):
        """Test that a zero-size entity still gets finite coordinates."""
        rect = Rect(left=5, top=5, width=0, height=0).set_coords()
        for control in rect.o_coords.values():
            self.assertTrue(math.isfinite(control.x))
            self.assertTrue(math.isfinite(control.y))
            for p in control.corner.points():
                self.assertTrue(math.isfinite(p.x) and math.isfinite(p.y))

    def test_corner_square(self):
        """Test the hit square of an unrotated corner."""
        rect = Rect(left=200, top=200, width=100, height=50, corner_size=12).set_coords()
        square = rect.o_coords["tl"].corner
        assert_point(self, square.tl, 144, 169)
        assert_point(self, square.tr, 156, 169)
        assert_point(self, square.br, 156, 181)
        assert_point(self, square.bl, 144, 181)

    def test_rotation_handle_offset(self):
        """Test that the rotation square sits above the top edge."""
        rect = Rect(left=200, top=200, width=100, height=50,
                    rotating_point_offset=40).set_coords()
        points = rect.o_coords["mtr"].corner.points()
        cx = sum(p.x for p in points) / 4
        cy = sum(p.y for p in points) / 4
        self.assertAlmostEqual(cx, 200)
        self.assertAlmostEqual(cy, 135)

    def test_rotated_rotation_handle(self):
        """Test that the rotation square follows the entity's up vector."""
        rect = Rect(left=200, top=200, width=100, height=50, angle=90,
                    rotating_point_offset=40).set_coords()
        points = rect.o_coords["mtr"].corner.points()
        cx = sum(p.x for p in points) / 4
        cy = sum(p.y for p in points) / 4
        # top edge midpoint is (225, 200); up now points to +x
        self.assertAlmostEqual(cx, 265)
        self.assertAlmostEqual(cy, 200)


class TestMarqueeTests(unittest.TestCase):
    """Test rectangle intersection and containment."""

    def setUp(self):
        self.rect = Rect(left=50, top=50, width=20, height=20).set_coords()

    def test_intersects(self):
        """Test a rectangle cutting through the box."""
        self.assertTrue(self.rect.intersects_with_rect(Point(0, 0), Point(50, 50)))

    def test_contained(self):
        """Test a rectangle around the box."""
        self.assertTrue(self.rect.is_contained_within_rect(Point(0, 0), Point(100, 100)))
        self.assertFalse(self.rect.intersects_with_rect(Point(0, 0), Point(100, 100)))

    def test_disjoint(self):
        """Test a rectangle elsewhere."""
        self.assertFalse(self.rect.intersects_with_rect(Point(200, 200), Point(300, 300)))
        self.assertFalse(self.rect.is_contained_within_rect(Point(200, 200), Point(300, 300)))


class TestStateTracking(unittest.TestCase):
    """Test saved state comparison and group membership."""

    def test_state_changed(self):
        """Test that tracked properties are compared."""
        rect = Rect(left=1, top=1, width=10, height=10).save_state()
        self.assertFalse(rect.has_state_changed())
        rect.set(left=2)
        self.assertTrue(rect.has_state_changed())

    def test_float_noise_ignored(self):
        """Test that last-bit differences in numbers are not a change."""
        rect = Rect(left=46.93, top=46.93, width=10, height=10, angle=3.7).save_state()
        rect.set(left=46.93000000000001, angle=3.6999999999999993)
        self.assertFalse(rect.has_state_changed())
        rect.set(left=46.94)
        self.assertTrue(rect.has_state_changed())

    def test_flags_and_strings_compared_exactly(self):
        """Test that booleans and colors are not treated as numbers."""
        rect = Rect(width=10, height=10, fill="red").save_state()
        rect.set(flip_x=True)
        self.assertTrue(rect.has_state_changed())
        rect.set(flip_x=False, fill="blue")
        self.assertTrue(rect.has_state_changed())

    def test_untracked_property(self):
        """Test that selection state is not part of the snapshot."""
        rect = Rect(width=10, height=10).save_state()
        rect.set_active(True)
        self.assertFalse(rect.has_state_changed())

    def test_group_membership(self):
        """Test that membership hides and restores controls."""
        rect = Rect(has_controls=True)
        group_id = uuid4()
        rect.enter_group(group_id)
        self.assertEqual(rect.group_id, group_id)
        self.assertFalse(rect.has_controls)
        rect.leave_group()
        self.assertIsNone(rect.group_id)
        self.assertTrue(rect.has_controls)


if __name__ == '__main__':
    unittest.main()
