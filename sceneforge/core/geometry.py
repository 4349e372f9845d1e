"""
SceneForge Geometry Kernel

Pure math shared by the whole engine: points, axis-aligned bounding boxes,
angle conversion, affine matrices and the segment/polygon intersection
tests used by marquee selection.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
import math

import numpy as np


@dataclass
class Point:
    """A 2D point."""
    x: float
    y: float

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> 'Point':
        return Point(self.x * factor, self.y * factor)

    def distance_to(self, other: 'Point') -> float:
        """Calculate Euclidean distance to another point."""
        return math.sqrt((self.x - other.x)**2 + (self.y - other.y)**2)

    def rotate(self, angle: float, center: 'Point' = None) -> 'Point':
        """Rotate point around center by angle (radians)."""
        if center is None:
            center = Point(0, 0)
        return rotate_point(self, center, angle)


@dataclass
class BoundingBox:
    """Axis-aligned bounding box."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point(
            (self.min_x + self.max_x) / 2,
            (self.min_y + self.max_y) / 2
        )

    def contains(self, point: Point) -> bool:
        """Check if point is inside bounding box."""
        return (self.min_x <= point.x <= self.max_x and
                self.min_y <= point.y <= self.max_y)

    def intersects(self, other: 'BoundingBox') -> bool:
        """Check if two bounding boxes overlap."""
        return not (self.max_x < other.min_x or
                    self.min_x > other.max_x or
                    self.max_y < other.min_y or
                    self.min_y > other.max_y)

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> 'BoundingBox':
        """Smallest box enclosing all points (empty input gives a zero box)."""
        points = list(points)
        if not points:
            return cls(0, 0, 0, 0)
        return cls(
            min_x=min(p.x for p in points),
            min_y=min(p.y for p in points),
            max_x=max(p.x for p in points),
            max_y=max(p.y for p in points)
        )


def degrees_to_radians(degrees: float) -> float:
    return degrees * math.pi / 180


def radians_to_degrees(radians: float) -> float:
    return radians * 180 / math.pi


def normalize_angle(degrees: float) -> float:
    """Bring an angle in degrees into [0, 360)."""
    if degrees < 0:
        degrees += 360
    # tiny negatives round up to 360.0 above; the modulo folds them to 0
    return degrees % 360


def rotate_point(point: Point, origin: Point, radians: float) -> Point:
    """Rotate ``point`` around ``origin`` by ``radians`` (clockwise on screen)."""
    sin_r = math.sin(radians)
    cos_r = math.cos(radians)
    dx = point.x - origin.x
    dy = point.y - origin.y
    return Point(
        origin.x + dx * cos_r - dy * sin_r,
        origin.y + dx * sin_r + dy * cos_r
    )


# --- Affine matrices -------------------------------------------------------
#
# Matrices are 3x3 numpy arrays acting on column vectors (x, y, 1).

def identity_matrix() -> np.ndarray:
    return np.identity(3)


def compose_matrix(translate: Tuple[float, float] = (0.0, 0.0),
                   angle: float = 0.0,
                   scale: Tuple[float, float] = (1.0, 1.0)) -> np.ndarray:
    """
    Build translate * rotate * scale.

    Args:
        translate: Translation (tx, ty)
        angle: Rotation in degrees
        scale: Scale factors (sx, sy), signed to encode mirroring
    """
    radians = degrees_to_radians(angle)
    cos_r = math.cos(radians)
    sin_r = math.sin(radians)
    t = np.array([[1.0, 0.0, translate[0]],
                  [0.0, 1.0, translate[1]],
                  [0.0, 0.0, 1.0]])
    r = np.array([[cos_r, -sin_r, 0.0],
                  [sin_r, cos_r, 0.0],
                  [0.0, 0.0, 1.0]])
    s = np.diag([scale[0], scale[1], 1.0])
    return multiply_matrices(t, multiply_matrices(r, s))


def multiply_matrices(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Matrix product a @ b (b is applied first)."""
    return a @ b


def invert_matrix(matrix: np.ndarray) -> np.ndarray:
    """Invert an affine matrix. Singular matrices (zero scale) raise LinAlgError."""
    return np.linalg.inv(matrix)


def transform_point(point: Point, matrix: np.ndarray) -> Point:
    x, y, _ = matrix @ np.array([point.x, point.y, 1.0])
    return Point(float(x), float(y))


# --- Intersections ----------------------------------------------------------

def segment_intersection(a1: Point, a2: Point,
                         b1: Point, b2: Point) -> Optional[Point]:
    """
    Intersection point of segments a1-a2 and b1-b2.

    Parallel and coincident segments report no intersection.
    """
    ua_t = (b2.x - b1.x) * (a1.y - b1.y) - (b2.y - b1.y) * (a1.x - b1.x)
    ub_t = (a2.x - a1.x) * (a1.y - b1.y) - (a2.y - a1.y) * (a1.x - b1.x)
    u_b = (b2.y - b1.y) * (a2.x - a1.x) - (b2.x - b1.x) * (a2.y - a1.y)

    if u_b == 0:
        return None

    ua = ua_t / u_b
    ub = ub_t / u_b
    if 0 <= ua <= 1 and 0 <= ub <= 1:
        return Point(a1.x + ua * (a2.x - a1.x), a1.y + ua * (a2.y - a1.y))
    return None


def intersect_polygon_rectangle(points: Sequence[Point],
                                corner1: Point, corner2: Point) -> List[Point]:
    """
    All crossings between a closed polygon's edges and an axis-aligned
    rectangle's edges.
    """
    min_p = Point(min(corner1.x, corner2.x), min(corner1.y, corner2.y))
    max_p = Point(max(corner1.x, corner2.x), max(corner1.y, corner2.y))
    top_right = Point(max_p.x, min_p.y)
    bottom_left = Point(min_p.x, max_p.y)
    rect_edges = [
        (min_p, top_right),
        (top_right, max_p),
        (max_p, bottom_left),
        (bottom_left, min_p),
    ]

    crossings = []
    n = len(points)
    for i in range(n):
        a1 = points[i]
        a2 = points[(i + 1) % n]
        for b1, b2 in rect_edges:
            hit = segment_intersection(a1, a2, b1, b2)
            if hit is not None:
                crossings.append(hit)
    return crossings
