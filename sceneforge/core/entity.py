"""
SceneForge Transformable Entity

Holds an entity's transform state (position, size, signed scale, angle,
origin, flips) and derives its oriented geometry: the nine named control
points in canvas space, each with its own hit square.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable
from uuid import UUID, uuid4
import math

import numpy as np

from .geometry import (
    Point, BoundingBox, compose_matrix, degrees_to_radians,
    intersect_polygon_rectangle, normalize_angle, rotate_point
)
from .options import ObjectOptions

# Clockwise from the top-left corner, then the rotation handle.
CORNER_IDS: Tuple[str, ...] = ("tl", "tr", "br", "bl", "ml", "mt", "mr", "mb", "mtr")


@dataclass
class HitSquare:
    """The four corners of a control's clickable square."""
    tl: Point
    tr: Point
    br: Point
    bl: Point

    def points(self) -> List[Point]:
        return [self.tl, self.tr, self.br, self.bl]


@dataclass
class ControlPoint:
    """A named point of the oriented bounding box and its hit square."""
    x: float
    y: float
    corner: Optional[HitSquare] = None

    def as_point(self) -> Point:
        return Point(self.x, self.y)


OCoords = Dict[str, ControlPoint]

# Position and angle pass through sin/cos during a gesture
STATE_TOLERANCE = 1e-9


def _values_differ(current: Any, saved: Any) -> bool:
    """Compare tracked values; numbers within STATE_TOLERANCE count as equal."""
    numeric = (int, float)
    if (isinstance(current, numeric) and isinstance(saved, numeric)
            and not isinstance(current, bool) and not isinstance(saved, bool)):
        return not math.isclose(current, saved, rel_tol=STATE_TOLERANCE,
                                abs_tol=STATE_TOLERANCE)
    return current != saved


@runtime_checkable
class Drawable(Protocol):
    """Capability every concrete entity kind provides to the renderer."""

    def render(self, renderer: Any) -> None:
        ...

    def compute_local_bounds(self) -> BoundingBox:
        ...


class Entity:
    """
    State shared by every entity kind.

    Position ``(left, top)`` is interpreted through ``origin_x``/``origin_y``.
    Scale is signed: a negative factor mirrors the entity, while the
    origin names always refer to the visual sides of the box.

    ``o_coords`` is only valid after ``set_coords()`` ran against the
    current transform.
    """

    type = "object"
    options_class = ObjectOptions

    # Properties compared by has_state_changed()
    STATE_PROPERTIES: Tuple[str, ...] = (
        "top", "left", "width", "height", "scale_x", "scale_y",
        "flip_x", "flip_y", "angle", "corner_size", "fill",
        "origin_x", "origin_y", "stroke", "stroke_width",
        "border_width", "visible",
    )

    def __init__(self, options: Optional[ObjectOptions] = None, **kwargs):
        if options is None:
            options = self.options_class(**kwargs)
        elif kwargs:
            raise TypeError("Pass either an options object or keyword options, not both")
        if not isinstance(options, self.options_class):
            raise TypeError(
                f"{type(self).__name__} expects {self.options_class.__name__}, "
                f"got {type(options).__name__}"
            )

        self.id: UUID = uuid4()
        for f in fields(options):
            setattr(self, f.name, getattr(options, f.name))
        self.angle = normalize_angle(self.angle)

        self.active: bool = False
        self.is_moving: bool = False
        self.current_width: float = 0.0
        self.current_height: float = 0.0
        self.o_coords: OCoords = {}
        self.original_state: Dict[str, Any] = {}

        # Lookup key of the group holding this entity, never an owner
        self.group_id: Optional[UUID] = None
        self._orig_has_controls: Optional[bool] = None

    def __repr__(self) -> str:
        return (f"<{type(self).__name__} left={self.left:g} top={self.top:g} "
                f"width={self.width:g} height={self.height:g} angle={self.angle:g}>")

    def set(self, **changes) -> 'Entity':
        """Assign known attributes. The angle is kept in [0, 360)."""
        for name, value in changes.items():
            if not hasattr(self, name):
                raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")
            if name == "angle":
                value = normalize_angle(value)
            setattr(self, name, value)
        return self

    def set_active(self, active: bool) -> 'Entity':
        self.active = active
        return self

    # --- Size and origin ------------------------------------------------------

    def get_width(self) -> float:
        """Width including scale (signed)."""
        return self.width * self.scale_x

    def get_height(self) -> float:
        """Height including scale (signed)."""
        return self.height * self.scale_y

    def get_center_point(self) -> Point:
        return self.translate_to_center_point(Point(self.left, self.top),
                                              self.origin_x, self.origin_y)

    def translate_to_center_point(self, point: Point, origin_x: str, origin_y: str) -> Point:
        """Center of the entity if ``point`` were its (origin_x, origin_y) point."""
        half_w = abs(self.get_width()) / 2
        half_h = abs(self.get_height()) / 2
        cx = point.x
        cy = point.y

        if origin_x == "left":
            cx = point.x + half_w
        elif origin_x == "right":
            cx = point.x - half_w

        if origin_y == "top":
            cy = point.y + half_h
        elif origin_y == "bottom":
            cy = point.y - half_h

        p = Point(cx, cy)
        if self.angle:
            return rotate_point(p, point, degrees_to_radians(self.angle))
        return p

    def translate_to_origin_point(self, center: Point, origin_x: str, origin_y: str) -> Point:
        """World position of the (origin_x, origin_y) point given the center."""
        p = self._unrotated_origin_point(center, origin_x, origin_y)
        if self.angle:
            return rotate_point(p, center, degrees_to_radians(self.angle))
        return p

    def _unrotated_origin_point(self, center: Point, origin_x: str, origin_y: str) -> Point:
        half_w = abs(self.get_width()) / 2
        half_h = abs(self.get_height()) / 2
        x = center.x
        y = center.y

        if origin_x == "left":
            x = center.x - half_w
        elif origin_x == "right":
            x = center.x + half_w

        if origin_y == "top":
            y = center.y - half_h
        elif origin_y == "bottom":
            y = center.y + half_h

        return Point(x, y)

    def set_position_by_origin(self, pos: Point, origin_x: str, origin_y: str) -> None:
        """Move the entity so its (origin_x, origin_y) point lands on ``pos``."""
        center = self.translate_to_center_point(pos, origin_x, origin_y)
        position = self.translate_to_origin_point(center, self.origin_x, self.origin_y)
        self.left = position.x
        self.top = position.y

    def to_local_point(self, point: Point, origin_x: str, origin_y: str) -> Point:
        """
        Express a canvas point in the entity's unrotated frame, measured
        from its (origin_x, origin_y) point.
        """
        center = self.get_center_point()
        origin = self._unrotated_origin_point(center, origin_x, origin_y)
        p = point
        if self.angle:
            p = rotate_point(point, center, -degrees_to_radians(self.angle))
        return p - origin

    def get_transform_matrix(self) -> np.ndarray:
        """Local (centered, unscaled) to canvas matrix, flips folded into the scale."""
        center = self.get_center_point()
        scale_x = self.scale_x * (-1 if self.flip_x else 1)
        scale_y = self.scale_y * (-1 if self.flip_y else 1)
        return compose_matrix((center.x, center.y), self.angle, (scale_x, scale_y))

    def compute_local_bounds(self) -> BoundingBox:
        """Unscaled bounds around the entity's own center."""
        return BoundingBox(-self.width / 2, -self.height / 2,
                           self.width / 2, self.height / 2)

    # --- Coordinate engine --------------------------------------------------

    def set_coords(self) -> 'Entity':
        """Recompute the nine control points and their hit squares."""
        stroke_width = self.stroke_width if self.stroke_width > 1 else 0
        padding = self.padding
        radian = degrees_to_radians(self.angle)

        self.current_width = abs((self.width + stroke_width) * self.scale_x) + padding * 2
        self.current_height = abs((self.height + stroke_width) * self.scale_y) + padding * 2
        width = self.current_width
        height = self.current_height

        # distance from the center to each corner, and the box's own diagonal angle
        hypotenuse = math.sqrt((width / 2) ** 2 + (height / 2) ** 2)
        diagonal = math.atan2(height, width)

        offset_x = math.cos(diagonal + radian) * hypotenuse
        offset_y = math.sin(diagonal + radian) * hypotenuse
        sin_th = math.sin(radian)
        cos_th = math.cos(radian)

        center = self.get_center_point()
        tl = Point(center.x - offset_x, center.y - offset_y)
        tr = Point(tl.x + width * cos_th, tl.y + width * sin_th)
        br = Point(tr.x - height * sin_th, tr.y + height * cos_th)
        bl = Point(tl.x - height * sin_th, tl.y + height * cos_th)
        ml = Point(tl.x - (height / 2) * sin_th, tl.y + (height / 2) * cos_th)
        mt = Point(tl.x + (width / 2) * cos_th, tl.y + (width / 2) * sin_th)
        mr = Point(tr.x - (height / 2) * sin_th, tr.y + (height / 2) * cos_th)
        mb = Point(bl.x + (width / 2) * cos_th, bl.y + (width / 2) * sin_th)
        mtr = Point(mt.x, mt.y)

        points = dict(tl=tl, tr=tr, br=br, bl=bl, ml=ml, mt=mt, mr=mr, mb=mb, mtr=mtr)
        self.o_coords = {name: ControlPoint(points[name].x, points[name].y)
                         for name in CORNER_IDS}
        self._set_corner_coords()
        return self

    def _set_corner_coords(self) -> None:
        """Attach a cornerSize square, turned by 45 - angle, to every control point."""
        coords = self.o_coords
        radian = degrees_to_radians(self.angle)
        new_theta = degrees_to_radians(45 - self.angle)
        corner_hypotenuse = math.sqrt(2 * self.corner_size ** 2) / 2
        cos_half = corner_hypotenuse * math.cos(new_theta)
        sin_half = corner_hypotenuse * math.sin(new_theta)
        sin_th = math.sin(radian)
        cos_th = math.cos(radian)

        for name in CORNER_IDS:
            control = coords[name]
            x = control.x
            y = control.y
            if name == "mtr":
                # pushed outward along the entity's up vector
                x += sin_th * self.rotating_point_offset
                y -= cos_th * self.rotating_point_offset
            control.corner = HitSquare(
                tl=Point(x - sin_half, y - cos_half),
                tr=Point(x + cos_half, y - sin_half),
                br=Point(x + sin_half, y + cos_half),
                bl=Point(x - cos_half, y + sin_half),
            )

    def get_corner_points(self) -> List[Point]:
        """The four box corners tl, tr, br, bl from o_coords."""
        if not self.o_coords:
            self.set_coords()
        return [self.o_coords[name].as_point() for name in ("tl", "tr", "br", "bl")]

    def get_bounding_rect(self) -> BoundingBox:
        """Axis-aligned box around the oriented corners."""
        return BoundingBox.from_points(self.get_corner_points())

    # --- Marquee tests ----------------------------------------------------

    def intersects_with_rect(self, point1: Point, point2: Point) -> bool:
        """True if any box edge crosses the rectangle's edges."""
        return bool(intersect_polygon_rectangle(self.get_corner_points(), point1, point2))

    def is_contained_within_rect(self, point1: Point, point2: Point) -> bool:
        """True if the box lies strictly inside the rectangle."""
        bounds = self.get_bounding_rect()
        return (bounds.min_x > point1.x and bounds.max_x < point2.x and
                bounds.min_y > point1.y and bounds.max_y < point2.y)

    # --- State tracking ---------------------------------------------------

    def save_state(self) -> 'Entity':
        """Snapshot the tracked properties into original_state."""
        self.original_state = {prop: getattr(self, prop) for prop in self.STATE_PROPERTIES}
        return self

    def has_state_changed(self) -> bool:
        return any(_values_differ(getattr(self, prop), self.original_state.get(prop))
                   for prop in self.STATE_PROPERTIES)

    # --- Group membership -------------------------------------------------

    def enter_group(self, group_id: UUID) -> None:
        self.group_id = group_id
        self._orig_has_controls = self.has_controls
        self.has_controls = False

    def leave_group(self) -> None:
        if self._orig_has_controls is not None:
            self.has_controls = self._orig_has_controls
        self._orig_has_controls = None
        self.group_id = None
