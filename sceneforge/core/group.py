"""
SceneForge Group

A transient aggregate of entities manipulated as one unit. The group
does not own its members: while grouped, each member's position is
stored relative to the group's center, and dissolving the group writes
the group's transform back into the members.
"""

from typing import Any, Iterable, List, Optional
import logging

from .entity import Entity
from .geometry import BoundingBox, Point, transform_point
from .options import ObjectOptions

logger = logging.getLogger(__name__)


class Group(Entity):
    """
    Ordered, duplicate-free set of entities exposing one transform.

    The group is always centered on its own position (origin center/center),
    so ``(left, top)`` is the group's center point.
    """

    type = "group"
    options_class = ObjectOptions

    def __init__(self, objects: Iterable[Entity] = (),
                 options: Optional[ObjectOptions] = None, **kwargs):
        super().__init__(options, **kwargs)
        self.origin_x = "center"
        self.origin_y = "center"

        self._objects: List[Entity] = []
        for obj in objects:
            if obj not in self._objects:
                self._objects.append(obj)
                obj.enter_group(self.id)

        self._calc_bounds()
        self._update_objects_coords()
        self.set_coords()
        self.save_state()

    def render(self, renderer: Any) -> None:
        renderer.draw_group(self)

    # --- Membership ---------------------------------------------------------

    def get_objects(self) -> List[Entity]:
        return list(self._objects)

    def contains(self, obj: Entity) -> bool:
        return obj in self._objects

    def size(self) -> int:
        return len(self._objects)

    def add_with_update(self, obj: Entity) -> 'Group':
        """Add a member and recompute the group's bounds from scratch."""
        self._restore_objects_state()
        self.reset_transform()
        if obj not in self._objects:
            self._objects.append(obj)
            obj.enter_group(self.id)
        self._calc_bounds()
        self._update_objects_coords()
        self.set_coords()
        logger.debug(f"Group {self.id} gained a member, size {self.size()}")
        return self

    def remove_with_update(self, obj: Entity) -> 'Group':
        """Release a member (in canvas coordinates) and recompute the bounds."""
        self._restore_objects_state()
        self.reset_transform()
        if obj in self._objects:
            self._objects.remove(obj)
            obj.leave_group()
        self._calc_bounds()
        self._update_objects_coords()
        self.set_coords()
        logger.debug(f"Group {self.id} lost a member, size {self.size()}")
        return self

    def destroy(self) -> List[Entity]:
        """
        Dissolve the group: realize its transform into every member and
        release them. Returns the former members.
        """
        self._restore_objects_state()
        members = self._objects
        for obj in members:
            obj.leave_group()
            obj.set_active(False)
        self._objects = []
        logger.debug(f"Group {self.id} dissolved ({len(members)} members)")
        return members

    def reset_transform(self) -> 'Group':
        """Identity scale and angle, keeping the position."""
        self.scale_x = 1.0
        self.scale_y = 1.0
        self.set(angle=0)
        return self

    def set_objects_coords(self) -> None:
        for obj in self._objects:
            obj.set_coords()

    # --- Bounds -------------------------------------------------------------

    def _calc_bounds(self) -> None:
        points = []
        for obj in self._objects:
            obj.set_coords()
            points.extend(control.as_point() for control in obj.o_coords.values())

        bounds = BoundingBox.from_points(points)
        self.width = bounds.width
        self.height = bounds.height
        center = bounds.center
        self.left = center.x
        self.top = center.y

    def _update_objects_coords(self) -> None:
        """Re-express every member relative to the group's center."""
        center = self.get_center_point()
        for obj in self._objects:
            obj.left -= center.x
            obj.top -= center.y
            obj.set_coords()

    def _restore_objects_state(self) -> None:
        """Write the group's transform back into every member."""
        matrix = self.get_transform_matrix()
        for obj in self._objects:
            position = transform_point(Point(obj.left, obj.top), matrix)
            obj.set(
                angle=obj.angle + self.angle,
                left=position.x,
                top=position.y,
                scale_x=obj.scale_x * self.scale_x,
                scale_y=obj.scale_y * self.scale_y,
            )
            obj.set_coords()
