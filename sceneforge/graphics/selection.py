"""
Selection Handling for SceneForge

Manages the active object / active group, the marquee (rubber band)
selection, and shift-click group membership toggling.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence
import logging

from ..core.entity import Entity
from ..core.events import EventBus, SelectionEvent
from ..core.geometry import Point
from ..core.group import Group

logger = logging.getLogger(__name__)


@dataclass
class GroupSelector:
    """Marquee anchored at the pointer-down point (ex, ey)."""
    ex: float
    ey: float
    width: float = 0.0
    height: float = 0.0

    def normalized(self) -> tuple:
        """Corners (min_x, min_y) and (max_x, max_y)."""
        x2 = self.ex + self.width
        y2 = self.ey + self.height
        return (Point(min(self.ex, x2), min(self.ey, y2)),
                Point(max(self.ex, x2), max(self.ey, y2)))


class SelectionManager:
    """
    Manages selection state and operations.

    Features:
    - Single selection (active object)
    - Multi-selection through a transient Group (active group)
    - Marquee selection
    - Shift-click membership toggling

    At most one of active object / active group is set at a time.
    """

    def __init__(self, bus: EventBus, objects: Callable[[], Sequence[Entity]]):
        """
        Initialize selection manager.

        Args:
            bus: Event bus receiving selection:changed / selection:cleared
            objects: Returns the surface's entities in z-order
        """
        self._bus = bus
        self._objects = objects
        self._active_object: Optional[Entity] = None
        self._active_group: Optional[Group] = None
        self._group_selector: Optional[GroupSelector] = None
        self._depth = 0

    @contextmanager
    def _transition(self) -> Iterator[None]:
        """Emit selection signals once, when the outermost change completes."""
        before = (self._active_object, self._active_group)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
        if self._depth == 0 and (self._active_object, self._active_group) != before:
            payload = SelectionEvent(self._active_object, self._active_group)
            self._bus.emit("selection:changed", payload)
            if self._active_object is None and self._active_group is None:
                self._bus.emit("selection:cleared", payload)

    # --- Active selection ---------------------------------------------------

    def get_active_object(self) -> Optional[Entity]:
        return self._active_object

    def get_active_group(self) -> Optional[Group]:
        return self._active_group

    def get_selection(self) -> Optional[Entity]:
        """The active group if there is one, else the active object."""
        return self._active_group or self._active_object

    def set_active_object(self, obj: Entity) -> None:
        with self._transition():
            if self._active_object is not None and self._active_object is not obj:
                self._active_object.set_active(False)
            if self._active_group is not None:
                self.discard_active_group()
            self._active_object = obj
            obj.set_active(True)

    def set_active_group(self, group: Optional[Group]) -> None:
        with self._transition():
            if group is not None and self._active_object is not None:
                self.discard_active_object()
            self._active_group = group
            if group is not None:
                group.set_active(True)

    def discard_active_object(self) -> None:
        with self._transition():
            if self._active_object is not None:
                self._active_object.set_active(False)
            self._active_object = None

    def discard_active_group(self) -> None:
        """Dissolve the active group, releasing its members."""
        with self._transition():
            group = self._active_group
            self._active_group = None
            if group is not None:
                group.destroy()
                group.set_active(False)

    def deactivate_all(self) -> None:
        with self._transition():
            for obj in self._objects():
                obj.set_active(False)
            self.discard_active_group()
            self.discard_active_object()

    # --- Marquee ------------------------------------------------------------

    @property
    def group_selector(self) -> Optional[GroupSelector]:
        return self._group_selector

    @property
    def is_selecting(self) -> bool:
        return self._group_selector is not None

    def start_marquee(self, pointer: Point) -> GroupSelector:
        """
        Start selection rectangle (rubber band selection).

        Args:
            pointer: Starting point
        """
        self._group_selector = GroupSelector(pointer.x, pointer.y)
        self.deactivate_all()
        return self._group_selector

    def update_marquee(self, pointer: Point) -> None:
        """
        Update selection rectangle.

        Args:
            pointer: Current pointer position
        """
        selector = self._group_selector
        if selector is None:
            return
        selector.width = pointer.x - selector.ex
        selector.height = pointer.y - selector.ey

    def finish_marquee(self) -> List[Entity]:
        """
        Finish selection rectangle and select the entities it touches.

        One match becomes the active object, several become a new active
        group in z-order, none leaves the selection empty.

        Returns:
            The matched entities
        """
        selector = self._group_selector
        self._group_selector = None
        if selector is None:
            return []

        p1, p2 = selector.normalized()
        found = [obj for obj in self._objects()
                 if obj.intersects_with_rect(p1, p2) or obj.is_contained_within_rect(p1, p2)]

        with self._transition():
            if len(found) == 1:
                self.set_active_object(found[0])
            elif len(found) > 1:
                for obj in found:
                    obj.set_active(True)
                self.set_active_group(Group(found))

        logger.debug(f"Marquee ({p1.x:g}, {p1.y:g})-({p2.x:g}, {p2.y:g}) matched {len(found)}")
        return found

    # --- Click logic --------------------------------------------------------

    def should_clear_selection(self, target: Optional[Entity], shift: bool = False) -> bool:
        """True when a pointer-down should start a marquee instead of a selection."""
        if target is None:
            return True
        group = self._active_group
        return (group is not None and not group.contains(target)
                and group is not target and not shift)

    def should_handle_group_logic(self, target: Entity, shift: bool = False) -> bool:
        """True when a shift-click toggles group membership."""
        if not shift:
            return False
        if self._active_group is not None:
            return True
        return self._active_object is not None and self._active_object is not target

    def handle_group_logic(self, target: Entity,
                           find_target_skip_group: Callable[[], Optional[Entity]]) -> None:
        """
        Toggle ``target``'s membership in the multi-selection.

        Args:
            target: Entity (or the active group) under the pointer
            find_target_skip_group: Re-runs the hit search ignoring the active group
        """
        with self._transition():
            if target is self._active_group:
                target = find_target_skip_group()
                if target is None or isinstance(target, Group):
                    return

            group = self._active_group
            if group is not None:
                if group.contains(target):
                    group.remove_with_update(target)
                    target.set_active(False)
                    if group.size() == 1:
                        remaining = group.get_objects()[0]
                        self.discard_active_group()
                        self.set_active_object(remaining)
                        logger.debug("Group dropped to one member, selecting it directly")
                        return
                else:
                    group.add_with_update(target)
                    target.set_active(True)
                group.set_active(True)
            elif self._active_object is not None and target is not self._active_object:
                previous = self._active_object
                self._active_object = None
                previous.set_active(True)
                target.set_active(True)
                self.set_active_group(Group([previous, target]))
                logger.debug("Shift-click formed a two member group")
