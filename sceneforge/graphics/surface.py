"""
SceneForge Canvas - the interactive surface.

Owns the entity list (the arena) and routes pointer input through hit
testing, selection and the gesture controller. Drawing is delegated to a
renderer object; this module never touches pixels.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from ..core.entity import Entity
from ..core.events import EventBus, ObjectEvent, PointerEvent, RenderEvent
from ..core.geometry import Point
from ..core.group import Group
from ..core.options import CanvasOptions
from .hit_test import find_target_corner, hit_test, normalize_pointer
from .ordering import compose_render_order
from .selection import SelectionManager
from .transform import Action, TransformManager

logger = logging.getLogger(__name__)

# Resize cursor per handle; the rotation handle uses CanvasOptions.rotation_cursor
CURSOR_MAP: Dict[str, str] = {
    "tr": "ne-resize",
    "br": "se-resize",
    "bl": "sw-resize",
    "tl": "nw-resize",
    "ml": "w-resize",
    "mt": "n-resize",
    "mr": "e-resize",
    "mb": "s-resize",
}

_ACTION_EVENTS = {
    Action.DRAG: "object:moving",
    Action.SCALE: "object:scaling",
    Action.SCALE_X: "object:scaling",
    Action.SCALE_Y: "object:scaling",
    Action.ROTATE: "object:rotating",
}


class Canvas:
    """
    Main surface for displaying and editing entities.

    Features:
    - Entity insertion/removal
    - Hit testing (body and handles)
    - Click, shift-click and marquee selection
    - Drag, resize and rotate gestures
    - Lifecycle signals on an EventBus

    Pointer coordinates are surface-local; modifiers arrive as flags.
    """

    def __init__(self, options: Optional[CanvasOptions] = None,
                 bus: Optional[EventBus] = None):
        """
        Initialize canvas.

        Args:
            options: Surface settings (defaults when omitted)
            bus: Event bus to publish on (a new one when omitted)
        """
        self.options = options or CanvasOptions()
        self.bus = bus or EventBus()
        self._objects: List[Entity] = []
        self.selection = SelectionManager(self.bus, self.get_objects)
        self.transforms = TransformManager(self.get_object_by_id)

    def __len__(self) -> int:
        return len(self._objects)

    # --- Arena --------------------------------------------------------------

    def add(self, *entities: Entity) -> 'Canvas':
        """Insert entities on top of the z-order."""
        for entity in entities:
            if entity in self._objects:
                continue
            self._objects.append(entity)
            entity.save_state()
            entity.set_coords()
            logger.info(f"Added {entity.type} {entity.id}")
            self.bus.emit("object:added", ObjectEvent(entity))
        return self

    def remove(self, *entities: Entity) -> 'Canvas':
        """Take entities off the surface, dropping them from the selection first."""
        for entity in entities:
            if entity not in self._objects:
                continue
            group = self.selection.get_active_group()
            if group is not None and group.contains(entity):
                self.selection.discard_active_group()
            if self.selection.get_active_object() is entity:
                self.selection.discard_active_object()
            self._objects.remove(entity)
            logger.info(f"Removed {entity.type} {entity.id}")
            self.bus.emit("object:removed", ObjectEvent(entity))
        return self

    def get_objects(self) -> List[Entity]:
        return list(self._objects)

    def get_object_by_id(self, entity_id: UUID) -> Optional[Entity]:
        """Look up an entity, or the active group, by its id."""
        group = self.selection.get_active_group()
        if group is not None and group.id == entity_id:
            return group
        for entity in self._objects:
            if entity.id == entity_id:
                return entity
        return None

    # --- Selection passthroughs ---------------------------------------------

    def get_active_object(self) -> Optional[Entity]:
        return self.selection.get_active_object()

    def get_active_group(self) -> Optional[Group]:
        return self.selection.get_active_group()

    def set_active_object(self, entity: Entity) -> 'Canvas':
        self.selection.set_active_object(entity)
        return self

    def deactivate_all(self) -> 'Canvas':
        self.selection.deactivate_all()
        return self

    # --- Hit testing --------------------------------------------------------

    def contains_point(self, point: Point, target: Entity) -> bool:
        return hit_test(point, target, self.selection.get_active_group()).inside

    def find_target(self, point: Point, skip_group: bool = False) -> Optional[Entity]:
        """
        Topmost entity under ``point``.

        The active group is tried first unless ``skip_group`` is set.
        """
        group = self.selection.get_active_group()
        if group is not None and not skip_group and self.contains_point(point, group):
            return group

        for entity in reversed(self._objects):
            if self.contains_point(point, entity):
                return entity
        return None

    def cursor_for(self, point: Point) -> str:
        """Cursor name for the handle or body under ``point``."""
        session = self.transforms.session
        if session is not None and session.action is Action.DRAG:
            return self.options.move_cursor

        target = self.find_target(point)
        if target is None:
            return self.options.default_cursor

        group = self.selection.get_active_group()
        corner = None
        if group is None or not group.contains(target):
            corner = find_target_corner(point, target)

        if corner is None:
            return self.options.hover_cursor
        if corner in CURSOR_MAP:
            return CURSOR_MAP[corner]
        if corner == "mtr" and target.has_rotating_point:
            return self.options.rotation_cursor
        return self.options.default_cursor

    # --- Pointer flow -------------------------------------------------------

    def on_mouse_down(self, pointer: Point, shift: bool = False, alt: bool = False,
                      raw: Any = None) -> Optional[Entity]:
        """
        Handle a primary-button press.

        Args:
            pointer: Surface-local pointer position
            shift: Shift held (membership toggle)
            alt: Alt held
            raw: Toolkit event, forwarded in the mouse:down payload

        Returns:
            The entity or group under the pointer, if any
        """
        if self.transforms.is_transforming or self.selection.is_selecting:
            logger.debug("Pointer down ignored, a session is still live")
            return None

        target = self.find_target(pointer)

        if self.selection.should_clear_selection(target, shift):
            self.selection.start_marquee(pointer)
        else:
            if self.selection.should_handle_group_logic(target, shift):
                self.selection.handle_group_logic(
                    target, lambda: self.find_target(pointer, skip_group=True))
                transform_target = self.selection.get_selection()
            else:
                group = self.selection.get_active_group()
                if target is not group and target is not self.selection.get_active_object():
                    self.selection.deactivate_all()
                if target is not group:
                    self.selection.set_active_object(target)
                transform_target = target

            # a gesture only starts on the entity actually under the pointer
            if (transform_target is not None
                    and self.contains_point(pointer, transform_target)):
                local = normalize_pointer(pointer, transform_target,
                                          self.selection.get_active_group())
                corner = find_target_corner(local, transform_target)
                self.transforms.start_transform(transform_target, pointer, corner)

        self.bus.emit("mouse:down", PointerEvent(target, pointer, raw))
        return target

    def on_mouse_move(self, pointer: Point, shift: bool = False, alt: bool = False,
                      raw: Any = None) -> None:
        """Handle pointer movement: marquee update, hover, or a gesture step."""
        target = None
        if self.selection.is_selecting:
            self.selection.update_marquee(pointer)
        elif not self.transforms.is_transforming:
            target = self.find_target(pointer)
        else:
            session = self.transforms.session
            if self.transforms.update_transform(pointer, shift=shift, alt=alt):
                moved = self.transforms.get_target()
                self.bus.emit(_ACTION_EVENTS[session.action], ObjectEvent(moved))

        self.bus.emit("mouse:move", PointerEvent(target, pointer, raw))

    def on_mouse_up(self, pointer: Point, shift: bool = False, alt: bool = False,
                    raw: Any = None) -> Optional[Entity]:
        """
        Handle a primary-button release.

        Ends the live gesture (refreshing every entity's coordinates and
        emitting object:modified when the target changed) or resolves the
        marquee into a selection.
        """
        target = None
        if self.transforms.is_transforming:
            target = self.transforms.finish_transform()
            for entity in self._objects:
                entity.set_coords()
            if target is not None:
                target.set_coords()
                if target.has_state_changed():
                    self.bus.emit("object:modified", ObjectEvent(target))

        if self.selection.is_selecting:
            self.selection.finish_marquee()

        group = self.selection.get_active_group()
        if group is not None:
            group.set_objects_coords()
            group.set_coords()
            group.is_moving = False

        self.bus.emit("mouse:up", PointerEvent(target, pointer, raw))
        return target

    # --- Rendering ----------------------------------------------------------

    def get_render_order(self) -> List[Entity]:
        return compose_render_order(self._objects,
                                    self.selection.get_active_group(),
                                    self.selection.get_active_object())

    def render_all(self, renderer: Any) -> None:
        """Paint every visible entity, selection last, then the live marquee."""
        self.bus.emit("before:render", RenderEvent(renderer))
        renderer.clear(self.options)
        for entity in self.get_render_order():
            if entity.visible:
                entity.render(renderer)
        self._render_selector(renderer)
        self.bus.emit("after:render", RenderEvent(renderer))

    def render_top(self, renderer: Any) -> None:
        """Paint only the marquee layer."""
        self._render_selector(renderer)
        self.bus.emit("after:render", RenderEvent(renderer))

    def _render_selector(self, renderer: Any) -> None:
        selector = self.selection.group_selector
        if selector is not None:
            renderer.draw_selection(selector, self.options)
