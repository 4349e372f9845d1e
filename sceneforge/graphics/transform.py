"""
Transform Operations for SceneForge

Turns pointer movement into entity updates:
- Translation (drag)
- Scaling via corner handles (free or uniform)
- Single-axis scaling via edge handles
- Rotation via the rotation handle
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple
from uuid import UUID
import logging
import math

from ..core.entity import Entity
from ..core.geometry import (
    Point, normalize_angle, radians_to_degrees
)

logger = logging.getLogger(__name__)


class Action(Enum):
    """What a gesture does to its target."""
    DRAG = "drag"
    SCALE = "scale"
    SCALE_X = "scaleX"
    SCALE_Y = "scaleY"
    ROTATE = "rotate"


# current_action values for Action.SCALE
SCALE_FREE = "scale"
SCALE_EQUALLY = "scaleEqually"

_OPPOSITE = {"left": "right", "right": "left", "top": "bottom", "bottom": "top"}


def action_for_corner(corner: Optional[str]) -> Action:
    """Map the handle under the pointer to the gesture it starts."""
    if corner in ("ml", "mr"):
        return Action.SCALE_X
    if corner in ("mt", "mb"):
        return Action.SCALE_Y
    if corner == "mtr":
        return Action.ROTATE
    if corner in ("tl", "tr", "br", "bl"):
        return Action.SCALE
    return Action.DRAG


def origin_for_corner(corner: Optional[str]) -> Tuple[str, str]:
    """The side held fixed while dragging ``corner``: the opposite one."""
    origin_x = "center"
    origin_y = "center"

    if corner in ("ml", "tl", "bl"):
        origin_x = "right"
    elif corner in ("mr", "tr", "br"):
        origin_x = "left"

    if corner in ("tl", "mt", "tr"):
        origin_y = "bottom"
    elif corner in ("bl", "mb", "br"):
        origin_y = "top"

    return origin_x, origin_y


@dataclass(frozen=True)
class TransformSnapshot:
    """The target's transform when the gesture started."""
    left: float
    top: float
    scale_x: float
    scale_y: float
    angle: float
    origin_x: str
    origin_y: str


@dataclass
class GestureSession:
    """
    The in-progress drag/scale/rotate operation.

    Only TransformManager mutates it. ``origin_x``/``origin_y`` name the
    side currently pinned to ``anchor``; they flip when the pointer drags a
    handle through the anchor. ``measure_origin_x``/``measure_origin_y`` stay
    on the side the gesture started from (or center under Alt) and set the
    sign convention of the local pointer. ``mouse_x_sign``/``mouse_y_sign``
    record which side of the center the pointer is on during center-anchored
    resizing.
    """
    target_id: UUID
    action: Action
    origin_x: str
    origin_y: str
    measure_origin_x: str
    measure_origin_y: str
    ex: float
    ey: float
    left: float              # target center at gesture start
    top: float
    anchor: Point
    original: TransformSnapshot
    current_action: Optional[str] = None
    centered: bool = False
    mouse_x_sign: int = 1
    mouse_y_sign: int = 1


class TransformManager:
    """
    Gesture controller: at most one session at a time.

    The target is held by id and looked up through ``resolve`` on every
    update, so the manager never owns an entity.
    """

    def __init__(self, resolve: Callable[[UUID], Optional[Entity]]):
        """
        Initialize transform manager.

        Args:
            resolve: Looks up an entity (or the active group) by id
        """
        self._resolve = resolve
        self._session: Optional[GestureSession] = None

    @property
    def session(self) -> Optional[GestureSession]:
        return self._session

    @property
    def is_transforming(self) -> bool:
        return self._session is not None

    def get_target(self) -> Optional[Entity]:
        if self._session is None:
            return None
        return self._resolve(self._session.target_id)

    def start_transform(self, target: Entity, pointer: Point,
                        corner: Optional[str] = None) -> Optional[GestureSession]:
        """
        Start a transformation operation.

        Args:
            target: Entity or group under the pointer
            pointer: Pointer position in surface coordinates
            corner: Handle under the pointer, None for a body drag

        Returns:
            The new session, or None if one is already live
        """
        if self._session is not None:
            logger.debug("Gesture already in progress, ignoring start")
            return None

        action = action_for_corner(corner)
        origin_x, origin_y = origin_for_corner(corner)
        center = target.get_center_point()

        target.save_state()
        self._session = GestureSession(
            target_id=target.id,
            action=action,
            origin_x=origin_x,
            origin_y=origin_y,
            measure_origin_x=origin_x,
            measure_origin_y=origin_y,
            ex=pointer.x,
            ey=pointer.y,
            left=center.x,
            top=center.y,
            anchor=target.translate_to_origin_point(center, origin_x, origin_y),
            original=TransformSnapshot(
                left=target.left,
                top=target.top,
                scale_x=target.scale_x,
                scale_y=target.scale_y,
                angle=target.angle,
                origin_x=origin_x,
                origin_y=origin_y,
            ),
        )
        logger.debug(f"Start {action.value} on {target.type} {target.id} (corner={corner})")
        return self._session

    def update_transform(self, pointer: Point, shift: bool = False, alt: bool = False) -> bool:
        """
        Apply one pointer move to the target.

        Args:
            pointer: Pointer position in surface coordinates
            shift: Uniform scaling while held
            alt: Scale around the center while held

        Returns:
            True if the target was updated
        """
        session = self._session
        if session is None:
            return False
        target = self._resolve(session.target_id)
        if target is None:
            return False

        target.is_moving = True

        if session.action is Action.ROTATE:
            self._rotate_object(target, pointer)
        elif session.action is Action.DRAG:
            self._translate_object(target, pointer)
        else:
            reset = False
            if alt != session.centered:
                self._reset_current_transform(target, alt)
                reset = True

            if session.action is Action.SCALE:
                mode = SCALE_EQUALLY if shift else SCALE_FREE
                if (not reset and session.current_action is not None
                        and session.current_action != mode):
                    # switching modes restarts from the original transform
                    self._reset_current_transform(target, alt)
                session.current_action = mode
                self._scale_object(target, pointer, "equally" if shift else None)
            elif session.action is Action.SCALE_X:
                self._scale_object(target, pointer, "x")
            else:
                self._scale_object(target, pointer, "y")

        return True

    def finish_transform(self) -> Optional[Entity]:
        """Finish the current transformation and return its target."""
        session = self._session
        self._session = None
        if session is None:
            return None
        target = self._resolve(session.target_id)
        if target is not None:
            target.is_moving = False
            logger.debug(f"Finish {session.action.value} on {target.type} {target.id}")
        return target

    # --- Updates ------------------------------------------------------------

    def _rotate_object(self, target: Entity, pointer: Point) -> None:
        """Turn the target about its gesture-start center."""
        s = self._session
        last_angle = math.atan2(s.ey - s.top, s.ex - s.left)
        cur_angle = math.atan2(pointer.y - s.top, pointer.x - s.left)
        angle = s.original.angle + radians_to_degrees(cur_angle - last_angle)

        target.set(angle=normalize_angle(angle))
        target.set_position_by_origin(Point(s.left, s.top), "center", "center")

    def _translate_object(self, target: Entity, pointer: Point) -> None:
        """Place the target at its start position plus the pointer travel."""
        s = self._session
        target.set(left=s.original.left + (pointer.x - s.ex),
                   top=s.original.top + (pointer.y - s.ey))

    def _scale_object(self, target: Entity, pointer: Point, by: Optional[str]) -> None:
        """
        Scale the target from the pointer's position relative to the anchor.

        Args:
            target: Entity being scaled
            pointer: Pointer position in surface coordinates
            by: "equally", "x", "y", or None for free scaling of both axes
        """
        s = self._session
        local = target.to_local_point(pointer, s.origin_x, s.origin_y)

        if s.measure_origin_x == "right":
            local.x *= -1
        elif s.measure_origin_x == "center":
            local.x *= s.mouse_x_sign * 2
            if local.x < 0:
                s.mouse_x_sign = -s.mouse_x_sign
                local.x = -local.x

        if s.measure_origin_y == "bottom":
            local.y *= -1
        elif s.measure_origin_y == "center":
            local.y *= s.mouse_y_sign * 2
            if local.y < 0:
                s.mouse_y_sign = -s.mouse_y_sign
                local.y = -local.y

        original = s.original
        new_scale_x = target.scale_x
        new_scale_y = target.scale_y
        width = target.width + target.padding
        height = target.height + target.padding

        # a zero divisor leaves that axis untouched
        if by == "equally":
            dist = local.x + local.y
            last_dist = (target.height * original.scale_y + target.width * original.scale_x
                         + target.padding * 2 - target.stroke_width * 2 + 1)
            if last_dist != 0:
                new_scale_x = original.scale_x * dist / last_dist
                new_scale_y = original.scale_y * dist / last_dist
        elif by is None:
            if width != 0:
                new_scale_x = local.x / width
            if height != 0:
                new_scale_y = local.y / height
        elif by == "x":
            if width != 0:
                new_scale_x = local.x / width
        elif by == "y":
            if height != 0:
                new_scale_y = local.y / height

        target.set(scale_x=new_scale_x, scale_y=new_scale_y)

        # dragging past the anchor mirrors: the pinned side swaps names
        if by != "y" and s.measure_origin_x in _OPPOSITE:
            s.origin_x = (_OPPOSITE[s.measure_origin_x] if new_scale_x < 0
                          else s.measure_origin_x)
        if by != "x" and s.measure_origin_y in _OPPOSITE:
            s.origin_y = (_OPPOSITE[s.measure_origin_y] if new_scale_y < 0
                          else s.measure_origin_y)

        target.set_position_by_origin(s.anchor, s.origin_x, s.origin_y)

    def _reset_current_transform(self, target: Entity, alt: bool) -> None:
        """Restore the original transform and choose the anchor for the new mode."""
        s = self._session
        original = s.original
        target.set(
            scale_x=original.scale_x,
            scale_y=original.scale_y,
            left=original.left,
            top=original.top,
        )

        if alt:
            s.mouse_x_sign = -1 if original.origin_x == "right" else 1
            s.mouse_y_sign = -1 if original.origin_y == "bottom" else 1
            s.origin_x = "center"
            s.origin_y = "center"
        else:
            s.mouse_x_sign = 1
            s.mouse_y_sign = 1
            s.origin_x = original.origin_x
            s.origin_y = original.origin_y

        s.measure_origin_x = s.origin_x
        s.measure_origin_y = s.origin_y
        s.centered = alt
        s.anchor = target.translate_to_origin_point(target.get_center_point(),
                                                    s.origin_x, s.origin_y)
        logger.debug(f"Reset gesture, anchor {s.origin_x}/{s.origin_y}")
