"""
SceneForge Graphics Module

Contains the interaction components (Qt-free):
- Hit testing: body and handle containment
- Transform: gesture controller for drag, resize and rotate
- Selection: active object/group, marquee, shift-click grouping
- Ordering: selection-on-top render order
- Surface: the Canvas wiring them together
"""

from .hit_test import HitResult, hit_test, find_target_corner, normalize_pointer
from .transform import (
    Action, GestureSession, TransformManager, TransformSnapshot,
    action_for_corner, origin_for_corner
)
from .selection import GroupSelector, SelectionManager
from .ordering import compose_render_order
from .surface import Canvas, CURSOR_MAP

__all__ = [
    # Hit testing
    'HitResult',
    'hit_test',
    'find_target_corner',
    'normalize_pointer',
    # Transform
    'Action',
    'GestureSession',
    'TransformManager',
    'TransformSnapshot',
    'action_for_corner',
    'origin_for_corner',
    # Selection
    'GroupSelector',
    'SelectionManager',
    # Ordering
    'compose_render_order',
    # Surface
    'Canvas',
    'CURSOR_MAP',
]
