"""
SceneForge Core Module

Contains the Qt-free data model:
- Geometry: points, boxes, angles, affine matrices, intersections
- Options: typed configuration for entities and the surface
- Entity: transform state and the coordinate engine
- Shapes: Rect, Image
- Group: transient multi-selection aggregate
- Events: publish/subscribe bus
"""

# Import order matters - geometry first, then options, entity, shapes, group
from .geometry import (
    Point, BoundingBox, degrees_to_radians, radians_to_degrees,
    normalize_angle, rotate_point, compose_matrix, invert_matrix,
    multiply_matrices, transform_point
)
from .options import ObjectOptions, RectOptions, ImageOptions, CanvasOptions
from .entity import CORNER_IDS, ControlPoint, Drawable, Entity, HitSquare
from .shapes import Rect, Image
from .group import Group
from .events import (
    EventBus, Subscription, ObjectEvent, PointerEvent,
    SelectionEvent, RenderEvent, EVENT_NAMES
)

__all__ = [
    'Point', 'BoundingBox', 'degrees_to_radians', 'radians_to_degrees',
    'normalize_angle', 'rotate_point', 'compose_matrix', 'invert_matrix',
    'multiply_matrices', 'transform_point',
    'ObjectOptions', 'RectOptions', 'ImageOptions', 'CanvasOptions',
    'CORNER_IDS', 'ControlPoint', 'Drawable', 'Entity', 'HitSquare',
    'Rect', 'Image',
    'Group',
    'EventBus', 'Subscription', 'ObjectEvent', 'PointerEvent',
    'SelectionEvent', 'RenderEvent', 'EVENT_NAMES',
]
