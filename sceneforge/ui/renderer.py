"""
QPainter renderer for SceneForge.

Reads each entity's final geometry and paints it. Entities are drawn in
their own frame (center, rotation, signed scale with flips); borders and
control squares are drawn from the entity's o_coords.
"""

from typing import Optional
import re

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import (
    QBrush, QColor, QImage, QPainter, QPen, QPixmap, QPolygonF, QTransform
)
import numpy as np

from ..core.entity import CORNER_IDS, Entity
from ..core.group import Group
from ..core.options import CanvasOptions
from ..graphics.selection import GroupSelector

_RGB = re.compile(r"rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)")


def to_qcolor(value: Optional[str], opacity: float = 1.0) -> Optional[QColor]:
    """
    Convert a CSS-style color ("red", "#ff0000", "rgb(...)", "rgba(...)").

    Returns None for None.
    """
    if value is None:
        return None
    match = _RGB.fullmatch(value.strip())
    if match:
        r, g, b, a = match.groups()
        color = QColor(int(float(r)), int(float(g)), int(float(b)))
        color.setAlphaF(float(a) if a is not None else 1.0)
    else:
        color = QColor(value)
    color.setAlphaF(color.alphaF() * opacity)
    return color


def to_qtransform(matrix: np.ndarray) -> QTransform:
    """Convert a 3x3 column-vector affine matrix to a QTransform."""
    return QTransform(matrix[0, 0], matrix[1, 0],
                      matrix[0, 1], matrix[1, 1],
                      matrix[0, 2], matrix[1, 2])

class QtRenderer:
    """
    Paints entities onto a QPainter.

    Create one per paint event around an active painter.
    """

    def __init__(self, painter: QPainter):
        self.painter = painter
        self.painter.setRenderHint(QPainter.RenderHint.Antialiasing)

    def clear(self, options: CanvasOptions) -> None:
        color = to_qcolor(options.background_color)
        if color is not None:
            self.painter.fillRect(QRectF(0, 0, options.width, options.height), color)

    # --- Entities -----------------------------------------------------------

    def _begin_entity(self, entity: Entity) -> None:
        """Move the painter into the entity's centered frame."""
        self.painter.save()
        self.painter.setTransform(to_qtransform(entity.get_transform_matrix()), True)

    def _local_rect(self, entity: Entity) -> QRectF:
        bounds = entity.compute_local_bounds()
        return QRectF(bounds.min_x, bounds.min_y, bounds.width, bounds.height)

    def _should_skip(self, entity: Entity) -> bool:
        return (not entity.visible or entity.width == 0 or entity.height == 0
                or entity.scale_x == 0 or entity.scale_y == 0)

    def draw_rect(self, entity: Entity) -> None:
        if self._should_skip(entity):
            return

        self._begin_entity(entity)
        fill = to_qcolor(entity.fill)
        stroke = to_qcolor(entity.stroke)
        self.painter.setBrush(QBrush(fill) if fill is not None else Qt.BrushStyle.NoBrush)
        if stroke is not None:
            pen = QPen(stroke, entity.stroke_width)
            pen.setCosmetic(True)
            self.painter.setPen(pen)
        else:
            self.painter.setPen(Qt.PenStyle.NoPen)

        rect = self._local_rect(entity)
        if entity.rx or entity.ry:
            self.painter.drawRoundedRect(rect, entity.rx, entity.ry)
        else:
            self.painter.drawRect(rect)
        self.painter.restore()

        self.draw_controls(entity)

    def draw_image(self, entity: Entity) -> None:
        if self._should_skip(entity) or entity.source is None:
            return

        self._begin_entity(entity)
        rect = self._local_rect(entity)
        if isinstance(entity.source, QPixmap):
            self.painter.drawPixmap(rect.toRect(), entity.source)
        elif isinstance(entity.source, QImage):
            self.painter.drawImage(rect, entity.source)
        self.painter.restore()

        self.draw_controls(entity)

    def draw_group(self, group: Group) -> None:
        """Paint members in the group's frame, then the group's own border."""
        if self._should_skip(group):
            return

        self._begin_entity(group)
        for member in group.get_objects():
            if member.visible:
                member.render(self)
        self.painter.restore()

        self.draw_controls(group)

    # --- Selection decorations ----------------------------------------------

    def draw_controls(self, entity: Entity) -> None:
        """Border and control squares of an active, ungrouped entity."""
        if not entity.active or entity.group_id is not None:
            return
        if not entity.o_coords:
            entity.set_coords()

        opacity = entity.border_opacity_when_moving if entity.is_moving else 1.0
        border = to_qcolor(entity.border_color, opacity)
        pen = QPen(border, entity.border_width)
        self.painter.save()
        self.painter.setPen(pen)
        self.painter.setBrush(Qt.BrushStyle.NoBrush)
        corners = [QPointF(p.x, p.y) for p in entity.get_corner_points()]
        self.painter.drawPolygon(QPolygonF(corners))

        if entity.has_controls and not entity.is_moving:
            self._draw_squares(entity)
        self.painter.restore()

    def _draw_squares(self, entity: Entity) -> None:
        coords = entity.o_coords
        corner_color = to_qcolor(entity.corner_color)
        self.painter.setPen(QPen(corner_color, 1))
        if entity.transparent_corners:
            self.painter.setBrush(Qt.BrushStyle.NoBrush)
        else:
            self.painter.setBrush(QBrush(corner_color))

        for name in CORNER_IDS:
            if name == "mtr" and not entity.has_rotating_point:
                continue
            square = [QPointF(p.x, p.y) for p in coords[name].corner.points()]
            self.painter.drawPolygon(QPolygonF(square))

        if entity.has_rotating_point:
            # stem from the top edge to the rotation square
            handle = coords["mtr"].corner.points()
            cx = sum(p.x for p in handle) / 4
            cy = sum(p.y for p in handle) / 4
            self.painter.drawLine(QPointF(coords["mt"].x, coords["mt"].y), QPointF(cx, cy))

    def draw_selection(self, selector: GroupSelector, options: CanvasOptions) -> None:
        """Filled marquee with its border."""
        p1, p2 = selector.normalized()
        rect = QRectF(p1.x, p1.y, p2.x - p1.x, p2.y - p1.y)
        self.painter.save()
        self.painter.fillRect(rect, to_qcolor(options.selection_color))
        self.painter.setPen(QPen(to_qcolor(options.selection_border_color),
                                 options.selection_line_width))
        self.painter.setBrush(Qt.BrushStyle.NoBrush)
        self.painter.drawRect(rect)
        self.painter.restore()
