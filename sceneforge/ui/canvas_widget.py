"""
SceneForge canvas widget.

A plain QWidget that forwards mouse input to a Canvas and paints it
with QtRenderer.
"""

from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QMouseEvent, QPainter, QPaintEvent
from PyQt6.QtWidgets import QWidget

from ..core.events import SelectionEvent
from ..core.geometry import Point
from ..graphics.surface import Canvas
from .renderer import QtRenderer

# CSS cursor names used by the canvas -> Qt cursor shapes
CURSOR_SHAPES = {
    "default": Qt.CursorShape.ArrowCursor,
    "move": Qt.CursorShape.SizeAllCursor,
    "crosshair": Qt.CursorShape.CrossCursor,
    "pointer": Qt.CursorShape.PointingHandCursor,
    "nw-resize": Qt.CursorShape.SizeFDiagCursor,
    "se-resize": Qt.CursorShape.SizeFDiagCursor,
    "ne-resize": Qt.CursorShape.SizeBDiagCursor,
    "sw-resize": Qt.CursorShape.SizeBDiagCursor,
    "w-resize": Qt.CursorShape.SizeHorCursor,
    "e-resize": Qt.CursorShape.SizeHorCursor,
    "n-resize": Qt.CursorShape.SizeVerCursor,
    "s-resize": Qt.CursorShape.SizeVerCursor,
}


class SceneCanvasWidget(QWidget):
    """
    Interactive view of a Canvas.

    Left button drives selection and gestures; Shift and Alt are passed
    through as modifier flags.
    """

    # Signals
    selection_changed = pyqtSignal(object)  # SelectionEvent

    def __init__(self, canvas: Optional[Canvas] = None, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.canvas = canvas or Canvas()
        self.setMouseTracking(True)
        self.setMinimumSize(int(self.canvas.options.width), int(self.canvas.options.height))

        self._subscriptions = [
            self.canvas.bus.on("selection:changed", self._on_selection_changed),
        ]

    def _on_selection_changed(self, event: SelectionEvent):
        self.selection_changed.emit(event)

    def closeEvent(self, event):
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()
        super().closeEvent(event)

    # --- Input --------------------------------------------------------------

    def _pointer(self, event: QMouseEvent) -> Point:
        pos = event.position()
        return Point(pos.x(), pos.y())

    def _modifiers(self, event: QMouseEvent) -> dict:
        modifiers = event.modifiers()
        return {
            "shift": bool(modifiers & Qt.KeyboardModifier.ShiftModifier),
            "alt": bool(modifiers & Qt.KeyboardModifier.AltModifier),
        }

    def _update_cursor(self, pointer: Point):
        name = self.canvas.cursor_for(pointer)
        self.setCursor(CURSOR_SHAPES.get(name, Qt.CursorShape.ArrowCursor))

    def mousePressEvent(self, event: QMouseEvent):
        """Handle mouse press."""
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        self.canvas.on_mouse_down(self._pointer(event), raw=event, **self._modifiers(event))
        self.update()

    def mouseMoveEvent(self, event: QMouseEvent):
        """Handle mouse move."""
        pointer = self._pointer(event)
        self.canvas.on_mouse_move(pointer, raw=event, **self._modifiers(event))
        self._update_cursor(pointer)
        if self.canvas.transforms.is_transforming or self.canvas.selection.is_selecting:
            self.update()

    def mouseReleaseEvent(self, event: QMouseEvent):
        """Handle mouse release."""
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        pointer = self._pointer(event)
        self.canvas.on_mouse_up(pointer, raw=event, **self._modifiers(event))
        self._update_cursor(pointer)
        self.update()

    # --- Painting -----------------------------------------------------------

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        try:
            self.canvas.render_all(QtRenderer(painter))
        finally:
            painter.end()
