"""
SceneForge UI Module

Qt collaborators of the Qt-free core:
- QtRenderer: paints entities, controls and the marquee with QPainter
- SceneCanvasWidget: mouse/modifier wiring and repainting
"""

from .renderer import QtRenderer, to_qcolor
from .canvas_widget import SceneCanvasWidget, CURSOR_SHAPES

__all__ = [
    'QtRenderer',
    'to_qcolor',
    'SceneCanvasWidget',
    'CURSOR_SHAPES',
]
