"""
SceneForge - interactive 2D scene editing.

Entities are added to a Canvas and manipulated with pointer input:
select, drag, resize, rotate, marquee and shift-click grouping. The
core and graphics packages are Qt-free; the ui package paints with
PyQt6.
"""

__version__ = "0.1.0"
