#!/usr/bin/env python3
"""
SceneForge - Demo Entry Point

Opens a window with a few shapes to select, drag, resize and rotate.
Run with: python -m sceneforge.main
"""

import logging
import sys

from PyQt6.QtWidgets import QApplication, QMainWindow


def build_demo_canvas():
    """A canvas holding three rectangles."""
    from .core.shapes import Rect
    from .graphics.surface import Canvas

    canvas = Canvas()
    canvas.add(
        Rect(left=200, top=200, width=160, height=100, fill="rgb(70,130,180)"),
        Rect(left=450, top=260, width=120, height=120, angle=30,
             fill="rgba(220,80,60,0.8)", rx=12, ry=12),
        Rect(left=320, top=420, width=220, height=60, fill="#3c9d5d",
             stroke="black", stroke_width=2),
    )
    return canvas


def main():
    """Main entry point for the SceneForge demo."""
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    logger = logging.getLogger("sceneforge")

    app = QApplication(sys.argv)
    app.setApplicationName("SceneForge")
    app.setApplicationVersion("0.1.0")

    from .ui.canvas_widget import SceneCanvasWidget

    widget = SceneCanvasWidget(build_demo_canvas())
    widget.selection_changed.connect(
        lambda event: logger.info(
            f"Selection: object={event.active_object!r} group={event.active_group!r}"
        )
    )

    window = QMainWindow()
    window.setWindowTitle("SceneForge")
    window.setCentralWidget(widget)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
