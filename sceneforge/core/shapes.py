"""
SceneForge Shapes

Concrete entity kinds. Each one hands itself to the matching renderer
method; the renderer decides how pixels are produced.
"""

from typing import Any

from .entity import Entity
from .geometry import BoundingBox
from .options import ImageOptions, RectOptions


class Rect(Entity):
    """A rectangle, optionally with rounded corners."""

    type = "rect"
    options_class = RectOptions

    def render(self, renderer: Any) -> None:
        renderer.draw_rect(self)


class Image(Entity):
    """An already-loaded image drawn into the entity's box."""

    type = "image"
    options_class = ImageOptions

    def render(self, renderer: Any) -> None:
        renderer.draw_image(self)

    def compute_local_bounds(self) -> BoundingBox:
        if self.source is None:
            return BoundingBox(0, 0, 0, 0)
        return super().compute_local_bounds()
