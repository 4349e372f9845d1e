"""
SceneForge Options

Typed configuration for entities and the surface. Unknown keywords are
rejected by the dataclass constructors; invalid values raise ValueError.
"""

from dataclasses import dataclass, fields
from typing import Any, Optional

ORIGINS_X = ("left", "center", "right")
ORIGINS_Y = ("top", "center", "bottom")


@dataclass
class ObjectOptions:
    """Transform and appearance settings shared by every entity kind."""
    # Position and size
    left: float = 0.0
    top: float = 0.0
    width: float = 0.0           # design-time size, unaffected by scale
    height: float = 0.0
    scale_x: float = 1.0         # signed; negative mirrors
    scale_y: float = 1.0
    angle: float = 0.0           # degrees
    origin_x: str = "center"     # "left", "center", "right"
    origin_y: str = "center"     # "top", "center", "bottom"
    flip_x: bool = False
    flip_y: bool = False

    # Geometry-affecting visual parameters
    padding: float = 0.0
    stroke_width: float = 1.0
    corner_size: float = 12.0
    border_width: float = 1.0
    rotating_point_offset: float = 40.0

    # Controls
    has_controls: bool = True
    has_rotating_point: bool = True
    visible: bool = True

    # Appearance, passed through to the renderer untouched
    fill: Optional[str] = "rgb(0,0,0)"
    stroke: Optional[str] = None
    border_color: str = "red"
    corner_color: str = "red"
    transparent_corners: bool = False
    border_opacity_when_moving: float = 0.4

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ValueError if any setting is out of range."""
        if self.origin_x not in ORIGINS_X:
            raise ValueError(f"origin_x must be one of {ORIGINS_X}, got {self.origin_x!r}")
        if self.origin_y not in ORIGINS_Y:
            raise ValueError(f"origin_y must be one of {ORIGINS_Y}, got {self.origin_y!r}")
        if self.width < 0 or self.height < 0:
            raise ValueError("width and height must not be negative")
        if self.padding < 0:
            raise ValueError("padding must not be negative")
        if self.stroke_width < 0:
            raise ValueError("stroke_width must not be negative")
        if self.corner_size <= 0:
            raise ValueError("corner_size must be positive")
        if not 0 <= self.border_opacity_when_moving <= 1:
            raise ValueError("border_opacity_when_moving must be between 0 and 1")

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class RectOptions(ObjectOptions):
    """Rectangle settings."""
    rx: float = 0.0              # corner radii
    ry: float = 0.0

    def validate(self) -> None:
        super().validate()
        if self.rx < 0 or self.ry < 0:
            raise ValueError("corner radii must not be negative")


@dataclass
class ImageOptions(ObjectOptions):
    """
    Image settings.

    ``source`` is an already-loaded image (for example a QImage). When
    width/height are left at 0 they are taken from the source.
    """
    source: Any = None

    def __post_init__(self):
        if self.source is not None:
            if not self.width:
                self.width = float(_dimension(self.source, "width"))
            if not self.height:
                self.height = float(_dimension(self.source, "height"))
        super().__post_init__()


@dataclass
class CanvasOptions:
    """Surface-wide settings."""
    width: float = 800.0
    height: float = 600.0
    background_color: Optional[str] = None

    # Marquee appearance
    selection_color: str = "rgba(100, 100, 255, 0.3)"
    selection_border_color: str = "red"
    selection_line_width: float = 1.0

    # Cursor names
    default_cursor: str = "default"
    hover_cursor: str = "move"
    move_cursor: str = "move"
    rotation_cursor: str = "crosshair"

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError("canvas width and height must not be negative")
        if self.selection_line_width < 0:
            raise ValueError("selection_line_width must not be negative")


def _dimension(source: Any, name: str) -> float:
    """Read width/height from an image, accepting Qt-style methods or plain attributes."""
    value = getattr(source, name, 0)
    return value() if callable(value) else value
