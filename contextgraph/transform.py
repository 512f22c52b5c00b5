"""Camera state and the screen/world coordinate mapping.

World coordinates are centred on the surface: a world point at the origin
sits in the middle of the drawing area when the pan offset is zero.

    screen = center + pan + zoom * world
    world  = (screen - center - pan) / zoom
"""

from dataclasses import dataclass
from typing import Tuple

Point = Tuple[float, float]


@dataclass
class Camera:
    """Zoom, pan and surface size of the single viewport."""
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0
    width: float = 800.0
    height: float = 600.0

    @property
    def center(self) -> Point:
        return self.width / 2, self.height / 2

    @property
    def origin(self) -> Point:
        """Screen position of the world origin."""
        cx, cy = self.center
        return cx + self.pan_x, cy + self.pan_y


def to_world(point: Point, camera: Camera) -> Point:
    """Map a surface-relative screen point to world coordinates."""
    ox, oy = camera.origin
    return (point[0] - ox) / camera.zoom, (point[1] - oy) / camera.zoom


def to_screen(point: Point, camera: Camera) -> Point:
    """Map a world point to surface-relative screen coordinates."""
    ox, oy = camera.origin
    return ox + camera.zoom * point[0], oy + camera.zoom * point[1]
