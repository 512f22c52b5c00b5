"""Snapshot export for the concept graph."""

import logging
from dataclasses import replace
from pathlib import Path

import cairo

from contextgraph.config import get_data_dir
from contextgraph.renderer import Frame, GraphRenderer
from contextgraph.transform import Camera

logger = logging.getLogger(__name__)


class GraphExporter:
    """Renders a frame offscreen, fitted to the node bounds."""

    PADDING = 50

    def __init__(self, renderer: GraphRenderer):
        self.renderer = renderer

    def fit_camera(self, frame: Frame, scale: float = 2.0):
        """Camera framing every placed node, or None if nothing is placed."""
        placed = [n for n in frame.nodes if n.has_position]
        if not placed:
            return None

        min_x = min(n.x for n in placed)
        max_x = max(n.x for n in placed)
        min_y = min(n.y for n in placed)
        max_y = max(n.y for n in placed)

        width = int((max_x - min_x + self.PADDING * 2) * scale)
        height = int((max_y - min_y + self.PADDING * 2) * scale)

        # Put world (min - padding) at the surface's top-left corner
        origin_x = (self.PADDING - min_x) * scale
        origin_y = (self.PADDING - min_y) * scale
        return Camera(zoom=scale,
                      pan_x=origin_x - width / 2,
                      pan_y=origin_y - height / 2,
                      width=width, height=height)

    def export_png(self, frame: Frame, filepath: str,
                   scale: float = 2.0, transparent: bool = False) -> bool:
        """Export the graph to a PNG image.

        The camera in ``frame`` is ignored; hover, selection, search and
        strength filter are kept. Returns False when there is nothing to draw.
        """
        camera = self.fit_camera(frame, scale)
        if camera is None:
            return False

        surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, int(camera.width), int(camera.height))
        cr = cairo.Context(surface)

        self.renderer.render(cr, replace(frame, camera=camera))

        # Background goes underneath what was drawn
        if not transparent:
            cr.set_operator(cairo.OPERATOR_DEST_OVER)
            cr.set_source_rgb(*self.renderer.palette.background)
            cr.paint()

        surface.write_to_png(filepath)
        logger.info("Exported %dx%d snapshot to %s", camera.width, camera.height, filepath)
        return True


def get_export_dir() -> Path:
    """Get the default export directory."""
    export_dir = get_data_dir() / "exports"
    export_dir.mkdir(exist_ok=True)
    return export_dir
