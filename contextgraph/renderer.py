"""Cairo renderer for the concept graph."""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import cairo

from contextgraph.config import RenderConfig
from contextgraph.graph import Connection, Node
from contextgraph.palette import (
    Palette, connection_style, node_role, shows_label, visible_connections,
)
from contextgraph.transform import Camera


@dataclass
class Frame:
    """Everything one frame is drawn from. The renderer only reads it."""
    nodes: Sequence[Node]
    connections: Sequence[Connection]
    camera: Camera
    hovered_id: Optional[str] = None
    selected_id: Optional[str] = None
    search_query: str = ""
    filter_strength: float = 0.0


class GraphRenderer:
    """Draws connections, nodes and labels under the camera transform."""

    def __init__(self, palette: Optional[Palette] = None,
                 config: Optional[RenderConfig] = None):
        self.palette = palette or Palette.for_theme(dark=True)
        self.config = config or RenderConfig()

    def set_theme(self, dark: bool):
        self.palette = Palette.for_theme(dark)

    def render(self, cr, frame: Frame):
        """Draw one complete frame."""
        camera = frame.camera
        self.clear(cr)
        self.setup_transform(cr, camera)
        self.render_connections(cr, frame.connections, frame.nodes, frame.filter_strength)
        self.render_nodes(cr, frame.nodes, frame.hovered_id, frame.selected_id,
                          frame.search_query)
        self.render_labels(cr, frame.nodes, frame.hovered_id, frame.selected_id,
                           frame.search_query, camera.zoom)
        self.restore_transform(cr)

    def clear(self, cr):
        cr.save()
        cr.set_operator(cairo.OPERATOR_CLEAR)
        cr.paint()
        cr.restore()

    def setup_transform(self, cr, camera: Camera):
        cr.save()
        cr.translate(*camera.origin)
        cr.scale(camera.zoom, camera.zoom)

    def restore_transform(self, cr):
        cr.restore()

    def render_connections(self, cr, connections: Sequence[Connection],
                           nodes: Sequence[Node], filter_strength: float):
        for conn, source, target in visible_connections(connections, nodes, filter_strength):
            style = connection_style(conn, self.palette)

            cr.new_path()
            cr.move_to(source.x, source.y)
            cr.line_to(target.x, target.y)

            cr.set_source_rgba(*style.color, style.opacity)
            cr.set_line_width(style.width)
            cr.set_dash(list(self.config.dash) if style.dashed else [])
            cr.stroke()

        cr.set_dash([])

    def render_nodes(self, cr, nodes: Sequence[Node], hovered_id: Optional[str],
                     selected_id: Optional[str], search_query: str):
        for node in nodes:
            if not node.has_position:
                continue
            self._draw_node(cr, node, hovered_id, selected_id, search_query)

    def render_labels(self, cr, nodes: Sequence[Node], hovered_id: Optional[str],
                      selected_id: Optional[str], search_query: str, zoom: float):
        """Second pass so no circle covers a label."""
        for node in nodes:
            if not node.has_position:
                continue
            if shows_label(node, hovered_id, selected_id, search_query, zoom,
                           self.config.label_zoom_threshold):
                self._draw_label(cr, node)

    def _draw_node(self, cr, node: Node, hovered_id: Optional[str],
                   selected_id: Optional[str], search_query: str):
        is_hovered = node.id == hovered_id
        is_selected = node.id == selected_id
        role = node_role(node, hovered_id, selected_id, search_query)

        radius = self.config.hovered_radius if is_hovered else self.config.node_radius
        cr.new_path()
        cr.arc(node.x, node.y, radius, 0, 2 * math.pi)
        cr.set_source_rgb(*self.palette.node_fill(role))

        if is_hovered or is_selected:
            cr.fill_preserve()
            cr.set_source_rgb(*self.palette.outline)
            cr.set_line_width(self.config.outline_width)
            cr.stroke()
        else:
            cr.fill()

    def _draw_label(self, cr, node: Node):
        cr.set_source_rgb(*self.palette.label)
        cr.select_font_face(self.config.font_family, cairo.FONT_SLANT_NORMAL,
                            cairo.FONT_WEIGHT_NORMAL)
        cr.set_font_size(self.config.font_size)

        # Centre horizontally, baseline above the circle
        extents = cr.text_extents(node.label)
        cr.move_to(node.x - extents.width / 2 - extents.x_bearing,
                   node.y - self.config.label_offset)
        cr.show_text(node.label)
