"""Colors and the per-frame drawing decisions that don't need cairo."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from contextgraph.graph import Connection, Node

RGB = Tuple[float, float, float]


def hex_to_rgb(value: str) -> RGB:
    """Parse ``#rrggbb`` or ``#rgb`` into cairo's 0..1 floats."""
    color = value.lstrip('#')
    if len(color) == 3:
        color = ''.join(c * 2 for c in color)
    r = int(color[0:2], 16) / 255
    g = int(color[2:4], 16) / 255
    b = int(color[4:6], 16) / 255
    return (r, g, b)


class NodeRole(Enum):
    """Fill category of a node; exactly one applies per frame."""
    SEARCH_MATCH = "search_match"
    SELECTED = "selected"
    HOVERED = "hovered"
    DEFAULT = "default"


# Colors per theme
DARK_COLORS: Dict[str, RGB] = {
    'surprising': hex_to_rgb('#fbbf24'),
    'connection': hex_to_rgb('#4b5563'),
    'search_match': hex_to_rgb('#3b82f6'),
    'selected': hex_to_rgb('#8b5cf6'),
    'hovered': hex_to_rgb('#818cf8'),
    'default': hex_to_rgb('#6366f1'),
    'outline': (1.0, 1.0, 1.0),
    'label': (1.0, 1.0, 1.0),
    'background': hex_to_rgb('#111827'),
}

LIGHT_COLORS: Dict[str, RGB] = {
    'surprising': hex_to_rgb('#f59e0b'),
    'connection': hex_to_rgb('#d1d5db'),
    'search_match': hex_to_rgb('#2563eb'),
    'selected': hex_to_rgb('#7c3aed'),
    'hovered': hex_to_rgb('#6366f1'),
    'default': hex_to_rgb('#4f46e5'),
    'outline': (0.0, 0.0, 0.0),
    'label': (0.0, 0.0, 0.0),
    'background': (1.0, 1.0, 1.0),
}


@dataclass(frozen=True)
class Palette:
    """Render colors for one theme."""
    colors: Dict[str, RGB]

    @classmethod
    def for_theme(cls, dark: bool) -> "Palette":
        return cls(dict(DARK_COLORS if dark else LIGHT_COLORS))

    def node_fill(self, role: NodeRole) -> RGB:
        return self.colors[role.value]

    @property
    def outline(self) -> RGB:
        return self.colors['outline']

    @property
    def label(self) -> RGB:
        return self.colors['label']

    @property
    def background(self) -> RGB:
        return self.colors['background']


@dataclass(frozen=True)
class ConnectionStyle:
    color: RGB
    width: float
    dashed: bool
    opacity: float


def node_role(node: Node, hovered_id: Optional[str], selected_id: Optional[str],
              search_query: str) -> NodeRole:
    """Search match wins over selection, selection over hover."""
    if node.matches(search_query):
        return NodeRole.SEARCH_MATCH
    if selected_id is not None and node.id == selected_id:
        return NodeRole.SELECTED
    if hovered_id is not None and node.id == hovered_id:
        return NodeRole.HOVERED
    return NodeRole.DEFAULT


def shows_label(node: Node, hovered_id: Optional[str], selected_id: Optional[str],
                search_query: str, zoom: float, zoom_threshold: float = 1.5) -> bool:
    return (node.id == hovered_id
            or node.id == selected_id
            or node.matches(search_query)
            or zoom > zoom_threshold)


def connection_style(conn: Connection, palette: Palette) -> ConnectionStyle:
    opacity = min(1.0, max(0.0, conn.strength))
    if conn.is_surprising:
        return ConnectionStyle(palette.colors['surprising'], 2.0, True, opacity)
    return ConnectionStyle(palette.colors['connection'], 1.0, False, opacity)


def visible_connections(connections: Sequence[Connection], nodes: Sequence[Node],
                        filter_strength: float) -> List[Tuple[Connection, Node, Node]]:
    """Connections to draw this frame with their endpoint nodes.

    The strength threshold is inclusive. Connections whose endpoints are
    missing or not yet positioned are left out.
    """
    by_id = {n.id: n for n in nodes if n.has_position}
    visible = []
    for conn in connections:
        if conn.strength < filter_strength:
            continue
        source = by_id.get(conn.source)
        target = by_id.get(conn.target)
        if source is None or target is None:
            continue
        visible.append((conn, source, target))
    return visible
