"""Text shown in the popup, the detail panel and the graph controls."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from contextgraph.graph import KnowledgeGraph

PREVIEW_LIMIT = 500
POPUP_CONNECTION_LIMIT = 3


@dataclass
class ConnectionRow:
    """One connection of the selected node, ready for display."""
    other_label: str
    strength: str
    reason: str
    is_surprising: bool


def truncate_preview(text: str, limit: int = PREVIEW_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def format_strength(strength: float) -> str:
    return f"{round(strength * 100)}%"


def format_zoom(zoom: float) -> str:
    return f"{zoom:.1f}x"


def format_date(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d")


def slider_to_filter(value: float) -> float:
    """The strength slider reads "more" to the right, so it is inverted."""
    return min(1.0, max(0.0, 1.0 - value))


def filter_to_slider(filter_strength: float) -> float:
    return min(1.0, max(0.0, 1.0 - filter_strength))


def connection_rows(graph: KnowledgeGraph, node_id: str,
                    limit: Optional[int] = None) -> List[ConnectionRow]:
    """Connections of ``node_id``; dangling ones show the raw id."""
    rows = []
    for conn, other in graph.connections_for(node_id):
        label = other.label if other else conn.other_end(node_id)
        rows.append(ConnectionRow(label, format_strength(conn.strength),
                                  conn.reason, conn.is_surprising))
    if limit is not None:
        rows = rows[:limit]
    return rows
