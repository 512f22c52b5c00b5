"""Concept graph data held by the host application."""

import logging
import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class Node:
    """A concept in the graph.

    ``content``, ``kind`` and ``timestamp`` are payload the layout engine
    never looks at. ``x``/``y`` stay ``None`` until the engine places the
    node.
    """
    id: str
    label: str
    content: str = ""
    kind: str = "note"  # note, url, file
    timestamp: float = field(default_factory=time.time)
    x: Optional[float] = None
    y: Optional[float] = None
    vx: float = 0.0
    vy: float = 0.0

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match of ``query`` against the label."""
        return bool(query) and query.lower() in self.label.lower()


@dataclass
class Connection:
    """A weighted relationship between two concepts."""
    source: str
    target: str
    strength: float
    reason: str = ""
    is_surprising: bool = False

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def other_end(self, node_id: str) -> str:
        return self.target if self.source == node_id else self.source


class KnowledgeGraph:
    """Owns the node and connection lists handed to the canvas each frame."""

    def __init__(self, nodes: Optional[List[Node]] = None,
                 connections: Optional[List[Connection]] = None):
        self.nodes: List[Node] = []
        self.connections: List[Connection] = []
        if nodes:
            self.add_nodes(nodes)
        if connections:
            self.add_connections(connections)

    def find_node(self, node_id: Optional[str]) -> Optional[Node]:
        if node_id is None:
            return None
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def add_nodes(self, nodes: Iterable[Node]) -> List[Node]:
        """Append nodes whose id is not present yet and return them."""
        existing = {n.id for n in self.nodes}
        added = []
        for node in nodes:
            if node.id in existing:
                logger.debug("Skipping duplicate node id %s", node.id)
                continue
            existing.add(node.id)
            self.nodes.append(node)
            added.append(node)
        return added

    def add_connections(self, connections: Iterable[Connection]) -> None:
        self.connections.extend(connections)

    def remove_node(self, node_id: str) -> Optional[Node]:
        """Delete a node together with every connection touching it."""
        node = self.find_node(node_id)
        if node is None:
            return None
        self.nodes.remove(node)
        self.connections = [c for c in self.connections if not c.touches(node_id)]
        return node

    def update_node_position(self, node_id: str, x: float, y: float) -> None:
        """Move a node directly, discarding its velocity."""
        node = self.find_node(node_id)
        if node is None:
            return
        node.x = x
        node.y = y
        node.vx = 0.0
        node.vy = 0.0

    def connections_for(self, node_id: str) -> List[Tuple[Connection, Optional[Node]]]:
        """Connections touching ``node_id`` paired with the node at the other end."""
        by_id = {n.id: n for n in self.nodes}
        return [(c, by_id.get(c.other_end(node_id)))
                for c in self.connections if c.touches(node_id)]

    def filtered_connections(self, threshold: float) -> List[Connection]:
        return [c for c in self.connections if c.strength >= threshold]

    def search_matches(self, query: str) -> List[Node]:
        return [n for n in self.nodes if n.matches(query)]

    def clear(self) -> None:
        self.nodes = []
        self.connections = []
