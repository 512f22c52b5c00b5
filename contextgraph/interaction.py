"""Pointer and wheel handling: camera, hover, drag and panning state."""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, FrozenSet, Optional, Sequence

from contextgraph.config import ViewConfig
from contextgraph.graph import Node
from contextgraph.transform import Camera, Point, to_world

logger = logging.getLogger(__name__)


class InteractionState(Enum):
    """What a pressed pointer is currently doing."""
    IDLE = "idle"
    PANNING_CANVAS = "panning_canvas"
    DRAGGING_NODE = "dragging_node"


@dataclass(frozen=True)
class PopupGeometry:
    """Placement of the node popup card inside the surface."""
    left: float
    top: float
    max_width: float
    max_height: float


def popup_geometry(anchor: Optional[Point], camera: Camera,
                   padding: float = 16.0, offset: float = 20.0) -> Optional[PopupGeometry]:
    """Place the popup card beside ``anchor`` without leaving the surface."""
    if anchor is None:
        return None
    max_width = max(220.0, min(320.0, camera.width - padding * 2))
    max_height = max(180.0, min(320.0, camera.height - padding * 2))
    left = min(max(anchor[0] + offset, padding), camera.width - max_width - padding)
    top = min(max(anchor[1], padding), camera.height - max_height - padding)
    return PopupGeometry(left, top, max_width, max_height)


class InteractionController:
    """State machine turning pointer input into camera and node changes.

    The controller owns the camera and the hover/drag/popup state. Nodes
    are read from the list passed to each event; the dragged node is moved
    only through ``on_node_position_update`` so the host stays the single
    writer of its data.
    """

    def __init__(self, config: Optional[ViewConfig] = None):
        self.config = config or ViewConfig()
        self.camera = Camera(width=self.config.default_width,
                             height=self.config.default_height)

        self.state = InteractionState.IDLE
        self.hovered_node_id: Optional[str] = None
        self.dragged_node_id: Optional[str] = None
        self.last_pointer: Point = (0.0, 0.0)
        self.popup_anchor: Optional[Point] = None

        # Callbacks
        self.on_node_select: Optional[Callable[[Optional[Node]], None]] = None
        self.on_node_position_update: Optional[Callable[[str, float, float], None]] = None
        self.on_view_changed: Optional[Callable[[], None]] = None

    @property
    def is_panning(self) -> bool:
        return self.state is InteractionState.PANNING_CANVAS

    @property
    def pinned_ids(self) -> FrozenSet[str]:
        """Node ids the simulation must leave alone this frame."""
        if self.dragged_node_id is None:
            return frozenset()
        return frozenset((self.dragged_node_id,))

    @property
    def zoom_percentage(self) -> int:
        return round(self.camera.zoom * 100)

    # ==================== Hit testing ====================

    def find_node_at(self, x: float, y: float, nodes: Sequence[Node]) -> Optional[Node]:
        """First node within the pick radius of a screen point, in list order."""
        wx, wy = to_world((x, y), self.camera)
        radius = self.config.pick_radius
        for node in nodes:
            if not node.has_position:
                continue
            if math.hypot(node.x - wx, node.y - wy) < radius:
                return node
        return None

    # ==================== Pointer events ====================

    def pointer_down(self, x: float, y: float, nodes: Sequence[Node]):
        node = self.find_node_at(x, y, nodes)

        if node:
            self._set_state(InteractionState.DRAGGING_NODE)
            self.dragged_node_id = node.id
            self.popup_anchor = (x, y)
            self._select(node)
        else:
            self._set_state(InteractionState.PANNING_CANVAS)
            self.dragged_node_id = None
            self.popup_anchor = None
            self.last_pointer = (x, y)
            self._select(None)

    def pointer_move(self, x: float, y: float, nodes: Sequence[Node]):
        hovered = self.find_node_at(x, y, nodes)
        self.hovered_node_id = hovered.id if hovered else None

        if self.state is InteractionState.DRAGGING_NODE and self.dragged_node_id is not None:
            wx, wy = to_world((x, y), self.camera)
            if self.on_node_position_update:
                self.on_node_position_update(self.dragged_node_id, wx, wy)
            if self.popup_anchor is not None:
                self.popup_anchor = (x, y)
        elif self.state is InteractionState.PANNING_CANVAS:
            dx = x - self.last_pointer[0]
            dy = y - self.last_pointer[1]
            self.camera.pan_x += dx
            self.camera.pan_y += dy
            self.last_pointer = (x, y)
            self._notify_view_changed()

    def pointer_up(self):
        if self.state is not InteractionState.IDLE:
            self._set_state(InteractionState.IDLE)
        self.dragged_node_id = None

    def pointer_leave(self):
        """Pointer left the surface: end any gesture and drop the hover."""
        self.pointer_up()
        self.hovered_node_id = None

    def wheel(self, delta_y: float, modifier: bool) -> bool:
        """Zoom on ctrl/meta + wheel.

        Returns True when the event was consumed, so the host cancels its
        default scrolling. Plain wheel events are left alone.
        """
        if not modifier:
            return False
        if delta_y == 0:
            # Modifier held without vertical travel: swallow it, zoom unchanged
            return True

        factor = self.config.zoom_out_factor if delta_y > 0 else self.config.zoom_in_factor
        self.camera.zoom = max(self.config.min_zoom,
                               min(self.config.max_zoom, self.camera.zoom * factor))
        self._notify_view_changed()
        return True

    # ==================== Explicit operations ====================

    def reset_view(self):
        """Zoom 100% with the world origin back in the centre."""
        self.camera.zoom = 1.0
        self.camera.pan_x = 0.0
        self.camera.pan_y = 0.0
        self._notify_view_changed()

    def close_popup(self):
        self.popup_anchor = None

    def resize(self, width: float, height: float):
        """Track the surface size; zoom and pan are kept."""
        self.camera.width = width
        self.camera.height = height
        self._notify_view_changed()

    def popup_geometry(self) -> Optional[PopupGeometry]:
        return popup_geometry(self.popup_anchor, self.camera)

    def _select(self, node: Optional[Node]):
        if self.on_node_select:
            self.on_node_select(node)

    def _set_state(self, state: InteractionState):
        if state is not self.state:
            logger.debug("Interaction %s -> %s", self.state.value, state.value)
        self.state = state

    def _notify_view_changed(self):
        if self.on_view_changed:
            self.on_view_changed()
