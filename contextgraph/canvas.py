"""Canvas widget hosting the force-directed concept graph."""

import logging
from typing import Optional, Callable

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Gdk", "4.0")
from gi.repository import Gtk, Gdk

from contextgraph.config import AppSettings
from contextgraph.graph import KnowledgeGraph, Node
from contextgraph.interaction import InteractionController, InteractionState
from contextgraph.loop import RenderLoop, grow_graph
from contextgraph.palette import visible_connections
from contextgraph.physics import ForceSimulation
from contextgraph.renderer import Frame, GraphRenderer

logger = logging.getLogger(__name__)

# Modifiers that turn the wheel into zoom (ctrl on Linux, cmd on macOS)
ZOOM_MODIFIERS = (
    Gdk.ModifierType.CONTROL_MASK
    | Gdk.ModifierType.META_MASK
    | Gdk.ModifierType.SUPER_MASK
)


class GraphCanvas(Gtk.DrawingArea):
    """Drawing area that simulates, renders and handles input for a graph."""

    def __init__(self, graph: KnowledgeGraph, settings: Optional[AppSettings] = None):
        super().__init__()

        self.graph = graph
        self.settings = settings or AppSettings()

        self.simulation = ForceSimulation(self.settings.simulation)
        self.interaction = InteractionController(self.settings.view)
        self.renderer = GraphRenderer(config=self.settings.render)
        self.renderer.set_theme(self.settings.dark)
        self.loop = RenderLoop(self.simulation, self._frame_inputs, self._on_frame)

        # Host state
        self.selected_node_id: Optional[str] = None
        self.search_query: str = ""
        self.filter_strength: float = self.settings.filter_strength

        # Drag gesture start, GestureDrag reports offsets from here
        self._drag_start_x = 0.0
        self._drag_start_y = 0.0

        # Callbacks
        self.on_node_selected: Optional[Callable[[Optional[Node]], None]] = None
        self.on_view_changed: Optional[Callable[[], None]] = None
        self.on_frame: Optional[Callable[[], None]] = None

        self.interaction.on_node_select = self._on_node_select
        self.interaction.on_node_position_update = self.graph.update_node_position
        self.interaction.on_view_changed = self._on_view_changed

        # Setup widget
        self.set_draw_func(self._on_draw)
        self.set_focusable(True)
        self.set_hexpand(True)
        self.set_vexpand(True)

        self._setup_event_controllers()
        self.connect("resize", self._on_resize)
        self.connect("map", lambda *_: self.loop.start(self))
        self.connect("unmap", lambda *_: self.loop.stop())

    def _setup_event_controllers(self):
        """Setup pointer and wheel event controllers."""
        # Drag covers press, move and release of the primary button
        drag_ctrl = Gtk.GestureDrag()
        drag_ctrl.set_button(1)
        drag_ctrl.connect("drag-begin", self._on_drag_begin)
        drag_ctrl.connect("drag-update", self._on_drag_update)
        drag_ctrl.connect("drag-end", self._on_drag_end)
        self.add_controller(drag_ctrl)

        # Hover
        motion_ctrl = Gtk.EventControllerMotion()
        motion_ctrl.connect("motion", self._on_motion)
        motion_ctrl.connect("leave", self._on_leave)
        self.add_controller(motion_ctrl)

        # Scroll (zoom)
        scroll_ctrl = Gtk.EventControllerScroll()
        scroll_ctrl.set_flags(Gtk.EventControllerScrollFlags.VERTICAL)
        scroll_ctrl.connect("scroll", self._on_scroll)
        self.add_controller(scroll_ctrl)

    # ==================== Data ====================

    def add_nodes(self, nodes, connections=()):
        """Add concepts to the live graph and wake the layout up."""
        added = grow_graph(self.graph, self.simulation, nodes, connections)
        self.queue_draw()
        return added

    def remove_node(self, node_id: str):
        self.graph.remove_node(node_id)
        if self.selected_node_id == node_id:
            self._on_node_select(None)
            self.interaction.close_popup()
        self.queue_draw()

    @property
    def selected_node(self) -> Optional[Node]:
        return self.graph.find_node(self.selected_node_id)

    def set_search_query(self, query: str):
        self.search_query = query
        self.queue_draw()

    def set_filter_strength(self, value: float):
        self.filter_strength = value
        self.queue_draw()
        self._on_view_changed()

    def set_dark(self, dark: bool):
        self.renderer.set_theme(dark)
        self.queue_draw()

    def reset_view(self):
        self.interaction.reset_view()
        self.queue_draw()

    def close_popup(self):
        self.interaction.close_popup()
        self._on_view_changed()

    def visible_connection_count(self) -> int:
        return len(visible_connections(self.graph.connections, self.graph.nodes,
                                       self.filter_strength))

    def current_frame(self) -> Frame:
        """Snapshot of everything the renderer needs for this frame."""
        return Frame(
            nodes=self.graph.nodes,
            connections=self.graph.connections,
            camera=self.interaction.camera,
            hovered_id=self.interaction.hovered_node_id,
            selected_id=self.selected_node_id,
            search_query=self.search_query,
            filter_strength=self.filter_strength,
        )

    def _frame_inputs(self):
        return self.graph.nodes, self.graph.connections, self.interaction.pinned_ids

    # ==================== Drawing ====================

    def _on_frame(self):
        self.queue_draw()
        if self.on_frame:
            self.on_frame()

    def _on_draw(self, area, cr, width, height):
        """Main drawing function."""
        self.renderer.render(cr, self.current_frame())

    def _on_resize(self, area, width, height):
        self.interaction.resize(width, height)
        self.simulation.set_bounds(width, height)

    # ==================== Input ====================

    def _on_drag_begin(self, gesture, start_x, start_y):
        """Press: grab a node or start panning."""
        self.grab_focus()
        self._drag_start_x = start_x
        self._drag_start_y = start_y
        self.interaction.pointer_down(start_x, start_y, self.graph.nodes)
        self.queue_draw()

    def _on_drag_update(self, gesture, offset_x, offset_y):
        self.interaction.pointer_move(self._drag_start_x + offset_x,
                                      self._drag_start_y + offset_y,
                                      self.graph.nodes)
        self.queue_draw()

    def _on_drag_end(self, gesture, offset_x, offset_y):
        self.interaction.pointer_up()
        self.queue_draw()

    def _on_motion(self, controller, x, y):
        """Hover tracking; presses are handled by the drag gesture."""
        if self.interaction.state is not InteractionState.IDLE:
            return
        previous = self.interaction.hovered_node_id
        self.interaction.pointer_move(x, y, self.graph.nodes)
        if self.interaction.hovered_node_id != previous:
            self.queue_draw()

    def _on_leave(self, controller):
        """Handle pointer leaving canvas."""
        self.interaction.pointer_leave()
        self.queue_draw()

    def _on_scroll(self, controller, dx, dy):
        """Handle scroll for zooming."""
        state = controller.get_current_event_state()
        consumed = self.interaction.wheel(dy, bool(state & ZOOM_MODIFIERS))
        if consumed:
            self.queue_draw()
        return consumed

    # ==================== Callbacks ====================

    def _on_node_select(self, node: Optional[Node]):
        self.selected_node_id = node.id if node else None
        if self.on_node_selected:
            self.on_node_selected(node)

    def _on_view_changed(self):
        if self.on_view_changed:
            self.on_view_changed()
