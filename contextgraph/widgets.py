"""Custom widgets for the ContextGraph window."""

from typing import Optional, Callable
import gi

gi.require_version("Gtk", "4.0")
from gi.repository import Gtk, Pango

from contextgraph.details import (
    POPUP_CONNECTION_LIMIT, connection_rows, filter_to_slider, format_date,
    format_zoom, slider_to_filter, truncate_preview,
)
from contextgraph.graph import KnowledgeGraph, Node
from contextgraph.interaction import PopupGeometry


def _clear_box(box: Gtk.Box):
    while True:
        child = box.get_first_child()
        if child is None:
            break
        box.remove(child)


def _connection_widget(row) -> Gtk.Box:
    item = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=2)
    item.add_css_class("connection-row")

    top = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=6)
    name = Gtk.Label(label=row.other_label)
    name.set_halign(Gtk.Align.START)
    name.set_hexpand(True)
    name.set_ellipsize(Pango.EllipsizeMode.END)
    top.append(name)

    if row.is_surprising:
        marker = Gtk.Label(label="surprising")
        marker.add_css_class("warning")
        top.append(marker)

    strength = Gtk.Label(label=row.strength)
    strength.add_css_class("dim-label")
    top.append(strength)
    item.append(top)

    if row.reason:
        reason = Gtk.Label(label=row.reason)
        reason.set_halign(Gtk.Align.START)
        reason.set_wrap(True)
        reason.set_xalign(0)
        reason.add_css_class("dim-label")
        reason.add_css_class("caption")
        item.append(reason)

    return item


class NodePopup(Gtk.Box):
    """Small card floating next to the selected node."""

    def __init__(self):
        super().__init__(orientation=Gtk.Orientation.VERTICAL, spacing=8)
        self.add_css_class("card")
        self.add_css_class("node-popup")
        self.set_halign(Gtk.Align.START)
        self.set_valign(Gtk.Align.START)

        # Callbacks
        self.on_close: Optional[Callable[[], None]] = None

        header = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=8)
        header.set_margin_start(12)
        header.set_margin_end(6)
        header.set_margin_top(6)

        self.title = Gtk.Label(label="")
        self.title.set_hexpand(True)
        self.title.set_halign(Gtk.Align.START)
        self.title.set_ellipsize(Pango.EllipsizeMode.END)
        self.title.add_css_class("heading")
        header.append(self.title)

        close_btn = Gtk.Button()
        close_btn.set_icon_name("window-close-symbolic")
        close_btn.set_tooltip_text("Close")
        close_btn.add_css_class("flat")
        close_btn.connect("clicked", lambda *_: self.on_close and self.on_close())
        header.append(close_btn)
        self.append(header)

        self.connections_box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=6)
        self.connections_box.set_margin_start(12)
        self.connections_box.set_margin_end(12)
        self.connections_box.set_margin_bottom(12)
        self.append(self.connections_box)

        self._geometry: Optional[PopupGeometry] = None
        self.set_visible(False)

    def show_node(self, graph: KnowledgeGraph, node: Node):
        self.title.set_label(node.label)
        _clear_box(self.connections_box)

        rows = connection_rows(graph, node.id, limit=POPUP_CONNECTION_LIMIT)
        if not rows:
            empty = Gtk.Label(label="No connections")
            empty.add_css_class("dim-label")
            self.connections_box.append(empty)
        for row in rows:
            self.connections_box.append(_connection_widget(row))

    def place(self, geometry: Optional[PopupGeometry]):
        """Move the card to ``geometry``, or hide it when there is none."""
        if geometry == self._geometry:
            return
        self._geometry = geometry
        if geometry is None:
            self.set_visible(False)
            return
        self.set_margin_start(int(geometry.left))
        self.set_margin_top(int(geometry.top))
        self.set_size_request(int(geometry.max_width), -1)
        self.set_visible(True)


class DetailPanel(Gtk.Box):
    """Right sidebar describing the selected concept."""

    def __init__(self):
        super().__init__(orientation=Gtk.Orientation.VERTICAL)
        self.current_node: Optional[Node] = None

        self.add_css_class("detail-panel")
        self.set_size_request(320, -1)

        # Callbacks
        self.on_delete: Optional[Callable[[Node], None]] = None

        # Header
        header = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=8)
        header.set_margin_start(16)
        header.set_margin_end(16)
        header.set_margin_top(12)
        header.set_margin_bottom(12)

        title = Gtk.Label(label="DETAILS")
        title.set_hexpand(True)
        title.set_halign(Gtk.Align.START)
        title.add_css_class("heading")
        header.append(title)

        self.delete_btn = Gtk.Button()
        self.delete_btn.set_icon_name("user-trash-symbolic")
        self.delete_btn.set_tooltip_text("Delete concept")
        self.delete_btn.add_css_class("flat")
        self.delete_btn.connect("clicked", self._on_delete_clicked)
        header.append(self.delete_btn)

        self.append(header)
        self.append(Gtk.Separator(orientation=Gtk.Orientation.HORIZONTAL))

        # Body
        self.scrolled = Gtk.ScrolledWindow()
        self.scrolled.set_vexpand(True)
        self.scrolled.set_policy(Gtk.PolicyType.NEVER, Gtk.PolicyType.AUTOMATIC)

        self.body = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=12)
        self.body.set_margin_start(16)
        self.body.set_margin_end(16)
        self.body.set_margin_top(12)
        self.body.set_margin_bottom(12)

        self.label = Gtk.Label(label="")
        self.label.set_halign(Gtk.Align.START)
        self.label.set_wrap(True)
        self.label.set_xalign(0)
        self.label.add_css_class("title-3")
        self.body.append(self.label)

        self.meta = Gtk.Label(label="")
        self.meta.set_halign(Gtk.Align.START)
        self.meta.add_css_class("dim-label")
        self.body.append(self.meta)

        connections_title = Gtk.Label(label="Connections")
        connections_title.set_halign(Gtk.Align.START)
        connections_title.add_css_class("heading")
        self.body.append(connections_title)

        self.connections_box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=8)
        self.body.append(self.connections_box)

        preview_title = Gtk.Label(label="Content")
        preview_title.set_halign(Gtk.Align.START)
        preview_title.add_css_class("heading")
        self.body.append(preview_title)

        self.preview = Gtk.Label(label="")
        self.preview.set_halign(Gtk.Align.START)
        self.preview.set_wrap(True)
        self.preview.set_xalign(0)
        self.preview.set_selectable(True)
        self.body.append(self.preview)

        self.scrolled.set_child(self.body)
        self.append(self.scrolled)

        # Empty state (shown when no node selected)
        self.empty_state = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=8)
        self.empty_state.set_valign(Gtk.Align.CENTER)
        self.empty_state.set_vexpand(True)

        empty_label = Gtk.Label(label="No concept selected")
        empty_label.add_css_class("dim-label")
        self.empty_state.append(empty_label)

        hint_label = Gtk.Label(label="Click a node to see its connections")
        hint_label.add_css_class("dim-label")
        hint_label.set_opacity(0.6)
        self.empty_state.append(hint_label)
        self.append(self.empty_state)

        self.show_empty_state()

    def show_empty_state(self):
        """Show the empty state (no node selected)."""
        self.current_node = None
        self.scrolled.set_visible(False)
        self.delete_btn.set_sensitive(False)
        self.empty_state.set_visible(True)

    def show_node(self, graph: KnowledgeGraph, node: Node):
        """Show details for a specific node."""
        self.current_node = node
        self.empty_state.set_visible(False)
        self.scrolled.set_visible(True)
        self.delete_btn.set_sensitive(True)

        self.label.set_label(node.label)
        self.meta.set_label(f"{node.kind} · added {format_date(node.timestamp)}")

        _clear_box(self.connections_box)
        rows = connection_rows(graph, node.id)
        if not rows:
            empty = Gtk.Label(label="No connections")
            empty.set_halign(Gtk.Align.START)
            empty.add_css_class("dim-label")
            self.connections_box.append(empty)
        for row in rows:
            self.connections_box.append(_connection_widget(row))

        self.preview.set_label(truncate_preview(node.content) or "(empty)")

    def _on_delete_clicked(self, button):
        if self.current_node and self.on_delete:
            self.on_delete(self.current_node)


class GraphControls(Gtk.Box):
    """Overlay bar with zoom readout, counts, strength filter and reset."""

    def __init__(self, filter_strength: float = 0.0):
        super().__init__(orientation=Gtk.Orientation.HORIZONTAL, spacing=12)
        self.add_css_class("toolbar")
        self.add_css_class("osd")
        self.set_halign(Gtk.Align.START)
        self.set_valign(Gtk.Align.END)
        self.set_margin_start(12)
        self.set_margin_bottom(12)

        # Callbacks
        self.on_filter_changed: Optional[Callable[[float], None]] = None
        self.on_reset_view: Optional[Callable[[], None]] = None

        self.zoom_label = Gtk.Label(label=format_zoom(1.0))
        self.zoom_label.set_tooltip_text("Zoom (Ctrl+scroll)")
        self.append(self.zoom_label)

        self.count_label = Gtk.Label(label="")
        self.count_label.add_css_class("dim-label")
        self.append(self.count_label)

        strength_label = Gtk.Label(label="Strength")
        self.append(strength_label)

        self.slider = Gtk.Scale.new_with_range(Gtk.Orientation.HORIZONTAL, 0.0, 1.0, 0.05)
        self.slider.set_draw_value(False)
        self.slider.set_size_request(140, -1)
        self.slider.set_value(filter_to_slider(filter_strength))
        self.slider.set_tooltip_text("Hide weaker connections")
        self.slider.connect("value-changed", self._on_slider_changed)
        self.append(self.slider)

        reset_btn = Gtk.Button()
        reset_btn.set_icon_name("zoom-original-symbolic")
        reset_btn.set_tooltip_text("Reset View (Ctrl+0)")
        reset_btn.add_css_class("flat")
        reset_btn.connect("clicked", lambda *_: self.on_reset_view and self.on_reset_view())
        self.append(reset_btn)

    def update(self, zoom: float, node_count: int, connection_count: int):
        self.zoom_label.set_label(format_zoom(zoom))
        self.count_label.set_label(f"{node_count} nodes · {connection_count} connections")

    def _on_slider_changed(self, scale):
        if self.on_filter_changed:
            self.on_filter_changed(slider_to_filter(scale.get_value()))
