"""Main ContextGraph application."""

import logging
import sys
from typing import List, Optional

import gi
gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Gtk, Gio, GLib, Adw

from contextgraph import __version__, __app_id__
from contextgraph.canvas import GraphCanvas
from contextgraph.config import AppSettings, load_settings, save_settings
from contextgraph.export import GraphExporter, get_export_dir
from contextgraph.graph import KnowledgeGraph, Node
from contextgraph.sample import sample_connections, sample_nodes
from contextgraph.widgets import DetailPanel, GraphControls, NodePopup

logger = logging.getLogger(__name__)


class ContextGraphWindow(Adw.ApplicationWindow):
    """Main application window."""

    def __init__(self, app: Adw.Application, graph: KnowledgeGraph, settings: AppSettings):
        super().__init__(application=app)
        self.graph = graph
        self.settings = settings

        # Window setup
        self.set_title("ContextGraph")
        self.set_default_size(1280, 800)

        self._last_controls = None

        # Build UI
        self._build_ui()

        # Setup keyboard shortcuts
        self._setup_shortcuts()

        self.exporter = GraphExporter(self.canvas.renderer)
        self._sync_overlays()

    def _build_ui(self):
        """Build the main UI layout."""
        main_box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL)

        header = self._build_header()
        main_box.append(header)

        self.paned = Gtk.Paned(orientation=Gtk.Orientation.HORIZONTAL)
        self.paned.set_vexpand(True)

        # Canvas with the popup card and controls floating above it
        self.canvas = GraphCanvas(self.graph, self.settings)
        self.canvas.on_node_selected = self._on_node_selected
        self.canvas.on_view_changed = self._sync_overlays
        self.canvas.on_frame = self._sync_overlays

        self.popup = NodePopup()
        self.popup.on_close = self.canvas.close_popup

        self.controls = GraphControls(self.settings.filter_strength)
        self.controls.on_filter_changed = self._on_filter_changed
        self.controls.on_reset_view = self._reset_view

        canvas_overlay = Gtk.Overlay()
        canvas_overlay.set_child(self.canvas)
        canvas_overlay.add_overlay(self.popup)
        canvas_overlay.add_overlay(self.controls)

        self.paned.set_start_child(canvas_overlay)
        self.paned.set_shrink_start_child(False)

        # Detail panel
        self.detail_panel = DetailPanel()
        self.detail_panel.on_delete = self._on_delete_node

        self.details_revealer = Gtk.Revealer()
        self.details_revealer.set_transition_type(Gtk.RevealerTransitionType.SLIDE_LEFT)
        self.details_revealer.set_reveal_child(False)
        self.details_revealer.set_child(self.detail_panel)

        self.paned.set_end_child(self.details_revealer)
        self.paned.set_shrink_end_child(False)
        self.paned.set_resize_end_child(False)

        # Wrap in toast overlay for in-app notifications
        self.toast_overlay = Adw.ToastOverlay()
        self.toast_overlay.set_child(self.paned)
        main_box.append(self.toast_overlay)

        self.set_content(main_box)

    def _build_header(self) -> Adw.HeaderBar:
        """Build the header bar."""
        header = Adw.HeaderBar()

        # Menu button
        menu_btn = Gtk.MenuButton()
        menu_btn.set_icon_name("open-menu-symbolic")
        menu_btn.set_tooltip_text("Menu")

        menu = Gio.Menu()

        file_section = Gio.Menu()
        file_section.append("Export as PNG...", "win.export-png")
        menu.append_section(None, file_section)

        view_section = Gio.Menu()
        view_section.append("Reset View", "win.reset-view")
        view_section.append("Toggle Details", "win.toggle-details")
        view_section.append("Toggle Dark Mode", "win.toggle-theme")
        menu.append_section(None, view_section)

        help_section = Gio.Menu()
        help_section.append("About ContextGraph", "win.show-about")
        menu.append_section(None, help_section)

        popover = Gtk.PopoverMenu()
        popover.set_menu_model(menu)
        menu_btn.set_popover(popover)
        header.pack_start(menu_btn)

        # Search highlights matching nodes on the canvas
        self.search_entry = Gtk.SearchEntry()
        self.search_entry.set_placeholder_text("Search concepts...")
        self.search_entry.set_max_width_chars(30)
        self.search_entry.connect("search-changed", self._on_search_changed)
        header.set_title_widget(self.search_entry)

        # Details toggle
        details_btn = Gtk.ToggleButton()
        details_btn.set_icon_name("sidebar-show-right-symbolic")
        details_btn.set_tooltip_text("Toggle Details (Ctrl+I)")
        details_btn.connect("toggled", self._on_details_toggled)
        self.details_btn = details_btn
        header.pack_end(details_btn)

        return header

    def _setup_shortcuts(self):
        """Setup keyboard shortcuts."""
        actions = [
            ("export-png", self._export_png, "<Control>e"),
            ("reset-view", self._reset_view, "<Control>0"),
            ("toggle-details", self._toggle_details, "<Control>i"),
            ("toggle-theme", self._toggle_theme, None),
            ("search", self.search_entry.grab_focus, "<Control>f"),
            ("close-popup", self.canvas.close_popup, None),
            ("show-about", self._show_about, None),
            ("quit", lambda: self.close(), "<Control>q"),
        ]

        for name, callback, accel in actions:
            action = Gio.SimpleAction.new(name, None)
            action.connect("activate", lambda a, p, cb=callback: cb())
            self.add_action(action)

            if accel:
                self.get_application().set_accels_for_action(f"win.{name}", [accel])

    def add_concepts(self, nodes, connections=()):
        """Grow the displayed graph; the layout reheats when anything is new."""
        added = self.canvas.add_nodes(nodes, connections)
        self._sync_overlays()
        return added

    # ==================== Canvas events ====================

    def _on_node_selected(self, node: Optional[Node]):
        """Handle node selection."""
        if node:
            self.popup.show_node(self.graph, node)
            self.detail_panel.show_node(self.graph, node)
        else:
            self.detail_panel.show_empty_state()
        self._sync_overlays()

    def _sync_overlays(self):
        """Keep the popup card and the controls in step with the canvas."""
        interaction = self.canvas.interaction
        self.popup.place(interaction.popup_geometry())

        state = (interaction.camera.zoom, len(self.graph.nodes),
                 self.canvas.visible_connection_count())
        if state != self._last_controls:
            self._last_controls = state
            self.controls.update(*state)

    def _on_filter_changed(self, value: float):
        self.settings.filter_strength = value
        self.canvas.set_filter_strength(value)

    def _on_search_changed(self, entry):
        query = entry.get_text().strip()
        self.canvas.set_search_query(query)
        if query:
            logger.debug("Search %r matches %d node(s)", query, len(self.graph.search_matches(query)))

    def _on_delete_node(self, node: Node):
        self.canvas.remove_node(node.id)
        self.detail_panel.show_empty_state()
        self._sync_overlays()
        self._show_toast(f"Deleted \"{node.label}\"")

    # ==================== View ====================

    def _reset_view(self):
        self.canvas.reset_view()

    def _on_details_toggled(self, button):
        self.details_revealer.set_reveal_child(button.get_active())

    def _toggle_details(self):
        self.details_btn.set_active(not self.details_btn.get_active())

    def _toggle_theme(self):
        self.settings.dark = not self.settings.dark
        apply_color_scheme(self.settings.dark)
        self.canvas.set_dark(self.settings.dark)

    def _show_about(self):
        """Show about dialog."""
        about = Adw.AboutWindow(
            transient_for=self,
            application_name="ContextGraph",
            application_icon="applications-science",
            developer_name="ContextGraph Project",
            version=__version__,
            license_type=Gtk.License.MIT_X11,
            comments="An interactive force-directed concept graph",
        )
        about.present()

    # ==================== Export ====================

    def _export_png(self):
        """Export the current graph as PNG."""
        if not self.graph.nodes:
            self._show_toast("Nothing to export")
            return

        dialog = Gtk.FileDialog()
        dialog.set_title("Export as PNG")
        dialog.set_initial_name("graph.png")
        dialog.set_initial_folder(Gio.File.new_for_path(str(get_export_dir())))

        filter_png = Gtk.FileFilter()
        filter_png.set_name("PNG Images")
        filter_png.add_mime_type("image/png")

        filters = Gio.ListStore.new(Gtk.FileFilter)
        filters.append(filter_png)
        dialog.set_filters(filters)

        dialog.save(self, None, self._on_export_png_response)

    def _on_export_png_response(self, dialog, result):
        """Handle PNG export dialog response."""
        try:
            file = dialog.save_finish(result)
        except GLib.Error:
            return  # User cancelled
        if not file:
            return
        filepath = file.get_path()
        if not filepath:
            self._show_toast("Export failed: selected location is not a local file")
            return
        try:
            exported = self.exporter.export_png(self.canvas.current_frame(), filepath)
        except OSError as exc:
            logger.warning("PNG export to %s failed: %s", filepath, exc)
            exported = False
        if exported:
            self._show_toast(f"Exported to {filepath}")
        else:
            self._show_toast("Export failed")

    def _show_toast(self, message: str):
        """Show a toast notification."""
        toast = Adw.Toast(title=message)
        toast.set_timeout(3)
        self.toast_overlay.add_toast(toast)


def apply_color_scheme(dark: bool):
    style_manager = Adw.StyleManager.get_default()
    style_manager.set_color_scheme(
        Adw.ColorScheme.FORCE_DARK if dark else Adw.ColorScheme.FORCE_LIGHT
    )


class ContextGraphApp(Adw.Application):
    """Main application class."""

    def __init__(self, settings: Optional[AppSettings] = None):
        super().__init__(
            application_id=__app_id__,
            flags=Gio.ApplicationFlags.DEFAULT_FLAGS
        )
        self.settings = settings or load_settings()
        self.graph: Optional[KnowledgeGraph] = None
        self.window: Optional[ContextGraphWindow] = None

    def do_startup(self):
        """Initialize application."""
        Adw.Application.do_startup(self)
        self.graph = KnowledgeGraph()
        apply_color_scheme(self.settings.dark)

    def do_activate(self):
        """Activate application."""
        if not self.window:
            self.window = ContextGraphWindow(self, self.graph, self.settings)
            self.window.add_concepts(sample_nodes(), sample_connections())

        self.window.present()

    def do_shutdown(self):
        """Shutdown application."""
        try:
            save_settings(self.settings)
        except OSError as exc:
            logger.warning("Could not save settings: %s", exc)

        Adw.Application.do_shutdown(self)


def main(settings: Optional[AppSettings] = None, argv: Optional[List[str]] = None) -> int:
    """Application entry point."""
    app = ContextGraphApp(settings)
    return app.run(argv if argv is not None else sys.argv)


if __name__ == "__main__":
    sys.exit(main())
