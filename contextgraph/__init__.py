"""ContextGraph - an interactive force-directed concept graph for GNOME."""

__version__ = "1.0.0"
__app_id__ = "io.github.contextgraph.ContextGraph"
