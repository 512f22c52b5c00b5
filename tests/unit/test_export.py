"""Unit tests for PNG snapshot export."""

import sys
from pathlib import Path

import pytest

cairo = pytest.importorskip("cairo")

from contextgraph.export import GraphExporter  # noqa: E402
from contextgraph.graph import Connection  # noqa: E402
from contextgraph.renderer import Frame, GraphRenderer  # noqa: E402
from contextgraph.transform import Camera, to_screen  # noqa: E402

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def _corner_alpha(path: Path) -> int:
    image = cairo.ImageSurface.create_from_png(str(path))
    pixel = int.from_bytes(bytes(image.get_data()[0:4]), sys.byteorder)
    return pixel >> 24


@pytest.fixture
def exporter() -> GraphExporter:
    return GraphExporter(GraphRenderer())


class TestFitCamera:
    """Tests for fitting the export camera."""

    def test_bounds_with_padding(self, exporter: GraphExporter, make_node) -> None:
        """Test the image covers the node bounds plus padding, scaled."""
        frame = Frame([make_node("a", 0.0, 0.0), make_node("b", 100.0, 50.0)], [], Camera())
        camera = exporter.fit_camera(frame, scale=2.0)
        assert (camera.width, camera.height) == (400, 300)
        assert to_screen((-50.0, -50.0), camera) == pytest.approx((0.0, 0.0))
        assert to_screen((150.0, 100.0), camera) == pytest.approx((400.0, 300.0))

    def test_nothing_placed(self, exporter: GraphExporter, make_node) -> None:
        """Test there is no camera without placed nodes."""
        assert exporter.fit_camera(Frame([make_node("a")], [], Camera())) is None


class TestExportPng:
    """Tests for export_png."""

    def test_writes_png(self, exporter: GraphExporter, make_node, tmp_path: Path) -> None:
        """Test a graph is written as a PNG of the fitted size."""
        frame = Frame([make_node("a", -20.0, 0.0), make_node("b", 20.0, 10.0)],
                      [Connection("a", "b", 0.8)], Camera(zoom=2.5, pan_x=300.0))
        target = tmp_path / "graph.png"
        assert exporter.export_png(frame, str(target), scale=1.0)
        assert target.read_bytes().startswith(PNG_MAGIC)
        image = cairo.ImageSurface.create_from_png(str(target))
        assert (image.get_width(), image.get_height()) == (140, 110)

    def test_live_camera_untouched(self, exporter: GraphExporter, make_node,
                                   tmp_path: Path) -> None:
        """Test exporting does not modify the on-screen camera."""
        camera = Camera(zoom=1.3, pan_x=12.0)
        frame = Frame([make_node("a", 0.0, 0.0)], [], camera)
        exporter.export_png(frame, str(tmp_path / "one.png"))
        assert (camera.zoom, camera.pan_x) == (1.3, 12.0)

    def test_empty_graph(self, exporter: GraphExporter, tmp_path: Path) -> None:
        """Test nothing is written for an empty graph."""
        target = tmp_path / "empty.png"
        assert exporter.export_png(Frame([], [], Camera()), str(target)) is False
        assert not target.exists()

    def test_transparent_background(self, exporter: GraphExporter, make_node,
                                    tmp_path: Path) -> None:
        """Test transparent exports leave the corners empty."""
        frame = Frame([make_node("a", 0.0, 0.0)], [], Camera())
        opaque = tmp_path / "opaque.png"
        clear = tmp_path / "clear.png"
        exporter.export_png(frame, str(opaque), scale=1.0)
        exporter.export_png(frame, str(clear), scale=1.0, transparent=True)
        assert _corner_alpha(opaque) == 255
        assert _corner_alpha(clear) == 0
