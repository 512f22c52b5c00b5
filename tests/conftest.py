"""Pytest configuration and fixtures."""

import pytest

from contextgraph.config import SimulationConfig, ViewConfig
from contextgraph.graph import Connection, KnowledgeGraph, Node
from contextgraph.interaction import InteractionController
from contextgraph.physics import ForceSimulation


@pytest.fixture
def make_node():
    """Factory for nodes, placed when coordinates are given."""
    def _make(node_id: str, x=None, y=None, label=None, **kwargs) -> Node:
        return Node(id=node_id, label=label or node_id.title(), x=x, y=y, **kwargs)
    return _make


@pytest.fixture
def simulation() -> ForceSimulation:
    """Seeded simulation on the default 800x600 surface."""
    return ForceSimulation(SimulationConfig(seed=42))


@pytest.fixture
def controller() -> InteractionController:
    """Controller on an 800x600 surface at zoom 1 with no pan."""
    return InteractionController(ViewConfig())


@pytest.fixture
def small_graph(make_node) -> KnowledgeGraph:
    """Three placed concepts, one weak and one surprising connection."""
    return KnowledgeGraph(
        nodes=[
            make_node("docker", 0.0, 0.0, content="Container runtime"),
            make_node("container", 60.0, 0.0),
            make_node("image", -60.0, 40.0),
        ],
        connections=[
            Connection("docker", "container", 0.9, "uses"),
            Connection("container", "image", 0.3, "built from"),
            Connection("docker", "image", 0.6, "pulls", is_surprising=True),
        ],
    )
