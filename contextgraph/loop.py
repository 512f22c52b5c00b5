"""Frame-driven simulation loop."""

import logging
from typing import AbstractSet, Callable, Iterable, List, Optional, Sequence, Tuple

from contextgraph.graph import Connection, KnowledgeGraph, Node
from contextgraph.physics import ForceSimulation

logger = logging.getLogger(__name__)

FrameInputs = Tuple[Sequence[Node], Sequence[Connection], AbstractSet[str]]


class RenderLoop:
    """Runs one simulation tick and then one draw per display frame.

    ``inputs`` returns the live nodes, connections and pinned ids at the
    start of each frame; ``draw`` renders the result. When attached to a
    GTK widget the loop rides the widget's frame clock, so ticks never
    overlap and stopping is just not scheduling the next one.
    """

    def __init__(self, simulation: ForceSimulation,
                 inputs: Callable[[], FrameInputs],
                 draw: Callable[[], None]):
        self.simulation = simulation
        self.inputs = inputs
        self.draw = draw
        self.frames = 0
        self._tick_id: Optional[int] = None
        self._widget = None

    @property
    def running(self) -> bool:
        return self._tick_id is not None

    def step(self):
        """Advance the layout once and render the result."""
        nodes, connections, pinned = self.inputs()
        self.simulation.tick(nodes, connections, pinned)
        self.draw()
        self.frames += 1

    def start(self, widget):
        """Begin stepping on every frame of ``widget``'s frame clock."""
        if self.running:
            return
        self._widget = widget
        self._tick_id = widget.add_tick_callback(self._on_tick)
        logger.info("Render loop started")

    def stop(self):
        """Stop scheduling frames."""
        if not self.running:
            return
        self._widget.remove_tick_callback(self._tick_id)
        self._tick_id = None
        self._widget = None
        logger.info("Render loop stopped after %d frame(s)", self.frames)

    def _on_tick(self, widget, frame_clock) -> bool:
        if not self.running:
            return False
        self.step()
        return True  # Continue ticking


def grow_graph(graph: KnowledgeGraph, simulation: ForceSimulation,
               nodes: Iterable[Node], connections: Iterable[Connection] = ()) -> List[Node]:
    """Add concepts to a live graph and reheat the layout when it grew.

    Duplicate ids are skipped by the graph, so re-adding known concepts
    leaves a settled layout alone.
    """
    added = graph.add_nodes(nodes)
    graph.add_connections(connections)
    if added:
        simulation.energize()
        logger.info("Added %d concept(s), alpha now %.3f", len(added), simulation.alpha)
    return added
