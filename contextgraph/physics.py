"""Force-directed layout simulation."""

import logging
import math
import random
from typing import AbstractSet, Dict, Iterator, Optional, Sequence, Tuple

from contextgraph.config import SimulationConfig
from contextgraph.graph import Connection, Node

logger = logging.getLogger(__name__)


class ForceSimulation:
    """Iterative force integrator over a node list owned by the caller.

    Every tick applies centering, pairwise repulsion and spring attraction
    to node velocities, integrates positions and cools ``alpha``. Node ids
    in ``pinned`` are under manual control: no force moves them.
    """

    def __init__(self, config: Optional[SimulationConfig] = None,
                 width: float = 800.0, height: float = 600.0):
        self.config = config or SimulationConfig()
        self.width = width
        self.height = height
        self._alpha = self.config.base_alpha
        self._rng = random.Random(self.config.seed)
        self.ticks = 0

    @property
    def alpha(self) -> float:
        """Current simulation energy."""
        return self._alpha

    def set_bounds(self, width: float, height: float):
        """Set the surface size used to place new nodes."""
        self.width = width
        self.height = height

    def reset(self):
        """Return to the initial energy."""
        self._alpha = self.config.base_alpha
        self.ticks = 0

    def energize(self, amount: Optional[float] = None):
        """Raise alpha so freshly added nodes settle into the layout.

        Call this when the node set grows. Alpha never exceeds
        ``base_alpha``.
        """
        if amount is None:
            amount = self.config.energize_amount
        self._alpha = min(self.config.base_alpha, self._alpha + amount)
        logger.debug("Energized simulation to alpha=%.4f", self._alpha)

    def initialize_positions(self, nodes: Sequence[Node],
                             width: Optional[float] = None,
                             height: Optional[float] = None) -> int:
        """Give every unplaced node a random position inside the surface.

        Returns the number of nodes placed.
        """
        width = self.width if width is None else width
        height = self.height if height is None else height
        placed = 0
        for node in nodes:
            if node.has_position:
                continue
            node.x = self._rng.random() * width - width / 2
            node.y = self._rng.random() * height - height / 2
            node.vx = 0.0
            node.vy = 0.0
            placed += 1
        if placed:
            logger.debug("Placed %d new node(s) in %.0fx%.0f", placed, width, height)
        return placed

    def tick(self, nodes: Sequence[Node], connections: Sequence[Connection],
             pinned: AbstractSet[str] = frozenset()):
        """Advance the simulation by one step."""
        self.initialize_positions(nodes)

        self._apply_centering(nodes, pinned)
        self._apply_repulsion(nodes, pinned)
        self._apply_attraction(nodes, connections, pinned)
        self._integrate(nodes, pinned)

        # Cool down so the layout eventually settles
        self._alpha = max(self.config.min_alpha, self._alpha * self.config.cooling)
        self.ticks += 1

    def _separation(self, a: Node, b: Node) -> Tuple[float, float, float]:
        """Vector from ``a`` to ``b`` and its length floored at ``min_distance``."""
        dx = b.x - a.x
        dy = b.y - a.y
        dist = max(math.sqrt(dx * dx + dy * dy), self.config.min_distance)
        return dx, dy, dist

    def _apply_centering(self, nodes: Sequence[Node], pinned: AbstractSet[str]):
        strength = self.config.center_force * self._alpha
        if strength <= 0:
            return
        for node in nodes:
            if node.id in pinned:
                continue
            node.vx -= node.x * strength
            node.vy -= node.y * strength

    def candidate_pairs(self, nodes: Sequence[Node]) -> Iterator[Tuple[Node, Node]]:
        """Unordered node pairs that repel each other.

        All pairs, O(n^2). Subclasses may substitute a spatial index here;
        the force applied to each yielded pair stays the same.
        """
        for i in range(len(nodes)):
            for j in range(i + 1, len(nodes)):
                yield nodes[i], nodes[j]

    def _apply_repulsion(self, nodes: Sequence[Node], pinned: AbstractSet[str]):
        k = self.config.repulsion * self._alpha
        for a, b in self.candidate_pairs(nodes):
            dx, dy, dist = self._separation(a, b)
            force = k / (dist * dist)
            fx = dx / dist * force
            fy = dy / dist * force
            if a.id not in pinned:
                a.vx -= fx
                a.vy -= fy
            if b.id not in pinned:
                b.vx += fx
                b.vy += fy

    def _apply_attraction(self, nodes: Sequence[Node], connections: Sequence[Connection],
                          pinned: AbstractSet[str]):
        by_id: Dict[str, Node] = {n.id: n for n in nodes}
        k = self.config.attraction * self._alpha
        for conn in connections:
            source = by_id.get(conn.source)
            target = by_id.get(conn.target)
            if source is None or target is None or source is target:
                continue
            dx, dy, dist = self._separation(source, target)
            force = dist * k * conn.strength
            fx = dx / dist * force
            fy = dy / dist * force
            if source.id not in pinned:
                source.vx += fx
                source.vy += fy
            if target.id not in pinned:
                target.vx -= fx
                target.vy -= fy

    def _integrate(self, nodes: Sequence[Node], pinned: AbstractSet[str]):
        damping = self.config.damping
        eps = self.config.velocity_epsilon
        for node in nodes:
            if node.id in pinned:
                continue
            node.x += node.vx
            node.y += node.vy
            node.vx *= damping
            node.vy *= damping

            # Snap tiny velocities so the layout can come to rest
            if abs(node.vx) < eps:
                node.vx = 0.0
            if abs(node.vy) < eps:
                node.vy = 0.0

    def kinetic_energy(self, nodes: Sequence[Node]) -> float:
        """Sum of squared node speeds, zero once everything is at rest."""
        return sum(n.vx * n.vx + n.vy * n.vy for n in nodes)
