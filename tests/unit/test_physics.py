"""Unit tests for the force simulation."""

import math

import pytest

from contextgraph.config import SimulationConfig
from contextgraph.graph import Connection
from contextgraph.physics import ForceSimulation


def _distance(a, b) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


class TestAlpha:
    """Tests for the cooling schedule."""

    def test_starts_at_base_alpha(self, simulation: ForceSimulation) -> None:
        """Test a new simulation starts with full energy."""
        assert simulation.alpha == pytest.approx(0.3)

    def test_tick_without_nodes_cools(self, simulation: ForceSimulation) -> None:
        """Test alpha decays even with an empty graph."""
        simulation.tick([], [])
        assert simulation.alpha == pytest.approx(0.3 * 0.995)
        assert simulation.ticks == 1

    def test_alpha_reaches_floor(self, simulation: ForceSimulation, make_node) -> None:
        """Test alpha decays to min_alpha and stays there."""
        node = make_node("solo", 10.0, 10.0)
        for _ in range(500):
            simulation.tick([node], [])
        assert simulation.alpha == pytest.approx(0.05)
        simulation.tick([node], [])
        assert simulation.alpha == pytest.approx(0.05)

    def test_energize_is_capped(self, simulation: ForceSimulation) -> None:
        """Test energize raises alpha but never above base_alpha."""
        for _ in range(300):
            simulation.tick([], [])
        cooled = simulation.alpha
        simulation.energize()
        assert simulation.alpha == pytest.approx(min(0.3, cooled + 0.1))
        simulation.energize(5.0)
        assert simulation.alpha == pytest.approx(0.3)

    def test_reset(self, simulation: ForceSimulation) -> None:
        """Test reset restores the initial energy."""
        simulation.tick([], [])
        simulation.reset()
        assert simulation.alpha == pytest.approx(0.3)
        assert simulation.ticks == 0


class TestPlacement:
    """Tests for initial positions."""

    def test_places_unplaced_nodes_inside_surface(self, make_node) -> None:
        """Test new nodes land inside the centred surface bounds."""
        simulation = ForceSimulation(SimulationConfig(seed=7), width=200, height=100)
        nodes = [make_node(f"n{i}") for i in range(20)]
        assert simulation.initialize_positions(nodes) == 20
        for node in nodes:
            assert -100 <= node.x <= 100
            assert -50 <= node.y <= 50
            assert node.vx == 0.0 and node.vy == 0.0

    def test_keeps_existing_positions(self, simulation: ForceSimulation, make_node) -> None:
        """Test placed nodes are not moved by initialization."""
        node = make_node("placed", 5.0, 6.0)
        assert simulation.initialize_positions([node]) == 0
        assert (node.x, node.y) == (5.0, 6.0)

    def test_seed_is_reproducible(self, make_node) -> None:
        """Test the same seed gives the same layout."""
        first = [make_node("a"), make_node("b")]
        second = [make_node("a"), make_node("b")]
        ForceSimulation(SimulationConfig(seed=3)).initialize_positions(first)
        ForceSimulation(SimulationConfig(seed=3)).initialize_positions(second)
        assert [(n.x, n.y) for n in first] == [(n.x, n.y) for n in second]

    def test_tick_places_new_nodes(self, simulation: ForceSimulation, make_node) -> None:
        """Test nodes added between ticks get a position on the next tick."""
        node = make_node("late")
        simulation.tick([node], [])
        assert node.has_position


class TestForces:
    """Tests for the force model."""

    def test_isolated_node_comes_to_rest_at_origin(self, simulation: ForceSimulation,
                                                   make_node) -> None:
        """Test a lone node drifts to the origin and stops completely."""
        node = make_node("solo", 40.0, -30.0)
        for _ in range(20000):
            simulation.tick([node], [])
        assert abs(node.x) < 1.0
        assert abs(node.y) < 1.0
        assert node.vx == 0.0
        assert node.vy == 0.0
        assert simulation.kinetic_energy([node]) == 0.0

    def test_pinned_node_never_moves(self, simulation: ForceSimulation, make_node) -> None:
        """Test forces leave pinned nodes untouched."""
        pinned = make_node("pinned", 150.0, -80.0)
        other = make_node("other", 160.0, -70.0)
        links = [Connection("pinned", "other", 1.0)]
        for _ in range(100):
            simulation.tick([pinned, other], links, pinned={"pinned"})
            assert (pinned.x, pinned.y) == (150.0, -80.0)
            assert (pinned.vx, pinned.vy) == (0.0, 0.0)
        assert (other.x, other.y) != (160.0, -70.0)

    def test_repulsion_pushes_apart(self, simulation: ForceSimulation, make_node) -> None:
        """Test two unconnected close nodes separate."""
        a = make_node("a", -5.0, 0.0)
        b = make_node("b", 5.0, 0.0)
        simulation.tick([a, b], [])
        assert a.x < -5.0
        assert b.x > 5.0

    def test_attraction_pulls_together(self, simulation: ForceSimulation, make_node) -> None:
        """Test a strong spring shortens a long connection."""
        a = make_node("a", -300.0, 0.0)
        b = make_node("b", 300.0, 0.0)
        simulation.tick([a, b], [Connection("a", "b", 1.0)])
        assert _distance(a, b) < 600.0

    def test_two_node_spring_settles(self, simulation: ForceSimulation, make_node) -> None:
        """Test a connected pair reaches a stable separation."""
        a = make_node("a", -100.0, 0.0)
        b = make_node("b", 100.0, 0.0)
        links = [Connection("a", "b", 0.8)]
        for _ in range(200):
            simulation.tick([a, b], links)
        before = _distance(a, b)
        simulation.tick([a, b], links)
        assert abs(_distance(a, b) - before) < 0.01
        assert 40.0 < before < 120.0

    def test_coincident_nodes_stay_finite(self, simulation: ForceSimulation, make_node) -> None:
        """Test nodes at the same point never produce NaN or infinity."""
        nodes = [make_node("a", 0.0, 0.0), make_node("b", 0.0, 0.0)]
        links = [Connection("a", "b", 0.8)]
        for _ in range(50):
            simulation.tick(nodes, links)
        for node in nodes:
            for value in (node.x, node.y, node.vx, node.vy):
                assert math.isfinite(value)

    def test_dangling_and_self_connections_ignored(self, simulation: ForceSimulation,
                                                   make_node) -> None:
        """Test connections to unknown ids or to the same node are skipped."""
        node = make_node("a", 10.0, 0.0)
        links = [Connection("a", "ghost", 1.0), Connection("a", "a", 1.0)]
        simulation.tick([node], links)
        reference = make_node("a", 10.0, 0.0)
        ForceSimulation(SimulationConfig(seed=42)).tick([reference], [])
        assert (node.x, node.y) == pytest.approx((reference.x, reference.y))

    def test_candidate_pairs_are_unordered(self, simulation: ForceSimulation, make_node) -> None:
        """Test every unordered pair is yielded once."""
        nodes = [make_node(c, 0.0, 0.0) for c in "abcd"]
        pairs = list(simulation.candidate_pairs(nodes))
        assert len(pairs) == 6
        assert len({frozenset((a.id, b.id)) for a, b in pairs}) == 6


class TestSimulationConfig:
    """Tests for SimulationConfig validation."""

    def test_defaults(self) -> None:
        """Test the default force constants."""
        config = SimulationConfig()
        assert config.repulsion == 5000.0
        assert config.attraction == 0.01
        assert config.damping == 0.8

    @pytest.mark.parametrize("kwargs", [
        {"min_alpha": 0.5},
        {"min_alpha": 0.0},
        {"cooling": 1.5},
        {"damping": 1.0},
        {"min_distance": 0.0},
        {"repulsion": -1.0},
    ])
    def test_rejects_invalid_values(self, kwargs) -> None:
        """Test out-of-range constants raise ValueError."""
        with pytest.raises(ValueError):
            SimulationConfig(**kwargs)

    def test_json_ignores_unknown_fields(self) -> None:
        """Test from_json drops keys it does not know."""
        config = SimulationConfig.from_json('{"repulsion": 100.0, "gravity": 9.81}')
        assert config.repulsion == 100.0

    def test_json_round_trip(self) -> None:
        """Test to_json output loads back to an equal config."""
        config = SimulationConfig(seed=5, damping=0.5)
        assert SimulationConfig.from_json(config.to_json()) == config

    def test_bad_json_gives_defaults(self) -> None:
        """Test unparsable input falls back to defaults."""
        assert SimulationConfig.from_json("{not json") == SimulationConfig()
