"""Unit tests for the knowledge graph host model."""

from contextgraph.graph import Connection, KnowledgeGraph, Node


class TestNode:
    """Tests for Node."""

    def test_unplaced_by_default(self) -> None:
        """Test new nodes have no position and no velocity."""
        node = Node(id="n1", label="Docker")
        assert not node.has_position
        assert (node.vx, node.vy) == (0.0, 0.0)
        assert node.kind == "note"

    def test_matches_is_case_insensitive(self) -> None:
        """Test search matching ignores case."""
        node = Node(id="n1", label="Systems Thinking")
        assert node.matches("thinking")
        assert node.matches("SYSTEMS")
        assert not node.matches("design")

    def test_empty_query_matches_nothing(self) -> None:
        """Test an empty search highlights no node."""
        assert not Node(id="n1", label="Docker").matches("")


class TestConnection:
    """Tests for Connection."""

    def test_other_end(self) -> None:
        """Test the opposite endpoint is returned from either side."""
        conn = Connection("a", "b", 0.5)
        assert conn.other_end("a") == "b"
        assert conn.other_end("b") == "a"
        assert conn.touches("a") and conn.touches("b")
        assert not conn.touches("c")


class TestKnowledgeGraph:
    """Tests for KnowledgeGraph."""

    def test_add_nodes_skips_duplicates(self) -> None:
        """Test adding an existing id is ignored and not reported."""
        graph = KnowledgeGraph([Node(id="a", label="A")])
        added = graph.add_nodes([Node(id="a", label="Again"), Node(id="b", label="B")])
        assert [n.id for n in added] == ["b"]
        assert [n.label for n in graph.nodes] == ["A", "B"]

    def test_remove_node_drops_its_connections(self, small_graph: KnowledgeGraph) -> None:
        """Test removing a node removes every connection touching it."""
        removed = small_graph.remove_node("docker")
        assert removed.id == "docker"
        assert small_graph.find_node("docker") is None
        assert [(c.source, c.target) for c in small_graph.connections] == [("container", "image")]

    def test_remove_unknown_node(self, small_graph: KnowledgeGraph) -> None:
        """Test removing a missing id changes nothing."""
        assert small_graph.remove_node("ghost") is None
        assert len(small_graph.nodes) == 3

    def test_update_node_position(self, small_graph: KnowledgeGraph) -> None:
        """Test moving a node sets it in place and discards velocity."""
        node = small_graph.find_node("image")
        node.vx, node.vy = 3.0, -2.0
        small_graph.update_node_position("image", 12.5, -7.5)
        assert (node.x, node.y) == (12.5, -7.5)
        assert (node.vx, node.vy) == (0.0, 0.0)

    def test_update_unknown_node_is_ignored(self, small_graph: KnowledgeGraph) -> None:
        """Test a drag update for a deleted node does nothing."""
        small_graph.update_node_position("ghost", 1.0, 1.0)

    def test_connections_for(self, small_graph: KnowledgeGraph) -> None:
        """Test connections of a node come with the node at the other end."""
        pairs = small_graph.connections_for("docker")
        assert [(c.reason, other.id) for c, other in pairs] == [
            ("uses", "container"),
            ("pulls", "image"),
        ]

    def test_connections_for_dangling(self) -> None:
        """Test a connection to a missing node pairs with None."""
        graph = KnowledgeGraph([Node(id="a", label="A")], [Connection("a", "ghost", 0.5)])
        [(conn, other)] = graph.connections_for("a")
        assert other is None

    def test_filtered_connections(self, small_graph: KnowledgeGraph) -> None:
        """Test the strength threshold is inclusive."""
        assert len(small_graph.filtered_connections(0.6)) == 2
        assert len(small_graph.filtered_connections(0.0)) == 3
        assert small_graph.filtered_connections(1.1) == []

    def test_search_matches(self, small_graph: KnowledgeGraph) -> None:
        """Test search returns matching nodes in order."""
        assert [n.id for n in small_graph.search_matches("contain")] == ["container"]
        assert small_graph.search_matches("") == []

    def test_clear(self, small_graph: KnowledgeGraph) -> None:
        """Test clear empties both lists."""
        small_graph.clear()
        assert small_graph.nodes == []
        assert small_graph.connections == []
