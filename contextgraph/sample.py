"""Built-in concept set shown when the application starts."""

from typing import List

from contextgraph.graph import Connection, Node

SAMPLE_CONCEPTS = [
    ("innovation", "Innovation", "New ideas that change how problems are approached."),
    ("technology", "Technology", "Tools and techniques applied to practical ends."),
    ("creativity", "Creativity", "Producing ideas that are both novel and useful."),
    ("systems-thinking", "Systems Thinking",
     "Looking at wholes, feedback loops and the relationships between parts."),
    ("design", "Design", "Shaping things deliberately around the people who use them."),
    ("collaboration", "Collaboration", "People working together towards a shared goal."),
    ("learning", "Learning", "Acquiring knowledge and skills through experience or study."),
    ("sustainability", "Sustainability", "Meeting present needs without compromising the future."),
    ("network-effects", "Network Effects", "A product gains value as more people use it."),
    ("user-experience", "User Experience", "How a person feels while using a product."),
]

# (source, target, strength, reason, surprising)
SAMPLE_CONNECTIONS = [
    ("innovation", "technology", 0.9, "Technology is a common vehicle for innovation", False),
    ("innovation", "creativity", 0.8, "Creativity supplies the raw ideas", False),
    ("design", "user-experience", 0.85, "Design decisions shape the experience", False),
    ("collaboration", "learning", 0.6, "Teams learn faster than individuals", False),
    ("systems-thinking", "sustainability", 0.7, "Sustainability depends on whole-system effects", False),
    ("technology", "network-effects", 0.5, "Platforms grow through adoption loops", False),
    ("creativity", "systems-thinking", 0.35,
     "Reframing a system is itself a creative act", True),
    ("learning", "network-effects", 0.3,
     "Shared knowledge compounds the way user bases do", True),
    ("design", "collaboration", 0.45, "Co-design brings users into the process", False),
    ("sustainability", "user-experience", 0.25,
     "Durable products are the ones people keep enjoying", True),
]


def sample_nodes() -> List[Node]:
    """Fresh, unplaced nodes so the layout spreads them."""
    return [Node(id=node_id, label=label, content=content)
            for node_id, label, content in SAMPLE_CONCEPTS]


def sample_connections() -> List[Connection]:
    return [Connection(source, target, strength, reason, surprising)
            for source, target, strength, reason, surprising in SAMPLE_CONNECTIONS]

