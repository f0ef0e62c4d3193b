import pytest

from dfgraph.components import build_default_registry
from dfgraph.graph.model import Edge, GraphNode, GraphSnapshot
from dfgraph.settings import Settings


@pytest.fixture
def registry():
    """A fresh registry with the pandas component family."""
    return build_default_registry()


@pytest.fixture
def plain_settings():
    """Default naming, no per-node comments: easier exact-text assertions."""
    return Settings(node_comments=False)


@pytest.fixture
def two_sources_join():
    """Factory: sources A, B wired into join node J with the given config."""
    def build(join_config, reverse_edges=False):
        edges = [Edge("A", 0, "J", 0), Edge("B", 0, "J", 1)]
        if reverse_edges:
            edges.reverse()
        return GraphSnapshot(
            nodes=[
                GraphNode("A", "csv_input", {"file_path": "a.csv"}),
                GraphNode("B", "csv_input", {"file_path": "b.csv"}),
                GraphNode("J", "join", join_config),
            ],
            edges=edges,
        )
    return build
