"""
dfgraph — Graph snapshot
========================
An immutable copy of the editor's pipeline graph at the moment compilation
is requested.  Nodes keep their insertion order; that order is the
deterministic tie-break used for scheduling and variable naming.

Design goals:
  - No references to registry objects: a node names its descriptor by id.
  - Read-only after construction, so a snapshot can be compiled from any
    thread while the editor keeps mutating its own live graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple

from dfgraph.errors import SchemaError


# ── Node ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GraphNode:
    node_id: str
    descriptor_id: str
    config: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "config", MappingProxyType(dict(self.config)))


# ── Edge ─────────────────────────────────────────────────────────────────────

class Edge(NamedTuple):
    source: str
    source_output_index: int
    target: str
    target_input_index: int

    def __repr__(self):
        return (
            f"Edge({self.source}[{self.source_output_index}] -> "
            f"{self.target}[{self.target_input_index}])"
        )


# ── Graph ────────────────────────────────────────────────────────────────────

class GraphSnapshot:

    def __init__(self, nodes: Iterable[GraphNode] = (), edges: Iterable[Edge] = ()):
        self._nodes: Dict[str, GraphNode] = {}
        for node in nodes:
            if node.node_id in self._nodes:
                raise SchemaError(f"duplicate node id '{node.node_id}'")
            self._nodes[node.node_id] = node
        self._edges: Tuple[Edge, ...] = tuple(Edge(*e) for e in edges)
        self._position = {nid: i for i, nid in enumerate(self._nodes)}

    @property
    def nodes(self) -> Tuple[GraphNode, ...]:
        return tuple(self._nodes.values())

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    # ── Convenience queries ────────────────────────────────────────────────

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        return self._nodes.get(node_id)

    def position(self, node_id: str) -> int:
        """Insertion index of a node."""
        return self._position[node_id]

    def get_incoming(self, node_id: str) -> List[Edge]:
        return [e for e in self._edges if e.target == node_id]

    def get_outgoing(self, node_id: str) -> List[Edge]:
        return [e for e in self._edges if e.source == node_id]

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape accepted by ``dfgraph.graph.schema.load_snapshot``."""
        return {
            "nodes": [
                {"nodeId": n.node_id, "descriptorId": n.descriptor_id, "config": dict(n.config)}
                for n in self._nodes.values()
            ],
            "edges": [
                {
                    "source": e.source,
                    "sourceOutputIndex": e.source_output_index,
                    "target": e.target,
                    "targetInputIndex": e.target_input_index,
                }
                for e in self._edges
            ],
        }

    def __repr__(self):
        return f"GraphSnapshot(nodes={len(self._nodes)}, edges={len(self._edges)})"


__all__ = ["Edge", "GraphNode", "GraphSnapshot"]
