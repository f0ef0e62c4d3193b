"""
dfgraph — Structural graph validation
=====================================
Checks a GraphSnapshot against the registry's arity rules before any code
is generated.  The first violation found is raised as a GraphError; checks
run in this order so the reported error is deterministic:

    UnknownDescriptor → UnknownNode → InvalidPort →
    DuplicateInputBinding → Cycle → MissingInput

Configuration values are *not* checked here; see
dfgraph.core.descriptor.validate_config.
"""

from __future__ import annotations

import heapq
import logging
from collections import defaultdict
from typing import Dict, List, Set, Tuple

from dfgraph.errors import GraphError, GraphErrorKind
from dfgraph.registry import ComponentRegistry
from .model import GraphSnapshot

logger = logging.getLogger(__name__)


# ── Topological order ────────────────────────────────────────────────────────

def _cycle_members(graph: GraphSnapshot, remaining: Set[str]) -> List[str]:
    """
    Nodes left after Kahn's algorithm include everything *downstream* of a
    cycle too.  Keep only the nodes that can reach themselves.
    """

    def on_cycle(start: str) -> bool:
        seen: Set[str] = set()
        stack = [e.target for e in graph.get_outgoing(start) if e.target in remaining]
        while stack:
            nid = stack.pop()
            if nid == start:
                return True
            if nid in seen:
                continue
            seen.add(nid)
            stack.extend(e.target for e in graph.get_outgoing(nid) if e.target in remaining)
        return False

    return sorted((nid for nid in remaining if on_cycle(nid)), key=graph.position)


def topological_order(graph: GraphSnapshot) -> List[str]:
    """
    Node ids sources-first.  Among nodes that are ready at the same time the
    one inserted first wins, so identical snapshots always order identically.

    Raises:
        GraphError(CYCLE): naming the first node, in insertion order, on a cycle.
    """
    indegree: Dict[str, int] = {n.node_id: 0 for n in graph.nodes}
    successors: Dict[str, List[str]] = defaultdict(list)
    for edge in graph.edges:
        if edge.source in indegree and edge.target in indegree:
            indegree[edge.target] += 1
            successors[edge.source].append(edge.target)

    ready: List[Tuple[int, str]] = [
        (graph.position(nid), nid) for nid, deg in indegree.items() if deg == 0
    ]
    heapq.heapify(ready)

    order: List[str] = []
    while ready:
        _, nid = heapq.heappop(ready)
        order.append(nid)
        for succ in successors[nid]:
            indegree[succ] -= 1
            if indegree[succ] == 0:
                heapq.heappush(ready, (graph.position(succ), succ))

    if len(order) < len(indegree):
        members = _cycle_members(graph, set(indegree) - set(order))
        raise GraphError(
            GraphErrorKind.CYCLE,
            f"graph contains a cycle through: {', '.join(members)}",
            node_id=members[0] if members else None,
        )
    return order


# ── Validation ───────────────────────────────────────────────────────────────

def validate(graph: GraphSnapshot, registry: ComponentRegistry) -> None:
    """
    Raise GraphError on the first structural violation; return None when the
    graph can be compiled.
    """
    # ── Descriptors ─────────────────────────────────────────────────────────
    kinds = {}
    for node in graph.nodes:
        if node.descriptor_id not in registry:
            raise GraphError(
                GraphErrorKind.UNKNOWN_DESCRIPTOR,
                f"node '{node.node_id}' uses unknown component '{node.descriptor_id}'",
                node_id=node.node_id,
            )
        kinds[node.node_id] = registry.descriptor(node.descriptor_id).kind

    # ── Edge endpoints ──────────────────────────────────────────────────────
    for edge in graph.edges:
        for end, other in ((edge.source, edge.target), (edge.target, edge.source)):
            if end not in graph:
                raise GraphError(
                    GraphErrorKind.UNKNOWN_NODE,
                    f"{edge!r} references missing node '{end}'",
                    node_id=other if other in graph else None,
                )

    # ── Slot ranges ─────────────────────────────────────────────────────────
    for edge in graph.edges:
        source_kind = kinds[edge.source]
        if not 0 <= edge.source_output_index < source_kind.output_arity:
            raise GraphError(
                GraphErrorKind.INVALID_PORT,
                f"node '{edge.source}' has no output {edge.source_output_index}",
                node_id=edge.source,
            )
        if not kinds[edge.target].accepts_slot(edge.target_input_index):
            raise GraphError(
                GraphErrorKind.INVALID_PORT,
                f"node '{edge.target}' has no input {edge.target_input_index}",
                node_id=edge.target,
            )

    # ── Bindings ────────────────────────────────────────────────────────────
    fed: Dict[str, Set[int]] = defaultdict(set)
    for edge in graph.edges:
        slots = fed[edge.target]
        if edge.target_input_index in slots:
            raise GraphError(
                GraphErrorKind.DUPLICATE_INPUT_BINDING,
                f"input {edge.target_input_index} of node '{edge.target}' is fed by more than one edge",
                node_id=edge.target,
            )
        slots.add(edge.target_input_index)

    # ── Acyclicity ──────────────────────────────────────────────────────────
    topological_order(graph)

    # ── Arity ───────────────────────────────────────────────────────────────
    for node in graph.nodes:
        slots = fed.get(node.node_id, set())
        # multi-input nodes take any number of inputs but without gaps
        needed = max(kinds[node.node_id].min_inputs, max(slots, default=-1) + 1)
        missing = [i for i in range(needed) if i not in slots]
        if missing:
            raise GraphError(
                GraphErrorKind.MISSING_INPUT,
                f"input {missing[0]} of node '{node.node_id}' is not connected",
                node_id=node.node_id,
            )

    logger.debug(f"Validated {graph!r}")


__all__ = ["topological_order", "validate"]
