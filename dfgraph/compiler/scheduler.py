"""
dfgraph Compiler — Scheduler
============================
Maps a validated GraphSnapshot → Schedule: the nodes in execution order,
each with its resolved input variables and its output variable.

Variable naming
---------------
Every node with an output gets one Python variable:

    {var_prefix}{safe_node_id}          e.g.  var_customers
                                              var_join_1

where safe_node_id replaces every non-identifier character with "_".
Names are handed out in node *insertion* order, so adding an edge never
renames anything.  When two ids flatten to the same name ("a-b", "a_b") the
later node gets a numeric suffix: var_a_b, var_a_b_2, …  Names bound by the
script's imports and helpers ("pd", "anti_join") count as taken, so an
empty prefix can't shadow them.

Input resolution
----------------
A node's input_vars list is indexed by input slot: input_vars[i] is the
output variable of the node wired into slot i.
"""

from __future__ import annotations

import ast
import keyword
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from dfgraph.errors import CompileError, ContractViolation
from dfgraph.graph.model import GraphSnapshot
from dfgraph.graph.validator import topological_order
from dfgraph.registry import ComponentRegistry

logger = logging.getLogger(__name__)

_NON_IDENT = re.compile(r"\W")


# ── Scheduled node (resolved reference) ──────────────────────────────────────

@dataclass
class ScheduledNode:
    node_id: str
    descriptor_id: str
    display_name: str

    # effective config (defaults + node overrides)
    config: Mapping[str, Any] = field(default_factory=dict)

    # slot index → upstream variable
    input_vars: List[str] = field(default_factory=list)

    # None for sinks
    output_var: Optional[str] = None


@dataclass
class Schedule:
    nodes: List[ScheduledNode] = field(default_factory=list)
    # node_id → output variable, for every node that has one
    variables: Dict[str, str] = field(default_factory=dict)

    @property
    def order(self) -> List[str]:
        return [n.node_id for n in self.nodes]


# ── Naming ───────────────────────────────────────────────────────────────────

def _safe_name(node_id: str) -> str:
    """Convert a node id to a safe Python identifier fragment."""
    return _NON_IDENT.sub("_", node_id) or "_"


def imported_names(statement: str) -> Set[str]:
    """Names an import statement binds: 'import pandas as pd' → {'pd'}."""
    try:
        tree = ast.parse(statement)
    except SyntaxError:
        raise ContractViolation(f"invalid import statement {statement!r}") from None
    names = set()
    for node in ast.walk(tree):
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            for alias in node.names:
                names.add(alias.asname or alias.name.split(".")[0])
    return names


def reserved_names(
    graph: GraphSnapshot,
    registry: ComponentRegistry,
    configs: Mapping[str, Mapping[str, Any]],
) -> Set[str]:
    """Module-level names bound by the script's imports and helper functions."""
    reserved: Set[str] = set()
    for node in graph.nodes:
        contract = registry.contract(node.descriptor_id)
        config = configs.get(node.node_id, node.config)
        try:
            for statement in contract.imports(config):
                reserved |= imported_names(statement)
            reserved.update(h.name for h in contract.helper_functions(config))
        except CompileError as exc:
            if exc.node_id is None:
                exc.node_id = node.node_id
            raise
    return reserved


def assign_variables(
    graph: GraphSnapshot,
    registry: ComponentRegistry,
    prefix: str = "var_",
    reserved: Iterable[str] = (),
) -> Dict[str, str]:
    """node_id → unique output variable, in insertion order, avoiding *reserved*."""
    taken = set(reserved)
    names: Dict[str, str] = {}
    for node in graph.nodes:
        if registry.descriptor(node.descriptor_id).output_arity == 0:
            continue
        base = f"{prefix}{_safe_name(node.node_id)}"
        if not base.isidentifier() or keyword.iskeyword(base):
            base = f"_{base}"
        name, n = base, 1
        while name in taken:
            n += 1
            name = f"{base}_{n}"
        taken.add(name)
        names[node.node_id] = name
    return names


# ── Scheduler ────────────────────────────────────────────────────────────────

class Scheduler:
    def __init__(self, graph: GraphSnapshot, registry: ComponentRegistry, var_prefix: str = "var_"):
        self.graph = graph
        self.registry = registry
        self.var_prefix = var_prefix

    def _resolve_inputs(self, node_id: str, variables: Dict[str, str]) -> List[str]:
        incoming = sorted(self.graph.get_incoming(node_id), key=lambda e: e.target_input_index)
        return [variables[e.source] for e in incoming]

    def build(self, configs: Optional[Mapping[str, Mapping[str, Any]]] = None) -> Schedule:
        """
        Build the Schedule.  *configs* maps node ids to already-validated
        effective configs; nodes missing from it fall back to their raw config.
        """
        configs = configs or {}
        reserved = reserved_names(self.graph, self.registry, configs)
        variables = assign_variables(self.graph, self.registry, self.var_prefix, reserved)
        scheduled: List[ScheduledNode] = []

        for node_id in topological_order(self.graph):
            node = self.graph.get_node(node_id)
            descriptor = self.registry.descriptor(node.descriptor_id)
            scheduled.append(ScheduledNode(
                node_id=node_id,
                descriptor_id=descriptor.id,
                display_name=descriptor.display_name,
                config=configs.get(node_id, node.config),
                input_vars=self._resolve_inputs(node_id, variables),
                output_var=variables.get(node_id),
            ))

        logger.debug(f"Scheduled {len(scheduled)} nodes: {[n.node_id for n in scheduled]}")
        return Schedule(nodes=scheduled, variables=variables)


__all__ = ["Schedule", "ScheduledNode", "Scheduler", "assign_variables", "imported_names", "reserved_names"]
