"""
dfgraph Compiler
================
Converts a GraphSnapshot into a linear pandas script.

Pipeline:
    GraphSnapshot  →  [validator]            structure (arity, bindings, cycles)
                   →  [validate_config]      visible form fields, contract.check()
                   →  [scheduler]  →  Schedule
    Schedule       →  [emitter]    →  CompiledScript

Public API
----------
    from dfgraph.compiler import compile_graph

    source = compile_graph(snapshot, registry)
    print(source)

Compilation is pure and synchronous: nothing is executed, nothing is
written, and the registry is only read, so one registry can serve any
number of concurrent compilations.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from dfgraph.core.descriptor import validate_config
from dfgraph.errors import CompileError
from dfgraph.graph.model import GraphSnapshot
from dfgraph.graph.validator import validate
from dfgraph.registry import ComponentRegistry
from dfgraph.settings import Settings
from .emitter import CompiledScript, emit
from .scheduler import Schedule, Scheduler

logger = logging.getLogger(__name__)


class Compiler:

    def __init__(self, registry: ComponentRegistry, settings: Optional[Settings] = None):
        self.registry = registry
        self.settings = settings or Settings()

    def validate(self, graph: GraphSnapshot) -> Dict[str, Dict[str, Any]]:
        """
        Run every pre-emission check.  Returns node_id → effective config.

        Raises:
            GraphError: structural problems.
            InvalidConfig: the first node (insertion order) with a bad config.
        """
        validate(graph, self.registry)

        configs: Dict[str, Dict[str, Any]] = {}
        for node in graph.nodes:
            component = self.registry.lookup(node.descriptor_id)
            effective = validate_config(component.descriptor, node.config, node_id=node.node_id)
            try:
                component.contract.check(effective)
            except CompileError as exc:
                if exc.node_id is None:
                    exc.node_id = node.node_id
                raise
            configs[node.node_id] = effective
        return configs

    def schedule(self, graph: GraphSnapshot) -> Schedule:
        configs = self.validate(graph)
        return Scheduler(graph, self.registry, self.settings.var_prefix).build(configs)

    def compile(self, graph: GraphSnapshot) -> CompiledScript:
        schedule = self.schedule(graph)
        script = emit(schedule, self.registry, node_comments=self.settings.node_comments)
        logger.info(f"Compiled {graph!r} into {len(script.source.splitlines())} lines")
        return script


def compile_graph(
    graph: GraphSnapshot,
    registry: ComponentRegistry,
    settings: Optional[Settings] = None,
) -> str:
    """
    Compile a graph snapshot into script source.

    Args:
        graph:     The snapshot to compile.
        registry:  Populated component registry.
        settings:  Naming / comment options; defaults to Settings().

    Returns:
        Complete script as a single string.

    Raises:
        CompileError: any validation or emission failure; no partial output.
    """
    return Compiler(registry, settings).compile(graph).source


__all__ = ["CompiledScript", "Compiler", "compile_graph"]
