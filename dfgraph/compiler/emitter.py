"""
dfgraph Compiler — Script Emitter
=================================
Converts a Schedule into the final script text.

Output structure
----------------
    import pandas as pd                 ← imports, deduplicated by exact text,
    import warnings                       first occurrence wins

    def check_cartesian_product(...):   ← helpers, deduplicated by name
        ...

    # CSV File Input (customers)        ← one fragment per node, in
    var_customers = pd.read_csv(...)      topological order

    # Join Datasets (join_1)
    var_join_1 = pd.merge(...)

Blocks are separated by one blank line; empty blocks are left out.
Everything is assembled in memory and returned only once every node has
emitted successfully, so a failure never yields a partial script.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from dfgraph.core.contract import Fragment, HelperFunction
from dfgraph.errors import CompileError, ContractViolation, HelperCollisionError
from dfgraph.registry import ComponentRegistry
from .scheduler import Schedule, ScheduledNode

logger = logging.getLogger(__name__)

# anything that could end a comment line early
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f\x85\u2028\u2029]")


@dataclass(frozen=True)
class CompiledScript:
    source: str
    # node ids in emission order
    order: Tuple[str, ...]
    # node id → output variable
    variables: Dict[str, str]

    def __str__(self) -> str:
        return self.source


# ── Fragment checks ──────────────────────────────────────────────────────────

def _check_fragment(snode: ScheduledNode, fragment: Fragment, helper_names: List[str]) -> None:
    stray_reads = set(fragment.reads) - set(snode.input_vars)
    if stray_reads:
        raise ContractViolation(
            f"'{snode.descriptor_id}' reads undeclared variables {sorted(stray_reads)}",
            node_id=snode.node_id,
        )

    expected_writes = {snode.output_var} if snode.output_var else set()
    if set(fragment.writes) != expected_writes:
        raise ContractViolation(
            f"'{snode.descriptor_id}' must assign exactly {sorted(expected_writes)}, "
            f"assigns {sorted(fragment.writes)}",
            node_id=snode.node_id,
        )

    stray_calls = set(fragment.calls) - set(helper_names)
    if stray_calls:
        raise ContractViolation(
            f"'{snode.descriptor_id}' calls helpers it does not provide: {sorted(stray_calls)}",
            node_id=snode.node_id,
        )


# ── Deduplication ────────────────────────────────────────────────────────────

class _HelperTable:
    """Helpers by name, remembering which node kind contributed each."""

    def __init__(self):
        self._helpers: Dict[str, Tuple[HelperFunction, str]] = {}

    def add(self, helper: HelperFunction, descriptor_id: str, node_id: str) -> None:
        existing = self._helpers.get(helper.name)
        if existing is None:
            self._helpers[helper.name] = (helper, descriptor_id)
            return
        known, owner = existing
        if known.source != helper.source:
            raise HelperCollisionError(helper.name, (owner, descriptor_id), node_id=node_id)

    def sources(self) -> List[str]:
        return [helper.source for helper, _ in self._helpers.values()]


def _node_comment(snode: ScheduledNode) -> str:
    """``# <display name> (<node id>)`` kept on a single line."""
    text = f"{snode.display_name} ({snode.node_id})"
    return "# " + _CONTROL_CHARS.sub(" ", text)


def _dedup_imports(statements: List[str]) -> List[str]:
    seen = set()
    result: List[str] = []
    for stmt in statements:
        if stmt not in seen:
            seen.add(stmt)
            result.append(stmt)
    return result


# ── Public API ───────────────────────────────────────────────────────────────

def emit(
    schedule: Schedule,
    registry: ComponentRegistry,
    node_comments: bool = True,
) -> CompiledScript:
    """
    Emit the complete script for a Schedule.

    Raises:
        HelperCollisionError, ContractViolation, UnsupportedConfigValue:
            all carrying the id of the node being emitted.
    """
    imports: List[str] = []
    helpers = _HelperTable()
    statements: List[str] = []

    for snode in schedule.nodes:
        contract = registry.contract(snode.descriptor_id)
        try:
            node_imports = contract.imports(snode.config)
            node_helpers = contract.helper_functions(snode.config)
            fragment = contract.emit(snode.config, list(snode.input_vars), snode.output_var)
        except CompileError as exc:
            if exc.node_id is None:
                exc.node_id = snode.node_id
            raise

        _check_fragment(snode, fragment, [h.name for h in node_helpers])

        imports.extend(node_imports)
        for helper in node_helpers:
            helpers.add(helper, snode.descriptor_id, snode.node_id)

        text = fragment.text()
        if node_comments:
            text = f"{_node_comment(snode)}\n{text}"
        statements.append(text)

    blocks = [
        "\n".join(_dedup_imports(imports)),
        "\n\n\n".join(helpers.sources()),
        "\n\n".join(statements),
    ]
    source = "\n\n".join(b for b in blocks if b)
    logger.debug(f"Emitted {len(schedule.nodes)} fragments, {len(source)} chars")

    return CompiledScript(
        source=source + "\n" if source else "",
        order=tuple(schedule.order),
        variables=dict(schedule.variables),
    )


__all__ = ["CompiledScript", "emit"]
