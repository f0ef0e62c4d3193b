"""
dfgraph — Component registry
============================
Catalog of every component kind available to the editor and the compiler.

The registry is an explicit object populated once by the process entry
point (``register_all(pairs)``) and read-only afterwards, so a single
instance can be shared by concurrent compilations without locking.  All
iteration orders follow registration order, which keeps the browser tree
reproducible across runs.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, NamedTuple, Tuple

from dfgraph.core.contract import NodeContract
from dfgraph.core.descriptor import NodeDescriptor, parse_category
from dfgraph.errors import DuplicateIdError, UnknownComponentError

logger = logging.getLogger(__name__)

UNGROUPED = "ungrouped"

CategoryTree = Dict[str, Dict[str, List[NodeDescriptor]]]


class RegisteredComponent(NamedTuple):
    descriptor: NodeDescriptor
    contract: NodeContract


class ComponentRegistry:

    def __init__(self):
        self._components: Dict[str, RegisteredComponent] = {}

    # ── Population ────────────────────────────────────────────────────────

    def register(self, descriptor: NodeDescriptor, contract: NodeContract) -> None:
        if descriptor.id in self._components:
            raise DuplicateIdError(descriptor.id)
        self._components[descriptor.id] = RegisteredComponent(descriptor, contract)
        logger.debug(f"Registered component '{descriptor.id}' ({descriptor.kind.value})")

    def register_all(self, pairs: Iterable[Tuple[NodeDescriptor, NodeContract]]) -> None:
        for descriptor, contract in pairs:
            self.register(descriptor, contract)

    # ── Lookup ────────────────────────────────────────────────────────────

    def lookup(self, descriptor_id: str) -> RegisteredComponent:
        try:
            return self._components[descriptor_id]
        except KeyError:
            raise UnknownComponentError(descriptor_id) from None

    def descriptor(self, descriptor_id: str) -> NodeDescriptor:
        return self.lookup(descriptor_id).descriptor

    def contract(self, descriptor_id: str) -> NodeContract:
        return self.lookup(descriptor_id).contract

    def __contains__(self, descriptor_id: object) -> bool:
        return descriptor_id in self._components

    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self) -> Iterator[NodeDescriptor]:
        return (c.descriptor for c in self._components.values())

    # ── Browsing ──────────────────────────────────────────────────────────

    def list_by_category(self) -> CategoryTree:
        """category → subcategory (or 'ungrouped') → descriptors."""
        tree: CategoryTree = {}
        for descriptor in self:
            group = tree.setdefault(descriptor.category, {})
            group.setdefault(descriptor.subcategory or UNGROUPED, []).append(descriptor)
        return tree

    def search(self, text: str) -> List[NodeDescriptor]:
        """Case-insensitive substring match on name, id and category path."""
        needle = text.strip().lower()
        if not needle:
            return list(self)

        def matches(d: NodeDescriptor) -> bool:
            parts = (d.display_name, d.id, d.category, d.subcategory or "")
            return any(needle in part.lower() for part in parts)

        return [d for d in self if matches(d)]


__all__ = [
    "CategoryTree",
    "ComponentRegistry",
    "RegisteredComponent",
    "UNGROUPED",
    "parse_category",
]
