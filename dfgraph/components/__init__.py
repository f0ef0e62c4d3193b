"""
Reference component family — pandas.

Nothing registers itself on import.  The process entry point builds a
registry explicitly:

    registry = ComponentRegistry()
    registry.register_all(core_components())

or simply ``build_default_registry()``.
"""

from typing import List, Tuple

from dfgraph.core.contract import NodeContract
from dfgraph.core.descriptor import NodeDescriptor
from dfgraph.registry import ComponentRegistry
from . import concat, csv_input, csv_output, deduplicate, filter_rows, join, select_columns, sort_rows


def core_components() -> List[Tuple[NodeDescriptor, NodeContract]]:
    """(descriptor, contract) pairs, in browser order."""
    return [
        (csv_input.DESCRIPTOR, csv_input.CsvInput()),
        (filter_rows.DESCRIPTOR, filter_rows.FilterRows()),
        (sort_rows.DESCRIPTOR, sort_rows.SortRows()),
        (deduplicate.DESCRIPTOR, deduplicate.Deduplicate()),
        (select_columns.DESCRIPTOR, select_columns.SelectColumns()),
        (join.DESCRIPTOR, join.Join()),
        (concat.DESCRIPTOR, concat.Concat()),
        (csv_output.DESCRIPTOR, csv_output.CsvOutput()),
    ]


def build_default_registry() -> ComponentRegistry:
    registry = ComponentRegistry()
    registry.register_all(core_components())
    return registry


__all__ = ["build_default_registry", "core_components"]
