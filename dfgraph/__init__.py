"""
dfgraph
=======
Compiles a visual graph of dataframe components into a linear pandas script.

    from dfgraph import build_default_registry, compile_graph, load_snapshot

    registry = build_default_registry()
    snapshot = load_snapshot(graph_json)
    print(compile_graph(snapshot, registry))
"""

from .compiler import CompiledScript, Compiler, compile_graph
from .components import build_default_registry, core_components
from .graph import GraphSnapshot, load_snapshot, load_snapshot_file
from .registry import ComponentRegistry

__version__ = "0.1.0"

__all__ = [
    "CompiledScript",
    "Compiler",
    "ComponentRegistry",
    "GraphSnapshot",
    "build_default_registry",
    "compile_graph",
    "core_components",
    "load_snapshot",
    "load_snapshot_file",
]
