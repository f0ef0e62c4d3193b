from .model import Edge, GraphNode, GraphSnapshot
from .schema import load_snapshot, load_snapshot_file
from .validator import topological_order, validate

__all__ = [
    "Edge",
    "GraphNode",
    "GraphSnapshot",
    "load_snapshot",
    "load_snapshot_file",
    "topological_order",
    "validate",
]
