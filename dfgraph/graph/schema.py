"""
dfgraph — Graph snapshot wire format
====================================
Parses the editor's serialised graph into a GraphSnapshot.

Canonical JSON format
---------------------

    {
      "nodes": [
        {
          "nodeId":       "join_1",           // unique within this graph (str, required)
          "descriptorId": "join",             // registered component id (str, required)
          "config":       { "how": "inner" }  // form values (object, optional)
        }
      ],
      "edges": [
        {
          "source":            "customers",   // upstream node id (str, required)
          "sourceOutputIndex": 0,             // output slot (int, optional → 0)
          "target":            "join_1",      // downstream node id (str, required)
          "targetInputIndex":  0              // input slot (int, required)
        }
      ]
    }

snake_case keys (node_id, descriptor_id, …) are accepted too.  Only the
shape is checked here; arity and registry membership are the validator's
job (dfgraph.graph.validator).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dfgraph.errors import SchemaError
from .model import Edge, GraphNode, GraphSnapshot


# ── Wire models ──────────────────────────────────────────────────────────────

class NodeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    node_id: str = Field(alias="nodeId", min_length=1)
    descriptor_id: str = Field(alias="descriptorId", min_length=1)
    config: Dict[str, Any] = Field(default_factory=dict)


class EdgeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    source: str
    source_output_index: int = Field(default=0, alias="sourceOutputIndex")
    target: str
    target_input_index: int = Field(alias="targetInputIndex")


class GraphModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    nodes: List[NodeModel] = Field(default_factory=list)
    edges: List[EdgeModel] = Field(default_factory=list)

    def to_snapshot(self) -> GraphSnapshot:
        return GraphSnapshot(
            nodes=[GraphNode(n.node_id, n.descriptor_id, n.config) for n in self.nodes],
            edges=[
                Edge(e.source, e.source_output_index, e.target, e.target_input_index)
                for e in self.edges
            ],
        )


# ── Public loaders ───────────────────────────────────────────────────────────

def load_snapshot(data: Dict[str, Any]) -> GraphSnapshot:
    """
    Build a GraphSnapshot from a parsed JSON dict.

    Raises:
        SchemaError: On any structural violation (missing keys, wrong types,
                     duplicate node ids).
    """
    if not isinstance(data, dict):
        raise SchemaError("graph JSON must be a JSON object at the top level")
    try:
        model = GraphModel.model_validate(data)
    except ValidationError as exc:
        raise SchemaError(f"invalid graph snapshot: {exc}") from exc
    return model.to_snapshot()


def load_snapshot_file(path: Union[str, Path]) -> GraphSnapshot:
    """
    Load a graph snapshot from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        SchemaError: If the file is not valid JSON or has the wrong shape.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise SchemaError(f"{path}: not valid JSON ({exc})") from exc
    return load_snapshot(data)


__all__ = ["EdgeModel", "GraphModel", "NodeModel", "load_snapshot", "load_snapshot_file"]
