"""
dfgraph — Error taxonomy
========================
Every failure the compilation engine can surface derives from CompileError.
Each error carries enough structure (kind, node id, form field) for an
editor to highlight the offending element; the core never formats
user-facing messages beyond ``str(exc)``.

    CompileError
    ├── DuplicateIdError          registry: id registered twice
    ├── UnknownComponentError     registry: lookup of an absent id
    ├── GraphError                structural validation (see GraphErrorKind)
    ├── InvalidConfig             a visible form field holds a bad value
    ├── HelperCollisionError      two kinds emit different helpers, same name
    ├── UnsupportedConfigValue    a contract cannot emit for a config value
    └── ContractViolation         a fragment touches undeclared names

SchemaError is separate: it is raised while *ingesting* a snapshot, before
there is any graph to compile.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple


class SchemaError(ValueError):
    """Raised when a serialised graph snapshot fails structural parsing."""


class CompileError(Exception):
    kind: str = "CompileError"

    def __init__(
        self,
        message: str,
        *,
        node_id: Optional[str] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.node_id = node_id
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        """Structured form handed to the editor."""
        return {
            "kind": self.kind,
            "message": self.message,
            "nodeId": self.node_id,
            "field": self.field,
        }


# ── Registry ─────────────────────────────────────────────────────────────────

class DuplicateIdError(CompileError):
    kind = "DuplicateIdError"

    def __init__(self, descriptor_id: str):
        super().__init__(f"component '{descriptor_id}' is already registered")
        self.descriptor_id = descriptor_id


class UnknownComponentError(CompileError, KeyError):
    kind = "UnknownComponentError"

    def __init__(self, descriptor_id: str):
        super().__init__(f"no component registered with id '{descriptor_id}'")
        self.descriptor_id = descriptor_id

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


# ── Graph validation ─────────────────────────────────────────────────────────

class GraphErrorKind(Enum):
    CYCLE = "Cycle"
    MISSING_INPUT = "MissingInput"
    DUPLICATE_INPUT_BINDING = "DuplicateInputBinding"
    UNKNOWN_DESCRIPTOR = "UnknownDescriptor"
    UNKNOWN_NODE = "UnknownNode"
    INVALID_PORT = "InvalidPort"


class GraphError(CompileError):

    def __init__(self, error_kind: GraphErrorKind, message: str, *, node_id: Optional[str] = None):
        super().__init__(message, node_id=node_id)
        self.error_kind = error_kind

    @property
    def kind(self) -> str:  # type: ignore[override]
        return self.error_kind.value


# ── Configuration ────────────────────────────────────────────────────────────

class InvalidConfig(CompileError):
    kind = "InvalidConfig"


# ── Compilation ──────────────────────────────────────────────────────────────

class HelperCollisionError(CompileError):
    kind = "HelperCollisionError"

    def __init__(self, helper_name: str, node_kinds: Sequence[str], *, node_id: Optional[str] = None):
        kinds = " and ".join(f"'{k}'" for k in node_kinds)
        super().__init__(
            f"helper function '{helper_name}' is defined with different bodies by {kinds}",
            node_id=node_id,
        )
        self.helper_name = helper_name
        self.node_kinds: Tuple[str, ...] = tuple(node_kinds)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["nodeKinds"] = list(self.node_kinds)
        return data


class UnsupportedConfigValue(CompileError):
    kind = "UnsupportedConfigValue"

    def __init__(self, field: str, value: Any, *, node_id: Optional[str] = None):
        super().__init__(
            f"unsupported value {value!r} for '{field}'",
            node_id=node_id,
            field=field,
        )
        self.value = value


class ContractViolation(CompileError):
    kind = "ContractViolation"


__all__ = [
    "CompileError",
    "ContractViolation",
    "DuplicateIdError",
    "GraphError",
    "GraphErrorKind",
    "HelperCollisionError",
    "InvalidConfig",
    "SchemaError",
    "UnknownComponentError",
    "UnsupportedConfigValue",
]
