"""
dfgraph — Node contract
=======================
A NodeContract provides the code-emission hooks for one component kind:

  imports(config)
      Ordered import statements the node's code needs.  May depend on the
      config (e.g. ``import warnings`` only when a guard is enabled).

  helper_functions(config)
      Self-contained top-level function definitions the node's statement
      calls.  Identity is the function *name*: the compiler emits each name
      once and refuses two different bodies under the same name.

  check(config)
      Optional cross-field validation the declarative form cannot express.

  emit(config, input_vars, output_var)
      Returns a Fragment: the statement lines plus the variables it reads and
      writes and the helpers it calls, so the compiler can verify variable
      threading before concatenating anything.

Adding a new node kind
----------------------
1. Subclass NodeContract and implement emit() (plus the other hooks you need).
2. Pair it with a NodeDescriptor.
3. Pass the pair to ComponentRegistry.register_all() at start-up.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple


# ── Code writer ──────────────────────────────────────────────────────────────

class CodeWriter:
    """Line accumulator for one node's statement(s)."""

    def __init__(self):
        self._lines: List[str] = []

    def writeln(self, line: str) -> "CodeWriter":
        self._lines.append(line)
        return self

    def comment(self, text: str) -> "CodeWriter":
        return self.writeln(f"# {text}")

    def fragment(
        self,
        reads: Iterable[str] = (),
        writes: Iterable[str] = (),
        calls: Iterable[str] = (),
    ) -> "Fragment":
        return Fragment(
            lines=tuple(self._lines),
            reads=frozenset(reads),
            writes=frozenset(writes),
            calls=frozenset(calls),
        )


# ── Emission products ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Fragment:
    lines: Tuple[str, ...]
    reads: FrozenSet[str] = frozenset()
    writes: FrozenSet[str] = frozenset()
    calls: FrozenSet[str] = frozenset()

    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class HelperFunction:
    name: str
    source: str

    def __post_init__(self):
        object.__setattr__(self, "source", self.source.strip("\n"))


# ── Base contract ────────────────────────────────────────────────────────────

class NodeContract(ABC):
    """
    Base class — subclass and override the hooks you need.
    Only emit() is mandatory.
    """

    def imports(self, config: Mapping[str, Any]) -> List[str]:
        return []

    def helper_functions(self, config: Mapping[str, Any]) -> List[HelperFunction]:
        return []

    def check(self, config: Mapping[str, Any]) -> None:
        """Raise InvalidConfig for problems spanning several fields."""
        pass

    @abstractmethod
    def emit(
        self,
        config: Mapping[str, Any],
        input_vars: Sequence[str],
        output_var: Optional[str],
    ) -> Fragment:
        ...


__all__ = ["CodeWriter", "Fragment", "HelperFunction", "NodeContract"]
