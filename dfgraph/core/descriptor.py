"""
dfgraph — Node descriptors and form schemas
===========================================
A NodeDescriptor is the static, immutable metadata for one component kind:
how it is shown in the browser, how many inputs/outputs it has, the config a
freshly placed node starts with, and the declarative form used to collect
and validate that config.

Conditional fields
------------------
A FieldSpec may carry a VisibleWhen predicate:

    FieldSpec("cartesian_policy", FieldType.SELECT, ...,
              condition=VisibleWhen("how", {"inner", "left", ...}))

The field is visible only while its controlling sibling is itself visible
and currently holds one of ``values``.  Hidden fields are never validated,
so a stale value left behind after the user changes the controlling field
does not block compilation.

Categories
----------
``category`` may be given in dotted form, ``"transforms.rows"``; when no
explicit ``subcategory`` is passed the path is split into the two.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from dfgraph.errors import InvalidConfig
from .types import FieldType, NodeKind

logger = logging.getLogger(__name__)


# ── Field specs ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class VisibleWhen:
    depends_on: str
    values: FrozenSet[Any]

    def __post_init__(self):
        object.__setattr__(self, "values", frozenset(self.values))

    def matches(self, config: Mapping[str, Any]) -> bool:
        try:
            return config.get(self.depends_on) in self.values
        except TypeError:
            # unhashable controller value: never one of the options
            return False


@dataclass(frozen=True)
class FieldSpec:
    id: str
    type: FieldType
    label: str
    required: bool = False
    options: Tuple[Any, ...] = ()        # SELECT values
    minimum: Optional[float] = None       # NUMBER / INTEGER
    maximum: Optional[float] = None
    min_items: Optional[int] = None       # COLUMNS
    placeholder: str = ""
    tooltip: str = ""
    input_slot: Optional[int] = None      # column pickers: which input they browse
    advanced: bool = False
    nullable: bool = False                # None means "not set" and is accepted
    condition: Optional[VisibleWhen] = None

    def check(self, value: Any) -> Optional[str]:
        """Return a problem description for *value*, or None when it is acceptable."""
        if value is None:
            if self.required:
                return f"'{self.label}' is required"
            return None if self.nullable else f"'{self.label}' must have a value"
        if self.type == FieldType.TEXT and isinstance(value, str) and not value.strip():
            return f"'{self.label}' is required" if self.required else None

        if not FieldType.validate(value, self.type):
            return f"'{self.label}' expects a {self.type.value} value, got {value!r}"

        if self.type == FieldType.SELECT and self.options and value not in self.options:
            allowed = ", ".join(repr(o) for o in self.options)
            return f"'{self.label}' must be one of {allowed}, got {value!r}"

        if self.type in (FieldType.NUMBER, FieldType.INTEGER):
            if self.minimum is not None and value < self.minimum:
                return f"'{self.label}' must be >= {self.minimum}"
            if self.maximum is not None and value > self.maximum:
                return f"'{self.label}' must be <= {self.maximum}"

        if self.type == FieldType.COLUMNS:
            needed = self.min_items if self.min_items is not None else (1 if self.required else 0)
            if len(value) < needed:
                return f"'{self.label}' needs at least {needed} column(s)"

        return None


# ── Descriptor ───────────────────────────────────────────────────────────────

def parse_category(path: str) -> Tuple[str, Optional[str]]:
    """Split the dotted notation 'transforms.rows' into (category, subcategory)."""
    category, _, subcategory = path.partition(".")
    return category, (subcategory or None)


@dataclass(frozen=True)
class NodeDescriptor:
    id: str
    display_name: str
    kind: NodeKind
    category: str
    subcategory: Optional[str] = None
    description: str = ""
    icon: Optional[str] = None
    default_config: Mapping[str, Any] = field(default_factory=dict)
    form_schema: Tuple[FieldSpec, ...] = ()

    def __post_init__(self):
        if self.subcategory is None:
            category, subcategory = parse_category(self.category)
            object.__setattr__(self, "category", category)
            object.__setattr__(self, "subcategory", subcategory)
        object.__setattr__(self, "default_config", MappingProxyType(dict(self.default_config)))
        object.__setattr__(self, "form_schema", tuple(self.form_schema))
        ids = [f.id for f in self.form_schema]
        if len(ids) != len(set(ids)):
            raise ValueError(f"descriptor '{self.id}' declares duplicate form field ids")

    @property
    def output_arity(self) -> int:
        return self.kind.output_arity

    def get_field(self, field_id: str) -> Optional[FieldSpec]:
        return next((f for f in self.form_schema if f.id == field_id), None)

    def effective_config(self, config: Mapping[str, Any]) -> Dict[str, Any]:
        """Defaults overlaid with the node's own values."""
        merged = dict(self.default_config)
        merged.update(config)
        return merged


# ── Visibility + validation ──────────────────────────────────────────────────

def visible_fields(descriptor: NodeDescriptor, config: Mapping[str, Any]) -> List[FieldSpec]:
    """Fields currently relevant for *config*, in form order."""
    cache: Dict[str, bool] = {}

    def visible(spec: FieldSpec, trail: Tuple[str, ...] = ()) -> bool:
        if spec.id in cache:
            return cache[spec.id]
        if spec.condition is None:
            result = True
        else:
            controller = descriptor.get_field(spec.condition.depends_on)
            if controller is not None and controller.id not in trail:
                result = visible(controller, trail + (spec.id,)) and spec.condition.matches(config)
            else:
                result = spec.condition.matches(config)
        cache[spec.id] = result
        return result

    return [spec for spec in descriptor.form_schema if visible(spec)]


def is_visible(descriptor: NodeDescriptor, field_id: str, config: Mapping[str, Any]) -> bool:
    return any(f.id == field_id for f in visible_fields(descriptor, config))


def validate_config(
    descriptor: NodeDescriptor,
    config: Mapping[str, Any],
    node_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Validate a node's config against its descriptor's form.

    Returns the effective config (defaults + overrides).

    Raises:
        InvalidConfig: on the first visible field whose value is unacceptable.
    """
    effective = descriptor.effective_config(config)
    for spec in visible_fields(descriptor, effective):
        problem = spec.check(effective.get(spec.id))
        if problem is not None:
            logger.debug(f"Config for node '{node_id}' rejected on field '{spec.id}': {problem}")
            raise InvalidConfig(problem, node_id=node_id, field=spec.id)
    return effective


__all__ = [
    "FieldSpec",
    "NodeDescriptor",
    "VisibleWhen",
    "is_visible",
    "parse_category",
    "validate_config",
    "visible_fields",
]
