from enum import Enum
from numbers import Integral, Real
from typing import Any, Optional


class NodeKind(Enum):
    """Input/output arity of a component kind."""

    SOURCE = "source"
    SINGLE_INPUT = "single_input"
    DOUBLE_INPUT = "double_input"
    MULTI_INPUT = "multi_input"
    SINK = "sink"

    @property
    def min_inputs(self) -> int:
        return _ARITY[self][0]

    @property
    def max_inputs(self) -> Optional[int]:
        """None means unbounded."""
        return _ARITY[self][1]

    @property
    def output_arity(self) -> int:
        return _ARITY[self][2]

    def accepts_slot(self, index: int) -> bool:
        if index < 0:
            return False
        return self.max_inputs is None or index < self.max_inputs


# kind -> (min inputs, max inputs, outputs)
_ARITY = {
    NodeKind.SOURCE:       (0, 0, 1),
    NodeKind.SINGLE_INPUT: (1, 1, 1),
    NodeKind.DOUBLE_INPUT: (2, 2, 1),
    NodeKind.MULTI_INPUT:  (1, None, 1),
    NodeKind.SINK:         (1, 1, 0),
}


def is_column_ref(value: Any) -> bool:
    """A plain string names a column; a mapping may also reference a position."""
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, dict):
        ref = value.get("value")
        if value.get("named", True):
            return isinstance(ref, str) and bool(ref.strip())
        if isinstance(ref, bool):
            return False
        if isinstance(ref, Integral):
            return True
        return isinstance(ref, str) and ref.strip().isdigit()
    return False


class FieldType(Enum):
    TEXT = "text"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    SELECT = "select"
    COLUMN = "column"
    COLUMNS = "columns"

    @staticmethod
    def validate(value: Any, field_type: "FieldType") -> bool:
        """Type check only; constraints are applied by FieldSpec."""
        if field_type == FieldType.TEXT:
            return isinstance(value, str)
        elif field_type == FieldType.NUMBER:
            return isinstance(value, Real) and not isinstance(value, bool)
        elif field_type == FieldType.INTEGER:
            return isinstance(value, Integral) and not isinstance(value, bool)
        elif field_type == FieldType.BOOLEAN:
            return isinstance(value, bool)
        elif field_type == FieldType.SELECT:
            return isinstance(value, (str, int, float)) and not isinstance(value, bool)
        elif field_type == FieldType.COLUMN:
            return is_column_ref(value)
        elif field_type == FieldType.COLUMNS:
            return isinstance(value, (list, tuple)) and all(is_column_ref(v) for v in value)

        return False
