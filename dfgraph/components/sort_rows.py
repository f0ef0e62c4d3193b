from typing import Any, Mapping, Optional, Sequence

from dfgraph.core.contract import CodeWriter, Fragment
from dfgraph.core.descriptor import FieldSpec, NodeDescriptor
from dfgraph.core.types import FieldType, NodeKind
from .base import PandasContract, column_list

DESCRIPTOR = NodeDescriptor(
    id="sort_rows",
    display_name="Sort Rows",
    kind=NodeKind.SINGLE_INPUT,
    category="transforms.rows",
    icon="sort",
    description="Sort rows by one or more columns.",
    default_config={"ascending": True, "na_position": "last"},
    form_schema=(
        FieldSpec("by", FieldType.COLUMNS, "Sort by", required=True, min_items=1, input_slot=0),
        FieldSpec("ascending", FieldType.BOOLEAN, "Ascending"),
        FieldSpec("na_position", FieldType.SELECT, "Missing values", options=("first", "last"), advanced=True),
    ),
)


class SortRows(PandasContract):

    def emit(self, config: Mapping[str, Any], input_vars: Sequence[str], output_var: Optional[str]) -> Fragment:
        df = input_vars[0]
        w = CodeWriter()
        w.writeln(
            f"{output_var} = {df}.sort_values(by={column_list(config['by'])}, "
            f"ascending={config['ascending']!r}, na_position={config['na_position']!r})"
        )
        return w.fragment(reads=[df], writes=[output_var])
