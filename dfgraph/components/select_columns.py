from typing import Any, Mapping, Optional, Sequence

from dfgraph.core.contract import CodeWriter, Fragment
from dfgraph.core.descriptor import FieldSpec, NodeDescriptor
from dfgraph.core.types import FieldType, NodeKind
from dfgraph.errors import UnsupportedConfigValue
from .base import PandasContract, column_list

DESCRIPTOR = NodeDescriptor(
    id="select_columns",
    display_name="Select Columns",
    kind=NodeKind.SINGLE_INPUT,
    category="transforms.columns",
    icon="columns",
    description="Keep or drop a set of columns.",
    default_config={"mode": "keep"},
    form_schema=(
        FieldSpec("columns", FieldType.COLUMNS, "Columns", required=True, min_items=1, input_slot=0),
        FieldSpec("mode", FieldType.SELECT, "Mode", options=("keep", "drop")),
    ),
)


class SelectColumns(PandasContract):

    def emit(self, config: Mapping[str, Any], input_vars: Sequence[str], output_var: Optional[str]) -> Fragment:
        df = input_vars[0]
        columns = column_list(config["columns"])
        mode = config["mode"]
        w = CodeWriter()
        if mode == "keep":
            w.writeln(f"{output_var} = {df}[{columns}]")
        elif mode == "drop":
            w.writeln(f"{output_var} = {df}.drop(columns={columns})")
        else:
            raise UnsupportedConfigValue("mode", mode)
        return w.fragment(reads=[df], writes=[output_var])
