from typing import Any, Mapping, Optional, Sequence

from dfgraph.core.contract import CodeWriter, Fragment
from dfgraph.core.descriptor import FieldSpec, NodeDescriptor
from dfgraph.core.types import FieldType, NodeKind
from .base import PandasContract

DESCRIPTOR = NodeDescriptor(
    id="concat",
    display_name="Concatenate Datasets",
    kind=NodeKind.MULTI_INPUT,
    category="transforms",
    icon="layers",
    description="Stack any number of datasets on top of each other.",
    default_config={"join": "outer", "ignore_index": True},
    form_schema=(
        FieldSpec("join", FieldType.SELECT, "Columns", options=("outer", "inner"),
                  tooltip="'outer' keeps every column, 'inner' only the shared ones."),
        FieldSpec("ignore_index", FieldType.BOOLEAN, "Reset index"),
    ),
)


class Concat(PandasContract):

    def emit(self, config: Mapping[str, Any], input_vars: Sequence[str], output_var: Optional[str]) -> Fragment:
        w = CodeWriter()
        w.writeln(
            f"{output_var} = pd.concat([{', '.join(input_vars)}], "
            f"join={config['join']!r}, ignore_index={config['ignore_index']!r})"
        )
        return w.fragment(reads=input_vars, writes=[output_var])
