from typing import Any, Mapping, Optional, Sequence

from dfgraph.core.contract import CodeWriter, Fragment
from dfgraph.core.descriptor import FieldSpec, NodeDescriptor, VisibleWhen
from dfgraph.core.types import FieldType, NodeKind
from dfgraph.errors import UnsupportedConfigValue
from .base import PandasContract, column_list

# form value -> pandas `keep=` literal
KEEP = {"first": "'first'", "last": "'last'", "none": "False"}

DESCRIPTOR = NodeDescriptor(
    id="deduplicate",
    display_name="Deduplicate Rows",
    kind=NodeKind.SINGLE_INPUT,
    category="transforms.rows",
    icon="copy",
    description="Remove duplicate rows, optionally comparing only some columns.",
    default_config={"keep": "first", "compare": "all"},
    form_schema=(
        FieldSpec("keep", FieldType.SELECT, "Keep", options=tuple(KEEP),
                  tooltip="'none' drops every row that has a duplicate."),
        FieldSpec("compare", FieldType.SELECT, "Compare", options=("all", "columns")),
        FieldSpec("subset", FieldType.COLUMNS, "Columns", required=True, min_items=1, input_slot=0,
                  condition=VisibleWhen("compare", {"columns"})),
    ),
)


class Deduplicate(PandasContract):

    def emit(self, config: Mapping[str, Any], input_vars: Sequence[str], output_var: Optional[str]) -> Fragment:
        df = input_vars[0]
        keep = config["keep"]
        if keep not in KEEP:
            raise UnsupportedConfigValue("keep", keep)

        args = []
        if config["compare"] == "columns":
            args.append(f"subset={column_list(config['subset'])}")
        elif config["compare"] != "all":
            raise UnsupportedConfigValue("compare", config["compare"])
        args.append(f"keep={KEEP[keep]}")

        w = CodeWriter()
        w.writeln(f"{output_var} = {df}.drop_duplicates({', '.join(args)})")
        return w.fragment(reads=[df], writes=[output_var])
