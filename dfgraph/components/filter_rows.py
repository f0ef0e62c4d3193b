import math
from typing import Any, Mapping, Optional, Sequence

from dfgraph.core.contract import CodeWriter, Fragment
from dfgraph.core.descriptor import FieldSpec, NodeDescriptor, VisibleWhen, is_visible
from dfgraph.core.types import FieldType, NodeKind
from dfgraph.errors import InvalidConfig, UnsupportedConfigValue
from .base import PandasContract, column_literal

COMPARISONS = ("==", "!=", ">", ">=", "<", "<=")
VALUE_OPERATORS = COMPARISONS + ("contains",)
NULL_OPERATORS = {"isnull": "isna", "notnull": "notna"}

DESCRIPTOR = NodeDescriptor(
    id="filter_rows",
    display_name="Filter Rows",
    kind=NodeKind.SINGLE_INPUT,
    category="transforms.rows",
    icon="filter",
    description="Keep the rows whose column value satisfies a condition.",
    default_config={"operator": "==", "value_type": "string"},
    form_schema=(
        FieldSpec("column", FieldType.COLUMN, "Column", required=True, input_slot=0),
        FieldSpec("operator", FieldType.SELECT, "Condition",
                  options=VALUE_OPERATORS + tuple(NULL_OPERATORS)),
        FieldSpec("value", FieldType.TEXT, "Value", required=True,
                  condition=VisibleWhen("operator", VALUE_OPERATORS)),
        FieldSpec("value_type", FieldType.SELECT, "Compare as", options=("string", "number"),
                  condition=VisibleWhen("operator", COMPARISONS)),
    ),
)


def _number_literal(text: str) -> str:
    try:
        return repr(int(text))
    except ValueError:
        number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {text!r}")
    return repr(number)


class FilterRows(PandasContract):

    def check(self, config: Mapping[str, Any]) -> None:
        if is_visible(DESCRIPTOR, "value_type", config) and config.get("value_type") == "number":
            try:
                _number_literal(config["value"])
            except ValueError:
                raise InvalidConfig(f"'{config['value']}' is not a number", field="value") from None

    def emit(self, config: Mapping[str, Any], input_vars: Sequence[str], output_var: Optional[str]) -> Fragment:
        df = input_vars[0]
        column = f"{df}[{column_literal(config['column'])}]"
        operator = config["operator"]

        if operator in COMPARISONS:
            if config.get("value_type") == "number":
                value = _number_literal(config["value"])
            else:
                value = repr(config["value"])
            mask = f"{column} {operator} {value}"
        elif operator == "contains":
            mask = f"{column}.astype(str).str.contains({config['value']!r}, regex=False, na=False)"
        elif operator in NULL_OPERATORS:
            mask = f"{column}.{NULL_OPERATORS[operator]}()"
        else:
            raise UnsupportedConfigValue("operator", operator)

        w = CodeWriter()
        w.writeln(f"{output_var} = {df}[{mask}]")
        return w.fragment(reads=[df], writes=[output_var])
