"""
Join Datasets — combine two datasets by one or more key columns.

Join types
----------
    inner / left / right / outer   pd.merge(..., how=<type>)
    cross                          cartesian product, keys ignored
    anti-left                      left rows with no match on the right
    anti-right                     right rows with no match on the left

Anti joins are a left merge with ``indicator=True`` filtered on
``_merge == 'left_only'``; anti-right simply swaps the two sides.

Cartesian-product guard
-----------------------
For every type except cross the user may ask for a pre-join check that
detects keys duplicated on *both* sides (which multiplies rows).  With the
policy set to 'raise' the generated script stops with ValueError, with
'warn' it emits a warning and carries on.  For cross joins the policy
field is hidden and any stored value is ignored.
"""

import textwrap
from typing import Any, List, Mapping, Optional, Sequence

from dfgraph.core.contract import CodeWriter, Fragment, HelperFunction
from dfgraph.core.descriptor import FieldSpec, NodeDescriptor, VisibleWhen, is_visible
from dfgraph.core.types import FieldType, NodeKind
from dfgraph.errors import InvalidConfig, UnsupportedConfigValue
from .base import PANDAS_IMPORT, PandasContract, column_list

MERGE_TYPES = ("inner", "left", "right", "outer")
ANTI_TYPES = ("anti-left", "anti-right")
JOIN_TYPES = MERGE_TYPES + ("cross",) + ANTI_TYPES
KEYED_TYPES = MERGE_TYPES + ANTI_TYPES

CARTESIAN_POLICIES = ("ignore", "raise", "warn")

DESCRIPTOR = NodeDescriptor(
    id="join",
    display_name="Join Datasets",
    kind=NodeKind.DOUBLE_INPUT,
    category="transforms",
    icon="merge",
    description="Use Join Datasets to combine two datasets by one or more columns.",
    default_config={"how": "left", "cartesian_policy": "ignore"},
    form_schema=(
        FieldSpec("left_keys", FieldType.COLUMNS, "Left Input Column(s)", required=True, min_items=1,
                  input_slot=0, placeholder="Column name",
                  tooltip="Order must match the right-hand column list.",
                  condition=VisibleWhen("how", KEYED_TYPES)),
        FieldSpec("right_keys", FieldType.COLUMNS, "Right Input Column(s)", required=True, min_items=1,
                  input_slot=1, placeholder="Column name",
                  tooltip="Order must match the left-hand column list.",
                  condition=VisibleWhen("how", KEYED_TYPES)),
        FieldSpec("how", FieldType.SELECT, "Join type", options=JOIN_TYPES, advanced=True),
        FieldSpec("cartesian_policy", FieldType.SELECT, "Cartesian Product (duplicate keys)",
                  options=CARTESIAN_POLICIES, advanced=True,
                  condition=VisibleWhen("how", KEYED_TYPES)),
    ),
)


CARTESIAN_GUARD = HelperFunction("check_cartesian_product", textwrap.dedent("""\
    def check_cartesian_product(df1, df2, key_left, key_right, action):
        \"\"\"Stop or warn when join keys are duplicated on both sides.\"\"\"
        duplicated_left = df1.duplicated(subset=key_left).any()
        duplicated_right = df2.duplicated(subset=key_right).any()
        if duplicated_left and duplicated_right:
            message = "Cartesian product detected: join keys are duplicated in both datasets."
            if action == "raise":
                raise ValueError(message)
            warnings.warn(message)
    """))

ANTI_JOIN = HelperFunction("anti_join", textwrap.dedent("""\
    def anti_join(df1, df2, key_left, key_right):
        \"\"\"Rows of df1 that have no match in df2.\"\"\"
        merged = pd.merge(df1, df2, how="left", left_on=key_left, right_on=key_right, indicator=True)
        return merged[merged["_merge"] == "left_only"].drop(columns=["_merge"])
    """))


def _guard_action(config: Mapping[str, Any]) -> Optional[str]:
    """'raise' / 'warn' when the guard applies, else None."""
    if not is_visible(DESCRIPTOR, "cartesian_policy", config):
        return None
    policy = config.get("cartesian_policy")
    return policy if policy in ("raise", "warn") else None


class Join(PandasContract):

    def imports(self, config: Mapping[str, Any]) -> List[str]:
        imports = [PANDAS_IMPORT]
        if _guard_action(config):
            imports.append("import warnings")
        return imports

    def helper_functions(self, config: Mapping[str, Any]) -> List[HelperFunction]:
        helpers = []
        if _guard_action(config):
            helpers.append(CARTESIAN_GUARD)
        if config.get("how") in ANTI_TYPES:
            helpers.append(ANTI_JOIN)
        return helpers

    def check(self, config: Mapping[str, Any]) -> None:
        if config.get("how") in KEYED_TYPES and len(config["left_keys"]) != len(config["right_keys"]):
            raise InvalidConfig(
                "left and right key lists must have the same number of columns",
                field="right_keys",
            )

    def emit(self, config: Mapping[str, Any], input_vars: Sequence[str], output_var: Optional[str]) -> Fragment:
        left, right = input_vars
        how = config["how"]
        calls = []
        w = CodeWriter()
        w.comment(f"Join {left} and {right}")

        if how == "cross":
            w.writeln(f"{output_var} = {left}.merge({right}, how='cross')")
            return w.fragment(reads=[left, right], writes=[output_var])

        if how not in KEYED_TYPES:
            raise UnsupportedConfigValue("how", how)

        left_keys = column_list(config["left_keys"])
        right_keys = column_list(config["right_keys"])

        action = _guard_action(config)
        if action:
            w.writeln(f"check_cartesian_product({left}, {right}, {left_keys}, {right_keys}, {action!r})")
            calls.append(CARTESIAN_GUARD.name)

        if how in MERGE_TYPES:
            w.writeln(
                f"{output_var} = pd.merge({left}, {right}, how={how!r}, "
                f"left_on={left_keys}, right_on={right_keys})"
            )
        elif how == "anti-left":
            w.writeln(f"{output_var} = anti_join({left}, {right}, {left_keys}, {right_keys})")
            calls.append(ANTI_JOIN.name)
        else:
            w.writeln(f"{output_var} = anti_join({right}, {left}, {right_keys}, {left_keys})")
            calls.append(ANTI_JOIN.name)

        return w.fragment(reads=[left, right], writes=[output_var], calls=calls)
