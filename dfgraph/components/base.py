"""Shared bits for the pandas component family."""

from typing import Any, Iterable, List, Mapping

from dfgraph.core.contract import NodeContract

PANDAS_IMPORT = "import pandas as pd"


def column_literal(ref: Any) -> str:
    """Python literal for a column reference: a quoted name or an integer position."""
    if isinstance(ref, str):
        return repr(ref)
    if ref.get("named", True):
        return repr(ref["value"])
    return repr(int(ref["value"]))


def column_list(refs: Iterable[Any]) -> str:
    return "[" + ", ".join(column_literal(r) for r in refs) + "]"


class PandasContract(NodeContract):
    """Every pandas component needs the pandas import."""

    def imports(self, config: Mapping[str, Any]) -> List[str]:
        return [PANDAS_IMPORT]
