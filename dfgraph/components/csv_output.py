from typing import Any, Mapping, Optional, Sequence

from dfgraph.core.contract import CodeWriter, Fragment, NodeContract
from dfgraph.core.descriptor import FieldSpec, NodeDescriptor
from dfgraph.core.types import FieldType, NodeKind

DESCRIPTOR = NodeDescriptor(
    id="csv_output",
    display_name="CSV File Output",
    kind=NodeKind.SINK,
    category="outputs.files",
    icon="file-export",
    description="Write a dataset to a CSV file.",
    default_config={"sep": ",", "index": False, "mode": "w"},
    form_schema=(
        FieldSpec("file_path", FieldType.TEXT, "File path", required=True, placeholder="data/output.csv"),
        FieldSpec("sep", FieldType.SELECT, "Separator", options=(",", ";", "\t", "|")),
        FieldSpec("index", FieldType.BOOLEAN, "Write index", advanced=True),
        FieldSpec("mode", FieldType.SELECT, "Mode", options=("w", "a"), advanced=True,
                  tooltip="'a' appends to an existing file."),
    ),
)


class CsvOutput(NodeContract):
    """Sink: writes through DataFrame.to_csv, so no import is needed."""

    def emit(self, config: Mapping[str, Any], input_vars: Sequence[str], output_var: Optional[str]) -> Fragment:
        df = input_vars[0]
        w = CodeWriter()
        w.writeln(
            f"{df}.to_csv({config['file_path']!r}, sep={config['sep']!r}, "
            f"index={config['index']!r}, mode={config['mode']!r})"
        )
        return w.fragment(reads=[df])
