from typing import Any, Mapping, Optional, Sequence

from dfgraph.core.contract import CodeWriter, Fragment
from dfgraph.core.descriptor import FieldSpec, NodeDescriptor
from dfgraph.core.types import FieldType, NodeKind
from .base import PandasContract

SEPARATORS = (",", ";", "\t", "|")
ENCODINGS = ("utf-8", "latin-1", "utf-16")

DESCRIPTOR = NodeDescriptor(
    id="csv_input",
    display_name="CSV File Input",
    kind=NodeKind.SOURCE,
    category="inputs.files",
    icon="file-csv",
    description="Read a CSV file into a dataset.",
    default_config={"sep": ",", "encoding": "utf-8"},
    form_schema=(
        FieldSpec("file_path", FieldType.TEXT, "File path", required=True, placeholder="data/input.csv"),
        FieldSpec("sep", FieldType.SELECT, "Separator", options=SEPARATORS),
        FieldSpec("encoding", FieldType.SELECT, "Encoding", options=ENCODINGS, advanced=True),
        FieldSpec("nrows", FieldType.INTEGER, "Rows to read", minimum=1, advanced=True, nullable=True,
                  tooltip="Leave empty to read the whole file."),
    ),
)


class CsvInput(PandasContract):

    def emit(self, config: Mapping[str, Any], input_vars: Sequence[str], output_var: Optional[str]) -> Fragment:
        args = [repr(config["file_path"]), f"sep={config['sep']!r}", f"encoding={config['encoding']!r}"]
        if config.get("nrows") is not None:
            args.append(f"nrows={config['nrows']}")
        w = CodeWriter()
        w.writeln(f"{output_var} = pd.read_csv({', '.join(args)})")
        return w.fragment(writes=[output_var])
