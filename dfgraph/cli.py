"""
dfgraph — command line compiler
===============================
Compiles a serialised graph snapshot into a pandas script.

Usage
-----
    dfgraph <graph.json> [options]
    dfgraph --list

Options
-------
    --out FILE          Write the script to FILE instead of stdout
    --var-prefix P      Prefix for generated variables (default: var_)
    --no-comments       Don't prefix statements with a node comment
    --list              Print the available components by category and exit

Examples
--------
    # Print the generated script:
    dfgraph pipelines/customers.json

    # Write it next to the graph:
    dfgraph pipelines/customers.json --out pipelines/customers.py
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dfgraph.compiler import Compiler
from dfgraph.components import build_default_registry
from dfgraph.errors import CompileError, SchemaError
from dfgraph.graph.schema import load_snapshot_file
from dfgraph.registry import ComponentRegistry
from dfgraph.settings import Settings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="dfgraph",
        description="Compile a dfgraph JSON graph to a pandas script.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument(
        "graph_json",
        metavar="graph.json",
        nargs="?",
        help="Path to the graph JSON file to compile.",
    )
    p.add_argument(
        "--out",
        metavar="FILE",
        help="Output file for the compiled script (default: stdout).",
    )
    p.add_argument(
        "--var-prefix",
        metavar="P",
        help="Prefix for generated dataframe variables.",
    )
    p.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't prefix each statement with a '# <component> (<node>)' comment.",
    )
    p.add_argument(
        "--list",
        dest="list_only",
        action="store_true",
        help="Print the available components and exit.",
    )
    return p


def _print_components(registry: ComponentRegistry) -> None:
    for category, groups in registry.list_by_category().items():
        print(category)
        for group, descriptors in groups.items():
            print(f"  {group}")
            for d in descriptors:
                print(f"    {d.id:<16} {d.display_name}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    overrides = {}
    if args.var_prefix is not None:
        overrides["var_prefix"] = args.var_prefix
    if args.no_comments:
        overrides["node_comments"] = False
    settings = dataclasses.replace(settings, **overrides)

    registry = build_default_registry()

    if args.list_only:
        _print_components(registry)
        return 0

    if args.graph_json is None:
        parser.error("graph.json is required unless --list is given")

    json_path = Path(args.graph_json)
    if not json_path.exists():
        print(f"[error] File not found: {json_path}", file=sys.stderr)
        return 1

    # ── Load ─────────────────────────────────────────────────────────────────
    try:
        snapshot = load_snapshot_file(json_path)
    except SchemaError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1
    logger.info(f"Loaded {snapshot!r} from {json_path}")

    # ── Compile ──────────────────────────────────────────────────────────────
    try:
        script = Compiler(registry, settings).compile(snapshot)
    except CompileError as exc:
        where = f" (node '{exc.node_id}')" if exc.node_id else ""
        print(f"[error] {exc.kind}{where}: {exc}", file=sys.stderr)
        return 1

    # ── Output ───────────────────────────────────────────────────────────────
    if args.out is None:
        sys.stdout.write(script.source)
        return 0

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(script.source, encoding="utf-8")
    print(f"[dfgraph] wrote  : {out_path}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
