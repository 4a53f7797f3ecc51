"""Entry point: python -m data_alchemist"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from data_alchemist.core.engine import validate
from data_alchemist.core.filters import search
from data_alchemist.core.schemas import detect_entity_type

_log = logging.getLogger("data_alchemist")


def _load_records(path: Path) -> list[dict]:
    """Read a JSON array of records, or an object with a ``records`` array."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("records", [])
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise ValueError(f"{path}: expected a JSON array of objects")
    return data


def _cmd_validate(args: argparse.Namespace) -> int:
    entity = args.entity or detect_entity_type(args.file.name)
    if entity is None:
        print(
            f"Cannot tell the entity type from {args.file.name!r}; "
            "pass --entity clients|workers|tasks",
            file=sys.stderr,
        )
        return 2
    result = validate(_load_records(args.file), entity)
    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        s = result.summary
        print(f"{s.total_rows} rows: {s.error_count} errors, {s.warning_count} warnings")
        for e in result.errors:
            print(f"  row {e.row_index + 1:>4}  {e.field:<16} {e.error_type.value:<15} {e.message}")
    return 0 if result.is_valid else 1


def _cmd_search(args: argparse.Namespace) -> int:
    results = search(_load_records(args.file), args.query)
    print(json.dumps(results, ensure_ascii=False, indent=2))
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    from data_alchemist.web.launcher import serve

    serve(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="data_alchemist",
        description="Validate and search client / worker / task records.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_val = sub.add_parser("validate", help="Validate a JSON file of records")
    p_val.add_argument("file", type=Path)
    p_val.add_argument(
        "--entity",
        choices=["clients", "workers", "tasks"],
        help="Entity type (default: guessed from the file name)",
    )
    p_val.add_argument("--json", action="store_true", help="Print the full result as JSON")
    p_val.set_defaults(func=_cmd_validate)

    p_search = sub.add_parser("search", help="Filter a JSON file of records with a query")
    p_search.add_argument("file", type=Path)
    p_search.add_argument("query")
    p_search.set_defaults(func=_cmd_search)

    p_serve = sub.add_parser("serve", help="Run the web API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=None, help="Default: first free port from 8400")
    p_serve.set_defaults(func=_cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (OSError, ValueError) as exc:
        # UnknownEntityTypeError and JSON decode errors are ValueErrors
        _log.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
