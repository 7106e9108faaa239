"""yamldb CLI: inspect and verify versioned YAML database files."""

import argparse
import json
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path
from typing import Optional

from yamldb.codes import DatabaseLocation
from yamldb.layout import LayoutConfig


def _layout_from_args(args) -> LayoutConfig:
    """Environment layout with command line overrides applied."""
    layout = LayoutConfig.from_env()
    overrides = {
        "db_path": args.db_path,
        "conf_path": args.conf_path,
        "variant_dir": args.variant_dir,
        "import_dir": args.import_dir,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if not overrides:
        return layout
    return LayoutConfig(**{**layout.model_dump(), **overrides})


def _add_header_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--type",
        dest="type_name",
        required=True,
        help="Expected Header.Type"
    )
    parser.add_argument(
        "--version",
        dest="db_version",
        type=int,
        required=True,
        help="Current Header.Version"
    )
    parser.add_argument(
        "--minimum",
        dest="minimum_version",
        type=int,
        default=None,
        help="Minimum supported Header.Version (defaults to --version)"
    )


def _add_location_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "filename",
        help="Logical database file name, e.g. item_db.yml"
    )
    parser.add_argument(
        "--location",
        choices=[loc.value.lower() for loc in DatabaseLocation],
        default=DatabaseLocation.NORMAL.value.lower(),
        help="normal: db root, split: variant subdirectory, conf: configuration root"
    )
    parser.add_argument("--db-path", default=None, help="Database root directory")
    parser.add_argument("--conf-path", default=None, help="Configuration root directory")
    parser.add_argument("--variant-dir", default=None, help="Split database subdirectory (re or pre-re)")
    parser.add_argument("--import-dir", default=None, help="Import override subdirectory")


def main(argv: Optional[list] = None):
    """Main CLI entry point for yamldb commands."""
    try:
        yamldb_version = get_version("yamldb")
    except PackageNotFoundError:
        yamldb_version = "dev"

    parser = argparse.ArgumentParser(
        prog="yamldb",
        description="yamldb: verify and inspect versioned YAML database files"
    )
    parser.add_argument("--version", action="version", version=f"yamldb {yamldb_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # verify command
    verify_parser = subparsers.add_parser(
        "verify",
        help="Check a database file header against an expected type and version",
        parents=[parent_parser]
    )
    verify_parser.add_argument(
        "path",
        type=Path,
        help="Path to the database file"
    )
    _add_header_arguments(verify_parser)
    verify_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Output directory for a JSON report"
    )

    # locations command
    locations_parser = subparsers.add_parser(
        "locations",
        help="Print the candidate paths of a logical database file",
        parents=[parent_parser]
    )
    _add_location_arguments(locations_parser)

    # scan command
    scan_parser = subparsers.add_parser(
        "scan",
        help="Load a logical database file (base + import) and count its entries",
        parents=[parent_parser]
    )
    _add_location_arguments(scan_parser)
    _add_header_arguments(scan_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    from .logging_config import configure_logging
    configure_logging(debug=args.debug, quiet=args.quiet)

    if args.command == "verify":
        from .kernel.loader import YamlDatabase

        try:
            loader = YamlDatabase(args.type_name, args.db_version, args.minimum_version)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        result = loader.load(args.path.resolve())

        if args.output_dir is not None:
            output_dir = Path(args.output_dir).resolve()
            output_dir.mkdir(parents=True, exist_ok=True)
            report_out = output_dir / "verify_header.json"
            report = {
                "ok": result.ok,
                "path": result.path,
                "compatibility": result.compatibility.model_dump(mode="json") if result.compatibility else None,
                "fault": result.fault.model_dump(mode="json") if result.fault else None,
                "diagnostics": [d.model_dump(mode="json") for d in loader.diagnostics.records],
            }
            report_out.write_text(json.dumps(report, indent=2, sort_keys=True) + "\n", encoding="utf-8")
            if not args.quiet:
                print(f"  Report: {report_out}")

        if not args.quiet:
            status = "OK" if result.ok else "FAILED"
            print(f"[{status}] Verification complete")
            print(f"  Status: {status}")
            if result.compatibility is not None and result.compatibility.found_version is not None:
                print(f"  Version: {result.compatibility.found_version}")
            if result.fault is not None:
                print(f"  Fault: {result.fault.kind.value}")
            print(f"  Errors: {len(loader.diagnostics.errors)}")
            print(f"  Warnings: {len(loader.diagnostics.warnings)}")
        if not result.ok:
            sys.exit(1)
    elif args.command == "locations":
        from .kernel.loader import resolve_locations

        try:
            layout = _layout_from_args(args)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        for path in resolve_locations(args.filename, args.location.upper(), layout):
            print(path)
    elif args.command == "scan":
        from .kernel.loader import YamlDatabase

        try:
            layout = _layout_from_args(args)
            loader = YamlDatabase(args.type_name, args.db_version, args.minimum_version, layout=layout)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        def visit(node, path):
            if not node.is_mapping:
                loader.invalid_warning("Entry in '{file}' is not a mapping, skipping.", node, path)
                return False
            return True

        result = loader.parse(args.filename, args.location.upper(), visit)

        if not args.quiet:
            status = "OK" if result.ok else "FAILED"
            print(f"[{status}] Scan complete")
            for report in result.files:
                print(f"  {report.path}: {report.ingested}/{report.entries} entries")
            if result.fault is not None:
                print(f"  Fault: {result.fault.kind.value} ({result.fault.path})")
            print(f"  Warnings: {len(loader.diagnostics.warnings)}")
        if not result.ok:
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
