"""
Information Flow CLI
====================

Validate a model document and dump the derived view models as JSON.

COMMANDS:
- validate: Check the document against the schema and report dangling links
- layout:   Lanes and tick-grouped, lane-positioned elements
- slices:   Slice export (JSON array of slices)
- summary:  Deduplicated per-type overview

USAGE:
    python -m infoflow [COMMAND] FILE [ARGS]

EXIT CODES:
    0 success, 1 schema-invalid document, 2 unreadable or malformed file
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_settings
from .contracts.base import ErrorCode
from .domain.serialization import export_slices_to_json, slices_output_path, to_json
from .engine import InformationFlowEngine
from .ingestion import load_document, load_document_file, read_document_file, validate_document
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_UNREADABLE = 2


def _load(args):
    """Load the document named on the command line; (document, exit code)."""
    result = load_document_file(args.file, validate=not args.skip_validation)
    if result.is_success:
        return result.value, EXIT_OK

    error = result.error
    logger.error(error.message)
    for _, issue in error.context:
        logger.error("  %s", issue)
    if error.code is ErrorCode.SCHEMA_VIOLATION:
        return None, EXIT_INVALID
    return None, EXIT_UNREADABLE


def cmd_validate(args) -> int:
    """Schema validation plus cross-reference diagnostics."""
    result = read_document_file(args.file)
    if result.is_failure:
        print(f"[FAIL] {result.error.message}")
        return EXIT_UNREADABLE
    data = result.value

    issues = validate_document(data)
    if issues:
        print(f"[FAIL] Schema validation failed with {len(issues)} error(s):")
        for issue in issues:
            print(f"  - {issue}")
        return EXIT_INVALID

    print("[PASS] Schema validation passed.")

    engine = InformationFlowEngine()
    dangling = engine.cross_references(load_document(data)).unresolved_references()
    for ref in dangling:
        print(f"[WARN] {ref.source} {ref.kind.value} -> '{ref.target}' does not resolve")
    return EXIT_OK


def cmd_layout(args) -> int:
    """Print lanes and tick groups."""
    document, code = _load(args)
    if document is None:
        return code

    engine = InformationFlowEngine()
    layout = engine.layout(document)
    print(to_json({
        'name': document.name,
        'laneConfig': layout.lane_config,
        'tickGroups': engine.tick_groups(document),
        'count': layout.count,
    }))
    return EXIT_OK


def cmd_slices(args) -> int:
    """Print or write the slice export."""
    document, code = _load(args)
    if document is None:
        return code

    payload = export_slices_to_json(InformationFlowEngine().slices(document).slices)

    output = args.output
    if output is None and args.write:
        output = slices_output_path(args.file)

    if output is None:
        print(payload)
        return EXIT_OK

    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload, encoding='utf-8')
    print(f"Slices written to {output}")
    return EXIT_OK


def cmd_summary(args) -> int:
    """Print the summary model."""
    document, code = _load(args)
    if document is None:
        return code

    print(to_json(InformationFlowEngine().summary(document)))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="infoflow", description="Information flow model tools")
    parser.add_argument("--log-level", default=None, help="Override INFOFLOW_LOG_LEVEL")

    subparsers = parser.add_subparsers(dest="command")

    validate_parser = subparsers.add_parser("validate", help="Validate a model document")
    validate_parser.add_argument("file", help="Path to the model JSON file")

    for name, help_text in (
        ("layout", "Dump the layout model"),
        ("slices", "Export slices"),
        ("summary", "Dump the summary model"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("file", help="Path to the model JSON file")
        sub.add_argument("--skip-validation", action="store_true", help="Do not validate against the schema")
        if name == "slices":
            sub.add_argument("--output", "-o", default=None, help="Write the export to this path")
            sub.add_argument(
                "--write", action="store_true",
                help="Write next to the model (model.json -> model/slices.json)",
            )

    return parser


COMMANDS = {
    "validate": cmd_validate,
    "layout": cmd_layout,
    "slices": cmd_slices,
    "summary": cmd_summary,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    setup_logging(
        log_level=args.log_level or settings.log_level,
        log_file=settings.log_file,
        json_output=settings.log_json,
    )

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_INVALID
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
