# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from showsync.app import commit_import, export_show, preview_import
from showsync.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from showsync.domain.reconciliation import ImportReport

log = logging.getLogger(__name__)

EXIT_INCOMPLETE_IMPORT = 3


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile show imports into the catalog")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    preview = subparsers.add_parser("preview", help="Show what an import would do")
    commit = subparsers.add_parser("commit", help="Import records into the catalog")
    # preview and commit take the same options
    for command in (preview, commit):
        command.add_argument(
            "paths", nargs="+", type=Path, help="Export documents or discovery JSON"
        )
        command.add_argument(
            "--privileged",
            action="store_true",
            help="Import as an administrator (new venues are verified, shows approved)",
        )
        command.add_argument("--output", type=Path, help="Write the JSON report to this file")

    export = subparsers.add_parser("export", help="Write a stored show as an export document")
    export.add_argument("show_id", type=int, help="Id of the show to export")
    export.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for the export document (defaults to the data directory)",
    )

    return parser.parse_args(list(argv))


def _validate_paths(paths: Sequence[Path]) -> None:
    missing = [str(path) for path in paths if not path.is_file()]
    if missing:
        raise ValueError(f"No such file: {', '.join(missing)}")


def _emit_report(report: ImportReport, output: Path | None) -> None:
    for entry in report.entries:
        print(entry.message)
        for warning in entry.warnings:
            print(f"  warning: {warning}")
    summary = report.summary
    print(
        f"{summary.total} record(s): {summary.imported} imported, {summary.updated} updated, "
        f"{summary.duplicates} duplicate(s), {summary.pending_review} pending review, "
        f"{summary.rejected} rejected, {summary.errors} error(s)"
    )
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(report.as_dict(), indent=2) + "\n", encoding="utf-8")
        log.info("Wrote report to %s", output)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        configure_logging()
    except ConfigurationError as exc:
        print(exc, file=sys.stderr)
        sys.exit(2)
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command in {"preview", "commit"}:
            _validate_paths(parsed_args.paths)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    if parsed_args.verbose:
        configure_logging(level=logging.DEBUG, force=True)

    try:
        if parsed_args.command == "preview":
            report = preview_import(parsed_args.paths, privileged=parsed_args.privileged)
            _emit_report(report, parsed_args.output)
        elif parsed_args.command == "commit":
            report = commit_import(parsed_args.paths, privileged=parsed_args.privileged)
            _emit_report(report, parsed_args.output)
            if not report.can_import_all:
                sys.exit(EXIT_INCOMPLETE_IMPORT)
        elif parsed_args.command == "export":
            path = export_show(parsed_args.show_id, output_dir=parsed_args.output_dir)
            print(path)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()
