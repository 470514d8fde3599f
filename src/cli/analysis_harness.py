# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""CLI harness for class script analysis."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table

from csa.assembler import AnalyzerError, ClassScriptAnalyzer
from csa.errors import ScriptSourceError
from csa.model import ArchiveAnalysis, ClassAnalysis, FixedAspect
from csa.settings import DEFAULT_CLASS_HOME, DEFAULT_REMARK_MARKER, AnalysisSettings
from csa.sources import read_scripts

logger = logging.getLogger(__name__)

TABLE_COLUMN_RATIOS: dict[str, int] = {
    "class": 3,
    "super": 2,
    "aspects": 5,
    "nested": 1,
    "remarks": 1,
}


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="csa")
    subparsers = parser.add_subparsers(dest="command", required=True)
    analyze_parser = subparsers.add_parser("analyze")
    analyze_parser.add_argument(
        "--path", required=True, help="Module archive (.zip) or directory to analyze."
    )
    analyze_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    analyze_parser.add_argument(
        "--output",
        required=False,
        help="Optional output file path for raw JSON when --format json is used.",
    )
    analyze_parser.add_argument(
        "--class-home",
        default=DEFAULT_CLASS_HOME,
        help="Directory below each module that holds class scripts.",
    )
    analyze_parser.add_argument(
        "--remark-marker",
        default=DEFAULT_REMARK_MARKER,
        help="Character that turns a comment into a remark.",
    )
    analyze_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Gitignore-style pattern of class script paths to skip. Repeatable.",
    )
    analyze_parser.add_argument(
        "--max-workers",
        type=int,
        default=4,
        help="Number of worker threads analyzing class scripts.",
    )
    analyze_parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging."
    )
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code: 0 on success, 1 when some class scripts failed, 2 on
        usage or input errors.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.command == "analyze":
        return _run_analyze(args=args, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def _run_analyze(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run analyze command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    source_path = Path(args.path)
    if not source_path.exists():
        logger.warning(f"Path does not exist (path={source_path})")
        stderr.write(f"Path does not exist: {source_path}\n")
        return 2
    try:
        settings = AnalysisSettings(
            class_home=args.class_home,
            remark_marker=args.remark_marker,
            exclude=tuple(args.exclude),
        )
        analyzer = ClassScriptAnalyzer(settings=settings, max_workers=args.max_workers)
    except ValueError as exc:
        logger.warning(f"Invalid analysis settings (error={exc})")
        stderr.write(f"Invalid settings: {exc}\n")
        return 2

    try:
        scripts = read_scripts(source_path, settings)
    except ScriptSourceError as exc:
        logger.warning(f"Failed to read class scripts (path={source_path} error={exc})")
        stderr.write(f"{exc}\n")
        return 2

    archive, errors = analyzer.analyze(scripts)
    _write_errors(errors=errors, stderr=stderr)
    if args.format == "json":
        if args.output:
            try:
                _write_json_file(
                    archive=archive, errors=errors, output_path=Path(args.output)
                )
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={args.output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {args.output}\n")
                return 2
        else:
            _write_json(archive=archive, errors=errors, stdout=stdout)
    else:
        _write_table(archive=archive, source_path=source_path, stdout=stdout)
    return 1 if errors else 0


def _write_errors(errors: list[AnalyzerError], stderr: TextIO) -> None:
    for error in errors:
        stderr.write(f"analyzer_error: {error.path}: {error.message}\n")


def _payload(archive: ArchiveAnalysis, errors: list[AnalyzerError]) -> dict[str, Any]:
    return {
        "analysis": archive.to_tree(),
        "errors": [asdict(error) for error in errors],
    }


def _write_json(
    archive: ArchiveAnalysis, errors: list[AnalyzerError], stdout: TextIO
) -> None:
    """Write the analysis tree and errors in JSON format.

    Args:
        archive: Assembled analysis.
        errors: Failed class scripts.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(_payload(archive, errors), indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_json_file(
    archive: ArchiveAnalysis, errors: list[AnalyzerError], output_path: Path
) -> None:
    """Write raw JSON payload to an output file.

    Args:
        archive: Assembled analysis.
        errors: Failed class scripts.
        output_path: Target file path.

    Raises:
        OSError: If directory creation or file writing fails.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(_payload(archive, errors), indent=2, sort_keys=True),
        encoding="utf-8",
    )


def _write_table(archive: ArchiveAnalysis, source_path: Path, stdout: TextIO) -> None:
    """Write one table of class summaries per module.

    Args:
        archive: Assembled analysis.
        source_path: Archive or directory that was analyzed.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    for module_name, module in archive.modules.items():
        console.rule(
            f"{module_name} :: {source_path.resolve()}",
            style=Style(color="cyan"),
            characters="-",
        )
        table = Table(show_header=True, show_lines=True, expand=True)
        for column, ratio in TABLE_COLUMN_RATIOS.items():
            table.add_column(
                column,
                ratio=ratio,
                overflow="fold",
                justify="right" if column in {"nested", "remarks"} else "left",
            )
        for class_name, analysis in module.classes.items():
            table.add_row(
                class_name,
                str(analysis.superclass),
                _aspect_summary(analysis),
                str(len(analysis.nested)),
                str(_remark_count(analysis)),
            )
        console.print(table)


def _aspect_summary(analysis: ClassAnalysis) -> str:
    parts: list[str] = []
    for aspect, bucket in analysis.aspects.items():
        if isinstance(aspect, FixedAspect):
            label = aspect.name
        else:
            label = f"{aspect.side}.{aspect.keyword}"
        parts.append(f"{label}={len(bucket.entries)}")
    return ", ".join(sorted(parts))


def _remark_count(analysis: ClassAnalysis) -> int:
    count = len(analysis.remarks)
    for bucket in analysis.aspects.values():
        count += sum(len(entry.remarks) for entry in bucket.entries.values())
    for nested in analysis.nested.values():
        count += _remark_count(nested)
    return count


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
