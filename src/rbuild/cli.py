"""
Command-line interface for rbuild.

This module provides the `rbuild` CLI tool for planning crate build actions.

Plan file format, either a single unit:
    {"request": {...}, "flags": {...}, "deps": {...}}

or several units with an optional coverage archive:
    {
      "units": [
        {"request": {...}, "flags": {...}, "deps": {...}}
      ],
      "coverage_zip": "coverage"      # optional archive base name
    }
"""

import _thread
import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from rich.console import Console
from rich.table import Table

from rbuild import __version__
from rbuild.build import (
    BuildAction,
    BuildContext,
    CompilationRequest,
    DependencySet,
    FlagConfiguration,
    RustBuildError,
    build_crate,
    transform_coverage_files_to_zip,
)
from rbuild.ninja_writer import write_manifest
from rbuild.toolchain_configs import load_toolchain_config

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

FORMATS = ("json", "ninja", "table")


@dataclass
class PlanArgs:
    """Arguments for the plan command."""

    plan_file: Path
    toolchain: Optional[Path] = None
    output_format: str = "json"
    verbose: bool = False


@dataclass
class CoverageZipArgs:
    """Arguments for the coverage-zip command."""

    base_name: str
    cov_files: List[str]
    out_dir: Optional[str] = None
    toolchain: Optional[Path] = None
    output_format: str = "json"
    verbose: bool = False


_console_handler: Optional[logging.Handler] = None


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr so stdout carries only the plan."""
    global _console_handler
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Replace the handler from an earlier main() call in the same process
    if _console_handler is not None:
        logger.removeHandler(_console_handler)

    _console_handler = logging.StreamHandler(sys.stderr)
    _console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(_console_handler)


def plan_actions(context: BuildContext, plan: dict[str, Any]) -> List[BuildAction]:
    """Synthesize the actions for every unit in a plan.

    Coverage notes from all units are archived into one zip when the plan
    names a "coverage_zip" base name.

    Args:
        context: Build context
        plan: Parsed plan file

    Raises:
        ValueError: If the plan or one of its units is malformed

    Returns:
        Actions in unit order, followed by the coverage zip if any
    """
    if not isinstance(plan, dict):
        raise ValueError("Plan file must contain a JSON object")
    units = [plan] if "units" not in plan and "request" in plan else plan.get("units")
    if not isinstance(units, list):
        raise ValueError("Plan file must contain a 'request' object or a 'units' list")

    actions: List[BuildAction] = []
    coverage_files: List[str] = []
    for index, unit in enumerate(units):
        if not isinstance(unit, dict):
            raise ValueError(f"Unit {index} must be a JSON object, got {unit!r}")
        if "request" not in unit:
            raise ValueError(f"Missing required field in unit {index}: 'request'")
        result = build_crate(
            context,
            CompilationRequest.from_dict(unit["request"]),
            DependencySet.from_dict(unit.get("deps", {})),
            FlagConfiguration.from_dict(unit.get("flags", {})),
        )
        actions.extend(result.actions)
        if result.output.coverage_file is not None:
            coverage_files.append(result.output.coverage_file)

    base_name = plan.get("coverage_zip")
    if base_name:
        zip_action = transform_coverage_files_to_zip(coverage_files, base_name, context.coverage_out_dir)
        if zip_action is not None:
            actions.append(zip_action)
        else:
            logger.info("No coverage files to archive")

    logger.info(f"Planned {len(actions)} action(s) for {len(units)} unit(s)")
    return actions


def render_table(actions: List[BuildAction], console: Console) -> None:
    table = Table(title="Build actions")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Output", style="green")
    table.add_column("Inputs")
    table.add_column("Implicits")
    table.add_column("Implicit outputs")

    for action in actions:
        table.add_row(
            action.rule,
            action.output,
            "\n".join(action.inputs),
            "\n".join(action.implicits),
            "\n".join(action.implicit_outputs),
        )
    console.print(table)


def emit(actions: List[BuildAction], context: BuildContext, output_format: str, console: Console) -> None:
    """Write actions to stdout in the requested format."""
    if output_format == "json":
        console.out(json.dumps([action.to_dict() for action in actions], indent=2), highlight=False)
    elif output_format == "ninja":
        console.out(write_manifest(actions, context.rules), end="", highlight=False)
    elif output_format == "table":
        render_table(actions, console)
    else:
        raise ValueError(f"Unknown output format: {output_format!r}")


def plan_command(args: PlanArgs, console: Console) -> int:
    """Print the actions for a plan file.

    Examples:
        rbuild plan plan.json                     # JSON actions
        rbuild plan plan.json --format ninja      # ninja manifest
        rbuild plan plan.json --toolchain tc.json # custom toolchain paths
    """
    if not args.plan_file.is_file():
        logger.error(f"Plan file not found: {args.plan_file}")
        return 2

    try:
        context = BuildContext.create(load_toolchain_config(args.toolchain))
        plan = json.loads(args.plan_file.read_text(encoding="utf-8"))
        actions = plan_actions(context, plan)
        emit(actions, context, args.output_format, console)
        return 0
    except KeyboardInterrupt:
        _thread.interrupt_main()
        raise
    except (RustBuildError, ValueError, OSError) as e:
        logger.error(f"Planning failed: {e}")
        return 1


def coverage_zip_command(args: CoverageZipArgs, console: Console) -> int:
    """Print the coverage zip action for a set of gcno files."""
    try:
        context = BuildContext.create(load_toolchain_config(args.toolchain))
        out_dir = args.out_dir if args.out_dir is not None else context.coverage_out_dir
        action = transform_coverage_files_to_zip(args.cov_files, args.base_name, out_dir)
        if action is None:
            logger.info("No coverage files given; nothing to archive")
            return 0
        emit([action], context, args.output_format, console)
        return 0
    except KeyboardInterrupt:
        _thread.interrupt_main()
        raise
    except (RustBuildError, ValueError, OSError) as e:
        logger.error(f"Coverage archive failed: {e}")
        return 1


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rbuild",
        description="rbuild - build action synthesis for Rust crates",
    )
    parser.add_argument("--version", action="version", version=f"rbuild {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Plan command
    plan_parser = subparsers.add_parser(
        "plan",
        help="Synthesize build actions for the units in a plan file",
    )
    plan_parser.add_argument(
        "plan_file",
        type=Path,
        help="JSON plan file",
    )

    # Coverage zip command
    zip_parser = subparsers.add_parser(
        "coverage-zip",
        help="Synthesize the action archiving coverage notes files",
    )
    zip_parser.add_argument(
        "base_name",
        help="Archive base name (output is <base_name>.zip)",
    )
    zip_parser.add_argument(
        "cov_files",
        nargs="*",
        help="Coverage notes (.gcno) files",
    )
    zip_parser.add_argument(
        "--out-dir",
        default=None,
        help="Directory for the archive (default: toolchain out_dir)",
    )

    for sub in (plan_parser, zip_parser):
        sub.add_argument(
            "-t",
            "--toolchain",
            type=Path,
            default=None,
            help="Toolchain config JSON (default: packaged default)",
        )
        sub.add_argument(
            "-f",
            "--format",
            dest="output_format",
            choices=FORMATS,
            default="json",
            help="Output format (default: json)",
        )
        sub.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Show debug logging",
        )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(argv)

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        return 0

    setup_logging(parsed_args.verbose)
    console = Console()

    if parsed_args.command == "plan":
        args = PlanArgs(
            plan_file=parsed_args.plan_file,
            toolchain=parsed_args.toolchain,
            output_format=parsed_args.output_format,
            verbose=parsed_args.verbose,
        )
        return plan_command(args, console)
    elif parsed_args.command == "coverage-zip":
        args = CoverageZipArgs(
            base_name=parsed_args.base_name,
            cov_files=parsed_args.cov_files,
            out_dir=parsed_args.out_dir,
            toolchain=parsed_args.toolchain,
            output_format=parsed_args.output_format,
            verbose=parsed_args.verbose,
        )
        return coverage_zip_command(args, console)

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
