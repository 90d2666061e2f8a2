# src/main.py — v1
"""CLI entry point — run, status, export commands.

Usage:
    contentflow run [--name NAME] [--genre GENRE] [--keyword KW ...]
    contentflow status <run_id>
    contentflow export <run_id> [-o FILE]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from contentflow.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        _setup_logging(args.verbose)
    except Exception as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="contentflow",
        description=f"contentflow v{__version__} — Sequential multi-agent content pipeline",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- run ---
    p_run = subparsers.add_parser(
        "run", help="Create a run and execute all stages",
    )
    p_run.add_argument("--name", default=None, help="Run name")
    p_run.add_argument(
        "--genre", dest="target_genre", default=None,
        help="Target genre to focus market research on",
    )
    p_run.add_argument(
        "-k", "--keyword", dest="keywords", action="append", default=[],
        help="Related keyword (repeatable)",
    )
    p_run.set_defaults(func=_cmd_run)

    # --- status ---
    p_status = subparsers.add_parser(
        "status", help="Show the status of a run",
    )
    p_status.add_argument("run_id", help="Run identifier")
    p_status.set_defaults(func=_cmd_status)

    # --- export ---
    p_export = subparsers.add_parser(
        "export", help="Export a run's outputs as JSON",
    )
    p_export.add_argument("run_id", help="Run identifier")
    p_export.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Write to file instead of stdout",
    )
    p_export.set_defaults(func=_cmd_export)

    return parser


async def _cmd_run(args: argparse.Namespace) -> int:
    """Start a run and wait for it to finish."""
    from contentflow.api.facade import ContentFlow
    from contentflow.config.settings import load_settings

    flow = ContentFlow.from_settings(load_settings(require_api_key=True))
    try:
        run = await flow.start_run({
            "name": args.name,
            "initialInput": {"targetGenre": args.target_genre, "keywords": args.keywords},
        })
        logger.info("Run %s started", run.id)
        await flow.wait_idle()
        view = await flow.get_run_view(run.id)
    finally:
        flow.close()

    _print_run_view(view)
    return 0 if view.status.value == "completed" else 1


async def _cmd_status(args: argparse.Namespace) -> int:
    """Display the status of one run."""
    from contentflow.api.facade import ContentFlow

    flow = ContentFlow.from_settings()
    try:
        view = await flow.get_run_view(args.run_id)
    finally:
        flow.close()

    _print_run_view(view)
    return 0


async def _cmd_export(args: argparse.Namespace) -> int:
    """Export run outputs as JSON."""
    from contentflow.api.facade import ContentFlow

    flow = ContentFlow.from_settings()
    try:
        document = await flow.export_run(args.run_id)
    finally:
        flow.close()

    text = json.dumps(document, indent=2, ensure_ascii=False)
    if args.output is None:
        print(text)
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        logger.info("Exported run %s to %s", args.run_id, args.output)
    return 0


def _print_run_view(view: object) -> None:
    """Print a human-readable summary of a RunView."""
    print(f"\nRun {view.id} ({view.name}):")
    print(f"  Status:    {view.status.value}")
    print(f"  Progress:  {view.completed_count}/{len(view.steps)}")
    for step in view.steps:
        line = f"  {step.position + 1}. {step.stage:<24} {step.status.value}"
        if step.error:
            line += f"  ({step.error[:120]})"
        print(line)


def _setup_logging(verbose: bool) -> None:
    """Configure logging from the logging section of Settings.

    --verbose forces DEBUG whatever LOG_LEVEL says.
    """
    from contentflow.config.settings import Settings
    from contentflow.logging.logger import setup_logging_from_settings

    settings = Settings()
    if verbose:
        settings = settings.model_copy(update={"log_level": "DEBUG"})
    setup_logging_from_settings(settings)


if __name__ == "__main__":
    sys.exit(main())
