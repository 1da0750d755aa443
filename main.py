# main.py

"""Entry point for espresso_picker (TUI, headless CLI or HTTP server)."""

import argparse
import asyncio
import logging
import sys

from espresso_picker.config.logging_config import setup_logging

logger = logging.getLogger("espresso_picker.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="espresso_picker",
        description="Espresso machine catalog and spec comparison.",
        epilog="Run without a command to launch the interactive TUI.",
    )
    commands = parser.add_subparsers(dest="command")

    list_cmd = commands.add_parser("list", help="Print the machine catalog.")
    list_cmd.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format (default: table).",
    )

    compare_cmd = commands.add_parser(
        "compare", help="Compare machines side by side."
    )
    compare_cmd.add_argument(
        "machine_ids", nargs="+", help="Machine ids to compare."
    )

    commands.add_parser("refresh", help="Refetch the catalog now.")
    commands.add_parser("clear-cache", help="Delete the local catalog cache.")
    commands.add_parser("sitemap", help="Print the sitemap XML.")
    commands.add_parser(
        "debug-env", help="Report which Supabase settings are present."
    )

    serve_cmd = commands.add_parser("serve", help="Serve the HTTP endpoints.")
    serve_cmd.add_argument("--host", default=None)
    serve_cmd.add_argument("--port", type=int, default=None)
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from espresso_picker.ui.app import EspressoPickerApp

    try:
        app = EspressoPickerApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("espresso_picker TUI shutting down")


def _run_command(args: argparse.Namespace) -> int:
    """Dispatch a headless subcommand and return its exit code."""
    from espresso_picker.cli import runner

    if args.command == "list":
        return asyncio.run(runner.run_list(args.output_format))
    if args.command == "compare":
        return asyncio.run(runner.run_compare(args.machine_ids))
    if args.command == "refresh":
        return asyncio.run(runner.run_refresh())
    if args.command == "clear-cache":
        return runner.run_clear_cache()
    if args.command == "sitemap":
        return asyncio.run(runner.run_sitemap())
    if args.command == "debug-env":
        return runner.run_debug_env()

    from espresso_picker.web.app import run_server

    run_server(args.host, args.port)
    return 0


def main() -> None:
    """Route to the TUI (no command) or a headless command."""
    args = _build_parser().parse_args()
    log_file = setup_logging(console=args.command is not None)
    logger.info("espresso_picker starting, log file: %s", log_file)

    if args.command is None:
        _run_tui()
    else:
        sys.exit(_run_command(args))


if __name__ == "__main__":
    main()
