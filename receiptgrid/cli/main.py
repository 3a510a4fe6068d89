#!/usr/bin/env python3

import argparse
from collections.abc import Callable, Sequence


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """
    Normalize command handlers that call sys.exit().

    This keeps process termination centralized in this module's entrypoint.
    """
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Spatial receipt extraction from Vision OCR output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  extract <json>             Extract merchant, total, date and items from a Vision response
  serve [--host] [--port]    Start the extraction HTTP server

Environment:
  RECEIPTGRID_CONFIG         TOML file overriding extraction thresholds
  RECEIPTGRID_LOG_LEVEL      DEBUG, INFO, WARNING or ERROR
""",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        default=None,
        help="Log level (default: $RECEIPTGRID_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    extract_parser = subparsers.add_parser("extract", help="Extract fields from a Vision API JSON file")
    extract_parser.add_argument("json_file", help="Path to a saved Vision API response")
    extract_parser.add_argument("--config", default=None, help="Extraction config TOML (default: $RECEIPTGRID_CONFIG)")
    extract_parser.add_argument("--today", default=None, help="Date used when none is found (YYYY-MM-DD)")
    extract_parser.add_argument("--compact", action="store_true", help="Print single-line JSON")

    serve_parser = subparsers.add_parser("serve", help="Start the extraction server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.log_level is not None:
        from receiptgrid.runtime import configure_logging

        configure_logging(args.log_level)

    if args.command == "extract":
        from receiptgrid.cli.receipt import cmd_extract

        return _run_command(cmd_extract, args)
    if args.command == "serve":
        from receiptgrid.cli.receipt import cmd_serve

        return _run_command(cmd_serve, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
