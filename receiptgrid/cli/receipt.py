"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from datetime import date
from pathlib import Path

from receiptgrid.receipt.formatter import format_extraction_json
from receiptgrid.receipt.spatial_extraction import extract_receipt
from receiptgrid.receipt.vision_normalization import MissingAnnotationError
from receiptgrid.runtime import get_logger, load_extraction_config

logger = get_logger(__name__)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server for receipt extraction."""
    import uvicorn

    from receiptgrid.runtime import extraction_server as server

    print(f"Starting extraction server on {args.host}:{args.port}")
    print(f"Extraction endpoint: http://{args.host}:{args.port}/extract")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)


def cmd_extract(args: argparse.Namespace) -> None:
    """Extract fields from a saved Vision API response and print them as JSON."""
    source = Path(args.json_file)
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except FileNotFoundError:
        print(f"Error: file not found: {source}")
        sys.exit(1)
    except json.JSONDecodeError as exc:
        print(f"Error: {source} is not valid JSON: {exc}")
        sys.exit(1)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: cannot read {source}: {exc}")
        sys.exit(1)

    today = None
    if args.today:
        try:
            today = date.fromisoformat(args.today)
        except ValueError:
            print(f"Error: --today must be YYYY-MM-DD, got {args.today!r}")
            sys.exit(1)

    try:
        config = load_extraction_config(args.config)
    except ValueError as exc:
        print(f"Error: invalid extraction config: {exc}")
        sys.exit(1)

    try:
        extraction = extract_receipt(payload, config=config, today=today)
    except MissingAnnotationError as exc:
        logger.error("%s: %s", source, exc)
        print(f"Error: {exc}")
        sys.exit(1)

    indent = None if args.compact else 2
    print(format_extraction_json(extraction, indent=indent))
