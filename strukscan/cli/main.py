#!/usr/bin/env python3

import argparse
import os
from collections.abc import Sequence

from strukscan.runtime.recognizer import DEFAULT_OCR_SERVICE_URL, RECOGNIZER_ENGINES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="strukscan",
        description="Receipt and transfer-proof extraction CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  scan <image>...            Extract data from one or more receipt images
  serve [--host] [--port]    Start the receipt scanning HTTP server

Environment:
  OCR_SERVICE_URL            Default OCR service URL
  STRUKSCAN_ENHANCE_URL      Optional enhancement service URL
  STRUKSCAN_LOG_LEVEL        DEBUG, INFO, WARNING or ERROR
""",
    )

    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        type=str.upper,
        default=None,
        help="Override $STRUKSCAN_LOG_LEVEL",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Extract data from receipt images")
    scan_parser.add_argument("images", nargs="+", metavar="IMAGE", help="Receipt image path(s), scanned in order")
    scan_parser.add_argument(
        "--ocr-url",
        default=os.environ.get("OCR_SERVICE_URL", DEFAULT_OCR_SERVICE_URL),
        help=f"OCR service URL (default: $OCR_SERVICE_URL or {DEFAULT_OCR_SERVICE_URL})",
    )
    scan_parser.add_argument(
        "--engine",
        choices=RECOGNIZER_ENGINES,
        default="service",
        help="Text recognizer: HTTP OCR service or local Tesseract (default: service)",
    )
    scan_parser.add_argument("--max-width", type=int, default=None, help="Downscale images wider than this first")
    scan_parser.add_argument("--quality", type=int, default=None, help="JPEG quality (1-100) for downscaled images")
    scan_parser.add_argument(
        "--enhance-url",
        default=os.environ.get("STRUKSCAN_ENHANCE_URL") or None,
        help="Enhancement service URL (default: $STRUKSCAN_ENHANCE_URL, disabled when unset)",
    )
    scan_parser.add_argument("--json", action="store_true", help="Print results as JSON")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the receipt scanning HTTP server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.log_level is not None:
        from strukscan.runtime.logging import set_log_level

        set_log_level(args.log_level)

    if args.command == "scan":
        if args.max_width is not None and args.max_width <= 0:
            parser.error("--max-width must be positive")
        if args.quality is not None and not 1 <= args.quality <= 100:
            parser.error("--quality must be between 1 and 100")

        from strukscan.cli.receipt import cmd_scan

        return cmd_scan(args)
    elif args.command == "serve":
        from strukscan.cli.receipt import cmd_serve

        return cmd_serve(args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
