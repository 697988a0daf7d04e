"""Command-line interface: convert one Out of the World image file to PNG."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from ootw_decoder import __version__
from ootw_decoder.api import convert_file, get_image_info
from ootw_decoder.config import load_config
from ootw_decoder.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ootw-decode",
        description="Out of the World - Image Decoder",
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Path to input binary file. No wildcards, nor multiple files.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for PNG files (defaults to the input's directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to ootw_decoder.toml (auto-detected if omitted)",
    )
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print footer information as JSON instead of converting",
    )
    which = parser.add_mutually_exclusive_group()
    which.add_argument(
        "--full-only",
        action="store_true",
        help="Only write the full stored image",
    )
    which.add_argument(
        "--logical-only",
        action="store_true",
        help="Only write the logical (visible) image",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log output to this file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(
            level=logging.DEBUG if args.verbose else logging.INFO,
            log_file=args.log_file,
        )
    except OSError as e:
        print(f"ootw-decode: cannot open log file {args.log_file}: {e}", file=sys.stderr)
        return 1

    try:
        if args.info:
            info = get_image_info(args.input.read_bytes())
            print(json.dumps(info, indent=2))
            return 0

        config = load_config(args.config)
        if args.full_only or args.logical_only:
            output = config.output.model_copy(
                update={
                    "write_full": not args.logical_only,
                    "write_logical": not args.full_only,
                }
            )
            config = config.model_copy(update={"output": output})

        result = convert_file(args.input, output_dir=args.output_dir, config=config)
    except FileNotFoundError as e:
        logger.error("File not found: %s", e.filename or e)
        return 1
    except ValueError as e:
        logger.error("Cannot decode %s: %s", args.input, e)
        return 1
    except OSError as e:
        logger.error("I/O error: %s", e)
        return 1

    for path in result.outputs:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
