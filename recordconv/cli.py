import argparse
import logging
import sys
from typing import BinaryIO, Optional, Sequence

from pydantic import ValidationError

from .config import load_options
from .errors import ConversionError
from .pipeline import run_conversion
from .rules import ALLOWED_INPUT_TYPES, ALLOWED_OUTPUT_TYPES
from .setup_logging import setup_logging

log = logging.getLogger(__name__)


def validate_input_type(value: str) -> str:
    lower = value.lower()
    if lower in ALLOWED_INPUT_TYPES:
        return lower
    raise argparse.ArgumentTypeError(f"Input type must be one of: {', '.join(ALLOWED_INPUT_TYPES)}.")


def validate_output_type(value: str) -> str:
    lower = value.lower()
    if lower in ALLOWED_OUTPUT_TYPES:
        return lower
    raise argparse.ArgumentTypeError(f"Output type must be one of: {', '.join(ALLOWED_OUTPUT_TYPES)}.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recordconv",
        description="Transform CSV or PRN data from stdin to JSON or HTML on stdout.",
    )
    parser.add_argument("input_type", type=validate_input_type, help="Input data format (csv or prn)")
    parser.add_argument("output_type", type=validate_output_type, help="Output data format (json or html)")
    parser.add_argument(
        "-d",
        "--csv-delimiter",
        default=None,
        help='Delimiter character for CSV input (e.g. ";" or "\\t"). Default: "," or RECORDCONV_DELIMITER.',
    )
    parser.add_argument(
        "--encoding",
        default=None,
        help="Input encoding, or 'auto' to detect it (default: auto or RECORDCONV_ENCODING)",
    )
    parser.add_argument("--log-level", default=None, help="Log level on stderr (default: INFO or RECORDCONV_LOG_LEVEL)")
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        options = load_options(
            input_type=args.input_type,
            output_type=args.output_type,
            delimiter=args.csv_delimiter,
            encoding=args.encoding,
        )
    except ValidationError as e:
        parser.error("; ".join(err["msg"] for err in e.errors()))

    try:
        run_conversion(stdin or sys.stdin.buffer, stdout or sys.stdout.buffer, options)
    except KeyboardInterrupt:
        log.error("Interrupted.")
        return 130
    except ConversionError as e:
        log.error("An error occurred during processing: %s", e)
        log.debug("conversion failure", exc_info=True)
        return 1
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
