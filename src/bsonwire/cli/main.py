"""Main CLI entry point for bsonwire."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..cli.dump import dump_file
from ..exceptions import BsonError
from ..options import CodecOptions


def main() -> int:
    """Main entry point for the bsonwire CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="bsonwire: BSON Binary Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bsonwire --dump data.bson             Print every document in a BSON file
  bsonwire --dump data.bson --strict    Reject non-canonical array keys
  bsonwire --version                    Show version
        """,
    )

    parser.add_argument(
        "--dump",
        metavar="FILE",
        type=str,
        help="Decode a file of concatenated BSON documents and print them",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject arrays whose keys are not 0, 1, 2, ...",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"bsonwire {__version__}",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Handle --dump
    if args.dump:
        file_path = Path(args.dump)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            dump_file(file_path, CodecOptions(strict_array_keys=args.strict))
            return 0
        except BsonError as e:
            print(f"Error decoding file: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
