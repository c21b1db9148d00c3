"""Command-line argument parsing for json2text.

This module defines the command-line interface for json2text,
handling argument parsing and validation.
"""

import argparse
from pathlib import Path
from typing import List

from json2text import __version__
from json2text.io.document_reader import parse_document_size


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        An ArgumentParser instance configured with json2text's options.
    """
    description = """
    json2text: Extract the values under selected paths of JSON documents as text.

    Each input document is projected onto a set of dotted inclusion paths
    (for example "user.name, tags"). Only the values found under those paths
    are written, either as space-separated text suitable for full-text search
    or as compact JSON that keeps the enclosing structure.

    Arrays are transparent: "items.name" selects the name of every element of
    the items array. A path that is a prefix of another includes everything
    below it, so "a, a.b" is the same as "a".

    Every input document produces exactly one output line, which is empty when
    nothing matched or the document was skipped.
    """

    epilog = """
    Examples:
      # Extract two fields of a single document
      json2text -p "user.name, user.email" record.json

      # Repeat -p instead of separating paths with commas
      json2text -p user.name -p user.email record.json

      # Process a JSON Lines file, one output line per input line
      json2text -l -p "items.name" orders.jsonl

      # Keep the enclosing structure and write compact JSON
      json2text -f json -p "a.b" -o out.jsonl data.json

      # Read from standard input
      cat data.json | json2text -p title

      # Skip malformed documents with a warning instead of failing
      json2text -l -E warn -p title data.jsonl

      # Skip documents larger than 10 MB
      json2text -l -m 10MB -E ignore -p title data.jsonl

      # Show how the paths were compiled before the output
      json2text -F -p "a.b, a.x, a" data.json

      # Count the extracted text in tokens of a language model
      json2text -t gpt-4 -s stderr -p body data.json

      # Display version information and exit
      json2text -V
    """

    parser = argparse.ArgumentParser(
        prog="json2text",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"json2text {__version__}", help="Show the version and exit"
    )

    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        metavar="FILE",
        help="JSON files to process. Use '-' or omit to read standard input.",
    )
    parser.add_argument(
        "-p",
        "--paths",
        action="append",
        required=True,
        metavar="SPEC",
        help=(
            "Comma-separated dotted paths to include (e.g., 'a.b, c'). Can be specified multiple times; "
            "all specs are combined."
        ),
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format: space-separated values or compact JSON (default: text).",
    )
    parser.add_argument(
        "-l",
        "--lines",
        action="store_true",
        help="Treat input as JSON Lines: every line is a separate document.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Output file path. If not specified, output is written to stdout.",
    )
    parser.add_argument(
        "-m",
        "--max-size",
        metavar="SIZE",
        help="Skip documents larger than SIZE (e.g., 512K, 10MB, 1GiB). Handled according to -E.",
    )
    parser.add_argument(
        "-E",
        "--error-action",
        choices=["ignore", "warn", "fail"],
        default="fail",
        help="How to handle malformed or oversized documents (default: fail).",
    )
    parser.add_argument(
        "-b",
        "--backend",
        metavar="NAME",
        help="ijson backend to tokenize with (e.g., yajl2_c, python). Defaults to the fastest available.",
    )
    parser.add_argument(
        "-F",
        "--show-filter",
        action="store_true",
        help="Print the compiled filter tree before the output.",
    )
    parser.add_argument(
        "-s",
        "--summary",
        metavar="DEST",
        choices=["stderr", "stdout", "file"],
        help="Print summary report. Valid destinations: stderr, stdout, file (requires -o)",
    )
    parser.add_argument(
        "-t",
        "--tokenizer",
        metavar="MODEL",
        help="Tokenizer model to use for counting tokens (e.g., gpt-4). Specifying this enables token counting.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log diagnostic messages to stderr.",
    )

    return parser


def combine_paths(specs: List[str]) -> str:
    """Join the values of repeated -p options into one spec.

    Example:
        >>> combine_paths(["a.b, c", "d"])
        'a.b, c,d'
    """
    return ",".join(specs)


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Args:
        args: Parsed command-line arguments.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if args.summary == "file" and not args.output:
        raise ValueError("--summary=file requires -o/--output to be specified")

    if args.max_size is not None:
        # Raises ValueError with a message naming the bad size
        parse_document_size(args.max_size)
