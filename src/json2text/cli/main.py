"""Command-line interface for json2text.

This module provides the command-line interface for json2text, allowing users to
extract the values under selected paths from JSON documents. It handles argument
parsing, output writing, and signal management for graceful interruption handling.

Key Features:
    - Path spec compilation with optional filter tree display
    - Text or compact JSON output, one line per document
    - Whole-file or JSON Lines input, from files or standard input
    - Size limits and configurable handling of malformed documents
    - Token counting with model selection
    - Signal handling (SIGPIPE on Unix systems, SIGINT)

Exit Codes:
    0: Successful completion
    1: Runtime error during execution (including malformed documents with -E fail)
    2: Command-line syntax error
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (SIGPIPE) on Unix-like systems

Example:
    # Extract two fields from every line of a JSON Lines file
    $ json2text -l -p "user.name, tags" data.jsonl

    # Display version information
    $ json2text --version
"""

import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Union

from humanfriendly import format_size

from json2text.cli.argparser import combine_paths, create_parser, validate_args
from json2text.cli.safe_writer import SafeWriter
from json2text.cli.signal_handler import setup_signal_handling, signal_handler
from json2text.exceptions import TokenCountingUnavailableError
from json2text.extractor import estimate_result_length
from json2text.io.document_reader import DocumentReader
from json2text.json2text import StreamingJson2Text
from json2text.output_counter import tiktoken_available
from json2text.types import FailureAction

logger = logging.getLogger(__name__)

# CLI error actions mapped to the library's failure handling
FAILURE_ACTIONS = {
    "ignore": FailureAction.IGNORE,
    "warn": FailureAction.WARN,
    "fail": FailureAction.RAISE,
}


def format_counts(counts: Mapping[str, Optional[int]]) -> str:
    """Format the counts into a human-readable string.

    Args:
        counts: Mapping containing the processing counts.

    Returns:
        A formatted string showing all counts with appropriate labels.

    Example:
        >>> print(format_counts({
        ...     "documents": 3, "extracted": 2, "non_json": 1, "failed": 0,
        ...     "oversized": 0, "input_bytes": 2048, "characters": 17, "tokens": None,
        ... }))
        Documents: 3
        Extracted: 2
        Not JSON: 1
        Failed: 0
        Oversized: 0
        Input: 2.05 KB
        Characters: 17
    """
    result = [
        f"Documents: {counts['documents']}",
        f"Extracted: {counts['extracted']}",
        f"Not JSON: {counts['non_json']}",
        f"Failed: {counts['failed']}",
        f"Oversized: {counts['oversized']}",
        f"Input: {format_size(counts['input_bytes'] or 0)}",
        f"Characters: {counts['characters']}",
    ]

    if counts["tokens"] is not None:
        result.append(f"Tokens: {counts['tokens']}")

    return "\n".join(result)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr, at DEBUG level when verbose and WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
        stream=sys.stderr,
    )


def output_buffer_size(reader: DocumentReader) -> int:
    """Size the output buffer from the combined size of the input files.

    Standard input has no known size; the smallest estimate is used for it.
    """
    total: Optional[int] = reader.total_size()
    return estimate_result_length(total or 0)


def main() -> None:
    """Main entry point for the json2text command-line interface.

    Exit codes:
        0: Successful completion
        1: Runtime error during execution
        2: Command-line syntax error
        130: Interrupted by SIGINT (Ctrl+C)
        141: Broken pipe (SIGPIPE) on Unix-like systems
    """
    setup_signal_handling()

    try:
        parser = create_parser()
        # argparse exits with 2 on usage errors and 0 for --version
        args = parser.parse_args()

        configure_logging(args.verbose)

        try:
            validate_args(args)
        except ValueError as e:
            parser.error(str(e))

        if args.tokenizer and not tiktoken_available():
            raise TokenCountingUnavailableError(
                "Token counting was requested with -t/--tokenizer, but the required tiktoken library is not installed."
            )

        processor = StreamingJson2Text(
            combine_paths(args.paths),
            output_format=args.format,
            tokenizer_model=args.tokenizer,
            failure_action=FAILURE_ACTIONS[args.error_action],
            backend=args.backend,
        )
        if processor.filter_tree.is_empty:
            print("Warning: No paths were given. Every output line will be empty.", file=sys.stderr)

        reader = DocumentReader(args.files, json_lines=args.lines, max_size=args.max_size)

        output_file: Union[int, Path] = args.output if args.output else sys.stdout.fileno()

        with SafeWriter(output_file, buffer_size=output_buffer_size(reader)) as safe_writer:
            try:
                if args.show_filter:
                    for line in processor.stream_filter_tree():
                        safe_writer.write(line)
                    safe_writer.write("\n")

                for line in processor.stream_documents(reader):
                    safe_writer.write(line)

                if args.summary:
                    counts = {
                        "documents": processor.document_count,
                        "extracted": processor.extracted_count,
                        "non_json": processor.non_json_count,
                        "failed": processor.failed_count,
                        "oversized": processor.oversized_count,
                        "input_bytes": processor.input_bytes,
                        "characters": processor.character_count,
                        "tokens": processor.token_count,
                    }
                    count_output_str = format_counts(counts)

                    if args.summary in ("stdout", "file"):
                        safe_writer.write("\n" + count_output_str + "\n")
                    else:
                        print(count_output_str, file=sys.stderr)

            except BrokenPipeError:
                pass  # SafeWriter closes itself in the context manager

    except Exception as e:
        logger.debug("Aborting", exc_info=True)
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    exit_code = signal_handler.exit_code()
    if exit_code is not None:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
