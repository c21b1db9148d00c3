"""Unit tests for the CLI main module."""

import logging
from unittest.mock import patch

import pytest

from json2text.cli.main import FAILURE_ACTIONS, configure_logging, format_counts, main, output_buffer_size
from json2text.cli.signal_handler import signal_handler
from json2text.io.document_reader import DocumentReader
from json2text.types import FailureAction


@pytest.fixture(autouse=True)
def no_signal_setup():
    """Keep main from replacing the test process's signal handlers."""
    with patch("json2text.cli.main.setup_signal_handling"):
        yield


@pytest.fixture
def mock_tiktoken_unavailable():
    """Mock tiktoken as unavailable."""
    with patch("importlib.util.find_spec", return_value=None):
        yield


@pytest.fixture
def data_dir(tmp_path):
    """A directory with a JSON file and a JSON Lines file."""
    (tmp_path / "doc.json").write_text('{"a":{"b":1,"c":true,"x":false},"d":"xyz"}')
    (tmp_path / "docs.jsonl").write_text('{"a":{"b":1}}\nnot json\n{"a":{"b":2,"x":"y"}}\n')
    (tmp_path / "broken.jsonl").write_text('{"a":{"b":1}}\n{"a":\n{"a":{"b":3}}\n')
    return tmp_path


def run_main(*argv):
    """Run the CLI with the given arguments, returning the exit code."""
    with patch("sys.argv", ["json2text", *[str(arg) for arg in argv]]):
        try:
            main()
        except SystemExit as e:
            return e.code
    return 0


def test_failure_actions_mapping():
    """CLI error actions map onto the library's failure actions."""
    assert FAILURE_ACTIONS == {
        "ignore": FailureAction.IGNORE,
        "warn": FailureAction.WARN,
        "fail": FailureAction.RAISE,
    }


def test_format_counts():
    """Counts are formatted one per line, with a human-readable input size."""
    counts = {
        "documents": 3,
        "extracted": 2,
        "non_json": 1,
        "failed": 0,
        "oversized": 0,
        "input_bytes": 1500,
        "characters": 42,
        "tokens": None,
    }
    assert format_counts(counts).splitlines() == [
        "Documents: 3",
        "Extracted: 2",
        "Not JSON: 1",
        "Failed: 0",
        "Oversized: 0",
        "Input: 1.5 KB",
        "Characters: 42",
    ]


def test_format_counts_with_tokens():
    """Token counts are listed when available."""
    counts = dict.fromkeys(["documents", "extracted", "non_json", "failed", "oversized", "characters"], 0)
    counts.update(input_bytes=0, tokens=17)
    output = format_counts(counts)
    assert output.endswith("Tokens: 17")
    assert "Input: 0 bytes" in output


def test_configure_logging():
    """The log level depends on -v."""
    with patch("logging.basicConfig") as mock_config:
        configure_logging(True)
        assert mock_config.call_args.kwargs["level"] == logging.DEBUG
        configure_logging(False)
        assert mock_config.call_args.kwargs["level"] == logging.WARNING


def test_output_buffer_size(data_dir):
    """The buffer is sized from the input size, with the minimum for standard input."""
    assert output_buffer_size(DocumentReader([])) == 100
    big = data_dir / "big.json"
    big.write_text("[" + "1," * 5000 + "1]")
    assert output_buffer_size(DocumentReader([big])) == big.stat().st_size // 4


def test_main_text_output(data_dir):
    """A single document is projected to one line of text."""
    out = data_dir / "out.txt"
    assert run_main("-p", "a.b, a.x", "-o", out, data_dir / "doc.json") == 0
    assert out.read_text() == "1 false \n"


def test_main_repeated_paths(data_dir):
    """Repeated -p options are combined."""
    out = data_dir / "out.txt"
    assert run_main("-p", "d", "-p", "a.b", "-o", out, data_dir / "doc.json") == 0
    assert out.read_text() == "1 xyz \n"


def test_main_json_lines(data_dir):
    """Each line of a JSON Lines file gives one output line."""
    out = data_dir / "out.jsonl"
    assert run_main("-l", "-f", "json", "-p", "a.b", "-o", out, data_dir / "docs.jsonl") == 0
    assert out.read_text() == '{"a":{"b":1}}\n\n{"a":{"b":2}}\n'


def test_main_stdout(data_dir, capfd):
    """Without -o the output goes to standard output."""
    assert run_main("-p", "a.c", data_dir / "doc.json") == 0
    assert capfd.readouterr().out == "true \n"


def test_main_show_filter(data_dir, capfd):
    """-F prints the compiled filter followed by a blank line."""
    assert run_main("-F", "-p", "a.b, a.x, a", data_dir / "doc.json") == 0
    assert capfd.readouterr().out == "$\n└── a *\n\n1 true false \n"


def test_main_summary_stderr(data_dir, capfd):
    """The summary can go to standard error."""
    out = data_dir / "out.txt"
    assert run_main("-l", "-s", "stderr", "-p", "a.b", "-o", out, data_dir / "docs.jsonl") == 0
    err = capfd.readouterr().err
    assert "Documents: 3" in err
    assert "Extracted: 2" in err
    assert "Not JSON: 1" in err


def test_main_summary_file(data_dir):
    """The summary can be appended to the output file."""
    out = data_dir / "out.txt"
    assert run_main("-s", "file", "-p", "d", "-o", out, data_dir / "doc.json") == 0
    content = out.read_text()
    assert content.startswith("xyz \n\nDocuments: 1\n")
    assert "Characters: 5" in content


def test_main_summary_file_requires_output(data_dir, capsys):
    """--summary=file without -o is a usage error."""
    assert run_main("-s", "file", "-p", "d", data_dir / "doc.json") == 2
    assert "requires -o/--output" in capsys.readouterr().err


def test_main_malformed_fails_by_default(data_dir, capsys):
    """A malformed document stops processing with exit code 1."""
    out = data_dir / "out.txt"
    assert run_main("-l", "-p", "a.b", "-o", out, data_dir / "broken.jsonl") == 1
    assert capsys.readouterr().err.startswith("Error: ")
    # Output written before the failure is kept
    assert out.read_text() == "1 \n"


def test_main_malformed_ignored(data_dir):
    """-E ignore skips malformed documents with an empty line."""
    out = data_dir / "out.txt"
    assert run_main("-l", "-E", "ignore", "-p", "a.b", "-o", out, data_dir / "broken.jsonl") == 0
    assert out.read_text() == "1 \n\n3 \n"


def test_main_malformed_warned(data_dir, caplog):
    """-E warn logs a warning naming the document."""
    out = data_dir / "out.txt"
    with caplog.at_level(logging.WARNING):
        assert run_main("-l", "-E", "warn", "-p", "a.b", "-o", out, data_dir / "broken.jsonl") == 0
    assert "broken.jsonl:2" in caplog.text


def test_main_max_size(data_dir):
    """Oversized documents fail unless ignored."""
    out = data_dir / "out.txt"
    assert run_main("-m", "10", "-p", "a", "-o", out, data_dir / "doc.json") == 1
    assert run_main("-m", "10", "-E", "ignore", "-p", "a", "-o", out, data_dir / "doc.json") == 0
    assert out.read_text() == "\n"


def test_main_invalid_max_size(data_dir, capsys):
    """An unparseable size is a usage error."""
    assert run_main("-m", "huge", "-p", "a", data_dir / "doc.json") == 2
    assert "Invalid size format" in capsys.readouterr().err


def test_main_missing_file(data_dir, capsys):
    """A missing input file is a runtime error."""
    assert run_main("-p", "a", data_dir / "missing.json") == 1
    assert "Error:" in capsys.readouterr().err


def test_main_unknown_backend(data_dir, capsys):
    """An unavailable ijson backend is a runtime error."""
    assert run_main("-b", "no_such_backend", "-p", "a", data_dir / "doc.json") == 1
    assert "Error:" in capsys.readouterr().err


def test_main_empty_paths_warns(data_dir, capsys):
    """A spec without any path produces a warning and empty lines."""
    out = data_dir / "out.txt"
    assert run_main("-p", " , ", "-o", out, data_dir / "doc.json") == 0
    assert "No paths were given" in capsys.readouterr().err
    assert out.read_text() == "\n"


def test_main_token_counting_without_tiktoken(data_dir, mock_tiktoken_unavailable, capsys):
    """Requesting token counting without tiktoken fails with install instructions."""
    assert run_main("-t", "gpt-4", "-p", "a", data_dir / "doc.json") == 1
    err = capsys.readouterr().err
    assert "Error: Token counting was requested with -t/--tokenizer" in err
    assert "pip install json2text[token_counting]" in err


def test_main_verbose_configures_debug_logging(data_dir):
    """-v enables debug logging."""
    out = data_dir / "out.txt"
    with patch("json2text.cli.main.configure_logging") as mock_configure:
        assert run_main("-v", "-p", "a", "-o", out, data_dir / "doc.json") == 0
    mock_configure.assert_called_once_with(True)


@pytest.mark.parametrize("event_name, code", [("sigpipe_received", 141), ("sigint_received", 130)])
def test_main_exit_code_after_signal(data_dir, event_name, code):
    """A recorded signal stops output and sets the exit code."""
    out = data_dir / "out.txt"
    getattr(signal_handler, event_name).set()
    assert run_main("-p", "a", "-o", out, data_dir / "doc.json") == code
    assert out.read_text() == ""
