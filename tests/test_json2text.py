"""Tests for the StreamingJson2Text and Json2Text batch processors."""

import logging
import types
from unittest.mock import MagicMock, patch

import ijson
import pytest

from json2text.exceptions import DocumentTooLargeError
from json2text.io.document_reader import Document
from json2text.json2text import Json2Text, StreamingJson2Text
from json2text.types import FailureAction


def doc(data, source="test"):
    """Build a document from text."""
    raw = data.encode("utf-8")
    return Document(source, raw, len(raw))


@pytest.fixture
def documents():
    """A mix of matching, non-matching, and non-JSON documents."""
    return [
        doc('{"a":{"b":1,"c":true,"x":false},"d":"xyz"}', "one"),
        doc('{"z":1}', "two"),
        doc("plain text", "three"),
        doc('[{"a":{"x":"deep"}}]', "four"),
    ]


def test_init_validation():
    """Invalid output formats and failure actions are rejected."""
    with pytest.raises(ValueError, match="Unsupported output format"):
        StreamingJson2Text("a", output_format="xml")
    with pytest.raises(ValueError, match="Invalid failure_action"):
        StreamingJson2Text("a", failure_action="explode")


def test_failure_action_from_string():
    """Failure actions may be given as case-insensitive strings."""
    assert StreamingJson2Text("a", failure_action="WARN").failure_action is FailureAction.WARN
    assert StreamingJson2Text("a").failure_action is FailureAction.RAISE


def test_text_output_one_line_per_document(documents):
    """Every document produces one line; misses and non-JSON give empty lines."""
    processor = StreamingJson2Text("a.b, a.x")
    lines = list(processor.stream_documents(documents))
    assert lines == ["1 false \n", "\n", "\n", "deep \n"]


def test_json_output(documents):
    """The JSON format keeps the enclosing structure."""
    processor = StreamingJson2Text("a.b, a.x", output_format="json")
    lines = list(processor.stream_documents(documents))
    assert lines == ['{"a":{"b":1,"x":false}}\n', "\n", "\n", '[{"a":{"x":"deep"}}]\n']


def test_counts(documents):
    """Counts reflect the outcome of every document."""
    processor = StreamingJson2Text("a.b, a.x")
    assert not processor.streaming_complete
    output = "".join(processor.stream_documents(documents))

    assert processor.streaming_complete
    assert processor.document_count == 4
    assert processor.extracted_count == 3
    assert processor.non_json_count == 1
    assert processor.failed_count == 0
    assert processor.oversized_count == 0
    assert processor.input_bytes == sum(d.size for d in documents)
    assert processor.character_count == len(output)
    assert processor.token_count is None


def test_counts_are_incremental(documents):
    """Counts are updated while streaming."""
    processor = StreamingJson2Text("a")
    stream = processor.stream_documents(documents)
    next(stream)
    assert processor.document_count == 1
    assert not processor.streaming_complete


def test_documents_stream_only_once(documents):
    """Streaming documents a second time is an error."""
    processor = StreamingJson2Text("a")
    list(processor.stream_documents(documents))
    with pytest.raises(RuntimeError, match="already been streamed"):
        list(processor.stream_documents(documents))


def test_malformed_document_raises_by_default():
    """Decode errors propagate with the default failure action."""
    processor = StreamingJson2Text("a")
    with pytest.raises(ijson.JSONError):
        list(processor.stream_documents([doc('{"a":1,')]))
    assert processor.failed_count == 1


def test_malformed_document_ignored():
    """Ignored decode errors produce an empty line and are counted."""
    processor = StreamingJson2Text("a", failure_action=FailureAction.IGNORE)
    lines = list(processor.stream_documents([doc('{"a":1,'), doc('{"a":2}')]))
    assert lines == ["\n", "2 \n"]
    assert processor.failed_count == 1
    assert processor.extracted_count == 1


def test_malformed_document_warns(caplog):
    """Warned decode errors are logged with the document source."""
    processor = StreamingJson2Text("a", failure_action="warn")
    with caplog.at_level(logging.WARNING, logger="json2text.json2text"):
        lines = list(processor.stream_documents([doc("[1,", "broken.json:4")]))
    assert lines == ["\n"]
    assert "Skipping broken.json:4" in caplog.text


def test_invalid_utf8_is_a_decode_failure():
    """Bytes that are not UTF-8 count as a failed document."""
    processor = StreamingJson2Text("a", failure_action="ignore")
    document = Document("bad", b'{"a":"\xff\xfe"}', 10)
    assert list(processor.stream_documents([document])) == ["\n"]
    assert processor.failed_count == 1


def test_oversized_document_raises_by_default():
    """Oversized documents raise DocumentTooLargeError unless ignored."""
    processor = StreamingJson2Text("a")
    with pytest.raises(DocumentTooLargeError) as excinfo:
        list(processor.stream_documents([Document("big.json", None, 2048, 1024)]))
    assert excinfo.value.size == 2048
    assert excinfo.value.max_size == 1024


def test_oversized_document_ignored():
    """Ignored oversized documents produce an empty line and are counted."""
    processor = StreamingJson2Text("a", failure_action="ignore")
    lines = list(processor.stream_documents([Document("big.json", None, 2048, 1024), doc('{"a":1}')]))
    assert lines == ["\n", "1 \n"]
    assert processor.oversized_count == 1
    assert processor.input_bytes == 2048 + 7


def test_empty_filter():
    """An empty spec gives empty lines for well-formed documents."""
    processor = StreamingJson2Text(" , ")
    assert processor.filter_tree.is_empty
    assert list(processor.stream_documents([doc('{"a":1}')])) == ["\n"]
    assert processor.extracted_count == 1


def test_stream_filter_tree():
    """The compiled filter is rendered line by line."""
    processor = StreamingJson2Text(["a.b", "a.x", "a.b.c"])
    assert list(processor.stream_filter_tree()) == [
        "$\n",
        "└── a\n",
        "    ├── b *\n",
        "    └── x *\n",
    ]


def test_stream_filter_tree_does_not_count():
    """The filter rendering is not part of the counted output."""
    processor = StreamingJson2Text("a")
    list(processor.stream_filter_tree())
    assert processor.character_count == 0


@pytest.fixture
def word_tokenizer():
    """Install a stand-in tiktoken whose encoder yields one token per word."""
    encoder = MagicMock()
    encoder.encode.side_effect = lambda text: text.split()
    module = types.ModuleType("tiktoken")
    module.encoding_for_model = lambda model: encoder
    with patch("importlib.util.find_spec", return_value=True), patch.dict("sys.modules", {"tiktoken": module}):
        yield encoder


def test_token_counting(word_tokenizer, documents):
    """With a tokenizer model, output tokens are counted."""
    processor = StreamingJson2Text("a.b, a.x", tokenizer_model="gpt-4")
    list(processor.stream_documents(documents))
    assert processor.token_count == 3


def test_token_counting_failure_does_not_stop_output(word_tokenizer, caplog):
    """Tokenizer failures are logged and output continues."""
    processor = StreamingJson2Text("a", tokenizer_model="gpt-4")
    word_tokenizer.encode.side_effect = RuntimeError("encoder crashed")
    with caplog.at_level(logging.WARNING, logger="json2text.json2text"):
        lines = list(processor.stream_documents([doc('{"a":"x"}')]))
    assert lines == ["x \n"]
    assert "encoder crashed" in caplog.text


def test_python_backend():
    """The ijson backend can be chosen."""
    processor = StreamingJson2Text("a", backend="python")
    assert list(processor.stream_documents([doc('{"a":[1,2]}')])) == ["1 2 \n"]


def test_json2text_processes_immediately(documents):
    """Json2Text processes everything during construction."""
    result = Json2Text("d, a.b", documents)
    assert result.output_string == "1 xyz \n\n\n\n"
    assert result.streaming_complete
    assert result.document_count == 4


def test_json2text_json_format():
    """Json2Text honors the output format."""
    document = doc('{"arr":[{"name":"Bob","age":20},{"name":"Jack","age":30}]}')
    result = Json2Text("arr.name", [document], output_format="json")
    assert result.output_string == '{"arr":[{"name":"Bob"},{"name":"Jack"}]}\n'


def test_json2text_propagates_errors():
    """Json2Text raises decode errors with the default failure action."""
    with pytest.raises(ijson.JSONError):
        Json2Text("a", [doc("{")])

