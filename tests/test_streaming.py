import io

import pytest

from csvninja.splitter.analyzer import analyze
from csvninja.splitter.deadline import Deadline
from csvninja.splitter.errors import (
    EmptyOrUndersizedInputError,
    InvalidRowLimitError,
    ParseError,
    ProcessingTimeoutError,
)
from csvninja.splitter.partitioner import partition
from csvninja.splitter.sinks import DirectorySink, MemorySink
from csvninja.splitter.streaming import stream_partition

SOURCE = 'id,city\n1,"Paris, France"\n2,"multi\nline"\n3,\n4,Lyon\n5,"say ""hi"""\n'


def _stream(text, has_header=True, max_rows=2, sink=None, **kwargs):
    sink = sink if sink is not None else MemorySink()
    stats = stream_partition(io.StringIO(text, newline=""), has_header, max_rows, "data", sink, **kwargs)
    return stats, sink


@pytest.mark.parametrize("has_header", [True, False])
@pytest.mark.parametrize("max_rows", [1, 2, 5, 100])
def test_streaming_matches_in_memory_partition(has_header, max_rows):
    expected = partition(analyze(SOURCE.encode("utf-8"), has_header), max_rows, "data")

    stats, sink = _stream(SOURCE, has_header, max_rows)

    assert [(s.filename, s.rows, s.content) for s in sink.summaries] == [
        (a.filename, a.rows, a.content) for a in expected
    ]
    assert stats.artifacts == len(expected)
    assert stats.data_rows == sum(a.rows for a in expected)
    assert sink.committed


def test_header_only_stream_is_undersized():
    with pytest.raises(EmptyOrUndersizedInputError) as excinfo:
        _stream("a,b\n")

    assert excinfo.value.message_key == "header_without_data"


def test_empty_stream_is_undersized():
    with pytest.raises(EmptyOrUndersizedInputError):
        _stream("", has_header=False)


def test_invalid_row_limit_is_rejected_before_reading():
    with pytest.raises(InvalidRowLimitError):
        _stream(SOURCE, max_rows=0)


def test_wider_row_aborts_and_removes_written_parts(tmp_path):
    out = tmp_path / "parts"
    sink = DirectorySink(out)
    text = "a,b\n1,2\n3,4\n5,6,7\n"

    with pytest.raises(ParseError) as excinfo:
        _stream(text, max_rows=1, sink=sink)

    assert excinfo.value.details["line"] == 4
    assert sink.aborted
    assert sink.summaries == []
    assert not out.exists()


RAGGED = '1\n2,3\n"x, y"\n4,5,6\n\n7\n'


@pytest.mark.parametrize("max_rows", [1, 2, 10])
def test_ragged_input_without_header_matches_in_memory_partition(max_rows):
    expected = partition(analyze(RAGGED.encode("utf-8"), has_header=False), max_rows, "data")

    stats, sink = _stream(RAGGED, has_header=False, max_rows=max_rows)

    assert [(s.filename, s.rows, s.content) for s in sink.summaries] == [
        (a.filename, a.rows, a.content) for a in expected
    ]
    assert stats.data_rows == 5


def test_ragged_input_from_non_seekable_iterable():
    expected = partition(analyze(RAGGED.encode("utf-8"), has_header=False), 2, "data")
    sink = MemorySink()

    stream_partition(iter(RAGGED.splitlines(keepends=True)), False, 2, "data", sink)

    assert [s.content for s in sink.summaries] == [a.content for a in expected]
    assert sink.summaries[0].content == "1,,\n2,3,\n"


def test_stream_is_read_from_its_current_position():
    handle = io.StringIO("skipped\n1\n2,3\n", newline="")
    handle.readline()
    sink = MemorySink()

    stream_partition(handle, False, 5, "data", sink)

    assert sink.summaries[0].content == "1,\n2,3\n"


def test_expired_deadline_aborts_stream():
    sink = MemorySink()

    with pytest.raises(ProcessingTimeoutError):
        _stream(SOURCE, sink=sink, deadline=Deadline(0))

    assert sink.aborted
