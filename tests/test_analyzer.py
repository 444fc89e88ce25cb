import pytest

from csvninja.splitter.analyzer import analyze, decode_buffer
from csvninja.splitter.deadline import Deadline
from csvninja.splitter.errors import (
    ParseError,
    ProcessingTimeoutError,
    UnresolvableHeaderError,
)


def test_header_row_becomes_columns_and_is_not_a_record():
    table = analyze(b"a,b\n1,2\n3,4\n5,6\n", has_header=True)

    assert table.columns == ["a", "b"]
    assert table.header == ["a", "b"]
    assert table.records == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}, {"a": "5", "b": "6"}]
    assert table.total_rows == 4
    assert table.data_row_count == 3


def test_quoted_comma_quote_and_newline_are_unescaped():
    buffer = b'city,quote\n"Paris, France","He said ""hi""\nthen left"\n'

    table = analyze(buffer, has_header=True)

    assert table.records == [{"city": "Paris, France", "quote": 'He said "hi"\nthen left'}]
    assert table.total_rows == 2


def test_crlf_line_endings():
    table = analyze(b"a,b\r\n1,2\r\n", has_header=True)

    assert table.records == [{"a": "1", "b": "2"}]


def test_byte_order_mark_is_dropped():
    table = analyze(b"\xef\xbb\xbfid,name\n1,x\n", has_header=True)

    assert table.columns == ["id", "name"]


def test_blank_lines_are_skipped():
    table = analyze(b"a\n\n1\n\n2\n", has_header=True)

    assert [r["a"] for r in table.records] == ["1", "2"]
    assert table.total_rows == 3


def test_short_rows_are_padded_with_empty_strings():
    table = analyze(b"a,b,c\n1\n", has_header=True)

    assert table.records == [{"a": "1", "b": "", "c": ""}]


def test_row_wider_than_header_is_a_parse_error():
    with pytest.raises(ParseError) as excinfo:
        analyze(b"a,b\n1,2\n1,2,3\n", has_header=True)

    assert excinfo.value.details == {"line": 3, "found": 3, "expected": 2}


def test_field_longer_than_csv_module_default_is_accepted():
    long_value = "x" * 200_000
    buffer = b'a,b\n"' + long_value.encode("ascii") + b'",1\n' + long_value.encode("ascii") + b",2\n"

    table = analyze(buffer, has_header=True)

    assert [r["a"] for r in table.records] == [long_value, long_value]
    assert table.records[1]["b"] == "2"


@pytest.mark.parametrize(
    "buffer",
    [
        b'a,b\n"unterminated,1\n',
        b'a,b\n"x"y,1\n',
        b"a,b\n1,\xff\n",
    ],
)
def test_malformed_input_fails_atomically(buffer):
    with pytest.raises(ParseError) as excinfo:
        analyze(buffer, has_header=True)

    assert excinfo.value.code == "PARSE_ERROR"
    assert excinfo.value.__cause__ is not None


def test_decode_buffer_reports_offset():
    with pytest.raises(ParseError) as excinfo:
        decode_buffer(b"ok\xff")

    assert excinfo.value.details == {"byte_offset": 2}


def test_without_header_columns_are_synthesized_from_widest_row():
    table = analyze(b"1,2\n3\n4,5,6\n", has_header=False)

    assert table.columns == ["column_1", "column_2", "column_3"]
    assert table.header is None
    assert table.records[1] == {"column_1": "3", "column_2": "", "column_3": ""}
    assert table.total_rows == 3
    assert table.data_row_count == 3


def test_every_record_exposes_the_same_keys():
    table = analyze(b"x\ny,z\n\n", has_header=False)

    assert {tuple(r) for r in table.records} == {("column_1", "column_2")}


@pytest.mark.parametrize("buffer", [b",\n1,2\n", b"  \n1\n"])
def test_blank_header_is_unresolvable(buffer):
    with pytest.raises(UnresolvableHeaderError):
        analyze(buffer, has_header=True)


def test_duplicate_header_columns_are_unresolvable():
    with pytest.raises(UnresolvableHeaderError) as excinfo:
        analyze(b"id,name,id\n1,x,2\n", has_header=True)

    assert excinfo.value.details == {"duplicates": ["id"]}
    assert "id" in excinfo.value.message("en")


def test_empty_buffer_gives_empty_table():
    table = analyze(b"", has_header=True)

    assert table.records == []
    assert table.columns == []
    assert table.total_rows == 0


def test_expired_deadline_stops_parsing():
    with pytest.raises(ProcessingTimeoutError):
        analyze(b"a\n1\n", has_header=True, deadline=Deadline(0))
