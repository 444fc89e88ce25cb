import pytest

from csvninja.splitter.errors import SerializationError
from csvninja.splitter.writer import escape_value, record_values, serialize_chunk, serialize_row


@pytest.mark.parametrize(
    "value, expected",
    [
        ("plain", "plain"),
        ("", ""),
        ("Paris, France", '"Paris, France"'),
        ('say "hi"', '"say ""hi"""'),
        ("two\nlines", '"two\nlines"'),
        ("carriage\rreturn", '"carriage\rreturn"'),
        ("  spaced  ", "  spaced  "),
    ],
)
def test_escape_value(value, expected):
    assert escape_value(value) == expected


def test_serialize_row_joins_with_commas():
    assert serialize_row(["1", "a,b", ""]) == '1,"a,b",\n'


def test_lone_empty_value_is_quoted():
    assert serialize_row([""]) == '""\n'


def test_record_values_follow_column_order():
    assert record_values(["b", "a", "c"], {"a": "1", "b": "2", "c": None}) == ["2", "1", ""]


def test_header_line_is_escaped():
    content = serialize_chunk(["id", "name, full"], [{"id": "1", "name, full": "x"}], True, "f.csv")

    assert content == 'id,"name, full"\n1,x\n'


def test_chunk_without_header():
    content = serialize_chunk(["column_1"], [{"column_1": "a"}, {"column_1": "b"}], False, "f.csv")

    assert content == "a\nb\n"


def test_non_text_value_is_a_serialization_error():
    with pytest.raises(SerializationError) as excinfo:
        serialize_chunk(["a"], [{"a": 3}], True, "data_part1.csv")

    assert excinfo.value.code == "SERIALIZATION_ERROR"
    assert excinfo.value.status == 500
    assert "data_part1.csv" in excinfo.value.message("en")
