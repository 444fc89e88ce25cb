"""CSV serialization for output chunks."""

import re
from typing import Iterable, List, Mapping, Sequence

from .errors import SerializationError

LINE_TERMINATOR = "\n"
DELIMITER = ","

_NEEDS_QUOTING = re.compile(r'[,"\r\n]')


def escape_value(value: str) -> str:
    """Quote ``value`` when it holds a delimiter, a quote or a line break."""
    if _NEEDS_QUOTING.search(value):
        return '"' + value.replace('"', '""') + '"'
    return value


def serialize_row(values: Sequence[str]) -> str:
    # A lone empty field must stay distinguishable from a blank line.
    if len(values) == 1 and values[0] == "":
        return '""' + LINE_TERMINATOR
    return DELIMITER.join(escape_value(value) for value in values) + LINE_TERMINATOR


def record_values(columns: Sequence[str], record: Mapping[str, str]) -> List[str]:
    """Values of ``record`` in column order; missing or None values become ''."""
    values = []
    for column in columns:
        value = record.get(column)
        if value is None:
            value = ""
        elif not isinstance(value, str):
            raise TypeError(f"column {column!r} holds a {type(value).__name__}, expected str")
        values.append(value)
    return values


def serialize_chunk(
    columns: Sequence[str],
    records: Iterable[Mapping[str, str]],
    include_header: bool,
    filename: str,
) -> str:
    """Serialize one chunk, header line first when ``include_header`` is set.

    Raises:
        SerializationError: A record could not be rendered as CSV text.
    """
    parts = []
    try:
        if include_header:
            parts.append(serialize_row(columns))
        for record in records:
            parts.append(serialize_row(record_values(columns, record)))
    except (TypeError, AttributeError) as exc:
        raise SerializationError(filename=filename, details={"reason": str(exc)}) from exc
    return "".join(parts)
