"""Import and export of tables in a quoted, comma-terminated text format.

Every value is written between double quotes and followed by a comma,
including the last value of a line::

    "name","id",
    "Bob","12",

The first line holds the field names. Values are not escaped, so a value
containing a comma or a double quote does not survive a round trip.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, TextIO

from string_tables.errors import CsvFormatError, EmptyFile
from string_tables.expressions import const
from string_tables.table import Table

logger = logging.getLogger(__name__)

DELIMITER = ","
QUOTE = '"'


def parse_line(line: str, line_number: int | None = None) -> list[str]:
    """Split one line into its unquoted values."""
    line = line.rstrip("\r\n")
    segments = line.split(DELIMITER)
    if segments.pop() != "":
        raise CsvFormatError("missing trailing delimiter", line_number)
    values = []
    for segment in segments:
        if len(segment) < 2 or not (segment.startswith(QUOTE) and segment.endswith(QUOTE)):
            raise CsvFormatError(f"unquoted value {segment!r}", line_number)
        values.append(segment[1:-1])
    return values


def format_line(values: Iterable[str]) -> str:
    """Format values as one line, newline included."""
    return "".join(f"{QUOTE}{value}{QUOTE}{DELIMITER}" for value in values) + "\n"


def load_table(stream: TextIO, source: str = "<stream>") -> Table:
    """Build a table from an open text stream.

    Raises:
        EmptyFile: if the stream has no header line.
        CsvFormatError: if a line is malformed or has the wrong number of values.
    """
    lines = iter(stream)
    header = next(lines, None)
    if header is None:
        raise EmptyFile(source)

    table = Table()
    for name in parse_line(header, 1):
        table.add_column(name, const(""))
    fields = table.describe()

    for line_number, line in enumerate(lines, start=2):
        # A blank line is a row only when the schema has no fields
        if fields and not line.rstrip("\r\n"):
            continue
        values = parse_line(line, line_number)
        if len(values) != len(fields):
            raise CsvFormatError(
                f"expected {len(fields)} values, got {len(values)}", line_number
            )
        table.insert(zip(fields, values))

    logger.debug("Loaded %d rows with fields %s from %s", len(table), fields, source)
    return table


def print_table(stream: TextIO, table: Table) -> None:
    """Write a table to an open text stream."""
    fields = table.describe()
    stream.write(format_line(fields))
    for row in table:
        stream.write(format_line(row.access(name) for name in fields))


def read_csv(path: str | Path) -> Table:
    """Import a table from a CSV file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8", newline="") as f:
        return load_table(f, str(path))


def write_csv(path: str | Path, table: Table) -> None:
    """Export a table to a CSV file, replacing its contents."""
    path = Path(path)
    with open(path, "w", encoding="utf-8", newline="") as f:
        print_table(f, table)
    logger.debug("Wrote %d rows to %s", len(table), path)
