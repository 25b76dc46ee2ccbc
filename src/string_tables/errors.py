"""Error conditions raised by string tables."""

from __future__ import annotations


class StringTablesError(Exception):
    """Base class for all logical error conditions."""


class UnboundField(StringTablesError, LookupError):
    """A field name was used where it is not defined."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Unbound field: {field!r}")
        self.field = field


class UnboundRow(StringTablesError):
    """A row was used after it was deleted from its table."""

    def __init__(self) -> None:
        super().__init__("Row has been deleted")


class NotFound(StringTablesError, LookupError):
    """No row matched a single-row selection."""

    def __init__(self) -> None:
        super().__init__("No matching row")


class EmptyFile(StringTablesError, ValueError):
    """A CSV source ended before its header line."""

    def __init__(self, source: str = "<stream>") -> None:
        super().__init__(f"Empty CSV file: {source}")
        self.source = source


class CsvFormatError(StringTablesError, ValueError):
    """A CSV line does not follow the quoted, comma-terminated layout."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
