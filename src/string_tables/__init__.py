"""String Tables - an in-memory table of string rows with composable expressions."""

from string_tables.csv_io import load_table, print_table, read_csv, write_csv
from string_tables.errors import (
    CsvFormatError,
    EmptyFile,
    NotFound,
    StringTablesError,
    UnboundField,
    UnboundRow,
)
from string_tables.expressions import (
    Expression,
    and_,
    bool_op,
    concat,
    const,
    contains,
    counter,
    equals,
    field,
    not_,
    not_equals,
    or_,
    string_op,
)
from string_tables.row import Row
from string_tables.table import Table

__all__ = [
    # Main API
    "Table",
    "Row",
    # Expressions
    "Expression",
    "field",
    "const",
    "concat",
    "equals",
    "contains",
    "bool_op",
    "string_op",
    "counter",
    "and_",
    "or_",
    "not_",
    "not_equals",
    # CSV
    "read_csv",
    "write_csv",
    "load_table",
    "print_table",
    # Errors
    "StringTablesError",
    "UnboundField",
    "UnboundRow",
    "NotFound",
    "EmptyFile",
    "CsvFormatError",
]

__version__ = "0.1.0"
