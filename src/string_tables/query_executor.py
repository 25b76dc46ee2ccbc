"""Query executor for STQ queries."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any

from string_tables.csv_io import print_table, read_csv, write_csv
from string_tables.errors import UnboundField
from string_tables.expressions import TRUE, const
from string_tables.parsing.query_parser import (
    AddColumnQuery,
    CreateTableQuery,
    DeleteQuery,
    DescribeQuery,
    ExportQuery,
    ImportQuery,
    InsertQuery,
    Query,
    RemoveColumnQuery,
    SelectQuery,
    UpdateQuery,
)
from string_tables.row import Row
from string_tables.table import Table

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    """Result of a query execution."""

    columns: list[str]
    rows: list[dict[str, Any]]
    message: str | None = None


@dataclass
class CreateResult(QueryResult):
    """Result of a CREATE TABLE query."""

    pass


@dataclass
class InsertResult(QueryResult):
    """Result of an INSERT query."""

    pass


@dataclass
class UpdateResult(QueryResult):
    """Result of an UPDATE query."""

    updated_count: int = 0


@dataclass
class DeleteResult(QueryResult):
    """Result of a DELETE query."""

    deleted_count: int = 0


@dataclass
class ColumnResult(QueryResult):
    """Result of an ADD COLUMN or REMOVE COLUMN query."""

    name: str = ""


@dataclass
class ImportResult(QueryResult):
    """Result of an IMPORT query."""

    file_path: str = ""
    row_count: int = 0


@dataclass
class ExportResult(QueryResult):
    """Result of an EXPORT query.

    ``script`` holds the CSV text when no output file was given.
    """

    script: str = ""
    output_file: str | None = None


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


class QueryExecutor:
    """Executes STQ queries against a table.

    ``CREATE TABLE`` and ``IMPORT`` replace the current table; every other
    query works on it in place.
    """

    def __init__(self, table: Table | None = None) -> None:
        self.table = table if table is not None else Table()

    def execute(self, query: Query) -> QueryResult:
        """Execute a parsed query and return its result."""
        logger.debug("Executing %r", query)
        if isinstance(query, CreateTableQuery):
            return self._execute_create_table(query)
        elif isinstance(query, DescribeQuery):
            return self._execute_describe(query)
        elif isinstance(query, SelectQuery):
            return self._execute_select(query)
        elif isinstance(query, InsertQuery):
            return self._execute_insert(query)
        elif isinstance(query, UpdateQuery):
            return self._execute_update(query)
        elif isinstance(query, DeleteQuery):
            return self._execute_delete(query)
        elif isinstance(query, AddColumnQuery):
            return self._execute_add_column(query)
        elif isinstance(query, RemoveColumnQuery):
            return self._execute_remove_column(query)
        elif isinstance(query, ImportQuery):
            return self._execute_import(query)
        elif isinstance(query, ExportQuery):
            return self._execute_export(query)
        else:
            raise ValueError(f"Unknown query type: {type(query)}")

    def _rows_result(self, rows: list[Row]) -> QueryResult:
        columns = self.table.describe()
        return QueryResult(columns=columns, rows=[row.to_dict(columns) for row in rows])

    def _execute_create_table(self, query: CreateTableQuery) -> QueryResult:
        self.table = Table(query.fields)
        return CreateResult(
            columns=[],
            rows=[],
            message=f"Created table with {_plural(len(query.fields), 'field')}",
        )

    def _execute_describe(self, query: DescribeQuery) -> QueryResult:
        return QueryResult(
            columns=["field"],
            rows=[{"field": name} for name in self.table.describe()],
        )

    def _execute_select(self, query: SelectQuery) -> QueryResult:
        where = query.where if query.where is not None else TRUE
        if query.one:
            return self._rows_result([self.table.select_one(where)])
        return self._rows_result(self.table.select(where))

    def _execute_insert(self, query: InsertQuery) -> QueryResult:
        row = self.table.insert(query.values)
        columns = self.table.describe()
        return InsertResult(
            columns=columns,
            rows=[row.to_dict(columns)],
            message="Inserted 1 row",
        )

    def _execute_update(self, query: UpdateQuery) -> QueryResult:
        fields = self.table.describe()
        for name, _ in query.assignments:
            if name not in fields:
                raise UnboundField(name)

        where = query.where if query.where is not None else TRUE
        rows = self.table.select(where)
        for row in rows:
            values = [(name, expr(row)) for name, expr in query.assignments]
            for name, value in values:
                row.update(name, value)
        return UpdateResult(
            columns=[],
            rows=[],
            message=f"Updated {_plural(len(rows), 'row')}",
            updated_count=len(rows),
        )

    def _execute_delete(self, query: DeleteQuery) -> QueryResult:
        where = query.where if query.where is not None else TRUE
        rows = self.table.select(where)
        for row in rows:
            self.table.delete(row)
        return DeleteResult(
            columns=[],
            rows=[],
            message=f"Deleted {_plural(len(rows), 'row')}",
            deleted_count=len(rows),
        )

    def _execute_add_column(self, query: AddColumnQuery) -> QueryResult:
        expr = query.expr if query.expr is not None else const("")
        if query.name in self.table.describe():
            message = f"Column {query.name!r} already exists"
        else:
            message = f"Added column {query.name!r}"
        self.table.add_column(query.name, expr)
        return ColumnResult(columns=[], rows=[], message=message, name=query.name)

    def _execute_remove_column(self, query: RemoveColumnQuery) -> QueryResult:
        self.table.remove_column(query.name)
        return ColumnResult(
            columns=[],
            rows=[],
            message=f"Removed column {query.name!r}",
            name=query.name,
        )

    def _execute_import(self, query: ImportQuery) -> QueryResult:
        self.table = read_csv(query.file_path)
        return ImportResult(
            columns=[],
            rows=[],
            message=f"Imported {_plural(len(self.table), 'row')} from {query.file_path}",
            file_path=query.file_path,
            row_count=len(self.table),
        )

    def _execute_export(self, query: ExportQuery) -> QueryResult:
        if query.output_file is not None:
            write_csv(query.output_file, self.table)
            return ExportResult(
                columns=[],
                rows=[],
                message=f"Exported {_plural(len(self.table), 'row')} to {query.output_file}",
                output_file=query.output_file,
            )
        buffer = io.StringIO()
        print_table(buffer, self.table)
        return ExportResult(columns=[], rows=[], script=buffer.getvalue())
