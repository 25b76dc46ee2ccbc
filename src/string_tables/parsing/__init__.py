"""Parsing module for the STQ query language."""

from string_tables.parsing.query_parser import (
    AddColumnQuery,
    CreateTableQuery,
    DeleteQuery,
    DescribeQuery,
    ExportQuery,
    ImportQuery,
    InsertQuery,
    QueryParser,
    RemoveColumnQuery,
    SelectQuery,
    UpdateQuery,
)

__all__ = [
    "AddColumnQuery",
    "CreateTableQuery",
    "DeleteQuery",
    "DescribeQuery",
    "ExportQuery",
    "ImportQuery",
    "InsertQuery",
    "QueryParser",
    "RemoveColumnQuery",
    "SelectQuery",
    "UpdateQuery",
]
