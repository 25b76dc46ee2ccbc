"""Parser for the STQ (String Tables Query) language.

Statements are parsed into query dataclasses. Expressions inside them are
built directly as ``string_tables.expressions`` objects, so a parsed
``where`` clause can be handed to ``Table.select`` as is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import ply.yacc as yacc

from string_tables import expressions as ex
from string_tables.expressions import Expression
from string_tables.parsing.query_lexer import QueryLexer


@dataclass
class CreateTableQuery:
    """A CREATE TABLE query: replace the current table with an empty one."""

    fields: list[str] = field(default_factory=list)


@dataclass
class DescribeQuery:
    """A DESCRIBE query."""

    pass


@dataclass
class SelectQuery:
    """A SELECT query."""

    where: Expression | None = None
    one: bool = False


@dataclass
class InsertQuery:
    """An INSERT query."""

    values: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class UpdateQuery:
    """An UPDATE query: assign computed values to matching rows."""

    assignments: list[tuple[str, Expression]] = field(default_factory=list)
    where: Expression | None = None


@dataclass
class DeleteQuery:
    """A DELETE query."""

    where: Expression | None = None


@dataclass
class AddColumnQuery:
    """An ADD COLUMN query."""

    name: str
    expr: Expression | None = None


@dataclass
class RemoveColumnQuery:
    """A REMOVE COLUMN query."""

    name: str


@dataclass
class ImportQuery:
    """An IMPORT query: load a table from a CSV file."""

    file_path: str


@dataclass
class ExportQuery:
    """An EXPORT query: write the table as CSV to a file or to the result."""

    output_file: str | None = None


Query = CreateTableQuery | DescribeQuery | SelectQuery | InsertQuery | UpdateQuery | DeleteQuery | AddColumnQuery | RemoveColumnQuery | ImportQuery | ExportQuery


class QueryParser:
    """Parser for STQ statements."""

    tokens = QueryLexer.tokens

    # Operator precedence
    precedence = (
        ("left", "OR"),
        ("left", "AND"),
        ("right", "NOT"),
        ("nonassoc", "EQ", "NEQ", "CONTAINS"),
        ("left", "CONCAT"),
    )

    def __init__(self) -> None:
        self.lexer = QueryLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_statement(self, p: yacc.YaccProduction) -> None:
        """statement : query SEMICOLON
                     | query"""
        p[0] = p[1]

    def p_query_create_table(self, p: yacc.YaccProduction) -> None:
        """query : CREATE TABLE identifier_list"""
        p[0] = CreateTableQuery(fields=p[3])

    def p_query_create_table_empty(self, p: yacc.YaccProduction) -> None:
        """query : CREATE TABLE"""
        p[0] = CreateTableQuery()

    def p_query_describe(self, p: yacc.YaccProduction) -> None:
        """query : DESCRIBE"""
        p[0] = DescribeQuery()

    def p_query_select(self, p: yacc.YaccProduction) -> None:
        """query : SELECT where_clause"""
        p[0] = SelectQuery(where=p[2])

    def p_query_select_one(self, p: yacc.YaccProduction) -> None:
        """query : SELECT ONE where_clause"""
        p[0] = SelectQuery(where=p[3], one=True)

    def p_query_insert(self, p: yacc.YaccProduction) -> None:
        """query : INSERT LPAREN insert_value_list RPAREN"""
        p[0] = InsertQuery(values=p[3])

    def p_query_insert_empty(self, p: yacc.YaccProduction) -> None:
        """query : INSERT LPAREN RPAREN"""
        p[0] = InsertQuery()

    def p_query_update(self, p: yacc.YaccProduction) -> None:
        """query : UPDATE SET assignment_list where_clause"""
        p[0] = UpdateQuery(assignments=p[3], where=p[4])

    def p_query_delete(self, p: yacc.YaccProduction) -> None:
        """query : DELETE where_clause"""
        p[0] = DeleteQuery(where=p[2])

    def p_query_add_column(self, p: yacc.YaccProduction) -> None:
        """query : ADD COLUMN IDENTIFIER"""
        p[0] = AddColumnQuery(name=p[3])

    def p_query_add_column_as(self, p: yacc.YaccProduction) -> None:
        """query : ADD COLUMN IDENTIFIER AS expr"""
        p[0] = AddColumnQuery(name=p[3], expr=p[5])

    def p_query_remove_column(self, p: yacc.YaccProduction) -> None:
        """query : REMOVE COLUMN IDENTIFIER"""
        p[0] = RemoveColumnQuery(name=p[3])

    def p_query_import(self, p: yacc.YaccProduction) -> None:
        """query : IMPORT STRING"""
        p[0] = ImportQuery(file_path=p[2])

    def p_query_export(self, p: yacc.YaccProduction) -> None:
        """query : EXPORT"""
        p[0] = ExportQuery()

    def p_query_export_to(self, p: yacc.YaccProduction) -> None:
        """query : EXPORT STRING"""
        p[0] = ExportQuery(output_file=p[2])

    def p_where_clause_empty(self, p: yacc.YaccProduction) -> None:
        """where_clause : """
        p[0] = None

    def p_where_clause(self, p: yacc.YaccProduction) -> None:
        """where_clause : WHERE expr"""
        p[0] = p[2]

    def p_identifier_list_single(self, p: yacc.YaccProduction) -> None:
        """identifier_list : IDENTIFIER"""
        p[0] = [p[1]]

    def p_identifier_list_multiple(self, p: yacc.YaccProduction) -> None:
        """identifier_list : identifier_list COMMA IDENTIFIER"""
        p[0] = p[1] + [p[3]]

    def p_insert_value_list_single(self, p: yacc.YaccProduction) -> None:
        """insert_value_list : insert_value"""
        p[0] = [p[1]]

    def p_insert_value_list_multiple(self, p: yacc.YaccProduction) -> None:
        """insert_value_list : insert_value_list COMMA insert_value"""
        p[0] = p[1] + [p[3]]

    def p_insert_value(self, p: yacc.YaccProduction) -> None:
        """insert_value : IDENTIFIER EQ STRING"""
        p[0] = (p[1], p[3])

    def p_assignment_list_single(self, p: yacc.YaccProduction) -> None:
        """assignment_list : assignment"""
        p[0] = [p[1]]

    def p_assignment_list_multiple(self, p: yacc.YaccProduction) -> None:
        """assignment_list : assignment_list COMMA assignment"""
        p[0] = p[1] + [p[3]]

    def p_assignment(self, p: yacc.YaccProduction) -> None:
        """assignment : IDENTIFIER EQ expr"""
        p[0] = (p[1], p[3])

    # --- Expressions ---

    def p_expr_or(self, p: yacc.YaccProduction) -> None:
        """expr : expr OR expr"""
        p[0] = ex.or_(p[1], p[3])

    def p_expr_and(self, p: yacc.YaccProduction) -> None:
        """expr : expr AND expr"""
        p[0] = ex.and_(p[1], p[3])

    def p_expr_not(self, p: yacc.YaccProduction) -> None:
        """expr : NOT expr"""
        p[0] = ex.not_(p[2])

    def p_expr_equals(self, p: yacc.YaccProduction) -> None:
        """expr : expr EQ expr"""
        p[0] = ex.equals(p[1], p[3])

    def p_expr_not_equals(self, p: yacc.YaccProduction) -> None:
        """expr : expr NEQ expr"""
        p[0] = ex.not_equals(p[1], p[3])

    def p_expr_contains(self, p: yacc.YaccProduction) -> None:
        """expr : expr CONTAINS expr"""
        p[0] = ex.contains(p[1], p[3])

    def p_expr_concat(self, p: yacc.YaccProduction) -> None:
        """expr : expr CONCAT expr"""
        p[0] = ex.concat(p[1], p[3])

    def p_expr_group(self, p: yacc.YaccProduction) -> None:
        """expr : LPAREN expr RPAREN"""
        p[0] = p[2]

    def p_expr_field(self, p: yacc.YaccProduction) -> None:
        """expr : IDENTIFIER"""
        p[0] = ex.field(p[1])

    def p_expr_string(self, p: yacc.YaccProduction) -> None:
        """expr : STRING"""
        p[0] = ex.const(p[1])

    def p_expr_true(self, p: yacc.YaccProduction) -> None:
        """expr : TRUE"""
        p[0] = ex.const(ex.TRUE_STR)

    def p_expr_false(self, p: yacc.YaccProduction) -> None:
        """expr : FALSE"""
        p[0] = ex.const(ex.FALSE_STR)

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="statement", **kwargs)

    def parse(self, data: str) -> Query:
        """Parse a single statement."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        return self.parser.parse(data, lexer=self.lexer.lexer)
