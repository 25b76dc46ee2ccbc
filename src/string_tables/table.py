"""In-memory tables of string rows."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from string_tables.errors import NotFound, UnboundField
from string_tables.expressions import FALSE_STR, Expression
from string_tables.row import Row


class Table:
    """An ordered schema of field names plus the live rows built on it.

    The table owns every row it creates. Rows are enumerated newest first;
    ``all``, ``select``, ``select_one``, ``add_column`` and CSV export all
    follow that order.

    Not thread-safe: a table is meant to be mutated by a single caller.
    """

    def __init__(self, fields: Iterable[str] = ()) -> None:
        self._fields: list[str] = []
        for name in fields:
            if name in self._fields:
                raise ValueError(f"Duplicate field name: {name!r}")
            self._fields.append(name)
        # Insertion order; enumeration walks it backwards.
        self._rows: list[Row] = []

    def describe(self) -> list[str]:
        """Return the field names in schema order."""
        return list(self._fields)

    def all(self) -> list[Row]:
        return list(reversed(self._rows))

    def __iter__(self) -> Iterator[Row]:
        return reversed(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def insert(self, assocs: Mapping[str, str] | Iterable[tuple[str, str]]) -> Row:
        """Create a row from field/value associations.

        Fields of the schema that are not given are set to ``""``. An unknown
        field raises ``UnboundField`` and leaves the table unchanged.
        """
        pairs = list(assocs.items()) if isinstance(assocs, Mapping) else list(assocs)
        for name, _ in pairs:
            if name not in self._fields:
                raise UnboundField(name)

        row = Row()
        for name in self._fields:
            row.update(name, "")
        for name, value in pairs:
            row.update(name, value)
        self._rows.append(row)
        return row

    def select(self, expr: Expression) -> list[Row]:
        """Return every row for which ``expr`` is not ``"false"``."""
        return [row for row in self if expr(row) != FALSE_STR]

    def select_one(self, expr: Expression) -> Row:
        """Return the first row for which ``expr`` is not ``"false"``.

        The scan stops at the first match. Raises ``NotFound`` if no row matches.
        """
        for row in self:
            if expr(row) != FALSE_STR:
                return row
        raise NotFound()

    def delete(self, row: Row) -> None:
        """Remove ``row`` from the table and destroy it."""
        self._rows = [r for r in self._rows if r is not row]
        row.destroy()

    def add_column(self, name: str, expr: Expression) -> None:
        """Append a field, computing its value for every existing row.

        Does nothing if the field already exists. All values are computed
        before any row receives the new field.
        """
        if name in self._fields:
            return
        rows = self.all()
        values = [expr(row) for row in rows]
        self._fields.append(name)
        for row, value in zip(rows, values):
            row.update(name, value)

    def remove_column(self, name: str) -> None:
        """Remove a field from the schema and from every row."""
        if name not in self._fields:
            raise UnboundField(name)
        for row in self._rows:
            row.discard(name)
        self._fields.remove(name)

    def __repr__(self) -> str:
        return f"Table(fields={self._fields!r}, rows={len(self._rows)})"
