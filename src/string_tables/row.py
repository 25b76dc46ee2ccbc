"""Rows of a string table."""

from __future__ import annotations

from typing import Iterable

from string_tables.errors import UnboundField, UnboundRow


class Row:
    """A mutable mapping from field names to string values.

    Rows are created by ``Table.insert`` and shared by reference with every
    caller that receives them. Once destroyed (by ``Table.delete``), the value
    map is dropped and every further access or update raises ``UnboundRow``.
    """

    __slots__ = ("_values",)

    def __init__(self) -> None:
        # None once the row is destroyed
        self._values: dict[str, str] | None = {}

    @property
    def destroyed(self) -> bool:
        return self._values is None

    def _live_values(self) -> dict[str, str]:
        if self._values is None:
            raise UnboundRow()
        return self._values

    def access(self, field: str) -> str:
        """Return the value of ``field``."""
        values = self._live_values()
        try:
            return values[field]
        except KeyError:
            raise UnboundField(field) from None

    def update(self, field: str, value: str) -> None:
        """Set the value of ``field``, creating the entry if needed."""
        self._live_values()[field] = value

    def discard(self, field: str) -> None:
        """Remove ``field`` from this row if present."""
        self._live_values().pop(field, None)

    def destroy(self) -> None:
        self._values = None

    def to_dict(self, fields: Iterable[str] | None = None) -> dict[str, str]:
        """Return a copy of the row's values.

        Args:
            fields: Optional field order; only these fields are included.
        """
        values = self._live_values()
        if fields is None:
            return dict(values)
        return {name: self.access(name) for name in fields}

    def __repr__(self) -> str:
        if self._values is None:
            return "Row<destroyed>"
        return f"Row<{self._values!r}>"
