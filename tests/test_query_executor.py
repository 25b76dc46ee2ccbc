"""Tests for executing STQ queries."""

import pytest

from string_tables import EmptyFile, NotFound, Table, UnboundField
from string_tables.parsing.query_parser import QueryParser
from string_tables.query_executor import (
    ColumnResult,
    CreateResult,
    DeleteResult,
    ExportResult,
    ImportResult,
    InsertResult,
    QueryExecutor,
    QueryResult,
    UpdateResult,
)


@pytest.fixture
def executor():
    """An executor over a small table of people."""
    ex = QueryExecutor()
    _run(ex, "create table name, id")
    _run(ex, 'insert(name="Bob", id="12")')
    _run(ex, 'insert(name="Bernard", id="14")')
    _run(ex, 'insert(name="Marcel", id="233")')
    return ex


def _run(executor, text):
    """Parse and execute a single STQ statement."""
    return executor.execute(QueryParser().parse(text))


class TestTableStatements:
    """Tests for create table, describe, and column statements."""

    def test_default_table_is_empty(self):
        ex = QueryExecutor()
        assert ex.table.describe() == []
        assert len(ex.table) == 0

    def test_create_table(self):
        ex = QueryExecutor(Table(["old"]))
        result = _run(ex, "create table name, id")
        assert isinstance(result, CreateResult)
        assert ex.table.describe() == ["name", "id"]

    def test_describe(self, executor):
        result = _run(executor, "describe")
        assert result.columns == ["field"]
        assert result.rows == [{"field": "name"}, {"field": "id"}]

    def test_add_column(self, executor):
        result = _run(executor, 'add column female as name ++ "ette"')
        assert isinstance(result, ColumnResult)
        assert result.message == "Added column 'female'"
        rows = _run(executor, 'select where name = "Bob"').rows
        assert rows == [{"name": "Bob", "id": "12", "female": "Bobette"}]

    def test_add_column_default_empty(self, executor):
        _run(executor, "add column notes")
        assert {r.access("notes") for r in executor.table} == {""}

    def test_add_existing_column(self, executor):
        result = _run(executor, 'add column name as "x"')
        assert result.message == "Column 'name' already exists"
        assert {r.access("name") for r in executor.table} == {"Bob", "Bernard", "Marcel"}

    def test_remove_column(self, executor):
        _run(executor, "remove column id")
        assert executor.table.describe() == ["name"]

    def test_remove_unknown_column(self, executor):
        with pytest.raises(UnboundField):
            _run(executor, "remove column age")
        assert executor.table.describe() == ["name", "id"]


class TestRowStatements:
    """Tests for select, insert, update, and delete statements."""

    def test_select_all(self, executor):
        result = _run(executor, "select")
        assert type(result) is QueryResult
        assert result.columns == ["name", "id"]
        assert [r["name"] for r in result.rows] == ["Marcel", "Bernard", "Bob"]

    def test_select_where(self, executor):
        result = _run(executor, 'select where name contains "ar" and id != "14"')
        assert result.rows == [{"name": "Marcel", "id": "233"}]

    def test_select_one(self, executor):
        result = _run(executor, 'select one where id = "14"')
        assert result.rows == [{"name": "Bernard", "id": "14"}]

    def test_select_one_not_found(self, executor):
        with pytest.raises(NotFound):
            _run(executor, 'select one where id = "7"')

    def test_insert(self, executor):
        result = _run(executor, 'insert(name="Luc")')
        assert isinstance(result, InsertResult)
        assert result.rows == [{"name": "Luc", "id": ""}]
        assert len(executor.table) == 4

    def test_insert_unknown_field(self, executor):
        with pytest.raises(UnboundField):
            _run(executor, 'insert(name="Luc", age="3")')
        assert len(executor.table) == 3

    def test_update(self, executor):
        result = _run(executor, 'update set name = name ++ "!" where id = "12"')
        assert isinstance(result, UpdateResult)
        assert result.updated_count == 1
        assert _run(executor, 'select one where id = "12"').rows[0]["name"] == "Bob!"

    def test_update_reads_values_before_writing(self, executor):
        """Every assignment sees the row as it was before the update."""
        _run(executor, 'update set name = id, id = name where id = "12"')
        assert _run(executor, 'select where name = "12"').rows == [{"name": "12", "id": "Bob"}]

    def test_update_unknown_field(self, executor):
        with pytest.raises(UnboundField):
            _run(executor, 'update set age = "3"')
        assert all("age" not in r.to_dict() for r in executor.table)

    def test_delete_where(self, executor):
        result = _run(executor, 'delete where id = "14"')
        assert isinstance(result, DeleteResult)
        assert result.deleted_count == 1
        assert result.message == "Deleted 1 row"
        with pytest.raises(NotFound):
            _run(executor, 'select one where id = "14"')

    def test_delete_all(self, executor):
        result = _run(executor, "delete")
        assert result.deleted_count == 3
        assert len(executor.table) == 0


class TestImportExport:
    """Tests for import and export statements."""

    def test_export_to_script(self, executor):
        result = _run(executor, "export")
        assert isinstance(result, ExportResult)
        assert result.script.splitlines() == [
            '"name","id",',
            '"Marcel","233",',
            '"Bernard","14",',
            '"Bob","12",',
        ]

    def test_export_and_import_file(self, executor, tmp_path):
        path = tmp_path / "people.csv"
        result = _run(executor, f'export "{path}"')
        assert result.output_file == str(path)
        assert path.exists()

        fresh = QueryExecutor()
        result = _run(fresh, f'import "{path}"')
        assert isinstance(result, ImportResult)
        assert result.row_count == 3
        assert fresh.table.describe() == ["name", "id"]

    def test_export_empty_path(self, executor):
        """An empty path is a bad path, not a request for the CSV text."""
        with pytest.raises(OSError):
            _run(executor, 'export ""')

    def test_import_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        with pytest.raises(EmptyFile):
            _run(QueryExecutor(), f'import "{path}"')

    def test_import_missing_file(self, tmp_path):
        ex = QueryExecutor(Table(["kept"]))
        with pytest.raises(OSError):
            _run(ex, f'import "{tmp_path / "missing.csv"}"')
        assert ex.table.describe() == ["kept"]


def test_unknown_query_type():
    with pytest.raises(ValueError):
        QueryExecutor().execute(object())  # type: ignore[arg-type]
