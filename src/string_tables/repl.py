"""Interactive REPL for STQ (String Tables Query) language."""

from __future__ import annotations

import argparse
import logging
import readline  # noqa: F401 - enables line editing in input()
import sys
from pathlib import Path

from string_tables.csv_io import read_csv
from string_tables.parsing.query_parser import QueryParser
from string_tables.query_executor import ExportResult, QueryExecutor, QueryResult
from string_tables.table import Table

logger = logging.getLogger(__name__)

HISTORY_FILE = Path.home() / ".stq_history"
HISTORY_LENGTH = 1000
MAX_COLUMN_WIDTH = 40


def _split_statements(content: str) -> list[str]:
    """Split content on semicolons outside string literals and backticked names."""
    statements = []
    current = []
    in_string = False
    in_backticks = False
    escape_next = False

    for ch in content:
        if escape_next:
            current.append(ch)
            escape_next = False
            continue

        if ch == "\\" and in_string:
            current.append(ch)
            escape_next = True
            continue

        if ch == '"' and not in_backticks:
            in_string = not in_string
        elif ch == "`" and not in_string:
            in_backticks = not in_backticks
        elif ch == ";" and not in_string and not in_backticks:
            stmt = "".join(current).strip()
            if stmt:
                statements.append(stmt)
            current = []
            continue
        current.append(ch)

    stmt = "".join(current).strip()
    if stmt:
        statements.append(stmt)

    return statements


def format_value(value: str, max_width: int = MAX_COLUMN_WIDTH) -> str:
    """Format a value for display, truncating long strings."""
    if len(value) > max_width:
        return repr(value[: max_width - 3] + "...")
    return repr(value)


def print_result(result: QueryResult) -> None:
    """Print query results in a formatted table."""
    if isinstance(result, ExportResult):
        if result.message:
            print(result.message)
        elif result.script:
            print(result.script, end="")
        return

    if result.message:
        print(result.message)
        if not result.rows:
            return

    if not result.rows:
        print("(no results)")
        return

    col_widths = {col: len(col) for col in result.columns}
    for row in result.rows:
        for col in result.columns:
            col_widths[col] = max(col_widths[col], len(format_value(row[col])))
    for col in col_widths:
        col_widths[col] = min(col_widths[col], MAX_COLUMN_WIDTH)

    header = " | ".join(col.ljust(col_widths[col])[: col_widths[col]] for col in result.columns)
    print(header)
    print("-" * len(header))

    for row in result.rows:
        values = []
        for col in result.columns:
            val = format_value(row[col])
            if len(val) > col_widths[col]:
                val = val[: col_widths[col] - 3] + "..."
            values.append(val.ljust(col_widths[col]))
        print(" | ".join(values))

    print(f"\n({len(result.rows)} row{'s' if len(result.rows) != 1 else ''})")


def load_initial_table(csv_path: Path | None) -> Table:
    if csv_path is None:
        return Table()
    return read_csv(csv_path)


def run_repl(csv_path: Path | None) -> int:
    """Run the interactive REPL."""
    print("STQ REPL - String Tables Query Language")
    try:
        executor = QueryExecutor(load_initial_table(csv_path))
    except Exception as e:
        print(f"Error loading {csv_path}: {e}", file=sys.stderr)
        return 1
    if csv_path:
        print(f"Loaded {csv_path} ({len(executor.table)} rows)")
    else:
        print("Empty table. Use 'create table ...' or 'import \"file.csv\"' to start.")
    print("Type 'help' for commands, 'exit' to quit.\n")

    parser = QueryParser()

    try:
        readline.read_history_file(HISTORY_FILE)
    except FileNotFoundError:
        pass

    try:
        while True:
            try:
                line = input("stq> ").strip()
            except EOFError:
                print()
                break

            if not line:
                continue

            lower = line.lower()
            if lower in ("exit", "quit"):
                break
            elif lower == "help":
                print_help()
                continue
            elif lower == "clear":
                print("\033[2J\033[H", end="")
                continue

            for statement in _split_statements(line):
                try:
                    print_result(executor.execute(parser.parse(statement)))
                except SyntaxError as e:
                    print(f"Syntax error: {e}")
                except Exception as e:
                    print(f"Error: {e}")

            print()

    finally:
        try:
            readline.set_history_length(HISTORY_LENGTH)
            readline.write_history_file(HISTORY_FILE)
        except OSError as e:
            logger.debug("Could not save history: %s", e)

    return 0


def print_help() -> None:
    """Print help information."""
    print("""
STQ - String Tables Query Language

TABLE:
  create table f1, f2, ...    Replace the current table with an empty one
  describe                    List the fields of the table
  import "<file>"             Replace the current table with a CSV file
  export                      Print the table as CSV
  export "<file>"             Write the table to a CSV file

ROWS:
  select [where <expr>]       Show matching rows
  select one [where <expr>]   Show the first matching row
  insert(f="v", ...)          Insert a row (missing fields are "")
  update set f = <expr>, ... [where <expr>]
                              Change fields of matching rows
  delete [where <expr>]       Delete matching rows

COLUMNS:
  add column <name> [as <expr>]
                              Add a field computed for every row
  remove column <name>        Remove a field from the table

EXPRESSIONS:
  name, `odd name`            Field value
  "text"                      Constant (backslash escapes allowed)
  true, false                 Boolean constants
  a ++ b                      Concatenation
  a = b, a != b               String (in)equality
  a contains b                Substring test
  a and b, a or b, not a      Boolean operators ("false" is false)

Statements can be separated with semicolons.
""")


def run_file(file_path: Path, csv_path: Path | None, verbose: bool = False) -> int:
    """Execute statements from a file.

    Args:
        file_path: Path to the file containing statements
        csv_path: Optional CSV file to start from
        verbose: If True, print each statement before executing

    Returns:
        0 on success, 1 on error
    """
    try:
        content = file_path.read_text()
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    # Strip comment lines
    lines = [line for line in content.split("\n") if not line.strip().startswith("--")]
    statements = _split_statements("\n".join(lines))

    if not statements:
        print("No statements found in file", file=sys.stderr)
        return 1

    try:
        executor = QueryExecutor(load_initial_table(csv_path))
    except Exception as e:
        print(f"Error loading {csv_path}: {e}", file=sys.stderr)
        return 1

    parser = QueryParser()
    for statement in statements:
        if verbose:
            for i, line in enumerate(statement.split("\n")):
                prefix = ">>> " if i == 0 else "... "
                print(f"{prefix}{line}")

        try:
            print_result(executor.execute(parser.parse(statement)))
        except SyntaxError as e:
            print(f"Syntax error: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Interactive REPL for String Tables Query Language"
    )
    arg_parser.add_argument(
        "csv_file",
        type=Path,
        nargs="?",
        default=None,
        help="CSV file to load as the initial table (optional)",
    )
    arg_parser.add_argument(
        "-c", "--command",
        type=str,
        help="Execute a single statement and exit",
    )
    arg_parser.add_argument(
        "-f", "--file",
        type=Path,
        help="Execute statements from a file and exit",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print each statement before executing (for -f/--file)",
    )
    arg_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = arg_parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.csv_file and not args.csv_file.exists():
        print(f"Error: CSV file not found: {args.csv_file}", file=sys.stderr)
        return 1

    if args.file:
        if not args.file.exists():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            return 1
        return run_file(args.file, args.csv_file, args.verbose)

    if args.command:
        try:
            executor = QueryExecutor(load_initial_table(args.csv_file))
            parser = QueryParser()
            for statement in _split_statements(args.command):
                print_result(executor.execute(parser.parse(statement)))
            return 0
        except SyntaxError as e:
            print(f"Syntax error: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    return run_repl(args.csv_file)


if __name__ == "__main__":
    sys.exit(main())
