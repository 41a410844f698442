"""CLI for inspecting and translating relational schemas.

Targets are profile names from schemashift.toml, ``*.json`` snapshot
files, or SQLAlchemy connection URLs.

Usage:
    schemashift profiles
    schemashift tables sqlite:///app.db
    schemashift describe prod orders --database shop
    schemashift diff prod snapshot.json orders --database shop --sql
    schemashift translate prod snapshot.json --tables orders,customers

Commands:
    profiles   - List configured profiles
    tables     - List the tables of a database/schema
    describe   - Show the columns of one table
    diff       - Compare one table between two targets
    translate  - Copy table definitions from one target to another
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from schemashift.config.loader import load_config
from schemashift.config.models import SchemaShiftConfig
from schemashift.dialects.base import DATABASE_DEFAULT, SCHEMA_DEFAULT
from schemashift.drivers.base import Driver
from schemashift.errors import SchemaShiftError
from schemashift.factory import get_driver
from schemashift.schema.comparator import diff_columns
from schemashift.schema.models import Column
from schemashift.schema.sync import copy_schema
from schemashift.schema.types import ColumnType

console = Console()


# ============================================================================
# Helpers
# ============================================================================


def _configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(args: argparse.Namespace) -> SchemaShiftConfig | None:
    """Load the config file; a missing default file is not an error.

    Raises:
        FileNotFoundError: An explicitly given ``--config`` does not exist.
    """
    path = Path(args.config) if args.config else None
    try:
        return load_config(path)
    except FileNotFoundError:
        if path is not None:
            raise
        return None


def _open_driver(target: str, args: argparse.Namespace) -> Driver:
    return get_driver(target, _load_config(args))


def format_type(column_type: ColumnType | None) -> str:
    """Render a column type compactly, e.g. ``String(length=9, variable)``.

    True flags are shown as bare words and False flags are omitted, so
    ``Integer(size=8, unsigned=True)`` renders as ``Integer(size=8, unsigned)``.
    """
    if column_type is None:
        return "?"
    parts = []
    for field, value in column_type.model_dump(exclude={"type"}).items():
        if value is True:
            parts.append(field)
        elif value is False:
            continue
        elif isinstance(value, list):
            parts.append(",".join(repr(v) for v in value))
        else:
            parts.append(f"{field}={value}")
    return f"{column_type.type}({', '.join(parts)})" if parts else column_type.type


def _key_flags(column: Column) -> str:
    flags = []
    if column.primary:
        flags.append("PRI")
    if column.unique:
        flags.append("UNI")
    if column.sequence:
        flags.append("SEQ")
    return " ".join(flags)


def _table_ref(args: argparse.Namespace, name: str) -> str:
    return f"{args.database}.{args.schema}.{name}"


# ============================================================================
# Commands
# ============================================================================


def cmd_profiles(args: argparse.Namespace) -> int:
    """List profiles from schemashift.toml.

    Reads only local TOML config -- no backend calls.

    Returns:
        0 on success, 1 if the config file is not found.
    """
    try:
        config = load_config(Path(args.config) if args.config else None)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    table = Table(title="Profiles", show_header=True, header_style="bold")
    table.add_column("Profile", style="cyan")
    table.add_column("Driver")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        table.add_row(name, profile.driver, profile.description or "")

    console.print(table)
    return 0


def cmd_tables(args: argparse.Namespace) -> int:
    """List the tables of one database/schema of a target.

    Returns:
        0 on success, 1 if the target cannot be opened or listed.
    """
    try:
        driver = _open_driver(args.target, args)
    except (SchemaShiftError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    try:
        names = driver.list_tables(args.database, args.schema)
    finally:
        driver.close()

    if names is None:
        console.print(f"[red]Error: cannot list tables of {args.target}[/red]")
        return 1

    for name in names:
        console.print(name)
    if not names:
        console.print("[dim]No tables[/dim]")
    return 0


def cmd_describe(args: argparse.Namespace) -> int:
    """Print the columns of one table.

    Returns:
        0 on success, 1 if the table cannot be read.
    """
    try:
        driver = _open_driver(args.target, args)
        try:
            table = driver.get_table(args.database, args.schema, args.table)
        finally:
            driver.close()
    except (SchemaShiftError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    if table is None:
        console.print(f"[red]Error: table {_table_ref(args, args.table)} not found[/red]")
        return 1

    output = Table(title=table.name, show_header=True, header_style="bold")
    output.add_column("Column", style="cyan")
    output.add_column("Type")
    output.add_column("Null")
    output.add_column("Key")
    output.add_column("Default")

    for column in table.columns:
        output.add_row(
            column.name or "",
            format_type(column.type),
            "YES" if column.nullable else "NO",
            _key_flags(column),
            column.default or "",
        )

    console.print(output)
    return 0


def cmd_diff(args: argparse.Namespace) -> int:
    """Compare one table between two targets.

    Returns:
        0 on success (whether or not the tables differ), 1 on failure.
    """
    try:
        source = _open_driver(args.source, args)
        dest = _open_driver(args.dest, args)
    except (SchemaShiftError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    try:
        desired = source.get_table(args.database, args.schema, args.table)
        if desired is None:
            console.print(
                f"[red]Error: table {_table_ref(args, args.table)} "
                f"not found in {args.source}[/red]"
            )
            return 1

        current = dest.get_table(args.database, args.schema, args.table)
        if current is None:
            console.print(
                f"[yellow]{args.table}[/yellow] does not exist in {args.dest}; "
                f"it would be created with {len(desired.columns)} column(s)"
            )
        else:
            console.print(diff_columns(current, desired).format_report())

        if args.sql:
            plan = getattr(dest, "plan_table", None)
            if plan is None:
                console.print(f"[dim]{args.dest} is not a SQL target; no DDL[/dim]")
            else:
                statement = plan(args.database, args.schema, desired)
                console.print()
                console.print(statement or "[dim]-- nothing to do[/dim]", markup=False)
    except SchemaShiftError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    finally:
        source.close()
        dest.close()

    return 0


def cmd_translate(args: argparse.Namespace) -> int:
    """Copy table definitions from one target to another.

    Returns:
        0 if every table was copied, 1 otherwise.
    """
    tables = [t.strip() for t in args.tables.split(",") if t.strip()] if args.tables else None

    try:
        source = _open_driver(args.source, args)
        dest = _open_driver(args.dest, args)
    except (SchemaShiftError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    console.print(f"Translating [bold]{args.source}[/bold] -> [bold cyan]{args.dest}[/bold cyan]")
    try:
        result = copy_schema(source, dest, tables=tables, force=args.force)
    finally:
        source.close()
        dest.close()

    for name in result.copied:
        console.print(f"  [green]v[/green] {name}")
    for name in result.skipped:
        console.print(f"  [yellow]-[/yellow] {name} (skipped)")
    for error in result.errors:
        console.print(f"  [red]x[/red] {error}")

    if result.success:
        console.print(f"[bold green]v[/bold green] {result.copied_count} table(s) copied")
        return 0
    console.print(f"[bold red]x[/bold red] {len(result.errors)} table(s) failed")
    return 1


# ============================================================================
# Main entry point
# ============================================================================


def _add_location_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--database",
        default=DATABASE_DEFAULT,
        help=f"Database name (default: {DATABASE_DEFAULT})",
    )
    parser.add_argument(
        "--schema",
        default=SCHEMA_DEFAULT,
        help=f"Schema name (default: {SCHEMA_DEFAULT})",
    )


def main() -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="schemashift",
        description="Translate relational schemas between SQL servers, snapshots and reports",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to schemashift.toml (default: ./schemashift.toml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every statement executed",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # profiles command
    p_profiles = subparsers.add_parser("profiles", help="List configured profiles")
    p_profiles.set_defaults(func=cmd_profiles)

    # tables command
    p_tables = subparsers.add_parser("tables", help="List tables of a target")
    p_tables.add_argument("target", help="Profile name, .json file or connection URL")
    _add_location_arguments(p_tables)
    p_tables.set_defaults(func=cmd_tables)

    # describe command
    p_describe = subparsers.add_parser("describe", help="Show the columns of a table")
    p_describe.add_argument("target", help="Profile name, .json file or connection URL")
    p_describe.add_argument("table", help="Table name")
    _add_location_arguments(p_describe)
    p_describe.set_defaults(func=cmd_describe)

    # diff command
    p_diff = subparsers.add_parser("diff", help="Compare a table between two targets")
    p_diff.add_argument("source", help="Target holding the desired table")
    p_diff.add_argument("dest", help="Target holding the current table")
    p_diff.add_argument("table", help="Table name")
    _add_location_arguments(p_diff)
    p_diff.add_argument(
        "--sql",
        action="store_true",
        help="Also print the DDL a SQL destination would run",
    )
    p_diff.set_defaults(func=cmd_diff)

    # translate command
    p_translate = subparsers.add_parser(
        "translate",
        help="Copy table definitions from one target to another",
    )
    p_translate.add_argument("source", help="Target to read from")
    p_translate.add_argument("dest", help="Target to write to")
    p_translate.add_argument(
        "--tables",
        default=None,
        help="Comma-separated list of tables to copy (default: all)",
    )
    p_translate.add_argument(
        "--force",
        action="store_true",
        help="Allow destructive changes on the destination",
    )
    p_translate.set_defaults(func=cmd_translate)

    args = parser.parse_args()
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
