"""Column comparison between two table snapshots.

Finds which columns were added, dropped, or changed between an old and a
new version of a table.  Pure logic -- no I/O, no database connections.

Columns are matched by name only.  A renamed column shows up as one
dropped and one added column.

Usage:
    from schemashift.schema.comparator import diff_columns

    diff = diff_columns(current_table, desired_table)
    if diff.is_empty:
        print("Nothing to do")
    else:
        print(diff.format_report())
"""

from pydantic import BaseModel, Field

from schemashift.schema.models import Column, Table


class TableDiff(BaseModel):
    """Added, dropped, and changed columns between two tables.

    ``changed`` pairs the old and the new column for each common name.

    Example:
        >>> TableDiff().is_empty
        True
        >>> TableDiff().format_report()
        'No column changes'
    """

    added: list[Column] = Field(default_factory=list)
    dropped: list[Column] = Field(default_factory=list)
    changed: list[tuple[Column, Column]] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True if the tables have identical columns."""
        return not (self.added or self.dropped or self.changed)

    @property
    def change_count(self) -> int:
        """Total number of column-level changes."""
        return len(self.added) + len(self.dropped) + len(self.changed)

    def format_report(self) -> str:
        """Format the diff as a human-readable report."""
        if self.is_empty:
            return "No column changes"

        lines = [f"{self.change_count} column change(s):"]

        if self.dropped:
            lines.append(f"\n  Dropped columns ({len(self.dropped)}):")
            for column in self.dropped:
                lines.append(f"    - {column.name}")

        if self.added:
            lines.append(f"\n  Added columns ({len(self.added)}):")
            for column in self.added:
                lines.append(f"    + {column.name}")

        if self.changed:
            lines.append(f"\n  Changed columns ({len(self.changed)}):")
            for old, _new in self.changed:
                lines.append(f"    ~ {old.name}")

        return "\n".join(lines)


def diff_columns(old: Table, new: Table) -> TableDiff:
    """Compute the column-level difference from *old* to *new*.

    Groups:
    - Dropped: columns in *old* with no same-named column in *new*,
      in *old* column order
    - Added: columns in *new* with no same-named column in *old*,
      in *new* column order
    - Changed: ``(old_column, new_column)`` pairs sharing a name but
      unequal, in *new* column order

    Unchanged common columns are omitted.  Output order depends only on
    input order, so repeated calls give identical results.

    Args:
        old: The table as it currently exists.
        new: The table as it should become.

    Returns:
        ``TableDiff`` with the three column groups.

    Examples:
        >>> from schemashift.schema.types import Integer
        >>> old = Table(name="t", columns=[Column(name="x", type=Integer())])
        >>> new = Table(name="t", columns=[Column(name="y", type=Integer())])
        >>> diff = diff_columns(old, new)
        >>> [c.name for c in diff.dropped], [c.name for c in diff.added]
        (['x'], ['y'])
    """
    old_names: set[str | None] = {column.name for column in old.columns}
    new_names: set[str | None] = {column.name for column in new.columns}

    dropped: list[Column] = [
        column for column in _first_by_name(old) if column.name not in new_names
    ]
    added: list[Column] = [
        column for column in _first_by_name(new) if column.name not in old_names
    ]

    changed: list[tuple[Column, Column]] = []
    for new_column in _first_by_name(new):
        if new_column.name not in old_names:
            continue
        old_column = old.get_column(new_column.name)
        if old_column is not None and old_column != new_column:
            changed.append((old_column, new_column))

    return TableDiff(added=added, dropped=dropped, changed=changed)


def _first_by_name(table: Table) -> list[Column]:
    """Columns of *table* in order, keeping only the first of each name."""
    seen: set[str | None] = set()
    columns: list[Column] = []
    for column in table.columns:
        if column.name in seen:
            continue
        seen.add(column.name)
        columns.append(column)
    return columns
