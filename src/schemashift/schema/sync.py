"""Schema copy between drivers.

Walks the source driver's databases, schemas and tables and writes each
table to the destination driver with ``set_table``.  Levels the source
cannot list (SQLite databases, MySQL schemas, ...) collapse to the
synthetic ``"default"`` name, so any pair of drivers can be combined.

Per-table failures are collected rather than raised; the walk always
visits every table.

Usage:
    from schemashift.factory import get_driver
    from schemashift.schema.sync import copy_schema

    result = copy_schema(get_driver("prod"), get_driver("snapshot.json"))
    if not result.success:
        for error in result.errors:
            print(error)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from schemashift.dialects.base import DATABASE_DEFAULT, SCHEMA_DEFAULT
from schemashift.errors import BackendExecutionError, SchemaShiftError

if TYPE_CHECKING:
    from schemashift.drivers.base import Driver

logger = logging.getLogger(__name__)


class CopyResult(BaseModel):
    """Result of a schema copy.

    Attributes:
        success: True if every selected table was copied.
        copied: Qualified names (``database.schema.table``) written.
        skipped: Qualified names the source listed but could not read.
        errors: One message per failed table.
    """

    success: bool = False
    copied: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @property
    def copied_count(self) -> int:
        return len(self.copied)


def _ensure(create: Callable[..., bool], *names: str) -> None:
    """Create a destination container, tolerating existing ones."""
    try:
        if not create(*names):
            logger.debug("Destination did not create %s", ".".join(names))
    except BackendExecutionError as e:
        logger.warning("Could not create %s: %s", ".".join(names), e)


def copy_schema(
    source: Driver,
    dest: Driver,
    tables: Iterable[str] | None = None,
    force: bool = False,
) -> CopyResult:
    """Copy table definitions from *source* to *dest*.

    Args:
        source: Driver to read from.
        dest: Driver to write to.
        tables: Only copy tables with these names (default: all).
        force: Passed through to ``set_table``.

    Returns:
        CopyResult listing copied tables and per-table errors.
    """
    selected = set(tables) if tables is not None else None
    result = CopyResult()

    for database in source.list_databases() or [DATABASE_DEFAULT]:
        _ensure(dest.create_database, database)

        for schema in source.list_schemas(database) or [SCHEMA_DEFAULT]:
            _ensure(dest.create_schema, database, schema)

            for name in source.list_tables(database, schema) or []:
                if selected is not None and name not in selected:
                    continue
                qualified = f"{database}.{schema}.{name}"

                try:
                    table = source.get_table(database, schema, name)
                    if table is None:
                        logger.warning("Skipping %s: source returned no table", qualified)
                        result.skipped.append(qualified)
                        continue
                    dest.set_table(database, schema, table, force=force)
                except SchemaShiftError as e:
                    logger.warning("Failed to copy %s: %s", qualified, e)
                    result.errors.append(f"{qualified}: {e}")
                    continue

                logger.info("Copied %s", qualified)
                result.copied.append(qualified)

    result.success = not result.errors
    return result
