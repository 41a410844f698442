"""JSON snapshot driver.

Stores schemas as a nested JSON document::

    {
        "<database>": {
            "<schema>": {
                "<table>": {
                    "name": "<table>",
                    "columns": [
                        {"name": "Id", "type": {"type": "Integer", "size": 4, ...},
                         "primary": true, "sequence": true, "null": false,
                         "unique": false, "default": null},
                        ...
                    ]
                }
            }
        }
    }

The file is read lazily on first access and rewritten, with 4-space
indentation, after every successful write operation.  A missing file
reads as "no data" and is created by the first write.

Usage:
    from schemashift.drivers.snapshot import JSONDriver

    driver = JSONDriver("schema.json")
    driver.set_table("shop", "default", table)
    driver.get_table("shop", "default", "orders")
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from schemashift.dialects.base import Capability
from schemashift.errors import BackendExecutionError
from schemashift.schema.ddl import require_types
from schemashift.schema.models import Table

logger = logging.getLogger(__name__)

Document = dict[str, dict[str, dict[str, Any]]]


class JSONDriver:
    """Driver backed by a JSON snapshot file.

    Args:
        filename: Path of the snapshot file.
    """

    capabilities = frozenset(
        {
            Capability.LIST,
            Capability.READ,
            Capability.WRITE,
            Capability.DATABASES,
            Capability.SCHEMAS,
        }
    )

    def __init__(self, filename: str | Path) -> None:
        self._path = Path(filename)
        self._data: Document | None = None

    def __enter__(self) -> "JSONDriver":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_databases(self) -> list[str] | None:
        data = self._read()
        return None if data is None else list(data)

    def list_schemas(self, database: str) -> list[str] | None:
        data = self._read()
        if data is None or database not in data:
            return None
        return list(data[database])

    def list_tables(self, database: str, schema: str) -> list[str] | None:
        data = self._read()
        if data is None or schema not in data.get(database, {}):
            return None
        return list(data[database][schema])

    def get_table(self, database: str, schema: str, table: str) -> Table | None:
        data = self._read()
        if data is None:
            return None
        stored = data.get(database, {}).get(schema, {}).get(table)
        if stored is None:
            return None
        try:
            result = Table.model_validate(stored)
        except ValidationError as e:
            logger.warning("Invalid table %s in %s: %s", table, self._path, e)
            return None
        if result.name is None:
            result.name = table
        return result

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_table(
        self, database: str, schema: str, table: Table, force: bool = False
    ) -> bool:
        require_types(table.columns)
        data = self._load_for_write()
        tables = data.setdefault(database, {}).setdefault(schema, {})
        tables[table.name or ""] = table.model_dump(by_alias=True, mode="json")
        self._save()
        return True

    def create_database(self, database: str) -> bool:
        data = self._load_for_write()
        data.setdefault(database, {})
        self._save()
        return True

    def create_schema(self, database: str, schema: str) -> bool:
        data = self._load_for_write()
        if database not in data:
            logger.debug("Cannot create schema %s: no database %s", schema, database)
            return False
        data[database].setdefault(schema, {})
        self._save()
        return True

    def drop_database(self, database: str) -> bool:
        data = self._load_for_write()
        data.pop(database, None)
        self._save()
        return True

    def drop_schema(self, database: str, schema: str) -> bool:
        data = self._load_for_write()
        data.get(database, {}).pop(schema, None)
        self._save()
        return True

    def drop_table(self, database: str, schema: str, table: str) -> bool:
        data = self._load_for_write()
        data.get(database, {}).get(schema, {}).pop(table, None)
        self._save()
        return True

    def close(self) -> None:
        self._data = None

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    def _load(self) -> Document | None:
        """Load the document once; ``None`` if the file does not exist.

        Raises:
            BackendExecutionError: The file cannot be read or parsed.
        """
        if self._data is not None:
            return self._data
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise BackendExecutionError(f"Failed to read {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise BackendExecutionError(f"{self._path} does not hold a JSON object")
        self._data = data
        return data

    def _read(self) -> Document | None:
        try:
            return self._load()
        except BackendExecutionError as e:
            logger.warning("%s", e)
            return None

    def _load_for_write(self) -> Document:
        data = self._load()
        if data is None:
            data = self._data = {}
        return data

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(self._data, indent=4) + "\n", encoding="utf-8"
            )
        except OSError as e:
            raise BackendExecutionError(f"Failed to write {self._path}: {e}") from e
        logger.debug("Saved snapshot %s", self._path)
