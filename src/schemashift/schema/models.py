"""Pydantic models for tables and columns.

This module contains the dialect-neutral structure models:
- Column: name, type, key/sequence flags, nullability, uniqueness, default
- Table: name and ordered columns

Both are plain mutable value objects compared structurally.  Clones are
deep copies, so mutating a clone never leaks into the original.

Column types live in schemashift.schema.types.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from schemashift.schema.types import ColumnType


# ============================================================================
# Column
# ============================================================================


class Column(BaseModel):
    """A column in a relational table.

    ``default`` holds the literal text of the default value: numbers are
    stored as their string form and booleans as ``"1"``/``"0"``.

    ``nullable`` is read from either ``nullable`` or ``null`` and is
    serialized as ``null`` (``model_dump(by_alias=True)``), matching the
    snapshot document layout.

    Example:
        >>> col = Column(name="id", primary=True, default=0)
        >>> col.default
        '0'
        >>> col == col.clone()
        True
    """

    name: str | None = None
    type: ColumnType | None = None
    primary: bool = False
    sequence: bool = False
    nullable: bool = Field(
        default=True,
        validation_alias=AliasChoices("nullable", "null"),
        serialization_alias="null",
    )
    unique: bool = False
    default: str | None = None

    @field_validator("default", mode="before")
    @classmethod
    def _default_as_text(cls, value: Any) -> Any:
        # Backends report defaults as literal text; booleans are stored as 1/0
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (int, float)):
            return str(value)
        return value

    def clone(self) -> "Column":
        """Return a deep copy, including the column type."""
        return self.model_copy(deep=True)


# ============================================================================
# Table
# ============================================================================


class Table(BaseModel):
    """A relational table: a name and its ordered columns.

    Column order is significant for equality and for generated DDL.
    """

    name: str | None = None
    columns: list[Column] = Field(default_factory=list)

    def get_column(self, name: str) -> Column | None:
        """Return the first column named *name*, or ``None``."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    @property
    def column_names(self) -> list[str]:
        """Column names in table order."""
        return [column.name for column in self.columns if column.name is not None]

    def clone(self) -> "Table":
        """Return a deep copy, including every column."""
        return self.model_copy(deep=True)
