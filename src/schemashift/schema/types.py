"""Canonical, dialect-neutral column types.

Every variant is a pydantic model whose ``type`` field is a literal tag
naming the variant.  ``ColumnType`` is the discriminated union over all
variants, so a snapshot document such as
``{"type": "String", "length": 9}`` validates straight into the right
class.

Pydantic model equality already requires both operands to be the same
class, which gives the "same variant and identical fields" rule for free.

Example:
    >>> Integer(size=8) == Integer(size=8)
    True
    >>> Integer() == Float(size=4)
    False
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, model_validator


class Integer(BaseModel):
    """Integer type; ``size`` is the storage width in bytes."""

    type: Literal["Integer"] = "Integer"
    size: int = 4
    unsigned: bool = False


class String(BaseModel):
    """Character or binary string type."""

    type: Literal["String"] = "String"
    length: int = Field(default=255, gt=0)
    variable: bool = True
    binary: bool = False


class Float(BaseModel):
    """Floating point type; ``size`` is 4 (single) or 8 (double)."""

    type: Literal["Float"] = "Float"
    size: int = 4


class Decimal(BaseModel):
    """Fixed precision numeric type."""

    type: Literal["Decimal"] = "Decimal"
    precision: int = 10
    scale: int = 2


class DateTime(BaseModel):
    """Date and/or time type.

    At least one of ``date`` or ``time`` must be set.  ``zone`` marks a
    value stored with (or normalized to) a time zone.
    """

    type: Literal["DateTime"] = "DateTime"
    date: bool = True
    time: bool = True
    zone: bool = True

    @model_validator(mode="after")
    def _check_date_or_time(self) -> "DateTime":
        if not self.date and not self.time:
            raise ValueError("A DateTime type must have at least a date or a time")
        return self


class Enum(BaseModel):
    """Enumeration of string literals; value order is significant."""

    type: Literal["Enum"] = "Enum"
    values: list[str] = Field(default_factory=list)


class Boolean(BaseModel):
    """Boolean type."""

    type: Literal["Boolean"] = "Boolean"


ColumnType = Annotated[
    Union[Integer, String, Float, Decimal, DateTime, Enum, Boolean],
    Field(discriminator="type"),
]

_column_type_adapter: TypeAdapter[ColumnType] = TypeAdapter(ColumnType)


def parse_column_type(data: dict) -> ColumnType:
    """Build a type variant from its serialized mapping.

    Raises:
        pydantic.ValidationError: If the ``type`` tag is unknown or a field
            is invalid.
    """
    return _column_type_adapter.validate_python(data)
