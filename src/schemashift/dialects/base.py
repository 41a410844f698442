"""Dialect protocol and shared type-string helpers.

A dialect bundles everything backend-specific about a SQL server:

- the codec translating native type strings to and from ``ColumnType``
- identifier and literal quoting
- the catalog queries used to list and describe objects
- the statements used to create and drop databases, schemas and tables

``SQLDriver`` composes a dialect with an ``SQLRunner``; dialects never
catch backend errors themselves.

Usage:
    from schemashift.dialects.base import parse_type_params, parse_quoted_list

    parse_type_params("int(11) unsigned")
    # TypeSpec(name='INT', params='11', extra='UNSIGNED')

    parse_quoted_list("'a','it''s'")
    # ['a', "it's"]
"""

import enum
import re
from typing import TYPE_CHECKING, Any, NamedTuple, Protocol

from schemashift.schema.types import ColumnType, String

if TYPE_CHECKING:
    from schemashift.drivers.runner import SQLRunner
    from schemashift.schema.models import Column, Table


class Capability(enum.Enum):
    """Operations a driver can meaningfully perform."""

    LIST = "list"
    READ = "read"
    WRITE = "write"
    DATABASES = "databases"
    SCHEMAS = "schemas"


# Synthetic names for backends without a database or schema level
DATABASE_DEFAULT = "default"
SCHEMA_DEFAULT = "default"

# Trailing words that qualify a type rather than name it
TYPE_MODIFIERS = ("UNSIGNED", "SIGNED", "ZEROFILL")

_TYPE_PATTERN = re.compile(
    r"^\s*(?P<name>[^(]*?)\s*(?:\((?P<params>.*)\)\s*(?P<extra>[^()]*?))?\s*$",
    re.DOTALL,
)


class TypeSpec(NamedTuple):
    """A native type string split into its parts."""

    name: str
    params: str | None
    extra: str


class Dialect(Protocol):
    """Interface every SQL dialect implements.

    Catalog methods take the runner used to reach the server and return
    ``None`` when the dialect has no such concept.  Statement builders
    return ``None`` for operations the backend does not support.
    """

    name: str
    capabilities: frozenset[Capability]
    sequence_keyword: str
    create_table_suffix: str

    def quote_identifier(self, identifier: str) -> str:
        """Quote a table or column name, doubling embedded quote chars."""
        ...

    def quote_literal(self, value: Any) -> str:
        """Quote a scalar as a SQL string literal."""
        ...

    def decode_type(self, raw: str) -> ColumnType:
        """Decode a native type description into a canonical type.

        Raises:
            UnknownTypeError: The type name is not in the lookup table.
            UnsupportedTypeError: The type is recognized but not handled.
        """
        ...

    def encode_type(self, column_type: ColumnType) -> str:
        """Encode a canonical type as a native SQL type.

        Raises:
            UnsupportedTypeError: The dialect has no mapping for the type.
        """
        ...

    def modify_clauses(self, old: "Column", new: "Column") -> list[str]:
        """ALTER TABLE clauses that turn *old* into *new*."""
        ...

    def table_ref(self, database: str, schema: str, table: str) -> str:
        """Quoted, possibly qualified, table reference."""
        ...

    def list_databases(self, runner: "SQLRunner") -> list[str] | None: ...

    def list_schemas(self, runner: "SQLRunner", database: str) -> list[str] | None: ...

    def list_tables(
        self, runner: "SQLRunner", database: str, schema: str
    ) -> list[str] | None: ...

    def describe_table(
        self, runner: "SQLRunner", database: str, schema: str, table: str
    ) -> "Table | None": ...

    def create_database_sql(self, database: str) -> str | None: ...

    def create_schema_sql(self, database: str, schema: str) -> str | None: ...

    def drop_database_sql(self, database: str) -> str | None: ...

    def drop_schema_sql(self, database: str, schema: str) -> str | None: ...

    def drop_table_sql(self, database: str, schema: str, table: str) -> str | None: ...


# ------------------------------------------------------------------
# Parsing helpers
# ------------------------------------------------------------------


def parse_type_params(raw: str) -> TypeSpec:
    """Split a native type string into name, parameters and qualifier.

    The parameters are the text inside the first opening parenthesis and
    the last closing one.  The qualifier is whatever follows the closing
    parenthesis.  Without parentheses, trailing ``UNSIGNED``/``SIGNED``/
    ``ZEROFILL`` words are moved from the name to the qualifier so that
    multi-word names like ``DOUBLE PRECISION`` survive intact.

    Name and qualifier are uppercased with whitespace collapsed.

    Examples:
        >>> parse_type_params("varchar(9)")
        TypeSpec(name='VARCHAR', params='9', extra='')
        >>> parse_type_params("decimal(10,2)")
        TypeSpec(name='DECIMAL', params='10,2', extra='')
        >>> parse_type_params("int unsigned")
        TypeSpec(name='INT', params=None, extra='UNSIGNED')
    """
    match = _TYPE_PATTERN.match(raw)
    if match is None:
        return TypeSpec(_normalize(raw), None, "")

    name = _normalize(match.group("name"))
    params = match.group("params")
    extra = _normalize(match.group("extra"))

    if params is None:
        words = name.split(" ")
        modifiers: list[str] = []
        while len(words) > 1 and words[-1] in TYPE_MODIFIERS:
            modifiers.insert(0, words.pop())
        name = " ".join(words)
        extra = " ".join(modifiers + ([extra] if extra else []))

    return TypeSpec(name, params.strip() if params is not None else None, extra)


def strip_delimiters(
    text: str, delimiter: str = "'", escape: str | None = None
) -> tuple[str, str] | None:
    """Strip one delimited string from the front of *text*.

    A doubled delimiter inside the string stands for one literal
    delimiter.  When *escape* is given, the character following it is
    taken literally, as in MySQL's ``'a\\\\b'``.

    Returns:
        ``(unescaped_value, remainder)``, or ``None`` if *text* does not
        start with a complete delimited string.

    Example:
        >>> strip_delimiters("'it''s',rest")
        ("it's", ',rest')
    """
    if not text or not delimiter or not text.startswith(delimiter):
        return None

    width = len(delimiter)
    chars: list[str] = []
    offset = width
    while offset < len(text):
        if escape and text.startswith(escape, offset):
            offset += len(escape)
            if offset >= len(text):
                return None
            chars.append(text[offset])
            offset += 1
        elif text.startswith(delimiter, offset):
            if not text.startswith(delimiter, offset + width):
                return "".join(chars), text[offset + width :]
            chars.append(delimiter)
            offset += 2 * width
        else:
            chars.append(text[offset])
            offset += 1
    return None


def parse_quoted_list(
    text: str, delimiter: str = "'", separator: str = ",", escape: str | None = None
) -> list[str] | None:
    """Parse a delimited, separated list such as ``'a','b','c'``.

    Returns:
        The list of unescaped values, or ``None`` if *text* is malformed.

    Example:
        >>> parse_quoted_list("'a','b','c'")
        ['a', 'b', 'c']
    """
    values: list[str] = []
    remainder = text.strip()
    while True:
        stripped = strip_delimiters(remainder, delimiter, escape)
        if stripped is None:
            return None
        value, remainder = stripped
        values.append(value)
        remainder = remainder.strip().lstrip(separator).strip()
        if not remainder:
            return values


def parse_int_params(params: str | None) -> list[int]:
    """Parse a comma-separated list of integers, e.g. ``"10, 2"``."""
    if not params:
        return []
    return [int(part) for part in params.split(",") if part.strip()]


def quote_with(identifier: str, quote_char: str) -> str:
    """Wrap *identifier* in *quote_char*, doubling any embedded one."""
    return quote_char + identifier.replace(quote_char, quote_char * 2) + quote_char


def select_string_tier(
    string_type: String, tiers: tuple[tuple[int, str, str], ...]
) -> str:
    """Pick the native name for a long string.

    *tiers* holds ``(max_length, text_name, blob_name)`` entries sorted by
    ascending capacity.  The smallest tier covering the length wins; a
    length beyond the last tier still maps to the last tier.
    """
    for max_length, text_name, blob_name in tiers:
        if string_type.length <= max_length:
            return blob_name if string_type.binary else text_name
    _max_length, text_name, blob_name = tiers[-1]
    return blob_name if string_type.binary else text_name


def sized_string_sql(string_type: String) -> str:
    """``CHAR(n)``, ``VARCHAR(n)``, ``BINARY(n)`` or ``VARBINARY(n)``."""
    prefix = "VAR" if string_type.variable else ""
    base = "BINARY" if string_type.binary else "CHAR"
    return f"{prefix}{base}({string_type.length})"


def _normalize(text: str | None) -> str:
    return " ".join((text or "").split()).upper()
