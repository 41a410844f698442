"""schemashift: translate relational schemas between heterogeneous backends.

Reads table definitions from live SQL servers (MySQL, SQLite, PostgreSQL)
or JSON snapshots, diffs them column by column, and writes them back as
DDL, snapshots, or Jinja2-rendered reports.

Usage:
    from schemashift import get_driver, copy_schema
    from schemashift import Table, Column, Integer, String
    from schemashift import diff_columns, load_config
"""

__version__ = "0.1.0"

# Errors
from schemashift.errors import (
    BackendExecutionError,
    DriverConfigurationError,
    MissingTypeError,
    SchemaShiftError,
    UnknownTypeError,
    UnsupportedTypeError,
)

# Schema model
from schemashift.schema.comparator import TableDiff, diff_columns
from schemashift.schema.models import Column, Table
from schemashift.schema.types import (
    Boolean,
    ColumnType,
    DateTime,
    Decimal,
    Enum,
    Float,
    Integer,
    String,
)

# Drivers
from schemashift.drivers import (
    DATABASE_DEFAULT,
    SCHEMA_DEFAULT,
    Capability,
    Driver,
    JSONDriver,
    SQLDriver,
    SQLRunner,
    TemplateDriver,
)

# Config
from schemashift.config.loader import load_config
from schemashift.config.models import ProfileConfig, SchemaShiftConfig

# Factory
from schemashift.factory import ProfileNotFoundError, create_driver, get_driver

# Copy orchestrator
from schemashift.schema.sync import CopyResult, copy_schema

__all__ = [
    # Errors
    "SchemaShiftError",
    "UnknownTypeError",
    "UnsupportedTypeError",
    "MissingTypeError",
    "DriverConfigurationError",
    "BackendExecutionError",
    # Schema model
    "ColumnType",
    "Integer",
    "String",
    "Float",
    "Decimal",
    "DateTime",
    "Enum",
    "Boolean",
    "Column",
    "Table",
    "TableDiff",
    "diff_columns",
    # Drivers
    "DATABASE_DEFAULT",
    "SCHEMA_DEFAULT",
    "Capability",
    "Driver",
    "SQLRunner",
    "SQLDriver",
    "JSONDriver",
    "TemplateDriver",
    # Config
    "load_config",
    "ProfileConfig",
    "SchemaShiftConfig",
    # Factory
    "create_driver",
    "get_driver",
    "ProfileNotFoundError",
    # Copy orchestrator
    "copy_schema",
    "CopyResult",
]
