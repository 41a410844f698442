"""Schema drivers: the ``Driver`` protocol and its SQL, JSON and template backends."""

from schemashift.drivers.base import DATABASE_DEFAULT, SCHEMA_DEFAULT, Capability, Driver
from schemashift.drivers.runner import SQLRunner, create_engine_pooled
from schemashift.drivers.snapshot import JSONDriver
from schemashift.drivers.sql import SQLDriver
from schemashift.drivers.template import TemplateDriver

__all__ = [
    "DATABASE_DEFAULT",
    "SCHEMA_DEFAULT",
    "Capability",
    "Driver",
    "JSONDriver",
    "SQLDriver",
    "SQLRunner",
    "TemplateDriver",
    "create_engine_pooled",
]
