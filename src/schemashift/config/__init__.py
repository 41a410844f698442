"""Configuration management: profiles, TOML loading, and driver option models.

Usage:
    >>> from schemashift.config import load_config, ProfileConfig, SchemaShiftConfig
"""

from schemashift.config.loader import load_config, parse_driver_options
from schemashift.config.models import (
    JSONDriverOptions,
    ProfileConfig,
    SchemaShiftConfig,
    SQLDriverOptions,
    TemplateDriverOptions,
)

__all__ = [
    "load_config",
    "parse_driver_options",
    "JSONDriverOptions",
    "ProfileConfig",
    "SchemaShiftConfig",
    "SQLDriverOptions",
    "TemplateDriverOptions",
]
