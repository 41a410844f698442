"""Driver factory.

Builds drivers from one of three kinds of target:

1. Profile name: a ``[profiles.<name>]`` table in schemashift.toml
2. JSON path: any target ending in ``.json`` opens a snapshot file
3. URL: anything containing ``://`` is a SQLAlchemy connection URL

Usage:
    from schemashift.config import load_config
    from schemashift.factory import get_driver

    source = get_driver("prod", load_config())
    dest = get_driver("snapshot.json")
"""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import ArgumentError

from schemashift.config.loader import parse_driver_options
from schemashift.config.models import (
    JSONDriverOptions,
    SchemaShiftConfig,
    SQLDriverOptions,
    TemplateDriverOptions,
)
from schemashift.dialects import DIALECTS, get_dialect
from schemashift.drivers.base import Driver
from schemashift.drivers.runner import SQLRunner, build_url, create_engine_pooled
from schemashift.drivers.snapshot import JSONDriver
from schemashift.drivers.sql import SQLDriver
from schemashift.drivers.template import TemplateDriver
from schemashift.errors import DriverConfigurationError

logger = logging.getLogger(__name__)

DRIVER_KINDS = ("sql", "json", "template")


class ProfileNotFoundError(DriverConfigurationError):
    """Raised when a target names neither a profile, a file, nor a URL."""

    pass


def create_sql_driver(options: Mapping[str, Any]) -> SQLDriver:
    """Build an ``SQLDriver``, picking the dialect from the URL backend.

    Raises:
        DriverConfigurationError: ``dsn`` is missing, malformed, or names an
            unsupported backend.
    """
    parsed = parse_driver_options(SQLDriverOptions, options, "sql")
    try:
        url = build_url(parsed.dsn, parsed.username, parsed.password)
    except ArgumentError as e:
        raise DriverConfigurationError(f"Invalid dsn {parsed.dsn!r}: {e}") from e

    backend = url.get_backend_name()
    if backend not in DIALECTS:
        raise DriverConfigurationError(
            f"Unsupported SQL backend '{backend}'. "
            f"Supported: {', '.join(sorted(DIALECTS))}"
        )

    logger.debug(
        "Creating %s driver for %s", backend, url.render_as_string(hide_password=True)
    )
    try:
        engine = create_engine_pooled(url, **parsed.options)
    except (ImportError, ArgumentError) as e:
        raise DriverConfigurationError(
            f"Cannot create engine for {url.drivername}: {e}"
        ) from e
    return SQLDriver(SQLRunner(engine), get_dialect(backend))


def create_driver(kind: str, options: Mapping[str, Any]) -> Driver:
    """Create a driver of the given kind from its options.

    Args:
        kind: ``sql``, ``json`` or ``template``.
        options: Driver options.  Unknown keys are ignored.

    Raises:
        DriverConfigurationError: Unknown kind, or a required option is
            missing or invalid.
    """
    if kind == "sql":
        return create_sql_driver(options)
    if kind == "json":
        parsed = parse_driver_options(JSONDriverOptions, options, "json")
        return JSONDriver(parsed.filename)
    if kind == "template":
        parsed = parse_driver_options(TemplateDriverOptions, options, "template")
        return TemplateDriver(parsed.templates, parsed.template_dir)
    raise DriverConfigurationError(
        f"Unknown driver '{kind}'. Supported: {', '.join(DRIVER_KINDS)}"
    )


def get_driver(target: str, config: SchemaShiftConfig | None = None) -> Driver:
    """Resolve a profile name, JSON path or URL to a driver.

    Profiles take precedence, so a profile may shadow a file name.

    Raises:
        ProfileNotFoundError: *target* matches nothing.
        DriverConfigurationError: The resolved driver is misconfigured.
    """
    if config is not None and target in config.profiles:
        profile = config.profiles[target]
        return create_driver(profile.driver, profile.driver_options())
    if target.endswith(".json"):
        return create_driver("json", {"filename": target})
    if "://" in target:
        return create_driver("sql", {"dsn": target})

    available = ", ".join(config.profiles) if config and config.profiles else "none"
    raise ProfileNotFoundError(
        f"'{target}' is not a profile, a .json file or a connection URL.\n"
        f"Available profiles: {available}"
    )
