"""Utility helper functions."""

import importlib
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from schemaflow.config.base import Settings, get_settings
from schemaflow.model.reflect import parameter_count

LOGGER_NAME = "schemaflow"


def configure_logging(
    level: str | int | None = None,
    settings: Settings | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """Attach a rich handler to the schemaflow logger.

    Args:
        level: Log level overriding the settings
        settings: Settings to read the level from (global settings if omitted)
        console: Console to write to (stderr if omitted)

    Returns:
        The configured package logger
    """
    settings = settings or get_settings()
    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=settings.rich_tracebacks,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level if level is not None else settings.log_level)
    return logger


def resolve_reference(reference: str) -> Any:
    """Resolve a ``module:attribute`` reference.

    A callable that is not a class and takes no arguments is treated as a
    factory and called.

    Args:
        reference: Reference such as ``schemaflow.examples:person_schema``

    Returns:
        The referenced object
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Reference must look like 'module:attribute', got '{reference}'")

    module = importlib.import_module(module_name)
    obj: Any = module
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ValueError(f"'{module_name}' has no attribute '{attr_path}'") from None

    if callable(obj) and not isinstance(obj, type) and parameter_count(obj) == 0:
        obj = obj()
    return obj
