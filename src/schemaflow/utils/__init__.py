"""Utility functions for schemaflow."""

from schemaflow.utils.helpers import (
    configure_logging,
    resolve_reference,
)

__all__ = [
    "configure_logging",
    "resolve_reference",
]
