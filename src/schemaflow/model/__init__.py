"""Model module - the Dynamic Object Model the engines operate on."""

from schemaflow.model.base import DynamicObject
from schemaflow.model.loader import ObjectLoader, load_object
from schemaflow.model.reflect import ReturnKind, attribute, function_attributes

__all__ = [
    "DynamicObject",
    "ObjectLoader",
    "load_object",
    "ReturnKind",
    "attribute",
    "function_attributes",
]
