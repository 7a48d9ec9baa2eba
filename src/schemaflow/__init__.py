"""
schemaflow - Schema-driven validation and ordered task trees over dynamic objects.

Two cooperating engines work over a tree of attribute-carrying objects: a schema
engine that validates and transforms fields through per-field rule chains, and
a task engine that runs an ordered tree of tasks against a shared reply object.
"""

__version__ = "0.1.0"

from schemaflow.model.base import DynamicObject
from schemaflow.schema.base import Schema, ApplyReport
from schemaflow.schema.box import ValueBox
from schemaflow.schema import rules
from schemaflow.tasks.base import Task
from schemaflow.tasks.schemafy import Schemafy
from schemaflow.tasks.scheduler import action, schedule, scheduled

__all__ = [
    "DynamicObject",
    "Schema",
    "ApplyReport",
    "ValueBox",
    "rules",
    "Task",
    "Schemafy",
    "action",
    "schedule",
    "scheduled",
]
