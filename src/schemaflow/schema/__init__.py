"""Schema module - per-field validator chains over DynamicObjects.

Example usage:
    from schemaflow.schema import Schema, rules

    schema = Schema()
    schema.rule("name", rules.required, rules.is_string)
    schema.rule("age", rules.default, rules.is_integer, default=18)

    valid = schema.apply(target)
"""

from schemaflow.schema import rules
from schemaflow.schema.base import ApplyReport, FieldOutcome, Schema
from schemaflow.schema.box import ValueBox
from schemaflow.schema.dispatch import Arity, RuleContext, RuleSignatureError

__all__ = [
    "rules",
    "ApplyReport",
    "FieldOutcome",
    "Schema",
    "ValueBox",
    "Arity",
    "RuleContext",
    "RuleSignatureError",
]
