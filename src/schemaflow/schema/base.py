"""Schema Engine - validates and transforms target fields against rule chains.

A Schema is a DynamicObject whose fields carry a ``schema`` attribute. The
attribute value is one of:
- absent: the field is unconstrained
- a nested Schema: delegate to that schema for the same field
- a function: a one-entry validator chain
- a list of functions and/or Schemas: a validator chain

The schema's own field values are defaults; they are never validated.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from schemaflow.config.base import get_settings
from schemaflow.model.base import DynamicObject
from schemaflow.model.reflect import ReturnKind, return_kind
from schemaflow.schema.box import ValueBox
from schemaflow.schema.dispatch import RuleContext, call_rule

logger = logging.getLogger(__name__)


@dataclass
class FieldOutcome:
    """Result of applying a schema to one field."""

    field: str
    valid: bool
    removed: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "valid": self.valid,
            "removed": self.removed,
            "error": self.error,
        }


@dataclass
class ApplyReport:
    """Result of applying a schema to a target object."""

    valid: bool = True
    outcomes: list[FieldOutcome] = field(default_factory=list)

    @property
    def invalid_fields(self) -> list[str]:
        return [o.field for o in self.outcomes if not o.valid]

    @property
    def error_count(self) -> int:
        return sum(1 for o in self.outcomes if o.error is not None)

    def add(self, outcome: FieldOutcome) -> None:
        self.outcomes.append(outcome)
        if not outcome.valid:
            self.valid = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "invalid_fields": self.invalid_fields,
            "error_count": self.error_count,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


class Schema(DynamicObject):
    """A DynamicObject acting as a set of per-field validator chains."""

    def rule(self, name: str, *chain: "Callable | Schema", default: Any = None, **attributes: Any) -> "Schema":
        """Declare a field with its default value and validator chain.

        Example:
            schema.rule("age", rules.default, rules.is_integer, default=18)
        """
        if chain:
            attributes[get_settings().schema_attribute] = list(chain)
        self.declare(name, default, **attributes)
        return self

    def rules_for(self, name: str) -> Any:
        """The raw ``schema`` attribute declared for a field."""
        return self.attributes(name).get(get_settings().schema_attribute)

    def apply(self, target: DynamicObject) -> bool:
        """Validate every schema field on the target.

        Every field is processed even after a failure so all invalid data is
        stripped. A failing field is removed from the target unconditionally.

        Returns:
            True if every field is valid
        """
        return self.report(target).valid

    def report(self, target: DynamicObject) -> ApplyReport:
        """Apply the schema and return per-field outcomes."""
        report = ApplyReport()
        for name in self.fields():
            outcome = self._apply_field(target, name)
            if not outcome.valid:
                outcome.removed = target.remove(name)
            report.add(outcome)

        logger.debug(
            "Applied %s to %s: valid=%s invalid=%s",
            type(self).__name__,
            type(target).__name__,
            report.valid,
            report.invalid_fields,
        )
        return report

    def apply_field(self, target: DynamicObject, name: str) -> bool:
        """Validate a single field of the target.

        Never raises: a fault in any chain entry yields False.
        """
        return self._apply_field(target, name).valid

    def _apply_field(self, target: DynamicObject, name: str) -> FieldOutcome:
        rule = self.rules_for(name)
        if rule is None:
            return FieldOutcome(field=name, valid=True)

        try:
            if isinstance(rule, Schema):
                valid = rule.apply_field(target, name)
            elif isinstance(rule, (list, tuple)):
                valid = self._run_chain(rule, target, name)
            else:
                valid = self._run_chain([rule], target, name)
        except Exception as e:
            logger.debug("Rule chain for field %r raised", name, exc_info=True)
            return FieldOutcome(field=name, valid=False, error=f"{type(e).__name__}: {e}")

        logger.debug("Field %r valid=%s", name, valid)
        return FieldOutcome(field=name, valid=valid)

    def _run_chain(self, chain: Iterable[Any], target: DynamicObject, name: str) -> bool:
        box = ValueBox(target.get(name))
        ctx = RuleContext(target=target, schema=self, field=name, box=box)

        for entry in chain:
            if isinstance(entry, Schema):
                if not entry.apply_field(target, name):
                    return False
                # the nested schema may have rewritten the field
                box.set(target.get(name))
                continue

            if not callable(entry):
                raise TypeError(f"Chain entry for {name!r} is neither callable nor a Schema: {entry!r}")

            kind = return_kind(entry)
            result = call_rule(entry, ctx)

            if kind is ReturnKind.BOOL or (kind is ReturnKind.DYNAMIC and isinstance(result, bool)):
                if not result:
                    return False
            elif kind is ReturnKind.VOID:
                continue
            elif result is not None:
                box.set(result)

        if box.value is not None:
            target.set(name, box.value)
        return True
