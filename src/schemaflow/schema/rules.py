"""Built-in rule library.

Every rule is an ordinary chain entry: its parameter count decides which
context it receives and its return annotation decides how the engine treats
the result (``bool`` predicate, ``None`` side effect, anything else a
replacement value).
"""

import copy
import re
from collections import deque
from typing import Any, Callable, Mapping

import jsonschema

from schemaflow.model.base import DynamicObject
from schemaflow.schema.base import Schema
from schemaflow.schema.box import ValueBox


# ---------------------------------------------------------------------------
# Type predicates
# ---------------------------------------------------------------------------

def is_null(value) -> bool:
    return value is None


def is_bool(value) -> bool:
    return isinstance(value, bool)


def is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_string(value) -> bool:
    return isinstance(value, str)


def is_bytes(value) -> bool:
    return isinstance(value, (bytes, bytearray, memoryview))


def is_mapping(value) -> bool:
    return isinstance(value, (Mapping, DynamicObject))


def is_set(value) -> bool:
    return isinstance(value, (set, frozenset))


def is_sequence(value) -> bool:
    return isinstance(value, (list, tuple))


def is_function(value) -> bool:
    return callable(value) and not isinstance(value, type)


def is_object(value) -> bool:
    return isinstance(value, DynamicObject)


# ---------------------------------------------------------------------------
# Presence, defaults and removal
# ---------------------------------------------------------------------------

def required(value) -> bool:
    """Fail the chain when no value is present."""
    return value is not None


def default(target: DynamicObject, schema: DynamicObject, field: str, value: Any) -> Any:
    """Substitute the schema's declared value when the field is missing.

    Each target receives its own deep copy of the declared value.
    """
    if value is None:
        return copy.deepcopy(schema.get(field))
    return None


def delete(target: DynamicObject, field: str, box: ValueBox) -> None:
    """Remove the field from the target; nothing is written back."""
    target.remove(field)
    box.clear()


def search(target: DynamicObject, schema: DynamicObject, field: str, value: Any) -> Any:
    """Look the field up elsewhere in the tree when it is missing.

    Schema field attributes:
        alias: name to look for (defaults to the field name)
        up: search ancestors of the target, nearest first (default True)
        down: search descendants breadth-first (default ``not up``)

    When both directions are enabled ancestors are searched first. When the
    alias differs from the field name, the target itself is checked before
    either direction. A miss leaves the box unchanged; pair with ``required``
    to insist on a value.
    """
    if value is not None:
        return None

    attrs = schema.attributes(field)
    alias = attrs.get("alias", field)
    up = bool(attrs.get("up", True))
    down = bool(attrs.get("down", not up))

    if alias != field and target.get(alias) is not None:
        return target.get(alias)
    return find_field(target, alias, up=up, down=down)


def find_field(obj: DynamicObject, name: str, *, up: bool = True, down: bool = False) -> Any:
    """Find the first non-null value of ``name`` above and/or below ``obj``."""
    if up:
        for ancestor in obj.ancestors():
            found = ancestor.get(name)
            if found is not None:
                return found

    if down:
        seen = {id(obj)}
        queue = deque(child for _, child in obj.children())
        while queue:
            node = queue.popleft()
            if id(node) in seen:
                continue
            seen.add(id(node))
            found = node.get(name)
            if found is not None:
                return found
            queue.extend(child for _, child in node.children())

    return None


# ---------------------------------------------------------------------------
# Rule factories
# ---------------------------------------------------------------------------

def one_of(*choices: Any) -> Callable[[Any], bool]:
    """Value must equal one of the given choices."""

    def check(value) -> bool:
        return value in choices

    return check


def between(low: float | None = None, high: float | None = None) -> Callable[[Any], bool]:
    """Numeric value within an inclusive range."""

    def check(value) -> bool:
        if not is_number(value):
            return False
        return (low is None or value >= low) and (high is None or value <= high)

    return check


def length(min_len: int | None = None, max_len: int | None = None) -> Callable[[Any], bool]:
    """Value length within an inclusive range."""

    def check(value) -> bool:
        if value is None:
            return False
        size = len(value)
        return (min_len is None or size >= min_len) and (max_len is None or size <= max_len)

    return check


def matches(pattern: str) -> Callable[[Any], bool]:
    """String value fully matching a regular expression."""
    compiled = re.compile(pattern)

    def check(value) -> bool:
        return isinstance(value, str) and compiled.fullmatch(value) is not None

    return check


def coerce(type_: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Convert a present value; a failed conversion invalidates the field."""

    def convert(value) -> Any:
        if value is None:
            return None
        return type_(value)

    return convert


def nested(schema: Schema) -> Callable[[Any], bool]:
    """Apply a schema to a child object held in the field.

    A missing child passes; pair with ``required`` to insist on one.
    """

    def check(value) -> bool:
        if value is None:
            return True
        return isinstance(value, DynamicObject) and schema.apply(value)

    return check


def json_schema(document: Mapping[str, Any]) -> Callable[[Any], bool]:
    """Validate the plain form of the value against a JSON Schema document."""
    validator_class = jsonschema.validators.validator_for(document)
    validator_class.check_schema(document)
    validator = validator_class(document)

    def check(value) -> bool:
        plain = value.to_dict() if isinstance(value, DynamicObject) else value
        return validator.is_valid(plain)

    return check
