"""Argument binding for validator chain functions.

A chain function's declared parameter count selects which context values it
receives, most specific first:

    4 -> (target, schema, field, value)
    3 -> (target, field, value)
    2 -> (target, value)
    1 -> (value,)
    0 -> ()

``value`` is the box's current value, or the ValueBox itself when the last
parameter is annotated as ValueBox.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable

from schemaflow.model.base import DynamicObject
from schemaflow.model.reflect import last_parameter_annotation, parameter_count
from schemaflow.schema.box import ValueBox


class RuleSignatureError(TypeError):
    """A chain entry cannot be bound to any supported argument subset."""


class Arity(IntEnum):
    NONE = 0
    VALUE = 1
    TARGET_VALUE = 2
    TARGET_FIELD_VALUE = 3
    FULL = 4


@dataclass
class RuleContext:
    """Everything a chain function may be handed."""

    target: DynamicObject
    schema: DynamicObject
    field: str
    box: ValueBox


_BINDERS: dict[Arity, Callable[[RuleContext, Any], tuple]] = {
    Arity.NONE: lambda ctx, value: (),
    Arity.VALUE: lambda ctx, value: (value,),
    Arity.TARGET_VALUE: lambda ctx, value: (ctx.target, value),
    Arity.TARGET_FIELD_VALUE: lambda ctx, value: (ctx.target, ctx.field, value),
    Arity.FULL: lambda ctx, value: (ctx.target, ctx.schema, ctx.field, value),
}


def _wants_box(func: Callable) -> bool:
    annotation = last_parameter_annotation(func)
    return annotation is ValueBox or annotation == "ValueBox"


def bind_arguments(func: Callable, ctx: RuleContext) -> tuple:
    """Build the positional arguments for a chain function."""
    count = parameter_count(func)
    try:
        arity = Arity(count)
    except ValueError:
        raise RuleSignatureError(
            f"{getattr(func, '__name__', func)!s} declares {count} parameters; at most 4 are supported"
        ) from None

    value = ctx.box if arity is not Arity.NONE and _wants_box(func) else ctx.box.value
    return _BINDERS[arity](ctx, value)


def call_rule(func: Callable, ctx: RuleContext) -> Any:
    """Invoke a chain function with its context-sized argument subset."""
    return func(*bind_arguments(func, ctx))
