"""Function reflection for the Dynamic Object Model.

Functions carry attributes the same way fields do. The engines only need:
- attributes(function)
- parameter count
- return type class (bool / void / other)
- an ordered listing of an object's member functions
"""

import inspect
from enum import Enum
from typing import Any, Callable

ATTRIBUTES_SLOT = "__schemaflow_attributes__"

# A callee taking *args is handed the widest context.
VARIADIC_ARITY = 4

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class ReturnKind(str, Enum):
    """Classification of a function's declared return type."""

    BOOL = "bool"
    VOID = "void"
    OTHER = "other"
    DYNAMIC = "dynamic"  # no annotation; decided from the value returned


def attribute(**attrs: Any) -> Callable[[Callable], Callable]:
    """Decorator attaching attributes to a function.

    Example:
        @attribute(run=2)
        def fetch(self, reply): ...
    """

    def decorate(func: Callable) -> Callable:
        target = getattr(func, "__func__", func)
        existing = dict(getattr(target, ATTRIBUTES_SLOT, {}))
        existing.update(attrs)
        setattr(target, ATTRIBUTES_SLOT, existing)
        return func

    return decorate


def function_attributes(func: Callable) -> dict[str, Any]:
    """Attributes attached to a function (empty dict if none)."""
    target = getattr(func, "__func__", func)
    return dict(getattr(target, ATTRIBUTES_SLOT, {}))


def _signature(func: Callable) -> inspect.Signature | None:
    try:
        return inspect.signature(func)
    except (TypeError, ValueError):
        return None


def parameter_count(func: Callable) -> int:
    """Number of positional parameters a callee declares.

    Bound methods do not count ``self``. Builtins without an introspectable
    signature are treated as single-argument callables.
    """
    signature = _signature(func)
    if signature is None:
        return 1

    count = 0
    for param in signature.parameters.values():
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            return VARIADIC_ARITY
        if param.kind in _POSITIONAL:
            count += 1
    return count


def last_parameter_annotation(func: Callable) -> Any:
    """Annotation of the last positional parameter, or None."""
    signature = _signature(func)
    if signature is None:
        return None
    positional = [p for p in signature.parameters.values() if p.kind in _POSITIONAL]
    if not positional or positional[-1].annotation is inspect.Parameter.empty:
        return None
    return positional[-1].annotation


def return_kind(func: Callable) -> ReturnKind:
    """Classify a callee by its return annotation."""
    signature = _signature(func)
    if signature is None:
        return ReturnKind.DYNAMIC

    annotation = signature.return_annotation
    if annotation is inspect.Signature.empty:
        return ReturnKind.DYNAMIC
    if annotation is bool or annotation == "bool":
        return ReturnKind.BOOL
    if annotation is None or annotation is type(None) or annotation == "None":
        return ReturnKind.VOID
    return ReturnKind.OTHER


def functions(obj: Any) -> list[tuple[str, Callable]]:
    """List an object's public member functions in declaration order.

    Classes are walked from the most basic to the most derived, each class
    body in definition order. An overridden name keeps the position of its
    first declaration and resolves to the most derived implementation.
    """
    names: list[str] = []
    seen: set[str] = set()
    for cls in reversed(type(obj).__mro__):
        if cls is object:
            continue
        for name, member in vars(cls).items():
            if name.startswith("_") or name in seen:
                continue
            if isinstance(member, (staticmethod, classmethod)):
                member = member.__func__
            if inspect.isfunction(member):
                seen.add(name)
                names.append(name)

    return [(name, getattr(obj, name)) for name in names]
