"""Base classes for the Dynamic Object Model.

A DynamicObject is a node in a mutable, reflectable tree:
- An ordered mapping of field name to value
- A per-field attribute mapping (metadata kept apart from the value)
- A weak back-reference to the parent object

Schemas, tasks and reply objects are all DynamicObjects that play a role.
"""

import copy
import weakref
from types import MappingProxyType
from typing import Any, Iterator, Mapping


_EMPTY_ATTRIBUTES: Mapping[str, Any] = MappingProxyType({})


class DynamicObject:
    """A tree node carrying ordered fields and per-field attributes."""

    def __init__(
        self,
        fields: Mapping[str, Any] | None = None,
        *,
        attributes: Mapping[str, Mapping[str, Any]] | None = None,
    ):
        self._fields: dict[str, Any] = {}
        self._attributes: dict[str, dict[str, Any]] = {}
        self._parent: weakref.ref | None = None

        for name, value in (fields or {}).items():
            self.set(name, value)
        for name, attrs in (attributes or {}).items():
            self._attributes.setdefault(name, {}).update(attrs)

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def fields(self) -> list[str]:
        """Field names in declaration order."""
        return list(self._fields)

    def get(self, field: str, default: Any = None) -> Any:
        return self._fields.get(field, default)

    def has(self, field: str) -> bool:
        return field in self._fields

    def set(self, field: str, value: Any) -> None:
        """Set a field, adopting the value when it is a DynamicObject.

        Only objects without a live parent are adopted. An object already
        held elsewhere in a tree is shared and keeps its parent.
        """
        if isinstance(value, DynamicObject) and value.parent is None:
            value._parent = weakref.ref(self)
        self._fields[field] = value

    def remove(self, field: str) -> bool:
        """Remove a field.

        Attributes declared for the field are kept: they describe the slot,
        not the value.

        Returns:
            True if the field existed
        """
        if field not in self._fields:
            return False
        value = self._fields.pop(field)
        if isinstance(value, DynamicObject) and value.parent is self:
            value._parent = None
        return True

    def declare(self, field: str, value: Any = None, **attributes: Any) -> "DynamicObject":
        """Set a field and merge attributes for it in one step.

        Returns self so declarations can be chained.
        """
        self.set(field, value)
        if attributes:
            self._attributes.setdefault(field, {}).update(attributes)
        return self

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def attributes(self, field: str) -> Mapping[str, Any]:
        """Read-only view of a field's attributes (empty if none)."""
        attrs = self._attributes.get(field)
        if attrs is None:
            return _EMPTY_ATTRIBUTES
        return MappingProxyType(attrs)

    def set_attribute(self, field: str, name: str, value: Any) -> None:
        self._attributes.setdefault(field, {})[name] = value

    # ------------------------------------------------------------------
    # Tree navigation
    # ------------------------------------------------------------------

    @property
    def parent(self) -> "DynamicObject | None":
        if self._parent is None:
            return None
        return self._parent()

    def children(self) -> Iterator[tuple[str, "DynamicObject"]]:
        """Yield (field, child) pairs for fields holding DynamicObjects."""
        for name, value in self._fields.items():
            if isinstance(value, DynamicObject):
                yield name, value

    def ancestors(self) -> Iterator["DynamicObject"]:
        """Walk parent links upward, nearest first."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def root(self) -> "DynamicObject":
        node = self
        for node in self.ancestors():
            pass
        return node

    def is_instance_of(self, capability: type | str) -> bool:
        """Check a capability given as a class or as a class name."""
        if isinstance(capability, type):
            return isinstance(self, capability)
        return any(cls.__name__ == capability for cls in type(self).__mro__)

    def copy(self) -> "DynamicObject":
        """Deep copy detached from any parent."""
        return copy.deepcopy(self)

    def __deepcopy__(self, memo: dict) -> "DynamicObject":
        clone = type(self).__new__(type(self))
        memo[id(self)] = clone
        for key, value in self.__dict__.items():
            if key != "_parent":
                setattr(clone, key, copy.deepcopy(value, memo))
        clone._parent = None
        for name, child in self.children():
            if child.parent is self:
                clone._fields[name]._parent = weakref.ref(clone)
        return clone

    # ------------------------------------------------------------------
    # Export and mapping protocol
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Recursively export fields as plain data."""
        return {name: _export(value) for name, value in self._fields.items()}

    def __getitem__(self, field: str) -> Any:
        return self._fields[field]

    def __setitem__(self, field: str, value: Any) -> None:
        self.set(field, value)

    def __delitem__(self, field: str) -> None:
        if not self.remove(field):
            raise KeyError(field)

    def __contains__(self, field: object) -> bool:
        return field in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.fields()!r})"


def _export(value: Any) -> Any:
    if isinstance(value, DynamicObject):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _export(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_export(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted((_export(v) for v in value), key=repr)
    return value
