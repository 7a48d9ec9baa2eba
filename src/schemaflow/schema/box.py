"""Value Box - a single mutable slot threading a field value through a chain."""

from typing import Any


class ValueBox:
    """Holds the current value of the field being validated.

    The final content decides whether the target field is written back
    (non-null) or left alone (null).
    """

    __slots__ = ("value",)

    def __init__(self, value: Any = None):
        self.value = value

    @property
    def empty(self) -> bool:
        return self.value is None

    def set(self, value: Any) -> None:
        self.value = value

    def clear(self) -> None:
        self.value = None

    def __repr__(self) -> str:
        return f"ValueBox({self.value!r})"
