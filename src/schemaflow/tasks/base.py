"""Base class for Tasks - schedulable units running against a reply object.

A Task is a DynamicObject; any Task held in one of its fields is a sub-task.
Calling ``run`` processes the sub-tasks first (see scheduler), so a tree of
tasks runs depth first with children finishing before their parent.

Overriding ``run`` must call ``super().run(reply)`` to keep descending into
sub-tasks; skipping it prunes the subtree:

    class Fetch(Task):
        def run(self, reply):
            super().run(reply)
            reply.set("fetched", True)

Decorating the override with ``@scheduled`` instead of calling super also
runs the sub-tasks first.
"""

from typing import Any, Mapping

from schemaflow.config.base import get_settings
from schemaflow.model.base import DynamicObject
from schemaflow.tasks.scheduler import TaskState, collect_tasks, scheduled


class Task(DynamicObject):
    """A schedulable unit, possibly owning nested tasks."""

    def __init__(
        self,
        fields: Mapping[str, Any] | None = None,
        *,
        attributes: Mapping[str, Mapping[str, Any]] | None = None,
    ):
        super().__init__(fields, attributes=attributes)
        self.state = TaskState.PENDING

    @scheduled
    def run(self, reply: DynamicObject) -> None:
        """Run sub-tasks against the reply. The base body does nothing else."""

    def add(self, name: str, task: "Task", order: int = 0) -> "Task":
        """Attach a sub-task under ``name`` with a sibling order."""
        self.declare(name, task, **{get_settings().order_attribute: order})
        return self

    def tasks(self) -> list[tuple[str, DynamicObject]]:
        """Sub-tasks in the order they will run."""
        return collect_tasks(self)
