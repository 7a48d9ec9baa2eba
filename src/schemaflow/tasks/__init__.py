"""Tasks module - ordered, recursive task trees sharing a reply object."""

from schemaflow.tasks.base import Task
from schemaflow.tasks.schemafy import Schemafy
from schemaflow.tasks.scheduler import (
    TaskDefinitionError,
    TaskState,
    action,
    collect_actions,
    collect_tasks,
    reset_states,
    schedule,
    scheduled,
)

__all__ = [
    "Task",
    "Schemafy",
    "TaskDefinitionError",
    "TaskState",
    "action",
    "collect_actions",
    "collect_tasks",
    "reset_states",
    "schedule",
    "scheduled",
]
