"""Task scheduler - discovers, orders and runs a tree of tasks.

Running a container:
1. Collect every field holding a Task, in declaration order
2. Stable-sort them by the ``order`` attribute of their field (default 0)
3. For each task, run its ``run``-tagged functions sorted by their order,
   then its own ``run`` unless that was already among them
4. Finally call the wrapped body

Task.run is itself wrapped, so the whole tree runs depth first with every
subtree finishing before its parent's body.
"""

import functools
import logging
from enum import Enum
from typing import Any, Callable

from schemaflow.config.base import get_settings
from schemaflow.model.base import DynamicObject
from schemaflow.model.reflect import attribute, function_attributes, functions

logger = logging.getLogger(__name__)

TASK_CAPABILITY = "Task"
RUN_METHOD = "run"


class TaskDefinitionError(ValueError):
    """A task tree carries an unusable order value."""


class TaskState(str, Enum):
    """Lifecycle of a task within one run."""

    PENDING = "pending"
    RUNNING_CHILDREN = "running_children"
    RUNNING_ACTIONS = "running_actions"
    RUNNING_BODY = "running_body"
    DONE = "done"
    FAILED = "failed"


def action(order: int | Callable = 0) -> Callable:
    """Tag a task method as an action, optionally with an order.

    Usable bare (``@action``) or with an order (``@action(2)``).
    """
    key = get_settings().action_attribute
    if callable(order):
        return attribute(**{key: 0})(order)
    return attribute(**{key: order})


def _order_value(raw: Any, where: str) -> int:
    if raw is None:
        return 0
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise TaskDefinitionError(f"{where}: order must be an integer, got {raw!r}")
    return raw


def _is_task(value: Any) -> bool:
    return isinstance(value, DynamicObject) and value.is_instance_of(TASK_CAPABILITY)


def _mark(obj: Any, state: TaskState) -> None:
    if _is_task(obj):
        obj.state = state


_IDLE_STATES = (None, TaskState.PENDING, TaskState.DONE, TaskState.FAILED)


def reset_states(container: DynamicObject) -> None:
    """Mark a container and every task below it PENDING."""
    seen = set()
    stack = [container]
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        _mark(node, TaskState.PENDING)
        stack.extend(child for _, child in node.children())


def collect_tasks(container: DynamicObject) -> list[tuple[str, DynamicObject]]:
    """Tasks held by a container, sorted by their field's order attribute.

    The sort is stable: equal orders keep declaration order.
    """
    key = get_settings().order_attribute
    found = []
    for name in container.fields():
        value = container.get(name)
        if _is_task(value):
            order = _order_value(container.attributes(name).get(key), f"task {name!r}")
            found.append((order, name, value))

    found.sort(key=lambda item: item[0])
    return [(name, task) for _, name, task in found]


def collect_actions(task: DynamicObject) -> list[tuple[str, Callable]]:
    """A task's tagged functions, stably sorted by their order."""
    key = get_settings().action_attribute
    found = []
    for name, func in functions(task):
        attrs = function_attributes(func)
        if key not in attrs:
            continue
        order = _order_value(attrs[key], f"action {type(task).__name__}.{name}")
        found.append((order, name, func))

    found.sort(key=lambda item: item[0])
    return [(name, func) for _, name, func in found]


def run_task(task: DynamicObject, reply: DynamicObject) -> None:
    """Run one task: its tagged actions, then its own run if not tagged."""
    _mark(task, TaskState.RUNNING_ACTIONS)
    try:
        actions = collect_actions(task)
        includes_run = any(name == RUN_METHOD for name, _ in actions)
        for name, func in actions:
            logger.debug("Running action %s.%s", type(task).__name__, name)
            func(reply)
        if not includes_run:
            task.run(reply)
    except Exception:
        _mark(task, TaskState.FAILED)
        raise
    _mark(task, TaskState.DONE)


def run_children(container: DynamicObject, reply: DynamicObject) -> None:
    """Run every task held by a container, in sorted order."""
    ordered = collect_tasks(container)
    if ordered:
        logger.debug(
            "Running %d task(s) of %s: %s",
            len(ordered),
            type(container).__name__,
            [name for name, _ in ordered],
        )
    for name, task in ordered:
        run_task(task, reply)


def scheduled(body: Callable) -> Callable:
    """Method decorator running the object's task subtree before ``body``.

    Entering from an idle state starts a fresh run: the whole subtree is
    reset to PENDING first.
    """

    @functools.wraps(body)
    def wrapper(self, reply):
        state = getattr(self, "state", None)
        within_actions = state is TaskState.RUNNING_ACTIONS
        if state in _IDLE_STATES:
            reset_states(self)
        try:
            _mark(self, TaskState.RUNNING_CHILDREN)
            run_children(self, reply)
            _mark(self, TaskState.RUNNING_BODY)
            result = body(self, reply)
        except Exception:
            _mark(self, TaskState.FAILED)
            raise
        _mark(self, TaskState.RUNNING_ACTIONS if within_actions else TaskState.DONE)
        return result

    return wrapper


def schedule(container: DynamicObject, body: Callable[[DynamicObject], Any]) -> Callable[[DynamicObject], Any]:
    """Compose a plain container with a body: run its tasks, then the body.

    Returns:
        A callable taking the reply object
    """

    def run(reply: DynamicObject) -> Any:
        reset_states(container)
        run_children(container, reply)
        return body(reply)

    return run
