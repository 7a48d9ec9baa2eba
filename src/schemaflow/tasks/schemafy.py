"""Schemafy - a task that applies a schema once its subtree has run."""

import logging
from typing import Any, Mapping

from schemaflow.model.base import DynamicObject
from schemaflow.schema.base import Schema
from schemaflow.tasks.base import Task
from schemaflow.tasks.scheduler import scheduled

logger = logging.getLogger(__name__)


class Schemafy(Task):
    """Runs its sub-tasks, then applies ``schema`` to a target.

    The target is the configured object if any, otherwise the reply. The
    outcome is kept in ``valid``; a fault during application counts as
    invalid and is never raised. The task is DONE only once the schema has
    been applied.
    """

    def __init__(
        self,
        schema: Schema,
        target: DynamicObject | None = None,
        fields: Mapping[str, Any] | None = None,
        *,
        attributes: Mapping[str, Mapping[str, Any]] | None = None,
    ):
        super().__init__(fields, attributes=attributes)
        self.schema = schema
        self.target = target
        self.valid: bool | None = None
        self.error: str | None = None

    @scheduled
    def run(self, reply: DynamicObject) -> None:
        target = self.target if self.target is not None else reply
        self.error = None
        try:
            self.valid = self.schema.apply(target)
        except Exception as e:
            logger.debug("Schema application raised", exc_info=True)
            self.valid = False
            self.error = f"{type(e).__name__}: {e}"

        logger.debug("Schemafy on %s: valid=%s", type(target).__name__, self.valid)
