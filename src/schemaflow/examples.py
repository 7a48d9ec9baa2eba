"""Example schemas and task trees.

Referenced from the command line, e.g.:

    schemaflow validate schemaflow.examples:person_schema person.yaml
    schemaflow run schemaflow.examples:signup_flow
"""

from schemaflow.model.base import DynamicObject
from schemaflow.schema import Schema, rules
from schemaflow.tasks import Schemafy, Task, action


def address_schema() -> Schema:
    """Schema for a postal address object."""
    schema = Schema()
    schema.rule("street", rules.required, rules.is_string)
    schema.rule("city", rules.required, rules.is_string)
    schema.rule("country", rules.search, rules.default, rules.is_string, default="NL", down=False)
    return schema


def person_schema() -> Schema:
    """Schema for a person record."""
    schema = Schema()
    schema.rule("name", rules.required, rules.is_string, rules.length(1, 80))
    schema.rule("email", rules.required, rules.matches(r"[^@\s]+@[^@\s]+\.[a-z]{2,}"))
    schema.rule("age", rules.default, rules.coerce(int), rules.between(0, 150), default=18)
    schema.rule("role", rules.default, rules.one_of("member", "admin"), default="member")
    schema.rule("address", rules.nested(address_schema()))
    schema.rule("password", rules.delete)
    return schema


class CollectProfile(Task):
    """Seeds the reply with raw profile data."""

    @action(0)
    def load(self, reply: DynamicObject) -> None:
        reply.set("name", self.get("name", "Ada"))
        reply.set("email", self.get("email", "ada@example.org"))
        reply.set("password", "hunter2")

    @action(1)
    def enrich(self, reply: DynamicObject) -> None:
        reply.set("age", "36")


class Announce(Task):
    def run(self, reply: DynamicObject) -> None:
        super().run(reply)
        steps = reply.get("steps") or []
        reply.set("steps", steps + ["announce"])


def signup_flow() -> Task:
    """Collect a profile, clean it with the person schema, then announce it."""
    check = Schemafy(person_schema())
    check.add("collect", CollectProfile())

    root = Task()
    root.add("check", check, order=0)
    root.add("announce", Announce(), order=1)
    return root
