#!/usr/bin/env python3
"""
Demo script showing basic usage of schemaflow.

Run this script after installing the package:
    pip install -e .
    python demo.py
"""

from schemaflow import DynamicObject, Schema, Schemafy, Task, action, rules, schedule
from schemaflow.examples import person_schema, signup_flow


def demo_schema_apply():
    """Demonstrate validating and cleaning an object with a schema."""
    print("=" * 60)
    print("1. APPLYING A SCHEMA")
    print("=" * 60)

    schema = person_schema()
    person = DynamicObject({
        "name": "Grace",
        "email": "not-an-email",
        "age": "41",
        "password": "secret",
    })

    report = schema.report(person)

    print(f"Valid: {report.valid}")
    print(f"Invalid fields: {report.invalid_fields}")
    print(f"Cleaned object: {person.to_dict()}")
    print()


def demo_custom_rules():
    """Demonstrate rules of different arities in one chain."""
    print("=" * 60)
    print("2. CUSTOM RULES")
    print("=" * 60)

    def strip(value) -> str:
        return value.strip()

    def not_reserved(target, field, value) -> bool:
        return value not in target.get("reserved", [])

    schema = Schema()
    schema.rule("username", rules.required, rules.is_string, strip, not_reserved)

    ok = DynamicObject({"username": "  ada  ", "reserved": ["root"]})
    taken = DynamicObject({"username": "root", "reserved": ["root"]})

    print(f"'  ada  ' -> valid={schema.apply(ok)} value={ok.get('username')!r}")
    print(f"'root'    -> valid={schema.apply(taken)} present={'username' in taken}")
    print()


class Step(Task):
    """Appends its label to the reply's log."""

    def __init__(self, label: str):
        super().__init__()
        self.label = label

    def run(self, reply):
        super().run(reply)
        reply.set("log", (reply.get("log") or []) + [self.label])


class Audited(Task):
    @action(0)
    def before(self, reply):
        reply.set("log", (reply.get("log") or []) + ["audit"])


def demo_task_tree():
    """Demonstrate ordered, depth-first task execution."""
    print("=" * 60)
    print("3. RUNNING A TASK TREE")
    print("=" * 60)

    first = Step("first")
    first.add("inner-b", Step("inner-b"), order=1)
    first.add("inner-a", Step("inner-a"), order=0)

    container = DynamicObject()
    container.declare("second", Step("second"), order=1)
    container.declare("first", first, order=0)
    container.declare("audit", Audited(), order=2)

    reply = DynamicObject()
    run = schedule(container, lambda r: r.set("log", r.get("log") + ["done"]))
    run(reply)

    print(f"Execution order: {reply.get('log')}")
    print()


def demo_schemafy():
    """Demonstrate the bundled signup flow."""
    print("=" * 60)
    print("4. SCHEMAFY")
    print("=" * 60)

    flow = signup_flow()
    reply = DynamicObject()
    flow.run(reply)

    check = flow.get("check")
    assert isinstance(check, Schemafy)
    print(f"Schema valid: {check.valid}")
    print(f"Reply: {reply.to_dict()}")
    print()


def main():
    """Run all demos."""
    print()
    print("SCHEMAFLOW DEMO")
    print("=" * 60)
    print()

    demo_schema_apply()
    demo_custom_rules()
    demo_task_tree()
    demo_schemafy()

    print()
    print("=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)
    print()
    print("To use the CLI, install the package and run:")
    print("  pip install -e .")
    print("  schemaflow --help")
    print()


if __name__ == "__main__":
    main()
