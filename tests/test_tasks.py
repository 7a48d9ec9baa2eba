"""Tests for the Tasks module."""

import pytest

from schemaflow.model.base import DynamicObject
from schemaflow.schema import Schema, rules
from schemaflow.tasks import (
    Schemafy,
    Task,
    TaskDefinitionError,
    TaskState,
    action,
    collect_actions,
    collect_tasks,
    schedule,
    scheduled,
)


class Logged(Task):
    """Logs its label after its sub-tasks have run."""

    def __init__(self, label: str):
        super().__init__()
        self.label = label

    def run(self, reply):
        super().run(reply)
        reply.get("log").append(self.label)


class Silent(Task):
    """Overrides run without descending into sub-tasks."""

    def run(self, reply):
        reply.get("log").append("silent")


class WithActions(Task):
    @action(2)
    def late(self, reply):
        reply.get("log").append("late")

    @action
    def early(self, reply):
        reply.get("log").append("early")

    @action(2)
    def late_too(self, reply):
        reply.get("log").append("late_too")

    def helper(self, reply):
        reply.get("log").append("helper")

    def run(self, reply):
        super().run(reply)
        reply.get("log").append("run")


class TaggedRun(Task):
    @action(0)
    def prepare(self, reply):
        reply.get("log").append("prepare")

    @action(1)
    def run(self, reply):
        super().run(reply)
        reply.get("log").append("run")


@pytest.fixture
def reply():
    """Reply object with an empty execution log."""
    return DynamicObject({"log": []})


class TestCollectTasks:
    """Tests for task discovery and ordering."""

    def test_only_tasks_are_collected(self):
        container = DynamicObject()
        container.declare("data", DynamicObject())
        container.declare("value", 3)
        container.declare("job", Task())

        assert [name for name, _ in collect_tasks(container)] == ["job"]

    def test_default_order_is_declaration_order(self):
        container = DynamicObject()
        for name in ("c", "a", "b"):
            container.declare(name, Task())

        assert [name for name, _ in collect_tasks(container)] == ["c", "a", "b"]

    def test_stable_sort_by_order(self):
        container = DynamicObject()
        container.declare("first_one", Task(), order=1)
        container.declare("zero", Task(), order=0)
        container.declare("second_one", Task(), order=1)

        assert [name for name, _ in collect_tasks(container)] == ["zero", "first_one", "second_one"]

    def test_negative_order(self):
        container = DynamicObject()
        container.declare("a", Task())
        container.declare("b", Task(), order=-1)

        assert [name for name, _ in collect_tasks(container)] == ["b", "a"]

    def test_order_read_from_parent_attributes(self):
        task = Task()
        task.declare("ignored", None, order=99)
        container = DynamicObject()
        container.declare("a", Task(), order=1)
        container.declare("b", task)

        assert [name for name, _ in collect_tasks(container)] == ["b", "a"]

    def test_non_integer_order_rejected(self):
        container = DynamicObject()
        container.declare("a", Task(), order="high")

        with pytest.raises(TaskDefinitionError, match="order must be an integer"):
            collect_tasks(container)

    def test_task_tasks_method(self):
        parent = Task()
        parent.add("b", Task(), order=1)
        parent.add("a", Task())

        assert [name for name, _ in parent.tasks()] == ["a", "b"]


class TestCollectActions:
    """Tests for action discovery."""

    def test_actions_sorted_stably(self):
        names = [name for name, _ in collect_actions(WithActions())]
        assert names == ["early", "late", "late_too"]

    def test_untagged_task_has_no_actions(self):
        assert collect_actions(Task()) == []

    def test_tagged_run_is_collected(self):
        names = [name for name, _ in collect_actions(TaggedRun())]
        assert names == ["prepare", "run"]

    def test_non_integer_action_order_rejected(self):
        class Bad(Task):
            @action("soon")
            def go(self, reply):
                pass

        with pytest.raises(TaskDefinitionError):
            collect_actions(Bad())


class TestTaskRun:
    """Tests for running task trees."""

    def test_recursive_scheduling(self, reply):
        first = Logged("first-body")
        first.add("sub-sub-a", Logged("sub-sub-a"), order=1)
        first.add("sub-sub-b", Logged("sub-sub-b"), order=0)

        main = Logged("main-body")
        main.add("first", first, order=0)
        main.add("second", Logged("second"), order=1)

        root = DynamicObject()
        root.declare("main", main)

        run = schedule(root, lambda r: r.get("log").append("wrapped-fn"))
        run(reply)

        assert reply.get("log") == [
            "sub-sub-b",
            "sub-sub-a",
            "first-body",
            "second",
            "main-body",
            "wrapped-fn",
        ]

    def test_scheduled_method_on_container(self, reply):
        class Document(DynamicObject):
            @scheduled
            def process(self, reply):
                reply.get("log").append("wrapped-fn")

        doc = Document()
        doc.declare("b", Logged("b"), order=1)
        doc.declare("a", Logged("a"))

        doc.process(reply)

        assert reply.get("log") == ["a", "b", "wrapped-fn"]

    def test_actions_then_run(self, reply):
        root = Task()
        root.add("job", WithActions())
        root.run(reply)

        assert reply.get("log") == ["early", "late", "late_too", "run"]

    def test_tagged_run_not_invoked_twice(self, reply):
        root = Task()
        root.add("job", TaggedRun())
        root.run(reply)

        assert reply.get("log") == ["prepare", "run"]

    def test_actions_receive_reply(self):
        seen = []

        class Capture(Task):
            @action
            def grab(self, reply):
                seen.append(reply)

        root = Task()
        root.add("capture", Capture())
        reply = DynamicObject()
        root.run(reply)

        assert seen == [reply]

    def test_actions_run_before_subtree(self, reply):
        parent = WithActions()
        parent.add("child", Logged("child"))

        root = Task()
        root.add("parent", parent)
        root.run(reply)

        assert reply.get("log") == ["early", "late", "late_too", "child", "run"]

    def test_override_without_super_prunes_subtree(self, reply):
        silent = Silent()
        silent.add("child", Logged("child"))

        root = Task()
        root.add("silent", silent)
        root.run(reply)

        assert reply.get("log") == ["silent"]

    def test_rerun_is_independent(self, reply):
        root = Task()
        root.add("a", Logged("a"))

        root.run(reply)
        root.run(reply)

        assert reply.get("log") == ["a", "a"]

    def test_task_fault_propagates(self, reply):
        class Broken(Task):
            def run(self, reply):
                raise RuntimeError("broken task")

        broken = Broken()
        root = Task()
        root.add("broken", broken)
        root.add("after", Logged("after"), order=1)

        with pytest.raises(RuntimeError, match="broken task"):
            root.run(reply)

        assert broken.state is TaskState.FAILED
        assert root.state is TaskState.FAILED
        assert reply.get("log") == []


class TestTaskState:
    """Tests for the task lifecycle."""

    def test_new_task_is_pending(self):
        assert Task().state is TaskState.PENDING

    def test_done_after_run(self, reply):
        child = Logged("child")
        root = Task()
        root.add("child", child)

        root.run(reply)

        assert root.state is TaskState.DONE
        assert child.state is TaskState.DONE

    def test_state_while_running(self, reply):
        observed = {}

        class Watched(Task):
            @action
            def before(self, reply):
                observed["action"] = self.state

            @scheduled
            def run(self, reply):
                observed["body"] = self.state

        class Child(Task):
            @action
            def peek(self, reply):
                observed["children"] = self.parent.state

        watched = Watched()
        watched.add("child", Child())
        root = Task()
        root.add("watched", watched)
        root.run(reply)

        assert observed["action"] is TaskState.RUNNING_ACTIONS
        assert observed["children"] is TaskState.RUNNING_CHILDREN
        assert observed["body"] is TaskState.RUNNING_BODY
        assert watched.state is TaskState.DONE

    def test_fresh_run_resets_subtree(self, reply):
        observed = []

        class Peek(Task):
            @action
            def look(self, reply):
                observed.append(self.parent.get("later").state)

        root = Task()
        root.add("peek", Peek())
        root.add("later", Task(), order=1)

        root.run(reply)
        root.run(reply)

        assert observed == [TaskState.PENDING, TaskState.PENDING]
        assert root.get("later").state is TaskState.DONE

    def test_fresh_run_after_failure(self, reply):
        class Flaky(Task):
            fail = True

            def run(self, reply):
                super().run(reply)
                if Flaky.fail:
                    raise RuntimeError("flaky")

        flaky = Flaky()
        root = Task()
        root.add("flaky", flaky)

        with pytest.raises(RuntimeError):
            root.run(reply)
        assert flaky.state is TaskState.FAILED

        Flaky.fail = False
        root.run(reply)
        assert flaky.state is TaskState.DONE
        assert root.state is TaskState.DONE

    def test_schedule_resets_container_tasks(self, reply):
        observed = []

        class Peek(Task):
            @action
            def look(self, reply):
                observed.append(self.parent.get("later").state)

        container = DynamicObject()
        container.set("peek", Peek())
        container.declare("later", Task(), order=1)
        container.get("later").state = TaskState.FAILED

        schedule(container, lambda r: None)(reply)

        assert observed == [TaskState.PENDING]
        assert container.get("later").state is TaskState.DONE


class TestSchemafy:
    """Tests for the Schemafy task."""

    @pytest.fixture
    def schema(self):
        schema = Schema()
        schema.rule("name", rules.required, rules.is_string)
        schema.rule("role", rules.default, default="member")
        return schema

    def test_valid_is_none_before_run(self, schema):
        assert Schemafy(schema).valid is None

    def test_applies_to_reply_by_default(self, schema):
        reply = DynamicObject({"name": "ada"})
        task = Schemafy(schema)
        task.run(reply)

        assert task.valid is True
        assert reply.to_dict() == {"name": "ada", "role": "member"}

    def test_applies_to_explicit_target(self, schema):
        target = DynamicObject({"name": 42})
        reply = DynamicObject()
        task = Schemafy(schema, target=target)
        task.run(reply)

        assert task.valid is False
        assert target.to_dict() == {"role": "member"}
        assert reply.to_dict() == {}

    def test_empty_explicit_target_is_used(self, schema):
        target = DynamicObject()
        reply = DynamicObject({"name": "ada"})
        task = Schemafy(schema, target=target)
        task.run(reply)

        assert task.valid is False
        assert "role" in target
        assert "role" not in reply

    def test_subtree_runs_before_apply(self, schema):
        class Produce(Task):
            @action
            def produce(self, reply):
                reply.set("name", "ada")

        task = Schemafy(schema)
        task.add("produce", Produce())
        reply = DynamicObject()
        task.run(reply)

        assert task.valid is True
        assert reply.get("name") == "ada"

    def test_fault_is_recorded_not_raised(self):
        class Broken(Schema):
            def apply(self, target):
                raise RuntimeError("boom")

        task = Schemafy(Broken())
        task.run(DynamicObject())

        assert task.valid is False
        assert task.error == "RuntimeError: boom"

    def test_state_during_and_after_apply(self):
        observed = []
        task = None

        def record(value) -> bool:
            observed.append(task.state)
            return True

        schema = Schema()
        schema.rule("name", record)
        task = Schemafy(schema)
        task.run(DynamicObject({"name": "ada"}))

        assert observed == [TaskState.RUNNING_BODY]
        assert task.state is TaskState.DONE
        assert task.valid is True

    def test_accepts_field_attributes(self, schema):
        task = Schemafy(schema, fields={"child": Task()}, attributes={"child": {"order": 3}})

        assert task.attributes("child")["order"] == 3
        assert [name for name, _ in task.tasks()] == ["child"]

    def test_nested_in_tree(self, schema, reply):
        check = Schemafy(schema)
        root = Task()
        root.add("seed", Logged("seed"))
        root.add("check", check, order=1)

        reply.set("name", "ada")
        root.run(reply)

        assert check.valid is True
        assert check.state is TaskState.DONE
        assert reply.get("role") == "member"
