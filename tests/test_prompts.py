"""
Tests for the prompt builders.
"""
from datetime import datetime

from gtd.models.base import Context, Project, Task
from gtd.services.prompts import (
    build_chat_prompt,
    build_implementation_prompt,
    build_organization_prompt,
    build_scheduling_prompt,
    build_what_to_do_now_prompt,
    format_tasks_for_ai,
)


def _roles(messages):
    return [m["role"] for m in messages]


class TestFormatTasks:
    def test_empty(self):
        assert format_tasks_for_ai([]) == "No tasks"

    def test_numbered_with_details(self):
        tasks = [
            Task(title="Write report", description="Q3 numbers", priority="high",
                 due_date=datetime(2024, 12, 31), estimated_time=45),
            Task(title="Call Bob"),
        ]
        text = format_tasks_for_ai(tasks)
        assert text.startswith("1. Write report")
        assert "   Description: Q3 numbers" in text
        assert "   Priority: High" in text
        assert "   Due: 2024-12-31" in text
        assert "   Estimated time: 45 minutes" in text
        assert "2. Call Bob" in text


class TestBuilders:
    def test_organization(self):
        task = Task(title="Fix sink", description="Kitchen", status="inbox")
        messages = build_organization_prompt(
            task, [Project(name="House")], [Context(name="@home")]
        )
        assert _roles(messages) == ["system", "user"]
        system = messages[0]["content"]
        assert "- Title: Fix sink" in system
        assert "- Description: Kitchen" in system
        assert "- Current status: inbox" in system
        assert "- House" in system
        assert "- @home" in system

    def test_organization_without_projects_or_contexts(self):
        system = build_organization_prompt(Task(title="x"), [], [])[0]["content"]
        assert "No projects" in system
        assert "No contexts" in system

    def test_scheduling_uses_given_date(self):
        messages = build_scheduling_prompt([Task(title="x")], current_date=datetime(2024, 5, 6))
        assert "Today's date: 2024-05-06" in messages[0]["content"]
        assert "1. x" in messages[0]["content"]

    def test_what_to_do_now_offers_only_actionable_tasks(self):
        tasks = [
            Task(title="Next one", status="next-action"),
            Task(title="Someday one", status="someday"),
            Task(title="Scheduled one", status="scheduled"),
            Task(title="Inbox one"),
        ]
        system = build_what_to_do_now_prompt(tasks, [], "@office")[0]["content"]
        assert "Current context: @office" in system
        assert "Next one" in system
        assert "Scheduled one" in system
        assert "Someday one" not in system
        assert "Inbox one" not in system

    def test_what_to_do_now_without_context(self):
        system = build_what_to_do_now_prompt([], [])[0]["content"]
        assert "Current context: Not specified" in system
        assert "No tasks" in system

    def test_implementation(self):
        messages = build_implementation_prompt(Task(title="Tile floor", estimated_time=120))
        assert "- Title: Tile floor" in messages[0]["content"]
        assert "- Estimated time: 120 minutes" in messages[0]["content"]

    def test_chat_caps_task_list(self):
        tasks = [Task(title=f"Task number {i}") for i in range(15)]
        messages = build_chat_prompt("Help", tasks=tasks, projects=[Project(name="Garden")],
                                     current_task=tasks[0])
        system = messages[0]["content"]
        assert "10. Task number 9" in system
        assert "Task number 10" not in system
        assert "- Garden" in system
        assert "Task currently being viewed: Task number 0" in system
        assert messages[1] == {"role": "user", "content": "Help"}

    def test_chat_minimal(self):
        system = build_chat_prompt("Hi")[0]["content"]
        assert "GTD principles" in system
        assert "current tasks" not in system
