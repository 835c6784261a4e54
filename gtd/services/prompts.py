"""
Prompt templates for the GTD assistant.

Each builder turns domain records into a [system, user] message pair for a
chat-completion backend.
"""

from datetime import datetime
from typing import Dict, List, Optional

from gtd.constants import AI_CHAT_TASK_LIMIT
from gtd.models.base import Context, Project, Task, TaskStatus

Message = Dict[str, str]

PRIORITY_LABELS = {"low": "Low", "medium": "Medium", "high": "High"}

GTD_PRINCIPLES = """GTD principles:
- Capture: collect everything into the inbox
- Clarify: decide the next action for each item
- Organize: sort tasks into projects, contexts and lists
- Reflect: review tasks and projects regularly
- Engage: choose what to do based on context and priority"""


def _format_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")


def _bullet_list(names: List[str], empty: str) -> str:
    if not names:
        return empty
    return "\n".join(f"- {name}" for name in names)


def format_tasks_for_ai(tasks: List[Task]) -> str:
    """Render tasks as a numbered list with their scheduling details."""
    if not tasks:
        return "No tasks"

    blocks = []
    for index, task in enumerate(tasks, 1):
        lines = [f"{index}. {task.title}"]
        if task.description:
            lines.append(f"   Description: {task.description}")
        if task.priority:
            lines.append(f"   Priority: {PRIORITY_LABELS.get(task.priority, task.priority)}")
        if task.due_date:
            lines.append(f"   Due: {_format_date(task.due_date)}")
        if task.scheduled_date:
            lines.append(f"   Scheduled: {_format_date(task.scheduled_date)}")
        if task.estimated_time:
            lines.append(f"   Estimated time: {task.estimated_time} minutes")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_organization_prompt(
    task: Task, projects: List[Project], contexts: List[Context]
) -> List[Message]:
    """Ask where a single task belongs: project, contexts, priority, breakdown."""
    task_lines = [f"- Title: {task.title}"]
    if task.description:
        task_lines.append(f"- Description: {task.description}")
    task_lines.append(f"- Current status: {task.status}")
    task_lines.append(f"- Priority: {task.priority}")
    task_block = "\n".join(task_lines)

    system_prompt = f"""You are a GTD (Getting Things Done) task management expert. Your job is to help the user organize and manage their tasks.

Current task:
{task_block}

The user's projects:
{_bullet_list([p.name for p in projects], "No projects")}

The user's context tags:
{_bullet_list([c.name for c in contexts], "No contexts")}

Please advise on:
1. Which project this task belongs to (if a suitable one exists)
2. Which context tags it should carry
3. Whether its priority is appropriate
4. Whether it should be broken down into several subtasks

Keep the answer short and clear."""

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": "Please suggest how to organize this task."},
    ]


def build_scheduling_prompt(
    tasks: List[Task], current_date: Optional[datetime] = None
) -> List[Message]:
    """Ask for an ordering of the given tasks."""
    current_date = current_date or datetime.now()

    system_prompt = f"""You are a GTD time management expert. Analyze the user's task list and suggest a schedule.

Today's date: {_format_date(current_date)}

The user's tasks:
{format_tasks_for_ai(tasks)}

Please suggest:
1. Which tasks should be handled first
2. A recommended order for the tasks
3. Which tasks could be placed on specific dates
4. Time management tips

Keep the answer short and practical."""

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": "Please suggest a schedule for my tasks."},
    ]


def build_what_to_do_now_prompt(
    tasks: List[Task], contexts: List[Context], current_context: Optional[str] = None
) -> List[Message]:
    """Ask for 1-3 tasks to do right now.

    Only next actions and scheduled tasks are offered as candidates.
    """
    available = [
        task for task in tasks
        if task.status in (TaskStatus.NEXT_ACTION, TaskStatus.SCHEDULED)
    ]

    system_prompt = f"""You are a GTD productivity assistant. Help the user pick the task they should do right now.

Current context: {current_context or "Not specified"}

Available context tags:
{_bullet_list([c.name for c in contexts], "No contexts")}

Actionable tasks:
{format_tasks_for_ai(available)}

Recommend 1-3 tasks, weighing:
1. Priority
2. Due dates
3. The current context
4. Time each task needs
5. Dependencies between tasks

Name the specific tasks and explain why."""

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": "What should I do now?"},
    ]


def build_implementation_prompt(task: Task) -> List[Message]:
    """Ask for a step-by-step plan for one task."""
    task_lines = [f"- Title: {task.title}"]
    if task.description:
        task_lines.append(f"- Description: {task.description}")
    if task.estimated_time:
        task_lines.append(f"- Estimated time: {task.estimated_time} minutes")
    task_block = "\n".join(task_lines)

    system_prompt = f"""You are an expert in getting tasks done. Help the user break a task into executable steps.

Task:
{task_block}

Please provide:
1. The concrete steps to carry out the task, in order
2. A short explanation of each step
3. Resources or tools that may be needed
4. Things to watch out for

Make the steps clear and unambiguous."""

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": "Please give me guidance on carrying out this task."},
    ]


def build_chat_prompt(
    message: str,
    tasks: Optional[List[Task]] = None,
    projects: Optional[List[Project]] = None,
    current_task: Optional[Task] = None,
) -> List[Message]:
    """Open-ended chat, seeded with up to ten tasks and the project names."""
    system_prompt = (
        "You are a GTD (Getting Things Done) task management AI assistant. "
        "Help the user manage tasks and be more productive.\n\n" + GTD_PRINCIPLES
    )

    if tasks:
        system_prompt += f"\n\nThe user's current tasks:\n{format_tasks_for_ai(tasks[:AI_CHAT_TASK_LIMIT])}"
    if projects:
        system_prompt += f"\n\nThe user's projects:\n{_bullet_list([p.name for p in projects], '')}"
    if current_task:
        system_prompt += f"\n\nTask currently being viewed: {current_task.title}"

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": message},
    ]
