"""
Task commands for the GTD CLI.

Capture into the inbox, list the GTD views, clarify and complete tasks.
"""
from typing import Optional, Tuple

import click

from gtd.commands.common import (
    date_option_callback,
    echo_json,
    find,
    format_task_line,
    get_core,
    require_saved,
    short_id,
)
from gtd.constants import PRIORITIES, TASK_STATUSES
from gtd.exceptions import GTDError

LIST_CHOICES = TASK_STATUSES + ["all", "open"]


@click.group()
def task():
    """Capture, clarify and complete tasks."""
    pass


def _task_fields(desc, status, priority, project_id, contexts, due, scheduled,
                 energy, estimate, notes) -> dict:
    """Collect the options that were actually given."""
    fields = {
        "description": desc,
        "status": status,
        "priority": priority,
        "project_id": project_id,
        "due_date": due,
        "scheduled_date": scheduled,
        "energy_level": energy,
        "estimated_time": estimate,
        "notes": notes,
    }
    fields = {key: value for key, value in fields.items() if value is not None}
    if contexts:
        fields["context_ids"] = list(contexts)
    return fields


def _task_options(func):
    """Options shared by add and edit."""
    options = [
        click.option("-d", "--desc", help="Task description."),
        click.option("-s", "--status", type=click.Choice(TASK_STATUSES), help="GTD bucket."),
        click.option("-p", "--priority", type=click.Choice(PRIORITIES), help="Priority."),
        click.option("--project", "project_id", help="Project id (or id prefix)."),
        click.option("-c", "--context", "contexts", multiple=True,
                     help="Context id or name; repeat for several."),
        click.option("--due", callback=date_option_callback, help="Due date."),
        click.option("--scheduled", callback=date_option_callback, help="Scheduled date."),
        click.option("-e", "--energy", type=click.Choice(PRIORITIES), help="Energy level needed."),
        click.option("-t", "--estimate", type=click.IntRange(min=0), help="Estimated minutes."),
        click.option("-n", "--notes", help="Free-text notes."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _resolve_contexts(core, contexts: Tuple[str, ...]) -> Tuple[str, ...]:
    """Accept context names (with or without @) as well as ids."""
    resolved = []
    for value in contexts:
        by_name = [
            c for c in core.store.contexts
            if c.name.lower() in (value.lower(), f"@{value.lower()}")
        ]
        resolved.append(by_name[0].id if by_name else find(core.store.contexts, value, "context").id)
    return tuple(resolved)


@task.command(name="add")
@click.argument("title")
@_task_options
@click.pass_context
def add_task(ctx, title, desc, status, priority, project_id, contexts, due, scheduled,
             energy, estimate, notes):
    """Add a task. Without options it goes straight to the inbox."""
    core = get_core(ctx)
    if project_id:
        project_id = find(core.store.projects, project_id, "project").id
    fields = _task_fields(desc, status, priority, project_id, _resolve_contexts(core, contexts),
                          due, scheduled, energy, estimate, notes)
    try:
        created = require_saved(core.add_task(title=title, **fields), "task")
        if project_id:
            core.assign_to_project(created.id, project_id)
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(f"Task added: {short_id(created.id)} {created.title} [{created.status}]")


@task.command(name="list")
@click.option("-s", "--status", type=click.Choice(LIST_CHOICES), default="open",
              show_default=True, help="Which view to list.")
@click.option("-q", "--query", help="Only tasks whose title or description contains this.")
@click.option("--project", "project_id", help="Only tasks in this project.")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def list_tasks(ctx, status: str, query: Optional[str], project_id: Optional[str], json_output: bool):
    """List tasks in a GTD view (inbox, next-action, ...)."""
    core = get_core(ctx)
    store = core.store

    if status == "all":
        tasks = list(store.tasks)
    elif status == "open":
        tasks = [t for t in store.tasks if t.status != "completed"]
    else:
        tasks = store.get_tasks_by_status(status)

    if project_id:
        project = find(store.projects, project_id, "project")
        tasks = [t for t in tasks if t.project_id == project.id]

    tasks = store.search_tasks(tasks, query)

    if json_output:
        echo_json([t.to_dict() for t in tasks])
        return

    if not tasks:
        click.echo("No matching tasks." if query else "No tasks.")
        return
    for t in tasks:
        click.echo(format_task_line(t))


@task.command(name="show")
@click.argument("task_id")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def show_task(ctx, task_id: str, json_output: bool):
    """Show details for a task."""
    core = get_core(ctx)
    t = find(core.store.tasks, task_id, "task")

    if json_output:
        echo_json(t.to_dict())
        return

    click.echo(f"Title: {t.title}")
    click.echo(f"Id: {t.id}")
    click.echo(f"Status: {t.status}")
    click.echo(f"Priority: {t.priority}")
    if t.description:
        click.echo(f"Description: {t.description}")
    if t.project_id:
        project = core.store.get_project(t.project_id)
        click.echo(f"Project: {project.name if project else t.project_id}")
    if t.context_ids:
        names = []
        for context_id in t.context_ids:
            context = core.store.get_context(context_id)
            names.append(context.name if context else context_id)
        click.echo(f"Contexts: {', '.join(names)}")
    if t.due_date:
        click.echo(f"Due: {t.due_date.strftime('%Y-%m-%d %H:%M')}")
    if t.scheduled_date:
        click.echo(f"Scheduled: {t.scheduled_date.strftime('%Y-%m-%d %H:%M')}")
    if t.energy_level:
        click.echo(f"Energy: {t.energy_level}")
    if t.estimated_time:
        click.echo(f"Estimate: {t.estimated_time} minutes")
    if t.notes:
        click.echo(f"Notes: {t.notes}")
    if t.completed_at:
        click.echo(f"Completed: {t.completed_at.strftime('%Y-%m-%d %H:%M')}")


@task.command(name="edit")
@click.argument("task_id")
@click.option("--title", help="New title.")
@_task_options
@click.pass_context
def edit_task(ctx, task_id, title, desc, status, priority, project_id, contexts, due, scheduled,
              energy, estimate, notes):
    """Edit a task. Only the given options change.

    Use `task move` to change status with completion tracking and
    `project assign` to keep project task lists in step.
    """
    core = get_core(ctx)
    t = find(core.store.tasks, task_id, "task")
    if project_id:
        project_id = find(core.store.projects, project_id, "project").id
    fields = _task_fields(desc, status, priority, project_id, _resolve_contexts(core, contexts),
                          due, scheduled, energy, estimate, notes)
    if title:
        fields["title"] = title
    if not fields:
        raise click.ClickException("No changes given.")

    try:
        new_status = fields.pop("status", None)
        new_project = fields.pop("project_id", None)
        if fields:
            require_saved(core.edit_task(t.id, **fields), "task")
        if new_status:
            require_saved(core.move_task(t.id, new_status), "task")
        if new_project:
            require_saved(core.assign_to_project(t.id, new_project), "task")
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(f"Task '{core.store.get_task(t.id).title}' updated.")


@task.command(name="move")
@click.argument("task_id")
@click.argument("status", type=click.Choice(TASK_STATUSES))
@click.pass_context
def move_task(ctx, task_id: str, status: str):
    """Move a task to another GTD bucket."""
    core = get_core(ctx)
    t = find(core.store.tasks, task_id, "task")
    try:
        moved = require_saved(core.move_task(t.id, status), "task")
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(f"Moved '{moved.title}' to {moved.status}.")


@task.command(name="done")
@click.argument("task_id")
@click.pass_context
def done(ctx, task_id: str):
    """Mark a task as completed."""
    core = get_core(ctx)
    t = find(core.store.tasks, task_id, "task")
    try:
        completed = require_saved(core.complete_task(t.id), "task")
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(f"Completed task: {completed.title}")


@task.command(name="delete")
@click.argument("task_id")
@click.confirmation_option(prompt="Are you sure you want to delete this task?")
@click.pass_context
def delete_task(ctx, task_id: str):
    """Delete a task."""
    core = get_core(ctx)
    t = find(core.store.tasks, task_id, "task")
    try:
        require_saved(core.delete_task(t.id), "task")
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(f"Task '{t.title}' deleted.")
