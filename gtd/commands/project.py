"""
Project commands for the GTD CLI.
"""
import click

from gtd.commands.common import (
    echo_json,
    find,
    format_task_line,
    get_core,
    require_saved,
    short_id,
)
from gtd.exceptions import GTDError


@click.group()
def project():
    """Group tasks into multi-step outcomes."""
    pass


@project.command(name="add")
@click.argument("name")
@click.option("-d", "--desc", help="Project description.")
@click.pass_context
def add_project(ctx, name, desc):
    """Add a project."""
    core = get_core(ctx)
    try:
        created = require_saved(core.add_project(name, desc), "project")
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(f"Project added: {short_id(created.id)} {created.name}")


@project.command(name="list")
@click.option("-a", "--all", "show_all", is_flag=True, help="Include completed projects.")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def list_projects(ctx, show_all: bool, json_output: bool):
    """List projects."""
    core = get_core(ctx)
    projects = core.store.projects
    if not show_all:
        projects = [p for p in projects if p.status != "completed"]

    if json_output:
        echo_json([p.to_dict() for p in projects])
        return

    if not projects:
        click.echo("No projects.")
        return
    for p in projects:
        open_count = len([
            t for t in core.store.get_tasks_by_project(p.id) if t.status != "completed"
        ])
        click.echo(f"{short_id(p.id)} {p.name} [{p.status}] ({open_count} open)")


@project.command(name="show")
@click.argument("project_id")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def show_project(ctx, project_id: str, json_output: bool):
    """Show a project and its tasks."""
    core = get_core(ctx)
    p = find(core.store.projects, project_id, "project")
    tasks = core.store.get_tasks_by_project(p.id)

    if json_output:
        data = p.to_dict()
        data["taskDetails"] = [t.to_dict() for t in tasks]
        echo_json(data)
        return

    click.echo(f"Name: {p.name}")
    click.echo(f"Id: {p.id}")
    click.echo(f"Status: {p.status}")
    if p.description:
        click.echo(f"Description: {p.description}")
    if not tasks:
        click.echo("No tasks.")
        return
    click.echo("Tasks:")
    for t in tasks:
        click.echo(f"  {format_task_line(t)} [{t.status}]")


@project.command(name="assign")
@click.argument("task_id")
@click.argument("project_id", required=False)
@click.pass_context
def assign(ctx, task_id: str, project_id):
    """Put a task in a project. Leave PROJECT_ID out to unassign it."""
    core = get_core(ctx)
    t = find(core.store.tasks, task_id, "task")
    p = find(core.store.projects, project_id, "project") if project_id else None
    try:
        require_saved(core.assign_to_project(t.id, p.id if p else None), "task")
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    if p:
        click.echo(f"Task '{t.title}' assigned to project '{p.name}'.")
    else:
        click.echo(f"Task '{t.title}' removed from its project.")


@project.command(name="done")
@click.argument("project_id")
@click.pass_context
def done(ctx, project_id: str):
    """Mark a project as completed."""
    core = get_core(ctx)
    p = find(core.store.projects, project_id, "project")
    try:
        completed = require_saved(core.complete_project(p.id), "project")
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(f"Completed project: {completed.name}")


@project.command(name="delete")
@click.argument("project_id")
@click.confirmation_option(prompt="Are you sure you want to delete this project?")
@click.pass_context
def delete_project(ctx, project_id: str):
    """Delete a project. Its tasks are kept."""
    core = get_core(ctx)
    p = find(core.store.projects, project_id, "project")
    try:
        require_saved(core.delete_project(p.id), "project")
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(f"Project '{p.name}' deleted.")
