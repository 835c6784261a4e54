"""
AI commands for the GTD CLI.

Ask the configured AI backend for advice on the current task list, or chat.
"""
from typing import Optional

import click

from gtd.commands.common import echo_json, find, get_core
from gtd.constants import ADVICE_TYPES
from gtd.exceptions import GTDError


@click.group()
def ai():
    """Ask the AI assistant for GTD advice."""
    pass


@ai.command(name="advice")
@click.argument("advice_type", type=click.Choice(ADVICE_TYPES))
@click.option("--task", "task_id", help="Task to ask about (organization, implementation).")
@click.option("--context", "current_context", help="Where you are now (what-to-do-now).")
@click.pass_context
def advice(ctx, advice_type: str, task_id: Optional[str], current_context: Optional[str]):
    """Get advice of the given type.

    organization and implementation need --task; scheduling and
    what-to-do-now look at all open tasks.
    """
    core = get_core(ctx)
    if task_id:
        task_id = find(core.store.tasks, task_id, "task").id
    try:
        text = core.request_advice(advice_type, task_id=task_id, current_context=current_context)
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(text)


@ai.command(name="chat")
@click.argument("message")
@click.option("--task", "task_id", help="Task the question is about.")
@click.pass_context
def chat(ctx, message: str, task_id: Optional[str]):
    """Send a free-form message to the assistant."""
    core = get_core(ctx)
    if task_id:
        task_id = find(core.store.tasks, task_id, "task").id
    try:
        text = core.chat(message, task_id=task_id)
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(text)


@ai.command(name="history")
@click.argument("task_id")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def history(ctx, task_id: str, json_output: bool):
    """Show the advice logged for a task, oldest first."""
    core = get_core(ctx)
    t = find(core.store.tasks, task_id, "task")
    try:
        entries = core.advice_history(t.id)
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")

    if json_output:
        echo_json([a.to_dict() for a in entries])
        return

    if not entries:
        click.echo(f"No advice logged for '{t.title}'.")
        return
    for a in entries:
        click.echo(f"--- {a.timestamp.strftime('%Y-%m-%d %H:%M')} [{a.type}]")
        click.echo(a.advice)
