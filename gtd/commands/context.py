"""
Context commands for the GTD CLI.
"""
import click

from gtd.commands.common import echo_json, find, get_core, require_saved
from gtd.exceptions import GTDError


@click.group()
def context():
    """Manage contexts such as @home or @phone."""
    pass


@context.command(name="list")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def list_contexts(ctx, json_output: bool):
    """List contexts with their open task counts."""
    core = get_core(ctx)
    contexts = core.store.contexts

    if json_output:
        echo_json([c.to_dict() for c in contexts])
        return

    if not contexts:
        click.echo("No contexts.")
        return
    for c in contexts:
        count = len([
            t for t in core.store.tasks
            if c.id in t.context_ids and t.status != "completed"
        ])
        click.echo(f"{c.id}  {c.name} ({count} open)")


@context.command(name="add")
@click.argument("name")
@click.option("-i", "--icon", help="Icon name.")
@click.option("--color", help="Display color.")
@click.pass_context
def add_context(ctx, name: str, icon, color):
    """Add a context."""
    core = get_core(ctx)
    if not name.startswith("@"):
        name = f"@{name}"
    try:
        created = require_saved(core.add_context(name, icon=icon, color=color), "context")
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(f"Context added: {created.name}")


@context.command(name="delete")
@click.argument("context_id")
@click.confirmation_option(prompt="Are you sure you want to delete this context?")
@click.pass_context
def delete_context(ctx, context_id: str):
    """Delete a context and remove it from tasks."""
    core = get_core(ctx)
    matches = [c for c in core.store.contexts if c.name.lower() == context_id.lower()]
    c = matches[0] if matches else find(core.store.contexts, context_id, "context")
    try:
        require_saved(core.delete_context(c.id), "context")
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(f"Context '{c.name}' deleted.")
