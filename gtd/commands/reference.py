"""
Reference material commands for the GTD CLI.

Reference entries are notes, links and file pointers kept apart from tasks.
"""
import click

from gtd.commands.common import echo_json, find, get_core, require_saved, short_id
from gtd.exceptions import GTDError
from gtd.models.base import ReferenceType

REFERENCE_TYPES = [t.value for t in ReferenceType]


@click.group()
def reference():
    """Keep notes, links and file pointers."""
    pass


@reference.command(name="add")
@click.argument("title")
@click.option("--content", default="", help="Body text.")
@click.option("--type", "ref_type", type=click.Choice(REFERENCE_TYPES), default="note",
              show_default=True, help="Kind of reference.")
@click.option("--url", help="Link or file location.")
@click.option("--tag", "tags", multiple=True, help="Tag; repeat for several.")
@click.pass_context
def add_reference(ctx, title: str, content: str, ref_type: str, url, tags):
    """Add a reference entry."""
    core = get_core(ctx)
    try:
        created = require_saved(
            core.add_reference(title, content=content, type=ref_type, url=url, tags=list(tags)),
            "reference",
        )
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(f"Reference added: {short_id(created.id)} {created.title}")


@reference.command(name="list")
@click.option("--tag", help="Only entries with this tag.")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def list_references(ctx, tag, json_output: bool):
    """List reference entries."""
    core = get_core(ctx)
    references = core.store.references
    if tag:
        references = [r for r in references if tag in r.tags]

    if json_output:
        echo_json([r.to_dict() for r in references])
        return

    if not references:
        click.echo("No references.")
        return
    for r in references:
        line = f"{short_id(r.id)} [{r.type}] {r.title}"
        if r.url:
            line += f"  <{r.url}>"
        if r.tags:
            line += f"  #{' #'.join(r.tags)}"
        click.echo(line)


@reference.command(name="delete")
@click.argument("reference_id")
@click.confirmation_option(prompt="Are you sure you want to delete this reference?")
@click.pass_context
def delete_reference(ctx, reference_id: str):
    """Delete a reference entry."""
    core = get_core(ctx)
    r = find(core.store.references, reference_id, "reference")
    try:
        require_saved(core.delete_reference(r.id), "reference")
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")
    click.echo(f"Reference '{r.title}' deleted.")
