"""
Helpers shared by the CLI command groups.
"""
import json
from pathlib import Path
from typing import Any, Iterable, Optional

import click

from gtd.constants import DATE_FORMAT_ERROR, ConfigManager, get_data_dir
from gtd.core import GTDCore
from gtd.exceptions import GTDError
from gtd.managers.events import EventBus, LoggingListener
from gtd.models.base import Task
from gtd.services.ai_service import AIService
from gtd.utils import parse_date, resolve_id

PRIORITY_MARKERS = {"high": "!!", "medium": "! ", "low": "  "}


def get_core(ctx: click.Context) -> GTDCore:
    """Build a GTDCore from the root command options."""
    obj = ctx.find_root().obj or {}
    data_dir = obj.get("data_dir") or get_data_dir()
    event_bus = EventBus()
    if obj.get("verbose"):
        event_bus.subscribe(LoggingListener())
    try:
        return GTDCore(
            data_dir=data_dir,
            ai_service=AIService(config=ConfigManager(data_dir=Path(data_dir))),
            event_bus=event_bus,
        )
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")


def find(records: Iterable[Any], id_or_prefix: str, kind: str) -> Any:
    """Resolve an id or id prefix, turning lookup errors into CLI errors."""
    try:
        return resolve_id(records, id_or_prefix, kind)
    except GTDError as e:
        raise click.ClickException(str(e))


def date_option_callback(ctx: click.Context, param: click.Parameter, value: Optional[str]):
    """Click callback parsing a date option with the supported formats."""
    if value is None:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise click.BadParameter(f"Could not parse date '{value}'. {DATE_FORMAT_ERROR}")
    return parsed


def short_id(record_id: str) -> str:
    return record_id[:8]


def format_task_line(task: Task) -> str:
    """One-line summary: id, priority marker, title, due date."""
    marker = PRIORITY_MARKERS.get(task.priority, "  ")
    line = f"{short_id(task.id)} {marker} {task.title}"
    if task.due_date:
        line += f"  (due {task.due_date.strftime('%Y-%m-%d')})"
    if task.estimated_time:
        line += f"  [{task.estimated_time}min]"
    return line


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def require_saved(record: Any, kind: str) -> Any:
    """Fail the command when the store could not persist a write."""
    if record is None or record is False:
        raise click.ClickException(
            f"Could not save {kind}; see the error logged above."
        )
    return record
