"""
Config command group for the GTD CLI.

Commands for viewing and editing the AI backend configuration.
Values in the environment take precedence over config.json.
"""
import os
from pathlib import Path

import click
from pydantic import ValidationError as PydanticValidationError

from gtd.commands.common import echo_json
from gtd.constants import (
    AI_PROVIDERS,
    CONFIG_ENV_VARS,
    DEFAULT_AI_PROVIDER,
    DEFAULT_AI_TIMEOUT,
    SECRET_CONFIG_KEYS,
    ConfigManager,
    get_data_dir,
)
from gtd.exceptions import GTDError
from gtd.managers.storage_manager import StorageManager
from gtd.models.files import ConfigFile

CONFIG_DEFAULTS = {
    "ai_provider": DEFAULT_AI_PROVIDER,
    "ai_api_key": None,
    "ai_base_url": None,
    "ai_model": None,
    "ai_timeout": DEFAULT_AI_TIMEOUT,
}


def _data_dir(ctx: click.Context) -> Path:
    obj = ctx.find_root().obj or {}
    return Path(obj.get("data_dir") or get_data_dir())


def _display(key: str, value) -> str:
    if value is None:
        return "(not set)"
    if key in SECRET_CONFIG_KEYS:
        return "********"
    return str(value)


@click.group()
def config():
    """View and edit configuration.

    Configuration is stored in <data-dir>/config.json. Environment variables
    (AI_PROVIDER, AI_API_KEY, AI_BASE_URL, AI_MODEL, AI_TIMEOUT) override it.
    """
    pass


@config.command(name="show")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def show_config(ctx, json_output: bool):
    """Show the effective configuration."""
    manager = ConfigManager(data_dir=_data_dir(ctx))
    values = {key: manager.get(key, default) for key, default in CONFIG_DEFAULTS.items()}

    if json_output:
        echo_json({key: _display(key, value) if key in SECRET_CONFIG_KEYS else value
                   for key, value in values.items()})
        return

    click.echo(f"Config file: {manager.config_path}")
    for key, value in values.items():
        click.echo(f"{key} = {_display(key, value)}  (env {CONFIG_ENV_VARS[key]})")


@config.command(name="get")
@click.argument("key", type=click.Choice(list(CONFIG_DEFAULTS)))
@click.pass_context
def get_config(ctx, key: str):
    """Get a configuration value."""
    manager = ConfigManager(data_dir=_data_dir(ctx))
    click.echo(_display(key, manager.get(key, CONFIG_DEFAULTS[key])))


@config.command(name="set")
@click.argument("key", type=click.Choice(list(CONFIG_DEFAULTS)))
@click.argument("value")
@click.pass_context
def set_config(ctx, key: str, value: str):
    """Set a configuration value in config.json."""
    if key in SECRET_CONFIG_KEYS:
        raise click.ClickException(
            f"Refusing to write {key} to config.json. "
            f"Set the {CONFIG_ENV_VARS[key]} environment variable instead."
        )
    if key == "ai_provider" and value not in AI_PROVIDERS:
        raise click.ClickException(
            f"Unknown provider '{value}'. Choose from: {', '.join(AI_PROVIDERS)}."
        )

    try:
        storage = StorageManager(_data_dir(ctx))
        current = storage.load_config()
        updated = ConfigFile.model_validate({**current.model_dump(), key: value})
        storage.save_config(updated)
    except PydanticValidationError as e:
        raise click.ClickException(f"Invalid value for {key}: {e.errors()[0]['msg']}")
    except GTDError as e:
        raise click.ClickException(f"Error: {e}")

    click.echo(f"Set {key} = {value}")
    env_var = CONFIG_ENV_VARS[key]
    if os.environ.get(env_var):
        click.echo(f"Note: {env_var} is set in the environment and takes precedence.")
