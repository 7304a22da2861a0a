"""
Configuration management commands.
"""

from typing import Any

import click
import yaml

from rancli.config import default_config_path, find_config_path, load_yaml_config, reload_settings
from rancli.exceptions import ConfigurationError


def coerce_value(value: str) -> Any:
    """Convert a command-line string to the YAML scalar it most likely means."""
    lowered = value.lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    if lowered in ("null", "none", "~"):
        return None
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


@click.group()
def config():
    """Configuration management."""
    pass


@config.command("show")
def config_show():
    """Display current configuration."""
    try:
        settings = reload_settings()
    except ConfigurationError as e:
        raise click.ClickException(str(e))
    click.echo(settings.model_dump_json(indent=2))


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str):
    """
    Set a configuration value.

    KEY is a dot-separated path like 'server.url' or 'logging.level'.

    Examples:
        rancli config set server.url http://ransim:5150
        rancli config set server.max_retries 5
        rancli config set logging.level debug
    """
    config_path = find_config_path() or default_config_path()
    try:
        data = load_yaml_config(config_path)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    keys = key.split(".")
    current = data
    for k in keys[:-1]:
        if k not in current:
            current[k] = {}
        elif not isinstance(current[k], dict):
            raise click.ClickException(f"Cannot set nested key under non-dict value at '{k}'")
        current = current[k]

    converted_value = coerce_value(value)
    current[keys[-1]] = converted_value

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    click.echo(f"Set {key} = {converted_value}")
    click.echo(f"Config saved to: {config_path}")
