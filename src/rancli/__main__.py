"""
rancli CLI entry point.

Usage:
    rancli ransim nodes [--watch]
    rancli ransim create node ENBID --cells 1,2 --service-models kpm
    rancli topo get entities --label "role=leaf, rack in (3,4)"
    rancli config show
"""

import click

from rancli.cli.commands import config, ransim, topo
from rancli.config import get_settings
from rancli.exceptions import ConfigurationError
from rancli.logging_config import setup_logging


@click.group()
@click.version_option(package_name="rancli")
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Log level (defaults to the configured level)")
@click.option("--log-json", is_flag=True, help="Emit logs as JSON")
def cli(log_level: str | None, log_json: bool):
    """rancli - RAN simulator and topology client"""
    try:
        logging_settings = get_settings().logging
    except ConfigurationError as e:
        raise click.ClickException(str(e))
    setup_logging(
        level=log_level or logging_settings.level,
        json_format=log_json or logging_settings.json_format,
    )


cli.add_command(ransim)
cli.add_command(topo)
cli.add_command(config)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
