"""
CLI utility functions shared across command modules.
"""

import logging
import sys
from typing import NoReturn

import click
import httpx

from rancli.exceptions import APIError, FilterSyntaxError, NotFoundError

logger = logging.getLogger(__name__)

API_ERRORS = (httpx.HTTPError, APIError)


def validate_filter_query(ctx, param, value):
    """Validate a ``--label`` filter query option."""
    if not value:
        return ""
    from rancli.cli.filter_parser import label_filter_result
    try:
        label_filter_result(value)
        return value
    except FilterSyntaxError as e:
        raise click.BadParameter(f"Invalid filter: {e}")


def parse_list_option(ctx, param, value):
    """Flatten repeated and comma-separated option values into one list."""
    items = []
    for raw in value or ():
        items.extend(v.strip() for v in raw.split(",") if v.strip())
    return items


def parse_uint_list_option(ctx, param, value):
    """Like :func:`parse_list_option`, converting each item to an unsigned int."""
    items = parse_list_option(ctx, param, value)
    try:
        numbers = [int(v) for v in items]
    except ValueError as e:
        raise click.BadParameter(f"expected unsigned integers: {e}")
    if any(n < 0 for n in numbers):
        raise click.BadParameter("expected unsigned integers")
    return numbers


def handle_api_error(e: Exception, server: str) -> NoReturn:
    """Report an API failure with a user-friendly message and exit with status 1."""
    if isinstance(e, httpx.TimeoutException):
        click.echo("Error: Request timed out connecting to server", err=True)
    elif isinstance(e, httpx.ConnectError):
        click.echo(f"Error: Cannot connect to server at {server}: {e}", err=True)
    elif isinstance(e, NotFoundError):
        click.echo(f"Error: Not found: {e.message}", err=True)
    elif isinstance(e, APIError) and e.status_code:
        click.echo(f"Error: HTTP error {e.status_code}: {e.message}", err=True)
    else:
        click.echo(f"Error: {e}", err=True)
    logger.debug("API call to %s failed", server, exc_info=e)
    sys.exit(1)
