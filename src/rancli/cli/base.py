"""Shared CLI decorators and utilities."""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from rancli.client import NodeModelClient, TopoClient
from rancli.config import get_settings


def common_options(f: Callable[..., Any]) -> Callable[..., Any]:
    """Add ``--quiet`` flag to any command."""
    @click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return f(*args, **kwargs)
    return wrapper


def server_options(f: Callable[..., Any]) -> Callable[..., Any]:
    """Add ``--server`` and ``--token`` options for API-calling commands.

    Defaults come from the settings file; the environment overrides both.
    Commands receive ``server`` and ``token`` keyword arguments.
    """
    @click.option(
        "--server", "-s",
        envvar="RANCLI_SERVER_URL",
        default=lambda: get_settings().server.url,
        show_default="from config",
        help="Server URL",
    )
    @click.option(
        "--token",
        envvar="RANCLI_TOKEN",
        default=lambda: get_settings().server.token,
        help="Authentication token",
    )
    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return f(*args, **kwargs)
    return wrapper


def format_option(
    choices: list[str] | None = None,
    default: str | None = None,
) -> Callable[..., Any]:
    """Add ``--format`` / ``-f`` option with configurable choices.

    The Python parameter is named ``output_format`` to avoid shadowing the
    built-in ``format``.
    """
    if choices is None:
        choices = ["table", "json", "csv"]
    if default is None:
        default = choices[0]

    def decorator(f: Callable[..., Any]) -> Callable[..., Any]:
        @click.option(
            "--format", "-f", "output_format",
            type=click.Choice(choices),
            default=default,
            help="Output format",
        )
        @functools.wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return f(*args, **kwargs)
        return wrapper
    return decorator


@contextmanager
def spinner(description: str = "Working...") -> Iterator[None]:
    """Show a spinner on stderr around a single blocking API call.

    Nothing is drawn when stderr is not a terminal.

    Usage::

        with spinner("Fetching node"):
            node = client.get_node(enbid)
    """
    console = Console(stderr=True)
    if not console.is_terminal:
        yield
        return

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
    with progress:
        progress.add_task(description, total=None)
        yield


def get_node_client(server: str, token: str | None = None) -> NodeModelClient:
    """Create a node model client using the configured timeout and retries."""
    settings = get_settings().server
    return NodeModelClient(
        server, token=token, timeout=settings.timeout, max_retries=settings.max_retries,
    )


def get_topo_client(server: str, token: str | None = None) -> TopoClient:
    """Create a topology client using the configured timeout and retries."""
    settings = get_settings().server
    return TopoClient(
        server, token=token, timeout=settings.timeout, max_retries=settings.max_retries,
    )
