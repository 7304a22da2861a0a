"""RAN simulator node management commands."""

from __future__ import annotations

import click

from rancli.cli.base import common_options, format_option, get_node_client, server_options, spinner
from rancli.cli.output import OutputFormatter, join_values
from rancli.cli.utils import API_ERRORS, handle_api_error, parse_list_option, parse_uint_list_option
from rancli.models import Node

ENBID = click.argument("enbid", type=click.IntRange(min=0))

NODE_COLUMNS = {
    "enbid": 16,
    "status": 8,
    "service_models": 16,
    "e2t_controllers": 20,
    "cell_ecgis": 0,
}


def node_row(node: Node) -> dict:
    return {
        "enbid": node.enbid,
        "status": node.status,
        "service_models": join_values(node.service_models),
        "e2t_controllers": join_values(node.controllers),
        "cell_ecgis": join_values(node.cell_ecgis),
    }


def node_options(f):
    """Add the editable node field options."""
    f = click.option(
        "--controllers", multiple=True, callback=parse_list_option, help="E2T controllers",
    )(f)
    f = click.option(
        "--service-models", multiple=True, callback=parse_list_option,
        help="Supported service models",
    )(f)
    f = click.option(
        "--cells", multiple=True, callback=parse_uint_list_option, help="Cell ECGIs",
    )(f)
    return f


def apply_node_options(
    node: Node,
    cells: list[int],
    service_models: list[str],
    controllers: list[str],
    update: bool = False,
) -> Node:
    """Copy option values onto *node*.

    On update only the options given on the command line replace the node's
    current values.
    """
    ctx = click.get_current_context()

    def given(name: str) -> bool:
        return ctx.get_parameter_source(name) is not click.core.ParameterSource.DEFAULT

    if not update or given("cells"):
        node.cell_ecgis = cells
    if not update or given("service_models"):
        node.service_models = service_models
    if not update or given("controllers"):
        node.controllers = controllers
    return node


@click.group()
def ransim() -> None:
    """RAN simulator node management."""
    pass


@ransim.command("plmnid")
@server_options
def get_plmnid(server: str, token: str | None) -> None:
    """Get the PLMN ID."""
    try:
        with get_node_client(server, token) as client, spinner("Fetching PLMN ID"):
            plmn_id = client.get_plmn_id()
    except API_ERRORS as e:
        handle_api_error(e, server)
    click.echo(plmn_id)


@ransim.command("nodes")
@click.option("--no-headers", is_flag=True, help="Disable output headers")
@click.option("--watch", "-w", is_flag=True, help="Watch node changes")
@server_options
@format_option()
def get_nodes(no_headers: bool, watch: bool, server: str, token: str | None, output_format: str) -> None:
    """Get all E2 nodes."""
    fmt = OutputFormatter(output_format, headers=not no_headers)
    fmt.stream_header(NODE_COLUMNS)
    try:
        with get_node_client(server, token) as client:
            if watch:
                nodes = (event.node for event in client.watch_nodes(no_replay=False))
            else:
                nodes = client.list_nodes()
            for node in nodes:
                fmt.stream_row(node_row(node), NODE_COLUMNS)
    except KeyboardInterrupt:
        pass
    except API_ERRORS as e:
        handle_api_error(e, server)


def output_node(node: Node, output_format: str = "table") -> None:
    OutputFormatter(output_format).print_single({
        "enbid": node.enbid,
        "status": node.status,
        "service_models": join_values(node.service_models),
        "controllers": join_values(node.controllers),
        "cell_ecgis": join_values(node.cell_ecgis),
    })


@ransim.group()
def create() -> None:
    """Create RAN simulator resources."""
    pass


@create.command("node")
@ENBID
@node_options
@server_options
@common_options
def create_node(
    enbid: int,
    cells: list[int],
    service_models: list[str],
    controllers: list[str],
    server: str,
    token: str | None,
    quiet: bool,
) -> None:
    """Create an E2 node."""
    node = apply_node_options(Node(enbid=enbid), cells, service_models, controllers)
    try:
        with get_node_client(server, token) as client, spinner("Creating node"):
            client.create_node(node)
    except API_ERRORS as e:
        handle_api_error(e, server)
    OutputFormatter(quiet=quiet).print_success(f"Node {enbid} created")


@ransim.group()
def get() -> None:
    """Get RAN simulator resources."""
    pass


@get.command("node")
@ENBID
@server_options
@format_option(["table", "json"])
def get_node(enbid: int, server: str, token: str | None, output_format: str) -> None:
    """Get an E2 node."""
    try:
        with get_node_client(server, token) as client, spinner("Fetching node"):
            node = client.get_node(enbid)
    except API_ERRORS as e:
        handle_api_error(e, server)
    output_node(node, output_format)


@ransim.group()
def update() -> None:
    """Update RAN simulator resources."""
    pass


@update.command("node")
@ENBID
@node_options
@server_options
@common_options
def update_node(
    enbid: int,
    cells: list[int],
    service_models: list[str],
    controllers: list[str],
    server: str,
    token: str | None,
    quiet: bool,
) -> None:
    """Update an E2 node.

    Only the fields given as options are changed; the others keep the
    values currently stored by the simulator.
    """
    try:
        with get_node_client(server, token) as client, spinner("Updating node"):
            node = client.get_node(enbid)
            node = apply_node_options(node, cells, service_models, controllers, update=True)
            client.update_node(node)
    except API_ERRORS as e:
        handle_api_error(e, server)
    OutputFormatter(quiet=quiet).print_success(f"Node {enbid} updated")


@ransim.group()
def delete() -> None:
    """Delete RAN simulator resources."""
    pass


@delete.command("node")
@ENBID
@server_options
@common_options
def delete_node(enbid: int, server: str, token: str | None, quiet: bool) -> None:
    """Delete an E2 node."""
    try:
        with get_node_client(server, token) as client, spinner("Deleting node"):
            client.delete_node(enbid)
    except API_ERRORS as e:
        handle_api_error(e, server)
    OutputFormatter(quiet=quiet).print_success(f"Node {enbid} deleted")


def run_control_command(command: str, enbid: int, server: str, token: str | None) -> None:
    try:
        with get_node_client(server, token) as client, spinner(f"Sending {command} to agent"):
            node = client.agent_control(enbid, command)
    except API_ERRORS as e:
        handle_api_error(e, server)
    output_node(node)


@ransim.command("start")
@ENBID
@server_options
def start_node(enbid: int, server: str, token: str | None) -> None:
    """Start E2 node agent."""
    run_control_command("start", enbid, server, token)


@ransim.command("stop")
@ENBID
@server_options
def stop_node(enbid: int, server: str, token: str | None) -> None:
    """Stop E2 node agent."""
    run_control_command("stop", enbid, server, token)
