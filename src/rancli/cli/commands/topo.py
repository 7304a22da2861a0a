"""Topology store query commands."""

from __future__ import annotations

import click

from rancli.cli.base import format_option, get_topo_client, server_options, spinner
from rancli.cli.filter_parser import ObjectType, compile_filters
from rancli.cli.output import OutputFormatter, join_values
from rancli.cli.utils import API_ERRORS, handle_api_error, validate_filter_query
from rancli.exceptions import FilterSyntaxError
from rancli.models import TopoObject

OBJECT_COLUMNS = {
    ObjectType.ENTITY: {"id": 32, "kind_id": 24, "labels": 0},
    ObjectType.RELATION: {
        "id": 32, "kind_id": 16, "src_entity_id": 24, "tgt_entity_id": 24, "labels": 0,
    },
    ObjectType.KIND: {"id": 24, "name": 24, "labels": 0},
}


def object_row(obj: TopoObject, columns: dict[str, int]) -> dict:
    row = obj.model_dump()
    row["labels"] = join_values(f"{k}={v}" for k, v in sorted(obj.labels.items()))
    return {c: row.get(c, "") for c in columns}


@click.group()
def topo() -> None:
    """Topology store queries."""
    pass


@topo.group()
def get() -> None:
    """Get topology objects."""
    pass


def _get_objects_command(name: str, object_type: ObjectType, help_text: str):
    columns = OBJECT_COLUMNS[object_type]

    @get.command(name, help=help_text)
    @click.option("--label", default="", callback=validate_filter_query,
                  help='Label filter query (e.g., "role=leaf, rack in (3,4)")')
    @click.option("--kind", default="",
                  help="Kind filter query (relations and kinds only; not supported yet)")
    @click.option("--strict", is_flag=True, help="Reject filter clauses that cannot be parsed")
    @click.option("--no-headers", is_flag=True, help="Disable output headers")
    @click.option("--watch", "-w", is_flag=True, help="Watch changes")
    @server_options
    @format_option()
    def command(label: str, kind: str, strict: bool, no_headers: bool, watch: bool,
                server: str, token: str | None, output_format: str) -> None:
        try:
            filters = compile_filters(object_type, label, kind, strict=strict)
        except FilterSyntaxError as e:
            raise click.BadParameter(str(e), param_hint="'--label'")

        fmt = OutputFormatter(output_format, headers=not no_headers)
        try:
            with get_topo_client(server, token) as client:
                if watch:
                    watch_columns = {"event": 8, **columns}
                    fmt.stream_header(watch_columns)
                    for event in client.watch_objects(object_type, filters):
                        row = {"event": event.type, **object_row(event.object, columns)}
                        fmt.stream_row(row, watch_columns)
                else:
                    with spinner(f"Listing {name}"):
                        objects = client.list_objects(object_type, filters)
                    fmt.print_table([object_row(o, columns) for o in objects], list(columns))
        except KeyboardInterrupt:
            pass
        except API_ERRORS as e:
            handle_api_error(e, server)

    return command


get_entities = _get_objects_command("entities", ObjectType.ENTITY, "Get topology entities.")
get_relations = _get_objects_command("relations", ObjectType.RELATION, "Get topology relations.")
get_kinds = _get_objects_command("kinds", ObjectType.KIND, "Get topology kinds.")
