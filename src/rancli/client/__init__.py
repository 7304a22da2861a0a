"""API clients for the node model and topology services."""

from rancli.client.client import NodeModelClient, TopoClient

__all__ = ["NodeModelClient", "TopoClient"]
