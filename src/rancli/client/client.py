"""
HTTP clients for the RAN simulator node model API and the topology API.

Provides:
- A single ``httpx.Client`` per client instance, opened lazily
- Automatic retry with exponential backoff on transient failures
- Newline-delimited JSON iteration for server-streaming calls

Example::

    with NodeModelClient("http://localhost:5150") as client:
        for node in client.list_nodes():
            print(node.enbid, node.status)
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterator
from typing import Any

import httpx
from httpx import HTTPStatusError, TransportError

from rancli.cli.filter_parser import Filters, ObjectType
from rancli.exceptions import APIError, NotFoundError, ServiceUnavailableError
from rancli.models import Node, NodeEvent, ObjectEvent, TopoObject

logger = logging.getLogger(__name__)

# HTTP status codes that are safe to retry
_RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})


def _raise_for_response(response: httpx.Response) -> None:
    """Translate an error response into the rancli exception hierarchy."""
    if response.status_code < 400:
        return
    endpoint = f"{response.request.method} {response.request.url.path}"
    message = response.text.strip() or response.reason_phrase
    if response.status_code == 404:
        raise NotFoundError(message, endpoint=endpoint)
    if response.status_code in _RETRYABLE_STATUS_CODES:
        raise ServiceUnavailableError(message, status_code=response.status_code, endpoint=endpoint)
    raise APIError(message, status_code=response.status_code, endpoint=endpoint)


class _APIClient:
    """Shared connection handling for the service clients."""

    api_prefix = "/api"

    def __init__(
        self,
        base_url: str = "http://localhost:5150",
        token: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff: float = 1.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff = backoff
        self._transport = transport
        self._client: httpx.Client | None = None

    # Connection lifecycle
    @property
    def api_base(self) -> str:
        return f"{self.base_url}{self.api_prefix}"

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.api_base,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    # Core request with retry
    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Make a request with automatic retry on transient failures."""
        client = self._get_client()
        last_error: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                response = client.request(method, url, **kwargs)
                response.raise_for_status()
                return response
            except TransportError as e:
                last_error = e
                if attempt < self.max_retries:
                    delay = self.backoff * 2 ** attempt
                    logger.warning(
                        "Transport error on %s %s (attempt %d/%d), retrying in %.1fs: %s",
                        method, url, attempt + 1, self.max_retries + 1, delay, e,
                    )
                    time.sleep(delay)
            except HTTPStatusError as e:
                if e.response.status_code in _RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                    last_error = e
                    delay = self.backoff * 2 ** attempt
                    logger.warning(
                        "HTTP %d on %s %s (attempt %d/%d), retrying in %.1fs",
                        e.response.status_code, method, url,
                        attempt + 1, self.max_retries + 1, delay,
                    )
                    time.sleep(delay)
                else:
                    _raise_for_response(e.response)

        if isinstance(last_error, HTTPStatusError):
            _raise_for_response(last_error.response)
        raise last_error  # type: ignore[misc]

    def _json(self, method: str, url: str, **kwargs) -> Any:
        """Shorthand: make request and return parsed JSON."""
        resp = self._request(method, url, **kwargs)
        if resp.status_code == 204 or not resp.content:
            return {}
        return resp.json()

    def _stream(self, method: str, url: str, **kwargs) -> Iterator[dict]:
        """Iterate over a newline-delimited JSON streaming response.

        Streams are not retried; the server would replay from the start.
        """
        client = self._get_client()
        with client.stream(method, url, **kwargs) as response:
            if response.status_code >= 400:
                response.read()
                _raise_for_response(response)
            for line in response.iter_lines():
                if line.strip():
                    yield json.loads(line)


class NodeModelClient(_APIClient):
    """Client for the RAN simulator node model service."""

    api_prefix = "/api/ransim/v1"

    def get_plmn_id(self) -> int:
        return int(self._json("GET", "/plmnid")["plmnId"])

    def list_nodes(self) -> Iterator[Node]:
        for message in self._stream("GET", "/nodes"):
            yield NodeEvent.model_validate(message).node

    def watch_nodes(self, no_replay: bool = False) -> Iterator[NodeEvent]:
        params = {"noReplay": str(no_replay).lower()}
        for message in self._stream("GET", "/nodes/watch", params=params):
            yield NodeEvent.model_validate(message)

    def create_node(self, node: Node) -> None:
        self._json("POST", "/nodes", json={"node": node.to_api()})

    def get_node(self, enbid: int) -> Node:
        data = self._json("GET", f"/nodes/{enbid}")
        return Node.model_validate(data["node"])

    def update_node(self, node: Node) -> None:
        self._json("PUT", f"/nodes/{node.enbid}", json={"node": node.to_api()})

    def delete_node(self, enbid: int) -> None:
        self._json("DELETE", f"/nodes/{enbid}")

    def agent_control(self, enbid: int, command: str) -> Node:
        data = self._json("POST", f"/nodes/{enbid}/agent", json={"command": command})
        return Node.model_validate(data["node"])


class TopoClient(_APIClient):
    """Client for the topology store query API."""

    api_prefix = "/api/topo/v1"

    @staticmethod
    def _query_body(object_type: ObjectType, filters: Filters) -> dict:
        body: dict[str, Any] = {"filters": filters.to_dict()}
        if object_type is not ObjectType.UNSPECIFIED:
            body["type"] = object_type.value
        return body

    def list_objects(self, object_type: ObjectType, filters: Filters) -> list[TopoObject]:
        data = self._json("POST", "/objects/list", json=self._query_body(object_type, filters))
        return [TopoObject.model_validate(o) for o in data.get("objects", [])]

    def watch_objects(
        self,
        object_type: ObjectType,
        filters: Filters,
        no_replay: bool = False,
    ) -> Iterator[ObjectEvent]:
        body = self._query_body(object_type, filters)
        body["noReplay"] = no_replay
        for message in self._stream("POST", "/objects/watch", json=body):
            yield ObjectEvent.model_validate(message)
