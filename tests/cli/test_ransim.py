"""
Functional tests for the ransim command group.

Covers:
- plmnid, nodes (list and watch, headers toggle, JSON output)
- create/get/update/delete node
- start/stop agent control
- Error propagation: API and connection errors exit with status 1
"""

import json
from unittest.mock import patch

import httpx
import pytest

from rancli.cli.commands.ransim import ransim
from rancli.client import NodeModelClient
from rancli.exceptions import NotFoundError
from rancli.models import Node, NodeEvent

CLIENT_FACTORY = "rancli.cli.commands.ransim.get_node_client"


@pytest.fixture
def node():
    return Node(
        enbid=144470,
        status="RUNNING",
        service_models=["kpm", "rc"],
        controllers=["e2t-1"],
        cell_ecgis=[1, 2],
    )


@pytest.fixture
def client(make_mock_client):
    return make_mock_client(NodeModelClient)


class TestPlmnId:
    """Tests for 'ransim plmnid'."""

    def test_prints_plmn_id(self, runner, client):
        client.get_plmn_id.return_value = 1279014
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["plmnid"])

        assert result.exit_code == 0
        assert result.output.strip() == "1279014"

    def test_connect_error(self, runner, client):
        client.get_plmn_id.side_effect = httpx.ConnectError("refused")
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["plmnid", "--server", "http://ransim:5150"])

        assert result.exit_code == 1
        assert "Cannot connect to server at http://ransim:5150" in result.output


class TestNodes:
    """Tests for 'ransim nodes'."""

    def test_list_prints_header_and_rows(self, runner, client, node):
        client.list_nodes.return_value = iter([node])
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["nodes"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0].split() == ["EnbID", "Status", "Service", "Models", "E2T", "Controllers",
                                    "Cell", "ECGIs"]
        assert lines[1].split() == ["144470", "RUNNING", "kpm,rc", "e2t-1", "1,2"]
        client.watch_nodes.assert_not_called()

    def test_no_headers(self, runner, client, node):
        client.list_nodes.return_value = iter([node])
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["nodes", "--no-headers"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 1
        assert lines[0].split() == ["144470", "RUNNING", "kpm,rc", "e2t-1", "1,2"]
        assert lines[0].index("RUNNING") == 17

    def test_watch_uses_watch_stream(self, runner, client, node):
        client.watch_nodes.return_value = iter([NodeEvent(type="ADDED", node=node)])
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["nodes", "-w", "--no-headers"])

        assert result.exit_code == 0
        assert "144470" in result.output
        client.watch_nodes.assert_called_once_with(no_replay=False)
        client.list_nodes.assert_not_called()

    def test_json_output_is_one_object_per_line(self, runner, client, node):
        client.list_nodes.return_value = iter([node, node.model_copy(update={"enbid": 7})])
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["nodes", "--format", "json"])

        assert result.exit_code == 0
        rows = [json.loads(line) for line in result.output.splitlines()]
        assert [r["enbid"] for r in rows] == [144470, 7]
        assert rows[0]["cell_ecgis"] == "1,2"


class TestNodeCrud:
    """Tests for create/get/update/delete node."""

    def test_create_node(self, runner, client):
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, [
                "create", "node", "144470",
                "--cells", "1,2", "--cells", "3",
                "--service-models", "kpm,rc",
                "--controllers", "e2t-1",
            ])

        assert result.exit_code == 0
        assert "Node 144470 created" in result.output
        created = client.create_node.call_args[0][0]
        assert created == Node(
            enbid=144470, service_models=["kpm", "rc"], controllers=["e2t-1"], cell_ecgis=[1, 2, 3],
        )

    def test_create_node_quiet(self, runner, client):
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["create", "node", "1", "-q"])

        assert result.exit_code == 0
        assert result.output == ""

    @pytest.mark.parametrize("enbid", ["abc", "-1"])
    def test_invalid_enbid_is_usage_error(self, runner, client, enbid):
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["create", "node", "--", enbid])

        assert result.exit_code == 2
        client.create_node.assert_not_called()

    def test_invalid_cells_is_usage_error(self, runner, client):
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["create", "node", "1", "--cells", "x"])

        assert result.exit_code == 2
        assert "unsigned integers" in result.output

    def test_get_node(self, runner, client, node):
        client.get_node.return_value = node
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["get", "node", "144470"])

        assert result.exit_code == 0
        assert "EnbID: 144470" in result.output
        assert "Status: RUNNING" in result.output
        assert "Cell ECGIs: 1,2" in result.output
        client.get_node.assert_called_once_with(144470)

    def test_get_missing_node(self, runner, client):
        client.get_node.side_effect = NotFoundError("node 9 not found", status_code=404)
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["get", "node", "9"])

        assert result.exit_code == 1
        assert "Not found" in result.output

    def test_update_is_sparse(self, runner, client, node):
        client.get_node.return_value = node
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["update", "node", "144470", "--controllers", "e2t-2"])

        assert result.exit_code == 0
        assert "Node 144470 updated" in result.output
        updated = client.update_node.call_args[0][0]
        assert updated.controllers == ["e2t-2"]
        assert updated.service_models == ["kpm", "rc"]
        assert updated.cell_ecgis == [1, 2]

    def test_update_can_clear_field(self, runner, client, node):
        client.get_node.return_value = node
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["update", "node", "144470", "--cells", ""])

        assert result.exit_code == 0
        assert client.update_node.call_args[0][0].cell_ecgis == []

    def test_delete_node(self, runner, client):
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, ["delete", "node", "144470"])

        assert result.exit_code == 0
        assert "Node 144470 deleted" in result.output
        client.delete_node.assert_called_once_with(144470)


class TestAgentControl:
    """Tests for 'ransim start' and 'ransim stop'."""

    @pytest.mark.parametrize("command", ["start", "stop"])
    def test_control_command(self, runner, client, node, command):
        client.agent_control.return_value = node
        with patch(CLIENT_FACTORY, return_value=client):
            result = runner.invoke(ransim, [command, "144470"])

        assert result.exit_code == 0
        client.agent_control.assert_called_once_with(144470, command)
        assert "EnbID: 144470" in result.output
