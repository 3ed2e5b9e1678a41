# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
API tests for the ForgeFlow backend

Runs the real FastAPI app with the workflow service wired to temp storage
and a mocked network.
"""

import httpx
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from forgeflow.core.dependencies import get_executor, get_workflow_service
from forgeflow.main import app
from tests.factories import edge, node


@pytest.fixture
def client(workflow_service):
    """Create test client"""
    app.dependency_overrides[get_workflow_service] = lambda: workflow_service
    app.dependency_overrides[get_executor] = lambda: workflow_service.executor
    yield TestClient(app)
    app.dependency_overrides.clear()


def valid_workflow(workflow_id="wf-api"):
    return {
        "id": workflow_id,
        "name": "API Workflow",
        "nodes": [
            node("t", "trigger", label="Start"),
            node("h", "http_request", label="Fetch", url="https://api.test/weather"),
            node("s", "action", label="Save", actionType="save", destination="api_result"),
        ],
        "edges": [edge("t", "h"), edge("h", "s")],
    }


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "forgeflow-backend"}


class TestValidate:
    def test_valid(self, client):
        response = client.post("/api/validate", json={"workflow": valid_workflow()})

        assert response.status_code == 200
        assert response.json() == {"valid": True, "errors": []}

    def test_invalid(self, client):
        wf = valid_workflow()
        wf["edges"].append(edge("s", "t"))

        response = client.post("/api/validate", json={"workflow": wf})

        assert response.status_code == 200
        assert response.json() == {"valid": False, "errors": ["Workflow contains a cycle (loops are not allowed)"]}

    def test_missing_workflow(self, client):
        response = client.post("/api/validate", json={})

        assert response.json() == {"valid": False, "errors": ["Workflow is required"]}

    @pytest.mark.parametrize("body", [b"not json", b"[1, 2]", b'{"workflow": "text"}'])
    def test_unparseable(self, client, body):
        response = client.post("/api/validate", content=body, headers={"content-type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"valid": False, "errors": ["Invalid workflow format"]}


class TestExecute:
    def test_success(self, client):
        response = client.post("/api/execute", json={"workflow": valid_workflow()})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        execution = data["execution"]
        assert execution["status"] == "completed"
        assert execution["workflowId"] == "wf-api"
        assert [r["nodeId"] for r in execution["results"]] == ["t", "h", "s"]
        assert execution["results"][1]["output"] == {"status": 200, "data": {"temp": 21}}

    def test_node_failure_is_reported_in_record(self, client, network_handler):
        network_handler.state["handler"] = lambda request: httpx.Response(503, text="unavailable")

        response = client.post("/api/execute", json={"workflow": valid_workflow()})

        assert response.status_code == 200
        execution = response.json()["execution"]
        assert execution["status"] == "failed"
        assert execution["results"][1]["error"] == "HTTP 503: unavailable"
        assert execution["results"][2]["success"] is True

    def test_validation_errors(self, client):
        wf = valid_workflow()
        wf["nodes"][1]["config"].pop("url")

        response = client.post("/api/execute", json={"workflow": wf})

        assert response.status_code == 400
        assert response.json() == {"success": False, "errors": ['HTTP request node "Fetch" is missing URL']}

    def test_missing_workflow(self, client):
        response = client.post("/api/execute", json={})

        assert response.status_code == 400
        assert response.json() == {"success": False, "errors": ["Workflow is required"]}

    def test_unparseable(self, client):
        response = client.post("/api/execute", json={"workflow": ["nope"]})

        assert response.status_code == 400
        assert response.json() == {"success": False, "errors": ["Invalid workflow format"]}

    def test_unexpected_error(self, client, workflow_service):
        workflow_service.executor.execute = AsyncMock(side_effect=RuntimeError("engine crashed"))

        response = client.post("/api/execute", json={"workflow": valid_workflow()})

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "engine crashed"}

    def test_history_write_failure_keeps_execution(self, client, workflow_service):
        workflow_service.execution_store.save = AsyncMock(side_effect=OSError("disk full"))

        response = client.post("/api/execute", json={"workflow": valid_workflow()})

        assert response.status_code == 200
        assert response.json()["execution"]["status"] == "completed"


class TestDemos:
    def test_list(self, client):
        response = client.get("/api/demos")

        assert response.status_code == 200
        assert [d["id"] for d in response.json()["demos"]] == ["demo-weather-nft", "demo-sentiment", "demo-moderator"]

    def test_get_and_validate(self, client):
        demo = client.get("/api/demos/demo-sentiment").json()

        assert demo["name"] == "Sentiment Trading Bot"
        response = client.post("/api/validate", json={"workflow": demo})
        assert response.json() == {"valid": True, "errors": []}

    def test_unknown(self, client):
        assert client.get("/api/demos/nope").status_code == 404


class TestWorkflows:
    def test_crud_flow(self, client):
        response = client.post("/api/workflows", json=valid_workflow())
        assert response.status_code == 201

        assert client.post("/api/workflows", json=valid_workflow()).status_code == 409

        listed = client.get("/api/workflows").json()
        assert [w["id"] for w in listed] == ["wf-api"]

        updated = client.put("/api/workflows/wf-api", json={**valid_workflow(), "name": "Renamed"})
        assert updated.status_code == 200
        assert client.get("/api/workflows/wf-api").json()["name"] == "Renamed"

        toggled = client.post("/api/workflows/wf-api/toggle")
        assert toggled.json()["active"] is False

        assert client.delete("/api/workflows/wf-api").status_code == 200
        assert client.get("/api/workflows/wf-api").status_code == 404

    def test_invalid_body(self, client):
        response = client.post("/api/workflows", json={"nodes": "x"})

        assert response.status_code == 400

    def test_missing(self, client):
        assert client.get("/api/workflows/ghost").status_code == 404
        assert client.put("/api/workflows/ghost", json=valid_workflow()).status_code == 404
        assert client.post("/api/workflows/ghost/toggle").status_code == 404
        assert client.post("/api/workflows/ghost/run").status_code == 404

    def test_run_and_history(self, client):
        client.post("/api/workflows", json=valid_workflow())

        run = client.post("/api/workflows/wf-api/run")
        assert run.status_code == 200
        execution_id = run.json()["execution"]["executionId"]

        history = client.get("/api/executions", params={"workflow_id": "wf-api"}).json()
        assert [e["executionId"] for e in history] == [execution_id]

        stored = client.get(f"/api/executions/{execution_id}")
        assert stored.status_code == 200
        assert stored.json()["status"] == "completed"

        stats = client.get("/api/executions/stats", params={"workflow_id": "wf-api"}).json()
        assert stats["total_executions"] == 1
        assert stats["completed"] == 1

    def test_run_invalid_stored_workflow(self, client):
        wf = valid_workflow()
        wf["nodes"] = wf["nodes"][1:]
        wf["edges"] = wf["edges"][1:]
        client.post("/api/workflows", json=wf)

        response = client.post("/api/workflows/wf-api/run")

        assert response.status_code == 400
        assert response.json() == {"success": False, "errors": ["Workflow must have at least one Trigger node"]}


class TestExecutions:
    def test_unknown_execution(self, client):
        assert client.get("/api/executions/exec_20250101_000000_deadbeef").status_code == 404

    def test_node_state_of_finished_run(self, client):
        assert client.get("/api/executions/exec_20250101_000000_deadbeef/nodes/t").status_code == 404
