# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for workflow models and the graph view
"""

import pytest
from pydantic import ValidationError

from forgeflow.engine.graph import WorkflowGraph
from forgeflow.engine.models import (
    AIInferenceConfig,
    ConditionalConfig,
    ExecutionRecord,
    HTTPRequestConfig,
    NodeKind,
    NodeResult,
    Workflow,
    WorkflowNode,
)
from tests.factories import edge, node, workflow


def test_canvas_export_is_normalized():
    """type/data from the canvas map onto kind/config"""
    wf = Workflow.model_validate({
        "id": "wf-1",
        "name": "Canvas",
        "nodes": [
            {"id": "n1", "type": "api", "position": {"x": 10, "y": 20}, "data": {"url": "https://x.test"}},
            {"id": "n2", "type": "ai", "data": {"userPrompt": "hi", "model": "groq"}},
            {"id": "n3", "type": "logic", "data": {"condition": "data.ok"}},
        ],
        "edges": [{"id": "e1", "source": "n1", "target": "n2", "sourceHandle": "out"}],
    })

    assert [n.kind for n in wf.nodes] == [NodeKind.HTTP_REQUEST, NodeKind.AI_INFERENCE, NodeKind.CONDITIONAL]
    assert wf.nodes[0].config == {"url": "https://x.test"}
    assert wf.nodes[0].position.x == 10
    assert wf.edges[0].source_handle == "out"


def test_typed_config_accepts_canvas_aliases():
    ai = WorkflowNode.model_validate({"id": "a", "type": "ai", "data": {"userPrompt": "hi", "model": "groq"}})
    logic = WorkflowNode.model_validate({"id": "c", "type": "logic", "data": {"condition": "x.y", "value": 3}})

    ai_config = ai.typed_config()
    logic_config = logic.typed_config()

    assert isinstance(ai_config, AIInferenceConfig)
    assert ai_config.prompt == "hi"
    assert ai_config.provider == "groq"
    assert isinstance(logic_config, ConditionalConfig)
    assert logic_config.path == "x.y"
    assert logic_config.operator == "equals"


def test_http_method_is_upper_cased():
    config = WorkflowNode.model_validate(node("h", "http_request", url="https://x.test", method="post")).typed_config()

    assert isinstance(config, HTTPRequestConfig)
    assert config.method == "POST"


def test_unknown_config_keys_are_kept():
    config = WorkflowNode.model_validate(node("t", "trigger", label="Start", color="red")).typed_config()

    assert config.label == "Start"
    assert config.model_extra == {"color": "red"}


def test_invalid_typed_config_raises():
    bad = WorkflowNode.model_validate(node("a", "ai_inference", prompt="hi", temperature="hot"))

    with pytest.raises(ValidationError):
        bad.typed_config()


def test_unknown_kind_is_rejected():
    with pytest.raises(ValidationError):
        WorkflowNode.model_validate({"id": "x", "kind": "teleport"})


def test_missing_config_defaults_to_empty():
    n = WorkflowNode.model_validate({"id": "x", "kind": "trigger", "config": None})

    assert n.config == {}
    assert n.label == "x"


def test_workflow_serializes_camel_case():
    wf = workflow(
        nodes=[node("t", "trigger"), node("s", "action", actionType="save")],
        edges=[edge("t", "s", source_handle="true")],
        created_at="2025-01-01T00:00:00.000Z",
    )

    data = wf.to_json_dict()

    assert data["createdAt"] == "2025-01-01T00:00:00.000Z"
    assert data["edges"][0]["sourceHandle"] == "true"
    assert data["nodes"][1]["config"] == {"actionType": "save"}
    assert "updatedAt" not in data


def test_execution_record_failed_nodes():
    record = ExecutionRecord(
        workflow_id="wf",
        execution_id="exec_1",
        started_at="2025-01-01T00:00:00.000Z",
        results=[
            NodeResult(node_id="a", success=True),
            NodeResult(node_id="b", success=False, error="boom"),
        ],
    )

    assert record.failed_nodes == ["b"]
    dumped = record.to_json_dict()
    assert dumped["executionId"] == "exec_1"
    assert dumped["results"][1]["nodeId"] == "b"
    assert dumped["results"][1]["durationMs"] == 0


class TestWorkflowGraph:
    def test_adjacency_in_edge_order(self):
        graph = WorkflowGraph(workflow(
            nodes=[node("a", "trigger"), node("b", "action"), node("c", "action")],
            edges=[edge("a", "c"), edge("a", "b"), edge("b", "c")],
        ))

        assert graph.successors("a") == ["c", "b"]
        assert graph.predecessors("c") == ["a", "b"]
        assert graph.predecessors("a") == []
        assert len(graph) == 3
        assert "b" in graph

    def test_duplicate_edges_are_kept(self):
        graph = WorkflowGraph(workflow(
            nodes=[node("a", "trigger"), node("b", "action")],
            edges=[edge("a", "b"), edge("a", "b")],
        ))

        assert graph.predecessors("b") == ["a", "a"]

    def test_unknown_ids_are_ignored(self):
        graph = WorkflowGraph(workflow(
            nodes=[node("a", "trigger")],
            edges=[edge("a", "ghost")],
        ))

        assert graph.get_node("ghost") is None
        assert graph.successors("ghost") == []
        assert graph.successors("a") == ["ghost"]

    def test_first_definition_wins_for_duplicate_ids(self):
        graph = WorkflowGraph(workflow(nodes=[
            node("a", "trigger", label="first"),
            node("a", "action", label="second"),
        ]))

        assert len(graph) == 1
        assert graph.get_node("a").label == "first"
