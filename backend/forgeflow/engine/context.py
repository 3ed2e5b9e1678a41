# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Execution Context

Tracks state for a single workflow run.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .models import NodeResult, NodeStatus


def utc_now_iso() -> str:
    """UTC timestamp with millisecond precision, e.g. 2025-01-01T12:00:00.000Z"""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class ExecutionContext:
    """
    Execution context for a workflow run.

    Tracks:
    - Node outputs (None for failed nodes) consumed by downstream nodes
    - Node states (pending / running / succeeded / failed)
    - Node results in execution order

    Owned by one run; the workflow definition itself is never touched.
    """

    def __init__(self, execution_id: str, workflow_id: Optional[str]):
        self.execution_id = execution_id
        self.workflow_id = workflow_id
        self.started_at = utc_now_iso()
        self.completed_at: Optional[str] = None

        self.outputs: Dict[str, Any] = {}
        self.node_states: Dict[str, NodeStatus] = {}
        self.results: List[NodeResult] = []

    def mark_pending(self, node_ids: List[str]) -> None:
        for node_id in node_ids:
            self.node_states[node_id] = NodeStatus.PENDING

    def mark_running(self, node_id: str) -> None:
        self.node_states[node_id] = NodeStatus.RUNNING

    def mark_succeeded(self, node_id: str, output: Any) -> None:
        """Store output for downstream nodes"""
        self.outputs[node_id] = output
        self.node_states[node_id] = NodeStatus.SUCCEEDED

    def mark_failed(self, node_id: str) -> None:
        """Downstream nodes see None instead of an output"""
        self.outputs[node_id] = None
        self.node_states[node_id] = NodeStatus.FAILED

    def get_output(self, node_id: str) -> Any:
        return self.outputs.get(node_id)

    def gather_input(self, predecessor_ids: List[str]) -> Any:
        """
        Build a node's input from its predecessors.

        No predecessors -> None, one -> its output, several -> list of
        outputs in predecessor-edge order.
        """
        if not predecessor_ids:
            return None
        if len(predecessor_ids) == 1:
            return self.get_output(predecessor_ids[0])
        return [self.get_output(node_id) for node_id in predecessor_ids]

    def add_result(self, result: NodeResult) -> None:
        self.results.append(result)

    @property
    def all_succeeded(self) -> bool:
        return all(result.success for result in self.results)

    def finalize(self) -> None:
        """Mark execution as complete"""
        self.completed_at = utc_now_iso()
