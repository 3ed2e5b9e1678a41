# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Executor

Runs a workflow's nodes one at a time in topological order.
"""

import asyncio
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from forgeflow.core.logging import log_event

from .context import ExecutionContext, utc_now_iso
from .dispatcher import NodeDispatcher
from .exceptions import NodeTimeoutError
from .graph import WorkflowGraph
from .models import ExecutionRecord, ExecutionStatus, NodeResult, NodeStatus, Workflow, WorkflowNode
from .sequencer import topological_order


def new_execution_id() -> str:
    """exec_YYYYMMDD_HHMMSS_<8 hex chars>"""
    return f"exec_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"


class WorkflowExecutor:
    """
    Sequential workflow executor.

    A failing node does not stop the run: its output becomes None and the
    remaining nodes still execute. The workflow is assumed to be validated
    already.
    """

    def __init__(
        self,
        dispatcher: NodeDispatcher,
        node_timeout: float = 300.0,
        logger: Optional[logging.Logger] = None
    ):
        self.dispatcher = dispatcher
        self.node_timeout = node_timeout
        self.logger = logger or logging.getLogger("forgeflow.engine.executor")

        # Execution tracking
        self.active_executions: Dict[str, ExecutionContext] = {}  # execution_id -> ExecutionContext

    async def execute(
        self,
        workflow: Workflow,
        update_callback: Optional[Callable] = None
    ) -> ExecutionRecord:
        """
        Execute a workflow.

        Args:
            workflow: Workflow definition
            update_callback: Optional async callback for node state updates

        Returns:
            ExecutionRecord (status "completed" only if every node succeeded)
        """
        exec_id = new_execution_id()
        context = ExecutionContext(exec_id, workflow.id)
        self.active_executions[exec_id] = context
        run_error: Optional[Exception] = None

        log_event(
            self.logger, "workflow_started",
            execution_id=exec_id, workflow_id=workflow.id, node_count=len(workflow.nodes)
        )

        try:
            # 1. Order nodes and index predecessors once
            graph = WorkflowGraph(workflow)
            order = topological_order(graph)
            predecessors = {node.id: graph.predecessors(node.id) for node in order}
            context.mark_pending([node.id for node in order])

            # 2. Execute nodes
            for node in order:
                await self._execute_node(node, predecessors[node.id], context, update_callback)

        except Exception as e:
            run_error = e
            log_event(
                self.logger, "workflow_error", level="ERROR",
                execution_id=exec_id, workflow_id=workflow.id, error=str(e) or type(e).__name__
            )
        finally:
            context.finalize()
            self.active_executions.pop(exec_id, None)

        # 3. Final status
        if run_error is None and context.all_succeeded:
            status = ExecutionStatus.COMPLETED
        else:
            status = ExecutionStatus.FAILED

        record = ExecutionRecord(
            workflow_id=workflow.id,
            execution_id=exec_id,
            status=status,
            results=list(context.results),
            started_at=context.started_at,
            completed_at=context.completed_at,
        )

        log_event(
            self.logger, "workflow_completed",
            level="INFO" if status == ExecutionStatus.COMPLETED else "WARNING",
            execution_id=exec_id,
            workflow_id=workflow.id,
            status=status.value,
            failed_nodes=record.failed_nodes,
        )
        return record

    async def _execute_node(
        self,
        node: WorkflowNode,
        predecessor_ids: List[str],
        context: ExecutionContext,
        update_callback: Optional[Callable]
    ) -> None:
        """Execute a single node and record its result"""
        context.mark_running(node.id)
        await self._send_update(update_callback, "node_state", {
            "node_id": node.id,
            "status": NodeStatus.RUNNING.value,
            "node_states": self._states(context),
        })

        input_data = context.gather_input(predecessor_ids)
        timeout = self._node_timeout(node)
        timestamp = utc_now_iso()
        started = time.monotonic()

        try:
            try:
                output = await asyncio.wait_for(
                    self.dispatcher.execute(node, input_data, context),
                    timeout=timeout
                )
            except asyncio.TimeoutError:
                raise NodeTimeoutError(node.id, timeout)
        except Exception as e:
            error = str(e) or type(e).__name__
            context.mark_failed(node.id)
            result = NodeResult(
                node_id=node.id,
                success=False,
                error=error,
                duration_ms=self._elapsed_ms(started),
                timestamp=timestamp,
            )
            log_event(
                self.logger, "node_failed", level="WARNING",
                execution_id=context.execution_id, node_id=node.id,
                kind=node.kind.value, error=error, duration_ms=result.duration_ms
            )
        else:
            context.mark_succeeded(node.id, output)
            result = NodeResult(
                node_id=node.id,
                success=True,
                output=output,
                duration_ms=self._elapsed_ms(started),
                timestamp=timestamp,
            )
            log_event(
                self.logger, "node_completed",
                execution_id=context.execution_id, node_id=node.id,
                kind=node.kind.value, duration_ms=result.duration_ms
            )

        context.add_result(result)
        await self._send_update(update_callback, "node_state", {
            "node_id": node.id,
            "status": context.node_states[node.id].value,
            "node_states": self._states(context),
        })

    def _node_timeout(self, node: WorkflowNode) -> float:
        """Per-node `timeout` config, else the executor default"""
        value = node.config.get("timeout")
        try:
            value = float(value) if value is not None else None
        except (TypeError, ValueError):
            value = None
        if value is None or value <= 0:
            return self.node_timeout
        return value

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.monotonic() - started) * 1000)

    @staticmethod
    def _states(context: ExecutionContext) -> Dict[str, str]:
        return {node_id: state.value for node_id, state in context.node_states.items()}

    def get_node_state(self, execution_id: str, node_id: str) -> Optional[Dict[str, Any]]:
        """
        Run state of one node in an active execution.

        Returns None when the execution is not running or the node is unknown.
        """
        context = self.active_executions.get(execution_id)
        if context is None or node_id not in context.node_states:
            return None

        state = context.node_states[node_id]
        return {
            "executing": state == NodeStatus.RUNNING,
            "succeeded": state == NodeStatus.SUCCEEDED,
            "failed": state == NodeStatus.FAILED,
            "status": state.value,
            "output": context.get_output(node_id),
        }

    async def _send_update(self, callback: Optional[Callable], update_type: str, data: Dict[str, Any]):
        """Send real-time update via callback"""
        if callback:
            await callback({
                "type": update_type,
                **data
            })
