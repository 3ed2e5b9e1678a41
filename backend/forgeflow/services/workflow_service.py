# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Service

Manages workflow definitions, validation and execution.
"""

from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from forgeflow.core.errors import ConflictError, NotFoundError, ValidationError
from forgeflow.core.logging import get_service_logger, log_event
from forgeflow.engine.context import utc_now_iso
from forgeflow.engine.exceptions import NodeExecutionError
from forgeflow.engine.executor import WorkflowExecutor
from forgeflow.engine.models import ExecutionRecord, ExecutionStatus, ValidationResult, Workflow
from forgeflow.engine.validation import validate_workflow
from forgeflow.storage.execution_store import ExecutionStore
from forgeflow.storage.kv_store import KeyValueStore

logger = get_service_logger("workflow")

INVALID_FORMAT = "Invalid workflow format"


class WorkflowService:
    """
    Manages workflow definitions and execution.

    Responsibilities:
    - CRUD operations for workflow definitions (one JSON file per workflow)
    - Validation gate in front of the executor
    - Persisting execution records, optionally recording them on the ledger
    """

    def __init__(
        self,
        workflow_store: KeyValueStore,
        execution_store: ExecutionStore,
        executor: WorkflowExecutor,
        ledger=None,
        require_trigger: bool = True,
        record_runs_on_ledger: bool = False
    ):
        self.workflow_store = workflow_store
        self.execution_store = execution_store
        self.executor = executor
        self.ledger = ledger
        self.require_trigger = require_trigger
        self.record_runs_on_ledger = record_runs_on_ledger

    # ------------------------------------------------------------------
    # Validation & execution
    # ------------------------------------------------------------------

    @staticmethod
    def parse_workflow(data: Any) -> Optional[Workflow]:
        """
        Parse interchange data into a Workflow.

        None passes through so the validator can report the missing workflow.
        Raises ValidationError when the data does not have the workflow shape.
        """
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ValidationError(INVALID_FORMAT, field="workflow")
        try:
            return Workflow.model_validate(data)
        except PydanticValidationError as e:
            logger.info(f"Rejected workflow payload: {e.error_count()} schema error(s)")
            raise ValidationError(INVALID_FORMAT, field="workflow")

    def validate(self, workflow: Optional[Workflow]) -> ValidationResult:
        return validate_workflow(workflow, require_trigger=self.require_trigger)

    async def execute(
        self,
        workflow: Optional[Workflow],
        update_callback: Optional[Callable] = None
    ) -> ExecutionRecord:
        """
        Validate and execute a workflow.

        Raises ValidationError (details["errors"] lists the problems) when the
        workflow is not executable.
        """
        validation = self.validate(workflow)
        if not validation.valid:
            raise ValidationError(
                "Workflow validation failed",
                field="workflow",
                details={"errors": validation.errors}
            )

        logger.info(f"Executing workflow: {workflow.id}")
        record = await self.executor.execute(workflow, update_callback=update_callback)

        try:
            await self.execution_store.save(record.to_json_dict())
        except OSError as e:
            log_event(
                logger,
                "execution_save_failed",
                level="WARNING",
                execution_id=record.execution_id,
                workflow_id=record.workflow_id,
                error=str(e),
            )

        if self.record_runs_on_ledger and self.ledger is not None:
            await self._record_on_ledger(record)

        logger.info(f"Workflow execution {record.status.value}: {record.execution_id}")
        return record

    async def _record_on_ledger(self, record: ExecutionRecord) -> None:
        try:
            await self.ledger.record_execution(
                record.workflow_id,
                record.execution_id,
                record.to_json_dict(),
                record.status == ExecutionStatus.COMPLETED,
            )
        except NodeExecutionError as e:
            # Ledger failures never change the run outcome
            logger.warning(f"Could not record execution {record.execution_id} on ledger: {e}")

    # ------------------------------------------------------------------
    # Workflow CRUD
    # ------------------------------------------------------------------

    async def list_workflows(self) -> List[Dict[str, Any]]:
        """List all workflow definitions"""
        workflows = []

        for entry in await self.workflow_store.list():
            workflow_data = entry["value"]
            if not isinstance(workflow_data, dict):
                logger.warning(f"Skipping invalid workflow file {entry['key']}.json")
                continue
            workflows.append({
                "id": workflow_data.get("id", entry["key"]),
                "name": workflow_data.get("name"),
                "description": workflow_data.get("description"),
                "active": workflow_data.get("active", True),
                "nodeCount": len(workflow_data.get("nodes", [])),
                "updatedAt": workflow_data.get("updatedAt"),
            })

        logger.info(f"Listed {len(workflows)} workflows")
        return workflows

    async def get_workflow(self, workflow_id: str) -> Dict[str, Any]:
        """Get a specific workflow definition"""
        workflow_data = await self.workflow_store.get(workflow_id)
        if workflow_data is None:
            raise NotFoundError("Workflow", workflow_id)
        return workflow_data

    async def create_workflow(self, workflow_data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new workflow definition"""
        workflow = self.parse_workflow(workflow_data)
        if workflow is None:
            raise ValidationError("Workflow is required", field="workflow")

        if await self.workflow_store.exists(workflow.id):
            raise ConflictError(f"Workflow '{workflow.id}' already exists", resource="Workflow")

        now = utc_now_iso()
        workflow.created_at = workflow.created_at or now
        workflow.updated_at = now

        stored = workflow.to_json_dict()
        await self.workflow_store.put(workflow.id, stored)

        logger.info(f"Created workflow: {workflow.id}")
        return stored

    async def update_workflow(self, workflow_id: str, workflow_data: Dict[str, Any]) -> Dict[str, Any]:
        """Update an existing workflow definition"""
        existing = await self.get_workflow(workflow_id)

        if not isinstance(workflow_data, dict):
            raise ValidationError(INVALID_FORMAT, field="workflow")

        # Ensure id matches
        workflow = self.parse_workflow({**workflow_data, "id": workflow_id})
        workflow.created_at = existing.get("createdAt") or workflow.created_at
        workflow.updated_at = utc_now_iso()

        stored = workflow.to_json_dict()
        await self.workflow_store.put(workflow_id, stored)

        logger.info(f"Updated workflow: {workflow_id}")
        return stored

    async def delete_workflow(self, workflow_id: str) -> Dict[str, str]:
        """Delete a workflow definition"""
        if not await self.workflow_store.delete(workflow_id):
            raise NotFoundError("Workflow", workflow_id)

        logger.info(f"Deleted workflow: {workflow_id}")
        return {"message": f"Workflow '{workflow_id}' deleted"}

    async def toggle_active(self, workflow_id: str) -> Dict[str, Any]:
        """Flip the workflow's active flag"""
        workflow_data = await self.get_workflow(workflow_id)
        workflow_data["active"] = not workflow_data.get("active", True)
        workflow_data["updatedAt"] = utc_now_iso()
        await self.workflow_store.put(workflow_id, workflow_data)

        logger.info(f"Workflow {workflow_id} active={workflow_data['active']}")
        return workflow_data

    async def run_workflow(self, workflow_id: str, update_callback: Optional[Callable] = None) -> ExecutionRecord:
        """Execute a stored workflow"""
        workflow_data = await self.get_workflow(workflow_id)
        workflow = self.parse_workflow(workflow_data)
        return await self.execute(workflow, update_callback=update_callback)

    # ------------------------------------------------------------------
    # Execution history
    # ------------------------------------------------------------------

    def list_executions(
        self,
        workflow_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[Dict[str, Any]]:
        return self.execution_store.list(workflow_id=workflow_id, status=status, limit=limit, offset=offset)

    def get_execution(self, execution_id: str) -> Dict[str, Any]:
        execution = self.execution_store.get(execution_id)
        if execution is None:
            raise NotFoundError("Execution", execution_id)
        return execution

    def execution_statistics(self, workflow_id: Optional[str] = None) -> Dict[str, Any]:
        return self.execution_store.get_statistics(workflow_id)
