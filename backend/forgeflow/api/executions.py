# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Execution History API Routes
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from forgeflow.core.dependencies import get_executor, get_workflow_service
from forgeflow.core.errors import NotFoundError
from forgeflow.engine.executor import WorkflowExecutor
from forgeflow.services.workflow_service import WorkflowService

router = APIRouter(prefix="/api/executions", tags=["executions"])


@router.get("")
async def list_executions(
    workflow_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: WorkflowService = Depends(get_workflow_service)
) -> List[Dict[str, Any]]:
    """List stored execution records, newest first"""
    return service.list_executions(workflow_id=workflow_id, status=status, limit=limit, offset=offset)


@router.get("/stats")
async def get_execution_stats(
    workflow_id: Optional[str] = None,
    service: WorkflowService = Depends(get_workflow_service)
) -> Dict[str, Any]:
    """Completed/failed counts and success rate"""
    return service.execution_statistics(workflow_id)


@router.get("/{execution_id}")
async def get_execution(
    execution_id: str,
    service: WorkflowService = Depends(get_workflow_service)
) -> Dict[str, Any]:
    try:
        return service.get_execution(execution_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{execution_id}/nodes/{node_id}")
async def get_node_state(
    execution_id: str,
    node_id: str,
    executor: WorkflowExecutor = Depends(get_executor)
) -> Dict[str, Any]:
    """Live state of one node while its execution is running"""
    state = executor.get_node_state(execution_id, node_id)
    if state is None:
        raise HTTPException(status_code=404, detail=f"No active node state: {execution_id}/{node_id}")
    return state
