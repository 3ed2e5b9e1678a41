# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow API Routes

CRUD operations and execution for stored workflows.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from forgeflow.core.dependencies import get_workflow_service
from forgeflow.core.errors import ConflictError, NotFoundError, ValidationError
from forgeflow.services.workflow_service import WorkflowService

router = APIRouter(prefix="/api/workflows", tags=["workflows"])


@router.get("")
async def list_workflows(
    service: WorkflowService = Depends(get_workflow_service)
) -> List[Dict[str, Any]]:
    """List all workflows"""
    return await service.list_workflows()


@router.get("/{workflow_id}")
async def get_workflow(
    workflow_id: str,
    service: WorkflowService = Depends(get_workflow_service)
) -> Dict[str, Any]:
    """Get a specific workflow definition"""
    try:
        return await service.get_workflow(workflow_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("", status_code=201)
async def create_workflow(
    workflow_data: Dict[str, Any],
    service: WorkflowService = Depends(get_workflow_service)
) -> Dict[str, Any]:
    """Create a new workflow definition"""
    try:
        return await service.create_workflow(workflow_data)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{workflow_id}")
async def update_workflow(
    workflow_id: str,
    workflow_data: Dict[str, Any],
    service: WorkflowService = Depends(get_workflow_service)
) -> Dict[str, Any]:
    """Update an existing workflow definition"""
    try:
        return await service.update_workflow(workflow_id, workflow_data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{workflow_id}")
async def delete_workflow(
    workflow_id: str,
    service: WorkflowService = Depends(get_workflow_service)
) -> Dict[str, str]:
    """Delete a workflow definition"""
    try:
        return await service.delete_workflow(workflow_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{workflow_id}/toggle")
async def toggle_workflow(
    workflow_id: str,
    service: WorkflowService = Depends(get_workflow_service)
) -> Dict[str, Any]:
    """Activate or deactivate a workflow"""
    try:
        return await service.toggle_active(workflow_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{workflow_id}/run")
async def run_workflow(
    workflow_id: str,
    service: WorkflowService = Depends(get_workflow_service)
):
    """Execute a stored workflow"""
    try:
        record = await service.run_workflow(workflow_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        return JSONResponse(
            status_code=400,
            content={"success": False, "errors": e.details.get("errors") or [e.message]}
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Workflow execution failed: {str(e)}")

    return {"success": True, "execution": record.to_json_dict()}
