# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Execution API Routes

Validate and execute workflows submitted in the request body.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from forgeflow.core.dependencies import get_workflow_service
from forgeflow.core.errors import ValidationError, sanitize_error_for_user
from forgeflow.core.logging import get_api_logger
from forgeflow.services.workflow_service import INVALID_FORMAT, WorkflowService

router = APIRouter(prefix="/api", tags=["execution"])
logger = get_api_logger()


async def read_workflow_payload(request: Request) -> Any:
    """Raw `workflow` member of a {"workflow": {...}} body"""
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError(INVALID_FORMAT, field="workflow")
    if not isinstance(body, dict):
        raise ValidationError(INVALID_FORMAT, field="workflow")
    return body.get("workflow")


def validation_errors(error: ValidationError):
    return error.details.get("errors") or [error.message]


@router.post("/execute")
async def execute_workflow(
    request: Request,
    service: WorkflowService = Depends(get_workflow_service)
):
    """
    Validate then execute a workflow.

    200 {"success": true, "execution": {...}}
    400 {"success": false, "errors": [...]}
    500 {"success": false, "error": "..."}
    """
    try:
        workflow = service.parse_workflow(await read_workflow_payload(request))
        record = await service.execute(workflow)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"success": False, "errors": validation_errors(e)})
    except Exception as e:
        logger.error(f"Execution error: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": sanitize_error_for_user(e, include_type=False) or "Unknown error"}
        )

    return {"success": True, "execution": record.to_json_dict()}


@router.post("/validate")
async def validate_workflow(
    request: Request,
    service: WorkflowService = Depends(get_workflow_service)
):
    """Validate a workflow without executing it"""
    try:
        workflow = service.parse_workflow(await read_workflow_payload(request))
    except ValidationError:
        return JSONResponse(status_code=400, content={"valid": False, "errors": [INVALID_FORMAT]})

    return service.validate(workflow).model_dump()
