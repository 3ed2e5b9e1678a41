# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Dependency injection for the ForgeFlow backend.

Runtime objects are created once at startup and stored in app.state;
these dependencies hand them to the routers.
"""

from fastapi import HTTPException, Request, status


def get_workflow_service(request: Request):
    """Get WorkflowService instance from app.state (initialized at startup)."""
    service = getattr(request.app.state, "workflow_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Workflow service not initialized"
        )
    return service


def get_executor(request: Request):
    """Get WorkflowExecutor instance from app.state."""
    executor = getattr(request.app.state, "executor", None)
    if executor is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Workflow executor not initialized"
        )
    return executor
