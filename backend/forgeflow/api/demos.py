# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Demo Workflow API Routes
"""

from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from forgeflow.demos import get_demo, list_demos

router = APIRouter(prefix="/api/demos", tags=["demos"])


@router.get("")
async def get_demos() -> Dict[str, Any]:
    return {"demos": list_demos()}


@router.get("/{demo_id}")
async def get_demo_workflow(demo_id: str) -> Dict[str, Any]:
    demo = get_demo(demo_id)
    if demo is None:
        raise HTTPException(status_code=404, detail=f"Demo not found: {demo_id}")
    return demo
