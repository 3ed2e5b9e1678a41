# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Ledger Writers

Record workflow execution results on an external ledger service. The engine
only needs a single write and treats the acknowledgement as opaque.
"""

import json
from typing import Any, Dict, Optional

import httpx

from forgeflow.engine.exceptions import NodeExecutionError


class HTTPLedgerWriter:
    """
    Posts execution results to a ledger gateway.

    Request body:
        {
            "workflowId": "...",
            "executionId": "...",
            "resultJson": "<serialized result payload>",
            "success": true
        }
    """

    def __init__(self, base_url: str, client: httpx.AsyncClient):
        self.base_url = base_url.rstrip("/")
        self.client = client

    async def record_execution(
        self,
        workflow_id: Optional[str],
        execution_id: str,
        result_payload: Any,
        success: bool,
    ) -> Dict[str, Any]:
        try:
            response = await self.client.post(
                f"{self.base_url}/executions",
                json={
                    "workflowId": workflow_id,
                    "executionId": execution_id,
                    "resultJson": json.dumps(result_payload, default=str),
                    "success": success,
                },
            )
        except httpx.TransportError as e:
            raise NodeExecutionError(f"Ledger write failed: {e}", retryable=True)

        if response.status_code >= 400:
            raise NodeExecutionError(
                f"Ledger write failed ({response.status_code}): {response.text}",
                retryable=response.status_code >= 500,
            )

        try:
            return response.json()
        except ValueError:
            return {"status": response.status_code, "body": response.text}


class LocalLedgerWriter:
    """Used when no ledger is configured - acknowledges without recording"""

    async def record_execution(
        self,
        workflow_id: Optional[str],
        execution_id: str,
        result_payload: Any,
        success: bool,
    ) -> Dict[str, Any]:
        return {
            "blockchain": True,
            "recorded": False,
            "message": "No ledger configured; execution was not recorded",
            "data": result_payload,
        }
