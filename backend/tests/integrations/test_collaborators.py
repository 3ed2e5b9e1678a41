# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for the ledger writers and notifier
"""

import json
import logging

import httpx
import pytest

from forgeflow.engine.exceptions import NodeExecutionError
from forgeflow.integrations.ledger import HTTPLedgerWriter, LocalLedgerWriter
from forgeflow.integrations.notifier import LogNotifier


class TestHTTPLedgerWriter:
    @pytest.mark.asyncio
    async def test_posts_execution(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"signature": "5xyz"})

        writer = HTTPLedgerWriter("http://ledger.test/", httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        ack = await writer.record_execution("wf-1", "exec_1", {"temp": 21}, True)

        assert ack == {"signature": "5xyz"}
        assert seen["url"] == "http://ledger.test/executions"
        assert seen["body"] == {
            "workflowId": "wf-1",
            "executionId": "exec_1",
            "resultJson": '{"temp": 21}',
            "success": True,
        }

    @pytest.mark.asyncio
    async def test_plain_text_ack(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(202, text="queued")))

        ack = await HTTPLedgerWriter("http://ledger.test", client).record_execution("wf", "e", None, False)

        assert ack == {"status": 202, "body": "queued"}

    @pytest.mark.asyncio
    async def test_server_error(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway")))

        with pytest.raises(NodeExecutionError) as exc_info:
            await HTTPLedgerWriter("http://ledger.test", client).record_execution("wf", "e", {}, True)

        assert exc_info.value.retryable
        assert "502" in str(exc_info.value)


@pytest.mark.asyncio
async def test_local_ledger_records_nothing():
    ack = await LocalLedgerWriter().record_execution("wf", "e", {"a": 1}, True)

    assert ack["blockchain"] is True
    assert ack["recorded"] is False
    assert ack["data"] == {"a": 1}


@pytest.mark.asyncio
async def test_log_notifier(caplog):
    caplog.set_level(logging.INFO, logger="forgeflow.notifications")

    await LogNotifier().notify("Temperature alert", {"temp": 40})

    record = next(r for r in caplog.records if r.name == "forgeflow.notifications")
    assert record.getMessage() == "notification"
    assert record.notification == "Temperature alert"
    assert record.payload == {"temp": 40}
