# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for execution history storage
"""

import pytest

from forgeflow.storage.execution_store import ExecutionStore


def record(execution_id, workflow_id="wf-1", status="completed"):
    return {
        "workflowId": workflow_id,
        "executionId": execution_id,
        "status": status,
        "results": [],
        "startedAt": "2025-01-02T10:00:00.000Z",
        "completedAt": "2025-01-02T10:00:01.000Z",
    }


@pytest.fixture
def store(tmp_path):
    return ExecutionStore(tmp_path / "executions")


@pytest.mark.asyncio
async def test_save_uses_date_directory(store, tmp_path):
    path = await store.save(record("exec_20250102_100000_aaaaaaaa"))

    assert path == str(tmp_path / "executions" / "2025-01-02" / "exec_20250102_100000_aaaaaaaa.json")
    assert store.get("exec_20250102_100000_aaaaaaaa")["status"] == "completed"


@pytest.mark.asyncio
async def test_get_unknown_or_unsafe_id(store):
    await store.save(record("exec_20250102_100000_aaaaaaaa"))

    assert store.get("exec_20250102_100000_bbbbbbbb") is None
    assert store.get("../secrets") is None


@pytest.mark.asyncio
async def test_get_without_date_in_id(store):
    await store.save(record("manual-run"))

    assert store.get("manual-run")["executionId"] == "manual-run"


@pytest.mark.asyncio
async def test_list_newest_first_with_filters(store):
    await store.save(record("exec_20250101_090000_aaaaaaaa"))
    await store.save(record("exec_20250102_090000_bbbbbbbb", status="failed"))
    await store.save(record("exec_20250102_100000_cccccccc", workflow_id="wf-2"))

    assert [e["executionId"] for e in store.list()] == [
        "exec_20250102_100000_cccccccc",
        "exec_20250102_090000_bbbbbbbb",
        "exec_20250101_090000_aaaaaaaa",
    ]
    assert [e["executionId"] for e in store.list(workflow_id="wf-1", status="completed")] == [
        "exec_20250101_090000_aaaaaaaa",
    ]
    assert [e["executionId"] for e in store.list(limit=1, offset=1)] == ["exec_20250102_090000_bbbbbbbb"]
    assert store.list(date="2025-01-01")[0]["executionId"] == "exec_20250101_090000_aaaaaaaa"


@pytest.mark.asyncio
async def test_statistics(store):
    await store.save(record("exec_20250101_090000_aaaaaaaa"))
    await store.save(record("exec_20250101_090001_bbbbbbbb", status="failed"))

    assert store.get_statistics() == {
        "total_executions": 2,
        "completed": 1,
        "failed": 1,
        "success_rate": 50.0,
    }
