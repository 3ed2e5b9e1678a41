# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Shared fixtures for backend tests
"""

import os
import sys

import httpx
import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from forgeflow.core.config import Config
from forgeflow.engine.context import ExecutionContext


@pytest.fixture(autouse=True)
def no_provider_keys(monkeypatch):
    """Tests never pick up real provider credentials from the environment"""
    for env_var in ("HF_TOKEN", "OPENROUTER_API_KEY", "GROQ_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY",
                    "OPENAI_BASE_URL", "ANTHROPIC_BASE_URL"):
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def context():
    """Execution context for dispatcher tests"""
    return ExecutionContext("exec_20250101_120000_abcdef12", "wf-test")


@pytest.fixture
def test_config(tmp_path):
    """Config pointing every path at a temp directory"""
    return Config(
        data_path=str(tmp_path),
        workflows_path=str(tmp_path / "workflows"),
        saved_data_path=str(tmp_path / "store"),
        executions_path=str(tmp_path / "executions"),
        retry_backoff=0,
    )


@pytest.fixture
def network_handler():
    """Replies to every outbound request; tests may swap it out"""
    state = {"handler": lambda request: httpx.Response(200, json={"temp": 21})}

    def dispatch(request):
        return state["handler"](request)

    dispatch.state = state
    return dispatch


@pytest.fixture
def workflow_service(test_config, network_handler):
    """Fully wired WorkflowService backed by temp storage and a mocked network"""
    from forgeflow.main import build_workflow_service

    client = httpx.AsyncClient(transport=httpx.MockTransport(network_handler))
    return build_workflow_service(test_config, client)
