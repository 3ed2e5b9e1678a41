# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
ForgeFlow Backend - Main API
Validates and executes workflow graphs
"""
# Load environment variables from .env file (local development)
from dotenv import load_dotenv
from pathlib import Path as _PathForEnv
_env_path = _PathForEnv(__file__).parent.parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from forgeflow.api import demos, execution, executions, workflows
from forgeflow.core.config import Config, get_config
from forgeflow.core.logging import get_engine_logger, get_logger
from forgeflow.engine.dispatcher import NodeDispatcher
from forgeflow.engine.executor import WorkflowExecutor
from forgeflow.engine.retry import RetryPolicy
from forgeflow.integrations.ledger import HTTPLedgerWriter, LocalLedgerWriter
from forgeflow.integrations.notifier import LogNotifier
from forgeflow.integrations.providers import build_default_registry
from forgeflow.services.workflow_service import WorkflowService
from forgeflow.storage.execution_store import ExecutionStore
from forgeflow.storage.kv_store import KeyValueStore

app = FastAPI(
    title="ForgeFlow",
    description="Workflow automation backend",
    version="0.1.0",
)

# Initialize configuration
config = get_config()
logger = get_logger("forgeflow.main", log_level=config.log_level, log_format=config.log_format)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(execution.router)
app.include_router(workflows.router)
app.include_router(executions.router)
app.include_router(demos.router)


def build_workflow_service(config: Config, http_client: httpx.AsyncClient) -> WorkflowService:
    """Wire stores, collaborators, dispatcher and executor into a WorkflowService"""
    if config.ledger_url:
        ledger = HTTPLedgerWriter(config.ledger_url, http_client)
    else:
        ledger = LocalLedgerWriter()

    dispatcher = NodeDispatcher(
        http_client=http_client,
        providers=build_default_registry(http_client, timeout=config.http_timeout),
        kv_store=KeyValueStore(Path(config.saved_data_path)),
        notifier=LogNotifier(),
        ledger=ledger,
        retry_policy=RetryPolicy(
            max_retries=config.max_retries,
            backoff=config.retry_backoff,
            backoff_max=config.retry_backoff_max,
        ),
        default_provider=config.default_provider,
        simulated_preview_chars=config.simulated_preview_chars,
        logger=get_engine_logger("dispatcher"),
    )
    executor = WorkflowExecutor(
        dispatcher,
        node_timeout=config.node_timeout,
        logger=get_engine_logger("executor"),
    )

    return WorkflowService(
        workflow_store=KeyValueStore(Path(config.workflows_path)),
        execution_store=ExecutionStore(Path(config.executions_path)),
        executor=executor,
        ledger=ledger,
        require_trigger=config.require_trigger,
        record_runs_on_ledger=config.record_runs_on_ledger,
    )


@app.on_event("startup")
async def startup():
    """Store runtime objects in app.state for dependency injection"""
    http_client = httpx.AsyncClient(timeout=config.http_timeout)
    service = build_workflow_service(config, http_client)

    app.state.http_client = http_client
    app.state.workflow_service = service
    app.state.executor = service.executor

    logger.info(f"ForgeFlow backend ready (data: {config.data_path})")


@app.on_event("shutdown")
async def shutdown():
    http_client = getattr(app.state, "http_client", None)
    if http_client is not None:
        await http_client.aclose()


@app.get("/health")
async def health():
    """Health check"""
    return {"status": "ok", "service": "forgeflow-backend"}


def run():
    import uvicorn

    uvicorn.run(app, host=config.service_host, port=config.service_port)


if __name__ == "__main__":
    run()
