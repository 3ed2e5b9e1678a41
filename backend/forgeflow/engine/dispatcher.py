# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Node Dispatcher

Executes a single node according to its kind. Every failure is raised as a
NodeExecutionError; the executor turns it into a failed NodeResult.
"""

import logging
from typing import Any, Callable, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from forgeflow.core.config import get_provider_api_key
from forgeflow.core.errors import ValidationError
from forgeflow.core.logging import log_event

from .conditions import evaluate
from .context import ExecutionContext, utc_now_iso
from .exceptions import NodeExecutionError, ProviderError
from .interpolation import interpolate, is_object_shaped, resolve_path
from .models import (
    HTTP_METHODS,
    ActionConfig,
    AIInferenceConfig,
    ConditionalConfig,
    HTTPRequestConfig,
    NodeConfig,
    NodeKind,
    TriggerConfig,
    WorkflowNode,
)
from .retry import RetryPolicy, call_with_retry

DEFAULT_SAVE_KEY = "workflow_result"


class NodeDispatcher:
    """
    Dispatches nodes to their handlers.

    Collaborators:
        http_client - httpx.AsyncClient for HTTP request and webhook nodes
        providers   - ProviderRegistry for AI inference nodes
        kv_store    - KeyValueStore for "save" actions
        notifier    - notify(message, payload) for "notify" actions
        ledger      - record_execution(...) for "blockchain" actions
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        providers,
        kv_store,
        notifier,
        ledger,
        retry_policy: Optional[RetryPolicy] = None,
        default_provider: str = "huggingface",
        simulated_preview_chars: int = 50,
        credential_lookup: Callable[[str], Optional[str]] = get_provider_api_key,
        logger: Optional[logging.Logger] = None,
    ):
        self.http_client = http_client
        self.providers = providers
        self.kv_store = kv_store
        self.notifier = notifier
        self.ledger = ledger
        self.retry_policy = retry_policy or RetryPolicy()
        self.default_provider = default_provider
        self.simulated_preview_chars = simulated_preview_chars
        self.credential_lookup = credential_lookup
        self.logger = logger or logging.getLogger("forgeflow.engine.dispatcher")

    async def execute(self, node: WorkflowNode, input_data: Any, context: ExecutionContext) -> Any:
        """
        Execute node with the input gathered from its predecessors.

        Returns the node output. Raises NodeExecutionError on failure.
        """
        config = self._parse_config(node)
        policy = self.retry_policy.with_retries(config.retries)

        if node.kind == NodeKind.TRIGGER:
            return self._execute_trigger(config)
        elif node.kind == NodeKind.HTTP_REQUEST:
            return await self._execute_http_request(node, config, input_data, policy)
        elif node.kind == NodeKind.AI_INFERENCE:
            return await self._execute_ai_inference(node, config, input_data, policy)
        elif node.kind == NodeKind.CONDITIONAL:
            return self._execute_conditional(node, config, input_data)
        elif node.kind == NodeKind.ACTION:
            return await self._execute_action(node, config, input_data, context, policy)
        else:
            raise NodeExecutionError(f"Unknown node kind: {node.kind}", node_id=node.id)

    def _parse_config(self, node: WorkflowNode) -> NodeConfig:
        try:
            return node.typed_config()
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "config"
            raise NodeExecutionError(
                f"Invalid configuration: {location}: {first['msg']}",
                node_id=node.id
            )

    def _retry_logger(self, node: WorkflowNode) -> Callable[[int, BaseException], None]:
        def on_retry(attempt: int, error: BaseException) -> None:
            log_event(
                self.logger, "node_retry", level="WARNING",
                node_id=node.id, attempt=attempt, error=str(error)
            )
        return on_retry

    # ------------------------------------------------------------------
    # Trigger
    # ------------------------------------------------------------------

    def _execute_trigger(self, config: TriggerConfig) -> Dict[str, Any]:
        return {
            "triggered": True,
            "triggerType": config.trigger_type,
            "timestamp": utc_now_iso(),
        }

    # ------------------------------------------------------------------
    # HTTP request
    # ------------------------------------------------------------------

    async def _execute_http_request(
        self,
        node: WorkflowNode,
        config: HTTPRequestConfig,
        input_data: Any,
        policy: RetryPolicy
    ) -> Dict[str, Any]:
        if not config.url:
            raise NodeExecutionError("URL is required", node_id=node.id)
        if config.method not in HTTP_METHODS:
            raise NodeExecutionError(f"Unsupported HTTP method: {config.method}", node_id=node.id)

        url = config.url
        body = config.body
        sends_body = config.method in ("POST", "PUT")

        if is_object_shaped(input_data):
            url = interpolate(url, input_data)
            if sends_body and isinstance(body, str):
                body = interpolate(body, input_data)

        request_kwargs: Dict[str, Any] = {"headers": config.headers}
        if sends_body and body is not None:
            if isinstance(body, str):
                request_kwargs["content"] = body
            else:
                request_kwargs["json"] = body

        async def send() -> Dict[str, Any]:
            try:
                response = await self.http_client.request(config.method, url, **request_kwargs)
            except httpx.UnsupportedProtocol as e:
                raise NodeExecutionError(f"API call failed: {e}", node_id=node.id)
            except httpx.TransportError as e:
                raise NodeExecutionError(
                    f"API call failed: {str(e) or type(e).__name__}",
                    node_id=node.id,
                    retryable=True
                )
            except httpx.InvalidURL as e:
                raise NodeExecutionError(f"API call failed: {e}", node_id=node.id)

            if not response.is_success:
                raise NodeExecutionError(
                    f"HTTP {response.status_code}: {response.text}",
                    node_id=node.id,
                    retryable=response.status_code == 429 or response.status_code >= 500
                )

            if "json" in response.headers.get("content-type", ""):
                try:
                    data = response.json()
                except ValueError:
                    data = response.text
            else:
                data = response.text

            return {"status": response.status_code, "data": data}

        return await call_with_retry(send, policy, self._retry_logger(node))

    # ------------------------------------------------------------------
    # AI inference
    # ------------------------------------------------------------------

    async def _execute_ai_inference(
        self,
        node: WorkflowNode,
        config: AIInferenceConfig,
        input_data: Any,
        policy: RetryPolicy
    ) -> Dict[str, Any]:
        if not config.prompt:
            raise NodeExecutionError("Prompt is required", node_id=node.id)

        prompt = config.prompt
        if is_object_shaped(input_data):
            prompt = interpolate(prompt, input_data)

        provider_name = config.provider or self.default_provider
        provider = self.providers.get(provider_name)
        credentials = config.api_key or self.credential_lookup(provider_name)

        model = config.model_id
        if not model:
            model = provider.default_model if provider is not None else provider_name

        # No credential: answer with a simulated response, registered provider or not
        if not credentials:
            preview = prompt[:self.simulated_preview_chars]
            return {
                "model": model,
                "provider": provider_name,
                "prompt": prompt,
                "response": f'[Demo Mode] AI would process: "{preview}..."',
                "simulated": True,
            }

        if provider is None:
            raise NodeExecutionError(f"Unknown AI provider: {provider_name}", node_id=node.id)

        async def infer() -> Any:
            return await provider.infer(
                prompt,
                model,
                credentials,
                system_prompt=config.system_prompt,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
            )

        try:
            response = await call_with_retry(infer, policy, self._retry_logger(node))
        except ProviderError as e:
            raise NodeExecutionError(f"AI call failed: {e.message}", node_id=node.id)

        return {"model": model, "provider": provider_name, "response": response}

    # ------------------------------------------------------------------
    # Conditional
    # ------------------------------------------------------------------

    def _execute_conditional(
        self,
        node: WorkflowNode,
        config: ConditionalConfig,
        input_data: Any
    ) -> Dict[str, Any]:
        if not config.path:
            raise NodeExecutionError("Condition path is required", node_id=node.id)

        actual_value = resolve_path(input_data, config.path)
        result = evaluate(config.operator, actual_value, config.value)

        return {
            "path": config.path,
            "operator": config.operator,
            "value": config.value,
            "actualValue": actual_value,
            "result": result,
            "branch": "true" if result else "false",
            "input": input_data,
        }

    # ------------------------------------------------------------------
    # Action
    # ------------------------------------------------------------------

    async def _execute_action(
        self,
        node: WorkflowNode,
        config: ActionConfig,
        input_data: Any,
        context: ExecutionContext,
        policy: RetryPolicy
    ) -> Dict[str, Any]:
        action = config.action_type

        if action == "save":
            key = config.destination or DEFAULT_SAVE_KEY
            try:
                await self.kv_store.put(key, input_data)
            except ValidationError as e:
                raise NodeExecutionError(e.message, node_id=node.id)
            return {"saved": True, "key": key, "data": input_data}

        elif action == "notify":
            message = config.message or f"Workflow notification from {node.label}"
            if is_object_shaped(input_data):
                message = interpolate(message, input_data)
            await self.notifier.notify(message, input_data)
            return {"notified": True, "message": message, "input": input_data}

        elif action == "webhook":
            return await self._send_webhook(node, config, input_data, policy)

        elif action == "blockchain":
            async def record() -> Any:
                return await self.ledger.record_execution(
                    context.workflow_id,
                    context.execution_id,
                    input_data,
                    input_data is not None,
                )
            return await call_with_retry(record, policy, self._retry_logger(node))

        return {"action": action, "input": input_data}

    async def _send_webhook(
        self,
        node: WorkflowNode,
        config: ActionConfig,
        input_data: Any,
        policy: RetryPolicy
    ) -> Dict[str, Any]:
        if not config.webhook_url:
            raise NodeExecutionError("Webhook URL is required", node_id=node.id)

        async def post() -> Dict[str, Any]:
            try:
                response = await self.http_client.post(config.webhook_url, json=input_data)
            except httpx.UnsupportedProtocol as e:
                raise NodeExecutionError(f"Webhook failed: {e}", node_id=node.id)
            except httpx.TransportError as e:
                raise NodeExecutionError(
                    f"Webhook failed: {str(e) or type(e).__name__}",
                    node_id=node.id,
                    retryable=True
                )
            except httpx.InvalidURL as e:
                raise NodeExecutionError(f"Webhook failed: {e}", node_id=node.id)

            # The receiver's answer is reported, not judged
            return {"sent": True, "status": response.status_code}

        return await call_with_retry(post, policy, self._retry_logger(node))
