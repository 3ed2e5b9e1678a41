# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Engine Models

Pydantic models for workflow definitions, node configuration and execution
records. Field names are snake_case in Python and camelCase on the wire.
"""

from enum import Enum
from typing import List, Dict, Any, Optional, Type
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


# ============================================================================
# Node Kinds
# ============================================================================

class NodeKind(str, Enum):
    """
    Supported workflow node kinds.

        TRIGGER - Starts a workflow, produces a timestamp
        HTTP_REQUEST - Calls an HTTP endpoint
        AI_INFERENCE - Sends a prompt to an inference provider
        CONDITIONAL - Evaluates a condition against its input
        ACTION - Terminal side effect (save, notify, webhook, blockchain)
    """
    TRIGGER = "trigger"
    HTTP_REQUEST = "http_request"
    AI_INFERENCE = "ai_inference"
    CONDITIONAL = "conditional"
    ACTION = "action"


# Node type names used by canvas exports
LEGACY_KIND_NAMES = {
    "api": NodeKind.HTTP_REQUEST,
    "ai": NodeKind.AI_INFERENCE,
    "logic": NodeKind.CONDITIONAL,
}

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE")


class NodeStatus(str, Enum):
    """Per-run state of a single node"""
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ExecutionStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


# ============================================================================
# Node Configuration (one model per kind)
# ============================================================================

class NodeConfig(CamelModel):
    """
    Settings shared by every node kind.

    Unknown keys are kept so canvas-only data (colours, notes) round-trips.
    """
    model_config = ConfigDict(extra="allow")

    label: Optional[str] = None
    description: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0, description="Per-node deadline in seconds")
    retries: Optional[int] = Field(default=None, ge=0, le=10, description="Retry attempts for external calls")


class TriggerConfig(NodeConfig):
    trigger_type: str = "manual"
    interval: Optional[float] = None
    interval_unit: Optional[str] = None
    event_condition: Optional[str] = None


class HTTPRequestConfig(NodeConfig):
    """
    Example:
        {
            "url": "https://api.example.com/items/{{id}}",
            "method": "POST",
            "headers": {"Content-Type": "application/json"},
            "body": "{\"name\": \"{{name}}\"}"
        }
    """
    url: Optional[str] = None
    method: str = "GET"
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[Any] = None

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v):
        if v is None:
            return "GET"
        return str(v).upper()


class AIInferenceConfig(NodeConfig):
    """
    Example:
        {
            "prompt": "Summarise: {{data.text}}",
            "provider": "openrouter",
            "modelId": "openai/gpt-3.5-turbo",
            "temperature": 0.7,
            "maxTokens": 500
        }
    """
    prompt: Optional[str] = Field(default=None, validation_alias=AliasChoices("prompt", "userPrompt"))
    system_prompt: Optional[str] = None
    provider: Optional[str] = Field(default=None, validation_alias=AliasChoices("provider", "model"))
    model_id: Optional[str] = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=500, gt=0)
    api_key: Optional[str] = None


class ConditionalConfig(NodeConfig):
    """
    Example:
        {"path": "data.temperature", "operator": "greater", "value": "20"}
    """
    path: Optional[str] = Field(default=None, validation_alias=AliasChoices("path", "condition"))
    operator: str = "equals"
    value: Optional[Any] = None


class ActionConfig(NodeConfig):
    action_type: Optional[str] = None
    destination: Optional[str] = None
    webhook_url: Optional[str] = None
    message: Optional[str] = None


NODE_CONFIG_MODELS: Dict[NodeKind, Type[NodeConfig]] = {
    NodeKind.TRIGGER: TriggerConfig,
    NodeKind.HTTP_REQUEST: HTTPRequestConfig,
    NodeKind.AI_INFERENCE: AIInferenceConfig,
    NodeKind.CONDITIONAL: ConditionalConfig,
    NodeKind.ACTION: ActionConfig,
}


# ============================================================================
# Workflow Definition
# ============================================================================

class NodePosition(BaseModel):
    """Canvas position - no execution meaning"""
    x: float = 0
    y: float = 0


class WorkflowNode(CamelModel):
    """Single node in a workflow"""
    id: str
    kind: NodeKind = Field(validation_alias=AliasChoices("kind", "type"))
    position: NodePosition = Field(default_factory=NodePosition)
    config: Dict[str, Any] = Field(default_factory=dict, validation_alias=AliasChoices("config", "data"))

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v):
        if isinstance(v, str):
            return LEGACY_KIND_NAMES.get(v, v)
        return v

    @field_validator("config", mode="before")
    @classmethod
    def default_config(cls, v):
        return v if v is not None else {}

    @property
    def label(self) -> str:
        """Human-readable name used in messages"""
        return self.config.get("label") or self.id

    def typed_config(self) -> NodeConfig:
        """
        Parse the raw config into the model for this node's kind.

        Raises pydantic.ValidationError when the config has the wrong shape.
        """
        return NODE_CONFIG_MODELS[self.kind].model_validate(self.config)


class WorkflowEdge(CamelModel):
    """Connection between workflow nodes"""
    id: Optional[str] = None
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None


class Workflow(CamelModel):
    """Complete workflow definition"""
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = "Untitled Workflow"
    description: Optional[str] = None
    active: bool = True
    nodes: List[WorkflowNode] = Field(default_factory=list)
    edges: List[WorkflowEdge] = Field(default_factory=list)
    owner: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize to the interchange format"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================================
# Validation & Execution Results
# ============================================================================

class ValidationResult(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)


class NodeResult(CamelModel):
    """Outcome of one node in one run"""
    node_id: str
    success: bool
    output: Optional[Any] = None
    error: Optional[str] = None
    duration_ms: int = 0
    timestamp: Optional[str] = None


class ExecutionRecord(CamelModel):
    """Execution record - returned by /api/execute"""
    workflow_id: Optional[str] = None
    execution_id: str
    status: ExecutionStatus = ExecutionStatus.RUNNING
    results: List[NodeResult] = Field(default_factory=list)
    started_at: str
    completed_at: Optional[str] = None

    @property
    def failed_nodes(self) -> List[str]:
        return [r.node_id for r in self.results if not r.success]

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
