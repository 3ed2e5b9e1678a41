# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Engine Exceptions

Exceptions raised inside the execution engine. Node-level exceptions never
escape a run: the executor records them as failed NodeResults.
"""


class WorkflowEngineException(Exception):
    """Base exception for the workflow engine"""
    pass


class NodeExecutionError(WorkflowEngineException):
    """
    Node execution failed.

    `retryable` marks failures worth another attempt (transport errors,
    throttling, upstream 5xx).
    """
    def __init__(self, message: str, node_id: str = None, retryable: bool = False):
        self.message = message
        self.node_id = node_id
        self.retryable = retryable
        super().__init__(message)


class NodeTimeoutError(NodeExecutionError):
    """Node execution exceeded its deadline"""
    def __init__(self, node_id: str, timeout: float):
        super().__init__(
            f"Node '{node_id}' exceeded timeout ({timeout:g}s)",
            node_id=node_id
        )
        self.timeout = timeout


class ProviderError(NodeExecutionError):
    """Inference provider returned an error or an unusable response"""
    def __init__(self, provider: str, message: str, retryable: bool = False):
        super().__init__(f"{provider} API error: {message}", retryable=retryable)
        self.provider = provider
