# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Engine

Graph model, validation, sequencing, node dispatch and execution.
"""

from .models import Workflow, WorkflowNode, WorkflowEdge, NodeKind, ExecutionRecord, NodeResult, ValidationResult
from .validation import validate_workflow
from .sequencer import topological_order
from .dispatcher import NodeDispatcher
from .executor import WorkflowExecutor

__all__ = [
    "Workflow",
    "WorkflowNode",
    "WorkflowEdge",
    "NodeKind",
    "ExecutionRecord",
    "NodeResult",
    "ValidationResult",
    "validate_workflow",
    "topological_order",
    "NodeDispatcher",
    "WorkflowExecutor",
]
