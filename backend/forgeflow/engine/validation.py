# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Validation

Static checks run before a workflow is executed: structure, connectivity,
cycles and per-kind configuration. Problems are collected into a list and
never raised.
"""

from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from .graph import WorkflowGraph
from .models import (
    Workflow,
    NodeKind,
    ValidationResult,
    HTTPRequestConfig,
    AIInferenceConfig,
    ConditionalConfig,
)

CYCLE_ERROR = "Workflow contains a cycle (loops are not allowed)"


def validate_workflow(workflow: Optional[Workflow], require_trigger: bool = True) -> ValidationResult:
    """
    Validate workflow structure and node configuration.

    Only a missing workflow and an empty workflow return early; every other
    check adds to the same error list. Calling this twice on the same workflow
    gives the same result.
    """
    # 1. Workflow must exist
    if workflow is None:
        return ValidationResult(valid=False, errors=["Workflow is required"])

    # 2. Empty workflow check
    if not workflow.nodes:
        return ValidationResult(valid=False, errors=["Workflow must have at least one node"])

    errors: List[str] = []

    # 3. Duplicate node IDs
    node_ids = [node.id for node in workflow.nodes]
    duplicates = []
    for nid in node_ids:
        if node_ids.count(nid) > 1 and nid not in duplicates:
            duplicates.append(nid)
    if duplicates:
        errors.append(f"Duplicate node IDs found: {', '.join(duplicates)}")

    # 4. Invalid edge references
    node_id_set = set(node_ids)
    for edge in workflow.edges:
        if edge.source not in node_id_set:
            errors.append(f"Edge references non-existent node: {edge.source}")
        if edge.target not in node_id_set:
            errors.append(f"Edge references non-existent node: {edge.target}")

    graph = WorkflowGraph(workflow)

    # 5. Trigger nodes
    if require_trigger and not graph.nodes_of_kind(NodeKind.TRIGGER):
        errors.append("Workflow must have at least one Trigger node")

    # 6. Disconnected nodes (actions may be pure sinks)
    for node in graph.nodes:
        if node.kind in (NodeKind.TRIGGER, NodeKind.ACTION):
            continue
        if not graph.incoming_edges(node.id) and not graph.outgoing_edges(node.id):
            errors.append(f'Node "{node.label}" is disconnected')

    # 7. Cycles
    if has_cycle(graph):
        errors.append(CYCLE_ERROR)

    # 8. Node configuration
    errors.extend(_validate_node_configs(graph))

    return ValidationResult(valid=len(errors) == 0, errors=errors)


def has_cycle(graph: WorkflowGraph) -> bool:
    """
    Depth-first search with a recursion stack.

    Stops at the first back edge. Iterative so long chains do not hit the
    interpreter's recursion limit.
    """
    visited = set()
    on_stack = set()

    for start in graph.nodes:
        if start.id in visited:
            continue

        visited.add(start.id)
        on_stack.add(start.id)
        stack = [(start.id, iter(graph.successors(start.id)))]

        while stack:
            node_id, neighbors = stack[-1]
            advanced = False

            for neighbor in neighbors:
                if neighbor not in graph:
                    continue
                if neighbor in on_stack:
                    return True
                if neighbor not in visited:
                    visited.add(neighbor)
                    on_stack.add(neighbor)
                    stack.append((neighbor, iter(graph.successors(neighbor))))
                    advanced = True
                    break

            if not advanced:
                stack.pop()
                on_stack.discard(node_id)

    return False


def _validate_node_configs(graph: WorkflowGraph) -> List[str]:
    errors = []

    for node in graph.nodes:
        try:
            config = node.typed_config()
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ())) or "config"
            errors.append(f'Node "{node.label}" has invalid configuration: {location}: {first.get("msg")}')
            continue

        if isinstance(config, HTTPRequestConfig) and not config.url:
            errors.append(f'HTTP request node "{node.label}" is missing URL')
        elif isinstance(config, AIInferenceConfig) and not config.prompt:
            errors.append(f'AI inference node "{node.label}" is missing prompt')
        elif isinstance(config, ConditionalConfig) and not config.path:
            errors.append(f'Conditional node "{node.label}" is missing condition path')

    return errors
