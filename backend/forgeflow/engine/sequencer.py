# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Topological Sequencer

Execution order using Kahn's algorithm.
"""

from collections import deque
from typing import Dict, List

from .graph import WorkflowGraph
from .models import WorkflowNode


def topological_order(graph: WorkflowGraph) -> List[WorkflowNode]:
    """
    Perform topological sort using Kahn's algorithm.

    Ties are broken by queue order: start nodes in definition order, then
    nodes in the order they became eligible. Nodes on a cycle, or reachable
    only through one, never reach in-degree zero and are left out. Cycles are
    the validator's concern; this function never raises.
    """
    in_degree: Dict[str, int] = {node.id: 0 for node in graph.nodes}

    for edge in graph.edges:
        if edge.target in in_degree:
            in_degree[edge.target] += 1

    # Find start nodes (no incoming edges)
    queue = deque([node_id for node_id, degree in in_degree.items() if degree == 0])
    order: List[WorkflowNode] = []

    while queue:
        node_id = queue.popleft()
        order.append(graph.get_node(node_id))

        # Reduce in-degree for neighbors
        for neighbor in graph.successors(node_id):
            if neighbor not in in_degree:
                continue
            in_degree[neighbor] -= 1
            if in_degree[neighbor] == 0:
                queue.append(neighbor)

    return order


def topological_node_ids(graph: WorkflowGraph) -> List[str]:
    """Same as topological_order, as node ids"""
    return [node.id for node in topological_order(graph)]
