# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Graph

Read-only lookup view over a workflow definition. Built once per run and never
mutated, so one graph can back several concurrent executions.
"""

from typing import Dict, List, Optional, Tuple

from .models import Workflow, WorkflowNode, WorkflowEdge, NodeKind


class WorkflowGraph:
    """
    Adjacency index for a workflow.

    Edges pointing at unknown node ids are kept in the edge list but ignored by
    node lookups; the validator reports them.
    """

    def __init__(self, workflow: Workflow):
        self.workflow = workflow
        self._nodes: Dict[str, WorkflowNode] = {}
        self._outgoing: Dict[str, List[WorkflowEdge]] = {}
        self._incoming: Dict[str, List[WorkflowEdge]] = {}

        for node in workflow.nodes:
            # First definition wins for duplicate ids
            if node.id not in self._nodes:
                self._nodes[node.id] = node
                self._outgoing[node.id] = []
                self._incoming[node.id] = []

        for edge in workflow.edges:
            if edge.source in self._outgoing:
                self._outgoing[edge.source].append(edge)
            if edge.target in self._incoming:
                self._incoming[edge.target].append(edge)

    @property
    def workflow_id(self) -> str:
        return self.workflow.id

    @property
    def nodes(self) -> Tuple[WorkflowNode, ...]:
        """Nodes in definition order (duplicates dropped)"""
        return tuple(self._nodes.values())

    @property
    def edges(self) -> Tuple[WorkflowEdge, ...]:
        return tuple(self.workflow.edges)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> Optional[WorkflowNode]:
        return self._nodes.get(node_id)

    def outgoing_edges(self, node_id: str) -> List[WorkflowEdge]:
        return list(self._outgoing.get(node_id, []))

    def incoming_edges(self, node_id: str) -> List[WorkflowEdge]:
        return list(self._incoming.get(node_id, []))

    def successors(self, node_id: str) -> List[str]:
        """Target ids of outgoing edges, in edge order"""
        return [edge.target for edge in self._outgoing.get(node_id, [])]

    def predecessors(self, node_id: str) -> List[str]:
        """Source ids of incoming edges, in edge order"""
        return [edge.source for edge in self._incoming.get(node_id, [])]

    def nodes_of_kind(self, kind: NodeKind) -> List[WorkflowNode]:
        return [node for node in self._nodes.values() if node.kind == kind]
