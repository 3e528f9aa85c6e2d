# src/meshsolve/analysis/results.py
"""
Defines the formal, type-safe data contract for the result of a topology analysis.

The result is a frozen dataclass so that, once computed, the shared-branch
relation consumed by the assembler and the validator cannot be modified.
"""
from dataclasses import dataclass
from typing import Dict, List, Tuple

import networkx as nx


@dataclass(frozen=True)
class TopologyAnalysisResults:
    """
    The result of analysing which meshes share which branches.

    Attributes:
        mesh_graph: Undirected graph with one node per mesh and one edge per pair
                    of meshes that share at least one branch. Each edge carries a
                    `branches` attribute listing the shared branch identifiers.
        branch_users: Mapping branch_id -> mesh ids traversing it, in mesh order.
                      Contains every branch owned by the topology, including
                      branches traversed by no mesh.
        shared_branches: Mapping (mesh_id, other_mesh_id) -> shared branch ids,
                         stored under both orderings of the pair.
        isolated_meshes: Meshes sharing no branch with any other mesh.
        connected_groups: Groups of meshes coupled through shared branches.
    """
    mesh_graph: nx.Graph
    branch_users: Dict[str, List[str]]
    shared_branches: Dict[Tuple[str, str], List[str]]
    isolated_meshes: List[str]
    connected_groups: List[List[str]]

    def shared_between(self, mesh_id: str, other_mesh_id: str) -> List[str]:
        """Branch identifiers shared by two meshes, empty when they are not adjacent."""
        return self.shared_branches.get((mesh_id, other_mesh_id), [])
