# src/meshsolve/analysis/tools.py
import logging
from itertools import combinations
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

import networkx as nx

from .results import TopologyAnalysisResults
from .exceptions import TopologyAnalysisError

if TYPE_CHECKING:
    from ..topology import CircuitTopology

logger = logging.getLogger(__name__)


class TopologyAnalyzer:
    """
    Works out the mesh adjacency of a circuit topology.

    Two meshes are adjacent when they share a branch. The adjacency is kept as a
    networkx graph whose edges record the shared branch identifiers; the
    assembler reads the off-diagonal structure of the impedance matrix from it
    and the validator checks the planar mesh assumptions against it.
    """
    def __init__(self, topology: "CircuitTopology"):
        self.topology = topology
        self._analysis_results: Optional[TopologyAnalysisResults] = None
        logger.debug(f"TopologyAnalyzer initialized for circuit '{topology.name}'.")

    def analyze(self) -> TopologyAnalysisResults:
        """
        Performs the analysis once and returns the cached result afterwards.

        Returns:
            The immutable TopologyAnalysisResults for this topology.
        """
        if self._analysis_results is not None:
            return self._analysis_results

        try:
            branch_users = self._collect_branch_users()
            mesh_graph, shared = self._build_mesh_graph(branch_users)
            isolated = [mesh_id for mesh_id in mesh_graph.nodes if mesh_graph.degree(mesh_id) == 0]
            mesh_order = {mesh.mesh_id: idx for idx, mesh in enumerate(self.topology.meshes)}
            groups = [
                sorted(component, key=mesh_order.__getitem__)
                for component in nx.connected_components(mesh_graph)
            ]
            groups.sort(key=lambda group: mesh_order[group[0]])
        except Exception as e:
            raise TopologyAnalysisError(
                circuit_name=self.topology.name,
                details=f"An unexpected error occurred during topology analysis: {e}"
            ) from e

        self._analysis_results = TopologyAnalysisResults(
            mesh_graph=mesh_graph,
            branch_users=branch_users,
            shared_branches=shared,
            isolated_meshes=isolated,
            connected_groups=groups,
        )
        logger.debug(
            f"Topology of '{self.topology.name}': {mesh_graph.number_of_nodes()} meshes, "
            f"{mesh_graph.number_of_edges()} adjacencies, {len(groups)} coupled group(s)."
        )
        return self._analysis_results

    def _collect_branch_users(self) -> Dict[str, List[str]]:
        """Maps every branch to the meshes traversing it, in mesh order."""
        users: Dict[str, List[str]] = {branch.branch_id: [] for branch in self.topology.branches}
        for mesh in self.topology.meshes:
            for branch_id in mesh.branch_ids:
                users.setdefault(branch_id, []).append(mesh.mesh_id)
        return users

    def _build_mesh_graph(
        self, branch_users: Dict[str, List[str]]
    ) -> Tuple[nx.Graph, Dict[Tuple[str, str], List[str]]]:
        graph = nx.Graph()
        graph.add_nodes_from(mesh.mesh_id for mesh in self.topology.meshes)
        shared: Dict[Tuple[str, str], List[str]] = {}

        for branch_id, mesh_ids in branch_users.items():
            for mesh_a, mesh_b in combinations(mesh_ids, 2):
                if graph.has_edge(mesh_a, mesh_b):
                    graph.edges[mesh_a, mesh_b]['branches'].append(branch_id)
                else:
                    graph.add_edge(mesh_a, mesh_b, branches=[branch_id])
                    # Both orderings point at the same list held by the edge.
                    shared[(mesh_a, mesh_b)] = graph.edges[mesh_a, mesh_b]['branches']
                    shared[(mesh_b, mesh_a)] = graph.edges[mesh_a, mesh_b]['branches']
        return graph, shared
