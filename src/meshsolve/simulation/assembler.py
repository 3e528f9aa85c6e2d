# src/meshsolve/simulation/assembler.py

import logging
from typing import List, Optional

import numpy as np

from ..analysis import TopologyAnalyzer, TopologyAnalysisResults
from ..topology import CircuitTopology
from ..validation import (
    MalformedTopologyError,
    TopologyValidator,
    ValidationIssue,
    ValidationIssueLevel,
)
from .exceptions import DimensionMismatchError
from .results import LinearSystem


logger = logging.getLogger(__name__)


class MeshAssembler:
    """
    Builds the mesh-current linear system of a circuit topology.

    Mesh declaration order defines the row and column indices. The diagonal holds
    each mesh's total self-impedance; an off-diagonal entry holds the negated
    impedance of the single branch two meshes share, or zero when they share none.
    The negative sign follows from adjacent mesh currents circulating in the same
    rotational sense.
    """
    def __init__(self, topology: CircuitTopology):
        if not isinstance(topology, CircuitTopology):
            raise TypeError("MeshAssembler requires a CircuitTopology object.")
        self.topology: CircuitTopology = topology
        self.analysis: Optional[TopologyAnalysisResults] = None
        self.issues: List[ValidationIssue] = []

    def validate(self) -> List[ValidationIssue]:
        """
        Checks the topology and raises on any error-level issue.

        Returns:
            The warnings and info messages found.

        Raises:
            MalformedTopologyError: If the topology violates the planar mesh model.
        """
        self.analysis = TopologyAnalyzer(self.topology).analyze()
        self.issues = TopologyValidator(self.topology, self.analysis).validate()
        for issue in self.issues:
            if issue.level == ValidationIssueLevel.WARNING:
                logger.warning(str(issue))
        if any(issue.is_error for issue in self.issues):
            raise MalformedTopologyError(self.issues)
        return self.issues

    def assemble(self) -> LinearSystem:
        """
        Validates the topology and assembles its impedance matrix and voltage vector.

        Raises:
            MalformedTopologyError: If the topology violates the planar mesh model.
            DimensionMismatchError: If the assembled system is inconsistent in size.
        """
        self.validate()
        meshes = self.topology.meshes
        dim = len(meshes)
        if dim == 0:
            raise DimensionMismatchError(details="Cannot assemble a linear system for a circuit with no meshes.", expected=1, found=0)

        impedance_matrix = np.zeros((dim, dim), dtype=float)
        voltages = np.zeros(dim, dtype=float)

        for i, mesh in enumerate(meshes):
            voltages[i] = mesh.voltage_source
            impedance_matrix[i, i] = mesh.impedance

        for i, mesh in enumerate(meshes):
            for j, other in enumerate(meshes):
                if i == j:
                    continue
                common = self._common_branch(mesh.mesh_id, other.mesh_id)
                if common is not None:
                    impedance_matrix[i, j] -= self.topology.get_branch(common).impedance

        mesh_ids = [mesh.mesh_id for mesh in meshes]
        self._check_dimensions(impedance_matrix, voltages, mesh_ids)
        logger.info(f"Assembled {dim}x{dim} impedance matrix for circuit '{self.topology.name}'.")
        logger.debug(f"Impedance matrix:\n{impedance_matrix}\nVoltages: {voltages}")
        return LinearSystem(impedance_matrix=impedance_matrix, voltages=voltages, mesh_ids=mesh_ids)

    def _common_branch(self, mesh_id: str, other_mesh_id: str) -> Optional[str]:
        shared = self.analysis.shared_between(mesh_id, other_mesh_id)
        if not shared:
            return None
        if len(shared) > 1:
            # validate() rejects this, so reaching it means the topology changed after validation.
            raise RuntimeError(
                f"Meshes '{mesh_id}' and '{other_mesh_id}' share {len(shared)} branches after validation. "
                "This is a framework logic error."
            )
        return shared[0]

    def _check_dimensions(self, matrix: np.ndarray, voltages: np.ndarray, mesh_ids: List[str]):
        n = self.topology.mesh_count
        if matrix.shape != (n, n):
            raise DimensionMismatchError(details=f"Impedance matrix shape {matrix.shape} does not match the mesh count.", expected=n, found=matrix.shape[0])
        if voltages.shape != (n,):
            raise DimensionMismatchError(details="Voltage vector length does not match the mesh count.", expected=n, found=voltages.shape[0])
        if len(mesh_ids) != n:
            raise DimensionMismatchError(details="Mesh id list does not match the mesh count.", expected=n, found=len(mesh_ids))
