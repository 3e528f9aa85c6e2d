# src/meshsolve/simulation/results.py
"""
Defines the formal, immutable data contracts passed between the numerical stages
and handed to the reporting layer.
"""
from dataclasses import dataclass
from typing import List, Optional

import numpy as np


@dataclass(frozen=True)
class LinearSystem:
    """
    The mesh-current equations `impedance_matrix @ currents = voltages`.

    Attributes:
        impedance_matrix: Square (n x n) float64 matrix, n being the mesh count.
        voltages: Length-n vector of aggregate mesh voltage sources.
        mesh_ids: Mesh identifiers in row/column order.
    """
    impedance_matrix: np.ndarray
    voltages: np.ndarray
    mesh_ids: List[str]

    @property
    def dimension(self) -> int:
        return len(self.mesh_ids)


@dataclass(frozen=True)
class LUFactors:
    """Doolittle factors of a square matrix: unit lower triangular and upper triangular."""
    lower: np.ndarray
    upper: np.ndarray

    @property
    def dimension(self) -> int:
        return self.lower.shape[0]


@dataclass(frozen=True)
class MeshResult:
    mesh_id: str
    current: float


@dataclass(frozen=True)
class ElementPower:
    element_id: str
    impedance: float
    power: float


@dataclass(frozen=True)
class BranchResult:
    branch_id: str
    current: float
    elements: List[ElementPower]


@dataclass(frozen=True)
class SolveResult:
    """
    The final, user-facing result of solving one circuit.

    Attributes:
        circuit_name: Name of the solved circuit.
        meshes: Per-mesh loop currents, in mesh declaration order.
        branches: Per-branch currents and per-element dissipated power, in order
                  of first appearance of each branch.
        loop_currents: Raw solution vector, aligned with `meshes`.
        system: The linear system that was solved, when available.
    """
    circuit_name: str
    meshes: List[MeshResult]
    branches: List[BranchResult]
    loop_currents: np.ndarray
    system: Optional[LinearSystem] = None

    def mesh_current(self, mesh_id: str) -> float:
        for mesh in self.meshes:
            if mesh.mesh_id == mesh_id:
                return mesh.current
        raise KeyError(mesh_id)

    def branch(self, branch_id: str) -> BranchResult:
        for branch in self.branches:
            if branch.branch_id == branch_id:
                return branch
        raise KeyError(branch_id)

    @property
    def total_dissipated_power(self) -> float:
        return sum(element.power for branch in self.branches for element in branch.elements)
