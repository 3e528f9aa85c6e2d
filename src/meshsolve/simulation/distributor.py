# src/meshsolve/simulation/distributor.py
import logging
from typing import List, Optional

import numpy as np

from ..data_structures import Branch
from ..topology import CircuitTopology
from .config import BranchCurrentMode
from .exceptions import DimensionMismatchError
from .results import BranchResult, ElementPower, LinearSystem, MeshResult, SolveResult

logger = logging.getLogger(__name__)


def _heuristic_branch_current(topology: CircuitTopology, branch: Branch) -> float:
    """
    First mesh listing the branch sets the current with its own sign. Each later
    mesh is added while the accumulated current is exactly zero; otherwise a
    positive mesh current is subtracted and a non-positive one is added.
    """
    current = 0.0
    first = True
    for mesh in topology.meshes_traversing(branch.branch_id):
        if first:
            current = mesh.current
            first = False
        elif current == 0.0:
            current += mesh.current
        elif mesh.current > 0.0:
            current -= mesh.current
        else:
            current += mesh.current
    return current


def _oriented_branch_current(topology: CircuitTopology, branch: Branch) -> float:
    """Signed sum of the mesh currents, each weighted by its traversal orientation."""
    current = 0.0
    for mesh in topology.meshes_traversing(branch.branch_id):
        current += mesh.orientation_of(branch.branch_id) * mesh.current
    return current


def distribute_currents(
    topology: CircuitTopology,
    currents,
    mode: BranchCurrentMode = BranchCurrentMode.HEURISTIC,
    system: Optional[LinearSystem] = None,
) -> SolveResult:
    """
    Writes the solved loop currents back onto the meshes and branches of a topology.

    Each mesh receives `currents[i]` (same order as the assembled system). Each
    branch receives one current, combined from the meshes traversing it according
    to `mode`, and one dissipated power value per resistive element (I**2 * R with
    the branch current).

    Returns:
        A SolveResult snapshot of the distributed values.

    Raises:
        DimensionMismatchError: If the current vector does not match the mesh count.
        RuntimeError: If the topology already holds solved currents.
    """
    loop_currents = np.asarray(currents, dtype=float)
    meshes = topology.meshes
    if loop_currents.ndim != 1 or loop_currents.shape[0] != len(meshes):
        raise DimensionMismatchError(
            details="Loop current vector length does not match the mesh count.",
            expected=len(meshes), found=loop_currents.size
        )
    if topology.is_solved:
        raise RuntimeError(f"Topology '{topology.name}' already holds solved currents; build a new topology to solve again.")

    for mesh, current in zip(meshes, loop_currents):
        mesh.current = float(current)

    combine = _oriented_branch_current if mode is BranchCurrentMode.ORIENTED else _heuristic_branch_current
    branch_results: List[BranchResult] = []
    for branch in topology.branches:
        branch.current = combine(topology, branch)
        branch.dissipated_power = [branch.current ** 2 * element.value for element in branch.elements]
        branch_results.append(BranchResult(
            branch_id=branch.branch_id,
            current=branch.current,
            elements=[
                ElementPower(element_id=element.element_id, impedance=element.value, power=power)
                for element, power in zip(branch.elements, branch.dissipated_power)
            ],
        ))
        logger.debug(f"Branch '{branch.branch_id}': current {branch.current:g} A.")

    return SolveResult(
        circuit_name=topology.name,
        meshes=[MeshResult(mesh_id=mesh.mesh_id, current=mesh.current) for mesh in meshes],
        branches=branch_results,
        system=system,
        loop_currents=loop_currents,
    )
