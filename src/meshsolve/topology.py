# src/meshsolve/topology.py
"""
The in-memory circuit model: an aggregate that exclusively owns the meshes and
branches of one circuit for the lifetime of one solve.

Meshes and branches are kept in insertion-ordered dictionaries. Mesh order is
the row/column order of the impedance matrix, and both orders are the
iteration order of the final report.
"""
import logging
import math
from typing import Dict, List, Optional, Union

from .data_structures import Branch, ElementKind, FORWARD, Mesh, REVERSE, ResistiveElement
from .validation.exceptions import MalformedTopologyError
from .validation.issue_codes import TopologyIssueCode
from .validation.issues import ValidationIssue, ValidationIssueLevel

logger = logging.getLogger(__name__)


class CircuitTopology:
    """Owns every Mesh and Branch of a circuit and aggregates element values into them."""

    def __init__(self, name: str = "circuit"):
        self.name: str = name
        self._meshes: Dict[str, Mesh] = {}
        self._branches: Dict[str, Branch] = {}

    # --- Read access ---

    @property
    def meshes(self) -> List[Mesh]:
        """Meshes in declaration order. This order defines the matrix indices."""
        return list(self._meshes.values())

    @property
    def branches(self) -> List[Branch]:
        """Branches in order of first appearance."""
        return list(self._branches.values())

    @property
    def mesh_count(self) -> int:
        return len(self._meshes)

    def get_mesh(self, mesh_id: str) -> Mesh:
        return self._meshes[mesh_id]

    def get_branch(self, branch_id: str) -> Branch:
        return self._branches[branch_id]

    def meshes_traversing(self, branch_id: str) -> List[Mesh]:
        """All meshes whose branch list contains `branch_id`, in mesh order."""
        return [mesh for mesh in self._meshes.values() if mesh.traverses(branch_id)]

    @property
    def is_solved(self) -> bool:
        return any(mesh.current is not None for mesh in self._meshes.values())

    # --- Construction ---

    def add_mesh(self, mesh_id: str) -> Mesh:
        """Returns the mesh with this identifier, creating it if it is not known yet."""
        mesh = self._meshes.get(mesh_id)
        if mesh is None:
            logger.debug(f"Creating mesh with ID: {mesh_id}")
            mesh = Mesh(mesh_id=mesh_id)
            self._meshes[mesh_id] = mesh
        return mesh

    def add_branch(self, branch_id: str) -> Branch:
        """Returns the branch with this identifier, creating it if it is not known yet."""
        branch = self._branches.get(branch_id)
        if branch is None:
            logger.debug(f"Creating branch with ID: {branch_id}")
            branch = Branch(branch_id=branch_id)
            self._branches[branch_id] = branch
        return branch

    def attach_branch(self, mesh_id: str, branch_id: str, orientation: Optional[int] = None) -> Branch:
        """
        Registers `branch_id` in the branch list of `mesh_id`.

        The first mesh to traverse a branch defines its reference direction and
        defaults to FORWARD. Any later mesh defaults to REVERSE, which is how two
        adjacent meshes circulating in the same sense traverse their shared branch.
        An orientation given for a branch the mesh already lists must match.
        """
        mesh = self.add_mesh(mesh_id)
        branch_known = branch_id in self._branches
        branch = self.add_branch(branch_id)

        if mesh.traverses(branch_id):
            if orientation is not None and orientation != mesh.orientation_of(branch_id):
                raise ValueError(
                    f"Mesh '{mesh_id}' already traverses branch '{branch_id}' with orientation "
                    f"{mesh.orientation_of(branch_id):+d}; cannot redeclare it as {orientation:+d}."
                )
            return branch

        if orientation is None:
            already_traversed = branch_known and any(
                m.traverses(branch_id) for m in self._meshes.values()
            )
            orientation = REVERSE if already_traversed else FORWARD
        elif orientation not in (FORWARD, REVERSE):
            raise ValueError(f"Branch orientation must be +1 or -1, got {orientation!r}.")

        mesh.branch_orientations[branch_id] = orientation
        return branch

    def record_element(
        self,
        mesh_id: str,
        branch_id: str,
        element_kind: Union[ElementKind, str],
        element_id: str,
        value: float,
        orientation: Optional[int] = None,
    ) -> None:
        """
        Folds one declared element into the mesh and branch it belongs to.

        Batteries add to the mesh voltage source. Resistances are appended to the
        branch element list and added to both the branch impedance and the mesh
        self-impedance. Submitting the same resistance again for the same mesh is a
        no-op; a resistance already on the branch because another mesh declared the
        shared branch only adds to this mesh's self-impedance.

        Totals are recomputed as correctly rounded sums (`math.fsum`) of every
        value recorded so far, so declaration order never changes them.

        Raises:
            MalformedTopologyError: If a resistance is redeclared on a branch with a
                                    different value.
            ValueError: If the element kind or orientation is invalid.
        """
        kind = ElementKind.coerce(element_kind)
        value = float(value)
        mesh = self.add_mesh(mesh_id)
        branch = self.attach_branch(mesh_id, branch_id, orientation)

        if kind is ElementKind.BATTERY:
            mesh.battery_values.append(value)
            mesh.voltage_source = math.fsum(mesh.battery_values)
            logger.debug(f"--> Found battery with ID: {element_id} ({value} V) in mesh '{mesh_id}'")
            return

        existing = branch.find_element(element_id)
        if existing is not None and existing.value != value:
            raise MalformedTopologyError([ValidationIssue(
                level=ValidationIssueLevel.ERROR,
                code=TopologyIssueCode.TOPO_ELEM_CONFLICT.code,
                message=TopologyIssueCode.TOPO_ELEM_CONFLICT.format_message(
                    element_id=element_id, branch_id=branch_id, value=value, existing_value=existing.value
                ),
                mesh_id=mesh_id,
                branch_id=branch_id,
                details={'element_id': element_id},
            )])

        if existing is None:
            branch.elements.append(ResistiveElement(element_id=element_id, value=value))
            branch.impedance = math.fsum(element.value for element in branch.elements)

        registration_key = (branch_id, element_id)
        if registration_key not in mesh.registered_elements:
            mesh.registered_elements.add(registration_key)
            mesh.resistance_values.append(value)
            mesh.impedance = math.fsum(mesh.resistance_values)
            logger.debug(f"--> Found impedance with ID: {element_id} ({value} ohm) in mesh '{mesh_id}'")
        else:
            logger.debug(f"Ignoring repeated declaration of '{element_id}' on branch '{branch_id}' in mesh '{mesh_id}'.")

    def __repr__(self):
        return f"CircuitTopology(name={self.name!r}, meshes={len(self._meshes)}, branches={len(self._branches)})"
