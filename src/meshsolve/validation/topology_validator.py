# src/meshsolve/validation/topology_validator.py
import logging
from collections import Counter
from typing import List, Optional, TYPE_CHECKING

from ..analysis import TopologyAnalyzer, TopologyAnalysisResults
from .issues import ValidationIssue, ValidationIssueLevel
from .issue_codes import TopologyIssueCode

if TYPE_CHECKING:
    from ..topology import CircuitTopology

logger = logging.getLogger(__name__)


class TopologyValidator:
    """
    Checks a circuit topology against the assumptions of planar mesh analysis.

    It runs after ingestion and before assembly, and reports every problem it finds
    as a ValidationIssue. The caller decides what to do with them; the assembler
    refuses to build a linear system when any ERROR-level issue is present.
    """

    def __init__(self, topology: "CircuitTopology", analysis: Optional[TopologyAnalysisResults] = None):
        self.topology = topology
        self.analysis: TopologyAnalysisResults = analysis or TopologyAnalyzer(topology).analyze()
        self.issues: List[ValidationIssue] = []

    def validate(self) -> List[ValidationIssue]:
        """
        Runs every check.

        Returns:
            A list of all `ValidationIssue` objects found (errors, warnings, and info).
        """
        self.issues = []
        logger.info(f"Validating topology of '{self.topology.name}'...")
        self._check_meshes()
        self._check_branches()
        self._check_mesh_pairs()

        counts = Counter(issue.level for issue in self.issues)
        logger.info(
            f"Topology check of '{self.topology.name}': {counts[ValidationIssueLevel.ERROR]} error(s), "
            f"{counts[ValidationIssueLevel.WARNING]} warning(s), {counts[ValidationIssueLevel.INFO]} info."
        )
        return self.issues

    def _add_issue(self, level: ValidationIssueLevel, code_enum: TopologyIssueCode, **kwargs):
        message = code_enum.format_message(**kwargs)
        self.issues.append(ValidationIssue(
            level=level, code=code_enum.code, message=message,
            mesh_id=kwargs.get('mesh_id'), branch_id=kwargs.get('branch_id'), details=kwargs
        ))

    def _check_meshes(self):
        isolated = set(self.analysis.isolated_meshes)
        multiple_meshes = self.topology.mesh_count > 1
        for mesh in self.topology.meshes:
            if not mesh.branch_ids:
                self._add_issue(ValidationIssueLevel.ERROR, TopologyIssueCode.TOPO_MESH_EMPTY, mesh_id=mesh.mesh_id)
                continue
            if mesh.impedance == 0.0:
                self._add_issue(ValidationIssueLevel.WARNING, TopologyIssueCode.TOPO_MESH_ZERO_IMPEDANCE, mesh_id=mesh.mesh_id)
            if multiple_meshes and mesh.mesh_id in isolated:
                self._add_issue(ValidationIssueLevel.INFO, TopologyIssueCode.TOPO_MESH_ISOLATED, mesh_id=mesh.mesh_id)

    def _check_branches(self):
        for branch_id, mesh_ids in self.analysis.branch_users.items():
            if not mesh_ids:
                self._add_issue(ValidationIssueLevel.ERROR, TopologyIssueCode.TOPO_BRANCH_ORPHAN, branch_id=branch_id)
            elif len(mesh_ids) > 2:
                self._add_issue(
                    ValidationIssueLevel.ERROR, TopologyIssueCode.TOPO_BRANCH_OVERSHARED,
                    branch_id=branch_id, mesh_count=len(mesh_ids), mesh_ids=", ".join(mesh_ids)
                )
            elif len(mesh_ids) == 2:
                first = self.topology.get_mesh(mesh_ids[0])
                second = self.topology.get_mesh(mesh_ids[1])
                if first.orientation_of(branch_id) == second.orientation_of(branch_id):
                    self._add_issue(
                        ValidationIssueLevel.WARNING, TopologyIssueCode.TOPO_BRANCH_SAME_DIRECTION,
                        mesh_id=mesh_ids[0], other_mesh_id=mesh_ids[1], branch_id=branch_id
                    )

            for element in self.topology.get_branch(branch_id).elements:
                if element.value < 0:
                    self._add_issue(
                        ValidationIssueLevel.WARNING, TopologyIssueCode.TOPO_ELEM_NEGATIVE,
                        branch_id=branch_id, element_id=element.element_id, value=element.value
                    )

    def _check_mesh_pairs(self):
        for mesh_a, mesh_b, data in self.analysis.mesh_graph.edges(data=True):
            shared = data['branches']
            if len(shared) > 1:
                self._add_issue(
                    ValidationIssueLevel.ERROR, TopologyIssueCode.TOPO_PAIR_MULTI_SHARED,
                    mesh_id=mesh_a, other_mesh_id=mesh_b,
                    branch_count=len(shared), branch_ids=", ".join(shared)
                )
