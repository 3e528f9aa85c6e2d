# src/meshsolve/validation/exceptions.py
"""
The diagnosable exception raised when a circuit topology falls outside the
planar mesh model.

It collects every error-level `ValidationIssue` of a topology, so one report
names all offending meshes and branches instead of stopping at the first.
"""
from typing import List

from .issues import ValidationIssue
from ..errors import DiagnosableError, format_diagnostic_report


def _bullet_list(issues: List[ValidationIssue]) -> str:
    return "\n".join(f"  - {issue}" for issue in issues)


class MalformedTopologyError(DiagnosableError):
    """
    Raised when the meshes and branches cannot be turned into a mesh-current
    linear system: two meshes joined by more than one branch, a branch used by
    no mesh or by more than two, a mesh without branches, or an element
    redeclared with a different value.
    """
    def __init__(self, issues: List[ValidationIssue]):
        # Warnings and info messages are logged by the caller, not reported here.
        self.issues: List[ValidationIssue] = [issue for issue in issues if issue.is_error]
        if self.issues:
            message = f"Topology validation failed with {len(self.issues)} error(s):\n{_bullet_list(self.issues)}"
        else:
            message = "MalformedTopologyError was raised with no error-level issues."
        super().__init__(message)

    @property
    def codes(self) -> List[str]:
        return [issue.code for issue in self.issues]

    def get_diagnostic_report(self) -> str:
        primary = self.issues[0] if self.issues else None
        return format_diagnostic_report(
            error_type="Malformed Circuit Topology",
            details=(
                "The circuit does not satisfy the planar mesh model "
                f"({len(self.issues)} error(s)):\n\n{_bullet_list(self.issues)}"
            ),
            suggestion=(
                "Every mesh needs at least one branch, a branch may be shared by at most two meshes, "
                "and two adjacent meshes may share exactly one branch. Merge parallel shared branches "
                "into one and keep element values consistent wherever a shared branch is repeated."
            ),
            context={
                'mesh_id': primary.mesh_id if primary else None,
                'branch_id': primary.branch_id if primary else None,
            }
        )
