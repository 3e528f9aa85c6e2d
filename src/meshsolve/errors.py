# src/meshsolve/errors.py
"""
Error types shared by every stage of MeshSolve.

Internal failures are raised as `DiagnosableError` subclasses that know how to
describe themselves. The two public entry points (building a topology and
solving it) catch those and re-raise a `CircuitBuildError` or `SolveRunError`
whose message is the finished report, so callers only ever handle one family.
"""
import logging
from typing import Any, Dict, Protocol, abstractmethod
from typing import runtime_checkable

logger = logging.getLogger(__name__)


class MeshSolveError(Exception):
    """Root of the errors MeshSolve shows to its users."""
    pass


class CircuitBuildError(MeshSolveError):
    """The netlist could not be read, validated or turned into a topology."""
    pass


class SolveRunError(MeshSolveError):
    """A built topology could not be solved (malformed meshes, singular matrix, bad options)."""
    pass


@runtime_checkable
class Diagnosable(Protocol):
    """Anything that can render a user-facing diagnostic report."""
    def get_diagnostic_report(self) -> str:
        ...


class DiagnosableError(Exception, Diagnosable):
    """
    Concrete base for internal exceptions. Subclasses cannot be instantiated
    without implementing `get_diagnostic_report`.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        raise NotImplementedError


# Context keys rendered in the report header, in display order.
_CONTEXT_LABELS = (
    ('mesh_id', "Mesh"),
    ('branch_id', "Branch"),
    ('source_file', "Source File"),
    ('user_input', "User Input"),
    ('pivot_index', "Pivot Index"),
)

_REPORT_WIDTH = 72


def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    Renders the uniform multi-line report used by every diagnosable error.

    Args:
        error_type: Short category, e.g. "Singular Impedance Matrix".
        details: What went wrong. May span several lines.
        suggestion: How to fix it. Omitted when empty.
        context: Location information. Only the keys in `_CONTEXT_LABELS` are
                 shown, and only when their value is not None or empty.
    """
    lines = [
        "\n",
        " MeshSolve: Actionable Diagnostic Report ".center(_REPORT_WIDTH, "="),
        f"{'Error Type:':<16}{error_type}",
    ]
    for key, label in _CONTEXT_LABELS:
        value = context.get(key)
        if value is None or value == "":
            continue
        if key == 'user_input':
            value = f"'{value}'"
        lines.append(f"{label + ':':<16}{value}")

    lines.append("\nDetails:")
    lines.extend(f"  {line}" for line in details.splitlines())
    if suggestion:
        lines.append("\nSuggestion:")
        lines.extend(f"  {line}" for line in suggestion.splitlines())
    lines.append("=" * _REPORT_WIDTH)
    return "\n".join(lines)
