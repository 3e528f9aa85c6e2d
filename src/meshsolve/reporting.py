# src/meshsolve/reporting.py
"""
Formats a SolveResult as the plain-text report written next to the input file.

Numbers use the shortest '%g' representation (six significant digits), and
meshes and branches appear in declaration order.
"""
import logging
from pathlib import Path
from typing import List, Union

from .constants import CURRENT_LABEL, POWER_LABEL, REPORT_SUFFIX
from .simulation.results import SolveResult

logger = logging.getLogger(__name__)

_RULE = "------------------"


def _number(value: float) -> str:
    return f"{value:g}"


def format_report(result: SolveResult) -> str:
    """Renders the mesh currents, branch currents and dissipated powers of a solved circuit."""
    lines: List[str] = [_RULE, "----- Meshes -----", _RULE]
    for mesh in result.meshes:
        lines.append(f"\nMesh with ID: {mesh.mesh_id}:")
        lines.append(f"--> Current: {_number(mesh.current)} ({CURRENT_LABEL})")

    lines.extend([f"\n{_RULE}", "---- Branches ----", _RULE])
    for branch in result.branches:
        lines.append(f"\nBranch with ID: {branch.branch_id}:")
        lines.append(f"--> Current: {_number(branch.current)} ({CURRENT_LABEL})")
        for element in branch.elements:
            lines.append(f"--> Power dissipated in {element.element_id}: {_number(element.power)} ({POWER_LABEL})")
    return "\n".join(lines) + "\n"


def default_report_path(netlist_path: Union[str, Path]) -> Path:
    """`circuit.xml` -> `circuit_solved.txt`, in the same directory."""
    path = Path(netlist_path)
    return path.with_name(path.stem + REPORT_SUFFIX)


def write_report(result: SolveResult, output_path: Union[str, Path]) -> Path:
    """Writes the formatted report to `output_path` and returns the path."""
    output_path = Path(output_path)
    text = format_report(result)
    output_path.write_text(text, encoding="utf-8")
    logger.info(f"Saving results to {output_path}")
    return output_path
