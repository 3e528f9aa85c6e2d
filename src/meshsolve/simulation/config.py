# src/meshsolve/simulation/config.py
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..constants import DEFAULT_PIVOT_TOLERANCE

logger = logging.getLogger(__name__)


class ConfigParsingError(ValueError):
    """Custom exception for errors during solver configuration parsing."""
    pass


class BranchCurrentMode(Enum):
    """How mesh currents are combined into the current of a shared branch."""
    # First mesh sets the sign; later meshes subtract positive and add negative currents.
    HEURISTIC = "heuristic"
    # Signed sum using the orientation each mesh traverses the branch with.
    ORIENTED = "oriented"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class SolverConfig:
    pivot_tolerance: float = DEFAULT_PIVOT_TOLERANCE
    branch_current_mode: BranchCurrentMode = BranchCurrentMode.HEURISTIC


def parse_solver_config(
    raw_solver_config: Optional[Dict[str, Any]],
    overrides: Optional[Dict[str, Any]] = None
) -> SolverConfig:
    """
    Builds a SolverConfig from the `solver` block of a netlist.

    Keys in `overrides` whose value is not None (e.g. command-line options) take
    precedence over the netlist. Missing keys keep their defaults.
    """
    merged: Dict[str, Any] = dict(raw_solver_config or {})
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value

    unknown = set(merged) - {'pivot_tolerance', 'branch_current_mode'}
    if unknown:
        raise ConfigParsingError(f"Unknown solver option(s): {sorted(unknown)}")

    try:
        tolerance = float(merged.get('pivot_tolerance', DEFAULT_PIVOT_TOLERANCE))
        if math.isnan(tolerance) or tolerance < 0:
            raise ValueError(f"Pivot tolerance must be a non-negative number, got {tolerance}.")

        mode = merged.get('branch_current_mode', BranchCurrentMode.HEURISTIC)
        if not isinstance(mode, BranchCurrentMode):
            mode = BranchCurrentMode(str(mode).lower())
    except (TypeError, ValueError) as e:
        raise ConfigParsingError(f"Failed to parse solver configuration: {e}") from e

    config = SolverConfig(pivot_tolerance=tolerance, branch_current_mode=mode)
    logger.debug(f"Solver configuration: {config}")
    return config
