# src/meshsolve/simulation/execution.py
"""
Provides the public API functions for solving a circuit.

`run_solve` is a thin facade over the pipeline assemble -> decompose ->
substitute -> distribute. It wraps the whole run in one error handler so that
every diagnosable failure reaches the caller as a single `SolveRunError` with a
complete report, and no partially solved result ever escapes.
"""
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..circuit_builder import CircuitBuilder
from ..errors import Diagnosable, SolveRunError, format_diagnostic_report
from ..topology import CircuitTopology
from .assembler import MeshAssembler
from .config import ConfigParsingError, SolverConfig, parse_solver_config
from .distributor import distribute_currents
from .lu import lu_decompose
from .results import SolveResult
from .solver import solve_lu_system

logger = logging.getLogger(__name__)


def run_solve(topology: CircuitTopology, config: Optional[SolverConfig] = None) -> SolveResult:
    """
    Solves a built circuit topology for its mesh and branch currents.

    Args:
        topology: The topology produced by the CircuitBuilder (or built by hand).
        config: Solver options. Defaults to `SolverConfig()`.

    Returns:
        The SolveResult with per-mesh currents and per-branch currents and powers.

    Raises:
        SolveRunError: A user-friendly, diagnosable error if the topology is
                       malformed or the system is singular. The original
                       exception is chained for debugging.
    """
    config = config or SolverConfig()
    try:
        logger.info(f"--- Solving circuit '{topology.name}' ---")
        start = time.perf_counter()

        system = MeshAssembler(topology).assemble()
        factors = lu_decompose(system.impedance_matrix, config.pivot_tolerance)
        currents = solve_lu_system(factors, system.voltages, config.pivot_tolerance)
        result = distribute_currents(topology, currents, config.branch_current_mode, system=system)

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.info(f"Circuit solved in {elapsed_ms:.3f} milliseconds")
        return result

    except Exception as e:
        if isinstance(e, Diagnosable):
            logger.error(f"A diagnosable error occurred while solving: {e}")
            raise SolveRunError(e.get_diagnostic_report()) from e

        logger.critical(f"An unexpected internal error occurred while solving: {e}", exc_info=True)
        report = format_diagnostic_report(
            error_type=f"An Unexpected Solver Error Occurred ({type(e).__name__})",
            details=f"The solver encountered an unexpected internal error: {e}",
            suggestion="This may be a bug. Review the traceback and consider filing a bug report.",
            context={}
        )
        raise SolveRunError(report) from e


def solve_circuit_file(
    netlist_path: Union[str, Path],
    overrides: Optional[Dict[str, Any]] = None,
    builder: Optional[CircuitBuilder] = None,
) -> SolveResult:
    """
    Reads, builds and solves a netlist file in one call.

    Solver options come from the netlist's `solver` block, with non-None entries of
    `overrides` (e.g. command-line flags) taking precedence.

    Raises:
        CircuitBuildError: If the file cannot be read or turned into a topology.
        SolveRunError: If solving fails or the solver options are invalid.
    """
    builder = builder or CircuitBuilder()
    parsed = builder.parse(netlist_path)
    try:
        config = parse_solver_config(parsed.raw_solver_config, overrides)
    except ConfigParsingError as e:
        report = format_diagnostic_report(
            error_type="Invalid Solver Configuration",
            details=str(e),
            suggestion="Use a non-negative pivot_tolerance and a branch_current_mode of 'heuristic' or 'oriented'.",
            context={'source_file': parsed.source_path}
        )
        raise SolveRunError(report) from e
    topology = builder.build_topology(parsed)
    return run_solve(topology, config)
