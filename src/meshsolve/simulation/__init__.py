# src/meshsolve/simulation/__init__.py
from .exceptions import (
    DimensionMismatchError,
    SingularSystemError,
)
from ..validation.exceptions import MalformedTopologyError
from .config import BranchCurrentMode, ConfigParsingError, SolverConfig, parse_solver_config
from .results import (
    BranchResult,
    ElementPower,
    LinearSystem,
    LUFactors,
    MeshResult,
    SolveResult,
)
from .lu import lu_decompose
from .solver import solve_lu_system, solve_linear_system
from .assembler import MeshAssembler
from .distributor import distribute_currents
from .execution import run_solve, solve_circuit_file

__all__ = [
    # Exceptions
    "DimensionMismatchError",
    "SingularSystemError",
    "MalformedTopologyError",
    # Configuration
    "BranchCurrentMode",
    "ConfigParsingError",
    "SolverConfig",
    "parse_solver_config",
    # Result Contracts
    "BranchResult",
    "ElementPower",
    "LinearSystem",
    "LUFactors",
    "MeshResult",
    "SolveResult",
    # Core Services
    "lu_decompose",
    "solve_lu_system",
    "solve_linear_system",
    "MeshAssembler",
    "distribute_currents",
    "run_solve",
    "solve_circuit_file",
]
