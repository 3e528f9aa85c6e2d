# src/meshsolve/parser/raw_data.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
from pathlib import Path

from ..data_structures import ElementKind

# The classes in this module define the Intermediate Representation (IR) passed
# from the NetlistParser to the CircuitBuilder. Both netlist formats (XML and
# YAML) produce the same IR.

@dataclass(frozen=True)
class ParsedElement:
    """IR for one battery or resistance declared on a branch."""
    element_id: str
    kind: ElementKind
    value: float
    raw_value: Union[str, float]

@dataclass(frozen=True)
class ParsedBranch:
    """IR for a branch as listed under one mesh."""
    branch_id: str
    elements: List[ParsedElement]
    # FORWARD/REVERSE, or None to let the topology infer it.
    orientation: Optional[int] = None

@dataclass(frozen=True)
class ParsedMesh:
    mesh_id: str
    branches: List[ParsedBranch]

@dataclass(frozen=True)
class ParsedCircuit:
    """Top-level IR node representing a single parsed netlist file."""
    circuit_name: str
    source_path: Path
    meshes: List[ParsedMesh]
    raw_solver_config: Optional[Dict[str, Any]] = None
