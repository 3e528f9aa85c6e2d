# src/meshsolve/circuit_builder.py

"""
Defines the CircuitBuilder, which turns the parser's Intermediate Representation
into a `CircuitTopology`.

The builder replays every declared element of every mesh as a `record_element`
call, in file order, so mesh order in the file becomes row order in the
impedance matrix. It is also the gatekeeper for build-time errors: any
`DiagnosableError` raised while reading or registering the netlist is re-raised
as a single, user-friendly `CircuitBuildError`.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .parser import NetlistParser
from .parser.raw_data import ParsedCircuit
from .topology import CircuitTopology
from .errors import CircuitBuildError, DiagnosableError, format_diagnostic_report


logger = logging.getLogger(__name__)


class CircuitBuilder:
    """Synthesizes a `CircuitTopology` from a netlist file or a parsed IR tree."""

    def __init__(self, parser: Optional[NetlistParser] = None):
        self.parser = parser or NetlistParser()

    def parse(self, netlist_path: Union[str, Path]) -> ParsedCircuit:
        """Reads and validates a netlist, reporting failures as CircuitBuildError."""
        try:
            return self.parser.parse(netlist_path)
        except DiagnosableError as e:
            raise CircuitBuildError(e.get_diagnostic_report()) from e

    def build_from_file(self, netlist_path: Union[str, Path]) -> CircuitTopology:
        """Parses `netlist_path` and builds its topology. See `build_topology`."""
        return self.build_topology(self.parse(netlist_path))

    def build_topology(self, parsed_circuit: ParsedCircuit) -> CircuitTopology:
        """
        The main build-time entry point.

        Raises:
            CircuitBuildError: A diagnosable report of whatever went wrong.
        """
        logger.info(f"--- Building topology for '{parsed_circuit.circuit_name}' ---")
        try:
            topology = CircuitTopology(name=parsed_circuit.circuit_name)
            for mesh in parsed_circuit.meshes:
                logger.debug(f"Creating mesh with ID: {mesh.mesh_id}")
                topology.add_mesh(mesh.mesh_id)
                for branch in mesh.branches:
                    topology.attach_branch(mesh.mesh_id, branch.branch_id, branch.orientation)
                    for element in branch.elements:
                        topology.record_element(
                            mesh.mesh_id, branch.branch_id, element.kind,
                            element.element_id, element.value,
                        )
            logger.info(
                f"--- Topology for '{topology.name}' built: "
                f"{topology.mesh_count} meshes, {len(topology.branches)} branches. ---"
            )
            return topology

        except DiagnosableError as e:
            diagnostic_report = e.get_diagnostic_report()
            raise CircuitBuildError(diagnostic_report) from e

        except Exception as e:
            report = format_diagnostic_report(
                error_type=f"An Unexpected Error Occurred ({type(e).__name__})",
                details=f"The circuit builder encountered an unexpected internal error: {str(e)}",
                suggestion="This may indicate a bug in MeshSolve. Please review the traceback.",
                context={'source_file': parsed_circuit.source_path}
            )
            raise CircuitBuildError(report) from e
