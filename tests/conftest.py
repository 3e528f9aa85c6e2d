# tests/conftest.py
import logging

import pytest
from pathlib import Path

from meshsolve import CircuitBuilder, CircuitTopology


def build_topology(meshes: list, name: str = "TestCircuit") -> CircuitTopology:
    """
    Programmatically creates a CircuitTopology, the way the CircuitBuilder does.
    meshes: e.g. [("M1", [("b1", [("battery", "V1", 10.0), ("resistance", "R1", 5.0)])])]
    """
    topology = CircuitTopology(name=name)
    for mesh_id, branches in meshes:
        topology.add_mesh(mesh_id)
        for branch_id, elements in branches:
            topology.attach_branch(mesh_id, branch_id)
            for kind, element_id, value in elements:
                topology.record_element(mesh_id, branch_id, kind, element_id, value)
    return topology


# Mesh A: 10 V battery plus the 5 ohm shared branch; mesh B: shared branch plus its own 5 ohm.
SERIES_TWO_MESH = [
    ("A", [("b1", [("battery", "V1", 10.0)]),
           ("s", [("resistance", "R1", 5.0)])]),
    ("B", [("s", [("resistance", "R1", 5.0)]),
           ("b2", [("resistance", "R2", 5.0)])]),
]

# Both meshes driven in opposite senses so that the loop currents differ in sign.
OPPOSING_TWO_MESH = [
    ("A", [("a", [("battery", "V1", 30.0), ("resistance", "R1", 2.0)]),
           ("s", [("resistance", "Rs", 4.0)])]),
    ("B", [("s", [("resistance", "Rs", 4.0)]),
           ("b", [("battery", "V2", -30.0), ("resistance", "R2", 2.0)])]),
]

# A three-mesh ladder: M1 - s12 - M2 - s23 - M3.
LADDER_THREE_MESH = [
    ("M1", [("a", [("battery", "V1", 12.0), ("resistance", "R1", 2.0)]),
            ("s12", [("resistance", "R12", 3.0)])]),
    ("M2", [("s12", [("resistance", "R12", 3.0)]),
            ("s23", [("resistance", "R23", 5.0)]),
            ("b", [("resistance", "R2", 1.0)])]),
    ("M3", [("s23", [("resistance", "R23", 5.0)]),
            ("c", [("resistance", "R3", 4.0), ("battery", "V3", -6.0)])]),
]


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI calls setup_logging, which swaps the root handlers; undo that after each test."""
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def circuit_builder_instance():
    return CircuitBuilder()


@pytest.fixture
def series_two_mesh():
    return build_topology(SERIES_TWO_MESH, name="SeriesTwoMesh")


@pytest.fixture
def opposing_two_mesh():
    return build_topology(OPPOSING_TWO_MESH, name="OpposingTwoMesh")


@pytest.fixture
def ladder_three_mesh():
    return build_topology(LADDER_THREE_MESH, name="LadderThreeMesh")


SERIES_TWO_MESH_XML = """<?xml version="1.0"?>
<meshes>
  <mesh ID="A">
    <branch ID="b1">
      <battery ID="V1" value="10"/>
    </branch>
    <branch ID="s">
      <resistance ID="R1" value="5"/>
    </branch>
  </mesh>
  <mesh ID="B">
    <branch ID="s">
      <resistance ID="R1" value="5"/>
    </branch>
    <branch ID="b2">
      <resistance ID="R2" value="5"/>
    </branch>
  </mesh>
</meshes>
"""

SERIES_TWO_MESH_YAML = """
circuit_name: SeriesTwoMesh
meshes:
  - id: A
    branches:
      - id: b1
        elements:
          - {type: battery, id: V1, value: "10 V"}
      - id: s
        elements:
          - {type: resistance, id: R1, value: "5 ohm"}
  - id: B
    branches:
      - id: s
        elements:
          - {type: resistance, id: R1, value: 5}
      - id: b2
        elements:
          - {type: resistance, id: R2, value: "5 ohm"}
"""


def write_netlist(tmp_path: Path, file_name: str, content: str) -> Path:
    """Writes a netlist file into the temporary directory and returns its path."""
    path = tmp_path / file_name
    path.write_text(content, encoding="utf-8")
    return path
