# src/meshsolve/data_structures.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple, Union

logger = logging.getLogger(__name__)


class ElementKind(Enum):
    """The two kinds of circuit element a branch can carry."""
    BATTERY = "battery"
    RESISTANCE = "resistance"

    def __str__(self):
        return self.value

    @classmethod
    def coerce(cls, kind: Union[ElementKind, str]) -> ElementKind:
        """Accepts either an ElementKind or its lowercase string value."""
        if isinstance(kind, cls):
            return kind
        try:
            return cls(str(kind).lower())
        except ValueError:
            allowed = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown element kind '{kind}'. Expected one of: {allowed}.") from None


#: Orientation of a branch as traversed by a mesh, relative to the branch's
#: reference direction (the direction of the first mesh that declared it).
FORWARD = 1
REVERSE = -1


@dataclass(frozen=True)
class ResistiveElement:
    """A single resistor registered on a branch."""
    element_id: str
    value: float


@dataclass
class Mesh:
    """
    A closed current loop of the circuit and one unknown of the linear system.

    The topology fields are filled during ingestion and are not changed
    afterwards. `current` stays None until the distributor assigns the solved
    loop current.
    """
    mesh_id: str
    voltage_source: float = 0.0
    impedance: float = 0.0
    current: Optional[float] = None
    # Ordered, duplicate-free mapping branch_id -> orientation (FORWARD/REVERSE).
    branch_orientations: Dict[str, int] = field(default_factory=dict)
    # (branch_id, element_id) pairs already folded into `impedance`.
    registered_elements: Set[Tuple[str, str]] = field(default_factory=set, repr=False)
    # Every value folded into the totals above; the totals are their correctly rounded sums.
    battery_values: List[float] = field(default_factory=list, repr=False)
    resistance_values: List[float] = field(default_factory=list, repr=False)

    @property
    def branch_ids(self) -> List[str]:
        """The branch identifiers of this mesh, in declaration order."""
        return list(self.branch_orientations)

    def traverses(self, branch_id: str) -> bool:
        return branch_id in self.branch_orientations

    def orientation_of(self, branch_id: str) -> int:
        return self.branch_orientations[branch_id]


@dataclass
class Branch:
    """
    A circuit segment between two junctions. One Branch object exists per
    identifier, however many meshes traverse it.
    """
    branch_id: str
    elements: List[ResistiveElement] = field(default_factory=list)
    impedance: float = 0.0
    current: Optional[float] = None
    # Parallel to `elements`; filled by the distributor.
    dissipated_power: List[float] = field(default_factory=list)

    @property
    def element_ids(self) -> List[str]:
        return [element.element_id for element in self.elements]

    def find_element(self, element_id: str) -> Optional[ResistiveElement]:
        for element in self.elements:
            if element.element_id == element_id:
                return element
        return None
