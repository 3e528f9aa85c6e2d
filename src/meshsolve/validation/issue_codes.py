# src/meshsolve/validation/issue_codes.py
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class TopologyIssueCode(Enum):
    """
    Registry of topology issue codes and their message templates.
    Each enum member's value is a tuple: (code_str, message_template_str).
    """

    # --- Mesh Issues (TOPO_MESH_...) ---
    TOPO_MESH_EMPTY = ("TOPO_MESH_EMPTY", "Mesh '{mesh_id}' declares no branches.")
    TOPO_MESH_ZERO_IMPEDANCE = ("TOPO_MESH_ZERO_IMPEDANCE", "Mesh '{mesh_id}' has zero self-impedance; its diagonal entry in the impedance matrix will be zero.")
    TOPO_MESH_ISOLATED = ("TOPO_MESH_ISOLATED", "Mesh '{mesh_id}' shares no branch with any other mesh and is solved independently.")

    # --- Branch Issues (TOPO_BRANCH_...) ---
    TOPO_BRANCH_ORPHAN = ("TOPO_BRANCH_ORPHAN", "Branch '{branch_id}' is not traversed by any mesh.")
    TOPO_BRANCH_OVERSHARED = ("TOPO_BRANCH_OVERSHARED", "Branch '{branch_id}' is traversed by {mesh_count} meshes ({mesh_ids}); at most two meshes may share a branch.")
    TOPO_BRANCH_SAME_DIRECTION = ("TOPO_BRANCH_SAME_DIRECTION", "Meshes '{mesh_id}' and '{other_mesh_id}' traverse shared branch '{branch_id}' in the same direction.")

    # --- Mesh Pair Issues (TOPO_PAIR_...) ---
    TOPO_PAIR_MULTI_SHARED = ("TOPO_PAIR_MULTI_SHARED", "Meshes '{mesh_id}' and '{other_mesh_id}' share {branch_count} branches ({branch_ids}); adjacent meshes may share exactly one branch.")

    # --- Element Issues (TOPO_ELEM_...) ---
    TOPO_ELEM_CONFLICT = ("TOPO_ELEM_CONFLICT", "Resistance '{element_id}' on branch '{branch_id}' is declared with value {value} but is already registered with value {existing_value}.")
    TOPO_ELEM_NEGATIVE = ("TOPO_ELEM_NEGATIVE", "Resistance '{element_id}' on branch '{branch_id}' has a negative value ({value}).")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def template(self) -> str:
        return self.value[1]

    def format_message(self, **kwargs) -> str:
        """Formats the message template with provided keyword arguments."""
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing key {e} for formatting message template of {self.name} (code: {self.code}): '{self.template}'. Provided args: {kwargs}")
            return f"Error formatting message for {self.code}: Missing key {e}. Template: '{self.template}' Args: {kwargs}"
