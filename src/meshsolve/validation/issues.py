# src/meshsolve/validation/issues.py
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, Any


class ValidationIssueLevel(Enum):
    """How serious a topology problem is. Only ERROR stops the solve."""
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def __str__(self):
        return self.value


@dataclass
class ValidationIssue:
    """
    One finding of the topology validator.

    `mesh_id` and `branch_id` locate the problem in the netlist; `details` holds
    the values the message was formatted from.
    """
    level: ValidationIssueLevel
    code: str
    message: str
    mesh_id: Optional[str] = None
    branch_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.level is ValidationIssueLevel.ERROR

    def __str__(self) -> str:
        location = [f"mesh '{self.mesh_id}'"] if self.mesh_id else []
        if self.branch_id:
            location.append(f"branch '{self.branch_id}'")
        prefix = f"[{self.level} {self.code}]"
        if location:
            prefix += f" at {', '.join(location)}"
        return f"{prefix}: {self.message}"
