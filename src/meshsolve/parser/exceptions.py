# src/meshsolve/parser/exceptions.py
"""
Defines custom, diagnosable exceptions for the parsing and schema validation stage.

Every exception here derives from `DiagnosableError` through `BaseParsingError`,
so the CircuitBuilder can catch one concrete type for all reportable parsing
problems and turn them into a single user-facing report.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Tuple, Union

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """
    A local, concrete base class for all netlist parsing and schema validation errors.
    """
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Parsing Error",
            details=str(self),
            suggestion="Please check the format and content of the netlist file.",
            context={}
        )


@dataclass(frozen=True)
class ParsingError(BaseParsingError):
    """
    Raised for file-system problems or syntax errors that prevent a netlist from
    being loaded at all: missing file, unsupported suffix, malformed XML or YAML.
    """
    details: str
    file_path: Path

    def __str__(self):
        return f"Parsing error in file '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Netlist Parsing or File Error",
            details=self.details,
            suggestion="Ensure the file exists, has an .xml, .yaml or .yml suffix, and contains well-formed XML or YAML.",
            context={'source_file': self.file_path}
        )


def flatten_schema_errors(errors: Any, prefix: str = "") -> List[Tuple[str, str]]:
    """
    Flattens Cerberus' nested error tree into (dotted.field.path, message) pairs.

    Cerberus reports list items as `{index: [...]}` mappings and nested documents
    as lists of mappings, e.g. `{'meshes': [{0: [{'id': ['required field']}]}]}`.
    """
    flat: List[Tuple[str, str]] = []
    if isinstance(errors, dict):
        for key, value in errors.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            flat.extend(flatten_schema_errors(value, path))
    elif isinstance(errors, list):
        for item in errors:
            flat.extend(flatten_schema_errors(item, prefix))
    else:
        flat.append((prefix, str(errors)))
    return flat


@dataclass(frozen=True)
class SchemaValidationError(BaseParsingError):
    """
    Raised when the netlist is well-formed but does not conform to the required
    structure (missing identifiers, duplicate mesh ids, unknown element types...).
    """
    errors: dict
    file_path: Path

    @property
    def flat_errors(self) -> List[Tuple[str, str]]:
        return sorted(flatten_schema_errors(self.errors))

    def __str__(self):
        error_lines = [f"  - In field '{path}': {message}" for path, message in self.flat_errors]
        return (
            f"Netlist schema validation failed for file '{self.file_path}':\n"
            + "\n".join(error_lines)
        )

    def get_diagnostic_report(self) -> str:
        flat = self.flat_errors
        error_list_str = "\n".join(f"  - Field '{path}': {message}" for path, message in flat)
        details = (
            "The structure of the netlist does not conform to the required schema.\n"
            f"See details for {len(flat)} issue(s) below:\n\n{error_list_str}"
        )
        return format_diagnostic_report(
            error_type="Netlist Schema Validation Error",
            details=details,
            suggestion="Correct the specified fields. Every mesh, branch and element needs an identifier, mesh identifiers must be unique, and elements must be a 'battery' or a 'resistance' with a value.",
            context={'source_file': self.file_path}
        )


@dataclass(frozen=True)
class ElementValueError(BaseParsingError):
    """Raised when an element value cannot be read as a voltage or a resistance."""
    element_id: str
    mesh_id: str
    branch_id: str
    raw_value: Union[str, float]
    details: str
    file_path: Path

    def __str__(self):
        return f"Invalid value '{self.raw_value}' for element '{self.element_id}' in '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Invalid Element Value",
            details=f"Element '{self.element_id}': {self.details}",
            suggestion="Use a plain number (volts for batteries, ohms for resistances) or a quantity with units such as '12 V' or '2.2 kohm'.",
            context={
                'mesh_id': self.mesh_id,
                'branch_id': self.branch_id,
                'source_file': self.file_path,
                'user_input': self.raw_value,
            }
        )
