# src/meshsolve/parser/__init__.py
from .raw_data import (
    ParsedBranch,
    ParsedCircuit,
    ParsedElement,
    ParsedMesh,
)
from .parser import NetlistParser
from .exceptions import ElementValueError, ParsingError, SchemaValidationError

__all__ = [
    # IR Data Structures
    "ParsedBranch",
    "ParsedCircuit",
    "ParsedElement",
    "ParsedMesh",
    # Parser and Exceptions
    "NetlistParser",
    "ParsingError",
    "SchemaValidationError",
    "ElementValueError",
]
