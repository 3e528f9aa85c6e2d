# src/meshsolve/parser/parser.py
import logging
import math
import re
from collections import Counter
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import cerberus
import pint
import yaml

from ..constants import IMPEDANCE_UNIT, VOLTAGE_UNIT
from ..data_structures import ElementKind, FORWARD, REVERSE
from ..units import IMPEDANCE_DIMENSIONALITY, VOLTAGE_DIMENSIONALITY, ureg
from .raw_data import ParsedBranch, ParsedCircuit, ParsedElement, ParsedMesh
from .exceptions import ElementValueError, ParsingError, SchemaValidationError

logger = logging.getLogger(__name__)

# Identifiers are single tokens: letters, digits and '_', '-', '.', ':' (no whitespace).
ID_REGEX = r"^[A-Za-z0-9_][A-Za-z0-9_.:\-]*$"

XML_SUFFIXES = {".xml"}
YAML_SUFFIXES = {".yaml", ".yml"}

_DIRECTIONS = {"forward": FORWARD, "reverse": REVERSE}


class EnhancedValidator(cerberus.Validator):
    """Custom Cerberus validator with the netlist's identifier and uniqueness rules."""

    def _validate_id_regex(self, constraint, field, value):
        """
        Validates that the value is a single-token identifier.

        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if not constraint:
            return
        if not isinstance(value, str):
            self._error(field, "must be a string to be validated by id_regex.")
            return
        if not re.match(ID_REGEX, value):
            self._error(
                field,
                f"Identifier '{value}' is invalid. Identifiers must be non-empty, contain no whitespace, "
                "and use only letters, digits, '_', '-', '.' and ':'."
            )

    def _validate_unique_elements_by_key(self, key_for_uniqueness, field, value):
        """
        Validates that all dictionaries in a list have a unique value for a given key.

        The rule's arguments are validated against this schema:
        {'type': 'string'}
        """
        if not isinstance(value, list):
            return
        counts = Counter(
            item.get(key_for_uniqueness) for item in value
            if isinstance(item, dict) and item.get(key_for_uniqueness) is not None
        )
        repeated = sorted(str(key) for key, count in counts.items() if count > 1)
        if repeated:
            self._error(field, f"Duplicate values found for key '{key_for_uniqueness}': {repeated}")


class NetlistParser:
    """
    Reads a mesh netlist (XML or YAML) and validates its structure.
    Its sole responsibility is to produce the ParsedCircuit IR.
    """
    _id_rule = {"type": "string", "required": True, "empty": False, "id_regex": True}

    _element_schema = {
        "type": {"type": "string", "required": True, "allowed": [k.value for k in ElementKind]},
        "id": _id_rule,
        "value": {"type": ["string", "number"], "required": True, "empty": False},
    }

    _branch_schema = {
        "id": _id_rule,
        "direction": {"type": "string", "required": False, "nullable": True, "allowed": list(_DIRECTIONS)},
        "elements": {"type": "list", "required": False, "default": [], "schema": {"type": "dict", "schema": _element_schema}},
    }

    _mesh_schema = {
        "id": _id_rule,
        "branches": {
            "type": "list", "required": False, "default": [],
            "unique_elements_by_key": "id",
            "schema": {"type": "dict", "schema": _branch_schema},
        },
    }

    _schema = {
        "circuit_name": {"type": "string", "required": False, "empty": False},
        "solver": {
            "type": "dict", "required": False, "schema": {
                "pivot_tolerance": {"type": ["number", "string"], "required": False},
                "branch_current_mode": {"type": "string", "required": False, "allowed": ["heuristic", "oriented"]},
            },
        },
        "meshes": {
            "type": "list", "required": True, "minlength": 1,
            "unique_elements_by_key": "id",
            "schema": {"type": "dict", "schema": _mesh_schema},
        },
    }

    def __init__(self):
        self._validator = EnhancedValidator(self._schema)
        self._validator.allow_unknown = False
        logger.debug("NetlistParser initialized with strict structural validation rules.")

    def parse(self, netlist_path: Union[str, Path]) -> ParsedCircuit:
        """Parses and validates one netlist file, returning its IR."""
        path = Path(netlist_path).resolve()
        logger.info(f"Reading circuit file: {path}")

        suffix = path.suffix.lower()
        if suffix in XML_SUFFIXES:
            document = self._load_xml(path)
        elif suffix in YAML_SUFFIXES:
            document = self._load_yaml(path)
        else:
            raise ParsingError(
                details=f"Unsupported netlist format '{path.suffix}'. Please provide an XML or YAML input file.",
                file_path=path
            )
        return self.parse_document(document, path)

    def parse_document(self, document: Dict[str, Any], source_path: Path) -> ParsedCircuit:
        """Validates an already-loaded netlist document and converts it to IR."""
        if not self._validator.validate(document):
            raise SchemaValidationError(self._validator.errors, source_path)
        validated = self._validator.document

        meshes: List[ParsedMesh] = []
        for mesh_data in validated["meshes"]:
            mesh_id = mesh_data["id"]
            branches = []
            for branch_data in mesh_data.get("branches", []):
                branch_id = branch_data["id"]
                elements = [
                    self._parse_element(element_data, mesh_id, branch_id, source_path)
                    for element_data in branch_data.get("elements", [])
                ]
                direction = branch_data.get("direction")
                branches.append(ParsedBranch(
                    branch_id=branch_id,
                    elements=elements,
                    orientation=_DIRECTIONS[direction] if direction else None,
                ))
            meshes.append(ParsedMesh(mesh_id=mesh_id, branches=branches))

        circuit = ParsedCircuit(
            circuit_name=validated.get("circuit_name", source_path.stem),
            source_path=source_path,
            meshes=meshes,
            raw_solver_config=validated.get("solver"),
        )
        logger.debug(f"Parsed {len(meshes)} mesh(es) from '{source_path.name}'.")
        return circuit

    def _parse_element(self, element_data: Dict[str, Any], mesh_id: str, branch_id: str, source_path: Path) -> ParsedElement:
        kind = ElementKind(element_data["type"])
        raw_value = element_data["value"]
        try:
            value = parse_element_value(raw_value, kind)
        except ValueError as e:
            raise ElementValueError(
                element_id=element_data["id"], mesh_id=mesh_id, branch_id=branch_id,
                raw_value=raw_value, details=str(e), file_path=source_path
            ) from e
        return ParsedElement(element_id=element_data["id"], kind=kind, value=value, raw_value=raw_value)

    def _load_xml(self, source: Path) -> Dict[str, Any]:
        """
        Loads an XML netlist into the common document layout:
        <meshes><mesh ID=".."><branch ID=".."><battery|resistance ID=".." value=".."/>.
        """
        try:
            root = ET.fromstring(_read_netlist_bytes(source))
        except ET.ParseError as e:
            line, column = e.position
            raise ParsingError(details=f"Malformed XML at line {line}, column {column}: {e}", file_path=source) from e

        if root.tag != "meshes":
            raise ParsingError(details=f"The root element must be <meshes>, found <{root.tag}>.", file_path=source)

        document: Dict[str, Any] = {"meshes": []}
        if root.get("name"):
            document["circuit_name"] = root.get("name")

        for mesh_node in root:
            if mesh_node.tag != "mesh":
                raise ParsingError(details=f"Unexpected <{mesh_node.tag}> element inside <meshes>.", file_path=source)
            mesh_doc = _xml_attributes(mesh_node, {"ID": "id"})
            mesh_doc["branches"] = []
            for branch_node in mesh_node:
                if branch_node.tag != "branch":
                    raise ParsingError(
                        details=f"Unexpected <{branch_node.tag}> element inside mesh '{mesh_node.get('ID')}'.",
                        file_path=source
                    )
                branch_doc = _xml_attributes(branch_node, {"ID": "id", "direction": "direction"})
                branch_doc["elements"] = []
                for element_node in branch_node:
                    element_doc = _xml_attributes(element_node, {"ID": "id", "value": "value"})
                    element_doc["type"] = element_node.tag
                    branch_doc["elements"].append(element_doc)
                mesh_doc["branches"].append(branch_doc)
            document["meshes"].append(mesh_doc)
        return document

    def _load_yaml(self, source: Path) -> Dict[str, Any]:
        """Loads a YAML netlist; the root must be a mapping."""
        try:
            content = yaml.safe_load(_read_netlist_bytes(source))
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e

        if content is None:
            raise ParsingError(details="The YAML file is empty or contains no valid content.", file_path=source)
        if not isinstance(content, dict):
            raise ParsingError(details="The root of the YAML file must be a dictionary (mapping).", file_path=source)
        return content


def _read_netlist_bytes(source: Path) -> bytes:
    if not source.is_file():
        raise ParsingError(details=f"Netlist file not found: {source}", file_path=source)
    try:
        return source.read_bytes()
    except PermissionError as e:
        raise ParsingError(details=f"Cannot read the netlist file: {e}", file_path=source) from e


def _xml_attributes(node: ET.Element, mapping: Dict[str, str]) -> Dict[str, Any]:
    """Copies the present XML attributes of `node` into a dict under their document key."""
    return {key: node.get(attr) for attr, key in mapping.items() if node.get(attr) is not None}


def parse_element_value(raw_value: Union[str, int, float], kind: ElementKind) -> float:
    """
    Converts a netlist value into volts (battery) or ohms (resistance).

    Bare numbers and numeric strings are taken in the base unit. Other strings are
    parsed as pint quantities and must carry the matching dimensionality.
    Resistances must be finite and non-negative.

    Raises:
        ValueError: If the value cannot be interpreted.
    """
    unit, dimensionality = (
        (VOLTAGE_UNIT, VOLTAGE_DIMENSIONALITY) if kind is ElementKind.BATTERY
        else (IMPEDANCE_UNIT, IMPEDANCE_DIMENSIONALITY)
    )

    if isinstance(raw_value, bool):
        raise ValueError(f"Expected a number or a quantity string, got boolean {raw_value}.")
    if isinstance(raw_value, (int, float)):
        value = float(raw_value)
    else:
        text = str(raw_value).strip()
        value = _try_float(text)
        if value is None:
            try:
                quantity = ureg.Quantity(text)
            except (pint.errors.PintError, ValueError, TypeError, AttributeError, SyntaxError) as e:
                raise ValueError(f"Cannot interpret '{text}' as a {kind.value} value: {e}") from e
            if quantity.dimensionality != dimensionality:
                raise ValueError(
                    f"'{text}' has dimensionality {quantity.dimensionality}, "
                    f"which is not compatible with {unit}."
                )
            value = float(quantity.to(unit).magnitude)

    if not math.isfinite(value):
        raise ValueError(f"Value must be finite, got {value}.")
    if kind is ElementKind.RESISTANCE and value < 0:
        raise ValueError(f"Resistance must be non-negative, got {value} ohm.")
    return value


def _try_float(text: str) -> Optional[float]:
    try:
        return float(text)
    except ValueError:
        return None
