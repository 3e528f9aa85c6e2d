# src/meshsolve/units.py
import logging

import pint

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity

# Canonical dimensionalities used to check element values read from a netlist.
VOLTAGE_DIMENSIONALITY = ureg.parse_expression('volt').dimensionality
IMPEDANCE_DIMENSIONALITY = ureg.parse_expression('ohm').dimensionality

logger.debug("Pint unit registry initialized with VOLTAGE and IMPEDANCE dimensionalities.")
