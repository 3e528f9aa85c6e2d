# src/meshsolve/constants.py
import logging

logger = logging.getLogger(__name__)

# --- Numerical Constants ---

#: Magnitude at or below which a diagonal divisor of the LU factors is treated
#: as zero. The factorization performs no pivoting, so a vanishing divisor
#: cannot be worked around and is reported as a singular system.
DEFAULT_PIVOT_TOLERANCE: float = 1.0e-12

# --- Canonical units of the solved quantities ---

#: Unit in which bare battery values are interpreted.
VOLTAGE_UNIT: str = "volt"
#: Unit in which bare resistance values are interpreted.
IMPEDANCE_UNIT: str = "ohm"

#: Labels written after numbers in the text report.
CURRENT_LABEL: str = "A"
POWER_LABEL: str = "W"

#: Suffix appended to the input file stem to name the default report file.
REPORT_SUFFIX: str = "_solved.txt"
