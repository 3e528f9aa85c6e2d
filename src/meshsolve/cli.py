# src/meshsolve/cli.py
"""
Command-line entry point: solve a mesh netlist and write the text report.

    meshsolve circuit.xml
    meshsolve circuit.yaml -o results.txt --branch-current-mode oriented
"""
import argparse
import logging
import sys
from typing import List, Optional

from .errors import MeshSolveError
from .log_config import setup_logging
from .reporting import default_report_path, write_report
from .simulation import BranchCurrentMode, solve_circuit_file

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meshsolve",
        description="Solve mesh currents and dissipated power of a planar resistive DC circuit.",
    )
    parser.add_argument("circuit", help="Netlist file (.xml, .yaml or .yml).")
    parser.add_argument(
        "-o", "--output",
        help="Report path. Defaults to '<circuit>_solved.txt' next to the input file.",
    )
    parser.add_argument(
        "--pivot-tolerance", type=float, default=None,
        help="Diagonal divisors at or below this magnitude are treated as zero.",
    )
    parser.add_argument(
        "--branch-current-mode", choices=[mode.value for mode in BranchCurrentMode], default=None,
        help="How mesh currents combine on shared branches (default: heuristic).",
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    overrides = {
        'pivot_tolerance': args.pivot_tolerance,
        'branch_current_mode': args.branch_current_mode,
    }
    try:
        result = solve_circuit_file(args.circuit, overrides=overrides)
    except MeshSolveError as e:
        logger.error("Solving failed; no report was written.")
        print(str(e), file=sys.stderr)
        return 1

    output_path = args.output or default_report_path(args.circuit)
    try:
        write_report(result, output_path)
    except OSError as e:
        logger.error(f"Could not write the report to {output_path}.")
        print(f"Cannot write report '{output_path}': {e}", file=sys.stderr)
        return 1
    logger.info("DONE!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
