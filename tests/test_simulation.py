# --- tests/test_simulation.py ---
import logging

import pytest
import numpy as np

from meshsolve import (
    CircuitBuildError,
    SolveRunError,
    SolverConfig,
    format_report,
    run_solve,
    solve_circuit_file,
    write_report,
)
from meshsolve.cli import main
from meshsolve.reporting import default_report_path
from meshsolve.simulation import (
    BranchCurrentMode,
    ConfigParsingError,
    MalformedTopologyError,
    SingularSystemError,
    parse_solver_config,
)
from meshsolve.validation import ValidationIssueLevel

from tests.conftest import SERIES_TWO_MESH_XML, SERIES_TWO_MESH_YAML, build_topology, write_netlist


EXPECTED_SERIES_REPORT = """------------------
----- Meshes -----
------------------

Mesh with ID: A:
--> Current: 4 (A)

Mesh with ID: B:
--> Current: 2 (A)

------------------
---- Branches ----
------------------

Branch with ID: b1:
--> Current: 4 (A)

Branch with ID: s:
--> Current: 2 (A)
--> Power dissipated in R1: 20 (W)

Branch with ID: b2:
--> Current: 2 (A)
--> Power dissipated in R2: 20 (W)
"""

OPPOSING_XML = """<meshes name="Opposing">
  <mesh ID="A">
    <branch ID="a"><battery ID="V1" value="30 V"/><resistance ID="R1" value="2 ohm"/></branch>
    <branch ID="s"><resistance ID="Rs" value="4"/></branch>
  </mesh>
  <mesh ID="B">
    <branch ID="s"><resistance ID="Rs" value="4"/></branch>
    <branch ID="b"><battery ID="V2" value="-30"/><resistance ID="R2" value="2"/></branch>
  </mesh>
</meshes>
"""

BATTERY_ONLY_XML = '<meshes><mesh ID="A"><branch ID="b"><battery ID="V1" value="5"/></branch></mesh></meshes>'


class TestSolverConfig:
    def test_defaults(self):
        config = parse_solver_config(None)
        assert config == SolverConfig()
        assert config.pivot_tolerance == 1e-12
        assert config.branch_current_mode is BranchCurrentMode.HEURISTIC

    def test_netlist_values(self):
        config = parse_solver_config({"pivot_tolerance": "1e-9", "branch_current_mode": "Oriented"})
        assert config.pivot_tolerance == 1e-9
        assert config.branch_current_mode is BranchCurrentMode.ORIENTED

    def test_overrides_take_precedence(self):
        config = parse_solver_config(
            {"pivot_tolerance": 1e-9, "branch_current_mode": "oriented"},
            overrides={"pivot_tolerance": 0.0, "branch_current_mode": None},
        )
        assert config.pivot_tolerance == 0.0
        assert config.branch_current_mode is BranchCurrentMode.ORIENTED

    @pytest.mark.parametrize("raw", [
        {"pivot_tolerance": -1.0},
        {"pivot_tolerance": "nan"},
        {"pivot_tolerance": "tiny"},
        {"branch_current_mode": "magnitude"},
        {"max_iterations": 10},
    ])
    def test_invalid_values(self, raw):
        with pytest.raises(ConfigParsingError):
            parse_solver_config(raw)


class TestRunSolve:
    def test_series_two_mesh(self, series_two_mesh):
        result = run_solve(series_two_mesh)
        np.testing.assert_array_equal(result.loop_currents, [4.0, 2.0])
        assert result.circuit_name == "SeriesTwoMesh"
        np.testing.assert_array_equal(result.system.impedance_matrix, [[5.0, -5.0], [-5.0, 10.0]])

    def test_oriented_mode_through_config(self, opposing_two_mesh):
        result = run_solve(opposing_two_mesh, SolverConfig(branch_current_mode=BranchCurrentMode.ORIENTED))
        assert result.branch("s").current == pytest.approx(6.0)

    def test_ladder_matches_numpy(self, ladder_three_mesh):
        result = run_solve(ladder_three_mesh)
        expected = np.linalg.solve(result.system.impedance_matrix, result.system.voltages)
        np.testing.assert_allclose(result.loop_currents, expected, rtol=1e-12)

    def test_malformed_topology_is_wrapped(self):
        topology = build_topology([
            ("M1", [("s1", [("resistance", "R1", 1.0)]), ("s2", [("resistance", "R2", 1.0)])]),
            ("M2", [("s1", [("resistance", "R1", 1.0)]), ("s2", [("resistance", "R2", 1.0)])]),
        ])
        with pytest.raises(SolveRunError) as excinfo:
            run_solve(topology)
        assert isinstance(excinfo.value.__cause__, MalformedTopologyError)
        assert "Malformed Circuit Topology" in str(excinfo.value)
        # A failed run leaves no solved values behind.
        assert not topology.is_solved

    def test_singular_system_is_wrapped(self, caplog):
        topology = build_topology([("M1", [("b1", [("battery", "V1", 5.0)])])])
        with caplog.at_level(logging.WARNING):
            with pytest.raises(SolveRunError) as excinfo:
                run_solve(topology)
        assert isinstance(excinfo.value.__cause__, SingularSystemError)
        assert "Pivot Index:    0" in str(excinfo.value)
        assert "TOPO_MESH_ZERO_IMPEDANCE" in caplog.text

    def test_unexpected_errors_are_wrapped(self, series_two_mesh):
        with pytest.raises(SolveRunError, match="Unexpected Solver Error"):
            run_solve(series_two_mesh, SolverConfig(pivot_tolerance=None))


class TestSolveCircuitFile:
    def test_xml_end_to_end(self, tmp_path):
        result = solve_circuit_file(write_netlist(tmp_path, "series.xml", SERIES_TWO_MESH_XML))
        assert format_report(result) == EXPECTED_SERIES_REPORT

    def test_yaml_end_to_end(self, tmp_path):
        result = solve_circuit_file(write_netlist(tmp_path, "series.yaml", SERIES_TWO_MESH_YAML))
        assert result.mesh_current("A") == pytest.approx(4.0)
        assert result.mesh_current("B") == pytest.approx(2.0)
        assert result.branch("s").elements[0].power == pytest.approx(20.0)

    def test_solver_block_is_applied(self, tmp_path):
        content = SERIES_TWO_MESH_YAML + "solver:\n  branch_current_mode: oriented\n"
        result = solve_circuit_file(write_netlist(tmp_path, "series.yaml", content))
        # A traverses 's' forward and B in reverse, so the branch carries I_A - I_B.
        assert result.branch("s").current == pytest.approx(2.0)

    def test_overrides_beat_netlist(self, tmp_path):
        path = write_netlist(tmp_path, "opposing.xml", OPPOSING_XML)
        result = solve_circuit_file(path, overrides={"branch_current_mode": "oriented"})
        assert result.circuit_name == "Opposing"
        assert result.branch("s").current == pytest.approx(6.0)

    def test_invalid_solver_block(self, tmp_path):
        content = SERIES_TWO_MESH_YAML + "solver:\n  pivot_tolerance: -1\n"
        with pytest.raises(SolveRunError, match="Invalid Solver Configuration"):
            solve_circuit_file(write_netlist(tmp_path, "series.yaml", content))

    def test_conflicting_shared_element_is_a_build_error(self, tmp_path):
        content = SERIES_TWO_MESH_XML.replace('<resistance ID="R1" value="5"/>', '<resistance ID="R1" value="6"/>', 1)
        with pytest.raises(CircuitBuildError) as excinfo:
            solve_circuit_file(write_netlist(tmp_path, "conflict.xml", content))
        assert isinstance(excinfo.value.__cause__, MalformedTopologyError)
        assert excinfo.value.__cause__.codes == ["TOPO_ELEM_CONFLICT"]

    def test_empty_mesh_is_rejected_at_solve_time(self, tmp_path):
        content = SERIES_TWO_MESH_XML.replace("</meshes>", '  <mesh ID="C"/>\n</meshes>')
        with pytest.raises(SolveRunError) as excinfo:
            solve_circuit_file(write_netlist(tmp_path, "empty_mesh.xml", content))
        issues = excinfo.value.__cause__.issues
        assert [(issue.code, issue.mesh_id) for issue in issues] == [("TOPO_MESH_EMPTY", "C")]
        assert issues[0].level == ValidationIssueLevel.ERROR


class TestReporting:
    def test_default_report_path(self, tmp_path):
        assert default_report_path(tmp_path / "circuit.xml") == tmp_path / "circuit_solved.txt"

    def test_write_report(self, series_two_mesh, tmp_path):
        path = write_report(run_solve(series_two_mesh), tmp_path / "out.txt")
        assert path.read_text(encoding="utf-8") == EXPECTED_SERIES_REPORT

    def test_numbers_use_six_significant_digits(self):
        topology = build_topology([("M1", [("b1", [("battery", "V1", 1.0), ("resistance", "R1", 3.0)])])])
        report = format_report(run_solve(topology))
        assert "--> Current: 0.333333 (A)" in report
        assert "--> Power dissipated in R1: 0.333333 (W)" in report


class TestCommandLine:
    def test_writes_default_report(self, tmp_path):
        path = write_netlist(tmp_path, "series.xml", SERIES_TWO_MESH_XML)
        assert main([str(path), "--log-level", "WARNING"]) == 0
        report = tmp_path / "series_solved.txt"
        assert report.read_text(encoding="utf-8") == EXPECTED_SERIES_REPORT

    def test_output_and_mode_options(self, tmp_path):
        path = write_netlist(tmp_path, "opposing.xml", OPPOSING_XML)
        output = tmp_path / "custom.txt"
        exit_code = main([
            str(path), "-o", str(output), "--branch-current-mode", "oriented", "--log-level", "ERROR",
        ])
        assert exit_code == 0
        assert "Branch with ID: s:\n--> Current: 6 (A)" in output.read_text(encoding="utf-8")

    def test_singular_circuit_exits_with_error(self, tmp_path, capsys):
        path = write_netlist(tmp_path, "battery.xml", BATTERY_ONLY_XML)
        assert main([str(path), "--log-level", "CRITICAL"]) == 1
        assert "Singular Impedance Matrix" in capsys.readouterr().err
        assert not (tmp_path / "battery_solved.txt").exists()

    def test_unreadable_netlist_exits_with_error(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.xml"), "--log-level", "CRITICAL"]) == 1
        assert "Netlist Parsing or File Error" in capsys.readouterr().err

    def test_unwritable_report_path_exits_with_error(self, tmp_path, capsys):
        path = write_netlist(tmp_path, "series.xml", SERIES_TWO_MESH_XML)
        output = tmp_path / "no_such_dir" / "report.txt"
        assert main([str(path), "-o", str(output), "--log-level", "CRITICAL"]) == 1
        assert "Cannot write report" in capsys.readouterr().err
        assert not output.exists()

    def test_bad_arguments_exit_with_usage_error(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path / "series.xml"), "--branch-current-mode", "sideways"])
        assert excinfo.value.code == 2


def test_xml_and_yaml_netlists_agree(tmp_path):
    from_xml = solve_circuit_file(write_netlist(tmp_path, "series.xml", SERIES_TWO_MESH_XML))
    from_yaml = solve_circuit_file(write_netlist(tmp_path, "series.yaml", SERIES_TWO_MESH_YAML))
    np.testing.assert_array_equal(from_xml.loop_currents, from_yaml.loop_currents)
    assert [b.branch_id for b in from_xml.branches] == [b.branch_id for b in from_yaml.branches]
    assert from_xml.total_dissipated_power == from_yaml.total_dissipated_power
