# --- tests/test_topology.py ---
import pytest

from meshsolve import CircuitTopology, ElementKind
from meshsolve.data_structures import FORWARD, REVERSE
from meshsolve.validation import MalformedTopologyError

from tests.conftest import SERIES_TWO_MESH, build_topology


class TestRecordElement:
    def test_battery_values_accumulate(self):
        topology = CircuitTopology()
        topology.record_element("M1", "b1", "battery", "V1", 10.0)
        topology.record_element("M1", "b2", ElementKind.BATTERY, "V2", -4.0)
        mesh = topology.get_mesh("M1")
        assert mesh.voltage_source == 6.0
        assert mesh.impedance == 0.0
        # Batteries never become branch elements.
        assert topology.get_branch("b1").elements == []

    def test_resistances_accumulate_into_mesh_and_branch(self):
        topology = CircuitTopology()
        topology.record_element("M1", "b1", "resistance", "R1", 2.0)
        topology.record_element("M1", "b1", "resistance", "R2", 3.0)
        topology.record_element("M1", "b2", "resistance", "R3", 5.0)
        assert topology.get_mesh("M1").impedance == 10.0
        assert topology.get_branch("b1").impedance == 5.0
        assert topology.get_branch("b1").element_ids == ["R1", "R2"]
        assert topology.get_mesh("M1").branch_ids == ["b1", "b2"]

    def test_repeated_resistance_is_idempotent(self):
        topology = CircuitTopology()
        topology.record_element("M1", "b1", "resistance", "R1", 5.0)
        topology.record_element("M1", "b1", "resistance", "R1", 5.0)
        assert topology.get_mesh("M1").impedance == 5.0
        assert topology.get_branch("b1").impedance == 5.0
        assert len(topology.get_branch("b1").elements) == 1

    def test_shared_branch_is_a_single_object(self, series_two_mesh):
        shared = series_two_mesh.get_branch("s")
        assert shared.impedance == 5.0
        assert shared.element_ids == ["R1"]
        assert series_two_mesh.get_mesh("A").impedance == 5.0
        assert series_two_mesh.get_mesh("B").impedance == 10.0
        assert [m.mesh_id for m in series_two_mesh.meshes_traversing("s")] == ["A", "B"]

    def test_conflicting_resistance_value_is_rejected(self):
        topology = CircuitTopology()
        topology.record_element("M1", "s", "resistance", "R1", 4.0)
        with pytest.raises(MalformedTopologyError) as excinfo:
            topology.record_element("M2", "s", "resistance", "R1", 5.0)
        assert excinfo.value.codes == ["TOPO_ELEM_CONFLICT"]
        assert excinfo.value.issues[0].mesh_id == "M2"
        assert "Malformed Circuit Topology" in excinfo.value.get_diagnostic_report()

    def test_unknown_element_kind(self):
        topology = CircuitTopology()
        with pytest.raises(ValueError, match="Unknown element kind"):
            topology.record_element("M1", "b1", "capacitor", "C1", 1.0)

    def test_element_kind_is_case_insensitive(self):
        assert ElementKind.coerce("Resistance") is ElementKind.RESISTANCE

    def test_declaration_order_does_not_change_totals(self):
        reordered = [(mesh_id, list(reversed(branches))) for mesh_id, branches in SERIES_TWO_MESH]
        original = build_topology(SERIES_TWO_MESH)
        permuted = build_topology(reordered)
        for mesh in original.meshes:
            other = permuted.get_mesh(mesh.mesh_id)
            assert other.impedance == mesh.impedance
            assert other.voltage_source == mesh.voltage_source


    def test_totals_are_exactly_order_independent(self):
        values = [("R1", 0.1), ("R2", 0.2), ("R3", 0.3)]
        totals = []
        for ordering in (values, list(reversed(values))):
            topology = CircuitTopology()
            for element_id, value in ordering:
                topology.record_element("M1", "b1", "resistance", element_id, value)
                topology.record_element("M1", "b1", "battery", "V" + element_id, value)
            mesh = topology.get_mesh("M1")
            totals.append((mesh.impedance, mesh.voltage_source, topology.get_branch("b1").impedance))

        assert totals[0] == totals[1]
        assert totals[0] == (0.6, 0.6, 0.6)


class TestOrientation:
    def test_first_mesh_is_forward_later_mesh_is_reverse(self, series_two_mesh):
        assert series_two_mesh.get_mesh("A").orientation_of("s") == FORWARD
        assert series_two_mesh.get_mesh("B").orientation_of("s") == REVERSE
        assert series_two_mesh.get_mesh("B").orientation_of("b2") == FORWARD

    def test_explicit_orientation_wins(self):
        topology = CircuitTopology()
        topology.attach_branch("M1", "s")
        topology.attach_branch("M2", "s", orientation=FORWARD)
        assert topology.get_mesh("M2").orientation_of("s") == FORWARD

    def test_conflicting_redeclaration(self):
        topology = CircuitTopology()
        topology.attach_branch("M1", "s", orientation=FORWARD)
        with pytest.raises(ValueError, match="cannot redeclare"):
            topology.attach_branch("M1", "s", orientation=REVERSE)

    def test_invalid_orientation(self):
        topology = CircuitTopology()
        with pytest.raises(ValueError, match="orientation"):
            topology.attach_branch("M1", "s", orientation=2)


def test_orders_follow_first_appearance(ladder_three_mesh):
    assert [m.mesh_id for m in ladder_three_mesh.meshes] == ["M1", "M2", "M3"]
    assert [b.branch_id for b in ladder_three_mesh.branches] == ["a", "s12", "s23", "b", "c"]
    assert ladder_three_mesh.mesh_count == 3
    assert not ladder_three_mesh.is_solved
