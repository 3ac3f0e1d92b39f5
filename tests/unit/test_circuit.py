"""
Unit tests for the Circuit model and builder.
"""

import pytest

from qubitsim.circuits import Circuit, Gate, GateKind
from qubitsim.exceptions import (
    CircuitError,
    GateParameterError,
    InvalidQubitCountError,
    QubitIndexError,
)


class TestCircuitConstruction:
    """Tests for creation and validation."""

    @pytest.mark.parametrize("n", [0, -3])
    def test_non_positive_qubit_count(self, n):
        with pytest.raises(InvalidQubitCountError):
            Circuit(n)

    def test_non_integer_qubit_count(self):
        with pytest.raises(InvalidQubitCountError):
            Circuit(2.5)

        with pytest.raises(InvalidQubitCountError):
            Circuit(True)

    def test_empty_circuit(self):
        circuit = Circuit(3)
        assert len(circuit) == 0
        assert circuit.depth() == 0
        assert not circuit.measured

    def test_out_of_range_qubit_rejected_eagerly(self):
        with pytest.raises(QubitIndexError, match="out of range"):
            Circuit(2).h(2)

        with pytest.raises(QubitIndexError):
            Circuit(2).cx(0, 5)

    def test_bad_parameter_rejected(self):
        with pytest.raises(GateParameterError):
            Circuit(1).rx(0, float("inf"))

    @pytest.mark.parametrize("angle", ["abc", None, [1.0]])
    def test_non_numeric_parameter_rejected(self, angle):
        with pytest.raises(GateParameterError, match="real numbers"):
            Circuit(1).rx(0, angle)

    def test_unknown_gate_kind_rejected(self):
        with pytest.raises(CircuitError, match="Unknown gate 'foo'"):
            Circuit(1).append("foo", [0])

    def test_constructor_validates_gate_ranges(self):
        with pytest.raises(QubitIndexError):
            Circuit(2, gates=(Gate(GateKind.X, (3,)),))

    def test_constructor_rejects_non_gates(self):
        with pytest.raises(CircuitError, match="Expected Gate"):
            Circuit(2, gates=("h",))


class TestBuilder:
    """Tests for the fluent, copy-on-append builder."""

    def test_builder_returns_new_circuit(self):
        base = Circuit(2)
        extended = base.h(0)

        assert len(base) == 0
        assert len(extended) == 1
        assert extended is not base

    def test_branching_from_shared_prefix(self):
        prefix = Circuit(2).h(0)
        a = prefix.cx(0, 1)
        b = prefix.z(1)

        assert [g.kind for g in a] == [GateKind.H, GateKind.CX]
        assert [g.kind for g in b] == [GateKind.H, GateKind.Z]

    def test_gate_order_and_arguments(self):
        circuit = Circuit(3).h(0).rx(1, 0.5).cx(0, 2).ccx(0, 1, 2).measure_all()

        assert circuit.gates[0] == Gate(GateKind.H, (0,))
        assert circuit.gates[1] == Gate(GateKind.RX, (1,), (0.5,))
        assert circuit.gates[2] == Gate(GateKind.CX, (0, 2))
        assert circuit.gates[3] == Gate(GateKind.CCX, (0, 1, 2))
        assert circuit.measured
        assert circuit.measured_qubits == (0, 1, 2)

    def test_aliases(self):
        assert Circuit(2).cnot(0, 1) == Circuit(2).cx(0, 1)
        assert Circuit(3).toffoli(0, 1, 2) == Circuit(3).ccx(0, 1, 2)

    def test_every_builder_method(self):
        circuit = (
            Circuit(3)
            .i(0).x(0).y(1).z(2).h(0).s(1).sdg(1).t(2).tdg(2)
            .rx(0, 0.1).ry(1, 0.2).rz(2, 0.3).p(0, 0.4).u(1, 0.5, 0.6, 0.7)
            .cx(0, 1).cy(1, 2).cz(2, 0).ch(0, 2).cp(1, 0, 0.8).swap(0, 2)
            .ccx(0, 1, 2).cswap(2, 0, 1).barrier()
        )
        assert len(circuit) == 23
        assert circuit.gates[-1] == Gate(GateKind.BARRIER, (0, 1, 2))

    def test_append_by_name(self):
        circuit = Circuit(2).append("cp", [0, 1], [1.2])
        assert circuit.gates[0] == Gate(GateKind.CP, (0, 1), (1.2,))

    def test_measure_all_need_not_be_last(self):
        circuit = Circuit(1).measure_all().x(0)
        assert circuit.measured
        assert len(circuit) == 1


class TestIntrospection:
    """Tests for depth, counts and naming."""

    def test_depth_ignores_barriers(self):
        circuit = Circuit(3).h(0).h(1).barrier().cx(0, 1).h(2)
        assert circuit.depth() == 2

    def test_depth_of_chain(self):
        circuit = Circuit(3).h(0).cx(0, 1).cx(1, 2)
        assert circuit.depth() == 3

    def test_count_gates(self):
        circuit = Circuit(2).h(0).h(1).cx(0, 1)
        assert circuit.count_gates() == {GateKind.H: 2, GateKind.CX: 1}

    def test_named(self):
        circuit = Circuit(2).h(0).named("demo")
        assert circuit.name == "demo"
        assert "demo" in str(circuit)


class TestComposition:
    """Tests for compose, repeat and inverse."""

    def test_compose(self):
        a = Circuit(3).h(0)
        b = Circuit(2).cx(0, 1).measure_all()
        combined = a.compose(b)

        assert combined.num_qubits == 3
        assert [g.kind for g in combined] == [GateKind.H, GateKind.CX]
        assert combined.measured

    def test_compose_wider_circuit_rejected(self):
        with pytest.raises(CircuitError, match="Cannot compose"):
            Circuit(1).compose(Circuit(2))

    def test_repeat(self):
        circuit = Circuit(1).h(0).t(0).repeat(3)
        assert len(circuit) == 6

    @pytest.mark.parametrize("n", [0, -1, 1.5])
    def test_repeat_invalid(self, n):
        with pytest.raises(CircuitError, match="positive integer"):
            Circuit(1).h(0).repeat(n)

    def test_inverse_reverses_and_adjoints(self):
        circuit = Circuit(2).h(0).s(1).rz(0, 0.3).cx(0, 1).measure_all()
        inverse = circuit.inverse()

        assert [g.kind for g in inverse] == [GateKind.CX, GateKind.RZ, GateKind.SDG, GateKind.H]
        assert inverse.gates[1].params == (-0.3,)
        assert not inverse.measured
