"""
Circuit model and fluent builder.

A ``Circuit`` is an immutable value: every builder call validates its qubit
indices against the register size and returns a new ``Circuit`` with the
operation appended. Nothing here knows about amplitudes or randomness.

Example:
    >>> bell = Circuit(2).h(0).cx(0, 1).measure_all()
    >>> len(bell), bell.depth()
    (2, 2)
"""

from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

import numpy as np

from qubitsim.circuits.gates import Gate, GateKind
from qubitsim.exceptions import CircuitError, InvalidQubitCountError, QubitIndexError


def validate_num_qubits(num_qubits) -> int:
    """Return ``num_qubits`` as int, or raise ``InvalidQubitCountError``."""
    if isinstance(num_qubits, bool) or not isinstance(num_qubits, (int, np.integer)):
        raise InvalidQubitCountError(num_qubits)
    if num_qubits <= 0:
        raise InvalidQubitCountError(num_qubits)
    return int(num_qubits)


def validate_qubits(qubits: Iterable[int], num_qubits: int) -> None:
    """Raise ``QubitIndexError`` if any index lies outside [0, num_qubits)."""
    for q in qubits:
        if not 0 <= q < num_qubits:
            raise QubitIndexError(
                f"Qubit index {q} out of range [0, {num_qubits})"
            )


@dataclass(frozen=True)
class Circuit:
    """
    Ordered, immutable sequence of gates on a fixed number of qubits.

    Attributes:
        num_qubits: Register size (> 0), fixed at construction
        gates: Gates in application order
        measured: Set by ``measure_all()``; marks every qubit as reported
        name: Optional label
    """

    num_qubits: int
    gates: Tuple[Gate, ...] = field(default=())
    measured: bool = False
    name: Optional[str] = None

    def __post_init__(self):
        n = validate_num_qubits(self.num_qubits)
        gates = tuple(self.gates)
        for gate in gates:
            if not isinstance(gate, Gate):
                raise CircuitError(f"Expected Gate, got {type(gate).__name__}")
            validate_qubits(gate.qubits, n)
        object.__setattr__(self, "num_qubits", n)
        object.__setattr__(self, "gates", gates)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.gates)

    def __iter__(self) -> Iterator[Gate]:
        return iter(self.gates)

    @property
    def measured_qubits(self) -> Tuple[int, ...]:
        """Qubits reported by sampling (all of them once measured)."""
        return tuple(range(self.num_qubits)) if self.measured else ()

    def depth(self) -> int:
        """Length of the critical path; barriers do not add depth."""
        qubit_depth = [0] * self.num_qubits
        for gate in self.gates:
            if gate.kind is GateKind.BARRIER:
                continue
            layer = max(qubit_depth[q] for q in gate.qubits) + 1
            for q in gate.qubits:
                qubit_depth[q] = layer
        return max(qubit_depth)

    def count_gates(self) -> Dict[GateKind, int]:
        """Number of occurrences of each gate kind."""
        return dict(Counter(gate.kind for gate in self.gates))

    def named(self, name: str) -> "Circuit":
        return replace(self, name=name)

    # ------------------------------------------------------------------
    # Generic append
    # ------------------------------------------------------------------

    def append(
        self,
        kind,
        qubits: Sequence[int],
        params: Sequence[float] = (),
    ) -> "Circuit":
        """Return a new circuit with ``kind`` applied to ``qubits``."""
        gate = Gate(kind, tuple(qubits), tuple(params))
        validate_qubits(gate.qubits, self.num_qubits)
        return replace(self, gates=self.gates + (gate,))

    # ------------------------------------------------------------------
    # Single-qubit gates
    # ------------------------------------------------------------------

    def i(self, qubit: int) -> "Circuit":
        return self.append(GateKind.I, [qubit])

    def x(self, qubit: int) -> "Circuit":
        return self.append(GateKind.X, [qubit])

    def y(self, qubit: int) -> "Circuit":
        return self.append(GateKind.Y, [qubit])

    def z(self, qubit: int) -> "Circuit":
        return self.append(GateKind.Z, [qubit])

    def h(self, qubit: int) -> "Circuit":
        return self.append(GateKind.H, [qubit])

    def s(self, qubit: int) -> "Circuit":
        return self.append(GateKind.S, [qubit])

    def sdg(self, qubit: int) -> "Circuit":
        return self.append(GateKind.SDG, [qubit])

    def t(self, qubit: int) -> "Circuit":
        return self.append(GateKind.T, [qubit])

    def tdg(self, qubit: int) -> "Circuit":
        return self.append(GateKind.TDG, [qubit])

    def rx(self, qubit: int, theta: float) -> "Circuit":
        return self.append(GateKind.RX, [qubit], [theta])

    def ry(self, qubit: int, theta: float) -> "Circuit":
        return self.append(GateKind.RY, [qubit], [theta])

    def rz(self, qubit: int, theta: float) -> "Circuit":
        return self.append(GateKind.RZ, [qubit], [theta])

    def p(self, qubit: int, lam: float) -> "Circuit":
        return self.append(GateKind.P, [qubit], [lam])

    def u(self, qubit: int, theta: float, phi: float, lam: float) -> "Circuit":
        return self.append(GateKind.U, [qubit], [theta, phi, lam])

    # ------------------------------------------------------------------
    # Two- and three-qubit gates
    # ------------------------------------------------------------------

    def cx(self, control: int, target: int) -> "Circuit":
        return self.append(GateKind.CX, [control, target])

    cnot = cx

    def cy(self, control: int, target: int) -> "Circuit":
        return self.append(GateKind.CY, [control, target])

    def cz(self, control: int, target: int) -> "Circuit":
        return self.append(GateKind.CZ, [control, target])

    def ch(self, control: int, target: int) -> "Circuit":
        return self.append(GateKind.CH, [control, target])

    def cp(self, control: int, target: int, lam: float) -> "Circuit":
        return self.append(GateKind.CP, [control, target], [lam])

    def swap(self, qubit_a: int, qubit_b: int) -> "Circuit":
        return self.append(GateKind.SWAP, [qubit_a, qubit_b])

    def ccx(self, control_a: int, control_b: int, target: int) -> "Circuit":
        return self.append(GateKind.CCX, [control_a, control_b, target])

    toffoli = ccx

    def cswap(self, control: int, qubit_a: int, qubit_b: int) -> "Circuit":
        return self.append(GateKind.CSWAP, [control, qubit_a, qubit_b])

    # ------------------------------------------------------------------
    # Markers
    # ------------------------------------------------------------------

    def barrier(self, *qubits: int) -> "Circuit":
        """Barrier across ``qubits`` (all qubits when none given)."""
        if not qubits:
            qubits = tuple(range(self.num_qubits))
        return self.append(GateKind.BARRIER, qubits)

    def measure_all(self) -> "Circuit":
        return replace(self, measured=True)

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def compose(self, other: "Circuit") -> "Circuit":
        """Append ``other``'s gates; ``other`` may not be wider than ``self``."""
        if other.num_qubits > self.num_qubits:
            raise CircuitError(
                f"Cannot compose a {other.num_qubits}-qubit circuit onto "
                f"{self.num_qubits} qubits"
            )
        return replace(
            self,
            gates=self.gates + other.gates,
            measured=self.measured or other.measured,
        )

    def repeat(self, n: int) -> "Circuit":
        """Circuit whose gate sequence is this one's repeated ``n`` times."""
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
            raise CircuitError(f"Repeat count must be a positive integer, got {n!r}")
        return replace(self, gates=self.gates * int(n))

    def inverse(self) -> "Circuit":
        """Reverse the gate order and replace every gate by its adjoint."""
        return replace(
            self,
            gates=tuple(gate.inverse() for gate in reversed(self.gates)),
            measured=False,
        )

    def __str__(self) -> str:
        header = f"Circuit({self.num_qubits} qubits"
        if self.name:
            header += f", name={self.name!r}"
        header += f", {len(self.gates)} gates"
        if self.measured:
            header += ", measure_all"
        lines = [header + ")"]
        lines.extend(f"  {gate}" for gate in self.gates)
        return "\n".join(lines)
