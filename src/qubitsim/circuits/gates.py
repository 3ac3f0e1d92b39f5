"""
Gate catalog.

Fixed and parameterized unitaries used by the circuit model and the state
vector engine. Single-qubit gates are plain 2×2 matrices. Controlled gates are
described by their control qubits plus the 2×2 transform applied to the target,
so the engine never materializes dense 4×4 or 8×8 matrices.

Qubit ordering inside a ``Gate``: controls first, target last
(``CX(control, target)``, ``CCX(c1, c2, target)``, ``CSWAP(control, a, b)``).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Tuple
import math

import numpy as np

from qubitsim.exceptions import CircuitError, GateParameterError, QubitIndexError


class GateKind(str, Enum):
    """Identifier of every gate in the catalog."""

    I = "i"
    X = "x"
    Y = "y"
    Z = "z"
    H = "h"
    S = "s"
    SDG = "sdg"
    T = "t"
    TDG = "tdg"
    RX = "rx"
    RY = "ry"
    RZ = "rz"
    P = "p"
    U = "u"

    CX = "cx"
    CY = "cy"
    CZ = "cz"
    CH = "ch"
    CP = "cp"
    SWAP = "swap"

    CCX = "ccx"
    CSWAP = "cswap"

    BARRIER = "barrier"


@dataclass(frozen=True)
class GateSpec:
    """Static shape of a gate kind."""

    num_qubits: int  # 0 means "any number" (barrier)
    num_controls: int
    num_params: int
    description: str


GATE_SPECS: Dict[GateKind, GateSpec] = {
    GateKind.I: GateSpec(1, 0, 0, "Identity"),
    GateKind.X: GateSpec(1, 0, 0, "Pauli-X (NOT, bit flip)"),
    GateKind.Y: GateSpec(1, 0, 0, "Pauli-Y"),
    GateKind.Z: GateSpec(1, 0, 0, "Pauli-Z (phase flip)"),
    GateKind.H: GateSpec(1, 0, 0, "Hadamard (superposition)"),
    GateKind.S: GateSpec(1, 0, 0, "S gate (sqrt Z)"),
    GateKind.SDG: GateSpec(1, 0, 0, "S-dagger"),
    GateKind.T: GateSpec(1, 0, 0, "T gate (pi/8)"),
    GateKind.TDG: GateSpec(1, 0, 0, "T-dagger"),
    GateKind.RX: GateSpec(1, 0, 1, "X-rotation by angle theta"),
    GateKind.RY: GateSpec(1, 0, 1, "Y-rotation by angle theta"),
    GateKind.RZ: GateSpec(1, 0, 1, "Z-rotation by angle theta"),
    GateKind.P: GateSpec(1, 0, 1, "Phase gate diag(1, e^(i*lambda))"),
    GateKind.U: GateSpec(1, 0, 3, "General single-qubit U(theta, phi, lambda)"),
    GateKind.CX: GateSpec(2, 1, 0, "Controlled-X (CNOT)"),
    GateKind.CY: GateSpec(2, 1, 0, "Controlled-Y"),
    GateKind.CZ: GateSpec(2, 1, 0, "Controlled-Z"),
    GateKind.CH: GateSpec(2, 1, 0, "Controlled-Hadamard"),
    GateKind.CP: GateSpec(2, 1, 1, "Controlled-phase"),
    GateKind.SWAP: GateSpec(2, 0, 0, "Swap two qubits"),
    GateKind.CCX: GateSpec(3, 2, 0, "Toffoli (controlled-controlled-X)"),
    GateKind.CSWAP: GateSpec(3, 1, 0, "Fredkin (controlled swap)"),
    GateKind.BARRIER: GateSpec(0, 0, 0, "Barrier (no-op marker)"),
}

GATE_DESCRIPTIONS: Dict[str, str] = {
    kind.value: spec.description for kind, spec in GATE_SPECS.items()
}


def _frozen(matrix) -> np.ndarray:
    array = np.array(matrix, dtype=np.complex128)
    array.flags.writeable = False
    return array


_INV_SQRT2 = 1.0 / math.sqrt(2.0)

I_MATRIX = _frozen([[1, 0], [0, 1]])
X_MATRIX = _frozen([[0, 1], [1, 0]])
Y_MATRIX = _frozen([[0, -1j], [1j, 0]])
Z_MATRIX = _frozen([[1, 0], [0, -1]])
H_MATRIX = _frozen([[_INV_SQRT2, _INV_SQRT2], [_INV_SQRT2, -_INV_SQRT2]])
S_MATRIX = _frozen([[1, 0], [0, 1j]])
SDG_MATRIX = _frozen([[1, 0], [0, -1j]])
T_MATRIX = _frozen([[1, 0], [0, np.exp(1j * math.pi / 4)]])
TDG_MATRIX = _frozen([[1, 0], [0, np.exp(-1j * math.pi / 4)]])


def rx_matrix(theta: float) -> np.ndarray:
    """Rx(θ) = exp(-iθX/2) = [[cos θ/2, -i sin θ/2], [-i sin θ/2, cos θ/2]]."""
    c = math.cos(theta / 2)
    s = math.sin(theta / 2)
    return np.array([[c, -1j * s], [-1j * s, c]], dtype=np.complex128)


def ry_matrix(theta: float) -> np.ndarray:
    """Ry(θ) = exp(-iθY/2) = [[cos θ/2, -sin θ/2], [sin θ/2, cos θ/2]]."""
    c = math.cos(theta / 2)
    s = math.sin(theta / 2)
    return np.array([[c, -s], [s, c]], dtype=np.complex128)


def rz_matrix(theta: float) -> np.ndarray:
    """Rz(θ) = exp(-iθZ/2) = diag(e^{-iθ/2}, e^{iθ/2})."""
    return np.array(
        [[np.exp(-0.5j * theta), 0], [0, np.exp(0.5j * theta)]],
        dtype=np.complex128,
    )


def p_matrix(lam: float) -> np.ndarray:
    """Phase gate P(λ) = diag(1, e^{iλ})."""
    return np.array([[1, 0], [0, np.exp(1j * lam)]], dtype=np.complex128)


def u_matrix(theta: float, phi: float, lam: float) -> np.ndarray:
    """
    General single-qubit gate.

    U(θ, φ, λ) = [[cos(θ/2),           -exp(iλ)sin(θ/2)    ],
                  [exp(iφ)sin(θ/2),     exp(i(φ+λ))cos(θ/2)]]
    """
    cos_half = np.cos(theta / 2)
    sin_half = np.sin(theta / 2)

    return np.array([
        [cos_half, -np.exp(1j * lam) * sin_half],
        [np.exp(1j * phi) * sin_half, np.exp(1j * (phi + lam)) * cos_half]
    ], dtype=np.complex128)


# Matrix acting on the (single or target) qubit, keyed by gate kind.
_TARGET_MATRICES: Dict[GateKind, Callable[..., np.ndarray]] = {
    GateKind.I: lambda: I_MATRIX,
    GateKind.X: lambda: X_MATRIX,
    GateKind.Y: lambda: Y_MATRIX,
    GateKind.Z: lambda: Z_MATRIX,
    GateKind.H: lambda: H_MATRIX,
    GateKind.S: lambda: S_MATRIX,
    GateKind.SDG: lambda: SDG_MATRIX,
    GateKind.T: lambda: T_MATRIX,
    GateKind.TDG: lambda: TDG_MATRIX,
    GateKind.RX: rx_matrix,
    GateKind.RY: ry_matrix,
    GateKind.RZ: rz_matrix,
    GateKind.P: p_matrix,
    GateKind.U: u_matrix,
    GateKind.CX: lambda: X_MATRIX,
    GateKind.CY: lambda: Y_MATRIX,
    GateKind.CZ: lambda: Z_MATRIX,
    GateKind.CH: lambda: H_MATRIX,
    GateKind.CP: p_matrix,
    GateKind.CCX: lambda: X_MATRIX,
}


@dataclass(frozen=True)
class Gate:
    """
    Immutable gate instance: kind, qubits it acts on, and angle parameters.

    Only shape is checked here (arity, parameter count, duplicate qubits).
    Range checks against a register size happen in the circuit builder.
    """

    kind: GateKind
    qubits: Tuple[int, ...]
    params: Tuple[float, ...] = ()

    def __post_init__(self):
        try:
            kind = GateKind(self.kind)
        except ValueError:
            raise CircuitError(f"Unknown gate {self.kind!r}") from None
        qubits = tuple(self.qubits)
        try:
            params = tuple(float(p) for p in self.params)
        except (TypeError, ValueError):
            raise GateParameterError(
                f"Gate '{kind.value}' parameters must be real numbers, "
                f"got {list(self.params)!r}"
            ) from None
        spec = GATE_SPECS[kind]

        if spec.num_qubits and len(qubits) != spec.num_qubits:
            raise CircuitError(
                f"Gate '{kind.value}' acts on {spec.num_qubits} qubit(s), "
                f"got {len(qubits)}: {list(qubits)}"
            )
        if not spec.num_qubits and not qubits:
            raise CircuitError(f"Gate '{kind.value}' needs at least one qubit")
        for q in qubits:
            if isinstance(q, bool) or not isinstance(q, (int, np.integer)):
                raise QubitIndexError(f"Qubit index must be an integer, got {q!r}")
        qubits = tuple(int(q) for q in qubits)
        if len(set(qubits)) != len(qubits):
            raise QubitIndexError(
                f"Duplicate qubit in gate '{kind.value}': {list(qubits)}"
            )

        if len(params) != spec.num_params:
            raise GateParameterError(
                f"Gate '{kind.value}' takes {spec.num_params} parameter(s), "
                f"got {len(params)}"
            )
        if not all(math.isfinite(p) for p in params):
            raise GateParameterError(
                f"Gate '{kind.value}' parameters must be finite, got {list(params)}"
            )

        # Frozen dataclass: normalize fields via object.__setattr__
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "qubits", qubits)
        object.__setattr__(self, "params", params)

    @property
    def num_qubits(self) -> int:
        return len(self.qubits)

    @property
    def controls(self) -> Tuple[int, ...]:
        return self.qubits[:num_controls(self.kind)]

    @property
    def targets(self) -> Tuple[int, ...]:
        return self.qubits[num_controls(self.kind):]

    @property
    def is_controlled(self) -> bool:
        return is_controlled(self.kind)

    @property
    def is_unitary(self) -> bool:
        return self.kind is not GateKind.BARRIER

    def matrix(self) -> np.ndarray:
        """2×2 matrix of the gate (target transform for controlled gates)."""
        return gate_matrix(self)

    def inverse(self) -> "Gate":
        return inverse(self)

    def __str__(self) -> str:
        if self.params:
            args = ", ".join(f"{p:.6g}" for p in self.params)
            return f"{self.kind.value}({args}) {list(self.qubits)}"
        return f"{self.kind.value} {list(self.qubits)}"


def num_qubits(kind: GateKind) -> int:
    """Arity of a gate kind (0 for barrier, which spans any number)."""
    return GATE_SPECS[GateKind(kind)].num_qubits


def num_controls(kind: GateKind) -> int:
    return GATE_SPECS[GateKind(kind)].num_controls


def is_controlled(kind: GateKind) -> bool:
    return num_controls(kind) > 0


def has_matrix(kind: GateKind) -> bool:
    """True when the gate is described by a 2×2 (target) matrix."""
    return GateKind(kind) in _TARGET_MATRICES


def gate_matrix(gate: Gate) -> np.ndarray:
    """
    Return the 2×2 matrix of a single-qubit gate, or the target transform of
    a controlled gate. SWAP, CSWAP and BARRIER are index permutations or
    no-ops and have no such matrix.
    """
    try:
        factory = _TARGET_MATRICES[gate.kind]
    except KeyError:
        raise ValueError(f"Gate '{gate.kind.value}' has no 2x2 matrix") from None
    return factory(*gate.params)


def inverse(gate: Gate) -> Gate:
    """Adjoint of a gate, as another catalog gate on the same qubits."""
    kind = gate.kind
    if kind is GateKind.S:
        return Gate(GateKind.SDG, gate.qubits)
    if kind is GateKind.SDG:
        return Gate(GateKind.S, gate.qubits)
    if kind is GateKind.T:
        return Gate(GateKind.TDG, gate.qubits)
    if kind is GateKind.TDG:
        return Gate(GateKind.T, gate.qubits)
    if kind in (GateKind.RX, GateKind.RY, GateKind.RZ, GateKind.P, GateKind.CP):
        return Gate(kind, gate.qubits, (-gate.params[0],))
    if kind is GateKind.U:
        theta, phi, lam = gate.params
        return Gate(GateKind.U, gate.qubits, (-theta, -lam, -phi))
    # Remaining gates are Hermitian (self-inverse) or no-ops
    return gate


def is_unitary_matrix(matrix: np.ndarray, atol: float = 1e-12) -> bool:
    """Check U†U = I."""
    matrix = np.asarray(matrix, dtype=np.complex128)
    identity = np.eye(matrix.shape[0], dtype=np.complex128)
    return bool(np.allclose(matrix.conj().T @ matrix, identity, atol=atol))
