"""
Pure-state statevector engine.

Implements in-place gate application on a dense amplitude vector:
- Single-qubit gates on index pairs that differ only in the target bit
- Controlled gates restricted to indices whose control bits are all 1
- SWAP / CSWAP as amplitude exchanges between index pairs

Bit convention: bit k of a basis index (0 = least significant) is the value
of qubit k, so index 0b01 on two qubits is qubit 0 = 1, qubit 1 = 0.
"""

from typing import Optional, Sequence
import numpy as np

from qubitsim.circuits.gates import Gate, GateKind, X_MATRIX, Z_MATRIX, gate_matrix
from qubitsim.sim.amplitudes import DTYPE, norm_sqr, zero_state
from qubitsim.sim.backend import SimulatorBackend


class StatevectorBackend(SimulatorBackend):
    """
    Statevector engine using NumPy.

    Represents the state as a complex amplitude vector |ψ⟩ of shape (2^n,).
    Gates are applied through views of the vector reshaped to (2, 2, ..., 2):
    every gate touches each amplitude O(1) times, so one application costs
    O(2^n) regardless of which qubits it acts on. No dense 2^n × 2^n matrix is
    ever built and the vector is never renormalized.

    Memory requirement: 2^n complex128 values = 16 * 2^n bytes
    Example: n=20 qubits → 16 MB, n=24 → 256 MB, n=28 → 4 GB
    """

    def __init__(self, n_qubits: int, max_qubits: Optional[int] = None):
        """
        Initialize statevector engine at |0...0⟩.

        Args:
            n_qubits: Number of qubits (>= 1)
            max_qubits: Optional upper bound on ``n_qubits``
        """
        super().__init__(n_qubits, max_qubits)

        self.state: Optional[np.ndarray] = None
        self.init_state()

    def init_state(self, state: Optional[np.ndarray] = None) -> None:
        """
        Initialize quantum state.

        Args:
            state: Optional initial statevector. If None, initialize to |0...0⟩.
                   A provided state must already be normalized.
        """
        if state is None:
            self.state = zero_state(self.n_qubits)
            return

        state = np.asarray(state, dtype=DTYPE)
        if state.shape != (2**self.n_qubits,):
            raise ValueError(
                f"State shape {state.shape} does not match "
                f"expected (2^{self.n_qubits},) = ({2**self.n_qubits},)"
            )
        norm = float(np.sum(norm_sqr(state)))
        if abs(norm - 1.0) > 1e-9:
            raise ValueError(f"State is not normalized (sum |a|^2 = {norm})")
        self.state = np.array(state, dtype=DTYPE)

    # ------------------------------------------------------------------
    # Index helpers
    # ------------------------------------------------------------------

    def _tensor(self) -> np.ndarray:
        """View of the state with one axis per qubit; axis 0 is qubit n-1."""
        return self.state.reshape((2,) * self.n_qubits)

    def _axis(self, qubit: int) -> int:
        return self.n_qubits - 1 - qubit

    def _index(self, fixed) -> tuple:
        """Basic-indexing tuple pinning the given {qubit: bit} values."""
        index = [slice(None)] * self.n_qubits
        for qubit, bit in fixed.items():
            index[self._axis(qubit)] = bit
        return tuple(index)

    # ------------------------------------------------------------------
    # Gate application
    # ------------------------------------------------------------------

    def apply_single(self, qubit: int, matrix: np.ndarray) -> None:
        """
        Apply a 2×2 unitary to ``qubit``.

        For each pair of indices (i0, i1) differing only in the target bit:
            a0' = m00·a0 + m01·a1
            a1' = m10·a0 + m11·a1
        """
        self.validate_qubits([qubit])
        self._apply_matrix((), qubit, matrix)

    def apply_controlled(
        self,
        controls: Sequence[int],
        target: int,
        matrix: np.ndarray,
    ) -> None:
        """
        Apply ``matrix`` to ``target`` on the subspace where every control
        qubit is 1. Indices with any control bit 0 are left untouched.
        """
        controls = tuple(controls)
        self.validate_qubits(controls + (target,))
        self._apply_matrix(controls, target, matrix)

    def _apply_matrix(self, controls, target, matrix) -> None:
        matrix = np.asarray(matrix, dtype=DTYPE)
        if matrix.shape != (2, 2):
            raise ValueError(f"Expected a 2x2 matrix, got shape {matrix.shape}")

        tensor = self._tensor()
        pinned = {c: 1 for c in controls}
        idx0 = self._index({**pinned, target: 0})
        idx1 = self._index({**pinned, target: 1})

        # Both members of each pair must be read before either is written
        a0 = tensor[idx0].copy()
        a1 = tensor[idx1].copy()
        tensor[idx0] = matrix[0, 0] * a0 + matrix[0, 1] * a1
        tensor[idx1] = matrix[1, 0] * a0 + matrix[1, 1] * a1

    def apply_swap(self, qubit_a: int, qubit_b: int) -> None:
        """Exchange amplitudes of index pairs whose two designated bits differ."""
        self.validate_qubits([qubit_a, qubit_b])
        self._swap((), qubit_a, qubit_b)

    def apply_cswap(self, control: int, qubit_a: int, qubit_b: int) -> None:
        """SWAP restricted to indices where ``control`` is 1 (Fredkin)."""
        self.validate_qubits([control, qubit_a, qubit_b])
        self._swap((control,), qubit_a, qubit_b)

    def _swap(self, controls, qubit_a, qubit_b) -> None:
        tensor = self._tensor()
        pinned = {c: 1 for c in controls}
        idx_01 = self._index({**pinned, qubit_a: 0, qubit_b: 1})
        idx_10 = self._index({**pinned, qubit_a: 1, qubit_b: 0})

        tmp = tensor[idx_01].copy()
        tensor[idx_01] = tensor[idx_10]
        tensor[idx_10] = tmp

    def apply_cnot(self, control: int, target: int) -> None:
        self.apply_controlled([control], target, X_MATRIX)

    def apply_cz(self, control: int, target: int) -> None:
        self.apply_controlled([control], target, Z_MATRIX)

    def apply_toffoli(self, control_a: int, control_b: int, target: int) -> None:
        """X on ``target`` only where both controls are 1."""
        self.apply_controlled([control_a, control_b], target, X_MATRIX)

    def apply_gate(self, gate: Gate) -> None:
        """Dispatch a catalog gate to the matching index transform."""
        kind = gate.kind
        if kind is GateKind.BARRIER:
            self.validate_qubits(gate.qubits)
        elif kind is GateKind.SWAP:
            self.apply_swap(*gate.qubits)
        elif kind is GateKind.CSWAP:
            self.apply_cswap(*gate.qubits)
        elif gate.is_controlled:
            self.apply_controlled(gate.controls, gate.targets[0], gate_matrix(gate))
        else:
            self.apply_single(gate.qubits[0], gate_matrix(gate))

    # ------------------------------------------------------------------
    # Read-out
    # ------------------------------------------------------------------

    def get_statevector(self) -> np.ndarray:
        """Return the current statevector as NumPy array."""
        return self.state.copy()

    def get_probabilities(self) -> np.ndarray:
        """Compute Born rule probabilities |⟨x|ψ⟩|²."""
        return norm_sqr(self.state)

    def probability(self, index: int) -> float:
        """Probability of basis state ``index``."""
        return float(norm_sqr(self.state[index]))

    def norm_squared(self) -> float:
        """Sum of |a|² over the whole vector (1 for a valid state)."""
        return float(np.sum(norm_sqr(self.state)))


StateVector = StatevectorBackend
