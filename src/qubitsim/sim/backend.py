"""
Abstract base class for state simulation backends.

Defines the interface the simulator drives: state initialization, gate
application and read-out of amplitudes/probabilities.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional
import numpy as np

from qubitsim.circuits.circuit import validate_num_qubits
from qubitsim.circuits.gates import Gate
from qubitsim.exceptions import InvalidQubitCountError, QubitIndexError


class SimulatorBackend(ABC):
    """
    Abstract base class for quantum state backends.

    All backends must implement methods for:
    - State initialization
    - Gate application
    - Amplitude and probability read-out
    """

    def __init__(self, n_qubits: int, max_qubits: Optional[int] = None):
        """
        Initialize the backend.

        Args:
            n_qubits: Number of qubits (>= 1)
            max_qubits: Optional upper bound on ``n_qubits`` (memory guard)
        """
        n_qubits = validate_num_qubits(n_qubits)
        if max_qubits is not None and n_qubits > max_qubits:
            raise InvalidQubitCountError(n_qubits, max_qubits=max_qubits)
        self.n_qubits = n_qubits

    def validate_qubits(self, qubits: Iterable[int]) -> None:
        """Raise ``QubitIndexError`` for out-of-range or repeated qubits."""
        qubits = list(qubits)
        for q in qubits:
            if isinstance(q, bool) or not isinstance(q, (int, np.integer)):
                raise QubitIndexError(f"Qubit index must be an integer, got {q!r}")
            if not 0 <= q < self.n_qubits:
                raise QubitIndexError(
                    f"Qubit index {q} out of range [0, {self.n_qubits})"
                )
        if len(set(qubits)) != len(qubits):
            raise QubitIndexError(f"Duplicate qubit in {qubits}")

    @abstractmethod
    def init_state(self, state: Optional[np.ndarray] = None) -> None:
        """
        Initialize or reset the state.

        Args:
            state: Optional initial amplitudes of shape (2^n,).
                   If None, initialize to |0...0⟩.
        """

    @abstractmethod
    def apply_gate(self, gate: Gate) -> None:
        """Apply one catalog gate in place."""

    @abstractmethod
    def get_statevector(self) -> np.ndarray:
        """Copy of the current amplitudes, shape (2^n,)."""

    @abstractmethod
    def get_probabilities(self) -> np.ndarray:
        """Born-rule probabilities for every computational basis state."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(n_qubits={self.n_qubits})"
