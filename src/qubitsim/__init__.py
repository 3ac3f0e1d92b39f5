"""
qubitsim: dense state-vector quantum circuit simulator.

A small, in-memory engine: build a ``Circuit``, execute it on a 2^n amplitude
state vector, sample measurement outcomes, and check the physics with the
verification harness.

    >>> from qubitsim import Circuit, Simulator
    >>> counts = Simulator(seed=42).sample(Circuit(2).h(0).cx(0, 1).measure_all(), 1000)
"""

__version__ = "0.1.0"

from qubitsim.circuits import Circuit, Gate, GateKind
from qubitsim.sim import Simulator, StatevectorBackend
from qubitsim.exceptions import (
    QubitSimError,
    CircuitError,
    InvalidQubitCountError,
    QubitIndexError,
    GateParameterError,
    SamplingError,
    InvalidShotsError,
    InvalidSeedError,
)

__all__ = [
    "__version__",
    "Circuit",
    "Gate",
    "GateKind",
    "Simulator",
    "StatevectorBackend",
    "QubitSimError",
    "CircuitError",
    "InvalidQubitCountError",
    "QubitIndexError",
    "GateParameterError",
    "SamplingError",
    "InvalidShotsError",
    "InvalidSeedError",
]
