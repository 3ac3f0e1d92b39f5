"""
Error taxonomy for qubitsim.

Callers can distinguish a malformed circuit (``CircuitError``) from a bad
sampling request (``SamplingError``). Both derive from ``ValueError`` so code
that only cares about "invalid argument" keeps working.
"""


class QubitSimError(Exception):
    """Base class for all qubitsim errors."""


class CircuitError(QubitSimError, ValueError):
    """A circuit (or the state vector it targets) is malformed."""


class InvalidQubitCountError(CircuitError):
    """Qubit count is not a positive integer, or exceeds the configured limit."""

    def __init__(self, num_qubits, max_qubits=None):
        self.num_qubits = num_qubits
        self.max_qubits = max_qubits
        if max_qubits is not None:
            message = (
                f"Qubit count {num_qubits} exceeds the maximum of {max_qubits} "
                f"(state vector would need {16 * 2**num_qubits} bytes)"
            )
        else:
            message = f"Qubit count must be a positive integer, got {num_qubits!r}"
        super().__init__(message)


class QubitIndexError(CircuitError):
    """A gate references a qubit outside [0, num_qubits) or repeats a qubit."""


class GateParameterError(CircuitError):
    """A gate received the wrong number of parameters or a non-finite angle."""


class SamplingError(QubitSimError, ValueError):
    """A sampling request is invalid."""


class InvalidShotsError(SamplingError):
    """Shot count is negative or not an integer."""

    def __init__(self, shots):
        self.shots = shots
        super().__init__(f"Shot count must be a non-negative integer, got {shots!r}")


class InvalidSeedError(SamplingError):
    """Sampling seed is negative or not an integer."""

    def __init__(self, seed):
        self.seed = seed
        super().__init__(f"Seed must be a non-negative integer, got {seed!r}")
