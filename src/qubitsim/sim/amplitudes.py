"""
Complex amplitude helpers.

Amplitudes are NumPy ``complex128`` values; these helpers work on scalars and
on whole state vectors alike.
"""

import numpy as np


DTYPE = np.complex128


def from_polar(r: float, theta: float) -> complex:
    """Complex number with magnitude ``r`` and phase ``theta`` (radians)."""
    return complex(r * np.cos(theta), r * np.sin(theta))


def conj(amplitudes):
    """Complex conjugate."""
    return np.conj(amplitudes)


def norm_sqr(amplitudes):
    """Squared magnitude |a|^2 (Born-rule probability)."""
    amplitudes = np.asarray(amplitudes)
    return amplitudes.real ** 2 + amplitudes.imag ** 2


def zero_state(n_qubits: int) -> np.ndarray:
    """Computational basis state |0...0⟩ of length 2^n."""
    state = np.zeros(2 ** n_qubits, dtype=DTYPE)
    state[0] = 1.0
    return state


def total_probability(state: np.ndarray) -> float:
    """Sum of squared magnitudes over the whole vector."""
    return float(np.sum(norm_sqr(state)))


def approx_equal(a, b, tol: float = 1e-9) -> bool:
    """True when every amplitude of ``a`` is within ``tol`` of ``b``."""
    a = np.asarray(a, dtype=DTYPE)
    b = np.asarray(b, dtype=DTYPE)
    if a.shape != b.shape:
        return False
    return bool(np.all(np.abs(a - b) <= tol))


def inner_product(a: np.ndarray, b: np.ndarray) -> complex:
    """⟨a|b⟩."""
    return complex(np.vdot(a, b))


def fidelity(a: np.ndarray, b: np.ndarray) -> float:
    """State fidelity |⟨a|b⟩|^2 for pure states."""
    return float(abs(inner_product(a, b)) ** 2)


def equal_up_to_global_phase(a, b, tol: float = 1e-9) -> bool:
    """
    Compare two states while ignoring an overall phase factor.

    The phase is fixed from the largest-magnitude amplitude of ``b``, then the
    vectors are compared elementwise.
    """
    a = np.asarray(a, dtype=DTYPE)
    b = np.asarray(b, dtype=DTYPE)
    if a.shape != b.shape:
        return False

    pivot = int(np.argmax(np.abs(b)))
    if abs(b[pivot]) <= tol:
        return approx_equal(a, b, tol)

    phase = a[pivot] / b[pivot]
    if abs(abs(phase) - 1.0) > tol:
        return False
    return approx_equal(a, phase * b, tol)
