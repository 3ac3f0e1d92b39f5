"""
Physics verification harness.

Each check builds small circuits whose outcome is known analytically, runs
them on a ``Simulator`` and compares against the expected amplitudes or
outcome distribution within an explicit tolerance. Together the checks are the
correctness contract of the engine:

- probability conservation after every gate
- H·H = I, U†U = I for every catalog matrix
- Bell state, CNOT and Toffoli truth tables, SWAP
- Rx(0) = Ry(0) = Rz(0) = I, Rz(2π) = I up to global phase
- sampling convergence (chi-squared goodness of fit)
- determinism of repeated runs
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, List, Optional
import logging
import math

import numpy as np
from scipy import stats

from qubitsim.circuits.circuit import Circuit
from qubitsim.circuits.gates import (
    GATE_SPECS,
    Gate,
    gate_matrix,
    has_matrix,
)
from qubitsim.config.schemas import Config
from qubitsim.io.formats import bitstring_to_index
from qubitsim.sim.amplitudes import equal_up_to_global_phase, fidelity
from qubitsim.sim.simulator import Simulator

logger = logging.getLogger(__name__)

SAMPLE_ANGLES = (0.0, 0.3, math.pi / 4, math.pi / 2, 1.7, math.pi, 2 * math.pi, -2.2)


@dataclass
class CheckResult:
    """Outcome of a single verification check."""

    name: str
    passed: bool
    max_error: float
    tolerance: float
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def format_line(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return (
            f"[{status}] {self.name:<28} "
            f"max_error={self.max_error:.3e} tolerance={self.tolerance:.1e}"
        )


@dataclass
class VerificationReport:
    """All check results of one ``run_verification`` call."""

    results: List[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def failures(self) -> List[CheckResult]:
        return [result for result in self.results if not result.passed]

    def summary(self) -> str:
        """Human-readable report, one line per check."""
        lines = ["Verification report", "=" * 60]
        lines.extend(result.format_line() for result in self.results)
        lines.append("=" * 60)
        n_passed = len(self.results) - len(self.failures)
        verdict = "ALL CHECKS PASSED" if self.passed else "VERIFICATION FAILED"
        lines.append(f"{verdict} ({n_passed}/{len(self.results)})")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "results": [result.to_dict() for result in self.results],
        }


def _result(name: str, max_error: float, tolerance: float, **details) -> CheckResult:
    max_error = float(max_error)
    return CheckResult(
        name=name,
        passed=max_error <= tolerance,
        max_error=max_error,
        tolerance=tolerance,
        details=details,
    )


def _basis_state(n_qubits: int, index: int) -> np.ndarray:
    state = np.zeros(2**n_qubits, dtype=np.complex128)
    state[index] = 1.0
    return state


def _prepare(n_qubits: int, index: int) -> Circuit:
    """Circuit flipping every qubit whose bit is set in ``index``."""
    circuit = Circuit(n_qubits)
    for q in range(n_qubits):
        if (index >> q) & 1:
            circuit = circuit.x(q)
    return circuit


def mixed_circuit() -> Circuit:
    """Three-qubit circuit touching every class of gate in the catalog."""
    return (
        Circuit(3, name="mixed")
        .h(0).h(1).h(2)
        .cx(0, 1)
        .rx(2, 0.7)
        .ry(0, 1.3)
        .rz(1, -0.4)
        .t(2).s(0).sdg(1).tdg(0)
        .y(1).z(2)
        .cz(1, 2)
        .cy(2, 0)
        .ch(0, 2)
        .cp(1, 0, 0.9)
        .swap(0, 2)
        .ccx(0, 1, 2)
        .cswap(2, 0, 1)
        .u(1, 0.5, 1.1, -0.3)
        .p(2, 2.4)
    )


# ----------------------------------------------------------------------
# Amplitude checks
# ----------------------------------------------------------------------

def check_probability_conservation(simulator: Simulator, tolerance: float) -> CheckResult:
    """Total probability stays 1 after every gate prefix of a mixed circuit."""
    full = mixed_circuit()
    errors = []
    for k in range(len(full) + 1):
        prefix = Circuit(full.num_qubits, gates=full.gates[:k])
        errors.append(abs(float(np.sum(simulator.probabilities(prefix))) - 1.0))

    return _result(
        "probability_conservation", max(errors), tolerance,
        n_prefixes=len(errors),
    )


def check_hadamard_involution(simulator: Simulator, tolerance: float) -> CheckResult:
    """H·H returns |0⟩ and |1⟩ to themselves."""
    errors = []
    for index in (0, 1):
        circuit = _prepare(1, index).h(0).h(0)
        state = simulator.run(circuit)
        errors.append(np.max(np.abs(state - _basis_state(1, index))))

    return _result("hadamard_involution", max(errors), tolerance)


def check_gate_unitarity(simulator: Simulator, tolerance: float) -> CheckResult:
    """U†U = I for every 2×2 catalog matrix at a spread of angles."""
    errors = {}
    for kind, spec in GATE_SPECS.items():
        if not has_matrix(kind):
            continue
        qubits = tuple(range(spec.num_qubits))
        angle_sets = [()] if spec.num_params == 0 else [
            (angle,) * spec.num_params for angle in SAMPLE_ANGLES
        ]
        worst = 0.0
        for params in angle_sets:
            matrix = gate_matrix(Gate(kind, qubits, params))
            deviation = matrix.conj().T @ matrix - np.eye(2)
            worst = max(worst, float(np.max(np.abs(deviation))))
        errors[kind.value] = worst

    return _result(
        "gate_unitarity", max(errors.values()), tolerance,
        per_gate=errors,
    )


def check_bell_state(simulator: Simulator, tolerance: float, shots: int = 1000) -> CheckResult:
    """H(0), CX(0, 1) gives (|00⟩ + |11⟩)/√2 and never samples 01 or 10."""
    bell = Circuit(2).h(0).cx(0, 1).measure_all()
    amp = 1.0 / math.sqrt(2.0)
    expected = np.array([amp, 0, 0, amp], dtype=np.complex128)

    state = simulator.run(bell)
    max_error = float(np.max(np.abs(state - expected)))

    counts = simulator.sample(bell, shots)
    forbidden = sum(counts.get(key, 0) for key in ("01", "10"))

    result = _result("bell_state", max_error, tolerance, counts=counts)
    result.passed = result.passed and forbidden == 0 and sum(counts.values()) == shots
    return result


def check_cnot_truth_table(simulator: Simulator, tolerance: float) -> CheckResult:
    """CX(0, 1) flips qubit 1 exactly when qubit 0 is 1."""
    errors = []
    for index in range(4):
        control = index & 1
        target = (index >> 1) & 1
        expected_index = control | ((target ^ control) << 1)

        state = simulator.run(_prepare(2, index).cx(0, 1))
        errors.append(np.max(np.abs(state - _basis_state(2, expected_index))))

    return _result("cnot_truth_table", max(errors), tolerance)


def check_rotation_identity(simulator: Simulator, tolerance: float) -> CheckResult:
    """
    Rx(0), Ry(0), Rz(0) leave a state unchanged; Rz(2π) changes it only by a
    global phase (-1).
    """
    prep = Circuit(1).h(0).t(0).ry(0, 0.4)
    reference = simulator.run(prep)

    errors = {}
    for label, circuit in (
        ("rx(0)", prep.rx(0, 0.0)),
        ("ry(0)", prep.ry(0, 0.0)),
        ("rz(0)", prep.rz(0, 0.0)),
    ):
        errors[label] = float(np.max(np.abs(simulator.run(circuit) - reference)))

    rotated = simulator.run(prep.rz(0, 2 * math.pi))
    errors["rz(2pi)"] = 1.0 - fidelity(rotated, reference)

    result = _result("rotation_identity", max(errors.values()), tolerance, errors=errors)
    result.passed = result.passed and equal_up_to_global_phase(rotated, reference, tolerance)
    return result


def check_swap(simulator: Simulator, tolerance: float) -> CheckResult:
    """SWAP exchanges qubit states, including superpositions."""
    errors = []

    # |q0=1, q1=0⟩ -> |q0=0, q1=1⟩
    state = simulator.run(Circuit(2).x(0).swap(0, 1))
    errors.append(np.max(np.abs(state - _basis_state(2, 0b10))))

    swapped = simulator.run(Circuit(2).ry(0, 0.7).swap(0, 1))
    direct = simulator.run(Circuit(2).ry(1, 0.7))
    errors.append(np.max(np.abs(swapped - direct)))

    return _result("swap", max(errors), tolerance)


def check_toffoli_truth_table(simulator: Simulator, tolerance: float) -> CheckResult:
    """CCX(0, 1, 2) flips qubit 2 exactly when qubits 0 and 1 are both 1."""
    errors = []
    for index in range(8):
        flip = (index & 1) and ((index >> 1) & 1)
        expected_index = index ^ (0b100 if flip else 0)

        state = simulator.run(_prepare(3, index).ccx(0, 1, 2))
        errors.append(np.max(np.abs(state - _basis_state(3, expected_index))))

    return _result("toffoli_truth_table", max(errors), tolerance)


# ----------------------------------------------------------------------
# Sampling checks
# ----------------------------------------------------------------------

def check_sampling_convergence(
    simulator: Simulator,
    shots: int = 10000,
    significance: float = 0.001,
) -> CheckResult:
    """
    Sampled frequencies match the Born-rule distribution.

    H on qubit 0 and Ry(π/3) on qubit 1 give P(q0=1) = 1/2 and
    P(q1=1) = sin²(π/6) = 1/4. The counts are tested with a chi-squared
    goodness-of-fit test; every frequency must also lie within 5σ of its
    expectation. A certain outcome (X on qubit 0) must take all shots.
    """
    circuit = Circuit(2).h(0).ry(1, math.pi / 3).measure_all()
    expected = np.array([
        0.5 * (0.75 if ((index >> 1) & 1) == 0 else 0.25) for index in range(4)
    ])

    counts = simulator.sample(circuit, shots)
    observed = np.zeros(4)
    for bitstring, count in counts.items():
        observed[bitstring_to_index(bitstring)] = count

    chi2, p_value = stats.chisquare(observed, f_exp=expected * shots)
    deviations = np.abs(observed / shots - expected)
    sigma = np.sqrt(expected * (1 - expected) / shots)
    max_error = float(np.max(deviations))
    tolerance = float(np.max(5 * sigma))

    certain = simulator.sample(Circuit(2).x(0).measure_all(), shots)

    passed = (
        sum(counts.values()) == shots
        and p_value >= significance
        and bool(np.all(deviations <= 5 * sigma))
        and certain == {"10": shots}
    )
    return CheckResult(
        name="sampling_convergence",
        passed=passed,
        max_error=max_error,
        tolerance=tolerance,
        details={
            "shots": shots,
            "chi2": float(chi2),
            "p_value": float(p_value),
            "significance": significance,
            "counts": counts,
            "certain_outcome": certain,
        },
    )


def check_determinism(simulator: Simulator, tolerance: float) -> CheckResult:
    """Running the same circuit twice gives bit-identical amplitudes."""
    circuit = mixed_circuit()
    first = simulator.run(circuit)
    second = simulator.run(circuit)

    identical = bool(np.array_equal(first, second))
    result = _result(
        "determinism", np.max(np.abs(first - second)), tolerance,
        bit_identical=identical,
    )
    result.passed = result.passed and identical
    return result


# ----------------------------------------------------------------------
# Runner
# ----------------------------------------------------------------------

def run_verification(
    simulator: Optional[Simulator] = None,
    tolerance: Optional[float] = None,
    shots: Optional[int] = None,
    significance: Optional[float] = None,
    config: Optional[Config] = None,
) -> VerificationReport:
    """
    Run every check and collect the results.

    Args:
        simulator: Simulator under test (default: one built from ``config``)
        tolerance: Amplitude tolerance (default: ``config.verification.tolerance``)
        shots: Shots for the sampling check (default: ``config.verification.shots``)
        significance: Chi-squared significance level
        config: Configuration supplying the defaults above

    Returns:
        VerificationReport with one CheckResult per check
    """
    config = config or Config()
    simulator = simulator or Simulator(config=config)
    ver_cfg = config.verification

    tolerance = ver_cfg.tolerance if tolerance is None else tolerance
    shots = ver_cfg.shots if shots is None else shots
    significance = ver_cfg.significance if significance is None else significance

    checks: List[Callable[[], CheckResult]] = [
        lambda: check_probability_conservation(simulator, tolerance),
        lambda: check_hadamard_involution(simulator, tolerance),
        lambda: check_gate_unitarity(simulator, tolerance),
        lambda: check_bell_state(simulator, tolerance),
        lambda: check_cnot_truth_table(simulator, tolerance),
        lambda: check_rotation_identity(simulator, tolerance),
        lambda: check_swap(simulator, tolerance),
        lambda: check_toffoli_truth_table(simulator, tolerance),
        lambda: check_sampling_convergence(simulator, shots, significance),
        lambda: check_determinism(simulator, tolerance),
    ]

    report = VerificationReport()
    for check in checks:
        result = check()
        report.results.append(result)
        level = logging.INFO if result.passed else logging.WARNING
        logger.log(level, result.format_line())

    logger.info(
        f"Verification {'passed' if report.passed else 'FAILED'}: "
        f"{len(report.results) - len(report.failures)}/{len(report.results)} checks"
    )
    return report
