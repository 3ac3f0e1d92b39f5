"""
Smoke tests for repository structure and basic functionality.

Tests that package imports work, configuration loads correctly, and basic
infrastructure is in place.
"""

import logging
import json


def test_package_import():
    """Test that qubitsim package can be imported."""
    import qubitsim
    assert qubitsim.__version__ == "0.1.0"
    assert hasattr(qubitsim, "Circuit")
    assert hasattr(qubitsim, "Simulator")


def test_subpackage_imports():
    """Test that every subpackage imports."""
    from qubitsim.circuits import Circuit, Gate, GateKind
    from qubitsim.config import Config
    from qubitsim.io import index_to_bitstring
    from qubitsim.sim import Simulator, StatevectorBackend
    from qubitsim.utils import setup_logger, get_logger, RNGManager
    from qubitsim.verification import run_verification

    assert all(obj is not None for obj in (
        Circuit, Gate, GateKind, Config, index_to_bitstring, Simulator,
        StatevectorBackend, setup_logger, get_logger, RNGManager, run_verification,
    ))


def test_error_taxonomy():
    """Caller errors are ValueErrors and share a common base."""
    from qubitsim import exceptions

    for cls in (
        exceptions.InvalidQubitCountError,
        exceptions.QubitIndexError,
        exceptions.GateParameterError,
        exceptions.InvalidShotsError,
    ):
        assert issubclass(cls, exceptions.QubitSimError)
        assert issubclass(cls, ValueError)

    assert issubclass(exceptions.InvalidShotsError, exceptions.SamplingError)
    assert not issubclass(exceptions.InvalidShotsError, exceptions.CircuitError)


def test_quickstart():
    """Bell pair end to end."""
    from qubitsim import Circuit, Simulator

    counts = Simulator(seed=42).sample(Circuit(2).h(0).cx(0, 1).measure_all(), 100)
    assert sum(counts.values()) == 100
    assert set(counts) <= {"00", "11"}


def test_logger_setup(tmp_path):
    """Test that logger can be configured with a JSON file handler."""
    from qubitsim.utils import setup_logger

    log_file = tmp_path / "logs" / "test.log"
    logger = setup_logger(
        name="qubitsim.smoke", level=logging.INFO, log_file=log_file, json_format=True
    )
    logger.info("hello", extra={"metadata": {"shots": 10}})
    for handler in logger.handlers:
        handler.flush()

    record = json.loads(log_file.read_text().strip().splitlines()[-1])
    assert record["message"] == "hello"
    assert record["level"] == "INFO"
    assert record["metadata"] == {"shots": 10}

    # A second call must not stack handlers
    again = setup_logger(name="qubitsim.smoke", log_file=log_file)
    assert len(again.handlers) == 2
