"""
Unit tests for the Simulator: execution, probabilities and sampling.
"""

import logging
import math

import pytest
import numpy as np

from qubitsim import Circuit, Simulator
from qubitsim.config import Config
from qubitsim.exceptions import (
    InvalidQubitCountError,
    InvalidSeedError,
    InvalidShotsError,
    SamplingError,
)
from qubitsim.sim.statevector import StatevectorBackend


@pytest.fixture
def bell():
    return Circuit(2).h(0).cx(0, 1).measure_all()


class TestRun:
    """Tests for deterministic execution."""

    def test_run_returns_final_amplitudes(self, bell):
        state = Simulator().run(bell)

        amp = 1 / math.sqrt(2)
        np.testing.assert_allclose(state, [amp, 0, 0, amp], atol=1e-12)

    def test_runs_are_bit_identical(self):
        circuit = Circuit(3).h(0).rx(1, 0.3).cx(0, 2).t(2).cswap(1, 0, 2)
        simulator = Simulator()

        np.testing.assert_array_equal(simulator.run(circuit), simulator.run(circuit))

    def test_each_run_starts_from_zero_state(self):
        simulator = Simulator()
        simulator.run(Circuit(1).x(0))

        np.testing.assert_allclose(simulator.run(Circuit(1)), [1, 0], atol=1e-15)

    def test_probabilities(self):
        probs = Simulator().probabilities(Circuit(2).x(1))
        np.testing.assert_allclose(probs, [0, 0, 1, 0], atol=1e-15)

    def test_norm_not_computed_when_debug_disabled(self, bell, monkeypatch):
        calls = []
        monkeypatch.setattr(
            StatevectorBackend, "norm_squared", lambda self: calls.append(1) or 1.0
        )
        logger = logging.getLogger("qubitsim.sim.simulator")
        monkeypatch.setattr(logger, "isEnabledFor", lambda level: level > logging.DEBUG)

        Simulator().run(bell)
        assert calls == []

    def test_max_qubits_from_config(self):
        config = Config()
        config.simulation.max_qubits = 3

        with pytest.raises(InvalidQubitCountError, match="exceeds the maximum of 3"):
            Simulator(config=config).run(Circuit(4))


class TestSample:
    """Tests for measurement sampling."""

    def test_zero_shots_returns_empty(self, bell):
        assert Simulator(seed=1).sample(bell, 0) == {}

    @pytest.mark.parametrize("shots", [-1, 2.5, "10", True])
    def test_invalid_shots(self, bell, shots):
        with pytest.raises(InvalidShotsError, match="non-negative integer"):
            Simulator(seed=1).sample(bell, shots)

    @pytest.mark.parametrize("seed", [-1, 1.5, "42", True])
    def test_invalid_seed_rejected_at_construction(self, seed):
        with pytest.raises(InvalidSeedError, match="non-negative integer"):
            Simulator(seed=seed)

    def test_invalid_seed_is_sampling_error(self):
        with pytest.raises(SamplingError):
            Simulator(seed=-7)

    def test_counts_sum_to_shots(self, bell):
        counts = Simulator(seed=7).sample(bell, 1234)
        assert sum(counts.values()) == 1234

    def test_only_observed_outcomes_present(self, bell):
        counts = Simulator(seed=7).sample(bell, 500)

        assert set(counts) <= {"00", "11"}
        assert all(count > 0 for count in counts.values())

    def test_certain_outcome_uses_qubit0_first_keys(self):
        """X on qubit 0 of 3 is reported as '100'."""
        counts = Simulator(seed=3).sample(Circuit(3).x(0).measure_all(), 100)
        assert counts == {"100": 100}

    def test_unmeasured_circuit_reports_all_qubits(self):
        counts = Simulator(seed=3).sample(Circuit(2).x(1), 10)
        assert counts == {"01": 10}

    def test_seeded_sampling_is_reproducible(self, bell):
        simulator = Simulator(seed=42)
        first = simulator.sample(bell, 1000)
        second = simulator.sample(bell, 1000)

        assert first == second
        assert Simulator(seed=42).sample(bell, 1000) == first

    def test_explicit_generator_overrides_seed(self, bell):
        simulator = Simulator(seed=42)
        a = simulator.sample(bell, 1000, rng=np.random.default_rng(5))
        b = simulator.sample(bell, 1000, rng=np.random.default_rng(5))
        assert a == b

    def test_default_shots_from_config(self, bell):
        config = Config()
        config.simulation.default_shots = 321

        counts = Simulator(seed=0, config=config).sample(bell)
        assert sum(counts.values()) == 321

    def test_seed_from_config(self, bell):
        config = Config()
        config.simulation.seed = 99

        simulator = Simulator(config=config)
        assert simulator.seed == 99
        assert simulator.sample(bell, 200) == Simulator(seed=99).sample(bell, 200)


class TestSampleMany:
    """Tests for concurrent batch sampling."""

    def test_results_in_input_order(self):
        circuits = [Circuit(2).x(0), Circuit(2).x(1), Circuit(2).x(0).x(1)]
        results = Simulator(seed=5).sample_many(circuits, shots=50, n_workers=3)

        assert results == [{"10": 50}, {"01": 50}, {"11": 50}]

    def test_seeded_batch_is_reproducible(self, bell):
        circuits = [bell] * 6
        first = Simulator(seed=11).sample_many(circuits, shots=300, n_workers=4)
        second = Simulator(seed=11).sample_many(circuits, shots=300, n_workers=2)

        assert first == second
        assert all(sum(c.values()) == 300 for c in first)

    def test_workers_draw_independent_streams(self, bell):
        results = Simulator(seed=11).sample_many([bell] * 4, shots=1000)
        assert len({tuple(sorted(r.items())) for r in results}) > 1

    def test_empty_batch(self):
        assert Simulator(seed=1).sample_many([], shots=10) == []

    def test_invalid_shots(self, bell):
        with pytest.raises(InvalidShotsError):
            Simulator(seed=1).sample_many([bell], shots=-5)
