"""
Circuit execution and measurement sampling.

``Simulator`` replays a ``Circuit`` on a fresh ``StatevectorBackend`` and turns
the final amplitudes into classical outcomes:

- ``run`` returns the final amplitudes (deterministic, bit-identical per call)
- ``probabilities`` returns |a|² per basis index
- ``sample`` draws ``shots`` outcomes from the Born-rule distribution
- ``sample_many`` samples independent circuits concurrently

Outcome keys follow ``qubitsim.io.formats.index_to_bitstring`` (qubit 0 first).
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence
import logging

import numpy as np

from qubitsim.circuits.circuit import Circuit
from qubitsim.config.schemas import Config
from qubitsim.exceptions import InvalidSeedError, InvalidShotsError
from qubitsim.io.formats import index_to_bitstring
from qubitsim.sim.statevector import StatevectorBackend
from qubitsim.utils.rng import RNGManager

logger = logging.getLogger(__name__)


def validate_shots(shots) -> int:
    """Return ``shots`` as int, or raise ``InvalidShotsError``."""
    if isinstance(shots, bool) or not isinstance(shots, (int, np.integer)):
        raise InvalidShotsError(shots)
    if shots < 0:
        raise InvalidShotsError(shots)
    return int(shots)


def validate_seed(seed) -> Optional[int]:
    """Return ``seed`` as int (or None), or raise ``InvalidSeedError``."""
    if seed is None:
        return None
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise InvalidSeedError(seed)
    if seed < 0:
        raise InvalidSeedError(seed)
    return int(seed)


class Simulator:
    """
    Dense state-vector simulator.

    Args:
        seed: Sampling seed. When set, every ``sample`` call draws from a
              generator re-seeded with it, so repeated calls return identical
              counts. When None, draws come from OS entropy.
        config: Optional ``Config``; supplies ``seed`` (if not given
                explicitly), ``default_shots``, ``max_qubits`` and ``n_workers``.
    """

    def __init__(self, seed: Optional[int] = None, config: Optional[Config] = None):
        self.config = config or Config()
        sim_cfg = self.config.simulation

        self.seed = validate_seed(seed if seed is not None else sim_cfg.seed)
        self.max_qubits = sim_cfg.max_qubits
        self.default_shots = sim_cfg.default_shots
        self.n_workers = sim_cfg.n_workers

        logger.debug(
            f"Simulator initialized (seed={self.seed}, max_qubits={self.max_qubits})"
        )

    def _make_rng(self) -> np.random.Generator:
        return np.random.default_rng(self.seed)

    def execute(self, circuit: Circuit) -> StatevectorBackend:
        """Apply every gate of ``circuit`` to a fresh |0...0⟩ state."""
        backend = StatevectorBackend(circuit.num_qubits, max_qubits=self.max_qubits)
        for gate in circuit.gates:
            backend.apply_gate(gate)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Executed {len(circuit)} gates on {circuit.num_qubits} qubits "
                f"(norm={backend.norm_squared():.12f})"
            )
        return backend

    def run(self, circuit: Circuit) -> np.ndarray:
        """Final amplitude array of ``circuit`` (length 2^n)."""
        return self.execute(circuit).get_statevector()

    def probabilities(self, circuit: Circuit) -> np.ndarray:
        """Born-rule probabilities |⟨x|ψ⟩|² of the final state."""
        return self.execute(circuit).get_probabilities()

    def sample(
        self,
        circuit: Circuit,
        shots: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> Dict[str, int]:
        """
        Run ``circuit`` and draw ``shots`` measurement outcomes.

        All qubits are reported; a circuit without ``measure_all()`` is
        sampled as if it had one.

        Args:
            circuit: Circuit to execute
            shots: Number of draws (default: ``config.simulation.default_shots``)
            rng: Generator to draw from; overrides the simulator's seed

        Returns:
            Bitstring → count, only for outcomes observed at least once.
            Counts sum to ``shots``.
        """
        if shots is None:
            shots = self.default_shots
        shots = validate_shots(shots)
        if shots == 0:
            return {}

        probs = self.probabilities(circuit)

        # Normalize only for the draw; the state itself is never rescaled
        probs = probs / probs.sum()

        if rng is None:
            rng = self._make_rng()
        samples = rng.multinomial(shots, probs)

        counts = {
            index_to_bitstring(int(idx), circuit.num_qubits): int(samples[idx])
            for idx in np.flatnonzero(samples)
        }

        logger.debug(
            f"Sampled {shots} shots: {len(counts)} distinct outcomes "
            f"over {circuit.num_qubits} qubits"
        )
        return counts

    def sample_many(
        self,
        circuits: Sequence[Circuit],
        shots: Optional[int] = None,
        n_workers: Optional[int] = None,
    ) -> List[Dict[str, int]]:
        """
        Sample independent circuits concurrently.

        Each task allocates its own state vector and draws from its own
        generator, seeded from ``RNGManager(seed).seed_sequence``, so results
        are reproducible for a seeded simulator regardless of scheduling.

        Returns:
            One counts dict per circuit, in input order.
        """
        circuits = list(circuits)
        if shots is None:
            shots = self.default_shots
        shots = validate_shots(shots)
        if not circuits:
            return []

        n_workers = n_workers or self.n_workers
        rng_manager = RNGManager(self.seed)
        seeds = rng_manager.seed_sequence("sampling", len(circuits))

        logger.debug(
            f"Sampling {len(circuits)} circuits with {n_workers} worker(s), "
            f"streams={rng_manager.get_state_summary()}"
        )

        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            futures = [
                executor.submit(
                    self.sample, circuit, shots, np.random.default_rng(int(seed))
                )
                for circuit, seed in zip(circuits, seeds)
            ]
            return [future.result() for future in futures]
