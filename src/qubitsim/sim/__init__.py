"""
Simulation backends and the circuit simulator.

The statevector engine stores 2^n complex128 amplitudes (16 * 2^n bytes).
"""

from .backend import SimulatorBackend
from .statevector import StatevectorBackend, StateVector
from .simulator import Simulator

__all__ = ["SimulatorBackend", "StatevectorBackend", "StateVector", "Simulator"]
