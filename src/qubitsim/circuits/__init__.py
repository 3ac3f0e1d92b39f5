"""Gate catalog and circuit model."""

from .gates import Gate, GateKind, GATE_SPECS, gate_matrix
from .circuit import Circuit

__all__ = ["Gate", "GateKind", "GATE_SPECS", "gate_matrix", "Circuit"]
