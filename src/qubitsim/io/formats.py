"""
Data formats for circuits and measurement outcomes.

Bitstring convention: character k of an outcome key is the value of qubit k,
so qubit 0 is the leftmost character. On 2 qubits, basis index 0b01
(qubit 0 = 1) is reported as "10".

Circuit JSON documents look like::

    {
      "num_qubits": 2,
      "name": "bell",
      "measure_all": true,
      "gates": [
        {"gate": "h", "qubits": [0]},
        {"gate": "cx", "qubits": [0, 1]},
        {"gate": "rz", "qubits": [1], "params": [1.5707963]}
      ]
    }
"""

from pathlib import Path
from typing import Any, Dict, Union
import json

from qubitsim.circuits.circuit import Circuit
from qubitsim.exceptions import CircuitError


def index_to_bitstring(index: int, n_qubits: int) -> str:
    """Basis index to outcome key, qubit 0 first."""
    return format(index, f'0{n_qubits}b')[::-1]


def bitstring_to_index(bitstring: str) -> int:
    """Outcome key (qubit 0 first) to basis index."""
    return int(bitstring[::-1], 2)


def counts_to_probabilities(counts: Dict[str, int]) -> Dict[str, float]:
    """Relative frequencies of sampled outcomes."""
    total = sum(counts.values())
    if total == 0:
        return {}
    return {bitstring: count / total for bitstring, count in counts.items()}


def circuit_to_dict(circuit: Circuit) -> Dict[str, Any]:
    """Convert a circuit to a JSON-serializable dictionary."""
    gates = []
    for gate in circuit.gates:
        entry: Dict[str, Any] = {"gate": gate.kind.value, "qubits": list(gate.qubits)}
        if gate.params:
            entry["params"] = list(gate.params)
        gates.append(entry)

    data: Dict[str, Any] = {
        "num_qubits": circuit.num_qubits,
        "measure_all": circuit.measured,
        "gates": gates,
    }
    if circuit.name is not None:
        data["name"] = circuit.name
    return data


def circuit_from_dict(data: Dict[str, Any]) -> Circuit:
    """
    Rebuild a circuit through the builder so every gate is validated.

    Raises:
        CircuitError: on missing keys, unknown gates or invalid qubits
    """
    try:
        num_qubits = data["num_qubits"]
        gate_entries = data.get("gates", [])
    except (KeyError, TypeError, AttributeError) as e:
        raise CircuitError(f"Invalid circuit document: {e}") from e

    circuit = Circuit(num_qubits, name=data.get("name"))
    for position, entry in enumerate(gate_entries):
        try:
            kind = entry["gate"]
            qubits = entry["qubits"]
        except (KeyError, TypeError) as e:
            raise CircuitError(f"Gate #{position} is missing field {e}") from e
        try:
            circuit = circuit.append(kind, qubits, entry.get("params") or ())
        except (TypeError, ValueError) as e:
            # Malformed qubit lists surface as plain TypeError or ValueError
            if isinstance(e, CircuitError):
                raise
            raise CircuitError(f"Gate #{position}: {e}") from e

    if data.get("measure_all", False):
        circuit = circuit.measure_all()
    return circuit


def circuit_to_json(circuit: Circuit) -> str:
    """Serialize to JSON string."""
    return json.dumps(circuit_to_dict(circuit), indent=2)


def circuit_from_json(json_str: str) -> Circuit:
    """Load from JSON string."""
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise CircuitError(f"Circuit document is not valid JSON: {e}") from e
    return circuit_from_dict(data)


def load_circuit(path: Union[str, Path]) -> Circuit:
    """Read a circuit JSON document from disk."""
    with open(path, "r") as f:
        return circuit_from_json(f.read())


def save_circuit(circuit: Circuit, path: Union[str, Path]) -> None:
    """Write a circuit JSON document to disk."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(circuit_to_json(circuit))
