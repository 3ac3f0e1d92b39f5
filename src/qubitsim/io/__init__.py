"""Circuit documents and outcome formatting."""

from .formats import (
    index_to_bitstring,
    bitstring_to_index,
    counts_to_probabilities,
    circuit_to_dict,
    circuit_from_dict,
    circuit_to_json,
    circuit_from_json,
    load_circuit,
    save_circuit,
)

__all__ = [
    "index_to_bitstring",
    "bitstring_to_index",
    "counts_to_probabilities",
    "circuit_to_dict",
    "circuit_from_dict",
    "circuit_to_json",
    "circuit_from_json",
    "load_circuit",
    "save_circuit",
]
