#!/usr/bin/env python
"""
qubitsim command-line interface.

    qubitsim run CIRCUIT.json --shots 1000 --seed 42 [--statevector] [--profile]
    qubitsim verify [--shots N] [--tolerance T]
    qubitsim gates
    qubitsim version

Exit codes: 0 success, 1 verification failed, 2 invalid input.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from pydantic import ValidationError
import yaml

from qubitsim import __version__
from qubitsim.circuits.gates import GATE_SPECS
from qubitsim.config import Config
from qubitsim.exceptions import QubitSimError
from qubitsim.io.formats import counts_to_probabilities, index_to_bitstring, load_circuit
from qubitsim.sim.simulator import Simulator
from qubitsim.utils import setup_logger
from qubitsim.utils.perf import (
    PerformanceProfiler,
    available_memory_mb,
    estimate_memory_requirements,
)
from qubitsim.verification import run_verification

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="qubitsim",
        description="Dense state-vector quantum circuit simulator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: packaged defaults)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Optional log file path",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Use JSON-structured logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Simulate a circuit from a JSON document and sample it",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    run_parser.add_argument("circuit", type=Path, help="Circuit JSON file")
    run_parser.add_argument(
        "--shots",
        type=int,
        default=None,
        help="Number of shots (default: simulation.default_shots)",
    )
    run_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Sampling seed (overrides simulation.seed)",
    )
    run_parser.add_argument(
        "--statevector",
        action="store_true",
        help="Also print the final amplitudes",
    )
    run_parser.add_argument(
        "--profile",
        action="store_true",
        help="Report wall/CPU time and memory usage",
    )

    verify_parser = subparsers.add_parser(
        "verify",
        help="Run the physics verification harness",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    verify_parser.add_argument(
        "--shots",
        type=int,
        default=None,
        help="Shots for the sampling check (default: verification.shots)",
    )
    verify_parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Amplitude tolerance (default: verification.tolerance)",
    )
    verify_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Sampling seed (overrides simulation.seed)",
    )

    subparsers.add_parser("gates", help="List the gate catalog")
    subparsers.add_parser("version", help="Print the version")

    return parser


def load_config(path: Optional[Path]) -> Config:
    if path is None:
        return Config.load_default()
    return Config.from_yaml(path)


def _statevector_rows(state, n_qubits: int) -> List[Dict[str, Any]]:
    return [
        {
            "bitstring": index_to_bitstring(index, n_qubits),
            "real": float(amp.real),
            "imag": float(amp.imag),
        }
        for index, amp in enumerate(state)
    ]


def cmd_run(args: argparse.Namespace, config: Config) -> int:
    circuit = load_circuit(args.circuit)
    simulator = Simulator(seed=args.seed, config=config)
    shots = config.simulation.default_shots if args.shots is None else args.shots

    mem = estimate_memory_requirements(circuit.num_qubits)
    logger.info(
        f"Running {circuit.name or args.circuit.name}: {circuit.num_qubits} qubits, "
        f"{len(circuit)} gates, depth {circuit.depth()}, "
        f"~{mem['state_size_mb']:.3f} MB state vector "
        f"({available_memory_mb():.0f} MB available)"
    )

    with PerformanceProfiler("run") as prof:
        counts = simulator.sample(circuit, shots)
        state = simulator.run(circuit) if args.statevector else None

    output: Dict[str, Any] = {
        "circuit": circuit.name,
        "num_qubits": circuit.num_qubits,
        "shots": shots,
        "seed": simulator.seed,
        "counts": dict(sorted(counts.items())),
        "probabilities": counts_to_probabilities(dict(sorted(counts.items()))),
    }
    if state is not None:
        output["statevector"] = _statevector_rows(state, circuit.num_qubits)
    if args.profile:
        output["performance"] = prof.metrics.to_dict()

    print(json.dumps(output, indent=2))
    return EXIT_OK


def cmd_verify(args: argparse.Namespace, config: Config) -> int:
    simulator = Simulator(seed=args.seed, config=config)
    report = run_verification(
        simulator,
        tolerance=args.tolerance,
        shots=args.shots,
        config=config,
    )
    print(report.summary())
    return EXIT_OK if report.passed else EXIT_FAILED


def cmd_gates(args: argparse.Namespace, config: Config) -> int:
    print(f"{'gate':<8} {'qubits':>6} {'params':>6}  description")
    for kind, spec in GATE_SPECS.items():
        arity = spec.num_qubits if spec.num_qubits else "any"
        print(f"{kind.value:<8} {arity:>6} {spec.num_params:>6}  {spec.description}")
    return EXIT_OK


def cmd_version(args: argparse.Namespace, config: Config) -> int:
    print(f"qubitsim {__version__}")
    return EXIT_OK


COMMANDS = {
    "run": cmd_run,
    "verify": cmd_verify,
    "gates": cmd_gates,
    "version": cmd_version,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    setup_logger(
        name="qubitsim",
        level=getattr(logging, args.log_level),
        log_file=args.log_file,
        json_format=args.json_logs,
    )

    try:
        config = load_config(args.config)
        return COMMANDS[args.command](args, config)
    except (QubitSimError, ValidationError, yaml.YAMLError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return EXIT_USAGE
    except OSError as e:
        logger.error(f"Cannot read input: {e}")
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
