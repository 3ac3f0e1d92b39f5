"""
Configuration management for qubitsim.

Provides Pydantic-validated configuration schemas and YAML loading utilities.
"""

from .schemas import SimulationConfig, VerificationConfig, Config, DEFAULTS_PATH

__all__ = ["SimulationConfig", "VerificationConfig", "Config", "DEFAULTS_PATH"]
