"""
Pydantic schemas for configuration validation.

Type-safe configuration classes for simulation and verification settings,
loadable from and savable to YAML.
"""

from pathlib import Path
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator
import yaml


DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


class SimulationConfig(BaseModel):
    """Simulation parameters (seed, shots, register limits, workers)."""

    seed: Optional[int] = Field(
        default=None,
        description="Seed for measurement sampling (None = OS entropy)"
    )
    default_shots: int = Field(
        default=1000,
        ge=0,
        description="Shots used when a caller does not request a count"
    )
    max_qubits: int = Field(
        default=24,
        ge=1,
        le=30,
        description="Largest register a state vector may be allocated for "
                    "(16 * 2^n bytes)"
    )
    n_workers: int = Field(
        default=4,
        ge=1,
        description="Thread pool size for batch sampling"
    )

    @field_validator("seed")
    @classmethod
    def validate_seed(cls, v: Optional[int]) -> Optional[int]:
        """NumPy generators only accept non-negative seeds."""
        if v is not None and v < 0:
            raise ValueError(f"seed must be non-negative, got {v}")
        return v


class VerificationConfig(BaseModel):
    """Settings for the physics verification harness."""

    tolerance: float = Field(
        default=1e-9,
        gt=0.0,
        description="Absolute tolerance for amplitude and norm comparisons"
    )
    shots: int = Field(
        default=10000,
        ge=1,
        description="Shots for the sampling-convergence check"
    )
    significance: float = Field(
        default=0.001,
        gt=0.0,
        lt=1.0,
        description="Chi-squared p-value below which sampling is rejected"
    )


class Config(BaseModel):
    """Top-level configuration combining simulation and verification settings."""

    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    verification: VerificationConfig = Field(default_factory=VerificationConfig)
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional metadata (run name, notes, etc.)"
    )

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "Config":
        """Load configuration from YAML file."""
        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    @classmethod
    def load_default(cls) -> "Config":
        """Load the packaged ``defaults.yaml``."""
        return cls.from_yaml(DEFAULTS_PATH)

    def to_yaml(self, yaml_path: Path) -> None:
        """Save configuration to YAML file."""
        with open(yaml_path, "w") as f:
            yaml.safe_dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)
