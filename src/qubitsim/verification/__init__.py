"""
Verification harness: physics invariants the simulator must satisfy.
"""

from .harness import CheckResult, VerificationReport, run_verification

__all__ = ["CheckResult", "VerificationReport", "run_verification"]
