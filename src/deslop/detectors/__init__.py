"""Structural and repository-level slop detectors."""

from .claims import BuzzwordInflationDetector, ClaimConfig
from .cochange import CoChangeConfig, CoChangeDetector
from .dead_code import DeadCodeConfig, DeadCodeDetector
from .duplicates import DuplicateStringDetector, DuplicateStringsConfig
from .ratios import DocCodeConfig, DocCodeRatioDetector, VerbosityConfig, VerbosityDetector
from .repo_metrics import OverEngineeringConfig, OverEngineeringDetector
from .stubs import StubConfig, StubFunctionDetector
from .usage import InfrastructureConfig, InfrastructureUsageDetector

__all__ = [
    "BuzzwordInflationDetector",
    "ClaimConfig",
    "CoChangeConfig",
    "CoChangeDetector",
    "DeadCodeConfig",
    "DeadCodeDetector",
    "DocCodeConfig",
    "DocCodeRatioDetector",
    "DuplicateStringDetector",
    "DuplicateStringsConfig",
    "InfrastructureConfig",
    "InfrastructureUsageDetector",
    "OverEngineeringConfig",
    "OverEngineeringDetector",
    "StubConfig",
    "StubFunctionDetector",
    "VerbosityConfig",
    "VerbosityDetector",
]
