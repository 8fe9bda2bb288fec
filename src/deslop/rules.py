"""Rule definitions.

Every rule shares the same identifying fields; the extra configuration a rule
needs is carried by its concrete type so that each consumer knows exactly what
it gets.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .models import AutoFix, Severity


@dataclass(frozen=True)
class PatternRule:
    """Base rule: a regex (or nothing) plus reporting metadata."""
    id: str
    severity: Severity
    auto_fix: AutoFix
    description: str
    language: Optional[str] = None  # None means the rule applies to every language
    exclude: tuple[str, ...] = ()
    pattern: Optional[re.Pattern] = None

    @property
    def is_universal(self) -> bool:
        return self.language is None

    @property
    def is_multi_pass(self) -> bool:
        return False

    @property
    def spans_lines(self) -> bool:
        """True when the regex can only match across line boundaries."""
        return self.pattern is not None and "\\n" in self.pattern.pattern


@dataclass(frozen=True)
class SimpleRule(PatternRule):
    """Regex reported on every matching line."""


@dataclass(frozen=True)
class ConsecutiveLineRule(PatternRule):
    """Regex that must hold on a run of adjacent lines."""
    min_consecutive_lines: int = 5


@dataclass(frozen=True)
class AgeCheckedRule(PatternRule):
    """Regex only reported when the line is older than the threshold."""
    age_threshold_days: int = 90


@dataclass(frozen=True)
class EntropyCheckedRule(PatternRule):
    """Regex whose matched literal must look random enough to be a secret."""
    entropy_threshold: float = 4.5


@dataclass(frozen=True)
class MultiPassRule(PatternRule):
    """Rule with no regex; a structural analyzer produces its findings."""

    @property
    def is_multi_pass(self) -> bool:
        return True


@dataclass(frozen=True)
class DocCodeRatioRule(MultiPassRule):
    min_function_lines: int = 3
    max_ratio: float = 3.0


@dataclass(frozen=True)
class VerbosityRatioRule(MultiPassRule):
    max_comment_ratio: float = 2.0
    min_code_lines: int = 3


@dataclass(frozen=True)
class OverEngineeringRule(MultiPassRule):
    file_ratio_threshold: float = 20
    lines_per_export_threshold: float = 500
    depth_threshold: int = 4


@dataclass(frozen=True)
class BuzzwordInflationRule(MultiPassRule):
    min_evidence_matches: int = 2


@dataclass(frozen=True)
class ShotgunSurgeryRule(MultiPassRule):
    commit_limit: int = 100
    cluster_threshold: int = 5


@dataclass(frozen=True)
class DuplicateStringsRule(MultiPassRule):
    max_occurrences: int = 5
    min_length: int = 4
