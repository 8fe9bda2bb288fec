"""Data models for slop detection results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Severity(Enum):
    """Severity of a rule or finding."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


class AutoFix(Enum):
    """Suggested remediation strategy for a rule."""
    REMOVE = "remove"            # Delete the matching line(s)
    REPLACE = "replace"          # Replace with a suggested fix
    ADD_LOGGING = "add_logging"  # Add proper error logging
    FLAG = "flag"                # Mark for manual review
    NONE = "none"                # Report only


class Certainty(Enum):
    """How much a finding can be trusted without review."""
    HIGH = "HIGH"      # Single regex match
    MEDIUM = "MEDIUM"  # Multi-pass structural analysis
    LOW = "LOW"        # Heuristic that could not be fully verified


class Verdict(Enum):
    """Outcome of a repository-level analyzer."""
    OK = "OK"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    SKIP = "SKIP"

    @classmethod
    def from_violations(cls, violations: list["Violation"]) -> "Verdict":
        """HIGH if any high-severity violation, MEDIUM if any violation, else OK."""
        if not violations:
            return cls.OK
        if any(v.severity in (Severity.HIGH, Severity.CRITICAL) for v in violations):
            return cls.HIGH
        return cls.MEDIUM


@dataclass
class Violation:
    """A single finding, shared by every analyzer."""
    file: str
    line: int
    category: str
    message: str
    severity: Severity
    certainty: Certainty = Certainty.MEDIUM
    rule_id: Optional[str] = None
    auto_fix: AutoFix = AutoFix.FLAG
    content: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "line": self.line,
            "category": self.category,
            "rule": self.rule_id or self.category,
            "message": self.message,
            "severity": self.severity.value,
            "certainty": self.certainty.value,
            "auto_fix": self.auto_fix.value,
            "content": self.content,
            "details": self.details,
        }


@dataclass
class ScopeBlock:
    """A delimited region of source text."""
    start: int
    end: Optional[int]
    body: str = ""

    @property
    def found(self) -> bool:
        return self.end is not None


@dataclass
class Claim:
    """A quality buzzword found in docs or comments."""
    file: str
    line: int
    column: int
    term: str
    category: str
    text: str
    is_positive: bool


@dataclass
class Evidence:
    """Files supporting a claim category, grouped by evidence type."""
    by_type: dict[str, list[str]] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(len(files) for files in self.by_type.values())

    @property
    def found(self) -> list[str]:
        return list(self.by_type)

    def add(self, evidence_type: str, file: str) -> None:
        files = self.by_type.setdefault(evidence_type, [])
        if file not in files:
            files.append(file)


@dataclass
class InfraSetup:
    """An infrastructure component bound to a variable."""
    name: str
    file: str
    line: int
    component_type: str
    declaration: str
    usages: int = 0


@dataclass(frozen=True)
class CoChangeEdge:
    """Two files that were modified together in several commits."""
    file_a: str
    file_b: str
    count: int

    def other(self, file: str) -> Optional[str]:
        if file == self.file_a:
            return self.file_b
        if file == self.file_b:
            return self.file_a
        return None


@dataclass
class RepoMetrics:
    """Size and API-surface measurements of a repository."""
    source_files: int = 0
    exports: int = 1
    export_method: str = "fallback"
    entry_points: list[str] = field(default_factory=list)
    total_lines: int = 0
    directory_depth: int = 0
    file_ratio: float = 0.0
    lines_per_export: int = 0


@dataclass
class RepoAnalysis:
    """Base result for analyzers that look at a whole repository."""
    violations: list[Violation] = field(default_factory=list)
    verdict: Verdict = Verdict.OK
    skipped: int = 0
    error: Optional[str] = None


@dataclass
class OverEngineeringResult(RepoAnalysis):
    metrics: RepoMetrics = field(default_factory=RepoMetrics)


@dataclass
class ClaimAnalysisResult(RepoAnalysis):
    claims_found: int = 0
    positive_claims_found: int = 0


@dataclass
class InfrastructureResult(RepoAnalysis):
    setups_found: int = 0
    usages_found: int = 0


@dataclass
class CoChangeResult(RepoAnalysis):
    commits_analyzed: int = 0
    coupled_pairs: list[CoChangeEdge] = field(default_factory=list)
