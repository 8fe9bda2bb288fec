"""
Claim-evidence cross-referencing.

Finds quality claims ("production-ready", "secure", "scalable", ...) in docs
and comments, then looks through the code for anything backing them up:
tests, error handling, logging, validation and so on. Claims with too
little evidence are reported.
"""

import logging
import re
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Optional

from ..fs import FileSystem, LocalFileSystem
from ..models import Claim, ClaimAnalysisResult, Evidence, Severity, Verdict, Violation
from ..walker import RepoWalker
from .base import RuleConfig


logger = logging.getLogger(__name__)

BUZZWORD_CATEGORIES = {
    "production": ("production-ready", "production-grade", "prod-ready"),
    "enterprise": ("enterprise-grade", "enterprise-ready", "enterprise-class"),
    "security": ("secure", "secure by default", "security-focused"),
    "scale": ("scalable", "high-performance", "performant", "highly scalable"),
    "reliability": ("battle-tested", "robust", "reliable", "rock-solid"),
    "completeness": ("comprehensive", "complete", "full-featured", "feature-complete"),
}


@dataclass(frozen=True)
class EvidencePattern:
    """A regex tested against a file's path or against its content."""
    regex: re.Pattern
    on_path: bool = False

    def matches(self, text: str) -> bool:
        return self.regex.search(text) is not None


def path_evidence(pattern: str, flags: int = 0) -> EvidencePattern:
    return EvidencePattern(re.compile(pattern, flags), on_path=True)


def content_evidence(pattern: str, flags: int = 0) -> EvidencePattern:
    return EvidencePattern(re.compile(pattern, flags))


_TEST_FILES = path_evidence(r"\.test\.[jt]sx?$|\.spec\.[jt]sx?$|__tests__|test_.*\.py$|_test\.go$|_test\.rs$")

# Category -> evidence type -> patterns
EVIDENCE_PATTERNS = {
    "production": {
        "tests": (_TEST_FILES,),
        "error_handling": (content_evidence(r"try\s*\{|catch\s*\(|\.catch\s*\(|except\s*:|if\s+let\s+Err|match.*Err\("),),
        "logging": (content_evidence(
            r"logger\.|\.log\s*\(|console\.error|tracing::|slog\.|log\.(info|warn|error|debug)", re.IGNORECASE
        ),),
    },
    "enterprise": {
        "auth": (content_evidence(r"authenticat|authorization|permission|rbac|acl|role", re.IGNORECASE),),
        "audit": (content_evidence(r"audit|track.*event|event.*log|activity.*log", re.IGNORECASE),),
        "rate_limit": (content_evidence(r"rate.?limit|throttle|limiter", re.IGNORECASE),),
    },
    "security": {
        "validation": (content_evidence(r"validat|sanitiz|escape|clean|htmlspecialchars", re.IGNORECASE),),
        "auth": (content_evidence(r"\bauth\b|token|jwt|session|login|passport", re.IGNORECASE),),
        "encryption": (content_evidence(r"encrypt|decrypt|hash|bcrypt|argon|crypto\.", re.IGNORECASE),),
    },
    "scale": {
        "async": (content_evidence(r"async\s+|await\s+|Promise|Future|tokio|async_std|goroutine"),),
        "cache": (content_evidence(r"\bcache\b|redis|memcache|lru", re.IGNORECASE),),
        "pool": (content_evidence(r"pool|connection.?pool|thread.?pool", re.IGNORECASE),),
    },
    "reliability": {
        "tests": (_TEST_FILES,),
        "coverage": (content_evidence(r"coverage|lcov|nyc|istanbul|codecov", re.IGNORECASE),),
        "error_handling": (content_evidence(r"try\s*\{|catch\s*\(|\.catch\s*\(|except\s*:|if\s+let\s+Err"),),
    },
    "completeness": {
        "edge_cases": (content_evidence(r"edge.?case|boundary|corner.?case", re.IGNORECASE),),
        "error_handling": (content_evidence(
            r"\b(handle|handles|handled|handling)\s+(all\s+)?(errors?|exceptions?|failures?)\b", re.IGNORECASE
        ),),
        "documentation": (content_evidence(r"/\*\*|///|\"\"\"|'''"),),
    },
}

# A line asserting a quality ("is secure", "provides robust ...")
CLAIM_INDICATORS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"\bis\s+",
    r"\bare\s+",
    r"\bprovides?\s+",
    r"\boffers?\s+",
    r"\bfeatures?\s+",
    r"\bfully\s+",
    r"\b100%\s+",
    r"\bdesigned\s+(for|to\s+be)\s+",
))

# Aspirational or pending wording
NOT_CLAIM_INDICATORS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"\bTODO\b",
    r"\bFIXME\b",
    r"\bshould\s+be\b",
    r"\bwill\s+be\b",
    r"\bmake\s+(?:it\s+(?:more|less|better)|this\b)",
    r"\bneed(s)?\s+to\s+be\b",
    r"\bplan(ning)?\s+to\b",
    r"\bwant(s)?\s+to\b",
))

CLAIM_SOURCE_PATTERNS = (
    re.compile(r"README", re.IGNORECASE),
    re.compile(r"\.md$"),
    re.compile(r"docs?/", re.IGNORECASE),
    re.compile(r"\.rst$"),
    re.compile(r"CHANGELOG", re.IGNORECASE),
    re.compile(r"\.[jt]sx?$"),
    re.compile(r"\.py$"),
    re.compile(r"\.rs$"),
    re.compile(r"\.go$"),
)

CLAIM_SOURCE_MAX_DEPTH = 5
CLAIM_SOURCE_MAX_FILES = 500


class ClaimMatcher:
    """Finds buzzwords from a category table in text, one line at a time."""

    def __init__(self, categories: Optional[dict[str, Iterable[str]]] = None):
        categories = categories if categories is not None else BUZZWORD_CATEGORIES
        self.term_categories: dict[str, tuple[str, str]] = {}
        for category, terms in categories.items():
            for term in terms:
                self.term_categories[term.lower()] = (category, term)

        # Longest first so "secure by default" wins over "secure"
        terms = sorted(self.term_categories, key=len, reverse=True)
        self.pattern = (
            re.compile(r"\b(" + "|".join(re.escape(t) for t in terms) + r")\b", re.IGNORECASE)
            if terms else None
        )

    def extract(self, content: str, file_path: str) -> list[Claim]:
        claims: list[Claim] = []
        if self.pattern is None:
            return claims

        for number, line in enumerate(content.split("\n"), start=1):
            matches = list(self.pattern.finditer(line))
            if not matches:
                continue
            positive = is_positive_claim(line)
            for match in matches:
                mapping = self.term_categories.get(match.group(1).lower())
                if mapping is None:
                    continue
                category, term = mapping
                claims.append(Claim(
                    file=file_path,
                    line=number,
                    column=match.start(),
                    term=term,
                    category=category,
                    text=line.strip(),
                    is_positive=positive,
                ))
        return claims


def is_positive_claim(line: str) -> bool:
    """True when the line asserts something and is not a TODO or a plan."""
    if any(p.search(line) for p in NOT_CLAIM_INDICATORS):
        return False
    return any(p.search(line) for p in CLAIM_INDICATORS)


def extract_claims(content: str, file_path: str, categories: Optional[dict[str, Iterable[str]]] = None) -> list[Claim]:
    return ClaimMatcher(categories).extract(content, file_path)


def is_claim_source(rel_path: str) -> bool:
    return any(p.search(rel_path) for p in CLAIM_SOURCE_PATTERNS)


class EvidenceCache:
    """Evidence per category, computed once per run."""

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[str, Evidence] = {}

    def get(self, category: str, compute: Callable[[], Evidence]) -> Evidence:
        with self._lock:
            if category not in self._entries:
                self._entries[category] = compute()
            return self._entries[category]

    def __len__(self) -> int:
        return len(self._entries)


def search_evidence(
    category: str,
    files: list[str],
    read: Callable[[str], Optional[str]],
    evidence_patterns: Optional[dict] = None,
) -> Evidence:
    """Collect the files that support a claim category.

    Path patterns are checked first; a file is only read when the category
    has content patterns. Unreadable files are skipped.
    """
    evidence = Evidence()
    patterns = (evidence_patterns if evidence_patterns is not None else EVIDENCE_PATTERNS).get(category)
    if not patterns:
        return evidence

    path_checks = []
    content_checks = []
    for evidence_type, type_patterns in patterns.items():
        for pattern in type_patterns:
            (path_checks if pattern.on_path else content_checks).append((evidence_type, pattern))

    for file in files:
        for evidence_type, pattern in path_checks:
            if pattern.matches(file):
                evidence.add(evidence_type, file)

        if not content_checks:
            continue
        content = read(file)
        if content is None:
            continue
        for evidence_type, pattern in content_checks:
            if pattern.matches(content):
                evidence.add(evidence_type, file)

    return evidence


@dataclass
class ClaimConfig(RuleConfig):
    """Configuration for claim-evidence analysis."""
    rule_id: str = "buzzword_inflation"
    severity: Severity = Severity.HIGH
    description: str = "Quality claims (production-ready, secure, scalable) without supporting code evidence"
    min_evidence_matches: int = 2
    buzzword_categories: dict = field(default_factory=lambda: dict(BUZZWORD_CATEGORIES))
    evidence_patterns: dict = field(default_factory=lambda: dict(EVIDENCE_PATTERNS))


class BuzzwordInflationDetector:
    """Report quality claims the code does not back up."""

    def __init__(self, config: Optional[ClaimConfig] = None, fs: Optional[FileSystem] = None):
        self.config = config or ClaimConfig()
        self.fs = fs or LocalFileSystem()
        self.matcher = ClaimMatcher(self.config.buzzword_categories)

    def find_claim_source_files(self, walker: RepoWalker) -> list[str]:
        claim_walker = RepoWalker(walker.root, walker.fs, max_depth=CLAIM_SOURCE_MAX_DEPTH)
        claim_walker.ignore = walker.ignore
        return list(claim_walker.iter_files(max_files=CLAIM_SOURCE_MAX_FILES, accept=is_claim_source))

    def detect_gaps(self, claims: list[Claim], files: list[str], read: Callable[[str], Optional[str]]) -> list[Violation]:
        cache = EvidenceCache()
        required = self.config.min_evidence_matches
        violations = []

        for claim in claims:
            if not claim.is_positive:
                continue
            evidence = cache.get(
                claim.category,
                lambda: search_evidence(claim.category, files, read, self.config.evidence_patterns),
            )
            if evidence.total >= required:
                continue
            violations.append(self.config.violation(
                file=claim.file,
                line=claim.line,
                category="buzzword_inflation",
                message=f'Claim "{claim.term}" without sufficient evidence (found {evidence.total}/{required} required)',
                severity=Severity.HIGH if evidence.total == 0 else Severity.MEDIUM,
                content=claim.text,
                details={
                    "buzzword": claim.term,
                    "claim_category": claim.category,
                    "evidence_found": evidence.found,
                    "evidence_count": evidence.total,
                    "evidence_required": required,
                },
            ))
        return violations

    def analyze(self, root: str) -> ClaimAnalysisResult:
        if not self.fs.is_dir(root):
            return ClaimAnalysisResult(verdict=Verdict.SKIP, error=f"Not a directory: {root}")

        walker = RepoWalker(root, self.fs)
        claims: list[Claim] = []
        for rel_path in self.find_claim_source_files(walker):
            content = walker.read(rel_path)
            if content is not None:
                claims.extend(self.matcher.extract(content, rel_path))

        # Tests count as evidence
        source_files = list(walker.iter_files(include_tests=True))
        violations = self.detect_gaps(claims, source_files, walker.read)

        return ClaimAnalysisResult(
            violations=violations,
            verdict=Verdict.from_violations(violations),
            skipped=walker.skipped,
            claims_found=len(claims),
            positive_claims_found=sum(1 for c in claims if c.is_positive),
        )
