"""Apply the single-regex rules of a registry to one file."""

import logging
from datetime import datetime, timezone
from typing import Optional

import numpy as np

from .exclusion import is_excluded
from .file_classifier import detect_language
from .history import BlameSource
from .models import Certainty, Violation
from .registry import PatternRegistry, default_registry
from .rules import AgeCheckedRule, ConsecutiveLineRule, EntropyCheckedRule, PatternRule
from .scope import line_number_at


logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 100


def shannon_entropy(text: str) -> float:
    """Bits per character of `text`."""
    if not text:
        return 0.0
    _, counts = np.unique(list(text), return_counts=True)
    probabilities = counts / len(text)
    return float(-(probabilities * np.log2(probabilities)).sum())


class RuleScanner:
    """Run every applicable regex rule over a file's content."""

    def __init__(
        self,
        registry: Optional[PatternRegistry] = None,
        blame: Optional[BlameSource] = None,
        root: str = ".",
        now: Optional[datetime] = None,
    ):
        self.registry = registry or default_registry()
        self.blame = blame
        self.root = root
        self.now = now

    def applicable_rules(self, file_path: str, language: Optional[str] = None) -> list[PatternRule]:
        language = language or detect_language(file_path)
        return [
            rule for rule in self.registry.rules_for_file(language)
            if not is_excluded(file_path, rule.exclude)
        ]

    def scan(self, file_path: str, content: str, language: Optional[str] = None) -> list[Violation]:
        lines = content.split("\n")
        violations: list[Violation] = []
        blame_dates: dict = {}

        for rule in self.applicable_rules(file_path, language):
            if isinstance(rule, ConsecutiveLineRule):
                violations.extend(self._scan_runs(rule, file_path, lines))
            elif rule.spans_lines:
                violations.extend(self._scan_content(rule, file_path, content))
            elif isinstance(rule, EntropyCheckedRule):
                violations.extend(self._scan_entropy(rule, file_path, lines))
            elif isinstance(rule, AgeCheckedRule):
                violations.extend(self._scan_aged(rule, file_path, lines, blame_dates))
            else:
                for number, line in enumerate(lines, start=1):
                    if rule.pattern.search(line):
                        violations.append(_finding(rule, file_path, number, line.strip()))

        violations.sort(key=lambda v: v.line)
        return violations

    def _scan_runs(self, rule: ConsecutiveLineRule, file_path: str, lines: list[str]) -> list[Violation]:
        found = []
        start = None
        # A sentinel line flushes a run reaching the end of the file
        for index, line in enumerate(lines + [None]):
            if line is not None and rule.pattern.search(line):
                if start is None:
                    start = index
                continue
            if start is not None:
                count = index - start
                if count >= rule.min_consecutive_lines:
                    first, last = start + 1, start + count
                    found.append(_finding(
                        rule,
                        file_path,
                        first,
                        f"Lines {first}-{last}",
                        message=f"{rule.description} ({count} consecutive lines)",
                        details={"start_line": first, "end_line": last, "line_count": count},
                    ))
                start = None
        return found

    def _scan_content(self, rule: PatternRule, file_path: str, content: str) -> list[Violation]:
        return [
            _finding(rule, file_path, line_number_at(content, match.start()), match.group(0).strip())
            for match in rule.pattern.finditer(content)
        ]

    def _scan_entropy(self, rule: EntropyCheckedRule, file_path: str, lines: list[str]) -> list[Violation]:
        found = []
        for number, line in enumerate(lines, start=1):
            for match in rule.pattern.finditer(line):
                literal = match.group(0)[1:-1]
                entropy = shannon_entropy(literal)
                if entropy >= rule.entropy_threshold:
                    found.append(_finding(
                        rule, file_path, number, line.strip(), details={"entropy": round(entropy, 2)},
                    ))
        return found

    def _scan_aged(self, rule: AgeCheckedRule, file_path: str, lines: list[str], cache: dict) -> list[Violation]:
        found = []
        for number, line in enumerate(lines, start=1):
            if not rule.pattern.search(line):
                continue

            dates = self._line_dates(file_path, cache)
            if dates is None or number not in dates:
                # Age unknown: report, but say so
                found.append(_finding(
                    rule, file_path, number, line.strip(),
                    certainty=Certainty.LOW, details={"age_checked": False},
                ))
                continue

            now = self.now or datetime.now(timezone.utc)
            age = (now - dates[number]).days
            if age > rule.age_threshold_days:
                found.append(_finding(
                    rule, file_path, number, line.strip(), details={"age_checked": True, "age_days": age},
                ))
        return found

    def _line_dates(self, file_path: str, cache: dict):
        if self.blame is None:
            return None
        if "dates" not in cache:
            cache["dates"] = self.blame.line_dates(self.root, file_path)
        return cache["dates"]


def _finding(
    rule: PatternRule,
    file_path: str,
    line: int,
    content: str,
    message: Optional[str] = None,
    certainty: Certainty = Certainty.HIGH,
    details: Optional[dict] = None,
) -> Violation:
    return Violation(
        file=file_path,
        line=line,
        category=rule.id,
        message=message or rule.description,
        severity=rule.severity,
        certainty=certainty,
        rule_id=rule.id,
        auto_fix=rule.auto_fix,
        content=content[:MAX_CONTENT_LENGTH],
        details=details or {},
    )
