"""Repeated string literals that belong in a constant."""

import re
from dataclasses import dataclass
from typing import Optional

from ..models import Severity, Violation
from .base import RuleConfig


STRING_LITERAL = re.compile(r"""(["'])((?:\\.|(?!\1)[^\\\n])*)\1""")


@dataclass
class DuplicateStringsConfig(RuleConfig):
    """Configuration for duplicate literal detection."""
    rule_id: str = "duplicate_strings"
    severity: Severity = Severity.LOW
    description: str = "Duplicate string literals that should be constants"
    # Reported when a literal occurs more often than this
    max_occurrences: int = 5
    min_length: int = 4


class DuplicateStringDetector:
    """Flag string literals repeated throughout one file."""

    def __init__(self, config: Optional[DuplicateStringsConfig] = None):
        self.config = config or DuplicateStringsConfig()

    def analyze(self, content: str, file_path: str = "") -> list[Violation]:
        first_line: dict[str, int] = {}
        counts: dict[str, int] = {}
        for number, line in enumerate(content.split("\n"), start=1):
            for match in STRING_LITERAL.finditer(line):
                value = match.group(2)
                if len(value) < self.config.min_length:
                    continue
                first_line.setdefault(value, number)
                counts[value] = counts.get(value, 0) + 1

        violations = []
        for value, count in counts.items():
            if count <= self.config.max_occurrences:
                continue
            violations.append(self.config.violation(
                file=file_path,
                line=first_line[value],
                category="duplicate_strings",
                message=f'{self.config.description}: "{value}" appears {count} times',
                content=value[:100],
                details={"value": value, "occurrences": count},
            ))
        violations.sort(key=lambda v: v.line)
        return violations
