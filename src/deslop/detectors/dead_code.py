"""Unreachable statements after return, throw, break, continue, panic or raise."""

import re
from dataclasses import dataclass
from typing import Optional

from ..file_classifier import detect_language
from ..models import Severity, Violation
from .base import RuleConfig


_BRACE_TERMINATORS = (
    re.compile(r"\breturn\b[^;]*;"),
    re.compile(r"\bthrow\s+"),
    re.compile(r"\bbreak\s*;"),
    re.compile(r"\bcontinue\s*;"),
)

TERMINATORS = {
    "javascript": _BRACE_TERMINATORS,
    "java": _BRACE_TERMINATORS,
    "python": (
        re.compile(r"^\s*return(?:\s+|$)"),
        re.compile(r"^\s*raise\s+"),
        re.compile(r"^\s*break\s*$"),
        re.compile(r"^\s*continue\s*$"),
    ),
    "go": (
        re.compile(r"\breturn\b"),
        re.compile(r"\bpanic\s*\("),
        re.compile(r"\bbreak\s*$"),
        re.compile(r"\bcontinue\s*$"),
    ),
    "rust": (
        re.compile(r"\breturn\b[^;]*;"),
        re.compile(r"\bpanic!\s*\("),
        re.compile(r"\bbreak\s*;"),
        re.compile(r"\bcontinue\s*;"),
    ),
}

TERMINATOR_KEYWORD = re.compile(r"\b(return|throw|break|continue|panic|raise)\b", re.IGNORECASE)

# `if (x) return;` and `if x: return` leave the following code reachable
ONE_LINE_GUARD = re.compile(r"^\s*(?:(?:if|elif|else\s+if)\s*\(|if\s+.*:)")

SWITCH_LABEL = re.compile(r"^(case\s+|default\s*:)")

SIBLING_BRANCH = re.compile(
    r"^(else\s*[:{]?|elif\s+|else\s+if\s+|except\s*[:(]|catch\s*[({]|finally\s*[:{]?"
    r"|\}\s*else\s*|\}\s*catch\s*|\}\s*finally\s*)"
)

CLOSING_LINES = ("}", "},", "};")

_OPEN_BRACKETS = re.compile(r"[(\[{]")
_CLOSE_BRACKETS = re.compile(r"[)\]}]")


def _is_skippable(stripped: str) -> bool:
    return not stripped or stripped.startswith(("//", "#", "/*", "*"))


def bracket_balance(text: str) -> int:
    return len(_OPEN_BRACKETS.findall(text)) - len(_CLOSE_BRACKETS.findall(text))


@dataclass
class DeadCodeConfig(RuleConfig):
    """Configuration for dead code detection."""
    rule_id: str = "dead_code"
    severity: Severity = Severity.HIGH
    description: str = "Unreachable code after a control flow terminator"
    # Characters of the dead line kept in the finding
    max_content_length: int = 50


class DeadCodeDetector:
    """Flag the first reachable-looking line after each terminator."""

    def __init__(self, config: Optional[DeadCodeConfig] = None):
        self.config = config or DeadCodeConfig()

    def analyze(self, content: str, file_path: str = "file.js") -> list[Violation]:
        language = detect_language(file_path, default="javascript")
        terminators = TERMINATORS.get(language, TERMINATORS["javascript"])
        indented = language == "python"
        lines = content.split("\n")
        violations = []

        i = 0
        while i < len(lines):
            line = lines[i]
            stripped = line.strip()
            if _is_skippable(stripped) or stripped in CLOSING_LINES:
                i += 1
                continue
            if not any(p.search(stripped) for p in terminators):
                i += 1
                continue
            if ONE_LINE_GUARD.match(stripped):
                i += 1
                continue

            keyword = TERMINATOR_KEYWORD.search(stripped)
            kind = keyword.group(1) if keyword else "terminator"
            indent = len(line) - len(line.lstrip())

            # A statement left open continues on the following lines
            balance = bracket_balance(stripped)
            while balance > 0 and i + 1 < len(lines):
                i += 1
                balance += bracket_balance(lines[i].strip())

            dead = self._first_dead_line(lines, i + 1, indent if indented else None)
            if dead is not None:
                text = lines[dead].strip()
                limit = self.config.max_content_length
                violations.append(self.config.violation(
                    file=file_path,
                    line=dead + 1,
                    category="dead_code",
                    message=f"{self.config.description}: {kind} at line {i + 1}",
                    content=text[:limit] + ("..." if len(text) > limit else ""),
                    details={"termination_type": kind, "termination_line": i + 1},
                ))
            i += 1

        return violations

    def _first_dead_line(self, lines: list[str], start: int, indent: Optional[int]) -> Optional[int]:
        """Index of the first statement after a terminator still in its block."""
        depth = 0
        for j in range(start, len(lines)):
            line = lines[j]
            stripped = line.strip()
            if _is_skippable(stripped):
                continue

            if indent is not None:
                if len(line) - len(line.lstrip()) < indent:
                    return None
            else:
                depth += stripped.count("{") - stripped.count("}")
                if depth < 0:
                    return None
                if stripped in CLOSING_LINES:
                    continue

            if SWITCH_LABEL.match(stripped) or SIBLING_BRANCH.match(stripped):
                return None
            return j
        return None
