"""Functions whose whole body is a single placeholder statement."""

import re
from dataclasses import dataclass
from typing import Optional

from ..file_classifier import detect_language
from ..functions import iter_brace_functions, iter_python_functions
from ..models import Certainty, Severity, Violation
from ..scope import extract_block, indent_of, line_number_at
from .base import RuleConfig


TODO_MARKER = re.compile(r"\b(TODO|FIXME|XXX|HACK|STUB)\b", re.IGNORECASE)

# Lines following a Python `def` searched for a marker
PYTHON_MARKER_WINDOW = 10

_SLASH_COMMENT_LINES = (
    re.compile(r"^\s*//"),
    re.compile(r"^\s*/\*"),
    re.compile(r"^\s*\*"),
)


@dataclass(frozen=True)
class StubGrammar:
    """Placeholder statements of one brace language.

    Each pattern is paired with the label reported for it; a label of None
    means the first group of the match is reported.
    """
    placeholders: tuple[tuple[re.Pattern, Optional[str]], ...]
    comments: tuple[re.Pattern, ...] = _SLASH_COMMENT_LINES

    def match(self, line: str) -> Optional[str]:
        for pattern, label in self.placeholders:
            found = pattern.match(line)
            if found:
                return label or found.group(1)
        return None


STUB_GRAMMARS = {
    "javascript": StubGrammar(placeholders=(
        (re.compile(r"^\s*return\s+(0|null|undefined|true|false|\[\]|\{\}|\"\"|''|``)\s*;?\s*$"), None),
    )),
    "rust": StubGrammar(placeholders=(
        (re.compile(
            r"^\s*(?:return\s+)?(None|0|true|false|String::new\(\)|Vec::new\(\)|vec!\[\]|\(\)|\"\"|Default::default\(\))\s*;?\s*$"
        ), None),
        (re.compile(r"^\s*(todo!\(\)|unimplemented!\(\)|panic!\([^)]*\))\s*;?\s*$"), None),
    )),
    "java": StubGrammar(placeholders=(
        (re.compile(
            r"^\s*return\s+(null|0|0L|0\.0|0\.0f|true|false|\"\"|Collections\.emptyList\(\)"
            r"|Collections\.emptyMap\(\)|Optional\.empty\(\))\s*;\s*$"
        ), None),
        (re.compile(
            r"^\s*throw\s+new\s+(?:Unsupported(?:Operation)?Exception|NotImplementedException|IllegalStateException)"
            r"\s*\([^)]*\)\s*;\s*$"
        ), "throw stub"),
    )),
    "go": StubGrammar(
        placeholders=(
            (re.compile(
                r"^\s*return\s+(nil|0|\"\"|false|true|\[\][a-zA-Z_]\w*\{\}|map\[[^\]]+\][a-zA-Z_]\w*\{\}|&?[A-Z]\w*\{\})\s*$"
            ), None),
            (re.compile(r"^\s*panic\s*\([^)]*\)\s*$"), "panic"),
        ),
        comments=(re.compile(r"^\s*//"),),
    ),
}

PYTHON_PLACEHOLDERS = (
    re.compile(r"^\s*return\s+(None|0|True|False|\[\]|\{\}|\"\")\s*$"),
    re.compile(r"^\s*pass\s*$"),
    re.compile(r"^\s*raise\s+NotImplementedError\s*\([^)]*\)\s*$"),
    re.compile(r"^\s*\.\.\.\s*$"),
)

# Declarations meant to have no body
PYTHON_SKIP_DECORATORS = re.compile(r"^@(?:\w+\.)*(?:abstractmethod|overload)\b")


@dataclass
class StubConfig(RuleConfig):
    """Configuration for stub function detection."""
    rule_id: str = "placeholder_stub_functions"
    description: str = "Function whose only statement returns a placeholder value"


class StubFunctionDetector:
    """Flag functions that do nothing but return a placeholder."""

    def __init__(self, config: Optional[StubConfig] = None):
        self.config = config or StubConfig()

    def analyze(self, content: str, file_path: str = "file.js") -> list[Violation]:
        language = detect_language(file_path, default="javascript")
        if language == "python":
            stubs = self._python_stubs(content)
        elif language in STUB_GRAMMARS:
            stubs = self._brace_stubs(content, language)
        else:
            return []

        violations = []
        for line, name, value, has_todo, text in stubs:
            violations.append(self.config.violation(
                file=file_path,
                line=line,
                category="placeholder_stub_functions",
                message=f"{self.config.description}: {name}() returns {value}",
                severity=Severity.HIGH if has_todo else self.config.severity,
                certainty=Certainty.HIGH if has_todo else Certainty.MEDIUM,
                content=text,
                details={"function_name": name, "return_value": value, "has_todo": has_todo},
            ))
        return violations

    def _brace_stubs(self, content: str, language: str):
        grammar = STUB_GRAMMARS[language]
        for function in iter_brace_functions(content, language):
            block = extract_block(content, function.brace)
            if not block.found:
                continue

            significant = [
                line.strip() for line in block.body.split("\n")
                if line.strip() and not any(p.match(line.strip()) for p in grammar.comments)
            ]
            if len(significant) != 1:
                continue
            value = grammar.match(significant[0])
            if value is None:
                continue

            has_todo = TODO_MARKER.search(block.body) is not None
            yield (
                line_number_at(content, function.brace),
                function.name,
                value,
                has_todo,
                f"{function.name}() returns {value}",
            )

    def _python_stubs(self, content: str):
        lines = content.split("\n")
        for function in iter_python_functions(lines):
            if _is_decorated_abstract(lines, function.index):
                continue

            significant = _python_statements(lines, function.index, function.indent)
            if len(significant) != 1:
                continue

            only = significant[0]
            for pattern in PYTHON_PLACEHOLDERS:
                found = pattern.match(only)
                if not found:
                    continue
                value = found.group(1) if pattern.groups else only
                window = "\n".join(lines[function.index:function.index + PYTHON_MARKER_WINDOW])
                has_todo = TODO_MARKER.search(window) is not None
                yield function.index + 1, function.name, value, has_todo, f"def {function.name}(): {only}"
                break


def _is_decorated_abstract(lines: list[str], def_index: int) -> bool:
    index = def_index - 1
    while index >= 0 and lines[index].strip().startswith("@"):
        if PYTHON_SKIP_DECORATORS.match(lines[index].strip()):
            return True
        index -= 1
    return False


def _python_statements(lines: list[str], def_index: int, def_indent: int) -> list[str]:
    """Stripped body lines, without blanks, comments and docstrings."""
    statements = []
    quote: Optional[str] = None
    for line in lines[def_index + 1:]:
        stripped = line.strip()
        if not stripped:
            continue
        if quote is None and indent_of(line) <= def_indent:
            break

        if quote is not None:
            if quote in stripped:
                quote = None
            continue
        if stripped.startswith(('"""', "'''")):
            opener = stripped[:3]
            if opener not in stripped[3:]:
                quote = opener
            continue
        if stripped.startswith("#"):
            continue
        statements.append(stripped)
    return statements
