"""
Documentation and comment density around functions.

Two ratios are measured per function:

* doc/code: lines of the documentation block attached to a function versus
  the non-blank lines of its body.
* verbosity: comment lines inside the body versus the code lines beside them.

Bodies of brace languages are isolated with the scope scanner; Python bodies
end at the first dedent.
"""

import re
from dataclasses import dataclass
from typing import Optional

from ..file_classifier import detect_language
from ..functions import iter_brace_functions, iter_python_functions
from ..models import Violation
from ..scope import count_non_blank_lines, extract_block, indent_of, line_number_at
from .base import RuleConfig


# Documentation block followed by the declaration it documents
DOC_PATTERNS = {
    "javascript": re.compile(
        r"/\*\*(?P<doc>(?:[^*]|\*(?!/))*)\*/\s*(?:export\s+)?(?:async\s+)?"
        r"(?:function\s+(?P<name>\w+)\s*\([^)]*\)|(?:const|let|var)\s+(?P<alias>\w+)\s*=\s*(?:async\s*)?\([^)]*\)\s*=>)"
    ),
    "java": re.compile(
        r"/\*\*(?P<doc>(?:[^*]|\*(?!/))*)\*/\s*(?:@\w+\s*)*(?:public|private|protected)?\s*(?:static\s+)?"
        r"(?:final\s+)?(?:\w+(?:<[^>]*>)?)\s+(?P<name>\w+)\s*\([^)]*\)"
    ),
    "rust": re.compile(
        r"(?P<doc>(?:^[ \t]*//[/!].*\n)+)\s*(?:pub(?:\([^)]*\))?\s+)?(?:async\s+)?fn\s+(?P<name>\w+)",
        re.MULTILINE,
    ),
    "go": re.compile(
        r"(?P<doc>(?:^[ \t]*//.*\n)+)\s*func\s+(?:\([^)]+\)\s+)?(?P<name>\w+)",
        re.MULTILINE,
    ),
}


@dataclass(frozen=True)
class CommentSyntax:
    line: re.Pattern
    block_start: str
    block_end: str


_SLASH_COMMENTS = CommentSyntax(line=re.compile(r"^\s*//"), block_start="/*", block_end="*/")

COMMENT_SYNTAX = {
    "javascript": _SLASH_COMMENTS,
    "java": _SLASH_COMMENTS,
    "rust": _SLASH_COMMENTS,
    "go": _SLASH_COMMENTS,
    "python": CommentSyntax(line=re.compile(r"^\s*#"), block_start='"""', block_end='"""'),
}


def _function_name(match: re.Match) -> str:
    groups = match.groupdict()
    return groups.get("name") or groups.get("alias") or "unknown"


@dataclass
class DocCodeConfig(RuleConfig):
    """Configuration for the doc/code ratio."""
    rule_id: str = "doc_code_ratio_js"
    description: str = "Documentation longer than code (JSDoc > 3x function body)"
    # Bodies shorter than this are never reported
    min_function_lines: int = 3
    max_ratio: float = 3.0


class DocCodeRatioDetector:
    """Flag functions whose documentation dwarfs their body."""

    def __init__(self, config: Optional[DocCodeConfig] = None):
        self.config = config or DocCodeConfig()

    def analyze(self, content: str, file_path: str = "file.js") -> list[Violation]:
        language = detect_language(file_path, default="javascript")
        if language == "python":
            measurements = self._measure_python(content)
        elif language in DOC_PATTERNS:
            measurements = self._measure_braces(content, DOC_PATTERNS[language])
        else:
            return []

        violations = []
        for line, name, doc_lines, code_lines in measurements:
            if code_lines == 0 or code_lines < self.config.min_function_lines:
                continue
            ratio = round(doc_lines / code_lines, 2)
            if ratio <= self.config.max_ratio:
                continue
            violations.append(self.config.violation(
                file=file_path,
                line=line,
                category="doc_code_ratio",
                message=f"{self.config.description} ({doc_lines} doc lines / {code_lines} code lines = {ratio}x)",
                content=f"{name}()",
                details={
                    "doc_lines": doc_lines,
                    "code_lines": code_lines,
                    "ratio": ratio,
                    "function_name": name,
                },
            ))
        return violations

    def _measure_braces(self, content: str, pattern: re.Pattern):
        for match in pattern.finditer(content):
            open_index = content.find("{", match.end())
            if open_index == -1:
                continue
            block = extract_block(content, open_index)
            if not block.found:
                continue
            yield (
                line_number_at(content, match.start()),
                _function_name(match),
                count_non_blank_lines(match.group("doc")),
                count_non_blank_lines(block.body),
            )

    def _measure_python(self, content: str):
        lines = content.split("\n")
        for function in iter_python_functions(lines):
            doc_lines, body_start = _python_docstring(lines, function.index + 1)

            code_lines = 0
            for line in lines[body_start:]:
                stripped = line.strip()
                if not stripped:
                    continue
                if indent_of(line) <= function.indent:
                    break
                if not stripped.startswith("#"):
                    code_lines += 1

            yield function.index + 1, function.name, doc_lines, code_lines


def _python_docstring(lines: list[str], index: int) -> tuple[int, int]:
    """Line count of the docstring starting at `index`, and the index after it."""
    if index >= len(lines):
        return 0, index
    first = lines[index].strip()
    if not first.startswith(('"""', "'''")):
        return 0, index

    quote = first[:3]
    if len(first) > 6 and first.endswith(quote):
        return 1, index + 1

    doc_lines = 1
    index += 1
    while index < len(lines):
        doc_lines += 1
        if quote in lines[index]:
            return doc_lines, index + 1
        index += 1
    return doc_lines, index


@dataclass
class VerbosityConfig(RuleConfig):
    """Configuration for the inline comment ratio."""
    rule_id: str = "verbosity_ratio"
    description: str = "Excessive inline comments (>2:1 comment-to-code ratio within function)"
    max_comment_ratio: float = 2.0
    min_code_lines: int = 3


class VerbosityDetector:
    """Flag functions whose bodies are mostly comments."""

    def __init__(self, config: Optional[VerbosityConfig] = None):
        self.config = config or VerbosityConfig()

    def analyze(self, content: str, file_path: str = "file.js") -> list[Violation]:
        language = detect_language(file_path, default="javascript")
        syntax = COMMENT_SYNTAX.get(language, _SLASH_COMMENTS)

        violations = []
        for line, name, body_lines in self._function_bodies(content, language):
            comment_lines, code_lines = count_comment_lines(body_lines, syntax)
            if code_lines == 0 or code_lines < self.config.min_code_lines:
                continue
            ratio = round(comment_lines / code_lines, 2)
            if ratio <= self.config.max_comment_ratio:
                continue
            violations.append(self.config.violation(
                file=file_path,
                line=line,
                category="verbosity_ratio",
                message=(
                    f"{self.config.description} "
                    f"({comment_lines} comment lines / {code_lines} code lines = {ratio}x)"
                ),
                content=f"Function at line {line}",
                details={
                    "comment_lines": comment_lines,
                    "code_lines": code_lines,
                    "ratio": ratio,
                    "function_name": name,
                },
            ))
        return violations

    def _function_bodies(self, content: str, language: str):
        if language == "python":
            lines = content.split("\n")
            for function in iter_python_functions(lines):
                # The docstring belongs to the doc/code ratio, not to the body
                _, body_start = _python_docstring(lines, function.index + 1)
                body = []
                for line in lines[body_start:]:
                    if line.strip() and indent_of(line) <= function.indent:
                        break
                    body.append(line)
                yield function.index + 1, function.name, body
            return

        for function in iter_brace_functions(content, language):
            block = extract_block(content, function.brace)
            if block.found:
                yield line_number_at(content, function.start), function.name, block.body.split("\n")


def count_comment_lines(lines: list[str], syntax: CommentSyntax) -> tuple[int, int]:
    """Split non-blank lines into (comment lines, code lines)."""
    comment_lines = 0
    code_lines = 0
    in_block = False

    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue

        if in_block:
            comment_lines += 1
            if syntax.block_end in stripped:
                in_block = False
            continue

        start = stripped.find(syntax.block_start)
        if start != -1:
            comment_lines += 1
            rest = stripped[start + len(syntax.block_start):]
            if syntax.block_end not in rest:
                in_block = True
            continue

        if syntax.line.match(stripped):
            comment_lines += 1
            continue

        # Code, possibly with a trailing comment
        code_lines += 1

    return comment_lines, code_lines
