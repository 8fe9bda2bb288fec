"""Function header grammars shared by the structural analyzers."""

import re
from collections.abc import Iterator
from dataclasses import dataclass


_JS_KEYWORDS = r"(?!(?:if|for|while|switch|catch|with|function|return)\b)"
_JAVA_KEYWORDS = r"(?!(?:if|for|while|switch|catch|synchronized|return|new|else|throw)\b)"

# Every pattern ends on the opening brace of the body.
BRACE_FUNCTION_PATTERNS: dict[str, tuple[re.Pattern, ...]] = {
    "javascript": (
        re.compile(r"(?:async\s+)?function\s*\*?\s*(\w+)\s*\([^)]*\)\s*(?::\s*[^{;=]+)?\{"),
        re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s*)?\([^)]*\)\s*(?::\s*[^{;=]+)?=>\s*\{"),
        re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?function\s*\([^)]*\)\s*\{"),
        re.compile(r"^[ \t]*(?:async\s+)?" + _JS_KEYWORDS + r"(\w+)\s*\([^)]*\)\s*\{", re.MULTILINE),
    ),
    "rust": (
        re.compile(r"(?:pub(?:\([^)]*\))?\s+)?(?:async\s+)?fn\s+(\w+)\s*(?:<[^>]*>)?\s*\([^)]*\)(?:\s*->\s*[^{;]+)?\s*\{"),
    ),
    "java": (
        re.compile(
            r"(?:public|private|protected)?\s*(?:static\s+)?(?:final\s+)?"
            + r"\b" + _JAVA_KEYWORDS + r"(?:\w+(?:<[^>]*>)?)\s+"
            + _JAVA_KEYWORDS + r"(\w+)\s*\([^)]*\)\s*(?:throws\s+[^{;]+)?\s*\{"
        ),
    ),
    "go": (
        re.compile(r"func\s+(?:\([^)]+\)\s+)?(\w+)\s*\([^)]*\)(?:\s*(?:\([^)]+\)|[^{\n]+))?\s*\{"),
    ),
}

PYTHON_DEF = re.compile(r"^(\s*)(?:async\s+)?def\s+(\w+)\s*\([^)]*\)\s*(?:->.*)?:\s*$")


@dataclass
class BraceFunction:
    """A function whose body is delimited by braces."""
    name: str
    start: int  # offset of the declaration
    brace: int  # offset of the opening brace


@dataclass
class PythonFunction:
    name: str
    index: int  # 0-based line index of the `def`
    indent: int


def iter_brace_functions(content: str, language: str) -> Iterator[BraceFunction]:
    """Yield each function once, in source order."""
    seen: set[int] = set()
    found: list[BraceFunction] = []
    for pattern in BRACE_FUNCTION_PATTERNS.get(language, ()):
        for match in pattern.finditer(content):
            brace = match.end() - 1
            if brace in seen:
                continue
            seen.add(brace)
            found.append(BraceFunction(name=match.group(1) or "anonymous", start=match.start(), brace=brace))
    yield from sorted(found, key=lambda function: function.brace)


def iter_python_functions(lines: list[str]) -> Iterator[PythonFunction]:
    for index, line in enumerate(lines):
        match = PYTHON_DEF.match(line)
        if match:
            yield PythonFunction(name=match.group(2), index=index, indent=len(match.group(1)))
