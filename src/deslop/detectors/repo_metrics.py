"""
Repository-level over-engineering metrics.

Compares the amount of code in a repository with the size of its public API:
many files or many lines behind few exports, or deeply nested source
directories, suggest more machinery than the project needs.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..file_classifier import detect_language
from ..fs import FileSystem, LocalFileSystem
from ..models import OverEngineeringResult, RepoMetrics, Severity, Verdict
from ..walker import RepoWalker
from .base import RuleConfig


logger = logging.getLogger(__name__)

# Files libraries conventionally re-export their API from
ENTRY_POINTS = (
    "index.js", "index.ts", "src/index.js", "src/index.ts",
    "lib/index.js", "lib/index.ts", "main.js", "main.ts",
    "lib.rs", "src/lib.rs",
    "main.go",
    "__init__.py", "src/__init__.py",
    "Main.java", "src/Main.java", "src/main/java/Main.java",
    "Application.java", "src/main/java/Application.java",
    "App.java", "src/main/java/App.java",
)

EXPORT_PATTERNS = {
    "javascript": (
        re.compile(r"export\s+(function|class|const|let|var|default|async\s+function)"),
        re.compile(r"export\s*\{[^}]+\}"),
        re.compile(r"export\s*\*\s*(as\s+\w+\s+)?from"),
        re.compile(r"module\.exports\s*="),
        re.compile(r"exports\.\w+\s*="),
    ),
    "rust": (
        re.compile(r"^pub\s+(fn|struct|enum|mod|type|trait|const|static)", re.MULTILINE),
    ),
    "go": (
        re.compile(r"^func\s+[A-Z]", re.MULTILINE),
        re.compile(r"^type\s+[A-Z]\w*\s+(struct|interface)", re.MULTILINE),
        re.compile(r"^var\s+[A-Z]", re.MULTILINE),
        re.compile(r"^const\s+[A-Z]", re.MULTILINE),
    ),
    "python": (
        re.compile(r"__all__\s*=\s*\["),
        re.compile(r"^def\s+(?!_)\w+\s*\(", re.MULTILINE),
        re.compile(r"^class\s+[A-Z]\w*[\s:(]", re.MULTILINE),
    ),
    "java": (
        re.compile(r"^\s*public\s+(?:static\s+)?(?:final\s+)?(?:class|interface|enum)\s+\w+", re.MULTILINE),
        re.compile(
            r"^\s*public\s+(?:static\s+)?(?:final\s+)?(?:synchronized\s+)?(?:\w+(?:<[^>]*>)?)\s+\w+\s*\(",
            re.MULTILINE,
        ),
    ),
}

_LINE_COMMENT_PREFIXES = ("//", "#", "///", '"""', "'''")


def count_exports(content: str, language: str) -> int:
    patterns = EXPORT_PATTERNS.get(language, EXPORT_PATTERNS["javascript"])
    return sum(len(pattern.findall(content)) for pattern in patterns)


def count_code_lines(content: str) -> int:
    """Non-blank lines that are not comments."""
    total = 0
    in_block = False
    for raw in content.split("\n"):
        line = raw.strip()
        if not line:
            continue

        if in_block:
            end = line.find("*/")
            if end == -1:
                continue
            in_block = False
            line = line[end + 2:].strip()

        start = line.find("/*")
        if start != -1:
            before = line[:start].strip()
            after = line[start + 2:]
            end = after.find("*/")
            if end != -1:
                line = (before + " " + after[end + 2:].strip()).strip()
            else:
                in_block = True
                line = before

        if not line or line.startswith(_LINE_COMMENT_PREFIXES):
            continue
        total += 1
    return total


@dataclass
class OverEngineeringConfig(RuleConfig):
    """Configuration for repository metrics."""
    rule_id: str = "over_engineering_metrics"
    severity: Severity = Severity.HIGH
    description: str = "Excessive files/lines relative to public API (over-engineering indicator)"
    file_ratio_threshold: float = 20
    lines_per_export_threshold: float = 500
    depth_threshold: int = 4
    max_files: int = 10000


class OverEngineeringDetector:
    """Measure files, lines and depth per exported symbol."""

    def __init__(self, config: Optional[OverEngineeringConfig] = None, fs: Optional[FileSystem] = None):
        self.config = config or OverEngineeringConfig()
        self.fs = fs or LocalFileSystem()

    def analyze(self, root: str) -> OverEngineeringResult:
        if not self.fs.is_dir(root):
            return OverEngineeringResult(verdict=Verdict.SKIP, error=f"Not a directory: {root}")

        walker = RepoWalker(root, self.fs)
        files = list(walker.iter_files(max_files=self.config.max_files))
        exports, method, entry_points = self.count_entry_point_exports(root, walker)

        total_lines = 0
        for rel_path in files:
            content = walker.read(rel_path)
            if content is not None:
                total_lines += count_code_lines(content)

        depth = walker.max_directory_depth("src")
        file_ratio = len(files) / max(exports, 1)
        lines_per_export = total_lines / max(exports, 1)

        metrics = RepoMetrics(
            source_files=len(files),
            exports=exports,
            export_method=method,
            entry_points=entry_points,
            total_lines=total_lines,
            directory_depth=depth,
            file_ratio=round(file_ratio, 2),
            lines_per_export=round(lines_per_export),
        )

        config = self.config
        violations = []
        if file_ratio > config.file_ratio_threshold:
            violations.append(self._violation(
                "file_proliferation",
                f"{len(files)} files / {exports} exports = {file_ratio:.1f}x",
                f"{_number(config.file_ratio_threshold)}x",
                file_ratio > config.file_ratio_threshold * 2,
                {"source_files": len(files), "exports": exports, "file_ratio": file_ratio, "export_method": method},
            ))
        if lines_per_export > config.lines_per_export_threshold:
            violations.append(self._violation(
                "code_density",
                f"{total_lines} lines / {exports} exports = {round(lines_per_export)}:1",
                f"{_number(config.lines_per_export_threshold)}:1",
                lines_per_export > config.lines_per_export_threshold * 2,
                {"total_lines": total_lines, "exports": exports, "lines_per_export": lines_per_export},
            ))
        if depth > config.depth_threshold:
            violations.append(self._violation(
                "directory_depth",
                f"{depth} levels",
                f"{config.depth_threshold} levels",
                depth > config.depth_threshold + 2,
                {"max_depth": depth},
            ))

        return OverEngineeringResult(
            violations=violations,
            verdict=Verdict.from_violations(violations),
            skipped=walker.skipped,
            metrics=metrics,
        )

    def count_entry_point_exports(self, root: str, walker: RepoWalker) -> tuple[int, str, list[str]]:
        """Exports as (count, method, entry points): entry points, then src/, then 1."""
        found = []
        count = 0
        for entry in ENTRY_POINTS:
            if not self.fs.is_file(self.fs.join(root, entry)):
                continue
            content = walker.read(entry)
            if content is None:
                continue
            exports = count_exports(content, detect_language(entry, default="javascript"))
            if exports > 0:
                found.append(entry)
                count += exports
        if count > 0:
            return count, "entry-points", found

        if self.fs.is_dir(self.fs.join(root, "src")):
            for rel_path in walker.iter_files(max_files=self.config.max_files, under="src"):
                content = walker.read(f"src/{rel_path}")
                if content is not None:
                    count += count_exports(content, detect_language(rel_path, default="javascript"))
            if count > 0:
                return count, "src-scan", ["src/"]

        return 1, "fallback", []

    def _violation(self, kind: str, value: str, threshold: str, high: bool, details: dict):
        return self.config.violation(
            file="project-level",
            line=0,
            category=kind,
            message=f"Over-engineering: {kind} - {value} (threshold: {threshold})",
            severity=Severity.HIGH if high else Severity.MEDIUM,
            content=value,
            details={"type": kind, "value": value, "threshold": threshold, **details},
        )


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
