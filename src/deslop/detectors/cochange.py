"""
Co-change clustering over recent commits.

Files that keep being modified together with many different partners are a
sign that one change has to be made in many places (shotgun surgery).
"""

import logging
from collections import Counter
from dataclasses import dataclass
from itertools import combinations
from typing import Optional

from git.exc import GitError

from ..errors import HistoryUnavailableError
from ..file_classifier import get_extension, is_test_file, should_exclude
from ..history import GitHistory, HistorySource, parse_log
from ..models import CoChangeEdge, CoChangeResult, Severity, Verdict
from .base import RuleConfig


logger = logging.getLogger(__name__)

COCHANGE_EXTENSIONS = frozenset({".js", ".ts", ".jsx", ".tsx", ".py", ".go", ".rs", ".java"})

DEFAULT_COMMIT_LIMIT = 100
MAX_COMMIT_LIMIT = 10000

# Commits touching more files than this are bulk changes, not coupling
MAX_FILES_PER_COMMIT = 20
MIN_PAIR_COUNT = 3
MAX_PARTNERS = 5
MAX_REPORTED_PAIRS = 20


def validate_commit_limit(value) -> int:
    """An int in [1, 10000]; anything else falls back to the default."""
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return DEFAULT_COMMIT_LIMIT
    if limit < 1 or limit > MAX_COMMIT_LIMIT:
        return DEFAULT_COMMIT_LIMIT
    return limit


def tracked_files(paths: list[str]) -> list[str]:
    """Source files that are neither tests nor in a denylisted directory."""
    return [
        path for path in paths
        if get_extension(path) in COCHANGE_EXTENSIONS
        and not is_test_file(path)
        and not should_exclude(path)
    ]


def coupled_pairs(commits: list[list[str]], min_count: int = MIN_PAIR_COUNT) -> list[CoChangeEdge]:
    """Pairs changed together in at least `min_count` commits, most frequent first."""
    counts: Counter = Counter()
    for files in commits:
        unique = sorted(set(files))
        if len(unique) < 2 or len(unique) > MAX_FILES_PER_COMMIT:
            continue
        counts.update(combinations(unique, 2))

    edges = [CoChangeEdge(a, b, count) for (a, b), count in counts.items() if count >= min_count]
    edges.sort(key=lambda edge: (-edge.count, edge.file_a, edge.file_b))
    return edges


@dataclass
class CoChangeConfig(RuleConfig):
    """Configuration for co-change clustering."""
    rule_id: str = "shotgun_surgery"
    description: str = "Files that frequently change together across commits"
    commit_limit: int = DEFAULT_COMMIT_LIMIT
    cluster_threshold: int = 5


class CoChangeDetector:
    """Flag files coupled to many others through shared commits."""

    def __init__(self, config: Optional[CoChangeConfig] = None, history: Optional[HistorySource] = None):
        self.config = config or CoChangeConfig()
        self.history = history or GitHistory()

    def analyze(self, root: str) -> CoChangeResult:
        limit = validate_commit_limit(self.config.commit_limit)
        try:
            text = self.history.log(root, limit)
        except (HistoryUnavailableError, GitError, OSError) as e:
            logger.debug("Skipping co-change analysis: %s", e)
            return CoChangeResult(verdict=Verdict.SKIP, error=str(e))

        commits = [files for files in (tracked_files(paths) for _, paths in parse_log(text)) if len(files) > 1]
        edges = coupled_pairs(commits)

        degree: Counter = Counter()
        for edge in edges:
            degree[edge.file_a] += 1
            degree[edge.file_b] += 1

        threshold = self.config.cluster_threshold
        violations = []
        for file, count in sorted(degree.items(), key=lambda item: (-item[1], item[0])):
            if count < threshold:
                continue
            partners = [edge.other(file) for edge in edges if edge.other(file) is not None][:MAX_PARTNERS]
            violations.append(self.config.violation(
                file=file,
                line=0,
                category="shotgun_surgery",
                message=f'"{file}" changes with {count} other files frequently (shotgun surgery indicator)',
                severity=Severity.HIGH if count >= threshold * 2 else Severity.MEDIUM,
                content=", ".join(partners)[:100],
                details={"coupled_count": count, "coupled_with": partners},
            ))

        return CoChangeResult(
            violations=violations,
            verdict=Verdict.from_violations(violations),
            commits_analyzed=len(commits),
            coupled_pairs=edges[:MAX_REPORTED_PAIRS],
        )
