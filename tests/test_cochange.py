from git.exc import GitCommandNotFound

from deslop.detectors.cochange import (
    CoChangeConfig,
    CoChangeDetector,
    coupled_pairs,
    tracked_files,
    validate_commit_limit,
)
from deslop.history import HistorySource
from deslop.models import Severity, Verdict

from conftest import ROOT


def hub_commits(hub, partners, times=3):
    commits = []
    for partner in partners:
        commits.extend([[hub, partner]] * times)
    return commits


def test_validate_commit_limit():
    assert validate_commit_limit(50) == 50
    assert validate_commit_limit("250") == 250
    assert validate_commit_limit(0) == 100
    assert validate_commit_limit(10001) == 100
    assert validate_commit_limit("lots") == 100
    assert validate_commit_limit(None) == 100


def test_tracked_files_drop_tests_and_vendored_paths():
    paths = ["src/a.js", "src/a.test.js", "node_modules/x/index.js", "README.md", "lib/b.py"]
    assert tracked_files(paths) == ["src/a.js", "lib/b.py"]


class TestCoupledPairs:
    def test_pairs_need_three_shared_commits(self):
        commits = [["a.js", "b.js"]] * 3 + [["a.js", "c.js"]] * 2
        edges = coupled_pairs(commits)
        assert [(e.file_a, e.file_b, e.count) for e in edges] == [("a.js", "b.js", 3)]

    def test_bulk_commits_are_ignored(self):
        bulk = [f"f{i}.js" for i in range(21)]
        assert coupled_pairs([bulk] * 3) == []

    def test_single_file_commits_are_ignored(self):
        assert coupled_pairs([["a.js"], ["a.js", "a.js"]] * 3) == []

    def test_most_frequent_first(self):
        commits = [["a.js", "b.js"]] * 3 + [["c.js", "d.js"]] * 4
        assert [e.count for e in coupled_pairs(commits)] == [4, 3]


class TestCoChangeDetector:
    def test_hub_file_is_flagged(self, make_history):
        partners = [f"src/p{i}.js" for i in range(5)]
        history = make_history(hub_commits("src/core.js", partners))
        result = CoChangeDetector(history=history).analyze(ROOT)

        assert result.commits_analyzed == 15
        assert len(result.coupled_pairs) == 5
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.file == "src/core.js"
        assert violation.line == 0
        assert violation.severity == Severity.MEDIUM
        assert violation.details == {"coupled_count": 5, "coupled_with": partners}
        assert result.verdict == Verdict.MEDIUM

    def test_large_cluster_is_high_and_partner_list_is_capped(self, make_history):
        partners = [f"src/p{i:02d}.js" for i in range(10)]
        history = make_history(hub_commits("src/core.js", partners))
        result = CoChangeDetector(history=history).analyze(ROOT)

        violation = result.violations[0]
        assert violation.severity == Severity.HIGH
        assert violation.details["coupled_count"] == 10
        assert violation.details["coupled_with"] == partners[:5]
        assert result.verdict == Verdict.HIGH

    def test_small_cluster_is_not_flagged(self, make_history):
        history = make_history(hub_commits("src/core.js", ["src/a.js", "src/b.js"]))
        result = CoChangeDetector(history=history).analyze(ROOT)
        assert len(result.coupled_pairs) == 2
        assert result.violations == []
        assert result.verdict == Verdict.OK

    def test_tests_do_not_couple(self, make_history):
        history = make_history([["src/core.js", "src/core.test.js"]] * 5)
        result = CoChangeDetector(history=history).analyze(ROOT)
        assert result.commits_analyzed == 0
        assert result.coupled_pairs == []

    def test_unavailable_history_is_skipped(self, make_history):
        history = make_history(error="Not a git repository: /repo")
        result = CoChangeDetector(history=history).analyze(ROOT)
        assert result.verdict == Verdict.SKIP
        assert result.error == "Not a git repository: /repo"

    def test_commit_limit_is_validated(self, make_history):
        history = make_history([])
        CoChangeDetector(CoChangeConfig(commit_limit=0), history=history).analyze(ROOT)
        CoChangeDetector(CoChangeConfig(commit_limit=40), history=history).analyze(ROOT)
        assert history.limits == [100, 40]

    def test_cluster_threshold_is_configurable(self, make_history):
        history = make_history(hub_commits("src/core.js", ["src/a.js", "src/b.js"]))
        result = CoChangeDetector(CoChangeConfig(cluster_threshold=2), history=history).analyze(ROOT)
        assert [v.file for v in result.violations] == ["src/core.js"]


class MissingGit(HistorySource):
    def log(self, root, commit_limit):
        raise GitCommandNotFound("git", "not found")


def test_git_errors_from_the_history_source_are_a_skip():
    result = CoChangeDetector(history=MissingGit()).analyze(ROOT)
    assert result.verdict == Verdict.SKIP
    assert "not found" in result.error
    assert result.violations == []
