from datetime import datetime, timedelta, timezone

import pytest

from deslop.models import Certainty, Severity
from deslop.patterns import DEFAULT_RULES
from deslop.registry import PatternRegistry
from deslop.scanner import RuleScanner, shannon_entropy

from conftest import FakeBlame


NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def scanner_for(*rule_ids, **kwargs):
    registry = PatternRegistry(rule for rule in DEFAULT_RULES if rule.id in rule_ids)
    return RuleScanner(registry, **kwargs)


class TestLineRules:
    def test_console_debugging(self):
        violations = scanner_for("console_debugging").scan("src/app.js", "const a = 1;\n  console.log(a);\n")
        assert len(violations) == 1
        violation = violations[0]
        assert violation.line == 2
        assert violation.rule_id == "console_debugging"
        assert violation.content == "console.log(a);"
        assert violation.certainty == Certainty.HIGH
        assert violation.severity == Severity.MEDIUM

    def test_excluded_files_are_not_scanned(self):
        assert scanner_for("console_debugging").scan("src/app.test.js", "console.log(a);\n") == []

    def test_language_rules_only_apply_to_their_language(self):
        assert scanner_for("console_debugging").scan("tools/run.py", "console.log(a)\n") == []

    def test_hardcoded_secret_is_critical(self):
        violations = scanner_for("hardcoded_secrets").scan("src/config.js", 'const password = "hunter2hunter2";\n')
        assert [v.severity for v in violations] == [Severity.CRITICAL]

    def test_template_placeholders_are_not_secrets(self):
        assert scanner_for("hardcoded_secrets").scan("src/config.js", 'const token = "${TOKEN_FROM_ENV}";\n') == []

    def test_content_is_truncated(self):
        line = "console.log(" + "x" * 200 + ");"
        violation = scanner_for("console_debugging").scan("app.js", line)[0]
        assert len(violation.content) == 100


class TestCommentedCode:
    def test_run_of_five_lines(self):
        content = "const a = 1;\n" + "".join(f"// oldCall{i}(a);\n" for i in range(5)) + "run();\n"
        violations = scanner_for("commented_code").scan("app.js", content)
        assert len(violations) == 1
        violation = violations[0]
        assert violation.line == 2
        assert violation.content == "Lines 2-6"
        assert violation.details == {"start_line": 2, "end_line": 6, "line_count": 5}

    def test_run_at_end_of_file(self):
        content = "\n".join(f"# removed_call_{i}()" for i in range(6))
        violations = scanner_for("commented_code").scan("app.py", content)
        assert [v.details["line_count"] for v in violations] == [6]

    def test_short_run_is_ignored(self):
        content = "".join(f"// oldCall{i}(a);\n" for i in range(4))
        assert scanner_for("commented_code").scan("app.js", content) == []


def test_multiple_blank_lines_span_lines():
    violations = scanner_for("multiple_blank_lines").scan("app.js", "a();\n\n\n\nb();\n")
    assert [v.line for v in violations] == [2]


def test_results_are_sorted_by_line():
    content = "let a = 1;\n\n\n\nconsole.log(a);\n"
    violations = scanner_for("console_debugging", "multiple_blank_lines").scan("app.js", content)
    assert [v.rule_id for v in violations] == ["multiple_blank_lines", "console_debugging"]


class TestEntropy:
    def test_random_looking_literal_is_flagged(self):
        literal = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmn"
        violations = scanner_for("high_entropy_string").scan("app.js", f'const k = "{literal}";\n')
        assert len(violations) == 1
        assert violations[0].details == {"entropy": 5.32}

    def test_repetitive_literal_is_not_flagged(self):
        assert scanner_for("high_entropy_string").scan("app.js", f'const k = "{"a" * 48}";\n') == []

    def test_shannon_entropy(self):
        assert shannon_entropy("") == 0.0
        assert shannon_entropy("aaaa") == 0.0
        assert shannon_entropy("ab") == pytest.approx(1.0)
        assert shannon_entropy("abcd") == pytest.approx(2.0)


class TestOldTodos:
    def test_without_blame_the_age_is_unknown(self):
        violations = scanner_for("old_todos").scan("app.js", "// TODO: handle errors\n")
        assert len(violations) == 1
        assert violations[0].certainty == Certainty.LOW
        assert violations[0].details == {"age_checked": False}

    def test_old_todo_is_reported(self):
        blame = FakeBlame({1: NOW - timedelta(days=200)})
        violations = scanner_for("old_todos", blame=blame, now=NOW).scan("app.js", "// TODO: handle errors\n")
        assert len(violations) == 1
        assert violations[0].certainty == Certainty.HIGH
        assert violations[0].details == {"age_checked": True, "age_days": 200}

    def test_recent_todo_is_not_reported(self):
        blame = FakeBlame({1: NOW - timedelta(days=10)})
        assert scanner_for("old_todos", blame=blame, now=NOW).scan("app.js", "// TODO: handle errors\n") == []

    def test_line_missing_from_blame(self):
        blame = FakeBlame({})
        violations = scanner_for("old_todos", blame=blame, now=NOW).scan("app.js", "// FIXME: later\n")
        assert violations[0].certainty == Certainty.LOW
