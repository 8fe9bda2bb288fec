from deslop.detectors.dead_code import DeadCodeDetector, bracket_balance
from deslop.models import Severity


def analyze(content, file_path="file.js"):
    return DeadCodeDetector().analyze(content, file_path)


def test_statement_after_return_is_flagged():
    content = "function f(x) {\n  return x;\n  console.log(\"after\");\n}\n"
    violations = analyze(content)
    assert len(violations) == 1
    violation = violations[0]
    assert violation.line == 3
    assert violation.severity == Severity.HIGH
    assert violation.details == {"termination_type": "return", "termination_line": 2}
    assert violation.content == 'console.log("after");'


def test_identifier_starting_with_return_is_not_a_terminator():
    content = "function f() {\n  const returnValue = compute();\n  use(returnValue);\n}\n"
    assert analyze(content) == []
    assert analyze("fn f() -> i32 {\n    let returned = g();\n    returned\n}\n", "lib.rs") == []


def test_one_line_guard_keeps_following_code_reachable():
    assert analyze("function f(x) {\n  if (x) return;\n  doMore();\n}\n") == []


def test_else_branch_is_not_dead():
    content = "function f(x) {\n  if (x) {\n    return 1;\n  } else {\n    return 2;\n  }\n}\n"
    assert analyze(content) == []


def test_catch_and_finally_are_not_dead():
    content = (
        "function f() {\n  try {\n    throw new Error('x');\n  } catch (e) {\n    log(e);\n"
        "  } finally {\n    done();\n  }\n}\n"
    )
    assert analyze(content) == []


def test_switch_cases_are_not_dead():
    content = "switch (x) {\n  case 1:\n    go();\n    break;\n  case 2:\n    stop();\n    break;\n  default:\n    idle();\n}\n"
    assert analyze(content) == []


def test_closing_brace_then_code_at_outer_level():
    content = "function f(x) {\n  if (x) {\n    return 1;\n  }\n  return 2;\n}\n"
    assert analyze(content) == []


def test_multi_line_throw_is_skipped_as_a_whole():
    content = "function f() {\n  throw new Error(\n    \"bad\"\n  );\n  cleanup();\n}\n"
    violations = analyze(content)
    assert [v.line for v in violations] == [5]
    assert violations[0].details["termination_line"] == 4


def test_only_first_dead_line_is_reported():
    content = "function f() {\n  return;\n  a();\n  b();\n  c();\n}\n"
    assert [v.line for v in analyze(content)] == [3]


def test_comments_after_terminator_are_skipped():
    content = "function f() {\n  return 1;\n  // explanation\n}\n"
    assert analyze(content) == []


def test_python_indentation_scope():
    content = "def f(x):\n    if x:\n        return 1\n    return 2\n\n\ndef g():\n    raise ValueError()\n    cleanup()\n"
    violations = analyze(content, "mod.py")
    assert [v.line for v in violations] == [9]
    assert violations[0].details["termination_type"] == "raise"


def test_python_one_line_guard():
    assert analyze("def f(x):\n    if x: return 1\n    return 2\n", "mod.py") == []


def test_python_except_branch():
    content = "try:\n    return run()\nexcept ValueError:\n    pass\n"
    assert analyze(content, "mod.py") == []


def test_go_panic():
    content = "func f() {\n\tpanic(\"boom\")\n\tcleanup()\n}\n"
    violations = analyze(content, "main.go")
    assert [v.line for v in violations] == [3]
    assert violations[0].details["termination_type"] == "panic"


def test_long_dead_line_is_truncated():
    content = "function f() {\n  return;\n  " + "x" * 80 + "();\n}\n"
    violation = analyze(content)[0]
    assert violation.content == "x" * 50 + "..."


def test_bracket_balance():
    assert bracket_balance("foo({") == 2
    assert bracket_balance("})") == -2
    assert bracket_balance("a[0]") == 0
