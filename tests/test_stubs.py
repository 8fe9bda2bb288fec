import pytest

from deslop.detectors.stubs import StubFunctionDetector
from deslop.models import Certainty, Severity


def analyze(content, file_path="file.js"):
    return StubFunctionDetector().analyze(content, file_path)


class TestBraceLanguages:
    def test_placeholder_return(self):
        violations = analyze("function getUser(id) {\n  return null;\n}\n")
        assert len(violations) == 1
        violation = violations[0]
        assert violation.line == 1
        assert violation.severity == Severity.MEDIUM
        assert violation.certainty == Certainty.MEDIUM
        assert violation.details == {"function_name": "getUser", "return_value": "null", "has_todo": False}
        assert violation.message.endswith("getUser() returns null")

    def test_todo_marker_raises_certainty(self):
        violations = analyze("function getUser(id) {\n  // TODO: implement\n  return null;\n}\n")
        assert len(violations) == 1
        assert violations[0].certainty == Certainty.HIGH
        assert violations[0].severity == Severity.HIGH

    def test_real_body_is_not_a_stub(self):
        assert analyze("function total(items) {\n  const sum = add(items);\n  return 0;\n}\n") == []

    def test_meaningful_return_is_not_a_stub(self):
        assert analyze("function total(items) {\n  return items.length;\n}\n") == []

    @pytest.mark.parametrize("file_path,content,name,value", [
        ("lib.rs", "fn load() -> Config {\n    todo!()\n}\n", "load", "todo!()"),
        ("lib.rs", "pub fn items() -> Vec<u8> {\n    Vec::new()\n}\n", "items", "Vec::new()"),
        (
            "Store.java",
            "public String name() {\n    throw new UnsupportedOperationException();\n}\n",
            "name",
            "throw stub",
        ),
        ("server.go", "func (s *Server) Start() error {\n\treturn nil\n}\n", "Start", "nil"),
        ("server.go", "func Stop() {\n\tpanic(\"todo\")\n}\n", "Stop", "panic"),
    ])
    def test_language_grammars(self, file_path, content, name, value):
        violations = analyze(content, file_path)
        assert [(v.details["function_name"], v.details["return_value"]) for v in violations] == [(name, value)]


class TestPython:
    def test_pass_only(self):
        violations = analyze("def fetch():\n    pass\n", "api.py")
        assert len(violations) == 1
        assert violations[0].line == 1
        assert violations[0].content == "def fetch(): pass"

    def test_docstring_is_not_a_statement(self):
        violations = analyze('def fetch():\n    """Fetch it."""\n    return None\n', "api.py")
        assert [v.details["return_value"] for v in violations] == ["None"]

    def test_todo_comment_is_high_certainty(self):
        content = "def fetch():\n    # TODO: wire up\n    raise NotImplementedError()\n"
        violations = analyze(content, "api.py")
        assert len(violations) == 1
        assert violations[0].certainty == Certainty.HIGH

    def test_abstract_methods_are_skipped(self):
        content = "class Base:\n    @abstractmethod\n    def fetch(self):\n        ...\n"
        assert analyze(content, "api.py") == []

    def test_overloads_are_skipped(self):
        content = "@overload\ndef parse(x: int) -> int:\n    ...\n"
        assert analyze(content, "api.py") == []

    def test_real_function(self):
        assert analyze("def fetch(url):\n    response = get(url)\n    return response\n", "api.py") == []
