from deslop.detectors.ratios import (
    COMMENT_SYNTAX,
    DocCodeConfig,
    DocCodeRatioDetector,
    VerbosityConfig,
    VerbosityDetector,
    count_comment_lines,
)


def jsdoc_function(doc_lines: int, body_lines: int, name: str = "foo") -> str:
    doc = "\n".join(f" * Doc line {i + 1}" for i in range(doc_lines))
    body = "\n".join(f"  const v{i} = {i};" for i in range(body_lines))
    return f"/**\n{doc}\n */\nfunction {name}() {{\n{body}\n}}\n"


class TestDocCodeRatio:
    def test_ratio_within_limit_is_not_flagged(self):
        detector = DocCodeRatioDetector(DocCodeConfig(max_ratio=3.0))
        assert detector.analyze(jsdoc_function(6, 3)) == []

    def test_same_function_flagged_with_lower_limit(self):
        detector = DocCodeRatioDetector(DocCodeConfig(max_ratio=1.0))
        violations = detector.analyze(jsdoc_function(6, 3))
        assert len(violations) == 1
        details = violations[0].details
        assert details["doc_lines"] == 6
        assert details["code_lines"] == 3
        assert details["ratio"] == 2.0
        assert details["function_name"] == "foo"

    def test_short_bodies_are_never_flagged(self):
        detector = DocCodeRatioDetector(DocCodeConfig(max_ratio=0.1, min_function_lines=3))
        assert detector.analyze(jsdoc_function(20, 2)) == []

    def test_twelve_doc_lines_over_three_line_body(self):
        content = "const x = 1;\n\n" + jsdoc_function(12, 3, name="tiny")
        violations = DocCodeRatioDetector().analyze(content, "src/tiny.js")

        assert len(violations) == 1
        violation = violations[0]
        assert violation.details["ratio"] == 4.0
        assert violation.line == 3
        assert violation.file == "src/tiny.js"
        assert violation.rule_id == "doc_code_ratio_js"
        assert violation.content == "tiny()"
        assert "(12 doc lines / 3 code lines = 4.0x)" in violation.message

    def test_arrow_function(self):
        doc = "\n".join(f" * line {i}" for i in range(10))
        content = f"/**\n{doc}\n */\nconst handler = async (req) => {{\n  a();\n  b();\n  c();\n}};\n"
        violations = DocCodeRatioDetector().analyze(content, "handler.ts")
        assert [v.details["function_name"] for v in violations] == ["handler"]

    def test_rust_doc_comments(self):
        doc = "\n".join(f"/// line {i}" for i in range(10))
        content = f"{doc}\npub fn compute(x: u32) -> u32 {{\n    let a = x;\n    let b = a;\n    b\n}}\n"
        violations = DocCodeRatioDetector().analyze(content, "src/lib.rs")
        assert len(violations) == 1
        assert violations[0].details["doc_lines"] == 10
        assert violations[0].details["code_lines"] == 3

    def test_python_docstring(self):
        doc = "\n".join(f"    Line {i}." for i in range(12))
        content = f'def compute(x):\n    """\n{doc}\n    """\n    a = x\n    b = a\n    return b\n'
        violations = DocCodeRatioDetector().analyze(content, "pkg/compute.py")
        assert len(violations) == 1
        assert violations[0].line == 1
        assert violations[0].details["doc_lines"] == 14
        assert violations[0].details["code_lines"] == 3

    def test_unknown_extension_falls_back_to_javascript(self):
        assert len(DocCodeRatioDetector().analyze(jsdoc_function(12, 3), "notes.txt")) == 1

    def test_empty_body_with_no_minimum(self):
        detector = DocCodeRatioDetector(DocCodeConfig(min_function_lines=0))
        assert detector.analyze(jsdoc_function(5, 0), "empty.js") == []


class TestVerbosityRatio:
    def test_comment_heavy_function(self):
        content = (
            "function run() {\n"
            "  // one\n  // two\n  // three\n  // four\n  // five\n  // six\n  // seven\n"
            "  a();\n  b();\n  c();\n"
            "}\n"
        )
        violations = VerbosityDetector().analyze(content, "run.js")
        assert len(violations) == 1
        assert violations[0].details["comment_lines"] == 7
        assert violations[0].details["code_lines"] == 3
        assert violations[0].details["ratio"] == 2.33
        assert violations[0].line == 1

    def test_balanced_function(self):
        content = "function run() {\n  // one\n  a();\n  b();\n  c();\n}\n"
        assert VerbosityDetector().analyze(content, "run.js") == []

    def test_minimum_code_lines(self):
        content = "function run() {\n" + "  // note\n" * 10 + "  a();\n}\n"
        assert VerbosityDetector(VerbosityConfig(min_code_lines=3)).analyze(content, "run.js") == []

    def test_python_comments(self):
        content = "def run():\n" + "    # note\n" * 7 + "    a()\n    b()\n    c()\n\nx = 1\n"
        violations = VerbosityDetector().analyze(content, "run.py")
        assert len(violations) == 1
        assert violations[0].details["function_name"] == "run"

    def test_empty_body_with_no_minimum(self):
        content = "function run() {\n  // only a note\n}\n"
        assert VerbosityDetector(VerbosityConfig(min_code_lines=0)).analyze(content, "run.js") == []

    def test_python_docstring_is_not_inline_commentary(self):
        doc = "\n".join(f"    Line {i}." for i in range(8))
        content = f'def compute(x):\n    """\n{doc}\n    """\n    a = x\n    b = a\n    return b\n'
        assert VerbosityDetector().analyze(content, "pkg/compute.py") == []


def test_count_comment_lines_block_syntax():
    lines = ["/*", " * a", " */", "x();", "y(); // trailing"]
    assert count_comment_lines(lines, COMMENT_SYNTAX["javascript"]) == (3, 2)
