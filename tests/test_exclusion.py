import time

import pytest

from deslop.exclusion import MAX_GLOB_WILDCARDS, compile_glob, is_excluded


def test_empty_or_missing_patterns_never_exclude():
    assert not is_excluded("a.test.js", [])
    assert not is_excluded("a.test.js", None)
    assert not is_excluded("", [])


def test_star_matches_across_separators():
    assert is_excluded("a.test.js", ["*.test.*"])
    assert is_excluded("src/deep/a.test.js", ["*.test.*"])
    assert not is_excluded("src/a.js", ["*.test.*"])


def test_patterns_are_anchored():
    assert is_excluded("README.md", ["README.*"])
    assert not is_excluded("docs/README.md", ["README.*"])
    assert not is_excluded("cli.js.bak", ["cli.js"])
    assert is_excluded("cli.js", ["cli.js"])


@pytest.mark.parametrize("path,pattern,expected", [
    ("src/tests/helper.py", "**/tests/**", True),
    ("tests/helper.py", "**/tests/**", False),
    ("bin/run", "bin/*", True),
    ("lib/bin/run", "bin/*", False),
    ("test_api.py", "test_*.py", True),
    ("src\\a.spec.ts", "*.spec.*", True),
])
def test_glob_shapes(path, pattern, expected):
    assert is_excluded(path, [pattern]) is expected


def test_regex_characters_are_literal():
    assert is_excluded("a+b.js", ["a+b.js"])
    assert not is_excluded("aab.js", ["a+b.js"])
    assert not is_excluded("aXjs", ["a.js"])


def test_pattern_over_wildcard_cap_never_matches():
    pattern = "*a" * (MAX_GLOB_WILDCARDS + 1)
    assert compile_glob(pattern).never_matches
    assert not is_excluded("a" * 50, [pattern])


def test_pattern_at_wildcard_cap_still_matches():
    pattern = "*a" * MAX_GLOB_WILDCARDS
    assert is_excluded("a" * 20, [pattern])


def test_compiled_matchers_are_memoized():
    assert compile_glob("*.md") is compile_glob("*.md")


def test_adversarial_input_is_fast():
    # Would take exponential time with a naively translated regex
    pattern = "*a*a*a*a*a*a*a*a*b"
    path = "a" * 5000
    start = time.perf_counter()
    assert not is_excluded(path, [pattern])
    assert time.perf_counter() - start < 1.0


def test_many_patterns_on_long_path_are_fast():
    path = "x/" * 2000 + "file.js"
    patterns = [f"*{i}*.js" for i in range(200)]
    start = time.perf_counter()
    assert not is_excluded(path, patterns)
    assert time.perf_counter() - start < 1.0
