"""Classify files by language and role."""

import re
from pathlib import PurePosixPath
from typing import Optional


# Language tag to source extensions
SOURCE_EXTENSIONS = {
    "javascript": (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"),
    "rust": (".rs",),
    "go": (".go",),
    "python": (".py",),
    "java": (".java",),
}

EXTENSION_LANGUAGES = {
    extension: language
    for language, extensions in SOURCE_EXTENSIONS.items()
    for extension in extensions
}

ALL_SOURCE_EXTENSIONS = frozenset(EXTENSION_LANGUAGES)

# Build output, dependencies and VCS metadata
EXCLUDE_DIRS = frozenset({
    "node_modules", "vendor", "dist", "build", "out", "target",
    ".git", ".svn", ".hg", "__pycache__", ".pytest_cache",
    "coverage", ".nyc_output", ".next", ".nuxt", ".cache",
})

TEST_FILE_PATTERNS = (
    re.compile(r"\.test\.[jt]sx?$"),
    re.compile(r"\.spec\.[jt]sx?$"),
    re.compile(r"_tests?\.(go|rs|py)$"),
    re.compile(r"test_.*\.py$"),
    re.compile(r"__tests__"),
    re.compile(r"tests?/", re.IGNORECASE),
)

_SEPARATORS = re.compile(r"[\\/]")


def get_extension(path: str) -> str:
    return PurePosixPath(path.replace("\\", "/")).suffix


def detect_language(path: str, default: Optional[str] = None) -> Optional[str]:
    """Language tag for a source path, or `default` when unrecognized."""
    return EXTENSION_LANGUAGES.get(get_extension(path), default)


def is_source_file(path: str) -> bool:
    return get_extension(path) in ALL_SOURCE_EXTENSIONS


def is_test_file(path: str) -> bool:
    normalized = path.replace("\\", "/")
    return any(pattern.search(normalized) for pattern in TEST_FILE_PATTERNS)


def should_exclude(path: str, exclude_dirs: frozenset[str] = EXCLUDE_DIRS) -> bool:
    """True if any component of the path is a denylisted directory."""
    return any(part in exclude_dirs for part in _SEPARATORS.split(path))
