"""Source file enumeration over a repository tree."""

import logging
from collections.abc import Callable, Iterator
from typing import Optional

from pathspec import PathSpec

from .file_classifier import ALL_SOURCE_EXTENSIONS, get_extension, is_test_file, should_exclude
from .fs import FileSystem, LocalFileSystem


logger = logging.getLogger(__name__)

MAX_WALK_DEPTH = 10
MAX_DEPTH_PROBE = 20
DEFAULT_MAX_FILES = 10000


def load_gitignore(fs: FileSystem, root: str) -> Optional[PathSpec]:
    """Compile the repository's top-level .gitignore, if there is one."""
    path = fs.join(root, ".gitignore")
    if not fs.is_file(path):
        return None
    try:
        content = fs.read_text(path)
    except OSError as e:
        logger.debug("Cannot read %s: %s", path, e)
        return None
    return PathSpec.from_lines("gitwildmatch", content.splitlines())


class RepoWalker:
    """Walk a repository, honoring the directory denylist and .gitignore."""

    def __init__(
        self,
        root: str,
        fs: Optional[FileSystem] = None,
        respect_gitignore: bool = True,
        max_depth: int = MAX_WALK_DEPTH,
    ):
        self.root = root
        self.fs = fs or LocalFileSystem()
        self.max_depth = max_depth
        self.ignore = load_gitignore(self.fs, root) if respect_gitignore else None
        self.skipped = 0

    def is_ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        if self.ignore is None:
            return False
        return self.ignore.match_file(rel_path + "/" if is_dir else rel_path)

    def iter_files(
        self,
        include_tests: bool = False,
        max_files: int = DEFAULT_MAX_FILES,
        extensions: frozenset[str] = ALL_SOURCE_EXTENSIONS,
        under: str = "",
        accept: Optional[Callable[[str], bool]] = None,
    ) -> Iterator[str]:
        """Yield relative POSIX paths of source files in walk order.

        Paths are relative to `under` when it is given, so a walk of `src`
        yields `pkg/mod.py` rather than `src/pkg/mod.py`. An `accept`
        predicate replaces the extension and test-file filters.
        """
        yielded = 0
        # Depth-first, entries sorted so results are stable
        stack: list[tuple[str, int]] = [(under, 0)]
        while stack:
            rel_dir, depth = stack.pop()
            if depth > self.max_depth:
                continue

            directory = self.fs.join(self.root, rel_dir) if rel_dir else self.root
            try:
                entries = sorted(self.fs.list_dir(directory), key=lambda entry: entry.name)
            except OSError as e:
                logger.debug("Skipping unreadable directory %s: %s", directory, e)
                self.skipped += 1
                continue

            subdirs = []
            for entry in entries:
                rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
                if should_exclude(rel_path) or self.is_ignored(rel_path, entry.is_dir):
                    continue

                if entry.is_dir:
                    subdirs.append((rel_path, depth + 1))
                    continue
                if not entry.is_file:
                    continue

                relative = rel_path[len(under) + 1:] if under else rel_path
                if accept is not None:
                    if not accept(relative):
                        continue
                elif get_extension(entry.name) not in extensions:
                    continue
                elif not include_tests and is_test_file(relative):
                    continue

                yield relative
                yielded += 1
                if yielded >= max_files:
                    return

            stack.extend(reversed(subdirs))

    def max_directory_depth(self, start_dir: str = "src") -> int:
        """Deepest directory nesting under `start_dir`, counting it as 1; 0 if absent."""
        if not self.fs.is_dir(self.fs.join(self.root, start_dir)):
            return 0

        deepest = 0
        stack = [(start_dir, 1)]
        while stack:
            rel_dir, depth = stack.pop()
            deepest = max(deepest, depth)
            if depth > MAX_DEPTH_PROBE:
                continue
            try:
                entries = self.fs.list_dir(self.fs.join(self.root, rel_dir))
            except OSError as e:
                logger.debug("Skipping unreadable directory %s: %s", rel_dir, e)
                continue
            for entry in entries:
                if entry.is_dir and not should_exclude(entry.name):
                    stack.append((f"{rel_dir}/{entry.name}", depth + 1))
        return deepest

    def read(self, rel_path: str) -> Optional[str]:
        """Content of a file, or None (counted as skipped) if it cannot be read."""
        try:
            return self.fs.read_text(self.fs.join(self.root, rel_path))
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping unreadable file %s: %s", rel_path, e)
            self.skipped += 1
            return None
