import posixpath
from datetime import datetime
from typing import Optional

import pytest

from deslop.errors import HistoryUnavailableError
from deslop.fs import DirEntry, FileStat, FileSystem
from deslop.history import BlameSource, HistorySource


ROOT = "/repo"


class MemoryFileSystem(FileSystem):
    """A repository held in a dict of relative path to content."""

    def __init__(self, files: Optional[dict[str, str]] = None, root: str = ROOT, unreadable: tuple = ()):
        self.root = root
        self.files = {posixpath.join(root, path): content for path, content in (files or {}).items()}
        self.unreadable = {posixpath.join(root, path) for path in unreadable}
        self.dirs = {root}
        for path in list(self.files) + list(self.unreadable):
            parent = posixpath.dirname(path)
            while parent.startswith(root) and parent not in self.dirs:
                self.dirs.add(parent)
                parent = posixpath.dirname(parent)

    def join(self, *parts: str) -> str:
        return posixpath.join(*parts)

    def list_dir(self, path: str) -> list[DirEntry]:
        path = path.rstrip("/")
        if path not in self.dirs:
            raise FileNotFoundError(path)
        names: dict[str, bool] = {}
        for candidate in list(self.files) + list(self.unreadable) + list(self.dirs):
            if posixpath.dirname(candidate) == path and candidate != path:
                names[posixpath.basename(candidate)] = candidate in self.dirs
        return [DirEntry(name=name, is_dir=is_dir, is_file=not is_dir) for name, is_dir in names.items()]

    def read_text(self, path: str) -> str:
        if path in self.unreadable:
            raise PermissionError(path)
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def stat(self, path: str) -> Optional[FileStat]:
        path = path.rstrip("/")
        if path in self.dirs:
            return FileStat(is_dir=True, is_file=False)
        if path in self.files:
            return FileStat(is_dir=False, is_file=True, size=len(self.files[path]))
        if path in self.unreadable:
            return FileStat(is_dir=False, is_file=True)
        return None


class FakeHistory(HistorySource):
    """Serves a fixed list of commits, or fails like a missing repository."""

    def __init__(self, commits: Optional[list[list[str]]] = None, error: Optional[str] = None):
        self.commits = commits or []
        self.error = error
        self.limits: list[int] = []

    def log(self, root: str, commit_limit: int) -> str:
        self.limits.append(commit_limit)
        if self.error is not None:
            raise HistoryUnavailableError(self.error)
        blocks = []
        for index, files in enumerate(self.commits[:commit_limit]):
            blocks.append("\n".join([f"COMMIT:{index:040x}"] + files))
        return "\n\n".join(blocks)


class FakeBlame(BlameSource):
    def __init__(self, dates: Optional[dict[int, datetime]] = None):
        self.dates = dates

    def line_dates(self, root: str, path: str) -> Optional[dict[int, datetime]]:
        return self.dates


@pytest.fixture
def make_fs():
    return MemoryFileSystem


@pytest.fixture
def make_history():
    return FakeHistory
