"""Version-control history access."""

import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from git import Repo
from git.exc import GitError, InvalidGitRepositoryError, NoSuchPathError

from .errors import HistoryUnavailableError


logger = logging.getLogger(__name__)

COMMIT_HEADER = "COMMIT:"


class HistorySource(ABC):
    """Supplies the changed files of recent commits."""

    @abstractmethod
    def log(self, root: str, commit_limit: int) -> str:
        """Raw log text: a `COMMIT:<hash>` line, then one changed path per line.

        Raises HistoryUnavailableError when the history cannot be read.
        """
        raise NotImplementedError


class BlameSource(ABC):
    """Supplies the date each line of a file was last changed."""

    @abstractmethod
    def line_dates(self, root: str, path: str) -> Optional[dict[int, datetime]]:
        """1-indexed line number to commit date, or None if unknown."""
        raise NotImplementedError


def _open_repo(root: str) -> Repo:
    try:
        return Repo(root, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise HistoryUnavailableError(f"Not a git repository: {root}") from e
    except (GitError, OSError) as e:
        raise HistoryUnavailableError(f"Cannot open git repository {root}: {e}") from e


class GitHistory(HistorySource):
    """History read from a local git repository."""

    def log(self, root: str, commit_limit: int) -> str:
        repo = _open_repo(root)
        try:
            return repo.git.log("--name-only", f"--pretty=format:{COMMIT_HEADER}%H", "-n", str(commit_limit))
        except (GitError, OSError) as e:
            raise HistoryUnavailableError(f"git log failed: {e}") from e


class GitBlame(BlameSource):
    """Per-line dates from `git blame`."""

    def __init__(self):
        self._repos: dict[str, Optional[Repo]] = {}

    def _repo(self, root: str) -> Optional[Repo]:
        if root not in self._repos:
            try:
                self._repos[root] = _open_repo(root)
            except HistoryUnavailableError as e:
                logger.debug("%s", e)
                self._repos[root] = None
        return self._repos[root]

    def line_dates(self, root: str, path: str) -> Optional[dict[int, datetime]]:
        repo = self._repo(root)
        if repo is None:
            return None
        relative = os.path.relpath(os.path.join(root, path), repo.working_tree_dir)
        try:
            blame = repo.blame("HEAD", relative)
        except (GitError, OSError, ValueError) as e:
            logger.debug("No blame for %s: %s", path, e)
            return None

        dates: dict[int, datetime] = {}
        line = 1
        for commit, lines in blame:
            for _ in lines:
                dates[line] = commit.committed_datetime
                line += 1
        return dates


def parse_log(text: str) -> list[tuple[str, list[str]]]:
    """Split raw log text into (commit hash, changed paths) pairs."""
    commits: list[tuple[str, list[str]]] = []
    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue
        if line.startswith(COMMIT_HEADER):
            commits.append((line[len(COMMIT_HEADER):], []))
        elif commits:
            commits[-1][1].append(line)
    return commits
