"""File-system access used by the repository-level analyzers.

Analyzers only talk to a `FileSystem`, so tests can hand them an in-memory
tree instead of the disk.
"""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import chardet


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirEntry:
    name: str
    is_dir: bool
    is_file: bool


@dataclass(frozen=True)
class FileStat:
    is_dir: bool
    is_file: bool
    size: int = 0


class FileSystem(ABC):
    """Read-only view of a directory tree."""

    @abstractmethod
    def list_dir(self, path: str) -> list[DirEntry]:
        """Entries of a directory; raises OSError if it cannot be listed."""
        raise NotImplementedError

    @abstractmethod
    def read_text(self, path: str) -> str:
        """Decoded file content; raises OSError if it cannot be read."""
        raise NotImplementedError

    @abstractmethod
    def stat(self, path: str) -> Optional[FileStat]:
        """File metadata, or None when nothing exists at the path."""
        raise NotImplementedError

    def join(self, *parts: str) -> str:
        return os.path.join(*parts)

    def is_dir(self, path: str) -> bool:
        info = self.stat(path)
        return info is not None and info.is_dir

    def is_file(self, path: str) -> bool:
        info = self.stat(path)
        return info is not None and info.is_file


class LocalFileSystem(FileSystem):
    """The real disk."""

    def list_dir(self, path: str) -> list[DirEntry]:
        with os.scandir(path) as entries:
            return [
                DirEntry(
                    name=entry.name,
                    is_dir=entry.is_dir(follow_symlinks=False),
                    is_file=entry.is_file(follow_symlinks=False),
                )
                for entry in entries
            ]

    def read_text(self, path: str) -> str:
        file_path = Path(path)
        raw = file_path.read_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            pass

        # Detect encoding
        detected = chardet.detect(raw)
        encoding = detected.get("encoding") or "utf-8"
        logger.debug("Decoding %s as %s", path, encoding)
        try:
            return raw.decode(encoding, errors="replace")
        except LookupError:
            return raw.decode("utf-8", errors="replace")

    def stat(self, path: str) -> Optional[FileStat]:
        try:
            info = os.stat(path)
        except OSError:
            return None
        file_path = Path(path)
        return FileStat(is_dir=file_path.is_dir(), is_file=file_path.is_file(), size=info.st_size)
