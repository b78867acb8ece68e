"""Read-only directory enumeration used by tab completion.

``Filesystem`` is what the completion engine needs from the file system:
the current directory and a glob enumeration of one directory.
``LocalFilesystem`` presents a host directory as the monitor's volume, with
FAT-style case-insensitive pattern matching.
"""

from __future__ import annotations

import fnmatch
import os
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Protocol

from mos.editline.strings import ascii_upper


@dataclass(frozen=True)
class DirEntry:
    """A file or directory returned by a glob enumeration."""

    name: str
    is_directory: bool


class Filesystem(Protocol):
    """Glob enumeration over the monitor's volume."""

    @property
    def cwd(self) -> str: ...

    def find(self, directory: str, pattern: str) -> Iterator[DirEntry]:
        """Yield entries of *directory* whose names match *pattern*.

        An empty *directory* means the current directory.
        """
        ...


class LocalFilesystem:
    """A host directory tree mounted as the monitor's root volume."""

    def __init__(self, root: str | os.PathLike[str], cwd: str = "/") -> None:
        self._root = Path(root).resolve()
        self._cwd = "/"
        self.chdir(cwd)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def cwd(self) -> str:
        return self._cwd

    def resolve(self, path: str) -> str:
        """Normalise *path* against the current directory to a volume path."""
        joined = posixpath.join(self._cwd, path.replace("\\", "/"))
        normalised = posixpath.normpath(joined)
        # normpath keeps a leading "//"; the volume has a single root.
        return "/" + normalised.lstrip("/")

    def host_path(self, path: str) -> Path:
        volume_path = self.resolve(path)
        return self._root.joinpath(*[part for part in volume_path.split("/") if part])

    def chdir(self, path: str) -> None:
        target = self.resolve(path)
        if not self.host_path(target).is_dir():
            raise NotADirectoryError(f"Could not find path: {path}")
        self._cwd = target

    def find(self, directory: str, pattern: str) -> Iterator[DirEntry]:
        host_dir = self.host_path(directory)
        upper_pattern = ascii_upper(pattern)
        try:
            with os.scandir(host_dir) as it:
                entries = sorted(it, key=lambda e: ascii_upper(e.name))
        except OSError:
            return
        for entry in entries:
            if not fnmatch.fnmatchcase(ascii_upper(entry.name), upper_pattern):
                continue
            try:
                is_directory = entry.is_dir()
            except OSError:
                # Broken symlink or permission error - treat as file
                is_directory = False
            yield DirEntry(name=entry.name, is_directory=is_directory)
