"""Depth-first directory traversal with an explicit stack of listing cursors."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import logging
import os
import pathlib


logger = logging.getLogger(__name__)


@dataclass
class FileEntry:
    """A regular file found during traversal."""

    path: pathlib.Path
    length: int


@dataclass
class ErrorEntry:
    """A directory entry that could not be listed or inspected.

    ``path`` is None when the entry itself could not be read.
    """

    path: pathlib.Path | None
    error: OSError


Entry = FileEntry | ErrorEntry


class Walker:
    """Iterate over the regular files below *root*, pre-order.

    The root listing is opened immediately, so an unreadable root raises
    ``OSError`` from the constructor. Directories are descended before the
    remaining siblings are visited. Symlinks are never followed; they and
    other special files are skipped.
    """

    def __init__(self, root: pathlib.Path | str) -> None:
        self.root = pathlib.Path(root)
        self._stack: list[tuple[pathlib.Path, Iterator[os.DirEntry]]] = [
            (self.root, os.scandir(self.root)),
        ]

    def __iter__(self) -> Walker:
        return self

    def __next__(self) -> Entry:
        while self._stack:
            directory, cursor = self._stack[-1]
            try:
                dir_entry = next(cursor)
            except StopIteration:
                self._pop()
                continue
            except OSError as exc:
                # The cursor cannot be trusted to make progress after a failed read.
                logger.debug(f"reading {directory} failed: {exc}")
                self._pop()
                return ErrorEntry(path=None, error=exc)

            entry = self._classify(dir_entry)
            if entry is not None:
                return entry
        raise StopIteration

    def close(self) -> None:
        """Close every listing cursor that is still open."""
        while self._stack:
            self._pop()

    def _pop(self) -> None:
        _, cursor = self._stack.pop()
        cursor.close()

    def _classify(self, dir_entry: os.DirEntry) -> Entry | None:
        """Return an entry to emit, or None after descending or skipping."""
        path = pathlib.Path(dir_entry.path)
        try:
            if dir_entry.is_dir(follow_symlinks=False):
                try:
                    cursor = os.scandir(path)
                except OSError as exc:
                    return ErrorEntry(path=path, error=exc)
                self._stack.append((path, cursor))
                return None
            if dir_entry.is_file(follow_symlinks=False):
                length = dir_entry.stat(follow_symlinks=False).st_size
                return FileEntry(path=path, length=length)
        except OSError as exc:
            return ErrorEntry(path=path, error=exc)
        return None
