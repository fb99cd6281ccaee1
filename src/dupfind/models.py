"""Grouped scan results and summary statistics."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field

import pathlib


@dataclass
class SizeGroup:
    """Files sharing one byte length, in discovery order."""

    paths: list[pathlib.Path]


@dataclass
class ChecksumGroup:
    """Files of one byte length, split by SHA256 hex digest."""

    buckets: dict[str, list[pathlib.Path]] = field(default_factory=dict)


DuplicateGroup = SizeGroup | ChecksumGroup


@dataclass
class ScanError:
    """A path left out of the results because it could not be read."""

    path: pathlib.Path | None
    error: OSError
    phase: str  # "listing" or "reading"

    def __str__(self) -> str:
        where = self.path if self.path is not None else "<unknown entry>"
        return f"{where}: {self.error.strerror or self.error}"


@dataclass
class Summary:
    """Aggregate counters over all groups."""

    files: int = 0
    candidates: int = 0
    bytes: int = 0
    errors: int = 0

    @property
    def unique(self) -> int:
        return self.files - self.candidates


def path_lists(group: DuplicateGroup) -> list[list[pathlib.Path]]:
    """Return the member lists of *group*, one per set of identical files."""
    match group:
        case SizeGroup(paths=paths):
            return [paths]
        case ChecksumGroup(buckets=buckets):
            return list(buckets.values())
    raise TypeError(f"not a duplicate group: {group!r}")


@dataclass(frozen=True)
class Duplicates:
    """Final mapping from file size to group, read-only once built."""

    groups: dict[int, DuplicateGroup] = field(default_factory=dict)
    errors: list[ScanError] = field(default_factory=list)

    def path_lists(self) -> Iterator[tuple[int, list[pathlib.Path]]]:
        """Yield (size, members) for every group, flattening checksum buckets."""
        for size, group in self.groups.items():
            for paths in path_lists(group):
                yield size, paths

    def summarize(self) -> Summary:
        summary = Summary(errors=len(self.errors))
        for size, paths in self.path_lists():
            n = len(paths)
            summary.files += n
            summary.candidates += n - 1
            summary.bytes += size * (n - 1)
        return summary

    def sorted_groups(self, duplicates_only: bool = False) -> list[list[pathlib.Path]]:
        """Member lists ordered by the smallest path in each list.

        The order inside each list is left untouched: the first path is the
        one to keep, the rest are its duplicates.
        """
        lists = [
            paths for _, paths in self.path_lists()
            if paths and (len(paths) > 1 or not duplicates_only)
        ]
        return sorted(lists, key=min)

    def duplicate_groups(self) -> list[list[pathlib.Path]]:
        return self.sorted_groups(duplicates_only=True)
