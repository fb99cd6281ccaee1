"""Rendering of scan results for people and for scripts."""

from __future__ import annotations

from collections.abc import Iterator
from dupfind.models import Duplicates
from dupfind.models import Summary


def format_size(size_bytes: int) -> str:
    """Format bytes as human-readable string."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 ** 2:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 ** 3:
        return f"{size_bytes / (1024 ** 2):.1f} MB"
    else:
        return f"{size_bytes / (1024 ** 3):.1f} GB"


def human_lines(duplicates: Duplicates) -> Iterator[str]:
    """Kept path flush left, its duplicates indented below it."""
    for paths in duplicates.duplicate_groups():
        yield str(paths[0])
        for p in paths[1:]:
            yield f"    {p}"


def machine_lines(duplicates: Duplicates) -> Iterator[str]:
    """One duplicate path per line; the kept path of each group is omitted."""
    for paths in duplicates.duplicate_groups():
        for p in paths[1:]:
            yield str(p)


def summary_line(summary: Summary) -> str:
    line = (
        f"Unique files: {summary.unique}. "
        f"{summary.candidates} files waste {summary.bytes} bytes ({format_size(summary.bytes)})."
    )
    if summary.errors:
        line += f" {summary.errors} path(s) could not be read."
    return line
