"""2-phase duplicate detection: file size grouping, then SHA256 hashing."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from dupfind.models import ChecksumGroup
from dupfind.models import DuplicateGroup
from dupfind.models import Duplicates
from dupfind.models import ScanError
from dupfind.models import SizeGroup
from dupfind.walker import Entry
from dupfind.walker import ErrorEntry
from dupfind.walker import FileEntry
from dupfind.walker import Walker
from functools import reduce
from tqdm import tqdm

import hashlib
import logging
import pathlib


logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 8192


@dataclass
class SizeIndex:
    """Accumulator for the size pass: paths by byte length, plus listing errors."""

    buckets: dict[int, list[pathlib.Path]] = field(default_factory=dict)
    errors: list[ScanError] = field(default_factory=list)


def hash_file(path: pathlib.Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Compute SHA256 hash of a file."""
    sha = hashlib.sha256()
    with path.open("rb") as f:
        while chunk := f.read(chunk_size):
            sha.update(chunk)
    return sha.hexdigest()


def add_entry(index: SizeIndex, entry: Entry) -> SizeIndex:
    """Fold one walker entry into *index* and return it."""
    match entry:
        case FileEntry(path=path, length=length):
            index.buckets.setdefault(length, []).append(path)
        case ErrorEntry(path=path, error=error):
            scan_error = ScanError(path=path, error=error, phase="listing")
            logger.warning(f"cannot list {scan_error}")
            index.errors.append(scan_error)
    return index


def group_by_size(entries: Iterable[Entry]) -> SizeIndex:
    """Phase 1: group files by size (cheap, no file content is read)."""
    return reduce(add_entry, entries, SizeIndex())


def refine_by_checksum(
    size: int,
    paths: list[pathlib.Path],
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> tuple[DuplicateGroup, list[ScanError]]:
    """Phase 2: split one size bucket by content hash.

    Single-member buckets are returned as a SizeGroup without reading the
    file. Members that cannot be read are left out of the result and
    reported as errors.
    """
    if len(paths) < 2:
        return SizeGroup(paths=paths), []

    logger.debug(f"hashing {len(paths)} files of size {size}")
    group = ChecksumGroup()
    errors: list[ScanError] = []
    for p in paths:
        try:
            h = hash_file(p, chunk_size)
        except OSError as exc:
            scan_error = ScanError(path=p, error=exc, phase="reading")
            logger.warning(f"cannot read {scan_error}")
            errors.append(scan_error)
            continue
        logger.debug(f"  {h[:12]}.. {p}")
        group.buckets.setdefault(h, []).append(p)
    return group, errors


def find_duplicates(
    root: pathlib.Path,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    progress: bool = False,
) -> Duplicates:
    """Scan *root* and group its files by size, then by content.

    Raises OSError if *root* cannot be listed.
    """
    walker = Walker(root)
    disable = None if progress else True
    try:
        index = group_by_size(tqdm(walker, desc="Scanning", unit=" files", disable=disable, leave=False))
    finally:
        walker.close()

    files = sum(len(g) for g in index.buckets.values())
    candidates = {s: g for s, g in index.buckets.items() if len(g) >= 2}
    files_to_hash = sum(len(g) for g in candidates.values())
    logger.debug(
        f"phase 1 (size grouping): {files} files -> "
        f"{len(index.buckets) - len(candidates)} unique by size, "
        f"{len(candidates)} size group(s) with {files_to_hash} files to hash"
    )

    groups: dict[int, DuplicateGroup] = {}
    errors = list(index.errors)
    for size, paths in tqdm(index.buckets.items(), desc="Hashing", unit=" sizes", disable=disable, leave=False):
        group, read_errors = refine_by_checksum(size, paths, chunk_size=chunk_size)
        groups[size] = group
        errors.extend(read_errors)

    result = Duplicates(groups=groups, errors=errors)
    summary = result.summarize()
    logger.debug(
        f"phase 2 (hashing): {summary.candidates} duplicate(s), "
        f"{summary.bytes} bytes reclaimable, {summary.errors} error(s)"
    )
    return result
