"""Shared fixtures for dupfind tests."""

import pathlib

import pytest


@pytest.fixture
def tmp_source(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create an empty temporary source directory."""
    source = tmp_path / "source"
    source.mkdir()
    return source


@pytest.fixture
def scenario_a(tmp_source: pathlib.Path) -> pathlib.Path:
    """Two identical one-byte files and one different one."""
    (tmp_source / "a.txt").write_text("x")
    (tmp_source / "b.txt").write_text("x")
    (tmp_source / "c.txt").write_text("y")
    return tmp_source


@pytest.fixture
def deep_tree(tmp_source: pathlib.Path) -> pathlib.Path:
    """Duplicate files three directory levels below the root."""
    bottom = tmp_source / "one" / "two" / "three"
    bottom.mkdir(parents=True)
    (bottom / "first.bin").write_bytes(b"deep duplicate")
    (bottom / "second.bin").write_bytes(b"deep duplicate")
    return tmp_source
