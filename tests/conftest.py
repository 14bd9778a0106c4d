"""Shared fixtures for epigon tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from epigon.storage import FixtureStore, MemoryStore, UnionedCache

FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixture_dir() -> Path:
    """Static tree: root, root/child1, root/child2, root/child1/nest/{arm,leg}."""
    return FIXTURE_DIR


@pytest.fixture
def fixture_store(fixture_dir: Path) -> FixtureStore:
    return FixtureStore(fixture_dir)


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def store(fixture_dir: Path) -> UnionedCache:
    """Fresh unioned cache over the static fixture tree."""
    return UnionedCache.from_fixture_dir(fixture_dir)


@pytest.fixture
def root_bytes(fixture_dir: Path) -> bytes:
    return (fixture_dir / "root.json").read_bytes()


@pytest.fixture
def child1_bytes(fixture_dir: Path) -> bytes:
    return (fixture_dir / "root" / "child1.json").read_bytes()


@pytest.fixture
def child2_bytes(fixture_dir: Path) -> bytes:
    return (fixture_dir / "root" / "child2.json").read_bytes()
