"""Test configuration and fixtures for the library lending core.

Every test gets:
1. Isolated settings - no LIBRARY_LENDING_* variables leak in
2. A fresh registry and ledger per test
3. Automatic reset of the settings singleton
"""

import os
from collections.abc import Generator

import pytest

from library_lending.config import DuplicatePolicy, LibrarySettings, ReturnPolicy, reset_config
from library_lending.ledger import LendingLedger
from library_lending.models import AudioBook, Book, EBook, Magazine
from library_lending.registry import ItemRegistry

# === Environment Fixtures ===


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Provide an environment without LIBRARY_LENDING_* variables."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("LIBRARY_LENDING_"):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)


# === Configuration Fixtures ===


@pytest.fixture
def test_config(clean_env, tmp_path, monkeypatch) -> Generator[LibrarySettings, None, None]:
    """Settings with an empty catalog, independent of any local .env file."""
    monkeypatch.chdir(tmp_path)
    reset_config()

    config = LibrarySettings(
        library_name="test-library",
        seed_catalog=False,
        log_level="DEBUG",
    )

    yield config

    reset_config()


# === Core Fixtures ===


@pytest.fixture
def registry() -> ItemRegistry:
    """Registry holding one item of each kind, identifiers 1 to 4."""
    registry = ItemRegistry()
    registry.add(Book(title="1984", creator="George Orwell"))
    registry.add(EBook(title="The Lord of the Rings", creator="J. R. R. Tolkien", file_size_mb=500))
    registry.add(AudioBook(title="Dune", creator="Frank Herbert", duration_minutes=1260))
    registry.add(Magazine(title="National Geographic", creator="Nathan Lump", issue_number=7))
    return registry


@pytest.fixture
def ledger(registry) -> LendingLedger:
    """Explicit-return ledger with Alice and Bob registered."""
    ledger = LendingLedger(registry, return_policy=ReturnPolicy.EXPLICIT)
    ledger.register_member("Alice")
    ledger.register_member("Bob")
    return ledger


@pytest.fixture
def fifo_ledger(registry) -> LendingLedger:
    """Oldest-first ledger with Alice registered."""
    ledger = LendingLedger(registry, return_policy=ReturnPolicy.OLDEST_FIRST)
    ledger.register_member("Alice")
    return ledger


@pytest.fixture
def strict_registry() -> ItemRegistry:
    """Empty registry that rejects duplicate identifiers."""
    return ItemRegistry(duplicate_policy=DuplicatePolicy.REJECT)


# === Utility Functions ===


def assert_lending_invariant(ledger: LendingLedger) -> None:
    """Each item is unavailable exactly when one member holds it."""
    for identifier, item in ledger.registry.list_all():
        holders = [m.name for m in ledger.members() if m.holds(identifier)]
        if item.is_available:
            assert holders == [], f"{item.title} is available but held by {holders}"
        else:
            assert len(holders) == 1, f"{item.title} is out but held by {holders}"


# === Cleanup Fixtures ===


@pytest.fixture(autouse=True)
def cleanup_after_test():
    """Reset the settings singleton after each test."""
    yield
    reset_config()
