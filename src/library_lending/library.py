"""
Library wiring.

A ``Library`` is one registry and one ledger built from the same settings.
Callers such as the console shell hold a Library and talk to its two
components directly.
"""

import logging

from .config import LibrarySettings, get_config
from .ledger import LendingLedger
from .registry import ItemRegistry
from .seed import starter_items

logger = logging.getLogger(__name__)


class Library:
    """Registry and ledger configured from ``LibrarySettings``."""

    def __init__(self, settings: LibrarySettings | None = None):
        self.settings = settings or get_config()
        self.registry = ItemRegistry(duplicate_policy=self.settings.duplicate_identifiers)
        self.ledger = LendingLedger(
            self.registry,
            return_policy=self.settings.return_policy,
            duplicate_members=self.settings.duplicate_members,
        )
        if self.settings.seed_catalog:
            self.load_starter_catalog()

    @property
    def name(self) -> str:
        return self.settings.library_name

    def load_starter_catalog(self) -> int:
        """Add the starter items, returning how many were added."""
        added = sum(1 for item in starter_items() if self.registry.add(item).ok)
        logger.info("Loaded %d starter items into %s", added, self.name)
        return added
