"""
Library Lending package.

An in-memory library catalog with borrow/return bookkeeping.

Key Components:
- models: Pydantic models for items, members and operation outcomes
- config: Settings management with pydantic-settings
- registry: ItemRegistry, the owning collection of items
- ledger: LendingLedger, the borrow/return state machine
- library: wiring of a registry and ledger from settings
- cli: interactive console shell
"""

__version__ = "0.1.0"

from .config import DuplicatePolicy, LibrarySettings, ReturnPolicy
from .ledger import LendingError, LendingLedger, LendingPolicyError
from .library import Library
from .registry import ItemRegistry

__all__ = [
    "DuplicatePolicy",
    "ItemRegistry",
    "LendingError",
    "LendingLedger",
    "LendingPolicyError",
    "Library",
    "LibrarySettings",
    "ReturnPolicy",
    "__version__",
]
