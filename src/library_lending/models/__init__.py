"""
Library lending models.

Pydantic models for the entities of the lending core:
- Item variants: Book, EBook, AudioBook, Magazine
- Member: a patron and the items they hold
- Outcome: the non-exceptional result of a registry or ledger operation
"""

from .item import ITEM_KINDS, AudioBook, Book, EBook, Item, ItemBase, ItemId, Magazine, parse_item
from .member import Member
from .outcome import Outcome, OutcomeStatus

__all__ = [
    "ITEM_KINDS",
    "AudioBook",
    "Book",
    "EBook",
    "Item",
    "ItemBase",
    "ItemId",
    "Magazine",
    "Member",
    "Outcome",
    "OutcomeStatus",
    "parse_item",
]
