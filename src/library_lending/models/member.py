"""
Member model.

A member is a library patron identified by name. The ledger records which
items a member currently holds as an ordered list of item identifiers,
oldest borrow first, so the same model serves both return policies.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .item import ItemId


class Member(BaseModel):
    """
    Represents a library member who can borrow items.

    Holdings are only changed by the lending ledger.
    """

    name: str = Field(
        ...,
        description="Full name of the member, used as the member key",
        min_length=1,
        max_length=200,
        examples=["Alice Smith", "Bob"],
    )

    held_items: list[ItemId] = Field(
        default_factory=list,
        description="Identifiers of items currently held, oldest first",
    )

    registered_at: datetime = Field(
        default_factory=datetime.now,
        description="Timestamp when the member was registered",
    )

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="forbid",
    )

    @property
    def holding_count(self) -> int:
        return len(self.held_items)

    def holds(self, identifier: ItemId) -> bool:
        return identifier in self.held_items

    def add_holding(self, identifier: ItemId) -> None:
        self.held_items.append(identifier)

    def remove_holding(self, identifier: ItemId) -> bool:
        """Remove an identifier from any position. Returns False if absent."""
        if identifier not in self.held_items:
            return False
        self.held_items.remove(identifier)
        return True

    def pop_oldest(self) -> ItemId | None:
        """Remove and return the identifier borrowed first, or None."""
        if not self.held_items:
            return None
        return self.held_items.pop(0)
