"""
Operation outcomes.

Registry and ledger operations never raise for lending-rule violations.
They return an ``Outcome`` whose status names the condition, so the caller
can print a message and carry on.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .item import ItemBase
from .member import Member


class OutcomeStatus(str, Enum):
    """Result conditions reported by the registry and the ledger."""

    OK = "ok"
    ITEM_ALREADY_BORROWED = "item_already_borrowed"
    ITEM_NOT_FOUND = "item_not_found"
    ITEM_NOT_HELD_BY_MEMBER = "item_not_held_by_member"
    NO_ITEMS_HELD = "no_items_held"
    MEMBER_NOT_FOUND = "member_not_found"
    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    DUPLICATE_MEMBER = "duplicate_member"


class Outcome(BaseModel):
    """Result of a registry or ledger operation."""

    status: OutcomeStatus = Field(
        ...,
        description="Condition reached by the operation",
    )

    message: str = Field(
        "",
        description="Human-readable description for the caller to display",
    )

    item: ItemBase | None = Field(
        None,
        description="Item the operation acted on, when there is one",
    )

    member: Member | None = Field(
        None,
        description="Member the operation acted on, when there is one",
    )

    # Items and members are live objects owned by the registry and ledger
    model_config = ConfigDict(revalidate_instances="never")

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.OK

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, message: str, *, item=None, member=None) -> "Outcome":
        return cls(status=OutcomeStatus.OK, message=message, item=item, member=member)

    @classmethod
    def failure(
        cls, status: OutcomeStatus, message: str, *, item=None, member=None
    ) -> "Outcome":
        return cls(status=status, message=message, item=item, member=member)
