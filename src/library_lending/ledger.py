"""
Lending ledger for the library lending core.

The ledger owns members and the member-to-item edges, and enforces the item
state machine:

    Available --borrow--> Borrowed --return--> Available

Every rule violation (item already out, item not held, nothing to return,
unknown member or item) is reported as an ``Outcome``. Exceptions are kept
for programming errors, such as calling a return method that does not match
the ledger's configured ``ReturnPolicy``.

Return policies:
1. ``ReturnPolicy.EXPLICIT``: the member names the item; it is removed from
   any position in their holdings.
2. ``ReturnPolicy.OLDEST_FIRST``: the member gives back whatever they
   borrowed first.
"""

import logging

from .config import DuplicatePolicy, ReturnPolicy
from .models import ItemBase, ItemId, Member, Outcome, OutcomeStatus
from .registry import ItemRegistry

logger = logging.getLogger(__name__)


class LendingError(Exception):
    """Base exception for lending programming errors."""


class LendingPolicyError(LendingError):
    """Raised when a return method does not match the ledger's return policy."""


class LendingLedger:
    """
    Borrow/return bookkeeping between members and registry items.

    The registry is the source of truth for items; the ledger only stores
    identifiers in each member's holdings and flips item availability
    through ``ItemBase.check_out`` / ``ItemBase.check_in``.
    """

    def __init__(
        self,
        registry: ItemRegistry,
        return_policy: ReturnPolicy = ReturnPolicy.EXPLICIT,
        duplicate_members: DuplicatePolicy = DuplicatePolicy.ALLOW,
    ):
        self.registry = registry
        self.return_policy = ReturnPolicy(return_policy)
        self.duplicate_members = DuplicatePolicy(duplicate_members)
        self._members: dict[str, Member] = {}

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def register_member(self, name: str) -> Outcome:
        """
        Register a member by name.

        Under the allow policy a known name returns the existing member, so
        registering twice is harmless. Under the reject policy it reports
        DUPLICATE_MEMBER.
        """
        member = Member(name=name)
        existing = self._members.get(member.name)
        if existing is not None:
            if self.duplicate_members == DuplicatePolicy.REJECT:
                logger.info("Registration refused - member '%s' already exists", member.name)
                return Outcome.failure(
                    OutcomeStatus.DUPLICATE_MEMBER,
                    f"Member '{member.name}' is already registered",
                    member=existing,
                )
            return Outcome.success(f"Welcome back, {existing.name}", member=existing)

        self._members[member.name] = member
        logger.info("Registered member '%s'", member.name)
        return Outcome.success(f"Registered member: {member.name}", member=member)

    def get_member(self, name: str) -> Member | None:
        return self._members.get(name.strip())

    def members(self) -> list[Member]:
        return list(self._members.values())

    def holdings(self, name: str) -> list[ItemBase]:
        """Items the member currently holds, oldest borrow first."""
        member = self.get_member(name)
        if member is None:
            return []
        items = (self.registry.get(identifier) for identifier in member.held_items)
        return [item for item in items if item is not None]

    def holder_of(self, item: ItemBase | ItemId) -> str | None:
        """Name of the member holding the item, or None if it is on the shelf."""
        resolved = self._resolve_item(item)
        if resolved is None:
            return None
        for member in self._members.values():
            if member.holds(resolved.identifier):
                return member.name
        return None

    # ------------------------------------------------------------------
    # Borrow / return
    # ------------------------------------------------------------------

    def _resolve_item(self, item: ItemBase | ItemId) -> ItemBase | None:
        """Look an item up in the registry; foreign item objects resolve to None."""
        if isinstance(item, ItemBase):
            if item.identifier is None:
                return None
            stored = self.registry.get(item.identifier)
            return stored if stored is item else None
        return self.registry.get(item)

    def _lookup(self, name: str, item: ItemBase | ItemId) -> tuple[Member | None, ItemBase | None, Outcome | None]:
        member = self.get_member(name)
        if member is None:
            return None, None, Outcome.failure(
                OutcomeStatus.MEMBER_NOT_FOUND, f"No member named '{name}'"
            )
        resolved = self._resolve_item(item)
        if resolved is None:
            label = item.title if isinstance(item, ItemBase) else repr(item)
            return member, None, Outcome.failure(
                OutcomeStatus.ITEM_NOT_FOUND,
                f"{label} is not in the catalog",
                member=member,
            )
        return member, resolved, None

    def borrow(self, name: str, item: ItemBase | ItemId) -> Outcome:
        """
        Lend an item to a member.

        Args:
            name: Member name
            item: The item, or its registry identifier

        Returns:
            OK on success; MEMBER_NOT_FOUND, ITEM_NOT_FOUND or
            ITEM_ALREADY_BORROWED otherwise, with no state changed
        """
        member, resolved, failure = self._lookup(name, item)
        if failure is not None:
            logger.info("Borrow failed - %s", failure.message)
            return failure

        if not resolved.check_out():
            logger.info("Borrow failed - '%s' is already borrowed", resolved.title)
            return Outcome.failure(
                OutcomeStatus.ITEM_ALREADY_BORROWED,
                f"'{resolved.title}' is not available",
                item=resolved,
                member=member,
            )

        member.add_holding(resolved.identifier)
        logger.info("'%s' borrowed by %s", resolved.title, member.name)
        return Outcome.success(
            f"{member.name} borrowed: {resolved.title}", item=resolved, member=member
        )

    def return_item(self, name: str, item: ItemBase | ItemId) -> Outcome:
        """
        Take back a named item from a member (explicit return policy).

        Returns:
            OK on success; MEMBER_NOT_FOUND, ITEM_NOT_FOUND or
            ITEM_NOT_HELD_BY_MEMBER otherwise, with no state changed

        Raises:
            LendingPolicyError: If the ledger uses oldest-first returns
        """
        if self.return_policy != ReturnPolicy.EXPLICIT:
            raise LendingPolicyError(
                "return_item requires the explicit return policy; use return_oldest"
            )

        member, resolved, failure = self._lookup(name, item)
        if failure is not None:
            logger.info("Return failed - %s", failure.message)
            return failure

        if not member.remove_holding(resolved.identifier):
            logger.info("Return failed - %s does not hold '%s'", member.name, resolved.title)
            return Outcome.failure(
                OutcomeStatus.ITEM_NOT_HELD_BY_MEMBER,
                f"{member.name} does not hold '{resolved.title}'",
                item=resolved,
                member=member,
            )

        resolved.check_in()
        logger.info("'%s' returned by %s", resolved.title, member.name)
        return Outcome.success(
            f"{member.name} returned: {resolved.title}", item=resolved, member=member
        )

    def return_oldest(self, name: str) -> Outcome:
        """
        Take back the member's earliest borrowed item (oldest-first policy).

        Returns:
            OK with the returned item; MEMBER_NOT_FOUND or NO_ITEMS_HELD
            otherwise

        Raises:
            LendingPolicyError: If the ledger uses explicit returns
        """
        if self.return_policy != ReturnPolicy.OLDEST_FIRST:
            raise LendingPolicyError(
                "return_oldest requires the oldest_first return policy; use return_item"
            )

        member = self.get_member(name)
        if member is None:
            logger.info("Return failed - no member named '%s'", name)
            return Outcome.failure(OutcomeStatus.MEMBER_NOT_FOUND, f"No member named '{name}'")

        identifier = member.pop_oldest()
        if identifier is None:
            logger.info("Return failed - %s holds nothing", member.name)
            return Outcome.failure(
                OutcomeStatus.NO_ITEMS_HELD,
                f"{member.name} has nothing to return",
                member=member,
            )

        item = self.registry.get(identifier)
        item.check_in()
        logger.info("'%s' returned by %s", item.title, member.name)
        return Outcome.success(f"{member.name} returned: {item.title}", item=item, member=member)

    def give_back(self, name: str, item: ItemBase | ItemId | None = None) -> Outcome:
        """
        Return on behalf of a member using the configured policy.

        With the explicit policy ``item`` is required; with oldest-first it
        must be omitted.
        """
        if self.return_policy == ReturnPolicy.OLDEST_FIRST:
            if item is not None:
                raise LendingPolicyError("Oldest-first returns do not take an item")
            return self.return_oldest(name)
        if item is None:
            raise LendingPolicyError("Explicit returns need the item to return")
        return self.return_item(name, item)
