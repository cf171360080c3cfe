"""
Item registry for the library lending core.

The registry owns every lendable item, keyed by identifier. It is the only
place items are added or removed, and the lending ledger looks items up
through it.

Identifiers are either supplied by the caller or assigned as ``count + 1``.
What happens when a caller reuses an identifier is a configured policy:
``DuplicatePolicy.ALLOW`` overwrites the entry, ``DuplicatePolicy.REJECT``
reports ``DUPLICATE_IDENTIFIER``. Either way an item that is currently lent
out is never replaced or removed.
"""

import logging
from collections.abc import Iterator

from .config import DuplicatePolicy
from .models import ITEM_KINDS, ItemBase, ItemId, Outcome, OutcomeStatus

logger = logging.getLogger(__name__)

ITEM_VARIANTS = tuple(ITEM_KINDS.values())
ITEM_KINDS_LABEL = ", ".join(cls.__name__ for cls in ITEM_VARIANTS)


class ItemRegistry:
    """
    Insertion-ordered mapping of identifier to item.

    Lookups return None rather than raising; mutations return an Outcome.
    """

    def __init__(self, duplicate_policy: DuplicatePolicy = DuplicatePolicy.ALLOW):
        self.duplicate_policy = DuplicatePolicy(duplicate_policy)
        self._items: dict[ItemId, ItemBase] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._items

    def __iter__(self) -> Iterator[ItemBase]:
        return iter(list(self._items.values()))

    def _next_identifier(self) -> int:
        candidate = len(self._items) + 1
        while candidate in self._items:
            candidate += 1
        return candidate

    def add(self, item: ItemBase, identifier: ItemId | None = None) -> Outcome:
        """
        Add an item to the catalog.

        Args:
            item: The item to register
            identifier: Registry key; ``count + 1`` when omitted

        Returns:
            OK with the item (its identifier set), DUPLICATE_IDENTIFIER when
            the key is taken under the reject policy or the item is already
            registered under another key, or ITEM_ALREADY_BORROWED when a
            lent-out item would be replaced or re-keyed

        Raises:
            TypeError: If ``item`` is not one of the item variants
        """
        if not isinstance(item, ITEM_VARIANTS):
            raise TypeError(
                f"Cannot register {type(item).__name__}; expected one of {ITEM_KINDS_LABEL}"
            )

        current = item.identifier
        if current is not None and self._items.get(current) is item:
            if identifier == current:
                return Outcome.success(f"'{item.title}' is already registered as {current!r}", item=item)
            if not item.is_available:
                logger.info("Add refused - '%s' is lent out under %r", item.title, current)
                return Outcome.failure(
                    OutcomeStatus.ITEM_ALREADY_BORROWED,
                    f"Cannot re-register '{item.title}' while it is borrowed",
                    item=item,
                )
            logger.info("Add refused - '%s' is already registered as %r", item.title, current)
            return Outcome.failure(
                OutcomeStatus.DUPLICATE_IDENTIFIER,
                f"'{item.title}' is already registered as {current!r}",
                item=item,
            )

        if identifier is None:
            identifier = self._next_identifier()

        existing = self._items.get(identifier)
        if existing is not None and existing is not item:
            if self.duplicate_policy == DuplicatePolicy.REJECT:
                logger.info("Add refused - identifier %r already in use", identifier)
                return Outcome.failure(
                    OutcomeStatus.DUPLICATE_IDENTIFIER,
                    f"An item with identifier {identifier!r} already exists: '{existing.title}'",
                    item=existing,
                )
            if not existing.is_available:
                logger.info("Add refused - identifier %r is lent out", identifier)
                return Outcome.failure(
                    OutcomeStatus.ITEM_ALREADY_BORROWED,
                    f"Cannot replace '{existing.title}' while it is borrowed",
                    item=existing,
                )
            logger.warning(
                "Overwriting item %r: '%s' replaced by '%s'", identifier, existing.title, item.title
            )

        item.identifier = identifier
        self._items[identifier] = item
        logger.debug("Added %s %r: '%s'", type(item).__name__, identifier, item.title)
        return Outcome.success(f"Added '{item.title}' as {identifier!r}", item=item)

    def remove(self, identifier: ItemId) -> Outcome:
        """Delete an item from the catalog unless it is lent out."""
        item = self._items.get(identifier)
        if item is None:
            return Outcome.failure(
                OutcomeStatus.ITEM_NOT_FOUND, f"No item with identifier {identifier!r}"
            )
        if not item.is_available:
            logger.info("Remove refused - item %r is lent out", identifier)
            return Outcome.failure(
                OutcomeStatus.ITEM_ALREADY_BORROWED,
                f"Cannot remove '{item.title}' while it is borrowed",
                item=item,
            )
        del self._items[identifier]
        logger.info("Removed item %r: '%s'", identifier, item.title)
        return Outcome.success(f"Removed '{item.title}'", item=item)

    def get(self, identifier: ItemId) -> ItemBase | None:
        """Return the item stored under ``identifier``, or None."""
        return self._items.get(identifier)

    def find_by_title(self, title: str) -> ItemBase | None:
        """
        Find the first item whose title matches, ignoring case.

        Matching follows insertion order, so the earliest added item wins
        when several share a title.
        """
        for item in self._items.values():
            if item.matches_title(title):
                return item
        return None

    def list_all(self) -> Iterator[tuple[ItemId, ItemBase]]:
        """Yield (identifier, item) pairs in insertion order."""
        yield from list(self._items.items())

    def available(self) -> list[ItemBase]:
        """Items not currently lent out."""
        return [item for item in self._items.values() if item.is_available]
