"""
Tests for the lending ledger.

These tests demonstrate:
1. The borrow/return state machine
2. Refused operations leaving state untouched
3. Both return policies and the guard between them
4. Member registration policies
"""

import pytest
from conftest import assert_lending_invariant

from library_lending.config import DuplicatePolicy, ReturnPolicy
from library_lending.ledger import LendingLedger, LendingPolicyError
from library_lending.models import Book, OutcomeStatus
from library_lending.registry import ItemRegistry


class TestMembers:
    """Member registration and lookup."""

    def test_register_member(self, ledger):
        outcome = ledger.register_member("Carol")

        assert outcome.ok
        assert outcome.member.name == "Carol"
        assert ledger.get_member("Carol") is not None
        assert [m.name for m in ledger.members()] == ["Alice", "Bob", "Carol"]

    def test_allow_policy_reuses_existing_member(self, ledger):
        ledger.borrow("Alice", 1)

        outcome = ledger.register_member("Alice")

        assert outcome.ok
        assert outcome.member.held_items == [1]
        assert len(ledger.members()) == 2

    def test_reject_policy_reports_duplicate(self, registry):
        ledger = LendingLedger(registry, duplicate_members=DuplicatePolicy.REJECT)
        ledger.register_member("Alice")

        outcome = ledger.register_member("Alice")

        assert outcome.status == OutcomeStatus.DUPLICATE_MEMBER
        assert len(ledger.members()) == 1

    def test_unknown_member_lookups(self, ledger):
        assert ledger.get_member("Zed") is None
        assert ledger.holdings("Zed") == []


class TestBorrow:
    """Borrowing items."""

    def test_borrow_by_item(self, ledger, registry):
        item = registry.get(1)

        outcome = ledger.borrow("Alice", item)

        assert outcome.ok
        assert item.is_available is False
        assert ledger.get_member("Alice").held_items == [1]
        assert ledger.holder_of(item) == "Alice"
        assert_lending_invariant(ledger)

    def test_borrow_by_identifier(self, ledger, registry):
        outcome = ledger.borrow("Bob", 3)

        assert outcome.ok
        assert outcome.item.title == "Dune"
        assert registry.get(3).is_available is False

    def test_already_borrowed(self, ledger, registry):
        ledger.borrow("Alice", 1)

        outcome = ledger.borrow("Bob", 1)

        assert outcome.status == OutcomeStatus.ITEM_ALREADY_BORROWED
        assert ledger.get_member("Bob").held_items == []
        assert ledger.get_member("Alice").held_items == [1]
        assert registry.get(1).is_available is False
        assert_lending_invariant(ledger)

    def test_same_member_cannot_borrow_twice(self, ledger):
        ledger.borrow("Alice", 1)

        outcome = ledger.borrow("Alice", 1)

        assert outcome.status == OutcomeStatus.ITEM_ALREADY_BORROWED
        assert ledger.get_member("Alice").held_items == [1]

    def test_unknown_member(self, ledger, registry):
        outcome = ledger.borrow("Zed", 1)

        assert outcome.status == OutcomeStatus.MEMBER_NOT_FOUND
        assert registry.get(1).is_available is True

    def test_unknown_item(self, ledger):
        assert ledger.borrow("Alice", 99).status == OutcomeStatus.ITEM_NOT_FOUND

    def test_item_not_in_registry(self, ledger):
        stray = Book(title="1984", creator="George Orwell")

        outcome = ledger.borrow("Alice", stray)

        assert outcome.status == OutcomeStatus.ITEM_NOT_FOUND
        assert stray.is_available is True
        assert ledger.get_member("Alice").held_items == []


class TestExplicitReturn:
    """Returning a named item."""

    def test_round_trip_restores_state(self, ledger, registry):
        item = registry.get(2)

        ledger.borrow("Alice", item)
        outcome = ledger.return_item("Alice", item)

        assert outcome.ok
        assert item.is_available is True
        assert ledger.get_member("Alice").held_items == []
        assert ledger.holder_of(item) is None
        assert_lending_invariant(ledger)

    def test_return_from_middle_of_holdings(self, ledger):
        for identifier in (1, 2, 3):
            ledger.borrow("Alice", identifier)

        outcome = ledger.return_item("Alice", 2)

        assert outcome.ok
        assert ledger.get_member("Alice").held_items == [1, 3]
        assert [item.identifier for item in ledger.holdings("Alice")] == [1, 3]
        assert_lending_invariant(ledger)

    def test_not_held_by_member(self, ledger, registry):
        ledger.borrow("Alice", 1)

        outcome = ledger.return_item("Bob", 1)

        assert outcome.status == OutcomeStatus.ITEM_NOT_HELD_BY_MEMBER
        assert registry.get(1).is_available is False
        assert ledger.get_member("Alice").held_items == [1]
        assert_lending_invariant(ledger)

    def test_return_shelved_item(self, ledger, registry):
        outcome = ledger.return_item("Alice", 4)

        assert outcome.status == OutcomeStatus.ITEM_NOT_HELD_BY_MEMBER
        assert registry.get(4).is_available is True

    def test_unknown_member_and_item(self, ledger):
        assert ledger.return_item("Zed", 1).status == OutcomeStatus.MEMBER_NOT_FOUND
        assert ledger.return_item("Alice", 99).status == OutcomeStatus.ITEM_NOT_FOUND

    def test_return_oldest_is_a_policy_error(self, ledger):
        with pytest.raises(LendingPolicyError):
            ledger.return_oldest("Alice")

    def test_give_back_requires_item(self, ledger):
        ledger.borrow("Alice", 1)

        with pytest.raises(LendingPolicyError):
            ledger.give_back("Alice")

        assert ledger.give_back("Alice", 1).ok


class TestOldestFirstReturn:
    """Returning in borrow order."""

    def test_fifo_order(self, fifo_ledger):
        for identifier in (1, 2, 3):
            assert fifo_ledger.borrow("Alice", identifier).ok

        returned = [fifo_ledger.return_oldest("Alice").item.identifier for _ in range(3)]

        assert returned == [1, 2, 3]
        assert fifo_ledger.return_oldest("Alice").status == OutcomeStatus.NO_ITEMS_HELD
        assert_lending_invariant(fifo_ledger)

    def test_returned_item_is_available_again(self, fifo_ledger, registry):
        fifo_ledger.borrow("Alice", 2)

        outcome = fifo_ledger.give_back("Alice")

        assert outcome.ok
        assert registry.get(2).is_available is True

    def test_nothing_to_return(self, fifo_ledger):
        outcome = fifo_ledger.return_oldest("Alice")

        assert outcome.status == OutcomeStatus.NO_ITEMS_HELD
        assert not outcome

    def test_unknown_member(self, fifo_ledger):
        assert fifo_ledger.return_oldest("Zed").status == OutcomeStatus.MEMBER_NOT_FOUND

    def test_explicit_return_is_a_policy_error(self, fifo_ledger):
        fifo_ledger.borrow("Alice", 1)

        with pytest.raises(LendingPolicyError):
            fifo_ledger.return_item("Alice", 1)
        with pytest.raises(LendingPolicyError):
            fifo_ledger.give_back("Alice", 1)


class TestLendingScenario:
    """The Alice and Bob walkthrough end to end."""

    def test_alice_and_bob(self):
        registry = ItemRegistry()
        registry.add(Book(title="1984", creator="George Orwell"), 1)
        ledger = LendingLedger(registry, return_policy=ReturnPolicy.EXPLICIT)
        ledger.register_member("Alice")
        ledger.register_member("Bob")
        item1 = registry.find_by_title("1984")

        assert ledger.borrow("Alice", item1).ok
        assert item1.is_available is False
        assert ledger.holdings("Alice") == [item1]

        refused = ledger.borrow("Bob", item1)
        assert refused.status == OutcomeStatus.ITEM_ALREADY_BORROWED
        assert item1.is_available is False
        assert ledger.holdings("Bob") == []

        assert ledger.return_item("Alice", item1).ok
        assert item1.is_available is True
        assert ledger.holdings("Alice") == []
        assert_lending_invariant(ledger)
