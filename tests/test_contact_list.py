"""Tests for the contact picker and its compose row."""

from __future__ import annotations

import pytest

from sms_conversation.conversation.contact_list import (
    ComposeChange,
    ComposeState,
    ContactList,
    ContactRow,
    compare_rows,
    row_matches,
)
from sms_conversation.conversation.models import Contact
from sms_conversation.conversation.recipients import InvalidNumberError, RecipientRegistry


@pytest.fixture
def registry() -> RecipientRegistry:
    return RecipientRegistry()


@pytest.fixture
def contact_list(registry: RecipientRegistry) -> ContactList:
    contacts = [
        Contact(name="Alice", number="(555) 123-4567", type="cell"),
        Contact(name="Bob", number="555-987-6543", type="home"),
        Contact(name="Carol", number="+44 20 7946 0000"),
    ]
    return ContactList(contacts, registry)


class TestComposeRow:
    """Test the lifecycle of the typed-number row."""

    def test_appears_at_three_digits(self, contact_list: ContactList) -> None:
        """The row appears when the text goes from 2 to 3 digits."""
        assert contact_list.set_text("12") == ComposeChange.NONE
        assert contact_list.state == ComposeState.ABSENT

        assert contact_list.set_text("123") == ComposeChange.CREATED
        assert contact_list.state == ComposeState.PRESENT
        assert contact_list.compose_row is not None
        assert contact_list.compose_row.contact.number == "123"

    def test_disappears_below_three_digits(self, contact_list: ContactList) -> None:
        contact_list.set_text("123")
        assert contact_list.set_text("12") == ComposeChange.DESTROYED
        assert contact_list.compose_row is None
        assert all(not row.dynamic for row in contact_list.rows)

    def test_updates_in_place(self, contact_list: ContactList) -> None:
        """Further typing edits the same row."""
        contact_list.set_text("123")
        row = contact_list.compose_row

        assert contact_list.set_text("123-4") == ComposeChange.UPDATED
        assert contact_list.compose_row is row
        assert row is not None
        assert row.contact.number == "123-4"
        assert row.name == "Send to 123-4"
        assert sum(1 for r in contact_list.rows if r.dynamic) == 1

    def test_non_digits_do_not_count(self, contact_list: ContactList) -> None:
        assert contact_list.set_text("a1b2-") == ComposeChange.NONE
        assert contact_list.state == ComposeState.ABSENT

    def test_existing_contact_suppresses_row(self, contact_list: ContactList) -> None:
        """No row is offered for a number already in the address book."""
        assert contact_list.set_text("555.987.6543") == ComposeChange.NONE
        assert contact_list.compose_row is None

    def test_existing_contact_removes_row(self, contact_list: ContactList) -> None:
        contact_list.set_text("555987654")
        assert contact_list.set_text("5559876543") == ComposeChange.DESTROYED

    def test_selecting_converts_to_recipient(
        self, contact_list: ContactList, registry: RecipientRegistry
    ) -> None:
        """Selecting the row adds a recipient and clears the entry."""
        contact_list.set_text("555 000 1234")
        row = contact_list.compose_row
        assert row is not None

        recipient = contact_list.toggle(row, True)

        assert recipient is not None
        assert "5550001234" in registry
        assert contact_list.compose_row is None
        assert contact_list.text == ""
        assert not row.dynamic
        assert row.active
        assert row.name == "Unknown Contact"
        assert row in contact_list.rows

    def test_converted_row_is_not_duplicated(
        self, contact_list: ContactList, registry: RecipientRegistry
    ) -> None:
        contact_list.set_text("5550001234")
        row = contact_list.compose_row
        assert row is not None
        contact_list.toggle(row, True)

        assert sum(1 for r in contact_list.rows if r.key == "5550001234") == 1


class TestSelection:
    """Test toggling address book rows."""

    def test_toggle_on_and_off(self, contact_list: ContactList, registry: RecipientRegistry) -> None:
        row = contact_list.find("5559876543")
        assert row is not None

        contact_list.toggle(row, True)
        assert row.active
        assert contact_list.recipients == ["555-987-6543"]
        assert registry.get("5559876543") is not None

        contact_list.toggle(row, False)
        assert not row.active
        assert len(registry) == 0

    def test_registry_changes_update_rows(
        self, contact_list: ContactList, registry: RecipientRegistry
    ) -> None:
        """Rows follow recipients added or removed elsewhere."""
        registry.add(Contact(name="Alice", number="5551234567"))
        row = contact_list.find("5551234567")
        assert row is not None and row.active

        registry.remove("5551234567")
        assert not row.active

    def test_unknown_recipient_gets_row(
        self, contact_list: ContactList, registry: RecipientRegistry
    ) -> None:
        registry.add(Contact(name="Dave", number="5550009999"))
        row = contact_list.find("5550009999")
        assert row is not None
        assert row.active
        assert row.name == "Dave"

    def test_invalid_number_not_selected(self, registry: RecipientRegistry) -> None:
        contact_list = ContactList([Contact(name="Nobody", number="none")], registry)
        with pytest.raises(InvalidNumberError):
            contact_list.toggle(contact_list.rows[0], True)
        assert not contact_list.rows[0].active


class TestSortAndFilter:
    """Test row ordering and visibility."""

    def test_sort_order(self, contact_list: ContactList) -> None:
        """Compose row, then selected, then the rest by name."""
        bob = contact_list.find("5559876543")
        assert bob is not None
        contact_list.toggle(bob, True)
        contact_list.set_text("777")

        names = [row.name for row in contact_list.sorted_rows()]
        assert names == ["Send to 777", "Bob", "Alice", "Carol"]

    def test_compare_rows_dynamic_first(self) -> None:
        compose = ContactRow(Contact(number="123"), dynamic=True)
        selected = ContactRow(Contact(name="Bob", number="1"), active=True)
        other = ContactRow(Contact(name="Alice", number="2"))

        assert compare_rows(compose, selected) < 0
        assert compare_rows(selected, compose) > 0
        assert compare_rows(selected, other) < 0
        assert compare_rows(other, selected) > 0
        assert compare_rows(other, ContactRow(Contact(name="Zed", number="3"))) < 0

    def test_filter_by_digits(self) -> None:
        """Digits match a formatted number even if the name doesn't."""
        row = ContactRow(Contact(name="Alice", number="(555) 123-4567"))
        assert row_matches(row, "555")
        assert row_matches(row, "123-45")
        assert not row_matches(row, "999")

    def test_filter_by_name(self) -> None:
        row = ContactRow(Contact(name="Alice", number="5551234567"))
        assert row_matches(row, "Ali")
        assert row_matches(row, "lic")
        assert not row_matches(row, "Bob")

    def test_filter_by_name_ignores_case(self) -> None:
        """Name matching is case-insensitive in both directions."""
        row = ContactRow(Contact(name="Alice", number="5551234567"))
        assert row_matches(row, "ali")
        assert row_matches(row, "ALICE")
        assert not row_matches(row, "alicia")

    def test_empty_filter_shows_all(self, contact_list: ContactList) -> None:
        assert len(contact_list.visible_rows()) == len(contact_list.rows)

    def test_compose_row_always_visible(self, contact_list: ContactList) -> None:
        contact_list.set_text("999")
        visible = contact_list.visible_rows()
        assert [row.dynamic for row in visible] == [True]

    def test_icon_name(self) -> None:
        assert ContactRow(Contact(number="1", type="cell")).icon_name == "phone-number-mobile"
        assert ContactRow(Contact(number="1")).icon_name == "phone-number-default"
