"""Contact picker model: rows, the "send to" row, sorting and filtering."""

from __future__ import annotations

import functools
import locale
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from ..utils.phone import digits_only, number_type_icon
from .models import UNKNOWN_CONTACT, UNKNOWN_NUMBER, Contact, Recipient
from .recipients import ChangeKind, RecipientChange, RecipientRegistry

# Digits required before a typed number is offered as a recipient
COMPOSE_MIN_DIGITS = 3


def compose_label(text: str) -> str:
    """Get the placeholder name shown for a typed-in number."""
    return f"Send to {text}"


class ComposeState(str, Enum):
    ABSENT = "absent"
    PRESENT = "present"


class ComposeChange(str, Enum):
    """What happened to the compose row after an update."""
    NONE = "none"
    CREATED = "created"
    UPDATED = "updated"
    DESTROYED = "destroyed"
    CONVERTED = "converted"


@dataclass(eq=False)
class ContactRow:
    """A contact shown in the picker, with its selection state."""
    contact: Contact
    active: bool = False
    dynamic: bool = False

    @property
    def key(self) -> str:
        return self.contact.key

    @property
    def name(self) -> str:
        if self.dynamic:
            return compose_label(self.contact.number)
        return self.contact.name or UNKNOWN_CONTACT

    @property
    def number(self) -> str:
        return self.contact.number or UNKNOWN_NUMBER

    @property
    def icon_name(self) -> str:
        return number_type_icon(self.contact.type)


def compare_rows(row1: ContactRow, row2: ContactRow) -> int:
    """
    Order rows for display.

    The compose row always comes first, then rows selected as recipients,
    then everything else by name. Names are compared with `locale.strcoll`,
    which only follows the user's collation once the application has called
    `locale.setlocale(locale.LC_COLLATE, "")`; otherwise it is byte order.
    """
    if row1.dynamic:
        return -1
    if row2.dynamic:
        return 1
    if row1.active and not row2.active:
        return -1
    if not row1.active and row2.active:
        return 1
    return locale.strcoll(row1.name, row2.name)


def row_matches(row: ContactRow, text: str) -> bool:
    """Check if a row should be visible for the current entry text."""
    if row.dynamic:
        return True
    if text.lower() in row.name.lower():
        return True
    filter_digits = digits_only(text)
    return bool(filter_digits) and filter_digits in digits_only(row.contact.number)


class ContactList:
    """The list of contacts a user picks recipients from.

    Typing more than two digits adds a temporary row offering to send to
    that number. Selecting it turns it into a real recipient.
    """

    def __init__(self, contacts: Iterable[Contact], registry: RecipientRegistry) -> None:
        self.registry = registry
        self.rows: list[ContactRow] = [ContactRow(contact) for contact in contacts]
        self.text = ""
        self._compose: ContactRow | None = None

        for row in self.rows:
            row.active = row.key in registry

        registry.connect(self._on_recipients_changed)

    @property
    def compose_row(self) -> ContactRow | None:
        return self._compose

    @property
    def state(self) -> ComposeState:
        return ComposeState.PRESENT if self._compose else ComposeState.ABSENT

    @property
    def recipients(self) -> list[str]:
        """Get the numbers of the selected rows."""
        return [row.contact.number for row in self.rows if row.active]

    def add(self, contact: Contact, active: bool = False) -> ContactRow:
        row = ContactRow(contact, active=active)
        self.rows.append(row)
        return row

    def find(self, key: str, name: str | None = None) -> ContactRow | None:
        """Find the address book row for a normalized number (and name)."""
        for row in self.rows:
            if row.dynamic or row.key != key:
                continue
            if name is None or row.contact.name == name:
                return row
        return None

    def _represented(self, digits: str) -> bool:
        return self.find(digits) is not None

    def set_text(self, text: str) -> ComposeChange:
        """Update the entry text, creating or removing the compose row."""
        self.text = text
        digits = digits_only(text)

        if len(digits) >= COMPOSE_MIN_DIGITS and not self._represented(digits):
            if self._compose is not None:
                self._compose.contact = self._compose.contact.model_copy(update={"number": text})
                return ComposeChange.UPDATED
            self._compose = ContactRow(Contact(number=text), dynamic=True)
            self.rows.append(self._compose)
            return ComposeChange.CREATED

        if self._compose is not None:
            self.rows.remove(self._compose)
            self._compose = None
            return ComposeChange.DESTROYED

        return ComposeChange.NONE

    def toggle(self, row: ContactRow, active: bool) -> Recipient | None:
        """
        Select or deselect a row, updating the recipients.

        Selecting the compose row converts it into an ordinary row. The entry
        text is cleared either way.

        Raises:
            InvalidNumberError: if a selected contact's number has no digits.
        """
        recipient = None

        if active:
            if row.dynamic:
                # Keep the row, it now stands for the new recipient
                row.dynamic = False
                self._compose = None
            recipient = self.registry.add(row.contact)
            row.active = True
        else:
            row.active = False
            self.registry.remove(row.contact.number)
            if row.dynamic:
                self.rows.remove(row)
                self._compose = None

        self.set_text("")
        return recipient

    def _on_recipients_changed(self, change: RecipientChange) -> None:
        if change.kind == ChangeKind.REMOVED:
            for row in self.rows:
                if row.key == change.key:
                    row.active = False
            return

        if change.kind == ChangeKind.ADDED:
            row = self.find(change.key, change.recipient.name) or self.find(change.key)
            if row is None:
                self.add(Contact(
                    name=change.recipient.name,
                    number=change.recipient.number,
                    type=change.recipient.type,
                    avatarPath=change.recipient.avatar_path,
                    color=change.recipient.color,
                ), active=True)
            else:
                row.active = True

    def sorted_rows(self) -> list[ContactRow]:
        return sorted(self.rows, key=functools.cmp_to_key(compare_rows))

    def visible_rows(self) -> list[ContactRow]:
        """Get the rows matching the entry text, in display order."""
        return [row for row in self.sorted_rows() if row_matches(row, self.text)]
